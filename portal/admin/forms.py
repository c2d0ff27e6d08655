"""
Panel definitions and form-to-record mapping for the admin panel.
"""

from collections import OrderedDict

FORM_DATETIME_FORMAT = '%Y-%m-%dT%H:%M'


class Field:
    def __init__(self, name, label, input_type='text', required=False):
        self.name = name
        self.label = label
        self.input_type = input_type
        self.required = required


class Panel:
    def __init__(self, key, entity, title, singular, fields, heading_field, detail_field):
        self.key = key
        self.entity = entity
        self.title = title
        self.singular = singular
        self.fields = fields
        self.heading_field = heading_field
        self.detail_field = detail_field


PANELS = OrderedDict([
    ('news', Panel(
        'news', 'news_items', 'News', 'News item',
        fields=[
            Field('title', 'Title', required=True),
            Field('body', 'Content', 'textarea', required=True),
            Field('image_url', 'Image URL', 'url'),
            Field('published_at', 'Published', 'datetime-local'),
        ],
        heading_field='title', detail_field='body',
    )),
    ('staff', Panel(
        'staff', 'staff_members', 'Staff', 'Staff member',
        fields=[
            Field('full_name', 'Full name', required=True),
            Field('position', 'Position', required=True),
            Field('department', 'Department'),
            Field('email', 'Email', 'email'),
            Field('phone', 'Phone', 'tel'),
            Field('image_url', 'Image URL', 'url'),
            Field('bio', 'Biography', 'textarea'),
        ],
        heading_field='full_name', detail_field='position',
    )),
    ('activities', Panel(
        'activities', 'activities', 'Activities', 'Activity',
        fields=[
            Field('title', 'Title', required=True),
            Field('description', 'Description', 'textarea', required=True),
            Field('scheduled_at', 'Date and time', 'datetime-local', required=True),
            Field('location', 'Location'),
            Field('image_url', 'Image URL', 'url'),
        ],
        heading_field='title', detail_field='description',
    )),
])


def empty_form(panel):
    return {field.name: '' for field in panel.fields}


def form_values(panel, form):
    """Pick the panel's fields out of a submitted form."""
    return {field.name: form.get(field.name, '') for field in panel.fields if field.name in form}


def record_form_data(panel, record):
    """Values used to pre-populate the shared form when editing."""
    data = {}
    for field in panel.fields:
        value = getattr(record, field.name)
        if value is None:
            value = ''
        elif field.input_type == 'datetime-local':
            value = value.strftime(FORM_DATETIME_FORMAT)
        data[field.name] = value
    return data
