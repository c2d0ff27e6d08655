"""
Public Services

Read-side helpers for the public pages and the JSON API.
"""

from datetime import datetime

from flask import current_app

from portal.models import Activity
from portal.models.base import utcnow
from portal.services import list_records

# Columns exposed through the JSON API, per entity
API_FIELDS = {
    'news_items': ('id', 'title', 'body', 'image_url', 'published_at', 'created_at', 'updated_at'),
    'staff_members': ('id', 'full_name', 'position', 'department', 'email', 'phone', 'image_url',
                      'bio', 'created_at', 'updated_at'),
    'activities': ('id', 'title', 'description', 'scheduled_at', 'location', 'image_url',
                   'created_at', 'updated_at'),
}


def serialize_record(entity, record):
    data = {}
    for name in API_FIELDS[entity]:
        value = getattr(record, name)
        if isinstance(value, datetime):
            value = value.isoformat()
        data[name] = value
    return data


def get_homepage_content(caller):
    """Latest news plus the next upcoming activities."""
    news = list_records(caller, 'news_items', limit=current_app.config['HOME_NEWS_LIMIT'])
    upcoming = list_records(caller, 'activities',
                            order_by=Activity.scheduled_at.asc(),
                            limit=current_app.config['HOME_ACTIVITY_LIMIT'],
                            criteria=(Activity.scheduled_at >= utcnow(),))
    return news, upcoming
