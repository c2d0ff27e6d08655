"""
Record Service

Generic list/get/create/update/delete over the portal tables. Every call
takes an explicit CallerContext and passes through the policy evaluator
before the session is touched.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, OperationalError

from portal.errors import AccessDenied, DuplicateRecord, StoreUnavailable, ValidationFailed
from portal.extensions import db
from portal.models import Activity, AppRole, NewsItem, Profile, RoleAssignment, StaffMember
from portal.security import Operation, authorize, enforce

logger = logging.getLogger(__name__)


class RecordType:
    """Describes how one table is written through the record service."""

    def __init__(self, model, fields, required=(), order_by=None, creator_field=None,
                 datetime_fields=(), email_fields=(), url_fields=()):
        self.model = model
        self.fields = tuple(fields)
        self.required = tuple(required)
        self.order_by = order_by
        self.creator_field = creator_field
        self.datetime_fields = tuple(datetime_fields)
        self.email_fields = tuple(email_fields)
        self.url_fields = tuple(url_fields)

    @property
    def entity(self):
        return self.model.__tablename__

    def clean(self, values, partial=False):
        """Validate and normalise incoming values; raise ValidationFailed."""
        unknown = set(values) - set(self.fields)
        if unknown:
            raise ValidationFailed(f'Unknown field: {", ".join(sorted(unknown))}')

        data = {}
        for name, value in values.items():
            if isinstance(value, str):
                value = value.strip()
                if value == '':
                    value = None
            if value is not None:
                if name in self.datetime_fields:
                    value = _parse_datetime(name, value)
                elif name in self.email_fields:
                    _check_email(name, value)
                elif name in self.url_fields:
                    _check_url(name, value)
            data[name] = value

        for name in self.required:
            present = name in data
            if (not partial and not present) or (present and data[name] is None):
                raise ValidationFailed(f'{_label(name)} is required.')
        return data


def _label(name):
    return name.replace('_', ' ').capitalize()


def _parse_datetime(name, value):
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError:
            raise ValidationFailed(f'{_label(name)} must be a valid date and time.')
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _check_email(name, value):
    if '@' not in value or ' ' in value or value.startswith('@') or value.endswith('@'):
        raise ValidationFailed(f'{_label(name)} must be a valid email address.')


def _check_url(name, value):
    if not value.startswith(('http://', 'https://', '/')):
        raise ValidationFailed(f'{_label(name)} must be a valid URL.')


def _check_role(value):
    try:
        return AppRole(value)
    except ValueError:
        raise ValidationFailed('Role must be admin or user.')


RECORD_TYPES = {
    'profiles': RecordType(
        Profile,
        fields=('id', 'email', 'full_name', 'avatar_url', 'updated_at'),
        required=('id', 'email'),
        order_by=lambda: Profile.email,
        datetime_fields=('updated_at',),
        email_fields=('email',),
        url_fields=('avatar_url',),
    ),
    'role_assignments': RecordType(
        RoleAssignment,
        fields=('profile_id', 'role'),
        required=('profile_id',),
        order_by=lambda: RoleAssignment.created_at,
    ),
    'news_items': RecordType(
        NewsItem,
        fields=('title', 'body', 'image_url', 'published_at', 'created_by', 'updated_at'),
        required=('title', 'body'),
        order_by=lambda: NewsItem.published_at.desc(),
        creator_field='created_by',
        datetime_fields=('published_at', 'updated_at'),
        url_fields=('image_url',),
    ),
    'staff_members': RecordType(
        StaffMember,
        fields=('full_name', 'position', 'department', 'email', 'phone', 'image_url', 'bio',
                'created_by', 'updated_at'),
        required=('full_name', 'position'),
        order_by=lambda: StaffMember.created_at.desc(),
        creator_field='created_by',
        datetime_fields=('updated_at',),
        email_fields=('email',),
        url_fields=('image_url',),
    ),
    'activities': RecordType(
        Activity,
        fields=('title', 'description', 'scheduled_at', 'location', 'image_url', 'created_by',
                'updated_at'),
        required=('title', 'description', 'scheduled_at'),
        order_by=lambda: Activity.scheduled_at.desc(),
        creator_field='created_by',
        datetime_fields=('scheduled_at', 'updated_at'),
        url_fields=('image_url',),
    ),
}


def get_record_type(entity):
    try:
        return RECORD_TYPES[entity]
    except KeyError:
        raise ValidationFailed(f'Unknown record type: {entity}')


def _clean(record_type, values, partial):
    data = record_type.clean(values, partial=partial)
    if record_type.entity == 'role_assignments' and data.get('role') is not None:
        data['role'] = _check_role(data['role'])
    return data


def _row(record):
    return {column.key: getattr(record, column.key) for column in record.__mapper__.column_attrs}


def commit_session():
    """Commit the session, translating database failures into PortalErrors."""
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning('Integrity error on commit: %s', e.orig)
        if 'unique' in str(e.orig).lower():
            raise DuplicateRecord()
        raise ValidationFailed()
    except OperationalError as e:
        db.session.rollback()
        logger.error('Database unavailable on commit: %s', e.orig)
        raise StoreUnavailable()


def list_records(caller, entity, order_by=None, limit=None, criteria=()):
    """Return the rows of entity the caller may see."""
    record_type = get_record_type(entity)
    query = record_type.model.query.filter(*criteria)
    if order_by is None and record_type.order_by is not None:
        order_by = record_type.order_by()
    if order_by is not None:
        query = query.order_by(order_by)
    if limit:
        query = query.limit(limit)
    try:
        rows = query.all()
    except OperationalError as e:
        db.session.rollback()
        logger.error('Database unavailable listing %s: %s', entity, e.orig)
        raise StoreUnavailable()
    return [row for row in rows if authorize(caller, Operation.SELECT, entity, row)]


def get_record(caller, entity, record_id):
    """Return one row, or None when missing or not visible to the caller."""
    record_type = get_record_type(entity)
    try:
        record = db.session.get(record_type.model, record_id)
    except OperationalError as e:
        db.session.rollback()
        logger.error('Database unavailable reading %s: %s', entity, e.orig)
        raise StoreUnavailable()
    if record is None or not authorize(caller, Operation.SELECT, entity, record):
        return None
    return record


def create_record(caller, entity, values):
    record_type = get_record_type(entity)
    # Caller-level policy runs before payload validation.
    enforce(caller, Operation.INSERT, entity, values)
    # Blank optional fields fall back to column defaults.
    data = {name: value for name, value in _clean(record_type, values, partial=False).items()
            if value is not None}
    creator = record_type.creator_field
    if creator and data.get(creator) is None and caller.is_authenticated:
        data[creator] = caller.identity_id

    enforce(caller, Operation.INSERT, entity, data)

    record = record_type.model(**data)
    db.session.add(record)
    commit_session()
    logger.info('Created %s %s', entity, record.id)
    return record


def update_record(caller, entity, record_id, values):
    record_type = get_record_type(entity)
    record = db.session.get(record_type.model, record_id)
    # Missing and forbidden rows fail the same way, before the payload is looked at.
    if record is None or not authorize(caller, Operation.UPDATE, entity, record):
        raise AccessDenied()

    columns = record_type.model.__table__.c
    # Blank required-with-default fields keep their current value.
    data = {name: value for name, value in _clean(record_type, values, partial=True).items()
            if value is not None or columns[name].nullable or columns[name].default is None}
    enforce(caller, Operation.UPDATE, entity, {**_row(record), **data})

    for name, value in data.items():
        setattr(record, name, value)
    commit_session()
    logger.info('Updated %s %s', entity, record.id)
    return record


def delete_record(caller, entity, record_id):
    record_type = get_record_type(entity)
    record = db.session.get(record_type.model, record_id)
    if record is None or not authorize(caller, Operation.DELETE, entity, record):
        raise AccessDenied()

    db.session.delete(record)
    commit_session()
    logger.info('Deleted %s %s', entity, record_id)
