"""
Row-level authorization policies

Declarative table of (entity, operation) -> predicate. Anything not listed
is denied. Predicates take the caller and the row (a model instance or a
dict of values) and return a bool.
"""

import enum
import logging

from portal.errors import AccessDenied
from portal.extensions import db
from portal.models import AppRole, RoleAssignment

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    SELECT = 'select'
    INSERT = 'insert'
    UPDATE = 'update'
    DELETE = 'delete'


WRITES = (Operation.INSERT, Operation.UPDATE, Operation.DELETE)

CONTENT_ENTITIES = ('news_items', 'staff_members', 'activities')
ASSET_PARTITIONS = ('news-images', 'staff-images', 'activity-images')


def has_role(identity_id, role):
    """True iff a RoleAssignment links identity_id to role."""
    if identity_id is None:
        return False
    role = AppRole(role)
    query = db.session.query(RoleAssignment.id).filter_by(profile_id=identity_id, role=role)
    return db.session.query(query.exists()).scalar()


def _field(row, name):
    if row is None:
        return None
    if isinstance(row, dict):
        return row.get(name)
    return getattr(row, name, None)


def anyone(caller, row):
    return True


def authenticated(caller, row):
    return caller.is_authenticated


def is_admin(caller, row):
    return has_role(caller.identity_id, AppRole.ADMIN)


def owns_row(caller, row):
    return caller.is_authenticated and _field(row, 'id') == caller.identity_id


def _admin_managed(read=anyone):
    policy = {Operation.SELECT: read}
    policy.update({op: is_admin for op in WRITES})
    return policy


POLICIES = {
    'profiles': {
        Operation.SELECT: anyone,
        Operation.INSERT: owns_row,
        Operation.UPDATE: owns_row,
    },
    'role_assignments': _admin_managed(read=authenticated),
}
POLICIES.update({entity: _admin_managed() for entity in CONTENT_ENTITIES})
POLICIES.update({partition: _admin_managed() for partition in ASSET_PARTITIONS})


def authorize(caller, operation, entity, row=None):
    """Return True when caller may perform operation on row of entity."""
    operation = Operation(operation)
    predicate = POLICIES.get(entity, {}).get(operation)
    if predicate is None:
        allowed = False
    else:
        allowed = bool(predicate(caller, row))
    if not allowed and operation is not Operation.SELECT:
        logger.info('Denied %s on %s for caller %s', operation.value, entity,
                    caller.identity_id or 'anonymous')
    return allowed


def enforce(caller, operation, entity, row=None):
    """Like authorize, but raise AccessDenied on deny."""
    if not authorize(caller, operation, entity, row):
        raise AccessDenied()
