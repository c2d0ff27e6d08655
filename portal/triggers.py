"""
Lifecycle triggers

Mapper events that run inside the flush of the triggering write, so they
commit or roll back together with it.
"""

import logging

from sqlalchemy import event

from portal.models import Activity, Identity, NewsItem, Profile, StaffMember
from portal.models.base import utcnow

logger = logging.getLogger(__name__)

TIMESTAMPED_MODELS = (Profile, NewsItem, StaffMember, Activity)


def create_profile_for_identity(mapper, connection, target):
    """Insert the profile row for a freshly registered identity."""
    connection.execute(
        Profile.__table__.insert().values(
            id=target.id,
            email=target.email,
            full_name=target.full_name or '',
        )
    )
    logger.debug('Created profile for identity %s', target.id)


def touch_updated_at(mapper, connection, target):
    """Overwrite updated_at with the write time, whatever the caller sent."""
    target.updated_at = utcnow()


_registered = False


def register_triggers():
    global _registered
    if _registered:
        return
    event.listen(Identity, 'after_insert', create_profile_for_identity)
    for model in TIMESTAMPED_MODELS:
        event.listen(model, 'before_update', touch_updated_at)
    _registered = True
