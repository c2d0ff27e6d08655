"""
Shared column helpers
"""

import uuid
from datetime import datetime, timezone

from portal.extensions import db


def new_id():
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp, the form SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    """created_at/updated_at pair; updated_at is rewritten by portal.triggers."""

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)
