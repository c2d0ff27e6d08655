"""
Caller context

Every authorization check receives the caller explicitly. Routes build the
context once from Flask-Login's current_user and hand it down.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CallerContext:
    identity_id: Optional[str] = None

    @classmethod
    def anonymous(cls):
        return cls()

    @property
    def is_authenticated(self):
        return self.identity_id is not None


def caller_from_user(user):
    """Build a CallerContext from a Flask-Login user (or AnonymousUserMixin)."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return CallerContext.anonymous()
    return CallerContext(identity_id=str(user.get_id()))
