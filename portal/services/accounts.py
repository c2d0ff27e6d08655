"""
Account Service

Registration, sign-in and account removal for identities.
"""

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from portal.errors import AccessDenied, DuplicateRecord, ValidationFailed
from portal.extensions import db
from portal.models import AppRole, Identity, RoleAssignment
from portal.services.records import commit_session

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _normalise_email(email):
    return (email or '').strip().lower()


def register_identity(email, password, full_name=None):
    """Create an identity; its profile is created by the registration trigger."""
    email = _normalise_email(email)
    if not email or '@' not in email or ' ' in email:
        raise ValidationFailed('Please provide a valid email address.')
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long.')
    if Identity.query.filter_by(email=email).first():
        raise DuplicateRecord('Email already registered. Please login or use another email.')

    identity = Identity(
        email=email,
        password_hash=generate_password_hash(password, method='pbkdf2:sha256'),
        full_name=(full_name or '').strip() or None,
    )
    db.session.add(identity)
    commit_session()
    logger.info('Registered identity %s', identity.id)
    return identity


def authenticate(email, password):
    """Return the identity for valid credentials, else None."""
    identity = Identity.query.filter_by(email=_normalise_email(email)).first()
    if identity and check_password_hash(identity.password_hash, password or ''):
        return identity
    return None


def delete_identity(caller):
    """Remove the caller's own identity together with its profile and roles.

    Content the profile created stays; its created_by becomes NULL.
    """
    identity = db.session.get(Identity, caller.identity_id) if caller.is_authenticated else None
    if identity is None:
        raise AccessDenied()
    db.session.delete(identity)
    commit_session()
    logger.info('Deleted identity %s', caller.identity_id)


def bootstrap_admin(email):
    """Grant the admin role to the identity registered under email.

    Operator tooling: runs with database-owner rights outside any request,
    which is how the very first admin comes to exist.
    """
    identity = Identity.query.filter_by(email=_normalise_email(email)).first()
    if identity is None:
        raise ValidationFailed(f'No identity registered for {email}.')

    existing = RoleAssignment.query.filter_by(profile_id=identity.id, role=AppRole.ADMIN).first()
    if existing:
        return existing

    assignment = RoleAssignment(profile_id=identity.id, role=AppRole.ADMIN)
    db.session.add(assignment)
    commit_session()
    logger.warning('Admin role granted to %s by operator command', identity.email)
    return assignment
