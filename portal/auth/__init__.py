"""
Auth Blueprint

Registration and sign-in for identities using Flask-Login.
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from portal.auth import routes  # noqa: E402, F401
