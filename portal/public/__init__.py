"""
Public Blueprint

Pages anyone can read: news, staff and activities.
"""

from flask import Blueprint

public_bp = Blueprint('public', __name__)

from portal.public import routes  # noqa: E402, F401
