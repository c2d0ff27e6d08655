"""
Admin Blueprint

Signed-in identities reach the panel; whether a write goes through is
decided per row by the record policies.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from portal.admin import routes  # noqa: E402, F401
