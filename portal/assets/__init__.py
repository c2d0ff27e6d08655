"""
Assets Blueprint

Serves and stores images in the per-content-type partitions.
"""

from flask import Blueprint

assets_bp = Blueprint('assets', __name__)

from portal.assets import routes  # noqa: E402, F401
