"""
Security Package

Explicit caller context plus the row-level policy evaluator.
"""

from portal.security.context import CallerContext, caller_from_user
from portal.security.policies import (
    ASSET_PARTITIONS,
    CONTENT_ENTITIES,
    Operation,
    authorize,
    enforce,
    has_role,
)

__all__ = [
    'CallerContext',
    'caller_from_user',
    'ASSET_PARTITIONS',
    'CONTENT_ENTITIES',
    'Operation',
    'authorize',
    'enforce',
    'has_role',
]
