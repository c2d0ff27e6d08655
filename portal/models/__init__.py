"""
Models Package

Exports all models for easy importing.
"""

from portal.models.identity import Identity
from portal.models.profile import AppRole, Profile, RoleAssignment
from portal.models.content import NewsItem, StaffMember, Activity

__all__ = ['Identity', 'AppRole', 'Profile', 'RoleAssignment', 'NewsItem', 'StaffMember', 'Activity']
