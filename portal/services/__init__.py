"""
Services Package

Exports all services for easy importing.
"""

from portal.services.records import (
    RECORD_TYPES,
    create_record,
    delete_record,
    get_record,
    list_records,
    update_record,
)
from portal.services.accounts import authenticate, bootstrap_admin, delete_identity, register_identity
from portal.services.assets import (
    PARTITION_FOR_ENTITY,
    asset_name_from_url,
    asset_url,
    delete_asset,
    read_asset,
    replace_asset,
    upload_asset,
)

__all__ = [
    'RECORD_TYPES',
    'create_record',
    'delete_record',
    'get_record',
    'list_records',
    'update_record',
    'authenticate',
    'bootstrap_admin',
    'delete_identity',
    'register_identity',
    'PARTITION_FOR_ENTITY',
    'asset_name_from_url',
    'asset_url',
    'delete_asset',
    'read_asset',
    'replace_asset',
    'upload_asset',
]
