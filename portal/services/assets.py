"""
Asset Service

Binary objects (images) stored in one folder per partition. Reads are
public; writes follow the owning content type's admin-only policy. Content
is never inspected.
"""

import logging
import os
import uuid
from pathlib import Path

from flask import current_app, url_for
from werkzeug.utils import secure_filename

from portal.errors import AccessDenied, ValidationFailed
from portal.security import ASSET_PARTITIONS, Operation, authorize, enforce

logger = logging.getLogger(__name__)

# Content type -> partition holding its images
PARTITION_FOR_ENTITY = {
    'news_items': 'news-images',
    'staff_members': 'staff-images',
    'activities': 'activity-images',
}


def _partition_root(partition):
    if partition not in ASSET_PARTITIONS:
        raise ValidationFailed(f'Unknown asset partition: {partition}')
    root = Path(current_app.config['UPLOAD_FOLDER']) / partition
    root.mkdir(parents=True, exist_ok=True)
    return root


def _asset_path(partition, name):
    """Path of an existing asset, or None for unsafe or unknown names."""
    root = _partition_root(partition)
    if not name or secure_filename(name) != name:
        return None
    path = root / name
    if path.resolve().parent != root.resolve() or not path.is_file():
        return None
    return path


def _extension(filename):
    ext = filename.rsplit('.', 1)[1].lower() if filename and '.' in filename else ''
    if ext not in current_app.config['ALLOWED_IMAGE_EXTENSIONS']:
        raise ValidationFailed(f'File type .{ext} is not allowed.' if ext else 'File type is not allowed.')
    return ext


def _determine_size(file):
    stream = file.stream
    current = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(current)
    return size


def _check_upload(file):
    if file is None or not file.filename:
        raise ValidationFailed('Please choose a file to upload.')
    ext = _extension(file.filename)
    if _determine_size(file) > current_app.config['MAX_CONTENT_LENGTH']:
        raise ValidationFailed('File is too large.')
    return ext


def asset_url(partition, name):
    return url_for('assets.serve_asset', partition=partition, name=name)


def asset_name_from_url(partition, url):
    """Name of the partition object a URL points at, or None for other URLs."""
    if not url:
        return None
    prefix = asset_url(partition, 'name')[:-len('name')]
    if not url.startswith(prefix):
        return None
    name = url[len(prefix):]
    if not name or secure_filename(name) != name:
        return None
    return name


def read_asset(caller, partition, name):
    """Return the file path of a visible asset, or None."""
    if not authorize(caller, Operation.SELECT, partition):
        return None
    return _asset_path(partition, name)


def upload_asset(caller, partition, file):
    """Store a new object and return its generated name."""
    _partition_root(partition)
    enforce(caller, Operation.INSERT, partition)
    ext = _check_upload(file)

    name = f'{uuid.uuid4().hex}.{ext}'
    file.save(str(_partition_root(partition) / name))
    logger.debug('Stored asset %s/%s', partition, name)
    return name


def replace_asset(caller, partition, name, file):
    """Overwrite the bytes of an existing object, keeping its name."""
    _partition_root(partition)
    enforce(caller, Operation.UPDATE, partition)
    path = _asset_path(partition, name)
    if path is None:
        raise AccessDenied()
    _check_upload(file)

    file.save(str(path))
    logger.debug('Replaced asset %s/%s', partition, name)
    return name


def delete_asset(caller, partition, name):
    _partition_root(partition)
    enforce(caller, Operation.DELETE, partition)
    path = _asset_path(partition, name)
    if path is None:
        raise AccessDenied()

    path.unlink()
    logger.debug('Deleted asset %s/%s', partition, name)
