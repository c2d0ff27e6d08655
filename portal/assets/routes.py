"""
Asset Routes

JSON upload/replace/delete endpoints and public file serving.
"""

from flask import abort, jsonify, request, send_file
from flask_login import current_user
from portal.assets import assets_bp
from portal.errors import AccessDenied, PortalError, StoreUnavailable, ValidationFailed
from portal.security import caller_from_user
from portal.services import asset_url, delete_asset, read_asset, replace_asset, upload_asset


def _error_response(error):
    if isinstance(error, AccessDenied):
        status = 403
    elif isinstance(error, ValidationFailed):
        status = 400
    elif isinstance(error, StoreUnavailable):
        status = 503
    else:
        status = 500
    return jsonify({'error': error.user_message}), status


@assets_bp.route('/<partition>/<name>', methods=['GET'])
def serve_asset(partition, name):
    try:
        path = read_asset(caller_from_user(current_user), partition, name)
    except ValidationFailed:
        abort(404)
    if path is None:
        abort(404)
    return send_file(path)


@assets_bp.route('/<partition>', methods=['POST'])
def upload(partition):
    caller = caller_from_user(current_user)
    try:
        name = upload_asset(caller, partition, request.files.get('file'))
    except PortalError as e:
        return _error_response(e)
    return jsonify({'name': name, 'url': asset_url(partition, name)}), 201


@assets_bp.route('/<partition>/<name>', methods=['POST'])
def replace(partition, name):
    caller = caller_from_user(current_user)
    try:
        replace_asset(caller, partition, name, request.files.get('file'))
    except PortalError as e:
        return _error_response(e)
    return jsonify({'name': name, 'url': asset_url(partition, name)})


@assets_bp.route('/<partition>/<name>', methods=['DELETE'])
def delete(partition, name):
    caller = caller_from_user(current_user)
    try:
        delete_asset(caller, partition, name)
    except PortalError as e:
        return _error_response(e)
    return jsonify({'deleted': name})
