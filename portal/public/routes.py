"""
Public Routes

Public site pages and the read-only JSON API.
"""

from flask import abort, flash, jsonify, render_template
from flask_login import current_user
from portal.errors import PortalError
from portal.public import public_bp
from portal.public.services import get_homepage_content, serialize_record
from portal.security import caller_from_user
from portal.services import get_record, list_records

API_ENTITIES = {
    'news': 'news_items',
    'staff': 'staff_members',
    'activities': 'activities',
}


@public_bp.route('/')
def index():
    """Home page with latest news and upcoming activities"""
    caller = caller_from_user(current_user)
    try:
        news, upcoming = get_homepage_content(caller)
    except PortalError as e:
        flash(e.user_message, 'danger')
        news, upcoming = [], []
    return render_template('public/index.html', news=news, upcoming=upcoming)


def _visible_records(entity):
    """Rows for a listing page; a store failure is flashed and yields nothing."""
    try:
        return list_records(caller_from_user(current_user), entity)
    except PortalError as e:
        flash(e.user_message, 'danger')
        return []


@public_bp.route('/news')
def news_list():
    return render_template('public/news.html', news=_visible_records('news_items'))


@public_bp.route('/news/<news_id>')
def news_detail(news_id):
    try:
        item = get_record(caller_from_user(current_user), 'news_items', news_id)
    except PortalError as e:
        flash(e.user_message, 'danger')
        return render_template('public/news.html', news=[])
    if item is None:
        abort(404)
    return render_template('public/news_detail.html', item=item)


@public_bp.route('/staff')
def staff_list():
    return render_template('public/staff.html', staff=_visible_records('staff_members'))


@public_bp.route('/activities')
def activity_list():
    return render_template('public/activities.html', activities=_visible_records('activities'))


@public_bp.route('/api/<kind>')
def api_list(kind):
    """JSON list of news, staff or activities"""
    entity = API_ENTITIES.get(kind)
    if entity is None:
        abort(404)
    caller = caller_from_user(current_user)
    try:
        records = list_records(caller, entity)
    except PortalError as e:
        return jsonify({'error': e.user_message}), 503
    return jsonify([serialize_record(entity, r) for r in records])
