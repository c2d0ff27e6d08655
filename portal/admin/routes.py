"""
Admin Routes

Tabbed panel (news, staff, activities) with one shared form per panel,
plus role assignment management.
"""

import logging

from flask import abort, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from portal.admin import admin_bp
from portal.admin.forms import PANELS, empty_form, form_values, record_form_data
from portal.errors import PortalError, ValidationFailed
from portal.security import caller_from_user
from portal.services import (
    PARTITION_FOR_ENTITY,
    asset_name_from_url,
    asset_url,
    create_record,
    delete_asset,
    delete_record,
    get_record,
    list_records,
    update_record,
    upload_asset,
)

logger = logging.getLogger(__name__)


def _panel_or_404(tab):
    panel = PANELS.get(tab)
    if panel is None:
        abort(404)
    return panel


def _render_panel(caller, panel, form_data, editing_id=None):
    try:
        records = list_records(caller, panel.entity)
    except PortalError as e:
        flash(e.user_message, 'danger')
        records = []
    
    return render_template('admin/panel.html',
                         panels=PANELS,
                         panel=panel,
                         records=records,
                         form_data=form_data,
                         editing_id=editing_id,
                         admin_email=current_user.email)


@admin_bp.route('/')
@login_required
def panel():
    """Admin panel; `tab` selects the content type, `edit` pre-populates the form."""
    panel = _panel_or_404(request.args.get('tab', 'news'))
    caller = caller_from_user(current_user)
    
    form_data = empty_form(panel)
    editing_id = None
    edit_id = request.args.get('edit')
    if edit_id:
        record = get_record(caller, panel.entity, edit_id)
        if record is None:
            flash(f'{panel.singular} not found.', 'warning')
        else:
            editing_id = record.id
            form_data = record_form_data(panel, record)
    
    return _render_panel(caller, panel, form_data, editing_id)


def _discard_image(caller, partition, url):
    """Delete the uploaded object behind url; external URLs are left alone."""
    name = asset_name_from_url(partition, url)
    if name is None:
        return
    try:
        delete_asset(caller, partition, name)
    except PortalError as e:
        logger.warning('Could not delete asset %s/%s: %s', partition, name, e.user_message)


@admin_bp.route('/<tab>/save', methods=['POST'])
@login_required
def save_record(tab):
    """Create a record, or update it when the form carries a record_id."""
    panel = _panel_or_404(tab)
    caller = caller_from_user(current_user)
    record_id = request.form.get('record_id') or None
    values = form_values(panel, request.form)
    
    partition = PARTITION_FOR_ENTITY[panel.entity]
    uploaded = None
    previous_image = None
    
    try:
        image = request.files.get('image_file')
        if image and image.filename:
            uploaded = upload_asset(caller, partition, image)
            values['image_url'] = asset_url(partition, uploaded)
        
        if record_id:
            existing = get_record(caller, panel.entity, record_id)
            previous_image = existing.image_url if existing is not None else None
            record = update_record(caller, panel.entity, record_id, values)
            flash(f'{panel.singular} updated successfully.', 'success')
        else:
            record = create_record(caller, panel.entity, values)
            flash(f'{panel.singular} added successfully.', 'success')
    except PortalError as e:
        if uploaded:
            # Unreferenced once the write failed
            delete_asset(caller, partition, uploaded)
            values.pop('image_url', None)
        flash(e.user_message, 'danger')
        form_data = empty_form(panel)
        form_data.update(values)
        return _render_panel(caller, panel, form_data, record_id)
    
    if previous_image and previous_image != record.image_url:
        _discard_image(caller, partition, previous_image)
    
    return redirect(url_for('admin.panel', tab=tab))


@admin_bp.route('/<tab>/<record_id>/delete', methods=['POST'])
@login_required
def delete(tab, record_id):
    panel = _panel_or_404(tab)
    caller = caller_from_user(current_user)
    
    try:
        existing = get_record(caller, panel.entity, record_id)
        image_url = existing.image_url if existing is not None else None
        delete_record(caller, panel.entity, record_id)
        flash(f'{panel.singular} deleted successfully.', 'success')
    except PortalError as e:
        flash(e.user_message, 'danger')
    else:
        _discard_image(caller, PARTITION_FOR_ENTITY[panel.entity], image_url)
    
    return redirect(url_for('admin.panel', tab=tab))


@admin_bp.route('/roles', methods=['GET', 'POST'])
@login_required
def manage_roles():
    """List role assignments; grant a role by profile email."""
    caller = caller_from_user(current_user)
    
    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        role = request.form.get('role', 'user')

        try:
            profile = next((p for p in list_records(caller, 'profiles') if p.email == email), None)
            if profile is None:
                raise ValidationFailed('No profile registered with that email.')
            create_record(caller, 'role_assignments', {'profile_id': profile.id, 'role': role})
            flash(f'Role "{role}" granted to {email}.', 'success')
        except PortalError as e:
            flash(e.user_message, 'danger')

        return redirect(url_for('admin.manage_roles'))
    
    try:
        assignments = list_records(caller, 'role_assignments')
    except PortalError as e:
        flash(e.user_message, 'danger')
        assignments = []
    
    return render_template('admin/roles.html', assignments=assignments, panels=PANELS)


@admin_bp.route('/roles/<assignment_id>/delete', methods=['POST'])
@login_required
def revoke_role(assignment_id):
    caller = caller_from_user(current_user)
    
    try:
        delete_record(caller, 'role_assignments', assignment_id)
        flash('Role revoked.', 'success')
    except PortalError as e:
        flash(e.user_message, 'danger')
    
    return redirect(url_for('admin.manage_roles'))
