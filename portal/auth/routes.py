"""
Auth Routes

Identity authentication routes using Flask-Login.
"""

from flask import render_template, request, redirect, url_for, flash
from flask_login import login_user, logout_user, login_required, current_user
from portal.auth import auth_bp
from portal.errors import PortalError
from portal.security import caller_from_user
from portal.services import authenticate, delete_identity, register_identity


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """Identity registration route"""
    if current_user.is_authenticated:
        return redirect(url_for('admin.panel'))
    
    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        full_name = request.form.get('full_name', '').strip()
        password = request.form.get('password', '')
        confirm_password = request.form.get('confirm_password', '')
        
        if password != confirm_password:
            flash('Passwords do not match.', 'danger')
            return render_template('auth/register.html', email=email, full_name=full_name)
        
        try:
            register_identity(email, password, full_name=full_name)
        except PortalError as e:
            flash(e.user_message, 'danger')
            return render_template('auth/register.html', email=email, full_name=full_name)
        
        flash('Registration successful! Please login.', 'success')
        return redirect(url_for('auth.login'))
    
    return render_template('auth/register.html')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Identity login route"""
    if current_user.is_authenticated:
        return redirect(url_for('admin.panel'))
    
    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        password = request.form.get('password', '')
        remember = bool(request.form.get('remember'))
        
        if not email or not password:
            flash('Please provide both email and password.', 'danger')
            return render_template('auth/login.html')
        
        identity = authenticate(email, password)
        if identity:
            login_user(identity, remember=remember)
            flash(f'Welcome back, {identity.email}!', 'success')
            
            next_page = request.args.get('next')
            if next_page and next_page.startswith('/') and not next_page.startswith('//'):
                return redirect(next_page)
            return redirect(url_for('admin.panel'))
        flash('Invalid email or password. Please try again.', 'danger')
    
    return render_template('auth/login.html')


@auth_bp.route('/logout')
@login_required
def logout():
    """Identity logout route"""
    logout_user()
    flash('You have been logged out successfully.', 'info')
    return redirect(url_for('auth.login'))


@auth_bp.route('/account/delete', methods=['POST'])
@login_required
def delete_account():
    """Remove the signed-in identity, its profile and its roles."""
    caller = caller_from_user(current_user)
    try:
        delete_identity(caller)
    except PortalError as e:
        flash(e.user_message, 'danger')
        return redirect(url_for('admin.panel'))
    
    logout_user()
    flash('Your account has been deleted.', 'info')
    return redirect(url_for('public.index'))
