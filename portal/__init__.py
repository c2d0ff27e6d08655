"""
School Portal - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging
import os

import click
from flask import Flask
from portal.extensions import db, login_manager
from portal.config import Config


def create_app(config_class=Config):
    """Create and configure the Flask application.
    
    Args:
        config_class: Configuration class to use (default: Config)
    
    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    
    logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    logging.getLogger('portal').setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    
    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.login_message_category = 'info'
    
    from portal.triggers import register_triggers
    register_triggers()
    
    # Register blueprints
    from portal.auth import auth_bp
    from portal.admin import admin_bp
    from portal.public import public_bp
    from portal.assets import assets_bp
    
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(public_bp)
    app.register_blueprint(assets_bp, url_prefix='/assets')
    
    # Context processor for the admin flag and site name
    @app.context_processor
    def inject_caller_flags():
        """Expose `is_admin` to templates; it only drives navigation."""
        from flask_login import current_user
        from portal.models import AppRole
        from portal.security import has_role
        is_admin = current_user.is_authenticated and has_role(current_user.id, AppRole.ADMIN)
        return dict(is_admin=is_admin, site_name=app.config['SITE_NAME'])
    
    # User loader for Flask-Login
    @login_manager.user_loader
    def load_user(identity_id):
        from portal.models import Identity
        return db.session.get(Identity, identity_id)
    
    @app.template_filter('datetime')
    def datetime_filter(value, fmt='%d %b %Y %H:%M'):
        return value.strftime(fmt) if value else ''
    
    @app.cli.command('grant-admin')
    @click.argument('email')
    def grant_admin_command(email):
        """Grant the admin role to a registered identity."""
        from portal.errors import PortalError
        from portal.services import bootstrap_admin
        try:
            bootstrap_admin(email)
        except PortalError as e:
            raise click.ClickException(e.user_message)
        click.echo(f'{email} is now an admin')
    
    # Create database tables
    with app.app_context():
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///') and \
                not app.config['SQLALCHEMY_DATABASE_URI'].endswith(':memory:'):
            os.makedirs(os.path.dirname(app.config['SQLALCHEMY_DATABASE_URI'][len('sqlite:///'):]),
                        exist_ok=True)
        os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)
        db.create_all()
    
    return app
