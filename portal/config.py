"""
Configuration settings for the School Portal
"""
import os


class Config:
    """Flask application configuration"""
    
    # Flask secret key for sessions
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'
    
    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'portal.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    
    # Binary assets (one sub-folder per partition)
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'instance', 'uploads')
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024
    ALLOWED_IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
    
    # Application settings
    SITE_NAME = os.environ.get('SITE_NAME') or 'School Portal'
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    HOME_NEWS_LIMIT = 5
    HOME_ACTIVITY_LIMIT = 5


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    LOG_LEVEL = 'DEBUG'
