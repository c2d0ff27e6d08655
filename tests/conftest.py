import pytest
from flask import has_app_context

from portal import create_app
from portal.config import TestConfig
from portal.extensions import db
from portal.security import CallerContext
from portal.services import bootstrap_admin, register_identity

PASSWORD = 'password123'


@pytest.fixture()
def app(tmp_path):
    class _Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / 'uploads')

    app = create_app(_Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def ctx(app):
    with app.app_context():
        yield
        db.session.remove()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_identity(app):
    """Register an identity (optionally admin) and return its id."""
    def _create(email, full_name, admin):
        identity = register_identity(email, PASSWORD, full_name=full_name)
        if admin:
            bootstrap_admin(email)
        return identity.id

    def _make(email, full_name=None, admin=False):
        if has_app_context():
            return _create(email, full_name, admin)
        with app.app_context():
            return _create(email, full_name, admin)
    return _make


@pytest.fixture()
def admin_id(make_identity):
    return make_identity('admin@example.com', full_name='Site Admin', admin=True)


@pytest.fixture()
def user_id(make_identity):
    return make_identity('user@example.com', full_name='Plain User')


@pytest.fixture()
def admin(admin_id):
    return CallerContext(admin_id)


@pytest.fixture()
def user(user_id):
    return CallerContext(user_id)


@pytest.fixture()
def anonymous():
    return CallerContext.anonymous()


@pytest.fixture()
def login(client):
    def _login(email, password=PASSWORD):
        return client.post('/login', data={'email': email, 'password': password},
                           follow_redirects=True)
    return _login
