import io
from pathlib import Path

import pytest

from portal.errors import StoreUnavailable
from portal.extensions import db
from portal.models import Activity, NewsItem, Profile, RoleAssignment, StaffMember
from portal.security import CallerContext
from portal.services import create_record


def _create_news(app, admin_id, **values):
    values.setdefault('title', 'Science fair')
    values.setdefault('body', 'Projects on display in the hall')
    with app.app_context():
        return create_record(CallerContext(admin_id), 'news_items', values).id


def _count(app, model):
    with app.app_context():
        return model.query.count()


def test_public_pages_load_anonymously(client, app, admin_id):
    news_id = _create_news(app, admin_id)

    for url in ('/', '/news', '/staff', '/activities', f'/news/{news_id}'):
        r = client.get(url)
        assert r.status_code == 200, url
    assert 'Science fair' in client.get('/').get_data(as_text=True)


def test_missing_news_is_404(client):
    assert client.get('/news/does-not-exist').status_code == 404


def test_api_lists(client, app, admin_id):
    _create_news(app, admin_id)

    r = client.get('/api/news')
    assert r.status_code == 200
    data = r.get_json()
    assert len(data) == 1
    for key in ('id', 'title', 'body', 'image_url', 'published_at', 'updated_at'):
        assert key in data[0]
    assert 'created_by' not in data[0]

    assert client.get('/api/staff').get_json() == []
    assert client.get('/api/roles').status_code == 404


def test_admin_requires_login(client):
    r = client.get('/admin/')
    assert r.status_code in (301, 302)
    assert '/login' in r.headers['Location']


def test_register_creates_profile(client, app):
    r = client.post('/register', data={
        'email': 'New@Example.com', 'full_name': 'New Person',
        'password': 'secret1', 'confirm_password': 'secret1',
    }, follow_redirects=True)
    assert r.status_code == 200
    assert 'Registration successful' in r.get_data(as_text=True)

    with app.app_context():
        profile = Profile.query.filter_by(email='new@example.com').one()
        assert profile.full_name == 'New Person'


def test_register_rejects_mismatch_and_duplicates(client, user_id):
    r = client.post('/register', data={
        'email': 'x@example.com', 'password': 'secret1', 'confirm_password': 'secret2',
    })
    assert 'Passwords do not match' in r.get_data(as_text=True)

    r = client.post('/register', data={
        'email': 'user@example.com', 'password': 'secret1', 'confirm_password': 'secret1',
    })
    assert 'Email already registered' in r.get_data(as_text=True)


def test_login_failure(client, user_id, login):
    r = login('user@example.com', 'wrong-password')
    assert 'Invalid email or password' in r.get_data(as_text=True)
    assert client.get('/admin/').status_code in (301, 302)


def test_non_admin_writes_are_denied_in_panel(client, app, user_id, login):
    login('user@example.com')

    r = client.get('/admin/')
    assert r.status_code == 200
    assert 'Content Management' in r.get_data(as_text=True)

    r = client.post('/admin/news/save', data={'title': 'Hack', 'body': 'Nope'})
    assert r.status_code == 200
    assert 'do not have permission' in r.get_data(as_text=True)
    assert _count(app, NewsItem) == 0


def test_admin_news_crud(client, app, admin_id, login):
    login('admin@example.com')

    r = client.post('/admin/news/save', data={'title': 'Open day', 'body': 'Saturday 10am'},
                    follow_redirects=True)
    assert 'News item added successfully' in r.get_data(as_text=True)
    with app.app_context():
        item = NewsItem.query.one()
        news_id = item.id
        assert item.created_by == admin_id

    # Edit pre-populates the shared form
    body = client.get(f'/admin/?tab=news&edit={news_id}').get_data(as_text=True)
    assert 'Edit News item' in body
    assert 'value="Open day"' in body
    assert f'value="{news_id}"' in body

    r = client.post('/admin/news/save', data={
        'record_id': news_id, 'title': 'Open day (updated)', 'body': 'Sunday 10am',
    }, follow_redirects=True)
    assert 'News item updated successfully' in r.get_data(as_text=True)
    with app.app_context():
        assert db.session.get(NewsItem, news_id).title == 'Open day (updated)'

    r = client.post(f'/admin/news/{news_id}/delete', follow_redirects=True)
    assert 'News item deleted successfully' in r.get_data(as_text=True)
    assert _count(app, NewsItem) == 0


def test_admin_staff_and_activities(client, app, admin_id, login):
    login('admin@example.com')

    client.post('/admin/staff/save', data={
        'full_name': 'Jane Doe', 'position': 'Librarian', 'email': 'jane@example.com',
    })
    client.post('/admin/activities/save', data={
        'title': 'Camp', 'description': 'Overnight', 'scheduled_at': '2026-11-20T08:00',
        'location': 'Hill park',
    })
    assert _count(app, StaffMember) == 1
    assert _count(app, Activity) == 1

    r = client.get('/admin/?tab=staff')
    assert 'Jane Doe' in r.get_data(as_text=True)


def test_invalid_form_keeps_values(client, app, admin_id, login):
    login('admin@example.com')

    r = client.post('/admin/activities/save', data={
        'title': 'Concert', 'description': 'Choir', 'scheduled_at': '',
    })
    body = r.get_data(as_text=True)
    assert 'Scheduled at is required' in body
    assert 'value="Concert"' in body
    assert _count(app, Activity) == 0


def test_unknown_tab_is_404(client, admin_id, login):
    login('admin@example.com')
    assert client.get('/admin/?tab=payroll').status_code == 404
    assert client.post('/admin/payroll/save', data={}).status_code == 404


def test_role_management(client, app, admin_id, user_id, login):
    login('admin@example.com')

    r = client.post('/admin/roles', data={'email': 'user@example.com', 'role': 'admin'},
                    follow_redirects=True)
    assert 'granted' in r.get_data(as_text=True)

    r = client.post('/admin/roles', data={'email': 'user@example.com', 'role': 'admin'},
                    follow_redirects=True)
    assert 'already exists' in r.get_data(as_text=True)

    r = client.post('/admin/roles', data={'email': 'user@example.com', 'role': 'user'},
                    follow_redirects=True)
    assert 'granted' in r.get_data(as_text=True)

    with app.app_context():
        assert RoleAssignment.query.filter_by(profile_id=user_id).count() == 2


def test_non_admin_cannot_revoke_roles(client, app, admin_id, user_id, login):
    with app.app_context():
        assignment_id = RoleAssignment.query.filter_by(profile_id=admin_id).one().id

    login('user@example.com')
    r = client.get('/admin/roles')
    assert 'admin@example.com' in r.get_data(as_text=True)

    r = client.post(f'/admin/roles/{assignment_id}/delete', follow_redirects=True)
    assert 'do not have permission' in r.get_data(as_text=True)
    assert _count(app, RoleAssignment) == 1


def test_asset_endpoints(client, app, admin_id, user_id, login):
    login('user@example.com')
    r = client.post('/assets/news-images',
                    data={'file': (io.BytesIO(b'img'), 'a.png')},
                    content_type='multipart/form-data')
    assert r.status_code == 403
    client.get('/logout')

    login('admin@example.com')
    r = client.post('/assets/news-images',
                    data={'file': (io.BytesIO(b'img'), 'a.png')},
                    content_type='multipart/form-data')
    assert r.status_code == 201
    url = r.get_json()['url']

    r = client.post('/assets/news-images',
                    data={'file': (io.BytesIO(b'img'), 'a.txt')},
                    content_type='multipart/form-data')
    assert r.status_code == 400
    client.get('/logout')

    r = client.get(url)
    assert r.status_code == 200
    assert r.data == b'img'
    assert client.delete(url).status_code == 403
    assert client.get('/assets/news-images/missing.png').status_code == 404
    assert client.get('/assets/secret-images/a.png').status_code == 404


def test_panel_upload_sets_image_url(client, app, admin_id, login):
    login('admin@example.com')
    client.post('/admin/news/save', data={
        'title': 'With picture', 'body': 'B',
        'image_file': (io.BytesIO(b'img'), 'pic.jpg'),
    }, content_type='multipart/form-data')

    with app.app_context():
        item = NewsItem.query.one()
        assert item.image_url.startswith('/assets/news-images/')
        assert item.image_url.endswith('.jpg')


def _stored_image(app, url):
    name = url.rsplit('/', 1)[1]
    return Path(app.config['UPLOAD_FOLDER']) / 'news-images' / name


def test_panel_image_files_follow_their_record(client, app, admin_id, login):
    login('admin@example.com')
    client.post('/admin/news/save', data={
        'title': 'With picture', 'body': 'B',
        'image_file': (io.BytesIO(b'first'), 'first.jpg'),
    }, content_type='multipart/form-data')
    with app.app_context():
        item = NewsItem.query.one()
        news_id, first_url = item.id, item.image_url
    assert _stored_image(app, first_url).is_file()

    r = client.post('/admin/news/save', data={
        'record_id': news_id, 'title': 'With picture', 'body': 'B',
        'image_file': (io.BytesIO(b'second'), 'second.png'),
    }, content_type='multipart/form-data', follow_redirects=True)
    assert 'News item updated successfully' in r.get_data(as_text=True)
    with app.app_context():
        second_url = db.session.get(NewsItem, news_id).image_url
    assert second_url != first_url
    assert not _stored_image(app, first_url).exists()
    assert _stored_image(app, second_url).read_bytes() == b'second'

    client.post(f'/admin/news/{news_id}/delete')
    assert _count(app, NewsItem) == 0
    assert not _stored_image(app, second_url).exists()


def test_external_image_url_is_left_alone_on_delete(client, app, admin_id, login):
    news_id = _create_news(app, admin_id, image_url='https://cdn.example.com/a.png')
    login('admin@example.com')

    r = client.post(f'/admin/news/{news_id}/delete', follow_redirects=True)
    assert 'News item deleted successfully' in r.get_data(as_text=True)


@pytest.mark.parametrize('url', ['/news', '/staff', '/activities', '/news/some-id'])
def test_public_pages_survive_store_outage(client, monkeypatch, url):
    def unavailable(*args, **kwargs):
        raise StoreUnavailable()

    monkeypatch.setattr('portal.public.routes.list_records', unavailable)
    monkeypatch.setattr('portal.public.routes.get_record', unavailable)

    r = client.get(url)
    assert r.status_code == 200
    assert 'temporarily unavailable' in r.get_data(as_text=True)


def test_delete_account(client, app, user_id, login):
    login('user@example.com')
    r = client.post('/account/delete', follow_redirects=True)
    assert 'Your account has been deleted' in r.get_data(as_text=True)

    with app.app_context():
        assert db.session.get(Profile, user_id) is None
    assert client.get('/admin/').status_code in (301, 302)


def test_grant_admin_command(app, user_id):
    runner = app.test_cli_runner()
    result = runner.invoke(args=['grant-admin', 'user@example.com'])
    assert result.exit_code == 0
    assert 'is now an admin' in result.output

    result = runner.invoke(args=['grant-admin', 'ghost@example.com'])
    assert result.exit_code != 0


def test_config_only_carries_used_settings(app):
    assert not any(key.startswith('WTF_') for key in app.config)
    assert app.config['MAX_CONTENT_LENGTH'] == 5 * 1024 * 1024
