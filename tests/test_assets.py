import io
from pathlib import Path

import pytest
from werkzeug.datastructures import FileStorage

from portal.errors import AccessDenied, ValidationFailed
from portal.services import delete_asset, read_asset, replace_asset, upload_asset


@pytest.fixture(autouse=True)
def _ctx(ctx):
    yield


def _image(data=b'\x89PNG fake bytes', filename='photo.png'):
    return FileStorage(stream=io.BytesIO(data), filename=filename, content_type='image/png')


def test_admin_upload_is_publicly_readable(app, admin, anonymous):
    name = upload_asset(admin, 'news-images', _image())

    assert name.endswith('.png')
    path = read_asset(anonymous, 'news-images', name)
    assert path == Path(app.config['UPLOAD_FOLDER']) / 'news-images' / name
    assert path.read_bytes() == b'\x89PNG fake bytes'


@pytest.mark.parametrize('caller_fixture', ['user', 'anonymous'])
def test_non_admin_cannot_upload(request, app, caller_fixture):
    caller = request.getfixturevalue(caller_fixture)
    with pytest.raises(AccessDenied):
        upload_asset(caller, 'staff-images', _image())
    assert list((Path(app.config['UPLOAD_FOLDER']) / 'staff-images').iterdir()) == []


def test_rejects_disallowed_extension(admin):
    with pytest.raises(ValidationFailed):
        upload_asset(admin, 'news-images', _image(filename='script.exe'))
    with pytest.raises(ValidationFailed):
        upload_asset(admin, 'news-images', _image(filename='noextension'))


def test_rejects_unknown_partition(admin):
    with pytest.raises(ValidationFailed):
        upload_asset(admin, 'private-images', _image())


def test_replace_keeps_name(admin, anonymous):
    name = upload_asset(admin, 'activity-images', _image())
    replace_asset(admin, 'activity-images', name, _image(b'new bytes', 'other.jpg'))

    assert read_asset(anonymous, 'activity-images', name).read_bytes() == b'new bytes'


def test_replace_and_delete_missing_look_denied(admin):
    with pytest.raises(AccessDenied):
        replace_asset(admin, 'news-images', 'missing.png', _image())
    with pytest.raises(AccessDenied):
        delete_asset(admin, 'news-images', 'missing.png')


def test_delete_requires_admin(admin, user, anonymous):
    name = upload_asset(admin, 'news-images', _image())

    with pytest.raises(AccessDenied):
        delete_asset(user, 'news-images', name)
    assert read_asset(anonymous, 'news-images', name) is not None

    delete_asset(admin, 'news-images', name)
    assert read_asset(anonymous, 'news-images', name) is None


def test_read_rejects_path_tricks(admin, anonymous):
    upload_asset(admin, 'news-images', _image())
    assert read_asset(anonymous, 'news-images', '../portal.db') is None
    assert read_asset(anonymous, 'news-images', '') is None
