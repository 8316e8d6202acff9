import pytest

from prtracker.client.profile_editor import ProfileEditor
from prtracker.client.session import SessionContext
from prtracker.core.constants import BIO_MAX_LENGTH
from prtracker.core.errors import AuthRequiredError, UploadError
from prtracker.repositories.profiles import ProfileRepository
from prtracker.storage import LocalBlobStorage

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class BrokenStorage(LocalBlobStorage):
    def upload(self, bucket, key, data, content_type="application/octet-stream", upsert=False):
        raise UploadError("Storage unavailable")


@pytest.fixture
def storage(tmp_path):
    return LocalBlobStorage(root=str(tmp_path), public_base_url="http://testserver")


@pytest.fixture
def editor(db, storage, session_ctx):
    return ProfileEditor(ProfileRepository(db), storage, session_ctx)


def test_load_creates_missing_profile(editor, db, user):
    profile = editor.load()
    assert profile.id == user.id
    assert (editor.name, editor.location, editor.bio) == ("", "", "")
    assert editor.avatar_url is None
    assert ProfileRepository(db).get(user.id) is not None


def test_bio_is_capped(editor):
    editor.load()
    editor.set_field("bio", "x" * (BIO_MAX_LENGTH + 40))
    assert len(editor.bio) == BIO_MAX_LENGTH


def test_submit_saves_profile_and_avatar(editor, db, user):
    editor.load()
    editor.set_field("name", "Ada")
    editor.set_field("location", "Leeds")
    editor.choose_avatar("me.PNG", PNG, "image/png")
    assert editor.avatar_url.startswith("data:image/png;base64,")

    saved = editor.submit()

    assert saved.name == "Ada"
    assert saved.avatar_url.startswith(f"{user.id}-")
    assert saved.avatar_url.endswith(".png")
    assert editor.avatar_url == f"http://testserver/storage/avatars/{saved.avatar_url}"
    assert editor.uploading_avatar is False
    assert editor.pending_avatar is None
    assert editor.notices[-1].title == "Profile updated"

    reloaded = ProfileEditor(ProfileRepository(db), editor.storage, editor.session)
    reloaded.load()
    assert reloaded.avatar_path == saved.avatar_url


def test_failed_upload_still_saves_profile(db, session_ctx, tmp_path):
    editor = ProfileEditor(ProfileRepository(db), BrokenStorage(root=str(tmp_path)), session_ctx)
    editor.load()
    editor.set_field("name", "Ada")
    editor.choose_avatar("me.png", PNG, "image/png")

    saved = editor.submit()

    assert saved.name == "Ada"
    assert saved.avatar_url == ""
    assert [n.title for n in editor.notices] == ["Avatar upload failed", "Profile updated"]


def test_submit_requires_sign_in(db, storage):
    editor = ProfileEditor(ProfileRepository(db), storage, SessionContext())
    with pytest.raises(AuthRequiredError):
        editor.submit()
    assert editor.notices[-1].title == "Authentication required"
