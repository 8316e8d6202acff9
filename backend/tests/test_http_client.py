import pytest

from prtracker.client.http import ApiClient
from prtracker.client.profile_editor import ProfileEditor
from prtracker.client.record_collection import RecordCollection
from prtracker.client.session import SessionContext
from prtracker.core.errors import AuthError, AuthRequiredError, UploadError, WriteError
from prtracker.schemas.record import RecordCreate, RecordUpdate

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def test_sign_up_starts_session(api):
    assert api.session.is_authenticated
    assert api.session.current.email == "api-user@example.com"


def test_sign_in_failures_raise_auth_error(client):
    api = ApiClient(SessionContext(), http=client)
    with pytest.raises(AuthError, match="Invalid login credentials"):
        api.sign_in("nobody@example.com", "secret-pw")
    assert not api.session.is_authenticated


def test_sign_out_ends_session(api):
    collection = RecordCollection(api.records, api.session)
    collection.create(None, RecordCreate(distance="5K", minutes=21))

    api.sign_out()

    assert not api.session.is_authenticated
    assert collection.records == []
    with pytest.raises(AuthRequiredError):
        collection.load()


def test_record_round_trip_over_http(api):
    collection = RecordCollection(api.records, api.session)
    payload = RecordCreate(distance="Half Marathon", hours=1, minutes=31, seconds=18)

    records = collection.create(None, payload)
    assert len(records) == 1
    record = records[0]
    assert record.time == "01:31:18"

    collection.update(record.id, None, RecordUpdate(race_location="City Half"))
    assert collection.find(record.id).race_location == "City Half"
    assert collection.load()[0].race_location == "City Half"

    collection.delete(record.id, None)
    assert collection.records == []


def test_delete_unknown_record_over_http(api):
    collection = RecordCollection(api.records, api.session)
    with pytest.raises(WriteError, match="Record not found"):
        collection.delete("missing", None)
    assert collection.notices[-1].title == "Error deleting record"


def test_other_owner_is_refused_before_request(api):
    with pytest.raises(AuthRequiredError):
        api.records.list_for_owner("someone-else")


def test_profile_editor_over_http(api, client):
    editor = ProfileEditor(api.profiles, api.storage, api.session)
    profile = editor.load()
    assert profile.id == api.session.user_id

    editor.set_field("name", "Ada")
    editor.choose_avatar("me.png", PNG, "image/png")
    saved = editor.submit()

    assert saved.avatar_public_url == editor.avatar_url
    r = client.get(editor.avatar_url)
    assert r.status_code == 200
    assert r.content == PNG
    assert r.headers["cache-control"] == "max-age=3600"


def test_upload_with_foreign_key_prefix_is_refused(api):
    with pytest.raises(UploadError):
        api.storage.upload("avatars", "someone-else-1.png", PNG, content_type="image/png")


def test_non_image_upload_is_refused(api):
    key = f"{api.session.user_id}-1.txt"
    with pytest.raises(UploadError, match="image"):
        api.storage.upload("avatars", key, b"hello", content_type="text/plain")
