import io
import zipfile

import pytest
from sqlalchemy.exc import OperationalError

from minicloud.errors import (AccessDeniedError, InvalidRequestError, NotFoundError,
                              StorageFailureError)
from minicloud.models.file_model import FileRecord
from minicloud.models.user_model import User
from minicloud.repositories.file_repository import FileRecordRepository
from minicloud.repositories.user_repository import UserRepository
from minicloud.services import file_service as file_service_module
from minicloud.services.file_service import FileService, assert_owner
from minicloud.tests.conftest import TestingSessionLocal, USER_EMAIL
from minicloud.utils import content_type as content_type_module
from minicloud.utils.content_type import ATTACHMENT, INLINE

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"


@pytest.fixture
def owner(db_session):
    return UserRepository(db_session).get_by_email(USER_EMAIL)


@pytest.fixture
def stranger(db_session):
    return UserRepository(db_session).add(User(email="stranger@example.com", password_hash="x"))


@pytest.fixture
def files(db_session, blob_store):
    return FileService(FileRecordRepository(db_session), blob_store)


def test_note_scenario(files, owner):
    record = files.upload(b"hi\n", "note", None, owner)

    assert record.content_type.startswith("text/")
    assert record.size == 3
    assert record.short_code is None
    assert not record.shared

    shared = files.share(record.id, owner)
    assert shared.short_code is not None
    assert len(shared.short_code) == 8

    public = files.resolve_public(shared.short_code)
    assert public.content == b"hi\n"
    assert public.disposition == INLINE
    assert public.filename == "note"


def test_upload_writes_blob_under_opaque_key(files, owner, blob_store):
    record = files.upload(b"hello", "greeting", "a description", owner)

    assert record.storage_key.startswith(f"{owner.id}/")
    assert "greeting" not in record.storage_key
    assert blob_store.get(record.storage_key) == b"hello"
    assert record.description == "a description"


def test_storage_keys_do_not_collide(files, owner):
    first = files.upload(b"same", "a", None, owner)
    second = files.upload(b"same", "a", None, owner)
    assert first.storage_key != second.storage_key


def test_resolve_returns_type_sniffed_at_upload(files, owner):
    record = files.upload(PDF_BYTES, "report", None, owner)
    shared = files.share(record.id, owner)

    public = files.resolve_public(shared.short_code)
    assert public.content == PDF_BYTES
    assert public.content_type == "application/pdf"
    assert public.disposition == INLINE


def test_archive_is_an_attachment(files, owner):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("inner.txt", "inside")
    record = files.upload(buffer.getvalue(), "archive", None, owner)
    assert record.content_type == "application/zip"
    shared = files.share(record.id, owner)

    assert files.resolve_public(shared.short_code).disposition == ATTACHMENT


def test_upload_requires_title(files, owner, blob_store):
    with pytest.raises(InvalidRequestError):
        files.upload(b"data", "   ", None, owner)
    assert files.list_owned(owner) == []


def test_failed_blob_write_leaves_no_record(db_session, owner):
    class BrokenBlobStore:
        def put(self, key, data):
            raise StorageFailureError()

    service = FileService(FileRecordRepository(db_session), BrokenBlobStore())
    with pytest.raises(StorageFailureError):
        service.upload(b"data", "doc", None, owner)

    assert service.list_owned(owner) == []


def test_failed_record_write_discards_blob(files, owner, blob_store, monkeypatch):
    def broken_add(record):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(files.files, "add", broken_add)
    with pytest.raises(StorageFailureError):
        files.upload(b"data", "doc", None, owner)

    assert not any(path.is_file() for path in blob_store.root.rglob("*"))


def test_list_owned_only_returns_own_files(files, owner, stranger):
    mine = files.upload(b"mine", "mine", None, owner)
    files.upload(b"theirs", "theirs", None, stranger)

    assert [record.id for record in files.list_owned(owner)] == [mine.id]


def test_revoke_makes_code_unusable(files, owner):
    record = files.upload(b"hi\n", "note", None, owner)
    code = files.share(record.id, owner).short_code

    revoked = files.revoke_share(record.id, owner)

    assert revoked.short_code is None
    with pytest.raises(NotFoundError):
        files.resolve_public(code)


def test_reshare_issues_new_code(files, owner):
    record = files.upload(b"hi\n", "note", None, owner)
    first = files.share(record.id, owner).short_code
    files.revoke_share(record.id, owner)
    second = files.share(record.id, owner).short_code

    assert second != first
    with pytest.raises(NotFoundError):
        files.resolve_public(first)
    assert files.resolve_public(second).content == b"hi\n"


def test_non_owner_cannot_delete(files, owner, stranger, blob_store):
    record = files.upload(b"hi\n", "note", None, owner)

    with pytest.raises(AccessDeniedError):
        files.delete(record.id, stranger)

    assert [r.id for r in files.list_owned(owner)] == [record.id]
    assert blob_store.exists(record.storage_key)


@pytest.mark.parametrize("operation", ["share", "revoke_share", "get_owned"])
def test_non_owner_cannot_touch_sharing(files, owner, stranger, operation):
    record = files.upload(b"hi\n", "note", None, owner)

    with pytest.raises(AccessDeniedError):
        getattr(files, operation)(record.id, stranger)


@pytest.mark.parametrize("operation", ["delete", "share", "revoke_share", "get_owned"])
def test_unknown_file_is_not_found(files, owner, operation):
    with pytest.raises(NotFoundError):
        getattr(files, operation)(9999, owner)


def test_delete_removes_record_and_blob(files, owner, blob_store):
    record = files.upload(b"hi\n", "note", None, owner)
    code = files.share(record.id, owner).short_code

    files.delete(record.id, owner)

    assert files.list_owned(owner) == []
    assert not blob_store.exists(record.storage_key)
    with pytest.raises(NotFoundError):
        files.resolve_public(code)


def test_delete_with_missing_blob_still_removes_record(files, owner, blob_store):
    record = files.upload(b"hi\n", "note", None, owner)
    blob_store.delete_if_exists(record.storage_key)

    files.delete(record.id, owner)
    assert files.list_owned(owner) == []


def test_delete_survives_blob_store_failure(files, owner, monkeypatch):
    record = files.upload(b"hi\n", "note", None, owner)

    def broken_delete(key):
        raise StorageFailureError()

    monkeypatch.setattr(files.blobs, "delete_if_exists", broken_delete)
    files.delete(record.id, owner)

    assert files.list_owned(owner) == []


def test_resolve_with_missing_blob_is_not_found(files, owner, blob_store):
    record = files.upload(b"hi\n", "note", None, owner)
    code = files.share(record.id, owner).short_code
    blob_store.delete_if_exists(record.storage_key)

    with pytest.raises(NotFoundError):
        files.resolve_public(code)


@pytest.mark.parametrize("code", ["", "missing1", "nonexistent-code"])
def test_resolve_unknown_code(files, code):
    with pytest.raises(NotFoundError):
        files.resolve_public(code)


def test_share_retries_on_code_collision(files, owner, monkeypatch):
    codes = iter(["aaaaaaaa", "aaaaaaaa", "bbbbbbbb"])
    monkeypatch.setattr(file_service_module, "new_short_code", lambda: next(codes))

    first = files.upload(b"one", "one", None, owner)
    second = files.upload(b"two", "two", None, owner)

    assert files.share(first.id, owner).short_code == "aaaaaaaa"
    assert files.share(second.id, owner).short_code == "bbbbbbbb"
    assert files.resolve_public("aaaaaaaa").content == b"one"
    assert files.resolve_public("bbbbbbbb").content == b"two"


def test_share_gives_up_after_repeated_collisions(files, owner, monkeypatch):
    monkeypatch.setattr(file_service_module, "new_short_code", lambda: "aaaaaaaa")

    first = files.upload(b"one", "one", None, owner)
    second = files.upload(b"two", "two", None, owner)
    files.share(first.id, owner)

    with pytest.raises(StorageFailureError):
        files.share(second.id, owner)
    assert files.get_owned(second.id, owner).short_code is None


def test_assert_owner(owner, stranger, files):
    record = files.upload(b"x", "x", None, owner)

    assert_owner(record, owner)
    with pytest.raises(AccessDeniedError):
        assert_owner(record, stranger)


def delete_in_other_session(file_id):
    other = TestingSessionLocal()
    try:
        other.query(FileRecord).filter(FileRecord.id == file_id).delete()
        other.commit()
    finally:
        other.close()


def test_share_after_concurrent_delete_is_not_found(files, owner):
    record = files.upload(b"hi\n", "note", None, owner)
    delete_in_other_session(record.id)

    with pytest.raises(NotFoundError):
        files.share(record.id, owner)

    assert files.list_owned(owner) == []


def test_revoke_after_concurrent_delete_is_not_found(files, owner):
    record = files.upload(b"hi\n", "note", None, owner)
    code = files.share(record.id, owner).short_code
    delete_in_other_session(record.id)

    with pytest.raises(NotFoundError):
        files.revoke_share(record.id, owner)

    with pytest.raises(NotFoundError):
        files.resolve_public(code)


def test_failed_type_detection_writes_nothing(files, owner, blob_store, monkeypatch):
    def broken_from_buffer(data, mime=False):
        raise content_type_module.magic.MagicException("cannot load magic database")

    monkeypatch.setattr(content_type_module.magic, "from_buffer", broken_from_buffer)
    with pytest.raises(StorageFailureError):
        files.upload(b"hi\n", "note", None, owner)

    assert files.list_owned(owner) == []
    assert not any(path.is_file() for path in blob_store.root.rglob("*"))
