"""
Ownership checks and the short link lifecycle for uploaded files.

A record is either private (``short_code`` is None) or shared. ``share`` and
``revoke_share`` move it between the two states, and only shared records can be
fetched through ``resolve_public``. Deletion is allowed from both states.
"""
import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from minicloud.errors import (AccessDeniedError, InvalidRequestError, NotFoundError,
                              StorageFailureError)
from minicloud.models.file_model import FileRecord
from minicloud.models.user_model import User
from minicloud.repositories.file_repository import FileRecordRepository
from minicloud.storage.blob_store import LocalBlobStore
from minicloud.utils.content_type import disposition_for, sniff_content_type

logger = logging.getLogger(__name__)

SHORT_CODE_LENGTH = 8
MAX_SHORT_CODE_ATTEMPTS = 5


@dataclass
class PublicFile:
    content: bytes
    content_type: str
    disposition: str
    filename: str


def new_storage_key(owner_id: int) -> str:
    return f"{owner_id}/{uuid.uuid4().hex}"


def new_short_code() -> str:
    return uuid.uuid4().hex[:SHORT_CODE_LENGTH]


def assert_owner(record: FileRecord, requester: User) -> None:
    if record.owner_id != requester.id:
        raise AccessDeniedError()


class FileService:

    def __init__(self, files: FileRecordRepository, blobs: LocalBlobStore):
        self.files = files
        self.blobs = blobs

    def _owned(self, file_id: int, requester: User) -> FileRecord:
        record = self.files.get(file_id)
        if record is None:
            raise NotFoundError()
        assert_owner(record, requester)
        return record

    def upload(self, data: bytes, title: str, description: str | None, owner: User) -> FileRecord:
        title = (title or "").strip()
        if not title:
            raise InvalidRequestError("Title is required")

        content_type = sniff_content_type(data)
        key = new_storage_key(owner.id)
        # blob first: a record must never point at content that was not written
        self.blobs.put(key, data)

        record = FileRecord(
            owner_id=owner.id,
            title=title,
            description=description or None,
            storage_key=key,
            content_type=content_type,
            size=len(data),
        )
        try:
            record = self.files.add(record)
        except SQLAlchemyError as error:
            self.files.rollback()
            self._discard_blob(key)
            raise StorageFailureError("Could not save file record") from error

        logger.info("User %s uploaded file %s (%s, %d bytes)", owner.id, record.id,
                    record.content_type, record.size)
        return record

    def list_owned(self, owner: User) -> list[FileRecord]:
        return self.files.list_by_owner(owner.id)

    def get_owned(self, file_id: int, requester: User) -> FileRecord:
        return self._owned(file_id, requester)

    def delete(self, file_id: int, requester: User) -> None:
        record = self._owned(file_id, requester)

        # an orphaned blob is acceptable, an unreachable record is not
        self._discard_blob(record.storage_key)

        self.files.delete(record)
        logger.info("User %s deleted file %s", requester.id, file_id)

    def share(self, file_id: int, requester: User) -> FileRecord:
        record = self._owned(file_id, requester)

        for _ in range(MAX_SHORT_CODE_ATTEMPTS):
            code = new_short_code()
            if self.files.short_code_taken(code):
                continue

            record.short_code = code
            try:
                record = self.files.save(record)
            except IntegrityError:
                self.files.rollback()
                logger.warning("Short code collision for file %s, retrying", file_id)
                record = self._owned(file_id, requester)
                continue
            except StaleDataError as error:
                self.files.rollback()
                raise NotFoundError() from error

            logger.info("User %s shared file %s", requester.id, file_id)
            return record

        raise StorageFailureError("Could not generate a unique share code")

    def revoke_share(self, file_id: int, requester: User) -> FileRecord:
        record = self._owned(file_id, requester)
        record.short_code = None
        try:
            record = self.files.save(record)
        except StaleDataError as error:
            self.files.rollback()
            raise NotFoundError() from error

        logger.info("User %s revoked sharing of file %s", requester.id, file_id)
        return record

    def resolve_public(self, short_code: str) -> PublicFile:
        record = self.files.get_by_short_code(short_code)
        if record is None:
            raise NotFoundError()

        try:
            content = self.blobs.get(record.storage_key)
        except NotFoundError:
            logger.warning("Shared file %s has no content in the blob store", record.id)
            raise

        return PublicFile(
            content=content,
            content_type=record.content_type,
            disposition=disposition_for(record.content_type),
            filename=record.title,
        )

    def _discard_blob(self, key: str) -> None:
        try:
            self.blobs.delete_if_exists(key)
        except StorageFailureError:
            logger.warning("Could not remove blob %s, leaving it orphaned", key)
