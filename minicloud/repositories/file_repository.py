from sqlalchemy.orm import Session

from minicloud.models.file_model import FileRecord


class FileRecordRepository:
    """File metadata store backed by the ``file_records`` table.

    Every write commits before returning, so a caller that gets a record back
    can rely on other requests seeing it.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, file_id: int) -> FileRecord | None:
        return self.db.get(FileRecord, file_id)

    def list_by_owner(self, owner_id: int) -> list[FileRecord]:
        return (self.db.query(FileRecord)
                .filter(FileRecord.owner_id == owner_id)
                .order_by(FileRecord.id)
                .all())

    def get_by_short_code(self, short_code: str) -> FileRecord | None:
        if not short_code:
            return None
        return self.db.query(FileRecord).filter(FileRecord.short_code == short_code).first()

    def short_code_taken(self, short_code: str) -> bool:
        return self.get_by_short_code(short_code) is not None

    def add(self, record: FileRecord) -> FileRecord:
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def save(self, record: FileRecord) -> FileRecord:
        self.db.add(record)
        self.db.commit()
        return record

    def delete(self, record: FileRecord) -> None:
        self.db.delete(record)
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
