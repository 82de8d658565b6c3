from minicloud.database import Base
from sqlalchemy import Column, Integer, String, DateTime, func, BIGINT, ForeignKey
from sqlalchemy.orm import relationship


class FileRecord(Base):
    __tablename__ = "file_records"
    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    storage_key = Column(String, unique=True, nullable=False)
    content_type = Column(String, nullable=False)
    size = Column(BIGINT, nullable=False)
    short_code = Column(String(16), unique=True, nullable=True, index=True)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", back_populates="files")

    @property
    def shared(self) -> bool:
        return self.short_code is not None
