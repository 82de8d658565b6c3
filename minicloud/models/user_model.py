from sqlalchemy import Column, Integer, String, DateTime, func, Boolean, Index
from minicloud.database import Base
from sqlalchemy.orm import relationship


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)

    files = relationship("FileRecord", back_populates="owner")


# lookups ignore case, so uniqueness has to as well
Index("uq_users_email_lower", func.lower(User.email), unique=True)
