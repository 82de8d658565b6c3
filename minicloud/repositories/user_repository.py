from sqlalchemy import func
from sqlalchemy.orm import Session

from minicloud.models.user_model import User


class UserRepository:
    """Credential store backed by the ``users`` table."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> User | None:
        if not email:
            return None
        return self.db.query(User).filter(func.lower(User.email) == func.lower(email)).first()

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def add(self, user: User) -> User:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save(self, user: User) -> User:
        self.db.commit()
        return user

    def rollback(self) -> None:
        self.db.rollback()
