from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from minicloud.database import get_db
from minicloud.errors import InvalidTokenFormatError
from minicloud.models.user_model import User
from minicloud.repositories.file_repository import FileRecordRepository
from minicloud.repositories.user_repository import UserRepository
from minicloud.services.auth_service import AuthService
from minicloud.services.file_service import FileService
from minicloud.services.token_service import TokenService
from minicloud.storage.blob_store import LocalBlobStore


def get_token_service() -> TokenService:
    return TokenService.from_env()

def get_blob_store() -> LocalBlobStore:
    return LocalBlobStore.from_env()

def get_auth_service(db: Session = Depends(get_db),
                     tokens: TokenService = Depends(get_token_service)) -> AuthService:
    return AuthService(UserRepository(db), tokens)

def get_file_service(db: Session = Depends(get_db),
                     blobs: LocalBlobStore = Depends(get_blob_store)) -> FileService:
    return FileService(FileRecordRepository(db), blobs)

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> str:
    # missing header, other scheme or empty token
    if credentials is None or not credentials.credentials.strip():
        raise InvalidTokenFormatError()
    return credentials.credentials.strip()


def get_current_user(token: str = Depends(get_bearer_token),
                     auth: AuthService = Depends(get_auth_service)) -> User:
    return auth.validate(token).user
