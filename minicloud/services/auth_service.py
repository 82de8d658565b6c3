import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError

from minicloud.errors import (AccountDisabledError, DuplicateEmailError, InvalidCredentialsError,
                              InvalidEmailFormatError, InvalidTokenError,
                              UserNotFoundError, WeakPasswordError)
from minicloud.models.user_model import User
from minicloud.repositories.user_repository import UserRepository
from minicloud.services.token_service import TokenService
from minicloud.utils.auth import hash_password, verify_password
from minicloud.utils.validators import is_valid_email, password_problems

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    token: str
    email: str
    user_id: int | None
    message: str


@dataclass
class Identity:
    email: str
    user_id: int
    user: User


class AuthService:
    """
    Register, log in and check bearer tokens.

    Composes the credential store, the password hasher and the token service.
    No session state is kept: the identity of a request comes from its token alone.
    """

    def __init__(self, users: UserRepository, tokens: TokenService):
        self.users = users
        self.tokens = tokens

    def register(self, email: str, password: str) -> AuthResult:
        # order matters: existence, then format, then strength
        if self.users.exists(email):
            raise DuplicateEmailError()

        if not is_valid_email(email):
            raise InvalidEmailFormatError()

        problems = password_problems(password)
        if problems:
            raise WeakPasswordError("; ".join(problems))

        try:
            user = self.users.add(User(
                email=email,
                password_hash=hash_password(password),
                is_active=True,
            ))
        except IntegrityError as error:
            # another registration for the same email committed first
            self.users.rollback()
            raise DuplicateEmailError() from error
        logger.info("Registered user %s", user.id)

        return AuthResult(token=self.tokens.issue(user.email), email=user.email, user_id=user.id,
                          message="User registered successfully")

    def login(self, email: str, password: str) -> AuthResult:
        user = self.users.get_by_email(email)
        if user is None or not verify_password(password or "", user.password_hash):
            logger.info("Rejected login: invalid credentials")
            raise InvalidCredentialsError()

        # only reported to callers who already proved the password
        if not user.is_active:
            logger.info("Rejected login for disabled user %s", user.id)
            raise AccountDisabledError()

        user.last_login = datetime.now(timezone.utc)
        self.users.save(user)
        logger.info("User %s logged in", user.id)

        return AuthResult(token=self.tokens.issue(user.email), email=user.email, user_id=user.id,
                          message="Login successful")

    def validate(self, token: str) -> Identity:
        if not self.tokens.is_valid(token):
            raise InvalidTokenError()

        email = self.tokens.parse_subject(token)
        user = self.users.get_by_email(email)
        if user is None or not user.is_active:
            raise UserNotFoundError()

        return Identity(email=user.email, user_id=user.id, user=user)

    def refresh(self, token: str) -> AuthResult:
        """
        Swap a valid token for a fresh one.

        The user behind the token is not looked up again, so a disabled account
        can keep refreshing until its current token expires.
        """
        new_token = self.tokens.refresh(token)
        return AuthResult(token=new_token, email=self.tokens.parse_subject(new_token), user_id=None,
                          message="Token refreshed successfully")

