"""
Stateless signed identity tokens.

Tokens are JWTs carrying ``sub`` (the user's email), ``iat``, ``exp`` and a
random ``jti``. Nothing is stored server side, so a token can only stop being
valid by reaching its expiry.
"""
import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import uuid4

from jose import JWTError, jwt

from minicloud.errors import InvalidTokenError, MalformedTokenError

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "HS256"
DEFAULT_EXPIRE_HOURS = 24


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:

    def __init__(self, secret_key: str, algorithm: str = DEFAULT_ALGORITHM,
                 expires_delta: timedelta = timedelta(hours=DEFAULT_EXPIRE_HOURS),
                 clock: Callable[[], datetime] = utc_now):
        if not secret_key:
            raise ValueError("Token secret key must not be empty")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta
        self._clock = clock

    @classmethod
    def from_env(cls) -> "TokenService":
        return cls(
            secret_key=os.getenv("SECRET_KEY", "change-me-in-production"),
            algorithm=os.getenv("ALGORITHM", DEFAULT_ALGORITHM),
            expires_delta=timedelta(hours=float(os.getenv("TOKEN_EXPIRE_HOURS", DEFAULT_EXPIRE_HOURS))),
        )

    def issue(self, subject: str) -> str:
        now = self._clock()
        claims = {
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int((now + self.expires_delta).timestamp()),
            "jti": uuid4().hex,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def _decode(self, token: str) -> dict:
        # expiry is checked against our own clock in is_valid()
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm],
                              options={"verify_exp": False})
        except (JWTError, AttributeError, TypeError) as error:
            raise MalformedTokenError() from error

    def parse_subject(self, token: str) -> str:
        """Return the ``sub`` claim of a correctly signed token, expired or not."""
        subject = self._decode(token).get("sub")
        if not isinstance(subject, str) or not subject:
            raise MalformedTokenError("Token has no subject")
        return subject

    def is_valid(self, token: str) -> bool:
        try:
            payload = self._decode(token)
        except MalformedTokenError:
            return False

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or not payload.get("sub"):
            return False
        return self._clock().timestamp() < exp

    def refresh(self, token: str) -> str:
        """
        Issue a new token for the subject of a still valid one.

        The old token is left alone and stays usable until its own expiry.
        """
        if not self.is_valid(token):
            raise InvalidTokenError()
        return self.issue(self.parse_subject(token))
