"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``minicloud.main`` converts any of them into a JSON
body of the form ``{"error": <message>, "kind": <kind>}`` with the matching
status code, so routers never have to catch them.
"""
from fastapi import status


class MiniCloudError(Exception):
    kind = "MiniCloudError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class DuplicateEmailError(MiniCloudError):
    kind = "DuplicateEmail"
    status_code = status.HTTP_409_CONFLICT
    default_message = "User with this email already exists"


class InvalidEmailFormatError(MiniCloudError):
    kind = "InvalidEmailFormat"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid email format"


class WeakPasswordError(MiniCloudError):
    kind = "WeakPassword"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = ("Password must be at least 8 characters long and contain at least one "
                       "uppercase letter, one lowercase letter, and one number")


class InvalidCredentialsError(MiniCloudError):
    kind = "InvalidCredentials"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class AccountDisabledError(MiniCloudError):
    kind = "AccountDisabled"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Account is disabled"


class InvalidTokenError(MiniCloudError):
    kind = "InvalidToken"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid token"


class MalformedTokenError(InvalidTokenError):
    kind = "MalformedToken"
    default_message = "Malformed token"


class InvalidTokenFormatError(MiniCloudError):
    kind = "InvalidTokenFormat"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid token format"


class UserNotFoundError(MiniCloudError):
    kind = "UserNotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class NotFoundError(MiniCloudError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "File not found"


class AccessDeniedError(MiniCloudError):
    kind = "AccessDenied"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class StorageFailureError(MiniCloudError):
    kind = "StorageFailure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Storage failure"


class InvalidRequestError(MiniCloudError):
    kind = "InvalidRequest"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"
