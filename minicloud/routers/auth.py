from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from minicloud.dependencies import get_auth_service, get_bearer_token
from minicloud.schemas.user_schema import (AuthResponse, ErrorResponse, MessageResponse,
                                           TokenValidation, UserCreate, UserLogin)
from minicloud.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", summary="new user registration", response_model=AuthResponse,
             description=
             """
                Creates a new user based on the data provided. The email address must be unique,
                and the password is stored in hashed form. Returns a bearer token for the new account.
             """,
             responses={
                 409: {"model": ErrorResponse, "description": "Email already registered"},
                 400: {"model": ErrorResponse, "description": "Invalid email format or weak password"},
             },
             status_code=status.HTTP_201_CREATED)
def register_user(user: UserCreate, auth: AuthService = Depends(get_auth_service)):
    result = auth.register(user.email, user.password)
    return AuthResponse(token=result.token, email=result.email, user_id=result.user_id, message=result.message)


@router.post("/login", response_model=AuthResponse, summary="User login to account",
             description="""
                User logs into the account with email and password and receives a bearer token.
             """,
             responses={
                 401: {"model": ErrorResponse, "description": "Invalid credentials"},
                 403: {"model": ErrorResponse, "description": "Account is disabled"},
                 404: {"model": ErrorResponse, "description": "User not found"},
             })
def login_user(user: UserLogin, auth: AuthService = Depends(get_auth_service)):
    result = auth.login(user.email, user.password)
    return AuthResponse(token=result.token, email=result.email, user_id=result.user_id, message=result.message)


@router.post("/validate", response_model=TokenValidation, summary="Checks a bearer token",
             responses={
                 400: {"model": ErrorResponse, "description": "Invalid token format"},
                 401: {"model": ErrorResponse, "description": "Invalid token"},
                 404: {"model": ErrorResponse, "description": "User not found"},
             })
def validate_token(token: str = Depends(get_bearer_token), auth: AuthService = Depends(get_auth_service)):
    identity = auth.validate(token)
    return TokenValidation(valid=True, email=identity.email, user_id=identity.user_id)


@router.post("/refresh", response_model=AuthResponse, response_model_exclude_none=True,
             summary="Issues a new token for a valid one",
             description="""
                Returns a new token with a fresh expiry. The presented token stays valid until it expires.
             """,
             responses={
                 400: {"model": ErrorResponse, "description": "Invalid token format"},
                 401: {"model": ErrorResponse, "description": "Invalid token"},
             })
def refresh_token(token: str = Depends(get_bearer_token), auth: AuthService = Depends(get_auth_service)):
    result = auth.refresh(token)
    return AuthResponse(token=result.token, email=result.email, user_id=result.user_id, message=result.message)


@router.post("/logout", response_model=MessageResponse, summary="Logging out of your user account",
             description="""
                Tokens are not stored on the server; the client discards its token.
             """)
def logout():
    return {"message": "Logout successful"}


@router.get("/health", summary="Service status")
def health_check():
    return {
        "status": "UP",
        "service": "Authentication Service",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
