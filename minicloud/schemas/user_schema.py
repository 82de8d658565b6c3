from pydantic import BaseModel, Field
from typing import Optional


# email and password are checked by AuthService so that the
# duplicate/format/strength checks run in a fixed order
class UserCreate(BaseModel):
    email: str = Field(..., examples=["user@example.com"], description="Unique email of the user")
    password: str = Field(..., examples=["Password1"], description="Password for the user account")

class UserLogin(BaseModel):
    email: str = Field(..., examples=["user@example.com"], description="Email of the user")
    password: str = Field(..., examples=["Password1"], description="Password for the user account")

class AuthResponse(BaseModel):
    token: str = Field(..., examples=["eyJhbGciOiJIUzI1NiIsInR"], description="JWT bearer token")
    email: str = Field(..., examples=["user@example.com"], description="Email the token was issued for")
    user_id: Optional[int] = Field(None, serialization_alias="userId", description="User identification number")
    message: str = Field(..., examples=["Login successful"])

class TokenValidation(BaseModel):
    valid: bool = Field(True)
    email: str = Field(..., examples=["user@example.com"])
    user_id: int = Field(..., serialization_alias="userId")

class MessageResponse(BaseModel):
    message: str = Field(..., examples=["Operation completed successfully"],
                         description="Message displayed after the command has been successfully executed")

class ErrorResponse(BaseModel):
    error: str = Field(..., examples=["Invalid credentials"])
    kind: str = Field(..., examples=["InvalidCredentials"])
