"""
Pydantic schemas for authentication requests and responses.
"""

from pydantic import BaseModel, Field
from showcase.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login with a username or an email address."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Username or email address",
        examples=["owner"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=72,
        description="User's password",
        examples=["securepassword123"]
    )


class TokenResponse(BaseModel):
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration time in seconds", examples=[1800])


class LoginResponse(TokenResponse):
    user: UserResponse


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., description="JWT refresh token")


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
