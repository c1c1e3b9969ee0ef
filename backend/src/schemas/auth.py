"""Pydantic schemas for signup/signin endpoints."""
from pydantic import BaseModel, EmailStr, Field


class AuthCredentials(BaseModel):
    """Email/password pair used by both signup and signin."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=1024)


class AccessTokenResponse(BaseModel):
    """Bearer token returned after a successful signup or signin."""

    access_token: str
