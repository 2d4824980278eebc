"""Login and captcha bodies."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str
    password: str


class Authentication(BaseModel):
    token: str
    bid: int | None = None
    umail: str


class LoginResponse(BaseModel):
    authentication: Authentication


class ImageCaptcha(BaseModel):
    image: str
    answer: str = Field(min_length=1)


__all__ = ["LoginRequest", "Authentication", "LoginResponse", "ImageCaptcha"]
