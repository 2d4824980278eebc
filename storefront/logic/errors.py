"""Domain exceptions.

Each carries the HTTP status and problem code it maps to, so route modules
raise and the global handler renders; no status literals live in routes.
"""

from __future__ import annotations


class StorefrontError(Exception):
    status: int = 500
    title: str = "Internal Server Error"
    code: str = "INTERNAL_ERROR"
    default_detail: str = "An unexpected error occurred"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class AuthenticationFailed(StorefrontError):
    status = 401
    title = "Unauthorized"
    code = "AUTH_INVALID_CREDENTIALS"
    default_detail = "Invalid email or password."


class Unauthorized(StorefrontError):
    status = 401
    title = "Unauthorized"
    code = "AUTH_TOKEN_INVALID"
    default_detail = "No valid session. Please log in."


class WrongAnswer(StorefrontError):
    status = 401
    title = "Unauthorized"
    code = "CAPTCHA_WRONG_ANSWER"
    default_detail = "Wrong answer to CAPTCHA. Please try again."


class UnsupportedFormat(StorefrontError):
    status = 400
    title = "Bad Request"
    code = "EXPORT_FORMAT_UNSUPPORTED"
    default_detail = "Requested export format is not supported."


class NotFound(StorefrontError):
    status = 404
    title = "Not Found"
    code = "RESOURCE_NOT_FOUND"
    default_detail = "Resource not found."


class BasketAccessDenied(StorefrontError):
    status = 401
    title = "Unauthorized"
    code = "BASKET_ACCESS_DENIED"
    default_detail = "Basket belongs to another user."


class BasketEmpty(StorefrontError):
    status = 400
    title = "Bad Request"
    code = "BASKET_EMPTY"
    default_detail = "Basket is empty."


class AggregationFailed(StorefrontError):
    status = 500
    title = "Internal Server Error"
    code = "EXPORT_AGGREGATION_FAILED"
    default_detail = "Data export could not be assembled. Please try again later."


__all__ = [
    "StorefrontError",
    "AuthenticationFailed",
    "Unauthorized",
    "WrongAnswer",
    "UnsupportedFormat",
    "NotFound",
    "BasketAccessDenied",
    "BasketEmpty",
    "AggregationFailed",
]
