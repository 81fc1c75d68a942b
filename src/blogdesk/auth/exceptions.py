from __future__ import annotations

from blogdesk.commons.exceptions import (
    BaseServiceConflictException,
    BaseServiceException,
    BaseServiceForbiddenException,
    BaseServiceNotFoundException,
    BaseServiceRateLimitedException,
    BaseServiceUnauthorizedException,
    BaseServiceValidationException,
)

INVALID_CREDENTIALS = "invalid_credentials"
INVALID_CREDENTIALS_DETAILS = "Invalid credentials"


class AuthServiceException(BaseServiceException):
    pass


class AuthServiceValidationException(BaseServiceValidationException):
    pass


class AuthServiceAuthenticationException(BaseServiceUnauthorizedException):
    pass


class AuthServiceForbiddenException(BaseServiceForbiddenException):
    pass


class AuthServiceNotFoundException(BaseServiceNotFoundException):
    pass


class AuthServiceConflictException(BaseServiceConflictException):
    pass


class AuthServiceRateLimitedException(BaseServiceRateLimitedException):
    pass


class EmailAlreadyRegistered(Exception):
    """Raised by user repositories when the unique email constraint fires."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(email)
