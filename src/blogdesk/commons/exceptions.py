"""
Common/base exceptions.

These are intended to be subclassed by feature-level exceptions in
`<feature>/exceptions.py`. `message` is a stable, machine-readable code;
`details` is human-readable text. Both may cross the HTTP boundary.
"""


class BaseServiceException(Exception):
    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class BaseServiceValidationException(BaseServiceException):
    def __init__(
        self,
        message: str,
        details: str | None = None,
        errors: list[str] | None = None,
    ):
        self.errors = list(errors or [])
        super().__init__(message, details)


class BaseServiceUnauthorizedException(BaseServiceException):
    pass


class BaseServiceForbiddenException(BaseServiceException):
    pass


class BaseServiceNotFoundException(BaseServiceException):
    pass


class BaseServiceConflictException(BaseServiceException):
    pass


class BaseServiceRateLimitedException(BaseServiceException):
    def __init__(
        self, message: str, details: str | None = None, retry_after_s: int = 0
    ):
        self.retry_after_s = retry_after_s
        super().__init__(message, details)


class BaseCoreException(Exception):
    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)
