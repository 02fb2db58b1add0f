"""Project-native typed exceptions for Beanstalk status query failures."""

from __future__ import annotations


class BeanstalkQueryError(Exception):
    """Base exception for adapter-level Beanstalk query failures.

    Attributes:
        error_code: Optional upstream AWS error code.
    """

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class BeanstalkConnectionError(BeanstalkQueryError, ConnectionError):
    """Transport-level connectivity failure during Beanstalk API communication."""


class BeanstalkThrottledError(BeanstalkConnectionError):
    """Upstream throttled the request; fatal because HTTP-level retry is disabled."""


class BeanstalkAuthorizationError(BeanstalkQueryError, PermissionError):
    """Upstream rejected the caller identity or its permissions."""


class BeanstalkCredentialsError(BeanstalkAuthorizationError):
    """No usable credentials were found for signing the request."""


class BeanstalkRequestError(BeanstalkQueryError, ValueError):
    """Upstream rejected the request parameters."""


class BeanstalkResponseError(BeanstalkQueryError, RuntimeError):
    """Upstream response did not match the expected contract."""
