"""Canonical AWS error-code semantics for Beanstalk adapter error routing."""

from __future__ import annotations

from enum import Enum
from typing import Final


class BeanstalkErrorCategory(str, Enum):
    """Adapter-level category derived from one AWS service error code."""

    AUTHORIZATION = "authorization"
    THROTTLED = "throttled"
    REQUEST = "request"


BEANSTALK_AUTHORIZATION_CODES: Final[frozenset[str]] = frozenset(
    {
        "AccessDenied",
        "AccessDeniedException",
        "ExpiredToken",
        "ExpiredTokenException",
        "IncompleteSignature",
        "InsufficientPrivilegesException",
        "InvalidAccessKeyId",
        "InvalidClientTokenId",
        "MissingAuthenticationToken",
        "SignatureDoesNotMatch",
        "UnauthorizedOperation",
        "UnrecognizedClientException",
    }
)

BEANSTALK_THROTTLING_CODES: Final[frozenset[str]] = frozenset(
    {
        "Throttling",
        "ThrottlingException",
        "ThrottledException",
        "RequestLimitExceeded",
        "TooManyRequestsException",
    }
)


def beanstalk_error_category(error_code: str | None) -> BeanstalkErrorCategory:
    """Return adapter error category for one AWS error code.

    Args:
        error_code: AWS `Error.Code` value; None when the response carried no code.

    Returns:
        BeanstalkErrorCategory: Category used to select the adapter exception type.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    normalized_code = (error_code or "").strip()
    if normalized_code in BEANSTALK_AUTHORIZATION_CODES:
        return BeanstalkErrorCategory.AUTHORIZATION
    if normalized_code in BEANSTALK_THROTTLING_CODES:
        return BeanstalkErrorCategory.THROTTLED
    return BeanstalkErrorCategory.REQUEST
