"""Exception hierarchy for the AQS query client.

Validation errors are raised before any request leaves the process and also
subclass ``ValueError``. Transport and remote errors carry enough context
(status code, url, header messages) for callers to decide what to do next.
"""

from __future__ import annotations

from typing import Optional, Sequence


class AQSError(Exception):
    """Base class for every error raised by this package."""


class AQSValidationError(AQSError, ValueError):
    """A query argument was rejected locally; nothing was sent."""


class InvalidDateFormat(AQSValidationError):
    """A date string is not 8 characters or does not parse as YYYYMMDD."""


class RangeOrderError(AQSValidationError):
    """A begin date falls after its end date."""


class CrossYearError(AQSValidationError):
    """bdate and edate belong to different calendar years."""


class IncompletePairError(AQSValidationError):
    """Only one of cbdate/cedate was supplied."""


class ParamCountError(AQSValidationError):
    """The number of parameter codes is outside 1-5."""


class TooManyParamsError(ParamCountError):
    """More than five parameter codes in a single request."""


class UnknownEndpointError(AQSValidationError):
    """The endpoint selector is not one of the five known selectors."""


class UnknownServiceError(AQSValidationError):
    """The service name is not sampleData, dailyData or annualData."""


class MissingCredentialsError(AQSError, ValueError):
    """No email or key could be found for the request."""


class TransportError(AQSError):
    """The HTTP exchange failed (network, timeout or non-2xx status)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class MalformedResponseError(AQSError):
    """The body was not JSON or lacked the Header/Data sections."""


class AQSRemoteError(AQSError):
    """AQS answered but reported the request as failed in its header."""

    def __init__(self, status: str, messages: Sequence[str] = (), url: Optional[str] = None) -> None:
        self.status = status
        self.messages = list(messages)
        self.url = url
        detail = "; ".join(self.messages) if self.messages else "no error detail"
        super().__init__(f"AQS request failed with status {status!r}: {detail}")
