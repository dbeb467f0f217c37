"""Error taxonomy and HTTP failure classification for elevenlabs-ttv."""

import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    REQUEST = "request"
    API = "api"
    PARSE = "parse"
    AUTHENTICATION = "authentication"
    RATE_LIMITED = "rate_limited"
    QUOTA_EXCEEDED = "quota_exceeded"
    VALIDATION = "validation"


EXIT_CODES = {
    ErrorKind.VALIDATION: 1,
    ErrorKind.REQUEST: 2,
    ErrorKind.API: 3,
    ErrorKind.PARSE: 4,
    ErrorKind.AUTHENTICATION: 5,
    ErrorKind.RATE_LIMITED: 6,
    ErrorKind.QUOTA_EXCEEDED: 7,
}

_LABELS = {
    ErrorKind.REQUEST: "Request failed",
    ErrorKind.PARSE: "Failed to parse response",
    ErrorKind.AUTHENTICATION: "Authentication failed",
    ErrorKind.QUOTA_EXCEEDED: "Quota exceeded",
    ErrorKind.VALIDATION: "Validation error",
}


class ElevenLabsTTVError(Exception):
    """Single error type for every failure the client can report.

    ``kind`` tells the failures apart; ``status`` is set for failures that
    came from an HTTP response and ``retry_after`` only for rate limiting.
    The underlying transport or decode error, when there is one, is chained
    as ``__cause__``.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status: Optional[int] = None,
        retry_after: Optional[int] = None,
    ):
        self.kind = kind
        self.message = message
        self.status = status
        self.retry_after = retry_after
        super().__init__(self._describe())

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.kind]

    def _describe(self) -> str:
        if self.kind is ErrorKind.API:
            return f"API error ({self.status}): {self.message}"
        if self.kind is ErrorKind.RATE_LIMITED:
            if self.retry_after is not None:
                return f"Rate limit exceeded (retry in {self.retry_after}s): {self.message}"
            return f"Rate limit exceeded: {self.message}"
        return f"{_LABELS[self.kind]}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, status={self.status!r}, "
            f"retry_after={self.retry_after!r}, message={self.message!r})"
        )


def parse_retry_after(
    value: Optional[str], now: Optional[datetime] = None
) -> Optional[int]:
    """Read a ``Retry-After`` header as whole seconds.

    Both forms are accepted: delta-seconds, and an HTTP date, which is measured
    against ``now`` (current UTC time by default) and rounded up. A date in the
    past gives 0. Unparseable values give None.
    """
    if value is None:
        return None
    value = value.strip()
    if value.isdigit():
        return int(value)

    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0, math.ceil((when - now).total_seconds()))


def classify_failure(
    status: Optional[int],
    body: str = "",
    retry_after: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ElevenLabsTTVError:
    """Map a failed exchange to its error kind.

    Args:
        status: HTTP status code, or None when no response was received
        body: Raw response body text
        retry_after: Raw ``Retry-After`` header value, if the server sent one
        now: Reference time for HTTP-date ``Retry-After`` values

    Returns:
        The classified error (never raised here)
    """
    if status is None:
        return ElevenLabsTTVError(ErrorKind.REQUEST, body or "no response received")
    if status == 401:
        return ElevenLabsTTVError(
            ErrorKind.AUTHENTICATION, body or "Invalid API key", status=status
        )
    if status == 402:
        return ElevenLabsTTVError(
            ErrorKind.QUOTA_EXCEEDED, body or "Insufficient credits", status=status
        )
    if status == 429:
        return ElevenLabsTTVError(
            ErrorKind.RATE_LIMITED,
            body or "Too many requests",
            status=status,
            retry_after=parse_retry_after(retry_after, now),
        )
    return ElevenLabsTTVError(ErrorKind.API, body, status=status)


def request_failure(error: Exception) -> ElevenLabsTTVError:
    return ElevenLabsTTVError(ErrorKind.REQUEST, str(error) or type(error).__name__)


def parse_failure(error: Exception) -> ElevenLabsTTVError:
    return ElevenLabsTTVError(ErrorKind.PARSE, str(error))


def validation_failure(message: str) -> ElevenLabsTTVError:
    return ElevenLabsTTVError(ErrorKind.VALIDATION, message)
