"""Domain errors raised inside the fetcher.

Only ConfigError crosses the public fetch boundary. The others are raised by
the session acquirer and the DOM extractor and classified into an Outcome by
the orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ErrorInfo:
    code: str
    message: str
    detail: Optional[str] = None


class JsFetchError(Exception):
    """Base class for all fetcher errors."""

    code = "JSFETCH_ERROR"

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.info = ErrorInfo(code=self.code, message=message, detail=detail)


class ConfigError(JsFetchError):
    """Raised when configuration or inputs are invalid, before any I/O."""

    code = "CONFIG_ERROR"


class SessionUnavailable(JsFetchError):
    """Raised when the hub is unreachable, malformed, or refuses the profile."""

    code = "SESSION_UNAVAILABLE"


class NavigationFailed(JsFetchError):
    code = "NAVIGATION_FAILED"


class ExtractionFailed(JsFetchError):
    code = "EXTRACTION_FAILED"
