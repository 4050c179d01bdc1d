"""
jsfetch.runtime.results

Response model returned to callers, and the mapping from fetch outcome to
response.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Optional

from requests.structures import CaseInsensitiveDict

X_RENDER_TIMEOUT = "X-Render-Timeout"

STATUS_NO_FETCH = 0
STATUS_CAPTURED = 200


class Outcome(str, Enum):
    OK = "ok"
    RENDER_TIMEOUT = "render_timeout"
    INTERRUPTED = "interrupted"
    NAVIGATION_FAILED = "navigation_failed"
    SESSION_UNAVAILABLE = "session_unavailable"

    @property
    def captured(self) -> bool:
        return self in (Outcome.OK, Outcome.RENDER_TIMEOUT)


def _frozen_headers(headers: Mapping[str, str] | None = None) -> Mapping[str, str]:
    return MappingProxyType(CaseInsensitiveDict(headers or {}))


@dataclass(frozen=True)
class Response:
    """
    Immutable result of one fetch.

    `status_code` is synthetic: 200 means a DOM was captured, 0 means nothing
    was fetched. `headers` is read-only and case-insensitive.
    """

    final_url: str
    status_code: int = STATUS_NO_FETCH
    headers: Mapping[str, str] = field(default_factory=_frozen_headers)
    body: bytes = b""
    outcome: Outcome = Outcome.NAVIGATION_FAILED
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status_code == STATUS_CAPTURED

    @property
    def render_timed_out(self) -> bool:
        return self.headers.get(X_RENDER_TIMEOUT) == "true"

    def get_header(self, name: str) -> Optional[str]:
        return self.headers.get(name)


def assemble_response(
    outcome: Outcome,
    *,
    final_url: str,
    body: bytes | None = None,
    elapsed_ms: float = 0.0,
) -> Response:
    """
    Map an outcome to the response handed back to the caller.

    Ok and RenderTimeout carry the extracted bytes with status 200; every
    other outcome is status 0 with an empty body, whatever `body` holds.
    """
    if not outcome.captured:
        return Response(
            final_url=final_url,
            status_code=STATUS_NO_FETCH,
            headers=_frozen_headers(),
            body=b"",
            outcome=outcome,
            elapsed_ms=elapsed_ms,
        )

    headers: dict[str, str] = {}
    if outcome is Outcome.RENDER_TIMEOUT:
        headers[X_RENDER_TIMEOUT] = "true"

    return Response(
        final_url=final_url,
        status_code=STATUS_CAPTURED,
        headers=_frozen_headers(headers),
        body=bytes(body or b""),
        outcome=outcome,
        elapsed_ms=elapsed_ms,
    )
