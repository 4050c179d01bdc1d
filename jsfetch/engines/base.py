"""
jsfetch.engines.base

Engine interface + the pieces of the fetch state machine that do not depend
on whether the caller is sync or async.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from jsfetch.config.loader import resolve_config
from jsfetch.config.schema import FetchConfig
from jsfetch.monitoring.events import emit_event
from jsfetch.monitoring.logging import ContextAdapter, with_context
from jsfetch.runtime.results import Outcome, Response, assemble_response

from .capabilities import CapabilityProfile, build_capabilities
from .session import SessionAcquirer
from .timing import TimingPlan, plan_timing

logger = logging.getLogger("jsfetch.engines")

FILE_SCHEME = "file://"


def normalize_url(url: str) -> str:
    """Give file URLs an empty authority: file://tmp/x -> file:///tmp/x."""
    url = str(url)
    if url.startswith(FILE_SCHEME) and not url.startswith(FILE_SCHEME + "/"):
        return FILE_SCHEME + "/" + url[len(FILE_SCHEME):]
    return url


def is_file_url(url: str) -> bool:
    return url.startswith(FILE_SCHEME)


@dataclass(frozen=True)
class FetchPlan:
    """Everything decided before the first network call."""

    url: str
    profile: CapabilityProfile
    timing: TimingPlan
    started_at: float

    @property
    def applies_page_load_ceiling(self) -> bool:
        # file pages have no transport to stall on
        return self.timing.page_load_ms > 0 and not is_file_url(self.url)


@dataclass(frozen=True)
class StepResult:
    outcome: Outcome
    final_url: str
    body: Optional[bytes] = None
    error: Optional[str] = None


class BaseEngine(ABC):
    """
    Common interface for the sync and async engines.

    Both run the same state machine:
    prepare -> acquire -> configure -> navigate -> dwell -> extract -> release.
    """

    def __init__(
        self,
        config: FetchConfig | Mapping[str, Any] | None = None,
        *,
        acquirer: SessionAcquirer | None = None,
        name: str = "base",
    ) -> None:
        self.name = name
        self.config = resolve_config(config)
        self.acquirer = acquirer or SessionAcquirer.from_config(self.config)

    @abstractmethod
    def fetch(self, url: str, timeout_ms: int | None = None, *, cancel: Any = None) -> Response:
        raise NotImplementedError

    # -------------------------
    # Shared steps
    # -------------------------

    def _prepare(self, url: str, timeout_ms: int | None) -> tuple[FetchPlan, ContextAdapter]:
        per_call_ms = self.config.timeout_ms if timeout_ms is None else int(timeout_ms)
        target = normalize_url(url)
        profile = build_capabilities(self.config)
        timing = plan_timing(self.config, per_call_ms)

        log = with_context(logger, url=target)
        plan = FetchPlan(url=target, profile=profile, timing=timing, started_at=time.monotonic())
        emit_event(
            log,
            "fetch.started",
            {
                "url": target,
                "browser": profile.browser.value,
                "page_load_ms": timing.page_load_ms,
                "dwell_ms": timing.dwell_ms,
            },
            message=f"Fetching URL {target}",
        )
        return plan, log

    def _finish(self, plan: FetchPlan, step: StepResult, log: ContextAdapter) -> Response:
        elapsed_ms = (time.monotonic() - plan.started_at) * 1000
        response = assemble_response(
            step.outcome, final_url=step.final_url, body=step.body, elapsed_ms=elapsed_ms
        )

        payload: dict[str, Any] = {
            "url": plan.url,
            "final_url": step.final_url,
            "outcome": step.outcome.value,
            "elapsed_ms": round(elapsed_ms, 1),
            "bytes": len(response.body),
        }
        if step.error:
            payload["error"] = step.error

        if step.outcome is Outcome.OK:
            emit_event(log, "fetch.finished", payload, message=f"Successfully fetched URL {plan.url}")
        else:
            emit_event(
                log,
                "fetch.finished",
                payload,
                level="warning",
                message=f"Fetch of {plan.url} ended with {step.outcome.value}",
            )
        return response
