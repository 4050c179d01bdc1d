"""
jsfetch.engines.timing

Two deadlines bound a fetch. The browser-side page-load ceiling guards
transport stalls; the caller's per-call timeout guards the whole operation.
The page-load ceiling is pinned to the render floor, since many script-heavy
pages never fire a load event and a larger ceiling would eat the per-call
budget before the dwell even starts.
"""

from __future__ import annotations

from dataclasses import dataclass

from jsfetch.config.schema import FetchConfig
from jsfetch.runtime.errors import ConfigError


@dataclass(frozen=True)
class TimingPlan:
    page_load_ms: int
    render_wait_ms: int
    per_call_timeout_ms: int

    @property
    def has_caller_deadline(self) -> bool:
        return self.per_call_timeout_ms > 0

    @property
    def dwell_ms(self) -> int:
        """min(render wait, per-call timeout); a non-positive per-call timeout means no deadline."""
        if not self.has_caller_deadline:
            return self.render_wait_ms
        return min(self.render_wait_ms, self.per_call_timeout_ms)

    @property
    def dwell_s(self) -> float:
        return self.dwell_ms / 1000.0

    @property
    def page_load_s(self) -> float:
        return self.page_load_ms / 1000.0


def plan_timing(config: FetchConfig, per_call_timeout_ms: int) -> TimingPlan:
    render_wait_ms = int(config.render_min_ms)
    if render_wait_ms < 0:
        raise ConfigError(f"render.min.ms must be >= 0, got {render_wait_ms}")

    return TimingPlan(
        page_load_ms=render_wait_ms,
        render_wait_ms=render_wait_ms,
        per_call_timeout_ms=int(per_call_timeout_ms),
    )
