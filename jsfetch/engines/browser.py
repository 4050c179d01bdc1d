"""
jsfetch.engines.browser

Remote WebDriver engine: load a page on a hub-provided browser, dwell while
client-side scripts render, and capture the DOM.

Outcome rules:
- navigation returns, dwell completes, extraction works -> Ok
- page-load ceiling hit but the DOM can still be read -> RenderTimeout (200 + flag)
- dwell interrupted by the caller -> Interrupted, DOM not read
- transport error, or extraction fails -> NavigationFailed
- no session from the hub -> SessionUnavailable

The session is released on every exit path, after the outcome is decided.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any

import urllib3
from selenium.common.exceptions import TimeoutException, WebDriverException

from jsfetch.monitoring.logging import ContextAdapter
from jsfetch.runtime.errors import ExtractionFailed, NavigationFailed, SessionUnavailable
from jsfetch.runtime.results import Outcome, Response

from .base import BaseEngine, FetchPlan, StepResult
from .extractor import extract_dom
from .session import Session


TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    WebDriverException,
    urllib3.exceptions.HTTPError,
    OSError,
)


def _describe(e: BaseException) -> str:
    return f"{type(e).__name__}: {e}"


# -------------------------
# Blocking steps (shared by both engines)
# -------------------------


def _navigate(session: Session, plan: FetchPlan) -> None:
    """
    Set the page-load ceiling and load the page.

    A page-load timeout surfaces as selenium's TimeoutException; any other
    transport failure is raised as NavigationFailed.
    """
    try:
        if plan.applies_page_load_ceiling:
            session.driver.set_page_load_timeout(plan.timing.page_load_s)
        session.driver.get(plan.url)
    except TimeoutException:
        raise
    except TRANSPORT_ERRORS as e:
        raise NavigationFailed(f"could not load {plan.url}", detail=_describe(e)) from e


def _current_url(session: Session, fallback: str) -> str:
    try:
        return str(session.driver.current_url or fallback)
    except TRANSPORT_ERRORS:
        return fallback


def _extract(session: Session, plan: FetchPlan, encoding: str, *, timed_out: bool) -> StepResult:
    try:
        body = extract_dom(session, encoding)
    except ExtractionFailed as e:
        return StepResult(Outcome.NAVIGATION_FAILED, final_url=plan.url, error=_describe(e))

    outcome = Outcome.RENDER_TIMEOUT if timed_out else Outcome.OK
    return StepResult(outcome, final_url=_current_url(session, plan.url), body=body)


def _navigation_failed(plan: FetchPlan, e: NavigationFailed, log: ContextAdapter) -> StepResult:
    log.warning("Navigation to %s failed: %s", plan.url, e.info.detail or e)
    return StepResult(Outcome.NAVIGATION_FAILED, final_url=plan.url, error=e.info.detail)


def _render_timeout(e: TimeoutException, log: ContextAdapter) -> None:
    log.warning("WebDriver page load timed out, reading whatever DOM exists: %s", e.msg or e)


def _interrupted(plan: FetchPlan, log: ContextAdapter) -> StepResult:
    log.warning("Fetch was interrupted during the render dwell")
    return StepResult(Outcome.INTERRUPTED, final_url=plan.url)


class RemoteBrowserEngine(BaseEngine):
    """
    Blocking engine. One call owns one session for its whole lifetime, so an
    instance may be shared by many threads.

    `cancel` is a threading.Event; setting it interrupts the dwell.
    """

    def __init__(self, config: Any = None, *, acquirer: Any = None) -> None:
        super().__init__(config, acquirer=acquirer, name="remote_browser")

    def fetch(
        self,
        url: str,
        timeout_ms: int | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> Response:
        plan, log = self._prepare(url, timeout_ms)
        if cancel is None:
            cancel = threading.Event()

        try:
            with self.acquirer.open_session(plan.profile) as session:
                step = self._run(session, plan, cancel, log)
        except SessionUnavailable as e:
            step = StepResult(Outcome.SESSION_UNAVAILABLE, final_url=plan.url, error=_describe(e))
        return self._finish(plan, step, log)

    def _run(
        self, session: Session, plan: FetchPlan, cancel: threading.Event, log: ContextAdapter
    ) -> StepResult:
        encoding = self.config.content_encoding
        try:
            _navigate(session, plan)
        except TimeoutException as e:
            _render_timeout(e, log)
            return _extract(session, plan, encoding, timed_out=True)
        except NavigationFailed as e:
            return _navigation_failed(plan, e, log)

        if plan.timing.dwell_ms > 0 and cancel.wait(plan.timing.dwell_s):
            return _interrupted(plan, log)

        return _extract(session, plan, encoding, timed_out=False)


class AsyncRemoteBrowserEngine(BaseEngine):
    """
    asyncio engine running the same state machine.

    Hub RPCs run in worker threads. `cancel` is an asyncio.Event that
    interrupts the dwell. If the awaiting task itself is cancelled the
    session is still released and CancelledError propagates.
    """

    def __init__(self, config: Any = None, *, acquirer: Any = None) -> None:
        super().__init__(config, acquirer=acquirer, name="remote_browser_async")

    async def fetch(
        self,
        url: str,
        timeout_ms: int | None = None,
        *,
        cancel: asyncio.Event | None = None,
    ) -> Response:
        plan, log = self._prepare(url, timeout_ms)

        acquiring = asyncio.ensure_future(asyncio.to_thread(self.acquirer.acquire, plan.profile))
        try:
            session = await asyncio.shield(acquiring)
        except SessionUnavailable as e:
            step = StepResult(Outcome.SESSION_UNAVAILABLE, final_url=plan.url, error=_describe(e))
            return self._finish(plan, step, log)
        except asyncio.CancelledError:
            acquiring.add_done_callback(self._release_late_session)
            raise

        try:
            step = await self._run(session, plan, cancel, log)
        finally:
            await asyncio.to_thread(self.acquirer.release, session)
        return self._finish(plan, step, log)

    def _release_late_session(self, fut: asyncio.Future) -> None:
        # the caller went away while the hub was still handing out a browser
        if fut.cancelled() or fut.exception() is not None:
            return
        fut.get_loop().run_in_executor(None, self.acquirer.release, fut.result())

    async def _run(
        self,
        session: Session,
        plan: FetchPlan,
        cancel: asyncio.Event | None,
        log: ContextAdapter,
    ) -> StepResult:
        encoding = self.config.content_encoding
        try:
            await asyncio.to_thread(_navigate, session, plan)
        except TimeoutException as e:
            _render_timeout(e, log)
            return await asyncio.to_thread(_extract, session, plan, encoding, timed_out=True)
        except NavigationFailed as e:
            return _navigation_failed(plan, e, log)

        if plan.timing.dwell_ms > 0 and await self._dwell(plan.timing.dwell_s, cancel):
            return _interrupted(plan, log)

        return await asyncio.to_thread(_extract, session, plan, encoding, timed_out=False)

    @staticmethod
    async def _dwell(seconds: float, cancel: asyncio.Event | None) -> bool:
        """Sleep for `seconds`; True if `cancel` fired first."""
        if cancel is None:
            await asyncio.sleep(seconds)
            return False
        try:
            await asyncio.wait_for(cancel.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True
