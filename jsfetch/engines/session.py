"""
jsfetch.engines.session

Open and close browser sessions against a remote WebDriver hub.

A Session is owned by exactly one fetch from acquire to release. Release is
idempotent and never raises: the fetch result always dominates a failure to
shut the browser down.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlsplit

import urllib3
from selenium import webdriver
from selenium.common.exceptions import WebDriverException

from jsfetch.config.schema import BrowserName, FetchConfig
from jsfetch.monitoring.events import emit_event
from jsfetch.runtime.errors import SessionUnavailable

from .capabilities import CapabilityProfile

logger = logging.getLogger(__name__)

DriverFactory = Callable[[str, CapabilityProfile], Any]

# Errors that mean "the hub could not give us a browser"
HUB_ERRORS: tuple[type[BaseException], ...] = (
    WebDriverException,
    urllib3.exceptions.HTTPError,
    OSError,
    ValueError,
)


def remote_driver(hub_url: str, profile: CapabilityProfile) -> Any:
    return webdriver.Remote(command_executor=hub_url, options=profile.options)


@dataclass
class Session:
    driver: Any
    hub_url: str
    browser: BrowserName
    _closed: bool = field(default=False, repr=False)

    @property
    def session_id(self) -> Optional[str]:
        return getattr(self.driver, "session_id", None)

    @property
    def closed(self) -> bool:
        return self._closed


def validate_hub_url(hub_url: str) -> str:
    """Return `hub_url` if it is a usable http(s) endpoint, else raise SessionUnavailable."""
    try:
        parts = urlsplit(hub_url)
        port = parts.port
    except ValueError as e:
        raise SessionUnavailable(f"malformed hub url: {hub_url!r}", detail=str(e)) from e

    host = parts.hostname or ""
    if parts.scheme not in ("http", "https") or not host or port is None:
        raise SessionUnavailable(f"malformed hub url: {hub_url!r}")
    if any(ch.isspace() for ch in hub_url):
        raise SessionUnavailable(f"malformed hub url: {hub_url!r}")
    return hub_url


class SessionAcquirer:
    """
    Hands out sessions from a remote hub.

    `driver_factory` builds the WebDriver client; it defaults to
    selenium's Remote driver.
    """

    def __init__(self, hub_url: str, *, driver_factory: DriverFactory | None = None) -> None:
        self.hub_url = hub_url
        self._driver_factory = driver_factory or remote_driver

    @classmethod
    def from_config(
        cls, config: FetchConfig, *, driver_factory: DriverFactory | None = None
    ) -> SessionAcquirer:
        return cls(config.hub_url, driver_factory=driver_factory)

    def acquire(self, profile: CapabilityProfile) -> Session:
        hub_url = validate_hub_url(self.hub_url)
        try:
            driver = self._driver_factory(hub_url, profile)
        except HUB_ERRORS as e:
            raise SessionUnavailable(
                f"hub refused or unreachable: {hub_url}", detail=f"{type(e).__name__}: {e}"
            ) from e

        session = Session(driver=driver, hub_url=hub_url, browser=profile.browser)
        logger.debug("Acquired session %s from %s", session.session_id, hub_url)
        return session

    def release(self, session: Session | None) -> None:
        if session is None or session.closed:
            return
        session._closed = True
        try:
            session.driver.quit()
        except Exception as e:
            emit_event(
                logger,
                "session.release_failed",
                {
                    "session_id": session.session_id,
                    "hub_url": session.hub_url,
                    "error": f"{type(e).__name__}: {e}",
                },
                level="warning",
            )

    @contextmanager
    def open_session(self, profile: CapabilityProfile) -> Iterator[Session]:
        session = self.acquire(profile)
        try:
            yield session
        finally:
            self.release(session)
