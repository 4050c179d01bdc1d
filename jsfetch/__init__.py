"""
jsfetch: JavaScript-aware URL fetching through a remote WebDriver hub.

Given a URL, a per-call timeout and a fetch configuration, drive a
hub-provided browser to load the page, wait for client-side rendering and
return the rendered DOM as a Response.

Key Components:
- fetch: one-shot entry point
- RemoteBrowserEngine / AsyncRemoteBrowserEngine: reusable engines
- FetchConfig / resolve_config: configuration and precedence rules
- Response / Outcome: what callers get back
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jsfetch.config.loader import load_config_file, resolve_config
from jsfetch.config.schema import BrowserName, FetchConfig
from jsfetch.engines.browser import AsyncRemoteBrowserEngine, RemoteBrowserEngine
from jsfetch.runtime.errors import ConfigError, JsFetchError
from jsfetch.runtime.results import X_RENDER_TIMEOUT, Outcome, Response


def fetch(
    url: str,
    per_call_timeout_ms: int,
    config: FetchConfig | Mapping[str, Any] | None = None,
) -> Response:
    """
    Fetch one URL through the remote browser hub.

    Never raises for fetch failures; they are reported as status_code 0.
    Raises ConfigError for invalid configuration, before any network I/O.
    """
    return RemoteBrowserEngine(config).fetch(url, per_call_timeout_ms)


__all__ = [
    "AsyncRemoteBrowserEngine",
    "BrowserName",
    "ConfigError",
    "FetchConfig",
    "JsFetchError",
    "Outcome",
    "RemoteBrowserEngine",
    "Response",
    "X_RENDER_TIMEOUT",
    "fetch",
    "load_config_file",
    "resolve_config",
]
