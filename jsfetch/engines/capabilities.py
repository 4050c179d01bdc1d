"""
jsfetch.engines.capabilities

Translate a FetchConfig into the selenium browser options sent to the hub
when a session is created. Pure; no I/O.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from selenium.webdriver import ChromeOptions, EdgeOptions, FirefoxOptions
from selenium.webdriver.chromium.options import ChromiumOptions
from selenium.webdriver.common.options import ArgOptions

from jsfetch.config.schema import BrowserName, FetchConfig
from jsfetch.runtime.errors import ConfigError

# Chrome content-settings value: 1 allow, 2 block
_CHROMIUM_JS_PREF = "profile.managed_default_content_settings.javascript"


@dataclass(frozen=True)
class CapabilityProfile:
    browser: BrowserName
    options: ArgOptions

    def to_capabilities(self) -> dict[str, Any]:
        return self.options.to_capabilities()


def _firefox(config: FetchConfig) -> ArgOptions:
    opts = FirefoxOptions()
    if config.headless:
        opts.add_argument("-headless")
    opts.set_preference("javascript.enabled", config.javascript_enabled)
    return opts


def _chromium_family(options_cls: type[ChromiumOptions]) -> Callable[[FetchConfig], ArgOptions]:
    def _build(config: FetchConfig) -> ArgOptions:
        opts = options_cls()
        if config.headless:
            opts.add_argument("--headless=new")
        opts.add_experimental_option(
            "prefs", {_CHROMIUM_JS_PREF: 1 if config.javascript_enabled else 2}
        )
        return opts

    return _build


_BUILDERS: dict[BrowserName, Callable[[FetchConfig], ArgOptions]] = {
    BrowserName.firefox: _firefox,
    BrowserName.chromium: _chromium_family(ChromeOptions),
    BrowserName.chrome: _chromium_family(ChromeOptions),
    BrowserName.edge: _chromium_family(EdgeOptions),
}


def build_capabilities(config: FetchConfig) -> CapabilityProfile:
    """
    Build the capability profile for `config`.

    Extra browser arguments and engine-specific capabilities from the config
    are carried over verbatim. Raises ConfigError for an unsupported browser.
    """
    try:
        browser = BrowserName(config.browser)
        builder = _BUILDERS[browser]
    except (ValueError, KeyError) as e:
        raise ConfigError(f"unsupported browser: {config.browser!r}") from e

    options = builder(config)
    for arg in config.browser_args:
        options.add_argument(arg)
    for name, value in config.browser_capabilities.items():
        options.set_capability(name, value)

    return CapabilityProfile(browser=browser, options=options)
