"""
Shared pytest fixtures for the jsfetch test suite.

The WebDriver is always a MagicMock standing in for a hub session; no test
here talks to a real hub unless RUN_INTEGRATION=1.
"""

from unittest.mock import MagicMock

import pytest

from jsfetch.config.schema import FetchConfig
from jsfetch.engines.session import SessionAcquirer

HUB_URL = "http://localhost:4444/wd/hub"
HELLO_URL = "http://localhost:8080/hello"
HELLO_DOM = '<head></head><body><p id="x">hi</p></body>'


@pytest.fixture
def make_driver():
    """
    Return a function that builds a fake WebDriver.

    Example:
        driver = make_driver(inner_html="<body>x</body>", current_url="http://a/")
    """

    def _make_driver(inner_html: str | None = HELLO_DOM, current_url: str = HELLO_URL):
        driver = MagicMock(name="driver")
        driver.session_id = "session-1"
        driver.current_url = current_url
        driver.find_element.return_value.get_attribute.return_value = inner_html
        return driver

    return _make_driver


@pytest.fixture
def driver(make_driver):
    return make_driver()


@pytest.fixture
def driver_factory(driver):
    return MagicMock(name="driver_factory", return_value=driver)


@pytest.fixture
def acquirer(driver_factory):
    return SessionAcquirer(HUB_URL, driver_factory=driver_factory)


@pytest.fixture
def config():
    return FetchConfig.model_validate({"render.min.ms": 100})
