import logging
from unittest.mock import MagicMock

import pytest
from selenium.common.exceptions import SessionNotCreatedException, WebDriverException
from urllib3.exceptions import MaxRetryError

from jsfetch.config.schema import BrowserName, FetchConfig
from jsfetch.engines.capabilities import build_capabilities
from jsfetch.engines.session import SessionAcquirer, validate_hub_url
from jsfetch.runtime.errors import SessionUnavailable

HUB_URL = "http://localhost:4444/wd/hub"


@pytest.fixture
def profile():
    return build_capabilities(FetchConfig())


def test_acquire_passes_hub_url_and_profile(acquirer, driver_factory, driver, profile):
    session = acquirer.acquire(profile)
    driver_factory.assert_called_once_with(HUB_URL, profile)
    assert session.driver is driver
    assert session.session_id == "session-1"
    assert session.browser is BrowserName.firefox
    assert session.closed is False


def test_from_config_builds_hub_url():
    cfg = FetchConfig.model_validate({"hub.host": "grid", "hub.port": 5555, "hub.path": "/"})
    assert SessionAcquirer.from_config(cfg).hub_url == "http://grid:5555/"


@pytest.mark.parametrize(
    "error",
    [
        WebDriverException("boom"),
        SessionNotCreatedException("capabilities rejected"),
        MaxRetryError(None, "/session", reason="Connection refused"),
        ConnectionRefusedError(111, "Connection refused"),
    ],
)
def test_hub_failures_become_session_unavailable(profile, error):
    factory = MagicMock(side_effect=error)
    with pytest.raises(SessionUnavailable) as excinfo:
        SessionAcquirer(HUB_URL, driver_factory=factory).acquire(profile)
    assert excinfo.value.info.code == "SESSION_UNAVAILABLE"


@pytest.mark.parametrize(
    "hub_url",
    [
        "http://local host:4444/wd/hub",
        "http://localhost:notaport/wd/hub",
        "http://localhost:99999/wd/hub",
        "ftp://localhost:4444/wd/hub",
        "http://:4444/wd/hub",
    ],
)
def test_malformed_hub_url_fails_before_connecting(profile, hub_url):
    factory = MagicMock()
    with pytest.raises(SessionUnavailable):
        SessionAcquirer(hub_url, driver_factory=factory).acquire(profile)
    factory.assert_not_called()


def test_validate_hub_url_accepts_plain_hub():
    assert validate_hub_url(HUB_URL) == HUB_URL


def test_release_quits_once(acquirer, driver, profile):
    session = acquirer.acquire(profile)
    acquirer.release(session)
    acquirer.release(session)
    driver.quit.assert_called_once()
    assert session.closed is True


def test_release_none_is_noop(acquirer):
    acquirer.release(None)


def test_release_error_is_logged_not_raised(acquirer, driver, profile, caplog):
    driver.quit.side_effect = WebDriverException("session already gone")
    session = acquirer.acquire(profile)

    with caplog.at_level(logging.WARNING, logger="jsfetch"):
        acquirer.release(session)

    assert session.closed is True
    records = [r for r in caplog.records if getattr(r, "event", None) == "session.release_failed"]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert "session already gone" in records[0].payload["error"]


def test_open_session_releases_on_error(acquirer, driver, profile):
    with pytest.raises(RuntimeError):
        with acquirer.open_session(profile) as session:
            assert session.driver is driver
            raise RuntimeError("caller blew up")
    driver.quit.assert_called_once()
