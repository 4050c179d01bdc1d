import pytest
from selenium.common.exceptions import NoSuchElementException, WebDriverException
from selenium.webdriver.common.by import By

from jsfetch.config.schema import BrowserName
from jsfetch.engines.extractor import extract_dom
from jsfetch.engines.session import Session
from jsfetch.runtime.errors import ConfigError, ExtractionFailed


def _session(driver):
    return Session(driver=driver, hub_url="http://localhost:4444/wd/hub", browser=BrowserName.firefox)


def test_reads_inner_html_of_document_element(driver):
    body = extract_dom(_session(driver))
    driver.find_element.assert_called_once_with(By.TAG_NAME, "html")
    driver.find_element.return_value.get_attribute.assert_called_once_with("innerHTML")
    assert body == '<head></head><body><p id="x">hi</p></body>'.encode("utf-8")


def test_encodes_with_declared_charset(make_driver):
    driver = make_driver(inner_html="<p>café</p>")
    assert extract_dom(_session(driver), "ISO-8859-1") == "<p>café</p>".encode("latin-1")
    assert extract_dom(_session(driver), "UTF-8") == "<p>café</p>".encode("utf-8")


def test_unmappable_characters_are_replaced(make_driver):
    driver = make_driver(inner_html="<p>☃</p>")
    assert extract_dom(_session(driver), "ascii") == b"<p>?</p>"


def test_reencoding_is_stable(make_driver):
    driver = make_driver(inner_html="<p>naïve – ok</p>")
    body = extract_dom(_session(driver), "UTF-8")
    assert body.decode("UTF-8").encode("UTF-8") == body


def test_missing_markup_is_empty_bytes(make_driver):
    assert extract_dom(_session(make_driver(inner_html=None))) == b""


def test_unknown_encoding_fails_before_rpc(driver):
    with pytest.raises(ConfigError):
        extract_dom(_session(driver), "klingon-8")
    driver.find_element.assert_not_called()


@pytest.mark.parametrize(
    "error", [WebDriverException("no such window"), NoSuchElementException("html"), OSError("reset")]
)
def test_unresponsive_session_is_extraction_failed(driver, error):
    driver.find_element.side_effect = error
    with pytest.raises(ExtractionFailed):
        extract_dom(_session(driver))
