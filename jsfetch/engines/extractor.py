"""
jsfetch.engines.extractor

Read the rendered document from a live session as bytes.
"""

from __future__ import annotations

import codecs

import urllib3
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By

from jsfetch.runtime.errors import ConfigError, ExtractionFailed

from .session import Session


def extract_dom(session: Session, encoding: str = "UTF-8") -> bytes:
    """
    Return the inner markup of the <html> element encoded with `encoding`.

    No sanitization or parsing is done. Raises ConfigError for an unknown
    encoding (checked before talking to the browser) and ExtractionFailed
    when the session does not answer.
    """
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ConfigError(f"unknown content encoding: {encoding!r}") from e

    try:
        root = session.driver.find_element(By.TAG_NAME, "html")
        inner_html = root.get_attribute("innerHTML")
    except (WebDriverException, urllib3.exceptions.HTTPError, OSError) as e:
        raise ExtractionFailed(
            "session did not return the document", detail=f"{type(e).__name__}: {e}"
        ) from e

    # unmappable characters become "?" rather than failing the fetch
    return (inner_html or "").encode(encoding, errors="replace")
