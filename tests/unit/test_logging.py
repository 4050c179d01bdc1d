import io
import json
import logging

from jsfetch.monitoring.events import emit_event
from jsfetch.monitoring.logging import (
    JsonFormatter,
    LoggingOptions,
    TextFormatter,
    setup_logger,
    with_context,
)


def _record(**extra):
    record = logging.LogRecord("jsfetch.engines", logging.WARNING, __file__, 1, "done", None, None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_text_formatter_renders_context():
    line = TextFormatter().format(_record(url="http://a/", outcome="interrupted", elapsed_ms=203.4))
    assert line == "WARNING jsfetch.engines [url=http://a/ outcome=interrupted elapsed=203ms] done"


def test_json_formatter_includes_payload():
    data = json.loads(JsonFormatter().format(_record(url="http://a/", event="fetch.finished", payload={"bytes": 3})))
    assert data["level"] == "WARNING"
    assert data["url"] == "http://a/"
    assert data["event"] == "fetch.finished"
    assert data["payload"] == {"bytes": 3}


def test_setup_logger_is_idempotent():
    stream = io.StringIO()
    logger = setup_logger(LoggingOptions(level="DEBUG", stream=stream))
    setup_logger(LoggingOptions(level="DEBUG", stream=stream))
    try:
        ours = [h for h in logger.handlers if getattr(h, "_jsfetch_handler", False)]
        assert len(ours) == 1

        with_context(logger, url="http://a/").info("hello")
        assert "[url=http://a/] hello" in stream.getvalue()
    finally:
        for h in list(logger.handlers):
            if getattr(h, "_jsfetch_handler", False):
                logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)


def test_emit_event_promotes_known_fields(caplog):
    logger = logging.getLogger("jsfetch.test")
    with caplog.at_level(logging.INFO, logger="jsfetch"):
        emit_event(logger, "fetch.finished", {"url": "http://a/", "outcome": "ok", "other": 1})

    record = caplog.records[-1]
    assert record.getMessage() == "Event: fetch.finished"
    assert record.url == "http://a/"
    assert record.outcome == "ok"
    assert record.payload["other"] == 1
    assert not hasattr(record, "elapsed_ms")
