import os

import pytest

import jsfetch

pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_INTEGRATION") != "1", reason="RUN_INTEGRATION=1 not set"
)


def test_fetch_through_real_hub():
    url = os.environ.get("JSFETCH_TEST_URL", "https://example.com/")
    res = jsfetch.fetch(url, 30_000, {"render.min.ms": 1000})

    assert res.status_code == 200
    assert res.body
    assert b"<body" in res.body.lower()
