"""Tests for browser_logs/records.py"""

import pytest

from browser_logs.records import (
    ConsoleRecord,
    NetworkOutcome,
    NetworkRecord,
    classify_request,
    console_severity,
)
from tests.conftest import FakeConsoleMessage


class _PageError:
    def __init__(self, message, name="Error", stack=""):
        self.message = message
        self.name = name
        self.stack = stack


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("error", "error"),
        ("warning", "warning"),
        ("log", "info"),
        ("info", "info"),
        ("debug", "verbose"),
        ("trace", "verbose"),
        ("dir", "verbose"),
        ("", "verbose"),
    ],
)
def test_console_severity(raw, expected):
    assert console_severity(raw) == expected


class TestConsoleRecord:
    def test_renders_type_text_and_location(self):
        msg = FakeConsoleMessage("log", "Hello, world!", {"url": "http://localhost:8000/", "lineNumber": 4})
        record = ConsoleRecord.from_console_message(msg)
        assert record.rendered == "[LOG] Hello, world! @ http://localhost:8000/:4"
        assert record.severity == "info"
        assert record.text == "Hello, world!"

    def test_location_is_kept_as_sorted_items(self):
        record = ConsoleRecord.create("log", "x", {"url": "http://localhost:8000/", "lineNumber": 4, "columnNumber": 2})
        assert record.location == (("columnNumber", 2), ("lineNumber", 4), ("url", "http://localhost:8000/"))
        assert dict(record.location)["lineNumber"] == 4
        assert ConsoleRecord.create("log", "x").location == ()

    def test_is_hashable(self):
        location = {"url": "http://localhost:8000/", "lineNumber": 4}
        first = ConsoleRecord.create("error", "boom", location)
        second = ConsoleRecord.create("error", "boom", dict(reversed(list(location.items()))))
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second, ConsoleRecord.create("error", "boom")}) == 2

    def test_renders_without_location(self):
        record = ConsoleRecord.create("warning", "careful")
        assert record.rendered == "[WARNING] careful"
        assert record.severity == "warning"

    def test_page_error_prefers_stack(self):
        err = _PageError("Error in script", stack="Error: Error in script\n    at http://localhost:8000/:5")
        record = ConsoleRecord.from_page_error(err)
        assert record.severity == "error"
        assert record.text == "Error in script"
        assert record.rendered.startswith("Error: Error in script")
        assert "http://localhost:8000/" in record.rendered

    def test_page_error_without_stack(self):
        record = ConsoleRecord.from_page_error(_PageError("boom", name="TypeError"))
        assert record.rendered == "TypeError: boom"


class TestNetworkRecord:
    def test_render_without_outcome(self):
        assert NetworkRecord("post", "http://localhost/api").render() == "[POST] http://localhost/api"

    def test_render_with_outcome(self):
        record = NetworkRecord("GET", "http://localhost/b", NetworkOutcome(404, "Not Found"))
        assert record.render() == "[GET] http://localhost/b => [404] Not Found"

    def test_first_outcome_is_kept(self):
        record = NetworkRecord("GET", "http://localhost/")
        assert record.attach_outcome(NetworkOutcome(200, "OK")) is True
        assert record.attach_outcome(NetworkOutcome(500, "Server Error")) is False
        assert record.outcome == NetworkOutcome(200, "OK")


PAGE = "http://localhost:8000/index.html"


@pytest.mark.parametrize(
    "url,expected",
    [
        ("chrome-extension://abcdef/script.js", "extension"),
        ("moz-extension://abcdef/script.js", "extension"),
        ("http://localhost:8000/api", "sameHost"),
        ("https://localhost/other-port-and-scheme", "sameHost"),
        ("https://example.com/external", "3rd-party"),
        ("https://cdn.localhost.example/x.js", "3rd-party"),
        ("/relative/path", "3rd-party"),
        ("http://[::1", "3rd-party"),
    ],
)
def test_classify_request(url, expected):
    assert classify_request(url, PAGE) == expected


def test_classify_request_with_unparsable_page_url():
    assert classify_request("http://localhost:8000/api", "not a url") == "3rd-party"
