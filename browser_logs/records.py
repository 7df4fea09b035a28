"""Normalized console and network records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

CONSOLE_SEVERITIES = ("error", "warning", "info", "verbose")
REQUEST_TYPES = ("extension", "sameHost", "3rd-party")

_EXTENSION_SCHEMES = ("chrome-extension://", "moz-extension://")


def console_severity(raw_type: str) -> str:
    """Map a raw console tag onto one of ``CONSOLE_SEVERITIES``."""
    tag = str(raw_type or "").lower()
    if tag == "error":
        return "error"
    if tag == "warning":
        return "warning"
    if tag in ("log", "info"):
        return "info"
    return "verbose"


@dataclass(frozen=True)
class ConsoleRecord:
    """One console message or uncaught page error."""

    type: str
    text: str
    rendered: str
    location: Tuple[Tuple[str, Any], ...] = ()

    @property
    def severity(self) -> str:
        return console_severity(self.type)

    @classmethod
    def create(cls, type: str, text: str, location: Optional[Dict[str, Any]] = None) -> "ConsoleRecord":
        raw_type = str(type or "log")
        body = str(text or "")
        rendered = f"[{raw_type.upper()}] {body}"
        where = _format_location(location)
        if where:
            rendered = f"{rendered} @ {where}"
        return cls(type=raw_type, text=body, rendered=rendered, location=tuple(sorted((location or {}).items())))

    @classmethod
    def from_console_message(cls, msg: Any) -> "ConsoleRecord":
        location: Dict[str, Any] = {}
        try:
            location = dict(getattr(msg, "location", {}) or {})
        except Exception:
            location = {}
        return cls.create(
            type=str(getattr(msg, "type", "") or "log"),
            text=str(getattr(msg, "text", "") or ""),
            location=location,
        )

    @classmethod
    def from_page_error(cls, error: Any) -> "ConsoleRecord":
        message = str(getattr(error, "message", "") or error or "")
        name = str(getattr(error, "name", "") or "Error")
        stack = str(getattr(error, "stack", "") or "")
        rendered = stack or f"{name}: {message}"
        return cls(type="error", text=message, rendered=rendered)


def _format_location(location: Optional[Dict[str, Any]]) -> str:
    if not location:
        return ""
    url = str(location.get("url") or "")
    if not url:
        return ""
    line = location.get("lineNumber")
    if line is None:
        return url
    return f"{url}:{line}"


@dataclass(frozen=True)
class NetworkOutcome:
    """Response half of a network exchange."""

    status: int
    status_text: str = ""


@dataclass
class NetworkRecord:
    """One request, optionally paired with its response."""

    method: str
    url: str
    outcome: Optional[NetworkOutcome] = None

    def attach_outcome(self, outcome: NetworkOutcome) -> bool:
        """Pair the response with this request. The first outcome wins."""
        if self.outcome is not None:
            return False
        self.outcome = outcome
        return True

    def render(self) -> str:
        line = f"[{str(self.method or '').upper()}] {self.url}"
        if self.outcome is not None:
            line = f"{line} => [{self.outcome.status}] {self.outcome.status_text}"
        return line


def classify_request(url: str, page_url: str) -> str:
    """Return ``extension``, ``sameHost`` or ``3rd-party`` for a request URL."""
    target = str(url or "")
    if target.startswith(_EXTENSION_SCHEMES):
        return "extension"
    request_host = _hostname(target)
    page_host = _hostname(str(page_url or ""))
    if request_host is None or page_host is None:
        return "3rd-party"
    return "sameHost" if request_host == page_host else "3rd-party"


def _hostname(url: str) -> Optional[str]:
    """Hostname of an absolute URL, ``""`` for host-less schemes, None if unparsable."""
    try:
        parsed = urlparse(url)
        host = parsed.hostname
    except ValueError:
        return None
    if not parsed.scheme:
        return None
    return host or ""
