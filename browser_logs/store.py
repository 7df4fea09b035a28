"""Per-page console and network logs fed by Playwright page events."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional

from playwright.async_api import ConsoleMessage, Error, Page, Request, Response

from .records import ConsoleRecord, NetworkOutcome, NetworkRecord

logger = logging.getLogger(__name__)


class SessionLogStore:
    """
    Append-only console list and request map for one page.

    Records are handed out as snapshots in insertion order; a response is
    paired with its request once and never replaced.
    """

    def __init__(self, page: Optional[Page] = None):
        self.page = page
        self._console: List[ConsoleRecord] = []
        self._requests: Dict[Any, NetworkRecord] = {}
        self._handlers: Dict[str, Any] = {}
        self._static_url: Optional[str] = None

    @classmethod
    def from_records(
        cls,
        console: Iterable[ConsoleRecord] = (),
        network: Iterable[NetworkRecord] = (),
        page_url: str = "",
    ) -> "SessionLogStore":
        """Build a detached store over already-materialized records."""
        store = cls(page=None)
        store._console.extend(console)
        for index, record in enumerate(network):
            store._requests[index] = record
        store._static_url = page_url
        return store

    @property
    def attached(self) -> bool:
        return bool(self._handlers)

    def attach(self) -> None:
        if self.attached:
            return
        if self.page is None:
            raise RuntimeError("SessionLogStore has no page to attach to")

        handlers = {
            "console": self._on_console,
            "pageerror": self._on_page_error,
            "request": self._on_request,
            "response": self._on_response,
        }
        for event, handler in handlers.items():
            self.page.on(event, handler)
        self._handlers = handlers

    def detach(self) -> None:
        handlers, self._handlers = self._handlers, {}
        if self.page is None:
            return
        for event, handler in handlers.items():
            try:
                self.page.remove_listener(event, handler)
            except Exception as e:
                logger.debug("Failed to remove %s listener: %s", event, e)

    def page_url(self) -> str:
        if self._static_url is not None:
            return self._static_url
        try:
            return str(getattr(self.page, "url", "") or "")
        except Exception:
            return ""

    def console_records(self) -> List[ConsoleRecord]:
        return list(self._console)

    def network_records(self) -> List[NetworkRecord]:
        return [replace(record) for record in self._requests.values()]

    def cursor(self) -> int:
        """Position marker for ``console_since``."""
        return len(self._console)

    def console_since(self, cursor: int) -> List[ConsoleRecord]:
        return list(self._console[max(0, int(cursor or 0)) :])

    def _on_console(self, msg: ConsoleMessage) -> None:
        try:
            record = ConsoleRecord.from_console_message(msg)
        except Exception as e:
            logger.warning("Dropping console message that could not be read: %s", e)
            return
        self._console.append(record)

    def _on_page_error(self, error: Error) -> None:
        try:
            record = ConsoleRecord.from_page_error(error)
        except Exception as e:
            logger.warning("Dropping page error that could not be read: %s", e)
            return
        self._console.append(record)

    def _on_request(self, request: Request) -> None:
        if request in self._requests:
            return
        self._requests[request] = NetworkRecord(
            method=str(getattr(request, "method", "") or ""),
            url=str(getattr(request, "url", "") or ""),
        )

    def _on_response(self, response: Response) -> None:
        request = getattr(response, "request", None)
        record = self._requests.get(request) if request is not None else None
        if record is None:
            # Response for a request seen before attach().
            if request is None:
                return
            self._on_request(request)
            record = self._requests[request]
        outcome = NetworkOutcome(
            status=int(getattr(response, "status", 0) or 0),
            status_text=str(getattr(response, "status_text", "") or ""),
        )
        if not record.attach_outcome(outcome):
            logger.debug("Ignoring second response for %s", record.url)
