"""Shared fakes for Playwright page objects."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import pytest


class FakeRequest:
    def __init__(self, url: str, method: str = "GET"):
        self.url = url
        self.method = method


class FakeResponse:
    def __init__(self, request: FakeRequest, status: int = 200, status_text: str = "OK"):
        self.request = request
        self.status = status
        self.status_text = status_text


class FakeConsoleMessage:
    def __init__(self, type: str, text: str, location: Optional[Dict[str, Any]] = None):
        self.type = type
        self.text = text
        self.location = location or {}


class FakeFrame:
    def __init__(self, parent_frame: Optional["FakeFrame"] = None):
        self.parent_frame = parent_frame


class FakePage:
    """Minimal event emitter standing in for ``playwright.async_api.Page``."""

    def __init__(self, url: str = "http://localhost:8000/"):
        self.url = url
        self.listeners: Dict[str, List[Callable[[Any], Any]]] = {}
        self.removed: List[str] = []
        self.load_states: List[str] = []
        self.loaded: Optional[asyncio.Event] = None

    def on(self, event: str, handler: Callable[[Any], Any]) -> None:
        self.listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable[[Any], Any]) -> None:
        self.listeners[event].remove(handler)
        self.removed.append(event)

    def emit(self, event: str, payload: Any) -> None:
        for handler in list(self.listeners.get(event, [])):
            handler(payload)

    def listener_count(self) -> int:
        return sum(len(handlers) for handlers in self.listeners.values())

    def finish_load(self) -> None:
        if self.loaded is None:
            self.loaded = asyncio.Event()
        self.loaded.set()

    async def wait_for_load_state(self, state: str = "load") -> None:
        self.load_states.append(state)
        if self.loaded is None:
            self.loaded = asyncio.Event()
        await self.loaded.wait()


def run(coro: Any) -> Any:
    """Run async code from a synchronous test."""
    return asyncio.run(coro)


@pytest.fixture
def page() -> FakePage:
    return FakePage()
