"""Wait for a page action to settle before reading the request log."""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable, Optional, Set, TypeVar

from playwright.async_api import Frame, Page, Request

logger = logging.getLogger(__name__)

R = TypeVar("R")


class BarrierState(enum.Enum):
    PENDING = "pending"
    DRAINING = "draining"
    NAVIGATING = "navigating"
    SETTLED = "settled"


class CompletionBarrier:
    """
    Track requests started while an action runs and wait for them to finish.

    A main-frame navigation replaces request tracking with a wait for the
    page's load state. A ceiling timer settles the barrier regardless, so a
    request that never finishes delays the caller but never blocks it. Once
    settled, a short quiet period absorbs trailing effects before returning.

    One instance per action; ``run`` may be called once.
    """

    def __init__(
        self,
        page: Page,
        *,
        timeout_ms: int = 10000,
        quiet_period_ms: int = 1000,
        load_state: str = "load",
    ):
        self.page = page
        self.timeout_ms = int(timeout_ms)
        self.quiet_period_ms = int(quiet_period_ms)
        self.load_state = load_state
        self.state = BarrierState.PENDING
        self.settled_by: Optional[str] = None
        self._requests: Set[Request] = set()
        self._settled: Optional[asyncio.Future[None]] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._load_task: Optional[asyncio.Task[Any]] = None
        self._subscribed = False

    @property
    def in_flight(self) -> int:
        return len(self._requests)

    async def run(self, action: Callable[[], Awaitable[R]]) -> R:
        if self._settled is not None:
            raise RuntimeError("CompletionBarrier.run() may only be called once")
        loop = asyncio.get_running_loop()
        self._settled = loop.create_future()

        self._subscribe()
        self._timer = loop.call_later(self.timeout_ms / 1000.0, self._on_timeout)
        try:
            result = await action()
            if self.state is BarrierState.PENDING:
                self.state = BarrierState.DRAINING
                if not self._requests:
                    self._settle("quiescent")
            await self._settled
            if self.quiet_period_ms > 0:
                await asyncio.sleep(self.quiet_period_ms / 1000.0)
            return result
        finally:
            self._dispose()

    def _subscribe(self) -> None:
        self.page.on("request", self._on_request)
        self.page.on("requestfinished", self._on_request_finished)
        self.page.on("framenavigated", self._on_frame_navigated)
        self._subscribed = True

    def _unsubscribe(self) -> None:
        if not self._subscribed:
            return
        self._subscribed = False
        for event, handler in (
            ("request", self._on_request),
            ("requestfinished", self._on_request_finished),
            ("framenavigated", self._on_frame_navigated),
        ):
            try:
                self.page.remove_listener(event, handler)
            except Exception as e:
                logger.debug("Failed to remove %s listener: %s", event, e)

    def _dispose(self) -> None:
        self._unsubscribe()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()
        self._load_task = None

    def _settle(self, reason: str) -> None:
        if self._settled is None or self._settled.done():
            return
        self.state = BarrierState.SETTLED
        self.settled_by = reason
        self._settled.set_result(None)
        logger.debug("Completion barrier settled: %s", reason)

    def _on_request(self, request: Request) -> None:
        self._requests.add(request)

    def _on_request_finished(self, request: Request) -> None:
        self._requests.discard(request)
        if not self._requests:
            self._settle("quiescent")

    def _on_frame_navigated(self, frame: Frame) -> None:
        if getattr(frame, "parent_frame", None) is not None:
            return
        if self._settled is None or self._settled.done():
            return
        self.state = BarrierState.NAVIGATING
        # Navigation supersedes request accounting.
        self._unsubscribe()
        self._requests.clear()
        self._load_task = asyncio.ensure_future(self.page.wait_for_load_state(self.load_state))
        self._load_task.add_done_callback(self._on_loaded)

    def _on_loaded(self, task: "asyncio.Task[Any]") -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.debug("Waiting for load state failed: %s", error)
        self._settle("navigation")

    def _on_timeout(self) -> None:
        self._timer = None
        if self._settled is not None and not self._settled.done():
            logger.debug(
                "Completion barrier timed out after %sms with %s request(s) in flight",
                self.timeout_ms,
                len(self._requests),
            )
        self._unsubscribe()
        self._settle("timeout")


async def wait_for_completion(
    page: Page,
    action: Callable[[], Awaitable[R]],
    *,
    timeout_ms: int = 10000,
    quiet_period_ms: int = 1000,
    load_state: str = "load",
) -> R:
    """Run ``action`` and return its result once the page has settled."""
    barrier = CompletionBarrier(
        page,
        timeout_ms=timeout_ms,
        quiet_period_ms=quiet_period_ms,
        load_state=load_state,
    )
    return await barrier.run(action)
