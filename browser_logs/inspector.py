"""Bounded console and network log queries exposed as LLM tools."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from langchain_core.tools import StructuredTool

from .barrier import wait_for_completion
from .filters import ConsoleFilter, NetworkFilter, filter_console, filter_network
from .models import InspectorConfig
from .store import SessionLogStore
from .tools import export_tools, exported_tool
from .window import trim_lines

logger = logging.getLogger(__name__)

NO_NETWORK_REQUESTS = "No network requests found matching the specified filters"


class LogInspectorFeature:
    """Filter, render and bound the console and network logs of one page."""

    def __init__(self, store: SessionLogStore, config: Optional[InspectorConfig] = None):
        self.store = store
        self.config = config or InspectorConfig()
        self._tools: List[StructuredTool] = []

    def get_tools(self) -> List[StructuredTool]:
        if not self._tools:
            self._tools = export_tools(self)
        return self._tools

    def console_messages(
        self,
        include: Optional[Sequence[ConsoleFilter]] = None,
        exclude: Optional[Sequence[ConsoleFilter]] = None,
        first: Optional[int] = None,
        last: Optional[int] = None,
    ) -> Dict[str, Any]:
        first, last = _check_count("first", first), _check_count("last", last)
        records = filter_console(self.store.console_records(), include=include, exclude=exclude)
        lines, omitted = trim_lines(
            [record.rendered for record in records],
            self.config.max_total_text_length,
            first=first,
            last=last,
        )
        return {"ok": True, "total": len(records), "omitted": omitted, "lines": lines}

    def network_requests(
        self,
        include: Optional[Sequence[NetworkFilter]] = None,
        exclude: Optional[Sequence[NetworkFilter]] = None,
        first: Optional[int] = None,
        last: Optional[int] = None,
    ) -> Dict[str, Any]:
        first, last = _check_count("first", first), _check_count("last", last)
        records = filter_network(
            self.store.network_records(),
            self.store.page_url(),
            include=include,
            exclude=exclude,
        )
        lines, omitted = trim_lines(
            [record.render() for record in records],
            self.config.max_total_text_length,
            first=first,
            last=last,
        )
        if not lines:
            lines = [NO_NETWORK_REQUESTS]
        return {"ok": True, "total": len(records), "omitted": omitted, "lines": lines}

    async def run_action(self, action: Callable[[], Awaitable[Any]]) -> Dict[str, Any]:
        """Run a page action, wait for it to settle and report its console output."""
        page = self.store.page
        if page is None:
            raise RuntimeError("LogInspectorFeature store is not bound to a page")
        cursor = self.store.cursor()
        result = await wait_for_completion(
            page,
            action,
            timeout_ms=self.config.settle_timeout_ms,
            quiet_period_ms=self.config.settle_quiet_period_ms,
            load_state=self.config.load_state,
        )
        new_messages = self.store.console_since(cursor)
        lines, omitted = trim_lines(
            [f"- {record.rendered}" for record in new_messages],
            self.config.max_total_text_length,
        )
        logger.debug("Action settled with %s new console message(s)", len(new_messages))
        return {"ok": True, "result": result, "console_messages": lines, "omitted": omitted}

    @exported_tool(
        name="browser_console_messages",
        examples=[
            "browser_console_messages()",
            "browser_console_messages(include=[{'types': ['error', 'warning']}], last=20)",
            "browser_console_messages(exclude=[{'pattern': 'favicon'}], first=5, last=5)",
        ],
    )
    async def mcp_browser_console_messages(
        self,
        include: Optional[List[Dict[str, Any]]] = None,
        exclude: Optional[List[Dict[str, Any]]] = None,
        first: Optional[int] = None,
        last: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Return console messages with optional filtering and limiting.

        Args:
            include (optional): Include messages matching any of these filters.
                Each filter may hold `types` (subset of [`error`, `warning`, `info`,
                `verbose`]) and `pattern` (case-insensitive regex on message text).
                All criteria in one filter must match.
            exclude (optional): Exclude messages matching any of these filters.
                Exclude has higher priority than include.
            first (optional): Return first N messages after filtering.
            last (optional): Return last N messages after filtering.

        Returns:
            Dict with:
            - ok (bool): Whether query succeeded.
            - total (int): Messages left after filtering.
            - omitted (int): Messages dropped to stay within the size limit.
            - lines (list[str]): Rendered messages, `[TYPE] text @ url:line`,
              plus a `[N messages ...]` marker when messages were omitted.
        """
        return self.console_messages(
            include=_parse_clauses(include, ConsoleFilter),
            exclude=_parse_clauses(exclude, ConsoleFilter),
            first=first,
            last=last,
        )

    @exported_tool(
        name="browser_network_requests",
        examples=[
            "browser_network_requests()",
            "browser_network_requests(include=[{'statuses': [[400, 599]]}])",
            "browser_network_requests(include=[{'types': ['sameHost'], 'pattern': '/api/'}], last=10)",
        ],
    )
    async def mcp_browser_network_requests(
        self,
        include: Optional[List[Dict[str, Any]]] = None,
        exclude: Optional[List[Dict[str, Any]]] = None,
        first: Optional[int] = None,
        last: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Return network requests with optional filtering and limiting.

        Args:
            include (optional): Include requests matching any of these filters.
                Each filter may hold `statuses` (list of inclusive [min, max] status
                ranges, e.g. [[200, 299], [400, 499]]), `types` (subset of
                [`extension`, `sameHost`, `3rd-party`]) and `pattern`
                (case-insensitive regex on the request URL). All criteria in one
                filter must match.
            exclude (optional): Exclude requests matching any of these filters.
                Exclude has higher priority than include.
            first (optional): Return first N requests after filtering.
            last (optional): Return last N requests after filtering.

        Returns:
            Dict with:
            - ok (bool): Whether query succeeded.
            - total (int): Requests left after filtering.
            - omitted (int): Requests dropped to stay within the size limit.
            - lines (list[str]): `[METHOD] url => [status] statusText` lines, or a
              single explanatory line when nothing matched.
        """
        return self.network_requests(
            include=_parse_clauses(include, NetworkFilter),
            exclude=_parse_clauses(exclude, NetworkFilter),
            first=first,
            last=last,
        )


def _parse_clauses(payload: Optional[List[Dict[str, Any]]], clause_type: Any) -> Optional[List[Any]]:
    if payload is None:
        return None
    if not isinstance(payload, (list, tuple)):
        raise ValueError("Filters must be a list of objects")
    return [clause_type.from_dict(item) for item in payload]


def _check_count(name: str, value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"'{name}' must be a positive integer")
    return value
