"""Bounded, filterable views over browser console and network logs."""

from .barrier import BarrierState, CompletionBarrier, wait_for_completion
from .errors import BrowserLogsError, InvalidFilterPattern
from .filters import ConsoleFilter, NetworkFilter, filter_console, filter_network
from .inspector import LogInspectorFeature
from .models import InspectorConfig
from .records import ConsoleRecord, NetworkOutcome, NetworkRecord, classify_request
from .store import SessionLogStore
from .window import trim_lines

__all__ = [
    "BarrierState",
    "BrowserLogsError",
    "CompletionBarrier",
    "ConsoleFilter",
    "ConsoleRecord",
    "InspectorConfig",
    "InvalidFilterPattern",
    "LogInspectorFeature",
    "NetworkFilter",
    "NetworkOutcome",
    "NetworkRecord",
    "SessionLogStore",
    "classify_request",
    "filter_console",
    "filter_network",
    "trim_lines",
    "wait_for_completion",
]
