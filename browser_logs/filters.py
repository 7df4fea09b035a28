"""Include/exclude filter clauses for console and network records."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from .errors import InvalidFilterPattern
from .records import CONSOLE_SEVERITIES, REQUEST_TYPES, ConsoleRecord, NetworkRecord, classify_request

T = TypeVar("T")
StatusRange = Tuple[int, int]


@dataclass(frozen=True)
class ConsoleFilter:
    """One console clause. Present criteria are ANDed; no criteria matches all."""

    types: Optional[Tuple[str, ...]] = None
    pattern: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ConsoleFilter":
        data = _require_mapping(payload)
        return cls(
            types=_parse_types(data.get("types"), CONSOLE_SEVERITIES),
            pattern=_parse_pattern(data.get("pattern")),
        )


@dataclass(frozen=True)
class NetworkFilter:
    """One network clause. Present criteria are ANDed; no criteria matches all."""

    statuses: Optional[Tuple[StatusRange, ...]] = None
    types: Optional[Tuple[str, ...]] = None
    pattern: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "NetworkFilter":
        data = _require_mapping(payload)
        return cls(
            statuses=_parse_statuses(data.get("statuses")),
            types=_parse_types(data.get("types"), REQUEST_TYPES),
            pattern=_parse_pattern(data.get("pattern")),
        )


def compile_pattern(pattern: str) -> "re.Pattern[str]":
    """Compile a clause pattern case-insensitively. Never cached."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise InvalidFilterPattern(pattern, str(e)) from e


def matches_console(record: ConsoleRecord, clause: ConsoleFilter) -> bool:
    if clause.types and record.severity not in clause.types:
        return False
    if clause.pattern and not compile_pattern(clause.pattern).search(record.text):
        return False
    return True


def matches_network(record: NetworkRecord, clause: NetworkFilter, page_url: str) -> bool:
    if clause.statuses:
        # Requests still in flight (or failed) have no status to compare.
        if record.outcome is None:
            return False
        status = record.outcome.status
        if not any(low <= status <= high for low, high in clause.statuses):
            return False
    if clause.types and classify_request(record.url, page_url) not in clause.types:
        return False
    if clause.pattern and not compile_pattern(clause.pattern).search(record.url):
        return False
    return True


def apply_filters(
    records: Iterable[T],
    matches: Callable[[T, Any], bool],
    include: Optional[Sequence[Any]] = None,
    exclude: Optional[Sequence[Any]] = None,
) -> List[T]:
    """Keep records matching any include clause and no exclude clause, in order."""
    out: List[T] = []
    for record in records:
        if include and not any(matches(record, clause) for clause in include):
            continue
        if exclude and any(matches(record, clause) for clause in exclude):
            continue
        out.append(record)
    return out


def filter_console(
    records: Iterable[ConsoleRecord],
    include: Optional[Sequence[ConsoleFilter]] = None,
    exclude: Optional[Sequence[ConsoleFilter]] = None,
) -> List[ConsoleRecord]:
    _validate_patterns(include, exclude)
    return apply_filters(records, matches_console, include, exclude)


def filter_network(
    records: Iterable[NetworkRecord],
    page_url: str,
    include: Optional[Sequence[NetworkFilter]] = None,
    exclude: Optional[Sequence[NetworkFilter]] = None,
) -> List[NetworkRecord]:
    _validate_patterns(include, exclude)
    return apply_filters(
        records,
        lambda record, clause: matches_network(record, clause, page_url),
        include,
        exclude,
    )


def _validate_patterns(*clause_sets: Optional[Sequence[Any]]) -> None:
    for clauses in clause_sets:
        for clause in clauses or ():
            if clause.pattern:
                compile_pattern(clause.pattern)


def _require_mapping(payload: Any) -> Dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError(f"Filter clause must be an object, got {type(payload).__name__}")
    return payload


def _parse_types(value: Any, allowed: Sequence[str]) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValueError("Filter 'types' must be a list")
    out: List[str] = []
    for item in value:
        name = str(item)
        if name not in allowed:
            raise ValueError(f"Unknown filter type {name!r}; allowed values: {', '.join(allowed)}")
        out.append(name)
    return tuple(out)


def _parse_statuses(value: Any) -> Optional[Tuple[StatusRange, ...]]:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        raise ValueError("Filter 'statuses' must be a list of [min, max] pairs")
    out: List[StatusRange] = []
    for item in value:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ValueError(f"Status range must be a [min, max] pair, got {item!r}")
        low, high = item
        if isinstance(low, bool) or isinstance(high, bool):
            raise ValueError(f"Status range bounds must be integers, got {item!r}")
        try:
            out.append((int(low), int(high)))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Status range bounds must be integers, got {item!r}") from e
    return tuple(out)


def _parse_pattern(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Filter 'pattern' must be a string")
    return value
