"""Shared models for browser log queries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InspectorConfig:
    """Immutable query-level configuration."""

    max_total_text_length: int = 2000
    settle_timeout_ms: int = 10000
    settle_quiet_period_ms: int = 1000
    load_state: str = "load"
