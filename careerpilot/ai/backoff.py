"""Backoff schedules for the completion client.

Rate-limit responses and transient server/network failures wait on different
schedules, so they are kept as two named policies.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExponentialBackoff:
    base_ms: int

    def delay_ms(self, attempt: int) -> int:
        """Delay before the attempt following *attempt* (0-based)."""
        return (2 ** attempt) * self.base_ms

    def delay_seconds(self, attempt: int) -> float:
        return self.delay_ms(attempt) / 1000.0


@dataclass(frozen=True)
class RateLimitBackoff(ExponentialBackoff):
    """HTTP 429: 2s, 4s, 8s, 16s, ..."""

    base_ms: int = 2000


@dataclass(frozen=True)
class TransientErrorBackoff(ExponentialBackoff):
    """HTTP >= 500 and connection resets: 1s, 2s, 4s, ..."""

    base_ms: int = 1000
