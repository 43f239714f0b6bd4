"""
Stats service - counts webhook deliveries per outward outcome.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict


# Outcomes as seen by the caller. Verification failure kinds are
# deliberately folded into "unauthorized".
OUTCOMES = (
    "triggered",
    "bad_request",
    "unauthorized",
    "payload_too_large",
    "server_error",
)


@dataclass
class DeliveryStats:
    """Counters for all deliveries since server start."""
    counts: Dict[str, int] = field(default_factory=lambda: {o: 0 for o in OUTCOMES})
    incoming_bytes: int = 0

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> Dict:
        return {
            "total": self.total,
            "incoming_bytes": self.incoming_bytes,
            **self.counts,
        }


class StatsCollector:
    """Async-safe delivery counter."""

    def __init__(self):
        self._stats = DeliveryStats()
        self._lock = asyncio.Lock()

    async def record_delivery(self, outcome: str, incoming_bytes: int = 0):
        """Record one delivery with its outward outcome."""
        if outcome not in OUTCOMES:
            raise ValueError(f"Unknown delivery outcome: {outcome}")
        async with self._lock:
            self._stats.counts[outcome] += 1
            self._stats.incoming_bytes += incoming_bytes

    async def get_stats(self) -> Dict:
        """Get a snapshot of the counters."""
        async with self._lock:
            return self._stats.to_dict()

    async def reset(self):
        async with self._lock:
            self._stats = DeliveryStats()


# Singleton instance
stats_collector = StatsCollector()
