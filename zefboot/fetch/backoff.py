from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class Backoff(Protocol):
    def delay(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number `attempt` (1-based)."""
        ...


@dataclass(frozen=True)
class FixedBackoff:
    interval: float = 1.0

    def delay(self, attempt: int) -> float:  # noqa: ARG002
        return max(0.0, float(self.interval))


@dataclass(frozen=True)
class ExponentialBackoff:
    initial: float = 0.5
    factor: float = 2.0
    maximum: float = 30.0

    def delay(self, attempt: int) -> float:
        n = max(1, int(attempt))
        return max(0.0, min(self.maximum, self.initial * (self.factor ** (n - 1))))
