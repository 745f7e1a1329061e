"""Wall-clock budgets shared by every bounded search."""

from __future__ import annotations

import threading
import time
from typing import Optional


class Budget:
    """Cooperative cancellation token with an absolute monotonic deadline.

    Searches call :meth:`expired` once per step. An optional event lets a
    coordinator cancel several searches at once (first success wins).
    """

    def __init__(self, budget_ms: float, cancel_event: Optional[threading.Event] = None) -> None:
        self.started = time.monotonic()
        self.deadline = self.started + max(0.0, budget_ms) / 1000.0
        self.cancel_event = cancel_event

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def expired(self) -> bool:
        return self.cancelled or time.monotonic() >= self.deadline

    @property
    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.started) * 1000.0
