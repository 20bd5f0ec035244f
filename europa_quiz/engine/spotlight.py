"""
Result spotlight: after a country is solved or revealed its tooltip is shown
for a few seconds, then cleared. Purely cosmetic; scoring never reads it.
"""

import threading
from typing import Callable

from europa_quiz.engine.events import GameEvent, RESULT_SPOTLIGHT


class SpotlightTracker:
    """
    Holds the country whose result is currently spotlighted.
    A newer spotlight cancels and supersedes the pending clear of an older one.
    """

    def __init__(self, timer_factory: Callable = threading.Timer):
        self._timer_factory = timer_factory
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()
        self.country: str | None = None

    def show(self, country: str, duration_seconds: float) -> None:
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self.country = country
            timer = self._timer_factory(duration_seconds, self._expire, args=(self._generation,))
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._timer = timer
        timer.start()

    def _expire(self, generation: int) -> None:
        with self._lock:
            # A late timer from a superseded spotlight must not clear the newer one
            if generation == self._generation:
                self.country = None
                self._timer = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def clear(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self.country = None

    def handle_events(self, events: list[GameEvent]) -> None:
        """Pick up result_spotlight events emitted by the reducer."""
        for event in events:
            if event.type == RESULT_SPOTLIGHT:
                self.show(event.payload["country"], float(event.payload["duration_seconds"]))
