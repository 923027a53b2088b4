"""Cooperative timers driven by the frame clock.

The game loop calls ``advance(dt)`` once per frame; every timer that came due
during that span fires in due-time order, possibly several times for a
repeating timer on a slow frame. Timers remember the generation they were
scheduled in and are dropped unfired once the generation moves on, so a
callback left over from a previous round can never touch the next one.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Callable


@dataclass
class _Timer:
    name: str
    due: float
    callback: Callable[[], None]
    generation: int
    interval: float | None = None
    seq: int = field(default=0, compare=False)


class Scheduler:
    def __init__(self) -> None:
        self.now: float = 0.0
        self.generation: int = 0
        self._timers: dict[str, _Timer] = {}
        self._seq = itertools.count()

    def new_generation(self) -> int:
        """Invalidate every pending timer and return the new generation."""
        self.generation += 1
        self._timers.clear()
        return self.generation

    def call_later(self, name: str, delay: float, callback: Callable[[], None]) -> None:
        """Schedule a one-shot timer, replacing any timer with the same name."""
        self._timers[name] = _Timer(
            name=name,
            due=self.now + delay,
            callback=callback,
            generation=self.generation,
            seq=next(self._seq),
        )

    def call_every(self, name: str, interval: float, callback: Callable[[], None]) -> None:
        """Schedule a repeating timer; the first call happens one interval from now."""
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._timers[name] = _Timer(
            name=name,
            due=self.now + interval,
            callback=callback,
            generation=self.generation,
            interval=interval,
            seq=next(self._seq),
        )

    def cancel(self, name: str) -> None:
        self._timers.pop(name, None)

    def is_active(self, name: str) -> bool:
        return name in self._timers

    def advance(self, dt: float) -> int:
        """Move the clock forward by ``dt`` seconds. Returns the number of callbacks run."""
        target = self.now + max(0.0, dt)
        fired = 0
        while True:
            due = [t for t in self._timers.values() if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due, t.seq))
            self.now = max(self.now, timer.due)

            if timer.generation != self.generation:
                self._drop(timer)
                continue

            if timer.interval is not None:
                timer.due += timer.interval
            else:
                self._drop(timer)
            timer.callback()
            fired += 1
        self.now = target
        return fired

    def _drop(self, timer: _Timer) -> None:
        if self._timers.get(timer.name) is timer:
            del self._timers[timer.name]
