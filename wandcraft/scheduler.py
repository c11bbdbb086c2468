"""
Tick Scheduler
===============
Delivers tasks at a tick, or when a named event is triggered.

Tasks due on the same tick come out in the order they were scheduled.
"""

import heapq
import itertools
from typing import Any, Dict, Hashable, List, Tuple


class TickScheduler:
    """Min-heap of (tick, sequence, task) plus per-event waiting lists."""

    def __init__(self):
        self._queue: List[Tuple[int, int, Any]] = []
        self._sequence = itertools.count()
        self._waiting: Dict[Hashable, List[Any]] = {}

    def __len__(self) -> int:
        return len(self._queue)

    def schedule(self, tick: int, task: Any) -> None:
        """Run `task` once the simulation reaches `tick`."""
        heapq.heappush(self._queue, (tick, next(self._sequence), task))

    def pop_due(self, tick: int) -> List[Any]:
        """Remove and return every task scheduled at or before `tick`."""
        due = []
        while self._queue and self._queue[0][0] <= tick:
            due.append(heapq.heappop(self._queue)[2])
        return due

    def next_tick(self):
        """Tick of the earliest pending task, or None."""
        return self._queue[0][0] if self._queue else None

    def schedule_on(self, event: Hashable, task: Any) -> None:
        """Run `task` when `event` is triggered."""
        self._waiting.setdefault(event, []).append(task)

    def trigger_event(self, event: Hashable) -> List[Any]:
        """Return (and forget) the tasks waiting on `event`."""
        return self._waiting.pop(event, [])

    def pending(self) -> List[Tuple[int, Any]]:
        """Snapshot of (tick, task) pairs in delivery order."""
        return [(tick, task) for tick, _, task in sorted(self._queue)]
