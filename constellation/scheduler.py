"""Single-threaded cooperative scheduling for events and animation frames.

Event handlers run to completion in the order they were posted. Animation
tasks are generators that yield once per frame; a frame first drains pending
events, then advances every live task by one step.
"""

from collections import deque
from collections.abc import Callable, Generator
from typing import Any

FrameTask = Generator[None, None, None]


class CancelToken:
    """Marks one unit of work that a later one may supersede."""

    def __init__(self, generation: int) -> None:
        self.generation = generation
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "live"
        return f"CancelToken({self.generation}, {state})"


class FrameScheduler:
    """Event queue plus per-frame generator tasks."""

    def __init__(self) -> None:
        self.frame_count = 0
        self._events: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()
        self._tasks: list[FrameTask] = []

    def post(self, handler: Callable[..., Any], *args: Any) -> None:
        """Queue an event handler to run at the start of the next frame."""
        self._events.append((handler, args))

    def spawn(self, task: FrameTask) -> None:
        """Start a cooperative task; its first step runs on the next frame."""
        self._tasks.append(task)

    @property
    def active_tasks(self) -> int:
        return len(self._tasks)

    @property
    def pending_events(self) -> int:
        return len(self._events)

    def run_pending(self) -> int:
        """Run queued handlers to completion, including ones they post."""
        handled = 0
        while self._events:
            handler, args = self._events.popleft()
            handler(*args)
            handled += 1
        return handled

    def advance_tasks(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            try:
                next(task)
            except StopIteration:
                continue
            self._tasks.append(task)
        # Tasks spawned mid-step land in the fresh list and first run next frame.

    def frame(self) -> None:
        self.run_pending()
        self.advance_tasks()
        self.frame_count += 1
