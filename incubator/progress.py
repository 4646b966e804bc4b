"""Push-only progress reporting.

The pipeline emits ``ProgressEvent`` values into a caller-owned sink. There is
no acknowledgement and no backpressure: a sink must return promptly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from rich.progress import Progress, TaskID


@dataclass(frozen=True)
class ProgressEvent:
    """An increment of the overall percentage plus an optional stage label."""

    label: Optional[str] = None
    increment: float = 0.0


class ProgressSink(Protocol):
    def report(self, event: ProgressEvent) -> None: ...


class NullProgress:
    """Discards every event."""

    def report(self, event: ProgressEvent) -> None:
        return None


class CallbackProgress:
    """Adapts a plain callable into a ``ProgressSink``."""

    def __init__(self, callback: Callable[[ProgressEvent], None]) -> None:
        self._callback = callback

    def report(self, event: ProgressEvent) -> None:
        self._callback(event)


class RichProgressSink:
    """Drives one Rich progress task that runs from 0 to 100.

    The label of the latest event becomes the task description; events
    without a label only advance the bar.
    """

    def __init__(self, progress: Progress, description: str = "Creating project") -> None:
        self.progress = progress
        self.task_id: TaskID = progress.add_task(description, total=100)

    def report(self, event: ProgressEvent) -> None:
        if event.label:
            self.progress.update(self.task_id, description=event.label)
        if event.increment:
            self.progress.advance(self.task_id, event.increment)
