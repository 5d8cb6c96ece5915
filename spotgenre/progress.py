"""
Pipeline progress and status tracking.

A ProgressTracker holds the current (current, total, stage) triple and the
session status, notifies listeners on every update, and can mirror progress
onto a tqdm bar.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from tqdm.auto import tqdm

from .logging_utils import get_logger


class Status(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class Progress:
    current: int = 0
    total: int = 0
    stage: str = ""

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 0.0
        return min(1.0, self.current / self.total)


Listener = Callable[[Progress], None]


class ProgressTracker:
    """
    Progress state shared by the pipeline stages.

    Usage:
        tracker = ProgressTracker(show_bar=True)
        tracker.add_listener(lambda p: print(p.stage, p.current, p.total))
        tracker.update(10, 120, "Fetching liked songs...")
    """

    def __init__(self, show_bar: bool = False):
        self.show_bar = show_bar
        self.status = Status.IDLE
        self.progress = Progress()
        self.error: Optional[str] = None
        self._listeners: List[Listener] = []
        self._bar = None
        self._bar_stage: Optional[str] = None

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def update(self, current: int, total: int, stage: str) -> Progress:
        """Record progress for a stage and notify listeners."""
        if stage != self.progress.stage:
            get_logger().info(stage)
        self.progress = Progress(current=current, total=total, stage=stage)
        if self.show_bar:
            self._update_bar()
        for listener in self._listeners:
            listener(self.progress)
        return self.progress

    def start(self, stage: str = "") -> None:
        """Enter the loading state and clear any previous error."""
        self.status = Status.LOADING
        self.error = None
        self.update(0, 0, stage)

    def finish(self) -> None:
        self.status = Status.DONE
        self._close_bar()

    def fail(self, message: str) -> None:
        self.status = Status.ERROR
        self.error = message
        self._close_bar()
        get_logger().error(message)

    def reset(self) -> None:
        self.status = Status.IDLE
        self.error = None
        self.progress = Progress()
        self._close_bar()

    @property
    def loading(self) -> bool:
        return self.status == Status.LOADING

    def _update_bar(self) -> None:
        p = self.progress
        if self._bar is None or self._bar_stage != p.stage:
            self._close_bar()
            self._bar = tqdm(total=p.total or None, desc=p.stage, leave=False)
            self._bar_stage = p.stage
        if p.total and self._bar.total != p.total:
            self._bar.total = p.total
        self._bar.n = p.current
        self._bar.refresh()

    def _close_bar(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
            self._bar_stage = None
