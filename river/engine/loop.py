"""Budgeted driver for resumable generation jobs."""
from __future__ import annotations

from enum import Enum, auto
from typing import Callable, Optional, Protocol


class StepStatus(Enum):
    MORE = auto()
    DONE = auto()


class SteppedJob(Protocol):
    def step(self, budget: int) -> StepStatus:
        ...


class StepDriver:
    """Runs a job in bounded steps, calling ``between`` after every unfinished step.

    ``between`` is where a host interleaves per-frame work; it may call
    :meth:`stop` to abandon the job, which is left resumable where it stopped.
    """

    def __init__(
        self,
        budget: int = 10,
        between: Optional[Callable[[], None]] = None,
    ) -> None:
        self.budget = max(1, budget)
        self.between = between
        self._running = False

    def stop(self) -> None:
        self._running = False

    def run(self, job: SteppedJob) -> int:
        """Drive ``job`` until it is done or stopped; returns the number of steps taken."""

        self._running = True
        steps = 0
        while self._running:
            status = job.step(self.budget)
            steps += 1
            if status is StepStatus.DONE:
                break
            if self.between is not None:
                self.between()
        self._running = False
        return steps


__all__ = ["StepStatus", "StepDriver", "SteppedJob"]
