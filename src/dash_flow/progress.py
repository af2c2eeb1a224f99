"""Progress tracking across the named stages of a generation run."""

import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterable

logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True)
class ProgressStep:
    id: str
    name: str
    status: StepStatus = StepStatus.PENDING
    progress: float = 0.0  # 0-100
    message: str | None = None
    start_time: float | None = None
    end_time: float | None = None
    duration: float | None = None  # Seconds


@dataclass(frozen=True)
class ProgressState:
    """Immutable snapshot handed to subscribers."""

    total_progress: int = 0
    current_step: str = ""
    steps: tuple[ProgressStep, ...] = ()
    is_running: bool = False
    error: str | None = None
    start_time: float | None = None
    estimated_time_remaining: float | None = None  # Seconds


ProgressListener = Callable[[ProgressState], None]


class ProgressTracker:
    """
    Tracks equally weighted steps of one process and notifies subscribers.

    Create one per application run and pass it to the pipeline. Subscribers
    receive immutable snapshots and must only observe.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._listeners: list[ProgressListener] = []
        self._state = ProgressState()

    @property
    def state(self) -> ProgressState:
        return self._state

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        """Register a listener, send it the current state, and return an unsubscribe function."""
        self._listeners.append(listener)
        listener(self._state)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start_process(self, steps: Iterable[tuple[str, str]]) -> None:
        """Start a new process with ``(id, name)`` steps, clearing any previous error."""
        step_list = [ProgressStep(id=step_id, name=name) for step_id, name in steps]
        logger.info("Starting process: %s", ", ".join(step.name for step in step_list))
        self._state = ProgressState(
            current_step=step_list[0].id if step_list else "",
            steps=tuple(step_list),
            is_running=True,
            start_time=self._clock(),
        )
        self._notify()

    def update_step(
        self,
        step_id: str,
        *,
        status: StepStatus | None = None,
        progress: float | None = None,
        message: str | None = None,
    ) -> None:
        """
        Apply a partial update to one step.

        Progress is clamped to 0-100 and never moves backwards within a step.

        Raises:
            KeyError: If no step has ``step_id``
        """
        steps = list(self._state.steps)
        index = self._index_of(step_id)
        step = steps[index]
        now = self._clock()

        updated = replace(
            step,
            status=status or step.status,
            progress=step.progress if progress is None else max(step.progress, min(100.0, max(0.0, progress))),
            message=message if message is not None else step.message,
        )
        if status is StepStatus.IN_PROGRESS and step.start_time is None:
            updated = replace(updated, start_time=now)
        if status in (StepStatus.COMPLETED, StepStatus.ERROR):
            updated = replace(updated, end_time=now)
        if updated.start_time is not None and updated.end_time is not None:
            updated = replace(updated, duration=updated.end_time - updated.start_time)
        steps[index] = updated

        if status is not None and status is not step.status:
            logger.info(
                "Step %s: %s (progress=%.0f%s)",
                step.name,
                updated.status.value,
                updated.progress,
                f", {updated.duration:.2f}s" if updated.duration is not None else "",
            )

        total = _mean_progress(steps)
        all_completed = all(s.status is StepStatus.COMPLETED for s in steps)
        self._state = replace(
            self._state,
            steps=tuple(steps),
            current_step=step_id if status is StepStatus.IN_PROGRESS else self._state.current_step,
            total_progress=total,
            estimated_time_remaining=self._estimate_remaining(total, now),
            is_running=self._state.is_running and not all_completed,
        )
        if all_completed and self._state.start_time is not None:
            logger.info(
                "Process completed in %.2fs (%d steps)", now - self._state.start_time, len(steps)
            )
        self._notify()

    def set_error(self, message: str, step_id: str | None = None) -> None:
        """Record the run's error and stop it. Only the first error of a run is kept."""
        if self._state.error is not None:
            logger.debug("Ignoring error after the first: %s", message)
            return
        logger.error("Process error%s: %s", f" in step {step_id}" if step_id else "", message)
        self._state = replace(self._state, error=message, is_running=False)
        if step_id is not None:
            self.update_step(step_id, status=StepStatus.ERROR, message=message)
        else:
            self._notify()

    def reset(self) -> None:
        logger.info("Resetting progress tracker")
        self._state = ProgressState()
        self._notify()

    def _index_of(self, step_id: str) -> int:
        for index, step in enumerate(self._state.steps):
            if step.id == step_id:
                return index
        raise KeyError(f"Step not found: {step_id}")

    def _estimate_remaining(self, total_progress: int, now: float) -> float | None:
        if self._state.start_time is None or total_progress <= 0:
            return None
        elapsed = now - self._state.start_time
        return max(0.0, (elapsed / total_progress) * 100 - elapsed)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._state)


def _mean_progress(steps: list[ProgressStep]) -> int:
    if not steps:
        return 0
    return round(sum(step.progress for step in steps) / len(steps))
