"""Tests for the progress tracker."""

import pytest

from dash_flow.progress import ProgressTracker, StepStatus

STEPS = [("load", "Load"), ("render", "Render"), ("encode", "Encode")]


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def create_tracker():
    clock = FakeClock()
    return ProgressTracker(clock=clock), clock


def test_start_process_creates_pending_steps():
    tracker, _ = create_tracker()

    tracker.start_process(STEPS)

    state = tracker.state
    assert state.is_running
    assert state.total_progress == 0
    assert state.current_step == "load"
    assert [step.status for step in state.steps] == [StepStatus.PENDING] * 3


@pytest.mark.parametrize("completed", [0, 1, 2, 3])
def test_total_progress_is_mean_of_steps(completed):
    """n completed steps out of m give round(100 * n / m)."""
    tracker, _ = create_tracker()
    tracker.start_process(STEPS)

    for step_id, _ in STEPS[:completed]:
        tracker.update_step(step_id, status=StepStatus.COMPLETED, progress=100)

    assert tracker.state.total_progress == round(100 * completed / len(STEPS))


def test_partial_progress_rounds_mean():
    tracker, _ = create_tracker()
    tracker.start_process(STEPS)

    tracker.update_step("load", progress=50)

    assert tracker.state.total_progress == 17


def test_progress_is_clamped_and_never_decreases():
    tracker, _ = create_tracker()
    tracker.start_process(STEPS)

    tracker.update_step("render", progress=60)
    tracker.update_step("render", progress=30)
    assert tracker.state.steps[1].progress == 60

    tracker.update_step("render", progress=250)
    assert tracker.state.steps[1].progress == 100


def test_step_duration_is_recorded():
    """Duration runs from the first in-progress update to completion."""
    tracker, clock = create_tracker()
    tracker.start_process(STEPS)

    tracker.update_step("load", status=StepStatus.IN_PROGRESS)
    clock.now += 1.0
    tracker.update_step("load", status=StepStatus.IN_PROGRESS, progress=50)
    clock.now += 1.5
    tracker.update_step("load", status=StepStatus.COMPLETED, progress=100)

    step = tracker.state.steps[0]
    assert step.start_time == 100.0
    assert step.end_time == 102.5
    assert step.duration == pytest.approx(2.5)


def test_process_stops_running_when_all_steps_complete():
    tracker, _ = create_tracker()
    tracker.start_process(STEPS)

    for step_id, _ in STEPS:
        tracker.update_step(step_id, status=StepStatus.IN_PROGRESS)
        tracker.update_step(step_id, status=StepStatus.COMPLETED, progress=100)

    assert tracker.state.total_progress == 100
    assert not tracker.state.is_running
    assert tracker.state.current_step == "encode"


def test_set_error_keeps_first_error():
    tracker, _ = create_tracker()
    tracker.start_process(STEPS)

    tracker.set_error("render failed", "render")
    tracker.set_error("later failure", "encode")

    state = tracker.state
    assert state.error == "render failed"
    assert not state.is_running
    assert state.steps[1].status is StepStatus.ERROR
    assert state.steps[2].status is StepStatus.PENDING


def test_start_process_clears_previous_error():
    tracker, _ = create_tracker()
    tracker.start_process(STEPS)
    tracker.set_error("boom")

    tracker.start_process(STEPS)

    assert tracker.state.error is None
    assert tracker.state.is_running


def test_unknown_step_raises():
    tracker, _ = create_tracker()
    tracker.start_process(STEPS)

    with pytest.raises(KeyError):
        tracker.update_step("missing", progress=10)


def test_subscribers_receive_snapshots_until_unsubscribed():
    tracker, _ = create_tracker()
    seen = []

    unsubscribe = tracker.subscribe(seen.append)
    tracker.start_process(STEPS)
    tracker.update_step("load", progress=30)
    unsubscribe()
    tracker.update_step("load", progress=60)

    assert len(seen) == 3
    assert seen[0].steps == ()
    assert seen[-1].steps[0].progress == 30


def test_estimated_time_remaining():
    tracker, clock = create_tracker()
    tracker.start_process(STEPS)

    clock.now += 10
    tracker.update_step("load", status=StepStatus.COMPLETED, progress=100)
    tracker.update_step("render", progress=50)

    assert tracker.state.total_progress == 50
    assert tracker.state.estimated_time_remaining == pytest.approx(10)


def test_reset():
    tracker, _ = create_tracker()
    tracker.start_process(STEPS)
    tracker.update_step("load", progress=40)

    tracker.reset()

    assert tracker.state.steps == ()
    assert tracker.state.total_progress == 0
    assert not tracker.state.is_running
