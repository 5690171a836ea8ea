"""Unit tests for pipeline lifecycle transitions."""

from __future__ import annotations

import pytest

from core.errors import TablecastPipelineError
from pipeline.pipeline_state import PipelineStateTracker


def test_tracker_follows_success_path() -> None:
    """Idle, running, draining, completed is the happy path."""
    tracker = PipelineStateTracker()
    for state in ("running", "draining", "completed"):
        tracker.transition(state)

    assert tracker.state == "completed"


def test_terminal_states_reject_transitions() -> None:
    """Completed runs cannot be failed afterwards."""
    tracker = PipelineStateTracker()
    tracker.transition("running")
    tracker.transition("draining")
    tracker.transition("completed")

    with pytest.raises(TablecastPipelineError):
        tracker.transition("failed")
