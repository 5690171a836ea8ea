"""Export pipeline lifecycle states.

This module defines the lifecycle states of one export run and a
thread-safe tracker shared by the orchestrator and producer thread.
"""

from __future__ import annotations

import threading
from typing import Literal

from core.errors import TablecastPipelineError

PipelineState = Literal["idle", "running", "draining", "completed", "failed"]
ALLOWED_STATE_TRANSITIONS: dict[PipelineState, tuple[PipelineState, ...]] = {
    "idle": ("running",),
    "running": ("draining", "failed"),
    "draining": ("completed", "failed"),
    "completed": (),
    "failed": (),
}


class PipelineStateTracker:
    """Guarded holder for the current pipeline state."""

    def __init__(self) -> None:
        self._state: PipelineState = "idle"
        self._lock = threading.Lock()

    @property
    def state(self) -> PipelineState:
        with self._lock:
            return self._state

    def transition(self, next_state: PipelineState) -> None:
        """Move to ``next_state``.

        Raises:
            TablecastPipelineError: If the transition is not allowed.
        """
        with self._lock:
            validate_transition(self._state, next_state)
            self._state = next_state


def validate_transition(current: PipelineState, next_state: PipelineState) -> None:
    """Validate one lifecycle transition."""
    if next_state not in ALLOWED_STATE_TRANSITIONS[current]:
        raise TablecastPipelineError(
            f"Invalid export pipeline transition: {current} -> {next_state}."
        )
