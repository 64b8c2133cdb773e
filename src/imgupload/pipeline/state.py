"""Pipeline run state machine.

Tracks the stage a single pipeline run has reached and enforces valid
transitions.  Every run ends in ``DONE``, whether it passed through
``UPLOADED`` or ``FAILED``.
"""

from __future__ import annotations

from imgupload.models import PipelineStage


class PipelineStateMachine:
    """Finite state machine for one pipeline run.

    Valid transitions::

        START       -> NORMALIZED | FAILED
        NORMALIZED  -> RESIZED | SKIPPED | FAILED
        RESIZED     -> UPLOADED | FAILED
        SKIPPED     -> UPLOADED | FAILED
        UPLOADED    -> DONE
        FAILED      -> DONE
        DONE        -> (terminal)

    Parameters
    ----------
    run_id:
        Identifier of the run being tracked, used in error messages.
    """

    VALID_TRANSITIONS: dict[PipelineStage, set[PipelineStage]] = {
        PipelineStage.START: {PipelineStage.NORMALIZED, PipelineStage.FAILED},
        PipelineStage.NORMALIZED: {
            PipelineStage.RESIZED,
            PipelineStage.SKIPPED,
            PipelineStage.FAILED,
        },
        PipelineStage.RESIZED: {PipelineStage.UPLOADED, PipelineStage.FAILED},
        PipelineStage.SKIPPED: {PipelineStage.UPLOADED, PipelineStage.FAILED},
        PipelineStage.UPLOADED: {PipelineStage.DONE},
        PipelineStage.FAILED: {PipelineStage.DONE},
        PipelineStage.DONE: set(),
    }

    def __init__(self, run_id: str) -> None:
        self.run_id: str = run_id
        self.state: PipelineStage = PipelineStage.START
        self.history: list[PipelineStage] = [PipelineStage.START]

    def transition(self, new_state: PipelineStage) -> None:
        """Move to *new_state*.

        Raises
        ------
        ValueError
            If the transition from the current state to *new_state* is not
            valid.
        """
        allowed = self.VALID_TRANSITIONS.get(self.state, set())

        if new_state not in allowed:
            raise ValueError(
                f"Invalid state transition: {self.state.value} -> {new_state.value} "
                f"for run {self.run_id}. "
                f"Allowed transitions from {self.state.value}: "
                f"{{{', '.join(sorted(s.value for s in allowed))}}}"
            )

        self.state = new_state
        self.history.append(new_state)

    @property
    def is_terminal(self) -> bool:
        return self.state == PipelineStage.DONE
