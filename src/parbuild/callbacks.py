"""Progress callback protocol for compilation and link stages.

Defines the callback interface used by compilation workers and the linker to
report each external command, so the console layer (or a test) can observe
progress without the workers knowing how it is rendered.
"""

from enum import Enum
from typing import Protocol, runtime_checkable

from . import output


class JobPhase(Enum):
    """Phase of a single external command."""

    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


@runtime_checkable
class ProgressCallback(Protocol):
    """Protocol for receiving progress updates from workers.

    Implementations may be called concurrently from several worker threads.
    """

    def on_progress(self, batch: str, phase: JobPhase, index: int, total: int, detail: str) -> None:
        """Called when a command starts or finishes.

        Args:
            batch: Name of the batch (or stage) issuing the command.
            phase: RUNNING before the command, DONE or FAILED after it.
            index: 1-based position of the command within its batch (0 for single commands).
            total: Number of commands in the batch (0 for single commands).
            detail: The command line for RUNNING, a status message for DONE and FAILED.
        """
        ...


class NullCallback:
    """No-op callback implementation for testing and quiet use.

    Silently discards all progress updates.
    """

    def on_progress(self, batch: str, phase: JobPhase, index: int, total: int, detail: str) -> None:
        """Discard progress update."""
        pass


class ConsoleCallback:
    """Prints each command and each failure through parbuild.output."""

    def on_progress(self, batch: str, phase: JobPhase, index: int, total: int, detail: str) -> None:
        """Print progress updates."""
        if phase == JobPhase.RUNNING:
            if total:
                output.log_info(f"Executing ({index}/{total}): {detail}")
            else:
                output.log_info(f"Executing: {detail}")
        elif phase == JobPhase.FAILED:
            output.log_error(detail)
