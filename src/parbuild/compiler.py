"""Compilation worker - turns a batch of sources into object files.

A worker compiles its batch strictly in order, one compiler process at a
time. Failure handling is fail-fast: the first non-zero exit status cancels
a CancellationToken shared by every worker of the build, which makes all
workers stop before their next source. Objects already produced are left in
place.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from .callbacks import JobPhase, NullCallback, ProgressCallback
from .config import BuildConfiguration
from .models import BatchResult, CompilationBatch
from .paths import source_path
from .process import Invoker, format_command, run_command, split_command

logger = logging.getLogger(__name__)


class CompilationError(Exception):
    """Raised when the compiler returns a non-zero exit status.

    Attributes:
        status: Exit status of the failing compiler invocation
        command: The failing command
        source: Source file being compiled
    """

    def __init__(self, status: int, command: list[str], source: str):
        super().__init__(f"Compiler returned non-zero value: {status} ({source})")
        self.status = status
        self.command = command
        self.source = source


class CancellationToken:
    """Fail-fast signal shared by all workers of one build. Thread-safe.

    The first cancel() wins: its status, command and source are kept, later
    calls are ignored.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._status = 0
        self._command: Optional[list[str]] = None
        self._source: Optional[str] = None

    def cancel(self, status: int, command: Optional[list[str]] = None, source: Optional[str] = None) -> bool:
        """Request cancellation.

        Args:
            status: Exit status that caused the cancellation
            command: Command that failed, if any
            source: Source file that failed, if any

        Returns:
            True if this call cancelled the token, False if it was already cancelled
        """
        with self._lock:
            if self._cancelled:
                return False
            self._cancelled = True
            self._status = status
            self._command = command
            self._source = source
            return True

    @property
    def cancelled(self) -> bool:
        """True once any worker has failed."""
        with self._lock:
            return self._cancelled

    @property
    def status(self) -> int:
        """Exit status recorded by the first cancel() call."""
        with self._lock:
            return self._status

    def to_error(self) -> CompilationError:
        """Build the CompilationError describing the first failure."""
        with self._lock:
            return CompilationError(self._status, list(self._command or []), self._source or "")


def compile_command(config: BuildConfiguration, source: str, obj: Path) -> list[str]:
    """Build the compiler invocation for one source.

    Format: {compiler} {compiler_arguments} -o {object} {source_dir}/{source}

    Args:
        config: Build configuration
        source: Source path relative to the source directory
        obj: Object file to produce

    Returns:
        Compiler argument vector
    """
    return [
        *split_command(config.compiler),
        *split_command(config.compiler_arguments),
        "-o",
        os.fspath(obj),
        os.fspath(source_path(source, config)),
    ]


class CompilationWorker:
    """Compiles one batch at a time with a given compiler invoker.

    Args:
        config: Build configuration
        invoker: Runs a command and returns its exit status
        callback: Receives a RUNNING update per command and a FAILED update on failure
    """

    def __init__(
        self,
        config: BuildConfiguration,
        invoker: Invoker = run_command,
        callback: Optional[ProgressCallback] = None,
    ):
        self.config = config
        self.invoker = invoker
        self.callback = callback if callback is not None else NullCallback()

    def run(self, batch: CompilationBatch, token: CancellationToken) -> BatchResult:
        """Compile every source of the batch in order.

        Stops before the next source once the token is cancelled, and cancels
        the token itself on the first non-zero compiler status.

        Args:
            batch: Sources and objects to compile
            token: Fail-fast signal shared with the other workers

        Returns:
            BatchResult describing how far the batch got
        """
        total = len(batch)
        result = BatchResult(name=batch.name, total=total)
        logger.debug(f"Worker {threading.current_thread().name} starting {batch.name} ({total} sources)")

        for index, (source, obj) in enumerate(batch.pairs(), start=1):
            if token.cancelled:
                logger.debug(f"{batch.name}: cancelled before {source}")
                result.cancelled = True
                break

            command = compile_command(self.config, source, obj)
            self.callback.on_progress(batch.name, JobPhase.RUNNING, index, total, format_command(command))
            status = self.invoker(command)

            if status != 0:
                result.status = status
                result.failed_command = command
                token.cancel(status, command, source)
                self.callback.on_progress(batch.name, JobPhase.FAILED, index, total, f"Compiler returned non-zero value: {status}. Aborting.")
                logger.warning(f"{batch.name}: compiling {source} failed with exit status {status}")
                break

            result.compiled += 1
            self.callback.on_progress(batch.name, JobPhase.DONE, index, total, source)

        logger.debug(f"{batch.name}: compiled {result.compiled}/{total}")
        return result
