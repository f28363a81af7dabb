"""Linker stage.

Joins every object file into the target artifact with a single external
invocation:
    - static libraries: {archiver} r -o {target} {objects...}
    - executables and shared libraries: {linker} -o {target} {objects...} {linker_arguments}
"""

import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from .callbacks import JobPhase, NullCallback, ProgressCallback
from .config import BuildConfiguration, ProjectType
from .paths import target_path
from .process import Invoker, format_command, run_command, split_command

logger = logging.getLogger(__name__)


def link_command(config: BuildConfiguration, objects: Sequence[Path]) -> list[str]:
    """Build the link or archive command for the configured project type.

    Args:
        config: Build configuration
        objects: Object files, in source order

    Returns:
        Linker or archiver argument vector
    """
    target = os.fspath(target_path(config))
    object_args = [os.fspath(obj) for obj in objects]
    if config.project_type is ProjectType.STATIC_LIBRARY:
        return [*split_command(config.archiver), "r", "-o", target, *object_args]
    return [*split_command(config.linker), "-o", target, *object_args, *split_command(config.linker_arguments)]


def link(
    config: BuildConfiguration,
    objects: Sequence[Path],
    invoker: Invoker = run_command,
    callback: Optional[ProgressCallback] = None,
) -> int:
    """Link object files into the target artifact.

    Args:
        config: Build configuration
        objects: Object files to link
        invoker: Runs a command and returns its exit status
        callback: Receives the command before it runs and the failure, if any

    Returns:
        Exit status of the linker or archiver
    """
    callback = callback if callback is not None else NullCallback()
    command = link_command(config, objects)
    tool = "Archiver" if config.project_type is ProjectType.STATIC_LIBRARY else "Linker"

    callback.on_progress("link", JobPhase.RUNNING, 0, 0, format_command(command))
    status = invoker(command)
    if status != 0:
        logger.warning(f"{tool} failed with exit status {status}")
        callback.on_progress("link", JobPhase.FAILED, 0, 0, f"{tool} returned non-zero value: {status}.")
    else:
        callback.on_progress("link", JobPhase.DONE, 0, 0, os.fspath(target_path(config)))
    return status
