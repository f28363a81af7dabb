"""Process invocation for compiler, linker and archiver commands.

This module wraps the subprocess module so every external tool runs the same
way: as an argument vector (never through a shell), inheriting stdout and
stderr so tool output interleaves with progress lines, with stdin detached
and, on Windows, without flashing a console window.
"""

import errno
import logging
import shlex
import subprocess
import sys
from typing import Any, Callable, Sequence

logger = logging.getLogger(__name__)

# Exit statuses a POSIX shell reports for missing and non-executable commands
COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126
SIGNAL_EXIT_BASE = 128

# subprocess only defines this on Windows
CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0x08000000)

# Runs one command and returns its exit status
Invoker = Callable[[Sequence[str]], int]


def get_subprocess_creation_flags() -> int:
    """Get platform-specific subprocess creation flags.

    Returns:
        - Windows: CREATE_NO_WINDOW (prevents console window)
        - Other platforms: 0 (no special flags)
    """
    if sys.platform == "win32":
        return CREATE_NO_WINDOW
    return 0


def split_command(template: str) -> list[str]:
    """Split a configured command template into an argument vector.

    Args:
        template: Command text such as "clang++ -c" or "-O2 -I'my include'"

    Returns:
        Argument list (empty for an empty template)
    """
    return shlex.split(template, posix=sys.platform != "win32")


def format_command(argv: Sequence[str]) -> str:
    """Render an argument vector as a copy-pasteable shell command."""
    return shlex.join(str(arg) for arg in argv)


def run_command(argv: Sequence[str], **kwargs: Any) -> int:
    """Run an external command synchronously and return its exit status.

    The child inherits stdout and stderr. stdin is redirected to DEVNULL unless
    given explicitly, so a compiler can never block waiting for terminal input.

    Args:
        argv: Command and arguments
        **kwargs: Additional arguments passed to subprocess.run

    Returns:
        The command's exit status. 128 + N if it was killed by signal N,
        COMMAND_NOT_FOUND (127) if the executable does not exist,
        COMMAND_NOT_EXECUTABLE (126) if it cannot be executed.
    """
    default_flags = get_subprocess_creation_flags()

    if "creationflags" in kwargs:
        kwargs["creationflags"] = kwargs["creationflags"] | default_flags
    elif default_flags:
        kwargs["creationflags"] = default_flags

    if "stdin" not in kwargs:
        kwargs["stdin"] = subprocess.DEVNULL

    command = [str(arg) for arg in argv]
    if not command:
        raise ValueError("Cannot run an empty command")
    logger.debug("Running: %s", format_command(command))
    try:
        result = subprocess.run(command, **kwargs)
    except OSError as e:
        if e.errno in (errno.ENOENT, errno.ENOTDIR):
            logger.error("Command not found: %s (%s)", command[0], e)
            return COMMAND_NOT_FOUND
        logger.error("Command not executable: %s (%s)", command[0], e)
        return COMMAND_NOT_EXECUTABLE

    status = result.returncode
    if status < 0:
        # Killed by a signal, reported the way a POSIX shell does
        status = SIGNAL_EXIT_BASE - status
    logger.debug("Exit status %d: %s", status, command[0])
    return status
