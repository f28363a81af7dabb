"""
Centralized user-facing output for parbuild.

Every line is prefixed with the elapsed time since program launch in
MM:SS.cc format, so slow stages are easy to spot in build logs. Lines are
rendered through a Rich console: on a terminal [OK] and [FAILED] markers are
coloured, elsewhere plain text is written.

Example output:
    00:00.01 = = = [COMPILING] = = = = = = = = = = = = = = = = = = = =
    00:00.01 [I] Using 2 jobs
    00:00.02 [I] Executing (1/1): cc -c -O2 -o build/a.c.o src/a.c
    00:00.35 - - - [LINKING] - - - - - - - - - - - - - - - - - - - - -
    00:00.35 [I] Executing: ld -o dist/bin/hello build/a.c.o
    00:00.40 [I] Compiled successfully.

Usage:
    from parbuild.output import log_banner, log_info, log_status

    log_banner("COMPILING")
    log_info("Using 4 jobs")
    log_status("Removing build/a.c.o...", ok=True)
"""

import time
from typing import Optional

from rich.console import Console
from rich.text import Text

# Global state for the timer and console
_start_time: Optional[float] = None
_console: Optional[Console] = None
_verbose: bool = True

BANNER_WIDTH = 60


def init_timer() -> None:
    """
    Initialize the program timer.

    Call this at program startup to set the reference time for all timestamps.
    If not called explicitly, it will be called automatically on first log.
    """
    global _start_time
    _start_time = time.time()


def set_console(console: Optional[Console]) -> None:
    """
    Replace the console used for all output.

    Args:
        console: Rich console to write to, or None to restore the default
            console (which follows sys.stdout)
    """
    global _console
    _console = console


def get_console() -> Console:
    """
    Get the console used for output, creating the default one on first use.

    Returns:
        The active Rich console
    """
    global _console
    if _console is None:
        _console = Console(highlight=False, soft_wrap=True)
    return _console


def set_verbose(verbose: bool) -> None:
    """
    Set verbose mode for logging.

    Args:
        verbose: If True, all messages are printed. If False, verbose-only messages are dropped.
    """
    global _verbose
    _verbose = verbose


def get_elapsed() -> float:
    """
    Get elapsed time since timer initialization.

    Returns:
        Elapsed time in seconds
    """
    global _start_time
    if _start_time is None:
        init_timer()
    return time.time() - _start_time  # type: ignore


def format_timestamp() -> str:
    """
    Format the current elapsed time as MM:SS.cc.

    Returns:
        Formatted timestamp string
    """
    elapsed = get_elapsed()
    minutes = int(elapsed // 60)
    seconds = elapsed % 60
    return f"{minutes:02d}:{seconds:05.2f}"


def _print(message: Text) -> None:
    """
    Internal print function with timestamp.

    Args:
        message: Rendered line content
    """
    line = Text(f"{format_timestamp()} ")
    line.append_text(message)
    # Console.print serialises whole lines across worker threads
    get_console().print(line)


def status_text(ok: bool) -> Text:
    """
    Render an [OK] or [FAILED] marker.

    Args:
        ok: Whether the operation succeeded

    Returns:
        Styled marker text
    """
    if ok:
        return Text("[OK]", style="bold green")
    return Text("[FAILED]", style="bold red")


def log(message: str, verbose_only: bool = False) -> None:
    """
    Log a message with timestamp.

    Args:
        message: Message to log
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(Text(message))


def log_banner(title: str, major: bool = False) -> None:
    """
    Log a stage banner.

    Commands open with a major banner ("= = = [BUILD] = = ="), stages within
    a command use a minor one ("- - - [LINKING] - - -").

    Args:
        title: Banner title, rendered in brackets
        major: True for a command banner, False for a stage banner
    """
    fill = "=" if major else "-"
    head = f"{fill} {fill} {fill} [{title}] "
    pad = max(BANNER_WIDTH - len(head), 0)
    tail = " ".join(fill * ((pad + 1) // 2))
    _print(Text(f"{head}{tail}".rstrip(), style="bold"))


def log_info(message: str, verbose_only: bool = False) -> None:
    """
    Log an informational message.

    Format: [I] message

    Args:
        message: Message to log
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(Text(f"[I] {message}"))


def log_error(message: str) -> None:
    """
    Log an error message.

    Format: [E] message

    Args:
        message: Error message
    """
    _print(Text(f"[E] {message}", style="red"))


def log_warning(message: str) -> None:
    """
    Log a warning message.

    Format: [W] message

    Args:
        message: Warning message
    """
    _print(Text(f"[W] {message}", style="yellow"))


def log_status(message: str, ok: bool) -> None:
    """
    Log a per-item progress line ending in [OK] or [FAILED].

    Format: [I] message [OK]

    Args:
        message: Description of the item processed
        ok: Whether the item succeeded
    """
    line = Text(f"[I] {message} ")
    line.append_text(status_text(ok))
    _print(line)
