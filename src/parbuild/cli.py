"""
Command-line interface for parbuild.

This module provides the `parbuild` CLI tool. Global options are parsed here;
the command name and everything after it (including -j/--jobs) is handed to
the dispatcher.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from parbuild import __version__, output
from parbuild.config import ConfigurationError, load_project_file
from parbuild.dispatcher import dispatch

DEFAULT_PROJECT_FILE = "parbuild.ini"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool) -> None:
    """Send diagnostics to stderr: WARNING and above, everything with --verbose."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(console_handler)


def build_parser() -> argparse.ArgumentParser:
    """Create the parser for global options."""
    parser = argparse.ArgumentParser(
        prog="parbuild",
        description="parbuild - minimal parallel build orchestrator for C and C++",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"parbuild {__version__}",
    )
    parser.add_argument(
        "-C",
        "--config",
        type=Path,
        default=Path(DEFAULT_PROJECT_FILE),
        help=f"Project file (default: {DEFAULT_PROJECT_FILE})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show diagnostic logging and build timing",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """parbuild - minimal parallel build orchestrator.

    Examples:
        parbuild                     # Run the default command (build)
        parbuild build -j 8          # Build with 8 compilation workers
        parbuild clean               # Remove objects and the target
        parbuild -C other.ini help   # List commands
    """
    raw_args = list(sys.argv[1:] if argv is None else argv)
    parsed, rest = build_parser().parse_known_args(raw_args)

    setup_logging(parsed.verbose)
    output.set_verbose(parsed.verbose)
    output.init_timer()

    try:
        config, sources = load_project_file(parsed.config)
        return dispatch(["parbuild", *rest], sources, config)

    except FileNotFoundError as e:
        output.log_error(str(e))
        output.log_error(f"Run parbuild from a directory containing {DEFAULT_PROJECT_FILE}, or pass -C PATH.")
        return 2

    except ConfigurationError as e:
        output.log_error(f"Configuration error: {e}")
        return 2

    except KeyboardInterrupt:
        output.log_warning("Build interrupted")
        return 130  # Standard exit code for SIGINT

    except Exception as e:
        output.log_error(f"Unexpected error: {type(e).__name__}: {e}")
        if parsed.verbose:
            import traceback

            output.log(traceback.format_exc())
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
