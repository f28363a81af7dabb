"""File capabilities used by build, install, uninstall and clean.

All operations are synchronous and report success as True. OSError is logged
and turned into False so callers can report [FAILED] for one file and keep
going with the next.
"""

import logging
import shutil
from pathlib import Path

from .config import BuildConfiguration

logger = logging.getLogger(__name__)


def make_dir(path: Path) -> bool:
    """Create a directory (and its parents) if it does not exist."""
    try:
        path.mkdir(parents=True, exist_ok=True)
        return True
    except OSError as e:
        logger.debug(f"mkdir {path} failed: {e}")
        return False


def copy_file(source: Path, destination: Path) -> bool:
    """Copy a file, creating the destination directory as needed.

    Args:
        source: File to copy
        destination: Target file path

    Returns:
        True on success
    """
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)
        return True
    except OSError as e:
        logger.debug(f"copy {source} -> {destination} failed: {e}")
        return False


def remove_file(path: Path) -> bool:
    """Remove a single file.

    Returns:
        True on success, False if the file is missing or cannot be removed
    """
    try:
        path.unlink()
        return True
    except OSError as e:
        logger.debug(f"remove {path} failed: {e}")
        return False


def setup_tree(config: BuildConfiguration) -> bool:
    """Create the build layout.

    Layout:
        build/
        dist/
            bin/
            include/
            lib/

    Returns:
        True if every directory exists afterwards
    """
    dist = Path(config.dist_dir)
    directories = [Path(config.build_dir), dist, dist / "include", dist / "bin", dist / "lib"]
    return all([make_dir(directory) for directory in directories])
