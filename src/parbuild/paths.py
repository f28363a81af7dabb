"""Path mapping between sources, objects and installed artifacts.

Every path used by build, install, uninstall and clean is derived here from
the BuildConfiguration, so clean can recompute exactly what build produced
from the source list alone.
"""

import os
from pathlib import Path
from typing import Iterable

from .config import BuildConfiguration

_SEPARATORS = tuple(dict.fromkeys(sep for sep in ("/", os.sep, os.altsep) if sep))


def flatten_source(source: str) -> str:
    """Replace every path separator in a source path with '.'.

    Example: "net/http/client.c" -> "net.http.client.c"
    """
    flat = source
    for sep in _SEPARATORS:
        flat = flat.replace(sep, ".")
    return flat


def object_path(source: str, config: BuildConfiguration) -> Path:
    """Map a source path to its object file under the build directory.

    Subdirectories of the source are flattened into the file name; the build
    directory itself is kept as is. Two sources that flatten to the same name
    (e.g. "a/b.c" and "a.b.c") share an object path.

    Args:
        source: Source path relative to the source directory
        config: Build configuration

    Returns:
        Object path, e.g. build/sub.main.c.o for "sub/main.c"
    """
    return Path(config.build_dir) / f"{flatten_source(source)}.{config.object_extension}"


def object_paths(sources: Iterable[str], config: BuildConfiguration) -> list[Path]:
    """Map every source to its object path, preserving order."""
    return [object_path(source, config) for source in sources]


def source_path(source: str, config: BuildConfiguration) -> Path:
    """Location of a source file on disk."""
    return Path(config.source_dir) / source


def target_path(config: BuildConfiguration) -> Path:
    """Location of the linked artifact inside the dist tree."""
    return Path(config.dist_dir) / config.project_type.install_subdir / config.output


def install_target_path(config: BuildConfiguration) -> Path:
    """Location of the artifact under the install prefix."""
    return Path(config.install_prefix) / config.project_type.install_subdir / config.output


def header_source_path(header: str, config: BuildConfiguration) -> Path:
    """Location of an exported header in the source tree."""
    return Path(config.source_dir) / header


def header_dist_path(header: str, config: BuildConfiguration) -> Path:
    """Location of an exported header in the dist tree."""
    return Path(config.dist_dir) / "include" / header


def header_install_path(header: str, config: BuildConfiguration) -> Path:
    """Location of an exported header under the install prefix."""
    return Path(config.install_prefix) / "include" / header
