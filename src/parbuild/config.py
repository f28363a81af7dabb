"""Build Configuration - Immutable project settings.

This module defines:
- ProjectType: Kind of artifact produced by the link stage
- BuildConfiguration: Every setting a build, install or clean needs
- load_project_file(): Reads a configuration and source list from an INI file

Design:
    BuildConfiguration is created once by the caller (the CLI or an embedding
    script) and passed explicitly into every command. It is frozen, so worker
    threads can read it without locking.
"""

import configparser
import sys
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, List, Tuple


class ConfigurationError(Exception):
    """Raised when the project configuration is missing or invalid."""

    pass


class ProjectType(Enum):
    """Kind of artifact the project links into."""

    EXECUTABLE = "executable"
    STATIC_LIBRARY = "static"
    SHARED_LIBRARY = "shared"

    def __str__(self) -> str:
        """Return the string value for display."""
        return self.value

    @property
    def install_subdir(self) -> str:
        """Subdirectory of the dist tree and install prefix holding the artifact."""
        return "bin" if self is ProjectType.EXECUTABLE else "lib"

    @property
    def artifact_suffix(self) -> str:
        """Platform file suffix for this kind of artifact."""
        windows = sys.platform == "win32"
        if self is ProjectType.EXECUTABLE:
            return ".exe" if windows else ""
        if self is ProjectType.STATIC_LIBRARY:
            return ".lib" if windows else ".a"
        return ".dll" if windows else ".so"

    def artifact_name(self, name: str) -> str:
        """Append the platform suffix to a bare artifact name."""
        return f"{name}{self.artifact_suffix}"

    @classmethod
    def parse(cls, text: str) -> "ProjectType":
        """Parse a project type from its short or long spelling.

        Args:
            text: One of "executable", "static", "shared", "static_library",
                "shared_library" (case-insensitive)

        Returns:
            Matching ProjectType

        Raises:
            ConfigurationError: If the text names no known project type
        """
        key = text.strip().lower().replace("-", "_")
        aliases = {
            "executable": cls.EXECUTABLE,
            "exe": cls.EXECUTABLE,
            "static": cls.STATIC_LIBRARY,
            "static_library": cls.STATIC_LIBRARY,
            "shared": cls.SHARED_LIBRARY,
            "shared_library": cls.SHARED_LIBRARY,
        }
        if key not in aliases:
            raise ConfigurationError(f"Unknown project type: {text!r} (expected executable, static or shared)")
        return aliases[key]


@dataclass(frozen=True)
class BuildConfiguration:
    """All settings read by build, install, uninstall and clean.

    Command templates (compiler, linker, archiver) and argument strings are
    split with shell rules before execution, so "clang++ -c" and
    "-O2 -Wall" are valid values.

    Attributes:
        source_dir: Directory that source and header paths are relative to
        build_dir: Directory receiving object files
        dist_dir: Root of the dist tree (bin/, lib/, include/)
        compiler: Compiler command template (e.g. "cc -c")
        compiler_arguments: Extra compiler arguments
        linker: Linker command template for executables and shared libraries
        linker_arguments: Extra linker arguments, appended after the objects
        archiver: Archiver command used for static libraries
        output: File name of the target artifact
        install_prefix: Root directory used by install and uninstall
        object_extension: Extension appended to object file names
        project_type: Kind of artifact to produce
        header_files: Headers to export into dist/include and install
    """

    source_dir: str = "src"
    build_dir: str = "build"
    dist_dir: str = "dist"
    compiler: str = "cc -c"
    compiler_arguments: str = "-O2"
    linker: str = "ld"
    linker_arguments: str = ""
    archiver: str = "ar"
    output: str = field(default_factory=lambda: ProjectType.EXECUTABLE.artifact_name("output"))
    install_prefix: str = "/usr"
    object_extension: str = "o"
    project_type: ProjectType = ProjectType.EXECUTABLE
    header_files: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Lists are accepted for convenience but stored as tuples
        if not isinstance(self.header_files, tuple):
            object.__setattr__(self, "header_files", tuple(self.header_files))

    def with_overrides(self, **changes: Any) -> "BuildConfiguration":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


_PROJECT_KEYS = ("name", "type", "output", "sources", "headers", "install_prefix")
_TOOLCHAIN_KEYS = ("compiler", "compiler_arguments", "linker", "linker_arguments", "archiver", "object_extension")
_LAYOUT_KEYS = ("source_dir", "build_dir", "dist_dir")


def _split_list(value: str) -> List[str]:
    """Split a multi-line or whitespace separated INI value into items."""
    return [item for item in value.split() if item]


def load_project_file(path: Path) -> Tuple[BuildConfiguration, List[str]]:
    """Load a build configuration and source list from a project file.

    The file has a mandatory [project] section and optional [toolchain] and
    [layout] sections. Missing keys keep the BuildConfiguration defaults.

    Args:
        path: Path to the INI project file

    Returns:
        Tuple of (configuration, source files)

    Raises:
        FileNotFoundError: If the project file does not exist
        ConfigurationError: If the file is malformed, unreadable or lists no sources
    """
    if not path.exists():
        raise FileNotFoundError(f"Project file not found: {path}")

    parser = configparser.ConfigParser(inline_comment_prefixes=(";", "#"), interpolation=None)
    try:
        with open(path, encoding="utf-8") as f:
            parser.read_file(f)
    except (configparser.Error, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if not parser.has_section("project"):
        raise ConfigurationError(f"Missing [project] section in {path}")

    project = parser["project"]
    for key in project:
        if key not in _PROJECT_KEYS:
            raise ConfigurationError(f"Unknown key {key!r} in [project] of {path}")

    project_type = ProjectType.parse(project.get("type", "executable"))
    sources = _split_list(project.get("sources", ""))
    if not sources:
        raise ConfigurationError(f"No sources listed in [project] of {path}")

    values: dict[str, Any] = {
        "project_type": project_type,
        "output": project.get("output") or project_type.artifact_name(project.get("name", "output")),
        "header_files": tuple(_split_list(project.get("headers", ""))),
    }
    if "install_prefix" in project:
        values["install_prefix"] = project["install_prefix"]

    for section, keys in (("toolchain", _TOOLCHAIN_KEYS), ("layout", _LAYOUT_KEYS)):
        if not parser.has_section(section):
            continue
        for key, value in parser[section].items():
            if key not in keys:
                raise ConfigurationError(f"Unknown key {key!r} in [{section}] of {path}")
            values[key] = value

    return BuildConfiguration(**values), sources
