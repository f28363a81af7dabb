"""parbuild - minimal parallel build orchestrator for C and C++.

Public API:
    dispatch: Run a command of the table for a list of sources (embedding entry point)
    BuildConfiguration: Immutable project settings
    ProjectType: Executable, static library or shared library
    default_commands: The built-in build, install, uninstall and clean commands

Example:
    from parbuild import BuildConfiguration, ProjectType, dispatch

    config = BuildConfiguration(
        compiler="clang++ -c",
        compiler_arguments="-O2 -Wall",
        linker="clang++",
        output="demo",
        object_extension="oxx",
        project_type=ProjectType.EXECUTABLE,
    )
    sys.exit(dispatch(sys.argv, ["main.cxx", "test.cxx"], config))
"""

__version__ = "0.1.0"

from parbuild.commands import Command, FunctionCommand, default_commands
from parbuild.config import BuildConfiguration, ConfigurationError, ProjectType, load_project_file
from parbuild.dispatcher import CommandTable, dispatch

__all__ = [
    "BuildConfiguration",
    "Command",
    "CommandTable",
    "ConfigurationError",
    "FunctionCommand",
    "ProjectType",
    "__version__",
    "default_commands",
    "dispatch",
    "load_project_file",
]
