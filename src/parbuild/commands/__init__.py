"""Command implementations for parbuild.

Each built-in sub-command lives in its own module and implements the Command
protocol from parbuild.commands.base.
"""

import sys

from parbuild.commands.base import Command, CommandFunction, FunctionCommand
from parbuild.commands.build import BuildCommand
from parbuild.commands.clean import CleanCommand
from parbuild.commands.install import InstallCommand, UninstallCommand
from parbuild.process import Invoker, run_command


def default_commands(invoker: Invoker = run_command) -> list[Command]:
    """Return the built-in command table: build, install, uninstall, clean.

    install and uninstall are not available on Windows.

    Args:
        invoker: Runs compiler and linker commands for build
    """
    commands: list[Command] = [BuildCommand(invoker=invoker)]
    if sys.platform != "win32":
        commands.extend([InstallCommand(), UninstallCommand()])
    commands.append(CleanCommand())
    return commands


__all__ = [
    "BuildCommand",
    "CleanCommand",
    "Command",
    "CommandFunction",
    "FunctionCommand",
    "InstallCommand",
    "UninstallCommand",
    "default_commands",
]
