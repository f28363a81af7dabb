"""Command dispatcher.

Maps the first command-line argument to a command of the table:
    - no command: run the first command of the table
    - "help", "-h", "--help": list the commands
    - a known name: run that command with the other arguments; options may
      come before or after it
    - anything else: report it and return 127
"""

import logging
import os
from typing import Iterable, Iterator, Optional, Sequence

from . import output
from .commands import Command, default_commands
from .config import BuildConfiguration, ConfigurationError
from .scheduler import JOBS_FLAGS

logger = logging.getLogger(__name__)

EXIT_COMMAND_NOT_FOUND = 127
HELP_ALIASES = ("help", "-h", "--help")


class CommandTable:
    """Ordered, name-addressable set of commands.

    Args:
        commands: Commands in presentation order; the first one is the default

    Raises:
        ConfigurationError: If the table is empty or two commands share a name
    """

    def __init__(self, commands: Iterable[Command]):
        self._commands: list[Command] = list(commands)
        if not self._commands:
            raise ConfigurationError("Build commands must be specified")
        names = [command.name for command in self._commands]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate command names: {', '.join(duplicates)}")

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def default(self) -> Command:
        """The command run when none is given."""
        return self._commands[0]

    @property
    def names(self) -> list[str]:
        """Command names in table order."""
        return [command.name for command in self._commands]

    def get(self, name: str) -> Optional[Command]:
        """Look up a command by name."""
        for command in self._commands:
            if command.name == name:
                return command
        return None


def split_command_name(args: Sequence[str]) -> tuple[Optional[str], list[str]]:
    """Find the command name among the arguments.

    The command is the first argument that is neither an option nor the value
    of -j/--jobs.

    Args:
        args: Arguments following the program name

    Returns:
        Tuple of (command name or None, remaining arguments in order)
    """
    index = 0
    while index < len(args):
        arg = args[index]
        if arg in JOBS_FLAGS:
            index += 2
        elif arg.startswith("-"):
            index += 1
        else:
            return arg, [*args[:index], *args[index + 1 :]]
    return None, list(args)


def render_help(prog: str, commands: CommandTable) -> None:
    """Print usage and the list of available commands."""
    output.log(f"Usage: {prog} [command] <options>")
    output.log("Defaults to the first available command if no command is specified. Available commands:")
    for command in commands:
        output.log(f" - {command.name} - {command.description}")


def dispatch(
    argv: Sequence[str],
    sources: Sequence[str],
    config: BuildConfiguration,
    commands: Optional[Iterable[Command]] = None,
) -> int:
    """Run the command selected by argv.

    Args:
        argv: Full argument vector, argv[0] being the program name
        sources: Source files of the project
        config: Build configuration
        commands: Command table (defaults to build, install, uninstall, clean)

    Returns:
        Exit status of the command, 0 for help, 127 for an unknown command

    Raises:
        ConfigurationError: If no sources or no commands are given
    """
    if not sources:
        raise ConfigurationError("Source files must be specified")
    table = CommandTable(default_commands() if commands is None else commands)

    prog = os.path.basename(argv[0]) if argv else "parbuild"
    args = list(argv[1:])

    if args and args[0] in HELP_ALIASES:
        render_help(prog, table)
        return 0

    name, rest = split_command_name(args)
    if name is None:
        command = table.default
        logger.debug(f"No command given, running default: {command.name}")
        return command.run(rest, sources, config)

    command = table.get(name)
    if command is None:
        output.log_error(f"Command not found: `{name}`. Run `{prog} help` to list available commands.")
        return EXIT_COMMAND_NOT_FOUND

    logger.debug(f"Running command: {name} {rest}")
    return command.run(rest, sources, config)
