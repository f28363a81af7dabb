"""Command protocol shared by every sub-command.

A command is any object with a name, a one-line description and a run()
method. The dispatcher looks commands up by name in an ordered table.
"""

from dataclasses import dataclass
from typing import Callable, Protocol, Sequence, runtime_checkable

from parbuild.config import BuildConfiguration

CommandFunction = Callable[[Sequence[str], Sequence[str], BuildConfiguration], int]


@runtime_checkable
class Command(Protocol):
    """A named sub-command."""

    name: str
    description: str

    def run(self, args: Sequence[str], sources: Sequence[str], config: BuildConfiguration) -> int:
        """Execute the command.

        Args:
            args: Command-line arguments following the command name
            sources: Source files of the project
            config: Build configuration

        Returns:
            Exit status (0 on success)
        """
        ...


@dataclass(frozen=True)
class FunctionCommand:
    """Adapts a plain function to the Command protocol.

    Example:
        def lint(args, sources, config):
            ...
            return 0

        commands = [*default_commands(), FunctionCommand("lint", "Run the linter.", lint)]
    """

    name: str
    description: str
    function: CommandFunction

    def run(self, args: Sequence[str], sources: Sequence[str], config: BuildConfiguration) -> int:
        return self.function(args, sources, config)
