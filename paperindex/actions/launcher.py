"""
Launching of external tools: PDF viewer, file manager, editor and mail client.

Commands come from the ``commands`` config section as shell-style templates.
Processes are started and left running; their output and exit status are
never looked at.
"""

import shlex
import subprocess
from pathlib import Path
from typing import List, Union

from ..core import get_config, get_logger, LaunchError
from ..core.config_loader import CommandsConfig

logger = get_logger(__name__)


def build_command(template: str, path: Union[str, Path], line: int = None) -> List[str]:
    """
    Expand a command template into an argument list.

    The template is split first and placeholders are filled per argument,
    so paths containing spaces stay a single argument.

    Args:
        template: e.g. ``"vi +{line} {path}"``.
        path: Absolute file path.
        line: Line number for ``{line}``.

    Returns:
        Argument list for subprocess.

    Raises:
        LaunchError: If the template is empty or malformed.
    """
    path = Path(path)
    values = {
        "path": str(path),
        "dir": str(path.parent),
        "line": "" if line is None else str(line),
    }

    try:
        arguments = [argument.format(**values) for argument in shlex.split(template)]
    except (ValueError, KeyError, IndexError) as e:
        raise LaunchError(f"Invalid command template '{template}': {e}")

    if not arguments:
        raise LaunchError("Command template is empty")

    return arguments


class Launcher:
    """
    Starts external programs without waiting for them.

    Each method receives an absolute path and returns the argument list that
    was started.
    """

    def __init__(self, commands: CommandsConfig = None):
        """
        Initialize the launcher.

        Args:
            commands: Command templates. Defaults to config value.
        """
        self.commands = commands or get_config().commands

    def view(self, path: Union[str, Path]) -> List[str]:
        """Open a PDF in the viewer."""
        return self._spawn(build_command(self.commands.viewer, path))

    def reveal(self, path: Union[str, Path]) -> List[str]:
        """Show a file in the file manager."""
        return self._spawn(build_command(self.commands.reveal, path))

    def mail(self, path: Union[str, Path]) -> List[str]:
        """Compose an email with the file attached."""
        return self._spawn(build_command(self.commands.mail, path))

    def edit(self, path: Union[str, Path], line: int) -> List[str]:
        """Open a text file in the editor at a given line."""
        # Terminal editors need the controlling terminal, so stdio is inherited.
        return self._spawn(build_command(self.commands.editor, path, line), quiet=False)

    def _spawn(self, command: List[str], quiet: bool = True) -> List[str]:
        logger.info(f"Launching: {' '.join(command)}")

        kwargs = {"start_new_session": quiet}
        if quiet:
            kwargs.update(
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL
            )

        try:
            subprocess.Popen(command, **kwargs)
        except OSError as e:
            raise LaunchError(f"Cannot start '{command[0]}': {e}", command=command)

        return command


if __name__ == "__main__":
    import sys

    target = Path(sys.argv[1] if len(sys.argv) > 1 else "paper.pdf").resolve()
    commands = get_config().commands

    print(build_command(commands.viewer, target))
    print(build_command(commands.reveal, target))
    print(build_command(commands.editor, target, 12))
    print(build_command(commands.mail, target))
