"""The interactive loop: read a line, parse it, run it."""

from __future__ import annotations

import os
import signal
import sys
from enum import Enum
from typing import Any, Optional, TextIO

from minishell.builtins import ShellExit
from minishell.command import build_commands
from minishell.environment import EnvSource, Environment, ShellContext
from minishell.executor import execute
from minishell.redirections import Reader
from minishell.syntax import check_line
from minishell.tokens import ParseError, check_tokens, tokenize

PROMPT = "->"


class ShellMode(Enum):
    """What the shell is doing, which decides how it answers signals."""

    IDLE = "idle"
    HEREDOC = "heredoc"
    EXEC = "exec"


def _read_line(prompt: str) -> Optional[str]:
    try:
        return input(prompt)
    except EOFError:
        return None


class Shell:
    """A shell session with its own environment and last exit status."""

    def __init__(
        self,
        environ: Optional[EnvSource] = None,
        reader: Optional[Reader] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.ctx = ShellContext(Environment(os.environ if environ is None else environ))
        self.reader: Reader = reader if reader is not None else _read_line
        self.out: TextIO = out if out is not None else sys.stdout
        self.mode = ShellMode.IDLE

    def _read_heredoc_line(self, prompt: str) -> Optional[str]:
        previous = self.mode
        self.mode = ShellMode.HEREDOC
        try:
            return self.reader(prompt)
        finally:
            if self.mode is ShellMode.HEREDOC:
                self.mode = previous

    def run_line(self, line: str) -> int:
        """Parse and run one command line; return the resulting status.

        Raises ShellExit when the line runs the exit builtin.
        """
        if not line:
            return self.ctx.status
        try:
            check_line(line)
            commands = build_commands(check_tokens(tokenize(line)))
        except ParseError as exc:
            self.out.write(f"Error\n{exc}\n")
            self.ctx.status = 1
            return 1
        self.mode = ShellMode.EXEC
        try:
            return execute(self.ctx, commands, self._read_heredoc_line)
        finally:
            self.mode = ShellMode.IDLE

    def run(self) -> int:
        """Read and run lines until end of input or exit; return the exit status."""
        while True:
            self.mode = ShellMode.IDLE
            line = self.reader(PROMPT)
            if line is None:
                return 0
            if line == "":
                continue
            try:
                self.run_line(line)
            except ShellExit as exc:
                return exc.status

    def _on_sigint(self, signum: int, frame: Any) -> None:
        if self.mode is ShellMode.IDLE:
            self.out.write("^C\n")
        elif self.mode is ShellMode.HEREDOC:
            self.out.write("\nHere-doc interrupted\n")
            self.mode = ShellMode.IDLE
        else:
            self.out.write("\nProgram interrupted by Ctrl-C\n")
        self.out.flush()

    def _on_sigquit(self, signum: int, frame: Any) -> None:
        if self.mode is ShellMode.EXEC:
            self.out.write("Quit (core dumped)\n")
            self.out.flush()
            self.mode = ShellMode.IDLE

    def install_signals(self) -> None:
        """Answer Ctrl-C and Ctrl-\\ according to the shell's mode."""
        signal.signal(signal.SIGINT, self._on_sigint)
        sigquit = getattr(signal, "SIGQUIT", None)
        if sigquit is not None:
            signal.signal(sigquit, self._on_sigquit)


def main(argv: Optional[list] = None) -> int:
    """Start an interactive shell on the process environment."""
    try:
        import readline  # noqa: F401  (gives input() line editing and history)
    except ImportError:
        pass
    shell = Shell()
    shell.install_signals()
    return shell.run()


if __name__ == "__main__":
    sys.exit(main())