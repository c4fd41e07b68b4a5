"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import re
import sys
from typing import Callable, Dict, List, TextIO

from minishell.command import Command
from minishell.environment import ShellContext


class ShellExit(Exception):
    """Raised by the exit builtin; carries the status the shell ends with."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status % 256


_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?)(\d*)")


def _atoi(text: str) -> int:
    """Read a leading integer the way C's atoi does; 0 when there is none."""
    match = _ATOI.match(text)
    sign, digits = match.groups()
    if not digits:
        return 0
    value = int(digits)
    return -value if sign == "-" else value


def check_opt(options: str, flag: str) -> bool:
    """Return True when every character of ``options`` is ``flag``."""
    return all(char == flag for char in options)


def cd(ctx: ShellContext, args: List[str], out: TextIO) -> int:
    """Change directory and record the previous and new PWD."""
    if len(args) > 1:
        out.write("cd : too many arguments\n")
        return 1
    if not args:
        ctx.status = 1
        return 1
    target = args[0]
    try:
        os.chdir(target)
    except OSError:
        ctx.status = 1
        return 1
    previous = ctx.env.get("PWD")
    if previous is None:
        return 1
    ctx.env.set("OLD_PWD", previous)
    ctx.env.set("PWD", target)
    return 0


def echo(ctx: ShellContext, args: List[str], out: TextIO) -> int:
    """Write the arguments separated by spaces, followed by a newline."""
    try:
        out.write(" ".join(args) + "\n")
    except OSError as exc:
        ctx.status = 1
        sys.stderr.write(f"bash : echo : write error: {exc.strerror or exc}\n")
        return 1
    return 0


def env(ctx: ShellContext, args: List[str], out: TextIO) -> int:
    """Write every environment entry on its own line."""
    for entry in ctx.env:
        out.write(f"{entry}\n")
    ctx.status = 0
    return 0


def exit_shell(ctx: ShellContext, args: List[str], out: TextIO) -> int:
    """End the shell, with the first argument as status if there is one."""
    out.write("exit\n")
    status = ctx.status
    if args:
        if not args[0].isdigit():
            out.write(f"bash: exit: {args[0]}: numeric argument required\n")
        status = _atoi(args[0])
    raise ShellExit(status)


def export(ctx: ShellContext, args: List[str], out: TextIO) -> int:
    """Add each argument to the environment."""
    for entry in args:
        name, sep, value = entry.partition("=")
        if sep:
            ctx.env.set(name, value)
        elif name not in ctx.env:
            ctx.env.add(entry)
    return 0


def pwd(ctx: ShellContext, args: List[str], out: TextIO) -> int:
    """Write the current working directory."""
    try:
        cwd = os.getcwd()
    except OSError:
        out.write("bash: pwd: error retrieving current directory\n")
        ctx.status = 1
        return 1
    out.write(f"{cwd}\n")
    ctx.status = 0
    return 0


def unset(ctx: ShellContext, args: List[str], out: TextIO) -> int:
    """Remove each named variable from the environment."""
    for name in args:
        try:
            ctx.env.remove(name)
        except KeyError:
            out.write(f"bash: unset: Cannot remove {name}\n")
            return 1
    return 0


Builtin = Callable[[ShellContext, List[str], TextIO], int]

_BUILTINS: Dict[str, Builtin] = {
    "echo": echo,
    "cd": cd,
    "pwd": pwd,
    "export": export,
    "unset": unset,
    "env": env,
    "exit": exit_shell,
}


def is_builtin(name: object) -> bool:
    """Return True if ``name`` is one of the shell's own commands."""
    return isinstance(name, str) and name in _BUILTINS


def run_builtin(ctx: ShellContext, command: Command, out: TextIO) -> int:
    """Run a builtin command, store its status in ``ctx`` and return it."""
    if not is_builtin(command.name):
        raise ValueError(f"{command.name!r} is not a builtin")
    status = _BUILTINS[command.name](ctx, list(command.args), out)
    ctx.status = status
    return status