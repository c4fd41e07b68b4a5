"""Running commands: builtins inside the shell, programs as child processes."""

from __future__ import annotations

import errno
import io
import os
import subprocess
import sys
import threading
from typing import IO, Iterable, List, Optional, Tuple, Union

from minishell.builtins import ShellExit, is_builtin, run_builtin
from minishell.command import Command
from minishell.environment import Environment, ShellContext
from minishell.redirections import Reader, RedirectionError, resolve_redirections

PATH_MAX = 4096
STATUS_NOT_EXECUTABLE = 126
STATUS_NOT_FOUND = 127

# What a stage reads from: nothing special (None), DEVNULL, a pipe fd or a file.
Upstream = Union[None, int, IO[bytes]]
StageResult = Union[int, "subprocess.Popen[bytes]"]


class CommandNotFound(Exception):
    """Raised when a command cannot be turned into a runnable program path."""

    def __init__(self, message: str, status: int = STATUS_NOT_FOUND) -> None:
        super().__init__(message)
        self.status = status


def find_command(ctx: ShellContext, name: str) -> str:
    """Return the first ``dir/name`` along PATH that exists."""
    paths = ctx.env.get("PATH")
    if not paths or len(name) > PATH_MAX // 2:
        raise CommandNotFound(f"{name} : command not found")
    for directory in paths.split(":"):
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.F_OK):
            return candidate
    raise CommandNotFound(f"{name} : command not found")


def resolve_path(ctx: ShellContext, name: str) -> str:
    """Return the path of the program ``name`` names, checked to be runnable.

    Names without a slash are looked up along PATH; others are taken
    relative to the working directory unless absolute.
    """
    if "/" in name:
        path = name if os.path.isabs(name) else os.path.join(os.getcwd(), name)
    else:
        path = find_command(ctx, name)
    if not os.access(path, os.X_OK):
        code = errno.EACCES if os.path.exists(path) else errno.ENOENT
        raise CommandNotFound(f"{path}: {os.strerror(code)}", STATUS_NOT_EXECUTABLE)
    if not os.path.isfile(path):
        raise CommandNotFound(f"{name} : Is a directory", STATUS_NOT_EXECUTABLE)
    return path


def _close(stream: Upstream) -> None:
    if stream is None:
        return
    if isinstance(stream, int):
        if stream >= 0:
            os.close(stream)
    else:
        stream.close()


def _empty(piped: bool) -> Upstream:
    return subprocess.DEVNULL if piped else None


def _feed(data: bytes, threads: List[threading.Thread]) -> int:
    """Return the read end of a pipe that a thread fills with ``data``."""
    read_fd, write_fd = os.pipe()

    def writer() -> None:
        with open(write_fd, "wb") as sink:
            try:
                sink.write(data)
            except BrokenPipeError:
                pass

    thread = threading.Thread(target=writer, daemon=True)
    thread.start()
    threads.append(thread)
    return read_fd


def _run_single_builtin(ctx: ShellContext, command: Command, reader: Reader) -> int:
    try:
        stdin_file, stdout_file = resolve_redirections(command, reader, sys.stderr)
    except RedirectionError:
        ctx.status = 1
        return 1
    if stdin_file is not None:
        stdin_file.close()
    if stdout_file is None:
        try:
            return run_builtin(ctx, command, sys.stdout)
        finally:
            sys.stdout.flush()
    with io.TextIOWrapper(stdout_file, encoding="utf-8") as out:
        return run_builtin(ctx, command, out)


def _builtin_stage(
    ctx: ShellContext,
    command: Command,
    stdout_file: Optional[IO[bytes]],
    piped: bool,
    threads: List[threading.Thread],
) -> Tuple[StageResult, Upstream]:
    """Run a builtin inside a pipeline; it cannot change the shell's own state."""
    buffer = io.StringIO()
    scratch = ShellContext(Environment(ctx.env.to_list()), ctx.status)
    try:
        status = run_builtin(scratch, command, buffer)
    except ShellExit as exc:
        status = exc.status
    text = buffer.getvalue()
    if stdout_file is not None:
        stdout_file.write(text.encode())
        return status, _empty(piped)
    if piped:
        return status, _feed(text.encode(), threads)
    sys.stdout.write(text)
    sys.stdout.flush()
    return status, None


def _start_stage(
    ctx: ShellContext,
    command: Command,
    stdin: Upstream,
    stdout_file: Optional[IO[bytes]],
    piped: bool,
    threads: List[threading.Thread],
) -> Tuple[StageResult, Upstream]:
    if command.skippable:
        return 1, _empty(piped)
    if command.name is None:
        return 0, _empty(piped)
    if is_builtin(command.name):
        return _builtin_stage(ctx, command, stdout_file, piped, threads)
    try:
        path = resolve_path(ctx, command.name)
    except CommandNotFound as exc:
        sys.stderr.write(f"{exc}\n")
        sys.stderr.flush()
        return exc.status, _empty(piped)
    if stdout_file is not None:
        stdout: Union[None, int, IO[bytes]] = stdout_file
    else:
        stdout = subprocess.PIPE if piped else None
    try:
        process = subprocess.Popen(
            command.argv,
            executable=path,
            stdin=stdin,
            stdout=stdout,
            env=ctx.env.to_dict(),
        )
    except OSError as exc:
        sys.stderr.write(f"{command.name}: {exc.strerror or exc}\n")
        sys.stderr.flush()
        return STATUS_NOT_EXECUTABLE, _empty(piped)
    if stdout_file is None and piped:
        return process, process.stdout
    return process, _empty(piped)


def _status_of(result: StageResult) -> int:
    if isinstance(result, int):
        return result
    code = result.wait()
    return 128 - code if code < 0 else code


def _run_pipeline(ctx: ShellContext, commands: List[Command], reader: Reader) -> int:
    sys.stdout.flush()
    threads: List[threading.Thread] = []
    results: List[StageResult] = []
    upstream: Upstream = None
    last = len(commands) - 1
    for index, command in enumerate(commands):
        piped = index < last
        try:
            stdin_file, stdout_file = resolve_redirections(command, reader, sys.stderr)
        except RedirectionError:
            _close(upstream)
            upstream = _empty(piped)
            results.append(1)
            continue
        if stdin_file is not None:
            _close(upstream)
            stdin: Upstream = stdin_file
        else:
            stdin = upstream
        try:
            result, upstream = _start_stage(ctx, command, stdin, stdout_file, piped, threads)
        finally:
            _close(stdin)
            if stdout_file is not None:
                stdout_file.close()
        results.append(result)
    statuses = [_status_of(result) for result in results]
    for thread in threads:
        thread.join()
    ctx.status = statuses[-1]
    return ctx.status


def execute(ctx: ShellContext, commands: Iterable[Command], reader: Reader) -> int:
    """Run a pipeline of commands and return the status of its last command.

    A lone builtin runs inside the shell so that it can change its state;
    everything else runs as a pipeline of child processes.
    """
    items = list(commands)
    if not items:
        return ctx.status
    first = items[0]
    if len(items) == 1 and not first.skippable and is_builtin(first.name):
        return _run_single_builtin(ctx, first, reader)
    return _run_pipeline(ctx, items, reader)