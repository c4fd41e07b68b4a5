"""Opening the files and here-documents a command is redirected to."""

from __future__ import annotations

import tempfile
from typing import BinaryIO, Callable, List, Optional, TextIO, Tuple

from minishell.command import Command
from minishell.tokens import TokenType

Reader = Callable[[str], Optional[str]]

HEREDOC_PROMPT = "> "


class RedirectionError(Exception):
    """Raised when a redirection target cannot be opened."""

    def __init__(self, message: str, target: str = "") -> None:
        super().__init__(message)
        self.target = target


def _print_error(err: TextIO, message: str) -> None:
    err.write(f"Error\n {message}")


def read_heredoc(delimiter: str, reader: Reader, err: TextIO) -> str:
    """Read lines until one equals ``delimiter`` and return them joined.

    Each line read keeps a trailing newline. End of input ends the document
    too, after a warning is written to ``err``.
    """
    lines: List[str] = []
    while True:
        line = reader(HEREDOC_PROMPT)
        if line is None:
            _print_error(
                err,
                "warning: here-document delimited by end-of-file "
                f"(wanted '{delimiter}')\n",
            )
            break
        if line == delimiter:
            break
        lines.append(line + "\n")
    return "".join(lines)


def open_redirect(kind: TokenType, target: str, reader: Reader, err: TextIO) -> BinaryIO:
    """Open the file a redirection of ``kind`` refers to, as a binary file.

    Output files are created if missing; ``>`` truncates and ``>>`` appends.
    A here-document is read through ``reader`` and handed back as a file
    positioned at its start.
    """
    if kind is TokenType.HEREDOC:
        content = read_heredoc(target, reader, err)
        handle = tempfile.TemporaryFile(mode="w+b")
        handle.write(content.encode())
        handle.seek(0)
        return handle
    modes = {
        TokenType.INPUT: "rb",
        TokenType.OUTPUT: "wb",
        TokenType.APPEND: "ab",
    }
    try:
        mode = modes[kind]
    except KeyError:
        raise ValueError(f"{kind!r} is not a redirection") from None
    try:
        return open(target, mode)
    except OSError as exc:
        reason = exc.strerror or str(exc)
        err.write(f"{target}: {reason}\n")
        raise RedirectionError(f"{target}: {reason}", target) from exc


def resolve_redirections(
    command: Command, reader: Reader, err: TextIO
) -> Tuple[Optional[BinaryIO], Optional[BinaryIO]]:
    """Open every redirection of ``command`` in order; the last of each side wins.

    Returns ``(stdin, stdout)``, with None where the command has no
    redirection of that side. Files opened before a failure are closed.
    """
    stdin: Optional[BinaryIO] = None
    stdout: Optional[BinaryIO] = None
    try:
        for redirection in command.redirections:
            handle = open_redirect(redirection.kind, redirection.target, reader, err)
            if redirection.kind in (TokenType.INPUT, TokenType.HEREDOC):
                if stdin is not None:
                    stdin.close()
                stdin = handle
            else:
                if stdout is not None:
                    stdout.close()
                stdout = handle
    except BaseException:
        for handle in (stdin, stdout):
            if handle is not None:
                handle.close()
        raise
    return stdin, stdout