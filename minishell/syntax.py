"""Checks made on a raw command line before it is tokenised."""

from __future__ import annotations

from minishell.tokens import QUOTES, ParseError, is_whitespace


def quote_state(line: str) -> str:
    """Return the quote character left open at the end of the line, or "".

    A backslash makes the following character ordinary, inside quotes too.
    """
    quote = ""
    chars = iter(line)
    for char in chars:
        if char == "\\":
            next(chars, None)
        elif quote:
            if char == quote:
                quote = ""
        elif char in QUOTES:
            quote = char
    return quote


def has_dangling_pipe(line: str) -> bool:
    """Return True if an unquoted pipe is followed only by whitespace."""
    quote = ""
    escaped = False
    for pos, char in enumerate(line):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif quote:
            if char == quote:
                quote = ""
        elif char in QUOTES:
            quote = char
        elif char == "|" and all(is_whitespace(c) for c in line[pos + 1:]):
            return True
    return False


def check_line(line: str) -> None:
    """Raise ParseError if the line has an unclosed quote or a dangling pipe."""
    if has_dangling_pipe(line):
        raise ParseError("syntax error near unexpected token `|'")
    open_quote = quote_state(line)
    if open_quote:
        raise ParseError(f"syntax error: unclosed quote {open_quote}")