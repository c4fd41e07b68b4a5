"""Building commands out of the tokens of a pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from minishell.tokens import QUOTES, ParseError, Token, TokenType


@dataclass(frozen=True)
class Redirection:
    """A redirection operator and the word it applies to."""

    kind: TokenType
    target: str


@dataclass
class Command:
    """One command of a pipeline: its name, arguments and redirections."""

    name: Optional[str] = None
    args: List[str] = field(default_factory=list)
    redirections: List[Redirection] = field(default_factory=list)
    skippable: bool = False

    @property
    def argv(self) -> List[str]:
        """The argument vector handed to a program."""
        return [self.name, *self.args] if self.name is not None else []

    @property
    def inputs(self) -> List[Redirection]:
        return [r for r in self.redirections if r.kind in (TokenType.INPUT, TokenType.HEREDOC)]

    @property
    def outputs(self) -> List[Redirection]:
        return [r for r in self.redirections if r.kind in (TokenType.OUTPUT, TokenType.APPEND)]


def _unquote(word: str) -> str:
    """Drop the quote characters that open and close quoted spans."""
    result: List[str] = []
    quote = ""
    for char in word:
        if quote:
            if char == quote:
                quote = ""
            else:
                result.append(char)
        elif char in QUOTES:
            quote = char
        else:
            result.append(char)
    return "".join(result)


def split_pipeline(tokens: Iterable[Token]) -> List[List[Token]]:
    """Split tokens on pipes; raise ParseError if a segment is empty."""
    segments: List[List[Token]] = [[]]
    for token in tokens:
        if token.type is TokenType.PIPE:
            segments.append([])
        else:
            segments[-1].append(token)
    if len(segments) > 1 and any(not segment for segment in segments):
        raise ParseError("syntax error near unexpected token `|'")
    return segments


def build_command(tokens: Iterable[Token]) -> Command:
    """Build one command from the tokens between two pipes."""
    command = Command()
    stream = iter(tokens)
    for token in stream:
        if token.type is TokenType.PIPE:
            raise ParseError("unexpected pipe inside a command", token)
        if token.type.is_redirection:
            target = next(stream, None)
            if target is None or target.type is not TokenType.STRING:
                raise ParseError(f"{token.text} failed", token)
            command.redirections.append(Redirection(token.type, _unquote(target.text)))
        elif command.name is None:
            command.name = _unquote(token.text)
        else:
            command.args.append(_unquote(token.text))
    return command


def check_command(command: Command) -> Command:
    """Raise ParseError if the command is empty or has a redirection without target."""
    if command.name is None and not command.redirections:
        raise ParseError("empty command")
    for redirection in command.redirections:
        if not redirection.target:
            raise ParseError(f"missing target for {redirection.kind.name.lower()}")
    return command


def build_commands(tokens: Iterable[Token]) -> List[Command]:
    """Build and check every command of a pipeline."""
    items = list(tokens)
    if not items:
        return []
    return [check_command(build_command(segment)) for segment in split_pipeline(items)]