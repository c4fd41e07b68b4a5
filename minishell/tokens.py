"""Splitting a command line into words and classifying them as tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional

QUOTES = "'\""


class TokenType(IntEnum):
    """Kinds of token a command line is made of."""

    INPUT = 1  # "<"
    OUTPUT = 2  # ">"
    HEREDOC = 3  # "<<"
    APPEND = 4  # ">>"
    PIPE = 5  # "|"
    STRING = 6  # anything else

    @property
    def is_redirection(self) -> bool:
        return self in (
            TokenType.INPUT,
            TokenType.OUTPUT,
            TokenType.HEREDOC,
            TokenType.APPEND,
        )


@dataclass(frozen=True)
class Token:
    """One word of a command line together with its kind."""

    type: TokenType
    text: str


class ParseError(Exception):
    """Raised when a command line cannot be parsed."""

    def __init__(self, message: str, token: Optional[Token] = None) -> None:
        super().__init__(message)
        self.token = token


def is_whitespace(char: str) -> bool:
    """Return True for backspace, the C whitespace characters and space."""
    return len(char) == 1 and (8 <= ord(char) <= 13 or char == " ")


def split_words(line: str) -> List[str]:
    """Split a line on whitespace, keeping quoted spans (quotes included) whole."""
    words: List[str] = []
    current: List[str] = []
    quote = ""
    for char in line:
        if quote:
            current.append(char)
            if char == quote:
                quote = ""
        elif char in QUOTES:
            quote = char
            current.append(char)
        elif is_whitespace(char):
            if current:
                words.append("".join(current))
                current = []
        else:
            current.append(char)
    if current:
        words.append("".join(current))
    return words


def classify(word: str) -> TokenType:
    """Return the token type a word stands for, judged by its first characters."""
    if not word:
        raise ValueError("cannot classify an empty word")
    if word.startswith("<"):
        return TokenType.HEREDOC if word.startswith("<<") else TokenType.INPUT
    if word.startswith(">"):
        return TokenType.APPEND if word.startswith(">>") else TokenType.OUTPUT
    if word.startswith("|"):
        return TokenType.PIPE
    return TokenType.STRING


def tokenize(line: str) -> List[Token]:
    """Turn a command line into a list of tokens."""
    return [Token(classify(word), word) for word in split_words(line)]


def check_tokens(tokens: Iterable[Token]) -> List[Token]:
    """Check that every operator token is followed by a plain word.

    Returns the tokens as a list; raises ParseError on the first offending
    operator.
    """
    items = list(tokens)
    following: List[Optional[Token]] = [*items[1:], None]
    for token, successor in zip(items, following):
        if token.type is TokenType.STRING:
            continue
        if successor is None or successor.type is not TokenType.STRING:
            raise ParseError(f"{token.text} failed", token)
    return items