"""
Lexical analyzer for the Monkey language.

This module converts raw source text into a lazy stream of tokens:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: An immutable lexical unit with kind, literal text, and source location.
    Lexer: Pulls tokens one at a time out of a CharacterStream.

Features:
    - Skips whitespace (space, tab, carriage return, newline)
    - Longest-match recognition of operators (`==` over `=`, `!=` over `!`)
    - Recognizes:
        * Identifiers and keywords (runs of ASCII letters)
        * Integers (runs of ASCII digits)
        * Operators and punctuation

The lexer never raises on malformed input. Characters it does not understand
become `ILLEGAL` tokens and are rejected later by the parser. Once the source is
exhausted every call to `Lexer.next_token` returns an `EOF` token.

Example:
    >>> lexer = Lexer.from_source("let x = 5;")
    >>> lexer.next_token()
    Token(LET, let)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

import logging
import string
from typing import Any, Iterator

from monkey.monkey_constants import (
    MAX_SYMBOL_LENGTH,
    TokenKind,
    lookup_ident,
    token_hashmap,
)

logger = logging.getLogger(__name__)

WHITESPACE = " \t\r\n"
LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str: The next character.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Args:
            offset (int, optional): Number of characters to look ahead. Defaults to 0.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def current(self) -> str | None:
        """Returns the current character, or None once the stream is exhausted."""
        return self.source[self.position] if self.position < len(self.source) else None

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """A single lexical token of the Monkey language.

    Tokens are immutable: their attributes cannot be reassigned once built.

    Attributes:
        type (TokenKind): The lexical category.
        literal (str): The exact source spelling (empty for `EOF`).
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("type", "literal", "line", "col")

    type: TokenKind
    literal: str
    line: int
    col: int

    def __init__(self, type_: TokenKind, literal: str, line: int = 0, col: int = 0):
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "literal", literal)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "col", col)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable; cannot set {name!r}")

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.literal})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.literal == other.literal
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.literal, self.line, self.col))


class Lexer:
    """Lexical analyzer for the Monkey language.

    The Lexer reads a CharacterStream and hands out one Token per call to
    `next_token`. Iterating over a Lexer yields tokens up to and including the
    first `EOF`.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    @classmethod
    def from_source(cls, source: str) -> "Lexer":
        """Builds a Lexer over an in-memory source string."""
        return cls(CharacterStream(source))

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in WHITESPACE:
            self.advance()

    def read_run(self, allowed: frozenset[str]) -> str:
        """Consumes the maximal run of characters drawn from `allowed`."""
        start = self.stream.position
        while not self.stream.end_of_file() and self.peek() in allowed:
            self.advance()
        return self.stream.source[start : self.stream.position]

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(MAX_SYMBOL_LENGTH):
            ch = self.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token. At end of input this is an `EOF` token with
            an empty literal, no matter how many times it is requested.
        """
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token(TokenKind.EOF, "", line, col)

        ch = self.peek()

        # 1. Identifier or keyword
        if ch in LETTERS:
            word = self.read_run(LETTERS)
            return Token(lookup_ident(word), word, line, col)

        # 2. Integer
        if ch in DIGITS:
            return Token(TokenKind.INT, self.read_run(DIGITS), line, col)

        # 3. Operator or punctuation
        token = self.match_operator()
        if token:
            return token

        # 4. Unknown character
        illegal = self.advance()
        logger.debug("illegal character %r at %d:%d", illegal, line, col)
        return Token(TokenKind.ILLEGAL, illegal, line, col)

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TokenKind.EOF:
                return


def tokenize(source: str) -> list[Token]:
    """Returns every token of `source`, ending with a single `EOF` token."""
    return list(Lexer.from_source(source))


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
