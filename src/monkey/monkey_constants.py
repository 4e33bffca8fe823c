"""
Token vocabulary and operator precedence for the Monkey language.

This module is the single source of truth for lexical categories shared by the
lexer, the parser, and any downstream consumer of the token stream.

Contents:
    TokenKind: Closed enumeration of every lexical category.
    keywords: Fixed mapping from spelled keyword to its TokenKind.
    token_hashmap: Mapping from operator/punctuation spelling to its TokenKind.
    Precedence: Binding strength of operators, in ascending order.
    PRECEDENCES: Read-only table from infix-capable TokenKind to Precedence.

The string values of `TokenKind` members are a stable contract: tools that
serialize tokens or AST nodes may rely on them.
"""

from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Mapping


class TokenKind(str, Enum):
    """Lexical categories produced by the lexer."""

    # Special
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers and literals
    IDENT = "IDENT"
    INT = "INT"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    IF = "IF"
    ELSE = "ELSE"
    TRUE = "TRUE"
    FALSE = "FALSE"
    RETURN = "RETURN"

    def __str__(self) -> str:
        return self.value


keywords: Mapping[str, TokenKind] = MappingProxyType(
    {
        "fn": TokenKind.FUNCTION,
        "let": TokenKind.LET,
        "if": TokenKind.IF,
        "else": TokenKind.ELSE,
        "true": TokenKind.TRUE,
        "false": TokenKind.FALSE,
        "return": TokenKind.RETURN,
    }
)

# Spelling -> kind for every symbol the lexer recognizes. Two-character
# entries win over their one-character prefixes (longest match).
token_hashmap: Mapping[str, TokenKind] = MappingProxyType(
    {
        "=": TokenKind.ASSIGN,
        "==": TokenKind.EQ,
        "!": TokenKind.BANG,
        "!=": TokenKind.NOT_EQ,
        "+": TokenKind.PLUS,
        "-": TokenKind.MINUS,
        "*": TokenKind.ASTERISK,
        "/": TokenKind.SLASH,
        "<": TokenKind.LT,
        ">": TokenKind.GT,
        ",": TokenKind.COMMA,
        ";": TokenKind.SEMICOLON,
        "(": TokenKind.LPAREN,
        ")": TokenKind.RPAREN,
        "{": TokenKind.LBRACE,
        "}": TokenKind.RBRACE,
    }
)

# Longest symbol spelling; bounds the lexer's lookahead when matching operators.
MAX_SYMBOL_LENGTH = max(len(symbol) for symbol in token_hashmap)


def lookup_ident(word: str) -> TokenKind:
    """Returns the keyword kind for `word`, or `TokenKind.IDENT` if it is not reserved."""
    return keywords.get(word, TokenKind.IDENT)


class Precedence(IntEnum):
    """Operator binding strength, weakest first."""

    LOWEST = 1
    EQUALS = 2  # == !=
    LESSGREATER = 3  # < >
    SUM = 4  # + -
    PRODUCT = 5  # * /
    PREFIX = 6  # -x !x
    CALL = 7  # f(x)


PRECEDENCES: Mapping[TokenKind, Precedence] = MappingProxyType(
    {
        TokenKind.EQ: Precedence.EQUALS,
        TokenKind.NOT_EQ: Precedence.EQUALS,
        TokenKind.LT: Precedence.LESSGREATER,
        TokenKind.GT: Precedence.LESSGREATER,
        TokenKind.PLUS: Precedence.SUM,
        TokenKind.MINUS: Precedence.SUM,
        TokenKind.ASTERISK: Precedence.PRODUCT,
        TokenKind.SLASH: Precedence.PRODUCT,
        TokenKind.LPAREN: Precedence.CALL,
    }
)


def precedence_of(
    kind: TokenKind, table: Mapping[TokenKind, Precedence] = PRECEDENCES
) -> Precedence:
    """Returns the binding strength of `kind`.

    Args:
        kind (TokenKind): The token kind to look up.
        table (Mapping[TokenKind, Precedence]): The precedence table to consult.

    Returns:
        Precedence: The entry for `kind`, or `Precedence.LOWEST` if it has none.
    """
    return table.get(kind, Precedence.LOWEST)


__all__ = [
    "MAX_SYMBOL_LENGTH",
    "PRECEDENCES",
    "Precedence",
    "TokenKind",
    "keywords",
    "lookup_ident",
    "precedence_of",
    "token_hashmap",
]
