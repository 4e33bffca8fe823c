import pytest

from monkey.monkey_constants import (
    PRECEDENCES,
    Precedence,
    TokenKind,
    keywords,
    lookup_ident,
    precedence_of,
    token_hashmap,
)


def test_precedence_order() -> None:
    assert (
        Precedence.LOWEST
        < Precedence.EQUALS
        < Precedence.LESSGREATER
        < Precedence.SUM
        < Precedence.PRODUCT
        < Precedence.PREFIX
        < Precedence.CALL
    )


@pytest.mark.parametrize(
    "kind,expected",
    [
        (TokenKind.EQ, Precedence.EQUALS),
        (TokenKind.NOT_EQ, Precedence.EQUALS),
        (TokenKind.LT, Precedence.LESSGREATER),
        (TokenKind.GT, Precedence.LESSGREATER),
        (TokenKind.PLUS, Precedence.SUM),
        (TokenKind.MINUS, Precedence.SUM),
        (TokenKind.ASTERISK, Precedence.PRODUCT),
        (TokenKind.SLASH, Precedence.PRODUCT),
        (TokenKind.LPAREN, Precedence.CALL),
        (TokenKind.SEMICOLON, Precedence.LOWEST),
        (TokenKind.IDENT, Precedence.LOWEST),
    ],
)
def test_precedence_of(kind: TokenKind, expected: Precedence) -> None:
    assert precedence_of(kind) == expected


def test_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        PRECEDENCES[TokenKind.BANG] = Precedence.PREFIX  # type: ignore[index]
    with pytest.raises(TypeError):
        keywords["while"] = TokenKind.IF  # type: ignore[index]


def test_lookup_ident() -> None:
    assert lookup_ident("fn") == TokenKind.FUNCTION
    assert lookup_ident("return") == TokenKind.RETURN
    assert lookup_ident("fun") == TokenKind.IDENT


def test_symbol_table_round_trips_spelling() -> None:
    for spelling, kind in token_hashmap.items():
        assert kind.value == spelling


def test_precedence_of_custom_table() -> None:
    table = {TokenKind.BANG: Precedence.PREFIX}
    assert precedence_of(TokenKind.BANG, table) == Precedence.PREFIX
    assert precedence_of(TokenKind.PLUS, table) == Precedence.LOWEST
