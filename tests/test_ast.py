import dataclasses
import json

import pytest

from monkey.monkey_ast import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
)
from monkey.monkey_constants import TokenKind
from monkey.monkey_lexer import Token


def ident(name: str) -> Identifier:
    return Identifier(Token(TokenKind.IDENT, name), name)


def integer(n: int) -> IntegerLiteral:
    return IntegerLiteral(Token(TokenKind.INT, str(n)), n)


def infix(left: object, op: str, right: object) -> InfixExpression:
    return InfixExpression(Token(TokenKind(op), op), left, op, right)  # type: ignore[arg-type]


def block(*stmts: object) -> BlockStatement:
    return BlockStatement(Token(TokenKind.LBRACE, "{"), tuple(stmts))  # type: ignore[arg-type]


def expr_stmt(expr: object) -> ExpressionStatement:
    return ExpressionStatement(Token(TokenKind.IDENT, "x"), expr)  # type: ignore[arg-type]


def test_let_statement_rendering() -> None:
    stmt = LetStatement(Token(TokenKind.LET, "let"), ident("myVar"), ident("anotherVar"))
    assert str(stmt) == "let myVar = anotherVar;"
    assert stmt.literal() == "let"


def test_program_rendering_and_literal() -> None:
    program = Program(
        (
            LetStatement(Token(TokenKind.LET, "let"), ident("x"), integer(5)),
            ReturnStatement(Token(TokenKind.RETURN, "return"), ident("x")),
        )
    )
    assert str(program) == "let x = 5;\nreturn x;"
    assert program.literal() == "let"


def test_empty_program() -> None:
    assert str(Program()) == ""
    assert Program().literal() == ""


def test_missing_children_render_as_nil() -> None:
    assert str(LetStatement(Token(TokenKind.LET, "let"), ident("x"), None)) == "let x = nil;"
    assert str(ReturnStatement(Token(TokenKind.RETURN, "return"), None)) == "return nil;"
    assert str(ExpressionStatement(Token(TokenKind.SEMICOLON, ";"), None)) == "nil"


def test_prefix_and_infix_are_parenthesized() -> None:
    neg = PrefixExpression(Token(TokenKind.MINUS, "-"), "-", ident("a"))
    assert str(neg) == "(-a)"
    assert str(infix(neg, "*", ident("b"))) == "((-a)*b)"


def test_boolean_rendering() -> None:
    assert str(BooleanLiteral(Token(TokenKind.TRUE, "true"), True)) == "true"
    assert str(BooleanLiteral(Token(TokenKind.FALSE, "false"), False)) == "false"


def test_integer_renders_source_spelling() -> None:
    lit = IntegerLiteral(Token(TokenKind.INT, "007"), 7)
    assert str(lit) == "007"
    assert lit.value == 7


def test_block_rendering() -> None:
    assert str(block()) == "{ }"
    assert str(block(expr_stmt(ident("x")))) == "{ x }"
    # Expression statements are separated so a following `(` is not a call.
    two = block(expr_stmt(ident("a")), expr_stmt(infix(ident("b"), "+", ident("c"))))
    assert str(two) == "{ a; (b+c) }"


def test_if_rendering() -> None:
    cond = infix(ident("x"), "<", ident("y"))
    no_else = IfExpression(Token(TokenKind.IF, "if"), cond, block(expr_stmt(ident("x"))))
    assert str(no_else) == "if (x<y) { x }"
    with_else = dataclasses.replace(no_else, alternative=block(expr_stmt(ident("y"))))
    assert str(with_else) == "if (x<y) { x } else { y }"


def test_if_wraps_bare_condition() -> None:
    node = IfExpression(Token(TokenKind.IF, "if"), ident("ok"), block())
    assert str(node) == "if (ok) { }"


def test_function_and_call_rendering() -> None:
    fn = FunctionLiteral(
        Token(TokenKind.FUNCTION, "fn"),
        (ident("x"), ident("y")),
        block(expr_stmt(infix(ident("x"), "+", ident("y")))),
    )
    assert str(fn) == "fn(x,y) { (x+y) }"
    assert fn.literal() == "fn"

    call = CallExpression(
        Token(TokenKind.LPAREN, "("),
        ident("add"),
        (integer(1), infix(integer(2), "*", integer(3))),
    )
    assert str(call) == "add(1,(2*3))"
    assert call.literal() == "("


def test_equality_ignores_tokens() -> None:
    a = Identifier(Token(TokenKind.IDENT, "x", 1, 1), "x")
    b = Identifier(Token(TokenKind.IDENT, "x", 7, 3), "x")
    assert a == b
    assert hash(a) == hash(b)
    assert a != ident("y")


def test_nodes_are_frozen() -> None:
    node = ident("x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.value = "y"  # type: ignore[misc]


def test_to_dict_is_json_serializable() -> None:
    stmt = LetStatement(
        Token(TokenKind.LET, "let", 2, 1),
        ident("x"),
        infix(integer(1), "+", integer(2)),
    )
    d = Program((stmt,)).to_dict()
    assert d["kind"] == "program"
    let = d["statements"][0]
    assert let["kind"] == "let"
    assert let["name"] == "x"
    assert (let["line"], let["col"]) == (2, 1)
    assert let["value"]["kind"] == "infix"
    assert let["value"]["operator"] == "+"
    assert let["value"]["right"]["value"] == 2
    json.dumps(d)


def test_to_dict_keeps_missing_children() -> None:
    d = ReturnStatement(Token(TokenKind.RETURN, "return"), None).to_dict()
    assert d["value"] is None


def long_chain(length: int) -> InfixExpression:
    node = infix(ident("a"), "+", ident("a"))
    for _ in range(length - 1):
        node = infix(node, "+", ident("a"))
    return node


def test_long_chain_renders_without_recursion() -> None:
    rendered = str(expr_stmt(long_chain(5000)))
    assert rendered.startswith("(" * 5000 + "a+a)")
    assert rendered.endswith("+a)")
    assert rendered.count("+") == 5000


def test_long_chain_to_dict() -> None:
    d = expr_stmt(long_chain(5000)).to_dict()
    depth = 0
    node = d["value"]
    while node["kind"] == "infix":
        assert node["right"]["value"] == "a"
        node = node["left"]
        depth += 1
    assert depth == 5000
    assert node["value"] == "a"
