"""
Defines the abstract syntax tree (AST) for the Monkey language.

The tree is made of two closed families of node variants:

    Statement:  LetStatement | ReturnStatement | ExpressionStatement | BlockStatement
    Expression: Identifier | IntegerLiteral | BooleanLiteral | PrefixExpression
                | InfixExpression | IfExpression | FunctionLiteral | CallExpression

`Program` is the root and owns the top-level statements.

Every node is a frozen dataclass that keeps the token it was built from
(ignored by equality) and offers:

    str(node):      canonical rendering. Prefix and infix expressions are fully
                    parenthesized, so `a + b * c` renders as `(a+(b*c))`. The
                    rendering parses back to an equivalent tree.
    node.literal(): the representative literal, i.e. the originating token's
                    source spelling.
    node.to_dict(): a JSON-ready `ASTDict` for debugging or golden files.

Rendering and serialization walk the tree with an explicit stack, so a long
operator chain such as `a + a + ... + a` (a tree as deep as the chain is
long) renders without hitting Python's recursion limit.

Sequence fields are tuples and each child belongs to exactly one parent: the
tree has no shared nodes, no back-references and no cycles. A child may be
`None` when the parser recovered from an error; it renders as `nil`.

Example:
    >>> from monkey.monkey_parser import parse_program
    >>> str(parse_program("-a * b").program)
    '((-a)*b)'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator, TypedDict, Union

from monkey.monkey_lexer import Token


class ASTDict(TypedDict, total=False):
    """
    Serialized form of an AST node, as produced by `to_dict()`.

    Only `kind` is present on every node. Token-bearing nodes add `literal`,
    `line` and `col`. The remaining keys depend on the variant.
    """

    kind: str
    literal: str
    line: int
    col: int
    name: str
    value: Any
    operator: str
    left: ASTDict | None
    right: ASTDict | None
    condition: ASTDict | None
    consequence: ASTDict | None
    alternative: ASTDict | None
    function: ASTDict | None
    arguments: list[ASTDict | None]
    parameters: list[ASTDict]
    body: ASTDict | None
    statements: list[ASTDict]


NIL = "nil"

# A rendering piece: literal text, a child to render in place, or a lost child.
Part = Union[str, "Node", "Program", None]


def render(node: Node | Program | None) -> str:
    """Renders `node`, or `nil` for a child lost to error recovery.

    Args:
        node (Node | Program | None): The subtree to render.

    Returns:
        str: The canonical rendering.
    """
    out: list[str] = []
    stack: list[Part] = [node]
    while stack:
        item = stack.pop()
        if item is None:
            out.append(NIL)
        elif isinstance(item, str):
            out.append(item)
        else:
            stack.extend(reversed(item.parts()))
    return "".join(out)


def dump(node: Node | Program | None) -> ASTDict | None:
    """Serializes `node` and its descendants into nested dictionaries.

    Children are serialized before their parents (post-order), tracked by
    identity since nodes are never shared.

    Args:
        node (Node | Program | None): The subtree to serialize.

    Returns:
        ASTDict | None: The serialized subtree, or None for a lost child.
    """
    if node is None:
        return None

    done: dict[int, ASTDict] = {}

    def resolve(value: Any) -> Any:
        if isinstance(value, (Node, Program)):
            return done[id(value)]
        if isinstance(value, tuple):
            return [resolve(v) for v in value]
        return value

    stack: list[tuple[Node | Program, bool]] = [(node, False)]
    while stack:
        current, expanded = stack.pop()
        if expanded:
            d = current.header()
            for key, value in current.fields().items():
                d[key] = resolve(value)  # type: ignore[literal-required]
            done[id(current)] = d
            continue
        stack.append((current, True))
        for child in children(current):
            stack.append((child, False))
    return done[id(node)]


def children(node: Node | Program) -> Iterator[Node | Program]:
    """Yields the direct, non-missing children of `node`."""
    for value in node.fields().values():
        if isinstance(value, (Node, Program)):
            yield value
        elif isinstance(value, tuple):
            yield from (v for v in value if v is not None)


def statement_parts(statements: tuple[Statement, ...], separator: str) -> list[Part]:
    """Lays out statements so that the result parses back into the same sequence.

    Expression statements other than the last get a `;` so that a following
    statement starting with `(` is not read as a call.
    """
    parts: list[Part] = []
    for index, stmt in enumerate(statements):
        if index:
            parts.append(separator)
        parts.append(stmt)
        if isinstance(stmt, ExpressionStatement) and index < len(statements) - 1:
            parts.append(";")
    return parts


@dataclass(frozen=True)
class Node:
    """Base of every token-bearing AST node.

    Subclasses describe themselves through two hooks used by the iterative
    walkers: `parts()` for rendering and `fields()` for serialization.
    """

    kind: ClassVar[str] = "node"

    token: Token = field(compare=False, repr=False)

    def literal(self) -> str:
        return self.token.literal

    def parts(self) -> list[Part]:
        return [self.token.literal]

    def header(self) -> ASTDict:
        return {
            "kind": self.kind,
            "literal": self.token.literal,
            "line": self.token.line,
            "col": self.token.col,
        }

    def fields(self) -> dict[str, Any]:
        return {}

    def __str__(self) -> str:
        return render(self)

    def to_dict(self) -> ASTDict:
        return dump(self)  # type: ignore[return-value]


# --- expressions ---


@dataclass(frozen=True)
class Identifier(Node):
    kind: ClassVar[str] = "identifier"

    value: str

    def parts(self) -> list[Part]:
        return [self.value]

    def fields(self) -> dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class IntegerLiteral(Node):
    """A decimal integer. `value` is a signed 64-bit quantity."""

    kind: ClassVar[str] = "integer"

    value: int

    def fields(self) -> dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class BooleanLiteral(Node):
    kind: ClassVar[str] = "boolean"

    value: bool

    def parts(self) -> list[Part]:
        return ["true" if self.value else "false"]

    def fields(self) -> dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class PrefixExpression(Node):
    """A unary operator applied to its right operand, e.g. `!ok` or `-x`."""

    kind: ClassVar[str] = "prefix"

    operator: str
    right: Expression | None

    def parts(self) -> list[Part]:
        return ["(", self.operator, self.right, ")"]

    def fields(self) -> dict[str, Any]:
        return {"operator": self.operator, "right": self.right}


@dataclass(frozen=True)
class InfixExpression(Node):
    """A binary operator between two operands. The token is the operator."""

    kind: ClassVar[str] = "infix"

    left: Expression | None
    operator: str
    right: Expression | None

    def parts(self) -> list[Part]:
        return ["(", self.left, self.operator, self.right, ")"]

    def fields(self) -> dict[str, Any]:
        return {"left": self.left, "operator": self.operator, "right": self.right}


@dataclass(frozen=True)
class IfExpression(Node):
    """`if (condition) { consequence } else { alternative }`; the else branch is optional."""

    kind: ClassVar[str] = "if"

    condition: Expression | None
    consequence: BlockStatement | None
    alternative: BlockStatement | None = None

    def parts(self) -> list[Part]:
        if isinstance(self.condition, (PrefixExpression, InfixExpression)):
            out: list[Part] = ["if ", self.condition]
        else:
            out = ["if (", self.condition, ")"]
        out += [" ", self.consequence]
        if self.alternative is not None:
            out += [" else ", self.alternative]
        return out

    def fields(self) -> dict[str, Any]:
        return {
            "condition": self.condition,
            "consequence": self.consequence,
            "alternative": self.alternative,
        }


@dataclass(frozen=True)
class FunctionLiteral(Node):
    kind: ClassVar[str] = "function"

    parameters: tuple[Identifier, ...]
    body: BlockStatement | None

    def parts(self) -> list[Part]:
        params = ",".join(p.value for p in self.parameters)
        return [f"{self.token.literal}({params}) ", self.body]

    def fields(self) -> dict[str, Any]:
        return {"parameters": self.parameters, "body": self.body}


@dataclass(frozen=True)
class CallExpression(Node):
    """Application of `function` to `arguments`. The token is the opening `(`."""

    kind: ClassVar[str] = "call"

    function: Expression | None
    arguments: tuple[Expression | None, ...]

    def parts(self) -> list[Part]:
        out: list[Part] = [self.function, "("]
        for index, arg in enumerate(self.arguments):
            if index:
                out.append(",")
            out.append(arg)
        out.append(")")
        return out

    def fields(self) -> dict[str, Any]:
        return {"function": self.function, "arguments": self.arguments}


# --- statements ---


@dataclass(frozen=True)
class LetStatement(Node):
    kind: ClassVar[str] = "let"

    name: Identifier
    value: Expression | None

    def parts(self) -> list[Part]:
        return [f"{self.token.literal} {self.name.value} = ", self.value, ";"]

    def fields(self) -> dict[str, Any]:
        return {"name": self.name.value, "value": self.value}


@dataclass(frozen=True)
class ReturnStatement(Node):
    kind: ClassVar[str] = "return"

    value: Expression | None

    def parts(self) -> list[Part]:
        return [f"{self.token.literal} ", self.value, ";"]

    def fields(self) -> dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class ExpressionStatement(Node):
    """A bare expression used as a statement. The token is the expression's first token."""

    kind: ClassVar[str] = "expression"

    expression: Expression | None

    def parts(self) -> list[Part]:
        return [self.expression]

    def fields(self) -> dict[str, Any]:
        return {"value": self.expression}


@dataclass(frozen=True)
class BlockStatement(Node):
    """A `{ ... }` statement sequence, used by conditionals and function bodies."""

    kind: ClassVar[str] = "block"

    statements: tuple[Statement, ...]

    def parts(self) -> list[Part]:
        if not self.statements:
            return ["{ }"]
        return ["{ ", *statement_parts(self.statements, " "), " }"]

    def fields(self) -> dict[str, Any]:
        return {"statements": self.statements}


Expression = Union[
    Identifier,
    IntegerLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
]

Statement = Union[LetStatement, ReturnStatement, ExpressionStatement, BlockStatement]


@dataclass(frozen=True)
class Program:
    """Root of the tree: the ordered top-level statements of one source text."""

    kind: ClassVar[str] = "program"

    statements: tuple[Statement, ...] = ()

    def parts(self) -> list[Part]:
        return statement_parts(self.statements, "\n")

    def header(self) -> ASTDict:
        return {"kind": self.kind}

    def fields(self) -> dict[str, Any]:
        return {"statements": self.statements}

    def __str__(self) -> str:
        return render(self)

    def literal(self) -> str:
        return self.statements[0].literal() if self.statements else ""

    def to_dict(self) -> ASTDict:
        return dump(self)  # type: ignore[return-value]


__all__ = [
    "ASTDict",
    "BlockStatement",
    "BooleanLiteral",
    "CallExpression",
    "Expression",
    "ExpressionStatement",
    "FunctionLiteral",
    "Identifier",
    "IfExpression",
    "InfixExpression",
    "IntegerLiteral",
    "LetStatement",
    "Node",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
    "dump",
    "render",
]
