"""
Monkey Language Parser

Parses the Monkey token stream into an abstract syntax tree (AST).

The parser pulls tokens from a `Lexer` one at a time and keeps exactly two of
them in view: the current token and the peek token. Statements are parsed by
plain recursive descent; expressions use operator-precedence ("Pratt")
dispatch, where every token kind that can start an expression has a prefix
rule and every token kind that can continue one has an infix rule.

Supported Constructs
--------------------
- Statements:
    * `let <ident> = <expr>;`
    * `return <expr>;`
    * Expression statements: `<expr>;`
    * Blocks: `{ <stmt>* }`

- Expressions:
    * Identifiers, integers, `true` / `false`
    * Prefix operators: `!x`, `-x`
    * Infix operators: `+ - * / < > == !=` (left-associative)
    * Grouping: `(a + b) * c`
    * Conditionals: `if (cond) { ... } else { ... }`
    * Function literals: `fn(x, y) { ... }`
    * Calls: `add(1, 2 * 3)`

Parser Behavior
---------------
- Errors never raise. Each problem is recorded as a `ParseError` in
  `Parser.errors` and parsing carries on with the next statement, so the
  returned `Program` may contain `None` children where recovery happened.
- Expressions may nest at most `MAX_NESTING_DEPTH` levels (parentheses,
  prefix operators, right operands, function bodies, ...). Deeper input
  records a `NESTING_TOO_DEEP` error and parsing stops there; the statements
  completed so far are kept. Left-associative chains such as `a + b + c` do
  not nest and have no length limit.
- Whether a non-empty error list is fatal is the caller's decision;
  `ParseResult.raise_for_errors()` raises `MonkeySyntaxError` for callers
  that want fail-fast behavior.
- A trailing `;` after a statement is optional unless the parser is built
  with `require_semicolons=True`.

Entry Points
------------
- `parse_program(source)`: Parse source text into a `ParseResult`.
- `Parser.parse_program()`: Parse everything the parser's lexer yields.
- `Parser.parse_expression(precedence)`: The Pratt expression engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, NamedTuple

from monkey.monkey_ast import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
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
    Statement,
)
from monkey.monkey_constants import PRECEDENCES, Precedence, TokenKind, precedence_of
from monkey.monkey_lexer import Lexer, Token

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1

# Each level costs a handful of Python frames; this keeps well inside the
# default recursion limit.
MAX_NESTING_DEPTH = 100


class ParseErrorKind(str, Enum):
    """Categories of structural problems the parser reports."""

    ILLEGAL_TOKEN = "illegal-token"
    NO_PREFIX_RULE = "no-prefix-rule"
    UNEXPECTED_TOKEN = "unexpected-token"
    MALFORMED_INTEGER = "malformed-integer"
    NESTING_TOO_DEEP = "nesting-too-deep"


@dataclass(frozen=True)
class ParseError:
    """One recorded parse problem.

    Attributes:
        kind (ParseErrorKind): What went wrong.
        message (str): Human-readable description.
        token (Token): The offending token; carries the literal and position.
        expected (TokenKind | None): The required kind, for unexpected-token errors.
        actual (TokenKind | None): The kind that was found instead.
    """

    kind: ParseErrorKind
    message: str
    token: Token
    expected: TokenKind | None = None
    actual: TokenKind | None = None

    def __str__(self) -> str:
        return f"{self.token.line}:{self.token.col}: {self.message}"


class MonkeySyntaxError(SyntaxError):
    """Raised on request when a parse produced errors.

    Attributes:
        errors (list[ParseError]): Every error recorded during the parse, in order.
    """

    def __init__(self, errors: list[ParseError]) -> None:
        self.errors = list(errors)
        lines = "\n".join(str(e) for e in self.errors)
        super().__init__(f"{len(self.errors)} parse error(s):\n{lines}")


class NestingTooDeep(Exception):
    """Unwinds the parser when an expression exceeds `MAX_NESTING_DEPTH`.

    Internal: `Parser.parse_program` turns it into a `ParseError`.
    """

    def __init__(self, token: Token) -> None:
        super().__init__(token)
        self.token = token


class ParseResult(NamedTuple):
    """The best-effort AST of one parse together with its complete error list.

    Unpacks as `program, errors = parse_program(source)`.
    """

    program: Program
    errors: tuple[ParseError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> Program:
        """Returns the program, or raises if any error was recorded.

        Returns:
            Program: The parsed program.

        Raises:
            MonkeySyntaxError: If the parse recorded at least one error.
        """
        if self.errors:
            raise MonkeySyntaxError(list(self.errors))
        return self.program


PrefixRule = Callable[["Parser"], "Expression | None"]
InfixRule = Callable[["Parser", "Expression | None"], "Expression | None"]


class Parser:
    """
    Monkey Parser Class

    Transforms the token stream of a `Lexer` into a `Program`. A parser owns its
    lexer and is good for a single parse; build a new one per source text.

    Attributes
    ----------
    lexer : Lexer
        The token source.
    current_token : Token
        The token under the cursor.
    peek_token : Token
        The token after the cursor (one-token lookahead).
    errors : list[ParseError]
        Problems recorded so far, in source order.
    require_semicolons : bool
        When True, `let` and `return` statements must end with `;`.
    depth : int
        How many `parse_expression` calls are currently active.
    prefix_rules : Mapping[TokenKind, PrefixRule]
        Token kinds that can start an expression.
    infix_rules : Mapping[TokenKind, InfixRule]
        Token kinds that can continue an expression.
    precedences : Mapping[TokenKind, Precedence]
        Binding strength of infix-capable token kinds.

    Methods
    -------
    parse_program() -> Program
        Parse statements until end of input.
    parse_statement() -> Statement | None
        Parse one `let`, `return` or expression statement.
    parse_expression(precedence) -> Expression | None
        The Pratt expression engine.
    parse_block_statement() -> BlockStatement
        Parse a `{}`-enclosed block of statements.
    """

    def __init__(self, lexer: Lexer, *, require_semicolons: bool = False) -> None:
        self.lexer = lexer
        self.require_semicolons = require_semicolons
        self.errors: list[ParseError] = []
        self.depth = 0

        self.prefix_rules: Mapping[TokenKind, PrefixRule] = PREFIX_RULES
        self.infix_rules: Mapping[TokenKind, InfixRule] = INFIX_RULES
        self.precedences: Mapping[TokenKind, Precedence] = PRECEDENCES

        # Prime current and peek.
        self.current_token: Token = lexer.next_token()
        self.peek_token: Token = lexer.next_token()

    @classmethod
    def from_source(cls, source: str, **options: bool) -> Parser:
        return cls(Lexer.from_source(source), **options)

    # --- cursor ---

    def next_token(self) -> None:
        self.current_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def current_token_is(self, kind: TokenKind) -> bool:
        return self.current_token.type == kind

    def peek_token_is(self, kind: TokenKind) -> bool:
        return self.peek_token.type == kind

    def expect_peek(self, kind: TokenKind) -> bool:
        """Advances onto the peek token if it has the required kind.

        Args:
            kind (TokenKind): The kind the next token must have.

        Returns:
            bool: True if the cursor moved onto a token of `kind`. False if the
            peek token is something else; an `UNEXPECTED_TOKEN` error is then
            recorded and the cursor stays put.
        """
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.peek_error(kind)
        return False

    def peek_precedence(self) -> Precedence:
        return precedence_of(self.peek_token.type, self.precedences)

    def current_precedence(self) -> Precedence:
        return precedence_of(self.current_token.type, self.precedences)

    # --- errors ---

    def record(self, error: ParseError) -> None:
        logger.debug("parse error: %s", error)
        self.errors.append(error)

    def peek_error(self, expected: TokenKind) -> None:
        tok = self.peek_token
        self.record(
            ParseError(
                ParseErrorKind.UNEXPECTED_TOKEN,
                f"expected next token to be {expected}, got {tok.type} ({tok.literal!r}) instead",
                tok,
                expected=expected,
                actual=tok.type,
            )
        )

    def no_prefix_rule_error(self) -> None:
        tok = self.current_token
        if tok.type == TokenKind.ILLEGAL:
            self.record(
                ParseError(
                    ParseErrorKind.ILLEGAL_TOKEN,
                    f"illegal character {tok.literal!r}",
                    tok,
                    actual=tok.type,
                )
            )
            return
        self.record(
            ParseError(
                ParseErrorKind.NO_PREFIX_RULE,
                f"no prefix parse rule for {tok.type} found",
                tok,
                actual=tok.type,
            )
        )

    # --- statements ---

    def parse_program(self) -> Program:
        """Parse statements until end of input.

        Statements that could not be built at all are left out of the program;
        their errors remain in `self.errors`. If an expression nests deeper
        than `MAX_NESTING_DEPTH`, a `NESTING_TOO_DEEP` error is recorded and
        the program holds the statements completed before it.

        Returns:
            Program: The best-effort program.
        """
        statements: list[Statement] = []
        try:
            while not self.current_token_is(TokenKind.EOF):
                stmt = self.parse_statement()
                if stmt is not None:
                    statements.append(stmt)
                self.next_token()
        except NestingTooDeep as e:
            self.record(
                ParseError(
                    ParseErrorKind.NESTING_TOO_DEEP,
                    f"expression nested too deeply (more than {MAX_NESTING_DEPTH} levels)",
                    e.token,
                    actual=e.token.type,
                )
            )
        logger.debug(
            "parsed %d statement(s) with %d error(s)", len(statements), len(self.errors)
        )
        return Program(tuple(statements))

    def parse_statement(self) -> Statement | None:
        """Dispatch on the current token: `let`, `return`, or an expression statement."""
        if self.current_token_is(TokenKind.LET):
            return self.parse_let_statement()
        if self.current_token_is(TokenKind.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def end_statement(self) -> None:
        """Consume an optional trailing `;`, or insist on it in strict mode."""
        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        elif self.require_semicolons and not self.current_token_is(TokenKind.SEMICOLON):
            self.peek_error(TokenKind.SEMICOLON)

    def parse_let_statement(self) -> LetStatement | None:
        """Parse `let <ident> = <expr>;` starting on the `let` token.

        Returns:
            LetStatement | None: The statement, or None if the name or the `=`
            is missing.
        """
        let_tok = self.current_token

        if not self.expect_peek(TokenKind.IDENT):
            return None
        name = Identifier(self.current_token, self.current_token.literal)

        if not self.expect_peek(TokenKind.ASSIGN):
            return None

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        self.end_statement()
        return LetStatement(let_tok, name, value)

    def parse_return_statement(self) -> ReturnStatement:
        """Parse `return <expr>;` starting on the `return` token."""
        return_tok = self.current_token

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        self.end_statement()
        return ReturnStatement(return_tok, value)

    def parse_expression_statement(self) -> ExpressionStatement:
        first = self.current_token
        expression = self.parse_expression(Precedence.LOWEST)
        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        return ExpressionStatement(first, expression)

    def parse_block_statement(self) -> BlockStatement:
        """Parse `{ <stmt>* }`.

        Expects the cursor on `{` and leaves it on the closing `}`. Reaching end
        of input first records an `UNEXPECTED_TOKEN` error and keeps the
        statements parsed so far.

        Returns:
            BlockStatement: The block.
        """
        open_tok = self.current_token
        statements: list[Statement] = []

        self.next_token()
        while not self.current_token_is(TokenKind.RBRACE):
            if self.current_token_is(TokenKind.EOF):
                tok = self.current_token
                self.record(
                    ParseError(
                        ParseErrorKind.UNEXPECTED_TOKEN,
                        f"expected {TokenKind.RBRACE} to close block, got {tok.type} instead",
                        tok,
                        expected=TokenKind.RBRACE,
                        actual=tok.type,
                    )
                )
                break
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()

        return BlockStatement(open_tok, tuple(statements))

    # --- expressions ---

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        """Pratt expression engine.

        Builds the expression starting at the current token, then keeps folding
        in infix operators while the peek token binds strictly tighter than
        `precedence`. Equal precedence does not fold, which makes binary
        operators left-associative.

        Args:
            precedence (Precedence): Binding strength of the operator to the
                left of this expression (`LOWEST` at statement level).

        Returns:
            Expression | None: The expression, or None if the current token
            cannot start one (the error is recorded).

        Raises:
            NestingTooDeep: If more than `MAX_NESTING_DEPTH` calls are active;
                caught by `parse_program`.
        """
        if self.depth >= MAX_NESTING_DEPTH:
            raise NestingTooDeep(self.current_token)
        self.depth += 1
        try:
            prefix = self.prefix_rules.get(self.current_token.type)
            if prefix is None:
                self.no_prefix_rule_error()
                return None
            left = prefix(self)

            while precedence < self.peek_precedence():
                infix = self.infix_rules.get(self.peek_token.type)
                if infix is None:
                    return left
                self.next_token()
                left = infix(self, left)

            return left
        finally:
            self.depth -= 1

    def parse_identifier(self) -> Expression:
        """Prefix rule for `IDENT`.

        Returns:
            Expression: An `Identifier` named after the current token.
        """
        return Identifier(self.current_token, self.current_token.literal)

    def parse_integer_literal(self) -> Expression:
        """Prefix rule for `INT`.

        A digit run that does not fit in a signed 64-bit integer records a
        `MALFORMED_INTEGER` error and yields a literal with value 0.

        Returns:
            Expression: An `IntegerLiteral`.
        """
        tok = self.current_token
        value = int(tok.literal) if tok.literal.isdigit() else None
        if value is None or value > INT64_MAX:
            self.record(
                ParseError(
                    ParseErrorKind.MALFORMED_INTEGER,
                    f"could not parse {tok.literal!r} as a 64-bit integer",
                    tok,
                    actual=tok.type,
                )
            )
            value = 0
        return IntegerLiteral(tok, value)

    def parse_boolean(self) -> Expression:
        """Prefix rule for `true` and `false`.

        Returns:
            Expression: A `BooleanLiteral`.
        """
        return BooleanLiteral(self.current_token, self.current_token_is(TokenKind.TRUE))

    def parse_prefix_expression(self) -> Expression:
        """Prefix rule for `!` and `-`.

        The operand is parsed at `PREFIX` strength, so `-a * b` groups as
        `((-a)*b)`.

        Returns:
            Expression: A `PrefixExpression`; its operand may be None.
        """
        op_tok = self.current_token
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(op_tok, op_tok.literal, right)

    def parse_infix_expression(self, left: Expression | None) -> Expression:
        """Infix rule for the binary operators.

        The right operand is parsed at the operator's own precedence, which
        makes chains of equal-precedence operators group to the left.

        Args:
            left (Expression | None): The already-parsed left operand.

        Returns:
            Expression: An `InfixExpression`; its right operand may be None.
        """
        op_tok = self.current_token
        precedence = self.current_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        return InfixExpression(op_tok, left, op_tok.literal, right)

    def parse_grouped_expression(self) -> Expression | None:
        """Prefix rule for `(`: parse `( <expr> )`.

        Returns:
            Expression | None: The inner expression (no node is added for the
            parentheses), or None if the closing `)` is missing.
        """
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> Expression | None:
        """Prefix rule for `if`: `if (<cond>) { ... }` with an optional `else { ... }`.

        Returns:
            Expression | None: An `IfExpression`, or None if a required
            parenthesis or brace is missing.
        """
        if_tok = self.current_token

        if not self.expect_peek(TokenKind.LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TokenKind.RPAREN):
            return None
        if not self.expect_peek(TokenKind.LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(TokenKind.ELSE):
            self.next_token()
            if not self.expect_peek(TokenKind.LBRACE):
                return None
            alternative = self.parse_block_statement()

        return IfExpression(if_tok, condition, consequence, alternative)

    def parse_function_literal(self) -> Expression | None:
        """Prefix rule for `fn`: `fn(<ident>, ...) { ... }`.

        Returns:
            Expression | None: A `FunctionLiteral`, or None if the parameter
            list or the opening brace of the body is malformed.
        """
        fn_tok = self.current_token

        if not self.expect_peek(TokenKind.LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(TokenKind.LBRACE):
            return None
        body = self.parse_block_statement()

        return FunctionLiteral(fn_tok, parameters, body)

    def parse_function_parameters(self) -> tuple[Identifier, ...] | None:
        """Parse a parameter list. Expects the cursor on `(` and leaves it on `)`.

        Parameters must be identifiers separated by commas; anything else
        between them is an error.

        Returns:
            tuple[Identifier, ...] | None: The parameters, or None on error.
        """
        parameters: list[Identifier] = []

        if self.peek_token_is(TokenKind.RPAREN):
            self.next_token()
            return ()

        while True:
            if not self.expect_peek(TokenKind.IDENT):
                return None
            parameters.append(Identifier(self.current_token, self.current_token.literal))

            if self.peek_token_is(TokenKind.COMMA):
                self.next_token()
                continue
            if not self.expect_peek(TokenKind.RPAREN):
                return None
            return tuple(parameters)

    def parse_call_expression(self, function: Expression | None) -> Expression | None:
        """Infix rule for `(` after an expression: `<function>(<args>)`.

        Args:
            function (Expression | None): The callee, already parsed.

        Returns:
            Expression | None: A `CallExpression`, or None if the argument list
            is not closed by `)`.
        """
        paren_tok = self.current_token
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(paren_tok, function, arguments)

    def parse_call_arguments(self) -> tuple[Expression | None, ...] | None:
        """Parse comma-separated arguments. Expects the cursor on `(` and leaves it on `)`.

        Returns:
            tuple[Expression | None, ...] | None: The arguments, or None if the
            closing `)` is missing.
        """
        self.next_token()
        if self.current_token_is(TokenKind.RPAREN):
            return ()

        arguments = [self.parse_expression(Precedence.LOWEST)]
        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            self.next_token()
            arguments.append(self.parse_expression(Precedence.LOWEST))

        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return tuple(arguments)


PREFIX_RULES: Mapping[TokenKind, PrefixRule] = MappingProxyType(
    {
        TokenKind.IDENT: Parser.parse_identifier,
        TokenKind.INT: Parser.parse_integer_literal,
        TokenKind.TRUE: Parser.parse_boolean,
        TokenKind.FALSE: Parser.parse_boolean,
        TokenKind.BANG: Parser.parse_prefix_expression,
        TokenKind.MINUS: Parser.parse_prefix_expression,
        TokenKind.LPAREN: Parser.parse_grouped_expression,
        TokenKind.IF: Parser.parse_if_expression,
        TokenKind.FUNCTION: Parser.parse_function_literal,
    }
)

INFIX_RULES: Mapping[TokenKind, InfixRule] = MappingProxyType(
    {
        TokenKind.PLUS: Parser.parse_infix_expression,
        TokenKind.MINUS: Parser.parse_infix_expression,
        TokenKind.ASTERISK: Parser.parse_infix_expression,
        TokenKind.SLASH: Parser.parse_infix_expression,
        TokenKind.EQ: Parser.parse_infix_expression,
        TokenKind.NOT_EQ: Parser.parse_infix_expression,
        TokenKind.LT: Parser.parse_infix_expression,
        TokenKind.GT: Parser.parse_infix_expression,
        TokenKind.LPAREN: Parser.parse_call_expression,
    }
)


def check_dispatch_tables(
    infix_rules: Mapping[TokenKind, InfixRule] = INFIX_RULES,
    precedences: Mapping[TokenKind, Precedence] = PRECEDENCES,
) -> None:
    """Ensure every operator with a precedence has an infix rule, and vice versa.

    Raises:
        RuntimeError: If the tables disagree.
    """
    missing_rule = set(precedences) - set(infix_rules)
    missing_precedence = set(infix_rules) - set(precedences)
    if missing_rule or missing_precedence:
        raise RuntimeError(
            "Inconsistent parser tables: "
            f"no infix rule for {sorted(k.name for k in missing_rule)}, "
            f"no precedence for {sorted(k.name for k in missing_precedence)}"
        )


check_dispatch_tables()


def parse_program(source: str, **options: bool) -> ParseResult:
    """Parse `source` and return the AST together with every recorded error.

    Args:
        source (str): Monkey source text.
        **options: Forwarded to `Parser` (e.g. `require_semicolons=True`).

    Returns:
        ParseResult: The best-effort program and the ordered error list.
    """
    parser = Parser.from_source(source, **options)
    program = parser.parse_program()
    return ParseResult(program, tuple(parser.errors))


__all__ = [
    "INFIX_RULES",
    "MAX_NESTING_DEPTH",
    "PREFIX_RULES",
    "MonkeySyntaxError",
    "ParseError",
    "ParseErrorKind",
    "ParseResult",
    "Parser",
    "check_dispatch_tables",
    "parse_program",
]
