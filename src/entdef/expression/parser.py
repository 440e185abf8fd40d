# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for model expressions.

Converts tokens produced by the expression scanner into an expression tree.
"""

from collections.abc import Callable

from entdef.errors import ParseError
from entdef.expression.nodes import (
    ArrayExpression,
    BinaryExpression,
    BinaryOperator,
    CaseExpression,
    Expression,
    LiteralExpression,
    MapExpression,
    SubscriptExpression,
    SwitchExpression,
    UnaryExpression,
    UnaryOperator,
    VariableExpression,
)
from entdef.expression.scanner import ExpressionScanner, ExpressionToken
from entdef.expression.scanner import ExpressionTokenType as T

# ###############
# Public Interface
# ###############


def parse_expression(source: str) -> Expression:
    """Parse a complete model expression from a string.

    Raises:
        LexerError: If the source contains invalid characters.
        ParseError: If the source is not a single well-formed expression.
    """
    parser = ExpressionParser(ExpressionScanner(source))
    expression = parser.parse()
    parser.expect(T.EOF)
    return expression


class ExpressionParser:
    """Parses one expression and leaves the scanner right after it.

    Nothing past the end of the expression is consumed, so the caller can
    hand the scanner position back to an enclosing grammar.
    """

    def __init__(self, scanner: ExpressionScanner) -> None:
        self._scanner = scanner

    @property
    def scanner(self) -> ExpressionScanner:
        return self._scanner

    def parse(self) -> Expression:
        """Parse a single expression."""
        return self._parse_case()

    def expect(self, *types: T) -> ExpressionToken:
        """Consume the next token if it matches any of the given types.

        Raises ParseError if it does not.
        """
        tok = self._scanner.next_token()
        if tok.type not in types:
            expected = " or ".join(_describe(t) for t in types)
            raise ParseError(
                f"Expected {expected}, got {_display(tok)}",
                tok.line,
                tok.column,
                expected=expected,
                actual=tok.value,
            )
        return tok

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _check(self, *types: T) -> bool:
        return self._scanner.peek_token().type in types

    def _advance(self) -> ExpressionToken:
        return self._scanner.next_token()

    # ------------------------------------------------------------------
    # Operator precedence levels
    # ------------------------------------------------------------------

    def _parse_case(self) -> Expression:
        """Parse: or [ '->' or ]"""
        condition = self._parse_or()
        if self._check(T.ARROW):
            self._advance()
            value = self._parse_or()
            return CaseExpression(condition=condition, value=value)
        return condition

    def _parse_or(self) -> Expression:
        left = self._parse_and()
        while self._check(T.OR):
            self._advance()
            left = BinaryExpression(operator=BinaryOperator.OR, left=left, right=self._parse_and())
        return left

    def _parse_and(self) -> Expression:
        left = self._parse_comparison()
        while self._check(T.AND):
            self._advance()
            left = BinaryExpression(operator=BinaryOperator.AND, left=left, right=self._parse_comparison())
        return left

    def _parse_comparison(self) -> Expression:
        """Comparisons do not chain: ``a < b < c`` is rejected."""
        left = self._parse_bit_or()
        tok = self._scanner.peek_token()
        if tok.type in _COMPARISON_OPERATORS:
            self._advance()
            right = self._parse_bit_or()
            return BinaryExpression(operator=_COMPARISON_OPERATORS[tok.type], left=left, right=right)
        return left

    def _parse_bit_or(self) -> Expression:
        return self._parse_left_associative({T.PIPE: BinaryOperator.BIT_OR}, self._parse_bit_xor)

    def _parse_bit_xor(self) -> Expression:
        return self._parse_left_associative({T.CARET: BinaryOperator.BIT_XOR}, self._parse_bit_and)

    def _parse_bit_and(self) -> Expression:
        return self._parse_left_associative({T.AMPERSAND: BinaryOperator.BIT_AND}, self._parse_shift)

    def _parse_shift(self) -> Expression:
        return self._parse_left_associative(_SHIFT_OPERATORS, self._parse_additive)

    def _parse_additive(self) -> Expression:
        return self._parse_left_associative(_ADDITIVE_OPERATORS, self._parse_multiplicative)

    def _parse_multiplicative(self) -> Expression:
        return self._parse_left_associative(_MULTIPLICATIVE_OPERATORS, self._parse_unary)

    def _parse_left_associative(
        self,
        operators: dict[T, BinaryOperator],
        parse_operand: Callable[[], Expression],
    ) -> Expression:
        """Parse: operand ( op operand )* for one precedence level."""
        left = parse_operand()
        while True:
            tok = self._scanner.peek_token()
            if tok.type not in operators:
                return left
            self._advance()
            right = parse_operand()
            left = BinaryExpression(operator=operators[tok.type], left=left, right=right)

    def _parse_unary(self) -> Expression:
        tok = self._scanner.peek_token()
        if tok.type in _UNARY_OPERATORS:
            self._advance()
            return UnaryExpression(operator=_UNARY_OPERATORS[tok.type], operand=self._parse_unary())
        return self._parse_postfix()

    def _parse_postfix(self) -> Expression:
        """Parse: primary ( '[' expression ']' )*"""
        expression = self._parse_primary()
        while self._check(T.LBRACKET):
            self._advance()
            index = self.parse()
            self.expect(T.RBRACKET)
            expression = SubscriptExpression(target=expression, index=index)
        return expression

    # ------------------------------------------------------------------
    # Primary expressions
    # ------------------------------------------------------------------

    def _parse_primary(self) -> Expression:
        tok = self.expect(*_PRIMARY_START)
        if tok.type == T.NUMBER:
            return LiteralExpression(value=float(tok.value))
        if tok.type == T.STRING:
            return LiteralExpression(value=tok.value)
        if tok.type == T.TRUE:
            return LiteralExpression(value=True)
        if tok.type == T.FALSE:
            return LiteralExpression(value=False)
        if tok.type == T.NULL:
            return LiteralExpression(value=None)
        if tok.type == T.NAME:
            return VariableExpression(name=tok.value)
        if tok.type == T.LPAREN:
            inner = self.parse()
            self.expect(T.RPAREN)
            return inner
        if tok.type == T.LBRACKET:
            return ArrayExpression(elements=self._parse_list(T.RBRACKET))
        # '{' opens a map, '{' '{' opens a switch.
        if self._check(T.LBRACE):
            self._advance()
            cases = self._parse_list(T.RBRACE)
            self.expect(T.RBRACE)
            return SwitchExpression(cases=cases)
        return self._parse_map()

    def _parse_list(self, closing: T) -> list[Expression]:
        """Parse a comma-separated expression list and its closing token."""
        items: list[Expression] = []
        if self._check(closing):
            self._advance()
            return items
        items.append(self.parse())
        while self._check(T.COMMA):
            self._advance()
            items.append(self.parse())
        self.expect(closing)
        return items

    def _parse_map(self) -> MapExpression:
        """Parse the remainder of: '{' [ key ':' expression (',' ...)* ] '}'"""
        entries: dict[str, Expression] = {}
        if self._check(T.RBRACE):
            self._advance()
            return MapExpression(entries=entries)
        while True:
            key = self.expect(T.STRING, T.NAME)
            self.expect(T.COLON)
            entries[key.value] = self.parse()
            if not self._check(T.COMMA):
                break
            self._advance()
        self.expect(T.RBRACE)
        return MapExpression(entries=entries)


# ################
# Implementation
# ################

_PRIMARY_START: tuple[T, ...] = (
    T.NUMBER,
    T.STRING,
    T.TRUE,
    T.FALSE,
    T.NULL,
    T.NAME,
    T.LPAREN,
    T.LBRACKET,
    T.LBRACE,
)

_COMPARISON_OPERATORS: dict[T, BinaryOperator] = {
    T.EQUAL: BinaryOperator.EQUAL,
    T.NOT_EQUAL: BinaryOperator.NOT_EQUAL,
    T.LESS: BinaryOperator.LESS,
    T.LESS_EQUAL: BinaryOperator.LESS_EQUAL,
    T.GREATER: BinaryOperator.GREATER,
    T.GREATER_EQUAL: BinaryOperator.GREATER_EQUAL,
}

_SHIFT_OPERATORS: dict[T, BinaryOperator] = {
    T.SHIFT_LEFT: BinaryOperator.SHIFT_LEFT,
    T.SHIFT_RIGHT: BinaryOperator.SHIFT_RIGHT,
}

_ADDITIVE_OPERATORS: dict[T, BinaryOperator] = {
    T.PLUS: BinaryOperator.ADD,
    T.MINUS: BinaryOperator.SUBTRACT,
}

_MULTIPLICATIVE_OPERATORS: dict[T, BinaryOperator] = {
    T.STAR: BinaryOperator.MULTIPLY,
    T.SLASH: BinaryOperator.DIVIDE,
    T.PERCENT: BinaryOperator.MODULUS,
}

_UNARY_OPERATORS: dict[T, UnaryOperator] = {
    T.MINUS: UnaryOperator.NEGATE,
    T.PLUS: UnaryOperator.PLUS,
    T.NOT: UnaryOperator.NOT,
    T.TILDE: UnaryOperator.BIT_NOT,
}

_NAMED_TYPES: dict[T, str] = {
    T.NUMBER: "number",
    T.STRING: "string",
    T.NAME: "name",
    T.EOF: "end of input",
}


def _describe(token_type: T) -> str:
    return _NAMED_TYPES.get(token_type, repr(token_type.value))


def _display(tok: ExpressionToken) -> str:
    if tok.type == T.EOF:
        return "end of input"
    return repr(tok.value)
