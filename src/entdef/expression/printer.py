# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Renders model expressions back to source text."""

from typing import Any

from entdef.expression.evaluator import is_number
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
    UndefinedExpression,
    VariableExpression,
)

# ###############
# Public Interface
# ###############


def render(expression: Expression) -> str:
    """Render an expression in the model expression syntax.

    Parentheses are only emitted where operator precedence requires them, so
    the output parses back to an equivalent expression.
    """
    if isinstance(expression, LiteralExpression):
        return render_value(expression.value)
    if isinstance(expression, UndefinedExpression):
        # An empty switch is the only way to spell undefined.
        return "{{}}"
    if isinstance(expression, VariableExpression):
        return expression.name
    if isinstance(expression, ArrayExpression):
        if not expression.elements:
            return "[]"
        return "[ " + ", ".join(render(element) for element in expression.elements) + " ]"
    if isinstance(expression, MapExpression):
        if not expression.entries:
            return "{}"
        items = ", ".join(f"{_quote(key)}: {render(value)}" for key, value in expression.entries.items())
        return "{ " + items + " }"
    if isinstance(expression, UnaryExpression):
        return expression.operator.value + _wrap(expression.operand, _UNARY_PRECEDENCE, strict=False)
    if isinstance(expression, BinaryExpression):
        precedence = _BINARY_PRECEDENCE[expression.operator]
        # Comparisons do not chain, so both sides need parentheses at equal precedence.
        left_strict = precedence == _COMPARISON_PRECEDENCE
        left = _wrap(expression.left, precedence, strict=left_strict)
        right = _wrap(expression.right, precedence, strict=True)
        return f"{left} {expression.operator.value} {right}"
    if isinstance(expression, SubscriptExpression):
        target = _wrap(expression.target, _POSTFIX_PRECEDENCE, strict=False)
        return f"{target}[{render(expression.index)}]"
    if isinstance(expression, CaseExpression):
        condition = _wrap(expression.condition, _CASE_PRECEDENCE, strict=True)
        value = _wrap(expression.value, _CASE_PRECEDENCE, strict=True)
        return f"{condition} -> {value}"
    if isinstance(expression, SwitchExpression):
        if not expression.cases:
            return "{{}}"
        return "{{ " + ", ".join(render(case) for case in expression.cases) + " }}"
    raise TypeError(f"Unknown expression node: {type(expression).__name__}")


def render_value(value: Any) -> str:
    """Render an evaluated value as a literal."""
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if is_number(value):
        number = float(value)
        if number.is_integer() and abs(number) < 1e16:
            return str(int(number))
        return repr(number)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, list):
        if not value:
            return "[]"
        return "[ " + ", ".join(render_value(item) for item in value) + " ]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        return "{ " + ", ".join(f"{_quote(k)}: {render_value(v)}" for k, v in value.items()) + " }"
    raise TypeError(f"Cannot render value of type {type(value).__name__}")


# ################
# Implementation
# ################

_CASE_PRECEDENCE = 0
_COMPARISON_PRECEDENCE = 3
_UNARY_PRECEDENCE = 10
_POSTFIX_PRECEDENCE = 11
_ATOM_PRECEDENCE = 12

_BINARY_PRECEDENCE: dict[BinaryOperator, int] = {
    BinaryOperator.OR: 1,
    BinaryOperator.AND: 2,
    BinaryOperator.EQUAL: _COMPARISON_PRECEDENCE,
    BinaryOperator.NOT_EQUAL: _COMPARISON_PRECEDENCE,
    BinaryOperator.LESS: _COMPARISON_PRECEDENCE,
    BinaryOperator.LESS_EQUAL: _COMPARISON_PRECEDENCE,
    BinaryOperator.GREATER: _COMPARISON_PRECEDENCE,
    BinaryOperator.GREATER_EQUAL: _COMPARISON_PRECEDENCE,
    BinaryOperator.BIT_OR: 4,
    BinaryOperator.BIT_XOR: 5,
    BinaryOperator.BIT_AND: 6,
    BinaryOperator.SHIFT_LEFT: 7,
    BinaryOperator.SHIFT_RIGHT: 7,
    BinaryOperator.ADD: 8,
    BinaryOperator.SUBTRACT: 8,
    BinaryOperator.MULTIPLY: 9,
    BinaryOperator.DIVIDE: 9,
    BinaryOperator.MODULUS: 9,
}

_STRING_ESCAPES: dict[str, str] = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def _precedence(expression: Expression) -> int:
    if isinstance(expression, CaseExpression):
        return _CASE_PRECEDENCE
    if isinstance(expression, BinaryExpression):
        return _BINARY_PRECEDENCE[expression.operator]
    if isinstance(expression, UnaryExpression):
        return _UNARY_PRECEDENCE
    if isinstance(expression, LiteralExpression) and is_number(expression.value) and expression.value < 0:
        return _UNARY_PRECEDENCE
    if isinstance(expression, SubscriptExpression):
        return _POSTFIX_PRECEDENCE
    return _ATOM_PRECEDENCE


def _wrap(expression: Expression, parent: int, strict: bool) -> str:
    """Render a child, parenthesized if it binds looser than its parent."""
    child = _precedence(expression)
    needs_parens = child <= parent if strict else child < parent
    text = render(expression)
    return f"({text})" if needs_parens else text


def _quote(text: str) -> str:
    return '"' + "".join(_STRING_ESCAPES.get(ch, ch) for ch in text) + '"'
