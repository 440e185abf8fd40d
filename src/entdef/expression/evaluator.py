# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Evaluation of model expressions against entity attributes.

Values are plain Python objects: ``None`` (null), ``bool``, ``float``,
``str``, ``list`` and ``dict``, plus the :data:`UNDEFINED` marker for the
result of a failed case or a reference to an unknown attribute.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from entdef.errors import EvaluationError
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
    UndefinedExpression,
    VariableExpression,
)

# ###############
# Public Interface
# ###############


class _Undefined:
    """Type of the :data:`UNDEFINED` marker."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


def evaluate(expression: Expression, variables: Mapping[str, Any] | None = None) -> Any:
    """Evaluate an expression.

    Args:
        expression: The expression to evaluate.
        variables: Values for variable references, usually the entity's
            attributes. Unknown names evaluate to :data:`UNDEFINED`.

    Returns:
        The resulting value.

    Raises:
        EvaluationError: On type mismatches, division by zero, or invalid
            bitwise operands.
    """
    return _Evaluator(variables or {}).visit(expression)


def is_truthy(value: Any) -> bool:
    """Return the boolean interpretation of a value.

    Undefined, null, false, zero, the empty string and empty containers are
    false; everything else is true.
    """
    if value is UNDEFINED or value is None:
        return False
    return bool(value)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_number(value: Any) -> float | None:
    """Convert a number or a numeric string to a float, or return None."""
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        # float() also accepts "inf", "nan" and digit separators.
        if not math.isfinite(number) or "_" in value:
            return None
        return number
    return None


# ################
# Implementation
# ################


class _Evaluator:
    """Tree-walking evaluator bound to one set of variables."""

    def __init__(self, variables: Mapping[str, Any]) -> None:
        self._variables = variables

    def visit(self, expression: Expression) -> Any:
        if isinstance(expression, LiteralExpression):
            return expression.value
        if isinstance(expression, UndefinedExpression):
            return UNDEFINED
        if isinstance(expression, VariableExpression):
            return self._variables.get(expression.name, UNDEFINED)
        if isinstance(expression, ArrayExpression):
            return [self.visit(element) for element in expression.elements]
        if isinstance(expression, MapExpression):
            return {key: self.visit(value) for key, value in expression.entries.items()}
        if isinstance(expression, UnaryExpression):
            return _apply_unary(expression.operator, self.visit(expression.operand))
        if isinstance(expression, BinaryExpression):
            return self._visit_binary(expression)
        if isinstance(expression, SubscriptExpression):
            return _subscript(self.visit(expression.target), self.visit(expression.index))
        if isinstance(expression, CaseExpression):
            if is_truthy(self.visit(expression.condition)):
                return self.visit(expression.value)
            return UNDEFINED
        if isinstance(expression, SwitchExpression):
            for case in expression.cases:
                value = self.visit(case)
                if value is not UNDEFINED:
                    return value
            return UNDEFINED
        raise EvaluationError(f"Unknown expression node: {type(expression).__name__}")

    def _visit_binary(self, expression: BinaryExpression) -> Any:
        # Logical operators short-circuit.
        if expression.operator == BinaryOperator.AND:
            return is_truthy(self.visit(expression.left)) and is_truthy(self.visit(expression.right))
        if expression.operator == BinaryOperator.OR:
            return is_truthy(self.visit(expression.left)) or is_truthy(self.visit(expression.right))
        left = self.visit(expression.left)
        right = self.visit(expression.right)
        return _apply_binary(expression.operator, left, right)


def _apply_unary(operator: UnaryOperator, operand: Any) -> Any:
    if operator == UnaryOperator.NOT:
        return not is_truthy(operand)
    if operator == UnaryOperator.BIT_NOT:
        return float(~_integral(operand, "~"))
    number = _require_number(operand, operator.value)
    return -number if operator == UnaryOperator.NEGATE else number


def _apply_binary(operator: BinaryOperator, left: Any, right: Any) -> Any:
    if operator == BinaryOperator.EQUAL:
        return _equals(left, right)
    if operator == BinaryOperator.NOT_EQUAL:
        return not _equals(left, right)
    if operator in _ORDERINGS:
        return _ORDERINGS[operator](_compare(left, right, operator.value))
    if operator == BinaryOperator.ADD and isinstance(left, str) and isinstance(right, str):
        return left + right
    if operator in _BITWISE:
        lhs_bits = _integral(left, operator.value)
        rhs_bits = _integral(right, operator.value)
        if operator in (BinaryOperator.SHIFT_LEFT, BinaryOperator.SHIFT_RIGHT) and not 0 <= rhs_bits < 64:
            raise EvaluationError(f"Shift amount out of range: {rhs_bits}")
        try:
            return float(_BITWISE[operator](lhs_bits, rhs_bits))
        except OverflowError as exc:
            raise EvaluationError(f"Result of '{operator.value}' is out of range") from exc

    lhs = _require_number(left, operator.value)
    rhs = _require_number(right, operator.value)
    if operator == BinaryOperator.ADD:
        return lhs + rhs
    if operator == BinaryOperator.SUBTRACT:
        return lhs - rhs
    if operator == BinaryOperator.MULTIPLY:
        return lhs * rhs
    if rhs == 0:
        raise EvaluationError(f"Division by zero in '{operator.value}'")
    if operator == BinaryOperator.DIVIDE:
        return lhs / rhs
    if not (math.isfinite(lhs) and math.isfinite(rhs)):
        raise EvaluationError(f"Operator '%' expects finite numbers, got {lhs} and {rhs}")
    return math.fmod(lhs, rhs)


def _require_number(value: Any, operator: str) -> float:
    number = to_number(value)
    if number is None:
        raise EvaluationError(f"Operator '{operator}' expects a number, got {_type_name(value)}")
    return number


def _integral(value: Any, operator: str) -> int:
    number = _require_number(value, operator)
    if not number.is_integer():
        raise EvaluationError(f"Operator '{operator}' expects an integer, got {number}")
    return int(number)


def _equals(left: Any, right: Any) -> bool:
    """Compare for equality, converting numeric strings when compared with numbers."""
    if is_number(left) and isinstance(right, str) or isinstance(left, str) and is_number(right):
        lhs = to_number(left)
        rhs = to_number(right)
        return lhs is not None and rhs is not None and lhs == rhs
    if is_number(left) and is_number(right):
        return float(left) == float(right)
    if type(left) is not type(right):
        return False
    return left == right


def _compare(left: Any, right: Any, operator: str) -> int:
    """Three-way comparison of two numbers or two strings."""
    if isinstance(left, str) and isinstance(right, str):
        return (left > right) - (left < right)
    lhs = to_number(left)
    rhs = to_number(right)
    if lhs is None or rhs is None:
        raise EvaluationError(f"Cannot compare {_type_name(left)} and {_type_name(right)} with '{operator}'")
    return (lhs > rhs) - (lhs < rhs)


def _subscript(target: Any, index: Any) -> Any:
    if isinstance(target, (list, str)):
        position = _integral(index, "[]")
        if position < 0:
            position += len(target)
        if 0 <= position < len(target):
            return target[position]
        return UNDEFINED
    if isinstance(target, dict):
        if not isinstance(index, str):
            raise EvaluationError(f"Map subscript expects a string key, got {_type_name(index)}")
        return target.get(index, UNDEFINED)
    if target is UNDEFINED:
        return UNDEFINED
    raise EvaluationError(f"Cannot subscript {_type_name(target)}")


def _type_name(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "map"
    return type(value).__name__


_ORDERINGS = {
    BinaryOperator.LESS: lambda c: c < 0,
    BinaryOperator.LESS_EQUAL: lambda c: c <= 0,
    BinaryOperator.GREATER: lambda c: c > 0,
    BinaryOperator.GREATER_EQUAL: lambda c: c >= 0,
}

_BITWISE = {
    BinaryOperator.BIT_AND: lambda a, b: a & b,
    BinaryOperator.BIT_OR: lambda a, b: a | b,
    BinaryOperator.BIT_XOR: lambda a, b: a ^ b,
    BinaryOperator.SHIFT_LEFT: lambda a, b: a << b,
    BinaryOperator.SHIFT_RIGHT: lambda a, b: a >> b,
}
