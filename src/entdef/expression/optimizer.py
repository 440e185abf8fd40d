# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Constant folding for model expressions."""

from typing import Any

from entdef.errors import EvaluationError
from entdef.expression.evaluator import UNDEFINED, evaluate, is_truthy
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
)

# ###############
# Public Interface
# ###############


def optimize(expression: Expression) -> Expression:
    """Return an equivalent expression with constant sub-expressions folded.

    Sub-expressions that reference no variables are replaced by their value.
    Switches lose operands that can never be selected, and a case whose
    condition is constant becomes its value or undefined. A constant
    sub-expression whose evaluation fails is left as written, so the error
    surfaces when the expression is evaluated instead.
    """
    if isinstance(expression, ArrayExpression):
        elements = [optimize(element) for element in expression.elements]
        return _fold_if_constant(ArrayExpression(elements=elements), elements)
    if isinstance(expression, MapExpression):
        entries = {key: optimize(value) for key, value in expression.entries.items()}
        return _fold_if_constant(MapExpression(entries=entries), list(entries.values()))
    if isinstance(expression, UnaryExpression):
        operand = optimize(expression.operand)
        return _fold_if_constant(UnaryExpression(operator=expression.operator, operand=operand), [operand])
    if isinstance(expression, BinaryExpression):
        return _optimize_binary(expression)
    if isinstance(expression, SubscriptExpression):
        target = optimize(expression.target)
        index = optimize(expression.index)
        return _fold_if_constant(SubscriptExpression(target=target, index=index), [target, index])
    if isinstance(expression, CaseExpression):
        condition = optimize(expression.condition)
        value = optimize(expression.value)
        if isinstance(condition, LiteralExpression):
            return value if is_truthy(condition.value) else UndefinedExpression()
        return CaseExpression(condition=condition, value=value)
    if isinstance(expression, SwitchExpression):
        return _optimize_switch(expression)
    return expression


# ################
# Implementation
# ################


def _optimize_binary(expression: BinaryExpression) -> Expression:
    left = optimize(expression.left)
    right = optimize(expression.right)
    folded = BinaryExpression(operator=expression.operator, left=left, right=right)
    if expression.operator in (BinaryOperator.AND, BinaryOperator.OR) and isinstance(left, LiteralExpression):
        # A constant left operand that decides the result makes the right one irrelevant.
        decided = not is_truthy(left.value) if expression.operator == BinaryOperator.AND else is_truthy(left.value)
        if decided:
            return LiteralExpression(value=expression.operator == BinaryOperator.OR)
    return _fold_if_constant(folded, [left, right])


def _optimize_switch(expression: SwitchExpression) -> Expression:
    cases: list[Expression] = []
    for case in expression.cases:
        optimized = optimize(case)
        if isinstance(optimized, UndefinedExpression):
            continue
        cases.append(optimized)
        if isinstance(optimized, LiteralExpression):
            # Later operands are unreachable.
            break
    if not cases:
        return UndefinedExpression()
    if len(cases) == 1 or isinstance(cases[0], LiteralExpression):
        return cases[0]
    return SwitchExpression(cases=cases)


def _fold_if_constant(expression: Expression, operands: list[Expression]) -> Expression:
    """Replace the expression by its value when all operands are literals."""
    if not all(isinstance(operand, LiteralExpression) for operand in operands):
        return expression
    try:
        value = evaluate(expression)
    except EvaluationError:
        return expression
    if value is UNDEFINED:
        return UndefinedExpression()
    if _contains_undefined(value):
        return expression
    return LiteralExpression(value=value)


def _contains_undefined(value: Any) -> bool:
    if value is UNDEFINED:
        return True
    if isinstance(value, list):
        return any(_contains_undefined(item) for item in value)
    if isinstance(value, dict):
        return any(_contains_undefined(item) for item in value.values())
    return False
