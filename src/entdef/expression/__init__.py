# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Model expression language: syntax tree, parser, evaluator, and optimizer."""

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
    UnaryOperator,
    UndefinedExpression,
    VariableExpression,
)
from entdef.expression.optimizer import optimize
from entdef.expression.parser import ExpressionParser, parse_expression
from entdef.expression.printer import render, render_value
from entdef.expression.scanner import ExpressionScanner, ExpressionToken, ExpressionTokenType

__all__ = [
    # Syntax tree
    "ArrayExpression",
    "BinaryExpression",
    "BinaryOperator",
    "CaseExpression",
    "Expression",
    "LiteralExpression",
    "MapExpression",
    "SubscriptExpression",
    "SwitchExpression",
    "UnaryExpression",
    "UnaryOperator",
    "UndefinedExpression",
    "VariableExpression",
    # Scanning and parsing
    "ExpressionScanner",
    "ExpressionToken",
    "ExpressionTokenType",
    "ExpressionParser",
    "parse_expression",
    # Evaluation
    "UNDEFINED",
    "evaluate",
    "is_truthy",
    "optimize",
    "render",
    "render_value",
]
