# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Syntax tree for model expressions."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class UnaryOperator(Enum):
    """Prefix operators."""

    NEGATE = "-"
    PLUS = "+"
    NOT = "!"
    BIT_NOT = "~"


class BinaryOperator(Enum):
    """Infix operators, listed from loosest to tightest binding group."""

    OR = "||"
    AND = "&&"
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS = "<"
    LESS_EQUAL = "<="
    GREATER = ">"
    GREATER_EQUAL = ">="
    BIT_OR = "|"
    BIT_XOR = "^"
    BIT_AND = "&"
    SHIFT_LEFT = "<<"
    SHIFT_RIGHT = ">>"
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULUS = "%"


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class LiteralExpression(_Node):
    """A constant: null, bool, number, string, or a (nested) list / dict of those."""

    kind: Literal["literal"] = "literal"
    value: Any = None


class UndefinedExpression(_Node):
    """The undefined value, e.g. a case whose condition is constant false."""

    kind: Literal["undefined"] = "undefined"


class VariableExpression(_Node):
    """A reference to an entity attribute by name."""

    kind: Literal["variable"] = "variable"
    name: str


class ArrayExpression(_Node):
    kind: Literal["array"] = "array"
    elements: list[Expression] = _Field(default_factory=list)


class MapExpression(_Node):
    """A map literal; insertion order of keys is preserved."""

    kind: Literal["map"] = "map"
    entries: dict[str, Expression] = _Field(default_factory=dict)


class UnaryExpression(_Node):
    kind: Literal["unary"] = "unary"
    operator: UnaryOperator
    operand: Expression


class BinaryExpression(_Node):
    kind: Literal["binary"] = "binary"
    operator: BinaryOperator
    left: Expression
    right: Expression


class SubscriptExpression(_Node):
    """``target[index]`` on an array or a map."""

    kind: Literal["subscript"] = "subscript"
    target: Expression
    index: Expression


class CaseExpression(_Node):
    """``condition -> value``: the value if the condition holds, else undefined."""

    kind: Literal["case"] = "case"
    condition: Expression
    value: Expression


class SwitchExpression(_Node):
    """``{{ a, b, ... }}``: the first operand that is not undefined."""

    kind: Literal["switch"] = "switch"
    cases: list[Expression] = _Field(default_factory=list)


# Any model expression node. The `kind` discriminator keeps serialized
# expressions unambiguous when they are loaded back.
Expression = Annotated[
    LiteralExpression
    | UndefinedExpression
    | VariableExpression
    | ArrayExpression
    | MapExpression
    | UnaryExpression
    | BinaryExpression
    | SubscriptExpression
    | CaseExpression
    | SwitchExpression,
    _Field(discriminator="kind"),
]


# Resolve forward references for the recursive nodes.
ArrayExpression.model_rebuild()
MapExpression.model_rebuild()
UnaryExpression.model_rebuild()
BinaryExpression.model_rebuild()
SubscriptExpression.model_rebuild()
CaseExpression.model_rebuild()
SwitchExpression.model_rebuild()
