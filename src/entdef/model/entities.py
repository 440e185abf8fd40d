# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entity class descriptors produced by the definition parser."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

from entdef.expression import Expression, SwitchExpression, evaluate, render
from entdef.expression.evaluator import to_number
from entdef.model.attributes import AttributeDefinition
from entdef.model.types import BoundingBox, Color

# ###############
# Public Interface
# ###############


class ModelSpecification(BaseModel):
    """The concrete model an entity displays: a file path plus skin and frame."""

    model_config = ConfigDict(frozen=True)

    path: str
    skin: int = 0
    frame: int = 0


class ModelDefinition(BaseModel):
    """A model expression that selects a model from an entity's attributes."""

    model_config = ConfigDict(frozen=True)

    expression: Expression

    def as_string(self) -> str:
        """Return the expression in model expression syntax."""
        return render(self.expression)

    def append(self, other: ModelDefinition) -> ModelDefinition:
        """Combine two definitions; this one is tried first."""
        return ModelDefinition(expression=SwitchExpression(cases=[self.expression, other.expression]))

    def model_specification(self, attributes: Mapping[str, Any] | None = None) -> ModelSpecification | None:
        """Evaluate the expression for an entity with the given attributes.

        A string result is a model path. A map result provides ``path``,
        ``skin`` and ``frame``. Any other result selects no model.

        Raises:
            EvaluationError: If the expression cannot be evaluated.
        """
        value = evaluate(self.expression, attributes)
        if isinstance(value, str):
            return ModelSpecification(path=value) if value else None
        if isinstance(value, dict):
            path = value.get("path")
            if not isinstance(path, str) or not path:
                return None
            return ModelSpecification(path=path, skin=_index(value.get("skin")), frame=_index(value.get("frame")))
        return None


class PointEntityDefinition(BaseModel):
    """A class placed at a single point, with a fixed bounding box."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["point"] = "point"
    name: str
    color: Color
    size: BoundingBox
    description: str = ""
    attributes: list[AttributeDefinition] = _Field(default_factory=list)
    model: ModelDefinition | None = None

    def attribute(self, name: str) -> AttributeDefinition | None:
        return _find_attribute(self.attributes, name)


class BrushEntityDefinition(BaseModel):
    """A class whose instances are made of brush geometry."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["brush"] = "brush"
    name: str
    color: Color
    description: str = ""
    attributes: list[AttributeDefinition] = _Field(default_factory=list)

    def attribute(self, name: str) -> AttributeDefinition | None:
        return _find_attribute(self.attributes, name)


# A parsed entity class descriptor: point or brush.
EntityDefinition = Annotated[PointEntityDefinition | BrushEntityDefinition, _Field(discriminator="kind")]


# ################
# Implementation
# ################


def _find_attribute(attributes: list[AttributeDefinition], name: str) -> AttributeDefinition | None:
    for attribute in attributes:
        if attribute.name == name:
            return attribute
    return None


def _index(value: Any) -> int:
    number = to_number(value)
    if number is None or not math.isfinite(number) or number < 0:
        return 0
    return int(number)
