# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Descriptor model for entity classes (point and brush definitions, attributes)."""

from entdef.model.attributes import (
    SPAWNFLAGS,
    AttributeDefinition,
    ChoiceAttribute,
    ChoiceOption,
    FlagOption,
    FlagsAttribute,
)
from entdef.model.entities import (
    BrushEntityDefinition,
    EntityDefinition,
    ModelDefinition,
    ModelSpecification,
    PointEntityDefinition,
)
from entdef.model.types import BoundingBox, Color, Vec3

__all__ = [
    # Value types
    "BoundingBox",
    "Color",
    "Vec3",
    # Attributes
    "SPAWNFLAGS",
    "AttributeDefinition",
    "ChoiceAttribute",
    "ChoiceOption",
    "FlagOption",
    "FlagsAttribute",
    # Entities
    "BrushEntityDefinition",
    "EntityDefinition",
    "ModelDefinition",
    "ModelSpecification",
    "PointEntityDefinition",
]
