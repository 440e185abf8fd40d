# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Mutable accumulator for one entity class declaration.

The grammar driver fills a :class:`ClassInfo` while it reads a block, then
either turns it into an immutable descriptor or keeps it as a named base
class that later declarations inherit from.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from entdef.model.attributes import AttributeDefinition, FlagsAttribute
from entdef.model.entities import (
    BrushEntityDefinition,
    EntityDefinition,
    ModelDefinition,
    PointEntityDefinition,
)
from entdef.model.types import BoundingBox, Color
from entdef.parser.status import ParserStatus

# ###############
# Public Interface
# ###############


@dataclass
class ClassInfo:
    """An entity class declaration in progress.

    Attributes:
        name: The declared class name.
        line: 1-based line of the declaration's opening marker.
        column: 1-based column of the declaration's opening marker.
        color: Editor color; absent for base classes.
        size: Bounding box; present only for point classes.
        description: Free text following the attribute block.
        attributes: Attribute definitions in declaration order.
        model: Model definition, if declared.
        base_classes: Names of base classes to inherit from, in order.
    """

    name: str
    line: int = 1
    column: int = 1
    color: Color | None = None
    size: BoundingBox | None = None
    description: str = ""
    attributes: list[AttributeDefinition] = field(default_factory=list)
    model: ModelDefinition | None = None
    base_classes: list[str] = field(default_factory=list)

    @property
    def is_base(self) -> bool:
        """A declaration without a color only donates to subclasses."""
        return self.color is None

    def add_attribute(self, attribute: AttributeDefinition) -> None:
        """Add an attribute, replacing an earlier one of the same name in place."""
        for index, existing in enumerate(self.attributes):
            if existing.name == attribute.name:
                self.attributes[index] = attribute
                return
        self.attributes.append(attribute)

    def attribute(self, name: str) -> AttributeDefinition | None:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def resolve_base_classes(self, registry: Mapping[str, ClassInfo], status: ParserStatus) -> None:
        """Inherit from each named base class, in declaration order.

        Only what this declaration leaves unset is inherited; explicit values
        always win. Unknown base names are reported as warnings and skipped.
        """
        for base_name in self.base_classes:
            base = registry.get(base_name)
            if base is None:
                status.warn(self.line, self.column, f"Unknown base class '{base_name}' in class '{self.name}'")
                continue
            self._inherit(base)

    def to_definition(self, default_color: Color) -> EntityDefinition:
        """Finalize into a point descriptor (with size) or a brush descriptor."""
        color = self.color if self.color is not None else default_color
        if self.size is not None:
            return PointEntityDefinition(
                name=self.name,
                color=color,
                size=self.size,
                description=self.description,
                attributes=list(self.attributes),
                model=self.model,
            )
        return BrushEntityDefinition(
            name=self.name,
            color=color,
            description=self.description,
            attributes=list(self.attributes),
        )

    # ------------------------------------------------------------------
    # Inheritance
    # ------------------------------------------------------------------

    def _inherit(self, base: ClassInfo) -> None:
        if not self.description:
            self.description = base.description
        if self.color is None:
            self.color = base.color
        if self.size is None:
            self.size = base.size

        for inherited in base.attributes:
            own = self.attribute(inherited.name)
            if own is None:
                self.attributes.append(inherited)
            elif isinstance(own, FlagsAttribute) and isinstance(inherited, FlagsAttribute):
                self.add_attribute(_merge_flags(own, inherited))

        if self.model is None:
            self.model = base.model
        elif base.model is not None:
            self.model = self.model.append(base.model)


# ################
# Implementation
# ################


def _merge_flags(own: FlagsAttribute, inherited: FlagsAttribute) -> FlagsAttribute:
    """Add inherited flag bits that the own attribute does not declare."""
    options = {option.value: option for option in own.options}
    for option in inherited.options:
        options.setdefault(option.value, option)
    return FlagsAttribute(name=own.name, options=[options[value] for value in sorted(options)])
