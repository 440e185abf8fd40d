# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Attribute definitions declared by entity classes."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

# Name of the bitmask attribute built from a class header's flag words.
SPAWNFLAGS = "spawnflags"


class FlagOption(BaseModel):
    """One bit of a flags attribute."""

    model_config = ConfigDict(frozen=True)

    value: int
    name: str
    description: str = ""
    default: bool = False


class FlagsAttribute(BaseModel):
    """A bitmask attribute; each option occupies one bit."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["flags"] = "flags"
    name: str
    options: list[FlagOption] = _Field(default_factory=list)

    def option(self, value: int) -> FlagOption | None:
        """Return the option for a bit value, if declared."""
        for option in self.options:
            if option.value == value:
                return option
        return None


class ChoiceOption(BaseModel):
    """One selectable value of a choice attribute."""

    model_config = ConfigDict(frozen=True)

    key: str
    description: str


class ChoiceAttribute(BaseModel):
    """An attribute restricted to an ordered list of values."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["choice"] = "choice"
    name: str
    options: list[ChoiceOption] = _Field(default_factory=list)


# An attribute definition: flags or choice. The `kind` discriminator keeps
# serialized catalogs unambiguous.
AttributeDefinition = Annotated[FlagsAttribute | ChoiceAttribute, _Field(discriminator="kind")]
