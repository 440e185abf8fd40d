# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Consistency checks for a parsed catalog of entity definitions.

These checks run after parsing and flag definitions that are well-formed but
probably not what the author intended.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from entdef.model.attributes import ChoiceAttribute, FlagsAttribute
from entdef.model.entities import EntityDefinition, PointEntityDefinition

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A questionable but usable definition.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass(frozen=True)
class ValidationError:
    """A definition the editor cannot use as declared.

    Attributes:
        message: Human-readable description of the error.
    """

    message: str


@dataclass
class ValidationResult:
    """Result of running the catalog checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
        errors: Fatal errors that make the catalog unusable.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any fatal validation errors were found."""
        return len(self.errors) > 0


def validate(definitions: list[EntityDefinition]) -> ValidationResult:
    """Run all checks on a list of parsed definitions.

    Checks performed:

    1. **Duplicate class names** (error): two definitions with the same name
       shadow each other in the editor.

    2. **Empty point size** (warning): a point class whose box has zero
       volume cannot be picked in the viewport.

    3. **Duplicate flag names** (warning): two bits of one flags attribute
       share a name, so the editor cannot tell them apart.

    4. **Duplicate choice keys** (error): a choice attribute lists the same
       key twice.

    Args:
        definitions: Descriptors as returned by the parser.

    Returns:
        A :class:`ValidationResult`; empty when the catalog is clean.
    """
    warnings: list[ValidationWarning] = []
    errors: list[ValidationError] = []

    errors.extend(_check_duplicate_names(definitions))
    warnings.extend(_check_empty_sizes(definitions))
    for definition in definitions:
        warnings.extend(_check_flag_names(definition))
        errors.extend(_check_choice_keys(definition))

    return ValidationResult(warnings=warnings, errors=errors)


# ################
# Implementation
# ################


def _check_duplicate_names(definitions: list[EntityDefinition]) -> list[ValidationError]:
    counts = Counter(definition.name for definition in definitions)
    return [
        ValidationError(message=f"Entity class '{name}' is defined {count} times")
        for name, count in counts.items()
        if count > 1
    ]


def _check_empty_sizes(definitions: list[EntityDefinition]) -> list[ValidationWarning]:
    return [
        ValidationWarning(message=f"Point class '{definition.name}' has a bounding box with zero volume")
        for definition in definitions
        if isinstance(definition, PointEntityDefinition) and definition.size.volume() == 0
    ]


def _check_flag_names(definition: EntityDefinition) -> list[ValidationWarning]:
    warnings: list[ValidationWarning] = []
    for attribute in definition.attributes:
        if not isinstance(attribute, FlagsAttribute):
            continue
        counts = Counter(option.name for option in attribute.options if option.name)
        for name, count in counts.items():
            if count > 1:
                warnings.append(
                    ValidationWarning(
                        message=f"Flag '{name}' appears {count} times in '{attribute.name}' of '{definition.name}'"
                    )
                )
    return warnings


def _check_choice_keys(definition: EntityDefinition) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for attribute in definition.attributes:
        if not isinstance(attribute, ChoiceAttribute):
            continue
        counts = Counter(option.key for option in attribute.options)
        for key, count in counts.items():
            if count > 1:
                errors.append(
                    ValidationError(
                        message=f"Choice key {key} appears {count} times in '{attribute.name}' of '{definition.name}'"
                    )
                )
    return errors
