# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Consistency checks for parsed entity definitions (duplicate names, flags, etc.)."""

from entdef.validation.checks import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate,
)

__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "validate",
]
