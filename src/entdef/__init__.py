# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parser for entity definition (.def) files used by 3D level editors."""

from entdef.errors import DefinitionError, EvaluationError, LexerError, ParseError
from entdef.parser.parser import DEFAULT_ENTITY_COLOR, DefParser, parse_definitions

__all__ = [
    "DEFAULT_ENTITY_COLOR",
    "DefParser",
    "DefinitionError",
    "EvaluationError",
    "LexerError",
    "ParseError",
    "parse_definitions",
]
