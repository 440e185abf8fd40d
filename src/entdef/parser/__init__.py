# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Scanner and parser for entity definition (.def) files."""

from entdef.errors import LexerError, ParseError
from entdef.parser.class_info import ClassInfo
from entdef.parser.model_parser import ModelDefinitionParser
from entdef.parser.parser import DEFAULT_ENTITY_COLOR, DefParser, parse_definitions
from entdef.parser.scanner import Scanner, Token, TokenType, token_name, tokenize
from entdef.parser.status import CollectingParserStatus, ParserStatus, ParserWarning

__all__ = [
    "DEFAULT_ENTITY_COLOR",
    "ClassInfo",
    "CollectingParserStatus",
    "DefParser",
    "LexerError",
    "ModelDefinitionParser",
    "ParseError",
    "ParserStatus",
    "ParserWarning",
    "Scanner",
    "Token",
    "TokenType",
    "parse_definitions",
    "token_name",
    "tokenize",
]
