# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for entity definition (.def) files.

A definition file is a sequence of comment-style blocks, each declaring one
entity class::

    /*QUAKED item_health (.3 .3 1) (-16 -16 0) (16 16 32) ROTTEN MEGA
    {
      base("item_base");
      choice "style" ((0, "normal") (1, "gold"));
      model({ "path": "maps/b_bh25.bsp" });
    }
    Health box. Normally gives 25 points.
    */

A block with a color and a size box is a point class, a block with a color
only is a brush class, and a block without a color is a base class that is
only inherited from.
"""

import logging

from entdef.errors import ParseError
from entdef.model.attributes import SPAWNFLAGS, ChoiceAttribute, ChoiceOption, FlagOption, FlagsAttribute
from entdef.model.entities import EntityDefinition, ModelDefinition
from entdef.model.types import BoundingBox, Color, Vec3
from entdef.parser.class_info import ClassInfo
from entdef.parser.model_parser import ModelDefinitionParser
from entdef.parser.scanner import Scanner, Token, TokenType, expect
from entdef.parser.status import ParserStatus

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

# Fallback color for brush classes that end up without one.
DEFAULT_ENTITY_COLOR = Color(r=0.6, g=0.6, b=0.6, a=1.0)


def parse_definitions(
    source: str,
    default_color: Color = DEFAULT_ENTITY_COLOR,
    status: ParserStatus | None = None,
) -> list[EntityDefinition]:
    """Parse definition file text into entity class descriptors.

    Args:
        source: The full text of a .def file.
        default_color: Color for brush classes that declare none.
        status: Receives progress and warnings; a logging status is used if omitted.

    Returns:
        Point and brush descriptors in declaration order. Base classes are
        not included.

    Raises:
        LexerError: If the source contains a character no token accepts.
        ParseError: If a declaration is syntactically invalid.
    """
    return DefParser(source, default_color).parse_definitions(status or ParserStatus())


class DefParser:
    """Parses one definition file.

    Each instance owns its scanner and its registry of base classes, so
    separate parsers never see each other's base classes.
    """

    def __init__(self, source: str, default_color: Color = DEFAULT_ENTITY_COLOR) -> None:
        self._scanner = Scanner(source)
        self._default_color = default_color
        self._base_classes: dict[str, ClassInfo] = {}

    @property
    def base_classes(self) -> dict[str, ClassInfo]:
        """Base classes registered so far, by name."""
        return dict(self._base_classes)

    def parse_definitions(self, status: ParserStatus) -> list[EntityDefinition]:
        """Parse every block and return the resulting descriptors.

        Raises:
            LexerError: If the source contains a character no token accepts.
            ParseError: If a declaration is syntactically invalid.
        """
        definitions: list[EntityDefinition] = []
        while True:
            opening = self._skip_to_block()
            if opening is None:
                break
            definition = self._parse_definition(opening, status)
            if definition is not None:
                definitions.append(definition)
            status.progress(self._scanner.progress())
        status.progress(1.0)
        logger.info("Parsed %d entity definition(s)", len(definitions))
        return definitions

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _skip_to_block(self) -> Token | None:
        """Discard tokens up to the next block opening; None at end of input."""
        token = self._scanner.next_token()
        while token.type not in (TokenType.BLOCK_OPEN, TokenType.EOF):
            token = self._scanner.next_token()
        if token.type == TokenType.EOF:
            return None
        return token

    def _parse_definition(self, opening: Token, status: ParserStatus) -> EntityDefinition | None:
        """Parse one block; returns None for a base class.

        Base classes are resolved against the registry too, not only point and
        brush classes. A base may therefore inherit from an earlier base, and
        the chain is flattened when the base is registered.
        """
        name = expect(self._parse_class_name_token(), TokenType.WORD)
        info = ClassInfo(name=name.value, line=opening.line, column=opening.column)

        self._parse_header(info)
        expect(self._scanner.next_token(), TokenType.NEWLINE)
        self._parse_attributes(info, status)
        info.description = self._scanner.read_until("*/").strip()
        expect(self._scanner.next_token(), TokenType.BLOCK_CLOSE)

        info.resolve_base_classes(self._base_classes, status)
        if info.is_base:
            self._base_classes[info.name] = info
            logger.debug("Registered base class '%s'", info.name)
            return None

        definition = info.to_definition(self._default_color)
        logger.debug("Parsed %s class '%s'", definition.kind, definition.name)
        return definition

    def _parse_class_name_token(self) -> Token:
        """Return the token after the block marker.

        The marker may end its line, so a single line break before the name is
        skipped. A blank line is not.
        """
        token = self._scanner.next_token()
        if token.type == TokenType.NEWLINE:
            token = self._scanner.next_token()
        return token

    def _parse_header(self, info: ClassInfo) -> None:
        """Parse: [ '(' color ')' [ bounds | '?' ] [ spawnflags ] ]"""
        token = expect(self._scanner.peek_token(), TokenType.LPAREN, TokenType.NEWLINE)
        if token.type != TokenType.LPAREN:
            return
        info.color = self._parse_color()

        token = self._scanner.peek_token()
        if token.type == TokenType.LPAREN:
            info.size = self._parse_bounds()
        elif token.type == TokenType.WORD and token.value == "?":
            self._scanner.next_token()

        if self._scanner.peek_token().type in (TokenType.WORD, TokenType.MINUS):
            info.add_attribute(self._parse_spawnflags())

    def _parse_spawnflags(self) -> FlagsAttribute:
        """Parse: ( WORD | '-' )+ ; the k-th entry gets the bit value 1 << k."""
        options: list[FlagOption] = []
        while self._scanner.peek_token().type in (TokenType.WORD, TokenType.MINUS):
            token = self._scanner.next_token()
            name = token.value if token.type == TokenType.WORD else ""
            options.append(FlagOption(value=1 << len(options), name=name))
        return FlagsAttribute(name=SPAWNFLAGS, options=options)

    # ------------------------------------------------------------------
    # Attribute block
    # ------------------------------------------------------------------

    def _parse_attributes(self, info: ClassInfo, status: ParserStatus) -> None:
        """Parse: [ '{' attribute* '}' ]

        The block is recognized from raw text, since a description that follows
        in its place need not consist of valid tokens.
        """
        self._scanner.skip_whitespace()
        if not self._scanner.at("{"):
            return
        self._scanner.next_token()
        while True:
            token = expect(self._scanner.next_token_ignoring_newlines(), TokenType.WORD, TokenType.RBRACE)
            if token.type == TokenType.RBRACE:
                return
            self._parse_attribute(token, info, status)
            expect(self._scanner.next_token_ignoring_newlines(), TokenType.SEMICOLON)

    def _parse_attribute(self, keyword: Token, info: ClassInfo, status: ParserStatus) -> None:
        """Dispatch on the attribute keyword."""
        if keyword.value == "default":
            self._parse_default()
        elif keyword.value == "base":
            info.base_classes.append(self._parse_base())
        elif keyword.value == "choice":
            info.add_attribute(self._parse_choice())
        elif keyword.value == "model":
            info.model = self._parse_model(status)
        else:
            raise ParseError(
                f"Unknown attribute type {keyword.value!r}",
                keyword.line,
                keyword.column,
                expected="'default', 'base', 'choice' or 'model'",
                actual=keyword.value,
            )

    def _parse_default(self) -> None:
        """Parse: '(' STRING ',' STRING ')' -- checked, then discarded."""
        expect(self._scanner.next_token_ignoring_newlines(), TokenType.LPAREN)
        expect(self._scanner.next_token_ignoring_newlines(), TokenType.STRING)
        expect(self._scanner.next_token_ignoring_newlines(), TokenType.COMMA)
        expect(self._scanner.next_token_ignoring_newlines(), TokenType.STRING)
        expect(self._scanner.next_token_ignoring_newlines(), TokenType.RPAREN)

    def _parse_base(self) -> str:
        """Parse: '(' STRING ')'"""
        expect(self._scanner.next_token_ignoring_newlines(), TokenType.LPAREN)
        name = expect(self._scanner.next_token_ignoring_newlines(), TokenType.STRING)
        expect(self._scanner.next_token_ignoring_newlines(), TokenType.RPAREN)
        return name.value

    def _parse_choice(self) -> ChoiceAttribute:
        """Parse: STRING '(' ( '(' INTEGER ',' STRING ')' )* ')'"""
        name = expect(self._scanner.next_token(), TokenType.STRING)
        expect(self._scanner.next_token_ignoring_newlines(), TokenType.LPAREN)
        options: list[ChoiceOption] = []
        token = self._scanner.next_token_ignoring_newlines()
        while token.type == TokenType.LPAREN:
            key = expect(self._scanner.next_token_ignoring_newlines(), TokenType.INTEGER)
            expect(self._scanner.next_token_ignoring_newlines(), TokenType.COMMA)
            value = expect(self._scanner.next_token_ignoring_newlines(), TokenType.STRING)
            expect(self._scanner.next_token_ignoring_newlines(), TokenType.RPAREN)
            options.append(ChoiceOption(key=key.value, description=value.value))
            token = self._scanner.next_token_ignoring_newlines()
        expect(token, TokenType.RPAREN)
        return ChoiceAttribute(name=name.value, options=options)

    def _parse_model(self, status: ParserStatus) -> ModelDefinition:
        """Parse: '(' <model clause body>"""
        expect(self._scanner.next_token(), TokenType.LPAREN)
        return ModelDefinitionParser(self._scanner, status).parse()

    # ------------------------------------------------------------------
    # Colors and boxes
    # ------------------------------------------------------------------

    def _parse_color(self) -> Color:
        """Parse: '(' number number number ')'"""
        expect(self._scanner.next_token(), TokenType.LPAREN)
        channels = [self._parse_number() for _ in range(3)]
        expect(self._scanner.next_token(), TokenType.RPAREN)
        return Color.from_channels(channels)

    def _parse_bounds(self) -> BoundingBox:
        """Parse: '(' vector ')' '(' vector ')' -- corners may come in any order."""
        expect(self._scanner.next_token(), TokenType.LPAREN)
        first = self._parse_vector()
        expect(self._scanner.next_token(), TokenType.RPAREN)
        expect(self._scanner.next_token(), TokenType.LPAREN)
        second = self._parse_vector()
        expect(self._scanner.next_token(), TokenType.RPAREN)
        return BoundingBox.from_corners(first, second)

    def _parse_vector(self) -> Vec3:
        x, y, z = (self._parse_number() for _ in range(3))
        return Vec3(x=x, y=y, z=z)

    def _parse_number(self) -> float:
        token = expect(self._scanner.next_token(), TokenType.INTEGER, TokenType.DECIMAL)
        return float(token.value)

