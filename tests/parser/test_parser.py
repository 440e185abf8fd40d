# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the definition file grammar driver."""

import pytest

from entdef.errors import LexerError, ParseError
from entdef.model.attributes import ChoiceAttribute, FlagsAttribute
from entdef.model.entities import BrushEntityDefinition, EntityDefinition, PointEntityDefinition
from entdef.model.types import Color
from entdef.parser.parser import DEFAULT_ENTITY_COLOR, DefParser, parse_definitions
from entdef.parser.status import CollectingParserStatus, ParserStatus

# ###############
# Test Helpers
# ###############


def _parse(source: str) -> list[EntityDefinition]:
    """Parse a source string with a collecting status."""
    return parse_definitions(source, status=CollectingParserStatus())


def _parse_one(source: str) -> EntityDefinition:
    definitions = _parse(source)
    assert len(definitions) == 1
    return definitions[0]


def _block(header: str, body: str = "", description: str = "") -> str:
    """Build one class block from its header line, attribute body and description."""
    attributes = f"{{\n{body}\n}}\n" if body else ""
    return f"/*QUAKED {header}\n{attributes}{description}\n*/\n"


class _RecordingStatus(CollectingParserStatus):
    def __init__(self) -> None:
        super().__init__()
        self.reports: list[float] = []

    def on_progress(self, fraction: float) -> None:
        self.reports.append(fraction)


# ###############
# Empty Input
# ###############


class TestEmptyInput:
    def test_empty_string_returns_no_definitions(self) -> None:
        assert _parse("") == []

    def test_text_outside_blocks_is_ignored(self) -> None:
        assert _parse("// Quake entities\nversion 1 (draft)\n") == []


# ###############
# Scenarios
# ###############


class TestScenarios:
    def test_brush_class(self) -> None:
        definition = _parse_one("/*Q\nworldspawn (0 0 0) ?\n{\n}\nhub level\n*/")
        assert isinstance(definition, BrushEntityDefinition)
        assert definition.name == "worldspawn"
        assert definition.color == Color(r=0, g=0, b=0, a=1)
        assert definition.description == "hub level"

    def test_point_class_with_spawnflags(self) -> None:
        source = "/*Q\nitem_health (0 1 0) (-16 -16 0) (16 16 32) NOTINDEATHMATCH DROP\n{\n}\nhealth pack\n*/"
        definition = _parse_one(source)
        assert isinstance(definition, PointEntityDefinition)
        assert definition.size.min.as_tuple() == (-16, -16, 0)
        assert definition.size.max.as_tuple() == (16, 16, 32)
        assert definition.description == "health pack"
        flags = definition.attribute("spawnflags")
        assert isinstance(flags, FlagsAttribute)
        assert [(o.value, o.name) for o in flags.options] == [(1, "NOTINDEATHMATCH"), (2, "DROP")]

    def test_model_is_inherited_from_base_class(self) -> None:
        source = _block("base_item", 'model({ "path": "progs/base.mdl" });') + _block(
            "item_weapon (0 0 1) (-16 -16 0) (16 16 32)", 'base("base_item");', "a weapon"
        )
        definition = _parse_one(source)
        assert isinstance(definition, PointEntityDefinition)
        assert definition.name == "item_weapon"
        assert definition.model is not None
        assert definition.model.model_specification().path == "progs/base.mdl"

    def test_legacy_model_succeeds_with_warning(self) -> None:
        status = CollectingParserStatus()
        source = _block("item_shells (0 .5 .8) (0 0 0) (32 32 32)", 'model("progs/ammo.mdl" 0 1);')
        definitions = parse_definitions(source, status=status)
        assert len(definitions) == 1
        assert len(status.warnings) == 1
        assert "replace with '" in status.warnings[0].message
        assert "progs/ammo.mdl" in status.warnings[0].message

    def test_model_failing_both_grammars_raises_the_expression_error(self) -> None:
        source = _block("item_shells (0 .5 .8) (0 0 0) (32 32 32)", 'model("progs/ammo.mdl" 1 2 3);')
        with pytest.raises(ParseError) as exc_info:
            _parse(source)
        assert exc_info.value.actual == "1"

    def test_unrecognized_character(self) -> None:
        with pytest.raises(LexerError) as exc_info:
            _parse("/*Q\nfoo (0 0 0) @\n*/")
        error = exc_info.value
        assert error.character == "@"
        assert (error.line, error.column) == (2, 13)

    def test_unrecognized_character_position_with_carriage_returns(self) -> None:
        with pytest.raises(LexerError) as exc_info:
            _parse("/*Q\rfoo (0 0 0) ?\r\r*/\r/*Q\rbar @\r*/")
        assert (exc_info.value.line, exc_info.value.column) == (6, 5)


# ###############
# Headers
# ###############


class TestHeader:
    def test_color_only_is_a_brush_class(self) -> None:
        definition = _parse_one(_block("func_wall (0 .5 .8)"))
        assert isinstance(definition, BrushEntityDefinition)

    def test_brush_class_with_spawnflags_after_question_mark(self) -> None:
        definition = _parse_one(_block("func_door (0 .5 .8) ? START_OPEN - DOOR_DONT_LINK"))
        flags = definition.attribute("spawnflags")
        assert isinstance(flags, FlagsAttribute)
        assert [(o.value, o.name) for o in flags.options] == [(1, "START_OPEN"), (2, ""), (4, "DOOR_DONT_LINK")]

    def test_spawnflags_directly_after_color(self) -> None:
        definition = _parse_one(_block("trigger_once (.5 .5 .5) NOTOUCH"))
        flags = definition.attribute("spawnflags")
        assert isinstance(flags, FlagsAttribute)
        assert flags.options[0].name == "NOTOUCH"

    @pytest.mark.parametrize("count", [1, 5, 12])
    def test_flag_values_are_powers_of_two(self, count: int) -> None:
        names = " ".join(f"F{i}" for i in range(count))
        flags = _parse_one(_block(f"x (1 1 1) ? {names}")).attribute("spawnflags")
        assert isinstance(flags, FlagsAttribute)
        assert [o.value for o in flags.options] == [1 << i for i in range(count)]

    def test_name_on_same_line_as_marker(self) -> None:
        assert _parse_one("/*QUAKED light (1 1 0) (-8 -8 -8) (8 8 8)\n*/").name == "light"

    def test_name_on_line_after_marker(self) -> None:
        assert _parse_one("/*Q\nfoo (1 0 0) ?\n*/").name == "foo"

    def test_blank_line_before_name_is_rejected(self) -> None:
        with pytest.raises(ParseError, match="Expected word, got newline") as exc_info:
            _parse("/*Q\n\nfoo (1 0 0) ?\n*/")
        assert (exc_info.value.line, exc_info.value.column) == (2, 1)

    def test_missing_newline_after_header(self) -> None:
        with pytest.raises(ParseError):
            _parse("/*Q light (1 1 0) (-8 -8 -8) (8 8 8) { } */")

    def test_missing_name(self) -> None:
        with pytest.raises(ParseError, match="Expected word"):
            _parse('/*Q "light"\n*/')

    def test_truncated_color(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            _parse(_block("light (1 1)"))
        assert exc_info.value.expected == "integer or decimal"


# ###############
# Colors and Bounds
# ###############


class TestColorsAndBounds:
    def test_byte_channels_are_scaled(self) -> None:
        definition = _parse_one(_block("x (255 0.5 51)"))
        assert definition.color.r == pytest.approx(1.0)
        assert definition.color.g == 0.5
        assert definition.color.b == pytest.approx(0.2)
        assert definition.color.a == 1.0

    def test_channel_of_exactly_one_is_unchanged(self) -> None:
        assert _parse_one(_block("x (1 1 1)")).color == Color(r=1, g=1, b=1, a=1)

    def test_swapped_corners_are_repaired(self) -> None:
        definition = _parse_one(_block("x (1 1 1) (16 -16 32) (-16 16 0)"))
        assert isinstance(definition, PointEntityDefinition)
        assert definition.size.min.as_tuple() == (-16, -16, 0)
        assert definition.size.max.as_tuple() == (16, 16, 32)

    def test_decimal_bounds(self) -> None:
        definition = _parse_one(_block("x (1 1 1) (-.5 -.5 0) (.5 .5 1.5)"))
        assert isinstance(definition, PointEntityDefinition)
        assert definition.size.max.as_tuple() == (0.5, 0.5, 1.5)


# ###############
# Attributes
# ###############


class TestAttributes:
    def test_choice_attribute(self) -> None:
        body = 'choice "style"\n (\n  (0, "normal")\n  (1, "gold")\n );'
        choice = _parse_one(_block("x (1 1 1)", body)).attribute("style")
        assert isinstance(choice, ChoiceAttribute)
        assert [(o.key, o.description) for o in choice.options] == [("0", "normal"), ("1", "gold")]

    def test_default_is_parsed_and_discarded(self) -> None:
        definition = _parse_one(_block("x (1 1 1)", 'default("angle", "90");'))
        assert definition.attributes == []

    def test_malformed_default_is_rejected(self) -> None:
        with pytest.raises(ParseError):
            _parse(_block("x (1 1 1)", 'default("angle");'))

    def test_unknown_attribute_keyword(self) -> None:
        with pytest.raises(ParseError, match="Unknown attribute type 'color'"):
            _parse(_block("x (1 1 1)", 'color("red");'))

    def test_missing_semicolon(self) -> None:
        with pytest.raises(ParseError, match="Expected ';'"):
            _parse(_block("x (1 1 1)", 'base("a")\nbase("b");'))

    def test_redeclared_attribute_replaces_earlier_one(self) -> None:
        body = 'choice "style" ((0, "a"));\nchoice "style" ((1, "b"));'
        definition = _parse_one(_block("x (1 1 1)", body))
        assert len(definition.attributes) == 1
        choice = definition.attribute("style")
        assert isinstance(choice, ChoiceAttribute)
        assert choice.options[0].description == "b"

    def test_empty_attribute_block_and_description(self) -> None:
        definition = _parse_one("/*Q x (1 1 1)\n{\n}\n*/")
        assert definition.attributes == []
        assert definition.description == ""

    def test_multi_line_description_is_trimmed(self) -> None:
        definition = _parse_one(_block("x (1 1 1)", description="\n  line one\n  line two (with @ and [brackets])  \n"))
        assert definition.description == "line one\n  line two (with @ and [brackets])"

    def test_model_with_out_of_range_constant_parses(self) -> None:
        definition = _parse_one("/*Q\nfoo (1 0 0) (0 0 0) (1 1 1)\n{\nmodel(1e400 % 2);\n}\n*/")
        assert isinstance(definition, PointEntityDefinition)
        assert definition.model is not None

    def test_description_may_start_with_any_character(self) -> None:
        definition = _parse_one("/*Q x (1 1 1)\n@see \"misc\"\n*/")
        assert definition.description == '@see "misc"'


# ###############
# Base Classes
# ###############


class TestBaseClasses:
    def test_base_class_is_not_emitted(self) -> None:
        assert _parse(_block("base_thing", description="only a donor")) == []

    def test_description_color_and_attributes_are_inherited(self) -> None:
        source = _block("base_light", 'choice "style" ((0, "normal"));', "a light") + _block(
            "light (1 1 0) (-8 -8 -8) (8 8 8)", 'base("base_light");'
        )
        definition = _parse_one(source)
        assert definition.description == "a light"
        assert isinstance(definition.attribute("style"), ChoiceAttribute)

    def test_own_values_win_over_inherited_ones(self) -> None:
        source = _block("base_light", 'choice "style" ((0, "inherited"));', "inherited text") + _block(
            "light (1 1 0) (-8 -8 -8) (8 8 8)", 'base("base_light");\nchoice "style" ((0, "own"));', "own text"
        )
        definition = _parse_one(source)
        assert definition.description == "own text"
        choice = definition.attribute("style")
        assert isinstance(choice, ChoiceAttribute)
        assert choice.options[0].description == "own"

    def test_redeclared_base_class_replaces_earlier_one(self) -> None:
        source = (
            _block("base_item", description="first")
            + _block("base_item", description="second")
            + _block("item (1 1 1) (0 0 0) (8 8 8)", 'base("base_item");')
        )
        assert _parse_one(source).description == "second"

    def test_base_classes_are_transitive(self) -> None:
        source = (
            _block("base_a", 'choice "a" ((0, "x"));')
            + _block("base_b", 'base("base_a");\nchoice "b" ((0, "y"));')
            + _block("item (1 1 1) (0 0 0) (8 8 8)", 'base("base_b");')
        )
        definition = _parse_one(source)
        assert [attribute.name for attribute in definition.attributes] == ["b", "a"]

    def test_forward_reference_is_a_warning(self) -> None:
        status = CollectingParserStatus()
        source = _block("item (1 1 1) (0 0 0) (8 8 8)", 'base("later");') + _block("later", description="late")
        definitions = parse_definitions(source, status=status)
        assert definitions[0].description == ""
        assert len(status.warnings) == 1
        assert "Unknown base class 'later'" in status.warnings[0].message

    def test_registry_is_per_parser(self) -> None:
        first = DefParser(_block("base_item", description="donor"))
        first.parse_definitions(CollectingParserStatus())
        assert "base_item" in first.base_classes

        second = DefParser(_block("item (1 1 1) (0 0 0) (8 8 8)", 'base("base_item");'))
        definitions = second.parse_definitions(CollectingParserStatus())
        assert second.base_classes == {}
        assert definitions[0].description == ""


# ###############
# Default Color and Progress
# ###############


class TestDefaultsAndStatus:
    def test_default_color_constant(self) -> None:
        assert DEFAULT_ENTITY_COLOR.as_tuple() == (0.6, 0.6, 0.6, 1.0)

    def test_progress_is_monotonic_and_completes(self) -> None:
        status = _RecordingStatus()
        source = "".join(_block(f"item{i} (1 1 1) (0 0 0) (8 8 8)") for i in range(4))
        DefParser(source).parse_definitions(status)
        assert status.reports == sorted(status.reports)
        assert status.reports[-1] == 1.0
        assert status.current_progress == 1.0

    def test_default_status_logs_warnings(self, caplog: pytest.LogCaptureFixture) -> None:
        source = _block("item (1 1 1) (0 0 0) (8 8 8)", 'base("missing");')
        with caplog.at_level("WARNING", logger="entdef.parser.status"):
            parse_definitions(source, status=ParserStatus("items.def"))
        assert "items.def:" in caplog.text
        assert "Unknown base class 'missing'" in caplog.text

    def test_error_in_later_block_discards_everything(self) -> None:
        source = _block("good (1 1 1)") + _block("bad (1 1 1)", "bogus;")
        with pytest.raises(ParseError):
            _parse(source)
