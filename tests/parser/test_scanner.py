# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the definition file scanner."""

import pytest

from entdef.errors import LexerError, ParseError
from entdef.parser.scanner import Scanner, Token, TokenType, describe_token_types, expect, token_name, tokenize

# ###############
# Test Helpers
# ###############


def _tokens_no_eof(source: str) -> list[Token]:
    """Return all tokens except the terminal EOF token."""
    result = tokenize(source)
    assert result[-1].type == TokenType.EOF
    return result[:-1]


def _types(source: str) -> list[TokenType]:
    return [tok.type for tok in _tokens_no_eof(source)]


def _values(source: str) -> list[str]:
    return [tok.value for tok in _tokens_no_eof(source)]


# ###############
# EOF Handling
# ###############


class TestEof:
    def test_empty_string_produces_eof(self) -> None:
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].line == 1
        assert tokens[0].column == 1

    def test_eof_is_repeatable(self) -> None:
        scanner = Scanner("word")
        assert scanner.next_token().type == TokenType.WORD
        assert scanner.next_token().type == TokenType.EOF
        assert scanner.next_token().type == TokenType.EOF

    def test_spaces_and_tabs_are_skipped(self) -> None:
        assert _types(" \t  \t") == []


# ###############
# Block Markers and Comments
# ###############


class TestBlocks:
    def test_block_open_absorbs_glued_tag(self) -> None:
        tokens = _tokens_no_eof("/*QUAKED info_null")
        assert tokens[0].type == TokenType.BLOCK_OPEN
        assert tokens[0].value == "/*QUAKED"
        assert tokens[1].type == TokenType.WORD
        assert tokens[1].value == "info_null"

    def test_bare_block_open(self) -> None:
        assert _values("/* x") == ["/*", "x"]

    def test_block_close(self) -> None:
        assert _types("*/") == [TokenType.BLOCK_CLOSE]

    def test_line_comment_is_skipped_up_to_newline(self) -> None:
        assert _types("a // comment ( ) {\nb") == [TokenType.WORD, TokenType.NEWLINE, TokenType.WORD]

    def test_line_comment_at_end_of_input(self) -> None:
        assert _types("// only a comment") == []


# ###############
# Newlines
# ###############


class TestNewlines:
    @pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
    def test_each_line_break_is_one_token(self, newline: str) -> None:
        assert _types(f"a{newline}b") == [TokenType.WORD, TokenType.NEWLINE, TokenType.WORD]

    def test_line_and_column_tracking(self) -> None:
        tokens = _tokens_no_eof("a\n  b")
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[2].line, tokens[2].column) == (2, 3)

    @pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
    def test_every_line_break_style_advances_the_line(self, newline: str) -> None:
        tokens = _tokens_no_eof(f"a{newline}b{newline}  c")
        assert [(t.line, t.column) for t in tokens if t.type == TokenType.WORD] == [(1, 1), (2, 1), (3, 3)]

    def test_token_offset(self) -> None:
        tokens = _tokens_no_eof("ab cd")
        assert tokens[1].offset == 3


# ###############
# Punctuation
# ###############


class TestPunctuation:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("(", TokenType.LPAREN),
            (")", TokenType.RPAREN),
            ("{", TokenType.LBRACE),
            ("}", TokenType.RBRACE),
            ("=", TokenType.EQUALS),
            (";", TokenType.SEMICOLON),
            (",", TokenType.COMMA),
        ],
    )
    def test_single_character_tokens(self, source: str, expected: TokenType) -> None:
        assert _types(source) == [expected]

    def test_minus_followed_by_whitespace(self) -> None:
        assert _types("- x") == [TokenType.MINUS, TokenType.WORD]

    def test_minus_followed_by_newline(self) -> None:
        assert _types("-\n") == [TokenType.MINUS, TokenType.NEWLINE]

    def test_punctuation_splits_words(self) -> None:
        assert _values("base(x);") == ["base", "(", "x", ")", ";"]


# ###############
# Numbers
# ###############


class TestNumbers:
    @pytest.mark.parametrize("source", ["0", "16", "-16", "+3"])
    def test_integers(self, source: str) -> None:
        tokens = _tokens_no_eof(source)
        assert tokens[0].type == TokenType.INTEGER
        assert tokens[0].value == source

    @pytest.mark.parametrize("source", [".3", "0.5", "-1.25", "1.", "2e3"])
    def test_decimals(self, source: str) -> None:
        tokens = _tokens_no_eof(source)
        assert tokens[0].type == TokenType.DECIMAL
        assert tokens[0].value == source

    def test_number_followed_by_paren(self) -> None:
        assert _types("(1 .5 2)") == [
            TokenType.LPAREN,
            TokenType.INTEGER,
            TokenType.DECIMAL,
            TokenType.INTEGER,
            TokenType.RPAREN,
        ]

    def test_digits_followed_by_letters_form_a_word(self) -> None:
        tokens = _tokens_no_eof("1st")
        assert tokens[0].type == TokenType.WORD
        assert tokens[0].value == "1st"


# ###############
# Words and Strings
# ###############


class TestWords:
    def test_question_mark_is_a_word(self) -> None:
        tokens = _tokens_no_eof("?")
        assert tokens[0].type == TokenType.WORD
        assert tokens[0].value == "?"

    def test_word_with_punctuation(self) -> None:
        assert _values("progs/ammo.mdl NOT_IN_DM") == ["progs/ammo.mdl", "NOT_IN_DM"]


class TestStrings:
    def test_string_value_excludes_quotes(self) -> None:
        tokens = _tokens_no_eof('"hello world"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "hello world"

    def test_escaped_quote_and_backslash(self) -> None:
        tokens = _tokens_no_eof(r'"a\"b\\c"')
        assert tokens[0].value == 'a"b\\c'

    def test_other_backslashes_are_kept(self) -> None:
        tokens = _tokens_no_eof(r'"maps\b_bh25.bsp"')
        assert tokens[0].value == r"maps\b_bh25.bsp"

    def test_string_may_span_lines(self) -> None:
        tokens = _tokens_no_eof('"a\nb" c')
        assert tokens[0].value == "a\nb"
        assert tokens[1].line == 2

    def test_unterminated_string_raises(self) -> None:
        with pytest.raises(LexerError) as exc_info:
            tokenize('x "abc')
        assert exc_info.value.line == 1
        assert exc_info.value.column == 3


# ###############
# Lexical Errors
# ###############


class TestLexerErrors:
    def test_unexpected_character(self) -> None:
        with pytest.raises(LexerError) as exc_info:
            tokenize("abc\n  @")
        error = exc_info.value
        assert error.character == "@"
        assert error.line == 2
        assert error.column == 3
        assert str(error).startswith("Line 2, column 3:")

    @pytest.mark.parametrize("character", ["@", "[", "]", "`"])
    def test_rejected_characters(self, character: str) -> None:
        with pytest.raises(LexerError) as exc_info:
            tokenize(character)
        assert exc_info.value.character == character


# ###############
# Lookahead and Backtracking
# ###############


class TestLookahead:
    def test_peek_does_not_consume(self) -> None:
        scanner = Scanner("a b")
        assert scanner.peek_token().value == "a"
        assert scanner.next_token().value == "a"
        assert scanner.next_token().value == "b"

    def test_ignoring_newlines(self) -> None:
        scanner = Scanner("\n\r\n a")
        assert scanner.peek_token_ignoring_newlines().value == "a"
        assert scanner.peek_token().type == TokenType.NEWLINE
        assert scanner.next_token_ignoring_newlines().value == "a"

    def test_snapshot_and_restore(self) -> None:
        scanner = Scanner("a\nb c")
        scanner.next_token()
        snapshot = scanner.snapshot()
        first = [scanner.next_token() for _ in range(3)]
        scanner.restore(snapshot)
        second = [scanner.next_token() for _ in range(3)]
        assert first == second

    def test_rescanning_yields_identical_tokens(self) -> None:
        source = '/*QUAKED light (0 1 0) (-8 -8 -8) (8 8 8) START_OFF\n{ choice "x" ((0, "a")); }\n*/'
        assert tokenize(source) == tokenize(source)

    def test_read_until_returns_raw_text(self) -> None:
        scanner = Scanner("some @ [raw] text */ rest")
        assert scanner.read_until("*/") == "some @ [raw] text "
        assert scanner.next_token().type == TokenType.BLOCK_CLOSE

    def test_read_until_missing_marker_consumes_everything(self) -> None:
        scanner = Scanner("abc\ndef")
        assert scanner.read_until("*/") == "abc\ndef"
        assert scanner.next_token().type == TokenType.EOF
        assert scanner.line == 2

    def test_progress(self) -> None:
        scanner = Scanner("abcd")
        assert scanner.progress() == 0.0
        scanner.next_token()
        assert scanner.progress() == 1.0

    def test_progress_of_empty_input_is_complete(self) -> None:
        assert Scanner("").progress() == 1.0


# ###############
# Token Classifier
# ###############


class TestTokenNames:
    def test_every_token_type_has_a_name(self) -> None:
        for token_type in TokenType:
            assert token_name(token_type)

    def test_describe_joins_with_or(self) -> None:
        assert describe_token_types((TokenType.INTEGER, TokenType.DECIMAL)) == "integer or decimal"

    def test_expect_returns_matching_token(self) -> None:
        token = Token(TokenType.WORD, "x", 0, 1, 1)
        assert expect(token, TokenType.STRING, TokenType.WORD) is token

    def test_expect_raises_with_details(self) -> None:
        token = Token(TokenType.WORD, "foo", 4, 2, 5)
        with pytest.raises(ParseError) as exc_info:
            expect(token, TokenType.LPAREN)
        error = exc_info.value
        assert error.expected == "'('"
        assert error.actual == "foo"
        assert (error.line, error.column) == (2, 5)
        assert "Expected '(', got 'foo'" in str(error)

    def test_expect_names_newline(self) -> None:
        token = Token(TokenType.NEWLINE, "\n", 0, 1, 1)
        with pytest.raises(ParseError, match="got newline"):
            expect(token, TokenType.WORD)
