# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for model expressions.

The expression scanner reads the same source text as the definition scanner,
starting from a :class:`~entdef.source.Snapshot` of its cursor. Whitespace,
including line breaks, is insignificant here.
"""

import enum
import re
from dataclasses import dataclass

from entdef.errors import LexerError
from entdef.source import SourceCursor

# ###############
# Public Interface
# ###############


class ExpressionTokenType(enum.Enum):
    """All token types produced by the expression scanner."""

    # Keywords
    TRUE = "true"
    FALSE = "false"
    NULL = "null"

    # Symbols and operators
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"
    COMMA = ","
    COLON = ":"
    ARROW = "->"
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_EQUAL = "<="
    GREATER_EQUAL = ">="
    LESS = "<"
    GREATER = ">"
    AND = "&&"
    OR = "||"
    NOT = "!"
    AMPERSAND = "&"
    PIPE = "|"
    CARET = "^"
    TILDE = "~"
    SHIFT_LEFT = "<<"
    SHIFT_RIGHT = ">>"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"

    # Literals
    NUMBER = "NUMBER"
    STRING = "STRING"

    # Identifiers
    NAME = "NAME"

    EOF = "EOF"


@dataclass(frozen=True)
class ExpressionToken:
    """A lexical token of a model expression.

    Attributes:
        type: The kind of token.
        value: The raw text of the token (decoded content for STRING tokens).
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
    """

    type: ExpressionTokenType
    value: str
    line: int
    column: int


class ExpressionScanner(SourceCursor):
    """Pull-based scanner over a model expression."""

    def next_token(self) -> ExpressionToken:
        """Return the next token and advance past it.

        Raises:
            LexerError: On unexpected characters or unterminated strings.
        """
        while self._current() in _WHITESPACE and not self._eof():
            self._advance()
        line = self._line
        col = self._column
        if self._eof():
            return ExpressionToken(ExpressionTokenType.EOF, "", line, col)

        ch = self._current()
        two = ch + self._peek()
        if two in _TWO_CHAR_TOKENS:
            self._advance()
            self._advance()
            return ExpressionToken(_TWO_CHAR_TOKENS[two], two, line, col)
        if ch in _SINGLE_CHAR_TOKENS:
            self._advance()
            return ExpressionToken(_SINGLE_CHAR_TOKENS[ch], ch, line, col)
        if ch == '"':
            return self._scan_string(line, col)

        match = _NUMBER_RE.match(self._source, self._pos)
        if match is not None:
            self._advance_to(match.end())
            return ExpressionToken(ExpressionTokenType.NUMBER, match.group(), line, col)
        match = _NAME_RE.match(self._source, self._pos)
        if match is not None:
            self._advance_to(match.end())
            value = match.group()
            return ExpressionToken(_KEYWORDS.get(value, ExpressionTokenType.NAME), value, line, col)

        raise LexerError(f"Unexpected character: {ch!r}", line, col, ch)

    def peek_token(self) -> ExpressionToken:
        """Return the next token without consuming it."""
        snapshot = self.snapshot()
        try:
            return self.next_token()
        finally:
            self.restore(snapshot)

    def _scan_string(self, line: int, col: int) -> ExpressionToken:
        """Scan a double-quoted string literal with escape sequences."""
        self._advance()  # opening "
        chars: list[str] = []
        while not self._eof():
            ch = self._current()
            if ch == '"':
                self._advance()  # closing "
                return ExpressionToken(ExpressionTokenType.STRING, "".join(chars), line, col)
            if ch == "\\":
                self._advance()
                if self._eof():
                    break
                esc = self._current()
                chars.append(_ESCAPES.get(esc, esc))
                self._advance()
            else:
                chars.append(ch)
                self._advance()
        raise LexerError("Unterminated string literal", line, col, '"')


# ################
# Implementation
# ################

_WHITESPACE = " \t\r\n"

_NUMBER_RE = re.compile(r"(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_ESCAPES: dict[str, str] = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}

_KEYWORDS: dict[str, ExpressionTokenType] = {
    "true": ExpressionTokenType.TRUE,
    "false": ExpressionTokenType.FALSE,
    "null": ExpressionTokenType.NULL,
}

_TWO_CHAR_TOKENS: dict[str, ExpressionTokenType] = {
    "->": ExpressionTokenType.ARROW,
    "==": ExpressionTokenType.EQUAL,
    "!=": ExpressionTokenType.NOT_EQUAL,
    "<=": ExpressionTokenType.LESS_EQUAL,
    ">=": ExpressionTokenType.GREATER_EQUAL,
    "&&": ExpressionTokenType.AND,
    "||": ExpressionTokenType.OR,
    "<<": ExpressionTokenType.SHIFT_LEFT,
    ">>": ExpressionTokenType.SHIFT_RIGHT,
}

_SINGLE_CHAR_TOKENS: dict[str, ExpressionTokenType] = {
    "(": ExpressionTokenType.LPAREN,
    ")": ExpressionTokenType.RPAREN,
    "[": ExpressionTokenType.LBRACKET,
    "]": ExpressionTokenType.RBRACKET,
    "{": ExpressionTokenType.LBRACE,
    "}": ExpressionTokenType.RBRACE,
    ",": ExpressionTokenType.COMMA,
    ":": ExpressionTokenType.COLON,
    "<": ExpressionTokenType.LESS,
    ">": ExpressionTokenType.GREATER,
    "!": ExpressionTokenType.NOT,
    "+": ExpressionTokenType.PLUS,
    "-": ExpressionTokenType.MINUS,
    "*": ExpressionTokenType.STAR,
    "/": ExpressionTokenType.SLASH,
    "%": ExpressionTokenType.PERCENT,
    "&": ExpressionTokenType.AMPERSAND,
    "|": ExpressionTokenType.PIPE,
    "^": ExpressionTokenType.CARET,
    "~": ExpressionTokenType.TILDE,
}
