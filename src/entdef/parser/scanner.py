# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for entity definition (.def) files.

Converts raw source text into typed tokens on demand. Unlike most grammars,
newlines are significant: a class header ends at the first line break.
"""

import enum
import re
from dataclasses import dataclass

from entdef.errors import LexerError, ParseError
from entdef.source import SourceCursor

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the definition scanner."""

    INTEGER = "INTEGER"
    DECIMAL = "DECIMAL"
    STRING = "STRING"
    WORD = "WORD"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    BLOCK_OPEN = "/*"
    BLOCK_CLOSE = "*/"
    SEMICOLON = ";"
    COMMA = ","
    EQUALS = "="
    MINUS = "-"
    NEWLINE = "NEWLINE"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        value: The raw text of the token (the content between the quotes for
            STRING tokens).
        offset: 0-based character offset where the token starts.
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
    """

    type: TokenType
    value: str
    offset: int
    line: int
    column: int


def token_name(token_type: TokenType) -> str:
    """Return a human-readable name for a token type, for diagnostics."""
    return _TOKEN_NAMES[token_type]


def describe_token_types(types: tuple[TokenType, ...]) -> str:
    """Join the names of several token types, e.g. "integer or decimal"."""
    return " or ".join(token_name(t) for t in types)


def expect(token: Token, *types: TokenType) -> Token:
    """Return the token if it has one of the given types.

    Raises ParseError naming the accepted kinds and the actual token text.
    """
    if token.type not in types:
        expected = describe_token_types(types)
        actual = token_name(token.type) if token.type in (TokenType.NEWLINE, TokenType.EOF) else repr(token.value)
        raise ParseError(
            f"Expected {expected}, got {actual}",
            token.line,
            token.column,
            expected=expected,
            actual=token.value,
        )
    return token


class Scanner(SourceCursor):
    """Pull-based scanner over a definition file.

    The parser drives it with :meth:`next_token` and :meth:`peek_token`, and
    may rewind it with :meth:`snapshot` / :meth:`restore` to try alternative
    grammars.
    """

    def next_token(self) -> Token:
        """Return the next token and advance past it.

        At end of input, an EOF token is returned on every call.

        Raises:
            LexerError: If no token rule matches the current character.
        """
        while not self._eof():
            line = self._line
            col = self._column
            start = self._pos
            ch = self._current()

            if ch == "/" and self._peek() == "*":
                # The opening marker is often glued to a game tag, e.g. "/*QUAKED".
                self._advance()  # /
                self._advance()  # *
                while not self._eof() and self._current() not in _WHITESPACE:
                    self._advance()
                return self._make(TokenType.BLOCK_OPEN, start, line, col)
            if ch == "/" and self._peek() == "/":
                self._skip_line_comment()
                continue
            if ch == "*" and self._peek() == "/":
                self._advance()  # *
                self._advance()  # /
                return self._make(TokenType.BLOCK_CLOSE, start, line, col)
            if ch in _SINGLE_CHAR_TOKENS:
                self._advance()
                return self._make(_SINGLE_CHAR_TOKENS[ch], start, line, col)
            if ch == "\r":
                self._advance()
                if self._current() == "\n":
                    self._advance()
                return self._make(TokenType.NEWLINE, start, line, col)
            if ch == "\n":
                self._advance()
                return self._make(TokenType.NEWLINE, start, line, col)
            if ch in " \t":
                while self._current() in (" ", "\t"):
                    self._advance()
                continue
            if ch == '"':
                return self._scan_string(line, col)
            if ch == "-" and self._peek() in _WHITESPACE and self._peek() != "":
                self._advance()
                return self._make(TokenType.MINUS, start, line, col)
            return self._scan_number_or_word(line, col)

        return Token(TokenType.EOF, "", self._pos, self._line, self._column)

    def peek_token(self) -> Token:
        """Return the next token without consuming it."""
        snapshot = self.snapshot()
        try:
            return self.next_token()
        finally:
            self.restore(snapshot)

    def next_token_ignoring_newlines(self) -> Token:
        """Return the next token that is not a newline."""
        token = self.next_token()
        while token.type == TokenType.NEWLINE:
            token = self.next_token()
        return token

    def peek_token_ignoring_newlines(self) -> Token:
        snapshot = self.snapshot()
        try:
            return self.next_token_ignoring_newlines()
        finally:
            self.restore(snapshot)

    def skip_whitespace(self) -> None:
        """Consume spaces, tabs and line breaks."""
        while not self._eof() and self._current() in _WHITESPACE:
            self._advance()

    def at(self, text: str) -> bool:
        """Return True if the unread input starts with *text*."""
        return self._source.startswith(text, self._pos)

    def read_until(self, marker: str) -> str:
        """Consume raw text up to (not including) *marker* and return it.

        If the marker never occurs, the rest of the input is consumed.
        """
        end = self._source.find(marker, self._pos)
        if end < 0:
            end = len(self._source)
        start = self._pos
        self._advance_to(end)
        return self._source[start:end]

    # ------------------------------------------------------------------
    # Token scanners
    # ------------------------------------------------------------------

    def _make(self, token_type: TokenType, start: int, line: int, col: int) -> Token:
        return Token(token_type, self._source[start : self._pos], start, line, col)

    def _skip_line_comment(self) -> None:
        """Consume from '//' through end-of-line (exclusive of the line break)."""
        while not self._eof() and self._current() not in "\r\n":
            self._advance()

    def _scan_string(self, line: int, col: int) -> Token:
        """Scan a double-quoted string; a backslash escapes the next character."""
        start = self._pos
        self._advance()  # opening "
        chars: list[str] = []
        while not self._eof():
            ch = self._current()
            if ch == '"':
                self._advance()  # closing "
                return Token(TokenType.STRING, "".join(chars), start, line, col)
            if ch == "\\" and self._peek() in ('"', "\\"):
                self._advance()
                ch = self._current()
            chars.append(ch)
            self._advance()
        raise LexerError("Unterminated string literal", line, col, '"')

    def _scan_number_or_word(self, line: int, col: int) -> Token:
        """Try integer, then decimal, then a bare word."""
        start = self._pos
        for token_type, pattern in ((TokenType.INTEGER, _INTEGER_RE), (TokenType.DECIMAL, _DECIMAL_RE)):
            match = pattern.match(self._source, start)
            if match is not None:
                self._advance_to(match.end())
                return self._make(token_type, start, line, col)

        while not self._eof() and _is_word_char(self._current()):
            self._advance()
        if self._pos == start:
            ch = self._current()
            raise LexerError(f"Unexpected character: {ch!r}", line, col, ch)
        return self._make(TokenType.WORD, start, line, col)


def tokenize(source: str) -> list[Token]:
    """Scan an entire source string and return its tokens.

    The final token is always a single EOF token.

    Raises:
        LexerError: On unexpected characters or unterminated string literals.
    """
    scanner = Scanner(source)
    tokens: list[Token] = []
    while True:
        token = scanner.next_token()
        tokens.append(token)
        if token.type == TokenType.EOF:
            return tokens


# ################
# Implementation
# ################

_WHITESPACE = " \t\r\n"

# Characters that terminate a number or a word.
_DELIMITERS = " \t\n\r()[]{};,="

_DELIMITER_LOOKAHEAD = r"(?=[" + re.escape(_DELIMITERS) + r"]|\Z)"

_INTEGER_RE = re.compile(r"[+-]?\d+" + _DELIMITER_LOOKAHEAD)

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?" + _DELIMITER_LOOKAHEAD)

# Punctuation allowed inside bare words, besides letters and digits. Anything
# else outside a string or a description (e.g. '@', '[', '`') is rejected.
_WORD_CHARS_SET = frozenset("_?.:/\\!'+-*#$%&|<>~^")

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "=": TokenType.EQUALS,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
}

_TOKEN_NAMES: dict[TokenType, str] = {
    TokenType.INTEGER: "integer",
    TokenType.DECIMAL: "decimal",
    TokenType.STRING: "quoted string",
    TokenType.WORD: "word",
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.LBRACE: "'{'",
    TokenType.RBRACE: "'}'",
    TokenType.BLOCK_OPEN: "'/*'",
    TokenType.BLOCK_CLOSE: "'*/'",
    TokenType.SEMICOLON: "';'",
    TokenType.COMMA: "','",
    TokenType.EQUALS: "'='",
    TokenType.MINUS: "'-'",
    TokenType.NEWLINE: "newline",
    TokenType.EOF: "end of file",
}


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch in _WORD_CHARS_SET
