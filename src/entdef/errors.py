# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised while scanning, parsing, and evaluating definitions."""

# ###############
# Public Interface
# ###############


class DefinitionError(Exception):
    """Base class for errors that carry a source position.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column


class LexerError(DefinitionError):
    """Raised when the scanner encounters a character no token rule accepts.

    Attributes:
        character: The offending character, or '' when the error is an
            unterminated literal at end of input.
    """

    def __init__(self, message: str, line: int, column: int, character: str = "") -> None:
        super().__init__(message, line, column)
        self.character = character


class ParseError(DefinitionError):
    """Raised when the next token does not match what the grammar expects.

    Attributes:
        expected: Human-readable description of the accepted token kinds.
        actual: The raw text of the token that was found instead.
    """

    def __init__(self, message: str, line: int, column: int, expected: str = "", actual: str = "") -> None:
        super().__init__(message, line, column)
        self.expected = expected
        self.actual = actual


class EvaluationError(Exception):
    """Raised when a model expression cannot be evaluated (e.g. type mismatch)."""
