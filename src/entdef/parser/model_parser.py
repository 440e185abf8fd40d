# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parser for the ``model(...)`` clause of an entity class.

Two grammars are accepted. The current one is the model expression language;
the legacy one is a positional list such as ``"progs/ammo.mdl" 0 1 spawnflags = 2``.
The expression grammar is tried first. When it fails, the scanner is rewound
and the legacy grammar is tried; a legacy match is accepted with a deprecation
warning that spells out the equivalent expression. When both fail, the error
from the expression grammar is raised.
"""

from collections.abc import Callable

from entdef.errors import DefinitionError
from entdef.expression import (
    BinaryExpression,
    BinaryOperator,
    CaseExpression,
    Expression,
    ExpressionParser,
    ExpressionScanner,
    LiteralExpression,
    MapExpression,
    SwitchExpression,
    VariableExpression,
    optimize,
    render,
)
from entdef.model.entities import ModelDefinition
from entdef.parser.scanner import Scanner, TokenType, expect
from entdef.parser.status import ParserStatus

# ###############
# Public Interface
# ###############


class ModelDefinitionParser:
    """Parses a model clause body, starting right after its opening parenthesis.

    On success the scanner is left after the closing parenthesis. On failure
    it is left where the clause body started.
    """

    def __init__(self, scanner: Scanner, status: ParserStatus) -> None:
        self._scanner = scanner
        self._status = status

    def parse(self) -> ModelDefinition:
        """Parse the clause and return its optimized model definition.

        Raises:
            DefinitionError: The expression grammar's error, if neither
                grammar accepts the clause.
        """
        snapshot = self._scanner.snapshot()

        modern = self._attempt(self._parse_expression)
        if not isinstance(modern, DefinitionError):
            return ModelDefinition(expression=optimize(modern))

        self._scanner.restore(snapshot)
        legacy = self._attempt(self._parse_legacy)
        if isinstance(legacy, DefinitionError):
            self._scanner.restore(snapshot)
            raise modern

        expression = optimize(legacy)
        self._status.warn(
            snapshot.line,
            snapshot.column,
            f"Legacy model expressions are deprecated, replace with '{render(expression)}'",
        )
        return ModelDefinition(expression=expression)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _attempt(self, strategy: Callable[[], Expression]) -> Expression | DefinitionError:
        """Run one grammar and return either its result or its error."""
        try:
            return strategy()
        except DefinitionError as exc:
            return exc

    def _parse_expression(self) -> Expression:
        """Parse: <expression> ')'"""
        expression_scanner = ExpressionScanner(self._scanner.source, self._scanner.snapshot())
        expression = ExpressionParser(expression_scanner).parse()
        self._scanner.restore(expression_scanner.snapshot())
        expect(self._scanner.next_token_ignoring_newlines(), TokenType.RPAREN)
        return expression

    def _parse_legacy(self) -> Expression:
        """Parse: entry ( ',' entry )* ')'"""
        entries = [self._parse_legacy_entry()]
        while self._scanner.peek_token_ignoring_newlines().type == TokenType.COMMA:
            self._scanner.next_token_ignoring_newlines()
            entries.append(self._parse_legacy_entry())
        expect(self._scanner.next_token_ignoring_newlines(), TokenType.RPAREN)
        if len(entries) == 1:
            return entries[0]
        return SwitchExpression(cases=entries)

    def _parse_legacy_entry(self) -> Expression:
        """Parse: STRING [ INTEGER [ INTEGER ] ] [ WORD '=' ( STRING | INTEGER ) ]"""
        path = expect(self._scanner.next_token_ignoring_newlines(), TokenType.STRING)
        entries: dict[str, Expression] = {"path": LiteralExpression(value=path.value)}

        for key in ("skin", "frame"):
            if self._scanner.peek_token_ignoring_newlines().type != TokenType.INTEGER:
                break
            token = self._scanner.next_token_ignoring_newlines()
            entries[key] = LiteralExpression(value=float(token.value))
        model = MapExpression(entries=entries)

        if self._scanner.peek_token_ignoring_newlines().type != TokenType.WORD:
            return model
        attribute = self._scanner.next_token_ignoring_newlines()
        expect(self._scanner.next_token_ignoring_newlines(), TokenType.EQUALS)
        token = expect(self._scanner.next_token_ignoring_newlines(), TokenType.STRING, TokenType.INTEGER)
        value = float(token.value) if token.type == TokenType.INTEGER else token.value
        condition = BinaryExpression(
            operator=BinaryOperator.EQUAL,
            left=VariableExpression(name=attribute.value),
            right=LiteralExpression(value=value),
        )
        return CaseExpression(condition=condition, value=model)
