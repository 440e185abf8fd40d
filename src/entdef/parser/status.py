# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Progress and warning reporting for a parse run.

The parser never aborts on a warning; it hands it to a status object and
carries on. Callers pick the status implementation that suits them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ParserWarning:
    """A non-fatal issue found while parsing.

    Attributes:
        line: 1-based line number the warning refers to.
        column: 1-based column number the warning refers to.
        message: Human-readable description of the issue.
    """

    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"


class ParserStatus:
    """Receives progress updates and warnings; warnings are logged.

    Attributes:
        source_label: Name of the input used in log messages.
    """

    def __init__(self, source_label: str = "<string>") -> None:
        self.source_label = source_label
        self._progress = 0.0

    @property
    def current_progress(self) -> float:
        """The largest progress fraction reported so far."""
        return self._progress

    def progress(self, fraction: float) -> None:
        """Record progress; reports never move backwards."""
        fraction = min(max(fraction, 0.0), 1.0)
        if fraction > self._progress:
            self._progress = fraction
            self.on_progress(fraction)

    def warn(self, line: int, column: int, message: str) -> None:
        """Report a non-fatal issue at a source position."""
        self.on_warning(ParserWarning(line=line, column=column, message=message))

    def on_progress(self, fraction: float) -> None:
        logger.debug("%s: %.0f%% parsed", self.source_label, fraction * 100)

    def on_warning(self, warning: ParserWarning) -> None:
        logger.warning("%s:%s", self.source_label, warning)


class CollectingParserStatus(ParserStatus):
    """A status that keeps every warning so callers can inspect them."""

    def __init__(self, source_label: str = "<string>") -> None:
        super().__init__(source_label)
        self._warnings: list[ParserWarning] = []

    @property
    def warnings(self) -> list[ParserWarning]:
        return self._warnings

    def on_warning(self, warning: ParserWarning) -> None:
        logger.debug("%s:%s", self.source_label, warning)
        self._warnings.append(warning)
