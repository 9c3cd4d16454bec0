"""
Resolution diagnostics.

Malformed token data never aborts a build. Each problem the engine works
around is logged and, when the caller passes a list, recorded as a
``Diagnostic`` so build tooling can summarise or fail on it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum


class DiagnosticKind(StrEnum):
    """Kinds of recoverable problems found while resolving tokens."""

    UNRESOLVED_REFERENCE = "unresolved-reference"
    REFERENCE_CYCLE = "reference-cycle"
    NON_SCALAR_REFERENCE = "non-scalar-reference"
    UNKNOWN_FUNCTION = "unknown-function"
    RECURSIVE_CALL = "recursive-call"
    FUNCTION_ERROR = "function-error"


@dataclass(frozen=True)
class Diagnostic:
    """A single recoverable problem."""

    kind: DiagnosticKind
    message: str
    expression: str
    path: str | None = None

    def format(self) -> str:
        where = f"{self.path}: " if self.path else ""
        return f"[{self.kind}] {where}{self.message}"


def report(
    diagnostics: list[Diagnostic] | None,
    logger: logging.Logger,
    kind: DiagnosticKind,
    message: str,
    expression: str,
    path: str | None = None,
) -> None:
    """Log a diagnostic at WARNING and append it to ``diagnostics`` if given."""
    logger.warning(message)
    if diagnostics is not None:
        diagnostics.append(
            Diagnostic(kind=kind, message=message, expression=expression, path=path)
        )
