"""
Diagnostics and the per-invocation error aggregator.

Structural problems never abort the whole impl block: each one becomes a
`Diagnostic` anchored at the smallest offending span. The aggregator combines
them in visitation order into one `DiagnosticError`, which the caller receives
with the (partially) transformed block and renders as a single compile error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .errors import SemnullError
from .syntax.types import Span


@dataclass(frozen=True)
class Diagnostic:
    message: str
    span: Span | None = None

    def __str__(self) -> str:
        if self.span is None:
            return self.message
        return f"{self.span}: {self.message}"

    def to_compile_error(self) -> str:
        escaped = self.message.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
        return f'::core::compile_error! {{ "{escaped}" }}'


class DiagnosticError(SemnullError):
    """One or more diagnostics raised as a single failure."""

    def __init__(self, diagnostics: Iterable[Diagnostic]):
        self.diagnostics: tuple[Diagnostic, ...] = tuple(diagnostics)
        assert len(self.diagnostics) > 0, "DiagnosticError needs at least one diagnostic"
        super().__init__("\n".join(str(d) for d in self.diagnostics))

    @classmethod
    def at(cls, message: str, span: Span | None = None) -> DiagnosticError:
        return cls((Diagnostic(message=message, span=span),))

    def combine(self, other: DiagnosticError) -> DiagnosticError:
        return DiagnosticError(self.diagnostics + other.diagnostics)

    def to_compile_error(self) -> str:
        # One item for the whole invocation, one message line per diagnostic.
        return Diagnostic(message="\n".join(d.message for d in self.diagnostics)).to_compile_error()


class ErrorAggregator:
    def __init__(self):
        self._error: DiagnosticError | None = None

    def push(self, error: Diagnostic | DiagnosticError):
        if isinstance(error, Diagnostic):
            error = DiagnosticError((error,))
        self._error = error if self._error is None else self._error.combine(error)

    def __len__(self) -> int:
        return len(self.diagnostics)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self._error.diagnostics if self._error is not None else ()

    def into_error(self) -> DiagnosticError | None:
        return self._error
