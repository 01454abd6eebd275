"""
Diagnostics
===========

Non-fatal conditions reported by weight updates and blend passes.

None of these abort the operation that produced them: the offending update or
species contribution is skipped and the rest proceeds. Callers receive a
:class:`DiagnosticReport` and decide whether to log, ignore or escalate.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional

from .exceptions import (
    HippoMorphError,
    IndexOutOfRangeError,
    LengthMismatchError,
    MissingSourceError,
    TopologyMismatchError,
)


class DiagnosticKind(str, Enum):
    INDEX_OUT_OF_RANGE = "IndexOutOfRange"
    LENGTH_MISMATCH = "LengthMismatch"
    MISSING_SOURCE = "MissingSource"
    TOPOLOGY_MISMATCH = "TopologyMismatch"


# Topology mismatches are the only condition that silently drops geometry
_LOG_LEVELS = {
    DiagnosticKind.INDEX_OUT_OF_RANGE: logging.WARNING,
    DiagnosticKind.LENGTH_MISMATCH: logging.WARNING,
    DiagnosticKind.MISSING_SOURCE: logging.WARNING,
    DiagnosticKind.TOPOLOGY_MISMATCH: logging.ERROR,
}


@dataclass(frozen=True)
class Diagnostic:
    """
    One reported condition.

    Attributes:
        kind: Which condition occurred
        message: Human-readable description
        index: Weight or species index involved, if any
        label: Species label involved, if any
        expected: Expected count (vertex count or species count)
        actual: Count actually found
    """

    kind: DiagnosticKind
    message: str
    index: Optional[int] = None
    label: Optional[str] = None
    expected: Optional[int] = None
    actual: Optional[int] = None

    @classmethod
    def index_out_of_range(cls, index: int, length: int) -> "Diagnostic":
        return cls(
            DiagnosticKind.INDEX_OUT_OF_RANGE,
            f"Invalid index {index} for set_weight (species count: {length}).",
            index=index,
            expected=length,
        )

    @classmethod
    def length_mismatch(cls, expected: int, actual: Optional[int]) -> "Diagnostic":
        return cls(
            DiagnosticKind.LENGTH_MISMATCH,
            f"set_weights: weight count must match species count "
            f"(expected {expected}, got {actual}).",
            expected=expected,
            actual=actual,
        )

    @classmethod
    def missing_source(cls, index: int, label: str) -> "Diagnostic":
        return cls(
            DiagnosticKind.MISSING_SOURCE,
            f"Species '{label}' has no mesh assigned.",
            index=index,
            label=label,
        )

    @classmethod
    def topology_mismatch(cls, index: int, label: str, expected: int, actual: int) -> "Diagnostic":
        return cls(
            DiagnosticKind.TOPOLOGY_MISMATCH,
            f"Mesh vertex count mismatch for species '{label}'. "
            f"Expected {expected}, got {actual}.",
            index=index,
            label=label,
            expected=expected,
            actual=actual,
        )

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self.kind]

    def log(self, logger: logging.Logger) -> None:
        logger.log(self.log_level, self.message)

    def to_exception(self) -> HippoMorphError:
        """Build the exception a host would raise to escalate this diagnostic."""
        if self.kind is DiagnosticKind.INDEX_OUT_OF_RANGE:
            return IndexOutOfRangeError(self.index, self.expected)
        if self.kind is DiagnosticKind.LENGTH_MISMATCH:
            return LengthMismatchError(self.expected, self.actual)
        if self.kind is DiagnosticKind.MISSING_SOURCE:
            return MissingSourceError(self.label, self.index)
        return TopologyMismatchError(self.label, self.expected, self.actual)


class DiagnosticReport:
    """
    Ordered collection of diagnostics produced by one call.

    Truthiness follows the list: an empty report is falsy, so
    ``if report:`` reads as "something was reported". Use :attr:`ok`
    for the inverse.
    """

    def __init__(self, diagnostics: Optional[Iterable[Diagnostic]] = None):
        self._items: List[Diagnostic] = list(diagnostics or [])

    def add(self, diagnostic: Optional[Diagnostic]) -> None:
        if diagnostic is not None:
            self._items.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.add(diagnostic)

    @property
    def ok(self) -> bool:
        return not self._items

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self._items if d.kind is kind]

    @property
    def kinds(self) -> List[DiagnosticKind]:
        return [d.kind for d in self._items]

    def emit(
        self,
        logger: logging.Logger,
        handler: Optional[Callable[[Diagnostic], None]] = None,
    ) -> "DiagnosticReport":
        """Log every diagnostic and forward it to ``handler`` if one is given."""
        for diagnostic in self._items:
            diagnostic.log(logger)
            if handler is not None:
                handler(diagnostic)
        return self

    def raise_if_any(self) -> None:
        """Raise the exception for the first diagnostic, if there is one."""
        if self._items:
            raise self._items[0].to_exception()

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"DiagnosticReport({[d.kind.value for d in self._items]})"
