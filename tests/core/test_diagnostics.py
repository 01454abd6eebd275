"""Tests for diagnostics and their escalation to exceptions."""

import logging

import pytest

from hippo_morph.core.diagnostics import Diagnostic, DiagnosticKind, DiagnosticReport
from hippo_morph.core.exceptions import (
    HippoMorphError,
    IndexOutOfRangeError,
    LengthMismatchError,
    MissingSourceError,
    TopologyMismatchError,
)


def test_kind_values_match_names():
    assert DiagnosticKind.INDEX_OUT_OF_RANGE.value == "IndexOutOfRange"
    assert DiagnosticKind.LENGTH_MISMATCH.value == "LengthMismatch"
    assert DiagnosticKind.MISSING_SOURCE.value == "MissingSource"
    assert DiagnosticKind.TOPOLOGY_MISMATCH.value == "TopologyMismatch"


@pytest.mark.parametrize("diagnostic,exc_type", [
    (Diagnostic.index_out_of_range(5, 2), IndexOutOfRangeError),
    (Diagnostic.length_mismatch(2, 3), LengthMismatchError),
    (Diagnostic.missing_source(1, "Rat"), MissingSourceError),
    (Diagnostic.topology_mismatch(1, "Mouse", 100, 90), TopologyMismatchError),
])
def test_to_exception(diagnostic, exc_type):
    exc = diagnostic.to_exception()
    assert isinstance(exc, exc_type)
    assert isinstance(exc, HippoMorphError)


def test_topology_message_carries_counts():
    diag = Diagnostic.topology_mismatch(3, "Mouse", 10523, 8941)
    assert "Mouse" in diag.message
    assert "10523" in diag.message and "8941" in diag.message
    exc = diag.to_exception()
    assert (exc.label, exc.expected, exc.actual) == ("Mouse", 10523, 8941)
    assert "10,523" in str(exc)


def test_builtin_exception_compat():
    assert isinstance(Diagnostic.index_out_of_range(0, 0).to_exception(), IndexError)
    assert isinstance(Diagnostic.length_mismatch(1, 2).to_exception(), ValueError)


def test_log_levels():
    assert Diagnostic.topology_mismatch(0, "A", 1, 2).log_level == logging.ERROR
    assert Diagnostic.missing_source(0, "A").log_level == logging.WARNING
    assert Diagnostic.index_out_of_range(0, 0).log_level == logging.WARNING


def test_report_collection():
    report = DiagnosticReport()
    assert report.ok
    assert not report
    report.add(None)
    assert len(report) == 0

    report.add(Diagnostic.missing_source(0, "A"))
    report.extend([Diagnostic.topology_mismatch(1, "B", 2, 1), None])
    assert not report.ok
    assert len(report) == 2
    assert report.kinds == [DiagnosticKind.MISSING_SOURCE, DiagnosticKind.TOPOLOGY_MISMATCH]
    assert [d.label for d in report.of_kind(DiagnosticKind.TOPOLOGY_MISMATCH)] == ["B"]


def test_raise_if_any():
    DiagnosticReport().raise_if_any()

    report = DiagnosticReport([Diagnostic.length_mismatch(2, 3)])
    with pytest.raises(LengthMismatchError):
        report.raise_if_any()


def test_emit_forwards_to_handler():
    seen = []
    logger = logging.getLogger("hippo_morph.tests.emit")
    report = DiagnosticReport([Diagnostic.missing_source(0, "A"), Diagnostic.length_mismatch(1, 0)])
    assert report.emit(logger, seen.append) is report
    assert [d.kind for d in seen] == report.kinds
