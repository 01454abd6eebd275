"""Tests for weighted vertex blending."""

import pytest
import torch

from hippo_morph.core.blend import BlendEngine, create_blend_engine
from hippo_morph.core.diagnostics import DiagnosticKind
from hippo_morph.core.species import SpeciesMeshSet
from hippo_morph.core.weights import WeightVector


def test_midpoint_blend(two_point_species):
    engine = BlendEngine()
    result = engine.blend([0.5, 0.5], two_point_species, 1)
    assert result.vertices.tolist() == [[5.0, 0.0, 0.0]]
    assert result.contributors == [0, 1]
    assert result.diagnostics.ok


def test_normalized_weights_select_first(two_point_species):
    w = WeightVector([2.0, 0.0])
    w.normalize()
    result = BlendEngine().blend(w, two_point_species, 1)
    assert result.vertices.tolist() == [[0.0, 0.0, 0.0]]
    assert result.contributors == [0]


def test_zero_sum_fallback_blend(two_point_species):
    w = WeightVector([0.0, 0.0])
    w.normalize()
    result = BlendEngine().blend(w, two_point_species, 1)
    assert result.vertices.tolist() == [[0.0, 0.0, 0.0]]


def test_topology_mismatch_excluded():
    species = SpeciesMeshSet.from_pairs([
        ("A", [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]]),
        ("B", [[5.0, 5.0, 5.0]]),
    ])
    result = BlendEngine().blend([0.0, 1.0], species, 2)
    assert result.vertices.tolist() == [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]
    assert result.contributors == []
    assert result.excluded == [1]

    diag = result.diagnostics[0]
    assert diag.kind is DiagnosticKind.TOPOLOGY_MISMATCH
    assert diag.label == "B"
    assert (diag.expected, diag.actual) == (2, 1)


def test_mismatch_does_not_affect_others(random_species):
    engine = BlendEngine(dtype=torch.float64)
    clean = engine.blend([0.3, 0.7, 0.0], random_species, 50).vertices.clone()

    random_species.append("Broken", torch.ones(49, 3, dtype=torch.float64))
    result = engine.blend([0.3, 0.7, 0.0, 0.9], random_species, 50)
    assert torch.equal(result.vertices, clean)
    assert result.diagnostics.kinds == [DiagnosticKind.TOPOLOGY_MISMATCH]


def test_missing_source_reported():
    species = SpeciesMeshSet.from_pairs([("A", [[1.0, 2.0, 3.0]]), ("Ghost", None)])
    result = BlendEngine().blend([1.0, 1.0], species, 1)
    assert result.vertices.tolist() == [[1.0, 2.0, 3.0]]
    assert result.diagnostics.kinds == [DiagnosticKind.MISSING_SOURCE]
    assert result.diagnostics[0].label == "Ghost"


def test_unweighted_problems_not_reported():
    species = SpeciesMeshSet.from_pairs([
        ("A", [[1.0, 2.0, 3.0]]),
        ("Ghost", None),
        ("Small", [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]),
    ])
    result = BlendEngine().blend([1.0, 0.0, -2.0], species, 1)
    assert result.diagnostics.ok
    assert result.contributors == [0]


def test_missing_trailing_weights_count_as_zero(random_species):
    result = BlendEngine(dtype=torch.float64).blend([1.0], random_species, 50)
    assert torch.equal(result.vertices, random_species[0].vertices)


def test_empty_species_and_zero_count():
    engine = BlendEngine()
    result = engine.blend([], SpeciesMeshSet(), 0)
    assert result.vertices.shape == (0, 3)
    assert result.diagnostics.ok

    species = SpeciesMeshSet.from_pairs([("Empty", [])])
    result = engine.blend([1.0], species, 0)
    assert result.vertices.shape == (0, 3)
    assert result.contributors == [0]


def test_blend_into_reuses_buffer(two_point_species):
    out = torch.full((1, 3), 99.0)
    result = BlendEngine().blend_into(out, [0.0, 0.25], two_point_species)
    assert result.vertices is out
    assert out.tolist() == [[2.5, 0.0, 0.0]]


def test_deterministic(random_species):
    engine = BlendEngine(dtype=torch.float64)
    weights = [0.123, 0.456, 0.421]
    first = engine.blend(weights, random_species, 50).vertices
    for _ in range(5):
        assert torch.equal(engine.blend(weights, random_species, 50).vertices, first)


def test_matches_sequential_accumulation(random_species):
    weights = [0.2, 0.5, 0.3]
    result = BlendEngine(dtype=torch.float64).blend(weights, random_species, 50).vertices

    expected = torch.zeros(50, 3, dtype=torch.float64)
    for w, entry in zip(weights, random_species):
        expected += w * entry.vertices
    assert torch.allclose(result, expected, rtol=0, atol=1e-12)


def test_linearity(random_species):
    engine = BlendEngine(dtype=torch.float64)
    w1 = [0.1, 0.4, 0.2]
    w2 = [0.3, 0.0, 0.5]
    combined = [a + b for a, b in zip(w1, w2)]

    lhs = engine.blend(combined, random_species, 50).vertices
    rhs = engine.blend(w1, random_species, 50).vertices + engine.blend(w2, random_species, 50).vertices
    assert torch.allclose(lhs, rhs, atol=1e-12)


def test_factory():
    engine = create_blend_engine('cpu', torch.float64)
    assert engine.dtype == torch.float64
    assert engine.device.type == 'cpu'
