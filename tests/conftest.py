"""Shared fixtures for morphing tests."""

import pytest
import torch

from hippo_morph.core.species import SpeciesMeshSet


@pytest.fixture
def two_point_species():
    """Species A at the origin, B at x=10, one vertex each."""
    return SpeciesMeshSet.from_pairs([
        ("A", [[0.0, 0.0, 0.0]]),
        ("B", [[10.0, 0.0, 0.0]]),
    ])


@pytest.fixture
def quad():
    """Unit square in the z=0 plane split into two triangles."""
    vertices = torch.tensor([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [1.0, 1.0, 0.0],
        [0.0, 1.0, 0.0],
    ])
    faces = torch.tensor([[0, 1, 2], [0, 2, 3]])
    return vertices, faces


@pytest.fixture
def random_species():
    """Three random 50-vertex species in float64."""
    gen = torch.Generator().manual_seed(7)
    return SpeciesMeshSet.from_pairs(
        [(name, torch.rand(50, 3, generator=gen, dtype=torch.float64))
         for name in ("Human", "Macaque", "Mouse")],
        dtype=torch.float64,
    )
