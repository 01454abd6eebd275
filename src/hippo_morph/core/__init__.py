"""Core blending algorithms.

This module contains the fundamental operations for species morphing:
- Weight vectors and their normalization policy
- Species mesh sets sharing one topology
- Weighted vertex blending
- Normal and bounds recomputation
- Diagnostics, exceptions and input validation
"""

from .weights import WeightVector
from .species import SpeciesMesh, SpeciesMeshSet
from .blend import BlendEngine, BlendResult, create_blend_engine
from .geometry import Bounds, DerivedGeometryUpdater, compute_bounds, compute_vertex_normals
from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticReport
from .validator import validate_device, validate_dtype, validate_vertices, validate_faces
from .exceptions import *

__all__ = [
    # Weights
    "WeightVector",
    # Species
    "SpeciesMesh",
    "SpeciesMeshSet",
    # Blending
    "BlendEngine",
    "BlendResult",
    "create_blend_engine",
    # Derived geometry
    "Bounds",
    "DerivedGeometryUpdater",
    "compute_bounds",
    "compute_vertex_normals",
    # Diagnostics
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticReport",
    # Validation
    "validate_device",
    "validate_dtype",
    "validate_vertices",
    "validate_faces",
]
