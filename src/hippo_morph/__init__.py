"""Hippo Morph - weighted blending of cross-species hippocampal surfaces.

Given topologically identical species meshes (e.g. human, macaque, marmoset,
rat and mouse hippocampal surfaces) and one weight per species, this package
computes a blended vertex buffer for display, with optional normals and an
axis-aligned bounding box for the renderer.

Quick Start:
    >>> from hippo_morph import MorphConfig, MorphSession
    >>>
    >>> session = MorphSession(MorphConfig(
    ...     species=[("Human", human_verts), ("Mouse", mouse_verts)],
    ...     faces=shared_faces,
    ... ))
    >>> session.initialize()
    >>> report = session.set_weights([0.5, 0.5])
    >>> report.ok
    True
    >>> session.vertices  # (V, 3) blended positions

Modules:
    core: Weights, species sets, blending, derived geometry, diagnostics
    pipeline: Session configuration and orchestration
    utils: Logging and tensor context managers
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .core.exceptions import (
    HippoMorphError,
    IndexOutOfRangeError,
    LengthMismatchError,
    MissingSourceError,
    TopologyMismatchError,
    ValidationError,
)
from .core.diagnostics import Diagnostic, DiagnosticKind, DiagnosticReport
from .core.weights import WeightVector
from .core.species import SpeciesMesh, SpeciesMeshSet
from .core.blend import BlendEngine, BlendResult
from .core.geometry import Bounds, DerivedGeometryUpdater
from .pipeline.config import MorphConfig
from .pipeline.session import MorphSession, SessionState, create_session
from .utils.logging import setup_logger, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Exceptions
    "HippoMorphError",
    "IndexOutOfRangeError",
    "LengthMismatchError",
    "MissingSourceError",
    "TopologyMismatchError",
    "ValidationError",
    # Diagnostics
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticReport",
    # Core
    "WeightVector",
    "SpeciesMesh",
    "SpeciesMeshSet",
    "BlendEngine",
    "BlendResult",
    "Bounds",
    "DerivedGeometryUpdater",
    # Session
    "MorphConfig",
    "MorphSession",
    "SessionState",
    "create_session",
    # Logging
    "setup_logger",
    "get_logger",
]
