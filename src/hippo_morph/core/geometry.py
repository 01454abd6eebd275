"""
Derived Geometry
================

Single responsibility: Refresh normals and bounds from a blended buffer.

Both are derived data for the renderer and never feed back into blending.
"""

from dataclasses import dataclass
from typing import Optional

import torch

from hippo_morph.utils.context import no_grad_mode
from hippo_morph.utils.logging import get_logger

logger = get_logger(__name__)

# Floor for normal lengths so degenerate vertices stay finite
NORMAL_EPSILON = 1e-10


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box of a vertex buffer."""

    minimum: torch.Tensor
    maximum: torch.Tensor

    @property
    def center(self) -> torch.Tensor:
        return (self.minimum + self.maximum) * 0.5

    @property
    def size(self) -> torch.Tensor:
        return self.maximum - self.minimum

    @property
    def extents(self) -> torch.Tensor:
        return self.size * 0.5

    def contains(self, points: torch.Tensor) -> bool:
        """True if every point lies inside the box (boundary included)."""
        if points.numel() == 0:
            return True
        return bool(((points >= self.minimum) & (points <= self.maximum)).all())


def compute_vertex_normals(vertices: torch.Tensor, faces: torch.Tensor) -> torch.Tensor:
    """
    Per-vertex normals from face normals.

    Each face adds its unnormalized cross product to its three vertices, so
    larger triangles weigh more. Vertices touched by no face get a zero normal.

    Args:
        vertices: (V, 3) positions
        faces: (F, 3) int64 indices into ``vertices``

    Returns:
        (V, 3) unit normals
    """
    normals = torch.zeros_like(vertices)
    if faces.numel() == 0:
        return normals

    v0 = vertices[faces[:, 0]]
    v1 = vertices[faces[:, 1]]
    v2 = vertices[faces[:, 2]]
    face_normals = torch.cross(v1 - v0, v2 - v0, dim=1)

    for corner in range(3):
        normals.index_add_(0, faces[:, corner], face_normals)

    lengths = torch.linalg.norm(normals, dim=1, keepdim=True).clamp_min(NORMAL_EPSILON)
    return normals / lengths


def compute_bounds(vertices: torch.Tensor) -> Bounds:
    """Minimal AABB of ``vertices``; an empty buffer gives a zero box at the origin."""
    if vertices.shape[0] == 0:
        zero = torch.zeros(3, device=vertices.device, dtype=vertices.dtype)
        return Bounds(zero, zero.clone())
    return Bounds(vertices.amin(dim=0), vertices.amax(dim=0))


class DerivedGeometryUpdater:
    """
    Recomputes normals (optional) and bounds (always) after a blend.

    The triangle topology is shared with the host and not owned here. If it
    is missing or indexes past the vertex count, normals are left as None
    and a single warning is logged per :meth:`bind`.

    Example:
        >>> updater = DerivedGeometryUpdater(faces, recalculate_normals=True)
        >>> updater.bind(vertex_count=len(working))
        >>> normals, bounds = updater.update(working)
    """

    def __init__(self, faces: Optional[torch.Tensor] = None, recalculate_normals: bool = True):
        self.faces = faces
        self.recalculate_normals_enabled = recalculate_normals
        self._faces_usable = faces is not None
        self._warned = False

    def bind(self, vertex_count: int) -> None:
        """Check the shared faces against a (re)initialized topology."""
        self._warned = False
        self._faces_usable = (
            self.faces is not None
            and (self.faces.numel() == 0 or int(self.faces.max()) < vertex_count)
        )

    def _warn_once(self, message: str) -> None:
        if not self._warned:
            logger.warning(message)
            self._warned = True

    def recalculate_normals(self, buffer: torch.Tensor) -> Optional[torch.Tensor]:
        """Normals for ``buffer``, or None if disabled or faces are unusable."""
        if not self.recalculate_normals_enabled:
            return None
        if self.faces is None:
            self._warn_once("Normal recalculation enabled but no faces were supplied; skipping normals.")
            return None
        if not self._faces_usable:
            self._warn_once(
                f"Face indices exceed the vertex count ({buffer.shape[0]}); skipping normals."
            )
            return None
        with no_grad_mode():
            return compute_vertex_normals(buffer, self.faces)

    def recalculate_bounds(self, buffer: torch.Tensor) -> Bounds:
        with no_grad_mode():
            return compute_bounds(buffer)

    def update(self, buffer: torch.Tensor):
        """Recompute both; returns ``(normals, bounds)``."""
        return self.recalculate_normals(buffer), self.recalculate_bounds(buffer)
