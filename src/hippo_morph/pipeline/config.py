"""
Session Configuration
=====================

Single responsibility: Configure a morph session with validation.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import torch

from hippo_morph.core.diagnostics import Diagnostic
from hippo_morph.core.exceptions import ValidationError
from hippo_morph.core.validator import validate_device, validate_dtype, validate_faces


@dataclass
class MorphConfig:
    """
    Configuration for a morph session.

    This dataclass replaces the per-object inspector settings of a host
    engine: an ordered list of labelled species meshes plus the runtime
    toggles. Validation in __post_init__ catches errors before the first
    blend.

    Attributes:
        species: Ordered (label, vertices) pairs; vertices may be None
        normalize_weights: Normalize weights to sum to 1 on each update
        recalculate_normals: Recompute normals after each update
        faces: Shared (F, 3) triangle indices, needed for normals
        template: Explicit topology template (vertex buffer or vertex count);
                  defaults to the first species with a mesh
        initial_weights: Starting weights, padded/truncated to species count
        device: PyTorch device for all buffers
        dtype: Floating dtype for all buffers
        diagnostic_handler: Called with every Diagnostic a session reports

    Example:
        >>> config = MorphConfig(
        ...     species=[("Human", human_verts), ("Mouse", mouse_verts)],
        ...     faces=shared_faces,
        ... )
        >>> config.normalize_weights
        True
    """

    species: List[Tuple[str, Any]] = field(default_factory=list)

    # Runtime options
    normalize_weights: bool = True
    recalculate_normals: bool = True

    # Topology
    faces: Optional[Any] = None
    template: Optional[Any] = None

    # Serialized state
    initial_weights: Optional[Sequence[float]] = None

    # Hardware
    device: Union[str, torch.device] = 'cpu'
    dtype: torch.dtype = torch.float32

    # Diagnostics channel
    diagnostic_handler: Optional[Callable[[Diagnostic], None]] = None

    def __post_init__(self):
        """
        Validate and normalize configuration after initialization.

        Raises:
            ValidationError: If any configuration is invalid
        """
        self.device = validate_device(self.device)
        self.dtype = validate_dtype(self.dtype)

        for name in ('normalize_weights', 'recalculate_normals'):
            if not isinstance(getattr(self, name), bool):
                raise ValidationError(
                    f"{name} must be a bool, got {type(getattr(self, name)).__name__}"
                )

        species = []
        for idx, entry in enumerate(self.species):
            try:
                label, vertices = entry
            except (TypeError, ValueError) as e:
                raise ValidationError(
                    f"Species entry {idx} must be a (label, vertices) pair"
                ) from e
            species.append((str(label), vertices))
        self.species = species

        if self.faces is not None:
            self.faces = validate_faces(self.faces, self.device)

        if isinstance(self.template, bool) or (
            isinstance(self.template, int) and self.template < 0
        ):
            raise ValidationError(f"template vertex count must be >= 0, got {self.template!r}")

        if self.initial_weights is not None:
            try:
                self.initial_weights = [float(w) for w in self.initial_weights]
            except (TypeError, ValueError) as e:
                raise ValidationError(f"initial_weights must be numbers: {e}") from e

        if self.diagnostic_handler is not None and not callable(self.diagnostic_handler):
            raise ValidationError("diagnostic_handler must be callable")

    def __repr__(self) -> str:
        return (
            f"MorphConfig(\n"
            f"  species={[label for label, _ in self.species]},\n"
            f"  normalize={self.normalize_weights},\n"
            f"  normals={self.recalculate_normals},\n"
            f"  faces={None if self.faces is None else tuple(self.faces.shape)},\n"
            f"  device={self.device},\n"
            f"  dtype={self.dtype}\n"
            f")"
        )
