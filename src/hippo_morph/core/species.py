"""
Species Meshes
==============

Single responsibility: Hold the ordered set of topologically identical
species vertex buffers that blending reads from.
"""

import numbers
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple, Union

import torch

from .validator import validate_vertices


@dataclass(frozen=True)
class SpeciesMesh:
    """
    One species' vertex buffer.

    Attributes:
        label: Human-readable name, e.g. 'Human', 'Macaque', 'Mouse'
        vertices: (V, 3) positions, or None when no mesh is assigned yet

    The tensor is a private copy made at registration; treat it as read-only.
    """

    label: str
    vertices: Optional[torch.Tensor] = None

    @property
    def has_mesh(self) -> bool:
        return self.vertices is not None

    @property
    def vertex_count(self) -> Optional[int]:
        if self.vertices is None:
            return None
        return int(self.vertices.shape[0])


class SpeciesMeshSet:
    """
    Ordered, append-only collection of species meshes sharing one topology.

    The canonical vertex count comes from an explicit template when one is
    given, otherwise from the first entry that has a mesh. Entries whose count
    differs are kept (so weight indices stay aligned) and are excluded at
    blend time.

    Example:
        >>> species = SpeciesMeshSet()
        >>> species.append('Human', human_vertices)
        >>> species.append('Mouse', mouse_vertices)
        >>> species.labels
        ['Human', 'Mouse']
    """

    def __init__(
        self,
        device: Union[str, torch.device] = 'cpu',
        dtype: torch.dtype = torch.float32,
        template=None,
    ):
        self.device = torch.device(device)
        self.dtype = dtype
        self._entries: List[SpeciesMesh] = []
        self._template_count: Optional[int] = None
        if template is not None:
            self.set_template(template)

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Tuple[str, object]],
        device: Union[str, torch.device] = 'cpu',
        dtype: torch.dtype = torch.float32,
        template=None,
    ) -> "SpeciesMeshSet":
        species = cls(device=device, dtype=dtype, template=template)
        for label, vertices in pairs:
            species.append(label, vertices)
        return species

    def append(self, label: str, vertices=None) -> SpeciesMesh:
        """
        Register a species. ``vertices`` may be None to reserve a slot.

        Raises:
            ValidationError: If vertices are not shaped (V, 3)
        """
        tensor = None
        if vertices is not None:
            tensor = validate_vertices(vertices, self.device, self.dtype)
        entry = SpeciesMesh(str(label), tensor)
        self._entries.append(entry)
        return entry

    def set_template(self, template) -> None:
        """Fix the reference vertex count from a vertex buffer or a plain count."""
        if isinstance(template, numbers.Integral) and not isinstance(template, bool):
            self._template_count = max(0, int(template))
        else:
            self._template_count = int(validate_vertices(template, self.device, self.dtype).shape[0])

    def vertex_count_of(self, index: int) -> Optional[int]:
        """
        Vertex count of species ``index``, or None if it has no mesh.

        Raises:
            IndexError: If ``index`` is outside ``[0, len(self))``; negative
                indices do not wrap
        """
        if (
            isinstance(index, bool)
            or not isinstance(index, numbers.Integral)
            or not 0 <= index < len(self._entries)
        ):
            raise IndexError(f"Species index {index} out of range for {len(self._entries)} species")
        return self._entries[index].vertex_count

    @property
    def reference_vertex_count(self) -> Optional[int]:
        """Canonical vertex count, or None if there is no template and no mesh."""
        if self._template_count is not None:
            return self._template_count
        for entry in self._entries:
            if entry.has_mesh:
                return entry.vertex_count
        return None

    @property
    def labels(self) -> List[str]:
        return [entry.label for entry in self._entries]

    def index_of(self, label: str) -> int:
        """
        Position of the first species with ``label``.

        Raises:
            KeyError: If no species has that label
        """
        for i, entry in enumerate(self._entries):
            if entry.label == label:
                return i
        raise KeyError(label)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> SpeciesMesh:
        return self._entries[index]

    def __iter__(self) -> Iterator[SpeciesMesh]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"SpeciesMeshSet(labels={self.labels}, reference={self.reference_vertex_count})"
