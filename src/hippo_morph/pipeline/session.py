"""
Morph Session
=============

Single responsibility: Own the working buffer and funnel every weight
change through one recomputation path.

A session moves from UNINITIALIZED to INITIALIZED once, either through an
explicit :meth:`MorphSession.initialize` or lazily on the first mutating
call. :meth:`MorphSession.apply_morph` is the only place blending happens.

Sessions do no locking. A host that drives one session from several threads
(e.g. UI sliders plus a tracking feed) must serialize the calls.
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional

import torch

from hippo_morph.core.blend import BlendEngine
from hippo_morph.core.diagnostics import DiagnosticReport
from hippo_morph.core.geometry import Bounds, DerivedGeometryUpdater
from hippo_morph.core.species import SpeciesMeshSet
from hippo_morph.core.weights import WeightVector
from hippo_morph.pipeline.config import MorphConfig
from hippo_morph.utils.logging import get_logger

logger = get_logger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class MorphSession:
    """
    Blends a species set into a session-owned vertex buffer.

    Every mutator returns a :class:`DiagnosticReport`. Diagnostics are also
    logged and passed to ``config.diagnostic_handler``; none of them abort
    the call.

    Example:
        >>> session = MorphSession(MorphConfig(species=[("Human", h), ("Mouse", m)]))
        >>> session.set_weights([0.25, 0.75])
        DiagnosticReport([])
        >>> session.vertices.shape
        torch.Size([V, 3])
    """

    def __init__(self, config: MorphConfig):
        """
        Initialize session from configuration.

        Species buffers are copied in here; the topology itself is only
        fixed by :meth:`initialize`.

        Args:
            config: Validated MorphConfig
        """
        self.config = config
        self.species = SpeciesMeshSet.from_pairs(
            config.species,
            device=config.device,
            dtype=config.dtype,
            template=config.template,
        )
        self.weights = WeightVector(config.initial_weights)
        self.engine = BlendEngine(config.device, config.dtype)
        self.updater = DerivedGeometryUpdater(config.faces, config.recalculate_normals)

        self.state = SessionState.UNINITIALIZED
        self.reference_count = 0
        self._working: Optional[torch.Tensor] = None
        self._scratch: Optional[torch.Tensor] = None
        self._normals: Optional[torch.Tensor] = None
        self._bounds: Optional[Bounds] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self.state is SessionState.INITIALIZED

    def initialize(self, template=None) -> DiagnosticReport:
        """
        Establish the topology, allocate buffers and run one blend pass.

        May be called again to re-establish topology, e.g. after appending
        species or to switch templates. Buffers are only reallocated here.

        Args:
            template: Optional vertex buffer or vertex count that overrides
                      the configured template and the first species mesh

        Returns:
            Diagnostics from the initial blend pass
        """
        if template is not None:
            self.species.set_template(template)

        reference_count = self.species.reference_vertex_count
        if reference_count is None:
            logger.warning(
                "No template and no species mesh found. "
                "Assign at least one species mesh; blending an empty topology."
            )
            reference_count = 0

        self.reference_count = reference_count
        self._working = torch.zeros(
            (reference_count, 3), device=self.config.device, dtype=self.config.dtype
        )
        self._scratch = torch.zeros_like(self._working)
        self.updater.bind(reference_count)
        self.weights.sync_length(len(self.species))
        self.state = SessionState.INITIALIZED

        logger.info(
            f"Morph session initialized: {len(self.species)} species, "
            f"{reference_count} vertices"
        )
        return self.apply_morph()

    def _ensure_initialized(self) -> DiagnosticReport:
        if self.is_initialized:
            return DiagnosticReport()
        return self.initialize()

    # ------------------------------------------------------------------
    # Weight updates
    # ------------------------------------------------------------------

    def set_weight(self, index: int, value: float, apply_now: bool = True) -> DiagnosticReport:
        """
        Set the weight of one species (clamped to >= 0).

        An out-of-range index is reported and leaves the weights unchanged.

        Args:
            index: Species index
            value: New weight
            apply_now: Re-blend immediately
        """
        report = self._ensure_initialized()

        diagnostic = self.weights.set_weight(index, value)
        if diagnostic is not None:
            self._report(DiagnosticReport([diagnostic]))
            report.add(diagnostic)
        elif apply_now:
            report.extend(self.apply_morph())
        return report

    def set_weights(self, values: Optional[Iterable[float]], apply_now: bool = True) -> DiagnosticReport:
        """
        Replace all weights. The length must match the species count.

        Values are stored as given; negatives are clamped by the next
        normalization pass.

        Args:
            values: One weight per species
            apply_now: Re-blend immediately
        """
        report = self._ensure_initialized()

        diagnostic = self.weights.set_all(values, len(self.species))
        if diagnostic is not None:
            self._report(DiagnosticReport([diagnostic]))
            report.add(diagnostic)
        elif apply_now:
            report.extend(self.apply_morph())
        return report

    def set_weight_by_label(self, label: str, value: float, apply_now: bool = True) -> DiagnosticReport:
        """
        Set a weight addressed by species label.

        Raises:
            KeyError: If no species has that label
        """
        return self.set_weight(self.species.index_of(label), value, apply_now)

    def reset_weights(self, apply_now: bool = True) -> DiagnosticReport:
        """Zero every weight. With normalization on, the next pass selects species 0."""
        report = self._ensure_initialized()
        self.weights.reset()
        if apply_now:
            report.extend(self.apply_morph())
        return report

    # ------------------------------------------------------------------
    # Recomputation
    # ------------------------------------------------------------------

    def apply_morph(self) -> DiagnosticReport:
        """
        Sync and normalize weights, blend, then refresh normals and bounds.

        If every positively weighted species is excluded, the working buffer
        keeps its previous contents.

        Returns:
            Diagnostics for species skipped in this pass
        """
        if not self.is_initialized:
            return self.initialize()

        self.weights.sync_length(len(self.species))

        if self.config.normalize_weights and self.weights.normalize():
            logger.debug("All weights non-positive; falling back to the first species")

        result = self.engine.blend_into(self._scratch, self.weights, self.species)

        if result.contributors or not result.diagnostics:
            self._working.copy_(self._scratch)
        else:
            logger.debug("Every weighted species was excluded; keeping previous buffer")

        self._normals, self._bounds = self.updater.update(self._working)

        return self._report(result.diagnostics)

    def _report(self, report: DiagnosticReport) -> DiagnosticReport:
        return report.emit(logger, self.config.diagnostic_handler)

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    @property
    def vertices(self) -> Optional[torch.Tensor]:
        """Working buffer. Owned by the session: read it, do not modify it."""
        return self._working

    @property
    def normals(self) -> Optional[torch.Tensor]:
        return self._normals

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._bounds

    @property
    def labels(self) -> List[str]:
        return self.species.labels

    def weights_by_label(self) -> Dict[str, float]:
        """Current weights keyed by label (later duplicates win)."""
        return dict(zip(self.species.labels, self.weights.tolist()))

    def __repr__(self) -> str:
        return (
            f"MorphSession(state={self.state.value}, species={self.labels}, "
            f"vertices={self.reference_count})"
        )


def create_session(species=None, **options) -> MorphSession:
    """
    Factory function to create a session.

    Args:
        species: Ordered (label, vertices) pairs
        **options: Any other MorphConfig field

    Returns:
        Uninitialized MorphSession
    """
    return MorphSession(MorphConfig(species=list(species or []), **options))
