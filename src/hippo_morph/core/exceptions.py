"""Custom exceptions for mesh morphing.

The engine itself never raises these for runtime conditions: blending and
weight updates report :class:`~hippo_morph.core.diagnostics.Diagnostic`
values instead. The classes exist so a host that prefers hard failures can
escalate a diagnostic (see ``DiagnosticReport.raise_if_any``), and so that
invalid configuration is rejected eagerly at construction time.
"""


class HippoMorphError(Exception):
    """Base exception for all morphing errors.

    Catching this handles every error raised by the ``hippo_morph`` package.

    Example:
        >>> try:
        ...     session.set_weights([0.2, 0.3, 0.5]).raise_if_any()
        ... except HippoMorphError as e:
        ...     print(f"Morph update rejected: {e}")
    """
    pass


class IndexOutOfRangeError(HippoMorphError, IndexError):
    """Raised when a weight index falls outside ``[0, species_count)``.

    Attributes:
        index: The rejected index
        length: Length of the weight vector at the time of the call
    """

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(
            f"Weight index {index} out of range for {length} species"
        )


class LengthMismatchError(HippoMorphError, ValueError):
    """Raised when a bulk weight update does not match the species count.

    Attributes:
        expected: Number of registered species
        actual: Number of weights supplied (None if no sequence was given)
    """

    def __init__(self, expected: int, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Weight count must match species count: "
            f"expected {expected}, got {actual}"
        )


class MissingSourceError(HippoMorphError):
    """Raised when a weighted species has no vertex buffer assigned.

    Attributes:
        label: Species label
        index: Position of the species in the set
    """

    def __init__(self, label: str, index: int = None):
        self.label = label
        self.index = index
        super().__init__(f"Species '{label}' has no mesh assigned")


class TopologyMismatchError(HippoMorphError):
    """Raised when a species vertex count differs from the reference topology.

    Blending requires every species to share one vertex/triangle layout.

    Attributes:
        label: Species label
        expected: Reference vertex count
        actual: Vertex count of the offending species

    Example:
        >>> raise TopologyMismatchError('Mouse', 10523, 8941)
        TopologyMismatchError: Mesh vertex count mismatch for species 'Mouse':
        expected 10,523 vertices, got 8,941.
    """

    def __init__(self, label: str, expected: int, actual: int):
        self.label = label
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Mesh vertex count mismatch for species '{label}': "
            f"expected {expected:,} vertices, got {actual:,}."
        )


class ValidationError(HippoMorphError):
    """Raised when configuration or input data is malformed.

    Example:
        >>> if vertices.ndim != 2 or vertices.shape[1] != 3:
        ...     raise ValidationError(f"Vertices must be (V, 3), got {tuple(vertices.shape)}")
    """
    pass
