"""
Weight Vector
=============

Single responsibility: Hold per-species blend weights and their
normalization policy.
"""

import math
import numbers
from typing import Iterable, Iterator, List, Optional

import torch

from .diagnostics import Diagnostic
from .exceptions import ValidationError


def _finite_or_zero(value: float) -> float:
    value = float(value)
    return value if math.isfinite(value) else 0.0


class WeightVector:
    """
    Ordered, mutable per-species weights.

    Indices are aligned positionally with the species set. The vector never
    rejects a change of species count: :meth:`sync_length` pads or truncates
    instead.

    Clamping is intentionally asymmetric. :meth:`set_weight` clamps to >= 0
    immediately, while :meth:`set_all` stores raw values and leaves negatives
    for :meth:`normalize` (a negative weight never contributes to a blend
    either way).

    Example:
        >>> w = WeightVector([2.0, 0.0])
        >>> w.normalize()
        False
        >>> w.tolist()
        [1.0, 0.0]
    """

    def __init__(self, values: Optional[Iterable[float]] = None):
        self._values: List[float] = [float(v) for v in values] if values is not None else []

    def set_weight(self, index: int, value: float) -> Optional[Diagnostic]:
        """
        Set one weight, clamped to >= 0.

        Returns:
            An IndexOutOfRange diagnostic if ``index`` is outside
            ``[0, len(self))`` or is not an integer; the vector is unchanged
            in that case.
        """
        if (
            isinstance(index, bool)
            or not isinstance(index, numbers.Integral)
            or not 0 <= index < len(self._values)
        ):
            return Diagnostic.index_out_of_range(index, len(self._values))

        self._values[index] = max(0.0, _finite_or_zero(value))
        return None

    def set_all(self, values: Optional[Iterable[float]], species_count: int) -> Optional[Diagnostic]:
        """
        Replace every weight at once.

        Returns:
            A LengthMismatch diagnostic if ``values`` is None or its length
            differs from ``species_count``; the vector is unchanged in that case.

        Raises:
            ValidationError: If a value is not a number. This is a caller bug,
                not a runtime condition, so it is not reported as a diagnostic.
        """
        if values is None:
            return Diagnostic.length_mismatch(species_count, None)

        try:
            new_values = [float(v) for v in values]
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Weights must be numbers: {e}") from e
        if len(new_values) != species_count:
            return Diagnostic.length_mismatch(species_count, len(new_values))

        self._values = new_values
        return None

    def sync_length(self, target_count: int) -> None:
        """Pad with zeros or truncate from the tail to ``target_count`` entries."""
        missing = target_count - len(self._values)
        if missing > 0:
            self._values.extend([0.0] * missing)
        elif missing < 0:
            del self._values[target_count:]

    def normalize(self) -> bool:
        """
        Clamp negatives to 0 and scale the weights to sum to 1, in place.

        When nothing positive remains the vector falls back to selecting the
        first species. An empty vector is left alone.

        Returns:
            True if the zero-sum fallback was applied
        """
        largest = 0.0
        for i, value in enumerate(self._values):
            value = _finite_or_zero(value)
            if value < 0.0:
                value = 0.0
            self._values[i] = value
            largest = max(largest, value)

        if largest <= 0.0:
            if not self._values:
                return False
            self._values[0] = 1.0
            for i in range(1, len(self._values)):
                self._values[i] = 0.0
            return True

        # Scaled values lie in [0, 1], so the sum stays finite and >= 1
        scaled = [value / largest for value in self._values]
        total = math.fsum(scaled)
        self._values = [value / total for value in scaled]
        return False

    def reset(self) -> None:
        """Zero every weight, keeping the length."""
        self._values = [0.0] * len(self._values)

    def total(self) -> float:
        return math.fsum(self._values)

    def tolist(self) -> List[float]:
        return list(self._values)

    def as_tensor(self, device: torch.device = None, dtype: torch.dtype = torch.float32) -> torch.Tensor:
        return torch.tensor(self._values, device=device, dtype=dtype)

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> float:
        return self._values[index]

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def __eq__(self, other) -> bool:
        if isinstance(other, WeightVector):
            return self._values == other._values
        return NotImplemented

    def __repr__(self) -> str:
        return f"WeightVector({self._values})"
