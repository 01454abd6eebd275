"""
Input Validation
================

Single responsibility: Coerce and validate inputs before they reach blending.
"""

from typing import Union

import numpy as np
import torch

from .exceptions import ValidationError


def validate_device(device: Union[str, torch.device]) -> torch.device:
    """
    Validate and create torch device.

    Args:
        device: Device string ('cpu', 'cuda', etc.) or torch.device

    Returns:
        torch.device object

    Raises:
        ValidationError: If the string is not a device or CUDA is unavailable
    """
    try:
        device = torch.device(device)
    except (RuntimeError, TypeError) as e:
        raise ValidationError(f"Invalid device: {device!r}") from e

    if device.type == 'cuda' and not torch.cuda.is_available():
        raise ValidationError(
            "CUDA requested but not available.\n"
            "Options:\n"
            "  1. Use CPU: set device='cpu'\n"
            "  2. Reinstall PyTorch with CUDA support"
        )

    return device


def validate_dtype(dtype: torch.dtype) -> torch.dtype:
    """
    Ensure vertex data uses a floating point dtype.

    Raises:
        ValidationError: If dtype is not a floating point torch dtype
    """
    if not isinstance(dtype, torch.dtype) or not dtype.is_floating_point:
        raise ValidationError(f"dtype must be a floating point torch.dtype, got {dtype!r}")
    return dtype


def validate_vertices(
    vertices,
    device: torch.device,
    dtype: torch.dtype = torch.float32,
) -> torch.Tensor:
    """
    Convert a vertex buffer to a fresh ``(V, 3)`` tensor.

    Accepts tensors, NumPy arrays or nested sequences of points. The result
    never shares storage with the input.

    Args:
        vertices: Vertex positions
        device: Target device
        dtype: Target floating dtype

    Returns:
        (V, 3) tensor owned by the caller

    Raises:
        ValidationError: If the data is not numeric or not shaped (V, 3)
    """
    if isinstance(vertices, torch.Tensor):
        tensor = vertices.detach().to(device=device, dtype=dtype, copy=True)
    else:
        try:
            array = np.asarray(vertices, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Vertices must be numeric 3D points: {e}") from e
        # An empty sequence has no column axis yet
        if array.size == 0:
            array = array.reshape(0, 3)
        tensor = torch.tensor(array, device=device, dtype=dtype)

    if tensor.ndim != 2 or tensor.shape[1] != 3:
        raise ValidationError(
            f"Vertices must have shape (V, 3), got {tuple(tensor.shape)}"
        )

    return tensor


def validate_faces(faces, device: torch.device) -> torch.Tensor:
    """
    Convert triangle indices to a ``(F, 3)`` int64 tensor.

    Only shape and sign are checked here; whether indices fit a given
    topology is decided when the topology is known.

    Raises:
        ValidationError: If faces are not non-negative integer triplets
    """
    if isinstance(faces, torch.Tensor):
        if faces.is_floating_point():
            raise ValidationError("Face indices must be integers")
        tensor = faces.detach().to(device=device, dtype=torch.int64, copy=True)
    else:
        array = np.asarray(faces)
        if array.size == 0:
            array = array.reshape(0, 3).astype(np.int64)
        if not np.issubdtype(array.dtype, np.integer):
            raise ValidationError(f"Face indices must be integers, got {array.dtype}")
        tensor = torch.tensor(array, device=device, dtype=torch.int64)

    if tensor.ndim != 2 or tensor.shape[1] != 3:
        raise ValidationError(f"Faces must have shape (F, 3), got {tuple(tensor.shape)}")

    if tensor.numel() and int(tensor.min()) < 0:
        raise ValidationError("Face indices must be non-negative")

    return tensor
