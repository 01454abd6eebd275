"""
Context Manager Utilities
==========================

Single responsibility: Provide reusable context managers for tensor work.
"""

import torch
from contextlib import contextmanager


@contextmanager
def no_grad_mode():
    """
    Context manager for gradient-free tensor updates.

    Blending writes in place into session-owned buffers that outlive the
    call, so this uses ``torch.no_grad`` rather than ``torch.inference_mode``:
    inference tensors could not be updated in place once the context exits.

    Yields:
        Context with autograd tracking disabled

    Example:
        >>> with no_grad_mode():
        ...     working.add_(species_vertices, alpha=0.5)
    """
    with torch.no_grad():
        yield
