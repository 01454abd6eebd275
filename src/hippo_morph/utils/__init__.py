"""Utility functions and helpers.

Logging and tensor context managers shared by the core and pipeline.
"""

from .logging import setup_logger, get_logger
from .context import no_grad_mode

__all__ = ["setup_logger", "get_logger", "no_grad_mode"]
