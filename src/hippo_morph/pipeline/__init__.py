"""Session orchestration.

Contains configuration and the morph session that ties weights, blending
and derived geometry together.
"""

from .config import MorphConfig
from .session import MorphSession, SessionState, create_session

__all__ = [
    'MorphConfig',
    'MorphSession',
    'SessionState',
    'create_session',
]
