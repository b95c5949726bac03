"""
Engine layer: pool operations against external Token collaborators
"""

from .config import EngineConfig, load_config
from .engine import PoolEngine
from .tokens import InMemoryToken, Token
from .view import PoolView

__all__ = [
    "EngineConfig",
    "load_config",
    "PoolEngine",
    "InMemoryToken",
    "Token",
    "PoolView",
]
