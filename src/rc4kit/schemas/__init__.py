"""
Data contracts and type definitions.
"""

__all__ = [
    "CipherConfig",
]

from .config import CipherConfig
