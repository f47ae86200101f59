"""API Routes"""

from . import health, scenes

__all__ = ["health", "scenes"]
