"""
Riders domain package.

Public API:
- Rider, RiderId
"""
from .models import Rider, RiderId

__all__ = ["Rider", "RiderId"]
