"""
Persisted session state
"""

from .app_state import AppState

__all__ = ["AppState"]
