"""
API key pools, rotation and access-key validation
"""

from .access_keys import AccessGate, AccessKey
from .key_pool import ApiKeyPool, KeyCursor
from .key_rotator import KeyRotator
from .sheet_loader import SheetKeyLoader

__all__ = ["AccessGate", "AccessKey", "ApiKeyPool", "KeyCursor", "KeyRotator", "SheetKeyLoader"]
