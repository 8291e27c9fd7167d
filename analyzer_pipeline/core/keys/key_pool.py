"""
API Key Pool
Ordered pool of interchangeable credentials plus the shared "current index" cursor.
"""

import threading
from typing import Iterable, List, Optional


def mask_key(key: str) -> str:
    """Masks a credential for logs, keeping only the last 4 characters."""
    if len(key) <= 4:
        return "****"
    return f"****{key[-4:]}"


class KeyCursor:
    """
    Shared "current index" cell.

    Reads and writes are guarded by a lock. Advancement after a failure uses
    compare-and-set so that a task which lost the race never moves the cursor
    backwards over a key another task already found exhausted.
    """

    def __init__(self, index: int = 0):
        self._index = index
        self._lock = threading.Lock()

    @property
    def index(self) -> int:
        with self._lock:
            return self._index

    def set(self, index: int):
        with self._lock:
            self._index = index

    def compare_and_set(self, expected: int, new: int) -> bool:
        """Sets the cursor to `new` only if it still holds `expected`."""
        with self._lock:
            if self._index != expected:
                return False
            self._index = new
            return True

    def __repr__(self) -> str:
        return f"KeyCursor(index={self.index})"


class ApiKeyPool:
    """
    Ordered sequence of API keys for one provider.

    The pool is only ever replaced as a whole (reload). The cursor always
    satisfies 0 <= index < len(pool) while the pool is non-empty.
    """

    def __init__(self, name: str, keys: Optional[Iterable[str]] = None, start_index: int = 0):
        self._name = name
        self._keys: List[str] = []
        self._cursor = KeyCursor()
        self.replace(keys or [], start_index)

    @property
    def name(self) -> str:
        return self._name

    @property
    def keys(self) -> List[str]:
        return list(self._keys)

    @property
    def cursor(self) -> KeyCursor:
        return self._cursor

    @property
    def current_index(self) -> int:
        return self._cursor.index

    def replace(self, keys: Iterable[str], start_index: int = 0):
        """Swaps in a new key list; the cursor is clamped into the new range."""
        cleaned = [k.strip() for k in keys if k and k.strip()]
        self._keys = cleaned
        if not cleaned or not 0 <= start_index < len(cleaned):
            start_index = 0
        self._cursor.set(start_index)

    def __getitem__(self, index: int) -> str:
        return self._keys[index]

    def __len__(self) -> int:
        return len(self._keys)

    def __bool__(self) -> bool:
        return bool(self._keys)

    def __repr__(self) -> str:
        return f"ApiKeyPool(name={self._name!r}, size={len(self._keys)}, index={self.current_index})"
