"""
Key Rotation Controller
Runs a unit of work against a key pool, rotating to the next key on quota exhaustion.
"""

import logging
from typing import Callable, TypeVar

from ..errors import AllCredentialsExhaustedError, EmptyPoolError, QuotaExhaustedError
from .key_pool import ApiKeyPool, mask_key

T = TypeVar("T")
logger = logging.getLogger(__name__)


class KeyRotator:
    """
    Executes work that needs exactly one credential from a pool.

    Trial order is the pool rotated so the current index comes first. The
    cursor moves to each candidate before its attempt and is left on the key
    that succeeded, so the next call starts from a key believed to still have
    quota. Every move is a compare-and-set from the index this call last saw,
    so the cursor never returns to a key another call already passed over.
    Only QuotaExhaustedError advances to the next key; any other error is
    re-raised at once.
    """

    def __init__(self, pool: ApiKeyPool):
        self._pool = pool

    @property
    def pool(self) -> ApiKeyPool:
        return self._pool

    def run(self, work: Callable[[str], T]) -> T:
        """
        Runs `work(key)` until it succeeds or a non-quota error stops it.

        Raises:
            EmptyPoolError: The pool has no keys.
            AllCredentialsExhaustedError: Every key reported quota exhaustion.
        """
        size = len(self._pool)
        if size == 0:
            raise EmptyPoolError(f"No {self._pool.name} API keys are configured.")

        cursor = self._pool.cursor
        observed = cursor.index
        start = observed % size
        if observed != start:
            cursor.compare_and_set(observed, start)
        previous = start

        for offset in range(size):
            index = (start + offset) % size
            if offset > 0:
                # Lost races leave a fresher cursor in place.
                cursor.compare_and_set(previous, index)
            previous = index

            key = self._pool[index]
            logger.debug(f"Using {self._pool.name} key #{index + 1} ({mask_key(key)})")
            try:
                result = work(key)
            except QuotaExhaustedError as e:
                logger.warning(
                    f"{self._pool.name} key #{index + 1} exhausted ({e.reason or e}). Trying next key."
                )
                continue

            return result

        raise AllCredentialsExhaustedError(self._pool.name, size)
