"""
Access Key Gate
Validates user access keys against the list loaded from the key sheet.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional

from ..errors import AccessDeniedError, AccessDeniedReason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessKey:
    """Access token plus its expiration date as written in the sheet (DD/MM/YYYY)."""
    key: str
    expiration_date: str


def parse_expiration_date(value: str) -> Optional[date]:
    """Parses a strict DD/MM/YYYY date; returns None when malformed or not a real day."""
    parts = value.strip().split("/")
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        return None


class GateState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class AccessGate:
    """
    Two-state login gate.

    UNAUTHENTICATED -> AUTHENTICATED when the key matches a loaded entry whose
    expiration day is today or later. Failed attempts leave the state unchanged.
    Only logout() goes back.
    """

    def __init__(self, access_keys: Iterable[AccessKey]):
        self._keys: List[AccessKey] = list(access_keys)
        self._state = GateState.UNAUTHENTICATED
        self._active_key: Optional[str] = None

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def active_key(self) -> Optional[str]:
        return self._active_key

    @property
    def is_authenticated(self) -> bool:
        return self._state is GateState.AUTHENTICATED

    def check(self, key: str, today: Optional[date] = None) -> AccessKey:
        """
        Validates `key` without changing state.

        Raises:
            AccessDeniedError: With reason EMPTY, NOT_FOUND, MALFORMED_DATE or EXPIRED.
        """
        candidate = (key or "").strip()
        if not candidate:
            raise AccessDeniedError(AccessDeniedReason.EMPTY)

        found = next((k for k in self._keys if k.key == candidate), None)
        if found is None:
            raise AccessDeniedError(AccessDeniedReason.NOT_FOUND)

        expires = parse_expiration_date(found.expiration_date)
        if expires is None:
            raise AccessDeniedError(AccessDeniedReason.MALFORMED_DATE)

        if expires < (today or date.today()):
            raise AccessDeniedError(AccessDeniedReason.EXPIRED)

        return found

    def login(self, key: str, today: Optional[date] = None) -> AccessKey:
        found = self.check(key, today)
        self._state = GateState.AUTHENTICATED
        self._active_key = found.key
        logger.info(f"Access key accepted (expires {found.expiration_date})")
        return found

    def logout(self):
        self._state = GateState.UNAUTHENTICATED
        self._active_key = None
