"""
Analyzer Session
Wires configuration, the remote key sheet, key pools, the access gate and stored state.
"""

import logging
from datetime import date
from typing import Optional

from shared.storage.storage_manager import StorageManager

from .ai.gemini_client import GeminiClient
from .config.app_config import AppConfig
from .errors import AccessDeniedError, AccessDeniedReason, ConfigurationError
from .keys.access_keys import AccessGate, AccessKey
from .keys.key_pool import ApiKeyPool
from .keys.sheet_loader import SheetKeyLoader
from .state.app_state import AppState

logger = logging.getLogger(__name__)


class AnalyzerSession:
    """
    One CLI invocation's worth of state.

    Keys come from the YAML/env configuration first and from the Google Sheet
    when the configuration has none. Key cursors are restored from and saved
    to the stored state so consecutive runs start on a key that still works.
    """

    def __init__(
        self,
        config: AppConfig,
        storage: StorageManager,
        sheet_loader: Optional[SheetKeyLoader] = None,
    ):
        self._config = config
        self._storage = storage
        self._sheet = sheet_loader
        if self._sheet is None and config.sheet_id:
            self._sheet = SheetKeyLoader(config.sheet_id, config.sheet_name, config.sheet_timeout)
        self._state = AppState.load(storage)
        self._youtube_pool = ApiKeyPool("YouTube")
        self._gemini_pool = ApiKeyPool("Gemini")
        self._gate: Optional[AccessGate] = None

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def storage(self) -> StorageManager:
        return self._storage

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return self._gate is not None and self._gate.is_authenticated

    @property
    def youtube_pool(self) -> ApiKeyPool:
        return self._youtube_pool

    @property
    def gemini_pool(self) -> ApiKeyPool:
        return self._gemini_pool

    def load_keys(self, need_gemini: bool = True):
        """
        Fills both key pools.

        Raises:
            ConfigurationError: No YouTube keys (or no Gemini keys when needed)
                could be found, or the sheet is unusable.
        """
        youtube_keys = self._config.youtube_api_keys
        if not youtube_keys and self._sheet is not None:
            youtube_keys = self._sheet.youtube_keys()
        self._youtube_pool.replace(youtube_keys, self._state.youtube_key_index)
        if not self._youtube_pool:
            raise ConfigurationError(
                "No YouTube API keys configured. Set youtube.api_keys, YOUTUBE_API_KEYS or sheet.sheet_id."
            )

        gemini_keys = self._config.gemini_api_keys
        if not gemini_keys and need_gemini and self._sheet is not None:
            gemini_keys = self._sheet.gemini_keys()
        self._gemini_pool.replace(gemini_keys, self._state.gemini_key_index)
        if need_gemini and not self._gemini_pool:
            raise ConfigurationError(
                "No Gemini API keys configured. Set gemini.api_keys, GEMINI_API_KEYS or sheet.sheet_id."
            )

        logger.info(
            f"Key pools loaded: {len(self._youtube_pool)} YouTube, {len(self._gemini_pool)} Gemini "
            f"(starting at #{self._youtube_pool.current_index + 1} / #{self._gemini_pool.current_index + 1})"
        )

    def gemini_client(self) -> GeminiClient:
        return GeminiClient(self._gemini_pool, self._config.gemini_model, self._config.gemini_language)

    def _access_gate(self) -> AccessGate:
        if self._gate is None:
            if self._sheet is None:
                raise ConfigurationError("Access keys need a Google Sheet: set sheet.sheet_id in the configuration.")
            self._gate = AccessGate(self._sheet.access_keys())
        return self._gate

    def login(self, key: str, today: Optional[date] = None) -> AccessKey:
        """Validates `key` against the sheet and stores it on success."""
        gate = self._access_gate()
        found = gate.login(key, today)
        self._state.access_key = gate.active_key
        self.save()
        return found

    def require_access(self, today: Optional[date] = None):
        """
        Re-validates the stored access key when the configuration requires one.

        Raises:
            AccessDeniedError: Not logged in, or the stored key is no longer valid.
        """
        if not self._config.access_required:
            return
        if not self._state.access_key:
            raise AccessDeniedError(
                AccessDeniedReason.NOT_FOUND, "Not logged in. Run `yt-channel-analyzer login <KEY>` first."
            )
        gate = self._access_gate()
        try:
            gate.login(self._state.access_key, today)
        except AccessDeniedError:
            gate.logout()
            self._state.access_key = None
            self.save()
            raise

    def logout(self):
        if self._gate is not None:
            self._gate.logout()
        self._state.clear()
        self._storage.clear_state()

    def save(self):
        """Persists results and the current key cursors."""
        if self._youtube_pool:
            self._state.youtube_key_index = self._youtube_pool.current_index
        if self._gemini_pool:
            self._state.gemini_key_index = self._gemini_pool.current_index
        self._state.save(self._storage)
