"""
Storage Manager for the YouTube Channel Analyzer
Local directories plus the JSON document holding persisted session state.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

STATE_FILENAME = "app_state.json"


class StorageManager:
    """
    Service responsible for managing local storage.

    Responsibilities:
    - Create and validate storage directory structure.
    - Provide canonical paths for exports, reports, metadata and logs.
    - Read and write the flat key-value state document.
    """

    def __init__(self, storage_root: str = "./storage"):
        """
        Initialize the StorageManager.

        Args:
            storage_root (str): The base directory for all storage.
        """
        self._root = Path(storage_root).resolve()

        # Define subdirectories
        self._metadata_dir = self._root / "metadata"
        self._exports_dir = self._root / "exports"
        self._reports_dir = self._root / "reports"
        self._logs_dir = self._root / "logs"

        self._ensure_directories()

    def _ensure_directories(self):
        """Ensures that all required storage directories exist."""
        dirs = [
            self._metadata_dir,
            self._exports_dir,
            self._reports_dir,
            self._logs_dir,
        ]
        for d in dirs:
            d.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Storage directory verified: {d}")

    @property
    def root(self) -> Path:
        return self._root

    @property
    def metadata_path(self) -> Path:
        return self._metadata_dir

    @property
    def exports_path(self) -> Path:
        return self._exports_dir

    @property
    def reports_path(self) -> Path:
        return self._reports_dir

    @property
    def logs_path(self) -> Path:
        return self._logs_dir

    @property
    def state_file(self) -> Path:
        return self._metadata_dir / STATE_FILENAME

    def read_state(self) -> Dict[str, Any]:
        """
        Loads the state document. A missing or corrupt file yields an empty dict.
        """
        path = self.state_file
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable state file {path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring state file {path}: expected a JSON object")
            return {}
        return data

    def write_state(self, data: Dict[str, Any]):
        """Writes the state document atomically (temp file + rename)."""
        path = self.state_file
        tmp = path.with_suffix(".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp.replace(path)

    def clear_state(self):
        if self.state_file.exists():
            self.state_file.unlink()
            logger.info("Stored session state cleared")

    def __repr__(self):
        return f"StorageManager(root={self._root})"
