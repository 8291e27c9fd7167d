"""
Application Configuration Model
Represents a validated configuration state
"""

from typing import List, Optional


class AppConfig:
    """
    Immutable configuration object for the YouTube Channel Analyzer.

    Represents a VALID configuration state only.
    All validation must be performed before instantiation.
    """

    def __init__(
        self,
        youtube_api_keys: Optional[List[str]] = None,
        gemini_api_keys: Optional[List[str]] = None,
        gemini_model: str = "gemini-2.5-flash",
        gemini_language: str = "English",
        sheet_id: Optional[str] = None,
        sheet_name: Optional[str] = None,
        sheet_timeout: float = 20.0,
        access_required: bool = True,
        timeframe_days: int = 30,
        outlier_multiplier: float = 1.5,
        top_n: int = 5,
        max_workers: int = 4,
        max_comments: int = 50,
        storage_root: str = "./storage",
        log_level: str = "INFO",
        log_file: Optional[str] = None,
    ):
        """
        Initialize AppConfig with validated values.

        Args:
            youtube_api_keys: YouTube Data API keys, tried in order
            gemini_api_keys: Gemini API keys, tried in order
            gemini_model: Gemini model name
            gemini_language: Language the AI answers in
            sheet_id: Published Google Sheet holding keys (optional)
            sheet_name: Tab of the sheet (optional, default tab if None)
            sheet_timeout: HTTP timeout for the sheet download in seconds
            access_required: Whether analysis commands need a valid access key
            timeframe_days: Default trailing window in days (1 - 365)
            outlier_multiplier: Views / average threshold for outliers (> 1.0)
            top_n: Outliers kept per channel (> 0)
            max_workers: Concurrent channels in the video analysis (> 0)
            max_comments: Comments fetched per video for summaries (1 - 100)
            storage_root: Root directory for storage
            log_level: Logging level name
            log_file: Log file path (default: <storage_root>/logs/app.log)
        """
        self._youtube_api_keys = list(youtube_api_keys or [])
        self._gemini_api_keys = list(gemini_api_keys or [])
        self._gemini_model = gemini_model
        self._gemini_language = gemini_language
        self._sheet_id = sheet_id
        self._sheet_name = sheet_name
        self._sheet_timeout = sheet_timeout
        self._access_required = access_required
        self._timeframe_days = timeframe_days
        self._outlier_multiplier = outlier_multiplier
        self._top_n = top_n
        self._max_workers = max_workers
        self._max_comments = max_comments
        self._storage_root = storage_root
        self._log_level = log_level
        self._log_file = log_file

    @property
    def youtube_api_keys(self) -> List[str]:
        return list(self._youtube_api_keys)

    @property
    def gemini_api_keys(self) -> List[str]:
        return list(self._gemini_api_keys)

    @property
    def gemini_model(self) -> str:
        return self._gemini_model

    @property
    def gemini_language(self) -> str:
        return self._gemini_language

    @property
    def sheet_id(self) -> Optional[str]:
        """Google Sheet ID used as remote key source."""
        return self._sheet_id

    @property
    def sheet_name(self) -> Optional[str]:
        return self._sheet_name

    @property
    def sheet_timeout(self) -> float:
        return self._sheet_timeout

    @property
    def access_required(self) -> bool:
        return self._access_required

    @property
    def timeframe_days(self) -> int:
        return self._timeframe_days

    @property
    def outlier_multiplier(self) -> float:
        return self._outlier_multiplier

    @property
    def top_n(self) -> int:
        return self._top_n

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def max_comments(self) -> int:
        return self._max_comments

    @property
    def storage_root(self) -> str:
        """Root directory for storage."""
        return self._storage_root

    @property
    def log_level(self) -> str:
        return self._log_level

    @property
    def log_file(self) -> Optional[str]:
        return self._log_file

    def __repr__(self) -> str:
        """String representation for debugging (keys are never shown)."""
        return (
            f"AppConfig(youtube_keys={len(self._youtube_api_keys)}, "
            f"gemini_keys={len(self._gemini_api_keys)}, "
            f"sheet_id={self._sheet_id!r}, "
            f"timeframe_days={self._timeframe_days}, "
            f"storage_root={self._storage_root!r})"
        )
