"""
Application State
Everything the analyzer remembers between runs: access key, key cursors and last results.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shared.storage.storage_manager import StorageManager

from ..ai.gemini_client import TitleTrendAnalysis
from ..analysis.models import AnalyzedVideo, ChannelGrowthRecord, DetailedVideoAnalysis

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """
    Explicit session state with load/save lifecycle hooks.
    Serialized as one flat JSON object by the StorageManager.
    """
    access_key: Optional[str] = None
    youtube_key_index: int = 0
    gemini_key_index: int = 0
    growth_timeframe_days: int = 30
    video_analysis_results: List[AnalyzedVideo] = field(default_factory=list)
    channel_growth_results: List[ChannelGrowthRecord] = field(default_factory=list)
    video_list_results: List[DetailedVideoAnalysis] = field(default_factory=list)
    title_trend_analysis: Optional[TitleTrendAnalysis] = None

    @classmethod
    def load(cls, storage: StorageManager) -> "AppState":
        data = storage.read_state()
        try:
            return cls.from_dict(data)
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            logger.warning(f"Stored state is malformed, starting fresh: {e}")
            return cls()

    def save(self, storage: StorageManager):
        storage.write_state(self.to_dict())

    def clear(self):
        """Logout: drops the access key, cursors and every stored result."""
        self.access_key = None
        self.youtube_key_index = 0
        self.gemini_key_index = 0
        self.video_analysis_results = []
        self.channel_growth_results = []
        self.video_list_results = []
        self.title_trend_analysis = None

    def find_video(self, video_id: str) -> Optional[AnalyzedVideo]:
        return next((v for v in self.video_analysis_results if v.video_id == video_id), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_key": self.access_key,
            "youtube_key_index": self.youtube_key_index,
            "gemini_key_index": self.gemini_key_index,
            "growth_timeframe_days": self.growth_timeframe_days,
            "video_analysis_results": [v.to_dict() for v in self.video_analysis_results],
            "channel_growth_results": [r.to_dict() for r in self.channel_growth_results],
            "video_list_results": [r.to_dict() for r in self.video_list_results],
            "title_trend_analysis": self.title_trend_analysis.to_dict() if self.title_trend_analysis else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppState":
        trend = data.get("title_trend_analysis")
        return cls(
            access_key=data.get("access_key"),
            youtube_key_index=int(data.get("youtube_key_index", 0)),
            gemini_key_index=int(data.get("gemini_key_index", 0)),
            growth_timeframe_days=int(data.get("growth_timeframe_days", 30)),
            video_analysis_results=[AnalyzedVideo.from_dict(v) for v in data.get("video_analysis_results", [])],
            channel_growth_results=[ChannelGrowthRecord.from_dict(r) for r in data.get("channel_growth_results", [])],
            video_list_results=[DetailedVideoAnalysis.from_dict(r) for r in data.get("video_list_results", [])],
            title_trend_analysis=TitleTrendAnalysis(**trend) if trend else None,
        )
