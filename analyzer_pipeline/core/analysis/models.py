"""
Analysis result models
"""

import math
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional


@dataclass
class AnalyzedVideo:
    """An outlier video with its channel context and AI comment summary."""
    video_id: str
    title: str
    views: int
    thumbnail_url: str
    channel_id: str
    channel_name: str
    channel_average_views: float
    ratio: float
    comments_summary: str = ""
    video_summary: Optional[str] = None

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"

    @property
    def channel_url(self) -> str:
        return f"https://www.youtube.com/channel/{self.channel_id}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalyzedVideo":
        return cls(**{k: data[k] for k in cls.__dataclass_fields__ if k in data})


@dataclass
class ChannelGrowthRecord:
    """Period-over-period growth of a channel's average views. rank is 0 until ranked."""
    channel_id: str
    channel_name: str
    current_period_avg_views: float
    previous_period_avg_views: float
    growth_percentage: float
    current_video_count: int
    previous_video_count: int
    rank: int = 0

    @property
    def channel_url(self) -> str:
        return f"https://www.youtube.com/channel/{self.channel_id}"

    @property
    def is_infinite_growth(self) -> bool:
        return math.isinf(self.growth_percentage)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChannelGrowthRecord":
        values = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        values["growth_percentage"] = float(values.get("growth_percentage", 0))
        return cls(**values)


@dataclass
class DetailedVideoAnalysis:
    """Per-video result of the video-list analysis."""
    video_id: str
    title: str
    status: str = "loading"  # loading, completed, error
    description: str = ""
    tags: List[str] = field(default_factory=list)
    thumbnail_url: str = ""
    comment_count: Optional[int] = None
    all_comments: List[str] = field(default_factory=list)
    audience_insight: str = ""
    error: Optional[str] = None

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetailedVideoAnalysis":
        return cls(**{k: data[k] for k in cls.__dataclass_fields__ if k in data})
