"""
Video Information Domain Models
"""

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class VideoInfo:
    """
    A single YouTube video as returned by videos.list.
    Immutable so it can be shared between analysis tasks.
    """
    video_id: str
    title: str
    views: int
    thumbnail_url: str = ""

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert object to dictionary for serialization."""
        return asdict(self)


@dataclass(frozen=True)
class VideoDetails:
    """Full metadata used by the video-list analysis."""
    video_id: str
    title: str
    description: str = ""
    tags: List[str] = field(default_factory=list)
    thumbnail_url: str = ""
    comment_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
