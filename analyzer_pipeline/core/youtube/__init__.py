"""
YouTube API integration module
"""

from .channel_info import ChannelInfo
from .video_info import VideoDetails, VideoInfo
from .video_url import extract_video_id, split_identifiers
from .youtube_client import YouTubeClient, client_for_key

__all__ = [
    "ChannelInfo",
    "VideoDetails",
    "VideoInfo",
    "YouTubeClient",
    "client_for_key",
    "extract_video_id",
    "split_identifiers",
]
