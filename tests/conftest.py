"""
Shared fixtures for the analyzer test suite
"""

from datetime import datetime, timezone

import pytest

from analyzer_pipeline.core.keys.key_pool import ApiKeyPool
from analyzer_pipeline.core.youtube.channel_info import ChannelInfo
from analyzer_pipeline.core.youtube.video_info import VideoInfo


@pytest.fixture
def youtube_pool():
    return ApiKeyPool("YouTube", ["yt-key-A", "yt-key-B", "yt-key-C"])


@pytest.fixture
def gemini_pool():
    return ApiKeyPool("Gemini", ["gm-key-A", "gm-key-B"])


@pytest.fixture
def fixed_now():
    return datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


def make_video(video_id, views, title=None):
    return VideoInfo(video_id=video_id, title=title or f"Video {video_id}", views=views,
                     thumbnail_url=f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg")


def make_channel(channel_id, title=None):
    return ChannelInfo(channel_id, title or f"Channel {channel_id}")
