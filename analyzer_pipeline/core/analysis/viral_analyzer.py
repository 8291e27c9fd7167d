"""
Viral Analyzer Service
Finds each channel's outlier videos and summarises their comments.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from ..ai.gemini_client import GeminiClient
from ..errors import AllCredentialsExhaustedError, ProviderError, ValidationError
from ..keys.key_pool import ApiKeyPool
from ..keys.key_rotator import KeyRotator
from ..youtube.channel_info import ChannelInfo
from ..youtube.video_info import VideoInfo
from ..youtube.youtube_client import YouTubeClient, client_for_key
from .metrics import OUTLIER_MULTIPLIER, TOP_N, select_outliers, view_ratio
from .models import AnalyzedVideo

logger = logging.getLogger(__name__)

COMMENTS_FAILED_TEXT = "Could not generate a comment summary for this video."


class ViralAnalyzer:
    """
    Service responsible for the multi-channel video analysis.

    Responsibilities:
    - Resolve each channel identifier; unknown channels are skipped.
    - Fetch the channel's videos over the trailing window.
    - Keep the top outliers (views above multiplier x channel average).
    - Summarise each outlier's comments with Gemini.

    Channels are processed concurrently. All tasks share the YouTube key
    pool's cursor; each rotation starts from the cursor value current when it
    begins.
    """

    def __init__(
        self,
        youtube_pool: ApiKeyPool,
        gemini: GeminiClient,
        multiplier: float = OUTLIER_MULTIPLIER,
        top_n: int = TOP_N,
        max_comments: int = 50,
        max_workers: int = 4,
        client_factory: Callable[[str], YouTubeClient] = client_for_key,
    ):
        self._rotator = KeyRotator(youtube_pool)
        self._gemini = gemini
        self._multiplier = multiplier
        self._top_n = top_n
        self._max_comments = max_comments
        self._max_workers = max_workers
        self._client_factory = client_factory

    def analyze(self, identifiers: List[str], days: int, now: Optional[datetime] = None) -> List[AnalyzedVideo]:
        """
        Execute the analysis for every channel, preserving input order.

        Raises:
            ValidationError: No identifiers given or invalid timeframe.
            AllCredentialsExhaustedError: A key pool ran dry; ends the batch.
            ProviderError: Every channel failed; the first failure is raised.
        """
        if not identifiers:
            raise ValidationError("Enter at least one YouTube channel (URL, ID or @handle).")
        if days <= 0:
            raise ValidationError(f"Timeframe must be a positive number of days, got {days}")

        moment = now or datetime.now(timezone.utc)
        logger.info(f"Analysing {len(identifiers)} channel(s) over the last {days} days")

        workers = max(1, min(self._max_workers, len(identifiers)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._analyze_channel, ident, days, moment) for ident in identifiers]

            results: List[AnalyzedVideo] = []
            failures: List[ProviderError] = []
            for identifier, future in zip(identifiers, futures):
                try:
                    results.extend(future.result())
                except AllCredentialsExhaustedError:
                    raise
                except ProviderError as e:
                    logger.error(f"Channel {identifier!r} failed: {e}")
                    failures.append(e)

        if failures and len(failures) == len(identifiers):
            raise failures[0]

        logger.info(f"Analysis complete: {len(results)} outlier video(s) found")
        return results

    def _fetch_channel(self, identifier: str, days: int, now: datetime) -> Tuple[Optional[ChannelInfo], List[VideoInfo]]:
        def work(key: str):
            client = self._client_factory(key)
            channel = client.resolve_channel(identifier)
            if channel is None:
                return None, []
            return channel, client.fetch_recent_videos(channel.channel_id, days, now)

        return self._rotator.run(work)

    def _analyze_channel(self, identifier: str, days: int, now: datetime) -> List[AnalyzedVideo]:
        channel, videos = self._fetch_channel(identifier, days, now)
        if channel is None:
            logger.warning(f"Channel not found for: {identifier}")
            return []
        if not videos:
            logger.info(f"{channel.title}: no videos in the last {days} days")
            return []

        average, outliers = select_outliers(videos, self._multiplier, self._top_n)
        logger.info(
            f"{channel.title}: {len(videos)} videos, average {average:,.0f} views, {len(outliers)} outlier(s)"
        )

        analyzed = []
        for video in outliers:
            comments = self._fetch_comments(video.video_id)
            analyzed.append(AnalyzedVideo(
                video_id=video.video_id,
                title=video.title,
                views=video.views,
                thumbnail_url=video.thumbnail_url,
                channel_id=channel.channel_id,
                channel_name=channel.title,
                channel_average_views=average,
                ratio=view_ratio(video.views, average),
                comments_summary=self._summarize(comments, video.video_id),
            ))
        return analyzed

    def _fetch_comments(self, video_id: str) -> List[str]:
        try:
            return self._rotator.run(
                lambda key: self._client_factory(key).fetch_video_comments(video_id, self._max_comments)
            )
        except AllCredentialsExhaustedError:
            raise
        except ProviderError as e:
            logger.warning(f"Could not fetch comments for video {video_id}: {e}")
            return []

    def _summarize(self, comments: List[str], video_id: str) -> str:
        try:
            return self._gemini.summarize_comments(comments)
        except AllCredentialsExhaustedError:
            raise
        except ProviderError as e:
            logger.warning(f"Comment summary failed for video {video_id}: {e}")
            return COMMENTS_FAILED_TEXT
