"""
Channel Growth Analyzer
Compares each channel's average views over two equal trailing windows.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..errors import AllCredentialsExhaustedError, ProviderError, ValidationError
from ..keys.key_pool import ApiKeyPool
from ..keys.key_rotator import KeyRotator
from ..youtube.youtube_client import YouTubeClient, client_for_key
from .metrics import average_views, growth_percentage, growth_windows, rank_growth
from .models import ChannelGrowthRecord

logger = logging.getLogger(__name__)


class ChannelGrowthAnalyzer:
    """Sequential growth ranking over a list of channel identifiers."""

    def __init__(
        self,
        youtube_pool: ApiKeyPool,
        client_factory: Callable[[str], YouTubeClient] = client_for_key,
    ):
        self._rotator = KeyRotator(youtube_pool)
        self._client_factory = client_factory

    def analyze(self, identifiers: List[str], days: int, now: Optional[datetime] = None) -> List[ChannelGrowthRecord]:
        """
        Returns:
            Records ranked by growth percentage, highest first.

        Raises:
            ValidationError: No identifiers given or invalid timeframe.
            AllCredentialsExhaustedError: The YouTube key pool ran dry.
            ProviderError: Every channel failed; the first failure is raised.
        """
        if not identifiers:
            raise ValidationError("Enter at least one YouTube channel (URL, ID or @handle).")
        if days <= 0:
            raise ValidationError(f"Timeframe must be a positive number of days, got {days}")

        moment = now or datetime.now(timezone.utc)
        records: List[ChannelGrowthRecord] = []
        failures: List[ProviderError] = []

        for identifier in identifiers:
            try:
                record = self._channel_growth(identifier, days, moment)
            except AllCredentialsExhaustedError:
                raise
            except ProviderError as e:
                logger.error(f"Channel {identifier!r} failed: {e}")
                failures.append(e)
                continue
            if record is not None:
                records.append(record)

        if failures and len(failures) == len(identifiers):
            raise failures[0]

        ranked = rank_growth(records)
        logger.info(f"Growth ranking complete: {len(ranked)} channel(s)")
        return ranked

    def _channel_growth(self, identifier: str, days: int, now: datetime) -> Optional[ChannelGrowthRecord]:
        channel = self._rotator.run(lambda key: self._client_factory(key).resolve_channel(identifier))
        if channel is None:
            logger.warning(f"Channel not found for: {identifier}")
            return None

        (prev_start, prev_end), (cur_start, cur_end) = growth_windows(now, days)

        def fetch_both(key: str):
            client = self._client_factory(key)
            current = client.fetch_videos_in_range(channel.channel_id, cur_start, cur_end)
            previous = client.fetch_videos_in_range(channel.channel_id, prev_start, prev_end)
            return current, previous

        current, previous = self._rotator.run(fetch_both)
        current_avg = average_views(current)
        previous_avg = average_views(previous)
        growth = growth_percentage(current_avg, previous_avg)

        logger.info(
            f"{channel.title}: {previous_avg:,.0f} -> {current_avg:,.0f} average views ({growth:.2f}%)"
        )
        return ChannelGrowthRecord(
            channel_id=channel.channel_id,
            channel_name=channel.title,
            current_period_avg_views=current_avg,
            previous_period_avg_views=previous_avg,
            growth_percentage=growth,
            current_video_count=len(current),
            previous_video_count=len(previous),
        )
