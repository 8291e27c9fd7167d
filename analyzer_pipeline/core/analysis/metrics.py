"""
Aggregation functions over video lists and growth records
"""

import math
from datetime import datetime, timedelta
from typing import Iterable, List, Sequence, Tuple

from .models import AnalyzedVideo, ChannelGrowthRecord
from ..youtube.video_info import VideoInfo

OUTLIER_MULTIPLIER = 1.5
TOP_N = 5

SORT_BY_RATIO = "ratio"
SORT_BY_VIEWS = "views"


def average_views(videos: Sequence[VideoInfo]) -> float:
    """Arithmetic mean of view counts; 0 for an empty list."""
    if not videos:
        return 0.0
    return sum(v.views for v in videos) / len(videos)


def select_outliers(
    videos: Sequence[VideoInfo],
    multiplier: float = OUTLIER_MULTIPLIER,
    top_n: int = TOP_N,
) -> Tuple[float, List[VideoInfo]]:
    """
    Videos with views > multiplier * mean, most viewed first, at most `top_n`.

    Returns:
        (mean views, selected videos)
    """
    mean = average_views(videos)
    threshold = mean * multiplier
    selected = sorted((v for v in videos if v.views > threshold), key=lambda v: v.views, reverse=True)
    return mean, selected[:top_n]


def view_ratio(views: int, average: float) -> float:
    """views / average, defined as 0 when the average is 0."""
    return views / average if average > 0 else 0.0


def growth_percentage(current_avg: float, previous_avg: float) -> float:
    """
    Relative change between two periods, in percent.
    Growth from zero is math.inf; zero to zero is 0.
    """
    if previous_avg > 0:
        return (current_avg - previous_avg) / previous_avg * 100
    if current_avg > 0:
        return math.inf
    return 0.0


def growth_windows(now: datetime, days: int) -> Tuple[Tuple[datetime, datetime], Tuple[datetime, datetime]]:
    """
    Two contiguous, equal-length trailing windows.

    Returns:
        ((previous_start, previous_end), (current_start, current_end)) with
        previous_end == current_start and current_end == now.
    """
    span = timedelta(days=days)
    current_start = now - span
    return (current_start - span, current_start), (current_start, now)


def rank_growth(records: Iterable[ChannelGrowthRecord]) -> List[ChannelGrowthRecord]:
    """Sorts by growth descending (inf first) and assigns 1-based ranks."""
    ordered = sorted(records, key=lambda r: r.growth_percentage, reverse=True)
    for position, record in enumerate(ordered, start=1):
        record.rank = position
    return ordered


def filter_and_sort(
    videos: Iterable[AnalyzedVideo],
    min_views: int = 0,
    sort_by: str = SORT_BY_RATIO,
) -> List[AnalyzedVideo]:
    """Keeps videos with at least `min_views` views, sorted by ratio or views descending."""
    if sort_by not in (SORT_BY_RATIO, SORT_BY_VIEWS):
        raise ValueError(f"Unsupported sort order: {sort_by!r}")
    kept = [v for v in videos if v.views >= min_views]
    if sort_by == SORT_BY_RATIO:
        return sorted(kept, key=lambda v: v.ratio, reverse=True)
    return sorted(kept, key=lambda v: v.views, reverse=True)
