"""
Tests for the aggregation functions
"""

import math
from datetime import datetime, timezone

import pytest

from analyzer_pipeline.core.analysis.metrics import (
    average_views,
    filter_and_sort,
    growth_percentage,
    growth_windows,
    rank_growth,
    select_outliers,
    view_ratio,
)
from analyzer_pipeline.core.analysis.models import AnalyzedVideo, ChannelGrowthRecord
from tests.conftest import make_video


def analyzed(video_id, views, ratio):
    return AnalyzedVideo(video_id=video_id, title=video_id, views=views, thumbnail_url="",
                         channel_id="UC1", channel_name="C", channel_average_views=100.0, ratio=ratio)


def record(name, growth):
    return ChannelGrowthRecord(channel_id=name, channel_name=name, current_period_avg_views=0.0,
                               previous_period_avg_views=0.0, growth_percentage=growth,
                               current_video_count=0, previous_video_count=0)


class TestAverageAndOutliers:

    def test_average_of_empty_list_is_zero(self):
        assert average_views([]) == 0.0

    def test_average(self):
        assert average_views([make_video("a", 10), make_video("b", 20), make_video("c", 30)]) == 20.0

    def test_single_spike_is_the_only_outlier(self):
        videos = [make_video("a", 10), make_video("b", 10), make_video("c", 10), make_video("d", 100)]

        mean, outliers = select_outliers(videos)

        assert mean == 32.5
        assert [v.video_id for v in outliers] == ["d"]
        assert view_ratio(outliers[0].views, mean) == pytest.approx(3.0769, abs=1e-4)

    def test_threshold_is_strict(self):
        # mean 100, threshold 150
        videos = [make_video("a", 150), make_video("b", 50), make_video("c", 100)]

        _, outliers = select_outliers(videos)

        assert outliers == []

    def test_top_n_keeps_most_viewed(self):
        videos = [make_video(str(i), 1) for i in range(20)] + [
            make_video("x", 500), make_video("y", 900), make_video("z", 700),
        ]

        _, outliers = select_outliers(videos, top_n=2)

        assert [v.video_id for v in outliers] == ["y", "z"]

    def test_no_videos_no_outliers(self):
        assert select_outliers([]) == (0.0, [])

    def test_ratio_with_zero_average(self):
        assert view_ratio(10, 0.0) == 0.0


class TestGrowth:

    @pytest.mark.parametrize("current, previous, expected", [
        (150.0, 100.0, 50.0),
        (50.0, 100.0, -50.0),
        (0.0, 0.0, 0.0),
        (0.0, 100.0, -100.0),
    ])
    def test_growth_percentage(self, current, previous, expected):
        assert growth_percentage(current, previous) == pytest.approx(expected)

    def test_growth_from_zero_is_infinite(self):
        assert math.isinf(growth_percentage(10.0, 0.0))

    def test_windows_are_contiguous(self):
        now = datetime(2024, 6, 30, tzinfo=timezone.utc)

        (prev_start, prev_end), (cur_start, cur_end) = growth_windows(now, 30)

        assert cur_end == now
        assert prev_end == cur_start
        assert cur_end - cur_start == prev_end - prev_start
        assert prev_start == datetime(2024, 5, 1, tzinfo=timezone.utc)

    def test_rank_puts_infinite_growth_first(self):
        ranked = rank_growth([record("a", 10.0), record("b", math.inf), record("c", -20.0), record("d", 55.5)])

        assert [r.channel_name for r in ranked] == ["b", "d", "a", "c"]
        assert [r.rank for r in ranked] == [1, 2, 3, 4]


class TestFilterAndSort:

    def test_sort_by_ratio(self):
        videos = [analyzed("a", 1000, 2.0), analyzed("b", 500, 5.0), analyzed("c", 800, 3.0)]

        assert [v.video_id for v in filter_and_sort(videos)] == ["b", "c", "a"]

    def test_sort_by_views_with_min_views(self):
        videos = [analyzed("a", 1000, 2.0), analyzed("b", 500, 5.0), analyzed("c", 800, 3.0)]

        result = filter_and_sort(videos, min_views=800, sort_by="views")

        assert [v.video_id for v in result] == ["a", "c"]

    def test_unknown_sort_order(self):
        with pytest.raises(ValueError):
            filter_and_sort([], sort_by="date")
