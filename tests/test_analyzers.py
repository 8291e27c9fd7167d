"""
Tests for the analysis flows with fake YouTube clients
"""

import math
from unittest.mock import MagicMock

import pytest

from analyzer_pipeline.core.analysis.growth_analyzer import ChannelGrowthAnalyzer
from analyzer_pipeline.core.analysis.video_list_analyzer import NOT_PROCESSED_TEXT, VideoListAnalyzer
from analyzer_pipeline.core.analysis.viral_analyzer import COMMENTS_FAILED_TEXT, ViralAnalyzer
from analyzer_pipeline.core.errors import (
    AllCredentialsExhaustedError,
    FatalProviderError,
    NotFoundError,
    QuotaExhaustedError,
    TransientProviderError,
    ValidationError,
)
from analyzer_pipeline.core.youtube.video_info import VideoDetails
from tests.conftest import make_channel, make_video

QUOTA = QuotaExhaustedError("quota", provider="youtube", reason="quotaExceeded")


class FakeYouTube:
    """
    Per-key fake of YouTubeClient. Keys listed in `exhausted` raise a quota
    error on every call; everything else is served from the dictionaries.
    """

    def __init__(self, channels=None, videos=None, comments=None, details=None, exhausted=()):
        self.channels = channels or {}
        self.videos = videos or {}
        self.comments = comments or {}
        self.details = details or {}
        self.exhausted = set(exhausted)
        self.calls = []

    def factory(self, key):
        fake = self

        class Client:
            def _check(self, name):
                fake.calls.append((key, name))
                if key in fake.exhausted:
                    raise QUOTA

            def resolve_channel(self, identifier):
                self._check("resolve")
                result = fake.channels.get(identifier)
                if isinstance(result, Exception):
                    raise result
                return result

            def fetch_recent_videos(self, channel_id, days, now=None):
                self._check("recent")
                return fake.videos.get(channel_id, [])

            def fetch_videos_in_range(self, channel_id, start, end):
                self._check("range")
                return fake.videos.get((channel_id, start.date().isoformat()), [])

            def fetch_video_comments(self, video_id, max_results=50):
                self._check("comments")
                result = fake.comments.get(video_id, [])
                if isinstance(result, Exception):
                    raise result
                return result

            def fetch_video_details(self, video_id):
                self._check("details")
                result = fake.details.get(video_id)
                if result is None:
                    raise NotFoundError(f"Video not found: {video_id}", provider="youtube")
                return result

            def fetch_all_video_comments(self, video_id, limit=None):
                self._check("all_comments")
                return fake.comments.get(video_id, [])

        return Client()


@pytest.fixture
def gemini():
    mock = MagicMock()
    mock.summarize_comments.side_effect = lambda comments: f"summary of {len(comments)}"
    mock.analyze_audience_insight.side_effect = lambda comments, title: f"insight on {title}"
    return mock


class TestViralAnalyzer:

    def test_outliers_with_comment_summaries(self, youtube_pool, gemini):
        fake = FakeYouTube(
            channels={"@one": make_channel("UC1", "One")},
            videos={"UC1": [make_video("a", 10), make_video("b", 10), make_video("c", 10), make_video("d", 100)]},
            comments={"d": ["wow", "nice"]},
        )
        analyzer = ViralAnalyzer(youtube_pool, gemini, client_factory=fake.factory)

        results = analyzer.analyze(["@one"], 30)

        assert len(results) == 1
        video = results[0]
        assert video.video_id == "d"
        assert video.channel_name == "One"
        assert video.channel_average_views == 32.5
        assert video.ratio == pytest.approx(100 / 32.5)
        assert video.comments_summary == "summary of 2"

    def test_results_follow_input_order(self, youtube_pool, gemini):
        spike = [make_video("x1", 1), make_video("x2", 1), make_video("x3", 50)]
        fake = FakeYouTube(
            channels={"@a": make_channel("UCA"), "@b": make_channel("UCB")},
            videos={"UCA": spike, "UCB": [make_video("y1", 1), make_video("y2", 1), make_video("y3", 90)]},
        )
        analyzer = ViralAnalyzer(youtube_pool, gemini, max_workers=2, client_factory=fake.factory)

        results = analyzer.analyze(["@b", "@a"], 30)

        assert [v.channel_id for v in results] == ["UCB", "UCA"]

    def test_unknown_channel_is_skipped(self, youtube_pool, gemini):
        fake = FakeYouTube(channels={"@one": make_channel("UC1")}, videos={"UC1": []})
        analyzer = ViralAnalyzer(youtube_pool, gemini, client_factory=fake.factory)

        assert analyzer.analyze(["@missing", "@one"], 7) == []

    def test_rotates_youtube_keys(self, youtube_pool, gemini):
        fake = FakeYouTube(
            channels={"@one": make_channel("UC1")},
            videos={"UC1": [make_video("a", 1), make_video("b", 1), make_video("c", 30)]},
            exhausted={"yt-key-A"},
        )
        analyzer = ViralAnalyzer(youtube_pool, gemini, client_factory=fake.factory)

        results = analyzer.analyze(["@one"], 30)

        assert [v.video_id for v in results] == ["c"]
        assert youtube_pool.current_index == 1
        assert ("yt-key-A", "resolve") in fake.calls
        assert all(key == "yt-key-B" for key, name in fake.calls if name == "comments")

    def test_all_keys_exhausted_ends_the_batch(self, youtube_pool, gemini):
        fake = FakeYouTube(exhausted={"yt-key-A", "yt-key-B", "yt-key-C"})
        analyzer = ViralAnalyzer(youtube_pool, gemini, client_factory=fake.factory)

        with pytest.raises(AllCredentialsExhaustedError):
            analyzer.analyze(["@one", "@two"], 30)

    def test_comment_failures_do_not_drop_the_video(self, youtube_pool, gemini):
        gemini.summarize_comments.side_effect = FatalProviderError("blocked", provider="gemini")
        fake = FakeYouTube(
            channels={"@one": make_channel("UC1")},
            videos={"UC1": [make_video("a", 1), make_video("b", 1), make_video("c", 30)]},
            comments={"c": TransientProviderError("timeout", provider="youtube")},
        )
        analyzer = ViralAnalyzer(youtube_pool, gemini, client_factory=fake.factory)

        results = analyzer.analyze(["@one"], 30)

        assert results[0].comments_summary == COMMENTS_FAILED_TEXT
        gemini.summarize_comments.assert_called_once_with([])

    def test_every_channel_failing_raises(self, youtube_pool, gemini):
        fake = FakeYouTube(channels={"@one": FatalProviderError("forbidden", provider="youtube")})
        analyzer = ViralAnalyzer(youtube_pool, gemini, client_factory=fake.factory)

        with pytest.raises(FatalProviderError):
            analyzer.analyze(["@one"], 30)

    def test_partial_failure_keeps_other_channels(self, youtube_pool, gemini):
        fake = FakeYouTube(
            channels={"@bad": FatalProviderError("forbidden", provider="youtube"), "@ok": make_channel("UC1")},
            videos={"UC1": [make_video("a", 1), make_video("b", 1), make_video("c", 30)]},
        )
        analyzer = ViralAnalyzer(youtube_pool, gemini, client_factory=fake.factory)

        assert [v.video_id for v in analyzer.analyze(["@bad", "@ok"], 30)] == ["c"]

    @pytest.mark.parametrize("identifiers, days", [([], 30), (["@one"], 0)])
    def test_invalid_input(self, youtube_pool, gemini, identifiers, days):
        analyzer = ViralAnalyzer(youtube_pool, gemini, client_factory=FakeYouTube().factory)

        with pytest.raises(ValidationError):
            analyzer.analyze(identifiers, days)


class TestChannelGrowthAnalyzer:

    def test_ranks_channels_by_growth(self, youtube_pool, fixed_now):
        # fixed_now is 2024-06-30; 30-day windows start on 2024-05-31 and 2024-05-01
        fake = FakeYouTube(
            channels={"@up": make_channel("UCU", "Up"), "@down": make_channel("UCD", "Down"),
                      "@new": make_channel("UCN", "New")},
            videos={
                ("UCU", "2024-05-31"): [make_video("u1", 150)],
                ("UCU", "2024-05-01"): [make_video("u0", 100)],
                ("UCD", "2024-05-31"): [make_video("d1", 50), make_video("d2", 50)],
                ("UCD", "2024-05-01"): [make_video("d0", 100)],
                ("UCN", "2024-05-31"): [make_video("n1", 10)],
            },
        )
        analyzer = ChannelGrowthAnalyzer(youtube_pool, client_factory=fake.factory)

        records = analyzer.analyze(["@down", "@up", "@new"], 30, now=fixed_now)

        assert [r.channel_name for r in records] == ["New", "Up", "Down"]
        assert [r.rank for r in records] == [1, 2, 3]
        assert math.isinf(records[0].growth_percentage)
        assert records[1].growth_percentage == pytest.approx(50.0)
        assert records[2].growth_percentage == pytest.approx(-50.0)
        assert (records[2].current_video_count, records[2].previous_video_count) == (2, 1)

    def test_no_videos_anywhere_is_zero_growth(self, youtube_pool, fixed_now):
        fake = FakeYouTube(channels={"@quiet": make_channel("UCQ")})
        analyzer = ChannelGrowthAnalyzer(youtube_pool, client_factory=fake.factory)

        records = analyzer.analyze(["@quiet"], 7, now=fixed_now)

        assert records[0].growth_percentage == 0.0

    def test_quota_rotation_mid_channel(self, youtube_pool, fixed_now):
        fake = FakeYouTube(channels={"@one": make_channel("UC1")}, exhausted={"yt-key-A", "yt-key-B"})
        analyzer = ChannelGrowthAnalyzer(youtube_pool, client_factory=fake.factory)

        analyzer.analyze(["@one"], 7, now=fixed_now)

        assert youtube_pool.current_index == 2
        assert [name for key, name in fake.calls if key == "yt-key-C"] == ["resolve", "range", "range"]

    def test_all_keys_exhausted(self, youtube_pool, fixed_now):
        fake = FakeYouTube(exhausted={"yt-key-A", "yt-key-B", "yt-key-C"})
        analyzer = ChannelGrowthAnalyzer(youtube_pool, client_factory=fake.factory)

        with pytest.raises(AllCredentialsExhaustedError):
            analyzer.analyze(["@one"], 7, now=fixed_now)


def details(video_id, title):
    return VideoDetails(video_id=video_id, title=title, description="desc", tags=["t"], comment_count=2)


class TestVideoListAnalyzer:

    def test_invalid_urls_are_marked(self):
        results = VideoListAnalyzer.prepare(["https://example.com/x", "https://youtu.be/abcdefghijk"])

        assert results[0].video_id == "invalid-url-0"
        assert results[0].status == "error"
        assert results[0].error == "Invalid URL"
        assert results[1].video_id == "abcdefghijk"
        assert results[1].status == "loading"

    def test_completed_and_failed_videos(self, youtube_pool, gemini):
        fake = FakeYouTube(
            details={"aaaaaaaaaaa": details("aaaaaaaaaaa", "First")},
            comments={"aaaaaaaaaaa": ["c1", "c2"]},
        )
        analyzer = VideoListAnalyzer(youtube_pool, gemini, client_factory=fake.factory)

        results = analyzer.analyze([
            "https://www.youtube.com/watch?v=aaaaaaaaaaa",
            "not a url",
            "https://youtu.be/bbbbbbbbbbb",
        ])

        assert [r.status for r in results] == ["completed", "error", "error"]
        assert results[0].title == "First"
        assert results[0].all_comments == ["c1", "c2"]
        assert results[0].audience_insight == "insight on First"
        assert "not found" in results[2].error

    def test_exhaustion_stops_the_batch(self, youtube_pool, gemini):
        fake = FakeYouTube(
            details={"aaaaaaaaaaa": details("aaaaaaaaaaa", "First"), "bbbbbbbbbbb": details("bbbbbbbbbbb", "B")},
        )
        gemini.analyze_audience_insight.side_effect = AllCredentialsExhaustedError("Gemini", 2)
        analyzer = VideoListAnalyzer(youtube_pool, gemini, client_factory=fake.factory)

        results = analyzer.analyze(["aaaaaaaaaaa", "bbbbbbbbbbb"])

        assert [r.status for r in results] == ["error", "error"]
        assert "Gemini" in results[0].error
        assert results[1].error == NOT_PROCESSED_TEXT
        assert gemini.analyze_audience_insight.call_count == 1
