"""
Video List Analyzer
Details, every comment and an AI audience insight for a list of video URLs.
"""

import logging
from typing import Callable, List, Optional

from ..ai.gemini_client import GeminiClient
from ..errors import AllCredentialsExhaustedError, ProviderError
from ..keys.key_pool import ApiKeyPool
from ..keys.key_rotator import KeyRotator
from ..youtube.video_url import extract_video_id
from ..youtube.youtube_client import YouTubeClient, client_for_key
from .models import DetailedVideoAnalysis

logger = logging.getLogger(__name__)

STATUS_LOADING = "loading"
STATUS_COMPLETED = "completed"
STATUS_ERROR = "error"

INVALID_URL_TEXT = "Invalid URL"
NOT_PROCESSED_TEXT = "Not processed: the batch stopped after all API keys were exhausted."


class VideoListAnalyzer:
    """
    Processes video URLs one after another.

    An invalid URL or a failing video is marked as an error and the batch
    continues. When a key pool is exhausted the current and remaining videos
    are marked as errors and the batch stops.
    """

    def __init__(
        self,
        youtube_pool: ApiKeyPool,
        gemini: GeminiClient,
        comment_limit: Optional[int] = None,
        client_factory: Callable[[str], YouTubeClient] = client_for_key,
    ):
        self._rotator = KeyRotator(youtube_pool)
        self._gemini = gemini
        self._comment_limit = comment_limit
        self._client_factory = client_factory

    @staticmethod
    def prepare(urls: List[str]) -> List[DetailedVideoAnalysis]:
        """Initial result rows: valid URLs are 'loading', invalid ones 'error'."""
        results = []
        for index, url in enumerate(urls):
            video_id = extract_video_id(url)
            if video_id is None:
                results.append(DetailedVideoAnalysis(
                    video_id=f"invalid-url-{index}", title=url, status=STATUS_ERROR, error=INVALID_URL_TEXT
                ))
            else:
                results.append(DetailedVideoAnalysis(video_id=video_id, title=url))
        return results

    def analyze(self, urls: List[str]) -> List[DetailedVideoAnalysis]:
        results = self.prepare(urls)
        pending = [r for r in results if r.status == STATUS_LOADING]
        logger.info(f"Analysing {len(pending)} video(s) ({len(results) - len(pending)} invalid URL(s))")

        for position, result in enumerate(pending):
            logger.info(f"[{position + 1}/{len(pending)}] Processing video {result.video_id}")
            try:
                self._analyze_video(result)
            except AllCredentialsExhaustedError as e:
                logger.error(str(e))
                result.status, result.error = STATUS_ERROR, str(e)
                for remaining in pending[position + 1:]:
                    remaining.status, remaining.error = STATUS_ERROR, NOT_PROCESSED_TEXT
                break
            except ProviderError as e:
                logger.error(f"Video {result.video_id} failed: {e}")
                result.status, result.error = STATUS_ERROR, str(e)

        return results

    def _analyze_video(self, result: DetailedVideoAnalysis):
        video_id = result.video_id

        def fetch(key: str):
            client = self._client_factory(key)
            details = client.fetch_video_details(video_id)
            comments = client.fetch_all_video_comments(video_id, self._comment_limit)
            return details, comments

        details, comments = self._rotator.run(fetch)
        result.title = details.title
        result.description = details.description
        result.tags = list(details.tags)
        result.thumbnail_url = details.thumbnail_url
        result.comment_count = details.comment_count
        result.all_comments = comments

        logger.info(f"[{details.title}] {len(comments)} comment(s) fetched, requesting audience insight")
        result.audience_insight = self._gemini.analyze_audience_insight(comments, details.title)
        result.status = STATUS_COMPLETED
