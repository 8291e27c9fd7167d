"""
YouTube API Client
Resolves channel identifiers and fetches videos, details and comments.
Every provider failure is raised as one of the structured error kinds.
"""

import json
import logging
import re
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..errors import (
    FatalProviderError,
    NotFoundError,
    ProviderError,
    QuotaExhaustedError,
    TransientProviderError,
)
from .channel_info import ChannelInfo
from .video_info import VideoDetails, VideoInfo

logger = logging.getLogger(__name__)

_PROVIDER = "youtube"

QUOTA_REASONS = frozenset({"quotaExceeded", "dailyLimitExceeded"})

CHANNEL_ID_RE = re.compile(r"^(UC[\w-]{22,})$")
CHANNEL_URL_RE = re.compile(r"youtube\.com/(channel/(UC[\w-]{22,})|c/([\w-]+)|@([\w.-]+))")
HANDLE_RE = re.compile(r"^@([\w.-]+)$")

MAX_RESULTS = 50


def extract_error_reason(error: HttpError) -> str:
    """
    Extracts the ``reason`` field from a YouTube API error body.

    Returns:
        The reason string (e.g. "quotaExceeded"), or "unknown" if the body
        cannot be parsed.
    """
    try:
        content = error.content.decode("utf-8") if isinstance(error.content, bytes) else error.content
        body = json.loads(content)
    except (AttributeError, TypeError, ValueError):
        return "unknown"
    details = body.get("error", {}) if isinstance(body, dict) else {}
    errors = details.get("errors") or []
    if errors and isinstance(errors[0], dict):
        return errors[0].get("reason", "unknown")
    return "unknown"


def classify_http_error(error: HttpError, context: str) -> ProviderError:
    """Maps an HttpError to a structured error kind."""
    status = getattr(error.resp, "status", 0)
    reason = extract_error_reason(error)
    message = f"YouTube API error on {context}: HTTP {status} ({reason})"

    if reason in QUOTA_REASONS:
        return QuotaExhaustedError(message, provider=_PROVIDER, reason=reason)
    if status == 404 or reason.endswith("NotFound"):
        return NotFoundError(message, provider=_PROVIDER, reason=reason)
    if status >= 500:
        return TransientProviderError(message, provider=_PROVIDER, reason=reason)
    return FatalProviderError(message, provider=_PROVIDER, reason=reason)


def _to_int(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def _thumbnail(snippet: Dict[str, Any]) -> str:
    thumbnails = snippet.get("thumbnails", {})
    for size in ("high", "medium", "default"):
        url = thumbnails.get(size, {}).get("url")
        if url:
            return url
    return ""


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class YouTubeClient:
    """
    YouTube Data API v3 client bound to a single API key.

    Identifier resolution order:
    - Channel ID (UC + 22 characters or more)
    - Channel URL (/channel/UC..., /c/name, /@handle) or bare @handle
    - Free-text channel search
    """

    def __init__(self, api_key: str, service: Any = None):
        """Initialize the YouTube API service."""
        # static_discovery=False prevents the 'file_cache' warning in logs
        self._service = service or build("youtube", "v3", developerKey=api_key, static_discovery=False)

    def _execute(self, request, context: str) -> Dict[str, Any]:
        try:
            return request.execute()
        except HttpError as e:
            raise classify_http_error(e, context) from e
        except (httplib2.HttpLib2Error, OSError) as e:
            raise TransientProviderError(
                f"Network error on {context}: {e}", provider=_PROVIDER, reason="network"
            ) from e

    def resolve_channel(self, identifier: str) -> Optional[ChannelInfo]:
        """
        Main entry point for channel resolution.

        Returns:
            ChannelInfo, or None when nothing matches the identifier.
        """
        value = (identifier or "").strip()
        if not value:
            return None

        url_match = CHANNEL_URL_RE.search(value)
        handle_match = HANDLE_RE.match(value)

        if CHANNEL_ID_RE.match(value):
            logger.debug(f"Resolving by channel ID: {value}")
            request = self._service.channels().list(part="snippet", id=value)
        elif url_match or handle_match:
            if url_match:
                handle = url_match.group(4) or url_match.group(3)
            else:
                handle = handle_match.group(1)
            if handle:
                logger.debug(f"Resolving by handle: @{handle}")
                request = self._service.channels().list(part="snippet", forHandle=handle)
            else:
                logger.debug(f"Resolving by channel URL: {url_match.group(2)}")
                request = self._service.channels().list(part="snippet", id=url_match.group(2))
        else:
            return self._search_channel(value)

        try:
            response = self._execute(request, "channels.list")
        except NotFoundError:
            return None

        items = response.get("items", [])
        if not items:
            return None
        return ChannelInfo(channel_id=items[0]["id"], title=items[0].get("snippet", {}).get("title", ""))

    def _search_channel(self, query: str) -> Optional[ChannelInfo]:
        """Free-text fallback using search.list(type=channel)."""
        logger.debug(f"Resolving by search: {query!r}")
        response = self._execute(
            self._service.search().list(part="snippet", q=query, type="channel", maxResults=1),
            "search.list",
        )
        items = response.get("items", [])
        if not items:
            return None
        snippet = items[0].get("snippet", {})
        channel_id = snippet.get("channelId") or items[0].get("id", {}).get("channelId")
        if not channel_id:
            return None
        return ChannelInfo(channel_id=channel_id, title=snippet.get("channelTitle", ""))

    def fetch_videos_in_range(self, channel_id: str, start: datetime, end: datetime) -> List[VideoInfo]:
        """
        Fetches up to 50 videos published between `start` and `end`, newest first,
        with their view counts.
        """
        search = self._execute(
            self._service.search().list(
                part="snippet",
                channelId=channel_id,
                order="date",
                type="video",
                maxResults=MAX_RESULTS,
                publishedAfter=_rfc3339(start),
                publishedBefore=_rfc3339(end),
            ),
            "search.list",
        )
        video_ids = [
            item.get("id", {}).get("videoId")
            for item in search.get("items", [])
            if item.get("id", {}).get("videoId")
        ]
        if not video_ids:
            return []
        return self.fetch_videos(video_ids)

    def fetch_recent_videos(self, channel_id: str, days: int, now: Optional[datetime] = None) -> List[VideoInfo]:
        """Videos from the trailing `days`-day window ending at `now`."""
        end = now or datetime.now(timezone.utc)
        return self.fetch_videos_in_range(channel_id, end - timedelta(days=days), end)

    def fetch_videos(self, video_ids: List[str]) -> List[VideoInfo]:
        """videos.list for up to 50 ids."""
        response = self._execute(
            self._service.videos().list(part="snippet,statistics", id=",".join(video_ids[:MAX_RESULTS])),
            "videos.list",
        )
        videos = []
        for item in response.get("items", []):
            snippet = item.get("snippet", {})
            stats = item.get("statistics", {})
            videos.append(VideoInfo(
                video_id=item.get("id", ""),
                title=snippet.get("title", ""),
                views=_to_int(stats.get("viewCount", 0)),
                thumbnail_url=_thumbnail(snippet),
            ))
        return videos

    def fetch_video_details(self, video_id: str) -> VideoDetails:
        """
        Raises:
            NotFoundError: The video does not exist or is private.
        """
        response = self._execute(
            self._service.videos().list(part="snippet,statistics", id=video_id),
            "videos.list",
        )
        items = response.get("items", [])
        if not items:
            raise NotFoundError(f"Video not found: {video_id}", provider=_PROVIDER, reason="videoNotFound")

        snippet = items[0].get("snippet", {})
        stats = items[0].get("statistics", {})
        return VideoDetails(
            video_id=video_id,
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            tags=list(snippet.get("tags", [])),
            thumbnail_url=_thumbnail(snippet),
            comment_count=_to_int(stats["commentCount"]) if "commentCount" in stats else None,
        )

    def _comment_page(self, video_id: str, max_results: int, page_token: Optional[str]) -> Dict[str, Any]:
        return self._execute(
            self._service.commentThreads().list(
                part="snippet",
                videoId=video_id,
                order="relevance",
                textFormat="plainText",
                maxResults=max_results,
                pageToken=page_token,
            ),
            "commentThreads.list",
        )

    @staticmethod
    def _comment_texts(response: Dict[str, Any]) -> List[str]:
        return [
            item["snippet"]["topLevelComment"]["snippet"].get("textDisplay", "")
            for item in response.get("items", [])
            if item.get("snippet", {}).get("topLevelComment")
        ]

    def fetch_video_comments(self, video_id: str, max_results: int = MAX_RESULTS) -> List[str]:
        """
        Top-level comments ordered by relevance, one page (at most 50).
        Disabled comments yield an empty list.
        """
        try:
            response = self._comment_page(video_id, min(max_results, MAX_RESULTS), None)
        except FatalProviderError as e:
            if e.reason == "commentsDisabled":
                logger.info(f"Comments are disabled for video {video_id}")
                return []
            raise
        return self._comment_texts(response)

    def fetch_all_video_comments(self, video_id: str, limit: Optional[int] = None) -> List[str]:
        """Every top-level comment, following nextPageToken until exhausted or `limit` is reached."""
        comments: List[str] = []
        page_token = None
        while True:
            try:
                response = self._comment_page(video_id, MAX_RESULTS, page_token)
            except FatalProviderError as e:
                if e.reason == "commentsDisabled":
                    logger.info(f"Comments are disabled for video {video_id}")
                    return comments
                raise

            comments.extend(self._comment_texts(response))
            if limit is not None and len(comments) >= limit:
                return comments[:limit]

            page_token = response.get("nextPageToken")
            if not page_token:
                return comments


_local = threading.local()


def client_for_key(api_key: str) -> YouTubeClient:
    """
    Returns a YouTubeClient for `api_key`, cached per thread.
    The underlying httplib2 transport is not thread-safe.
    """
    cache = getattr(_local, "clients", None)
    if cache is None:
        cache = _local.clients = {}
    client = cache.get(api_key)
    if client is None:
        client = cache[api_key] = YouTubeClient(api_key)
    return client
