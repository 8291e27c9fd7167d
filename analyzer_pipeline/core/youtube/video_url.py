"""
Video URL parsing helpers
"""

import re
from typing import List, Optional
from urllib.parse import parse_qs, urlparse

_VIDEO_ID_RE = re.compile(r"^[\w-]{11}$")


def extract_video_id(url: str) -> Optional[str]:
    """
    Extracts the 11-character video ID from a YouTube URL or a bare ID.
    Supports watch?v=, youtu.be/, /shorts/, /embed/ and /live/ forms.
    """
    if not url:
        return None
    candidate = url.strip()
    if _VIDEO_ID_RE.match(candidate):
        return candidate

    if "://" not in candidate:
        candidate = "https://" + candidate
    parsed = urlparse(candidate)
    host = (parsed.netloc or "").lower()
    path = parsed.path or ""

    video_id = None
    if host.endswith("youtu.be"):
        video_id = path.strip("/").split("/")[0]
    elif "youtube.com" in host:
        if path.startswith("/watch"):
            video_id = (parse_qs(parsed.query).get("v") or [None])[0]
        else:
            for prefix in ("/shorts/", "/embed/", "/live/", "/v/"):
                if path.startswith(prefix):
                    video_id = path[len(prefix):].split("/")[0]
                    break

    if video_id and _VIDEO_ID_RE.match(video_id):
        return video_id
    return None


def split_identifiers(text: str) -> List[str]:
    """Splits user input on newlines and commas, dropping blanks."""
    return [part.strip() for part in re.split(r"[\n,]+", text or "") if part.strip()]
