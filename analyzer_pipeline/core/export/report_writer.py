"""
Plaintext report for a completed video-list analysis
"""

import logging
import re
from pathlib import Path

from ..analysis.models import DetailedVideoAnalysis

logger = logging.getLogger(__name__)

_HEAVY = "=" * 50
_LIGHT = "-" * 50


def render_report(result: DetailedVideoAnalysis) -> str:
    tags = ", ".join(result.tags) if result.tags else "(no tags)"
    comments = "\n\n---\n\n".join(result.all_comments)
    return "\n".join([
        _HEAVY,
        "VIDEO ANALYSIS REPORT",
        _HEAVY,
        "",
        f"VIDEO URL: {result.url}",
        f"TITLE: {result.title}",
        "",
        _LIGHT,
        "VIDEO DESCRIPTION",
        _LIGHT,
        result.description or "(no description)",
        "",
        _LIGHT,
        "TAGS",
        _LIGHT,
        tags,
        "",
        _HEAVY,
        "AUDIENCE INSIGHT (AI)",
        _HEAVY,
        result.audience_insight,
        "",
        _HEAVY,
        f"ALL COMMENTS ({len(result.all_comments)} comments)",
        _HEAVY,
        comments,
        "",
    ])


def report_filename(title: str, video_id: str) -> str:
    """ASCII-flattened title (at most 50 characters) followed by the video id."""
    safe = re.sub(r"[^a-z0-9]", "_", title, flags=re.IGNORECASE).lower()
    return f"analysis_{safe[:50]}_{video_id}.txt"


def write_report(result: DetailedVideoAnalysis, directory: Path) -> Path:
    """
    Raises:
        ValueError: The analysis did not complete.
    """
    if result.status != "completed":
        raise ValueError(f"Video {result.video_id} has no completed analysis")
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / report_filename(result.title, result.video_id)
    path.write_text(render_report(result), encoding="utf-8")
    logger.info(f"Report written to {path}")
    return path
