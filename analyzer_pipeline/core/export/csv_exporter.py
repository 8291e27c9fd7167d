"""
CSV Exporter
Writes analysis results as UTF-8 CSV with a BOM so spreadsheet apps detect the encoding.
"""

import csv
import logging
import math
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from ..analysis.models import AnalyzedVideo, ChannelGrowthRecord

logger = logging.getLogger(__name__)

CSV_ENCODING = "utf-8-sig"

VIDEO_COLUMNS = [
    "Rank", "Video Title", "Video URL", "Channel Name", "Channel URL",
    "Views", "Channel Avg Views", "Ratio", "Comments Summary", "Video Summary",
]


def growth_columns(days: int) -> List[str]:
    return [
        "Rank", "Channel Name", "Channel URL", "Growth (%)",
        f"Avg Views (last {days} days)", "Avg Views (previous period)",
        "Videos (current)", "Videos (previous)",
    ]


def format_growth(value: float) -> str:
    return "Infinity" if math.isinf(value) and value > 0 else f"{value:.2f}"


def videos_frame(videos: Sequence[AnalyzedVideo]) -> pd.DataFrame:
    rows = [
        [
            rank,
            video.title,
            video.url,
            video.channel_name,
            video.channel_url,
            video.views,
            round(video.channel_average_views),
            f"{video.ratio:.2f}",
            video.comments_summary,
            video.video_summary or "",
        ]
        for rank, video in enumerate(videos, start=1)
    ]
    return pd.DataFrame(rows, columns=VIDEO_COLUMNS)


def growth_frame(records: Sequence[ChannelGrowthRecord], days: int) -> pd.DataFrame:
    rows = [
        [
            record.rank,
            record.channel_name,
            record.channel_url,
            format_growth(record.growth_percentage),
            round(record.current_period_avg_views),
            round(record.previous_period_avg_views),
            record.current_video_count,
            record.previous_video_count,
        ]
        for record in records
    ]
    return pd.DataFrame(rows, columns=growth_columns(days))


def write_csv(df: pd.DataFrame, path: Path) -> Path:
    """
    Comma-separated, minimal quoting: fields holding a comma, quote or newline
    are quoted and inner quotes doubled.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(
        path,
        index=False,
        encoding=CSV_ENCODING,
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    logger.info(f"Exported {len(df)} row(s) to {path}")
    return path


def export_videos(videos: Sequence[AnalyzedVideo], path: Path) -> Path:
    return write_csv(videos_frame(videos), path)


def export_growth(records: Sequence[ChannelGrowthRecord], days: int, path: Path) -> Path:
    return write_csv(growth_frame(records, days), path)


def read_export(path: Path) -> pd.DataFrame:
    """Reads an exported CSV back with every cell as text."""
    return pd.read_csv(path, encoding=CSV_ENCODING, dtype=str, keep_default_na=False)
