"""
YouTube Channel Analyzer - Command Line Entry Point
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from analyzer_pipeline.core.analysis import ChannelGrowthAnalyzer, VideoListAnalyzer, ViralAnalyzer
from analyzer_pipeline.core.analysis.metrics import SORT_BY_RATIO, SORT_BY_VIEWS, filter_and_sort
from analyzer_pipeline.core.config import AppConfig, ConfigLoader, ConfigValidationError
from analyzer_pipeline.core.config.config_loader import MAX_TIMEFRAME_DAYS, MIN_TIMEFRAME_DAYS
from analyzer_pipeline.core.errors import AnalyzerError, ValidationError
from analyzer_pipeline.core.export import export_growth, export_videos, write_report
from analyzer_pipeline.core.session import AnalyzerSession
from analyzer_pipeline.core.youtube import split_identifiers
from shared.storage.storage_manager import StorageManager

DEFAULT_CONFIG = Path("config.yaml")


def setup_logging(config: AppConfig, storage: StorageManager, verbose: bool = False) -> logging.Logger:
    """Configure logging with file and console handlers."""
    log_file = Path(config.log_file) if config.log_file else storage.logs_path / "app.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Configure logging format
    log_format = "%(asctime)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, config.log_level, logging.INFO),
        format=log_format,
        datefmt=date_format,
        handlers=[
            logging.FileHandler(log_file, mode='a', encoding='utf-8'),
            logging.StreamHandler()
        ],
        force=True,
    )

    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logging.getLogger(__name__)


def load_configuration(config_path: Path) -> AppConfig:
    """Load and validate application configuration."""
    try:
        return ConfigLoader(config_path).load()
    except ConfigValidationError as e:
        print(f"Configuration validation failed: {e}", file=sys.stderr)
        sys.exit(1)


def banner(logger: logging.Logger, title: str):
    logger.info("=" * 60)
    logger.info(title)
    logger.info("=" * 60)


def collect_identifiers(values: List[str]) -> List[str]:
    identifiers = []
    for value in values:
        identifiers.extend(split_identifiers(value))
    return identifiers


def export_name(prefix: str) -> str:
    return f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"


def resolve_days(requested: Optional[int], default: int) -> int:
    """--days when given, else the configured timeframe; must lie within the config bounds."""
    days = default if requested is None else requested
    if not MIN_TIMEFRAME_DAYS <= days <= MAX_TIMEFRAME_DAYS:
        raise ValidationError(
            f"Timeframe must be between {MIN_TIMEFRAME_DAYS} and {MAX_TIMEFRAME_DAYS} days, got {days}"
        )
    return days


def read_transcript(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(f"Cannot read transcript {path}: {e}") from e


def cmd_login(session: AnalyzerSession, args, logger: logging.Logger) -> int:
    found = session.login(args.key)
    print(f"Access granted. Key valid until {found.expiration_date}.")
    return 0


def cmd_logout(session: AnalyzerSession, args, logger: logging.Logger) -> int:
    session.logout()
    print("Stored credentials and results cleared.")
    return 0


def cmd_analyze_videos(session: AnalyzerSession, args, logger: logging.Logger) -> int:
    days = resolve_days(args.days, session.config.timeframe_days)
    session.require_access()
    session.load_keys()

    banner(logger, "VIDEO ANALYSIS")
    analyzer = ViralAnalyzer(
        session.youtube_pool,
        session.gemini_client(),
        multiplier=session.config.outlier_multiplier,
        top_n=session.config.top_n,
        max_comments=session.config.max_comments,
        max_workers=session.config.max_workers,
    )
    try:
        results = analyzer.analyze(collect_identifiers(args.channels), days)
    finally:
        session.save()

    session.state.video_analysis_results = results
    session.state.title_trend_analysis = None
    session.save()

    displayed = filter_and_sort(results, args.min_views, args.sort)
    print(f"\nShowing {len(displayed)} of {len(results)} result(s)\n")
    for rank, video in enumerate(displayed, start=1):
        print(f"#{rank} {video.title}")
        print(f"    {video.url}  |  {video.channel_name}")
        print(f"    Views: {video.views:,}  |  Channel avg: {round(video.channel_average_views):,}  |  Ratio: {video.ratio:.2f}x")
        print(f"    Audience: {video.comments_summary}\n")

    if args.export and displayed:
        path = export_videos(displayed, session.storage.exports_path / export_name("video_analysis"))
        print(f"Exported to {path}")
    return 0


def cmd_growth(session: AnalyzerSession, args, logger: logging.Logger) -> int:
    days = resolve_days(args.days, session.config.timeframe_days)
    session.require_access()
    session.load_keys(need_gemini=False)

    banner(logger, "CHANNEL GROWTH")
    analyzer = ChannelGrowthAnalyzer(session.youtube_pool)
    try:
        records = analyzer.analyze(collect_identifiers(args.channels), days)
    finally:
        session.save()

    session.state.channel_growth_results = records
    session.state.growth_timeframe_days = days
    session.save()

    print(f"\nChannel growth ranking (last {days} days vs previous {days} days)\n")
    for record in records:
        growth = "new activity" if record.is_infinite_growth else f"{record.growth_percentage:+.2f}%"
        print(
            f"#{record.rank} {record.channel_name}: {growth}  "
            f"({round(record.previous_period_avg_views):,} -> {round(record.current_period_avg_views):,} avg views, "
            f"{record.previous_video_count} -> {record.current_video_count} videos)"
        )

    if args.export and records:
        path = export_growth(records, days, session.storage.exports_path / export_name("channel_growth"))
        print(f"\nExported to {path}")
    return 0


def cmd_video_list(session: AnalyzerSession, args, logger: logging.Logger) -> int:
    session.require_access()
    session.load_keys()
    urls = [u.strip() for value in args.urls for u in value.splitlines() if u.strip()]
    if not urls:
        raise ValidationError("Enter at least one YouTube video URL.")

    banner(logger, "VIDEO LIST ANALYSIS")
    analyzer = VideoListAnalyzer(session.youtube_pool, session.gemini_client())
    try:
        results = analyzer.analyze(urls)
    finally:
        session.save()

    session.state.video_list_results = results
    session.save()

    for result in results:
        if result.status == "completed":
            print(f"[OK] {result.title} ({len(result.all_comments)} comments)")
            print(f"{result.audience_insight}\n")
            if args.reports:
                print(f"     Report: {write_report(result, session.storage.reports_path)}\n")
        else:
            print(f"[ERROR] {result.title}: {result.error}\n")
    return 0


def cmd_summarize_video(session: AnalyzerSession, args, logger: logging.Logger) -> int:
    session.require_access()
    video = session.state.find_video(args.video_id)
    if video is None:
        raise ValidationError(f"No analysed video with id {args.video_id}. Run analyze-videos first.")

    transcript = read_transcript(args.transcript)
    session.load_keys()
    try:
        video.video_summary = session.gemini_client().summarize_transcript(transcript, video.title)
    finally:
        session.save()

    print(f"Summary for {video.title}:\n{video.video_summary}")
    return 0


def cmd_title_trends(session: AnalyzerSession, args, logger: logging.Logger) -> int:
    session.require_access()
    titles = [v.title for v in session.state.video_analysis_results]
    if not titles:
        raise ValidationError("No analysed videos stored. Run analyze-videos first.")

    session.load_keys()
    try:
        analysis = session.gemini_client().analyze_title_trends(titles)
    finally:
        session.save()

    session.state.title_trend_analysis = analysis
    session.save()

    print(f"Overall assessment:\n{analysis.overall_assessment}\n\nTrending titles:")
    for index, title in enumerate(analysis.trending_titles, start=1):
        print(f"  {index}. {title}")
    return 0


def cmd_export(session: AnalyzerSession, args, logger: logging.Logger) -> int:
    if args.kind == "videos":
        results = filter_and_sort(session.state.video_analysis_results, args.min_views, args.sort)
        if not results:
            raise ValidationError("No stored video analysis results to export.")
        path = export_videos(results, session.storage.exports_path / export_name("video_analysis"))
    else:
        records = session.state.channel_growth_results
        if not records:
            raise ValidationError("No stored channel growth results to export.")
        path = export_growth(records, session.state.growth_timeframe_days,
                             session.storage.exports_path / export_name("channel_growth"))
    print(f"Exported to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yt-channel-analyzer",
        description="YouTube Channel Analyzer - outlier videos, channel growth and audience insight",
    )
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG, help="Path to config.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Validate and store an access key")
    p.add_argument("key")
    p.set_defaults(handler=cmd_login)

    p = sub.add_parser("logout", help="Clear stored credentials and results")
    p.set_defaults(handler=cmd_logout)

    p = sub.add_parser("analyze-videos", help="Find outlier videos across channels")
    p.add_argument("channels", nargs="+", help="Channel URLs, IDs, @handles or names")
    p.add_argument("--days", type=int, default=None, help="Trailing window in days")
    p.add_argument("--min-views", type=int, default=0)
    p.add_argument("--sort", choices=[SORT_BY_RATIO, SORT_BY_VIEWS], default=SORT_BY_RATIO)
    p.add_argument("--export", action="store_true", help="Write a CSV export")
    p.set_defaults(handler=cmd_analyze_videos)

    p = sub.add_parser("growth", help="Rank channels by growth of average views")
    p.add_argument("channels", nargs="+")
    p.add_argument("--days", type=int, default=None)
    p.add_argument("--export", action="store_true")
    p.set_defaults(handler=cmd_growth)

    p = sub.add_parser("video-list", help="Details, comments and AI insight per video URL")
    p.add_argument("urls", nargs="+")
    p.add_argument("--reports", action="store_true", help="Write a .txt report per video")
    p.set_defaults(handler=cmd_video_list)

    p = sub.add_parser("summarize-video", help="Summarise a stored video from its transcript")
    p.add_argument("video_id")
    p.add_argument("--transcript", required=True, help="Text file holding the transcript")
    p.set_defaults(handler=cmd_summarize_video)

    p = sub.add_parser("title-trends", help="AI title trend analysis of stored outlier videos")
    p.set_defaults(handler=cmd_title_trends)

    p = sub.add_parser("export", help="Export stored results to CSV")
    p.add_argument("kind", choices=["videos", "growth"])
    p.add_argument("--min-views", type=int, default=0)
    p.add_argument("--sort", choices=[SORT_BY_RATIO, SORT_BY_VIEWS], default=SORT_BY_RATIO)
    p.set_defaults(handler=cmd_export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution entry for the analyzer."""
    args = build_parser().parse_args(argv)

    config = load_configuration(args.config)
    storage_root = Path(config.storage_root)
    if not storage_root.is_absolute():
        storage_root = (args.config.resolve().parent / storage_root).resolve()
    storage = StorageManager(str(storage_root))

    logger = setup_logging(config, storage, args.verbose)
    logger.debug(f"Loaded {config!r}")

    session = AnalyzerSession(config, storage)
    try:
        return args.handler(session, args, logger)
    except AnalyzerError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
