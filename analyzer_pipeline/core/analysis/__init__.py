"""
Analysis flows and aggregation functions
"""

from .growth_analyzer import ChannelGrowthAnalyzer
from .models import AnalyzedVideo, ChannelGrowthRecord, DetailedVideoAnalysis
from .video_list_analyzer import VideoListAnalyzer
from .viral_analyzer import ViralAnalyzer

__all__ = [
    "AnalyzedVideo",
    "ChannelGrowthAnalyzer",
    "ChannelGrowthRecord",
    "DetailedVideoAnalysis",
    "VideoListAnalyzer",
    "ViralAnalyzer",
]
