"""
Generative-AI (Gemini) integration module
"""

from .gemini_client import GeminiClient, TitleTrendAnalysis

__all__ = ["GeminiClient", "TitleTrendAnalysis"]
