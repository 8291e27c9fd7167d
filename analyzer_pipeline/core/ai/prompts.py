"""
Prompt templates sent to Gemini
"""

from typing import List

MAX_COMMENTS = 50
COMMENTS_CHAR_LIMIT = 8000
TRANSCRIPT_CHAR_LIMIT = 15000
INSIGHT_CHAR_LIMIT = 20000


def comments_summary(comments: List[str], language: str) -> str:
    text = "\n".join(comments[:MAX_COMMENTS])[:COMMENTS_CHAR_LIMIT]
    return (
        "Analyse and summarise the main topics, the overall sentiment (positive, negative, neutral) "
        "and any notable debates in the following YouTube comments. What is the audience's general "
        f"reaction? Answer in {language}, in 3-4 sentences:\n\n---\n{text}\n---"
    )


def transcript_summary(transcript: str, title: str, language: str) -> str:
    text = transcript[:TRANSCRIPT_CHAR_LIMIT]
    return (
        f'Based on the transcript of the YouTube video titled "{title}", summarise the key ideas, '
        "the core message and the most notable points. Keep it to 3-5 sentences focused on what the "
        f"video conveys. Answer in {language}:\n\n---\n{text}\n---"
    )


def audience_insight(comments: List[str], title: str, language: str) -> str:
    text = "\n".join(comments)[:INSIGHT_CHAR_LIMIT]
    return (
        f'You are an audience research analyst. Using the comments of the YouTube video "{title}", '
        "describe: 1) who the viewers are, 2) what they liked and disliked, 3) recurring questions "
        "and unmet needs, 4) content ideas suggested by the discussion. Use short headed sections. "
        f"Answer in {language}.\n\n---\n{text}\n---"
    )


def title_trends(titles: List[str], language: str) -> str:
    listing = "\n".join(f"- {t}" for t in titles)
    return (
        "These are the titles of YouTube videos that strongly outperformed their channel's average. "
        "Give an overall assessment of the title patterns that work (hooks, length, keywords, emotion) "
        "as `overallAssessment`, and propose 10 new titles following those trends as `trendingTitles`. "
        f"Write in {language}.\n\n{listing}"
    )
