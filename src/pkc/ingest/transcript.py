"""YouTube transcript extraction."""

import re

from youtube_transcript_api import YouTubeTranscriptApi

from ..errors import ContentFetchError

VIDEO_HOST = "youtube.com"

_VIDEO_ID_PATTERNS = [
    r"(?:v=|youtu\.be/|embed/|shorts/|live/)([\w-]{11})",
]


def is_video_url(url: str) -> bool:
    return VIDEO_HOST in url


def extract_video_id(url: str) -> str:
    """Extract the video ID from a YouTube URL."""
    for pattern in _VIDEO_ID_PATTERNS:
        match = re.search(pattern, url)
        if match:
            return match.group(1)
    raise ContentFetchError(f"Could not extract video ID from {url}")


def fetch_transcript(url: str) -> str:
    """Caption text joined by newlines, timings dropped."""
    video_id = extract_video_id(url)
    try:
        transcript = YouTubeTranscriptApi().fetch(video_id)
    except Exception as e:
        raise ContentFetchError(f"No transcript for video {video_id}: {e}") from e
    return "\n".join(snippet.text for snippet in transcript)
