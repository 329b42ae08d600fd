"""Transcript fetching via youtube-transcript-api, plus a JSON file loader."""

import json
import logging
from pathlib import Path

from chaptermap.models import TranscriptSegment
from chaptermap.timebase import TimeUnit, normalize_transcript, raw_items_from_dicts

logger = logging.getLogger(__name__)


def fetch_transcript(video_id: str, languages: list[str] | None = None) -> list[TranscriptSegment]:
    """Fetch captions for a video and return them normalized to seconds."""
    from youtube_transcript_api import YouTubeTranscriptApi

    api = YouTubeTranscriptApi()
    fetched = api.fetch(video_id, languages=languages or ["en"])
    rows = fetched.to_raw_data()
    logger.debug(f"Fetched {len(rows)} transcript items for {video_id}")

    # youtube-transcript-api reports start/duration in seconds
    return normalize_transcript(raw_items_from_dicts(rows, TimeUnit.SECONDS))


def load_transcript_file(path: str | Path) -> list[TranscriptSegment]:
    """Load a transcript from JSON.

    Accepts either a bare list of items (seconds) or an object
    ``{"unit": "ms" | "s", "items": [...]}``.
    """
    path = Path(path)
    data = json.loads(path.read_text())

    if isinstance(data, list):
        return normalize_transcript(raw_items_from_dicts(data, TimeUnit.SECONDS))
    if isinstance(data, dict) and "items" in data:
        unit = data.get("unit", TimeUnit.SECONDS.value)
        return normalize_transcript(raw_items_from_dicts(data["items"], unit))

    raise ValueError("Transcript file must be a list of items or contain an 'items' list")
