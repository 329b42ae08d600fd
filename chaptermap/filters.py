"""Denylist filtering of transcript segments and chapter titles."""

from chaptermap.config import AlignmentConfig
from chaptermap.models import Chapter, InvalidInputError, TranscriptSegment


def matches_any(text: str, phrases: list[str]) -> bool:
    """Case-insensitive substring match against any phrase."""
    lowered = text.lower()
    return any(phrase.lower() in lowered for phrase in phrases if phrase)


def filter_transcript(
    segments: list[TranscriptSegment], phrases: list[str]
) -> list[TranscriptSegment]:
    return [s for s in segments if not matches_any(s.text, phrases)]


def filter_chapters(chapters: list[Chapter], phrases: list[str]) -> list[Chapter]:
    return [c for c in chapters if not matches_any(c.title, phrases)]


def fallback_chapter(title: str) -> Chapter:
    """A single chapter spanning the whole video."""
    return Chapter(title=title, start_time=0.0, end_time=None)


def apply_filters(
    segments: list[TranscriptSegment],
    chapters: list[Chapter],
    config: AlignmentConfig,
) -> tuple[list[TranscriptSegment], list[Chapter]]:
    """Apply the enabled filters and substitute the fallback chapter if none remain."""
    if segments is None or chapters is None:
        raise InvalidInputError("Transcript and chapters must be lists, got None")

    if config.enable_transcript_filtering:
        segments = filter_transcript(segments, config.filters.transcript_phrases)
    else:
        segments = list(segments)

    if config.enable_chapter_filtering:
        chapters = filter_chapters(chapters, config.filters.chapter_phrases)
    else:
        chapters = list(chapters)

    if not chapters:
        chapters = [fallback_chapter(config.fallback_chapter_title)]

    return segments, chapters
