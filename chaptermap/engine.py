"""Orchestrator — fetches inputs and runs the alignment pipeline."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from chaptermap.aligners.strategies import AlignmentStrategy, strategy_from_config
from chaptermap.assembler import assemble
from chaptermap.config import AlignmentConfig
from chaptermap.filters import apply_filters
from chaptermap.models import Chapter, CombinedResult, InvalidInputError, TranscriptSegment
from chaptermap.sources.chapters import fetch_chapters as _fetch_chapters
from chaptermap.sources.transcript import fetch_transcript as _fetch_transcript

logger = logging.getLogger(__name__)

TranscriptFetcher = Callable[[str, list[str]], list[TranscriptSegment]]
ChapterFetcher = Callable[[str], list[Chapter]]


def combine_transcript_and_chapters(
    transcript: list[TranscriptSegment],
    chapters: list[Chapter],
    video_id: str,
    config: AlignmentConfig | None = None,
    strategy: AlignmentStrategy | None = None,
) -> CombinedResult:
    """Align transcript segments to chapters. Pure; no filtering or fetching.

    Args:
        transcript: Segments normalized to seconds.
        chapters: Chapters ordered by start time.
        video_id: Echoed into the result.
        config: Alignment options; defaults apply when omitted.
        strategy: Overrides the strategy named in ``config``.
    """
    if transcript is None or chapters is None:
        raise InvalidInputError("Transcript and chapters must be lists, got None")

    config = config or AlignmentConfig()
    overlap = config.overlap_offset_seconds

    if not transcript or not chapters:
        return CombinedResult.empty(video_id, overlap)

    strategy = strategy or strategy_from_config(config)
    alignment = strategy.align(transcript, chapters)
    return assemble(
        alignment,
        video_id=video_id,
        transcript_item_count=len(transcript),
        overlap_offset_seconds=overlap,
    )


def get_chapters_transcript(
    video_id: str,
    config: AlignmentConfig | None = None,
    fetch_transcript: TranscriptFetcher = _fetch_transcript,
    fetch_chapters: ChapterFetcher = _fetch_chapters,
    on_progress: Callable[[str, float], None] | None = None,
) -> CombinedResult:
    """Fetch a video's transcript and chapters and align them.

    Never raises: any failure yields an empty result carrying ``error``.
    """
    config = config or AlignmentConfig()

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    try:
        _progress("Fetching transcript and chapters", 0.0)
        with ThreadPoolExecutor(max_workers=2) as pool:
            transcript_future = pool.submit(fetch_transcript, video_id, config.languages)
            chapters_future = pool.submit(fetch_chapters, video_id)
            transcript = transcript_future.result()
            chapters = chapters_future.result()
        logger.info(
            f"Fetched {len(transcript)} transcript items and {len(chapters)} chapters for {video_id}"
        )

        _progress("Filtering content", 0.5)
        transcript, chapters = apply_filters(transcript, chapters, config)

        _progress("Aligning transcript to chapters", 0.7)
        result = combine_transcript_and_chapters(transcript, chapters, video_id, config)
    except Exception as e:
        logger.exception(f"Error getting chapters and transcript for video {video_id}")
        return CombinedResult.empty(video_id, config.overlap_offset_seconds, error=str(e))

    _progress("Done", 1.0)
    return result
