"""Chapter content assembly — turns an Alignment into a CombinedResult."""

from chaptermap.aligners.strategies import Alignment, Placement
from chaptermap.models import (
    AdjustedChapter,
    AssignedSegment,
    ChapterContent,
    CombinedResult,
    ResultMetadata,
    UNBOUNDED_CHAPTER_ESTIMATE,
)


def relative_position(position: float, window: AdjustedChapter) -> float:
    """Position within the window, clamped to [0, 1]."""
    duration = window.effective_duration()
    if duration <= 0:
        return 0.0
    return max(0.0, min(1.0, (position - window.start_time) / duration))


def build_chapter(window: AdjustedChapter, placements: list[Placement]) -> ChapterContent:
    ordered = sorted(placements, key=lambda p: p.segment.start_seconds)
    segments = [
        AssignedSegment(
            text=p.segment.text,
            offset=p.segment.start_seconds,
            duration=p.segment.duration,
            relative_position=relative_position(p.position, window),
        )
        for p in ordered
    ]
    return ChapterContent(
        title=window.title,
        start_time=window.start_time,
        end_time=window.end_time,
        content=" ".join(s.text for s in segments).strip(),
        segments=segments,
    )


def total_duration(chapters: list[ChapterContent]) -> float:
    if not chapters:
        return 0.0
    last = chapters[-1]
    if last.end_time is None:
        return last.start_time + UNBOUNDED_CHAPTER_ESTIMATE
    return last.end_time


def assemble(
    alignment: Alignment,
    video_id: str,
    transcript_item_count: int,
    overlap_offset_seconds: float,
) -> CombinedResult:
    chapters = [
        build_chapter(window, placements)
        for window, placements in zip(alignment.windows, alignment.buckets)
    ]
    return CombinedResult(
        video_id=video_id,
        metadata=ResultMetadata(
            total_duration=total_duration(chapters),
            chapter_count=len(chapters),
            transcript_item_count=transcript_item_count,
            overlap_offset_seconds=overlap_offset_seconds,
        ),
        chapters=chapters,
    )
