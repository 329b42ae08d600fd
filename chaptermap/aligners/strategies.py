"""Segment-to-chapter assignment strategies.

Two policies share one interface:

* ``OverlapWindow`` widens chapters on both sides and gives a segment to every
  window containing it, so neighbouring chapters share context at the cut.
* ``SingleAssignment`` pulls chapter starts earlier and gives each segment to
  exactly one chapter, using a gap fallback when no window contains it.

Both detect transcripts whose clock does not match the chapter clock and remap
segment positions proportionally onto the video duration.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from chaptermap.aligners.windows import apply_overlap, apply_start_offset
from chaptermap.config import AlignmentConfig
from chaptermap.models import (
    AdjustedChapter,
    Chapter,
    InvalidInputError,
    TranscriptSegment,
    check_margin,
)

# Transcript shorter than this fraction of the video means the clocks disagree.
SCALE_MISMATCH_RATIO = 0.1


@dataclass(frozen=True)
class Placement:
    """A segment and the video position it was matched at."""

    segment: TranscriptSegment
    position: float


@dataclass
class Alignment:
    windows: list[AdjustedChapter]
    buckets: list[list[Placement]] = field(default_factory=list)
    transcript_duration: float = 0.0
    video_duration: float = 0.0
    proportional: bool = False


def transcript_duration(segments: list[TranscriptSegment]) -> float:
    return max((s.end_seconds for s in segments), default=0.0)


def estimate_video_duration(chapters: list[Chapter]) -> float:
    """Last chapter's end, or its start plus the fixed estimate when unbounded."""
    if not chapters:
        return 0.0
    return chapters[-1].estimated_end()


def is_scale_mismatch(transcript_seconds: float, video_seconds: float) -> bool:
    return transcript_seconds < video_seconds * SCALE_MISMATCH_RATIO


def remap_position(start: float, transcript_seconds: float, video_seconds: float) -> float:
    """Map a transcript timestamp onto the video clock by relative position."""
    if transcript_seconds <= 0:
        return 0.0
    return start / transcript_seconds * video_seconds


class AlignmentStrategy(ABC):
    """Assigns transcript segments to chapter windows."""

    name: str = ""

    @abstractmethod
    def build_windows(self, chapters: list[Chapter]) -> list[AdjustedChapter]:
        """Turn nominal chapters into the windows segments are matched against."""

    @abstractmethod
    def place(
        self,
        position: float,
        windows: list[AdjustedChapter],
        index: int,
        total: int,
    ) -> list[int]:
        """Return the indexes of the windows a segment at ``position`` belongs to."""

    def align(self, segments: list[TranscriptSegment], chapters: list[Chapter]) -> Alignment:
        if segments is None or chapters is None:
            raise InvalidInputError("Transcript and chapters must be lists, got None")

        windows = self.build_windows(chapters)
        alignment = Alignment(windows=windows, buckets=[[] for _ in windows])
        if not segments or not windows:
            return alignment

        ordered = sorted(segments, key=lambda s: s.start_seconds)
        alignment.transcript_duration = transcript_duration(ordered)
        alignment.video_duration = estimate_video_duration(chapters)
        alignment.proportional = is_scale_mismatch(
            alignment.transcript_duration, alignment.video_duration
        )

        total = len(ordered)
        for i, seg in enumerate(ordered):
            if alignment.proportional:
                position = remap_position(
                    seg.start_seconds, alignment.transcript_duration, alignment.video_duration
                )
            else:
                position = seg.start_seconds
            for idx in self.place(position, windows, i, total):
                alignment.buckets[idx].append(Placement(segment=seg, position=position))

        return alignment


class OverlapWindow(AlignmentStrategy):
    """Multi-assignment over windows widened by ``overlap_offset_seconds``."""

    name = "overlap"

    def __init__(self, overlap_offset_seconds: float = 5.0):
        self.overlap_offset_seconds = check_margin(
            "overlap_offset_seconds", overlap_offset_seconds
        )

    def build_windows(self, chapters: list[Chapter]) -> list[AdjustedChapter]:
        return apply_overlap(chapters, self.overlap_offset_seconds)

    def place(self, position, windows, index, total):
        last = len(windows) - 1
        # Segments outside every window are dropped.
        return [w.index for w in windows if w.contains(position, final=w.index == last)]


class SingleAssignment(AlignmentStrategy):
    """One chapter per segment, with starts pulled back by ``chapter_offset``."""

    name = "single"

    def __init__(self, chapter_offset: float = 20.0, skip_first: bool = True):
        self.chapter_offset = check_margin("chapter_offset", chapter_offset)
        self.skip_first = skip_first

    def build_windows(self, chapters: list[Chapter]) -> list[AdjustedChapter]:
        pulled = apply_start_offset(chapters, self.chapter_offset, self.skip_first)

        # A window ends where the next one begins, or earlier at its own end.
        windows: list[AdjustedChapter] = []
        for i, w in enumerate(pulled):
            end = w.end_time
            if i + 1 < len(pulled):
                next_start = pulled[i + 1].start_time
                end = next_start if end is None else min(end, next_start)
                end = max(end, w.start_time)
            windows.append(
                AdjustedChapter(
                    title=w.title,
                    start_time=w.start_time,
                    end_time=end,
                    index=w.index,
                    original=w.original,
                )
            )
        return windows

    def place(self, position, windows, index, total):
        last = len(windows) - 1
        for w in windows:
            if w.contains(position, final=w.index == last):
                return [w.index]

        # Gap fallback
        if position < windows[0].start_time:
            return [0]
        preceding = [w.index for w in windows if w.start_time <= position]
        if preceding:
            return [preceding[-1]]
        return [min(last, math.floor(index / total * len(windows)))]


def strategy_from_config(config: AlignmentConfig) -> AlignmentStrategy:
    if config.strategy == "single":
        return SingleAssignment(
            chapter_offset=config.chapter_offset,
            skip_first=config.skip_first_chapter_offset,
        )
    return OverlapWindow(overlap_offset_seconds=config.overlap_offset_seconds)
