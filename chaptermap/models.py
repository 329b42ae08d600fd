"""Shared data types used across chaptermap."""

import math
from dataclasses import dataclass, field

# Seconds assumed for a chapter with no known end.
UNBOUNDED_CHAPTER_ESTIMATE = 300.0


class InvalidInputError(ValueError):
    """Raised when alignment input violates a precondition."""


def _check_number(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return float(value)


def check_margin(name: str, value) -> float:
    """A finite, non-negative number of seconds."""
    value = _check_number(name, value)
    if value < 0:
        raise InvalidInputError(f"{name} must be non-negative")
    return value


@dataclass(frozen=True)
class TranscriptSegment:
    """A timed span of transcript text, in seconds."""

    text: str
    start_seconds: float
    end_seconds: float

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise InvalidInputError(f"Segment text must be a string, got {self.text!r}")
        start = _check_number("start_seconds", self.start_seconds)
        end = _check_number("end_seconds", self.end_seconds)
        if start > end:
            raise InvalidInputError(
                f"Segment starts after it ends ({start} > {end}): {self.text!r}"
            )

    @property
    def duration(self) -> float:
        return self.end_seconds - self.start_seconds


@dataclass(frozen=True)
class Chapter:
    """A named interval of a video. ``end_time=None`` means unbounded."""

    title: str
    start_time: float
    end_time: float | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.title, str):
            raise InvalidInputError(f"Chapter title must be a string, got {self.title!r}")
        start = _check_number("start_time", self.start_time)
        if start < 0:
            raise InvalidInputError(f"Chapter {self.title!r} starts before 0")
        if self.end_time is not None:
            end = _check_number("end_time", self.end_time)
            if end <= start:
                raise InvalidInputError(
                    f"Chapter {self.title!r} must end after it starts ({start} >= {end})"
                )

    @property
    def is_unbounded(self) -> bool:
        return self.end_time is None

    def estimated_end(self) -> float:
        """End time, or start plus the fixed estimate when unbounded."""
        if self.end_time is None:
            return self.start_time + UNBOUNDED_CHAPTER_ESTIMATE
        return self.end_time


@dataclass(frozen=True)
class AdjustedChapter:
    """A chapter window after margin adjustment."""

    title: str
    start_time: float
    end_time: float | None
    index: int
    original: Chapter

    @property
    def is_unbounded(self) -> bool:
        return self.end_time is None

    def contains(self, position: float, final: bool = False) -> bool:
        """Half-open containment; the final window has no upper bound."""
        if position < self.start_time:
            return False
        if final or self.end_time is None:
            return True
        return position < self.end_time

    def effective_duration(self) -> float:
        if self.end_time is None:
            return UNBOUNDED_CHAPTER_ESTIMATE
        return self.end_time - self.start_time


@dataclass(frozen=True)
class AssignedSegment:
    """A transcript segment placed in a chapter."""

    text: str
    offset: float
    duration: float
    relative_position: float

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "offset": self.offset,
            "duration": self.duration,
            "relativeOffset": self.relative_position,
        }


@dataclass
class ChapterContent:
    """Chapter window plus the transcript text assigned to it."""

    title: str
    start_time: float
    end_time: float | None
    content: str = ""
    segments: list[AssignedSegment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "content": self.content,
            "segments": [s.to_dict() for s in self.segments],
        }


@dataclass
class ResultMetadata:
    total_duration: float = 0.0
    chapter_count: int = 0
    transcript_item_count: int = 0
    overlap_offset_seconds: float = 0.0

    def to_dict(self) -> dict:
        return {
            "totalDuration": self.total_duration,
            "chapterCount": self.chapter_count,
            "transcriptItemCount": self.transcript_item_count,
            "overlapOffsetSeconds": self.overlap_offset_seconds,
        }


@dataclass
class CombinedResult:
    """Transcript text aligned to chapters for one video."""

    video_id: str
    metadata: ResultMetadata
    chapters: list[ChapterContent] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def empty(
        cls, video_id: str, overlap_offset_seconds: float, error: str | None = None
    ) -> "CombinedResult":
        return cls(
            video_id=video_id,
            metadata=ResultMetadata(overlap_offset_seconds=overlap_offset_seconds),
            error=error,
        )

    def flatten(self) -> list[dict]:
        """Chapters reduced to the fields LLM prompts use."""
        return [
            {
                "title": c.title,
                "startTime": c.start_time,
                "endTime": c.end_time,
                "content": c.content,
            }
            for c in self.chapters
        ]

    def full_text(self) -> str:
        return " ".join(c.content for c in self.chapters if c.content)

    def to_dict(self) -> dict:
        data = {
            "videoId": self.video_id,
            "metadata": self.metadata.to_dict(),
            "chapters": [c.to_dict() for c in self.chapters],
        }
        if self.error is not None:
            data["error"] = self.error
        return data
