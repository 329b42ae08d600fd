"""Chapter window adjustment."""

from chaptermap.models import AdjustedChapter, Chapter, InvalidInputError, check_margin


def _check_chapters(chapters: list[Chapter]) -> None:
    if chapters is None:
        raise InvalidInputError("Chapters must be a list, got None")
    for prev, cur in zip(chapters, chapters[1:]):
        if cur.start_time < prev.start_time:
            raise InvalidInputError(
                f"Chapters are not ordered by start time: {prev.title!r} "
                f"({prev.start_time}s) precedes {cur.title!r} ({cur.start_time}s)"
            )


def apply_overlap(chapters: list[Chapter], overlap_offset_seconds: float) -> list[AdjustedChapter]:
    """Extend every chapter by the margin on both sides.

    The first chapter keeps its original start; no start goes below 0.
    Unbounded ends stay unbounded.
    """
    overlap_offset_seconds = check_margin("overlap_offset_seconds", overlap_offset_seconds)
    _check_chapters(chapters)

    adjusted: list[AdjustedChapter] = []
    for i, ch in enumerate(chapters):
        start = ch.start_time if i == 0 else max(0.0, ch.start_time - overlap_offset_seconds)
        end = None if ch.end_time is None else ch.end_time + overlap_offset_seconds
        adjusted.append(
            AdjustedChapter(title=ch.title, start_time=start, end_time=end, index=i, original=ch)
        )
    return adjusted


def apply_start_offset(
    chapters: list[Chapter],
    chapter_offset: float = 20.0,
    skip_first: bool = True,
) -> list[AdjustedChapter]:
    """Pull chapter starts earlier by ``chapter_offset``; ends are untouched."""
    chapter_offset = check_margin("chapter_offset", chapter_offset)
    _check_chapters(chapters)

    adjusted: list[AdjustedChapter] = []
    for i, ch in enumerate(chapters):
        offset = 0.0 if (i == 0 and skip_first) else chapter_offset
        adjusted.append(
            AdjustedChapter(
                title=ch.title,
                start_time=max(0.0, ch.start_time - offset),
                end_time=ch.end_time,
                index=i,
                original=ch,
            )
        )
    return adjusted
