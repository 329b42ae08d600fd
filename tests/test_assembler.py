"""Unit tests for chapter content assembly."""

from chaptermap.aligners.strategies import Alignment, OverlapWindow, Placement
from chaptermap.assembler import assemble, build_chapter, relative_position, total_duration
from chaptermap.models import AdjustedChapter, Chapter, ChapterContent, TranscriptSegment


def _window(start, end, title="W"):
    return AdjustedChapter(title, start, end, 0, Chapter(title, start, end))


class TestRelativePosition:
    def test_midpoint(self):
        assert relative_position(15, _window(10, 20)) == 0.5

    def test_clamped_below(self):
        assert relative_position(5, _window(10, 20)) == 0.0

    def test_clamped_above(self):
        assert relative_position(25, _window(10, 20)) == 1.0

    def test_unbounded_uses_estimate(self):
        assert relative_position(150, _window(0, None)) == 0.5

    def test_zero_length_window(self):
        window = AdjustedChapter("Empty", 10, 10, 0, Chapter("Empty", 10, 20))
        assert relative_position(10, window) == 0.0


class TestBuildChapter:
    def test_orders_by_start_and_joins(self):
        window = _window(0, 30)
        placements = [
            Placement(TranscriptSegment("world", 10, 12), 10),
            Placement(TranscriptSegment("hello", 3, 5), 3),
        ]
        chapter = build_chapter(window, placements)
        assert chapter.content == "hello world"
        assert [s.offset for s in chapter.segments] == [3, 10]
        assert chapter.segments[0].duration == 2
        assert chapter.segments[1].relative_position == 10 / 30

    def test_trims_content(self):
        chapter = build_chapter(_window(0, 30), [Placement(TranscriptSegment("  hi  ", 1, 2), 1)])
        assert chapter.content == "hi"

    def test_empty_bucket(self):
        chapter = build_chapter(_window(0, 30, "Quiet"), [])
        assert chapter.title == "Quiet"
        assert chapter.content == ""
        assert chapter.segments == []

    def test_relative_position_uses_matched_position(self):
        # Proportional mapping matches at the remapped position, not the raw start.
        chapter = build_chapter(_window(0, 100), [Placement(TranscriptSegment("x", 1, 2), 50)])
        assert chapter.segments[0].offset == 1
        assert chapter.segments[0].relative_position == 0.5


class TestTotalDuration:
    def test_bounded(self):
        assert total_duration([ChapterContent("A", 0, 65)]) == 65

    def test_unbounded(self):
        assert total_duration([ChapterContent("A", 0, 65), ChapterContent("B", 115, None)]) == 415

    def test_empty(self):
        assert total_duration([]) == 0.0


class TestAssemble:
    def test_metadata(self, scenario_a):
        transcript, chapters = scenario_a
        alignment = OverlapWindow(5).align(transcript, chapters)

        result = assemble(alignment, "vid", transcript_item_count=3, overlap_offset_seconds=5)

        assert result.video_id == "vid"
        assert result.metadata.chapter_count == 3
        assert result.metadata.transcript_item_count == 3
        assert result.metadata.overlap_offset_seconds == 5
        # End window starts at 25 and is unbounded
        assert result.metadata.total_duration == 325
        assert [c.title for c in result.chapters] == ["Intro", "Main", "End"]
        assert [(c.start_time, c.end_time) for c in result.chapters] == [
            (0, 15),
            (5, 35),
            (25, None),
        ]

    def test_content_counts_match_assignments(self):
        chapters = [Chapter("A", 0, 10), Chapter("B", 10, 20), Chapter("C", 20, None)]
        transcript = [TranscriptSegment(f"w{t}", t, t + 1) for t in range(0, 40, 2)]
        alignment = OverlapWindow(5).align(transcript, chapters)

        result = assemble(alignment, "vid", len(transcript), 5)

        for chapter, bucket in zip(result.chapters, alignment.buckets):
            words = chapter.content.split(" ") if chapter.content else []
            assert words == [p.segment.text for p in bucket]
            assert all(0.0 <= s.relative_position <= 1.0 for s in chapter.segments)

    def test_empty_alignment(self):
        result = assemble(Alignment(windows=[], buckets=[]), "vid", 0, 5)
        assert result.chapters == []
        assert result.metadata.total_duration == 0.0
