"""Chapter markers from yt-dlp metadata, video descriptions, or JSON files."""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from chaptermap.models import Chapter
from chaptermap.sources.video_id import watch_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _DescriptionLayout:
    """One way creators write chapter lists in a description.

    ``start`` locates the beginning of the list; ``line`` matches each entry
    and captures hours (optional), minutes, seconds and the title.
    """

    name: str
    start: re.Pattern
    line: re.Pattern
    timestamp_group: int
    title_group: int


def _layout(name: str, start: str | None, line: str, timestamp_group: int, title_group: int):
    line_rx = re.compile(line)
    start_rx = re.compile(start or line, re.MULTILINE)
    return _DescriptionLayout(name, start_rx, line_rx, timestamp_group, title_group)


_POSTFIX = r"^(?:\d+\.\s+)?(.*)\s+(?:(\d+):)?(\d+):(\d+)$"
_POSTFIX_PAREN = r"^(?:\d+\.\s+)?(.*)\s+\(\s*(?:(\d+):)?(\d+):(\d+)\s*\)$"
_PREFIX = r"^\d+\.\s+(?:(\d+):)?(\d+):(\d+)\s+(.*)$"

# Tried in order; the first layout that yields chapters wins.
LAYOUTS = (
    # 0:00 Title
    _layout("plain", r"^0?0:00", r"^(?:(\d+):)?(\d+):(\d+)\s+(.*?)$", 1, 4),
    # [0:00] Title
    _layout("brackets", r"^\[0?0:00\]", r"^\[(?:(\d+):)?(\d+):(\d+)\]\s+(.*?)$", 1, 4),
    # (0:00) Title
    _layout("parens", r"^\(0?0:00\)", r"^\((?:(\d+):)?(\d+):(\d+)\)\s+(.*?)$", 1, 4),
    # 00:00:00-Title
    _layout("hyphen", r"^0?0:00:00-", r"^(?:(\d+):)?(\d+):(\d+)-(.*?)$", 1, 4),
    # 1. Title 0:00
    _layout("postfix", None, _POSTFIX, 2, 1),
    # 1. Title (0:00)
    _layout("postfix_paren", None, _POSTFIX_PAREN, 2, 1),
    # 1. 0:00 Title
    _layout("prefix", None, _PREFIX, 1, 4),
)


def _parse_layout(description: str, layout: _DescriptionLayout) -> list[tuple[float, str]]:
    first = layout.start.search(description)
    if first is None:
        return []

    entries: list[tuple[float, str]] = []
    for raw_line in description[first.start():].split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        match = layout.line.match(line)
        if match is None:
            break

        g = layout.timestamp_group
        hours = int(match.group(g)) if match.group(g) is not None else 0
        minutes = int(match.group(g + 1))
        seconds = int(match.group(g + 2))
        entries.append((hours * 3600 + minutes * 60 + seconds, match.group(layout.title_group).strip()))
    return entries


def chapters_from_starts(
    entries: list[tuple[float, str]], duration: float | None = None
) -> list[Chapter]:
    """Build contiguous chapters from (start, title) pairs.

    Each chapter ends where the next begins; the last one ends at ``duration``
    when known and is unbounded otherwise. Entries that do not advance the
    start time are dropped.
    """
    ordered: list[tuple[float, str]] = []
    for start, title in sorted(entries, key=lambda e: e[0]):
        if ordered and start <= ordered[-1][0]:
            logger.debug(f"Dropping chapter {title!r}: duplicate start {start}s")
            continue
        ordered.append((float(start), title))

    chapters: list[Chapter] = []
    for i, (start, title) in enumerate(ordered):
        if i + 1 < len(ordered):
            end = ordered[i + 1][0]
        elif duration and duration > start:
            end = float(duration)
        else:
            end = None
        chapters.append(Chapter(title=title, start_time=start, end_time=end))
    return chapters


def parse_description_chapters(description: str, duration: float | None = None) -> list[Chapter]:
    """Parse a chapter list from a video description. Empty if none is found."""
    for layout in LAYOUTS:
        entries = _parse_layout(description or "", layout)
        if entries:
            logger.debug(f"Parsed {len(entries)} chapters using the {layout.name} layout")
            return chapters_from_starts(entries, duration)
    return []


def chapters_from_info(info: dict) -> list[Chapter]:
    """Extract chapters from yt-dlp metadata, falling back to the description."""
    duration = info.get("duration")

    native = info.get("chapters") or []
    if native:
        entries = [(ch.get("start_time", 0.0), ch.get("title", "")) for ch in native]
        chapters = chapters_from_starts(entries, duration)
        logger.debug(f"Found {len(chapters)} native chapters")
        return chapters

    return parse_description_chapters(info.get("description") or "", duration)


def fetch_chapters(video_id: str) -> list[Chapter]:
    """Fetch chapter markers for a video via yt-dlp (metadata only)."""
    import yt_dlp

    opts = {"quiet": True, "no_warnings": True, "skip_download": True}
    with yt_dlp.YoutubeDL(opts) as ydl:
        info = ydl.extract_info(watch_url(video_id), download=False)

    return chapters_from_info(info or {})


def load_chapters_file(path: str | Path) -> list[Chapter]:
    """Load chapters from JSON: a list of ``{title, startTime, endTime}``.

    ``endTime`` may be null or absent for an unbounded chapter.
    """
    path = Path(path)
    data = json.loads(path.read_text())

    if not isinstance(data, list):
        raise ValueError("Chapters file must contain a list")

    return [chapter_from_dict(item) for item in data]


def chapter_from_dict(item: dict) -> Chapter:
    if "title" not in item or "startTime" not in item:
        raise ValueError(f"Chapter needs 'title' and 'startTime': {item!r}")
    return Chapter(
        title=item["title"],
        start_time=item["startTime"],
        end_time=item.get("endTime"),
    )
