"""Time-base normalization. Every timestamp enters the pipeline in seconds."""

import enum
from dataclasses import dataclass

from chaptermap.models import InvalidInputError, TranscriptSegment


class TimeUnit(enum.Enum):
    SECONDS = "s"
    MILLISECONDS = "ms"

    @classmethod
    def parse(cls, value: "str | TimeUnit") -> "TimeUnit":
        if isinstance(value, TimeUnit):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidInputError(f"Unknown time unit {value!r}; expected 's' or 'ms'") from None


@dataclass(frozen=True)
class RawTranscriptItem:
    """A fetched transcript item whose offset/duration carry an explicit unit."""

    text: str
    offset: float
    duration: float
    unit: TimeUnit = TimeUnit.SECONDS


def to_seconds(value: float, unit: TimeUnit) -> float:
    """Convert one timestamp or duration to seconds."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"Timestamp must be a number, got {value!r}")
    if unit is TimeUnit.MILLISECONDS:
        return value / 1000.0
    return float(value)


def normalize_item(raw: RawTranscriptItem) -> TranscriptSegment:
    """Convert a raw item to a TranscriptSegment.

    Normalization happens exactly once: a TranscriptSegment is already in
    seconds and is rejected rather than divided again.
    """
    if isinstance(raw, TranscriptSegment):
        raise InvalidInputError("Segment is already normalized to seconds")

    start = to_seconds(raw.offset, raw.unit)
    duration = to_seconds(raw.duration, raw.unit)
    if start < 0 or duration < 0:
        raise InvalidInputError(
            f"Negative offset or duration in transcript item {raw.text!r}"
        )
    return TranscriptSegment(
        text=raw.text,
        start_seconds=start,
        end_seconds=start + duration,
    )


def normalize_transcript(items: list[RawTranscriptItem]) -> list[TranscriptSegment]:
    if items is None:
        raise InvalidInputError("Transcript items must be a list, got None")
    return [normalize_item(item) for item in items]


def raw_items_from_dicts(
    rows: list[dict], unit: "TimeUnit | str" = TimeUnit.SECONDS
) -> list[RawTranscriptItem]:
    """Build raw items from fetched rows.

    Rows carry ``text`` plus ``offset`` or ``start``, and ``duration``.
    """
    unit = TimeUnit.parse(unit)
    items: list[RawTranscriptItem] = []
    for row in rows:
        if not isinstance(row, dict):
            raise InvalidInputError(f"Transcript row must be an object, got {row!r}")
        offset = row.get("offset", row.get("start"))
        if offset is None or "text" not in row:
            raise InvalidInputError(f"Transcript row needs text and offset/start: {row!r}")
        items.append(
            RawTranscriptItem(
                text=row["text"],
                offset=offset,
                duration=row.get("duration", 0),
                unit=unit,
            )
        )
    return items
