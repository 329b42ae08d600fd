"""Alignment configuration and its JSON loader."""

import json
from dataclasses import dataclass, field
from pathlib import Path

from chaptermap.models import check_margin

STRATEGIES = ("overlap", "single")

DEFAULT_CHAPTER_PHRASES = (
    "sponsor",
    "advertisement",
    "ad break",
    "promotion",
)

DEFAULT_TRANSCRIPT_PHRASES = (
    "is sponsored by",
    "this video is sponsored by",
    "today's sponsor",
    "special thanks to our sponsor",
)


@dataclass
class FilterConfig:
    """Denylisted phrases, matched case-insensitively as substrings."""

    chapter_phrases: list[str] = field(default_factory=lambda: list(DEFAULT_CHAPTER_PHRASES))
    transcript_phrases: list[str] = field(default_factory=lambda: list(DEFAULT_TRANSCRIPT_PHRASES))


@dataclass
class AlignmentConfig:
    """Options for one alignment run."""

    overlap_offset_seconds: float = 5.0
    enable_chapter_filtering: bool = True
    enable_transcript_filtering: bool = True
    chapter_offset: float = 20.0
    skip_first_chapter_offset: bool = True
    strategy: str = "overlap"
    fallback_chapter_title: str = "Full Video"
    filters: FilterConfig = field(default_factory=FilterConfig)
    languages: list[str] = field(default_factory=lambda: ["en"])

    def __post_init__(self) -> None:
        check_margin("overlap_offset_seconds", self.overlap_offset_seconds)
        check_margin("chapter_offset", self.chapter_offset)
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"Unknown strategy {self.strategy!r}; expected one of {', '.join(STRATEGIES)}"
            )


def config_from_dict(data: dict) -> AlignmentConfig:
    """Build a config from a plain dict. Unknown keys are rejected."""
    data = dict(data)
    filters = FilterConfig(**data.pop("filters")) if "filters" in data else FilterConfig()
    known = set(AlignmentConfig.__dataclass_fields__) - {"filters"}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config fields: {', '.join(sorted(unknown))}")
    return AlignmentConfig(filters=filters, **data)


def load_config(path: str | Path) -> AlignmentConfig:
    """Load and validate a config from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())

    if not isinstance(data, dict):
        raise ValueError("Config must be a JSON object")

    return config_from_dict(data)
