"""Shared test fixtures."""

from pathlib import Path

import pytest

from chaptermap.models import Chapter, TranscriptSegment

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_config_path() -> Path:
    return FIXTURES_DIR / "sample_config.json"


@pytest.fixture
def transcript_path() -> Path:
    return FIXTURES_DIR / "transcript_ms.json"


@pytest.fixture
def chapters_path() -> Path:
    return FIXTURES_DIR / "chapters.json"


@pytest.fixture
def description_path() -> Path:
    return FIXTURES_DIR / "description.txt"


@pytest.fixture
def scenario_a():
    """Three contiguous chapters, one segment in each."""
    transcript = [
        TranscriptSegment("a", 0, 5),
        TranscriptSegment("b", 10, 15),
        TranscriptSegment("c", 30, 35),
    ]
    chapters = [
        Chapter("Intro", 0, 10),
        Chapter("Main", 10, 30),
        Chapter("End", 30, None),
    ]
    return transcript, chapters
