"""Pytest configuration and shared fixtures."""
import pytest
import tempfile
from pathlib import Path

from kanjidict.models import DictionaryEntry, Example


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_document(fixtures_dir: Path) -> str:
    """Load the sample glossary export (two valid entries, one rejected)."""
    return (fixtures_dir / "sample_dict.xhtml").read_text(encoding="utf-8")


@pytest.fixture
def sample_entries():
    """Hand-built entries covering full and minimal records."""
    return [
        DictionaryEntry(
            kanji="木",
            id="kanji-001",
            entry_number="1",
            level="L1",
            reading="き",
            meaning="tree",
            stroke_count="4",
            examples=(
                Example(word="木曜日", reading="もくようび", meaning="Thursday"),
                Example(word="大木", reading="たいぼく", meaning="large tree"),
            ),
            etymology="OBI: a tree.",
            mnemonic="A tree standing tall.",
            images=("assets/image/tree.jpg", "assets/image/tree_seal.png"),
        ),
        DictionaryEntry(
            kanji="一",
            id="kanji-002",
            reading="いち",
            meaning="one",
        ),
    ]
