"""
export_flashcards.py - Export entries as a flashcard deck (JSON array).

Outputs:
  - <out>.json (pretty-printed, one object per entry)
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import orjson

from kanjidict.images import rewrite_image_path
from kanjidict.models import DictionaryEntry


logger = logging.getLogger(__name__)


def to_flashcard(entry: DictionaryEntry) -> Dict[str, Any]:
    """Map an entry onto the flashcard app's field names."""
    return {
        'character': entry.kanji,
        'kana': entry.reading,
        'meaning': entry.meaning,
        'level': entry.level,
        'stroke_count': entry.stroke_count,
        'number': entry.entry_number,
        'examples': [example.to_dict() for example in entry.examples],
        'etymology': entry.etymology,
        'mnemonic': entry.mnemonic,
        'image_references': [rewrite_image_path(path) for path in entry.images],
        'id': entry.id,
    }


def export_flashcards(entries: List[DictionaryEntry], output_path: Path) -> int:
    """Write the flashcard array. Returns the number of cards."""
    cards = [to_flashcard(entry) for entry in entries]

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(orjson.dumps(cards, option=orjson.OPT_INDENT_2))

    size_kb = output_path.stat().st_size / 1024
    logger.info(f"  -> {output_path.name}: {len(cards):,} cards ({size_kb:.1f} KB)")
    return len(cards)
