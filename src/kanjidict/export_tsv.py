"""
export_tsv.py - Export entries as tab-separated values.

Outputs:
  - <out>.tsv (header row + one row per entry)

Fields holding a tab, CR or LF are double-quoted with inner quotes doubled;
everything else is written as-is.
"""

import logging
from pathlib import Path
from typing import List

from kanjidict.images import rewrite_image_path
from kanjidict.models import DictionaryEntry


logger = logging.getLogger(__name__)

TSV_COLUMNS = [
    'Kanji', 'Reading', 'Meaning', 'Level', 'Number',
    'Strokes', 'Examples', 'Etymology', 'Mnemonic', 'Images',
]


def escape_tsv_field(field: str) -> str:
    """Quote a field if it contains a tab or line break."""
    if '\t' in field or '\n' in field or '\r' in field:
        return '"' + field.replace('"', '""') + '"'
    return field


def entry_to_row(entry: DictionaryEntry) -> List[str]:
    """Column values for one entry, in TSV_COLUMNS order."""
    examples = '; '.join(example.format() for example in entry.examples)
    images = '; '.join(rewrite_image_path(path) for path in entry.images)

    return [
        entry.kanji,
        entry.reading,
        entry.meaning,
        entry.level,
        entry.entry_number,
        entry.stroke_count,
        examples,
        entry.etymology,
        entry.mnemonic,
        images,
    ]


def format_tsv(entries: List[DictionaryEntry]) -> str:
    lines = ['\t'.join(TSV_COLUMNS)]
    for entry in entries:
        lines.append('\t'.join(escape_tsv_field(value) for value in entry_to_row(entry)))
    return '\n'.join(lines) + '\n'


def export_tsv(entries: List[DictionaryEntry], output_path: Path) -> int:
    """Write the TSV file. Returns the number of rows written."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(format_tsv(entries), encoding='utf-8')

    logger.info(f"  -> {output_path.name}: {len(entries):,} rows")
    return len(entries)
