"""
export_stardict.py - Export entries as a StarDict dictionary.

Outputs (in <out>/):
  - dictionary.dict: UTF-8 definitions, concatenated
  - dictionary.idx: per entry, the head word in UTF-8, a NUL byte, then the
    definition offset and length as 32-bit big-endian unsigned integers
  - dictionary.ifo: plain-text metadata (version 2.4.2)

Index entries follow document order.
"""

import logging
import struct
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from kanjidict.images import rewrite_image_path
from kanjidict.models import DictionaryEntry


logger = logging.getLogger(__name__)

STARDICT_VERSION = "2.4.2"
BASENAME = "dictionary"


@dataclass
class StarDictInfo:
    """Book metadata written to the .ifo file."""
    bookname: str = "Japanese Dictionary"
    author: str = "Parser"
    description: str = "Japanese dictionary with images"
    sametypesequence: str = "m"


def format_definition(entry: DictionaryEntry) -> str:
    """Render the definition text stored in the .dict file."""
    lines = [f"<b>{entry.kanji}</b>"]

    if entry.reading:
        lines.append(f"Reading: {entry.reading}")
    if entry.meaning:
        lines.append(f"Meaning: {entry.meaning}")
    if entry.stroke_count:
        lines.append(f"Strokes: {entry.stroke_count}")
    if entry.level:
        lines.append(f"Level: {entry.level}")
    if entry.entry_number:
        lines.append(f"Number: {entry.entry_number}")

    if entry.examples:
        lines.append("\nExamples:")
        for example in entry.examples:
            lines.append(f"  • {example.format()}")

    if entry.etymology:
        lines.append(f"\nEtymology: {entry.etymology}")

    if entry.mnemonic:
        lines.append(f"\nMnemonic: {entry.mnemonic}")

    if entry.images:
        lines.append("\nImages:")
        for path in entry.images:
            lines.append(f"  [Image: {rewrite_image_path(path)}]")

    return '\n'.join(lines) + '\n'


def build_index_entry(word: str, offset: int, size: int) -> bytes:
    """One .idx record: word, NUL, big-endian offset and size."""
    return word.encode('utf-8') + b'\0' + struct.pack('>II', offset, size)


def build_dictionary(entries: List[DictionaryEntry]) -> Tuple[bytes, bytes, int]:
    """
    Build the .dict and .idx payloads.

    Returns:
        (dict bytes, idx bytes, number of words indexed)
    """
    definitions = []
    index = []
    offset = 0

    for entry in entries:
        if not entry.kanji:
            continue

        definition = format_definition(entry).encode('utf-8')
        definitions.append(definition)
        index.append(build_index_entry(entry.kanji, offset, len(definition)))
        offset += len(definition)

    return b''.join(definitions), b''.join(index), len(index)


def format_ifo(info: StarDictInfo, wordcount: int, idxfilesize: int,
               build_date: Optional[date] = None) -> str:
    build_date = build_date or date.today()
    return (
        "StarDict's dict ifo file\n"
        f"version={STARDICT_VERSION}\n"
        f"bookname={info.bookname}\n"
        f"wordcount={wordcount}\n"
        "synwordcount=0\n"
        f"idxfilesize={idxfilesize}\n"
        f"author={info.author}\n"
        f"description={info.description}\n"
        f"date={build_date.isoformat()}\n"
        f"sametypesequence={info.sametypesequence}\n"
    )


def export_stardict(
    entries: List[DictionaryEntry],
    output_dir: Path,
    info: Optional[StarDictInfo] = None,
    build_date: Optional[date] = None
) -> Dict[str, Path]:
    """
    Write the StarDict triad into output_dir.

    Returns:
        Paths of the written files keyed by extension ('dict', 'idx', 'ifo')
    """
    info = info or StarDictInfo()
    output_dir.mkdir(parents=True, exist_ok=True)

    dict_data, idx_data, wordcount = build_dictionary(entries)

    paths = {ext: output_dir / f"{BASENAME}.{ext}" for ext in ('dict', 'idx', 'ifo')}
    paths['dict'].write_bytes(dict_data)
    paths['idx'].write_bytes(idx_data)
    paths['ifo'].write_text(format_ifo(info, wordcount, len(idx_data), build_date), encoding='utf-8')

    logger.info(f"  -> {output_dir.name}/{BASENAME}.*: {wordcount:,} words "
                f"({len(dict_data) / 1024:.1f} KB definitions)")
    return paths
