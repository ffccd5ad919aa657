"""
Split a glossary document into entry blocks.

Entries are delimited by empty <p class="bor"></p> paragraphs. Segments without
a head-character span (preamble, postamble, stray markup) are dropped.
"""

import logging
from typing import Iterator, List

from kanjidict.markup import HEAD_MARKER, SEPARATOR_PATTERN


logger = logging.getLogger(__name__)


def is_entry_block(block: str) -> bool:
    """Check whether a segment carries a head-character span."""
    return HEAD_MARKER in block


def iter_segments(document: str) -> Iterator[str]:
    """Yield the stripped, non-empty segments between separators."""
    for segment in SEPARATOR_PATTERN.split(document):
        segment = segment.strip()
        if segment:
            yield segment


def split_blocks(document: str) -> List[str]:
    """Return the entry blocks of a document in document order."""
    blocks = []
    skipped = 0

    for segment in iter_segments(document):
        if is_entry_block(segment):
            blocks.append(segment)
        else:
            skipped += 1

    logger.debug(f"Segmented {len(blocks):,} entry blocks ({skipped:,} non-entry segments skipped)")
    return blocks
