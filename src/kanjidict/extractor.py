"""
Field extraction for glossary entry blocks.

Each block is scanned twice:
  1. The whole block, for <img> references.
  2. Line by line, through a cascade of classifiers where the first match
     claims the line:

       number -> level -> head character -> reading -> meaning -> strokes
       -> example line -> etymology start -> etymology continuation
       -> etymology end -> mnemonic

The etymology end is the one transition that does not claim its line: the
line that closes an etymology section is also the mnemonic line, so it goes on
to the mnemonic classifier.

Header spans (number through strokes) that share one physical line are
consumed one at a time, so a compact line such as
  <span class="textStyle48" id="k1">木</span><span class="textStyle46">き</span>
fills both the head character and the reading.
"""

import logging
import re
from enum import Enum, auto
from typing import Callable, List, Optional, Tuple

from kanjidict.markup import (
    ETYMOLOGY_SIGNALS,
    EXAMPLE_MEANING_PATTERN,
    EXAMPLE_READING_MARKER,
    EXAMPLE_READING_PATTERN,
    EXAMPLE_WORD_MARKER,
    EXAMPLE_WORD_PATTERN,
    HEAD_PATTERN,
    ID_ATTRIBUTE_PATTERN,
    IMAGE_PATTERN,
    INDENT_MARKER,
    LEVEL_PATTERN,
    MEANING_PATTERN,
    MNEMONIC_KEYWORD,
    MNEMONIC_LABELLED_PATTERN,
    NUMBER_PATTERN,
    READING_PATTERN,
    STROKES_PATTERN,
    TEXT_MARKER,
    TEXT_PATTERN,
    clean_text_content,
    normalize_whitespace,
)
from kanjidict.models import DictionaryEntry, EntryBuilder, Example
from kanjidict.segmenter import split_blocks


logger = logging.getLogger(__name__)


class ScanState(Enum):
    """Line-scanner state within one block."""
    SCANNING = auto()
    IN_ETYMOLOGY = auto()


# =============================================================================
# Header fields
# =============================================================================

def _apply_number(builder: EntryBuilder, match: re.Match) -> None:
    builder.set_entry_number(match.group(1))


def _apply_level(builder: EntryBuilder, match: re.Match) -> None:
    builder.set_level(match.group(1))


def _apply_head(builder: EntryBuilder, match: re.Match) -> None:
    id_match = ID_ATTRIBUTE_PATTERN.search(match.group(1))
    builder.set_head(match.group(2), id_match.group(1) if id_match else "")


def _apply_reading(builder: EntryBuilder, match: re.Match) -> None:
    builder.set_reading(match.group(1))


def _apply_meaning(builder: EntryBuilder, match: re.Match) -> None:
    builder.set_meaning(match.group(1))


def _apply_strokes(builder: EntryBuilder, match: re.Match) -> None:
    builder.set_stroke_count(match.group(1))


# Priority order matters: earlier classifiers win on the same span
HEADER_CLASSIFIERS: List[Tuple[str, re.Pattern, Callable[[EntryBuilder, re.Match], None]]] = [
    ('number', NUMBER_PATTERN, _apply_number),
    ('level', LEVEL_PATTERN, _apply_level),
    ('head', HEAD_PATTERN, _apply_head),
    ('reading', READING_PATTERN, _apply_reading),
    ('meaning', MEANING_PATTERN, _apply_meaning),
    ('strokes', STROKES_PATTERN, _apply_strokes),
]


def apply_header_fields(line: str, builder: EntryBuilder) -> bool:
    """
    Consume every header span on a line.

    Returns True if at least one header classifier matched, in which case the
    line is finished.
    """
    matched = False
    remaining = line

    while remaining:
        for _name, pattern, apply in HEADER_CLASSIFIERS:
            match = pattern.search(remaining)
            if match:
                apply(builder, match)
                remaining = remaining[:match.start()] + remaining[match.end():]
                matched = True
                break
        else:
            break

    return matched


# =============================================================================
# Body lines
# =============================================================================

def extract_images(block: str, builder: EntryBuilder) -> None:
    """Append every image path in the block, in order, duplicates included."""
    for match in IMAGE_PATTERN.finditer(block):
        builder.add_image(match.group(1))


def is_example_line(line: str) -> bool:
    return EXAMPLE_WORD_MARKER in line and EXAMPLE_READING_MARKER in line


def parse_example_line(line: str, builder: EntryBuilder) -> Optional[Example]:
    """
    Build an Example from the first word, reading and gloss spans on a line.

    All three are required; a line missing any of them contributes nothing.
    """
    word = EXAMPLE_WORD_PATTERN.search(line)
    reading = EXAMPLE_READING_PATTERN.search(line)
    meaning = EXAMPLE_MEANING_PATTERN.search(line)

    if not (word and reading and meaning):
        return None

    example = Example(word=word.group(1), reading=reading.group(1), meaning=meaning.group(1))
    builder.add_example(example)
    return example


def is_etymology_start(line: str) -> bool:
    return (
        INDENT_MARKER in line
        and TEXT_MARKER in line
        and MNEMONIC_KEYWORD not in line
        and any(signal in line for signal in ETYMOLOGY_SIGNALS)
    )


def is_etymology_continuation(line: str) -> bool:
    return TEXT_MARKER in line and MNEMONIC_KEYWORD not in line


def parse_mnemonic_line(line: str, builder: EntryBuilder) -> str:
    """
    Extract the mnemonic text from a line mentioning 'Mnemonic'.

    Prefers the labelled form ("Mnemonic:" span, space, text span); otherwise
    takes the last text span on the line. Returns the text found, or "".
    """
    labelled = MNEMONIC_LABELLED_PATTERN.search(line)
    if labelled:
        text = labelled.group(1)
    else:
        spans = TEXT_PATTERN.findall(line)
        text = spans[-1] if spans else ""

    text = text.strip()
    if text:
        builder.set_mnemonic(text)
    return text


def _commit_etymology(parts: List[str], builder: EntryBuilder) -> None:
    text = normalize_whitespace(' '.join(parts))
    if text:
        builder.set_etymology(text)


# =============================================================================
# Blocks and documents
# =============================================================================

def extract_entry(block: str) -> DictionaryEntry:
    """
    Extract one entry from a validated block.

    The result may have an empty kanji field; callers drop such entries.
    """
    block = block.strip()
    builder = EntryBuilder(raw=block)
    extract_images(block, builder)

    state = ScanState.SCANNING
    etymology_parts: List[str] = []

    for line in block.split('\n'):
        line = line.strip()
        if not line:
            continue

        if apply_header_fields(line, builder):
            continue

        if is_example_line(line):
            parse_example_line(line, builder)
            continue

        # A second start line inside a section keeps accumulating
        if is_etymology_start(line):
            etymology_parts.append(clean_text_content(line))
            state = ScanState.IN_ETYMOLOGY
            continue

        if state is ScanState.IN_ETYMOLOGY and is_etymology_continuation(line):
            etymology_parts.append(clean_text_content(line))
            continue

        if state is ScanState.IN_ETYMOLOGY and MNEMONIC_KEYWORD in line:
            _commit_etymology(etymology_parts, builder)
            etymology_parts = []
            state = ScanState.SCANNING

        if MNEMONIC_KEYWORD in line:
            parse_mnemonic_line(line, builder)

    if state is ScanState.IN_ETYMOLOGY:
        _commit_etymology(etymology_parts, builder)

    return builder.build()


def parse_document(document: str) -> List[DictionaryEntry]:
    """Parse a whole glossary document into entries with a head character."""
    blocks = split_blocks(document)
    logger.info(f"Found {len(blocks):,} entry blocks")

    entries = []
    rejected = 0
    for block in blocks:
        entry = extract_entry(block)
        if entry.kanji:
            entries.append(entry)
        else:
            rejected += 1

    if rejected:
        logger.info(f"  -> Dropped {rejected:,} blocks without a head character")
    logger.info(f"  -> Parsed {len(entries):,} entries")

    return entries
