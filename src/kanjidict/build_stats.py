"""
build_stats.py - Summary statistics over parsed entries.

Used for the end-of-run summary and stored in the build manifest, so that two
builds of the same document can be compared at a glance.
"""

import logging
from collections import Counter
from typing import List

from kanjidict.models import DictionaryEntry


logger = logging.getLogger(__name__)


def compute_statistics(entries: List[DictionaryEntry]) -> dict:
    """
    Count field coverage across entries.

    Returns dict with:
        - total_entries
        - with_<field> counts for the optional text fields
        - example_count, image_references, distinct_images
        - levels: {level: count}, unlevelled entries under ""
    """
    levels = Counter(entry.level for entry in entries)
    distinct = {path for entry in entries for path in entry.images}

    return {
        'total_entries': len(entries),
        'with_id': sum(1 for e in entries if e.id),
        'with_reading': sum(1 for e in entries if e.reading),
        'with_meaning': sum(1 for e in entries if e.meaning),
        'with_strokes': sum(1 for e in entries if e.stroke_count),
        'with_examples': sum(1 for e in entries if e.examples),
        'with_etymology': sum(1 for e in entries if e.etymology),
        'with_mnemonic': sum(1 for e in entries if e.mnemonic),
        'with_images': sum(1 for e in entries if e.images),
        'example_count': sum(len(e.examples) for e in entries),
        'image_references': sum(len(e.images) for e in entries),
        'distinct_images': len(distinct),
        'levels': dict(sorted(levels.items())),
    }


def log_statistics(stats: dict) -> None:
    """Write the statistics as an aligned summary block."""
    logger.info("=" * 60)
    logger.info("BUILD SUMMARY")
    logger.info("=" * 60)
    for key, value in stats.items():
        if key == 'levels':
            continue
        logger.info(f"  {key:<18} {value:>8,}")
    if stats.get('levels'):
        levels = ', '.join(f"{level or '-'}: {count:,}" for level, count in stats['levels'].items())
        logger.info(f"  levels             {levels}")
    logger.info("=" * 60)
