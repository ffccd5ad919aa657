"""
kanjidict - Convert an exported kanji glossary into portable dictionaries.

The package provides:
- A parser recovering entries from the glossary markup (segmenter, extractor)
- Exporters for TSV, StarDict and flashcard JSON
- Image helpers for path rewriting, base64 inlining and copying
"""

__version__ = "0.1.0"
