"""
Record types produced by the markup parser.

A DictionaryEntry is built field by field through an EntryBuilder owned by a
single block-processing call, then frozen with build() and never mutated again.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class Example:
    """An example compound: word, its reading and its gloss."""
    word: str
    reading: str
    meaning: str

    def to_dict(self) -> Dict[str, str]:
        return {"word": self.word, "reading": self.reading, "meaning": self.meaning}

    def format(self) -> str:
        """Render as 'word [reading] - meaning'."""
        return f"{self.word} [{self.reading}] - {self.meaning}"


@dataclass(frozen=True)
class DictionaryEntry:
    """One kanji entry recovered from an entry block."""
    kanji: str
    id: str = ""
    entry_number: str = ""
    level: str = ""
    reading: str = ""
    meaning: str = ""
    stroke_count: str = ""
    examples: Tuple[Example, ...] = ()
    etymology: str = ""
    mnemonic: str = ""
    images: Tuple[str, ...] = ()
    raw: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "entry_number": self.entry_number,
            "level": self.level,
            "kanji": self.kanji,
            "reading": self.reading,
            "meaning": self.meaning,
            "stroke_count": self.stroke_count,
            "examples": [ex.to_dict() for ex in self.examples],
            "etymology": self.etymology,
            "mnemonic": self.mnemonic,
            "images": list(self.images),
            "raw": self.raw,
        }


@dataclass
class EntryBuilder:
    """
    Mutable accumulator for one entry block.

    Scalar setters overwrite (last match wins). Etymology lines are joined by
    the extractor before set_etymology; examples and images append in
    encounter order.
    """
    raw: str = ""
    id: str = ""
    entry_number: str = ""
    level: str = ""
    kanji: str = ""
    reading: str = ""
    meaning: str = ""
    stroke_count: str = ""
    etymology: str = ""
    mnemonic: str = ""
    examples: List[Example] = field(default_factory=list)
    images: List[str] = field(default_factory=list)

    def set_entry_number(self, value: str) -> None:
        self.entry_number = value

    def set_level(self, value: str) -> None:
        self.level = value

    def set_head(self, kanji: str, entry_id: str) -> None:
        self.kanji = kanji
        self.id = entry_id

    def set_reading(self, value: str) -> None:
        self.reading = value

    def set_meaning(self, value: str) -> None:
        self.meaning = value

    def set_stroke_count(self, value: str) -> None:
        self.stroke_count = value

    def add_example(self, example: Example) -> None:
        self.examples.append(example)

    def set_etymology(self, value: str) -> None:
        self.etymology = value

    def set_mnemonic(self, value: str) -> None:
        self.mnemonic = value

    def add_image(self, path: str) -> None:
        self.images.append(path)

    def build(self) -> DictionaryEntry:
        return DictionaryEntry(
            kanji=self.kanji,
            id=self.id,
            entry_number=self.entry_number,
            level=self.level,
            reading=self.reading,
            meaning=self.meaning,
            stroke_count=self.stroke_count,
            examples=tuple(self.examples),
            etymology=self.etymology,
            mnemonic=self.mnemonic,
            images=tuple(self.images),
            raw=self.raw,
        )
