"""Tests for kanjidict.export_stardict."""

import struct
from datetime import date

import pytest

from kanjidict import export_stardict
from kanjidict.export_stardict import StarDictInfo
from kanjidict.models import DictionaryEntry


def read_index(data: bytes):
    """Decode a .idx payload into (word, offset, size) tuples."""
    records = []
    pos = 0
    while pos < len(data):
        end = data.index(b'\0', pos)
        word = data[pos:end].decode('utf-8')
        offset, size = struct.unpack('>II', data[end + 1:end + 9])
        records.append((word, offset, size))
        pos = end + 9
    return records


def parse_ifo(text: str) -> dict:
    lines = text.splitlines()
    assert lines[0] == "StarDict's dict ifo file"
    return dict(line.split('=', 1) for line in lines[1:])


# ============================================================================
# Definition Formatting
# ============================================================================


class TestFormatDefinition:
    """Tests for format_definition."""

    def test_full_entry(self, sample_entries):
        assert export_stardict.format_definition(sample_entries[0]) == (
            "<b>木</b>\n"
            "Reading: き\n"
            "Meaning: tree\n"
            "Strokes: 4\n"
            "Level: L1\n"
            "Number: 1\n"
            "\n"
            "Examples:\n"
            "  • 木曜日 [もくようび] - Thursday\n"
            "  • 大木 [たいぼく] - large tree\n"
            "\n"
            "Etymology: OBI: a tree.\n"
            "\n"
            "Mnemonic: A tree standing tall.\n"
            "\n"
            "Images:\n"
            "  [Image: images/tree.jpg]\n"
            "  [Image: images/tree_seal.png]\n"
        )

    def test_absent_fields_are_omitted(self, sample_entries):
        assert export_stardict.format_definition(sample_entries[1]) == (
            "<b>一</b>\nReading: いち\nMeaning: one\n"
        )

    def test_head_only(self):
        assert export_stardict.format_definition(DictionaryEntry(kanji="一")) == "<b>一</b>\n"


# ============================================================================
# Index and Payloads
# ============================================================================


class TestBuildDictionary:
    """Tests for build_index_entry and build_dictionary."""

    def test_index_entry_layout(self):
        record = export_stardict.build_index_entry("木", 50, 70)
        assert record == "木".encode('utf-8') + b'\0' + b'\x00\x00\x00\x32' + b'\x00\x00\x00\x46'

    def test_offsets_follow_definition_lengths(self, monkeypatch):
        lengths = {"一": 50, "二": 70}
        monkeypatch.setattr(export_stardict, "format_definition", lambda entry: "x" * lengths[entry.kanji])

        dict_data, idx_data, wordcount = export_stardict.build_dictionary(
            [DictionaryEntry(kanji="一"), DictionaryEntry(kanji="二")]
        )

        assert wordcount == 2
        assert len(dict_data) == 120
        assert read_index(idx_data) == [("一", 0, 50), ("二", 50, 70)]

    def test_definitions_are_utf8_byte_ranges(self, sample_entries):
        dict_data, idx_data, _ = export_stardict.build_dictionary(sample_entries)

        for word, offset, size in read_index(idx_data):
            definition = dict_data[offset:offset + size].decode('utf-8')
            assert definition.startswith(f"<b>{word}</b>")
            assert definition.endswith("\n")

    def test_entries_without_kanji_are_skipped(self, sample_entries):
        entries = [DictionaryEntry(kanji="")] + sample_entries
        _, idx_data, wordcount = export_stardict.build_dictionary(entries)

        assert wordcount == 2
        assert [word for word, _, _ in read_index(idx_data)] == ["木", "一"]

    def test_document_order_kept(self):
        entries = [DictionaryEntry(kanji=k) for k in ["水", "一", "木"]]
        _, idx_data, _ = export_stardict.build_dictionary(entries)
        assert [word for word, _, _ in read_index(idx_data)] == ["水", "一", "木"]


# ============================================================================
# Metadata
# ============================================================================


class TestFormatIfo:
    """Tests for format_ifo."""

    def test_fields(self):
        text = export_stardict.format_ifo(StarDictInfo(), 2, 40, date(2024, 5, 1))
        fields = parse_ifo(text)

        assert fields == {
            'version': '2.4.2',
            'bookname': 'Japanese Dictionary',
            'wordcount': '2',
            'synwordcount': '0',
            'idxfilesize': '40',
            'author': 'Parser',
            'description': 'Japanese dictionary with images',
            'date': '2024-05-01',
            'sametypesequence': 'm',
        }

    def test_custom_info(self):
        info = StarDictInfo(bookname="Kanji L1", author="me", description="d", sametypesequence="h")
        fields = parse_ifo(export_stardict.format_ifo(info, 0, 0, date(2024, 1, 2)))
        assert fields['bookname'] == "Kanji L1"
        assert fields['author'] == "me"
        assert fields['sametypesequence'] == "h"


# ============================================================================
# File Output
# ============================================================================


class TestExportStardict:
    """Tests for export_stardict."""

    def test_writes_triad(self, sample_entries, temp_dir):
        output_dir = temp_dir / "dictionary"
        paths = export_stardict.export_stardict(sample_entries, output_dir, build_date=date(2024, 5, 1))

        assert sorted(paths) == ['dict', 'idx', 'ifo']
        assert paths['dict'] == output_dir / "dictionary.dict"
        assert all(path.exists() for path in paths.values())

    def test_idxfilesize_matches_index(self, sample_entries, temp_dir):
        paths = export_stardict.export_stardict(sample_entries, temp_dir / "sd")

        idx_size = paths['idx'].stat().st_size
        fields = parse_ifo(paths['ifo'].read_text(encoding='utf-8'))
        assert int(fields['idxfilesize']) == idx_size
        assert int(fields['wordcount']) == 2

    def test_dict_matches_index(self, sample_entries, temp_dir):
        paths = export_stardict.export_stardict(sample_entries, temp_dir / "sd")

        dict_data = paths['dict'].read_bytes()
        records = read_index(paths['idx'].read_bytes())
        assert records[-1][1] + records[-1][2] == len(dict_data)

    def test_existing_directory_is_fine(self, sample_entries, temp_dir):
        export_stardict.export_stardict(sample_entries, temp_dir)
        export_stardict.export_stardict(sample_entries, temp_dir)
        assert (temp_dir / "dictionary.ifo").exists()

    def test_unwritable_target_raises(self, sample_entries, temp_dir):
        blocker = temp_dir / "file"
        blocker.write_text("x")
        with pytest.raises(OSError):
            export_stardict.export_stardict(sample_entries, blocker / "sd")
