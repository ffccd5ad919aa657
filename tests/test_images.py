"""Tests for kanjidict.images: path rewriting, inlining and copying."""

import base64
import json

import pytest

from kanjidict import images
from kanjidict.models import DictionaryEntry


@pytest.fixture
def image_tree(temp_dir):
    """An image root with two readable images."""
    root = temp_dir / "assets"
    (root / "image").mkdir(parents=True)
    (root / "image" / "tree.jpg").write_bytes(b"\xff\xd8tree")
    (root / "image" / "sun.png").write_bytes(b"\x89PNGsun")
    return root


@pytest.fixture
def image_entries():
    return [
        DictionaryEntry(kanji="木", images=("image/tree.jpg", "image/missing.gif")),
        DictionaryEntry(kanji="日", images=("image/sun.png", "image/tree.jpg")),
    ]


# ============================================================================
# Path Helpers
# ============================================================================


class TestPathHelpers:
    """Tests for rewrite_image_path, image_filename and guess_mime_type."""

    @pytest.mark.parametrize("raw, expected", [
        ("image/tree.jpg", "images/tree.jpg"),
        ("/abs/path/to/sun.png", "images/sun.png"),
        ("plain.gif", "images/plain.gif"),
        ("../up/a b.svg", "images/a b.svg"),
    ])
    def test_rewrite(self, raw, expected):
        assert images.rewrite_image_path(raw) == expected

    def test_trailing_slash_keeps_path(self):
        assert images.image_filename("dir/") == "dir/"

    @pytest.mark.parametrize("path, mime", [
        ("a/b.jpg", "image/jpeg"),
        ("a/b.JPG", "image/jpeg"),
        ("a/b.png", "image/png"),
        ("a/b.gif", "image/gif"),
        ("a/b.svg", "image/svg"),
        ("a.dir/noext", "image/jpeg"),
    ])
    def test_mime_type(self, path, mime):
        assert images.guess_mime_type(path) == mime

    def test_distinct_images_first_appearance_order(self, image_entries):
        assert images.distinct_images(image_entries) == [
            "image/tree.jpg", "image/missing.gif", "image/sun.png",
        ]

    def test_resolve_relative_and_absolute(self, temp_dir):
        assert images.resolve_image("image/a.png", temp_dir) == temp_dir / "image" / "a.png"
        absolute = str(temp_dir / "b.png")
        assert images.resolve_image(absolute, temp_dir / "elsewhere") == temp_dir / "b.png"


# ============================================================================
# Base64 Inlining
# ============================================================================


class TestInlineImages:
    """Tests for inline_images."""

    def test_writes_map_and_skips_failures(self, image_entries, image_tree, temp_dir, caplog):
        output_path = temp_dir / "out" / "dictionary.images.json"
        result = images.inline_images(image_entries, output_path, image_tree, show_progress=False)

        assert list(result) == ["image/tree.jpg", "image/sun.png"]
        assert result["image/tree.jpg"] == {
            "data": base64.b64encode(b"\xff\xd8tree").decode("ascii"),
            "mime_type": "image/jpeg",
            "filename": "tree.jpg",
        }
        assert json.loads(output_path.read_text(encoding='utf-8')) == result
        assert "image/missing.gif" in caplog.text

    def test_unopenable_path_does_not_stop_others(self, image_tree, temp_dir, caplog):
        entries = [DictionaryEntry(kanji="木", images=("bad\x00.png", "image/sun.png"))]
        output_path = temp_dir / "images.json"

        result = images.inline_images(entries, output_path, image_tree, show_progress=False)

        assert list(result) == ["image/sun.png"]
        assert json.loads(output_path.read_text(encoding='utf-8')) == result
        assert "Error processing image" in caplog.text

    def test_single_worker(self, image_entries, image_tree, temp_dir):
        output_path = temp_dir / "images.json"
        result = images.inline_images(image_entries, output_path, image_tree,
                                      max_workers=1, show_progress=False)
        assert len(result) == 2

    def test_no_images(self, temp_dir):
        output_path = temp_dir / "images.json"
        assert images.inline_images([DictionaryEntry(kanji="一")], output_path, show_progress=False) == {}
        assert json.loads(output_path.read_text(encoding='utf-8')) == {}

    def test_with_progress_panel(self, image_entries, image_tree, temp_dir):
        result = images.inline_images(image_entries, temp_dir / "images.json", image_tree)
        assert len(result) == 2


# ============================================================================
# Copying
# ============================================================================


class TestCopyImages:
    """Tests for copy_images."""

    def test_copies_readable_images(self, image_entries, image_tree, temp_dir):
        target = temp_dir / "output" / "images"
        copied = images.copy_images(image_entries, target, image_tree, show_progress=False)

        assert copied == 2
        assert (target / "tree.jpg").read_bytes() == b"\xff\xd8tree"
        assert (target / "sun.png").read_bytes() == b"\x89PNGsun"
        assert not (target / "missing.gif").exists()

    def test_name_collision_keeps_first(self, image_tree, temp_dir, caplog):
        (image_tree / "other").mkdir()
        (image_tree / "other" / "tree.jpg").write_bytes(b"other")
        entries = [DictionaryEntry(kanji="木", images=("image/tree.jpg", "other/tree.jpg"))]

        target = temp_dir / "images"
        copied = images.copy_images(entries, target, image_tree, show_progress=False)

        assert copied == 1
        assert (target / "tree.jpg").read_bytes() == b"\xff\xd8tree"
        assert "shares the name tree.jpg" in caplog.text

    def test_unopenable_path_does_not_stop_others(self, image_tree, temp_dir, caplog):
        entries = [DictionaryEntry(kanji="日", images=("bad\x00.png", "image/sun.png"))]
        target = temp_dir / "images"

        copied = images.copy_images(entries, target, image_tree, show_progress=False)

        assert copied == 1
        assert (target / "sun.png").read_bytes() == b"\x89PNGsun"
        assert "Error copying image" in caplog.text

    def test_existing_target_directory(self, image_entries, image_tree, temp_dir):
        target = temp_dir / "images"
        target.mkdir()
        assert images.copy_images(image_entries, target, image_tree, show_progress=False) == 2
