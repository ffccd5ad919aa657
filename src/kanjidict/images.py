"""
images.py - Resolve, inline and copy the images referenced by entries.

Exported formats never point at the raw paths found in the markup; every
reference is rewritten to images/<basename>, relative to the exported files.

Outputs:
  - <out>.images.json: {raw path: {data, mime_type, filename}} (base64 data)
  - <images dir>/<basename>: copies of the referenced files

An image that cannot be read is logged and left out; it never stops the run.
"""

import base64
import logging
import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import orjson

from kanjidict.models import DictionaryEntry
from kanjidict.progress_display import ProgressDisplay


logger = logging.getLogger(__name__)

IMAGES_DIRNAME = "images"


def image_filename(path: str) -> str:
    """Last '/'-separated component of a raw image path."""
    return path.rsplit('/', 1)[-1] or path


def rewrite_image_path(path: str) -> str:
    """Map a raw markup path onto the exported images/<basename> scheme."""
    return f"{IMAGES_DIRNAME}/{image_filename(path)}"


def guess_mime_type(path: str) -> str:
    """image/<ext> from the file extension, with jpg spelled jpeg."""
    filename = image_filename(path)
    ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else 'jpg'
    return f"image/{'jpeg' if ext == 'jpg' else ext}"


def distinct_images(entries: Iterable[DictionaryEntry]) -> List[str]:
    """Every referenced image path once, in first-appearance order."""
    return list(dict.fromkeys(path for entry in entries for path in entry.images))


def resolve_image(path: str, image_root: Optional[Path] = None) -> Path:
    """Locate a raw image path on disk; relative paths hang off image_root."""
    candidate = Path(path)
    if candidate.is_absolute() or image_root is None:
        return candidate
    return image_root / candidate


def encode_image(path: str, image_root: Optional[Path] = None) -> Dict[str, str]:
    """
    Read one image and return its base64 record.

    Raises OSError, or ValueError for a path the filesystem cannot represent.
    """
    data = resolve_image(path, image_root).read_bytes()
    return {
        'data': base64.b64encode(data).decode('ascii'),
        'mime_type': guess_mime_type(path),
        'filename': image_filename(path),
    }


def inline_images(
    entries: List[DictionaryEntry],
    output_path: Path,
    image_root: Optional[Path] = None,
    max_workers: int = 8,
    show_progress: bool = True
) -> Dict[str, Dict[str, str]]:
    """
    Base64-encode every referenced image into a JSON map.

    Images are read concurrently; the map keeps first-appearance order.

    Returns:
        The map that was written, without the images that failed
    """
    paths = distinct_images(entries)
    logger.info(f"Inlining {len(paths):,} distinct images")

    encoded: Dict[str, Dict[str, str]] = {}
    with ProgressDisplay("Inlining images", total=len(paths), enabled=show_progress) as progress:
        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
            futures = {executor.submit(encode_image, path, image_root): path for path in paths}
            for future in as_completed(futures):
                path = futures[future]
                try:
                    encoded[path] = future.result()
                    progress.advance(Encoded=1)
                except (OSError, ValueError) as e:
                    logger.warning(f"Error processing image {path}: {e}")
                    progress.advance(Failed=1)

    image_data = {path: encoded[path] for path in paths if path in encoded}

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(orjson.dumps(image_data, option=orjson.OPT_INDENT_2))

    logger.info(f"  -> {output_path.name}: {len(image_data):,} images inlined")
    return image_data


def copy_images(
    entries: List[DictionaryEntry],
    images_dir: Path,
    image_root: Optional[Path] = None,
    show_progress: bool = True
) -> int:
    """
    Copy every referenced image to images_dir/<basename>.

    Returns:
        Number of files copied
    """
    paths = distinct_images(entries)
    images_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Copying {len(paths):,} distinct images to {images_dir}")

    copied = 0
    sources_by_name: Dict[str, str] = {}
    with ProgressDisplay("Copying images", total=len(paths), enabled=show_progress) as progress:
        for path in paths:
            filename = image_filename(path)
            if filename in sources_by_name:
                logger.warning(f"Image {path} shares the name {filename} with "
                               f"{sources_by_name[filename]}; keeping the first")
                progress.advance(Skipped=1)
                continue
            sources_by_name[filename] = path

            try:
                shutil.copy2(resolve_image(path, image_root), images_dir / filename)
                copied += 1
                progress.advance(Copied=1)
            except (OSError, ValueError) as e:
                logger.warning(f"Error copying image {path}: {e}")
                progress.advance(Failed=1)

    logger.info(f"  -> Copied {copied:,} images")
    return copied
