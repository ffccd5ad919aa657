"""
manifest.py - Record the artifacts of a build with checksums.

Outputs:
  - <out>.manifest.json (input checksum, per-artifact size and SHA256,
    entry statistics)

The manifest is a diffable snapshot of one run: rebuilding the same document
with the same settings must reproduce every checksum except the .ifo date.
"""

import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from kanjidict import __version__


logger = logging.getLogger(__name__)


def compute_sha256(filepath: Path) -> str:
    """Compute SHA256 hash of a file."""
    sha256 = hashlib.sha256()

    with open(filepath, 'rb') as f:
        while chunk := f.read(8192):
            sha256.update(chunk)

    return sha256.hexdigest()


def format_size(size_bytes: float) -> str:
    """Format size in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


def get_file_info(filepath: Path) -> Optional[Dict]:
    """Size and checksum of one artifact, or None if it was not written."""
    if not filepath.exists():
        return None

    size = filepath.stat().st_size
    return {
        'path': str(filepath),
        'size_bytes': size,
        'size_human': format_size(size),
        'sha256': compute_sha256(filepath),
    }


def generate_manifest(input_path: Path, artifacts: Dict[str, List[Path]],
                      stats: dict, output_path: Path) -> dict:
    """
    Write the manifest for one build.

    Args:
        input_path: Source document
        artifacts: Written files grouped by format name
        stats: Output of build_stats.compute_statistics
        output_path: Manifest destination
    """
    formats = {}
    for name, paths in artifacts.items():
        infos = [info for info in (get_file_info(p) for p in paths) if info]
        formats[name] = {
            'artifacts': infos,
            'artifact_count': len(infos),
            'total_size_bytes': sum(info['size_bytes'] for info in infos),
        }

    manifest = {
        'generator': f"kanjidict {__version__}",
        'generated_at': datetime.now(timezone.utc).isoformat(),
        'input': get_file_info(input_path),
        'formats': formats,
        'statistics': stats,
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(manifest, f, indent=2, sort_keys=True, ensure_ascii=False)

    logger.info(f"✓ Manifest written: {output_path}")
    return manifest
