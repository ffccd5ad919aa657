#!/usr/bin/env python3
"""
kanjidict - Build portable dictionaries from an exported kanji glossary.

Reads:
  - one UTF-8 markup document (e.g. assets/dict.xhtml)
  - an optional YAML config (see kanjidict.config)

Outputs, for output prefix OUT:
  - OUT.tsv                 tab-separated entries
  - OUT/dictionary.{dict,idx,ifo}   StarDict dictionary
  - OUT.json                flashcard deck
  - OUT.images.json         base64 images (--inline-images)
  - images/ next to OUT     copied image files (--copy-images)
  - OUT.manifest.json       checksums and statistics

Usage:
    kanjidict assets/dict.xhtml --output output/dictionary
    kanjidict assets/dict.xhtml -c kanjidict.yaml --formats tsv,flashcards --inline-images
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import orjson

from kanjidict.build_stats import compute_statistics, log_statistics
from kanjidict.config import BuildConfig, ConfigError, load_config, parse_formats
from kanjidict.export_flashcards import export_flashcards
from kanjidict.export_stardict import export_stardict
from kanjidict.export_tsv import export_tsv
from kanjidict.extractor import parse_document
from kanjidict.images import IMAGES_DIRNAME, copy_images, inline_images
from kanjidict.manifest import generate_manifest
from kanjidict.models import DictionaryEntry


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def artifact_path(output: Path, suffix: str) -> Path:
    """OUT + suffix, keeping any dots already in the prefix name."""
    return output.parent / f"{output.name}{suffix}"


def apply_overrides(config: BuildConfig, args: argparse.Namespace) -> BuildConfig:
    """Let command-line flags win over config file values."""
    if args.output is not None:
        config.output = args.output
    if args.formats is not None:
        config.formats = parse_formats(args.formats)
    if args.inline_images:
        config.images.inline = True
    if args.copy_images:
        config.images.copy = True
    if args.image_root is not None:
        config.images.root = args.image_root
    if args.workers is not None:
        if args.workers < 1:
            raise ConfigError(f"--workers must be at least 1, got {args.workers}")
        config.images.max_workers = args.workers
    return config


def log_sample(entries: List[DictionaryEntry], index: int) -> None:
    if not 0 <= index < len(entries):
        logger.warning(f"Sample index {index} out of range (0-{len(entries) - 1})")
        return
    sample = orjson.dumps(entries[index].to_dict(), option=orjson.OPT_INDENT_2).decode('utf-8')
    logger.info(f"Sample entry #{index}:\n{sample}")


def export_all(entries: List[DictionaryEntry], config: BuildConfig,
               image_root: Path, show_progress: bool) -> Dict[str, List[Path]]:
    """Run every configured exporter. Returns written paths by format."""
    output = config.output
    artifacts: Dict[str, List[Path]] = {}

    logger.info(f"Exporting to {output} ({', '.join(config.formats)})")

    if 'tsv' in config.formats:
        tsv_path = artifact_path(output, '.tsv')
        export_tsv(entries, tsv_path)
        artifacts['tsv'] = [tsv_path]

    if 'stardict' in config.formats:
        paths = export_stardict(entries, output, config.stardict)
        artifacts['stardict'] = list(paths.values())

    if 'flashcards' in config.formats:
        json_path = artifact_path(output, '.json')
        export_flashcards(entries, json_path)
        artifacts['flashcards'] = [json_path]

    if config.images.inline:
        images_json = artifact_path(output, '.images.json')
        inline_images(entries, images_json, image_root,
                      max_workers=config.images.max_workers, show_progress=show_progress)
        artifacts['images'] = [images_json]

    if config.images.copy:
        copy_images(entries, output.parent / IMAGES_DIRNAME, image_root, show_progress=show_progress)

    return artifacts


def build(input_path: Path, config: BuildConfig, show_progress: bool = True,
          sample: Optional[int] = None) -> int:
    """Parse the document and write every artifact. Returns an exit code."""
    try:
        document = input_path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read input document {input_path}: {e}")
        return 1

    logger.info(f"Parsing {input_path}")
    entries = parse_document(document)

    if sample is not None:
        log_sample(entries, sample)

    image_root = config.images.root or input_path.parent

    try:
        artifacts = export_all(entries, config, image_root, show_progress)
        stats = compute_statistics(entries)
        generate_manifest(input_path, artifacts, stats,
                          artifact_path(config.output, '.manifest.json'))
    except OSError as e:
        logger.error(f"Cannot write output: {e}")
        return 1

    log_statistics(stats)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the kanjidict CLI."""
    parser = argparse.ArgumentParser(
        description='Convert an exported kanji glossary into TSV, StarDict and flashcard JSON',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # All formats with default settings
  kanjidict assets/dict.xhtml

  # Chosen formats, images inlined as base64 and copied next to the output
  kanjidict assets/dict.xhtml -o output/dictionary --formats tsv,flashcards \\
      --inline-images --copy-images
        """
    )
    parser.add_argument('input', type=Path, help='Glossary markup document (UTF-8)')
    parser.add_argument('-o', '--output', type=Path,
                        help='Output prefix (default: output/dictionary)')
    parser.add_argument('-c', '--config', type=Path,
                        help='YAML configuration file')
    parser.add_argument('--formats',
                        help='Comma-separated formats: tsv,stardict,flashcards (default: all)')
    parser.add_argument('--inline-images', action='store_true',
                        help='Write OUT.images.json with base64-encoded images')
    parser.add_argument('--copy-images', action='store_true',
                        help='Copy referenced images into images/ next to the output')
    parser.add_argument('--image-root', type=Path,
                        help='Base directory for relative image paths (default: input directory)')
    parser.add_argument('--workers', type=int,
                        help='Threads used to read images (default: 8)')
    parser.add_argument('--no-progress', action='store_true',
                        help='Disable the live progress panel')
    parser.add_argument('--sample', type=int, metavar='N',
                        help='Log the Nth parsed entry for inspection')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = apply_overrides(load_config(args.config), args)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    return build(args.input, config, show_progress=not args.no_progress, sample=args.sample)


if __name__ == '__main__':
    sys.exit(main())
