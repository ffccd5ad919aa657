"""
Build configuration.

Settings come from an optional YAML file; anything it leaves out falls back to
the defaults below, and command-line flags override both.

Format:
  output: output/dictionary
  formats: [tsv, stardict, flashcards]
  stardict:
    bookname: Japanese Dictionary
    author: Parser
    description: Japanese dictionary with images
    sametypesequence: m
  images:
    inline: false
    copy: false
    root: assets          # base for relative image paths
    max_workers: 8
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from kanjidict.export_stardict import StarDictInfo


logger = logging.getLogger(__name__)

FORMATS = ('tsv', 'stardict', 'flashcards')


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration."""


@dataclass
class ImageOptions:
    inline: bool = False
    copy: bool = False
    root: Optional[Path] = None
    max_workers: int = 8


@dataclass
class BuildConfig:
    output: Path = Path("output/dictionary")
    formats: List[str] = field(default_factory=lambda: list(FORMATS))
    stardict: StarDictInfo = field(default_factory=StarDictInfo)
    images: ImageOptions = field(default_factory=ImageOptions)


def parse_formats(value: Any) -> List[str]:
    """Accept a list or a comma-separated string of format names."""
    if isinstance(value, str):
        value = [part.strip() for part in value.split(',') if part.strip()]
    if not isinstance(value, list) or not value:
        raise ConfigError(f"formats must be a non-empty list, got {value!r}")

    unknown = [name for name in value if name not in FORMATS]
    if unknown:
        raise ConfigError(f"Unknown format(s): {', '.join(map(str, unknown))} "
                          f"(available: {', '.join(FORMATS)})")
    return list(dict.fromkeys(value))


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return section


def _path(name: str, value: Any) -> Path:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{name}' must be a path, got {value!r}")
    return Path(value)


def config_from_dict(data: Dict[str, Any]) -> BuildConfig:
    """Build a BuildConfig from parsed YAML, filling in defaults."""
    config = BuildConfig()

    if 'output' in data:
        config.output = _path('output', data['output'])
    if 'formats' in data:
        config.formats = parse_formats(data['formats'])

    stardict = _section(data, 'stardict')
    for key in ('bookname', 'author', 'description', 'sametypesequence'):
        if key in stardict:
            setattr(config.stardict, key, str(stardict[key]))

    images = _section(data, 'images')
    config.images.inline = bool(images.get('inline', config.images.inline))
    config.images.copy = bool(images.get('copy', config.images.copy))
    if images.get('root') is not None:
        config.images.root = _path('images.root', images['root'])
    if 'max_workers' in images:
        workers = images['max_workers']
        if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
            raise ConfigError(f"images.max_workers must be a positive integer, got {workers!r}")
        config.images.max_workers = workers

    return config


def load_config(config_path: Optional[Path] = None) -> BuildConfig:
    """
    Load the build configuration.

    A missing or empty file yields the defaults.
    """
    if config_path is None:
        return BuildConfig()

    if not config_path.exists():
        logger.info(f"No config file found at {config_path}, using defaults")
        return BuildConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e

    if data is None:
        return BuildConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping")

    config = config_from_dict(data)
    logger.info(f"Loaded config from {config_path}")
    return config
