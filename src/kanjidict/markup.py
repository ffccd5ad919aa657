"""
Tag patterns of the exported glossary markup.

The export has no semantic markup: every field is a <span> whose rendering
class (textStyleNN) stands in for its meaning. The class names below are the
only contract with the source document.
"""

import re


# Entry delimiter: an empty paragraph, optionally surrounded by whitespace
SEPARATOR_PATTERN = re.compile(r'\s*<p class="bor"></p>\s*')

# Present in every genuine entry block
HEAD_MARKER = 'textStyle48'

# Header fields, one span each
NUMBER_PATTERN = re.compile(r'<span class="textStyle47a">(\d+)</span>')
LEVEL_PATTERN = re.compile(r'<span class="textStyle49">(L\d+)</span>')
HEAD_PATTERN = re.compile(r'<span class="textStyle48"([^>]*)>([^<]+)</span>')
ID_ATTRIBUTE_PATTERN = re.compile(r'\bid="([^"]*)"')
READING_PATTERN = re.compile(r'<span class="textStyle46">([^<]+)</span>')
MEANING_PATTERN = re.compile(r'<span class="textStyle47">([^<]+)</span>')
STROKES_PATTERN = re.compile(r'<span class="textStyle44">(\d+)\s*strokes?</span>', re.IGNORECASE)

# Example compounds: word / reading / gloss spans on one line
EXAMPLE_WORD_MARKER = 'textStyle41'
EXAMPLE_READING_MARKER = 'textStyle43'
EXAMPLE_WORD_PATTERN = re.compile(r'<span class="textStyle41">([^<]+)</span>')
EXAMPLE_READING_PATTERN = re.compile(r'<span class="textStyle43">([^<]+)</span>')
EXAMPLE_MEANING_PATTERN = re.compile(r'<span class="textStyle44">([^<]+)</span>')

# Body text (etymology, mnemonic, example glosses)
TEXT_MARKER = 'textStyle44'
TEXT_PATTERN = re.compile(r'<span class="textStyle44">([^<]+)</span>')
INDENT_MARKER = 'indent2'
ETYMOLOGY_SIGNALS = ('OBI', 'Originally', 'Seal', 'References:')

MNEMONIC_KEYWORD = 'Mnemonic'
MNEMONIC_LABELLED_PATTERN = re.compile(
    r'<span class="textStyle45">Mnemonic:</span> <span class="textStyle44">([^<]+)</span>'
)

IMAGE_PATTERN = re.compile(r'<img[^>]*src="([^"]*)"[^>]*>')

_TAG_PATTERN = re.compile(r'<[^>]+>')
_WHITESPACE_PATTERN = re.compile(r'\s+')


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs into single spaces and trim."""
    return _WHITESPACE_PATTERN.sub(' ', text).strip()


def clean_text_content(fragment: str) -> str:
    """Strip tags from a markup fragment and normalize its whitespace."""
    return normalize_whitespace(_TAG_PATTERN.sub(' ', fragment))
