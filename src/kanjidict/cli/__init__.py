"""
Command-line interface entry points for kanjidict.

Entry points:
- kanjidict: Parse a glossary document and export every configured format
"""
