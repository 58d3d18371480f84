"""
Spelling checker built on the tiny-spell Bloom filter.

This includes:
- SpellingChecker: dictionary-backed check() facade
- SpellingCheckerAnalysis: accuracy harness against an exact word set
- utility helpers for loading dictionaries and generating random words
"""

from tiny_spell.spelling.analysis import AccuracyReport, SpellingCheckerAnalysis
from tiny_spell.spelling.checker import (
    DEFAULT_EXPECTED_WORDS,
    DEFAULT_FALSE_POSITIVE_RATE,
    SpellingChecker,
)
from tiny_spell.spelling.utility import (
    format_latency,
    load_dictionary,
    load_word_set,
    random_word_generator,
)

__all__ = [
    "SpellingChecker",
    "SpellingCheckerAnalysis",
    "AccuracyReport",
    "DEFAULT_EXPECTED_WORDS",
    "DEFAULT_FALSE_POSITIVE_RATE",
    "load_dictionary",
    "load_word_set",
    "random_word_generator",
    "format_latency",
]
