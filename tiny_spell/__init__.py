"""
tiny-spell - Compact Spelling Dictionary

tiny-spell checks words against a dictionary held in a Bloom filter, trading a
small, bounded false positive rate for a fraction of the memory an exact set
would need.
"""

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from tiny_spell.algorithms.bloom import BloomFilter
from tiny_spell.core.base import MembershipSummary
from tiny_spell.errors import (
    DictionaryLoadError,
    DigestUnavailable,
    InvalidParameter,
    TinySpellError,
)
from tiny_spell.spelling import SpellingChecker, SpellingCheckerAnalysis

__all__ = [
    # Core base classes
    "MembershipSummary",
    # Algorithm implementations
    "BloomFilter",
    # Spelling checker
    "SpellingChecker",
    "SpellingCheckerAnalysis",
    # Errors
    "TinySpellError",
    "InvalidParameter",
    "DigestUnavailable",
    "DictionaryLoadError",
]
