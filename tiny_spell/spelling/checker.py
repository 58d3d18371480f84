"""
Spelling checker backed by a Bloom filter dictionary.

Memory efficiency comes at the cost of occasional false positives from
check(): a misspelled word is reported as correct with probability close to
the filter's false positive rate. Correct words are never rejected.
"""

from typing import Optional

from tiny_spell.algorithms.bloom import BloomFilter
from tiny_spell.spelling.utility import load_dictionary

DEFAULT_EXPECTED_WORDS = 260000
DEFAULT_FALSE_POSITIVE_RATE = 0.01


class SpellingChecker:
    """
    Check spelling against a dictionary loaded from a local word list.

    Example:
        checker = SpellingChecker("/usr/share/dict/words")
        checker.check("apple")  # True
        checker.check("aple")   # False, or True with probability ~1%
    """

    def __init__(self, dictionary_path: str, bloom: Optional[BloomFilter] = None):
        """
        Load a dictionary into a Bloom filter.

        Args:
            dictionary_path: File with one word per line.
            bloom: Filter to populate. When omitted, one is sized for
                   DEFAULT_EXPECTED_WORDS at DEFAULT_FALSE_POSITIVE_RATE.

        Raises:
            DictionaryLoadError: If the dictionary can not be read.
        """
        if bloom is None:
            bloom = BloomFilter.from_false_positive_rate(
                DEFAULT_EXPECTED_WORDS, DEFAULT_FALSE_POSITIVE_RATE
            )

        self._dictionary = bloom
        load_dictionary(dictionary_path, self._dictionary)

    def check(self, word: str) -> bool:
        """Return True if the word is (probably) spelled correctly."""
        return self._dictionary.might_contain(word)

    @property
    def dictionary_size(self) -> int:
        """Number of words added to the dictionary."""
        return self._dictionary.items_processed

    @property
    def false_positive_rate(self) -> float:
        """Probability that a word never added is still reported as correct."""
        return self._dictionary.false_positive_rate

    @property
    def bloom(self) -> BloomFilter:
        """The underlying Bloom filter."""
        return self._dictionary
