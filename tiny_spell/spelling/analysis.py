"""
Accuracy harness for the spelling checker.

The harness loads the full dictionary into an exact set (expensive, which is
why the checker itself does not) and cross-references check() against it for
randomly generated words.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional, Set

from tiny_spell.spelling.checker import SpellingChecker
from tiny_spell.spelling.utility import load_word_set, random_word_generator

logger = logging.getLogger(__name__)


@dataclass
class AccuracyReport:
    """
    Outcome of one accuracy run.

    Attributes:
        total_words: Number of random words checked
        false_positives: Words accepted by the checker but absent from the dictionary
        target_false_positive_rate: The checker's configured false positive rate
        dictionary_size: Number of words loaded into the checker
    """

    total_words: int
    false_positives: int
    target_false_positive_rate: float
    dictionary_size: int

    @property
    def observed_false_positive_rate(self) -> float:
        if self.total_words == 0:
            return 0.0
        return self.false_positives / self.total_words

    @property
    def accuracy(self) -> float:
        """Percentage of checked words answered correctly."""
        return (1.0 - self.observed_false_positive_rate) * 100


class SpellingCheckerAnalysis:
    """Measure observed checker accuracy against an exact word set."""

    def __init__(
        self, checker_factory: Callable[[str], SpellingChecker] = SpellingChecker
    ):
        """
        Args:
            checker_factory: Builds a checker from a dictionary path.
        """
        self._checker_factory = checker_factory
        self._dictionary: Set[str] = set()

    def load_dictionary(self, source_path: str) -> None:
        """Load the list of words into memory as an exact set."""
        self._dictionary = load_word_set(source_path)

    def analyze(
        self,
        total_test_words: int,
        dictionary_path: str,
        min_length: int = 3,
        max_length: int = 6,
        rng: Optional[random.Random] = None,
    ) -> AccuracyReport:
        """
        Check random words and count false positives.

        Args:
            total_test_words: Number of random words to check.
            dictionary_path: File with one word per line.
            min_length: Minimum random word length.
            max_length: Maximum random word length.
            rng: Random source for the generated words.

        Returns:
            The accuracy report.

        Raises:
            DictionaryLoadError: If the dictionary can not be read.
        """
        checker = self._checker_factory(dictionary_path)
        logger.info(
            "Spelling checker false positive probability: %g",
            checker.false_positive_rate,
        )
        logger.info("Loaded %d words.", checker.dictionary_size)

        self.load_dictionary(dictionary_path)

        words = random_word_generator(total_test_words, min_length, max_length, rng)
        false_positives = sum(
            1 for word in words if checker.check(word) and word not in self._dictionary
        )

        report = AccuracyReport(
            total_words=total_test_words,
            false_positives=false_positives,
            target_false_positive_rate=checker.false_positive_rate,
            dictionary_size=checker.dictionary_size,
        )
        logger.info("Spell checker accuracy: %.4f%%", report.accuracy)
        return report
