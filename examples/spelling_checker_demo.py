"""
Spelling Checker Demo for tiny-spell.

This example builds a small dictionary, checks a few words against it and
measures how often random strings slip through as false positives. It
highlights the Bloom filter's probabilistic nature (false positives) and its
guarantee of no false negatives.
"""

import logging
import os
import random
import tempfile

from tiny_spell.algorithms.bloom import BloomFilter
from tiny_spell.spelling import SpellingChecker, SpellingCheckerAnalysis, random_word_generator


def demonstrate_parameters():
    """Show how the two sizing configurations derive their parameters."""
    print("\n=== Filter Parameters ===")

    by_rate = BloomFilter(expected_items=260000, false_positive_rate=0.01)
    print("Sized for 260,000 words at 1% false positives:")
    print(f"  Bit size: {by_rate.bit_size:,} bits ({(by_rate.bit_size + 7) // 8:,} bytes)")
    print(f"  Hash rounds: {by_rate.hash_count}")

    by_bits = BloomFilter(expected_items=260000, bit_size=1 << 20)
    print("Given a 1 Mbit budget for the same words:")
    print(f"  Hash rounds: {by_bits.hash_count}")
    print(f"  Resulting false positive rate: {by_bits.false_positive_rate:.2%}")


def demonstrate_checker(dictionary_path):
    """Check correct and misspelled words."""
    print("\n=== Spelling Checker ===")

    checker = SpellingChecker(
        dictionary_path, BloomFilter(expected_items=5000, false_positive_rate=0.01)
    )
    print(f"Loaded {checker.dictionary_size:,} words")

    for word in ["apple", "banana", "cherry", "aple", "bananna", "chery"]:
        verdict = "ok" if checker.check(word) else "misspelled"
        print(f"  {word:<10} {verdict}")


def demonstrate_accuracy(dictionary_path):
    """Measure the observed false positive rate against an exact set."""
    print("\n=== Observed Accuracy ===")

    analysis = SpellingCheckerAnalysis(
        checker_factory=lambda path: SpellingChecker(
            path, BloomFilter(expected_items=5000, false_positive_rate=0.01)
        )
    )
    report = analysis.analyze(10000, dictionary_path, rng=random.Random(42))

    print(f"  Target false positive rate: {report.target_false_positive_rate:.2%}")
    print(
        f"  Observed false positive rate: {report.observed_false_positive_rate:.2%} "
        f"({report.false_positives}/{report.total_words})"
    )
    print(f"  Accuracy: {report.accuracy:.2f}%")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    words = ["apple", "banana", "cherry"] + random_word_generator(
        4997, 5, 10, random.Random(7)
    )

    with tempfile.TemporaryDirectory() as tmp_dir:
        dictionary_path = os.path.join(tmp_dir, "words.txt")
        with open(dictionary_path, "w", encoding="utf-8") as f:
            f.write("\n".join(words) + "\n")

        demonstrate_parameters()
        demonstrate_checker(dictionary_path)
        demonstrate_accuracy(dictionary_path)


if __name__ == "__main__":
    main()
