"""
Command line interface for tiny-spell.

    tiny-spell check --dictionary /usr/share/dict/words apple aple
    tiny-spell analyze --dictionary /usr/share/dict/words --words 10000
    tiny-spell stats --expected-words 260000 --false-positive-rate 0.01
"""

import logging
import random
import sys
from typing import Optional, Tuple

import click

from tiny_spell.algorithms.bloom import BloomFilter
from tiny_spell.core.hash import DEFAULT_HASH_NAME
from tiny_spell.errors import TinySpellError
from tiny_spell.spelling.analysis import SpellingCheckerAnalysis
from tiny_spell.spelling.checker import (
    DEFAULT_EXPECTED_WORDS,
    DEFAULT_FALSE_POSITIVE_RATE,
    SpellingChecker,
)

DEFAULT_DICTIONARY_PATH = "/usr/share/dict/words"


def build_filter(
    expected_words: int,
    false_positive_rate: Optional[float],
    bit_size: Optional[int],
    hash_name: str,
) -> BloomFilter:
    """Build a filter from CLI options, defaulting to the checker's accuracy target."""
    if false_positive_rate is not None and bit_size is not None:
        raise click.UsageError(
            "--false-positive-rate and --bit-size are mutually exclusive"
        )
    if bit_size is None and false_positive_rate is None:
        false_positive_rate = DEFAULT_FALSE_POSITIVE_RATE

    try:
        return BloomFilter(
            expected_words,
            false_positive_rate=false_positive_rate,
            bit_size=bit_size,
            hash_name=hash_name,
        )
    except TinySpellError as exc:
        raise click.ClickException(str(exc)) from exc


def filter_options(func):
    """Options shared by commands that build a Bloom filter."""
    options = [
        click.option(
            "--expected-words",
            type=int,
            default=DEFAULT_EXPECTED_WORDS,
            show_default=True,
            help="Number of words the filter is sized for.",
        ),
        click.option(
            "--false-positive-rate",
            type=float,
            default=None,
            help=f"Target false positive rate [default: {DEFAULT_FALSE_POSITIVE_RATE}].",
        ),
        click.option(
            "--bit-size",
            type=int,
            default=None,
            help="Explicit bit budget (instead of --false-positive-rate).",
        ),
        click.option(
            "--hash-name",
            default=DEFAULT_HASH_NAME,
            show_default=True,
            help="hashlib digest algorithm used for hashing.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


dictionary_option = click.option(
    "--dictionary",
    "dictionary_path",
    envvar="TINY_SPELL_DICTIONARY",
    default=DEFAULT_DICTIONARY_PATH,
    show_default=True,
    type=click.Path(dir_okay=False, path_type=str),
    help="Word list with one word per line.",
)


@click.group()
@click.option(
    "--log-level",
    envvar="TINY_SPELL_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity.",
)
@click.version_option(package_name="tiny-spell")
def main(log_level: str) -> None:
    """Spelling checker backed by a Bloom filter dictionary."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(levelname)s - %(message)s",
        force=True,
    )


@main.command()
@dictionary_option
@filter_options
@click.argument("words", nargs=-1, required=True)
def check(
    dictionary_path: str,
    expected_words: int,
    false_positive_rate: Optional[float],
    bit_size: Optional[int],
    hash_name: str,
    words: Tuple[str, ...],
) -> None:
    """Check the spelling of WORDS. Exits with status 1 if any is misspelled."""
    bloom = build_filter(expected_words, false_positive_rate, bit_size, hash_name)

    try:
        checker = SpellingChecker(dictionary_path, bloom)
    except TinySpellError as exc:
        raise click.ClickException(str(exc)) from exc

    misspelled = 0
    for word in words:
        try:
            ok = checker.check(word)
        except UnicodeEncodeError as exc:
            raise click.ClickException(
                f"Can not encode word {word!r} as UTF-8"
            ) from exc
        if not ok:
            misspelled += 1
        click.echo(f"{word}\t{'ok' if ok else 'misspelled'}")

    if misspelled:
        sys.exit(1)


@main.command()
@dictionary_option
@click.option(
    "--words",
    "total_words",
    type=click.IntRange(min=1),
    default=10000,
    show_default=True,
    help="Number of random words to check.",
)
@click.option("--min-length", type=click.IntRange(min=1), default=3, show_default=True)
@click.option("--max-length", type=click.IntRange(min=1), default=6, show_default=True)
@click.option("--seed", type=int, default=None, help="Seed for the random words.")
def analyze(
    dictionary_path: str,
    total_words: int,
    min_length: int,
    max_length: int,
    seed: Optional[int],
) -> None:
    """Measure the observed false positive rate against an exact word set."""
    analysis = SpellingCheckerAnalysis()

    try:
        report = analysis.analyze(
            total_words,
            dictionary_path,
            min_length=min_length,
            max_length=max_length,
            rng=random.Random(seed),
        )
    except TinySpellError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Dictionary size: {report.dictionary_size}")
    click.echo(f"Target false positive rate: {report.target_false_positive_rate:g}")
    click.echo(
        f"Observed false positive rate: {report.observed_false_positive_rate:g} "
        f"({report.false_positives}/{report.total_words})"
    )
    click.echo(f"Spell checker accuracy: {report.accuracy:.4f}%")


@main.command()
@filter_options
def stats(
    expected_words: int,
    false_positive_rate: Optional[float],
    bit_size: Optional[int],
    hash_name: str,
) -> None:
    """Print the parameters derived for a filter without loading words."""
    bloom = build_filter(expected_words, false_positive_rate, bit_size, hash_name)

    click.echo(f"Expected words: {bloom.expected_items}")
    click.echo(f"Bit size: {bloom.bit_size}")
    click.echo(f"Hash count: {bloom.hash_count}")
    click.echo(f"Hash algorithm: {bloom.hash_name}")
    click.echo(f"False positive rate: {bloom.false_positive_rate:g}")
    click.echo(f"Bit array bytes: {(bloom.bit_size + 7) // 8}")


if __name__ == "__main__":
    main()
