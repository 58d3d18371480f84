"""
Helpers shared by the spelling checker and its accuracy harness.

Dictionaries are plain text files with one word per line.
"""

import logging
import random
import string
import time
from typing import Iterator, List, Optional, Set

from tiny_spell.algorithms.bloom import BloomFilter
from tiny_spell.errors import DictionaryLoadError, InvalidParameter

logger = logging.getLogger(__name__)


def _iter_words(source_path: str) -> Iterator[str]:
    """Yield each line of a dictionary file without its line terminator."""
    if source_path is None:
        raise InvalidParameter("Source path can not be None")

    try:
        with open(source_path, encoding="utf-8") as source:
            for line in source:
                yield line.rstrip("\r\n")
    except (OSError, UnicodeDecodeError) as exc:
        raise DictionaryLoadError(
            f"Can not read dictionary {source_path!r}: {exc}"
        ) from exc


def load_dictionary(source_path: str, dictionary: BloomFilter) -> int:
    """
    Insert every line of a dictionary file into a Bloom filter.

    Only the filter's bits and item count change; its parameters are fixed.
    A failure part way through leaves the words read so far inserted.

    Args:
        source_path: Path to a file with one word per line.
        dictionary: Filter receiving the words.

    Returns:
        Number of words inserted.

    Raises:
        InvalidParameter: If source_path is None.
        DictionaryLoadError: If the file can not be opened or read.
    """
    start_time = time.time()
    count = 0

    for word in _iter_words(source_path):
        dictionary.insert(word)
        count += 1

    logger.info(
        "Processed input file %s (%d words) in %s",
        source_path,
        count,
        format_latency(start_time),
    )
    return count


def load_word_set(source_path: str) -> Set[str]:
    """
    Read a dictionary file into an exact set of words.

    Raises:
        InvalidParameter: If source_path is None.
        DictionaryLoadError: If the file can not be opened or read.
    """
    start_time = time.time()
    words = set(_iter_words(source_path))
    logger.info(
        "Loaded reference set from %s (%d words) in %s",
        source_path,
        len(words),
        format_latency(start_time),
    )
    return words


def random_word_generator(
    number_of_words: int,
    min_length: int,
    max_length: int,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """
    Create random lowercase ASCII words.

    Short words are more likely to collide with real dictionary words, so the
    caller chooses the length range to suit the test.

    Args:
        number_of_words: How many words to generate.
        min_length: Minimum word length (inclusive).
        max_length: Maximum word length (inclusive).
        rng: Random source; a new unseeded one is used when omitted.

    Returns:
        List of generated words.

    Raises:
        InvalidParameter: If the count is negative or the length range is empty.
    """
    if number_of_words < 0:
        raise InvalidParameter("Number of words can not be negative")
    if min_length < 1 or min_length > max_length:
        raise InvalidParameter(
            f"Invalid word length range [{min_length}, {max_length}]"
        )

    rng = rng if rng is not None else random.Random()
    start_time = time.time()

    words = [
        "".join(
            rng.choice(string.ascii_lowercase)
            for _ in range(rng.randint(min_length, max_length))
        )
        for _ in range(number_of_words)
    ]

    logger.info("Generated %d random words in %s", number_of_words, format_latency(start_time))
    return words


def format_latency(start_time: float) -> str:
    """
    Format the time elapsed since start_time (as returned by time.time()).

    Returns:
        A string like "Total time (hh:mm:ss:SSS): [0:0:1:250]".
    """
    duration_ms = max(0, int((time.time() - start_time) * 1000))

    hours, duration_ms = divmod(duration_ms, 3600000)
    minutes, duration_ms = divmod(duration_ms, 60000)
    seconds, millis = divmod(duration_ms, 1000)

    return f"Total time (hh:mm:ss:SSS): [{hours}:{minutes}:{seconds}:{millis}]"
