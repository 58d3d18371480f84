"""
Hashing functions for tiny-spell.

This module derives the bit positions used by the Bloom filter from a single
cryptographic digest. Rather than implementing k distinct hash functions, each
round appends its index to the word ("apple0", "apple1", ...) and digests the
salted text, so one algorithm simulates k independent hashes.

The digest algorithm is any fixed-length algorithm known to hashlib; MD5 is the
default.
"""

import hashlib
from typing import Any, List

from tiny_spell.errors import DigestUnavailable

DEFAULT_HASH_NAME = "md5"

# Number of leading digest bytes folded into an index
INDEX_BYTES = 4


def resolve_digest(hash_name: str) -> str:
    """
    Check that hashlib can build a fixed-length digest for the given name.

    Args:
        hash_name: Algorithm name as accepted by hashlib.new().

    Returns:
        The canonical (lowercase) algorithm name.

    Raises:
        DigestUnavailable: If the algorithm is unknown or has no fixed digest size.
    """
    try:
        context = hashlib.new(hash_name)
    except (TypeError, ValueError) as exc:
        raise DigestUnavailable(f"Can not initialize digest {hash_name!r}") from exc

    # Extendable-output functions (shake_*) report digest_size 0 and
    # need an explicit length, which would make indexes length-dependent
    if context.digest_size == 0:
        raise DigestUnavailable(
            f"Digest {hash_name!r} has no fixed output size"
        )

    return context.name


def leading_int(digest: bytes) -> int:
    """
    Read the first four bytes of a digest as a non-negative integer.

    The bytes are read big-endian. When a full four bytes are available they
    are treated as a signed 32-bit value and the absolute value is returned,
    so the result lies in [0, 2**31]. Shorter digests are read unsigned and an
    empty digest yields 0.

    Args:
        digest: Raw digest bytes.

    Returns:
        The extracted integer.
    """
    head = digest[:INDEX_BYTES]
    return abs(int.from_bytes(head, "big", signed=len(head) == INDEX_BYTES))


def salted_digest(word: Any, salt: int, hash_name: str = DEFAULT_HASH_NAME) -> bytes:
    """
    Digest the UTF-8 encoding of the word with the salt appended as decimal text.

    A fresh hashlib context is created for every call, so no digest state is
    shared between rounds or callers.
    """
    salted = f"{word}{salt}".encode("utf-8")
    return hashlib.new(hash_name, salted).digest()


def salted_indexes(
    word: Any, hash_count: int, bit_size: int, hash_name: str = DEFAULT_HASH_NAME
) -> List[int]:
    """
    Generate hash_count bit positions in [0, bit_size) for a word.

    Args:
        word: The word to hash (non-strings are hashed by their str() form).
        hash_count: Number of rounds, one position per round.
        bit_size: Size of the bit array the positions index into.
        hash_name: Digest algorithm used for every round.

    Returns:
        List of bit positions, in round order. Positions may repeat.
    """
    return [
        leading_int(salted_digest(word, i, hash_name)) % bit_size
        for i in range(hash_count)
    ]
