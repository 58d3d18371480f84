"""
Bloom Filter implementation for tiny-spell.

This module provides the Bloom Filter used for compact, probabilistic
dictionary membership testing.
"""

from tiny_spell.algorithms.bloom.base import (
    MAX_BIT_SIZE,
    BloomFilter,
    optimal_bit_size,
    optimal_hash_count,
)

__all__ = [
    "BloomFilter",
    "MAX_BIT_SIZE",
    "optimal_bit_size",
    "optimal_hash_count",
]
