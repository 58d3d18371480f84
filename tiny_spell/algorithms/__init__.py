"""
Algorithm implementations for tiny-spell.
"""

from tiny_spell.algorithms.bloom import BloomFilter

__all__ = [
    "BloomFilter",
]
