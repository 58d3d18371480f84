"""
Core functionality for tiny-spell.
"""

from tiny_spell.core.base import MembershipSummary
from tiny_spell.core.hash import (
    DEFAULT_HASH_NAME,
    leading_int,
    resolve_digest,
    salted_indexes,
)

__all__ = [
    # Base classes
    "MembershipSummary",
    # Hashing
    "DEFAULT_HASH_NAME",
    "leading_int",
    "resolve_digest",
    "salted_indexes",
]
