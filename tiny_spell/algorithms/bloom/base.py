"""
Bloom Filter implementation for tiny-spell.

This module provides the Bloom Filter used as a compact spelling dictionary:
a space-efficient probabilistic set that answers "possibly present" or
"definitely absent" with a bounded false positive rate and no false negatives.

The filter is sized from one of two canonical formulas, where m is the bit
count, n the expected number of items, k the number of hash rounds and p the
false positive probability:

    k = (m / n) * ln(2)
    m = -n * ln(p) / (ln(2) ^ 2)
    p = (1 - e ^ (-k * n / m)) ^ k

Bit positions come from a single digest salted with the round index (see
tiny_spell.core.hash).

References:
    - Bloom, B. H. (1970). Space/time trade-offs in hash coding with allowable errors.
      Communications of the ACM, 13(7), 422-426.
    - Fan, L., Cao, P., Almeida, J., Broder, A. Z. (2000). Summary cache: a scalable
      wide-area web cache sharing protocol. IEEE/ACM Transactions on Networking.
"""

import array
import logging
import math
import sys
from typing import Any, Dict, List, Optional, TypeVar

from tiny_spell.core.base import MembershipSummary
from tiny_spell.core.hash import DEFAULT_HASH_NAME, resolve_digest, salted_indexes
from tiny_spell.errors import InvalidParameter

logger = logging.getLogger(__name__)

T = TypeVar("T")  # Type for the items being processed

# Largest bit array the accuracy-target formula may produce
MAX_BIT_SIZE = 2**31 - 1


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded up (not to even)."""
    return int(math.floor(value + 0.5))


def optimal_hash_count(expected_items: int, bit_size: int) -> int:
    """
    Optimal number of hash rounds, k = (m / n) * ln(2), never less than 1.

    Args:
        expected_items: Expected number of items (n).
        bit_size: Bit array size (m).

    Returns:
        Number of hash rounds.
    """
    bits_per_item = bit_size / expected_items
    return max(1, round_half_up(bits_per_item * math.log(2)))


def optimal_bit_size(expected_items: int, false_positive_rate: float) -> int:
    """
    Optimal bit array size, m = -n * ln(p) / (ln(2) ^ 2).

    The result is clamped to [1, MAX_BIT_SIZE].

    Args:
        expected_items: Expected number of items (n).
        false_positive_rate: Target false positive probability (p).

    Returns:
        Bit array size.
    """
    m = round_half_up(
        (-expected_items * math.log(false_positive_rate)) / (math.log(2) ** 2)
    )
    return max(1, min(m, MAX_BIT_SIZE))


def false_positive_rate_for(expected_items: int, bit_size: int, hash_count: int) -> float:
    """False positive probability p = (1 - e ^ (-k * n / m)) ^ k."""
    return (1 - math.exp(-hash_count * (expected_items / bit_size))) ** hash_count


class BloomFilter(MembershipSummary[T, bool]):
    """
    Bloom Filter for probabilistic dictionary membership.

    Exactly one of bit_size or false_positive_rate configures the filter:

    - bit_size: an explicit bit budget. The hash count is derived from it and
      the false positive rate is computed as diagnostic output.
    - false_positive_rate: an accuracy target. The bit size and hash count are
      derived from it and the target is stored as given.

    Inserting more than expected_items words is allowed; it only raises the
    real false positive rate above the configured one.

    The filter keeps no locks. Each hash round uses a fresh digest context, but
    concurrent inserts still race on the bit array and need external locking.

    Example:
        # Create a filter with 1% false positive rate for 1000 words
        bloom = BloomFilter(expected_items=1000, false_positive_rate=0.01)

        bloom.insert("apple")
        bloom.might_contain("apple")   # Returns True
        bloom.might_contain("orange")  # False, or True with probability ~1%
    """

    def __init__(
        self,
        expected_items: int,
        false_positive_rate: Optional[float] = None,
        bit_size: Optional[int] = None,
        hash_name: str = DEFAULT_HASH_NAME,
        memory_limit_bytes: Optional[int] = None,
    ):
        """
        Initialize a new Bloom filter.

        Args:
            expected_items: Number of words the sizing formulas are tuned for.
            false_positive_rate: Target false positive rate, strictly between 0 and 1.
            bit_size: Explicit bit array size.
            hash_name: hashlib algorithm used to derive bit positions.
            memory_limit_bytes: Optional memory limit, used by check_memory_limit().

        Raises:
            InvalidParameter: If expected_items or bit_size is not a positive integer,
                              if false_positive_rate is outside (0, 1), or if both
                              or neither of bit_size and false_positive_rate are given.
            DigestUnavailable: If hash_name cannot be used.
        """
        super().__init__(memory_limit_bytes)

        if (
            not isinstance(expected_items, int)
            or isinstance(expected_items, bool)
            or expected_items < 1
        ):
            raise InvalidParameter("Expected number of items must be a positive integer")
        if (bit_size is None) == (false_positive_rate is None):
            raise InvalidParameter(
                "Exactly one of bit_size or false_positive_rate must be given"
            )

        if bit_size is not None:
            if not isinstance(bit_size, int) or isinstance(bit_size, bool) or bit_size < 1:
                raise InvalidParameter("Bit size must be a positive integer")
            hash_count = optimal_hash_count(expected_items, bit_size)
            false_positive_rate = false_positive_rate_for(
                expected_items, bit_size, hash_count
            )
        else:
            if (
                not isinstance(false_positive_rate, (int, float))
                or isinstance(false_positive_rate, bool)
                or not (0 < false_positive_rate < 1)
            ):
                raise InvalidParameter("False positive rate must be between 0 and 1")
            bit_size = optimal_bit_size(expected_items, false_positive_rate)
            hash_count = optimal_hash_count(expected_items, bit_size)

        self._hash_name = resolve_digest(hash_name)
        self._expected_items = expected_items
        self._false_positive_rate = float(false_positive_rate)
        self._bit_size = bit_size
        self._hash_count = hash_count

        # One bit per position, packed eight to a byte
        num_bytes = (bit_size + 7) // 8
        self._bytes = array.array("B", [0]) * num_bytes

        logger.debug(
            "Created Bloom filter: bit_size=%d hash_count=%d expected_items=%d fpp=%g",
            self._bit_size,
            self._hash_count,
            self._expected_items,
            self._false_positive_rate,
        )

    @classmethod
    def from_bit_size(
        cls, expected_items: int, bit_size: int, hash_name: str = DEFAULT_HASH_NAME
    ) -> "BloomFilter[T]":
        """Create a filter with an explicit bit budget."""
        return cls(expected_items, bit_size=bit_size, hash_name=hash_name)

    @classmethod
    def from_false_positive_rate(
        cls,
        expected_items: int,
        false_positive_rate: float,
        hash_name: str = DEFAULT_HASH_NAME,
    ) -> "BloomFilter[T]":
        """Create a filter sized for a target false positive rate."""
        return cls(
            expected_items,
            false_positive_rate=false_positive_rate,
            hash_name=hash_name,
        )

    @classmethod
    def create_from_memory_limit(
        cls,
        memory_bytes: int,
        expected_items: int,
        hash_name: str = DEFAULT_HASH_NAME,
    ) -> "BloomFilter[T]":
        """
        Create a Bloom filter whose bit array fills a given memory budget.

        The bytes left after the object and array overhead become the bit
        budget, and the hash count and false positive rate follow from it.

        Args:
            memory_bytes: Maximum desired memory usage in bytes.
            expected_items: Number of words the filter should hold.
            hash_name: hashlib algorithm used to derive bit positions.

        Returns:
            A new BloomFilter sized to the memory constraint.

        Raises:
            InvalidParameter: If memory_bytes cannot hold the object overhead
                              plus a one byte array.
        """
        if (
            not isinstance(memory_bytes, int)
            or isinstance(memory_bytes, bool)
            or memory_bytes <= 0
        ):
            raise InvalidParameter("Memory limit must be a positive integer")

        # Overhead of a minimal instance, bit array buffer excluded
        probe = cls(1, bit_size=8, hash_name=hash_name)
        total_overhead = probe.estimate_size() - len(probe._bytes)
        available_bytes = memory_bytes - total_overhead

        if available_bytes < 1:
            raise InvalidParameter(
                f"Memory limit {memory_bytes} bytes is too small. "
                f"Estimated overhead is {total_overhead} bytes. "
                f"Need at least {total_overhead + 1} bytes."
            )

        bit_size = min(available_bytes * 8, MAX_BIT_SIZE)
        instance = cls(
            expected_items,
            bit_size=bit_size,
            hash_name=hash_name,
            memory_limit_bytes=memory_bytes,
        )

        if not instance.check_memory_limit():
            # Allocation granularity can push the real size slightly past the budget
            logger.warning(
                "Bloom filter estimated size (%d bytes) exceeds memory limit (%d bytes)",
                instance.estimate_size(),
                memory_bytes,
            )

        return instance

    def _get_bit_positions(self, item: T) -> List[int]:
        """
        Generate the bit positions for an item, one per hash round.

        Args:
            item: The item to hash.

        Returns:
            List of bit positions to set or check.
        """
        return salted_indexes(item, self._hash_count, self._bit_size, self._hash_name)

    def _set_bit(self, position: int) -> None:
        self._bytes[position // 8] |= 1 << (position % 8)

    def _test_bit(self, position: int) -> bool:
        return bool(self._bytes[position // 8] & (1 << (position % 8)))

    def update(self, item: T) -> None:
        """
        Add an item to the Bloom filter.

        Sets the bit for every hash round. Adding an item twice leaves the bit
        array unchanged but still counts as a processed item.

        Args:
            item: The item to add to the filter.

        Raises:
            UnicodeEncodeError: If the item cannot be encoded as UTF-8. The
                                filter is left unchanged.
        """
        # Hash first so a word that fails to encode is not counted
        positions = self._get_bit_positions(item)
        for position in positions:
            self._set_bit(position)

        super().update(item)

    def insert(self, item: T) -> None:
        """Add a word to the filter. Same as update()."""
        self.update(item)

    def might_contain(self, item: T) -> bool:
        """
        Test if an item might be in the set.

        Args:
            item: The item to test.

        Returns:
            True if the item might be in the set, False if definitely not in the set.
        """
        for position in self._get_bit_positions(item):
            # A single clear bit proves the item was never added
            if not self._test_bit(position):
                return False

        return True

    def contains(self, item: T) -> bool:
        """Alias of might_contain()."""
        return self.might_contain(item)

    def __contains__(self, item: T) -> bool:
        return self.might_contain(item)

    def query(self, item: T, *args: Any, **kwargs: Any) -> bool:
        """
        Query the Bloom filter for an item.

        This is a convenience method that calls might_contain().
        """
        return self.might_contain(item)

    @property
    def bit_size(self) -> int:
        """Total number of bits in the filter."""
        return self._bit_size

    @property
    def hash_count(self) -> int:
        """Number of hash rounds per item."""
        return self._hash_count

    @property
    def expected_items(self) -> int:
        """Number of items the filter was sized for."""
        return self._expected_items

    @property
    def false_positive_rate(self) -> float:
        """Configured (or, for an explicit bit budget, computed) false positive rate."""
        return self._false_positive_rate

    @property
    def hash_name(self) -> str:
        """Name of the digest algorithm."""
        return self._hash_name

    def set_bit_count(self) -> int:
        """Count the bits currently set to 1."""
        return sum(bin(byte).count("1") for byte in self._bytes)

    def is_empty(self) -> bool:
        """Check whether no bit has been set yet."""
        return not any(self._bytes)

    def current_false_positive_rate(self) -> float:
        """
        Estimate the false positive probability from the current fill ratio.

        Unlike false_positive_rate, this reflects how full the filter actually
        is: FPP ~= (set_bits / bit_size) ^ k.
        """
        fill_ratio = self.set_bit_count() / self._bit_size
        return max(0.0, min(fill_ratio**self._hash_count, 1.0))

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this filter in bytes.

        Returns:
            Estimated memory usage in bytes.
        """
        return super().estimate_size() + sys.getsizeof(self._bytes)

    def error_bounds(self) -> Dict[str, Any]:
        """
        Calculate the theoretical error bounds for this Bloom filter.

        Returns:
            A dictionary with the expected false positive rate for the number
            of items inserted so far, and a coarse error margin.
        """
        bounds: Dict[str, Any] = super().error_bounds()
        items = self._items_processed

        if items > 0:
            fill_ratio = 1 - math.exp(-(self._hash_count * items) / self._bit_size)
            bounds["current_theoretical_fpp"] = min(fill_ratio**self._hash_count, 1.0)
            bounds["theoretical_fill_ratio"] = fill_ratio

            if fill_ratio < 0.5:
                bounds["error_margin"] = "low"
            elif fill_ratio < 0.8:
                bounds["error_margin"] = "moderate"
            else:
                bounds["error_margin"] = "high"

        return bounds

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the Bloom filter.

        Returns:
            A dictionary containing the filter parameters, fill ratio and
            false positive estimates.
        """
        stats = super().get_stats()

        set_bits = self.set_bit_count()
        stats.update(
            {
                "expected_items": self._expected_items,
                "false_positive_rate": self._false_positive_rate,
                "bit_size": self._bit_size,
                "hash_count": self._hash_count,
                "hash_name": self._hash_name,
                "set_bits": set_bits,
                "fill_ratio": set_bits / self._bit_size,
                "current_fpp": self.current_false_positive_rate(),
            }
        )

        if self._items_processed > 0:
            stats["bits_per_item"] = self._bit_size / self._items_processed

        return stats

    def __repr__(self) -> str:
        return (
            f"BloomFilter(bit_size={self._bit_size}, hash_count={self._hash_count}, "
            f"expected_items={self._expected_items}, "
            f"false_positive_rate={self._false_positive_rate})"
        )
