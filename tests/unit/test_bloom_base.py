"""
Unit tests for the Bloom Filter implementation.
"""

import math
import unittest

from tiny_spell.algorithms.bloom.base import (
    MAX_BIT_SIZE,
    BloomFilter,
    optimal_bit_size,
    optimal_hash_count,
    round_half_up,
)
from tiny_spell.errors import DigestUnavailable, InvalidParameter


class TestBloomFilter(unittest.TestCase):
    """Test cases for Bloom Filter."""

    def test_init_from_false_positive_rate(self):
        """Test sizing from an accuracy target."""
        bf = BloomFilter(expected_items=1000, false_positive_rate=0.01)
        # m = -(n * ln(p)) / (ln(2)^2) ≈ 9585.06 -> 9585 bits
        # k = (m/n) * ln(2) ≈ 6.64 -> 7 hash functions
        self.assertEqual(bf.bit_size, 9585)
        self.assertEqual(bf.hash_count, 7)
        # The target is stored as given, not recomputed
        self.assertEqual(bf.false_positive_rate, 0.01)
        self.assertEqual(bf.expected_items, 1000)
        self.assertEqual(bf.items_processed, 0)
        self.assertEqual(bf.hash_name, "md5")
        self.assertEqual(len(bf._bytes), (9585 + 7) // 8)

    def test_dictionary_sized_parameters(self):
        """Test the parameters of the default spelling dictionary filter."""
        n, p = 260000, 0.01
        bf = BloomFilter.from_false_positive_rate(n, p)

        expected_bits = -n * math.log(p) / (math.log(2) ** 2)
        self.assertEqual(bf.bit_size, math.floor(expected_bits + 0.5))
        self.assertEqual(bf.bit_size, 2492115)

        expected_hashes = (bf.bit_size / n) * math.log(2)
        self.assertEqual(bf.hash_count, math.floor(expected_hashes + 0.5))
        self.assertEqual(bf.hash_count, 7)

    def test_init_from_bit_size(self):
        """Test configuring an explicit bit budget."""
        bf = BloomFilter(expected_items=3, bit_size=20)
        # k = round(20/3 * ln 2) = round(4.62) = 5
        self.assertEqual(bf.bit_size, 20)
        self.assertEqual(bf.hash_count, 5)

        # p = (1 - e^(-k*n/m))^k is computed, not supplied
        expected_fpp = (1 - math.exp(-5 * 3 / 20)) ** 5
        self.assertAlmostEqual(bf.false_positive_rate, expected_fpp, places=12)
        self.assertAlmostEqual(bf.false_positive_rate, 0.040894, places=5)

        same = BloomFilter.from_bit_size(3, 20)
        self.assertEqual(same.hash_count, bf.hash_count)
        self.assertEqual(same.false_positive_rate, bf.false_positive_rate)

    def test_init_invalid_parameters(self):
        """Test that bad parameters fail fast at construction."""
        with self.assertRaises(InvalidParameter):
            BloomFilter(expected_items=0, false_positive_rate=0.01)
        with self.assertRaises(InvalidParameter):
            BloomFilter(expected_items=-5, bit_size=100)
        with self.assertRaises(InvalidParameter):
            BloomFilter(expected_items=10, bit_size=0)
        with self.assertRaises(InvalidParameter):
            BloomFilter(expected_items=10, bit_size=-1)
        with self.assertRaises(InvalidParameter):
            BloomFilter(expected_items=10.5, bit_size=100)

        # Booleans are not counts
        with self.assertRaises(InvalidParameter):
            BloomFilter(expected_items=True, bit_size=5)
        with self.assertRaises(InvalidParameter):
            BloomFilter(expected_items=10, bit_size=True)

        # Probability must be strictly inside (0, 1)
        for p in (0, 0.0, 1, 1.0, 1.5, -0.1):
            with self.assertRaises(InvalidParameter, msg=f"p={p}"):
                BloomFilter(expected_items=10, false_positive_rate=p)

        # Non-numeric probabilities are parameter errors, not TypeError
        for p in ("0.01", True, [0.01]):
            with self.assertRaises(InvalidParameter, msg=f"p={p!r}"):
                BloomFilter(expected_items=10, false_positive_rate=p)

        # Exactly one configuration must be chosen
        with self.assertRaises(InvalidParameter):
            BloomFilter(expected_items=10)
        with self.assertRaises(InvalidParameter):
            BloomFilter(expected_items=10, false_positive_rate=0.01, bit_size=100)

        # InvalidParameter is still a ValueError
        with self.assertRaises(ValueError):
            BloomFilter(expected_items=0, false_positive_rate=0.01)

    def test_unknown_digest(self):
        """Test that an unusable digest algorithm fails at construction."""
        with self.assertRaises(DigestUnavailable):
            BloomFilter(10, bit_size=64, hash_name="no-such-digest")
        # Variable-length digests have no fixed index width
        with self.assertRaises(DigestUnavailable):
            BloomFilter(10, bit_size=64, hash_name="shake_128")

    def test_other_digest(self):
        """Test that the digest algorithm is a configuration point."""
        md5 = BloomFilter(100, bit_size=1000)
        sha = BloomFilter(100, bit_size=1000, hash_name="sha256")
        self.assertEqual(sha.hash_name, "sha256")

        words = [f"word-{i}" for i in range(20)]
        for word in words:
            md5.insert(word)
            sha.insert(word)

        for word in words:
            self.assertTrue(sha.might_contain(word))
        # Different digests place the same words differently
        self.assertNotEqual(md5._bytes.tobytes(), sha._bytes.tobytes())

    def test_insert_and_might_contain(self):
        """Test adding words and checking for membership."""
        bf = BloomFilter(expected_items=3, bit_size=20)

        bf.insert("cat")
        bf.insert("dog")

        self.assertTrue(bf.might_contain("cat"))
        self.assertTrue(bf.might_contain("dog"))
        self.assertTrue("cat" in bf)
        self.assertTrue(bf.contains("dog"))
        self.assertTrue(bf.query("dog"))

        # "cat" -> [8, 14, 12, 6, 7] and "dog" -> [15, 8, 13, 11, 13] (MD5);
        # "zzz" needs bits 5, 10 and 18, none of which are set
        self.assertEqual(bf.set_bit_count(), 8)
        first = bf.might_contain("zzz")
        self.assertFalse(first)
        for _ in range(5):
            self.assertEqual(bf.might_contain("zzz"), first)

        self.assertEqual(bf.items_processed, 2)

    def test_update_is_insert(self):
        """Test that update() and insert() have the same effect."""
        a = BloomFilter(100, false_positive_rate=0.01)
        b = BloomFilter(100, false_positive_rate=0.01)

        a.update("apple")
        b.insert("apple")

        self.assertEqual(a._bytes.tobytes(), b._bytes.tobytes())
        self.assertEqual(a.items_processed, b.items_processed)

    def test_no_false_negatives(self):
        """Test that false negatives never occur, even past capacity."""
        bf = BloomFilter(expected_items=1000, false_positive_rate=0.01)

        # Add 2000 items (double the expected capacity)
        test_items = [f"item-{i}" for i in range(2000)]
        for i, item in enumerate(test_items):
            bf.insert(item)
            # Interleave checks of earlier items
            self.assertTrue(bf.might_contain(test_items[i // 2]))

        missing_items = [item for item in test_items if not bf.might_contain(item)]
        self.assertEqual(missing_items, [], "False negatives detected!")

        # Insertion is never refused once over capacity
        self.assertEqual(bf.items_processed, 2000)

    def test_unicode_words(self):
        """Test that non-ASCII words are hashed by their UTF-8 encoding."""
        bf = BloomFilter(expected_items=100, false_positive_rate=0.01)
        words = ["café", "naïve", "straße", "日本語", ""]

        for word in words:
            bf.insert(word)

        for word in words:
            self.assertTrue(bf.might_contain(word), f"{word!r} not found")

    def test_unencodable_word_leaves_filter_unchanged(self):
        """Test that a word with a lone surrogate is rejected without being counted."""
        bf = BloomFilter(expected_items=100, false_positive_rate=0.01)
        bf.insert("apple")
        before = bf._bytes.tobytes()

        with self.assertRaises(UnicodeEncodeError):
            bf.insert("bad\udcff")

        self.assertEqual(bf.items_processed, 1)
        self.assertEqual(bf._bytes.tobytes(), before)

        empty = BloomFilter(expected_items=100, false_positive_rate=0.01)
        with self.assertRaises(UnicodeEncodeError):
            empty.insert("bad\udcff")
        self.assertEqual(empty.items_processed, 0)
        self.assertTrue(empty.is_empty())

    def test_determinism(self):
        """Test that identical filters fed identical words end up identical."""
        bf1 = BloomFilter(expected_items=500, false_positive_rate=0.05)
        bf2 = BloomFilter(expected_items=500, false_positive_rate=0.05)

        for i in range(300):
            bf1.insert(f"word-{i}")
            bf2.insert(f"word-{i}")

        self.assertEqual(bf1._bytes.tobytes(), bf2._bytes.tobytes())

        for i in range(1000):
            query = f"query-{i}"
            self.assertEqual(bf1.might_contain(query), bf2.might_contain(query))

    def test_monotonic_fullness(self):
        """Test that the set bit count never decreases."""
        bf = BloomFilter(expected_items=200, false_positive_rate=0.05)
        previous = bf.set_bit_count()
        self.assertEqual(previous, 0)

        for i in range(400):
            bf.insert(f"item-{i}")
            current = bf.set_bit_count()
            self.assertGreaterEqual(current, previous)
            previous = current

    def test_reinsert_is_idempotent(self):
        """Test that inserting a word twice changes only the item count."""
        bf = BloomFilter(expected_items=100, false_positive_rate=0.01)
        bf.insert("apple")
        bf.insert("banana")
        snapshot = bf._bytes.tobytes()

        bf.insert("apple")

        self.assertEqual(bf._bytes.tobytes(), snapshot)
        self.assertEqual(bf.items_processed, 3)

    def test_false_positives(self):
        """Test that false positives occur at approximately the expected rate."""
        # Use a larger false positive rate for more predictable testing
        target_fpp = 0.1
        n_items = 1000
        n_tests = 10000

        bf = BloomFilter(expected_items=n_items, false_positive_rate=target_fpp)

        added_items = {f"item-{i}" for i in range(n_items)}
        for item in added_items:
            bf.insert(item)

        false_positives = 0
        for i in range(n_tests):
            item = f"other-{i}"
            self.assertNotIn(item, added_items)
            if bf.might_contain(item):
                false_positives += 1

        observed_fpp = false_positives / n_tests
        print(
            f"\n[FPP Test] Target: {target_fpp:.4f}, Observed: {observed_fpp:.4f} ({false_positives}/{n_tests})"
        )

        self.assertLessEqual(observed_fpp, target_fpp * 2, "Too many false positives")
        self.assertGreaterEqual(
            observed_fpp, target_fpp / 2, "Too few false positives (check test logic?)"
        )

        # The fill-ratio estimate should also land near the target at capacity
        self.assertAlmostEqual(
            bf.current_false_positive_rate(), target_fpp, delta=target_fpp * 0.5
        )

    def test_boundary_single_bit(self):
        """Test the smallest possible filter."""
        bf = BloomFilter(expected_items=1, bit_size=1)
        self.assertEqual(bf.bit_size, 1)
        self.assertEqual(bf.hash_count, 1)
        self.assertFalse(bf.might_contain("anything"))

        bf.insert("cat")
        # Every position is bit 0 now
        self.assertTrue(bf.might_contain("cat"))
        self.assertTrue(bf.might_contain("anything"))

    def test_boundary_half_probability(self):
        """Test a one-item filter at p = 0.5."""
        bf = BloomFilter(expected_items=1, false_positive_rate=0.5)
        # m = round(ln 2 / (ln 2)^2) = round(1.44) = 1, k = round(ln 2) = 1
        self.assertEqual(bf.bit_size, 1)
        self.assertEqual(bf.hash_count, 1)

        bf.insert("only")
        self.assertTrue(bf.might_contain("only"))
        self.assertEqual(bf.might_contain("other"), bf.might_contain("other"))

    def test_hash_count_never_zero(self):
        """Test that fewer bits than items still gives one hash round."""
        bf = BloomFilter(expected_items=100, bit_size=10)
        # (10 / 100) * ln 2 ≈ 0.07 rounds to 0
        self.assertEqual(bf.hash_count, 1)

        bf.insert("word")
        self.assertTrue(bf.might_contain("word"))

    def test_is_empty(self):
        """Test is_empty method."""
        bf = BloomFilter(expected_items=100, false_positive_rate=0.01)
        self.assertTrue(bf.is_empty())

        bf.insert("test")
        self.assertFalse(bf.is_empty())

    def test_stats(self):
        """Test statistics reporting."""
        bf = BloomFilter(expected_items=100, false_positive_rate=0.01)

        stats = bf.get_stats()
        self.assertEqual(stats["type"], "BloomFilter")
        self.assertEqual(stats["items_processed"], 0)
        self.assertEqual(stats["set_bits"], 0)
        self.assertEqual(stats["fill_ratio"], 0.0)
        self.assertNotIn("error_margin", stats)

        for i in range(50):
            bf.insert(f"item-{i}")

        stats = bf.get_stats()
        self.assertEqual(stats["items_processed"], 50)
        self.assertEqual(stats["bit_size"], bf.bit_size)
        self.assertEqual(stats["hash_count"], bf.hash_count)
        self.assertEqual(stats["hash_name"], "md5")
        self.assertGreater(stats["set_bits"], 0)
        self.assertLessEqual(stats["set_bits"], 50 * bf.hash_count)
        self.assertEqual(stats["error_margin"], "low")
        self.assertLess(stats["current_theoretical_fpp"], 0.01)
        self.assertAlmostEqual(stats["bits_per_item"], bf.bit_size / 50)

    def test_error_bounds_saturated(self):
        """Test that an over-filled filter reports a high error margin."""
        bf = BloomFilter(expected_items=100, false_positive_rate=0.1)
        for i in range(500):
            bf.insert(f"item-{i}")

        bounds = bf.error_bounds()
        self.assertEqual(bounds["error_margin"], "high")
        self.assertIsInstance(bounds["error_margin"], str)
        self.assertGreater(bounds["current_theoretical_fpp"], bf.false_positive_rate)
        self.assertGreater(bf.current_false_positive_rate(), bf.false_positive_rate)

    def test_create_from_memory_limit(self):
        """Test creating a filter from a memory budget."""
        memory_bytes = 4096

        bf = BloomFilter.create_from_memory_limit(memory_bytes, expected_items=1000)

        estimated_size = bf.estimate_size()
        print(
            f"\n[Memory Limit Test] Limit: {memory_bytes}, Estimated Size: {estimated_size}"
        )
        self.assertLessEqual(estimated_size, memory_bytes * 1.05)
        self.assertGreater(bf.bit_size, 8)
        self.assertEqual(bf.bit_size % 8, 0)
        self.assertEqual(bf.expected_items, 1000)

        with self.assertRaises(InvalidParameter):
            BloomFilter.create_from_memory_limit(50, expected_items=10)
        with self.assertRaises(InvalidParameter):
            BloomFilter.create_from_memory_limit(0, expected_items=10)

    def test_memory_scales_with_size(self):
        """Test that memory usage grows with the bit array."""
        small = BloomFilter(expected_items=100, false_positive_rate=0.01)
        large = BloomFilter(expected_items=10000, false_positive_rate=0.01)
        self.assertGreater(large.estimate_size(), small.estimate_size())
        self.assertTrue(small.check_memory_limit())

        limited = BloomFilter(
            expected_items=10000, false_positive_rate=0.01, memory_limit_bytes=100
        )
        self.assertFalse(limited.check_memory_limit())

    def test_repr(self):
        bf = BloomFilter(expected_items=3, bit_size=20)
        text = repr(bf)
        self.assertIn("bit_size=20", text)
        self.assertIn("hash_count=5", text)
        self.assertIn("expected_items=3", text)


class TestSizingFormulas(unittest.TestCase):
    """Test cases for the parameter derivation helpers."""

    def test_round_half_up(self):
        """Test that halves round up rather than to even."""
        self.assertEqual(round_half_up(0.5), 1)
        self.assertEqual(round_half_up(1.5), 2)
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(2.49), 2)
        self.assertEqual(round_half_up(0.0), 0)

    def test_optimal_hash_count(self):
        self.assertEqual(optimal_hash_count(1000, 9585), 7)
        self.assertEqual(optimal_hash_count(1000, 4793), 3)
        self.assertEqual(optimal_hash_count(10, 1), 1)

    def test_optimal_bit_size(self):
        self.assertEqual(optimal_bit_size(1000, 0.01), 9585)
        self.assertEqual(optimal_bit_size(1000, 0.1), 4793)
        # Tiny results never drop to zero bits
        self.assertEqual(optimal_bit_size(1, 0.99), 1)

    def test_optimal_bit_size_clamped(self):
        """Test that huge results clamp to the maximum array length."""
        self.assertEqual(optimal_bit_size(10**9, 1e-10), MAX_BIT_SIZE)
        self.assertEqual(MAX_BIT_SIZE, 2**31 - 1)


if __name__ == "__main__":
    unittest.main()
