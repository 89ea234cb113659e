"""
Tests for SeededRandom - LCG và Fisher-Yates
"""
import pytest

from models.seeded_random import SeededRandom


class TestSeeding:

    def test_string_seed_is_rolling_hash(self):
        assert SeededRandom.hash_string("a") == 97
        assert SeededRandom.hash_string("ab") == 97 * 31 + 98
        assert SeededRandom("ab").state == 3105

    def test_zero_seed_is_forced_non_zero(self):
        assert SeededRandom(0).state == 1
        assert SeededRandom("").state == 1

    def test_integer_seed_reduced_to_32_bits(self):
        assert SeededRandom(2 ** 32 + 5).state == 5

    def test_long_string_hash_stays_in_32_bits(self):
        value = SeededRandom.hash_string("student-123456789-assignment-abcdefghijklmnop" * 10)
        assert 0 <= value <= 2 ** 31


class TestSequence:

    def test_first_values_are_exact(self):
        rng = SeededRandom("a")
        assert rng.next() == 1175363148 / 2 ** 32

        rng = SeededRandom(1)
        assert rng.next() == 1015568748 / 2 ** 32

    def test_values_in_unit_interval(self):
        rng = SeededRandom("range-check")
        for _ in range(1000):
            value = rng.next()
            assert 0.0 <= value < 1.0

    def test_same_seed_same_sequence(self):
        first = SeededRandom("student-1-assignment-1")
        second = SeededRandom("student-1-assignment-1")
        assert [first.next() for _ in range(50)] == [second.next() for _ in range(50)]

    def test_next_int_bounds(self):
        rng = SeededRandom(42)
        for _ in range(200):
            assert 3 <= rng.next_int(3, 7) < 7


class TestShuffle:

    def test_two_items_from_known_seed(self):
        # next() ≈ 0.2737 -> j = 0 -> hai phần tử đổi chỗ
        assert SeededRandom("a").shuffle([1, 2]) == [2, 1]

    def test_empty_and_single(self):
        assert SeededRandom("x").shuffle([]) == []
        assert SeededRandom("x").shuffle(["only"]) == ["only"]

    def test_shuffle_is_permutation_and_does_not_mutate(self):
        items = list(range(20))
        shuffled = SeededRandom("perm").shuffle(items)
        assert sorted(shuffled) == items
        assert items == list(range(20))

    @pytest.mark.parametrize("seed", ["s1", "s2", 12345])
    def test_shuffle_deterministic(self, seed):
        items = list("abcdefgh")
        assert SeededRandom(seed).shuffle(items) == SeededRandom(seed).shuffle(items)
