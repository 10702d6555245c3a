import itertools
import random

import pytest

from tsp_evolve.solvers.codec import PermutationCodec, encode, is_valid_encoding, reference_decode
from tsp_evolve.solvers.order_index import OrderStatisticsIndex


def _random_encoding(n, rng):
    return [rng.randrange(i + 1) for i in range(n)]


@pytest.mark.parametrize("n", range(1, 7))
def test_round_trip_exhaustive_small_sizes(n):
    codec = PermutationCodec()
    for perm in itertools.permutations(range(n)):
        encoded = encode(perm)
        assert is_valid_encoding(encoded)
        assert codec.decode(encoded) == list(perm)
        assert reference_decode(encoded) == list(perm)


def test_round_trip_randomized_large_sizes():
    rng = random.Random(11)
    codec = PermutationCodec()
    for n in (17, 64, 100, 257):
        for _ in range(20):
            perm = list(range(n))
            rng.shuffle(perm)
            encoded = encode(perm)
            assert all(0 <= v <= i for i, v in enumerate(encoded))
            assert codec.decode(encoded) == perm


def test_encode_counts_earlier_smaller_entries():
    assert encode([2, 0, 3, 1]) == [0, 0, 2, 1]
    assert reference_decode([0, 0, 2, 1]) == [2, 0, 3, 1]


def test_fast_decode_matches_reference_fuzz():
    rng = random.Random(5)
    codec = PermutationCodec()
    for n in range(0, 80):
        for _ in range(10):
            encoded = _random_encoding(n, rng)
            decoded = codec.decode(encoded)
            assert decoded == reference_decode(encoded)
            assert sorted(decoded) == list(range(n))
            assert encode(decoded) == encoded


def test_codec_reuses_index_across_shrinking_and_growing_sizes():
    rng = random.Random(2)
    codec = PermutationCodec()
    for n in (40, 3, 33, 1, 64, 5):
        encoded = _random_encoding(n, rng)
        assert codec.decode(encoded) == reference_decode(encoded)


def test_index_select_and_consume_match_sorted_list():
    rng = random.Random(9)
    n = 13
    index = OrderStatisticsIndex(n)
    available = list(range(n))
    while available:
        k = rng.randrange(len(available))
        value = index.select(k)
        assert value == available[k]
        index.consume(value)
        available.remove(value)
        assert index.data[0] == len(available) + (index.size - n)


def test_index_reset_restores_all_leaves():
    index = OrderStatisticsIndex(6)
    index.consume(0)
    index.consume(3)
    assert index.select(0) == 1
    index.reset(6)
    assert [index.select(k) for k in range(6)] == list(range(6))
    assert index.size == 8
