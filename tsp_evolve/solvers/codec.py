"""
Rank encoding of permutations.

``encoded[i]`` is the number of earlier chromosome entries smaller than
``chromosome[i]``, so every position satisfies ``0 <= encoded[i] <= i``. Any
sequence with that property decodes to a valid permutation, which lets
crossover and mutation work on encodings without a repair step.
"""
from typing import List, Optional, Sequence

from .order_index import OrderStatisticsIndex


Chromosome = List[int]
Encoded = List[int]


def encode(chromosome: Sequence[int]) -> Encoded:
    encoded = [0] * len(chromosome)
    for i, v in enumerate(chromosome):
        count = 0
        for j in range(i):
            if chromosome[j] < v:
                count += 1
        encoded[i] = count
    return encoded


def reference_decode(encoded: Sequence[int]) -> Chromosome:
    """Quadratic decode; precondition ``0 <= encoded[i] <= i``."""
    n = len(encoded)
    chromosome = [0] * n
    used = [False] * n
    for i in range(n - 1, -1, -1):
        rank = encoded[i]
        t = 0
        while True:
            if not used[t]:
                if rank == 0:
                    break
                rank -= 1
            t += 1
        chromosome[i] = t
        used[t] = True
    return chromosome


def is_valid_encoding(encoded: Sequence[int]) -> bool:
    return all(0 <= v <= i for i, v in enumerate(encoded))


class PermutationCodec:
    """
    Decoder owning a reusable order-statistics index.

    The index is scratch state for a single decode call at a time; callers that
    decode concurrently need one codec each.
    """

    def __init__(self, index: Optional[OrderStatisticsIndex] = None):
        self.index = index or OrderStatisticsIndex()

    def encode(self, chromosome: Sequence[int]) -> Encoded:
        return encode(chromosome)

    def decode(self, encoded: Sequence[int]) -> Chromosome:
        n = len(encoded)
        chromosome = [0] * n
        index = self.index
        index.reset(n)
        for i in range(n - 1, -1, -1):
            value = index.select(encoded[i])
            chromosome[i] = value
            index.consume(value)
        return chromosome
