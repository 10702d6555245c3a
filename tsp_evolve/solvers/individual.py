from __future__ import annotations

import random
from typing import Sequence

import numpy as np

from ..evaluation import tour_length
from .codec import Chromosome, Encoded, PermutationCodec


class Individual:
    """
    One candidate tour.

    ``chromosome`` and ``encoded`` always describe the same permutation: every
    operator that edits one of them regenerates the other before returning.
    ``score`` caches the last computed fitness and is what the population sorts on.
    """

    __slots__ = ("codec", "encoded", "chromosome", "score")

    def __init__(self, encoded: Sequence[int], codec: PermutationCodec):
        self.codec = codec
        self.encoded: Encoded = []
        self.chromosome: Chromosome = []
        self.score = 0.0
        self.update_encoded(list(encoded))

    @classmethod
    def random(cls, n: int, rng: random.Random, codec: PermutationCodec) -> "Individual":
        return cls([rng.randrange(i + 1) for i in range(n)], codec)

    @classmethod
    def from_chromosome(cls, chromosome: Sequence[int], codec: PermutationCodec) -> "Individual":
        return cls(codec.encode(chromosome), codec)

    def update_encoded(self, encoded: Encoded) -> None:
        self.encoded = encoded
        self.chromosome = self.codec.decode(encoded)

    def update_chromosome(self, chromosome: Chromosome) -> None:
        self.chromosome = chromosome
        self.encoded = self.codec.encode(chromosome)

    def fitness(self, dist: np.ndarray) -> float:
        # Precondition: at least two vertices, otherwise the length is zero.
        return 1.0 / tour_length(dist, self.chromosome)

    def update_score(self, dist: np.ndarray) -> None:
        self.score = self.fitness(dist)

    def clone(self) -> "Individual":
        return Individual(self.encoded[:], self.codec)

    def mutate(self, rng: random.Random, intensity_a: float, intensity_b: float) -> None:
        encoded = self.encoded
        for i in range(len(encoded)):
            if rng.random() < intensity_a:
                encoded[i] = rng.randrange(i + 1)
        self.update_encoded(encoded)

        chromosome = self.chromosome
        n = len(chromosome)
        for i in range(n):
            if rng.random() < intensity_b:
                j = rng.randrange(n)
                chromosome[i], chromosome[j] = chromosome[j], chromosome[i]
        self.update_chromosome(chromosome)

    def crossover(self, other: "Individual", rng: random.Random) -> None:
        """
        Multi-point crossover on the encodings of ``self`` and ``other`` in place.

        Swapping encoded ranks at the same position keeps both encodings valid.
        The cut count is at least 3 but never more than the chromosome length.
        """
        length = len(self.encoded)
        if length == 0:
            return
        n_cuts = min(max(rng.randrange(length), 3), length)
        cuts = sorted(rng.randrange(length) for _ in range(n_cuts))
        state = rng.randrange(2)
        a, b = self.encoded, other.encoded
        j = 0
        for i in range(length):
            while j < n_cuts and cuts[j] == i:
                j += 1
                state = 1 - state
            if state:
                a[i], b[i] = b[i], a[i]
        self.update_encoded(a)
        other.update_encoded(b)

    @property
    def distance(self) -> float:
        return 1.0 / self.score if self.score else float("inf")

    def __repr__(self) -> str:
        return f"Individual(chromosome={self.chromosome}, score={self.score:.6g})"
