import bisect
import itertools
import math
import random
from dataclasses import asdict, dataclass, fields
from typing import Dict, Iterator, List, Optional, Sequence

import numpy as np

from .evaluation import batch_fitness, to_tensor
from .log import log
from .solvers.base import GenerationSnapshot, Solver
from .solvers.codec import PermutationCodec
from .solvers.individual import Individual


@dataclass
class EvolutionConfig:
    generations: int = 6000
    population_cap: int = 2500
    elite_fraction: float = 0.3
    score_selection_fraction: float = 0.6
    rank_selection_fraction: float = 0.1
    mutation_intensity_a: float = 0.05
    mutation_intensity_b: float = 0.005
    random_seed: Optional[int] = 123
    batch_scoring: bool = True
    device: str = "cpu"
    verbose: bool = False

    def validate(self) -> "EvolutionConfig":
        if self.generations < 1:
            raise ValueError(f"generations must be positive, got {self.generations}")
        if self.population_cap < 1:
            raise ValueError(f"population_cap must be positive, got {self.population_cap}")
        for name in (
            "elite_fraction",
            "score_selection_fraction",
            "rank_selection_fraction",
            "mutation_intensity_a",
            "mutation_intensity_b",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {value}")
        return self

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, state: Dict) -> "EvolutionConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(state) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**state).validate()


def population_size_for(n: int, cap: int = 2500) -> int:
    # There are only n! distinct chromosomes; beyond 15 vertices the cap always wins.
    if n > 15:
        return cap
    return min(cap, math.factorial(n))


def weighted_draws(
    population: Sequence[Individual], weights: Sequence[float], count: int, rng: random.Random
) -> List[Individual]:
    """Clone ``count`` individuals sampled proportionally to ``weights``."""
    prefix = list(itertools.accumulate(weights))
    total = prefix[-1]
    last = len(prefix) - 1
    drawn = []
    for _ in range(count):
        r = rng.random() * total
        drawn.append(population[min(bisect.bisect_right(prefix, r), last)].clone())
    return drawn


class EvolutionarySearch:
    """
    Generation loop over a fixed-size population of rank-encoded tours.

    The population is kept sorted ascending by score after ``evaluate``, so the
    best individual is always last.
    """

    def __init__(self, config: EvolutionConfig, dist_mat, rng: random.Random = None):
        self.cfg = config.validate()
        self.dist = np.asarray(dist_mat, dtype=np.float64)
        self.n = len(self.dist)
        self.rng = rng or random.Random(config.random_seed)
        self.codec = PermutationCodec()
        self.dist_tensor = to_tensor(self.dist, config.device) if config.batch_scoring else None
        self.population_size = population_size_for(self.n, config.population_cap)
        self.population: List[Individual] = self.generate_population(self.population_size)
        self.generation = 0
        self.best_distance = float("inf")

    def generate_population(self, size: int) -> List[Individual]:
        return [Individual.random(self.n, self.rng, self.codec) for _ in range(size)]

    def evaluate(self) -> Individual:
        if self.dist_tensor is not None:
            scores = batch_fitness(self.dist_tensor, [ind.chromosome for ind in self.population])
            for ind, score in zip(self.population, scores):
                ind.score = score
        else:
            for ind in self.population:
                ind.update_score(self.dist)
        self.population.sort(key=lambda ind: ind.score)
        return self.population[-1]

    def _breed(self, pool: List[Individual]) -> List[Individual]:
        if len(pool) % 2:
            pool.pop()
        for i in range(0, len(pool), 2):
            pool[i].crossover(pool[i + 1], self.rng)
        for ind in pool:
            ind.mutate(self.rng, self.cfg.mutation_intensity_a, self.cfg.mutation_intensity_b)
        return pool

    def reproduce(self) -> List[Individual]:
        cfg = self.cfg
        population = self.population
        size = len(population)
        buffer: List[Individual] = []

        # At least one elite, also when P < 4.
        elite_count = max(1, int(cfg.elite_fraction * size))
        buffer.extend(population[size - i - 1] for i in range(min(elite_count, size)))

        score_draws = math.ceil(size * cfg.score_selection_fraction)
        if score_draws:
            pool = weighted_draws(population, [ind.score for ind in population], score_draws, self.rng)
            buffer.extend(self._breed(pool))

        rank_draws = math.ceil(size * cfg.rank_selection_fraction)
        if rank_draws:
            pool = weighted_draws(population, range(1, size + 1), rank_draws, self.rng)
            buffer.extend(self._breed(pool))

        if len(buffer) > size:
            del buffer[size:]
        if len(buffer) < size:
            buffer.extend(self.generate_population(size - len(buffer)))
        return buffer

    def advance(self) -> None:
        self.population = self.reproduce()
        self.generation += 1

    def step(self) -> Individual:
        best = self.evaluate()
        self.advance()
        return best

    def best(self) -> Individual:
        # Direct recomputation; the first maximum in iteration order wins.
        best_ind = None
        best_fitness = float("-inf")
        for ind in self.population:
            fitness = ind.fitness(self.dist)
            if best_ind is None or fitness > best_fitness:
                best_ind = ind
                best_fitness = fitness
        return best_ind

    def run(self) -> Iterator[GenerationSnapshot]:
        for generation_id in range(1, self.cfg.generations + 1):
            leader = self.evaluate()
            distance = leader.distance
            if distance < self.best_distance:
                self.best_distance = distance
                if self.cfg.verbose:
                    log(f"best distance (generation {generation_id}): {distance:.4f}")
                yield GenerationSnapshot(
                    generation_id=generation_id,
                    total_distance=distance,
                    order=tuple(leader.chromosome),
                    terminate=False,
                )
            self.advance()

        final = self.best()
        distance = 1.0 / final.fitness(self.dist)
        if self.cfg.verbose:
            log(f"evolution finished after {self.cfg.generations} generations: {distance:.4f}")
        yield GenerationSnapshot(
            generation_id=self.cfg.generations,
            total_distance=distance,
            order=tuple(final.chromosome),
            terminate=True,
        )


class GeneticSolver(Solver):
    name = "genetic"

    def __init__(self, config: EvolutionConfig = None, rng: random.Random = None):
        self.cfg = config or EvolutionConfig()
        self.rng = rng

    def solve(self, dist_mat) -> Iterator[GenerationSnapshot]:
        search = EvolutionarySearch(self.cfg, dist_mat, rng=self.rng)
        return search.run()
