import random

from tsp_evolve.data import random_instance
from tsp_evolve.evaluation import brute_force_optimum
from tsp_evolve.evolutionary import EvolutionConfig, GeneticSolver


def main():
    rng = random.Random(7)
    instance = random_instance(rng, min_count=8, max_count=8)
    dist = instance.distance_matrix()
    optimum, _ = brute_force_optimum(dist)

    cfg = EvolutionConfig(generations=300, population_cap=300, random_seed=7)
    for snapshot in GeneticSolver(cfg).solve(dist):
        if snapshot.terminate:
            print(f"final: length={snapshot.total_distance:.2f} optimum={optimum:.2f} order={list(snapshot.order)}")
        else:
            print(f"gen {snapshot.generation_id}: best={snapshot.total_distance:.2f}")


if __name__ == "__main__":
    main()
