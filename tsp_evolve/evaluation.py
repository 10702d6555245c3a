import itertools
from typing import List, Optional, Sequence, Tuple

import numpy as np
import torch


def tour_length(dist: np.ndarray, tour: Sequence[int]) -> float:
    idx = np.asarray(tour, dtype=np.intp)
    return float(dist[idx, np.roll(idx, -1)].sum())


def to_tensor(dist: np.ndarray, device=None) -> torch.Tensor:
    return torch.as_tensor(np.asarray(dist, dtype=np.float64), device=device or "cpu")


def batch_tour_lengths(dist: torch.Tensor, tours: Sequence[Sequence[int]]) -> torch.Tensor:
    # tours: [P, n] node indices; one gather scores the whole population.
    idx = torch.tensor(tours, device=dist.device, dtype=torch.long)
    return dist[idx, idx.roll(-1, dims=1)].sum(dim=1)


def batch_fitness(dist: torch.Tensor, tours: Sequence[Sequence[int]]) -> List[float]:
    return (1.0 / batch_tour_lengths(dist, tours)).tolist()


def brute_force_optimum(dist: np.ndarray) -> Tuple[float, Optional[List[int]]]:
    """Exact optimum by enumerating every tour with vertex 0 fixed. Small n only."""
    n = len(dist)
    if n == 0:
        return 0.0, None
    best_len = float("inf")
    best_tour = None
    for rest in itertools.permutations(range(1, n)):
        tour = [0, *rest]
        length = tour_length(dist, tour)
        if length < best_len:
            best_len = length
            best_tour = tour
    return best_len, best_tour
