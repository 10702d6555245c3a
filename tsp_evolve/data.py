import math
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import networkx as nx
import numpy as np
import tsplib95


MIN_COUNT = 10
MAX_COUNT = 30
MAX_SIZE = 1000.0


@dataclass
class Instance:
    name: str
    graph: nx.Graph
    optimum: Optional[float] = None
    path: Optional[Path] = None

    @property
    def nodes(self) -> List:
        return list(self.graph.nodes())

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def distance_matrix(self) -> np.ndarray:
        nodes = self.nodes
        idx_map = {n: i for i, n in enumerate(nodes)}
        mat = np.zeros((len(nodes), len(nodes)), dtype=np.float64)
        for u, v, w in self.graph.edges(data="weight", default=0.0):
            if u == v:
                continue
            mat[idx_map[u], idx_map[v]] = w
            mat[idx_map[v], idx_map[u]] = w
        return as_distance_matrix(mat)

    def positions(self) -> Optional[np.ndarray]:
        coords = [self.graph.nodes[n].get("coord") for n in self.nodes]
        if any(c is None for c in coords):
            return None
        return np.asarray(coords, dtype=float)

    def labels(self, order: Iterable[int]) -> List:
        nodes = self.nodes
        return [nodes[i] for i in order]


def as_distance_matrix(dist) -> np.ndarray:
    mat = np.asarray(dist, dtype=np.float64)
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        raise ValueError(f"Distance matrix must be square, got shape {mat.shape}")
    if not np.allclose(mat, mat.T):
        raise ValueError("Distance matrix must be symmetric.")
    if (mat < 0).any():
        raise ValueError("Distance matrix must be non-negative.")
    return mat


def random_instance(
    rng: random.Random,
    min_count: int = MIN_COUNT,
    max_count: int = MAX_COUNT,
    max_size: float = MAX_SIZE,
) -> Instance:
    """Complete Euclidean graph over points placed uniformly in a square."""
    if min_count < 3 or max_count < min_count:
        raise ValueError(f"Need 3 <= min_count <= max_count, got {min_count}, {max_count}")
    n = rng.randint(min_count, max_count)
    graph = nx.complete_graph(n)
    for v in graph.nodes():
        graph.nodes[v]["coord"] = (rng.random() * max_size, rng.random() * max_size)
    for u, v in graph.edges():
        (x1, y1), (x2, y2) = graph.nodes[u]["coord"], graph.nodes[v]["coord"]
        graph[u][v]["weight"] = math.hypot(x1 - x2, y1 - y2)
    return Instance(name=f"random-{n}", graph=graph)


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _load_optimum(problem, path: Path) -> Optional[float]:
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        try:
            tour_file = tsplib95.parse(candidate.read_text())
            nodes = list(tour_file.tours[0])
        except (ValueError, IndexError, KeyError):
            continue
        dist = 0.0
        for i in range(len(nodes)):
            a = nodes[i]
            b = nodes[(i + 1) % len(nodes)]
            dist += problem.get_weight(a, b)
        return float(dist)
    return None


def load_instance(path: Path) -> Instance:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"TSPLIB instance not found: {path}")
    problem = tsplib95.load(path)
    graph = problem.get_graph()
    optimum = _load_optimum(problem, path)
    return Instance(name=problem.name or path.stem, path=path, graph=graph, optimum=optimum)
