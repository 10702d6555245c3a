import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import numpy as np


Tour = List[int]


@dataclass(frozen=True)
class GenerationSnapshot:
    generation_id: int
    total_distance: float
    order: Tuple[int, ...]
    terminate: bool = False


class Solver(ABC):
    """One operation: solve a distance matrix, streaming snapshots until a terminal one."""

    name: str = "base"

    @abstractmethod
    def solve(self, dist_mat: np.ndarray) -> Iterator[GenerationSnapshot]:
        raise NotImplementedError


@dataclass
class SolveResult:
    tour: Tour
    length: float
    solver_name: str
    optimum: Optional[float] = None
    generations: int = 0

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.length - self.optimum) / self.optimum

    @classmethod
    def from_snapshot(
        cls, snapshot: GenerationSnapshot, solver_name: str, optimum: Optional[float] = None
    ) -> "SolveResult":
        return cls(
            tour=list(snapshot.order),
            length=snapshot.total_distance,
            solver_name=solver_name,
            optimum=optimum,
            generations=snapshot.generation_id,
        )
