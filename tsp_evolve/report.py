import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .solvers.base import GenerationSnapshot


@dataclass
class ScoreHistory:
    """Best-ever distance per reporting generation, plus the terminal result."""

    instance: str = ""
    points: List[Tuple[int, float]] = field(default_factory=list)
    final: Optional[GenerationSnapshot] = None

    def record(self, snapshot: GenerationSnapshot) -> None:
        if snapshot.terminate:
            self.final = snapshot
        else:
            self.points.append((snapshot.generation_id, snapshot.total_distance))

    @property
    def generations(self) -> List[int]:
        return [g for g, _ in self.points]

    @property
    def distances(self) -> List[float]:
        return [d for _, d in self.points]

    def to_state(self) -> Dict:
        final = None
        if self.final is not None:
            final = {
                "generation_id": self.final.generation_id,
                "total_distance": self.final.total_distance,
                "order": list(self.final.order),
            }
        return {
            "instance": self.instance,
            "points": [{"generation_id": g, "total_distance": d} for g, d in self.points],
            "final": final,
        }

    @classmethod
    def from_state(cls, state: Dict) -> "ScoreHistory":
        history = cls(instance=state.get("instance", ""))
        for point in state.get("points", []):
            history.points.append((int(point["generation_id"]), float(point["total_distance"])))
        final = state.get("final")
        if final:
            history.final = GenerationSnapshot(
                generation_id=int(final["generation_id"]),
                total_distance=float(final["total_distance"]),
                order=tuple(final["order"]),
                terminate=True,
            )
        return history

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_state(), indent=2))

    @classmethod
    def load(cls, path: Path) -> "ScoreHistory":
        return cls.from_state(json.loads(Path(path).read_text()))
