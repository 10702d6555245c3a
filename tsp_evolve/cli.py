import argparse
import json
import random
import time
from pathlib import Path

from tsp_evolve.channel import ProgressChannel
from tsp_evolve.data import MAX_COUNT, MIN_COUNT, load_instance, random_instance
from tsp_evolve.evolutionary import EvolutionConfig, GeneticSolver, population_size_for
from tsp_evolve.log import log
from tsp_evolve.report import ScoreHistory
from tsp_evolve.solvers.base import SolveResult


def build_config(args) -> EvolutionConfig:
    state = {}
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        state.update(json.loads(config_path.read_text()))
    overrides = {
        "generations": args.generations,
        "population_cap": args.population_cap,
        "random_seed": args.seed,
        "device": args.device,
    }
    state.update({k: v for k, v in overrides.items() if v is not None})
    return EvolutionConfig.from_dict(state)


def build_instance(args, rng: random.Random):
    if args.tsplib:
        return load_instance(Path(args.tsplib))
    return random_instance(rng, min_count=args.min_count, max_count=args.max_count)


def run(args) -> SolveResult:
    t0 = time.perf_counter()
    cfg = build_config(args)
    rng = random.Random(cfg.random_seed)
    instance = build_instance(args, rng)
    if len(instance) < 3:
        raise RuntimeError(f"Instance {instance.name} has {len(instance)} vertices; need at least 3.")
    dist = instance.distance_matrix()
    log(
        f"instance {instance.name}: {len(instance)} vertices, "
        f"population={population_size_for(len(instance), cfg.population_cap)}, generations={cfg.generations}"
    )

    solver = GeneticSolver(cfg, rng=rng)
    history = ScoreHistory(instance=instance.name)
    for snapshot in ProgressChannel(solver, dist):
        history.record(snapshot)
        if not snapshot.terminate:
            log(f"gen {snapshot.generation_id}: best distance={snapshot.total_distance:.4f}")

    result = SolveResult.from_snapshot(history.final, solver.name, optimum=instance.optimum)
    log(f"finished in {time.perf_counter() - t0:.2f}s: length={result.length:.4f}")
    if result.optimum is not None:
        log(f"optimum={result.optimum:.4f} gap={result.gap:.2%}")
    log(f"tour: {' '.join(str(v) for v in instance.labels(result.tour))}")
    if args.history_out:
        history.save(Path(args.history_out))
        log(f"score history written to {args.history_out}")
    return result


def show_history(args) -> None:
    path = Path(args.path)
    if not path.exists():
        print(f"No history found at {path}; run `tsp-evolve run --history-out {path}` first.")
        return
    history = ScoreHistory.load(path)
    print(f"instance={history.instance} improvements={len(history.points)}")
    for generation_id, distance in history.points:
        print(f"gen {generation_id:6d}: {distance:.4f}")
    if history.final is not None:
        print(f"final (gen {history.final.generation_id}): {history.final.total_distance:.4f}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="TSP genetic algorithm CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Evolve a tour for a random or TSPLIB instance")
    run_parser.add_argument("--tsplib", default=None, help="Path to a .tsp file; random graph if omitted")
    run_parser.add_argument("--min-count", type=int, default=MIN_COUNT)
    run_parser.add_argument("--max-count", type=int, default=MAX_COUNT)
    run_parser.add_argument("--generations", type=int, default=None)
    run_parser.add_argument("--population-cap", type=int, default=None)
    run_parser.add_argument("--seed", type=int, default=None)
    run_parser.add_argument("--device", default=None)
    run_parser.add_argument("--config", default=None, help="JSON file with EvolutionConfig fields")
    run_parser.add_argument("--history-out", default=None)
    run_parser.set_defaults(func=run)

    history_parser = subparsers.add_parser("history", help="Print a saved score history")
    history_parser.add_argument("path")
    history_parser.set_defaults(func=show_history)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
