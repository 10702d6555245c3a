import json

from tsp_evolve.cli import main
from tsp_evolve.report import ScoreHistory
from tsp_evolve.solvers.base import GenerationSnapshot


def test_history_records_progress_and_final(tmp_path):
    history = ScoreHistory(instance="demo")
    history.record(GenerationSnapshot(1, 10.0, (0, 1, 2)))
    history.record(GenerationSnapshot(4, 8.5, (0, 2, 1)))
    history.record(GenerationSnapshot(50, 8.5, (0, 2, 1), terminate=True))

    assert history.generations == [1, 4]
    assert history.distances == [10.0, 8.5]

    path = tmp_path / "out" / "history.json"
    history.save(path)
    loaded = ScoreHistory.load(path)
    assert loaded.points == history.points
    assert loaded.final == history.final
    assert json.loads(path.read_text())["instance"] == "demo"


def test_cli_run_writes_history(tmp_path, capsys):
    out = tmp_path / "history.json"
    main(
        [
            "run",
            "--min-count", "6",
            "--max-count", "6",
            "--generations", "20",
            "--population-cap", "40",
            "--seed", "5",
            "--history-out", str(out),
        ]
    )
    history = ScoreHistory.load(out)
    assert history.final is not None
    assert history.final.generation_id == 20
    assert sorted(history.final.order) == list(range(6))
    assert "score history written" in capsys.readouterr().out


def test_cli_config_file_and_history_command(tmp_path, capsys):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"generations": 5, "population_cap": 20, "elite_fraction": 0.2}))
    out = tmp_path / "history.json"
    main(["run", "--min-count", "5", "--max-count", "5", "--config", str(cfg), "--history-out", str(out)])
    capsys.readouterr()

    main(["history", str(out)])
    printed = capsys.readouterr().out
    assert "final (gen 5)" in printed
