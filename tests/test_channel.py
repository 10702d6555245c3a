import threading

import numpy as np
import pytest

from tsp_evolve.channel import ProgressChannel
from tsp_evolve.evolutionary import EvolutionConfig, GeneticSolver
from tsp_evolve.solvers.base import GenerationSnapshot, Solver


class CountingSolver(Solver):
    name = "counting"

    def __init__(self, count):
        self.count = count
        self.emitted = 0
        self.lock = threading.Lock()

    def solve(self, dist_mat):
        for i in range(1, self.count + 1):
            with self.lock:
                self.emitted += 1
            yield GenerationSnapshot(i, float(self.count - i + 1), (0, 1, 2), terminate=i == self.count)


class FailingSolver(Solver):
    name = "failing"

    def solve(self, dist_mat):
        yield GenerationSnapshot(1, 3.0, (0, 1, 2))
        raise ValueError("boom")


def test_channel_delivers_stream_until_terminal():
    solver = CountingSolver(5)
    snapshots = list(ProgressChannel(solver, None))
    assert [s.generation_id for s in snapshots] == [1, 2, 3, 4, 5]
    assert snapshots[-1].terminate
    assert not any(s.terminate for s in snapshots[:-1])


def test_producer_waits_for_consumer():
    solver = CountingSolver(10)
    channel = ProgressChannel(solver, None).start()
    received = 0
    while not channel.closed:
        channel.receive(timeout=5)
        received += 1
        with solver.lock:
            # The producer may have queued at most the next snapshot.
            assert solver.emitted <= received + 1
    assert received == 10


def test_receive_after_terminal_raises():
    channel = ProgressChannel(CountingSolver(1), None).start()
    assert channel.receive(timeout=5).terminate
    with pytest.raises(RuntimeError):
        channel.receive(timeout=5)


def test_producer_errors_reach_consumer():
    channel = ProgressChannel(FailingSolver(), None)
    received = []
    with pytest.raises(ValueError, match="boom"):
        for snapshot in channel:
            received.append(snapshot)
    assert len(received) == 1


def test_channel_with_genetic_solver():
    dist = np.array([[0.0, 1.0, 1.0, 1.4], [1.0, 0.0, 1.4, 1.0], [1.0, 1.4, 0.0, 1.0], [1.4, 1.0, 1.0, 0.0]])
    solver = GeneticSolver(EvolutionConfig(generations=15, random_seed=3))
    snapshots = list(ProgressChannel(solver, dist))
    assert snapshots[-1].terminate
    assert snapshots[-1].generation_id == 15
    assert sorted(snapshots[-1].order) == [0, 1, 2, 3]
    assert np.isclose(snapshots[-1].total_distance, 4.0)


def test_stopping_early_releases_producer():
    solver = CountingSolver(100)
    channel = ProgressChannel(solver, None)
    for snapshot in channel:
        if snapshot.generation_id == 2:
            break
    assert channel.closed
    assert not channel._thread.is_alive()
    assert solver.emitted < 100


def test_close_before_start_is_noop():
    channel = ProgressChannel(CountingSolver(3), None)
    channel.close()
    assert channel.closed
    assert list(channel) == []
