"""
Blocking hand-off of generation snapshots from a producer thread to a consumer.

The solver runs on its own thread; every snapshot it emits is put on a
single-slot queue and the producer then waits until the consumer has taken it,
so a slow consumer slows the evolution down without affecting its result.
A consumer that stops early calls ``close()`` (iteration does so on exit).
"""
import queue
import threading
from typing import Iterator, Optional

from .solvers.base import GenerationSnapshot, Solver


class ProgressChannel:
    def __init__(self, solver: Solver, dist_mat):
        self.solver = solver
        self.dist_mat = dist_mat
        self._queue: "queue.Queue" = queue.Queue(maxsize=1)
        self._thread = threading.Thread(target=self._produce, name=f"{solver.name}-producer", daemon=True)
        self._cancelled = threading.Event()
        self._started = False
        self._closed = False

    def start(self) -> "ProgressChannel":
        self._started = True
        self._thread.start()
        return self

    def _produce(self) -> None:
        try:
            for snapshot in self.solver.solve(self.dist_mat):
                if self._cancelled.is_set():
                    return
                self._queue.put(snapshot)
                self._queue.join()
                if snapshot.terminate or self._cancelled.is_set():
                    return
        except Exception as exc:
            # Re-raised on the consumer side by receive().
            self._queue.put(exc)
            return
        self._queue.put(RuntimeError(f"{self.solver.name} stopped without a terminal snapshot"))

    def receive(self, timeout: Optional[float] = None) -> GenerationSnapshot:
        if self._closed:
            raise RuntimeError("channel already delivered its terminal snapshot")
        item = self._queue.get(timeout=timeout)
        self._queue.task_done()
        if isinstance(item, BaseException):
            self._closed = True
            raise item
        if item.terminate:
            self._closed = True
        return item

    def close(self) -> None:
        """Stop the producer before its terminal snapshot and wait for the thread to exit."""
        self._closed = True
        self._cancelled.set()
        if not self._started:
            return
        while self._thread.is_alive():
            self._drain()
            self._thread.join(timeout=0.05)
        self._drain()

    def _drain(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return
            self._queue.task_done()

    def __iter__(self) -> Iterator[GenerationSnapshot]:
        if not self._started and not self._closed:
            self.start()
        try:
            while not self._closed:
                yield self.receive()
        finally:
            self.close()

    @property
    def closed(self) -> bool:
        return self._closed
