from typing import List


class OrderStatisticsIndex:
    """
    Complete binary tree of availability counts over a power-of-two leaf array.

    Leaf weight 1 means the value is still available, 0 that it was consumed; every
    internal node holds the sum of its two children. Node ``v`` has children
    ``2v + 1`` and ``2v + 2``, leaves start at ``size - 1``.
    """

    def __init__(self, n: int = 0):
        self.size = 1
        self.data: List[int] = []
        if n:
            self.reset(n)

    def reset(self, n: int) -> None:
        self.size = 1
        while self.size < n:
            self.size <<= 1
        needed = self.size << 1
        if len(self.data) < needed:
            self.data = [0] * needed
        data = self.data
        for i in range(self.size - 1, needed - 1):
            data[i] = 1
        for i in range(self.size - 2, -1, -1):
            data[i] = data[2 * i + 1] + data[2 * i + 2]

    def select(self, k: int) -> int:
        # k-th (0-indexed) available leaf, counting from the left.
        data = self.data
        last_internal = self.size - 1
        v = 0
        while v < last_internal:
            v = 2 * v + 1
            if data[v] <= k:
                k -= data[v]
                v += 1
        return v - last_internal

    def consume(self, index: int) -> None:
        data = self.data
        v = self.size - 1 + index
        data[v] = 0
        while v:
            v = (v - 1) >> 1
            data[v] = data[2 * v + 1] + data[2 * v + 2]
