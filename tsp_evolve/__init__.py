"""
Genetic algorithm for the TSP over rank-encoded permutations, streaming improving tours.
"""

__all__ = [
    "channel",
    "data",
    "evaluation",
    "evolutionary",
    "report",
]
