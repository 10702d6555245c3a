from .base import GenerationSnapshot, Solver, SolveResult, Tour
from .codec import PermutationCodec, encode, is_valid_encoding, reference_decode
from .individual import Individual
from .order_index import OrderStatisticsIndex

__all__ = [
    "GenerationSnapshot",
    "Solver",
    "SolveResult",
    "Tour",
    "PermutationCodec",
    "encode",
    "is_valid_encoding",
    "reference_decode",
    "Individual",
    "OrderStatisticsIndex",
]
