"""
Best-score storage backends.
"""
from .best_score import (
    BestScoreStore,
    InMemoryBestScoreStore,
    JsonBestScoreStore,
    StorageError,
)

__all__ = [
    "BestScoreStore",
    "InMemoryBestScoreStore",
    "JsonBestScoreStore",
    "StorageError",
]
