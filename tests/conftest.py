"""
Shared fixtures for gameplay tests.
"""
import os
import random

# pygame must never try to open a real window or audio device in tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from missile_command.gameplay.game import Game
from missile_command.persistence import InMemoryBestScoreStore


class ScriptedRandom:
    """Stands in for random.Random with a fixed sequence of samples."""

    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def store():
    return InMemoryBestScoreStore()


@pytest.fixture
def game(store):
    return Game(best_score_store=store, rng=random.Random(1234))
