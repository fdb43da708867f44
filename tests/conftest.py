import random

import matplotlib

matplotlib.use("Agg")

import pytest

from minesweeper_ai import KnowledgeBase, Minesweeper, MinesweeperAgent


@pytest.fixture
def kb_3x3():
    """Empty knowledge base for a 3x3 board"""
    return KnowledgeBase(3, 3)


@pytest.fixture
def corner_mine_game():
    """2x3 board with a single mine in the top-left corner"""
    return Minesweeper(2, 3, mines=[(0, 0)])


@pytest.fixture
def seeded_agent():
    """Factory for agents with a reproducible random source"""
    def make(height=8, width=8, seed=0):
        return MinesweeperAgent(height, width, rng=random.Random(seed))
    return make
