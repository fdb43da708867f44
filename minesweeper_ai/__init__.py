"""
Minesweeper Logic Agent

A Minesweeper player that deduces safe cells and mines with propositional logic:
- Sentences: "exactly N of these cells are mines"
- Counting rule: sentences with count 0 or count == size resolve their cells
- Subset rule: nested sentences yield a sentence over their difference
- Random fallback: a uniform guess only when nothing is provably safe
"""

from .agent import MinesweeperAgent
from .engine import Minesweeper, play_cli
from .knowledge import InconsistentKnowledgeError, KnowledgeBase, Sentence
from .analysis import (
    format_agent_knowledge,
    run_agent_single_test,
    run_agent_many_tests,
    run_agent_difficulty_analysis,
    summarize_move_mix,
)
from .utils import DIFFICULTY_LEVELS, Cell

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "Sentence",
    "KnowledgeBase",
    "MinesweeperAgent",
    "Minesweeper",
    "InconsistentKnowledgeError",
    "Cell",
    "DIFFICULTY_LEVELS",
    # CLI
    "play_cli",
    # Analysis functions
    "format_agent_knowledge",
    "run_agent_single_test",
    "run_agent_many_tests",
    "run_agent_difficulty_analysis",
    "summarize_move_mix",
]
