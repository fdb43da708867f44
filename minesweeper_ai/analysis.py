"""Analysis and benchmarking tools for the Minesweeper logic agent."""

import random
from collections import defaultdict
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np

from .agent import MinesweeperAgent
from .engine import Minesweeper
from .utils import DIFFICULTY_LEVELS


def format_agent_knowledge(
    agent: MinesweeperAgent, *, show_coords: bool = True
) -> str:
    """
    Format the agent's current knowledge as a human-readable grid.

    Args:
        agent: Agent whose knowledge base will be displayed.
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid where revealed cells show their clue, proven mines are
        'M', proven but unrevealed safe cells are 'S' and unknown cells '.'.
    """
    kb = agent.knowledge_base

    def cell_char(row: int, col: int) -> str:
        cell = (row, col)
        if cell in kb.clues:
            return str(kb.clues[cell])
        if cell in kb.mines:
            return "M"
        if cell in kb.safes:
            return "S"
        return "."

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{col:2d}" for col in range(agent.width))
        lines.append("   " + header)
        lines.append("   " + "-" * (3 * agent.width - 1))

    for row in range(agent.height):
        cells = " ".join(f" {cell_char(row, col)}" for col in range(agent.width))
        lines.append(f"{row:2d} |" + cells if show_coords else cells)

    return "\n".join(lines)


def run_agent_single_test(
    height: int,
    width: int,
    mines_count: int,
    *,
    mines_generation_algorithm: str = "safe_first_action_rule",
    seed: Optional[int] = None,
    show_boards: bool = False,
) -> Dict[str, object]:
    """
    Run one end-to-end game with MinesweeperAgent on a fresh board.

    Args:
        height: Board height.
        width: Board width.
        mines_count: Total number of mines on the board.
        mines_generation_algorithm: Mine placement rule.
        seed: Seed for reproducible games. The board and the agent each get
            their own random stream drawn from it.
        show_boards: If True, print the underlying board and the agent's
            final knowledge.

    Returns:
        The agent's terminal payload augmented with "status"
        (-1 loss, 0 stuck, 1 win).
    """
    # Board and agent draw from separate random streams.
    master = random.Random(seed)
    game = Minesweeper(
        height,
        width,
        mines_count,
        mines_generation_algorithm=mines_generation_algorithm,
        rng=random.Random(master.getrandbits(64)),
    )
    agent = MinesweeperAgent(
        height, width, rng=random.Random(master.getrandbits(64))
    )

    status, payload = agent.solve(game)

    if show_boards:
        print(f"Generation mode: {mines_generation_algorithm}")
        print("Underlying board (mines visible):")
        print(game.format_board(reveal_all=True))
        print()
        print("Agent knowledge (unknowns shown as '.'):")
        print(format_agent_knowledge(agent, show_coords=True))
        print()
        print(f"Finished with status {status}.")

    out: Dict[str, object] = dict(payload)
    out["status"] = status
    return out


def run_agent_many_tests(
    height: int,
    width: int,
    mines_count: int,
    runs: int,
    *,
    mines_generation_algorithm: str = "safe_first_action_rule",
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Run many independent games and return averaged terminal metrics plus win rate.

    Args:
        height: Board height.
        width: Board width.
        mines_count: Total number of mines on the board.
        runs: Number of independent games to run, must be > 0.
        mines_generation_algorithm: Mine placement rule.
        seed: Base seed; game i uses seed + i when given.

    Returns:
        Averages of numeric payload metrics (prefixed with "avg_"), plus:
        - win_rate
        - stuck_rate
        - random_move_fraction
        - guess_survival_rate
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    required_keys = {
        "moves_count",
        "safe_moves_count",
        "random_moves_count",
        "flags_count",
        "known_mines_count",
        "moves_sequence",
    }

    samples: Dict[str, List[float]] = defaultdict(list)
    statuses: List[int] = []

    for i in range(runs):
        game_seed = None if seed is None else seed + i
        payload = run_agent_single_test(
            height,
            width,
            mines_count,
            mines_generation_algorithm=mines_generation_algorithm,
            seed=game_seed,
        )

        missing = required_keys - set(payload.keys())
        if missing:
            raise KeyError(f"Missing payload keys: {sorted(missing)}")

        status = payload["status"]
        if status not in (-1, 0, 1):
            raise RuntimeError(f"Unexpected agent status: {status}")
        statuses.append(int(status))  # type: ignore[call-overload]

        for k, v in payload.items():
            if k == "status":
                continue
            if isinstance(v, (int, float)) and not isinstance(v, bool):
                samples[f"avg_{k}"].append(float(v))

    out: Dict[str, float] = {k: float(np.mean(v)) for k, v in samples.items()}

    status_arr = np.array(statuses)
    out["win_rate"] = float(np.mean(status_arr == 1))
    out["stuck_rate"] = float(np.mean(status_arr == 0))

    total_moves = float(np.sum(samples["avg_moves_count"]))
    total_random = float(np.sum(samples["avg_random_moves_count"]))
    out["random_move_fraction"] = (
        total_random / total_moves if total_moves > 0 else 0.0
    )

    # Every loss is caused by exactly one random move.
    losses = float(np.sum(status_arr == -1))
    out["guess_survival_rate"] = (
        1.0 - losses / total_random if total_random > 0 else 1.0
    )

    return out


def run_agent_difficulty_analysis(
    runs: int,
    *,
    mines_generation_algorithm: str = "safe_first_action_rule",
    seed: Optional[int] = None,
    show_plots: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Run aggregated agent tests on the standard difficulty levels and plot summaries.

    Args:
        runs: Number of independent games to run per difficulty level.
        mines_generation_algorithm: Mine placement rule.
        seed: Base seed for reproducible runs.
        show_plots: If True, draw and show the summary charts.

    Returns:
        Mapping from level name to statistics dict returned by run_agent_many_tests().
    """
    results: Dict[str, Dict[str, float]] = {}
    for level, (h, w, m) in DIFFICULTY_LEVELS.items():
        results[level] = run_agent_many_tests(
            h,
            w,
            m,
            runs,
            mines_generation_algorithm=mines_generation_algorithm,
            seed=seed,
        )

    if not show_plots:
        return results

    level_names = list(DIFFICULTY_LEVELS.keys())
    x = np.arange(len(level_names))

    # 1) Moves by kind
    safe_moves = [results[n]["avg_safe_moves_count"] for n in level_names]
    random_moves = [results[n]["avg_random_moves_count"] for n in level_names]

    bar_w = 0.35
    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w / 2, safe_moves, width=bar_w, label="safe")  # type: ignore[misc]
    plt.bar(x + bar_w / 2, random_moves, width=bar_w, label="random")  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Average moves")  # type: ignore[misc]
    plt.title("Average moves by kind (per game)")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Win rate by level
    win_rates = [results[n]["win_rate"] for n in level_names]

    plt.figure()  # type: ignore[misc]
    plt.bar(x, win_rates)  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Win rate")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Win rate by difficulty level")  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    return results


def summarize_move_mix(
    results: Dict[str, Dict[str, float]], *, level: str = "expert"
) -> Dict[str, float]:
    """
    Compute the safe/random move split for one level.

    Args:
        results: Dict[level_name -> metrics_dict]
        level: Which level to summarize.

    Returns:
        Dict with keys safe_frac, random_frac, guess_survival_rate,
        total_moves and win_rate.
    """
    if level not in results:
        raise KeyError(f"Level {level!r} not found in results.")
    m = results[level]

    def get(k: str) -> float:
        if k not in m:
            raise KeyError(f"Missing key {k!r} in metrics for level {level!r}.")
        return float(m[k])

    s = get("avg_safe_moves_count")
    r = get("avg_random_moves_count")
    total = s + r
    if total == 0.0:
        raise ZeroDivisionError("Total moves is 0; cannot compute fractions.")

    return {
        "safe_frac": s / total,
        "random_frac": r / total,
        "guess_survival_rate": get("guess_survival_rate"),
        "total_moves": total,
        "win_rate": get("win_rate"),
    }
