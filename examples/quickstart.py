"""
Quickstart example for the Minesweeper Logic Agent.

This script demonstrates basic usage of the agent.
"""

from minesweeper_ai import (
    DIFFICULTY_LEVELS,
    Minesweeper,
    MinesweeperAgent,
    format_agent_knowledge,
    run_agent_many_tests,
)


def main():
    print("=" * 60)
    print("Minesweeper Logic Agent - Quickstart Example")
    print("=" * 60)

    # Example 1: Play a single game
    print("\n1. Playing a single Intermediate game (16x16, 40 mines)...")
    print("-" * 60)

    game = Minesweeper(
        height=16,
        width=16,
        mines_count=40,
        mines_generation_algorithm="safe_neighborhood_rule",
        seed=7,
    )

    agent = MinesweeperAgent(16, 16, seed=8)
    status, payload = agent.solve(game)

    result = {1: "WON", -1: "LOST", 0: "STUCK"}[status]
    print(f"Result: {result}")
    print(f"Moves: {payload['moves_count']}")
    print(f"Safe moves: {payload['safe_moves_count']}")
    print(f"Random moves: {payload['random_moves_count']}")
    print(f"Mines flagged: {payload['flags_count']}")

    # Example 2: Show what the agent knows
    print("\n2. Agent knowledge vs. the real board:")
    print("-" * 60)
    print(format_agent_knowledge(agent))
    print()
    print(game.format_board(reveal_all=True))

    # Example 3: Run multiple games for statistics
    print("\n3. Running 50 games for win rate statistics...")
    print("-" * 60)

    results = run_agent_many_tests(
        height=16,
        width=16,
        mines_count=40,
        runs=50,
        mines_generation_algorithm="safe_neighborhood_rule",
    )

    print(f"Win rate: {results['win_rate']*100:.1f}%")
    print(f"Average moves per game: {results['avg_moves_count']:.1f}")
    print(f"Average random moves per game: {results['avg_random_moves_count']:.1f}")
    print(f"Guess survival rate: {results['guess_survival_rate']*100:.1f}%")

    # Example 4: Compare difficulty levels
    print("\n4. Win rates by difficulty level (10 games each)...")
    print("-" * 60)

    for name, (h, w, m) in DIFFICULTY_LEVELS.items():
        results = run_agent_many_tests(
            height=h,
            width=w,
            mines_count=m,
            runs=10,
            mines_generation_algorithm="safe_neighborhood_rule",
        )
        print(f"{name:15s} ({h}x{w}, {m:2d} mines): {results['win_rate']*100:5.1f}% win rate")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
