import random

import pytest

from minesweeper_ai import Minesweeper, MinesweeperAgent


class LastChoice:
    """Random source stub that always picks the last candidate"""

    def choice(self, seq):
        return seq[-1]


def test_safe_move_is_lowest_known_safe(seeded_agent):
    agent = seeded_agent(3, 3)
    agent.record_move_result((1, 1), 0)

    assert agent.choose_move() == (0, 0)
    assert agent.last_move_kind == "safe"


def test_safe_moves_are_never_repeated(seeded_agent):
    agent = seeded_agent(3, 3)
    agent.record_move_result((1, 1), 0)
    agent.record_move_result((0, 0), 0)

    move = agent.choose_move()
    assert move == (0, 1)
    assert move not in agent.moves_made


def test_random_fallback_is_reproducible():
    a1 = MinesweeperAgent(8, 8, rng=random.Random(42))
    a2 = MinesweeperAgent(8, 8, seed=42)

    m1, m2 = a1.choose_move(), a2.choose_move()
    assert m1 == m2
    assert a1.last_move_kind == "random"


def test_random_fallback_avoids_mines_and_moves(seeded_agent):
    agent = seeded_agent(1, 3)
    agent.record_move_result((0, 0), 1)
    assert agent.mines == {(0, 1)}

    assert agent.choose_move() == (0, 2)
    assert agent.last_move_kind == "random"


def test_no_move_available(seeded_agent):
    agent = seeded_agent(1, 2)
    agent.record_move_result((0, 0), 1)

    assert agent.choose_move() is None
    assert agent.last_move_kind is None


def test_move_counters(seeded_agent):
    agent = seeded_agent(3, 3)
    agent.choose_move()
    agent.record_move_result((1, 1), 0)
    agent.choose_move()

    assert agent.random_moves_count == 1
    assert agent.safe_moves_count == 1


def test_reset_discards_knowledge(seeded_agent):
    agent = seeded_agent(3, 3)
    agent.record_move_result((1, 1), 0)
    agent.choose_move()
    agent.reset()

    assert agent.moves_made == set()
    assert agent.safes == set()
    assert agent.knowledge_base.sentences == []
    assert agent.safe_moves_count == 0


def test_solve_empty_board_wins_after_one_guess():
    game = Minesweeper(3, 3, mines=[])
    agent = MinesweeperAgent(3, 3, seed=0)

    status, payload = agent.solve(game)

    assert status == 1
    assert payload["moves_count"] == 9
    assert payload["random_moves_count"] == 1
    assert payload["safe_moves_count"] == 8


def test_solve_deduces_corner_mine():
    game = Minesweeper(3, 3, mines=[(0, 0)])
    agent = MinesweeperAgent(3, 3, rng=LastChoice())

    status, payload = agent.solve(game, record_steps=True)

    assert status == 1
    assert payload["moves_sequence"][0] == ((2, 2), "random")
    assert payload["random_moves_count"] == 1
    assert payload["moves_count"] == 8
    assert payload["flags_count"] == 1
    assert game.mines_found == {(0, 0)}
    assert game.all_mines_flagged()
    assert agent.mines == {(0, 0)}

    steps = payload["steps_history"]
    assert len(steps) == 8
    assert steps[0]["method"] == "random"
    assert all(step["outcome"] == "safe" for step in steps)


def test_solve_reports_loss():
    game = Minesweeper(1, 2, mines=[(0, 1)])
    agent = MinesweeperAgent(1, 2, rng=LastChoice())

    status, payload = agent.solve(game, record_steps=True)

    assert status == -1
    assert payload["moves_count"] == 1
    assert payload["steps_history"][-1]["outcome"] == "mine"
    assert game.lost()


def test_solve_rejects_mismatched_board():
    with pytest.raises(ValueError):
        MinesweeperAgent(3, 3).solve(Minesweeper(4, 4, 2))


def test_solve_is_reproducible():
    results = []
    for _ in range(2):
        game = Minesweeper(9, 9, 10, seed=3)
        agent = MinesweeperAgent(9, 9, seed=4)
        results.append(agent.solve(game))

    assert results[0] == results[1]


@pytest.mark.parametrize("seed", range(15))
def test_knowledge_stays_sound_and_monotonic(seed):
    game = Minesweeper(
        6, 6, 7, mines_generation_algorithm="safe_first_action_rule", seed=seed
    )
    agent = MinesweeperAgent(6, 6, seed=seed + 1000)
    kb = agent.knowledge_base
    prev_mines, prev_safes, prev_moves = set(), set(), set()

    while not game.game_over:
        move = agent.choose_move()
        assert move is not None
        assert move not in agent.moves_made
        assert move not in agent.mines

        is_mine, count = game.reveal(move)
        if is_mine:
            assert agent.last_move_kind == "random"
            break
        agent.record_move_result(move, count)

        assert kb.mines.isdisjoint(kb.safes)
        assert kb.mines <= game.mines
        assert kb.safes.isdisjoint(game.mines)
        assert prev_mines <= kb.mines
        assert prev_safes <= kb.safes
        assert prev_moves <= kb.moves_made
        for sentence in kb.sentences:
            assert 0 <= sentence.count <= len(sentence.cells)
            assert not sentence.cells & (kb.mines | kb.safes)

        prev_mines, prev_safes, prev_moves = set(kb.mines), set(kb.safes), set(kb.moves_made)
