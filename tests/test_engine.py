import pytest

from minesweeper_ai import Minesweeper, MinesweeperAgent, play_cli
from minesweeper_ai.utils import get_neighborhoods, in_bounds


def test_neighborhoods():
    nbrs = get_neighborhoods(3, 4)
    assert len(nbrs) == 12
    assert set(nbrs[(0, 0)]) == {(0, 1), (1, 0), (1, 1)}
    assert len(nbrs[(1, 1)]) == 8
    assert get_neighborhoods(3, 4) is nbrs


def test_neighborhoods_reject_bad_size():
    with pytest.raises(ValueError):
        get_neighborhoods(0, 4)


def test_in_bounds():
    assert in_bounds((2, 3), 3, 4)
    assert not in_bounds((3, 0), 3, 4)
    assert not in_bounds((0, -1), 3, 4)


def test_explicit_mines_and_counts(corner_mine_game):
    game = corner_mine_game
    assert game.mines == {(0, 0)}
    assert game.mines_count == 1
    assert game.is_mine((0, 0))
    assert game.nearby_mines((1, 1)) == 1
    assert game.nearby_mines((1, 2)) == 0


def test_reveal_safe_then_win(corner_mine_game):
    game = corner_mine_game
    for cell in [(0, 1), (0, 2), (1, 0), (1, 1)]:
        assert game.reveal(cell) == (False, game.nearby_mines(cell))
        assert not game.game_over

    assert game.reveal((1, 2)) == (False, 0)
    assert game.game_over
    assert game.won()
    assert not game.lost()


def test_reveal_mine_loses(corner_mine_game):
    game = corner_mine_game
    assert game.reveal((0, 0)) == (True, 0)
    assert game.game_over
    assert game.lost()
    assert not game.won()

    with pytest.raises(ValueError):
        game.reveal((1, 1))


def test_reveal_out_of_bounds(corner_mine_game):
    with pytest.raises(ValueError):
        corner_mine_game.reveal((2, 0))


def test_uniform_placement_is_seeded():
    g1 = Minesweeper(8, 8, 10, seed=11)
    g2 = Minesweeper(8, 8, 10, seed=11)
    assert g1.mines == g2.mines
    assert len(g1.mines) == 10


@pytest.mark.parametrize("seed", range(10))
def test_safe_first_action_rule(seed):
    game = Minesweeper(
        3, 3, 8, mines_generation_algorithm="safe_first_action_rule", seed=seed
    )
    assert game.mines == set()

    assert game.reveal((1, 1)) == (False, 8)
    assert game.won()


@pytest.mark.parametrize("seed", range(10))
def test_safe_neighborhood_rule(seed):
    game = Minesweeper(
        4, 4, 7, mines_generation_algorithm="safe_neighborhood_rule", seed=seed
    )
    assert game.reveal((0, 0)) == (False, 0)
    assert game.mines.isdisjoint({(0, 0), (0, 1), (1, 0), (1, 1)})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"height": 0},
        {"mines_count": -1},
        {"mines_count": 65},
        {"mines_count": 60, "mines_generation_algorithm": "safe_neighborhood_rule"},
        {"mines_generation_algorithm": "corners"},
        {"mines": [(8, 0)]},
    ],
)
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        Minesweeper(**kwargs)


def test_flags(corner_mine_game):
    game = corner_mine_game
    assert not game.all_mines_flagged()
    game.mark_mine((0, 0))
    assert game.all_mines_flagged()
    assert "F" in game.format_board(color=False)


def test_reset_keeps_mines(corner_mine_game):
    game = corner_mine_game
    game.reveal((1, 2))
    game.mark_mine((0, 0))
    game.reveal((0, 0))
    game.reset()

    assert game.mines == {(0, 0)}
    assert game.revealed == set()
    assert game.mines_found == set()
    assert not game.game_over
    assert game.unrevealed_count == 5


def test_format_board(corner_mine_game):
    game = corner_mine_game
    game.reveal((1, 1))

    hidden = game.format_board(color=False).splitlines()
    assert hidden[2] == " 0 | .  .  ."
    assert hidden[3] == " 1 | .  1  ."

    full = game.format_board(reveal_all=True, color=False).splitlines()
    assert full[2] == " 0 | M  1  0"


def feed_input(monkeypatch, lines):
    it = iter(lines)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(it))


def test_play_cli_human_and_agent_share_board(monkeypatch, capsys):
    game = Minesweeper(3, 3, mines=[(0, 0)])
    agent = MinesweeperAgent(3, 3, seed=0)
    feed_input(monkeypatch, ["2 2"] + ["ai"] * 7)

    play_cli(game, agent)

    out = capsys.readouterr().out
    assert game.won()
    assert "You won" in out
    assert "AI chose (1, 1) (safe move)" in out
    assert (2, 2) in agent.moves_made
    assert agent.mines == {(0, 0)}
    assert agent.random_moves_count == 0


def test_play_cli_agent_flags_proven_mines(monkeypatch, capsys):
    game = Minesweeper(1, 2, mines=[(0, 1)])
    agent = MinesweeperAgent(1, 2, seed=0)
    agent.record_move_result((0, 0), 1)
    feed_input(monkeypatch, ["ai"])

    play_cli(game, agent)

    assert game.mines_found == {(0, 1)}
    assert "All mines flagged" in capsys.readouterr().out


def test_play_cli_ai_command_without_agent(monkeypatch, capsys):
    game = Minesweeper(2, 2, mines=[(0, 0)])
    feed_input(monkeypatch, ["ai", "q"])

    play_cli(game)

    out = capsys.readouterr().out
    assert "No agent is attached" in out
    assert "Quit." in out
    assert game.revealed == set()


def test_play_cli_rejects_mismatched_agent():
    with pytest.raises(ValueError):
        play_cli(Minesweeper(3, 3, mines=[(0, 0)]), MinesweeperAgent(4, 4))
