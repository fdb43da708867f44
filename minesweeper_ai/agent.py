"""Minesweeper agent that plays by logical inference with a random fallback."""

import logging
import random
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from .engine import Minesweeper
from .knowledge import KnowledgeBase
from .utils import Cell

logger = logging.getLogger(__name__)


class MinesweeperAgent:
    """
    Minesweeper player backed by a propositional knowledge base.

    Move selection, in strict priority order:
    1. Safe move: the lowest (row, col) cell proven safe and not yet revealed.
    2. Random move: a uniform choice among cells neither revealed nor proven
       to be mines.
    If neither exists, no move is available.
    """

    def __init__(
        self,
        height: int = 8,
        width: int = 8,
        *,
        neighbors: Optional[Callable[[Cell], Iterable[Cell]]] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize an agent for a height x width board.

        Args:
            height: Board height (number of rows).
            width: Board width (number of columns).
            neighbors: Neighbor function of the board oracle; defaults to the
                8-connected grid neighborhood.
            rng: Random source for fallback moves.
            seed: Seed for a fresh random source when `rng` is not given.
        """
        self.height: int = height
        self.width: int = width
        self._neighbors = neighbors
        self.rng: random.Random = rng if rng is not None else random.Random(seed)
        self.reset()

    def reset(self) -> None:
        """Discard everything learned and start a new game."""
        self.knowledge_base: KnowledgeBase = KnowledgeBase(
            self.height, self.width, self._neighbors
        )
        self.last_move_kind: Optional[str] = None
        self.safe_moves_count: int = 0
        self.random_moves_count: int = 0

    @property
    def moves_made(self) -> Set[Cell]:
        return self.knowledge_base.moves_made

    @property
    def mines(self) -> Set[Cell]:
        return self.knowledge_base.mines

    @property
    def safes(self) -> Set[Cell]:
        return self.knowledge_base.safes

    # -------------------------------------------------------------------------
    # Agent contract
    # -------------------------------------------------------------------------

    def record_move_result(self, cell: Cell, neighbor_mine_count: int) -> None:
        """Feed a revealed cell and its neighbor mine count to the knowledge base."""
        self.knowledge_base.add_knowledge(cell, neighbor_mine_count)

    def make_safe_move(self) -> Optional[Cell]:
        """
        Returns a safe cell to choose on the board, or None.

        The move must be known to be safe and not already a move that has
        been made.
        """
        candidates = self.safes - self.moves_made
        if not candidates:
            return None
        return min(candidates)

    def make_random_move(self) -> Optional[Cell]:
        """
        Returns a random move among cells that have not already been chosen
        and are not known to be mines, or None.
        """
        choices: List[Cell] = [
            (row, col)
            for row in range(self.height)
            for col in range(self.width)
            if (row, col) not in self.moves_made and (row, col) not in self.mines
        ]
        if not choices:
            return None
        return self.rng.choice(choices)

    def choose_move(self) -> Optional[Cell]:
        """
        Select the next move: a proven-safe cell if one exists, otherwise a
        random unknown cell, otherwise None.
        """
        move = self.make_safe_move()
        if move is not None:
            self.last_move_kind = "safe"
            self.safe_moves_count += 1
            return move

        move = self.make_random_move()
        if move is not None:
            self.last_move_kind = "random"
            self.random_moves_count += 1
            return move

        self.last_move_kind = None
        return None

    # -------------------------------------------------------------------------
    # Main playing loop
    # -------------------------------------------------------------------------

    def _record_step(
        self, steps_history: List[Dict[str, Any]], cell: Cell, outcome: str
    ) -> None:
        kb = self.knowledge_base
        steps_history.append(
            {
                "cell": cell,
                "method": self.last_move_kind,
                "outcome": outcome,
                "clues": dict(kb.clues),
                "mines": sorted(kb.mines),
                "safes": sorted(kb.safes - kb.moves_made),
                "sentences_count": len(kb.sentences),
            }
        )

    def solve(
        self, game: Minesweeper, *, record_steps: bool = False
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Play the game end-to-end until a win, a loss, or no move is left.

        After every reveal, newly proven mines are flagged on the board.

        Args:
            game: The Minesweeper engine to play. Must match the agent's size.
            record_steps: If True, include a per-move history in the payload.

        Returns:
            Tuple of (status, payload) where status is 1 (win), -1 (loss) or
            0 (no move available), and payload is a metrics dictionary.

        Raises:
            ValueError: If the board size does not match the agent.
        """
        if (game.height, game.width) != (self.height, self.width):
            raise ValueError(
                f"Agent is for a {self.height}x{self.width} board, "
                f"got {game.height}x{game.width}."
            )

        moves_sequence: List[Tuple[Cell, Optional[str]]] = []
        steps_history: List[Dict[str, Any]] = []
        max_sentences_count = 0
        status = 0

        while not game.game_over:
            move = self.choose_move()
            if move is None:
                logger.info("No move available after %d moves", len(moves_sequence))
                break

            kind = self.last_move_kind
            moves_sequence.append((move, kind))

            is_mine, count = game.reveal(move)
            if is_mine:
                logger.info("Hit a mine at %s after a %s move", move, kind)
                if record_steps:
                    self._record_step(steps_history, move, "mine")
                status = -1
                break

            self.record_move_result(move, count)
            for mine in self.mines - game.mines_found:
                game.mark_mine(mine)

            max_sentences_count = max(
                max_sentences_count, len(self.knowledge_base.sentences)
            )
            if record_steps:
                self._record_step(steps_history, move, "safe")

        if status == 0 and game.won():
            status = 1
            logger.info("Won the game in %d moves", len(moves_sequence))

        payload: Dict[str, Any] = {
            "moves_count": len(moves_sequence),
            "safe_moves_count": self.safe_moves_count,
            "random_moves_count": self.random_moves_count,
            "flags_count": len(game.mines_found),
            "known_mines_count": len(self.mines),
            "known_safes_count": len(self.safes),
            "max_sentences_count": max_sentences_count,
            "moves_sequence": moves_sequence,
        }
        if record_steps:
            payload["steps_history"] = steps_history
        return status, payload
