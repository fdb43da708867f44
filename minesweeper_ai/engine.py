"""Minesweeper board oracle with configurable mine placement."""

import random
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Set, Tuple

from .utils import Cell, get_neighborhoods, in_bounds

if TYPE_CHECKING:
    from .agent import MinesweeperAgent

MINES_GENERATION_ALGORITHMS: Tuple[str, ...] = (
    "uniform",
    "safe_first_action_rule",
    "safe_neighborhood_rule",
)


class Minesweeper:
    """Minesweeper game engine answering neighbor and reveal queries."""

    def __init__(
        self,
        height: int = 8,
        width: int = 8,
        mines_count: int = 8,
        *,
        mines_generation_algorithm: str = "uniform",
        mines: Optional[Iterable[Cell]] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize a Minesweeper game engine.

        Args:
            height: Board height (number of rows), must be > 0.
            width: Board width (number of columns), must be > 0.
            mines_count: Total number of mines to place, must be >= 0.
                Ignored when `mines` is given.
            mines_generation_algorithm: Mine placement rule; one of
                {"uniform", "safe_first_action_rule", "safe_neighborhood_rule"}.
                "uniform" places mines immediately; the other two defer
                placement to the first reveal so that the revealed cell
                (and, for the neighborhood rule, its neighbors) is safe.
            mines: Explicit mine positions. Overrides random placement.
            rng: Random source used for mine placement.
            seed: Seed for a fresh random source when `rng` is not given.

        Raises:
            ValueError: If dimensions, mine count, mine positions or the
                algorithm are invalid.
        """
        if height <= 0 or width <= 0:
            raise ValueError("Height and width must be positive.")
        if mines_generation_algorithm not in MINES_GENERATION_ALGORITHMS:
            raise ValueError(
                "mines_generation_algorithm must be one of "
                f"{', '.join(MINES_GENERATION_ALGORITHMS)}."
            )

        self.height: int = height
        self.width: int = width
        self.mines_generation_algorithm: str = mines_generation_algorithm
        self.rng: random.Random = rng if rng is not None else random.Random(seed)

        self._neighborhoods: Dict[Cell, Tuple[Cell, ...]] = get_neighborhoods(
            height, width
        )

        self.board: List[List[bool]] = [
            [False for _ in range(width)] for _ in range(height)
        ]
        self.mines: Set[Cell] = set()
        self.board_blank: bool = True

        if mines is not None:
            self._set_mines(mines)
        else:
            if mines_count < 0:
                raise ValueError("mines_count must be non-negative.")
            reserved = {
                "uniform": 0,
                "safe_first_action_rule": 1,
                "safe_neighborhood_rule": 9,
            }[mines_generation_algorithm]
            if mines_count > height * width - reserved:
                raise ValueError(
                    f"Cannot place {mines_count} mines and satisfy "
                    f"{mines_generation_algorithm}."
                )
            self.mines_count = mines_count
            if mines_generation_algorithm == "uniform":
                self.place_mines()

        self.revealed: Set[Cell] = set()
        # At first, player has found no mines
        self.mines_found: Set[Cell] = set()
        self.unrevealed_count: int = height * width - self.mines_count
        self.game_over: bool = False
        self.hit_mine: Optional[Cell] = None

    def _set_mines(self, mines: Iterable[Cell]) -> None:
        positions = set(mines)
        for cell in positions:
            if not in_bounds(cell, self.height, self.width):
                raise ValueError(f"Mine {cell} is outside the board.")
            row, col = cell
            self.board[row][col] = True
        self.mines = positions
        self.mines_count = len(positions)
        self.board_blank = False

    def reset(self) -> None:
        """
        Reset the game state to allow replaying the same board.

        Keeps the mine positions but clears revealed cells and flags.
        """
        self.revealed = set()
        self.mines_found = set()
        self.unrevealed_count = self.height * self.width - self.mines_count
        self.game_over = False
        self.hit_mine = None

    def neighbors(self, cell: Cell) -> Tuple[Cell, ...]:
        """
        Return precomputed neighbor coordinates for a cell.

        Args:
            cell: Cell (row, col).

        Returns:
            All valid (nr, nc) neighbors in the 8-neighborhood.
        """
        return self._neighborhoods[cell]

    def place_mines(self, first_cell: Optional[Cell] = None) -> None:
        """
        Place mines on the board (one-time), respecting the selected safety rule.

        Args:
            first_cell: The first revealed cell, kept safe by the
                "safe_first_action_rule" and "safe_neighborhood_rule" modes.

        Raises:
            ValueError: If the board is not blank.
        """
        if not self.board_blank:
            raise ValueError("The board is not blank.")

        safe: Set[Cell] = set()
        if first_cell is not None:
            if self.mines_generation_algorithm == "safe_first_action_rule":
                safe = {first_cell}
            elif self.mines_generation_algorithm == "safe_neighborhood_rule":
                safe = set(self.neighbors(first_cell)) | {first_cell}

        eligible: List[Cell] = [
            (row, col)
            for row in range(self.height)
            for col in range(self.width)
            if (row, col) not in safe
        ]

        # Sample mines uniformly without replacement.
        self._set_mines(self.rng.sample(eligible, self.mines_count))

    def is_mine(self, cell: Cell) -> bool:
        row, col = cell
        return self.board[row][col]

    def nearby_mines(self, cell: Cell) -> int:
        """
        Returns the number of mines that are within one row and column
        of a given cell, not including the cell itself.
        """
        return sum(1 for nr, nc in self.neighbors(cell) if self.board[nr][nc])

    def reveal(self, cell: Cell) -> Tuple[bool, int]:
        """
        Reveal a single cell.

        Args:
            cell: Cell (row, col) to reveal.

        Returns:
            Tuple of (is_mine, neighbor_mine_count). The count is 0 when the
            cell is a mine. Hitting a mine ends the game as a loss; revealing
            the last safe cell ends it as a win.

        Raises:
            ValueError: If the cell is out of bounds or the game is over.
        """
        if not in_bounds(cell, self.height, self.width):
            raise ValueError("Cell coordinates are outside the board.")
        if self.game_over:
            raise ValueError("The game is over.")

        if self.board_blank:
            self.place_mines(cell)

        if self.is_mine(cell):
            self.game_over = True
            self.hit_mine = cell
            return True, 0

        if cell not in self.revealed:
            self.revealed.add(cell)
            self.unrevealed_count -= 1
            if self.unrevealed_count == 0:
                self.game_over = True

        return False, self.nearby_mines(cell)

    def mark_mine(self, cell: Cell) -> None:
        """Flag a cell the player believes to be a mine."""
        if not in_bounds(cell, self.height, self.width):
            raise ValueError("Cell coordinates are outside the board.")
        self.mines_found.add(cell)

    def won(self) -> bool:
        """Checks if every safe cell has been revealed without hitting a mine."""
        return self.hit_mine is None and self.unrevealed_count == 0

    def lost(self) -> bool:
        return self.hit_mine is not None

    def all_mines_flagged(self) -> bool:
        """Checks if all mines have been flagged."""
        return not self.board_blank and self.mines_found == self.mines

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"

    def _c(self, s: str) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

    def _m(self, s: str) -> str:
        """Wrap string in mine color (red)."""
        return f"{self._ANSI_MINE}{s}{self._ANSI_RESET}"

    def format_board(self, reveal_all: bool = False, color: bool = True) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Args:
            reveal_all: If True, show mines and all underlying counts.
            color: If False, emit plain text without ANSI escapes.

        Returns:
            A formatted multi-line string with coordinate labels and the board grid.
        """
        coord = self._c if color else str
        mine = self._m if color else str

        def cell_str(row: int, col: int) -> str:
            cell = (row, col)
            if self.board[row][col] and (reveal_all or cell == self.hit_mine):
                return mine("M")
            if reveal_all or cell in self.revealed:
                return str(self.nearby_mines(cell))
            if cell in self.mines_found:
                return "F"
            return "."

        # Header: column coordinates
        header_cells = " ".join(f"{col:2d}" for col in range(self.width))
        out = [coord("   ") + coord(header_cells)]
        out.append(coord("   " + "-" * (3 * self.width - 1)))

        # Rows with row coordinate at left
        for row in range(self.height):
            row_cells = " ".join(f" {cell_str(row, col)}" for col in range(self.width))
            out.append(coord(f"{row:2d} ") + coord("|") + row_cells)

        return "\n".join(out)

    def print_board(self) -> None:
        """Print the current visible board state to stdout."""
        print(self.format_board(reveal_all=False))

    def print_full_board(self) -> None:
        """Print the fully revealed underlying board to stdout (for debugging)."""
        print(self.format_board(reveal_all=True))


def play_cli(game: Minesweeper, agent: Optional["MinesweeperAgent"] = None) -> None:
    """
    Run a simple terminal UI for playing Minesweeper.

    When an agent is given, the human and the agent share the board: every
    safe reveal is fed to the agent, and the 'ai' command lets it make the
    next move. Once the agent has no move left it flags the mines it proved.

    Args:
        game: A Minesweeper instance to play against.
        agent: Optional agent with the same dimensions as the board.
    """
    if agent is not None and (agent.height, agent.width) != (game.height, game.width):
        raise ValueError("Agent dimensions do not match the board.")

    print(
        "Minesweeper CLI (enter: row col, or 'f row col' to flag"
        + (", or 'ai' for an agent move" if agent is not None else "")
        + "). Coordinates are 0-based. Type 'q' to quit.\n"
    )
    print(game.format_board(reveal_all=False))

    while True:
        s = input("\nMove (row col): ").strip()
        if s.lower() in {"q", "quit", "exit"}:
            print("Quit.")
            return

        if s.lower() == "ai":
            if agent is None:
                print("No agent is attached to this game.")
                continue

            move = agent.choose_move()
            if move is None:
                for mine in sorted(agent.mines):
                    game.mark_mine(mine)
                print(f"\nAI has no move left and flagged {len(agent.mines)} mine(s).\n")
                print(game.format_board(reveal_all=False))
                if game.all_mines_flagged():
                    print("\nAll mines flagged. You won!")
                    return
                continue

            cell = move
            print(f"\nAI chose {cell} ({agent.last_move_kind} move).")
        else:
            parts = s.replace(",", " ").split()
            flag = bool(parts) and parts[0].lower() == "f"
            if flag:
                parts = parts[1:]
            if len(parts) != 2:
                print("Invalid input. Example: 3 5")
                continue

            try:
                cell = (int(parts[0]), int(parts[1]))
            except ValueError:
                print("Invalid input. Coordinates must be integers.")
                continue

            if not in_bounds(cell, game.height, game.width):
                print("Invalid input. Cell is outside the board.")
                continue

            if flag:
                game.mark_mine(cell)
                print(f"\nYou flagged {cell}.\n")
                print(game.format_board(reveal_all=False))
                if game.all_mines_flagged():
                    print("\nAll mines flagged. You won!")
                    return
                continue

            print(f"\nYou decided to reveal {cell}.")

        is_mine, count = game.reveal(cell)
        if agent is not None and not is_mine and cell not in agent.moves_made:
            agent.record_move_result(cell, count)

        print()
        print(game.format_board(reveal_all=False))

        if is_mine:
            print("\nYou hit a mine. You lost.")
            print("\nFull board:")
            print(game.format_board(reveal_all=True))
            return

        if game.won():
            print("\nYou revealed all safe cells. You won!")
            print("\nFull board:")
            print(game.format_board(reveal_all=True))
            return
