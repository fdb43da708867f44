"""Propositional knowledge base for the Minesweeper logic agent."""

import logging
from numbers import Integral
from typing import (
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Set,
    Tuple,
)

from .utils import Cell, get_neighborhoods, in_bounds

logger = logging.getLogger(__name__)


class InconsistentKnowledgeError(ValueError):
    """Raised when an observation contradicts what the knowledge base has proven."""


class Sentence:
    """
    Logical statement about a Minesweeper game.

    A sentence consists of a set of board cells and a count of the number
    of those cells which are mines.
    """

    def __init__(self, cells: Iterable[Cell], count: int) -> None:
        self.cells: Set[Cell] = set(cells)
        self.count: int = count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sentence):
            return NotImplemented
        return self.cells == other.cells and self.count == other.count

    def __hash__(self) -> int:
        return hash(self.key())

    def __str__(self) -> str:
        return f"{sorted(self.cells)} = {self.count}"

    def __repr__(self) -> str:
        return f"Sentence({sorted(self.cells)!r}, {self.count!r})"

    def key(self) -> Tuple[FrozenSet[Cell], int]:
        """Return an immutable (cells, count) pair identifying this sentence."""
        return frozenset(self.cells), self.count

    def copy(self) -> "Sentence":
        return Sentence(self.cells, self.count)

    def is_consistent(self) -> bool:
        """True if the count can be satisfied by the cells."""
        return 0 <= self.count <= len(self.cells)

    def known_mines(self) -> Set[Cell]:
        """
        Returns the set of all cells in self.cells known to be mines.
        """
        if self.count > 0 and self.count == len(self.cells):
            return set(self.cells)
        return set()

    def known_safes(self) -> Set[Cell]:
        """
        Returns the set of all cells in self.cells known to be safe.
        """
        if self.count == 0:
            return set(self.cells)
        return set()

    def mark_mine(self, cell: Cell) -> None:
        """
        Updates the sentence given the fact that a cell is known to be a mine.
        """
        if cell in self.cells:
            self.cells.remove(cell)
            self.count -= 1

    def mark_safe(self, cell: Cell) -> None:
        """
        Updates the sentence given the fact that a cell is known to be safe.
        """
        self.cells.discard(cell)


class KnowledgeBase:
    """
    Evolving set of sentences plus the cells proven to be safe or mines.

    Every observation is folded in by add_knowledge(), which then applies the
    counting rule and the subset rule until neither produces anything new:

    1. Counting rule: a sentence with count 0 proves all its cells safe, a
       sentence with count == len(cells) proves all its cells mines.
    2. Subset rule: if A.cells is a strict subset of B.cells, then
       (B.cells - A.cells) holds exactly B.count - A.count mines.
    """

    def __init__(
        self,
        height: int,
        width: int,
        neighbors: Optional[Callable[[Cell], Iterable[Cell]]] = None,
    ) -> None:
        """
        Initialize an empty knowledge base for a height x width board.

        Args:
            height: Board height (number of rows), must be > 0.
            width: Board width (number of columns), must be > 0.
            neighbors: Neighbor function of the board oracle. Defaults to the
                8-connected neighborhood of the grid.

        Raises:
            ValueError: If dimensions are invalid.
        """
        if height <= 0 or width <= 0:
            raise ValueError("Height and width must be positive.")

        self.height: int = height
        self.width: int = width

        if neighbors is None:
            neighborhoods = get_neighborhoods(height, width)
            neighbors = neighborhoods.__getitem__
        self._neighbors: Callable[[Cell], Iterable[Cell]] = neighbors

        self.moves_made: Set[Cell] = set()
        self.mines: Set[Cell] = set()
        self.safes: Set[Cell] = set()
        self.sentences: List[Sentence] = []
        # Revealed cell -> neighbor mine count it showed
        self.clues: Dict[Cell, int] = {}

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    def add_knowledge(self, cell: Cell, neighbor_mine_count: int) -> None:
        """
        Record that `cell` was revealed safe and shows `neighbor_mine_count`.

        Runs inference to a fixpoint before returning. On any contradiction the
        knowledge base is left exactly as it was before the call.

        Args:
            cell: The revealed cell (row, col).
            neighbor_mine_count: Number of mines among the cell's neighbors.

        Raises:
            ValueError: If the cell is outside the board.
            InconsistentKnowledgeError: If the cell was already revealed or
                proven to be a mine, or the count cannot be satisfied.
        """
        if not in_bounds(cell, self.height, self.width):
            raise ValueError(f"Cell {cell} is outside the board.")
        if cell in self.moves_made:
            raise InconsistentKnowledgeError(f"Cell {cell} was already revealed.")
        if cell in self.mines:
            raise InconsistentKnowledgeError(
                f"Cell {cell} was revealed but is a known mine."
            )

        neighbors = set(self._neighbors(cell))
        if (
            isinstance(neighbor_mine_count, bool)
            or not isinstance(neighbor_mine_count, Integral)
            or not 0 <= neighbor_mine_count <= len(neighbors)
        ):
            raise InconsistentKnowledgeError(
                f"Impossible mine count {neighbor_mine_count!r} for cell {cell} "
                f"with {len(neighbors)} neighbors."
            )
        count = int(neighbor_mine_count)

        undetermined = neighbors - self.moves_made - self.mines - self.safes
        adjusted_count = count - len(neighbors & self.mines)
        if not 0 <= adjusted_count <= len(undetermined):
            raise InconsistentKnowledgeError(
                f"Mine count {count} at {cell} contradicts known cells: "
                f"{adjusted_count} mines left for {len(undetermined)} unknown neighbors."
            )

        snapshot = self._snapshot()
        try:
            self.moves_made.add(cell)
            self.clues[cell] = count
            self._mark_safe(cell)

            if undetermined:
                sentence = Sentence(undetermined, adjusted_count)
                logger.debug("New sentence from %s: %s", cell, sentence)
                self.sentences.append(sentence)

            self._run_fixpoint()
        except InconsistentKnowledgeError:
            self._restore(snapshot)
            raise

    def unknown_cells(self) -> Set[Cell]:
        """Return board cells that are neither revealed nor proven safe or mine."""
        return {
            (row, col)
            for row in range(self.height)
            for col in range(self.width)
            if (row, col) not in self.safes
            and (row, col) not in self.mines
            and (row, col) not in self.moves_made
        }

    # -------------------------------------------------------------------------
    # Marking
    # -------------------------------------------------------------------------

    def _mark_mine(self, cell: Cell) -> None:
        if cell in self.safes:
            raise InconsistentKnowledgeError(f"Cell {cell} proven both safe and mine.")
        self.mines.add(cell)
        for sentence in self.sentences:
            sentence.mark_mine(cell)

    def _mark_safe(self, cell: Cell) -> None:
        if cell in self.mines:
            raise InconsistentKnowledgeError(f"Cell {cell} proven both safe and mine.")
        self.safes.add(cell)
        for sentence in self.sentences:
            sentence.mark_safe(cell)

    # -------------------------------------------------------------------------
    # Inference
    # -------------------------------------------------------------------------

    def _run_fixpoint(self) -> int:
        """
        Apply the inference rules until a full round changes nothing.

        Returns:
            The number of rounds run (the last one being the idle round).
        """
        rounds = 0
        changed = True
        while changed:
            rounds += 1
            changed = self._apply_counting_rule()
            self._prune_sentences()
            if self._apply_subset_rule():
                changed = True
            self._prune_sentences()
            logger.debug(
                "Inference round %d: %d sentences, %d mines, %d safes",
                rounds,
                len(self.sentences),
                len(self.mines),
                len(self.safes),
            )
        return rounds

    def _apply_counting_rule(self) -> bool:
        """Mark every cell some sentence proves to be a mine or safe."""
        proven_mines: Set[Cell] = set()
        proven_safes: Set[Cell] = set()
        for sentence in self.sentences:
            proven_mines |= sentence.known_mines()
            proven_safes |= sentence.known_safes()

        conflict = proven_mines & proven_safes
        if conflict:
            raise InconsistentKnowledgeError(
                f"Cells {sorted(conflict)} proven both safe and mine."
            )

        new_mines = proven_mines - self.mines
        new_safes = proven_safes - self.safes
        for cell in sorted(new_mines):
            logger.debug("Inferred mine at %s", cell)
            self._mark_mine(cell)
        for cell in sorted(new_safes):
            logger.debug("Inferred safe cell at %s", cell)
            self._mark_safe(cell)

        return bool(new_mines or new_safes)

    def _apply_subset_rule(self) -> bool:
        """Derive sentences over the difference of nested sentence pairs."""
        existing: Set[Sentence] = set(self.sentences)
        derived: List[Sentence] = []

        for smaller in self.sentences:
            if not smaller.cells:
                continue
            for larger in self.sentences:
                if smaller is larger or not smaller.cells < larger.cells:
                    continue

                inferred = Sentence(
                    larger.cells - smaller.cells, larger.count - smaller.count
                )
                if not inferred.is_consistent():
                    raise InconsistentKnowledgeError(
                        f"Sentences {smaller} and {larger} contradict each other."
                    )
                if inferred not in existing:
                    logger.debug("Subset rule derived %s", inferred)
                    existing.add(inferred)
                    derived.append(inferred)

        self.sentences.extend(derived)
        return bool(derived)

    def _prune_sentences(self) -> None:
        """Drop empty and duplicate sentences, rejecting impossible ones."""
        unique: List[Sentence] = []
        seen: Set[Sentence] = set()

        for sentence in self.sentences:
            if not sentence.is_consistent():
                raise InconsistentKnowledgeError(f"Impossible sentence {sentence}.")
            if not sentence.cells or sentence in seen:
                continue
            seen.add(sentence)
            unique.append(sentence)

        self.sentences = unique

    # -------------------------------------------------------------------------
    # Rollback
    # -------------------------------------------------------------------------

    def _snapshot(
        self,
    ) -> Tuple[Set[Cell], Set[Cell], Set[Cell], List[Sentence], Dict[Cell, int]]:
        return (
            set(self.moves_made),
            set(self.mines),
            set(self.safes),
            [sentence.copy() for sentence in self.sentences],
            dict(self.clues),
        )

    def _restore(
        self,
        snapshot: Tuple[
            Set[Cell], Set[Cell], Set[Cell], List[Sentence], Dict[Cell, int]
        ],
    ) -> None:
        (
            self.moves_made,
            self.mines,
            self.safes,
            self.sentences,
            self.clues,
        ) = snapshot
