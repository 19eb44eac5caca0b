"""The four-grid puzzle game: line clearing, scoring and falling blocks."""

from __future__ import annotations

import random
from itertools import pairwise
from typing import Iterable, List, Optional, Sequence

from masterpiece.quadtris import (
    CLEARING,
    EMPTY,
    Callback,
    GameGrid,
    Block,
    level_for_timeout,
)

_TIMEOUTS = {0: 1200, 1: 900, 2: 650}
_TIMEOUT_STEP = 25
_TIMEOUT_RANGE = 1 << 32

# Directions in which a line of matching blocks is searched: down, right,
# down-right and down-left.
_LINE_STEPS = ((0, 1), (1, 0), (1, 1), (-1, 1))


class _Scoring:
    """Score, clear count, drop timeout and level shared by the game variants."""

    def __init__(self, difficulty: int) -> None:
        self.diff = difficulty
        self.score = 0
        self.timeout = 1200
        self.clears = 0
        self.level = 0

    def _start(self) -> None:
        self.score = 0
        self.timeout = _TIMEOUTS.get(self.diff, self.timeout)
        self.clears = 0

    def _update_level(self) -> None:
        self.level = level_for_timeout(self.timeout)

    def _count_clear(self) -> None:
        self.score += 1
        self.clears += 1
        if self.clears % 4 == 0:
            # The timeout is an unsigned 32-bit counter.
            self.timeout = (self.timeout - _TIMEOUT_STEP) % _TIMEOUT_RANGE

    def _clear_run(
        self, run: Sequence[Optional[Block]], extra: Optional[Block]
    ) -> bool:
        """Clear three matching colored blocks, plus a fourth that matches too."""
        if any(block is None for block in run):
            return False
        first = run[0]
        if first.color <= 0 or any(block.color != first.color for block in run[1:]):
            return False
        if extra is not None and extra.color == first.color:
            extra.color = CLEARING
            self.score += 10
        for block in run:
            block.color = CLEARING
        self._count_clear()
        return True

    def _find_line(self, grid: GameGrid) -> bool:
        """Clear the first line of three found in the grid; return True if any."""
        for x in range(grid.width):
            for y in range(grid.height):
                for dx, dy in _LINE_STEPS:
                    run = [grid.at(x + dx * k, y + dy * k) for k in range(3)]
                    extra = grid.at(x + dx * 3, y + dy * 3)
                    if self._clear_run(run, extra):
                        return True
        return False

    @staticmethod
    def _sink(grid: GameGrid) -> bool:
        """Let the first colored block above an empty cell fall by one row."""
        for column in grid.blocks or ():
            for upper, lower in pairwise(column):
                if lower.color == EMPTY and upper.color > 0:
                    upper.color, lower.color = lower.color, upper.color
                    return True
        return False


class PuzzleGame(_Scoring):
    """A game over four grids, where grids 0 and 2 also match across their bottoms."""

    def __init__(self, difficulty: int = 0, rng: Optional[random.Random] = None) -> None:
        super().__init__(difficulty)
        shared = rng if rng is not None else random.Random()
        self.grids: List[GameGrid] = [GameGrid(shared) for _ in range(4)]
        self.new_game()

    def set_callback(self, callback: Callback) -> None:
        """Set the function each grid's piece calls when it is placed."""
        for grid in self.grids:
            grid.game_piece.set_callback(callback)

    def new_game(self) -> None:
        """Reset the score and timeout and create four empty grids."""
        self._start()
        self.grids[0].init_grid(12, 720 // 16 // 2 + 1)
        self.grids[1].init_grid(12, 28)
        self.grids[2].init_grid(12, 720 // 16 // 2)
        self.grids[3].init_grid(12, 28)

    def proc_blocks(self) -> None:
        """Update the level, clear one match if there is one, else let a block fall."""
        self._update_level()
        if any(self._find_line(grid) for grid in self.grids):
            return
        top, bottom = self.grids[0], self.grids[2]
        if self._cross_columns(top, bottom):
            return
        if self._cross_diagonal(top, bottom, 1):
            return
        if self._cross_diagonal(top, bottom, -1):
            return
        self.move_down_blocks()

    def _cross_columns(self, top: GameGrid, bottom: GameGrid) -> bool:
        for x in range(top.width):
            b0 = top.at(x, top.height - 1)
            b1 = top.at(x, top.height - 2)
            b2 = bottom.at(x, bottom.height - 1)
            b3 = bottom.at(x, bottom.height - 2)
            if self._clear_run((b0, b1, b2), b3):
                return True
            self._clear_run((b2, b0, b3), b1)
        return False

    def _cross_diagonal(self, top: GameGrid, bottom: GameGrid, step: int) -> bool:
        starts: Iterable[int] = (
            range(top.width - 3) if step > 0 else range(3, top.width)
        )
        y0 = top.height - 1
        y1 = bottom.height - 1
        for x in starts:
            run = (
                top.at(x, y0),
                bottom.at(x + step, y1),
                bottom.at(x + 2 * step, y1 - 1),
            )
            extra = bottom.at(x + 3 * step, y1 - 2)
            if self._clear_run(run, extra):
                return True
        return False

    def move_down_blocks(self) -> None:
        """Move the first floating block found in any grid down one row."""
        for grid in self.grids:
            if self._sink(grid):
                return