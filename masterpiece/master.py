"""The single-grid game played on screen."""

from __future__ import annotations

import random
from typing import Optional

from masterpiece.puzzle import _Scoring
from masterpiece.quadtris import Callback, GameGrid


class MasterPiece(_Scoring):
    """One 15 by 18 grid with scoring, levels and a drop flag."""

    def __init__(self, difficulty: int = 0, rng: Optional[random.Random] = None) -> None:
        super().__init__(difficulty)
        self.grid = GameGrid(rng if rng is not None else random.Random())
        self.drop = False
        self.new_game()

    def set_callback(self, callback: Callback) -> None:
        """Set the function the piece calls when it is placed."""
        self.grid.game_piece.set_callback(callback)

    def new_game(self) -> None:
        """Reset the score and timeout and create an empty grid."""
        self._start()
        self.grid.init_grid(15, 18)

    def proc_blocks(self) -> None:
        """Update the level, clear one match if there is one, else let a block fall."""
        self._update_level()
        if self._find_line(self.grid):
            return
        self.move_down_blocks()

    def move_down_blocks(self) -> None:
        """Let one floating block fall; when none can, the drop has finished."""
        if not self._sink(self.grid):
            self.drop = False