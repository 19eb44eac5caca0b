"""Blocks, the falling three-block piece and the playing grid."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

Callback = Callable[[], None]

NUM_BLOCKS = 5
EMPTY = 0
CLEARING = -1

# Offset of each following cell of a piece, by direction.
_DIRECTION_STEPS = ((0, 1), (1, 0), (-1, 0), (0, -1))


@dataclass
class Block:
    """One cell of the grid or of a piece; color 0 is empty, -1 is clearing."""

    x: int = 0
    y: int = 0
    color: int = EMPTY
    rotate_x: float = field(default=0.0, compare=False)

    def matches(self, color: int) -> bool:
        """Return True when the block has the given color."""
        return self.color == color


def level_for_timeout(timeout: int) -> int:
    """Return the level shown for a given drop timeout in milliseconds."""
    if timeout > 1100:
        return 0
    if timeout <= 200:
        return 10
    return 1 + (1100 - timeout) // 100


class Piece:
    """The falling column of three colored blocks."""

    def __init__(self, grid: "GameGrid", rng: Optional[random.Random] = None) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else random.Random()
        self.blocks = [Block(), Block(), Block()]
        self.x = 0
        self.y = 0
        self.direction = 0
        self._callback: Callback = lambda: None

    def set_callback(self, callback: Callback) -> None:
        """Set the function called each time the piece is placed."""
        self._callback = callback

    def reset(self) -> None:
        """Put a new piece at the top centre with random colors, not all equal."""
        centre = self.grid.width // 2
        self.x = centre
        self.y = 0
        for row, block in enumerate(self.blocks):
            block.x = centre
            block.y = row
        choices = self.grid.num_blocks - 1
        while True:
            for block in self.blocks:
                block.color = 1 + self.rng.randrange(choices)
            colors = {block.color for block in self.blocks}
            if len(colors) > 1:
                break
        self.direction = 0

    def set_position(self, x: int, y: int) -> None:
        """Move horizontally to x when the cells there are free; y is not used."""
        if self.check_location(x, self.y):
            self.x = x

    def shift_colors(self) -> None:
        """Rotate the blocks so the last one comes first."""
        first, second, third = self.blocks
        self.blocks = [third, first, second]

    def at(self, index: int) -> Optional[Block]:
        """Return block 0, 1 or 2 of the piece, or None for any other index."""
        if 0 <= index <= 2:
            return self.blocks[index]
        return None

    def move_left(self) -> None:
        if self.check_location(self.x - 1, self.y) and self.x > 0:
            self.x -= 1

    def move_right(self) -> None:
        if self.check_location(self.x + 1, self.y) and self.x < self.grid.width - 1:
            self.x += 1

    def move_down(self) -> None:
        """Move one row down, or place the piece when it cannot move."""
        if self.check_location(self.x, self.y + 1):
            stop = 3 if self.direction == 0 else 0
            if self.y < self.grid.height - stop:
                self.y += 1
            else:
                self.set_block()
        else:
            self.set_block()

    def drop(self) -> None:
        """Place the piece if a free spot exists at or below its current row."""
        for row in range(self.y, self.grid.height):
            if self.check_location(self.x, row):
                self.set_block()
                return

    def _footprint(self, x: int, y: int) -> List[Tuple[int, int]]:
        dx, dy = _DIRECTION_STEPS[self.direction]
        return [(x + dx * step, y + dy * step) for step in range(3)]

    def _grid_blocks(self, x: int, y: int) -> List[Optional[Block]]:
        return [self.grid.at(cx, cy) for cx, cy in self._footprint(x, y)]

    def cells(self) -> List[Tuple[int, int]]:
        """Return the grid coordinates of the piece's three blocks."""
        return self._footprint(self.x, self.y)

    def check_location(self, x: int, y: int) -> bool:
        """Return True when all three cells at (x, y) are inside and empty."""
        return all(
            block is not None and block.color == EMPTY
            for block in self._grid_blocks(x, y)
        )

    def shift_direction(self) -> None:
        """Turn to the next direction, keeping the old one if it does not fit."""
        old_direction = self.direction
        self.direction = (self.direction + 1) % 4
        if not self.check_location(self.x, self.y):
            self.direction = old_direction

    def set_block(self) -> None:
        """Write the piece's colors into the grid, start a new piece, then notify."""
        targets = self._grid_blocks(self.x, self.y)
        if all(block is not None for block in targets):
            for target, block in zip(targets, self.blocks):
                target.color = block.color
            self.reset()
            self._callback()


class GameGrid:
    """A rectangular grid of blocks with its falling piece."""

    num_blocks = NUM_BLOCKS

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.blocks: Optional[List[List[Block]]] = None
        self.width = 0
        self.height = 0
        self.game_piece = Piece(self, rng)

    def init_grid(self, size_x: int, size_y: int) -> None:
        """Create an empty grid of the given size and reset the piece."""
        self.release_grid()
        self.blocks = [[Block() for _ in range(size_y)] for _ in range(size_x)]
        self.width = size_x
        self.height = size_y
        self.game_piece.reset()

    def release_grid(self) -> None:
        self.blocks = None

    def at(self, x: int, y: int) -> Optional[Block]:
        """Return the block at (x, y), or None outside the grid."""
        if self.blocks is not None and 0 <= x < self.width and 0 <= y < self.height:
            return self.blocks[x][y]
        return None

    def can_move_down(self) -> bool:
        """Return False when a new piece is blocked at the top of the grid."""
        piece = self.game_piece
        return not (
            piece.direction != 3
            and not piece.check_location(piece.x, piece.y)
            and piece.y == 0
        )

    def spin(self) -> None:
        """Advance the clearing animation; finished blocks become empty."""
        for column in self.blocks or ():
            for block in column:
                if block.color == CLEARING:
                    block.rotate_x += 20.0
                    if block.rotate_x >= 360.0:
                        block.rotate_x = 0.0
                        block.color = EMPTY