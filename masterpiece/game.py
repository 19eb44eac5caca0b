"""The playing scene: the game rules driven by time and input events."""

from __future__ import annotations

import enum
import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from masterpiece.master import MasterPiece
from masterpiece.quadtris import CLEARING

Color = Tuple[int, int, int, int]

_TICK_MS = 25
_FADE_STEP = 0.05
_FADE_LIMIT = 0.5
_ROTATE_STEP = 0.5
_ZOOM_STEP = 0.5
_SWIPE_VERTICAL = 50
_SWIPE_HORIZONTAL = 25
_DOUBLE_CLICK_MS = 250

_WHITE: Color = (255, 255, 255, 255)
_RED: Color = (255, 0, 0, 255)


class EventType(enum.Enum):
    """Kinds of input the game reacts to."""

    KEY_DOWN = enum.auto()
    KEY_UP = enum.auto()
    MOUSE_BUTTON_DOWN = enum.auto()
    MOUSE_BUTTON_UP = enum.auto()
    MOUSE_MOTION = enum.auto()
    FINGER_DOWN = enum.auto()
    FINGER_UP = enum.auto()
    FINGER_MOTION = enum.auto()


class Key(enum.Enum):
    """Keys with a meaning in the game."""

    LEFT = enum.auto()
    RIGHT = enum.auto()
    UP = enum.auto()
    DOWN = enum.auto()
    SPACE = enum.auto()
    RETURN = enum.auto()
    W = enum.auto()
    S = enum.auto()
    A = enum.auto()
    D = enum.auto()
    Z = enum.auto()
    X = enum.auto()
    EQUALS = enum.auto()
    MINUS = enum.auto()
    K = enum.auto()
    OTHER = enum.auto()


@dataclass(frozen=True)
class Event:
    """An input event.

    Mouse coordinates are in pixels; finger coordinates are fractions of the
    window size. ``time`` is in milliseconds.
    """

    type: EventType
    key: Key = Key.OTHER
    x: float = 0.0
    y: float = 0.0
    time: int = 0


class Game:
    """Game state, timing and input handling for one running game."""

    def __init__(self, difficulty: int = 0, rng: Optional[random.Random] = None) -> None:
        self.mp = MasterPiece(difficulty, rng)
        self.mp.set_callback(lambda: None)
        self.on_background_change: Callable[[], None] = lambda: None
        self.console: List[str] = []
        self.width = 0
        self.height = 0
        self.last_update_time = 0
        self._previous_time: Optional[int] = None
        self.rotate_x = 0.0
        self.rotate_y = 0.0
        self.rotate_z = -0.5
        self.zoom = -14.0
        self.mouse_down = False
        self.mouse_x = 0
        self.mouse_y = 0
        self.mouse_click_time = 0
        self.last_click_time = 0
        self.double_click = False
        self.num_fingers = 0
        self.fade_in = False
        self.fade = 0.0
        self.delta_time = 0.0

    def load(self, width: int, height: int) -> None:
        """Start a new game in a window of the given size, fading in."""
        self.width = width
        self.height = height
        self.fade_in = True
        self.mp.new_game()
        self.mouse_x = 0
        self.mouse_y = 0

    def update(self, now: int, console_visible: bool = False) -> bool:
        """Advance the game to time ``now`` in ms; return True when the game is over."""
        self.delta_time = (now - self.last_update_time) / 1000.0
        if now - self.last_update_time > _TICK_MS:
            self.last_update_time = now
            self.mp.grid.spin()
            self.mp.proc_blocks()
            if self.fade_in and self.fade <= _FADE_LIMIT:
                self.fade += _FADE_STEP
            else:
                self.fade_in = False
        if self._previous_time is None:
            self._previous_time = now
        if now - self._previous_time >= self.mp.timeout:
            if not self.fade_in and not console_visible:
                if self.mp.grid.can_move_down():
                    if not self.mp.drop:
                        self.mp.grid.game_piece.move_down()
                    self._previous_time = now
                elif not self.mp.drop:
                    return True
        return False

    def drop_piece(self) -> None:
        """Drop the current piece unless a drop is already in progress."""
        if not self.mp.drop:
            self.mp.drop = True
            self.mp.grid.game_piece.drop()

    def handle(self, event: Event, console_visible: bool = False) -> None:
        """React to one input event; nothing happens while the console is shown."""
        if console_visible:
            return
        kind = event.type
        if kind is EventType.KEY_UP:
            if event.key is Key.RETURN:
                self.drop_piece()
                self.console.append("\nCTRL+C Interrupt - No Command Running\n")
        elif kind is EventType.KEY_DOWN:
            self.on_background_change()
            self._key_down(event.key)
        elif kind in (EventType.MOUSE_BUTTON_DOWN, EventType.FINGER_DOWN):
            self.on_background_change()
            self._press(event)
        elif kind in (EventType.MOUSE_BUTTON_UP, EventType.FINGER_UP):
            self._release(event)
        elif kind in (EventType.MOUSE_MOTION, EventType.FINGER_MOTION):
            self._motion(event)

    def _key_down(self, key: Key) -> None:
        piece = self.mp.grid.game_piece
        if key is Key.LEFT:
            piece.move_left()
        elif key is Key.RIGHT:
            piece.move_right()
        elif key is Key.UP:
            piece.shift_colors()
            self.console.append("Shift Colors\n")
        elif key is Key.DOWN:
            piece.move_down()
        elif key is Key.SPACE:
            piece.shift_direction()
            self.console.append("Shift Direction\n")
        elif key in (Key.W, Key.S):
            self.rotate_x += _ROTATE_STEP if key is Key.W else -_ROTATE_STEP
            self.console.append(f"RotateX: {self.rotate_x:f} ")
        elif key in (Key.A, Key.D):
            self.rotate_y += _ROTATE_STEP if key is Key.D else -_ROTATE_STEP
            self.console.append(f"RotateY: {self.rotate_y:f} ")
        elif key in (Key.Z, Key.X):
            self.rotate_z += _ROTATE_STEP if key is Key.X else -_ROTATE_STEP
            self.console.append(f"RotateZ: {self.rotate_z:f} ")
        elif key in (Key.EQUALS, Key.MINUS):
            self.zoom += _ZOOM_STEP if key is Key.EQUALS else -_ZOOM_STEP
            self.console.append(f"Zoom: {self.zoom:f} ")

    def _press(self, event: Event) -> None:
        if event.type is EventType.MOUSE_BUTTON_DOWN:
            self.mouse_down = True
            self.mouse_x = int(event.x)
            self.mouse_y = int(event.y)
            self.mouse_click_time = event.time
            self.double_click = event.time - self.last_click_time < _DOUBLE_CLICK_MS
            self.last_click_time = event.time
            return
        x = int(event.x * self.width)
        y = int(event.y * self.height)
        self.num_fingers += 1
        if self.num_fingers == 1:
            self.mouse_down = True
            self.mouse_x = x
            self.mouse_y = y
        elif self.num_fingers == 2:
            self.drop_piece()

    def _release(self, event: Event) -> None:
        piece = self.mp.grid.game_piece
        if event.type is EventType.MOUSE_BUTTON_UP:
            self.mouse_down = False
            dy = int(event.y) - self.mouse_y
            if dy < -_SWIPE_VERTICAL:
                piece.shift_colors()
            elif dy > _SWIPE_VERTICAL:
                piece.shift_direction()
            elif self.double_click:
                self.drop_piece()
                self.double_click = False
            return
        self.num_fingers -= 1
        if self.num_fingers <= 0:
            self.mouse_down = False
            self.num_fingers = 0
        dy = int(event.y * self.height) - self.mouse_y
        if dy < -_SWIPE_VERTICAL:
            piece.shift_colors()
        elif dy > _SWIPE_VERTICAL:
            piece.shift_direction()

    def _motion(self, event: Event) -> None:
        if event.type is EventType.MOUSE_MOTION:
            x = int(event.x)
        else:
            x = int(event.x * self.width)
        if not self.mouse_down:
            return
        dx = x - self.mouse_x
        if dx > _SWIPE_HORIZONTAL:
            self.mp.grid.game_piece.move_right()
            self.mouse_x = x
        elif dx < -_SWIPE_HORIZONTAL:
            self.mp.grid.game_piece.move_left()
            self.mouse_x = x

    def visible_blocks(self) -> List[Tuple[int, int, int, float]]:
        """Return (x, y, color, rotation) of every grid cell that is drawn.

        Clearing cells keep the color -1 and their spin angle.
        """
        grid = self.mp.grid
        cells = []
        for x, column in enumerate(grid.blocks or ()):
            for y, block in enumerate(column):
                if block.color > 0:
                    cells.append((x, y, block.color, 0.0))
                elif block.color == CLEARING:
                    cells.append((x, y, block.color, block.rotate_x))
        return cells

    def piece_cells(self) -> List[Tuple[int, int, int]]:
        """Return (x, y, color) of the falling piece, or nothing while hidden."""
        if self.fade_in or self.mp.drop:
            return []
        piece = self.mp.grid.game_piece
        return [
            (cx, cy, piece.at(index).color)
            for index, (cx, cy) in enumerate(piece.cells())
        ]

    def hud_lines(self) -> List[Tuple[str, Color]]:
        """Return the score and level lines with their colors, once faded in."""
        if self.fade_in:
            return []
        return [
            (f"Score: {self.mp.score}", _WHITE),
            (f"Level: {self.mp.level}", _RED),
        ]