"""The game window: input, the scene loop and 2D drawing with pygame."""

from __future__ import annotations

import argparse
import logging
import math
import random
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple, Union

import pygame

from masterpiece.game import Event, EventType, Key
from masterpiece.scenes import GameOver, Intro, Playing, Scene, Start, Startup

logger = logging.getLogger(__name__)

TITLE = "MasterPiece3D"
DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080
FRAME_RATE = 60

_BLOCK_IMAGES = (
    "block_clear.png",
    "punk.png",
    "block_ltblue.png",
    "block_yellow.png",
    "block_purple.png",
    "block_green.png",
)
# Used when a block image cannot be loaded.
_BLOCK_COLORS = (
    (40, 40, 40),
    (220, 60, 160),
    (90, 190, 255),
    (250, 220, 40),
    (160, 80, 240),
    (60, 200, 90),
)
_WHITE = (255, 255, 255, 255)
_WHEEL_BUTTONS = (4, 5)

_KEYS = {
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_UP: Key.UP,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_SPACE: Key.SPACE,
    pygame.K_RETURN: Key.RETURN,
    pygame.K_w: Key.W,
    pygame.K_s: Key.S,
    pygame.K_a: Key.A,
    pygame.K_d: Key.D,
    pygame.K_z: Key.Z,
    pygame.K_x: Key.X,
    pygame.K_EQUALS: Key.EQUALS,
    pygame.K_MINUS: Key.MINUS,
    pygame.K_k: Key.K,
}

_KEY_EVENTS = {pygame.KEYDOWN: EventType.KEY_DOWN, pygame.KEYUP: EventType.KEY_UP}
_MOUSE_EVENTS = {
    pygame.MOUSEBUTTONDOWN: EventType.MOUSE_BUTTON_DOWN,
    pygame.MOUSEBUTTONUP: EventType.MOUSE_BUTTON_UP,
    pygame.MOUSEMOTION: EventType.MOUSE_MOTION,
}
_FINGER_EVENTS = {
    pygame.FINGERDOWN: EventType.FINGER_DOWN,
    pygame.FINGERUP: EventType.FINGER_UP,
    pygame.FINGERMOTION: EventType.FINGER_MOTION,
}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse the command line: data path, window size and full screen."""
    parser = argparse.ArgumentParser(prog="masterpiece", description="Play MasterPiece.")
    parser.add_argument(
        "-p", "--path", default=".", help="directory that holds the data/ directory"
    )
    parser.add_argument("-w", "--width", type=int, default=DEFAULT_WIDTH)
    parser.add_argument("-H", "--height", type=int, default=DEFAULT_HEIGHT)
    parser.add_argument("-f", "--fullscreen", action="store_true")
    args = parser.parse_args(argv)
    if args.width <= 0 or args.height <= 0:
        parser.error("window size must be positive")
    return args


def translate_event(event: "pygame.event.Event", width: int, height: int) -> Optional[Event]:
    """Turn a pygame event into a game event, or None when the game ignores it.

    Mouse positions are clamped to the window; finger positions stay fractions.
    """
    now = pygame.time.get_ticks()
    kind = event.type
    if kind in _KEY_EVENTS:
        return Event(_KEY_EVENTS[kind], key=_KEYS.get(event.key, Key.OTHER), time=now)
    if kind in _MOUSE_EVENTS:
        if kind != pygame.MOUSEMOTION and getattr(event, "button", 1) in _WHEEL_BUTTONS:
            return None
        x, y = event.pos
        x = min(max(x, 0), max(width - 1, 0))
        y = min(max(y, 0), max(height - 1, 0))
        return Event(_MOUSE_EVENTS[kind], x=float(x), y=float(y), time=now)
    if kind in _FINGER_EVENTS:
        return Event(_FINGER_EVENTS[kind], x=float(event.x), y=float(event.y), time=now)
    return None


class App:
    """The window that runs the scenes until it is closed."""

    def __init__(
        self,
        path: Union[str, Path] = ".",
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        fullscreen: bool = False,
    ) -> None:
        pygame.init()
        flags = pygame.FULLSCREEN if fullscreen else 0
        self.screen = pygame.display.set_mode((width, height), flags)
        pygame.display.set_caption(TITLE)
        self.width = width
        self.height = height
        self.data_dir = Path(path) / "data"
        self.rng = random.Random()
        self.clock = pygame.time.Clock()
        self.max_frames: Optional[int] = None
        self._images: Dict[str, Optional[pygame.Surface]] = {}
        self._scaled: Dict[Tuple[str, int, int], pygame.Surface] = {}
        self._fonts: Dict[int, pygame.font.Font] = {}
        self._console_seen = 0
        icon = self._image("punk.png")
        if icon is not None:
            pygame.display.set_icon(icon)
        self.scene: Scene = Startup(width, height, data_dir=self.data_dir, rng=self.rng)

    def run(self) -> int:
        """Run until the window is closed or max_frames is reached; return frames drawn."""
        frames = 0
        while self.max_frames is None or frames < self.max_frames:
            for raw in pygame.event.get():
                if raw.type == pygame.QUIT:
                    return frames
                event = translate_event(raw, self.width, self.height)
                if event is not None:
                    self._switch(self.scene.handle(event))
            now = pygame.time.get_ticks()
            self._switch(self.scene.update(now))
            self._draw(now)
            self._flush_console()
            pygame.display.flip()
            self.clock.tick(FRAME_RATE)
            frames += 1
        return frames

    def _switch(self, scene: Optional[Scene]) -> None:
        if scene is not None:
            self.scene = scene

    def _flush_console(self) -> None:
        lines = self.scene.console
        if self._console_seen > len(lines):
            self._console_seen = 0
        for line in lines[self._console_seen:]:
            logger.info("%s", line.strip())
        self._console_seen = len(lines)

    def _image(self, name: str) -> Optional[pygame.Surface]:
        if name not in self._images:
            try:
                self._images[name] = pygame.image.load(str(self.data_dir / name)).convert_alpha()
            except (pygame.error, OSError):
                self._images[name] = None
        return self._images[name]

    def _scaled_image(self, name: str, width: int, height: int) -> Optional[pygame.Surface]:
        key = (name, width, height)
        if key not in self._scaled:
            image = self._image(name)
            if image is None:
                return None
            self._scaled[key] = pygame.transform.smoothscale(image, (width, height))
        return self._scaled[key]

    def _font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            font_path = self.data_dir / "font.ttf"
            try:
                self._fonts[size] = pygame.font.Font(str(font_path), size)
            except (pygame.error, OSError):
                self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    def _text(self, size: int, text: str, color: Tuple[int, ...], x: float, y: float) -> None:
        surface = self._font(size).render(text, True, color[:3])
        self.screen.blit(surface, (int(x), int(y)))

    def _backdrop(self, name: str, fade: float) -> None:
        image = self._scaled_image(name, self.width, self.height)
        if image is None:
            return
        faded = image.copy()
        faded.set_alpha(int(min(max(fade, 0.0), 1.0) * 255))
        self.screen.blit(faded, (0, 0))

    def _draw(self, now: int) -> None:
        self.screen.fill((0, 0, 0))
        scene = self.scene
        if isinstance(scene, Startup):
            self._text(24, scene.text, _WHITE, 25, 25)
        elif isinstance(scene, Intro):
            self._backdrop("intro.png", scene.fade)
        elif isinstance(scene, Start):
            self._backdrop("start.png", scene.fade)
        elif isinstance(scene, Playing):
            self._draw_game(scene)
        elif isinstance(scene, GameOver):
            self._draw_game_over(scene)

    def _draw_game(self, scene: Playing) -> None:
        game = scene.game
        self._backdrop("bg.png", game.fade)
        grid = game.mp.grid
        cell = max(1, min(self.width // (grid.width + 2), self.height // (grid.height + 2)))
        left = (self.width - cell * grid.width) // 2
        top = (self.height - cell * grid.height) // 2
        for x, y, color, rotation in game.visible_blocks():
            if color < 0:
                color = 1 + self.rng.randrange(3)
            self._draw_block(left + x * cell, top + y * cell, cell, color, rotation)
        for x, y, color in game.piece_cells():
            self._draw_block(left + x * cell, top + y * cell, cell, color, 0.0)
        for row, (text, color) in enumerate(game.hud_lines()):
            self._text(24, text, color, 25, 25 + 35 * row)

    def _draw_block(self, px: int, py: int, cell: int, color: int, rotation: float) -> None:
        index = min(max(color, 0), len(_BLOCK_IMAGES) - 1)
        width = max(1, int(cell * abs(math.cos(math.radians(rotation)))))
        offset = (cell - width) // 2
        image = self._scaled_image(_BLOCK_IMAGES[index], width, cell)
        if image is not None:
            self.screen.blit(image, (px + offset, py))
        else:
            self.screen.fill(_BLOCK_COLORS[index], pygame.Rect(px + offset, py, width, cell))

    def _draw_game_over(self, scene: GameOver) -> None:
        self._backdrop("mp_wall.png", 1.0)
        font = self._font(75)
        for row, (text, color) in enumerate(scene.messages()):
            text_width, text_height = font.size(text)
            x = (self.width - text_width) / 2
            y = (self.height - text_height) / 2 + 80 * row
            self._text(75, text, color, x, y)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the game window with the options given on the command line."""
    args = parse_args(argv)
    try:
        app = App(args.path, args.width, args.height, args.fullscreen)
        app.run()
    except (pygame.error, OSError, RuntimeError, IndexError) as error:
        logger.error("Exception: %s", error)
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())