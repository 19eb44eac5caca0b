"""The screens of the game and the rules for moving between them."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import List, Optional, Tuple, Type, TypeVar, Union

from masterpiece.game import Event, EventType, Game, Key
from masterpiece.shader_library import Library, Shader

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int, int]

_TICK_MS = 25
_INTRO_FADE_STEP = 0.01
_INTRO_FADE_END = 0.1
_START_FADE_STEP = 0.05
_START_FADE_LOW = 0.1
_INTRO_SHADERS = (0, 10)
_START_SHADERS = (10, 20)

_WHITE: Color = (255, 255, 255, 255)
_PURPLE: Color = (150, 80, 255, 255)

_SKIP_EVENTS = (EventType.KEY_DOWN, EventType.FINGER_UP, EventType.MOUSE_BUTTON_UP)

_S = TypeVar("_S", bound="Scene")


class Scene:
    """A screen of the game.

    Every scene shares the window size, the data directory, the random source,
    the shader library and the console lines with the scenes that follow it.
    ``update`` and ``handle`` return the scene to switch to, or None to stay.
    """

    def __init__(
        self,
        width: int,
        height: int,
        data_dir: Union[str, Path] = ".",
        rng: Optional[random.Random] = None,
        library: Optional[Library] = None,
        console: Optional[List[str]] = None,
    ) -> None:
        self.width = width
        self.height = height
        self.data_dir = Path(data_dir)
        self.rng = rng if rng is not None else random.Random()
        self.library = library
        self.console: List[str] = console if console is not None else []
        self.console_visible = False

    def _next(self, cls: Type[_S], *args: object) -> _S:
        scene = cls(
            *args,
            width=self.width,
            height=self.height,
            data_dir=self.data_dir,
            rng=self.rng,
            library=self.library,
            console=self.console,
        )
        scene.console_visible = self.console_visible
        return scene

    def _random_shader(self, low: int, high: int) -> Shader:
        if self.library is None:
            raise RuntimeError("the shader library has not been loaded")
        return self.library.get_shader(self.rng.randint(low, high))

    def update(self, now: int) -> Optional["Scene"]:
        """Advance the scene to time ``now`` in milliseconds."""
        return None

    def handle(self, event: Event) -> Optional["Scene"]:
        """React to one input event."""
        return None


class Startup(Scene):
    """Shows a loading message, then loads the shader library."""

    text = "Loading shaders..."

    def __init__(self, *args: object, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)
        self.counter = 0

    def update(self, now: int) -> Optional[Scene]:
        """Load the library on the second frame and move on to the intro."""
        self.counter += 1
        if self.counter == 2:
            self.library = Library(self.data_dir)
            return self._next(Intro)
        return None

    def handle(self, event: Event) -> Optional[Scene]:
        return None


class Intro(Scene):
    """The title image, fading out slowly."""

    def __init__(self, *args: object, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)
        self.fade = 1.0
        self.last_update_time = 0
        self.shader = self._random_shader(*_INTRO_SHADERS)
        logger.info("Loading...: %s", self.shader.filename)

    def update(self, now: int) -> Optional[Scene]:
        """Fade out; once faded, move on to the start screen."""
        if now - self.last_update_time > _TICK_MS:
            self.last_update_time = now
            self.fade -= _INTRO_FADE_STEP
        if self.fade <= _INTRO_FADE_END:
            return self._next(Start)
        return None

    def handle(self, event: Event) -> Optional[Scene]:
        """A key, tap or click skips to the start screen."""
        if event.type in _SKIP_EVENTS:
            return self._next(Start)
        return None


class Start(Scene):
    """The start screen: fades in, waits for input, fades out into the game."""

    def __init__(self, *args: object, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)
        self.fade = 0.0
        self.fade_in = True
        self.last_update_time = 0
        self.shader = self._random_shader(*_START_SHADERS)
        logger.info("Loading...: %s", self.shader.filename)
        self.console.append("Press any key to start\n")

    def update(self, now: int) -> Optional[Scene]:
        """Advance the fade; once faded out, start the game."""
        if now - self.last_update_time > _TICK_MS:
            self.last_update_time = now
            if self.fade_in and self.fade < 1.0:
                self.fade += _START_FADE_STEP
            if not self.fade_in and self.fade > _START_FADE_LOW:
                self.fade -= _START_FADE_STEP
        if self.fade_in and self.fade >= 1.0:
            self.fade = 1.0
        elif not self.fade_in and self.fade <= _START_FADE_LOW:
            self.fade = 0.0
            return self._next(Playing)
        return None

    def handle(self, event: Event) -> Optional[Scene]:
        """A key, tap or click while fading in begins the fade out."""
        if self.fade_in and event.type in _SKIP_EVENTS:
            self.fade = 1.0
            self.fade_in = False
        return None


class Playing(Scene):
    """A running game; ends in the game over screen."""

    def __init__(self, *args: object, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)
        self.game = Game(0, self.rng)
        self.game.console = self.console
        self.game.on_background_change = self._change_background
        self.game.load(self.width, self.height)
        if self.library is None:
            raise RuntimeError("the shader library has not been loaded")
        self.shader = self.library.get_shader(0)

    def _change_background(self) -> None:
        self.shader = self._random_shader(0, len(self.library) - 1)
        logger.info("Loaded: %s", self.shader.filename)

    def update(self, now: int) -> Optional[Scene]:
        """Advance the game; when it is over, show the final score."""
        if self.game.update(now, self.console_visible):
            return self._next(GameOver, self.game.mp.score, self.game.mp.level)
        return None

    def handle(self, event: Event) -> Optional[Scene]:
        self.game.handle(event, self.console_visible)
        return None


class GameOver(Scene):
    """Shows the final score until the player asks for another game."""

    def __init__(self, score: int, level: int, *args: object, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)
        self.score = score
        self.level = level
        self.console.append(f"Game Over Score: {score} level: {level}\n")

    def update(self, now: int) -> Optional[Scene]:
        return None

    def handle(self, event: Event) -> Optional[Scene]:
        """Enter, a tap or a click goes back to the intro."""
        if (
            (event.type is EventType.KEY_DOWN and event.key is Key.RETURN)
            or event.type is EventType.FINGER_UP
            or event.type is EventType.MOUSE_BUTTON_UP
        ):
            return self._next(Intro)
        return None

    def messages(self) -> List[Tuple[str, Color]]:
        """Return the two centred lines of text with their colors."""
        return [
            (f"Game Over Your Score: {self.score}", _PURPLE),
            ("Tap or Enter to play again", _WHITE),
        ]