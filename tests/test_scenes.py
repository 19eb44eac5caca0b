import random

import pytest

from masterpiece.game import Event, EventType, Key
from masterpiece.scenes import GameOver, Intro, Playing, Start, Startup
from masterpiece.shader_library import Library


class HighRandom(random.Random):
    """Always picks the top of the requested range."""

    def randint(self, a, b):
        return b


def make_data(tmp_path, count=21):
    gfx = tmp_path / "gfx"
    gfx.mkdir()
    names = [f"s{i}.glsl" for i in range(count)]
    for name in names:
        (gfx / name).write_text("#version 330 core\nvoid main() {}\n")
    (gfx / "index.txt").write_text("\n".join(names) + "\n")
    return tmp_path


@pytest.fixture
def library(tmp_path):
    return Library(make_data(tmp_path))


def kwargs(library, rng=None):
    return dict(width=800, height=600, rng=rng or random.Random(1), library=library)


def test_startup_loads_library_on_second_update(tmp_path):
    data = make_data(tmp_path)
    scene = Startup(800, 600, data_dir=data, rng=random.Random(3))
    assert scene.update(0) is None
    following = scene.update(10)
    assert isinstance(following, Intro)
    assert len(following.library) == 21


def test_startup_without_shaders_fails(tmp_path):
    scene = Startup(800, 600, data_dir=tmp_path)
    scene.update(0)
    with pytest.raises(IndexError):
        scene.update(1)


def test_intro_picks_shader_within_first_eleven(library):
    scene = Intro(**kwargs(library, HighRandom()))
    assert scene.shader.filename.endswith("s10.glsl")


def test_intro_needs_enough_shaders(tmp_path):
    small = Library(make_data(tmp_path, count=5))
    with pytest.raises(IndexError):
        Intro(**kwargs(small, HighRandom()))


def test_intro_fades_and_moves_to_start(library):
    scene = Intro(**kwargs(library))
    assert scene.update(26) is None
    assert scene.fade == pytest.approx(0.99)
    assert scene.update(30) is None
    assert scene.fade == pytest.approx(0.99)
    now = 26
    result = None
    while result is None:
        now += 26
        result = scene.update(now)
    assert isinstance(result, Start)
    assert scene.fade <= 0.1


def test_intro_skips_on_key_but_not_key_up(library):
    scene = Intro(**kwargs(library))
    assert scene.handle(Event(EventType.KEY_UP)) is None
    assert isinstance(scene.handle(Event(EventType.MOUSE_BUTTON_UP)), Start)


def test_start_prints_prompt_and_fades_in(library):
    scene = Start(**kwargs(library, HighRandom()))
    assert scene.console == ["Press any key to start\n"]
    assert scene.shader.filename.endswith("s20.glsl")
    for step in range(1, 40):
        assert scene.update(step * 26) is None
    assert scene.fade == 1.0
    assert scene.fade_in is True


def test_start_input_fades_out_into_game(library):
    scene = Start(**kwargs(library))
    assert scene.handle(Event(EventType.KEY_DOWN)) is None
    assert scene.fade == 1.0
    assert scene.fade_in is False
    now = 0
    result = None
    while result is None:
        now += 26
        result = scene.update(now)
    assert isinstance(result, Playing)
    assert scene.fade == 0.0
    assert result.console is scene.console


def test_playing_background_changes_on_key(library):
    scene = Playing(**kwargs(library, HighRandom()))
    assert scene.shader.filename.endswith("s0.glsl")
    scene.handle(Event(EventType.KEY_DOWN, Key.K))
    assert scene.shader.filename.endswith("s20.glsl")


def _block_spawn(scene):
    grid = scene.game.mp.grid
    piece = grid.game_piece
    for y in range(grid.height):
        grid.at(piece.x, y).color = 1 + y % 2
    scene.game.fade_in = False


def test_playing_ends_in_game_over(library):
    scene = Playing(**kwargs(library))
    _block_spawn(scene)
    assert scene.update(30) is None
    result = scene.update(30 + scene.game.mp.timeout)
    assert isinstance(result, GameOver)
    assert result.score == scene.game.mp.score
    assert result.console[-1] == (
        f"Game Over Score: {result.score} level: {result.level}\n"
    )


def test_playing_console_visible_holds_game(library):
    scene = Playing(**kwargs(library))
    _block_spawn(scene)
    scene.console_visible = True
    assert scene.update(30) is None
    assert scene.update(30 + scene.game.mp.timeout) is None


def test_game_over_messages_and_console(library):
    scene = GameOver(7, 2, **kwargs(library))
    assert scene.console == ["Game Over Score: 7 level: 2\n"]
    assert scene.messages() == [
        ("Game Over Your Score: 7", (150, 80, 255, 255)),
        ("Tap or Enter to play again", (255, 255, 255, 255)),
    ]
    assert scene.update(100000) is None


def test_game_over_returns_to_intro_on_enter_only(library):
    scene = GameOver(0, 0, **kwargs(library))
    assert scene.handle(Event(EventType.KEY_DOWN, Key.SPACE)) is None
    assert isinstance(scene.handle(Event(EventType.KEY_DOWN, Key.RETURN)), Intro)
    assert isinstance(scene.handle(Event(EventType.FINGER_UP)), Intro)