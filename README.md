# masterpiece

A falling-block puzzle game. A piece made of three coloured blocks drops onto a
15 × 18 board. Three blocks of one colour in a line down, across or along
either diagonal spin away: each such clear scores a point, a fourth matching
block in the same line scores ten more, and every fourth clear shortens the
drop interval by 25 ms, which raises the level shown on screen.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Playing

```
masterpiece
```

Options (`masterpiece --help`):

| Option               | Meaning                                            | Default |
|----------------------|----------------------------------------------------|---------|
| `-p`, `--path`       | directory that holds the `data/` directory         | `.`     |
| `-w`, `--width`      | window width in pixels                             | 1920    |
| `-H`, `--height`     | window height in pixels                            | 1080    |
| `-f`, `--fullscreen` | open the window full screen                        | off     |

The game reads from `<path>/data`:

- `gfx/index.txt`, one file name per line, naming files under `data/gfx/`.
  Every listed file that can be read and is not empty is loaded. The title
  screen picks one of entries 0–10 and the start screen one of entries 10–20,
  so at least 21 loadable entries are needed; with fewer the game stops with
  an error after the loading screen.
- the images `intro.png`, `start.png`, `bg.png`, `mp_wall.png`, `punk.png`
  (also the window icon) and `block_clear.png`, `block_ltblue.png`,
  `block_yellow.png`, `block_purple.png`, `block_green.png`. A missing block
  image is drawn as a plain coloured square; a missing backdrop is left out.
- `font.ttf`; pygame's default font is used when it cannot be loaded.

The game shows a loading screen, then a title that fades out (any key, click
or tap skips it), then a start screen: press any key, click or tap to start.

### Controls

| Input                                  | Action                          |
|----------------------------------------|---------------------------------|
| Left / Right                           | move the piece                  |
| Down                                   | move the piece down one row     |
| Up                                     | cycle the piece's colours       |
| Space                                  | turn the piece                  |
| Enter (on release)                     | drop the piece                  |
| Drag left or right                     | move the piece                  |
| Swipe up                               | cycle the piece's colours       |
| Swipe down                             | turn the piece                  |
| Double click (within 250 ms), two fingers | drop the piece              |

When a new piece can no longer enter the board the game ends and shows the
score; press Enter, click or tap to return to the title.

### What the game does not do

The board is drawn flat in 2D with pygame. The files listed in
`gfx/index.txt` are read and a different one is picked on every key press or
click, but their contents are never used for drawing. The W/S, A/D, Z/X and
`=`/`-` keys change tilt and zoom values that the 2D view does not use. There
is no sound.

## Copying listed files

```
masterpiece-copyfiles [LIST_FILE]
```

Reads `LIST_FILE` (default `test.txt`) and, for each line, prints and runs the
shell command `cp NAME files/NAME`. Does nothing if the list cannot be opened.

## Using the game logic

The rules need no display:

- `masterpiece.quadtris` — `Block`, `Piece`, `GameGrid` and
  `level_for_timeout`.
- `masterpiece.master` — `MasterPiece`, the single-board game.
- `masterpiece.puzzle` — `PuzzleGame`, a variant over four boards where the
  bottoms of boards 0 and 2 also match with each other.
- `masterpiece.game` — `Game`, which drives `MasterPiece` from a clock and
  `Event` input.
- `masterpiece.scenes` — the screens (`Startup`, `Intro`, `Start`, `Playing`,
  `GameOver`) and the moves between them.

```python
import random
from masterpiece.master import MasterPiece

game = MasterPiece(0, random.Random(1))
game.grid.game_piece.move_left()
game.grid.game_piece.move_down()
game.proc_blocks()
print(game.score, game.level)
```