import random

import pytest

from masterpiece.puzzle import PuzzleGame
from masterpiece.quadtris import CLEARING, EMPTY, level_for_timeout


def make_game(difficulty=0):
    return PuzzleGame(difficulty, random.Random(1234))


def paint(grid, cells, color):
    for x, y in cells:
        grid.at(x, y).color = color


def colors(grid, cells):
    return [grid.at(x, y).color for x, y in cells]


def test_new_game_grid_sizes():
    game = make_game()
    sizes = [(g.width, g.height) for g in game.grids]
    assert sizes == [
        (12, 720 // 16 // 2 + 1),
        (12, 28),
        (12, 720 // 16 // 2),
        (12, 28),
    ]


@pytest.mark.parametrize("difficulty,timeout", [(0, 1200), (1, 900), (2, 650)])
def test_timeout_by_difficulty(difficulty, timeout):
    assert make_game(difficulty).timeout == timeout


def test_unknown_difficulty_keeps_default_timeout():
    assert make_game(7).timeout == 1200


def test_new_game_resets_score_and_clears():
    game = make_game()
    game.score = 42
    game.clears = 5
    game.new_game()
    assert (game.score, game.clears) == (0, 0)
    assert all(b.color == EMPTY for g in game.grids for col in g.blocks for b in col)


@pytest.mark.parametrize(
    "cells",
    [
        [(2, 4), (2, 5), (2, 6)],
        [(2, 4), (3, 4), (4, 4)],
        [(2, 4), (3, 5), (4, 6)],
        [(4, 4), (3, 5), (2, 6)],
    ],
)
def test_line_of_three_is_cleared(cells):
    game = make_game()
    grid = game.grids[1]
    paint(grid, cells, 2)
    game.proc_blocks()
    assert colors(grid, cells) == [CLEARING] * 3
    assert game.score == 1
    assert game.clears == 1


def test_line_of_four_scores_bonus():
    game = make_game()
    grid = game.grids[3]
    cells = [(0, 10), (0, 11), (0, 12), (0, 13)]
    paint(grid, cells, 3)
    game.proc_blocks()
    assert colors(grid, cells) == [CLEARING] * 4
    assert game.score == 1 + 10


def test_clearing_blocks_do_not_match():
    game = make_game()
    grid = game.grids[1]
    cells = [(5, 20), (5, 21), (5, 22)]
    paint(grid, cells, CLEARING)
    game.proc_blocks()
    assert game.score == 0
    assert colors(grid, cells) == [CLEARING] * 3


def test_every_fourth_clear_shortens_timeout():
    game = make_game()
    game.clears = 3
    paint(game.grids[1], [(1, 1), (1, 2), (1, 3)], 4)
    game.proc_blocks()
    assert game.clears == 4
    assert game.timeout == 1200 - 25


def test_timeout_wraps_as_unsigned():
    game = make_game()
    game.timeout = 10
    game.clears = 3
    paint(game.grids[1], [(1, 1), (1, 2), (1, 3)], 4)
    game.proc_blocks()
    assert game.timeout > 1100
    game.proc_blocks()
    assert game.level == 0


def test_level_follows_timeout():
    game = make_game()
    game.timeout = 550
    game.proc_blocks()
    assert game.level == level_for_timeout(550)


def test_no_match_lets_one_block_fall():
    game = make_game()
    grid = game.grids[0]
    grid.at(4, 0).color = 2
    game.proc_blocks()
    assert grid.at(4, 0).color == EMPTY
    assert grid.at(4, 1).color == 2


def test_move_down_blocks_moves_only_first_grid_with_a_floating_block():
    game = make_game()
    game.grids[1].at(0, 0).color = 3
    game.grids[2].at(0, 0).color = 4
    game.move_down_blocks()
    assert colors(game.grids[1], [(0, 0), (0, 1)]) == [EMPTY, 3]
    assert colors(game.grids[2], [(0, 0), (0, 1)]) == [4, EMPTY]


def test_move_down_blocks_leaves_resting_blocks():
    game = make_game()
    grid = game.grids[0]
    bottom = grid.height - 1
    grid.at(0, bottom).color = 3
    game.move_down_blocks()
    assert grid.at(0, bottom).color == 3


def test_cross_grid_column_top_two_bottom_one():
    game = make_game()
    top, bottom = game.grids[0], game.grids[2]
    top_cells = [(5, top.height - 1), (5, top.height - 2)]
    paint(top, top_cells, 2)
    bottom.at(5, bottom.height - 1).color = 2
    game.proc_blocks()
    assert colors(top, top_cells) == [CLEARING, CLEARING]
    assert bottom.at(5, bottom.height - 1).color == CLEARING
    assert game.score == 1


def test_cross_grid_column_top_one_bottom_two():
    game = make_game()
    top, bottom = game.grids[0], game.grids[2]
    top.at(6, top.height - 1).color = 3
    bottom_cells = [(6, bottom.height - 1), (6, bottom.height - 2)]
    paint(bottom, bottom_cells, 3)
    game.proc_blocks()
    assert top.at(6, top.height - 1).color == CLEARING
    assert colors(bottom, bottom_cells) == [CLEARING, CLEARING]
    assert game.score == 1


def test_cross_grid_column_of_four_scores_bonus():
    game = make_game()
    top, bottom = game.grids[0], game.grids[2]
    paint(top, [(7, top.height - 1), (7, top.height - 2)], 1)
    paint(bottom, [(7, bottom.height - 1), (7, bottom.height - 2)], 1)
    game.proc_blocks()
    assert game.score == 11
    assert bottom.at(7, bottom.height - 2).color == CLEARING


@pytest.mark.parametrize("step,start", [(1, 0), (-1, 5)])
def test_cross_grid_diagonal(step, start):
    game = make_game()
    top, bottom = game.grids[0], game.grids[2]
    top.at(start, top.height - 1).color = 4
    bottom_cells = [
        (start + step, bottom.height - 1),
        (start + 2 * step, bottom.height - 2),
    ]
    paint(bottom, bottom_cells, 4)
    game.proc_blocks()
    assert top.at(start, top.height - 1).color == CLEARING
    assert colors(bottom, bottom_cells) == [CLEARING, CLEARING]
    assert game.score == 1


def test_set_callback_reaches_every_grid():
    game = make_game()
    calls = []
    game.set_callback(lambda: calls.append(1))
    for grid in game.grids:
        grid.game_piece.set_block()
    assert len(calls) == len(game.grids)