import random

import pytest

from reversi.board import BLACK, EMPTY, WHITE, Board


def grid_from_rows(*rows):
    """Build a board from 8 strings of '.', 'B', 'W'; missing rows are empty"""
    symbols = {".": EMPTY, "B": BLACK, "W": WHITE}
    lines = list(rows) + ["........"] * (8 - len(rows))
    return Board.from_grid([[symbols[ch] for ch in line] for line in lines])


def random_positions(seed=7, games=4, max_plies=40):
    """Positions reached by random play from the start, with the side to move"""
    rng = random.Random(seed)
    positions = []
    for _ in range(games):
        board, color = Board(), BLACK
        for _ in range(max_plies):
            moves = board.valid_moves(color)
            if not moves:
                if not board.has_moves(-color):
                    break
                color = -color
                continue
            positions.append((board, color))
            r, c = rng.choice(moves)
            board = board.resulting_board(color, r, c)
            color = -color
        positions.append((board, color))
    return positions


@pytest.fixture
def black_stuck():
    """Black has no move; White can play c1 (0, 2)"""
    return grid_from_rows("WB......")


@pytest.fixture
def no_moves_draw():
    """Two isolated discs, neither side can move"""
    return grid_from_rows(
        "B.......",
        "........",
        "........",
        "........",
        "........",
        "........",
        "........",
        ".......W",
    )
