from typing import FrozenSet, Iterable, List, NamedTuple, Optional, Sequence, Tuple

# Constants
EMPTY = 0
BLACK = 1
WHITE = -1

SIZE = 8

DIRECTIONS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1), (1, 0), (1, 1),
)

Grid = Tuple[Tuple[int, ...], ...]


class Move(NamedTuple):
    r: int
    c: int


class IllegalMoveError(ValueError):
    """Raised when a placement captures nothing or targets an occupied cell."""


def opponent(color: int) -> int:
    return -color


def color_name(color: int) -> str:
    return "black" if color == BLACK else "white"


def _check_color(color: int):
    if color not in (BLACK, WHITE):
        raise ValueError(f"Unknown player: {color!r}")


def _check_bounds(r: int, c: int):
    if not (0 <= r < SIZE and 0 <= c < SIZE):
        raise ValueError(f"Coordinates out of range: ({r}, {c})")


def _initial_grid() -> Grid:
    rows = [[EMPTY for _ in range(SIZE)] for _ in range(SIZE)]
    # D4 (3,3) = White, E5 (4,4) = White
    # E4 (3,4) = Black, D5 (4,3) = Black
    rows[3][3] = WHITE
    rows[4][4] = WHITE
    rows[3][4] = BLACK
    rows[4][3] = BLACK
    return tuple(tuple(row) for row in rows)


class Board:
    """An 8x8 Othello position.

    Boards are values: nothing mutates ``grid`` after construction, and every
    move produces a fresh ``Board``. Siblings in a search tree can therefore
    share a parent without copying it.
    """

    __slots__ = ("grid",)

    def __init__(self, grid: Optional[Grid] = None):
        self.grid: Grid = grid if grid is not None else _initial_grid()

    @classmethod
    def from_grid(cls, rows: Iterable[Sequence[int]]) -> 'Board':
        """Build a board from any 8x8 nested sequence of cell values."""
        grid = tuple(tuple(row) for row in rows)
        if len(grid) != SIZE or any(len(row) != SIZE for row in grid):
            raise ValueError(f"Board must be {SIZE}x{SIZE}")
        for row in grid:
            for cell in row:
                if cell not in (EMPTY, BLACK, WHITE):
                    raise ValueError(f"Invalid cell value: {cell!r}")
        return cls(grid)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.grid == other.grid

    def __hash__(self) -> int:
        return hash(self.grid)

    def __repr__(self) -> str:
        symbols = {EMPTY: ".", BLACK: "B", WHITE: "W"}
        return "Board(\n" + "\n".join(
            "  " + "".join(symbols[cell] for cell in row) for row in self.grid
        ) + "\n)"

    def at(self, r: int, c: int) -> int:
        _check_bounds(r, c)
        return self.grid[r][c]

    def flippable_pieces(self, color: int, r: int, c: int) -> FrozenSet[Move]:
        """Opponent discs captured by a hypothetical placement at (r, c)"""
        _check_color(color)
        _check_bounds(r, c)
        return frozenset(self._flippable(color, r, c))

    def _flippable(self, color: int, r: int, c: int) -> List[Move]:
        other = -color
        flips: List[Move] = []
        for dr, dc in DIRECTIONS:
            line = []
            nr, nc = r + dr, c + dc
            while 0 <= nr < SIZE and 0 <= nc < SIZE:
                cell = self.grid[nr][nc]
                if cell == other:
                    line.append(Move(nr, nc))
                elif cell == color:
                    flips.extend(line)
                    break
                else:  # EMPTY
                    break
                nr += dr
                nc += dc
        return flips

    def valid_moves(self, color: int) -> List[Move]:
        """Legal moves for ``color`` in row-major order"""
        _check_color(color)
        moves = []
        for r in range(SIZE):
            for c in range(SIZE):
                if self.grid[r][c] == EMPTY and self._flippable(color, r, c):
                    moves.append(Move(r, c))
        return moves

    def has_moves(self, color: int) -> bool:
        _check_color(color)
        for r in range(SIZE):
            for c in range(SIZE):
                if self.grid[r][c] == EMPTY and self._flippable(color, r, c):
                    return True
        return False

    def is_valid_move(self, color: int, r: int, c: int) -> bool:
        _check_color(color)
        _check_bounds(r, c)
        return self.grid[r][c] == EMPTY and bool(self._flippable(color, r, c))

    def resulting_board(self, color: int, r: int, c: int) -> Optional['Board']:
        """Return the board after ``color`` plays (r, c), or None if illegal.

        The receiver is never modified.
        """
        _check_color(color)
        _check_bounds(r, c)
        if self.grid[r][c] != EMPTY:
            return None
        flips = self._flippable(color, r, c)
        if not flips:
            return None

        rows = [list(row) for row in self.grid]
        rows[r][c] = color
        for fr, fc in flips:
            rows[fr][fc] = color
        return Board(tuple(tuple(row) for row in rows))

    def apply(self, move: Tuple[int, int], color: int) -> 'Board':
        """Apply a move and return a new board"""
        new_board = self.resulting_board(color, move[0], move[1])
        if new_board is None:
            raise IllegalMoveError(f"Invalid move for {color_name(color)}: {tuple(move)}")
        return new_board

    def terminal(self) -> bool:
        """Check if the game is over (neither side can move)"""
        return not self.has_moves(BLACK) and not self.has_moves(WHITE)

    def count(self) -> Tuple[int, int]:
        """Return (black_count, white_count)"""
        black_count = sum(1 for row in self.grid for cell in row if cell == BLACK)
        white_count = sum(1 for row in self.grid for cell in row if cell == WHITE)
        return black_count, white_count

    def empties(self) -> int:
        return sum(1 for row in self.grid for cell in row if cell == EMPTY)

    def legal_grid(self, color: int) -> List[List[int]]:
        """Get 8x8 grid showing legal moves (1 for legal, 0 for illegal)"""
        legal = [[0 for _ in range(SIZE)] for _ in range(SIZE)]
        for r, c in self.valid_moves(color):
            legal[r][c] = 1
        return legal

    def to_lists(self) -> List[List[int]]:
        return [list(row) for row in self.grid]

    def winner(self) -> Optional[int]:
        """Return winner: 1 (Black), -1 (White), 0 (Draw), or None (ongoing)"""
        if not self.terminal():
            return None

        black_count, white_count = self.count()
        if black_count > white_count:
            return BLACK
        elif white_count > black_count:
            return WHITE
        else:
            return 0
