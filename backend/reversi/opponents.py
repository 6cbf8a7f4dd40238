"""Automated opponents.

Every opponent answers ``find_best_move(board, color)`` with a legal move or
None (a pass) and reports through ``is_ready()`` whether it can be asked yet.
The search AI and model-backed players are interchangeable behind that
contract; the game driver never needs to know which one it is talking to.
"""
import logging
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from .board import Board, Move, SIZE, color_name
from .search import SearchEngine

logger = logging.getLogger(__name__)

# Maps the 2x8x8 board planes to one score per square (index r * 8 + c)
Policy = Callable[[List[List[List[float]]]], Sequence[float]]


class OpponentError(RuntimeError):
    """Raised when an opponent cannot be created or fails while choosing."""


class Opponent(Protocol):
    name: str

    def find_best_move(self, board: Board, color: int) -> Optional[Move]:
        ...

    def is_ready(self) -> bool:
        ...


class ClassicOpponent:
    name = "classic"

    def __init__(self, engine: Optional[SearchEngine] = None):
        self.engine = engine or SearchEngine()

    def find_best_move(self, board: Board, color: int) -> Optional[Move]:
        return self.engine.find_best_move(board, color)

    def is_ready(self) -> bool:
        return True


def encode_board(board: Board, color: int) -> List[List[List[float]]]:
    """Two planes: discs of ``color``, then discs of its opponent"""
    mine = [[0.0] * SIZE for _ in range(SIZE)]
    theirs = [[0.0] * SIZE for _ in range(SIZE)]
    for r in range(SIZE):
        for c in range(SIZE):
            cell = board.grid[r][c]
            if cell == color:
                mine[r][c] = 1.0
            elif cell == -color:
                theirs[r][c] = 1.0
    return [mine, theirs]


class PolicyOpponent:
    """Plays the legal move a policy network scores highest.

    Loading and running the model is up to whoever supplies ``policy``.
    """

    name = "policy"

    def __init__(self, policy: Optional[Policy] = None, name: Optional[str] = None):
        self.policy = policy
        if name:
            self.name = name

    def is_ready(self) -> bool:
        return self.policy is not None

    def find_best_move(self, board: Board, color: int) -> Optional[Move]:
        if self.policy is None:
            logger.error("Policy opponent %s is not ready", self.name)
            return None

        legal_moves = board.valid_moves(color)
        if not legal_moves:
            return None

        try:
            scores = self.policy(encode_board(board, color))
        except Exception as e:
            logger.exception("Policy %s failed for %s", self.name, color_name(color))
            raise OpponentError(f"Policy {self.name} failed: {e}") from e

        if len(scores) < SIZE * SIZE:
            raise OpponentError(f"Policy {self.name} returned {len(scores)} scores, expected {SIZE * SIZE}")

        best_move = None
        best_score = float('-inf')
        for move in legal_moves:
            score = scores[move.r * SIZE + move.c]
            if score > best_score:
                best_score = score
                best_move = move
        if best_move is None:
            raise OpponentError(f"Policy {self.name} gave no usable score for any legal move")
        return best_move


OpponentFactory = Callable[[], Opponent]

OPPONENTS: Dict[str, OpponentFactory] = {
    "classic": ClassicOpponent,
}


def register_opponent(key: str, factory: OpponentFactory):
    OPPONENTS[key] = factory


def create_opponent(key: str) -> Opponent:
    """Instantiate a registered opponent and make sure it can play"""
    if key not in OPPONENTS:
        raise KeyError(f"Unknown opponent: {key}")
    opponent = OPPONENTS[key]()
    if not opponent.is_ready():
        raise OpponentError(f"Opponent {key} is not ready")
    logger.info("Opponent %s is ready", key)
    return opponent
