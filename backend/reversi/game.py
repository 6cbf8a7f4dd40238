import logging
from typing import Dict, List, Optional, Tuple

from .board import BLACK, WHITE, Board, IllegalMoveError, Move, color_name

logger = logging.getLogger(__name__)

# (move, color) for every turn taken; move is None for a pass
History = List[Tuple[Optional[Move], int]]


class GameOverError(RuntimeError):
    """Raised when a move or pass is attempted after the game has ended."""


class NotHumanTurnError(RuntimeError):
    """Raised when a human tries to act on a side an AI controls."""


def notation(move: Tuple[int, int]) -> str:
    """Column letter then 1-based row, e.g. (2, 3) -> d3"""
    r, c = move
    return f"{chr(ord('a') + c)}{r + 1}"


class GameSession:
    """The mutable state of one game: current board, side to move, history.

    The rules engine and the AIs stay pure; this is the only place that
    remembers whose turn it is. ``black`` and ``white`` name the opponent
    controlling each side, or None for a human.
    """

    def __init__(self, board: Optional[Board] = None, to_move: int = BLACK,
                 black: Optional[str] = None, white: Optional[str] = None):
        self.board = board if board is not None else Board()
        self.to_move = to_move
        self.players: Dict[int, Optional[str]] = {BLACK: black, WHITE: white}
        self.history: History = []
        self._start = (self.board, to_move)

    def reset(self, black: Optional[str] = None, white: Optional[str] = None):
        self.board = Board()
        self.to_move = BLACK
        self.players = {BLACK: black, WHITE: white}
        self.history = []
        self._start = (self.board, BLACK)

    @property
    def mode(self) -> str:
        """human-vs-human, human-vs-ai, ai-vs-human or ai-vs-ai (black first)"""
        sides = ["human" if self.players[color] is None else "ai" for color in (BLACK, WHITE)]
        return "-vs-".join(sides)

    def controller(self, color: Optional[int] = None) -> Optional[str]:
        """Opponent key playing ``color`` (default: side to move), None for a human"""
        return self.players[self.to_move if color is None else color]

    def is_human_turn(self) -> bool:
        return not self.is_over and self.controller() is None

    def human_play(self, r: int, c: int) -> Board:
        """A human move; refused while an AI holds the turn"""
        if not self.is_over and not self.is_human_turn():
            raise NotHumanTurnError(f"{color_name(self.to_move)} is played by {self.controller()}")
        return self.play(r, c)

    @property
    def is_over(self) -> bool:
        return self.board.terminal()

    @property
    def winner(self) -> Optional[int]:
        return self.board.winner()

    @property
    def score(self) -> Tuple[int, int]:
        return self.board.count()

    def legal_moves(self) -> List[Move]:
        return self.board.valid_moves(self.to_move)

    def last_move(self) -> Optional[Move]:
        """Return the most recent non-pass move from history."""
        for mv, _ in reversed(self.history):
            if mv is not None:
                return mv
        return None

    def play(self, r: int, c: int) -> Board:
        """Place a disc for the side to move and hand the turn on"""
        if self.is_over:
            raise GameOverError("Game is over")
        color = self.to_move
        new_board = self.board.resulting_board(color, r, c)
        if new_board is None:
            raise IllegalMoveError(f"Invalid move for {color_name(color)}: {notation((r, c))}")

        move = Move(r, c)
        self.board = new_board
        self.history.append((move, color))
        logger.info("%s -> %s", color_name(color), notation(move))
        self._advance(color)
        return self.board

    def pass_turn(self):
        """Pass when the side to move has no legal move"""
        if self.is_over:
            raise GameOverError("Game is over")
        if self.board.has_moves(self.to_move):
            raise IllegalMoveError(f"{color_name(self.to_move)} has legal moves and cannot pass")
        self.history.append((None, self.to_move))
        logger.info("%s passes", color_name(self.to_move))
        self.to_move = -self.to_move

    def play_opponent(self, opponent) -> Optional[Move]:
        """Let an automated opponent take the current turn; None means it passed"""
        if self.is_over:
            raise GameOverError("Game is over")
        move = opponent.find_best_move(self.board, self.to_move)
        if move is None:
            self.pass_turn()
        else:
            self.play(move[0], move[1])
        return move

    def _advance(self, mover: int):
        other = -mover
        if self.board.has_moves(other):
            self.to_move = other
        elif self.board.has_moves(mover):
            # Opponent is stuck: record its pass, mover plays again
            self.history.append((None, other))
            logger.info("%s passes", color_name(other))
            self.to_move = mover
        else:
            self.to_move = other
            black, white = self.board.count()
            logger.info("Game over: black %d - white %d", black, white)

    def undo(self, plies: int) -> Board:
        """Undo last N history entries (moves and passes alike)"""
        if plies <= 0 or plies > len(self.history):
            raise ValueError("Invalid number of plies")

        kept = self.history[:-plies]
        self.board, self.to_move = self._start
        self.history = []
        for move, color_played in kept:
            if move is not None:
                self.board = self.board.apply(move, color_played)
                self.history.append((move, color_played))
            else:
                self.history.append((None, color_played))
            self.to_move = -color_played
        return self.board

    def log(self) -> List[str]:
        """Human-readable log, one numbered line per turn including passes"""
        lines = []
        for n, (move, color) in enumerate(self.history, 1):
            if move is None:
                lines.append(f"{n}: {color_name(color)} passes")
            else:
                lines.append(f"{n}: {color_name(color)} -> {notation(move)}")
        return lines
