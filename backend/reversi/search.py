import logging
import time
from typing import NamedTuple, Optional

from .board import Board, Move, color_name
from .eval import Evaluator

logger = logging.getLogger(__name__)

# Constants
INF = float('inf')
DEFAULT_DEPTH = 4


class SearchResult(NamedTuple):
    score: float
    move: Optional[Move]
    nodes: int


class SearchEngine:
    """Fixed-depth minimax with alpha-beta pruning.

    Leaves are always scored from the root player's point of view; the
    maximizing/minimizing flag encodes whose turn it is. The engine holds no
    per-search state, so one instance can serve concurrent callers.
    """

    def __init__(self, evaluator: Optional[Evaluator] = None, depth: int = DEFAULT_DEPTH):
        if depth < 1:
            raise ValueError(f"Search depth must be positive, got {depth}")
        self.evaluator = evaluator or Evaluator()
        self.depth = depth

    def find_best_move(self, board: Board, color: int) -> Optional[Move]:
        """Best move for ``color``, or None when it has to pass"""
        return self.search(board, color).move

    def search(self, board: Board, color: int, depth: Optional[int] = None) -> SearchResult:
        depth = self.depth if depth is None else depth
        if depth < 1:
            raise ValueError(f"Search depth must be positive, got {depth}")
        if not board.has_moves(color):
            logger.debug("%s has no legal move, nothing to search", color_name(color))
            return SearchResult(self.evaluator.evaluate(board, color), None, 0)

        start = time.perf_counter()
        result = self._alphabeta(board, color, depth, -INF, INF, True, color)
        logger.debug(
            "%s: best %s score=%s nodes=%d depth=%d in %.1fms",
            color_name(color), result.move, result.score, result.nodes, depth,
            (time.perf_counter() - start) * 1000,
        )
        return result

    def _alphabeta(self, board: Board, color: int, depth: int, alpha: float, beta: float,
                   maximizing: bool, root: int) -> SearchResult:
        """Alpha-beta over (board, side to move); scores are from ``root``'s view"""
        other = -color
        legal_moves = board.valid_moves(color)

        # Depth limit or game over
        if depth == 0 or (not legal_moves and not board.has_moves(other)):
            return SearchResult(self.evaluator.evaluate(board, root), None, 1)

        # Pass: the opponent moves on the same ply
        if not legal_moves:
            score, _, nodes = self._alphabeta(board, other, depth, alpha, beta, not maximizing, root)
            return SearchResult(score, None, nodes + 1)

        best_move = legal_moves[0]
        total_nodes = 1

        if maximizing:
            best_score = -INF
            for move in legal_moves:
                new_board = board.resulting_board(color, move.r, move.c)
                score, _, nodes = self._alphabeta(new_board, other, depth - 1, alpha, beta, False, root)
                total_nodes += nodes
                if score > best_score:
                    best_score = score
                    best_move = move
                alpha = max(alpha, score)
                if beta <= alpha:
                    break
        else:
            best_score = INF
            for move in legal_moves:
                new_board = board.resulting_board(color, move.r, move.c)
                score, _, nodes = self._alphabeta(new_board, other, depth - 1, alpha, beta, True, root)
                total_nodes += nodes
                if score < best_score:
                    best_score = score
                    best_move = move
                beta = min(beta, score)
                if beta <= alpha:
                    break

        return SearchResult(best_score, best_move, total_nodes)
