import json
import logging
from typing import Dict, Optional, Sequence

from .board import Board, SIZE

logger = logging.getLogger(__name__)

# Positional table: corners are prized, the squares next to them are poison
POSITION_WEIGHTS = [
    [ 30, -12,  0, -1, -1,  0, -12,  30],
    [-12, -15, -3, -3, -3, -3, -15, -12],
    [  0,  -3,  0, -1, -1,  0,  -3,   0],
    [ -1,  -3, -1, -1, -1, -1,  -3,  -1],
    [ -1,  -3, -1, -1, -1, -1,  -3,  -1],
    [  0,  -3,  0, -1, -1,  0,  -3,   0],
    [-12, -15, -3, -3, -3, -3, -15, -12],
    [ 30, -12,  0, -1, -1,  0, -12,  30]
]

DEFAULT_WEIGHTS = {
    "positional": 1.0,
    "mobility": 5.0,
}


class Evaluator:
    def __init__(self, weights: Optional[Dict[str, float]] = None,
                 weights_file: Optional[str] = None,
                 table: Optional[Sequence[Sequence[int]]] = None):
        """Initialize evaluator with explicit weights, a weights file, or defaults"""
        self.weights = dict(DEFAULT_WEIGHTS)
        if weights_file:
            self.update_weights(self._load_weights(weights_file))
        if weights:
            self.update_weights(weights)
        self.table = self._check_table(table) if table is not None else POSITION_WEIGHTS

    def _load_weights(self, weights_file: str) -> dict:
        """Load weights from file; a missing file leaves the defaults in place"""
        try:
            with open(weights_file, 'r') as f:
                weights = json.load(f)
        except FileNotFoundError:
            logger.warning("Weights file %s not found, using defaults", weights_file)
            return {}
        if not isinstance(weights, dict):
            raise ValueError(f"{weights_file}: weights must be a JSON object")
        logger.info("Loaded evaluation weights from %s", weights_file)
        return weights

    @staticmethod
    def _check_table(table: Sequence[Sequence[int]]):
        rows = [list(row) for row in table]
        if len(rows) != SIZE or any(len(row) != SIZE for row in rows):
            raise ValueError(f"Position table must be {SIZE}x{SIZE}")
        return rows

    def save_weights(self, weights_file: str):
        """Save current weights to file"""
        with open(weights_file, 'w') as f:
            json.dump(self.weights, f, indent=2)

    def update_weights(self, updates: dict):
        """Update weights with new values"""
        unknown = set(updates) - set(self.weights)
        if unknown:
            raise ValueError(f"Unknown evaluation weights: {sorted(unknown)}")
        for key, value in updates.items():
            self.weights[key] = float(value)

    def evaluate(self, board: Board, color: int) -> float:
        """Evaluate position for the given color (positive = good for color)"""
        return (
            self.weights["positional"] * self.positional(board, color) +
            self.weights["mobility"] * self.mobility(board, color)
        )

    def positional(self, board: Board, color: int) -> int:
        score = 0
        for r in range(SIZE):
            for c in range(SIZE):
                cell = board.grid[r][c]
                if cell == color:
                    score += self.table[r][c]
                elif cell == -color:
                    score -= self.table[r][c]
        return score

    def mobility(self, board: Board, color: int) -> int:
        return len(board.valid_moves(color)) - len(board.valid_moves(-color))
