import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from .board import BLACK, WHITE, Board, IllegalMoveError, Move, color_name
from .config import load_config
from .eval import Evaluator
from .game import GameOverError, GameSession, NotHumanTurnError
from .opponents import OPPONENTS, ClassicOpponent, OpponentError, create_opponent, register_opponent
from .search import SearchEngine

logger = logging.getLogger(__name__)

config = load_config()

app = FastAPI(title="Othello AI Engine")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config["cors_origins"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Game state
session = GameSession()

# Initialize AI components
evaluator = Evaluator(weights_file=config["weights_file"])
search_engine = SearchEngine(evaluator, depth=config["search_depth"])
register_opponent("classic", lambda: ClassicOpponent(search_engine))


class MoveRequest(BaseModel):
    r: int
    c: int


class UndoRequest(BaseModel):
    plies: int


class MoveModel(BaseModel):
    r: int
    c: int


class GameState(BaseModel):
    grid: List[List[int]]
    to_move: int
    black: int
    white: int
    legal: List[List[int]]
    terminal: bool
    winner: Optional[int]
    last_move: Optional[MoveModel] = None
    log: List[str] = []
    black_player: Optional[str] = None
    white_player: Optional[str] = None
    mode: str = "human-vs-human"


class PreviewResponse(BaseModel):
    valid: bool
    state: Optional[GameState]


class AIMoveResponse(BaseModel):
    opponent: str
    move: Optional[MoveModel]
    state: GameState


def _move_model(move: Optional[Move]) -> Optional[MoveModel]:
    return MoveModel(r=move[0], c=move[1]) if move is not None else None


def board_to_state(board: Board, to_move: int, last_move: Optional[Move] = None,
                   log: Optional[List[str]] = None) -> GameState:
    """Convert a board and side to move to GameState"""
    black_count, white_count = board.count()
    return GameState(
        grid=board.to_lists(),
        to_move=to_move,
        black=black_count,
        white=white_count,
        legal=board.legal_grid(to_move),
        terminal=board.terminal(),
        winner=board.winner(),
        last_move=_move_model(last_move),
        log=log or [],
    )


def session_state() -> GameState:
    state = board_to_state(session.board, session.to_move, session.last_move(), session.log())
    state.black_player = session.controller(BLACK)
    state.white_player = session.controller(WHITE)
    state.mode = session.mode
    return state


def _check_coords(move: MoveRequest):
    if not (0 <= move.r < 8 and 0 <= move.c < 8):
        raise HTTPException(status_code=400, detail={"error": "Coordinates out of range",
                                                     "requested": {"r": move.r, "c": move.c}})


def _not_human_turn() -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"error": "Not a human turn", "to_move": session.to_move, "controller": session.controller()},
    )


async def _take_ai_turn(opponent: str) -> Optional[Move]:
    """Let ``opponent`` play the side to move; None means it passed"""
    try:
        player = create_opponent(opponent)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown opponent: {opponent}")
    except OpponentError as e:
        raise HTTPException(status_code=503, detail=str(e))

    ai_color = session.to_move
    board = session.board
    try:
        # The search is CPU-bound; keep it off the event loop
        move = await run_in_threadpool(player.find_best_move, board, ai_color)
    except OpponentError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if session.board is not board or session.to_move != ai_color:
        raise HTTPException(status_code=409, detail="Game changed while the AI was thinking")

    if move is None:
        logger.info("AI (%s) has no move for %s, passing", opponent, color_name(ai_color))
        session.pass_turn()
    else:
        session.play(move[0], move[1])
    return move


async def _play_ai_turns():
    """AI-controlled sides move until a human is to move or the game ends"""
    while not session.is_over and session.controller() is not None:
        await _take_ai_turn(session.controller())


@app.post("/new")
async def new_game(black: Optional[str] = None, white: Optional[str] = None):
    """Start a new game; ``black``/``white`` name an opponent, omitted means human"""
    for key in (black, white):
        if key is not None and key not in OPPONENTS:
            raise HTTPException(status_code=404, detail=f"Unknown opponent: {key}")
    session.reset(black=black, white=white)
    logger.info("New game (%s)", session.mode)
    await _play_ai_turns()
    return session_state()


@app.get("/state")
async def get_state():
    """Get current game state"""
    return session_state()


@app.post("/preview", response_model=PreviewResponse)
async def preview_move(move: MoveRequest):
    """Preview a move without committing it"""
    _check_coords(move)
    preview = session.board.resulting_board(session.to_move, move.r, move.c)
    if preview is None:
        return PreviewResponse(valid=False, state=None)
    return PreviewResponse(
        valid=True,
        state=board_to_state(preview, -session.to_move, Move(move.r, move.c)),
    )


@app.post("/move")
async def make_move(move: MoveRequest):
    """Commit a human move, then let any AI side reply"""
    _check_coords(move)
    try:
        session.human_play(move.r, move.c)
    except NotHumanTurnError:
        raise _not_human_turn()
    except GameOverError:
        raise HTTPException(status_code=400, detail="Game is over")
    except IllegalMoveError:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Invalid move",
                "requested": {"r": move.r, "c": move.c},
                "to_move": session.to_move,
                "legal": [m._asdict() for m in session.legal_moves()],
            },
        )
    await _play_ai_turns()
    return session_state()


@app.post("/ai_move", response_model=AIMoveResponse)
async def ai_move(opponent: Optional[str] = None):
    """AI plays the side to move (its own controller, or ``opponent`` for a human side)"""
    if session.is_over:
        raise HTTPException(status_code=400, detail="Game is over")
    key = opponent or session.controller() or "classic"
    move = await _take_ai_turn(key)
    await _play_ai_turns()
    return AIMoveResponse(opponent=key, move=_move_model(move), state=session_state())


@app.post("/undo")
async def undo_moves(request: UndoRequest):
    """Undo last N plies; AI sides do not replay automatically"""
    try:
        session.undo(request.plies)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session_state()


@app.post("/pass")
async def pass_move():
    """Perform a pass if no legal moves exist"""
    if not session.is_over and not session.is_human_turn():
        raise _not_human_turn()
    try:
        session.pass_turn()
    except GameOverError:
        raise HTTPException(status_code=400, detail="Game is over")
    except IllegalMoveError:
        raise HTTPException(status_code=400, detail="Legal moves available")
    await _play_ai_turns()
    return session_state()


@app.get("/opponents")
async def list_opponents():
    return {"opponents": sorted(OPPONENTS)}


@app.get("/info")
async def get_info():
    """Get engine information"""
    return {
        "engine": "Alpha-Beta Minimax",
        "depth": search_engine.depth,
        "evaluation": "Positional table + mobility",
        "weights": evaluator.weights,
        "opponents": sorted(OPPONENTS),
    }
