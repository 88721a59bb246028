"""
Heuristic decision policy for Quarto.

A single-ply, difficulty-tunable opponent. For the placement it always takes
an immediate win when it notices one; otherwise it prefers cells that leave
many safe pieces to hand over. For the give it avoids pieces that let the
opponent win on the spot. The DifficultyConfig knobs add controlled
randomness and fallibility on top of that strategy.

Every function takes an explicit random source so decisions are reproducible.
"""
import logging
import math
import random
from typing import Dict, List, Optional, Tuple

from quarto_ai.core.actions import Move
from quarto_ai.core.board import Board, Position, is_dangerous_against
from quarto_ai.core.errors import InvalidStateError
from quarto_ai.core.game import GameState
from quarto_ai.core.pieces import Piece, format_piece
from quarto_ai.heuristic.config import DifficultyConfig

logger = logging.getLogger(__name__)


def dangerous_pieces(board: Board, pieces: List[Piece]) -> List[Piece]:
    """
    Get the pieces that would let the opponent win immediately.

    Args:
        board: Board the opponent will place on
        pieces: Candidate pieces to give

    Returns:
        Pieces that complete a winning line on some empty cell
    """
    threats = board.threats()
    return [piece for piece in pieces if is_dangerous_against(piece, threats)]


def safe_pieces(board: Board, pieces: List[Piece]) -> List[Piece]:
    """
    Get the pieces that cannot complete a winning line on the board.

    Args:
        board: Board the opponent will place on
        pieces: Candidate pieces to give

    Returns:
        Pieces that are safe to give
    """
    threats = board.threats()
    return [piece for piece in pieces if not is_dangerous_against(piece, threats)]


def count_safe_pieces(board: Board, pos: Position, piece: Piece, available: List[Piece]) -> int:
    """
    Count the safe pieces left to give after a placement.

    Args:
        board: Board before the placement
        pos: Empty cell to place on
        piece: Piece being placed
        available: Pieces that could be given afterwards

    Returns:
        Number of available pieces that are safe on the resulting board
    """
    after = board.copy()
    after.place(pos, piece)
    return len(safe_pieces(after, available))


def find_winning_placement(board: Board, piece: Piece) -> Optional[Position]:
    """
    Find the first empty cell (row-major) where the piece completes a line.

    Args:
        board: Current board
        piece: Piece to place

    Returns:
        Winning cell, or None
    """
    for pos in board.empty_cells():
        if board.completes_line(pos, piece):
            return pos
    return None


def score_placements(board: Board, piece: Piece, available: List[Piece]) -> Dict[Position, int]:
    """
    Compute the safe-piece count of every empty cell.

    Args:
        board: Current board
        piece: Piece to place
        available: Pieces that could be given afterwards

    Returns:
        Mapping of empty cell to safe-piece count, in row-major order
    """
    return {
        pos: count_safe_pieces(board, pos, piece, available)
        for pos in board.empty_cells()
    }


def _choose_placement(
    board: Board,
    piece: Optional[Piece],
    available: List[Piece],
    config: DifficultyConfig,
    rng: random.Random,
) -> Tuple[Optional[Position], Optional[float]]:
    """Choose a placement and the value that ranked it."""
    if piece is None:
        logger.debug("No piece to place (first move)")
        return None, None

    empty = board.empty_cells()
    if not empty:
        logger.debug("No empty cells available")
        return None, None

    # Check for an immediate win, unless this difficulty overlooks it
    if rng.random() < config.p_miss_win:
        logger.debug("Skipping win check")
    else:
        winning = find_winning_placement(board, piece)
        if winning is not None:
            logger.debug("Found winning placement at %s", winning)
            return winning, math.inf

    if rng.random() < config.p_random:
        pos = rng.choice(empty)
        logger.debug("Random placement at %s", pos)
        return pos, None

    # Strategic placement: keep as many safe pieces to give as possible
    scores = score_placements(board, piece, available)
    for pos, count in scores.items():
        logger.debug("  %s: %d safe pieces (min required: %d)", pos, count, config.min_safe)

    above_threshold = [pos for pos, count in scores.items() if count >= config.min_safe]
    if above_threshold:
        pos = rng.choice(above_threshold)
        logger.debug(
            "%d cells meet %d safe pieces, selected %s",
            len(above_threshold), config.min_safe, pos
        )
        return pos, float(scores[pos])

    best_count = max(scores.values())
    best = [pos for pos, count in scores.items() if count == best_count]
    pos = rng.choice(best)
    logger.debug(
        "No cell meets %d safe pieces, selected %s with the highest count %d",
        config.min_safe, pos, best_count
    )
    return pos, float(best_count)


def choose_placement(
    board: Board,
    piece: Optional[Piece],
    available: List[Piece],
    config: DifficultyConfig,
    rng: random.Random,
) -> Optional[Position]:
    """
    Choose where to place the staged piece.

    Args:
        board: Current board
        piece: Staged piece (None on the first move)
        available: Pieces still available to give afterwards
        config: Difficulty parameters
        rng: Random source

    Returns:
        Cell to place on, or None if there is nothing to place or nowhere to place it
    """
    pos, _ = _choose_placement(board, piece, available, config, rng)
    return pos


def choose_piece_to_give(
    board: Board,
    available: List[Piece],
    config: DifficultyConfig,
    rng: random.Random,
) -> Optional[Piece]:
    """
    Choose the piece the opponent must place next.

    Args:
        board: Board the opponent will place on
        available: Pieces that can be given
        config: Difficulty parameters
        rng: Random source

    Returns:
        Piece to give, or None if no pieces remain
    """
    if not available:
        logger.debug("No pieces available to give (game ending)")
        return None

    if rng.random() < config.p_random:
        piece = rng.choice(available)
        logger.debug("Randomly selected %s", format_piece(piece))
        return piece

    safe = safe_pieces(board, available)
    if safe:
        piece = rng.choice(safe)
        logger.debug("Selected safe piece %s (%d safe pieces)", format_piece(piece), len(safe))
        return piece

    piece = rng.choice(available)
    logger.debug("All pieces are dangerous, selected %s", format_piece(piece))
    return piece


def decide(state: GameState, config: DifficultyConfig, rng: random.Random) -> Move:
    """
    Choose a complete move for the current player.

    The placement is decided first. If it wins, no piece is given; otherwise
    the give is decided on the board as it stands after the placement.

    Args:
        state: Current game state (not modified)
        config: Difficulty parameters
        rng: Random source

    Returns:
        Move carrying the safe-piece count of the chosen placement as its value

    Raises:
        InvalidStateError: If the state is malformed or the game is over
    """
    state.validate()
    if state.game_over:
        raise InvalidStateError("No move can be made in a finished game")

    board = state.board
    available = state.available_pieces

    if state.is_first_move:
        piece = choose_piece_to_give(board, available, config, rng)
        return Move(None, piece)

    placement, value = _choose_placement(board, state.staged_piece, available, config, rng)
    if placement is None:
        raise InvalidStateError("Staged piece present but no empty cell on an unfinished board")

    after = board.copy()
    after.place(placement, state.staged_piece)
    if after.has_winning_line():
        logger.debug("Winning placement at %s, nothing to give", placement)
        return Move(placement, None, math.inf)

    piece = choose_piece_to_give(after, available, config, rng)
    return Move(placement, piece, value)
