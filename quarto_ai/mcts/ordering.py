"""
Move ordering strategies for MCTS playouts.

Orderings only bias which moves a playout samples; they never remove moves,
so search correctness does not depend on the strategy chosen.

Every strategy has the signature ``(moves, state, rng) -> List[Move]`` and
returns a new list. Non-random strategies shuffle before their stable sort so
that equally ranked moves stay in random order.
"""
import random
from typing import Callable, Dict, List, Optional, Tuple

from quarto_ai.core.actions import Move
from quarto_ai.core.board import Board, Position, is_dangerous_against
from quarto_ai.core.constants import BOARD_CENTER, CORNERS
from quarto_ai.core.game import GameState
from quarto_ai.mcts.config import MoveSortStrategy, StrategyType

MoveOrdering = Callable[[List[Move], GameState, random.Random], List[Move]]


def _shuffled(moves: List[Move], rng: random.Random) -> List[Move]:
    result = list(moves)
    rng.shuffle(result)
    return result


def center_distance(pos: Position) -> float:
    """Get the Manhattan distance of a cell from the board center."""
    row, col = pos
    return abs(row - BOARD_CENTER) + abs(col - BOARD_CENTER)


def order_random(moves: List[Move], state: GameState, rng: random.Random) -> List[Move]:
    """Shuffle the moves."""
    return _shuffled(moves, rng)


def order_center_first(moves: List[Move], state: GameState, rng: random.Random) -> List[Move]:
    """Rank placements by ascending distance from the board center."""
    return sorted(
        _shuffled(moves, rng),
        key=lambda m: center_distance(m.placement) if m.placement is not None else 0.0
    )


def order_corners_first(moves: List[Move], state: GameState, rng: random.Random) -> List[Move]:
    """Rank corner placements ahead of edge and center placements."""
    return sorted(
        _shuffled(moves, rng),
        key=lambda m: 0 if m.placement is None or m.placement in CORNERS else 1
    )


def order_defensive(moves: List[Move], state: GameState, rng: random.Random) -> List[Move]:
    """
    Rank safe gives ahead of dangerous ones.

    A give is dangerous when the opponent could complete a line with it on
    the board as it stands after the move's placement.
    """
    board = state.board
    staged = state.staged_piece
    threats_by_cell: Dict[Optional[Position], List[Tuple[Position, int, int]]] = {}

    def rank(move: Move) -> int:
        if move.piece_to_give is None:
            return 0
        if move.placement not in threats_by_cell:
            if move.placement is None or staged is None:
                after: Board = board
            else:
                after = board.copy()
                after.place(move.placement, staged)
            threats_by_cell[move.placement] = after.threats()
        return 1 if is_dangerous_against(move.piece_to_give, threats_by_cell[move.placement]) else 0

    return sorted(_shuffled(moves, rng), key=rank)


MOVE_ORDERINGS: Dict[MoveSortStrategy, MoveOrdering] = {
    MoveSortStrategy.RANDOM: order_random,
    MoveSortStrategy.CENTER_FIRST: order_center_first,
    MoveSortStrategy.CORNERS_FIRST: order_corners_first,
    MoveSortStrategy.DEFENSIVE: order_defensive,
}


def get_move_ordering(strategy: StrategyType) -> MoveOrdering:
    """
    Resolve a strategy name, enum member or callable to an ordering function.

    Args:
        strategy: MoveSortStrategy, its value, or a custom ordering callable

    Returns:
        Ordering function
    """
    if callable(strategy) and not isinstance(strategy, MoveSortStrategy):
        return strategy
    return MOVE_ORDERINGS[MoveSortStrategy(strategy)]
