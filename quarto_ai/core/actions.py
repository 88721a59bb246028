"""
Moves for the Quarto game.

A Quarto turn is a joint action: place the piece you were handed, then pick
the piece your opponent must place next. This module defines the Move value
and the enumeration of legal moves for a game state:

- First move of the game: give only (no piece has been handed out yet)
- Normal turn: every empty cell x every available piece
- Final move: place only, there is no piece left to give
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from quarto_ai.core.board import Position
from quarto_ai.core.pieces import Piece, format_piece, piece_from_id

if TYPE_CHECKING:
    from quarto_ai.core.game import GameState


@dataclass(frozen=True)
class Move:
    """
    A complete Quarto move.

    placement is None only on the very first move of the game. piece_to_give
    is None only when no pieces remain or when the placement ends the game.
    Heuristic engines may attach a ranking value, which is ignored when
    comparing moves.
    """
    placement: Optional[Position] = None
    piece_to_give: Optional[Piece] = None
    value: Optional[float] = field(default=None, compare=False)

    @property
    def is_give_only(self) -> bool:
        """Check if this is the give-only opening move."""
        return self.placement is None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the move to a dictionary.

        Returns:
            Dictionary representation of the move
        """
        return {
            "placement": list(self.placement) if self.placement is not None else None,
            "piece_to_give": self.piece_to_give.id if self.piece_to_give is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Move:
        """
        Create a move from a dictionary representation.

        Args:
            data: Dictionary produced by to_dict

        Returns:
            Move object
        """
        placement = data.get("placement")
        piece_id = data.get("piece_to_give")
        return cls(
            placement=tuple(placement) if placement is not None else None,
            piece_to_give=piece_from_id(piece_id) if piece_id is not None else None,
        )

    def __str__(self) -> str:
        place = f"place {self.placement}" if self.placement is not None else "no placement"
        give = (
            f"give {format_piece(self.piece_to_give)}"
            if self.piece_to_give is not None else "give nothing"
        )
        return f"{place}, {give}"


def get_legal_moves(state: GameState) -> List[Move]:
    """
    Enumerate all legal moves for the current phase of a game state.

    Args:
        state: Current game state

    Returns:
        List of legal moves (empty for a terminal state)
    """
    if state.game_over:
        return []

    available = state.available_pieces

    if state.staged_piece is None:
        # First move: nothing to place, just choose the opening piece
        return [Move(None, piece) for piece in available]

    moves = []
    for cell in state.board.empty_cells():
        if available:
            for piece in available:
                moves.append(Move(cell, piece))
        else:
            # Final move of the game, nothing left to give
            moves.append(Move(cell, None))
    return moves


def count_legal_moves(state: GameState) -> int:
    """
    Get the branching factor of a state without building the move list.

    Args:
        state: Current game state

    Returns:
        Number of legal moves
    """
    if state.game_over:
        return 0
    if state.staged_piece is None:
        return len(state.available_pieces)
    return len(state.board.empty_cells()) * max(1, len(state.available_pieces))
