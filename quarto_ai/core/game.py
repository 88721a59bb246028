"""
Game state for Quarto.

This module defines the GameState: the canonical snapshot both AI engines
reason about. It owns the board, the pool of pieces still available, the
piece staged for the current mover, whose turn it is, and the game result.

GameState objects are cheap to clone. Engines always clone before mutating so
the caller's snapshot is never modified.
"""
from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

from quarto_ai.core.actions import Move, get_legal_moves
from quarto_ai.core.board import Board
from quarto_ai.core.constants import (
    GameResult, NUM_PIECES, PLAYERS, PLAYER_ONE, PLAYER_TWO
)
from quarto_ai.core.errors import InvalidMoveError, InvalidStateError
from quarto_ai.core.pieces import ALL_PIECES, Piece, create_piece_set, format_piece


def opponent(player: int) -> int:
    """Get the other player."""
    return PLAYER_TWO if player == PLAYER_ONE else PLAYER_ONE


@dataclass
class GameState:
    """
    Complete representation of a Quarto position.

    The staged piece is the piece the current player must place this turn; it
    is None only before the opening give. The winner is None while the game is
    in progress and after a tie.
    """
    board: Board = field(default_factory=Board)
    available_pieces: List[Piece] = field(default_factory=create_piece_set)
    staged_piece: Optional[Piece] = None
    current_player: int = PLAYER_ONE
    game_over: bool = False
    winner: Optional[int] = None
    result: GameResult = GameResult.IN_PROGRESS

    @classmethod
    def new(cls, first_player: int = PLAYER_ONE) -> GameState:
        """
        Create the initial state of a game.

        Args:
            first_player: Player who makes the opening give

        Returns:
            Fresh GameState
        """
        if first_player not in PLAYERS:
            raise InvalidStateError(f"Unknown player: {first_player}")
        return cls(current_player=first_player)

    @property
    def pieces_on_board(self) -> int:
        """Get the number of pieces on the board."""
        return self.board.occupied_count()

    @property
    def is_first_move(self) -> bool:
        """Check if the next move is the give-only opening move."""
        return not self.game_over and self.staged_piece is None

    def validate(self) -> None:
        """
        Check every invariant of the state.

        Raises:
            InvalidStateError: If the state is malformed
        """
        if self.current_player not in PLAYERS:
            raise InvalidStateError(f"Unknown current player: {self.current_player}")

        # Piece accounting: board + available + staged must be the full catalog
        accounted = list(self.board.pieces()) + list(self.available_pieces)
        if self.staged_piece is not None:
            accounted.append(self.staged_piece)

        duplicates = [piece for piece, count in Counter(accounted).items() if count > 1]
        if duplicates:
            raise InvalidStateError(
                "Duplicated pieces: " + ", ".join(format_piece(p) for p in duplicates)
            )
        if len(accounted) != NUM_PIECES:
            raise InvalidStateError(
                f"Expected {NUM_PIECES} pieces across board, pool and staging area, "
                f"found {len(accounted)}"
            )
        unknown = set(accounted) - set(ALL_PIECES)
        if unknown:
            raise InvalidStateError(f"Unknown pieces: {unknown}")

        # Terminal flag must agree with the board
        has_win = self.board.has_winning_line()
        is_full = self.board.is_full()
        if self.game_over != (has_win or is_full):
            raise InvalidStateError(
                f"game_over={self.game_over} but winning line={has_win}, board full={is_full}"
            )

        if self.game_over:
            if has_win:
                if self.result != GameResult.WINNER or self.winner not in PLAYERS:
                    raise InvalidStateError("Board has a winning line but no winner is recorded")
            elif self.result != GameResult.TIE or self.winner is not None:
                raise InvalidStateError("Full board without a winning line must be a tie")
            if self.staged_piece is not None:
                raise InvalidStateError("A finished game cannot have a staged piece")
        else:
            if self.result != GameResult.IN_PROGRESS or self.winner is not None:
                raise InvalidStateError("A game in progress cannot have a result")
            if self.staged_piece is None and self.pieces_on_board > 0:
                raise InvalidStateError(
                    "Staged piece missing: only the opening move may be give-only"
                )

    def clone(self) -> GameState:
        """
        Create an independent copy of the state.

        Returns:
            Cloned GameState
        """
        return GameState(
            board=self.board.copy(),
            available_pieces=list(self.available_pieces),
            staged_piece=self.staged_piece,
            current_player=self.current_player,
            game_over=self.game_over,
            winner=self.winner,
            result=self.result,
        )

    def get_valid_moves(self) -> List[Move]:
        """
        Get all legal moves from this state.

        Returns:
            List of legal moves
        """
        return get_legal_moves(self)

    def apply_move(self, move: Move) -> None:
        """
        Apply a move to this state in place.

        The placement is applied first. A placement that completes a line wins
        the game for the current player and the give is ignored; a placement
        that fills the board ends in a tie. Otherwise the given piece is staged
        for the opponent and the turn passes.

        Args:
            move: Move to apply

        Raises:
            InvalidMoveError: If the move is not legal in this state
        """
        if self.game_over:
            raise InvalidMoveError("Game is already over")

        if self.staged_piece is None:
            if move.placement is not None:
                raise InvalidMoveError("Opening move cannot place a piece")
            self._give(move.piece_to_give)
            return

        placement = move.placement
        if placement is None:
            raise InvalidMoveError("A staged piece must be placed")
        if placement not in self.board.empty_cells():
            raise InvalidMoveError(f"Cell {placement} is not an empty board cell")

        wins = self.board.completes_line(placement, self.staged_piece)
        fills = not wins and len(self.board.empty_cells()) == 1
        if not wins and not fills:
            # Checked up front so a bad give never leaves a half-applied move
            self._check_give(move.piece_to_give)

        self.board.place(placement, self.staged_piece)
        self.staged_piece = None

        if wins:
            self.game_over = True
            self.winner = self.current_player
            self.result = GameResult.WINNER
        elif fills:
            self.game_over = True
            self.winner = None
            self.result = GameResult.TIE
        else:
            self._give(move.piece_to_give)

    def _check_give(self, piece: Optional[Piece]) -> None:
        if piece is None:
            raise InvalidMoveError("A piece must be given to the opponent")
        if piece not in self.available_pieces:
            raise InvalidMoveError(f"Piece {format_piece(piece)} is not available")

    def _give(self, piece: Optional[Piece]) -> None:
        """Stage a piece for the opponent and pass the turn."""
        self._check_give(piece)
        self.available_pieces.remove(piece)
        self.staged_piece = piece
        self.current_player = opponent(self.current_player)

    def next_state(self, move: Move) -> GameState:
        """
        Get the state that results from applying a move, leaving this one untouched.

        Args:
            move: Move to apply

        Returns:
            New GameState
        """
        state = self.clone()
        state.apply_move(move)
        return state

    def __str__(self) -> str:
        staged = format_piece(self.staged_piece) if self.staged_piece is not None else "none"
        if self.game_over:
            status = f"winner: player {self.winner}" if self.winner else "tie"
        else:
            status = f"player {self.current_player} to move"
        return (
            f"{self.board}\n"
            f"staged: {staged}, available: {len(self.available_pieces)}, {status}"
        )


def create_initial_state(first_player: int = PLAYER_ONE) -> GameState:
    """
    Create a new game state.

    Args:
        first_player: Player who makes the opening give

    Returns:
        Fresh GameState
    """
    return GameState.new(first_player)
