"""
Bridge between a host application's live game and the AI engines.

A host (GUI, terminal, server) keeps its own mutable bookkeeping: a grid of
cells, the pool of pieces, the staged piece, whose turn it is and whether the
player must currently place or give. This module provides:

- LiveGame: that bookkeeping, with the turn protocol enforced
- snapshot(): a validated, independent GameState built from a LiveGame
- apply_move(): the two effects of an engine Move (place, then give)
- Game: a runner that plays registered agents against each other
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Tuple
import logging

from quarto_ai.core.actions import Move
from quarto_ai.core.board import Board, Position
from quarto_ai.core.constants import (
    BOARD_SIZE, GameResult, PLAYERS, PLAYER_ONE
)
from quarto_ai.core.errors import InvalidMoveError, InvalidStateError
from quarto_ai.core.game import GameState, opponent
from quarto_ai.core.pieces import Piece, create_piece_set, format_piece

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """What the current player has to do next."""
    GIVE = auto()
    PLACE = auto()


class GameStatus(Enum):
    """Overall status of a live game."""
    PLAYING = auto()
    WON = auto()
    TIE = auto()


def _empty_grid() -> List[List[Optional[Piece]]]:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


@dataclass
class LiveGame:
    """
    Mutable game bookkeeping as a host application keeps it.

    A game starts in the GIVE phase with player 1 choosing the opening piece.
    Giving a piece passes the turn and moves to the PLACE phase; placing it
    moves the same player to the GIVE phase.
    """
    board: List[List[Optional[Piece]]] = field(default_factory=_empty_grid)
    available_pieces: List[Piece] = field(default_factory=create_piece_set)
    staged_piece: Optional[Piece] = None
    current_player: int = PLAYER_ONE
    phase: GamePhase = GamePhase.GIVE
    status: GameStatus = GameStatus.PLAYING
    winner: Optional[int] = None
    winning_line: Optional[List[Position]] = None
    last_move: Optional[Position] = None

    @classmethod
    def new(cls, first_player: int = PLAYER_ONE) -> LiveGame:
        """
        Start a new game.

        Args:
            first_player: Player who gives the opening piece

        Returns:
            LiveGame in its initial state
        """
        if first_player not in PLAYERS:
            raise InvalidStateError(f"Unknown player: {first_player}")
        return cls(current_player=first_player)

    def reset(self, first_player: int = PLAYER_ONE) -> None:
        """Reset to a new game."""
        fresh = LiveGame.new(first_player)
        self.__dict__.update(fresh.__dict__)

    @property
    def is_over(self) -> bool:
        """Check if the game has finished."""
        return self.status != GameStatus.PLAYING

    def place_piece(self, row: int, col: int) -> None:
        """
        Place the staged piece on a cell.

        Args:
            row: Row of the target cell
            col: Column of the target cell

        Raises:
            InvalidMoveError: If the game is over, it is not the PLACE phase,
                there is no staged piece, or the cell is occupied
        """
        if self.is_over:
            raise InvalidMoveError("Game is over")
        if self.phase != GamePhase.PLACE or self.staged_piece is None:
            raise InvalidMoveError(
                f"Player {self.current_player} must first give a piece to the opponent"
            )
        if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
            raise InvalidMoveError(f"Cell ({row}, {col}) is outside the board")
        if self.board[row][col] is not None:
            raise InvalidMoveError(f"Cell ({row}, {col}) is already occupied")

        self.board[row][col] = self.staged_piece
        self.staged_piece = None
        self.last_move = (row, col)
        self.phase = GamePhase.GIVE
        logger.info("Player %d placed a piece at (%d, %d)", self.current_player, row, col)

        board = Board.from_rows(self.board)
        line = board.winning_line()
        if line is not None:
            # The player who completes the line wins
            self.status = GameStatus.WON
            self.winner = self.current_player
            self.winning_line = line
            logger.info("Player %d wins with line %s", self.current_player, line)
        elif board.is_full():
            self.status = GameStatus.TIE
            logger.info("Board is full, the game is a tie")

    def give_piece(self, piece: Piece) -> None:
        """
        Give a piece to the opponent, who must place it next.

        Args:
            piece: Piece from the available pool

        Raises:
            InvalidMoveError: If the game is over, it is not the GIVE phase,
                or the piece is not available
        """
        if self.is_over:
            raise InvalidMoveError("Game is over")
        if self.phase != GamePhase.GIVE:
            raise InvalidMoveError(f"Player {self.current_player} must first place the staged piece")
        if piece not in self.available_pieces:
            raise InvalidMoveError(f"Piece {format_piece(piece)} is not available")

        self.available_pieces.remove(piece)
        self.staged_piece = piece
        logger.info(
            "Player %d gives %s to player %d",
            self.current_player, format_piece(piece), opponent(self.current_player)
        )
        self.current_player = opponent(self.current_player)
        self.phase = GamePhase.PLACE


def snapshot(live: LiveGame) -> GameState:
    """
    Build an independent, validated GameState from a live game.

    Args:
        live: Host bookkeeping

    Returns:
        GameState the engines can search without touching the live game

    Raises:
        InvalidStateError: If the live game cannot be expressed as a GameState
    """
    board = Board.from_rows(live.board)

    if not live.is_over:
        if live.phase == GamePhase.GIVE:
            if live.staged_piece is not None:
                raise InvalidStateError("A piece is staged during the give phase")
            if board.occupied_count() > 0:
                raise InvalidStateError(
                    "Player has placed but not yet given; only complete turns can be searched"
                )
        elif live.staged_piece is None:
            raise InvalidStateError("Place phase without a staged piece")

    if live.status == GameStatus.WON:
        result = GameResult.WINNER
    elif live.status == GameStatus.TIE:
        result = GameResult.TIE
    else:
        result = GameResult.IN_PROGRESS

    state = GameState(
        board=board,
        available_pieces=list(live.available_pieces),
        staged_piece=live.staged_piece,
        current_player=live.current_player,
        game_over=live.is_over,
        winner=live.winner,
        result=result,
    )
    state.validate()
    return state


def apply_move(live: LiveGame, move: Move) -> None:
    """
    Apply an engine move to a live game: place first, then give.

    The give is skipped when the placement ends the game. The move is checked
    on a snapshot first, so an illegal move leaves the live game untouched.

    Args:
        live: Host bookkeeping to update
        move: Move returned by an engine

    Raises:
        InvalidMoveError: If the move does not fit the live game
        InvalidStateError: If the live game is not at a complete turn
    """
    snapshot(live).next_state(move)

    if move.placement is not None:
        row, col = move.placement
        live.place_piece(row, col)

    if not live.is_over and move.piece_to_give is not None:
        live.give_piece(move.piece_to_give)


class Game:
    """
    Manager for Quarto game flow between AI agents.

    Agents are callbacks that receive a GameState snapshot and return a Move;
    the Game applies each move to its LiveGame.
    """

    def __init__(
        self,
        first_player: int = PLAYER_ONE,
        player_names: Optional[Dict[int, str]] = None,
    ):
        """
        Initialize a new Quarto game.

        Args:
            first_player: Player who gives the opening piece
            player_names: Optional mapping of player number to display name
        """
        self.first_player = first_player
        self.player_names = player_names or {p: f"Player {p}" for p in PLAYERS}
        self.live = LiveGame.new(first_player)
        self.agent_callbacks: Dict[int, Callable[[GameState], Move]] = {}
        self.history: List[Tuple[int, Move]] = []

    @property
    def state(self) -> GameState:
        """Get a snapshot of the current position."""
        return snapshot(self.live)

    def reset(self) -> LiveGame:
        """
        Reset the game to a new initial state.

        Returns:
            New live game
        """
        self.live.reset(self.first_player)
        self.history = []
        return self.live

    def register_agent(self, player: int, agent_callback: Callable[[GameState], Move]) -> None:
        """
        Register an AI agent for a player.

        Args:
            player: Player number (1 or 2)
            agent_callback: Function that selects a move given the game state
        """
        if player not in PLAYERS:
            raise ValueError(f"Unknown player: {player}")
        self.agent_callbacks[player] = agent_callback

    def step(self, move: Optional[Move] = None) -> Tuple[LiveGame, bool]:
        """
        Advance the game by one complete move.

        If a move is provided it is applied, otherwise the current player's
        registered agent is asked for one.

        Args:
            move: Optional move to apply

        Returns:
            Tuple of (live game, whether the game is over)
        """
        if self.live.is_over:
            return self.live, True

        player = self.live.current_player

        if move is None and player in self.agent_callbacks:
            move = self.agent_callbacks[player](snapshot(self.live))

        if move is None:
            raise ValueError("No move provided and no agent callback registered for current player")

        apply_move(self.live, move)
        self.history.append((player, move))
        logger.info("%s played %s", self.player_names.get(player, player), move)

        return self.live, self.live.is_over

    def run_game(self) -> LiveGame:
        """
        Run the game to completion.

        This method requires both players to have agent callbacks registered.

        Returns:
            Final live game
        """
        for player in PLAYERS:
            if player not in self.agent_callbacks:
                raise ValueError(f"No agent callback registered for player {player}")

        while not self.live.is_over:
            self.step()

        return self.live

    def get_winner(self) -> Optional[int]:
        """
        Get the winning player, if any.

        Returns:
            Winning player, or None if the game is not over or ended in a tie
        """
        return self.live.winner

    def get_result(self) -> GameResult:
        """
        Get the result of the game.

        Returns:
            Game result
        """
        return snapshot(self.live).result
