"""
Quarto AI Core Package

This package contains the core game logic for Quarto, including:
- Piece catalog and attribute enums
- Board representation and win-line detection
- Moves and legal move enumeration
- Game state representation and move application
- The exception hierarchy

All core components can be imported directly from this package.
"""

# Game and game state
from quarto_ai.core.game import GameState, create_initial_state, opponent

# Board
from quarto_ai.core.board import (
    Board, Position, WIN_LINES,
    has_winning_line, winning_line, is_board_full
)

# Pieces
from quarto_ai.core.pieces import (
    Piece, ALL_PIECES, create_piece_set, piece_from_id, format_piece,
    share_common_attribute
)

# Moves
from quarto_ai.core.actions import Move, get_legal_moves, count_legal_moves

# Errors
from quarto_ai.core.errors import (
    QuartoError, InvalidStateError, InvalidMoveError, SearchError
)

# Constants
from quarto_ai.core.constants import (
    Height, Color, Shape, Top, GameResult,
    BOARD_SIZE, NUM_PIECES, PLAYER_ONE, PLAYER_TWO, PLAYERS
)

__all__ = [
    # Game
    'GameState', 'create_initial_state', 'opponent',

    # Board
    'Board', 'Position', 'WIN_LINES',
    'has_winning_line', 'winning_line', 'is_board_full',

    # Pieces
    'Piece', 'ALL_PIECES', 'create_piece_set', 'piece_from_id', 'format_piece',
    'share_common_attribute',

    # Moves
    'Move', 'get_legal_moves', 'count_legal_moves',

    # Errors
    'QuartoError', 'InvalidStateError', 'InvalidMoveError', 'SearchError',

    # Constants
    'Height', 'Color', 'Shape', 'Top', 'GameResult',
    'BOARD_SIZE', 'NUM_PIECES', 'PLAYER_ONE', 'PLAYER_TWO', 'PLAYERS'
]
