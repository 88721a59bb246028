"""
Quarto AI - Heuristic and MCTS opponents for the board game Quarto.

This package provides a complete implementation of Quarto rules, along with
AI agents that choose where to place the staged piece and which piece to
hand to the opponent.
"""

__version__ = "0.1.0"
__author__ = "Quarto AI Team"

# Make key components available at package level
from quarto_ai.core.game import GameState, create_initial_state
from quarto_ai.core.actions import Move, get_legal_moves
from quarto_ai.core.pieces import Piece
from quarto_ai.adapter import Game, LiveGame, snapshot, apply_move

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))
