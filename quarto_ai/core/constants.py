"""
Constants for the Quarto game.

This module defines the game constants used throughout the Quarto implementation,
including the four piece attributes, board geometry, players and game results.
"""
from enum import Enum, auto
from typing import Dict, Final, List, Tuple


class Height(Enum):
    """Height attribute of a piece."""
    TALL = "tall"
    SHORT = "short"


class Color(Enum):
    """Color attribute of a piece."""
    LIGHT = "light"
    DARK = "dark"


class Shape(Enum):
    """Shape attribute of a piece."""
    SQUARE = "square"
    ROUND = "round"


class Top(Enum):
    """Top finish attribute of a piece."""
    SOLID = "solid"
    HOLLOW = "hollow"


# Attribute enums in the order they appear in a piece's attribute tuple
ATTRIBUTE_TYPES: Final[Tuple[type, ...]] = (Height, Color, Shape, Top)

# Display names used when formatting pieces for logs
ATTRIBUTE_LABELS: Final[Dict[Enum, str]] = {
    Height.TALL: "Tall",
    Height.SHORT: "Short",
    Color.LIGHT: "Light",
    Color.DARK: "Dark",
    Shape.SQUARE: "Square",
    Shape.ROUND: "Round",
    Top.SOLID: "Solid",
    Top.HOLLOW: "Hollow",
}

# Mask covering the four attribute bits of a piece code
ATTRIBUTE_MASK: Final[int] = 0b1111


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()  # Game has a winner
    TIE = auto()  # Board filled without a winning line


# Board geometry
BOARD_SIZE: Final[int] = 4
NUM_PIECES: Final[int] = 16
BOARD_CENTER: Final[float] = (BOARD_SIZE - 1) / 2

# Corner cells, used by move ordering
CORNERS: Final[List[Tuple[int, int]]] = [
    (0, 0),
    (0, BOARD_SIZE - 1),
    (BOARD_SIZE - 1, 0),
    (BOARD_SIZE - 1, BOARD_SIZE - 1),
]

# Players
PLAYER_ONE: Final[int] = 1
PLAYER_TWO: Final[int] = 2
PLAYERS: Final[Tuple[int, int]] = (PLAYER_ONE, PLAYER_TWO)

# AI settings
DEFAULT_MCTS_ITERATIONS: Final[int] = 1000
DEFAULT_MCTS_EXPLORATION: Final[float] = 1.4142135623730951  # sqrt(2)
DEFAULT_MCTS_MAX_DEPTH: Final[int] = 20
DEFAULT_PLAYOUT_DEPTH: Final[int] = 50
DEFAULT_PLAYOUT_TOP_K: Final[int] = 3
