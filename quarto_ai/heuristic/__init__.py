"""
Heuristic Quarto AI.

A single-ply policy tuned by difficulty:

1. Placement: take an immediate win when one is noticed, otherwise pick a cell
   that leaves at least `min_safe` pieces which cannot hand the opponent a win.
2. Give: hand over a piece that cannot complete a line, falling back to any
   piece when every candidate is dangerous.

Difficulty levels add random play (`p_random`) and missed wins (`p_miss_win`).
"""

from quarto_ai.heuristic.config import Difficulty, DifficultyConfig, DIFFICULTY_PRESETS
from quarto_ai.heuristic.policy import (
    decide,
    choose_placement,
    choose_piece_to_give,
    count_safe_pieces,
    dangerous_pieces,
    safe_pieces,
    find_winning_placement,
    score_placements,
)
from quarto_ai.heuristic.agent import HeuristicAgent

# Default configuration
DEFAULT_CONFIG = DIFFICULTY_PRESETS[Difficulty.NORMAL]

__all__ = [
    'Difficulty',
    'DifficultyConfig',
    'DIFFICULTY_PRESETS',
    'HeuristicAgent',
    'decide',
    'choose_placement',
    'choose_piece_to_give',
    'count_safe_pieces',
    'dangerous_pieces',
    'safe_pieces',
    'find_winning_placement',
    'score_placements',
    'DEFAULT_CONFIG'
]
