"""
Configuration for the heuristic Quarto AI.

Difficulty is expressed as three independent knobs instead of numbers
scattered through the decision code:

- p_random: chance of ignoring strategy and choosing uniformly at random
- p_miss_win: chance of not noticing an immediate winning placement
- min_safe: minimum number of safe pieces a placement should leave to give
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union


class Difficulty(Enum):
    """Difficulty levels of the heuristic AI."""
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"
    NIGHTMARE = "nightmare"


@dataclass(frozen=True)
class DifficultyConfig:
    """
    Tunable parameters of the heuristic policy.

    The strongest setting never plays randomly, never misses a win and asks
    for eight safe pieces before accepting a placement.
    """
    p_random: float = 0.25
    """Probability of a uniformly random placement or give"""

    p_miss_win: float = 0.05
    """Probability of skipping the immediate-win check"""

    min_safe: int = 2
    """Safe pieces a placement must leave for it to be acceptable"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if not 0.0 <= self.p_random <= 1.0:
            raise ValueError("p_random must be in [0, 1]")

        if not 0.0 <= self.p_miss_win <= 1.0:
            raise ValueError("p_miss_win must be in [0, 1]")

        if self.min_safe < 0:
            raise ValueError("min_safe must be non-negative")

    @classmethod
    def for_difficulty(cls, difficulty: Union[Difficulty, str]) -> 'DifficultyConfig':
        """
        Get the preset for a difficulty level.

        Args:
            difficulty: Difficulty enum member or its name ('easy', 'normal', ...)

        Returns:
            DifficultyConfig for that level
        """
        return DIFFICULTY_PRESETS[Difficulty(difficulty)]

    @classmethod
    def random_play(cls) -> 'DifficultyConfig':
        """
        Get a configuration that always plays uniformly at random.

        Returns:
            DifficultyConfig with p_random = 1
        """
        return cls(p_random=1.0, p_miss_win=1.0, min_safe=0)


DIFFICULTY_PRESETS: Dict[Difficulty, DifficultyConfig] = {
    Difficulty.EASY: DifficultyConfig(p_random=0.5, p_miss_win=0.2, min_safe=2),
    Difficulty.NORMAL: DifficultyConfig(p_random=0.25, p_miss_win=0.05, min_safe=2),
    Difficulty.HARD: DifficultyConfig(p_random=0.1, p_miss_win=0.01, min_safe=3),
    Difficulty.NIGHTMARE: DifficultyConfig(p_random=0.0, p_miss_win=0.0, min_safe=8),
}
