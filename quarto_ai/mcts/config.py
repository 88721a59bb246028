"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the MCTS algorithm,
including iteration budget, tree depth, exploration constant, playout depth
and the move-ordering strategy used to bias playouts.
"""
from dataclasses import dataclass, fields
from enum import Enum
from typing import Callable, ClassVar, Optional, Union

from quarto_ai.core.constants import (
    DEFAULT_MCTS_ITERATIONS, DEFAULT_MCTS_EXPLORATION, DEFAULT_MCTS_MAX_DEPTH,
    DEFAULT_PLAYOUT_DEPTH, DEFAULT_PLAYOUT_TOP_K
)


class MoveSortStrategy(Enum):
    """Move orderings available to bias playouts."""
    RANDOM = "random"
    CENTER_FIRST = "center_first"
    CORNERS_FIRST = "corners_first"
    DEFENSIVE = "defensive"


# A custom ordering takes (moves, state, rng) and returns the moves reordered
StrategyType = Union[MoveSortStrategy, str, Callable]


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    This class defines all tunable parameters for the MCTS algorithm,
    with validation and sensible defaults.
    """
    # Search parameters
    max_iterations: int = DEFAULT_MCTS_ITERATIONS
    """Number of MCTS iterations to perform per move decision"""

    max_depth: int = DEFAULT_MCTS_MAX_DEPTH
    """Maximum depth of the search tree (nodes at this depth are not expanded)"""

    exploration_constant: float = DEFAULT_MCTS_EXPLORATION
    """UCB1 exploration parameter (default is sqrt(2))"""

    time_limit: Optional[float] = None
    """Optional time limit in seconds (None = no limit, keeps results deterministic)"""

    # Simulation parameters
    playout_depth: int = DEFAULT_PLAYOUT_DEPTH
    """Maximum number of moves in a playout"""

    move_sort_strategy: StrategyType = MoveSortStrategy.CENTER_FIRST
    """Ordering applied to moves before sampling a playout move"""

    playout_top_k: int = DEFAULT_PLAYOUT_TOP_K
    """Playout moves are sampled uniformly among the first k ordered moves"""

    # Constants
    INFINITE_VALUE: ClassVar[float] = float('inf')
    """Value representing infinity in the algorithm"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be positive")

        if self.max_depth <= 0:
            raise ValueError("max_depth must be positive")

        if self.exploration_constant <= 0:
            raise ValueError("exploration_constant must be positive")

        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit must be positive or None")

        if self.playout_depth <= 0:
            raise ValueError("playout_depth must be positive")

        if self.playout_top_k <= 0:
            raise ValueError("playout_top_k must be positive")

        if not callable(self.move_sort_strategy):
            try:
                self.move_sort_strategy = MoveSortStrategy(self.move_sort_strategy)
            except ValueError:
                valid = ", ".join(s.value for s in MoveSortStrategy)
                raise ValueError(f"move_sort_strategy must be one of: {valid}") from None

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def easy(cls) -> 'MCTSConfig':
        """
        Get a weak, fast configuration.

        Returns:
            Easy MCTSConfig object
        """
        return cls(
            max_iterations=100,
            max_depth=5,
            move_sort_strategy=MoveSortStrategy.RANDOM,
            playout_depth=10
        )

    @classmethod
    def medium(cls) -> 'MCTSConfig':
        """
        Get a balanced configuration.

        Returns:
            Medium MCTSConfig object
        """
        return cls(
            max_iterations=500,
            max_depth=10,
            move_sort_strategy=MoveSortStrategy.CENTER_FIRST,
            playout_depth=20
        )

    @classmethod
    def hard(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for strength (more iterations, defensive playouts).

        Returns:
            Hard MCTSConfig object
        """
        return cls(
            max_iterations=2000,
            max_depth=15,
            move_sort_strategy=MoveSortStrategy.DEFENSIVE,
            playout_depth=30
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        # Filter out any keys that aren't valid parameters
        valid_params = {k: v for k, v in config_dict.items()
                        if k in cls.__dataclass_fields__}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Enum strategies are stored by name; a custom ordering is kept as the
        callable itself so from_dict can rebuild the configuration.

        Returns:
            Dictionary of configuration parameters
        """
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, MoveSortStrategy):
                value = value.value
            result[f.name] = value
        return result

    def __str__(self) -> str:
        """
        Get a human-readable string representation.

        Returns:
            String representation
        """
        params = []
        for name, value in self.to_dict().items():
            if callable(value):
                value = getattr(value, "__name__", repr(value))
            params.append(f"{name}={value}")
        return f"MCTSConfig({', '.join(params)})"
