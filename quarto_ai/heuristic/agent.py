"""
Heuristic agent for Quarto.

This module provides the HeuristicAgent class, a ready-to-use AI player that
wraps the heuristic policy with a difficulty setting and its own seeded
random source.
"""
import random
from typing import Callable, List, Optional, Union

from rich.console import Console

from quarto_ai.core.actions import Move
from quarto_ai.core.game import GameState
from quarto_ai.heuristic.config import Difficulty, DifficultyConfig
from quarto_ai.heuristic.policy import decide


class HeuristicAgent:
    """
    Difficulty-tunable heuristic agent.

    The agent owns a random.Random seeded at construction, so two agents
    built with the same seed and difficulty make the same decisions.
    """

    def __init__(
        self,
        difficulty: Union[Difficulty, str, DifficultyConfig] = Difficulty.NORMAL,
        seed: Optional[int] = None,
        name: Optional[str] = None,
        verbose: bool = False,
        console: Optional[Console] = None,
    ):
        """
        Initialize a heuristic agent.

        Args:
            difficulty: Difficulty level, its name, or an explicit DifficultyConfig
            seed: Seed for the agent's random source
            name: Name of the agent
            verbose: Whether to print each decision
            console: Console used for verbose output
        """
        if isinstance(difficulty, DifficultyConfig):
            self.config = difficulty
            label = "custom"
        else:
            self.config = DifficultyConfig.for_difficulty(difficulty)
            label = Difficulty(difficulty).value

        self.name = name or f"Heuristic AI ({label})"
        self.rng = random.Random(seed)
        self.verbose = verbose
        self.console = console or Console()

        # History of all moves chosen by this agent
        self.move_history: List[Move] = []

    def select_move(self, state: GameState) -> Move:
        """
        Select a move for the current player.

        Args:
            state: Current game state

        Returns:
            Selected move
        """
        move = decide(state, self.config, self.rng)
        self.move_history.append(move)

        if self.verbose:
            value = "n/a" if move.value is None else f"{move.value:g}"
            self.console.print(
                f"[bold]{self.name}[/bold] (player {state.current_player}): {move} "
                f"[dim](value {value})[/dim]"
            )

        return move

    def get_move_callback(self) -> Callable[[GameState], Move]:
        """
        Get a callback function for selecting moves.

        This is useful for registering the agent with a Game object.

        Returns:
            Callback that takes a game state and returns a move
        """
        return self.select_move

    def __str__(self) -> str:
        return self.name
