"""
Monte Carlo Tree Search Agent for Quarto.

This module provides the MCTSAgent class, which is a ready-to-use AI player
that uses Monte Carlo Tree Search to select moves in Quarto games.
The agent can be configured with different parameters and provides
statistics about its search process.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
import random
import time

from rich.console import Console
from rich.table import Table

from quarto_ai.core.actions import Move, get_legal_moves
from quarto_ai.core.constants import DEFAULT_MCTS_EXPLORATION
from quarto_ai.core.errors import InvalidStateError
from quarto_ai.core.game import GameState
from quarto_ai.mcts.config import MCTSConfig, MoveSortStrategy
from quarto_ai.mcts.search import mcts_search


class MCTSAgent:
    """
    Monte Carlo Tree Search agent for playing Quarto.

    This agent uses MCTS to select moves. Its random source is seeded at
    construction, so with no time limit the agent's choices are reproducible.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        seed: Optional[int] = None,
        verbose: bool = False,
        console: Optional[Console] = None,
    ):
        """
        Initialize an MCTS agent.

        Args:
            config: MCTS configuration parameters
            name: Name of the agent
            seed: Seed for the agent's random source
            verbose: Whether to print a summary of each search
            console: Console used for verbose output
        """
        self.config = config or MCTSConfig()
        self.name = name
        self.rng = random.Random(seed)
        self.verbose = verbose
        self.console = console or Console()

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all moves and their statistics
        self.move_history: List[Tuple[Move, Dict[str, Any]]] = []

    def select_move(self, state: GameState) -> Move:
        """
        Select a move using Monte Carlo Tree Search.

        Args:
            state: Current game state

        Returns:
            Selected move
        """
        state.validate()
        valid_moves = get_legal_moves(state)
        if not valid_moves:
            raise InvalidStateError("No legal moves: the game is over")

        # If there's only one valid move, no need to search
        if len(valid_moves) == 1:
            move = valid_moves[0]
            self.last_stats = {"iterations": 0, "forced_move": True}
            self.move_history.append((move, self.last_stats))
            return move

        # Run MCTS search
        start_time = time.perf_counter()
        move, stats = mcts_search(state, self.config, self.rng)
        stats["total_time"] = time.perf_counter() - start_time

        self.last_stats = stats
        self.move_history.append((move, stats))

        if self.verbose:
            self._print_search_info(move, stats)

        return move

    def _print_search_info(self, move: Move, stats: Dict[str, Any]) -> None:
        """
        Print information about the search.

        Args:
            move: Selected move
            stats: Search statistics
        """
        self.console.print(f"\n[bold]{self.name}[/bold] selected: {move}")
        self.console.print(
            f"Iterations: {stats['iterations']}  "
            f"Time: {stats['time_elapsed']:.3f}s ({stats['iterations_per_second']:.1f} it/s)  "
            f"Nodes: {stats['node_count']}  Tree depth: {stats['max_depth']}"
        )

        table = Table(title="Top moves")
        table.add_column("#", justify="right")
        table.add_column("Move")
        table.add_column("Visits", justify="right")
        table.add_column("Value", justify="right")

        ranked = sorted(
            stats["action_statistics"].items(),
            key=lambda item: item[1]["visits"],
            reverse=True
        )
        for i, (move_str, move_stats) in enumerate(ranked[:5]):
            table.add_row(
                str(i + 1), move_str, str(move_stats["visits"]), f"{move_stats['value']:.3f}"
            )
        self.console.print(table)

    def get_move_callback(self) -> Callable[[GameState], Move]:
        """
        Get a callback function for selecting moves.

        This is useful for registering the agent with a Game object.

        Returns:
            Callback function that takes a game state and returns a move
        """
        return self.select_move

    def get_last_statistics(self) -> Dict[str, Any]:
        """
        Get statistics from the most recent search.

        Returns:
            Dictionary of search statistics
        """
        return self.last_stats

    def get_principal_variation(self) -> List[Tuple[str, float]]:
        """
        Get the principal variation (most visited path) from the last search.

        Returns:
            List of (move, value) pairs representing the principal variation
        """
        return self.last_stats.get("principal_variation", [])

    def get_action_statistics(self) -> Dict[str, Dict[str, float]]:
        """
        Get statistics for all root moves from the last search.

        Returns:
            Dictionary mapping move strings to statistics
        """
        return self.last_stats.get("action_statistics", {})

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.move_history = []

    def __str__(self) -> str:
        """
        Get a string representation of the agent.

        Returns:
            String representation
        """
        return f"{self.name} (MCTS, {self.config.max_iterations} iterations)"


class MCTSAgentFactory:
    """
    Factory for creating MCTS agents with different configurations.

    This class provides methods for creating MCTS agents with different
    strengths and configurations.
    """

    @staticmethod
    def create_easy(seed: Optional[int] = None) -> MCTSAgent:
        """
        Create a weak MCTS agent with few iterations and random playouts.

        Returns:
            MCTSAgent
        """
        return MCTSAgent(config=MCTSConfig.easy(), name="Easy MCTS", seed=seed)

    @staticmethod
    def create_medium(seed: Optional[int] = None) -> MCTSAgent:
        """
        Create a standard MCTS agent with balanced parameters.

        Returns:
            MCTSAgent
        """
        return MCTSAgent(config=MCTSConfig.medium(), name="Medium MCTS", seed=seed)

    @staticmethod
    def create_hard(seed: Optional[int] = None) -> MCTSAgent:
        """
        Create a strong MCTS agent with more iterations and defensive playouts.

        Returns:
            MCTSAgent
        """
        return MCTSAgent(config=MCTSConfig.hard(), name="Hard MCTS", seed=seed)

    @staticmethod
    def create_custom(
        max_iterations: int = 1000,
        time_limit: Optional[float] = None,
        exploration_constant: float = DEFAULT_MCTS_EXPLORATION,
        move_sort_strategy: Union[MoveSortStrategy, str] = MoveSortStrategy.CENTER_FIRST,
        seed: Optional[int] = None,
        name: str = "Custom MCTS"
    ) -> MCTSAgent:
        """
        Create a custom MCTS agent.

        Args:
            max_iterations: Number of MCTS iterations
            time_limit: Optional time limit in seconds
            exploration_constant: UCB1 exploration parameter
            move_sort_strategy: Playout move ordering
            seed: Seed for the agent's random source
            name: Name of the agent

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(
            max_iterations=max_iterations,
            time_limit=time_limit,
            exploration_constant=exploration_constant,
            move_sort_strategy=move_sort_strategy
        )
        return MCTSAgent(config=config, name=name, seed=seed)
