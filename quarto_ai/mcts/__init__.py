"""
Monte Carlo Tree Search (MCTS) implementation for Quarto.

This package provides a complete MCTS agent that can play Quarto without
any training. The MCTS algorithm works by:

1. Selection: Starting from the root node, select child nodes using UCB1 while
   nodes are fully expanded.
2. Expansion: Create a new child node by taking a previously untried move.
3. Simulation: From the new node, play a biased random game to the end or to
   the playout depth.
4. Backpropagation: Update the statistics of all nodes in the path with the result.

The agent can be configured with different parameters to control the iteration
budget, tree depth, exploration constant and playout move ordering.
"""

from quarto_ai.core.constants import DEFAULT_MCTS_EXPLORATION
from quarto_ai.mcts.node import MCTSNode, SearchTree
from quarto_ai.mcts.agent import MCTSAgent, MCTSAgentFactory
from quarto_ai.mcts.search import (
    search,
    mcts_search,
    build_search_tree,
    select_node,
    expand_node,
    simulate_game,
    backpropagate,
    get_principal_variation,
    get_action_statistics,
    get_tree_statistics,
    count_nodes
)
from quarto_ai.mcts.config import MCTSConfig, MoveSortStrategy
from quarto_ai.mcts.ordering import MOVE_ORDERINGS, get_move_ordering

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    max_iterations=1000,       # Number of MCTS iterations per move
    max_depth=20,              # Maximum depth of the search tree
    exploration_constant=DEFAULT_MCTS_EXPLORATION,  # UCB1 exploration parameter
    playout_depth=50,          # Maximum moves per playout
    move_sort_strategy=MoveSortStrategy.CENTER_FIRST,
    time_limit=None            # Optional time limit in seconds (None = no limit)
)

__all__ = [
    'MCTSAgent',
    'MCTSAgentFactory',
    'MCTSNode',
    'SearchTree',
    'MCTSConfig',
    'MoveSortStrategy',
    'MOVE_ORDERINGS',
    'get_move_ordering',
    'search',
    'mcts_search',
    'build_search_tree',
    'select_node',
    'expand_node',
    'simulate_game',
    'backpropagate',
    'get_principal_variation',
    'get_action_statistics',
    'get_tree_statistics',
    'count_nodes',
    'DEFAULT_CONFIG'
]
