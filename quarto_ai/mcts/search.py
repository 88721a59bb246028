"""
Monte Carlo Tree Search (MCTS) algorithm for Quarto.

This module implements the core MCTS algorithm with the four standard phases:
1. Selection: Descend the tree with UCB1 while nodes are fully expanded
2. Expansion: Add one child for an untried move
3. Simulation: Run a biased random playout to estimate the node's value
4. Backpropagation: Update statistics up to the root

All randomness comes from the random source passed in, so a search with a
fixed seed, state and configuration always returns the same move.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import logging
import random
import time

from quarto_ai.core.actions import Move, get_legal_moves
from quarto_ai.core.errors import InvalidStateError
from quarto_ai.core.game import GameState
from quarto_ai.mcts.config import MCTSConfig
from quarto_ai.mcts.node import SearchTree
from quarto_ai.mcts.ordering import MoveOrdering, get_move_ordering

logger = logging.getLogger(__name__)

WIN_RESULT = 1.0
TIE_RESULT = 0.5
LOSS_RESULT = 0.0


def select_node(tree: SearchTree) -> int:
    """
    Select a node for expansion or simulation.

    Starting at the root, descend to the child with the best UCB1 score while
    the current node is non-terminal and fully expanded.

    Args:
        tree: Search tree

    Returns:
        Arena index of the selected node
    """
    index = SearchTree.ROOT
    node = tree[index]
    while not node.is_terminal() and node.is_fully_expanded():
        index = tree.select_child(index)
        node = tree[index]
    return index


def expand_node(tree: SearchTree, index: int) -> int:
    """
    Expand a node if it is eligible, otherwise return it unchanged.

    Args:
        tree: Search tree
        index: Arena index of the selected node

    Returns:
        Arena index of the node to simulate from
    """
    if tree.can_expand(index):
        return tree.expand(index)
    return index


def evaluate_result(state: GameState, root_player: int) -> float:
    """
    Score a playout's final state for the root player.

    Args:
        state: Final playout state
        root_player: Player to move at the root

    Returns:
        1.0 for a win, 0.5 for a tie or an unfinished game, 0.0 for a loss
    """
    if state.winner is None:
        return TIE_RESULT
    return WIN_RESULT if state.winner == root_player else LOSS_RESULT


def simulate_game(
    state: GameState,
    root_player: int,
    config: MCTSConfig,
    rng: random.Random,
    ordering: Optional[MoveOrdering] = None,
) -> Tuple[float, int]:
    """
    Run a playout from a state to estimate its value.

    At every step the legal moves are ordered with the configured strategy
    and one of the first `playout_top_k` is picked uniformly, which biases the
    playout toward better moves while keeping it random.

    Args:
        state: State to simulate from (not modified)
        root_player: Player whose perspective the result is scored from
        config: MCTS configuration parameters
        rng: Random source
        ordering: Move ordering (resolved from config when omitted)

    Returns:
        Tuple of (simulation result, number of steps)
    """
    if ordering is None:
        ordering = get_move_ordering(config.move_sort_strategy)

    # Clone the state to avoid modifying the node's snapshot
    current = state.clone()

    steps = 0
    while not current.game_over and steps < config.playout_depth:
        moves = get_legal_moves(current)
        if not moves:
            break

        ordered = ordering(moves, current, rng)
        move = ordered[rng.randrange(min(config.playout_top_k, len(ordered)))]
        current.apply_move(move)
        steps += 1

    return evaluate_result(current, root_player), steps


def backpropagate(tree: SearchTree, index: int, result: float) -> None:
    """
    Update statistics from a node up to the root.

    Args:
        tree: Search tree
        index: Arena index of the simulated node
        result: Simulation result
    """
    tree.backpropagate(index, result)


def build_search_tree(
    state: GameState,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None,
    stats: Optional[Dict[str, Any]] = None,
) -> SearchTree:
    """
    Run the MCTS iterations and return the resulting tree.

    Args:
        state: Current game state (not modified)
        config: MCTS configuration parameters
        rng: Random source (a fresh unseeded one when omitted)
        stats: Optional dictionary that receives search statistics

    Returns:
        The search tree

    Raises:
        InvalidStateError: If the state is malformed or the game is over
    """
    if config is None:
        config = MCTSConfig()
    if rng is None:
        rng = random.Random()
    if stats is None:
        stats = {}

    state.validate()
    if state.game_over:
        raise InvalidStateError("Cannot search from a finished game")

    root_player = state.current_player
    ordering = get_move_ordering(config.move_sort_strategy)
    tree = SearchTree(state.clone(), config, rng)

    stats.update({
        "iterations": 0,
        "total_simulation_steps": 0,
        "max_simulation_steps": 0,
        "stopped_early": False,
    })

    start_time = time.perf_counter()

    # Main MCTS loop
    for _ in range(config.max_iterations):
        # Check time limit if specified
        if config.time_limit is not None and time.perf_counter() - start_time > config.time_limit:
            stats["stopped_early"] = True
            break

        # 1. Selection
        index = select_node(tree)

        # 2. Expansion
        index = expand_node(tree, index)

        # 3. Simulation
        result, steps = simulate_game(tree[index].state, root_player, config, rng, ordering)

        # 4. Backpropagation
        backpropagate(tree, index, result)

        stats["iterations"] += 1
        stats["total_simulation_steps"] += steps
        stats["max_simulation_steps"] = max(stats["max_simulation_steps"], steps)

    stats["time_elapsed"] = time.perf_counter() - start_time
    return tree


def mcts_search(
    state: GameState,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[Move, Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search to find the best move.

    Args:
        state: Current game state (not modified)
        config: MCTS configuration parameters
        rng: Random source

    Returns:
        Tuple of (best move, search statistics)

    Raises:
        InvalidStateError: If the state is malformed or the game is over
    """
    if config is None:
        config = MCTSConfig()
    if rng is None:
        rng = random.Random()

    stats: Dict[str, Any] = {}
    tree = build_search_tree(state, config, rng, stats)

    best_move = tree.best_move()
    stats["used_fallback"] = False
    if best_move is None:
        # The deadline expired before the first iteration finished
        best_move = rng.choice(get_legal_moves(state))
        stats["used_fallback"] = True
        logger.debug("Search produced no children, falling back to random move %s", best_move)

    stats.update(get_tree_statistics(tree))
    stats["action_statistics"] = get_action_statistics(tree)
    stats["principal_variation"] = [
        (str(move), value) for move, value in get_principal_variation(tree)
    ]
    stats["iterations_per_second"] = stats["iterations"] / max(0.001, stats["time_elapsed"])
    stats["average_simulation_steps"] = (
        stats["total_simulation_steps"] / max(1, stats["iterations"])
    )

    logger.debug(
        "MCTS: %d iterations, %d nodes, best move %s",
        stats["iterations"], stats["node_count"], best_move
    )
    return best_move, stats


def search(
    state: GameState,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None,
) -> Move:
    """
    Choose a move with Monte Carlo Tree Search.

    Args:
        state: Current game state (not modified)
        config: MCTS configuration parameters
        rng: Random source

    Returns:
        The move of the most visited root child
    """
    move, _ = mcts_search(state, config, rng)
    return move


def count_nodes(tree: SearchTree) -> int:
    """
    Count the total number of nodes in the tree.

    Args:
        tree: Search tree

    Returns:
        Total number of nodes
    """
    return len(tree)


def get_tree_statistics(tree: SearchTree) -> Dict[str, Any]:
    """
    Summarize the shape of a search tree.

    Args:
        tree: Search tree

    Returns:
        Dictionary with root visits, node count, maximum depth and the
        average branching factor of expanded nodes
    """
    expanded = [node for node in tree.nodes if node.children]
    return {
        "total_visits": tree.root.visits,
        "node_count": len(tree),
        "max_depth": max(node.depth for node in tree.nodes),
        "avg_branching_factor": (
            sum(len(node.children) for node in expanded) / len(expanded) if expanded else 0.0
        ),
    }


def get_principal_variation(tree: SearchTree, max_depth: int = 10) -> List[Tuple[Move, float]]:
    """
    Get the principal variation (most visited path) from the root.

    This is useful for analysis and debugging.

    Args:
        tree: Search tree
        max_depth: Maximum depth to explore

    Returns:
        List of (move, value) pairs representing the principal variation
    """
    result = []
    index = SearchTree.ROOT

    while len(result) < max_depth:
        best = tree.best_child(index)
        if best is None:
            break
        child = tree[best]
        result.append((child.move, child.value))
        index = best

    return result


def get_action_statistics(tree: SearchTree) -> Dict[str, Dict[str, float]]:
    """
    Get statistics for all moves from the root.

    This is useful for analysis and debugging.

    Args:
        tree: Search tree

    Returns:
        Dictionary mapping move strings to statistics
    """
    result = {}

    for child_index in tree.root.children:
        child = tree[child_index]
        result[str(child.move)] = {
            "visits": child.visits,
            "wins": child.wins,
            "value": child.value,
            "exploration": tree.ucb_score(child_index),
        }

    return result
