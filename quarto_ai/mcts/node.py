"""
Monte Carlo Tree Search nodes for Quarto.

This module defines the MCTSNode class, which holds a game state and its
statistics, and the SearchTree arena that owns every node of one search.
Nodes refer to their parent and children by index into the arena, so the
tree has no reference cycles and ownership runs strictly from the arena down.
"""
from __future__ import annotations
from typing import List, Optional
import math
import random

from quarto_ai.core.actions import Move, get_legal_moves
from quarto_ai.core.errors import SearchError
from quarto_ai.core.game import GameState
from quarto_ai.mcts.config import MCTSConfig


class MCTSNode:
    """
    A node in the Monte Carlo Tree Search.

    Each node represents a game state and tracks statistics about the
    simulations that passed through it. The win accumulator is always
    expressed from the perspective of the player to move at the root.
    """

    def __init__(
        self,
        state: GameState,
        move: Optional[Move],
        parent: Optional[int],
        depth: int,
        untried_moves: List[Move],
    ):
        """
        Initialize an MCTS node.

        Args:
            state: The game state this node represents
            move: The move that led to this state (None for root)
            parent: Arena index of the parent node (None for root)
            depth: Distance from the root
            untried_moves: Legal moves not yet expanded into children
        """
        self.state = state
        self.move = move
        self.parent = parent
        self.depth = depth
        self.untried_moves = untried_moves

        # Node statistics
        self.visits = 0
        self.wins = 0.0
        self.children: List[int] = []

    def has_untried_moves(self) -> bool:
        """Check if there are moves that have not been expanded yet."""
        return bool(self.untried_moves)

    def is_terminal(self) -> bool:
        """Check if this node represents a finished game."""
        return self.state.game_over

    def is_fully_expanded(self) -> bool:
        """Check if all legal moves from this node have been tried."""
        return not self.untried_moves

    @property
    def value(self) -> float:
        """Get the average result of simulations through this node."""
        return self.wins / self.visits if self.visits else 0.0

    def __str__(self) -> str:
        return (f"MCTSNode(move={self.move}, "
                f"visits={self.visits}, "
                f"wins={self.wins:.2f}, "
                f"children={len(self.children)}, "
                f"untried={len(self.untried_moves)})")


class SearchTree:
    """
    Arena owning all nodes of one search.

    Node 0 is the root. Children are appended as they are expanded and are
    never removed or reparented during the search.
    """

    ROOT = 0

    def __init__(self, root_state: GameState, config: MCTSConfig, rng: random.Random):
        """
        Create a tree holding only the root.

        Args:
            root_state: State to search from (owned by the tree from now on)
            config: MCTS configuration parameters
            rng: Random source used to order untried moves
        """
        self.config = config
        self.rng = rng
        self.nodes: List[MCTSNode] = []
        self._add_node(root_state, None, None, 0)

    @property
    def root(self) -> MCTSNode:
        """Get the root node."""
        return self.nodes[self.ROOT]

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> MCTSNode:
        return self.nodes[index]

    def _add_node(
        self,
        state: GameState,
        move: Optional[Move],
        parent: Optional[int],
        depth: int,
    ) -> int:
        untried = get_legal_moves(state)
        # Shuffle so expansion order does not follow enumeration order
        self.rng.shuffle(untried)
        self.nodes.append(MCTSNode(state, move, parent, depth, untried))
        return len(self.nodes) - 1

    def children(self, index: int) -> List[MCTSNode]:
        """Get the child nodes of a node."""
        return [self.nodes[i] for i in self.nodes[index].children]

    def ucb_score(self, child_index: int) -> float:
        """
        Calculate the UCB1 score for a child node.

        UCB1 = wins / visits + C * sqrt(ln(parent_visits) / visits)

        Args:
            child_index: Arena index of the child

        Returns:
            UCB1 score (infinity for an unvisited child)
        """
        child = self.nodes[child_index]
        if child.visits == 0:
            return MCTSConfig.INFINITE_VALUE

        parent = self.nodes[child.parent]
        exploitation = child.wins / child.visits
        exploration = math.sqrt(math.log(parent.visits) / child.visits)
        return exploitation + self.config.exploration_constant * exploration

    def select_child(self, index: int) -> int:
        """
        Select the child with the highest UCB1 score (first one on ties).

        Args:
            index: Arena index of the parent

        Returns:
            Arena index of the selected child

        Raises:
            SearchError: If the node has no children
        """
        node = self.nodes[index]
        if not node.children:
            raise SearchError("Cannot select child from node with no children")
        return max(node.children, key=self.ucb_score)

    def can_expand(self, index: int) -> bool:
        """
        Check whether a selected node should grow a child this iteration.

        A node is expanded when it is not terminal, still has untried moves,
        lies above the depth limit, and has been visited before. The root is
        always eligible so the first iteration already creates a child.

        Args:
            index: Arena index of the node

        Returns:
            True if the node should be expanded
        """
        node = self.nodes[index]
        return (
            not node.is_terminal()
            and node.has_untried_moves()
            and node.depth < self.config.max_depth
            and (node.visits > 0 or index == self.ROOT)
        )

    def expand(self, index: int) -> int:
        """
        Expand a node by trying one of its untried moves.

        Args:
            index: Arena index of the node to expand

        Returns:
            Arena index of the new child

        Raises:
            SearchError: If the node has no untried moves
        """
        node = self.nodes[index]
        if not node.untried_moves:
            raise SearchError("Cannot expand fully expanded node")

        move = node.untried_moves.pop()
        child_state = node.state.next_state(move)
        child_index = self._add_node(child_state, move, index, node.depth + 1)
        node.children.append(child_index)
        return child_index

    def backpropagate(self, index: int, result: float) -> None:
        """
        Add a simulation result to a node and all of its ancestors.

        Args:
            index: Arena index of the simulated node
            result: Result from the root player's perspective
        """
        current: Optional[int] = index
        while current is not None:
            node = self.nodes[current]
            node.visits += 1
            node.wins += result
            current = node.parent

    def best_child(self, index: int = ROOT) -> Optional[int]:
        """
        Get the most visited child of a node.

        Visit count is more robust than average reward for the final choice.

        Args:
            index: Arena index of the parent (defaults to the root)

        Returns:
            Arena index of the best child, or None if the node has no children
        """
        node = self.nodes[index]
        if not node.children:
            return None
        return max(node.children, key=lambda i: self.nodes[i].visits)

    def best_move(self) -> Optional[Move]:
        """
        Get the best move from the root based on visit counts.

        Returns:
            The best move, or None if the root has no children
        """
        best = self.best_child(self.ROOT)
        return self.nodes[best].move if best is not None else None
