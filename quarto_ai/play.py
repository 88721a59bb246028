#!/usr/bin/env python
"""
Watch Quarto AI agents play against each other.

This script provides a command-line interface for running matches between
heuristic agents of any difficulty and MCTS agents.

Example usage:
    # Heuristic (hard) against MCTS (medium), showing the board
    quarto-play --agent1 hard --agent2 mcts-medium --show-board

    # 50 reproducible games between two MCTS agents
    quarto-play --agent1 mcts-easy --agent2 mcts-hard --games 50 --seed 7
"""
import argparse
import logging
import sys
from typing import Dict, List, Optional, Sequence, Union

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

from quarto_ai.adapter import Game, LiveGame
from quarto_ai.core.constants import PLAYER_ONE, PLAYER_TWO, PLAYERS
from quarto_ai.core.pieces import Piece
from quarto_ai.heuristic.agent import HeuristicAgent
from quarto_ai.heuristic.config import Difficulty, DifficultyConfig
from quarto_ai.mcts.agent import MCTSAgent
from quarto_ai.mcts.config import MCTSConfig, MoveSortStrategy

logger = logging.getLogger(__name__)

Agent = Union[HeuristicAgent, MCTSAgent]

HEURISTIC_CHOICES = ["random"] + [d.value for d in Difficulty]
MCTS_CHOICES = ["mcts", "mcts-easy", "mcts-medium", "mcts-hard"]
AGENT_CHOICES = HEURISTIC_CHOICES + MCTS_CHOICES


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for match configuration."""
    parser = argparse.ArgumentParser(description="Run Quarto AI agents against each other")

    # Agent configuration
    parser.add_argument("--agent1", type=str, default="normal", choices=AGENT_CHOICES,
                        help="Agent playing as player 1")
    parser.add_argument("--agent2", type=str, default="mcts-medium", choices=AGENT_CHOICES,
                        help="Agent playing as player 2")

    # MCTS overrides
    parser.add_argument("--mcts-iterations", type=int, default=None,
                        help="Override the number of MCTS iterations per move")
    parser.add_argument("--mcts-strategy", type=str, default=None,
                        choices=[s.value for s in MoveSortStrategy],
                        help="Override the MCTS playout move ordering")
    parser.add_argument("--time-limit", type=float, default=None,
                        help="Optional MCTS time limit per move (seconds)")

    # Match configuration
    parser.add_argument("--games", type=int, default=1,
                        help="Number of games to play")
    parser.add_argument("--alternate", action="store_true",
                        help="Alternate which player gives the opening piece")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducibility")
    parser.add_argument("--show-board", action="store_true",
                        help="Render the board after every move")
    parser.add_argument("--verbose", action="store_true",
                        help="Show debug logging and agent decision summaries")

    args = parser.parse_args(argv)
    if args.games < 1:
        parser.error("--games must be at least 1")
    return args


def setup_logging(verbose: bool, console: Console) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def build_mcts_config(kind: str, args: argparse.Namespace) -> MCTSConfig:
    """Build an MCTS configuration from a preset name and the CLI overrides."""
    if kind == "mcts-easy":
        config = MCTSConfig.easy()
    elif kind == "mcts-medium":
        config = MCTSConfig.medium()
    elif kind == "mcts-hard":
        config = MCTSConfig.hard()
    else:
        config = MCTSConfig.default()

    overrides = config.to_dict()
    if args.mcts_iterations is not None:
        overrides["max_iterations"] = args.mcts_iterations
    if args.mcts_strategy is not None:
        overrides["move_sort_strategy"] = args.mcts_strategy
    if args.time_limit is not None:
        overrides["time_limit"] = args.time_limit
    return MCTSConfig.from_dict(overrides)


def create_agent(
    kind: str,
    args: argparse.Namespace,
    seed: Optional[int],
    console: Console,
    name: Optional[str] = None,
) -> Agent:
    """Create an AI agent based on type."""
    if kind == "random":
        return HeuristicAgent(
            DifficultyConfig.random_play(), seed=seed, name=name or "Random AI",
            verbose=args.verbose, console=console
        )

    if kind in MCTS_CHOICES:
        return MCTSAgent(
            config=build_mcts_config(kind, args), name=name or f"MCTS AI ({kind})",
            seed=seed, verbose=args.verbose, console=console
        )

    return HeuristicAgent(
        kind, seed=seed, name=name, verbose=args.verbose, console=console
    )


def piece_label(piece: Optional[Piece]) -> str:
    """Short four-letter label for a piece (height, color, shape, top)."""
    if piece is None:
        return "...."
    return "".join(attr.value[0].upper() for attr in piece.attributes)


def render_board(live: LiveGame) -> Table:
    """
    Render a live game as a rich table.

    Cells of the winning line are highlighted, as is the last placement.

    Args:
        live: Live game to render

    Returns:
        Renderable table
    """
    winning = set(live.winning_line or [])
    table = Table(show_header=True, show_lines=True, title="Quarto")
    table.add_column("", justify="right", style="dim")
    for col in range(len(live.board)):
        table.add_column(str(col), justify="center")

    for r, row in enumerate(live.board):
        cells = []
        for c, piece in enumerate(row):
            label = piece_label(piece)
            if (r, c) in winning:
                label = f"[bold green]{label}[/bold green]"
            elif (r, c) == live.last_move:
                label = f"[bold yellow]{label}[/bold yellow]"
            cells.append(label)
        table.add_row(str(r), *cells)

    if live.staged_piece is not None:
        table.caption = (
            f"Player {live.current_player} must place {piece_label(live.staged_piece)}"
        )
    return table


def play_one_game(
    agents: Dict[int, Agent],
    first_player: int,
    console: Console,
    show_board: bool = False,
) -> LiveGame:
    """
    Play a single game between two agents.

    Args:
        agents: Mapping of player number to agent
        first_player: Player who gives the opening piece
        console: Console used for board output
        show_board: Whether to render the board after every move

    Returns:
        Final live game
    """
    game = Game(first_player=first_player, player_names={p: a.name for p, a in agents.items()})
    for player, agent in agents.items():
        game.register_agent(player, agent.get_move_callback())

    done = False
    while not done:
        live, done = game.step()
        if show_board:
            console.print(render_board(live))

    return game.live


def print_results(
    console: Console,
    agents: Dict[int, Agent],
    wins: Dict[int, int],
    ties: int,
    total_moves: List[int],
) -> None:
    """Print a summary table of all games."""
    games = sum(wins.values()) + ties

    table = Table(title=f"Results over {games} game(s)")
    table.add_column("Player", justify="right")
    table.add_column("Agent")
    table.add_column("Wins", justify="right")
    table.add_column("Win rate", justify="right")

    for player in PLAYERS:
        table.add_row(
            str(player), agents[player].name, str(wins[player]),
            f"{wins[player] / games:.1%}"
        )
    table.add_row("-", "Ties", str(ties), f"{ties / games:.1%}")
    console.print(table)
    console.print(f"Average moves per game: {sum(total_moves) / len(total_moves):.1f}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    console = Console()
    setup_logging(args.verbose, console)

    seed2 = args.seed + 1 if args.seed is not None else None
    agents: Dict[int, Agent] = {
        PLAYER_ONE: create_agent(args.agent1, args, args.seed, console),
        PLAYER_TWO: create_agent(args.agent2, args, seed2, console),
    }
    if agents[PLAYER_ONE].name == agents[PLAYER_TWO].name:
        agents[PLAYER_ONE].name += " #1"
        agents[PLAYER_TWO].name += " #2"

    console.print(
        f"[bold]{agents[PLAYER_ONE].name}[/bold] vs [bold]{agents[PLAYER_TWO].name}[/bold]"
    )

    wins = {player: 0 for player in PLAYERS}
    ties = 0
    total_moves: List[int] = []

    for i in tqdm(range(args.games), desc="Playing", disable=args.games == 1 or args.show_board):
        first_player = PLAYER_TWO if args.alternate and i % 2 else PLAYER_ONE
        live = play_one_game(agents, first_player, console, args.show_board)

        if live.winner is not None:
            wins[live.winner] += 1
        else:
            ties += 1
        total_moves.append(sum(1 for row in live.board for piece in row if piece is not None) + 1)
        logger.debug("Game %d finished: winner=%s", i + 1, live.winner)

    if args.games == 1 and not args.show_board:
        console.print(render_board(live))
    print_results(console, agents, wins, ties, total_moves)
    return 0


if __name__ == "__main__":
    sys.exit(main())
