#!/usr/bin/env python
"""
Tests for the heuristic Quarto AI.

This script checks:
1. Difficulty presets and configuration validation
2. Legality of every placement and give over full games
3. Immediate wins, safe gives and the all-dangerous fallback
4. Reproducibility with a seeded random source
"""
import math
import random
import unittest

from quarto_ai.core.actions import Move, get_legal_moves
from quarto_ai.core.board import Board
from quarto_ai.core.errors import InvalidStateError
from quarto_ai.core.game import GameState, create_initial_state
from quarto_ai.core.pieces import ALL_PIECES, Piece
from quarto_ai.heuristic import (
    DEFAULT_CONFIG,
    Difficulty,
    DifficultyConfig,
    DIFFICULTY_PRESETS,
    HeuristicAgent,
    choose_piece_to_give,
    choose_placement,
    dangerous_pieces,
    decide,
    safe_pieces,
    score_placements,
)


def piece_by_code(code: int) -> Piece:
    """Look up a piece by its attribute bit code."""
    return next(p for p in ALL_PIECES if p.code == code)


def state_with(placed: dict, staged_code: int, current_player: int = 1) -> GameState:
    """Build a state from a {cell: code} mapping and a staged piece code."""
    board = Board()
    for pos, code in placed.items():
        board.place(pos, piece_by_code(code))
    used = set(placed.values()) | {staged_code}
    return GameState(
        board=board,
        available_pieces=[p for p in ALL_PIECES if p.code not in used],
        staged_piece=piece_by_code(staged_code),
        current_player=current_player,
    )


class TestDifficultyConfig(unittest.TestCase):
    """Test case for difficulty configuration."""

    def test_presets(self):
        """Test the preset values of each difficulty."""
        self.assertEqual(DIFFICULTY_PRESETS[Difficulty.EASY], DifficultyConfig(0.5, 0.2, 2))
        self.assertEqual(DIFFICULTY_PRESETS[Difficulty.NORMAL], DifficultyConfig(0.25, 0.05, 2))
        self.assertEqual(DIFFICULTY_PRESETS[Difficulty.HARD], DifficultyConfig(0.1, 0.01, 3))
        self.assertEqual(DIFFICULTY_PRESETS[Difficulty.NIGHTMARE], DifficultyConfig(0.0, 0.0, 8))
        self.assertEqual(DifficultyConfig.for_difficulty("hard"), DIFFICULTY_PRESETS[Difficulty.HARD])
        self.assertEqual(DEFAULT_CONFIG, DIFFICULTY_PRESETS[Difficulty.NORMAL])

    def test_validation(self):
        """Test that out-of-range parameters are rejected."""
        with self.assertRaises(ValueError):
            DifficultyConfig(p_random=1.5)
        with self.assertRaises(ValueError):
            DifficultyConfig(p_miss_win=-0.1)
        with self.assertRaises(ValueError):
            DifficultyConfig(min_safe=-1)
        with self.assertRaises(ValueError):
            DifficultyConfig.for_difficulty("impossible")


class TestHeuristicPolicy(unittest.TestCase):
    """Test case for the heuristic decision policy."""

    def test_first_move_is_give_only(self):
        """Test that the opening decision only chooses a piece."""
        state = create_initial_state()
        self.assertTrue(state.is_first_move)
        move = decide(state, DEFAULT_CONFIG, random.Random(0))
        self.assertIsNone(move.placement)
        self.assertIn(move.piece_to_give, state.available_pieces)

    def test_moves_are_legal_over_full_games(self):
        """Test that every decision is a legal move at every difficulty."""
        configs = list(DIFFICULTY_PRESETS.values()) + [DifficultyConfig.random_play()]
        for config in configs:
            for seed in range(5):
                rng = random.Random(seed)
                state = create_initial_state()
                while not state.game_over:
                    before = state.clone()
                    move = decide(state, config, rng)
                    self.assertEqual(state, before, "decide must not modify the state")
                    if move.piece_to_give is None and state.available_pieces:
                        # A winning placement gives nothing
                        self.assertIn(move.placement, state.board.empty_cells())
                        self.assertTrue(
                            state.board.completes_line(move.placement, state.staged_piece)
                        )
                    else:
                        self.assertIn(move, get_legal_moves(state))
                    state.apply_move(move)
                state.validate()

    def test_takes_immediate_win(self):
        """Test that a player who never misses wins takes the winning cell."""
        state = state_with({(0, 0): 1, (0, 1): 3, (0, 2): 5}, staged_code=7)
        move = decide(state, DIFFICULTY_PRESETS[Difficulty.NIGHTMARE], random.Random(0))
        self.assertEqual(move.placement, (0, 3))
        self.assertIsNone(move.piece_to_give)
        self.assertEqual(move.value, math.inf)

    def test_avoids_giving_dangerous_piece(self):
        """Test that a safe piece is given whenever one exists."""
        state = state_with({(0, 0): 1, (0, 1): 3, (0, 2): 5}, staged_code=8)
        config = DIFFICULTY_PRESETS[Difficulty.NIGHTMARE]
        for seed in range(10):
            move = decide(state, config, random.Random(seed))
            after = state.board.copy()
            after.place(move.placement, state.staged_piece)
            if safe_pieces(after, state.available_pieces):
                self.assertFalse(after.is_dangerous(move.piece_to_give))

    def test_nightmare_threshold_met_early(self):
        """Test that eight safe pieces are easy to keep with two pieces on the board."""
        state = state_with({(0, 0): 0, (1, 1): 15}, staged_code=5)
        scores = score_placements(state.board, state.staged_piece, state.available_pieces)
        self.assertEqual(len(scores), 14)
        self.assertTrue(any(count >= 8 for count in scores.values()))

        move = decide(state, DIFFICULTY_PRESETS[Difficulty.NIGHTMARE], random.Random(1))
        self.assertGreaterEqual(move.value, 8)

    def test_all_pieces_dangerous_gives_any_piece(self):
        """Test the give fallback when every remaining piece hands over a win."""
        # Row 0 holds three tall pieces, row 1 three short pieces, column 3 is empty
        placed = {(0, 0): 1, (0, 1): 3, (0, 2): 5, (1, 0): 0, (1, 1): 2, (1, 2): 4}
        board = Board()
        for pos, code in placed.items():
            board.place(pos, piece_by_code(code))
        available = [p for p in ALL_PIECES if p.code not in placed.values()]

        self.assertEqual(dangerous_pieces(board, available), available)
        self.assertEqual(safe_pieces(board, available), [])

        for seed in range(10):
            piece = choose_piece_to_give(
                board, available, DIFFICULTY_PRESETS[Difficulty.NIGHTMARE], random.Random(seed)
            )
            self.assertIn(piece, available)

    def test_unreachable_threshold_picks_highest_count(self):
        """Test that placement falls back to the best safe count when no cell meets min_safe."""
        placed = {(0, 0): 1, (0, 1): 3, (0, 2): 5, (1, 0): 0, (1, 1): 2, (1, 2): 4}
        state = state_with(placed, staged_code=9)
        scores = score_placements(state.board, state.staged_piece, state.available_pieces)
        best = max(scores.values())
        self.assertLess(best, 16)

        # The win check is skipped so only the strategic branch decides
        config = DifficultyConfig(p_random=0.0, p_miss_win=1.0, min_safe=16)
        for seed in range(20):
            pos = choose_placement(
                state.board, state.staged_piece, state.available_pieces, config, random.Random(seed)
            )
            self.assertEqual(scores[pos], best)

    def test_missed_win_with_random_placement(self):
        """Test that a player who overlooks wins places anywhere."""
        state = state_with({(0, 0): 1, (0, 1): 3, (0, 2): 5}, staged_code=7)
        empty = state.board.empty_cells()

        careless = DifficultyConfig(p_random=1.0, p_miss_win=1.0, min_safe=0)
        chosen = [
            choose_placement(
                state.board, state.staged_piece, state.available_pieces, careless, random.Random(seed)
            )
            for seed in range(200)
        ]
        self.assertTrue(all(pos in empty for pos in chosen))
        self.assertGreater(len(set(chosen)), 1)
        self.assertTrue(any(pos != (0, 3) for pos in chosen))

        # Random play still takes a win it does not overlook
        watchful = DifficultyConfig(p_random=1.0, p_miss_win=0.0, min_safe=0)
        for seed in range(20):
            pos = choose_placement(
                state.board, state.staged_piece, state.available_pieces, watchful, random.Random(seed)
            )
            self.assertEqual(pos, (0, 3))

    def test_random_give_ignores_danger(self):
        """Test that only random gives can hand over a winning piece."""
        board = Board()
        for col, code in enumerate([1, 3, 5]):
            board.place((0, col), piece_by_code(code))
        available = [p for p in ALL_PIECES if p.code not in (1, 3, 5)]
        self.assertTrue(safe_pieces(board, available))

        careful = DifficultyConfig(p_random=0.0, p_miss_win=0.0, min_safe=0)
        for seed in range(20):
            piece = choose_piece_to_give(board, available, careful, random.Random(seed))
            self.assertFalse(board.is_dangerous(piece))

        careless = DifficultyConfig(p_random=1.0, p_miss_win=0.0, min_safe=0)
        given = [
            choose_piece_to_give(board, available, careless, random.Random(seed))
            for seed in range(50)
        ]
        self.assertTrue(all(piece in available for piece in given))
        self.assertTrue(any(board.is_dangerous(piece) for piece in given))

    def test_nothing_to_give_at_the_end(self):
        """Test that give returns None when no pieces remain."""
        board = Board()
        self.assertIsNone(choose_piece_to_give(board, [], DEFAULT_CONFIG, random.Random(0)))

    def test_no_placement_without_piece_or_cells(self):
        """Test that placement returns None with nothing to place or nowhere to place it."""
        board = Board()
        self.assertIsNone(choose_placement(board, None, ALL_PIECES, DEFAULT_CONFIG, random.Random(0)))

        full = Board()
        for i, piece in enumerate(ALL_PIECES):
            full.place(divmod(i, 4), piece)
        self.assertIsNone(choose_placement(full, ALL_PIECES[0], [], DEFAULT_CONFIG, random.Random(0)))

    def test_finished_game_rejected(self):
        """Test that deciding on a finished game raises InvalidStateError."""
        state = state_with({(0, 0): 1, (0, 1): 3, (0, 2): 5}, staged_code=7)
        state.apply_move(Move((0, 3), None))
        with self.assertRaises(InvalidStateError):
            decide(state, DEFAULT_CONFIG, random.Random(0))

    def test_seeded_decisions_repeat(self):
        """Test that the same seed reproduces the same game."""
        def play(seed):
            agents = {1: HeuristicAgent("normal", seed=seed), 2: HeuristicAgent("easy", seed=seed + 1)}
            state = create_initial_state()
            moves = []
            while not state.game_over:
                move = agents[state.current_player].select_move(state)
                moves.append(move)
                state.apply_move(move)
            return moves

        self.assertEqual(play(11), play(11))


class TestHeuristicAgent(unittest.TestCase):
    """Test case for the heuristic agent wrapper."""

    def test_agent_names_and_history(self):
        """Test agent construction and move history."""
        agent = HeuristicAgent(Difficulty.HARD, seed=3)
        self.assertEqual(agent.config, DIFFICULTY_PRESETS[Difficulty.HARD])
        self.assertIn("hard", agent.name)

        callback = agent.get_move_callback()
        move = callback(create_initial_state())
        self.assertEqual(agent.move_history, [move])

        custom = HeuristicAgent(DifficultyConfig.random_play(), name="Random")
        self.assertEqual(custom.name, "Random")
        self.assertEqual(custom.config.p_random, 1.0)


if __name__ == "__main__":
    unittest.main()
