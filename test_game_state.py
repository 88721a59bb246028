#!/usr/bin/env python
"""
Tests for the Quarto game state and legal moves.

This script checks:
1. Legal move enumeration for every phase of the game
2. State invariants after every move of random games
3. Move application rules (win attribution, ignored give, ties)
4. Rejection of illegal moves and malformed states
"""
import random
import unittest
from typing import List, Optional

from quarto_ai.core.actions import Move, count_legal_moves, get_legal_moves
from quarto_ai.core.board import Board
from quarto_ai.core.constants import GameResult, PLAYER_ONE, PLAYER_TWO
from quarto_ai.core.errors import InvalidMoveError, InvalidStateError, QuartoError
from quarto_ai.core.game import GameState, create_initial_state
from quarto_ai.core.pieces import ALL_PIECES, Piece


def piece_by_code(code: int) -> Piece:
    """Look up a piece by its attribute bit code."""
    return next(p for p in ALL_PIECES if p.code == code)


def draw_code(row: int, col: int) -> int:
    """
    Code of the piece at a cell of a full board with no winning line.

    Every attribute bit is an xor of row and column bits that varies along
    every row, column and diagonal, and the mapping covers all sixteen codes.
    """
    r0, r1 = row & 1, row >> 1
    c0, c1 = col & 1, col >> 1
    b0 = r1 ^ c0
    b1 = r0 ^ c1
    b2 = r0 ^ c0 ^ c1
    b3 = r1 ^ c0 ^ c1
    return b0 | b1 << 1 | b2 << 2 | b3 << 3


def draw_rows(empty: Optional[List[tuple]] = None) -> List[List[Optional[Piece]]]:
    """Rows of the draw board, leaving the given cells empty."""
    empty = empty or []
    return [
        [None if (r, c) in empty else piece_by_code(draw_code(r, c)) for c in range(4)]
        for r in range(4)
    ]


def last_move_state() -> GameState:
    """A state with one empty cell, its piece staged and nothing left to give."""
    return GameState(
        board=Board(draw_rows(empty=[(3, 3)])),
        available_pieces=[],
        staged_piece=piece_by_code(draw_code(3, 3)),
        current_player=PLAYER_TWO,
    )


class TestLegalMoves(unittest.TestCase):
    """Test case for legal move enumeration."""

    def test_initial_moves_are_give_only(self):
        """Test that the opening move only chooses a piece."""
        state = create_initial_state()
        moves = get_legal_moves(state)
        self.assertEqual(len(moves), 16)
        self.assertTrue(all(m.is_give_only for m in moves))
        self.assertEqual({m.piece_to_give for m in moves}, set(ALL_PIECES))

    def test_normal_turn_moves(self):
        """Test that a normal turn pairs every empty cell with every available piece."""
        state = create_initial_state()
        state.apply_move(Move(None, ALL_PIECES[0]))
        moves = get_legal_moves(state)
        self.assertEqual(len(moves), 16 * 15)
        self.assertEqual(count_legal_moves(state), 16 * 15)
        self.assertNotIn(ALL_PIECES[0], {m.piece_to_give for m in moves})

    def test_final_move_gives_nothing(self):
        """Test that the last placement has nothing to give."""
        state = last_move_state()
        state.validate()
        self.assertEqual(get_legal_moves(state), [Move((3, 3), None)])

    def test_terminal_state_has_no_moves(self):
        """Test that a finished game has no legal moves."""
        state = last_move_state()
        state.apply_move(Move((3, 3), None))
        self.assertEqual(get_legal_moves(state), [])
        self.assertEqual(count_legal_moves(state), 0)

    def test_move_dict_round_trip(self):
        """Test move serialization."""
        move = Move((2, 1), ALL_PIECES[5], value=3.0)
        self.assertEqual(Move.from_dict(move.to_dict()), move)


class TestGameState(unittest.TestCase):
    """Test case for game state rules and invariants."""

    def assert_invariants(self, state: GameState):
        """Check the piece accounting and validation of a state."""
        state.validate()
        staged = 1 if state.staged_piece is not None else 0
        total = len(state.board.pieces()) + len(state.available_pieces) + staged
        self.assertEqual(total, 16)
        if not state.game_over:
            self.assertEqual(len(get_legal_moves(state)), count_legal_moves(state))

    def test_random_games_keep_invariants(self):
        """Test invariants after every legal move along many random games."""
        for seed in range(25):
            rng = random.Random(seed)
            state = create_initial_state(PLAYER_ONE if seed % 2 else PLAYER_TWO)
            self.assert_invariants(state)

            moves_played = 0
            while not state.game_over:
                move = rng.choice(get_legal_moves(state))
                state.apply_move(move)
                moves_played += 1
                self.assert_invariants(state)

            # One opening give plus at most sixteen placements
            self.assertLessEqual(moves_played, 17)
            if state.result == GameResult.WINNER:
                self.assertTrue(state.board.has_winning_line())
            else:
                self.assertTrue(state.board.is_full())
                self.assertIsNone(state.winner)

    def test_next_state_leaves_state_untouched(self):
        """Test that next_state works on a copy."""
        state = create_initial_state()
        before = state.clone()
        after = state.next_state(Move(None, ALL_PIECES[3]))
        self.assertEqual(state, before)
        self.assertEqual(after.staged_piece, ALL_PIECES[3])
        self.assertEqual(after.current_player, PLAYER_TWO)

    def test_winning_placement_ignores_give(self):
        """Test that the mover wins and the give is dropped when a line is completed."""
        state = create_initial_state()
        tall = [piece_by_code(c) for c in [1, 3, 5, 7]]
        state.apply_move(Move(None, tall[0]))
        for col in range(3):
            state.apply_move(Move((0, col), tall[col + 1]))

        mover = state.current_player
        spare = state.available_pieces[0]
        available_before = len(state.available_pieces)
        state.apply_move(Move((0, 3), spare))

        self.assertTrue(state.game_over)
        self.assertEqual(state.winner, mover)
        self.assertIsNone(state.staged_piece)
        self.assertIn(spare, state.available_pieces)
        self.assertEqual(len(state.available_pieces), available_before)
        state.validate()

    def test_full_board_is_tie(self):
        """Test that filling the board without a line ends in a tie."""
        state = last_move_state()
        state.apply_move(Move((3, 3), None))
        self.assertTrue(state.game_over)
        self.assertEqual(state.result, GameResult.TIE)
        self.assertIsNone(state.winner)
        state.validate()

    def test_illegal_moves_rejected(self):
        """Test that illegal moves raise InvalidMoveError."""
        state = create_initial_state()
        with self.assertRaises(InvalidMoveError):
            state.apply_move(Move((0, 0), ALL_PIECES[0]))

        state.apply_move(Move(None, ALL_PIECES[0]))
        with self.assertRaises(InvalidMoveError):
            state.apply_move(Move(None, ALL_PIECES[1]))
        with self.assertRaises(InvalidMoveError):
            state.apply_move(Move((0, 0), ALL_PIECES[0]))
        with self.assertRaises(InvalidMoveError):
            state.apply_move(Move((0, 0), None))

        state.apply_move(Move((0, 0), ALL_PIECES[1]))
        with self.assertRaises(InvalidMoveError):
            state.apply_move(Move((0, 0), ALL_PIECES[2]))

    def test_rejected_move_leaves_state_unchanged(self):
        """Test that a move with a bad give does not half-apply its placement."""
        state = create_initial_state()
        state.apply_move(Move(None, ALL_PIECES[0]))
        before = state.clone()
        with self.assertRaises(InvalidMoveError):
            state.apply_move(Move((1, 1), ALL_PIECES[0]))
        self.assertEqual(state, before)

    def test_move_after_game_over_rejected(self):
        """Test that no move can be applied to a finished game."""
        state = last_move_state()
        state.apply_move(Move((3, 3), None))
        with self.assertRaises(InvalidMoveError):
            state.apply_move(Move((3, 3), None))

    def test_malformed_states_rejected(self):
        """Test that validate() refuses inconsistent states."""
        # Duplicated piece
        state = create_initial_state()
        state.available_pieces.append(ALL_PIECES[0])
        with self.assertRaises(InvalidStateError):
            state.validate()

        # Missing piece
        state = create_initial_state()
        state.available_pieces.pop()
        with self.assertRaises(InvalidStateError):
            state.validate()

        # Pieces on the board but nothing staged
        board = Board()
        board.place((0, 0), ALL_PIECES[0])
        state = GameState(board=board, available_pieces=list(ALL_PIECES[1:]))
        with self.assertRaises(InvalidStateError):
            state.validate()

        # Finished board not flagged as over
        state = GameState(board=Board(draw_rows()), available_pieces=[])
        with self.assertRaises(InvalidStateError):
            state.validate()

        # Unknown player
        state = create_initial_state()
        state.current_player = 3
        with self.assertRaises(InvalidStateError):
            state.validate()

    def test_errors_share_a_root(self):
        """Test the exception hierarchy."""
        self.assertTrue(issubclass(InvalidStateError, QuartoError))
        self.assertTrue(issubclass(InvalidMoveError, ValueError))


if __name__ == "__main__":
    unittest.main()
