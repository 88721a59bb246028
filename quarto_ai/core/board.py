"""
Board representation for the Quarto game.

This module defines the 4x4 Board, the ten winning lines (four rows, four
columns and two diagonals), win and full-board detection, and the threat
analysis used by both AI engines to decide which pieces are dangerous to give.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple

from quarto_ai.core.constants import BOARD_SIZE, ATTRIBUTE_MASK
from quarto_ai.core.pieces import Piece, share_common_attribute

Position = Tuple[int, int]
Line = Tuple[Position, Position, Position, Position]


def _build_lines() -> List[Line]:
    """Build the winning lines in scan order: rows, columns, main then anti diagonal."""
    rows = [tuple((r, c) for c in range(BOARD_SIZE)) for r in range(BOARD_SIZE)]
    cols = [tuple((r, c) for r in range(BOARD_SIZE)) for c in range(BOARD_SIZE)]
    main_diagonal = tuple((i, i) for i in range(BOARD_SIZE))
    anti_diagonal = tuple((i, BOARD_SIZE - 1 - i) for i in range(BOARD_SIZE))
    return rows + cols + [main_diagonal, anti_diagonal]


WIN_LINES: List[Line] = _build_lines()

# Lines passing through each cell, for checks local to one placement
LINES_THROUGH: Dict[Position, List[Line]] = {
    (r, c): [line for line in WIN_LINES if (r, c) in line]
    for r in range(BOARD_SIZE)
    for c in range(BOARD_SIZE)
}


class Board:
    """
    A 4x4 Quarto board.

    Each cell is either empty (None) or holds exactly one piece. Once a piece
    is placed it is never moved or removed.
    """

    def __init__(self, cells: Optional[Sequence[Sequence[Optional[Piece]]]] = None):
        """
        Initialize a board.

        Args:
            cells: Optional 4x4 grid of pieces (None for empty cells)
        """
        if cells is None:
            self._cells: List[List[Optional[Piece]]] = [
                [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
            ]
        else:
            if len(cells) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in cells):
                raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}")
            self._cells = [list(row) for row in cells]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[Piece]]]) -> Board:
        """Create a board from a grid of rows."""
        return cls(rows)

    def copy(self) -> Board:
        """Return an independent copy of the board (pieces are shared, they are immutable)."""
        board = Board.__new__(Board)
        board._cells = [row[:] for row in self._cells]
        return board

    def __getitem__(self, pos: Position) -> Optional[Piece]:
        row, col = pos
        return self._cells[row][col]

    def is_empty(self, pos: Position) -> bool:
        """Check if a cell is empty."""
        row, col = pos
        return self._cells[row][col] is None

    def place(self, pos: Position, piece: Piece) -> None:
        """
        Place a piece on an empty cell.

        Args:
            pos: (row, col) of the target cell
            piece: Piece to place

        Raises:
            ValueError: If the cell is outside the board or already occupied
        """
        row, col = pos
        if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
            raise ValueError(f"Position {pos} is outside the board")
        if self._cells[row][col] is not None:
            raise ValueError(f"Cell {pos} is already occupied")
        self._cells[row][col] = piece

    def empty_cells(self) -> List[Position]:
        """Get all empty cells in row-major order."""
        return [
            (r, c)
            for r in range(BOARD_SIZE)
            for c in range(BOARD_SIZE)
            if self._cells[r][c] is None
        ]

    def pieces(self) -> List[Piece]:
        """Get all pieces on the board in row-major order."""
        return [piece for row in self._cells for piece in row if piece is not None]

    def occupied_count(self) -> int:
        """Get the number of occupied cells."""
        return sum(1 for row in self._cells for piece in row if piece is not None)

    def is_full(self) -> bool:
        """Check if every cell is occupied."""
        return all(piece is not None for row in self._cells for piece in row)

    def _line_pieces(self, line: Line) -> List[Optional[Piece]]:
        return [self._cells[r][c] for r, c in line]

    def _is_winning(self, line: Line) -> bool:
        pieces = self._line_pieces(line)
        if any(piece is None for piece in pieces):
            return False
        return share_common_attribute(pieces)

    def has_winning_line(self) -> bool:
        """
        Check if any of the ten lines is a win.

        A line wins when all four of its cells are occupied and the four pieces
        share at least one attribute value.

        Returns:
            True if a winning line exists
        """
        return any(self._is_winning(line) for line in WIN_LINES)

    def winning_line(self) -> Optional[List[Position]]:
        """
        Get the coordinates of the first winning line, for highlighting.

        Lines are scanned rows first, then columns, then the main diagonal and
        finally the anti-diagonal.

        Returns:
            The four coordinates of the winning line, or None
        """
        for line in WIN_LINES:
            if self._is_winning(line):
                return list(line)
        return None

    def completes_line(self, pos: Position, piece: Piece) -> bool:
        """
        Check if placing a piece on an empty cell would create a winning line.

        Only the lines through the cell are examined.

        Args:
            pos: Empty cell to test
            piece: Piece that would be placed there

        Returns:
            True if the placement wins
        """
        for line in LINES_THROUGH[pos]:
            others = [self._cells[r][c] for r, c in line if (r, c) != pos]
            if any(other is None for other in others):
                continue
            if share_common_attribute(others + [piece]):
                return True
        return False

    def threats(self) -> List[Tuple[Position, int, int]]:
        """
        Find the lines that one more piece could complete.

        A threat is a line with three occupied cells whose pieces share at least
        one attribute value. For each threat the empty cell is returned together
        with the attribute bits set on all three pieces and the bits clear on all
        three pieces.

        Returns:
            List of (empty cell, common set bits, common clear bits)
        """
        result = []
        for line in WIN_LINES:
            empty = None
            all_set = ATTRIBUTE_MASK
            all_clear = ATTRIBUTE_MASK
            for r, c in line:
                piece = self._cells[r][c]
                if piece is None:
                    if empty is not None:
                        break
                    empty = (r, c)
                else:
                    all_set &= piece.code
                    all_clear &= ~piece.code
            else:
                if empty is not None and (all_set or all_clear):
                    result.append((empty, all_set, all_clear))
        return result

    def is_dangerous(self, piece: Piece) -> bool:
        """
        Check if a piece would complete a winning line on any empty cell.

        Args:
            piece: Piece that might be given to the opponent

        Returns:
            True if the opponent could win immediately with this piece
        """
        return is_dangerous_against(piece, self.threats())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return False
        return self._cells == other._cells

    def __str__(self) -> str:
        """Render the board as text, one row per line, '.' for empty cells."""
        lines = []
        for row in self._cells:
            lines.append(" ".join(
                f"{piece.code:x}" if piece is not None else "." for piece in row
            ))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board(occupied={self.occupied_count()})"


def is_dangerous_against(piece: Piece, threats: List[Tuple[Position, int, int]]) -> bool:
    """
    Check a piece against a precomputed threat list.

    Args:
        piece: Piece to test
        threats: Result of Board.threats()

    Returns:
        True if the piece completes any of the threatened lines
    """
    for _, all_set, all_clear in threats:
        if piece.code & all_set or ~piece.code & all_clear:
            return True
    return False


def has_winning_line(board: Board) -> bool:
    """Check if the board contains a winning line."""
    return board.has_winning_line()


def winning_line(board: Board) -> Optional[List[Position]]:
    """Get the first winning line on the board, or None."""
    return board.winning_line()


def is_board_full(board: Board) -> bool:
    """Check if the board is full."""
    return board.is_full()
