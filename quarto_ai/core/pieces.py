"""
Pieces for the Quarto game.

This module defines the Piece value type and the piece catalog: the sixteen
pieces produced by every combination of the four binary attributes, along
with helpers for identifying and formatting pieces.
"""
from dataclasses import dataclass, field
from itertools import product
from typing import Iterable, List, Tuple

from quarto_ai.core.constants import (
    Height, Color, Shape, Top, ATTRIBUTE_LABELS, ATTRIBUTE_MASK, ATTRIBUTE_TYPES
)


@dataclass(frozen=True)
class Piece:
    """
    Represents one of the sixteen Quarto pieces.

    A piece is identified by its attribute tuple. Each piece also carries a
    4-bit code (one bit per attribute, set when the attribute takes the first
    value of its enum) which makes line checks a couple of bitwise operations.
    """
    height: Height
    color: Color
    shape: Shape
    top: Top
    code: int = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Validate the attributes and compute the piece code."""
        for value, enum_type in zip(self.attributes, ATTRIBUTE_TYPES):
            if not isinstance(value, enum_type):
                raise ValueError(f"Expected {enum_type.__name__}, got {value!r}")

        code = 0
        for bit, value in enumerate(self.attributes):
            if value is list(type(value))[0]:
                code |= 1 << bit
        object.__setattr__(self, "code", code)

    @property
    def attributes(self) -> Tuple[Height, Color, Shape, Top]:
        """Get the attribute tuple that identifies this piece."""
        return (self.height, self.color, self.shape, self.top)

    @property
    def id(self) -> str:
        """Get a stable string identifier, e.g. 'tall-light-square-solid'."""
        return "-".join(value.value for value in self.attributes)

    def shares_attribute_with(self, other: "Piece") -> bool:
        """Check if two pieces have at least one attribute value in common."""
        return (self.code ^ other.code) != ATTRIBUTE_MASK

    def __str__(self) -> str:
        return format_piece(self)


def create_piece_set() -> List[Piece]:
    """
    Create the full set of sixteen Quarto pieces.

    Pieces are produced in canonical order: height, then color, then shape,
    then top, with the first value of each attribute first.

    Returns:
        List of all pieces
    """
    return [
        Piece(height, color, shape, top)
        for height, color, shape, top in product(Height, Color, Shape, Top)
    ]


# The canonical catalog, built once
ALL_PIECES: List[Piece] = create_piece_set()


def piece_from_id(piece_id: str) -> Piece:
    """
    Parse a piece identifier produced by Piece.id.

    Args:
        piece_id: Identifier such as 'short-dark-round-hollow'

    Returns:
        The matching piece

    Raises:
        ValueError: If the identifier does not name a piece
    """
    parts = piece_id.split("-")
    if len(parts) != 4:
        raise ValueError(f"Invalid piece id: {piece_id!r}")
    try:
        return Piece(Height(parts[0]), Color(parts[1]), Shape(parts[2]), Top(parts[3]))
    except ValueError as e:
        raise ValueError(f"Invalid piece id: {piece_id!r}") from e


def format_piece(piece: Piece) -> str:
    """
    Format a piece for logging, e.g. 'Tall/Solid/Dark/Square'.

    Args:
        piece: Piece to format

    Returns:
        Human-readable label
    """
    return "/".join(
        ATTRIBUTE_LABELS[value]
        for value in (piece.height, piece.top, piece.color, piece.shape)
    )


def share_common_attribute(pieces: Iterable[Piece]) -> bool:
    """
    Check whether a group of pieces shares at least one attribute value.

    Args:
        pieces: Pieces to compare

    Returns:
        True if every piece has the same value for some attribute
    """
    all_set = ATTRIBUTE_MASK
    all_clear = ATTRIBUTE_MASK
    for piece in pieces:
        all_set &= piece.code
        all_clear &= ~piece.code
    return bool(all_set or all_clear)
