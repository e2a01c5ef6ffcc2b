"""Board description — parameters, layout entries, parsing and the Board model."""

from .models import (
    BoardConfig, Direction, KeyEntry, MountingHole, Tag, Truncation,
    UndersideOpening,
)
from .parsing import (
    board_from_dict, load_board, parse_key, parse_mounting_hole,
    parse_truncation, parse_underside_opening,
)
from .board import Board

__all__ = [
    # Models
    "BoardConfig", "Direction", "KeyEntry", "MountingHole", "Tag",
    "Truncation", "UndersideOpening", "Board",
    # Parsing
    "board_from_dict", "load_board", "parse_key", "parse_mounting_hole",
    "parse_truncation", "parse_underside_opening",
]
