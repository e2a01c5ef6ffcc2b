from .footprint import (
    board_outline,
    key_cell,
    truncation_box,
    validate_board,
)
