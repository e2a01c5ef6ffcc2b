"""
2-D footprint geometry for boards, built on Shapely.

All coordinates in mm, model space (origin bottom-left, +Y up).  Used
for strict validation and for inspecting the stepped outline that the
truncations produce.
"""

from __future__ import annotations

from itertools import combinations

from shapely.geometry import Point, Polygon, box
from shapely.ops import unary_union

from kbcad.board import Board, Direction, KeyEntry, Truncation

_AREA_TOL = 1e-6   # mm², below this an overlap is considered touching
_EDGE_TOL = 1e-6   # mm, slack when testing containment against the outline


def truncation_box(board: Board, t: Truncation) -> Polygon | None:
    """Footprint removed by one truncation, or ``None`` if unrecognised."""
    u = board.key_unit_size
    y0 = board.row_origin_mm(t.row)
    if t.direction == Direction.RIGHT:
        return box(u * t.offset, y0, board.width_in_mm, y0 + u)
    if t.direction == Direction.LEFT:
        return box(0.0, y0, u * t.offset, y0 + u)
    return None


def board_outline(board: Board) -> Polygon:
    """The board silhouette: full rectangle minus the truncated rows."""
    outline = box(0.0, 0.0, board.width_in_mm, board.height_in_mm)
    removed = [p for p in (truncation_box(board, t) for t in board.truncations) if p is not None]
    if removed:
        outline = outline.difference(unary_union(removed))
    return outline


def key_cell(board: Board, key: KeyEntry) -> Polygon:
    """The key's footprint cell (``size`` × 1 unit)."""
    u = board.key_unit_size
    y0 = board.row_origin_mm(key.y)
    return box(key.x * u, y0, (key.x + key.size) * u, y0 + u)


def validate_board(board: Board) -> list[str]:
    """Check a board for geometry the generators would get wrong.

    Returns error messages (empty = valid).
    """
    errors: list[str] = []

    # ── Parameters ──
    if board.key_hole_size >= board.key_unit_size:
        errors.append(
            f"key_hole_size ({board.key_hole_size:g} mm) must be smaller than "
            f"key_unit_size ({board.key_unit_size:g} mm)"
        )
    wall2 = 2 * board.case_wall_thickness
    if wall2 >= board.width_in_mm or wall2 >= board.height_in_mm:
        errors.append(
            f"case_wall_thickness ({board.case_wall_thickness:g} mm) leaves no cavity "
            f"in a {board.width_in_mm:.2f} × {board.height_in_mm:.2f} mm board"
        )

    # ── Truncations ──
    for t in board.truncations:
        if t.direction not in (Direction.LEFT, Direction.RIGHT):
            errors.append(f"Truncation at row {t.row}: unknown direction '{t.direction}'")

    outline = board_outline(board)
    slack = outline.buffer(_EDGE_TOL)

    # ── Keys ──
    cells = [(k, key_cell(board, k)) for k in board.keymap]
    for k, cell in cells:
        if not slack.contains(cell):
            errors.append(f"Key at ({k.x:g}, {k.y:g}) lies outside the board outline")
    for (ka, ca), (kb, cb) in combinations(cells, 2):
        if ca.intersection(cb).area > _AREA_TOL:
            errors.append(f"Keys at ({ka.x:g}, {ka.y:g}) and ({kb.x:g}, {kb.y:g}) overlap")

    # ── Mounting holes ──
    for h in board.mounting_holes:
        x, y = board.grid_to_mm(h.x, h.y)
        if not slack.contains(Point(x, y)):
            errors.append(f"Mounting hole at ({h.x:g}, {h.y:g}) lies outside the board outline")

    return errors
