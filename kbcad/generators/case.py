"""
Case shell generation.

Cross-section (bottom to top):
  0 – floor            solid floor, except underside openings
  floor – case_height  cavity inside walls of ``case_wall_thickness``

Truncations cut the same stepped silhouette through the full case
height as they do through the plate.  Cutting a hollow box leaves the
cavity open along the cut, so thin walls are synthesised to close it:

* one vertical wall per truncation, along its cut edge;
* one step wall wherever neighbouring rows are cut at different
  offsets, lying in whichever row keeps material along the step.
"""

from __future__ import annotations

import logging

from kbcad.board import Board, Direction, MountingHole, Truncation, UndersideOpening
from kbcad.config.hardware import hw
from kbcad.csg import Node, cube, cylinder, difference, translate, union
from .plate import Plate

log = logging.getLogger(__name__)


class Case:
    """Builds the case CSG tree for a ``Board``."""

    def __init__(self, board: Board, plate: Plate | None = None) -> None:
        self.board = board
        self.plate = plate or Plate(board)

    # ── shell ───────────────────────────────────────────────────────

    def shell(self) -> Node:
        """Hollow box with solid floor and open top, minus truncations."""
        b = self.board
        wall = b.case_wall_thickness
        floor = b.case_floor_thickness
        height = b.case_height

        outer = self.plate.bare_plate(thickness=height, label="case outer")
        cavity = translate(
            wall, wall, floor,
            self.plate.bare_plate(
                width=b.width_in_mm - 2 * wall,
                height=b.height_in_mm - 2 * wall,
                thickness=height - floor,
                label="case cavity",
            ),
        )
        openings = [n for o in b.underside_openings for n in self.underside_opening(o)]
        return difference(
            outer, cavity, *self.plate.apply_truncations(height), *openings,
            label="case shell",
        )

    def underside_opening(self, opening: UndersideOpening) -> list[Node]:
        """Cut through the floor, plus optional screw bores beside it."""
        b = self.board
        u = b.key_unit_size
        eps = hw.epsilon
        floor = b.case_floor_thickness
        x0, y_top = b.grid_to_mm(opening.x, opening.y)
        w, l = opening.width * u, opening.length * u

        cuts: list[Node] = [translate(
            x0, y_top - l, -eps,
            cube(w, l, floor + 2 * eps),
            label=f"underside opening ({opening.x:g}, {opening.y:g})",
        )]
        if opening.screw_holes:
            d = b.mounting_hole_diameter
            cy = y_top - l / 2
            for sx in (x0 - d, x0 + w + d):
                cuts.append(translate(
                    sx, cy, -eps,
                    cylinder(floor + 2 * eps, d, segments=hw.mounting_hole_segments),
                    label="underside opening screw hole",
                ))
        return cuts

    # ── standoffs ───────────────────────────────────────────────────

    def standoff(self, hole: MountingHole) -> Node:
        """Hollow post under a mounting hole.

        Beefy posts are frustums with a wider base.
        """
        b = self.board
        d = b.mounting_hole_diameter
        height = b.case_height
        eps = hw.epsilon
        segments = hw.standoff_segments
        top_d = d + hw.standoff_margin

        if hole.beefy:
            outer = cylinder(
                height, d1=d + hw.beefy_base_margin, d2=top_d,
                segments=segments, label="standoff outer",
            )
        else:
            outer = cylinder(height, top_d, segments=segments, label="standoff outer")
        bore = translate(0, 0, -eps, cylinder(
            height + 2 * eps, d, segments=hw.mounting_hole_segments, label="standoff bore",
        ))

        x, y = b.grid_to_mm(hole.x, hole.y)
        return translate(
            x, y, 0, difference(outer, bore),
            label=f"standoff ({hole.x:g}, {hole.y:g})" + (" beefy" if hole.beefy else ""),
        )

    def standoffs(self) -> list[Node]:
        return [self.standoff(h) for h in self.board.mounting_holes]

    # ── truncation walls ────────────────────────────────────────────

    def truncation_walls(self) -> list[Node]:
        """Walls that re-close the cavity along every truncation cut.

        Unknown directions are skipped here; ``shell`` reports them.
        """
        truncations = self.board.truncations

        walls: list[Node] = []
        for direction in (Direction.RIGHT, Direction.LEFT):
            # Already sorted by row on the board.
            sequence = [t for t in truncations if t.direction == direction]
            walls += self._walls_for(sequence, direction)
        return walls

    def _walls_for(self, sequence: list[Truncation], direction: Direction) -> list[Node]:
        b = self.board
        u = b.key_unit_size
        by_row = {t.row: t for t in sequence}

        walls: list[Node] = []
        last = len(sequence) - 1
        for i, t in enumerate(sequence):
            # A missing neighbour counts as cut at the board edge.
            prev_offset = by_row[t.row - 1].offset if t.row - 1 in by_row else b.width
            next_offset = by_row[t.row + 1].offset if t.row + 1 in by_row else b.width
            bottom = b.row_origin_mm(t.row)
            top = bottom + u

            if i > 0 and prev_offset > t.offset:
                walls.append(self._step_wall(t, prev_offset, top, above=True))
            if i < last and next_offset > t.offset:
                walls.append(self._step_wall(t, next_offset, bottom, above=False))
            walls.append(self._cut_wall(t, bottom))
        return walls

    def _cut_wall(self, t: Truncation, bottom: float) -> Node:
        """Vertical wall along the cut edge, inside the remaining material."""
        b = self.board
        wall = b.case_wall_thickness
        x = b.key_unit_size * t.offset
        if t.direction == Direction.RIGHT:
            x -= wall
        return translate(
            x, bottom, 0,
            cube(wall, b.key_unit_size, b.case_height),
            label=f"truncation wall {t.direction.value} row {t.row}",
        )

    def _step_wall(self, t: Truncation, other_offset: float, boundary: float, *, above: bool) -> Node:
        """Wall along a row boundary where the cut steps from ``t.offset`` to *other_offset*.

        Right cuts keep material left of the offset, so the exposed edge
        belongs to the neighbouring row.  Left cuts keep material right
        of it, so the exposed edge belongs to the current row.  Each
        wall is one wall thickness longer than the step so it overlaps
        the vertical cut wall it meets.
        """
        b = self.board
        u = b.key_unit_size
        wall = b.case_wall_thickness

        if t.direction == Direction.RIGHT:
            x0 = max(0.0, u * t.offset - wall)
            x1 = u * other_offset
            y = boundary if above else boundary - wall
        else:
            x0 = u * t.offset
            x1 = min(b.width_in_mm, u * other_offset + wall)
            y = boundary - wall if above else boundary

        side = "above" if above else "below"
        return translate(
            x0, y, 0,
            cube(x1 - x0, wall, b.case_height),
            label=f"truncation step {t.direction.value} row {t.row} {side}",
        )

    # ── assembly ────────────────────────────────────────────────────

    def to_csg(self) -> Node:
        standoffs = self.standoffs()
        walls = self.truncation_walls()
        log.debug("Case: %d standoffs, %d truncation walls", len(standoffs), len(walls))
        body = union(self.shell(), *standoffs, label="case body")
        return union(body, *walls, label="case")
