"""
Switch plate generation.

The plate is a single ``difference()``: the bare slab minus every switch
cutout, stabilizer slot, mounting hole and truncation bar.

Model space has its origin at the board's bottom-left corner with +Y up,
while layouts count rows downward from the top.  A key at grid
``(x, y)`` therefore gets its cell origin at
``(x · unit, (height − 1 − y) · unit)``.
"""

from __future__ import annotations

import logging

from kbcad.board import Board, Direction, KeyEntry, MountingHole, Truncation
from kbcad.config.hardware import hw
from kbcad.csg import Node, cube, cylinder, difference, translate, union

log = logging.getLogger(__name__)


def warn_unknown_direction(truncation: Truncation) -> None:
    log.warning(
        "Unknown truncation direction %r at row %d (offset %g); skipping",
        truncation.direction, truncation.row, truncation.offset,
    )


class Plate:
    """Builds the plate CSG tree for a ``Board``.

    The building blocks (``bare_plate``, ``apply_truncations``) accept
    overrides so the case generator can reuse them at case height.
    """

    def __init__(self, board: Board) -> None:
        self.board = board

    # ── slab ────────────────────────────────────────────────────────

    def bare_plate(
        self,
        width: float | None = None,
        height: float | None = None,
        thickness: float | None = None,
        *,
        label: str = "bare plate",
    ) -> Node:
        b = self.board
        return cube(
            b.width_in_mm if width is None else width,
            b.height_in_mm if height is None else height,
            b.plate_thickness if thickness is None else thickness,
            label=label,
        )

    # ── switch cutouts ──────────────────────────────────────────────

    def switchhole(self) -> Node:
        """Cutout for one switch, anchored at the hole's lower-left corner."""
        b = self.board
        size = b.key_hole_size
        t = b.plate_thickness
        parts: list[Node] = [cube(size, size, t, label="switch hole")]

        relief = self._clip_relief(size, size)
        if relief is not None:
            parts.append(relief)

        if b.include_cutouts:
            cw, ch = b.cutout_width, b.cutout_height
            parts.append(translate(
                -cw, 1, 0, cube(size + 2 * cw, ch, t), label="clip notch bottom",
            ))
            parts.append(translate(
                -cw, size - cw - ch, 0, cube(size + 2 * cw, ch, t), label="clip notch top",
            ))

        return parts[0] if len(parts) == 1 else union(*parts)

    def _clip_relief(self, w: float, h: float) -> Node | None:
        """Widened underside pocket for plates thicker than the switch clip.

        Leaves ``clip_thickness`` of material at the top so the clips
        still snap under the plate.
        """
        t = self.board.plate_thickness
        clip = hw.clip_thickness
        if t <= clip:
            return None
        r = hw.clip_relief
        eps = hw.epsilon
        return translate(
            -r, -r, -eps,
            cube(w + 2 * r, h + 2 * r, t - clip + eps),
            label="clip relief",
        )

    def stabilizer_holes(self, size: float) -> Node:
        """Both stabilizer slots for a key *size* units wide, in cell coordinates."""
        b = self.board
        u = b.key_unit_size
        t = b.plate_thickness
        sw, sh = hw.stabilizer_slot_width, hw.stabilizer_slot_height
        cx, cy = u * size / 2, u / 2

        slots: list[Node] = []
        for sx in (cx - hw.stabilizer_spacing / 2, cx + hw.stabilizer_spacing / 2):
            slot_parts: list[Node] = [cube(sw, sh, t)]
            relief = self._clip_relief(sw, sh)
            if relief is not None:
                slot_parts.append(relief)
            body = slot_parts[0] if len(slot_parts) == 1 else union(*slot_parts)
            slots.append(translate(sx - sw / 2, cy - sh / 2, 0, body))
        return union(*slots, label="stabilizer")

    def key_hole(self, key: KeyEntry) -> Node:
        b = self.board
        u = b.key_unit_size
        hole = b.key_hole_size
        # Centre the switch cutout inside the key's cell.
        parts: list[Node] = [translate(
            (u * key.size - hole) / 2, (u - hole) / 2, 0, self.switchhole(),
        )]
        if key.has_stabilizers:
            parts.append(self.stabilizer_holes(key.size))
        body = parts[0] if len(parts) == 1 else union(*parts)
        return translate(
            key.x * u, b.row_origin_mm(key.y), 0, body,
            label=f"key ({key.x:g}, {key.y:g}) {key.size:g}u",
        )

    def hole_matrix(self, keys=None) -> list[Node]:
        keys = self.board.keymap if keys is None else keys
        return [self.key_hole(k) for k in keys]

    # ── mounting holes ──────────────────────────────────────────────

    def mounting_hole(self, hole: MountingHole) -> Node:
        b = self.board
        eps = hw.epsilon
        x, y = b.grid_to_mm(hole.x, hole.y)
        return translate(
            x, y, -eps,
            cylinder(
                b.plate_thickness + 2 * eps, b.mounting_hole_diameter,
                segments=hw.mounting_hole_segments,
            ),
            label=f"mounting hole ({hole.x:g}, {hole.y:g})",
        )

    def mounting_hole_matrix(self) -> list[Node]:
        return [self.mounting_hole(h) for h in self.board.mounting_holes]

    # ── truncations ─────────────────────────────────────────────────

    def apply_truncations(self, thickness: float | None = None) -> list[Node]:
        """Bars that cut each truncated row out of a slab of *thickness*.

        Bars overshoot the slab by ``hw.epsilon`` above and below so the
        boolean never sees coplanar faces.
        """
        b = self.board
        thickness = b.plate_thickness if thickness is None else thickness
        u = b.key_unit_size
        eps = hw.epsilon

        bars: list[Node] = []
        for t in b.truncations:
            y0 = b.row_origin_mm(t.row)
            if t.direction == Direction.RIGHT:
                bars.append(translate(
                    u * t.offset, y0, -eps,
                    cube(b.width_in_mm, u, thickness + 2 * eps),
                    label=f"truncation right row {t.row}",
                ))
            elif t.direction == Direction.LEFT:
                bars.append(translate(
                    0, y0, -eps,
                    cube(u * t.offset, u, thickness + 2 * eps),
                    label=f"truncation left row {t.row}",
                ))
            else:
                warn_unknown_direction(t)
        return bars

    # ── assembly ────────────────────────────────────────────────────

    def to_csg(self) -> Node:
        holes = self.hole_matrix()
        mounts = self.mounting_hole_matrix()
        bars = self.apply_truncations()
        log.debug(
            "Plate: %d key cutouts, %d mounting holes, %d truncation bars",
            len(holes), len(mounts), len(bars),
        )
        return difference(self.bare_plate(), *holes, *mounts, *bars, label="plate")
