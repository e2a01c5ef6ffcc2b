"""
Hardware configuration — single source of truth for switch and case constants.

Loads switch_hardware.json once and exposes typed accessors.  The values
are tuned for Cherry MX-compatible switches and stabilizers.
"""

from __future__ import annotations
import json
from pathlib import Path
from functools import lru_cache


_CONFIG_PATH = Path(__file__).resolve().parent / "switch_hardware.json"


@lru_cache(maxsize=1)
def _load() -> dict:
    return json.loads(_CONFIG_PATH.read_text(encoding="utf-8"))


class _HW:
    """Typed accessor for hardware config."""

    # ── raw section accessors ───────────────────────────────────────
    @property
    def defaults(self) -> dict:
        return _load()["defaults"]

    @property
    def plate(self) -> dict:
        return _load()["plate"]

    @property
    def stabilizer(self) -> dict:
        return _load()["stabilizer"]

    @property
    def standoff(self) -> dict:
        return _load()["standoff"]

    # ── plate ───────────────────────────────────────────────────────
    @property
    def clip_thickness(self) -> float:
        return _load()["plate"]["clip_thickness_mm"]

    @property
    def clip_relief(self) -> float:
        return _load()["plate"]["clip_relief_mm"]

    @property
    def mounting_hole_segments(self) -> int:
        return _load()["plate"]["mounting_hole_segments"]

    @property
    def epsilon(self) -> float:
        return _load()["plate"]["coplanar_epsilon_mm"]

    # ── stabilizer ──────────────────────────────────────────────────
    @property
    def stabilizer_spacing(self) -> float:
        return _load()["stabilizer"]["slot_spacing_mm"]

    @property
    def stabilizer_slot_width(self) -> float:
        return _load()["stabilizer"]["slot_width_mm"]

    @property
    def stabilizer_slot_height(self) -> float:
        return _load()["stabilizer"]["slot_height_mm"]

    # ── standoff ────────────────────────────────────────────────────
    @property
    def standoff_margin(self) -> float:
        return _load()["standoff"]["wall_margin_mm"]

    @property
    def beefy_base_margin(self) -> float:
        return _load()["standoff"]["beefy_base_margin_mm"]

    @property
    def standoff_segments(self) -> int:
        return _load()["standoff"]["segments"]

    # ── layout import ───────────────────────────────────────────────
    @property
    def stabilize_at(self) -> float:
        return _load()["layout"]["stabilize_at_units"]

    def board_defaults(self) -> dict[str, float | bool]:
        """Default board parameters keyed by ``BoardConfig`` field name."""
        d = _load()["defaults"]
        return {
            "plate_thickness": d["plate_thickness_mm"],
            "key_unit_size": d["key_unit_size_mm"],
            "key_hole_size": d["key_hole_size_mm"],
            "cutout_width": d["cutout_width_mm"],
            "cutout_height": d["cutout_height_mm"],
            "include_cutouts": d["include_cutouts"],
            "mounting_hole_diameter": d["mounting_hole_diameter_mm"],
            "cavity_height": d["cavity_height_mm"],
            "case_floor_thickness": d["case_floor_thickness_mm"],
            "case_wall_thickness": d["case_wall_thickness_mm"],
        }


hw = _HW()
