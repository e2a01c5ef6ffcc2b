"""
Board model — parameters plus keymap, truncations and mounting holes.

The generators only ever read a ``Board``.  The collections can be
replaced wholesale through their setters but are never edited in place
(they are stored as tuples of frozen entries).
"""

from __future__ import annotations

import logging
from collections import defaultdict
from functools import cached_property
from typing import Iterable

from kbcad.errors import InvalidConfiguration
from .models import (
    BoardConfig, KeyEntry, MountingHole, Truncation, UndersideOpening,
)
from .parsing import (
    parse_key, parse_mounting_hole, parse_truncation, parse_underside_opening,
)

log = logging.getLogger(__name__)

_COLLECTION_KEYS = (
    "keymap", "truncations", "mounting_holes", "underside_openings",
    "width", "height", "strict",
)


class Board:
    """A keyboard described in key units.

    Parameters
    ----------
    options : BoardConfig or dict, optional
        Scalar parameters.  A dict is passed through
        ``BoardConfig.from_dict`` (unknown keys are rejected).
    keymap, truncations, mounting_holes, underside_openings : iterable
        Raw or parsed entries (see ``kbcad.board.parsing``).
    width, height : float, optional
        Board size in key units.  When omitted they are derived from the
        keymap: ``height`` is the highest row index plus one and
        ``width`` is the largest per-row sum of key sizes.
    strict : bool
        Run ``kbcad.geometry.validate_board`` and raise on any problem.
    """

    def __init__(
        self,
        options: BoardConfig | dict | None = None,
        *,
        keymap: Iterable = (),
        truncations: Iterable = (),
        mounting_holes: Iterable = (),
        underside_openings: Iterable = (),
        width: float | None = None,
        height: float | None = None,
        strict: bool = False,
    ) -> None:
        if isinstance(options, BoardConfig):
            self.config = options
        else:
            self.config = BoardConfig.from_dict(options or {})

        # Frozen at construction, like the board size below.
        self._case_height = self.config.cavity_height + self.config.case_floor_thickness
        if self._case_height <= self.config.case_floor_thickness:
            raise InvalidConfiguration(
                f"'cavity_height' must be > 0, got {self.config.cavity_height:g}"
            )

        self.keymap = keymap
        self.truncations = truncations
        self.mounting_holes = mounting_holes
        self.underside_openings = underside_openings

        self._width = self._resolve_dimension("width", width, self._derive_width)
        self._height = self._resolve_dimension("height", height, self._derive_height)

        if strict:
            from kbcad.geometry import validate_board
            problems = validate_board(self)
            if problems:
                raise InvalidConfiguration("Board failed validation", problems)

    @classmethod
    def from_options(cls, **options) -> Board:
        """Build from one flat option set mixing scalars and collections."""
        kwargs = {k: options.pop(k) for k in _COLLECTION_KEYS if k in options}
        for key in ("keymap", "truncations", "mounting_holes", "underside_openings"):
            if kwargs.get(key) is None:
                kwargs.pop(key, None)
        return cls(options, **kwargs)

    # ── collections ─────────────────────────────────────────────────

    @property
    def keymap(self) -> tuple[KeyEntry, ...]:
        return self._keymap

    @keymap.setter
    def keymap(self, entries: Iterable) -> None:
        self._keymap = tuple(parse_key(e) for e in (entries or ()))

    @property
    def truncations(self) -> tuple[Truncation, ...]:
        return self._truncations

    @truncations.setter
    def truncations(self, entries: Iterable) -> None:
        parsed = [parse_truncation(e) for e in (entries or ())]
        # Wall synthesis looks up neighbours by row, so keep them ordered.
        self._truncations = tuple(sorted(parsed, key=lambda t: t.row))

    @property
    def mounting_holes(self) -> tuple[MountingHole, ...]:
        return self._mounting_holes

    @mounting_holes.setter
    def mounting_holes(self, entries: Iterable) -> None:
        self._mounting_holes = tuple(parse_mounting_hole(e) for e in (entries or ()))

    @property
    def underside_openings(self) -> tuple[UndersideOpening, ...]:
        return self._underside_openings

    @underside_openings.setter
    def underside_openings(self, entries: Iterable) -> None:
        self._underside_openings = tuple(
            parse_underside_opening(e) for e in (entries or ())
        )

    # ── size ────────────────────────────────────────────────────────

    def _resolve_dimension(self, name: str, given, derive) -> float:
        if given is None:
            if not self._keymap:
                raise InvalidConfiguration(
                    f"must provide '{name}' or a non-empty keymap to derive it from"
                )
            value = derive()
            log.debug("Derived board %s = %.3f units from keymap", name, value)
        else:
            value = float(given)
        if value <= 0:
            raise InvalidConfiguration(f"'{name}' must be > 0, got {value}")
        return value

    def _derive_width(self) -> float:
        # Sums sizes per row rather than tracking the right-most edge, so
        # rows with gaps or leading offsets are under-counted.
        rows: dict[int, float] = defaultdict(float)
        for key in self._keymap:
            rows[key.row] += key.size
        return max(rows.values())

    def _derive_height(self) -> float:
        return float(max(key.row for key in self._keymap) + 1)

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @cached_property
    def width_in_mm(self) -> float:
        return self._width * self.config.key_unit_size

    @cached_property
    def height_in_mm(self) -> float:
        return self._height * self.config.key_unit_size

    # ── parameters ──────────────────────────────────────────────────

    @property
    def key_unit_size(self) -> float:
        return self.config.key_unit_size

    @property
    def key_hole_size(self) -> float:
        return self.config.key_hole_size

    @property
    def plate_thickness(self) -> float:
        return self.config.plate_thickness

    @property
    def cutout_width(self) -> float:
        return self.config.cutout_width

    @property
    def cutout_height(self) -> float:
        return self.config.cutout_height

    @property
    def include_cutouts(self) -> bool:
        return self.config.include_cutouts

    @property
    def mounting_hole_diameter(self) -> float:
        return self.config.mounting_hole_diameter

    @property
    def cavity_height(self) -> float:
        return self.config.cavity_height

    @property
    def case_floor_thickness(self) -> float:
        return self.config.case_floor_thickness

    @property
    def case_wall_thickness(self) -> float:
        return self.config.case_wall_thickness

    @property
    def case_height(self) -> float:
        """Total case height: cavity plus floor."""
        return self._case_height

    # ── coordinates ─────────────────────────────────────────────────

    def grid_to_mm(self, x: float, y: float) -> tuple[float, float]:
        """Convert a top-left-origin grid point to model-space mm.

        Model space has its origin at the bottom-left corner with +Y
        pointing up, so row 0 ends up at the top of the board.
        """
        u = self.config.key_unit_size
        return x * u, self.height_in_mm - y * u

    def row_origin_mm(self, row: float) -> float:
        """Model-space Y of the bottom edge of ``row``."""
        return self.height_in_mm - (row + 1) * self.config.key_unit_size

    def __repr__(self) -> str:
        return (
            f"Board({self._width:g}x{self._height:g}u, keys={len(self._keymap)}, "
            f"truncations={len(self._truncations)}, "
            f"mounting_holes={len(self._mounting_holes)})"
        )
