"""Board description dataclasses — parameters and layout entries."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum

from kbcad.config.hardware import hw
from kbcad.errors import InvalidConfiguration


class Tag(str, Enum):
    """Capability tags that request auxiliary geometry."""

    STABILIZERS = "stabilizers"
    BEEFY = "beefy"


class Direction(str, Enum):
    """Side of the offset that a truncation removes."""

    LEFT = "left"
    RIGHT = "right"


# ── Layout entries ─────────────────────────────────────────────────


@dataclass(frozen=True)
class KeyEntry:
    """A key footprint.

    ``x``/``y`` are the top-left offset in key units measured from the
    board's top-left corner.  ``size`` is the width along the row; rows
    are always one unit tall.
    """

    x: float
    y: float
    size: float = 1.0
    tags: frozenset[Tag] = frozenset()

    @property
    def row(self) -> int:
        return int(self.y // 1)

    @property
    def has_stabilizers(self) -> bool:
        return Tag.STABILIZERS in self.tags


@dataclass(frozen=True)
class Truncation:
    """Removes row ``row`` from ``offset`` towards ``direction``.

    ``direction`` is a ``Direction`` when recognised.  Anything else is
    kept as the raw string so the generators can report and skip it.
    """

    offset: float
    row: int
    direction: Direction | str


@dataclass(frozen=True)
class MountingHole:
    """Screw position in key units (from the top-left corner)."""

    x: float
    y: float
    tags: frozenset[Tag] = frozenset()

    @property
    def beefy(self) -> bool:
        return Tag.BEEFY in self.tags


@dataclass(frozen=True)
class UndersideOpening:
    """Rectangular access opening through the case floor, in key units."""

    x: float
    y: float
    width: float
    length: float
    screw_holes: bool = False


# ── Scalar parameters ──────────────────────────────────────────────


_DEFAULTS = hw.board_defaults()


@dataclass(frozen=True)
class BoardConfig:
    """Physical board parameters.  All lengths are in millimetres."""

    plate_thickness: float = _DEFAULTS["plate_thickness"]
    key_unit_size: float = _DEFAULTS["key_unit_size"]
    key_hole_size: float = _DEFAULTS["key_hole_size"]
    cutout_width: float = _DEFAULTS["cutout_width"]
    cutout_height: float = _DEFAULTS["cutout_height"]
    include_cutouts: bool = _DEFAULTS["include_cutouts"]
    mounting_hole_diameter: float = _DEFAULTS["mounting_hole_diameter"]
    cavity_height: float = _DEFAULTS["cavity_height"]
    case_floor_thickness: float = _DEFAULTS["case_floor_thickness"]
    case_wall_thickness: float = _DEFAULTS["case_wall_thickness"]

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, data: dict) -> BoardConfig:
        """Build a config from a flat option dict.

        Values are coerced to ``float``; ``include_cutouts`` must be a ``bool``.
        ``mounting_hole_radius`` is accepted and doubled into a diameter.
        Unknown keys raise ``InvalidConfiguration``.
        """
        data = dict(data)
        if "mounting_hole_radius" in data:
            radius = data.pop("mounting_hole_radius")
            if "mounting_hole_diameter" not in data and radius is not None:
                data["mounting_hole_diameter"] = 2 * float(radius)

        known = cls.field_names()
        unknown = sorted(k for k in data if k not in known)
        if unknown:
            raise InvalidConfiguration(
                "Unknown board options", [f"'{k}'" for k in unknown],
            )

        kwargs: dict[str, float | bool] = {}
        for key, value in data.items():
            if value is None:
                continue
            if key == "include_cutouts":
                if not isinstance(value, bool):
                    raise InvalidConfiguration(
                        f"Option '{key}' must be true or false, got {value!r}"
                    )
                kwargs[key] = value
                continue
            try:
                kwargs[key] = float(value)
            except (TypeError, ValueError):
                raise InvalidConfiguration(
                    f"Option '{key}' must be a number, got {value!r}"
                ) from None
        return cls(**kwargs)
