"""Board entry parsing — convert raw lists/dicts/JSON into layout entries.

Entries may be written the way the original layout scripts wrote them::

    [[0, 0], 1]                      # key at (0, 0), 1u wide
    [[4.5, 4], 2.75, "stabilizers"]  # tagged key
    [[7, 0], "right"]                # truncation
    [2, 4, "beefy"]                  # mounting hole

or as dicts with named fields.  Tags and directions may carry a leading
colon (``":beefy"``).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from kbcad.errors import InvalidConfiguration
from .models import (
    Direction, KeyEntry, MountingHole, Tag, Truncation, UndersideOpening,
)


def _symbol(value) -> str:
    return str(value).strip().lstrip(":").lower()


def parse_tags(values: Iterable) -> frozenset[Tag]:
    """Parse tag names into ``Tag`` members.  Unknown names are rejected."""
    tags: set[Tag] = set()
    for v in values:
        if isinstance(v, Tag):
            tags.add(v)
            continue
        name = _symbol(v)
        try:
            tags.add(Tag(name))
        except ValueError:
            raise InvalidConfiguration(
                f"Unknown tag '{v}'", [f"expected one of {[t.value for t in Tag]}"],
            ) from None
    return frozenset(tags)


def parse_direction(value) -> Direction | str:
    """Return a ``Direction`` or, when unrecognised, the raw name."""
    if isinstance(value, Direction):
        return value
    name = _symbol(value)
    try:
        return Direction(name)
    except ValueError:
        return name


def _number(value, what: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"{what}: expected a number, got {value!r}") from None


def _field(raw: dict, name: str, what: str):
    try:
        return raw[name]
    except KeyError:
        raise InvalidConfiguration(f"{what}: missing '{name}' in {raw!r}") from None


def _pair(value, what: str) -> tuple[float, float]:
    try:
        a, b = value
        return float(a), float(b)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"{what}: expected a [x, y] pair, got {value!r}") from None


def parse_key(raw) -> KeyEntry:
    if isinstance(raw, KeyEntry):
        return raw
    if isinstance(raw, dict):
        size = raw.get("size", raw.get("w", 1.0))
        return KeyEntry(
            x=_number(_field(raw, "x", "Key entry"), "Key entry"),
            y=_number(_field(raw, "y", "Key entry"), "Key entry"),
            size=_number(size, "Key entry"),
            tags=parse_tags(raw.get("tags", ())),
        )
    if not isinstance(raw, (list, tuple)) or len(raw) < 2:
        raise InvalidConfiguration(f"Key entry: expected [[x, y], size, *tags], got {raw!r}")
    x, y = _pair(raw[0], "Key entry")
    return KeyEntry(x=x, y=y, size=_number(raw[1], "Key entry"), tags=parse_tags(raw[2:]))


def parse_truncation(raw) -> Truncation:
    if isinstance(raw, Truncation):
        return raw
    if isinstance(raw, dict):
        return Truncation(
            offset=_number(_field(raw, "offset", "Truncation entry"), "Truncation entry"),
            row=int(_number(_field(raw, "row", "Truncation entry"), "Truncation entry")),
            direction=parse_direction(_field(raw, "direction", "Truncation entry")),
        )
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise InvalidConfiguration(
            f"Truncation entry: expected [[offset, row], direction], got {raw!r}"
        )
    offset, row = _pair(raw[0], "Truncation entry")
    return Truncation(offset=offset, row=int(row), direction=parse_direction(raw[1]))


def parse_mounting_hole(raw) -> MountingHole:
    if isinstance(raw, MountingHole):
        return raw
    if isinstance(raw, dict):
        return MountingHole(
            x=_number(_field(raw, "x", "Mounting hole"), "Mounting hole"),
            y=_number(_field(raw, "y", "Mounting hole"), "Mounting hole"),
            tags=parse_tags(raw.get("tags", ())),
        )
    if not isinstance(raw, (list, tuple)) or not raw:
        raise InvalidConfiguration(f"Mounting hole: expected [x, y, *tags], got {raw!r}")
    if isinstance(raw[0], (list, tuple)):
        x, y = _pair(raw[0], "Mounting hole")
        return MountingHole(x=x, y=y, tags=parse_tags(raw[1:]))
    if len(raw) < 2:
        raise InvalidConfiguration(f"Mounting hole: expected [x, y, *tags], got {raw!r}")
    x, y = _pair(raw[:2], "Mounting hole")
    return MountingHole(x=x, y=y, tags=parse_tags(raw[2:]))


def parse_underside_opening(raw) -> UndersideOpening:
    if isinstance(raw, UndersideOpening):
        return raw
    try:
        return UndersideOpening(
            x=float(raw["x"]),
            y=float(raw["y"]),
            width=float(raw["width"]),
            length=float(raw["length"]),
            screw_holes=bool(raw.get("screw_holes", False)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidConfiguration(f"Underside opening {raw!r}: {e}") from None


# ── Board files ────────────────────────────────────────────────────

_BOARD_FILE_KEYS = {
    "options", "keymap", "layout", "stabilize_at", "truncations",
    "mounting_holes", "underside_openings", "width", "height", "strict",
}


def board_from_dict(data: dict):
    """Build a ``Board`` from a board-description dict.

    Format::

        {
          "options": {"plate_thickness": 1.5, "cavity_height": 7},
          "layout": [["Esc", "1", ...], ...],   # or "keymap": [[[0, 0], 1], ...]
          "stabilize_at": 2,
          "truncations": [[[7, 0], "right"]],
          "mounting_holes": [[1, 0.1], [2, 4, "beefy"]],
          "underside_openings": [{"x": 3, "y": 3.5, "width": 1, "length": 1.25}],
          "width": 15, "height": 5, "strict": false
        }
    """
    from .board import Board
    from kbcad.layout.kle import keymap_from_kle

    unknown = sorted(k for k in data if k not in _BOARD_FILE_KEYS)
    if unknown:
        raise InvalidConfiguration("Unknown board file keys", [f"'{k}'" for k in unknown])
    if "keymap" in data and "layout" in data:
        raise InvalidConfiguration("Board file must give either 'keymap' or 'layout', not both")

    if "layout" in data:
        kwargs = {}
        if data.get("stabilize_at") is not None:
            kwargs["stabilize_at"] = float(data["stabilize_at"])
        keymap = keymap_from_kle(data["layout"], **kwargs)
    else:
        keymap = data.get("keymap") or []

    return Board(
        options=data.get("options") or {},
        keymap=keymap,
        truncations=data.get("truncations") or [],
        mounting_holes=data.get("mounting_holes") or [],
        underside_openings=data.get("underside_openings") or [],
        width=data.get("width"),
        height=data.get("height"),
        strict=bool(data.get("strict", False)),
    )


def load_board(path: str | Path):
    """Read a board-description JSON file (see ``board_from_dict``)."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"{path}: invalid JSON ({e})") from None
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"{path}: expected a JSON object")
    return board_from_dict(data)
