"""
keyboard-layout-editor.com import — raw-data rows into ``KeyEntry`` lists.

The raw data is a list of rows.  Each row mixes key labels (strings)
with property dicts that modify the cursor or the next key::

    [
      {"name": "my board"},                 # optional metadata, skipped
      ["Esc", "1", "2"],
      [{"w": 1.5}, "Tab", "Q"],
      [{"y": 0.25, "x": 0.5}, "A", "S"]
    ]

``x`` / ``y`` shift the cursor, ``w`` sets the width of the next key
only.  Each row starts one unit below the previous one at ``x = 0``.
"""

from __future__ import annotations

import json
import logging

from kbcad.board.models import KeyEntry, Tag
from kbcad.config.hardware import hw
from kbcad.errors import InvalidConfiguration

log = logging.getLogger(__name__)

_IGNORED_PROPS = {"r", "rx", "ry"}


def keymap_from_kle(data, stabilize_at: float | None = None) -> list[KeyEntry]:
    """Convert keyboard-layout-editor raw data into key entries.

    Parameters
    ----------
    data : list or str
        The parsed raw data, or its JSON text.
    stabilize_at : float, optional
        Keys at least this many units wide are tagged ``stabilizers``.
        Defaults to the hardware config value (2u).
    """
    if stabilize_at is None:
        stabilize_at = hw.stabilize_at
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise InvalidConfiguration(f"Layout is not valid JSON ({e})") from None
    if not isinstance(data, list):
        raise InvalidConfiguration("Layout must be a list of rows")

    keys: list[KeyEntry] = []
    y = 0.0
    rotated = False
    first_row = True
    for index, row in enumerate(data):
        if isinstance(row, dict):
            if index == 0:
                continue
            raise InvalidConfiguration(f"Layout row {index}: metadata is only allowed first")
        if not isinstance(row, list):
            raise InvalidConfiguration(f"Layout row {index}: expected a list, got {type(row).__name__}")

        if not first_row:
            y += 1.0
        first_row = False
        x = 0.0
        w = 1.0
        for item in row:
            if isinstance(item, dict):
                x += float(item.get("x", 0.0))
                y += float(item.get("y", 0.0))
                if "w" in item:
                    w = float(item["w"])
                if _IGNORED_PROPS & item.keys():
                    rotated = True
                continue
            if not isinstance(item, str):
                raise InvalidConfiguration(
                    f"Layout row {index}: unexpected item {item!r}"
                )
            tags = frozenset({Tag.STABILIZERS}) if w >= stabilize_at else frozenset()
            keys.append(KeyEntry(x=x, y=y, size=w, tags=tags))
            x += w
            w = 1.0

    if rotated:
        log.debug("Layout contains rotation properties; rotation is ignored")
    log.debug(
        "Imported %d keys (%d stabilized) from layout",
        len(keys), sum(1 for k in keys if k.has_stabilizers),
    )
    return keys
