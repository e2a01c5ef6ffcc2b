"""
OpenSCAD serialisation of a CSG scene graph.

Only ``cube``, ``cylinder``, ``translate``, ``union`` and ``difference``
are emitted.  Node labels become ``//`` comments above the statement so
the generated file stays readable when opened in the OpenSCAD editor.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .nodes import Cube, Cylinder, Difference, Node, Translate, Union, primitives

log = logging.getLogger(__name__)

_INDENT = "    "


def _num(v: float) -> str:
    s = f"{v:.3f}"
    return "0.000" if s == "-0.000" else s


def _vec(v) -> str:
    return "[" + ", ".join(_num(c) for c in v) + "]"


def _node_lines(node: Node, indent: str) -> list[str]:
    lines: list[str] = []
    label = getattr(node, "label", "")
    if label:
        lines.append(f"{indent}// {label}")

    if isinstance(node, Cube):
        lines.append(f"{indent}cube({_vec(node.size)});")
    elif isinstance(node, Cylinder):
        if node.is_frustum:
            lines.append(
                f"{indent}cylinder(h = {_num(node.height)}, "
                f"r1 = {_num(node.d1 / 2)}, r2 = {_num(node.d2 / 2)}, "
                f"$fn = {node.segments});"
            )
        else:
            lines.append(
                f"{indent}cylinder(h = {_num(node.height)}, "
                f"r = {_num(node.d1 / 2)}, $fn = {node.segments});"
            )
    elif isinstance(node, Translate):
        lines.append(f"{indent}translate({_vec(node.offset)})")
        lines += _node_lines(node.child, indent + _INDENT)
    elif isinstance(node, Union):
        lines.append(f"{indent}union() {{")
        for child in node.children:
            lines += _node_lines(child, indent + _INDENT)
        lines.append(f"{indent}}}")
    elif isinstance(node, Difference):
        lines.append(f"{indent}difference() {{")
        lines += _node_lines(node.base, indent + _INDENT)
        for sub in node.subtracted:
            lines += _node_lines(sub, indent + _INDENT)
        lines.append(f"{indent}}}")
    else:
        raise TypeError(f"Not a CSG node: {type(node).__name__}")
    return lines


def render_scad(node: Node, title: str = "") -> str:
    """Return OpenSCAD source for *node*."""
    lines = ["// Auto-generated by kbcad"]
    if title:
        lines.append(f"// {title}")
    lines.append("")
    lines += _node_lines(node, "")
    return "\n".join(lines) + "\n"


def save_scad(node: Node, path: str | Path, title: str = "") -> Path:
    """Write *node* to *path* as OpenSCAD source and return the path."""
    path = Path(path)
    path.write_text(render_scad(node, title), encoding="utf-8")
    log.info("Wrote %s (%d primitives)", path, len(primitives(node)))
    return path
