"""
CSG scene graph — primitives, boolean operations and translation.

All values are millimetres.  Cubes are anchored at their minimum corner
and cylinders stand on the XY plane, centred on the origin (OpenSCAD
conventions), so a tree can be serialised without any re-interpretation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

Vec3 = tuple[float, float, float]


# ── Node types ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Cube:
    size: Vec3
    label: str = ""


@dataclass(frozen=True)
class Cylinder:
    """A cylinder or frustum.  ``d1`` is the bottom diameter."""

    height: float
    d1: float
    d2: float
    segments: int = 16
    label: str = ""

    @property
    def is_frustum(self) -> bool:
        return self.d1 != self.d2


@dataclass(frozen=True)
class Translate:
    offset: Vec3
    child: Node
    label: str = ""


@dataclass(frozen=True)
class Union:
    children: tuple[Node, ...]
    label: str = ""


@dataclass(frozen=True)
class Difference:
    """``base`` minus every node in ``subtracted``."""

    base: Node
    subtracted: tuple[Node, ...]
    label: str = ""


Node = Cube | Cylinder | Translate | Union | Difference


# ── Builders ───────────────────────────────────────────────────────


def cube(w: float, h: float, d: float, *, label: str = "") -> Cube:
    return Cube((float(w), float(h), float(d)), label)


def cylinder(
    h: float,
    d: float | None = None,
    *,
    d1: float | None = None,
    d2: float | None = None,
    segments: int = 16,
    label: str = "",
) -> Cylinder:
    """Build a cylinder from ``d`` or a frustum from ``d1``/``d2``."""
    if d is not None:
        d1 = d2 = d
    if d1 is None or d2 is None:
        raise ValueError("cylinder needs either d or both d1 and d2")
    return Cylinder(float(h), float(d1), float(d2), int(segments), label)


def translate(dx: float, dy: float, dz: float, child: Node, *, label: str = "") -> Translate:
    return Translate((float(dx), float(dy), float(dz)), child, label)


def union(*children: Node, label: str = "") -> Union:
    return Union(tuple(children), label)


def difference(base: Node, *subtracted: Node, label: str = "") -> Difference:
    return Difference(base, tuple(subtracted), label)


# ── Traversal ──────────────────────────────────────────────────────


def children(node: Node) -> tuple[Node, ...]:
    if isinstance(node, Translate):
        return (node.child,)
    if isinstance(node, Union):
        return node.children
    if isinstance(node, Difference):
        return (node.base, *node.subtracted)
    return ()


def walk(node: Node, origin: Vec3 = (0.0, 0.0, 0.0)) -> Iterator[tuple[Node, Vec3]]:
    """Yield every node depth-first with the offset accumulated above it."""
    yield node, origin
    if isinstance(node, Translate):
        ox, oy, oz = origin
        dx, dy, dz = node.offset
        yield from walk(node.child, (ox + dx, oy + dy, oz + dz))
        return
    for child in children(node):
        yield from walk(child, origin)


def primitives(node: Node) -> list[tuple[Cube | Cylinder, Vec3]]:
    """All primitives in the tree with their absolute positions."""
    return [(n, o) for n, o in walk(node) if isinstance(n, (Cube, Cylinder))]


def find(node: Node, label: str) -> list[tuple[Node, Vec3]]:
    """Nodes whose label starts with *label*, with their absolute offsets."""
    return [(n, o) for n, o in walk(node) if n.label.startswith(label)]


def bounds(node: Node, origin: Vec3 = (0.0, 0.0, 0.0)) -> tuple[Vec3, Vec3] | None:
    """Axis-aligned ``(min, max)`` corners of the material in *node*.

    A difference is bounded by its base.  Returns ``None`` for an empty
    union.
    """
    ox, oy, oz = origin
    if isinstance(node, Cube):
        w, h, d = node.size
        return (ox, oy, oz), (ox + w, oy + h, oz + d)
    if isinstance(node, Cylinder):
        r = max(node.d1, node.d2) / 2
        return (ox - r, oy - r, oz), (ox + r, oy + r, oz + node.height)
    if isinstance(node, Translate):
        dx, dy, dz = node.offset
        return bounds(node.child, (ox + dx, oy + dy, oz + dz))
    if isinstance(node, Difference):
        return bounds(node.base, origin)

    boxes = [b for b in (bounds(c, origin) for c in node.children) if b is not None]
    if not boxes:
        return None
    lo = tuple(min(b[0][i] for b in boxes) for i in range(3))
    hi = tuple(max(b[1][i] for b in boxes) for i in range(3))
    return lo, hi
