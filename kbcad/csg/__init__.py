"""CSG scene graph — node types, builders, traversal and OpenSCAD output."""

from .nodes import (
    Cube, Cylinder, Translate, Union, Difference, Node,
    cube, cylinder, translate, union, difference,
    children, walk, primitives, find, bounds,
)
from .scad import render_scad, save_scad
from .compiler import check_scad, compile_scad, find_openscad, render_stl

__all__ = [
    "Cube", "Cylinder", "Translate", "Union", "Difference", "Node",
    "cube", "cylinder", "translate", "union", "difference",
    "children", "walk", "primitives", "find", "bounds",
    "render_scad", "save_scad",
    "check_scad", "compile_scad", "find_openscad", "render_stl",
]
