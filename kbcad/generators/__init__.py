"""Plate and case generators — turn a ``Board`` into CSG trees."""

from kbcad.board import Board
from kbcad.csg import Node
from .plate import Plate
from .case import Case


def generate_plate(board: Board) -> Node:
    return Plate(board).to_csg()


def generate_case(board: Board) -> Node:
    return Case(board).to_csg()


__all__ = ["Plate", "Case", "generate_plate", "generate_case"]
