"""kbcad — CSG plates and cases for mechanical keyboards."""

from kbcad.board import Board, BoardConfig, load_board
from kbcad.errors import InvalidConfiguration
from kbcad.generators import Case, Plate, generate_case, generate_plate

__version__ = "0.1.0"
