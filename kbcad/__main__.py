"""
kbcad — entry point.

Usage:
    python -m kbcad plate board.json -o plate.scad
    python -m kbcad case board.json --stl
    python -m kbcad check board.json
    python -m kbcad serve --port 3000
"""

import sys

from kbcad.app import main

if __name__ == "__main__":
    sys.exit(main())
