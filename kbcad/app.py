import argparse
import logging
import sys
from pathlib import Path

from kbcad.board import load_board
from kbcad.csg import compile_scad, save_scad
from kbcad.errors import InvalidConfiguration
from kbcad.generators import generate_case, generate_plate
from kbcad.logging_config import setup_logging

_GENERATORS = {"plate": generate_plate, "case": generate_case}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="kbcad", description="Keyboard layout → plate / case OpenSCAD")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    for name in _GENERATORS:
        g = sub.add_parser(name, help=f"Generate the {name} as OpenSCAD from a board JSON file")
        g.add_argument("board", help="Path to board.json")
        g.add_argument("-o", "--out", default=None, help=f"Output .scad path (default: <board>_{name}.scad)")
        g.add_argument("--stl", action="store_true", help="Also render an STL with OpenSCAD")

    c = sub.add_parser("check", help="Validate a board JSON file")
    c.add_argument("board", help="Path to board.json")

    sv = sub.add_parser("serve", help="Start the web API")
    sv.add_argument("--host", default="127.0.0.1", help="Host to bind")
    sv.add_argument("--port", type=int, default=8000, help="Port to bind")

    return p


def _generate(args) -> int:
    board_path = Path(args.board)
    board = load_board(board_path)
    tree = _GENERATORS[args.cmd](board)

    out = Path(args.out) if args.out else board_path.with_name(f"{board_path.stem}_{args.cmd}.scad")
    save_scad(tree, out, title=f"{args.cmd} for {board_path.name}")
    print(f"Wrote {out}")

    if args.stl:
        ok, message, stl_path = compile_scad(out)
        if not ok:
            print(f"STL export failed: {message}", file=sys.stderr)
            return 1
        print(f"Wrote {stl_path}")
    return 0


def _check(args) -> int:
    from kbcad.geometry import validate_board

    board = load_board(args.board)
    problems = validate_board(board)
    for problem in problems:
        print(f"  - {problem}")
    if problems:
        print(f"{len(problems)} problem(s) in {args.board}")
        return 1
    print(f"{args.board}: OK ({board!r})")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        if args.cmd in _GENERATORS:
            return _generate(args)
        if args.cmd == "check":
            return _check(args)
    except InvalidConfiguration as e:
        print(f"Invalid board: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Cannot read board: {e}", file=sys.stderr)
        return 2

    if args.cmd == "serve":
        from kbcad.web.server import main as serve_main
        serve_main(host=args.host, port=args.port)
        return 0

    return 2
