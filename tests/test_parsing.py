"""Tests for board entry parsing and board-file loading."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from kbcad.board import (
    Direction, Tag, board_from_dict, load_board, parse_key,
    parse_mounting_hole, parse_truncation, parse_underside_opening,
)
from kbcad.errors import InvalidConfiguration
from tests.board_fixtures import corner_board_data


class TestEntryParsing(unittest.TestCase):

    def test_key_from_list(self):
        key = parse_key([[4.5, 4], 2.75, ":stabilizers"])
        self.assertEqual((key.x, key.y, key.size), (4.5, 4.0, 2.75))
        self.assertTrue(key.has_stabilizers)
        self.assertEqual(key.row, 4)

    def test_key_from_dict(self):
        key = parse_key({"x": 1, "y": 0.5, "w": 1.25, "tags": ["stabilizers"]})
        self.assertEqual((key.x, key.y, key.size), (1.0, 0.5, 1.25))
        self.assertEqual(key.tags, frozenset({Tag.STABILIZERS}))
        self.assertEqual(key.row, 0)

    def test_key_defaults_to_one_unit(self):
        self.assertEqual(parse_key({"x": 0, "y": 0}).size, 1.0)

    def test_unknown_tag_is_rejected(self):
        with self.assertRaises(InvalidConfiguration):
            parse_key([[0, 0], 1, "wobbly"])

    def test_malformed_key_is_rejected(self):
        for raw in ([[0, 0]], [0, 1], [[0, 0], "big"], {"y": 0}):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidConfiguration):
                    parse_key(raw)

    def test_truncation_directions(self):
        self.assertEqual(parse_truncation([[7, 0], ":right"]).direction, Direction.RIGHT)
        self.assertEqual(parse_truncation([[7, 0], "LEFT"]).direction, Direction.LEFT)
        self.assertEqual(parse_truncation([[7, 0], ":up"]).direction, "up")

    def test_truncation_from_dict(self):
        t = parse_truncation({"offset": 2.5, "row": 3, "direction": "left"})
        self.assertEqual((t.offset, t.row, t.direction), (2.5, 3, Direction.LEFT))

    def test_mounting_hole_forms(self):
        flat = parse_mounting_hole([2, 4, ":beefy"])
        nested = parse_mounting_hole([[2, 4], "beefy"])
        self.assertEqual(flat, nested)
        self.assertTrue(flat.beefy)
        self.assertFalse(parse_mounting_hole([1, 0.1]).beefy)

    def test_mounting_hole_needs_two_coordinates(self):
        with self.assertRaises(InvalidConfiguration):
            parse_mounting_hole([1])

    def test_underside_opening(self):
        o = parse_underside_opening({"x": 3, "y": 3.5, "width": 1, "length": 1.25, "screw_holes": True})
        self.assertEqual((o.x, o.y, o.width, o.length), (3.0, 3.5, 1.0, 1.25))
        self.assertTrue(o.screw_holes)
        with self.assertRaises(InvalidConfiguration):
            parse_underside_opening({"x": 3, "y": 3.5})


class TestBoardFiles(unittest.TestCase):

    def test_board_from_dict(self):
        board = board_from_dict(corner_board_data())
        self.assertEqual((board.width, board.height), (1.5, 1.5))
        self.assertEqual(len(board.mounting_holes), 4)
        self.assertEqual(board.case_height, 9.0)

    def test_board_from_layout(self):
        board = board_from_dict({"layout": [["Esc", "1"], [{"w": 2}, "Shift"]]})
        self.assertEqual(len(board.keymap), 3)
        self.assertTrue(board.keymap[2].has_stabilizers)
        self.assertEqual((board.width, board.height), (2.0, 2.0))

    def test_stabilize_at_is_forwarded(self):
        board = board_from_dict({"layout": [[{"w": 2}, "Shift"]], "stabilize_at": 3})
        self.assertFalse(board.keymap[0].has_stabilizers)

    def test_keymap_and_layout_are_exclusive(self):
        with self.assertRaises(InvalidConfiguration):
            board_from_dict({"keymap": [[[0, 0], 1]], "layout": [["A"]]})

    def test_unknown_file_key_is_rejected(self):
        with self.assertRaises(InvalidConfiguration) as ctx:
            board_from_dict({"width": 1, "height": 1, "colour": "red"})
        self.assertEqual(ctx.exception.problems, ["'colour'"])

    def test_load_board(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "board.json"
            path.write_text(json.dumps(corner_board_data()), encoding="utf-8")
            board = load_board(path)
        self.assertEqual(len(board.keymap), 1)

    def test_load_board_rejects_bad_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "board.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(InvalidConfiguration):
                load_board(path)
            path.write_text("[1, 2]", encoding="utf-8")
            with self.assertRaises(InvalidConfiguration):
                load_board(path)


if __name__ == "__main__":
    unittest.main()
