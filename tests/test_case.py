"""Tests for the case generator.

Uses the corner board (1.5 × 1.5u, four corner screws) for the shell
and standoff checks and small hand-built boards for wall synthesis.
"""

from __future__ import annotations

import unittest

from kbcad.board import Board
from kbcad.csg import Cylinder, Union, find
from kbcad.generators import Case, generate_case
from tests.board_fixtures import U, make_corner_board, make_split_board


class TestCaseShell(unittest.TestCase):

    def test_shell_height_is_cavity_plus_floor(self):
        tree = generate_case(make_corner_board())
        (outer, origin), = find(tree, "case outer")
        self.assertEqual(origin, (0.0, 0.0, 0.0))
        self.assertAlmostEqual(outer.size[0], 1.5 * U)
        self.assertAlmostEqual(outer.size[1], 1.5 * U)
        self.assertEqual(outer.size[2], 9.0)

    def test_cavity_dimensions(self):
        board = Board({"case_wall_thickness": 2.0}, width=15, height=5)
        (cavity, origin), = find(generate_case(board), "case cavity")
        self.assertEqual(origin, (2.0, 2.0, 1.0))
        self.assertAlmostEqual(cavity.size[0], 15 * U - 4)
        self.assertAlmostEqual(cavity.size[1], 5 * U - 4)
        self.assertAlmostEqual(cavity.size[2], 8.0)

    def test_no_truncations_no_walls(self):
        case = Case(make_corner_board())
        self.assertEqual(case.truncation_walls(), [])
        self.assertEqual(find(case.to_csg(), "truncation"), [])

    def test_assembly_layers(self):
        tree = generate_case(make_split_board())
        self.assertIsInstance(tree, Union)
        self.assertEqual(tree.label, "case")
        body = tree.children[0]
        self.assertEqual(body.label, "case body")
        self.assertEqual(body.children[0].label, "case shell")
        # 2 cut walls + 1 step wall
        self.assertEqual(len(tree.children), 4)

    def test_truncations_cut_full_case_height(self):
        tree = generate_case(make_split_board())
        shell, = [n for n, _ in find(tree, "case shell")]
        bars = [n for n in shell.subtracted if n.label.startswith("truncation")]
        self.assertEqual(len(bars), 2)
        for bar in bars:
            self.assertAlmostEqual(bar.child.size[2], 9.0 + 0.2)


class TestStandoffs(unittest.TestCase):

    def test_one_standoff_per_mounting_hole(self):
        tree = generate_case(make_corner_board())
        outers = find(tree, "standoff outer")
        bores = find(tree, "standoff bore")
        self.assertEqual(len(outers), 4)
        self.assertEqual(len(bores), 4)

        a, b = round(0.1 * U, 3), round(1.4 * U, 3)
        positions = sorted((round(o[0], 3), round(o[1], 3)) for _, o in outers)
        self.assertEqual(positions, [(a, a), (a, b), (b, a), (b, b)])

    def test_standoff_dimensions(self):
        tree = generate_case(make_corner_board())
        (outer, _), = find(tree, "standoff outer")[:1]
        self.assertIsInstance(outer, Cylinder)
        self.assertFalse(outer.is_frustum)
        self.assertAlmostEqual(outer.d1, 3.0 + 2.3)
        self.assertEqual(outer.height, 9.0)
        self.assertEqual(outer.segments, 16)

        (bore, (_, _, z)), = find(tree, "standoff bore")[:1]
        self.assertEqual(bore.d1, 3.0)
        self.assertEqual(bore.segments, 8)
        self.assertAlmostEqual(z, -0.1)
        self.assertAlmostEqual(bore.height, 9.2)

    def test_beefy_standoff_is_a_frustum(self):
        board = Board(width=2, height=2, mounting_holes=[[1, 1, "beefy"]])
        standoff = Case(board).standoff(board.mounting_holes[0])
        self.assertTrue(standoff.label.endswith("beefy"))
        outer = standoff.child.base
        self.assertTrue(outer.is_frustum)
        self.assertAlmostEqual(outer.d1, 3.0 + 5.5)
        self.assertAlmostEqual(outer.d2, 3.0 + 2.3)


class TestTruncationWalls(unittest.TestCase):

    def test_rows_processed_in_ascending_order(self):
        board = Board(width=3, height=3, truncations=[[[1, 2], ":left"], [[0, 0], ":left"]])
        labels = [w.label for w in Case(board).truncation_walls()]
        self.assertEqual(labels, [
            "truncation step left row 0 below",
            "truncation wall left row 0",
            "truncation step left row 2 above",
            "truncation wall left row 2",
        ])

    def test_right_cut_walls(self):
        walls = Case(make_split_board()).truncation_walls()
        self.assertEqual([w.label for w in walls], [
            "truncation wall right row 0",
            "truncation step right row 1 above",
            "truncation wall right row 1",
        ])
        wall0, step, wall1 = walls

        # Just inside the cut edge, spanning the row and the case height.
        self.assertAlmostEqual(wall0.offset[0], 3 * U - 1.2)
        self.assertAlmostEqual(wall0.offset[1], 2 * U)
        self.assertAlmostEqual(wall0.child.size[0], 1.2)
        self.assertAlmostEqual(wall0.child.size[1], U)
        self.assertEqual(wall0.child.size[2], 9.0)
        self.assertAlmostEqual(wall1.offset[0], 2 * U - 1.2)

        # Row 1 is cut further in than row 0: the step lies in row 0.
        self.assertAlmostEqual(step.offset[0], 2 * U - 1.2)
        self.assertAlmostEqual(step.offset[1], 2 * U)
        self.assertAlmostEqual(step.child.size[0], U + 1.2)
        self.assertAlmostEqual(step.child.size[1], 1.2)

    def test_left_cut_wall_sits_at_offset(self):
        board = Board(width=4, height=1, truncations=[[[1.5, 0], "left"]])
        wall, = Case(board).truncation_walls()
        self.assertAlmostEqual(wall.offset[0], 1.5 * U)
        self.assertEqual(wall.offset[1], 0.0)

    def test_left_cut_step_walls(self):
        board = Board(width=4, height=2, truncations=[[[1, 0], "left"], [[2, 1], "left"]])
        walls = Case(board).truncation_walls()
        self.assertEqual([w.label for w in walls], [
            "truncation step left row 0 below",
            "truncation wall left row 0",
            "truncation wall left row 1",
        ])
        step = walls[0]

        # Row 1 is cut further in: the step lies in row 0, along its bottom edge.
        self.assertAlmostEqual(step.offset[0], U)
        self.assertAlmostEqual(step.offset[1], U)
        self.assertEqual(step.offset[2], 0.0)
        self.assertAlmostEqual(step.child.size[0], U + 1.2)
        self.assertAlmostEqual(step.child.size[1], 1.2)
        self.assertEqual(step.child.size[2], 9.0)

        self.assertAlmostEqual(walls[2].offset[0], 2 * U)
        self.assertEqual(walls[2].offset[1], 0.0)

    def test_untruncated_row_counts_as_cut_at_board_edge(self):
        board = Board(width=4, height=3, truncations=[[[3, 0], "right"], [[3, 2], "right"]])
        walls = Case(board).truncation_walls()
        self.assertEqual([w.label for w in walls], [
            "truncation step right row 0 below",
            "truncation wall right row 0",
            "truncation step right row 2 above",
            "truncation wall right row 2",
        ])
        below, _, above, _ = walls

        # Both steps run from the cut wall to the board's right edge.
        for step in (below, above):
            self.assertAlmostEqual(step.offset[0], 3 * U - 1.2)
            self.assertAlmostEqual(step.child.size[0], U + 1.2)
            self.assertAlmostEqual(step.child.size[1], 1.2)
        # Row 0 bottom edge is at 2u; the step sits in row 1 just below it.
        self.assertAlmostEqual(below.offset[1], 2 * U - 1.2)
        # Row 2 top edge is at 1u; the step sits in row 1 just above it.
        self.assertAlmostEqual(above.offset[1], U)

    def test_unknown_direction_contributes_nothing(self):
        skewed = Board(width=3, height=2, truncations=[[[1, 0], "up"], [[2, 1], "right"]])
        plain = Board(width=3, height=2, truncations=[[[2, 1], "right"]])
        with self.assertLogs("kbcad.generators.plate", "WARNING") as logs:
            tree = generate_case(skewed)
        self.assertEqual(len(logs.output), 1)
        self.assertIn("up", logs.output[0])
        self.assertEqual(tree, generate_case(plain))


class TestUndersideOpenings(unittest.TestCase):

    def test_opening_cuts_through_floor(self):
        board = Board(
            width=4, height=4,
            underside_openings=[{"x": 1, "y": 1, "width": 2, "length": 1.5}],
        )
        (cut, origin), = find(generate_case(board), "underside opening (")
        self.assertAlmostEqual(cut.offset[0], U)
        self.assertAlmostEqual(cut.offset[1], 4 * U - U - 1.5 * U)
        self.assertAlmostEqual(cut.offset[2], -0.1)
        self.assertAlmostEqual(cut.child.size[0], 2 * U)
        self.assertAlmostEqual(cut.child.size[2], 1.0 + 0.2)
        self.assertEqual(find(generate_case(board), "underside opening screw"), [])

    def test_screw_holes_flank_the_opening(self):
        board = Board(
            width=4, height=4,
            underside_openings=[{"x": 1, "y": 1, "width": 2, "length": 1, "screw_holes": True}],
        )
        screws = Case(board).underside_opening(board.underside_openings[0])[1:]
        self.assertEqual(len(screws), 2)
        xs = sorted(s.offset[0] for s in screws)
        self.assertAlmostEqual(xs[0], U - 3.0)
        self.assertAlmostEqual(xs[1], 3 * U + 3.0)
        for s in screws:
            self.assertAlmostEqual(s.offset[1], 4 * U - 1.5 * U)


if __name__ == "__main__":
    unittest.main()
