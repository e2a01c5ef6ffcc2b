"""Tests for the kbcad command line."""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from kbcad.app import main
from tests.board_fixtures import corner_board_data


class TestCli(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)
        self.board_path = self.tmpdir / "corner.json"
        self.board_path.write_text(json.dumps(corner_board_data()), encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()

    def _run(self, *argv) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_plate_to_explicit_path(self):
        target = self.tmpdir / "plate.scad"
        code, out, _ = self._run("plate", str(self.board_path), "-o", str(target))
        self.assertEqual(code, 0)
        self.assertIn(str(target), out)
        scad = target.read_text(encoding="utf-8")
        self.assertIn("// plate", scad)
        self.assertIn("difference() {", scad)

    def test_case_default_output_name(self):
        code, _, _ = self._run("case", str(self.board_path))
        self.assertEqual(code, 0)
        scad = (self.tmpdir / "corner_case.scad").read_text(encoding="utf-8")
        self.assertEqual(scad.count("// standoff outer"), 4)

    def test_check_ok(self):
        code, out, _ = self._run("check", str(self.board_path))
        self.assertEqual(code, 0)
        self.assertIn("OK", out)

    def test_check_reports_problems(self):
        data = corner_board_data()
        data["keymap"] = [[[0, 0], 1], [[0.5, 0], 1]]
        self.board_path.write_text(json.dumps(data), encoding="utf-8")
        code, out, _ = self._run("check", str(self.board_path))
        self.assertEqual(code, 1)
        self.assertIn("overlap", out)

    def test_invalid_board_exits_2(self):
        self.board_path.write_text(json.dumps({"options": {"bogus": 1}}), encoding="utf-8")
        code, _, err = self._run("plate", str(self.board_path))
        self.assertEqual(code, 2)
        self.assertIn("bogus", err)

    def test_missing_file_exits_2(self):
        code, _, err = self._run("check", str(self.tmpdir / "nope.json"))
        self.assertEqual(code, 2)
        self.assertIn("Cannot read board", err)


if __name__ == "__main__":
    unittest.main()
