"""
OpenSCAD compiler wrapper — runs the openscad CLI for syntax checks and STL export.

Nothing here raises when OpenSCAD is missing or fails; every call returns
an ``ok`` flag plus the compiler's message.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from pathlib import Path

from .nodes import Node
from .scad import save_scad

log = logging.getLogger(__name__)

CHECK_TIMEOUT_S = 30
RENDER_TIMEOUT_S = 600


def find_openscad() -> str | None:
    """Locate the openscad binary."""
    path = shutil.which("openscad")
    if path:
        return path
    candidates = [
        r"C:\Program Files\OpenSCAD\openscad.exe",
        r"C:\Program Files (x86)\OpenSCAD\openscad.exe",
        "/Applications/OpenSCAD.app/Contents/MacOS/OpenSCAD",
    ]
    for candidate in candidates:
        if Path(candidate).exists():
            return candidate
    return None


def _run(args: list[str], timeout: int) -> tuple[bool, str]:
    exe = find_openscad()
    if not exe:
        return False, "OpenSCAD not found on PATH."
    try:
        result = subprocess.run(
            [exe, *args], capture_output=True, text=True, timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return False, f"OpenSCAD timed out ({timeout}s)."
    except OSError as e:
        return False, str(e)
    stderr = result.stderr.strip()
    if result.returncode == 0:
        return True, stderr or "OK"
    return False, stderr or f"OpenSCAD exited with code {result.returncode}"


def check_scad(scad_path: Path) -> tuple[bool, str]:
    """Syntax-check an OpenSCAD file without rendering geometry."""
    null = "NUL" if sys.platform == "win32" else "/dev/null"
    # A CSG-tree export evaluates the script but skips the CGAL render.
    return _run(["-o", null, "--export-format", "csg", str(scad_path)], CHECK_TIMEOUT_S)


def compile_scad(scad_path: Path, stl_path: Path | None = None) -> tuple[bool, str, Path | None]:
    """Render an OpenSCAD file to STL.  Returns ``(ok, message, stl_path)``."""
    if stl_path is None:
        stl_path = scad_path.with_suffix(".stl")
    ok, message = _run(["-o", str(stl_path), str(scad_path)], RENDER_TIMEOUT_S)
    if ok and not stl_path.exists():
        ok, message = False, f"OpenSCAD reported success but {stl_path} is missing"
    if not ok:
        log.warning("STL export of %s failed: %s", scad_path, message)
        return False, message, None
    return True, message, stl_path


def render_stl(node: Node, stl_path: Path, title: str = "") -> tuple[bool, str, Path | None]:
    """Serialise *node* next to *stl_path* and render it."""
    scad_path = save_scad(node, stl_path.with_suffix(".scad"), title)
    return compile_scad(scad_path, stl_path)
