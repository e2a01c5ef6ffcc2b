"""
FastAPI web server — generate plate / case OpenSCAD from a board description.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from kbcad.board import board_from_dict
from kbcad.config.hardware import hw
from kbcad.csg import primitives, render_scad
from kbcad.errors import InvalidConfiguration
from kbcad.generators import generate_case, generate_plate

log = logging.getLogger(__name__)

# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="kbcad")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Models ─────────────────────────────────────────────────────────

class BoardRequest(BaseModel):
    options: dict[str, Any] = {}
    keymap: list[Any] | None = None
    layout: list[Any] | None = None
    stabilize_at: float | None = None
    truncations: list[Any] = []
    mounting_holes: list[Any] = []
    underside_openings: list[dict[str, Any]] = []
    width: float | None = None
    height: float | None = None
    strict: bool = False


class ScadResponse(BaseModel):
    scad: str
    width_mm: float
    height_mm: float
    primitive_count: int


# ── Helpers ────────────────────────────────────────────────────────

def _render(req: BoardRequest, generate, title: str) -> ScadResponse:
    data = req.model_dump(exclude_none=True)
    try:
        board = board_from_dict(data)
    except InvalidConfiguration as e:
        raise HTTPException(status_code=422, detail=str(e))
    tree = generate(board)
    log.info("Generated %s for %r", title, board)
    return ScadResponse(
        scad=render_scad(tree, title),
        width_mm=board.width_in_mm,
        height_mm=board.height_in_mm,
        primitive_count=len(primitives(tree)),
    )


# ── Routes ─────────────────────────────────────────────────────────

@app.get("/api/defaults")
def get_defaults():
    """Default board parameters and the hardware constants in use."""
    return {
        "options": hw.board_defaults(),
        "plate": hw.plate,
        "stabilizer": hw.stabilizer,
        "standoff": hw.standoff,
        "stabilize_at": hw.stabilize_at,
    }


@app.post("/api/plate", response_model=ScadResponse)
def plate(req: BoardRequest):
    return _render(req, generate_plate, "plate")


@app.post("/api/case", response_model=ScadResponse)
def case(req: BoardRequest):
    return _render(req, generate_case, "case")


# ── Entry point ────────────────────────────────────────────────────

def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("kbcad.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
