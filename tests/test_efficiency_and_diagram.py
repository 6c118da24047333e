"""Efficiency estimation, diagram scene and SVG rendering tests."""

import pytest

from nesting.corner_nester import pack
from nesting.diagram import build_scene, canvas_scale
from nesting.efficiency import (
    format_efficiency,
    material_efficiency,
    sheet_efficiency,
    used_area,
    waste_area,
)
from nesting.models import Sheet
from reports.svg_export import render_svg, sheet_to_svg

from helpers import piece


def _sheet(board, *pieces):
    return pack(list(pieces), board).sheets["MDF"][0]


# ============================================================
# Efficiency
# ============================================================

def test_efficiency_uses_usable_area(board):
    sheet = _sheet(board, piece("A", 1000, 500), piece("B", 1000, 500))

    assert used_area(sheet) == 1_000_000
    assert sheet_efficiency(sheet) == pytest.approx(1_000_000 / (2400 * 1180) * 100)
    assert format_efficiency(sheet_efficiency(sheet)) == "35.3%"
    assert waste_area(sheet) == 2400 * 1180 - 1_000_000


def test_efficiency_of_empty_sheet_is_zero(board):
    assert sheet_efficiency(Sheet(index=1, material_key="MDF", stock=board)) == 0.0


def test_overflow_sheet_is_capped_at_hundred(board):
    sheet = _sheet(board, piece("HUGE", 3000, 1500))

    assert sheet.has_overflow
    assert sheet_efficiency(sheet) == 100.0
    assert waste_area(sheet) == 0.0


def test_material_efficiency_spans_sheets(board):
    sheets = pack([piece(f"P{i}", 200, 200) for i in range(120)], board).sheets["MDF"]

    expected = 120 * 200 * 200 / (3 * 2400 * 1180) * 100
    assert material_efficiency(sheets) == pytest.approx(expected)


# ============================================================
# Diagram scene
# ============================================================

def test_scene_scale_keeps_aspect_ratio(board):
    sheet = _sheet(board, piece("A", 1000, 500, name="Side"))
    scene = build_scene(sheet, canvas_width=1000, canvas_height=1000)

    scale = 1000 / 2440
    assert scene.scale == pytest.approx(scale)
    assert scene.sheet_width == pytest.approx(1000)
    assert scene.sheet_height == pytest.approx(1220 * scale)

    rect = scene.rects[0]
    assert rect.x == pytest.approx(20 * scale)
    assert rect.y == pytest.approx(20 * scale)
    assert rect.width == pytest.approx(1000 * scale)
    assert rect.height == pytest.approx(500 * scale)
    assert rect.label == "Side"
    assert rect.size_label == "1000x500"


def test_canvas_scale_picks_limiting_axis():
    assert canvas_scale(2000, 500, 800, 400) == pytest.approx(0.4)
    assert canvas_scale(500, 2000, 800, 400) == pytest.approx(0.2)


def test_scene_marks_rotated_and_overflow(board):
    result = pack([piece("LONG", 1000, 2000), piece("BIG", 3000, 500)], board)
    rects = [r for s in result.all_sheets() for r in build_scene(s).rects]
    flags = {r.label: (r.rotated, r.overflow) for r in rects}

    assert flags == {"BIG": (False, True), "LONG": (True, False)}
    long_rect = next(r for r in rects if r.label == "LONG")
    assert long_rect.size_label == "1000x2000"


# ============================================================
# SVG
# ============================================================

def test_svg_contains_every_piece_and_title(board):
    sheet = _sheet(board, piece("A", 1000, 500), piece("B", 1000, 500))
    svg = sheet_to_svg(sheet)

    assert svg.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert '<svg width="800" height="400"' in svg
    assert svg.count('<g transform=') == 2
    assert "Material: MDF - Sheet 1 (2440 x 1220 mm)" in svg
    assert svg.rstrip().endswith("</svg>")


def test_svg_escapes_labels(board):
    sheet = _sheet(board, piece("A", 100, 100, name="Top & <Base>"))
    svg = render_svg(build_scene(sheet))

    assert "Top &amp; &lt;Base&gt;" in svg
    assert "Top & <Base>" not in svg
