"""
SVG Cutting Diagram
===================
Serialises a SheetScene into a standalone SVG document.
"""

import logging
from pathlib import Path
from typing import List
from xml.sax.saxutils import escape

from config.settings import DIAGRAM_COLORS, DIAGRAM_FONT_FAMILY
from core.exceptions import ExportError
from nesting.diagram import SceneRect, SheetScene, build_scene
from nesting.models import Sheet
from reports import sheet_filenames

logger = logging.getLogger(__name__)


def _piece_fill(rect: SceneRect) -> str:
    if rect.overflow:
        return DIAGRAM_COLORS['piece_overflow']
    if rect.rotated:
        return DIAGRAM_COLORS['piece_rotated']
    return DIAGRAM_COLORS['piece']


def _render_rect(rect: SceneRect) -> str:
    cx = rect.width / 2
    cy = rect.height / 2
    return (
        f'    <g transform="translate({rect.x:.2f}, {rect.y:.2f})">\n'
        f'        <rect width="{rect.width:.2f}" height="{rect.height:.2f}" '
        f'fill="{_piece_fill(rect)}" stroke="{DIAGRAM_COLORS["piece_stroke"]}" stroke-width="1" />\n'
        f'        <text x="{cx:.2f}" y="{cy:.2f}" font-family="{DIAGRAM_FONT_FAMILY}" font-size="10" '
        f'text-anchor="middle" dominant-baseline="middle" fill="{DIAGRAM_COLORS["label"]}">'
        f'{escape(rect.label)}</text>\n'
        f'        <text x="{cx:.2f}" y="{cy + 12:.2f}" font-family="{DIAGRAM_FONT_FAMILY}" font-size="8" '
        f'text-anchor="middle" dominant-baseline="middle" fill="{DIAGRAM_COLORS["dimension"]}">'
        f'{escape(rect.size_label)}</text>\n'
        f'    </g>'
    )


def render_svg(scene: SheetScene) -> str:
    """SVG document for one sheet scene."""
    margin_outline = ""
    if scene.margin > 0:
        inner_w = scene.sheet_width - 2 * scene.margin
        inner_h = scene.sheet_height - 2 * scene.margin
        margin_outline = (
            f'    <rect x="{scene.margin:.2f}" y="{scene.margin:.2f}" '
            f'width="{inner_w:.2f}" height="{inner_h:.2f}" fill="none" '
            f'stroke="{DIAGRAM_COLORS["margin"]}" stroke-width="1" stroke-dasharray="4 2" />\n'
        )

    items = "\n".join(_render_rect(r) for r in scene.rects)

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg width="{scene.canvas_width:g}" height="{scene.canvas_height:g}" '
        f'viewBox="0 0 {scene.canvas_width:g} {scene.canvas_height:g}" '
        'xmlns="http://www.w3.org/2000/svg">\n'
        '    <!-- Board -->\n'
        f'    <rect width="{scene.sheet_width:.2f}" height="{scene.sheet_height:.2f}" '
        f'fill="{DIAGRAM_COLORS["sheet"]}" stroke="{DIAGRAM_COLORS["sheet_stroke"]}" stroke-width="2" />\n'
        f'{margin_outline}'
        f'    <text x="10" y="20" font-family="{DIAGRAM_FONT_FAMILY}" font-size="14" fill="#000">'
        f'{escape(scene.title)}</text>\n'
        '    <!-- Pieces -->\n'
        f'{items}\n'
        '</svg>\n'
    )


def sheet_to_svg(sheet: Sheet, **scene_kwargs) -> str:
    """Shortcut: scene + SVG for a packed sheet."""
    return render_svg(build_scene(sheet, **scene_kwargs))


def export_sheets_svg(sheets: List[Sheet], output_dir: str) -> List[str]:
    """
    Write one SVG file per sheet.

    Returns:
        Paths of the written files
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    written = []
    for sheet, name in zip(sheets, sheet_filenames(sheets)):
        filepath = output_path / f"{name}.svg"
        try:
            filepath.write_text(sheet_to_svg(sheet), encoding="utf-8")
        except OSError as e:
            raise ExportError(str(filepath), str(e)) from e
        written.append(str(filepath))

    logger.info(f"Exported {len(written)} SVG files to {output_dir}")
    return written
