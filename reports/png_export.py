"""
PNG Sheet Preview
=================
Raster preview of a cutting diagram, drawn with matplotlib (Agg backend).
"""

import io
import logging
from pathlib import Path
from typing import List

import matplotlib
matplotlib.use('Agg')  # No GUI backend
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from config.settings import DIAGRAM_COLORS
from core.exceptions import ExportError
from nesting.diagram import build_scene
from nesting.models import Sheet
from reports import sheet_filenames

logger = logging.getLogger(__name__)


def render_sheet_png(sheet: Sheet, dpi: int = 100) -> bytes:
    """
    Render one sheet to PNG bytes.

    The canvas size comes from the diagram settings; y grows downwards as
    in the SVG diagram.
    """
    scene = build_scene(sheet)

    fig = plt.figure(figsize=(scene.canvas_width / dpi, scene.canvas_height / dpi), dpi=dpi)
    try:
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, scene.canvas_width)
        ax.set_ylim(scene.canvas_height, 0)
        ax.set_aspect('equal')
        ax.set_axis_off()

        ax.add_patch(Rectangle(
            (0, 0), scene.sheet_width, scene.sheet_height,
            facecolor=DIAGRAM_COLORS['sheet'], edgecolor=DIAGRAM_COLORS['sheet_stroke'], linewidth=2
        ))
        if scene.margin > 0:
            ax.add_patch(Rectangle(
                (scene.margin, scene.margin),
                scene.sheet_width - 2 * scene.margin, scene.sheet_height - 2 * scene.margin,
                fill=False, edgecolor=DIAGRAM_COLORS['margin'], linestyle='--', linewidth=1
            ))

        for rect in scene.rects:
            if rect.overflow:
                color = DIAGRAM_COLORS['piece_overflow']
            elif rect.rotated:
                color = DIAGRAM_COLORS['piece_rotated']
            else:
                color = DIAGRAM_COLORS['piece']
            ax.add_patch(Rectangle(
                (rect.x, rect.y), rect.width, rect.height,
                facecolor=color, edgecolor=DIAGRAM_COLORS['piece_stroke'], linewidth=1
            ))
            ax.text(rect.x + rect.width / 2, rect.y + rect.height / 2,
                    f"{rect.label}\n{rect.size_label}",
                    ha='center', va='center', fontsize=6, color=DIAGRAM_COLORS['label'])

        ax.text(10, 20, scene.title, fontsize=9, color='#000000')

        buffer = io.BytesIO()
        fig.savefig(buffer, format='png', dpi=dpi, facecolor='white')
    finally:
        plt.close(fig)

    return buffer.getvalue()


def export_sheets_png(sheets: List[Sheet], output_dir: str) -> List[str]:
    """Write one PNG preview per sheet."""
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    written = []
    for sheet, name in zip(sheets, sheet_filenames(sheets)):
        filepath = output_path / f"{name}.png"
        try:
            filepath.write_bytes(render_sheet_png(sheet))
        except OSError as e:
            raise ExportError(str(filepath), str(e)) from e
        written.append(str(filepath))

    logger.info(f"Exported {len(written)} PNG previews to {output_dir}")
    return written
