"""
Cutting diagram scene.

Maps a sheet's placements onto a fixed canvas, keeping the aspect ratio of
the physical sheet. The scene is format-neutral; reports.svg_export and
reports.png_export turn it into files.
"""

from dataclasses import dataclass, field
from typing import List

from config.settings import DIAGRAM_CANVAS_HEIGHT, DIAGRAM_CANVAS_WIDTH
from nesting.models import Sheet


@dataclass
class SceneRect:
    """Placed piece in canvas units"""
    x: float
    y: float
    width: float
    height: float
    label: str
    size_label: str
    rotated: bool = False
    overflow: bool = False


@dataclass
class SheetScene:
    """Sheet outline plus piece rectangles in canvas units"""
    canvas_width: float
    canvas_height: float
    scale: float
    sheet_width: float
    sheet_height: float
    margin: float
    title: str = ""
    rects: List[SceneRect] = field(default_factory=list)


def canvas_scale(sheet_width: float, sheet_height: float,
                 canvas_width: float, canvas_height: float) -> float:
    """Largest scale that fits the whole sheet on the canvas."""
    return min(canvas_width / sheet_width, canvas_height / sheet_height)


def build_scene(sheet: Sheet,
                canvas_width: float = DIAGRAM_CANVAS_WIDTH,
                canvas_height: float = DIAGRAM_CANVAS_HEIGHT) -> SheetScene:
    """
    Build the diagram scene for one sheet.

    Args:
        sheet: Packed sheet
        canvas_width, canvas_height: Output canvas size

    Returns:
        SheetScene with one SceneRect per placed piece, in placement order
    """
    stock = sheet.stock
    scale = canvas_scale(stock.sheet_width, stock.sheet_height, canvas_width, canvas_height)

    scene = SheetScene(
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        scale=scale,
        sheet_width=stock.sheet_width * scale,
        sheet_height=stock.sheet_height * scale,
        margin=stock.margin * scale,
        title=(f"Material: {sheet.material_key} - Sheet {sheet.index} "
               f"({stock.sheet_width:.0f} x {stock.sheet_height:.0f} mm)")
    )

    for piece in sheet.pieces:
        width, height = piece.source_size
        scene.rects.append(SceneRect(
            x=piece.x * scale,
            y=piece.y * scale,
            width=piece.effective_width * scale,
            height=piece.effective_height * scale,
            label=piece.name or piece.id,
            size_label=f"{width:.0f}x{height:.0f}",
            rotated=piece.rotated,
            overflow=piece.overflow
        ))

    return scene
