"""
Layout check - verify packed sheets with shapely geometry.

Independent of the packer's own collision test: every piece is turned into
a shapely box, grown by half the spacing, and compared pairwise.
"""

import logging
from typing import List

from shapely.geometry import box

from nesting.models import PackingResult, PlacedPiece, Sheet

logger = logging.getLogger(__name__)

# Numerical slack for float coordinates [mm2 / mm]
AREA_TOLERANCE = 1e-6


def piece_box(piece: PlacedPiece, grow: float = 0.0):
    """Shapely box of a placed piece, optionally grown on every side."""
    return box(piece.x - grow, piece.y - grow, piece.right + grow, piece.bottom + grow)


def find_layout_violations(sheet: Sheet) -> List[str]:
    """
    List spacing and containment problems on one sheet.

    Overflow pieces are exempt from the containment check only.

    Returns:
        Human readable messages, empty when the layout is clean
    """
    stock = sheet.stock
    half_gap = stock.spacing / 2
    violations = []

    usable = box(stock.margin, stock.margin,
                 stock.sheet_width - stock.margin, stock.sheet_height - stock.margin)

    boxes = [(piece, piece_box(piece, half_gap)) for piece in sheet.pieces]

    for i, (piece, grown) in enumerate(boxes):
        if not piece.overflow and not usable.buffer(AREA_TOLERANCE).covers(piece_box(piece)):
            violations.append(
                f"{piece.id} at ({piece.x:g}, {piece.y:g}) leaves the usable area"
            )
        for other, other_grown in boxes[i + 1:]:
            overlap = grown.intersection(other_grown).area
            if overlap > AREA_TOLERANCE:
                violations.append(
                    f"{piece.id} and {other.id} closer than {stock.spacing:g} mm "
                    f"(overlap {overlap:.1f} mm2)"
                )

    return violations


def check_result(result: PackingResult) -> List[str]:
    """Violations of every sheet, prefixed with material and sheet index."""
    messages = []
    for sheet in result.all_sheets():
        for message in find_layout_violations(sheet):
            messages.append(f"[{sheet.material_key} #{sheet.index}] {message}")
    if messages:
        logger.warning(f"Layout check found {len(messages)} problems")
    return messages
