"""
Waste / efficiency estimation.

Efficiency = placed piece area / usable sheet area (inside the margins),
as a percentage. Always recomputed from the placements.
"""

from typing import List

from nesting.models import Sheet


def used_area(sheet: Sheet) -> float:
    """Sum of the placed footprints [mm2]."""
    return sum(p.effective_width * p.effective_height for p in sheet.pieces)


def waste_area(sheet: Sheet) -> float:
    """Usable area not covered by pieces [mm2]; 0 for overflowing sheets."""
    return max(0.0, sheet.stock.usable_area - used_area(sheet))


def sheet_efficiency(sheet: Sheet) -> float:
    """
    Covered share of the usable area in percent, within [0, 100].

    An overflow piece can be larger than the usable area; the value is
    capped at 100 for such sheets.
    """
    usable = sheet.stock.usable_area
    if usable <= 0:
        return 0.0
    percent = used_area(sheet) / usable * 100
    return min(100.0, max(0.0, percent))


def material_efficiency(sheets: List[Sheet]) -> float:
    """Efficiency over all sheets of one material, in percent."""
    usable = sum(s.stock.usable_area for s in sheets)
    if usable <= 0:
        return 0.0
    percent = sum(used_area(s) for s in sheets) / usable * 100
    return min(100.0, max(0.0, percent))


def format_efficiency(percent: float, decimals: int = 1) -> str:
    """Display form, e.g. '70.6%'."""
    return f"{round(percent, decimals):.{decimals}f}%"
