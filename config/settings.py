#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Nesting configuration
Stock sheet defaults, diagram canvas and material keywords.

Every value can be overridden from the environment or a .env file.
"""

import os
import unicodedata

from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

# ============================================================
# STOCK SHEET - DEFAULT PANEL
# ============================================================

# Standard board 2.44m x 1.22m, all lengths in mm
SHEET_WIDTH = float(os.getenv("NESTING_SHEET_WIDTH", "2440"))
SHEET_HEIGHT = float(os.getenv("NESTING_SHEET_HEIGHT", "1220"))

# Unusable border (clamping / blade clearance)
SHEET_MARGIN = float(os.getenv("NESTING_MARGIN", "20"))

# Minimum gap between two pieces (kerf + tolerance)
PIECE_SPACING = float(os.getenv("NESTING_SPACING", "20"))

# Stock sizes per material category (width, height) in mm.
# Acrylic is sold as a 2.44 m2 plate (2440 x 1000), wood panels as 2440 x 1220.
# Matched by keyword against the folded material key (see fold_material_name).
MATERIAL_SHEET_SIZES = {
    "acrylic": (2440.0, 1000.0),
    "acrilico": (2440.0, 1000.0),
}

# ============================================================
# COMPONENT ADAPTER
# ============================================================

# Unit assumed when a component does not state one
DEFAULT_DIMENSION_UNIT = os.getenv("NESTING_DEFAULT_UNIT", "cm")

UNIT_TO_MM = {
    "mm": 1.0,
    "cm": 10.0,
    "m": 1000.0,
}


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def fold_material_name(material_key: str) -> str:
    """Lower-case material name without accents: 'Acrílico 3mm' -> 'acrilico 3mm'."""
    return strip_accents(material_key).lower()


# Only sheet goods are nested; everything else (profiles, hardware) is skipped
SHEET_MATERIAL_KEYWORDS = (
    "mdf",
    "plywood",
    "acrylic",
    "melamine",
    "wood",
    "madera",
    "triplay",
    "acrilico",
    "melamina",
)

# ============================================================
# DIAGRAM - CANVAS AND COLORS
# ============================================================

DIAGRAM_CANVAS_WIDTH = int(os.getenv("DIAGRAM_CANVAS_WIDTH", "800"))
DIAGRAM_CANVAS_HEIGHT = int(os.getenv("DIAGRAM_CANVAS_HEIGHT", "400"))

DIAGRAM_COLORS = {
    "sheet": "#ffffff",
    "sheet_stroke": "#000000",
    "margin": "#bbbbbb",
    "piece": "#e0e0e0",
    "piece_rotated": "#d6e6f5",
    "piece_overflow": "#f5b7b1",
    "piece_stroke": "#000000",
    "label": "#333333",
    "dimension": "#666666",
}

DIAGRAM_FONT_FAMILY = "Arial"


def default_stock_sheet():
    """
    Build the default StockSheet from the settings above.

    Returns:
        StockSheet
    """
    from nesting.models import StockSheet

    return StockSheet(
        sheet_width=SHEET_WIDTH,
        sheet_height=SHEET_HEIGHT,
        margin=SHEET_MARGIN,
        spacing=PIECE_SPACING,
    )


def stock_sheet_for_material(material_key: str):
    """
    Pick the stock sheet for a material category.

    Args:
        material_key: Material name, e.g. "Acrylic 3mm"

    Returns:
        StockSheet with the category size, or the default sheet
    """
    from nesting.models import StockSheet

    key = fold_material_name(material_key)
    for keyword, (width, height) in MATERIAL_SHEET_SIZES.items():
        if keyword in key:
            return StockSheet(
                sheet_width=width,
                sheet_height=height,
                margin=SHEET_MARGIN,
                spacing=PIECE_SPACING,
            )
    return default_stock_sheet()


# ============================================================
# CONFIGURATION CHECK
# ============================================================

def validate_config():
    """
    Check that the configured defaults are usable.
    Call at application start.
    """
    errors = []

    if DEFAULT_DIMENSION_UNIT not in UNIT_TO_MM:
        errors.append(f"NESTING_DEFAULT_UNIT must be one of {sorted(UNIT_TO_MM)}")

    if DIAGRAM_CANVAS_WIDTH <= 0 or DIAGRAM_CANVAS_HEIGHT <= 0:
        errors.append("Diagram canvas must be positive")

    if errors:
        raise ValueError(f"Configuration errors: {', '.join(errors)}")

    # Raises ConfigurationError when the sheet has no usable area
    default_stock_sheet().validate()
    return True


if __name__ == "__main__":
    print("=" * 60)
    print("NESTING CONFIGURATION")
    print("=" * 60)
    print(f"Sheet: {SHEET_WIDTH:.0f} x {SHEET_HEIGHT:.0f} mm")
    print(f"Margin: {SHEET_MARGIN:.0f} mm, spacing: {PIECE_SPACING:.0f} mm")
    print(f"Canvas: {DIAGRAM_CANVAS_WIDTH} x {DIAGRAM_CANVAS_HEIGHT} px")
