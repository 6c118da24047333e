"""
Nesting Module
==============
Rectangle nesting of cut pieces on stock sheets.

Main algorithm: corner-candidate first-fit decreasing (corner_nester)
- Pieces grouped per material, each group on its own sheets
- 90° rotation tried on every sheet
- Oversized pieces force-placed and reported as overflow

Functions:
- pack() / SheetNester - packing
- sheet_efficiency() - waste estimation
- build_scene() - diagram geometry

The manual preview (nesting.preview) depends on reports and is imported
from its own module.
"""

from .models import (
    IssueKind,
    PackingIssue,
    PackingResult,
    PieceRequest,
    PlacedPiece,
    Sheet,
    StockSheet,
)
from .grouping import group_by_material
from .corner_nester import SheetNester, pack, pack_group
from .efficiency import format_efficiency, material_efficiency, sheet_efficiency
from .diagram import SceneRect, SheetScene, build_scene

__all__ = [
    'IssueKind',
    'PackingIssue',
    'PackingResult',
    'PieceRequest',
    'PlacedPiece',
    'Sheet',
    'StockSheet',
    'group_by_material',
    'SheetNester',
    'pack',
    'pack_group',
    'format_efficiency',
    'material_efficiency',
    'sheet_efficiency',
    'SceneRect',
    'SheetScene',
    'build_scene',
]
