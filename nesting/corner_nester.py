"""
Corner Nester - rectangle nesting on stock sheets
=================================================
First-fit decreasing with corner-candidate placement and 90° rotation.

Each material group is packed on its own sequence of sheets:
1. Pieces sorted by longest side, largest first (stable)
2. Every open sheet tried in creation order, unrotated then rotated
3. New sheet opened when nothing fits
4. Pieces larger than an empty sheet in both orientations are force-placed
   at the usable corner of a dedicated sheet and reported as overflow

Candidate anchors on a sheet: the usable corner plus right / below /
diagonal of every placed piece, scanned top-to-bottom, left-to-right.
The result is deterministic for identical input.
"""

import logging
import time
from typing import Dict, List, Optional, Tuple

from core.exceptions import InvalidFieldValueError
from nesting.grouping import group_by_material
from nesting.models import (
    IssueKind,
    PackingIssue,
    PackingResult,
    PieceRequest,
    PlacedPiece,
    Sheet,
    StockSheet,
)

logger = logging.getLogger(__name__)

REASON_OVERFLOW = "exceeds usable sheet area in both orientations"


def boxes_collide(x: float, y: float, w: float, h: float,
                  other: PlacedPiece, spacing: float = 0.0) -> bool:
    """
    True when box (x, y, w, h) comes closer than `spacing` to a placed piece.

    Both axis projections must intersect with positive length; touching at
    exactly `spacing` distance is allowed.
    """
    return (x < other.right + spacing and x + w + spacing > other.x and
            y < other.bottom + spacing and y + h + spacing > other.y)


def candidate_points(placed: Tuple[PlacedPiece, ...], stock: StockSheet) -> List[Tuple[float, float]]:
    """Anchor points sorted by (y, x)."""
    points = {(stock.margin, stock.margin)}
    for p in placed:
        points.add((p.right + stock.spacing, p.y))
        points.add((p.x, p.bottom + stock.spacing))
        points.add((p.right + stock.spacing, p.bottom + stock.spacing))
    return sorted(points, key=lambda pt: (pt[1], pt[0]))


def find_position(sheet: Sheet, w: float, h: float) -> Optional[Tuple[float, float]]:
    """
    First free anchor for a (w, h) box on the sheet, or None.

    Candidates come from a snapshot of the current placements.
    """
    stock = sheet.stock
    if not stock.fits(w, h):
        return None

    placed = tuple(sheet.pieces)
    max_x = stock.sheet_width - stock.margin
    max_y = stock.sheet_height - stock.margin

    for x, y in candidate_points(placed, stock):
        if x + w > max_x or y + h > max_y:
            continue
        if any(boxes_collide(x, y, w, h, other, stock.spacing) for other in placed):
            continue
        return x, y
    return None


def try_place(sheet: Sheet, piece: PieceRequest) -> Optional[PlacedPiece]:
    """Place a piece on the sheet, unrotated first, then rotated."""
    if sheet.has_overflow:
        return None

    orientations = [(piece.width, piece.height, False)]
    if piece.width != piece.height:
        orientations.append((piece.height, piece.width, True))

    for w, h, rotated in orientations:
        position = find_position(sheet, w, h)
        if position is None:
            continue
        placed = PlacedPiece(
            id=piece.id,
            x=position[0],
            y=position[1],
            effective_width=w,
            effective_height=h,
            rotated=rotated,
            name=piece.name
        )
        sheet.pieces.append(placed)
        return placed
    return None


def pack_group(pieces: List[PieceRequest], stock: StockSheet,
               material_key: str = "") -> Tuple[List[Sheet], List[PackingIssue]]:
    """
    Pack one material group.

    Args:
        pieces: Valid requests of a single material
        stock: Validated stock sheet format
        material_key: Material written on every sheet

    Returns:
        (sheets in creation order, overflow issues)
    """
    sheets: List[Sheet] = []
    issues: List[PackingIssue] = []

    ordered = sorted(pieces, key=lambda p: p.longest_side, reverse=True)

    for piece in ordered:
        if any(try_place(sheet, piece) for sheet in sheets):
            continue

        new_sheet = Sheet(index=len(sheets) + 1, material_key=material_key, stock=stock)
        sheets.append(new_sheet)
        if try_place(new_sheet, piece):
            continue

        # Too big even for an empty sheet - keep it, flag it
        new_sheet.pieces.append(PlacedPiece(
            id=piece.id,
            x=stock.margin,
            y=stock.margin,
            effective_width=piece.width,
            effective_height=piece.height,
            rotated=False,
            overflow=True,
            name=piece.name
        ))
        issues.append(PackingIssue(
            piece_id=piece.id,
            reason=REASON_OVERFLOW,
            kind=IssueKind.OVERFLOW,
            material_key=material_key
        ))
        logger.warning(
            f"Overflow: {piece.id} ({piece.width:.0f}x{piece.height:.0f}mm) > "
            f"usable {stock.usable_width:.0f}x{stock.usable_height:.0f}mm, "
            f"force-placed on {material_key} sheet {new_sheet.index}"
        )

    return sheets, issues


def pack(pieces: List[PieceRequest], config: StockSheet,
         material_configs: Optional[Dict[str, StockSheet]] = None) -> PackingResult:
    """
    Pack pieces onto stock sheets, material by material.

    Args:
        pieces: Requests of any materials
        config: Stock sheet format
        material_configs: Optional format per material key

    Returns:
        PackingResult

    Raises:
        ConfigurationError: before any piece is processed
    """
    material_configs = material_configs or {}
    config.validate()
    for stock in material_configs.values():
        stock.validate()

    start_time = time.time()
    groups, issues = group_by_material(pieces)
    result = PackingResult(issues=issues)

    for material_key, group in groups.items():
        stock = material_configs.get(material_key, config)
        logger.debug(f"→ Nesting {material_key}: {len(group)} pieces on "
                     f"{stock.sheet_width:.0f}x{stock.sheet_height:.0f}mm")
        sheets, overflow = pack_group(group, stock, material_key)
        result.sheets[material_key] = sheets
        result.issues.extend(overflow)

    elapsed = time.time() - start_time
    logger.debug(f"→ Completed in {elapsed:.3f}s | {result.sheet_count} sheets, "
                 f"{result.placed_count} placed, {len(result.excluded)} excluded")
    return result


class SheetNester:
    """
    Collects pieces and packs them in one run.

    Usage:
        nester = SheetNester(StockSheet(2440, 1220, margin=20, spacing=20))
        nester.add_piece_from_dict({'id': 'A', 'material': 'MDF',
                                    'width': 600, 'height': 400}, quantity=2)
        result = nester.run_nesting()
    """

    def __init__(self, config: StockSheet,
                 material_configs: Optional[Dict[str, StockSheet]] = None):
        self.config = config
        self.material_configs = dict(material_configs or {})

        self.pieces: List[PieceRequest] = []
        self.result: Optional[PackingResult] = None

    def set_material_config(self, material_key: str, config: StockSheet) -> None:
        """Use a different stock format for one material."""
        self.material_configs[material_key] = config

    def add_piece(self, piece: PieceRequest) -> None:
        self.pieces.append(piece)

    def add_piece_from_dict(self, piece_dict: dict, quantity: int = 1) -> None:
        """
        Add a piece from a dict; quantity > 1 adds copies with suffixed ids
        (`A#1`, `A#2`, ...).
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidFieldValueError('quantity', quantity, "must be a positive integer")

        piece = PieceRequest.from_dict(piece_dict)
        if quantity == 1:
            self.pieces.append(piece)
            return

        for i in range(quantity):
            self.pieces.append(PieceRequest(
                id=f"{piece.id}#{i + 1}",
                material_key=piece.material_key,
                width=piece.width,
                height=piece.height,
                name=piece.name or piece.id
            ))

    def run_nesting(self) -> PackingResult:
        """Pack everything added so far."""
        self.result = pack(self.pieces, self.config, self.material_configs)
        return self.result

    def clear(self) -> None:
        """Forget pieces and the last result"""
        self.pieces.clear()
        self.result = None
