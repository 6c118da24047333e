"""
Grouping stage: split piece requests per material and drop invalid ones.
"""

import logging
from typing import Dict, List, Tuple

from core.exceptions import InvalidPieceError
from nesting.models import IssueKind, PackingIssue, PieceRequest

logger = logging.getLogger(__name__)

REASON_INVALID_DIMENSION = "invalid dimension"
REASON_MISSING_MATERIAL = "missing material"
REASON_DUPLICATE_ID = "duplicate id"


def check_piece(piece: PieceRequest, seen_ids: set) -> None:
    """
    Raise InvalidPieceError when a piece cannot take part in packing.

    Args:
        piece: Request to check
        seen_ids: Ids accepted so far in this run
    """
    if not piece.has_valid_dimensions():
        raise InvalidPieceError(piece.id, REASON_INVALID_DIMENSION)
    if not piece.material_key or not piece.material_key.strip():
        raise InvalidPieceError(piece.id, REASON_MISSING_MATERIAL)
    if piece.id in seen_ids:
        raise InvalidPieceError(piece.id, REASON_DUPLICATE_ID)


def group_by_material(
    pieces: List[PieceRequest]
) -> Tuple[Dict[str, List[PieceRequest]], List[PackingIssue]]:
    """
    Bucket pieces by material key.

    Buckets follow the first occurrence of each material, pieces keep their
    input order inside a bucket. Invalid pieces never reach a bucket.

    Returns:
        (groups, excluded issues)
    """
    groups: Dict[str, List[PieceRequest]] = {}
    issues: List[PackingIssue] = []
    seen_ids = set()

    for piece in pieces:
        try:
            check_piece(piece, seen_ids)
        except InvalidPieceError as e:
            logger.warning(f"Excluded from nesting: {e}")
            issues.append(PackingIssue(
                piece_id=piece.id,
                reason=e.reason,
                kind=IssueKind.EXCLUDED,
                material_key=piece.material_key
            ))
            continue

        seen_ids.add(piece.id)
        groups.setdefault(piece.material_key, []).append(piece)

    return groups, issues
