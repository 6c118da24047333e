"""Helpers shared by the nesting tests."""

from nesting.models import PieceRequest


def piece(piece_id, width, height, material="MDF", name=""):
    return PieceRequest(id=piece_id, material_key=material, width=width, height=height, name=name)


def min_gap(a, b):
    """Largest axis separation between two placed pieces (negative = overlap)."""
    gap_x = max(b.x - a.right, a.x - b.right)
    gap_y = max(b.y - a.bottom, a.y - b.bottom)
    return max(gap_x, gap_y)
