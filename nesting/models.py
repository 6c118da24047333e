"""
Data Models for Nesting.

Defines the contract between the packer and its callers: piece requests in,
sheets with placements and an issue list out. All lengths are millimetres.
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Tuple

from core.exceptions import ConfigurationError, InvalidFieldValueError, RequiredFieldError


class IssueKind(Enum):
    """Why a piece is listed next to the packed sheets."""
    EXCLUDED = "EXCLUDED"    # Never packed (bad dimensions, duplicate id...)
    OVERFLOW = "OVERFLOW"    # Force-placed, exceeds the usable sheet area


def _number(field_name: str, value: Any) -> float:
    """Coerce a dimension to float; booleans and text are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidFieldValueError(field_name, value, "must be a number")
    return float(value)


@dataclass(frozen=True)
class PieceRequest:
    """Rectangular piece to cut from a stock sheet."""
    id: str
    material_key: str
    width: float
    height: float
    name: str = ""

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def longest_side(self) -> float:
        return max(self.width, self.height)

    def has_valid_dimensions(self) -> bool:
        """True for finite, strictly positive width and height."""
        return (math.isfinite(self.width) and math.isfinite(self.height)
                and self.width > 0 and self.height > 0)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'material': self.material_key,
            'width': self.width,
            'height': self.height,
            'name': self.name
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'PieceRequest':
        """
        Build a request from a plain dict.

        Only the shape is checked here; zero or negative sizes pass through
        so that the packer reports them in its exclusion list.
        """
        if not isinstance(data, dict):
            raise InvalidFieldValueError('piece', data, "must be an object")

        for key in ('id', 'material', 'width', 'height'):
            if data.get(key) is None:
                raise RequiredFieldError(key, entity_type="Piece")

        material = data['material']
        if not isinstance(material, str):
            raise InvalidFieldValueError('material', material, "must be a string")

        return cls(
            id=str(data['id']),
            material_key=material,
            width=_number('width', data['width']),
            height=_number('height', data['height']),
            name=str(data.get('name', '') or '')
        )


@dataclass(frozen=True)
class StockSheet:
    """Stock sheet format used for one packing run."""
    sheet_width: float
    sheet_height: float
    margin: float = 0.0
    spacing: float = 0.0

    @property
    def usable_width(self) -> float:
        return self.sheet_width - 2 * self.margin

    @property
    def usable_height(self) -> float:
        return self.sheet_height - 2 * self.margin

    @property
    def usable_area(self) -> float:
        return self.usable_width * self.usable_height

    def validate(self) -> None:
        """
        Reject formats without usable area.

        Raises:
            ConfigurationError: non-positive size, negative margin/spacing,
                or margins eating the whole sheet
        """
        for name in ('sheet_width', 'sheet_height'):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ConfigurationError(name, value, "must be positive")

        for name in ('margin', 'spacing'):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(name, value, "must not be negative")

        if 2 * self.margin >= min(self.sheet_width, self.sheet_height):
            raise ConfigurationError(
                'margin', self.margin,
                f"no usable area left on {self.sheet_width:g}x{self.sheet_height:g} sheet"
            )

    def fits(self, width: float, height: float) -> bool:
        """Would a (width, height) box fit on an empty sheet in this orientation."""
        return width <= self.usable_width and height <= self.usable_height

    def to_dict(self) -> Dict:
        return {
            'sheet_width': self.sheet_width,
            'sheet_height': self.sheet_height,
            'margin': self.margin,
            'spacing': self.spacing
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'StockSheet':
        if not isinstance(data, dict):
            raise InvalidFieldValueError('config', data, "must be an object")

        for key in ('sheet_width', 'sheet_height'):
            if data.get(key) is None:
                raise RequiredFieldError(key, entity_type="StockSheet")
        return cls(
            sheet_width=_number('sheet_width', data['sheet_width']),
            sheet_height=_number('sheet_height', data['sheet_height']),
            margin=_number('margin', data.get('margin', 0.0)),
            spacing=_number('spacing', data.get('spacing', 0.0))
        )


@dataclass(frozen=True)
class PlacedPiece:
    """Piece placed on a sheet. Coordinates are the top-left corner."""
    id: str
    x: float
    y: float
    effective_width: float
    effective_height: float
    rotated: bool = False
    overflow: bool = False
    name: str = ""

    @property
    def right(self) -> float:
        return self.x + self.effective_width

    @property
    def bottom(self) -> float:
        return self.y + self.effective_height

    @property
    def area(self) -> float:
        return self.effective_width * self.effective_height

    @property
    def source_size(self) -> Tuple[float, float]:
        """(width, height) of the original request."""
        if self.rotated:
            return self.effective_height, self.effective_width
        return self.effective_width, self.effective_height

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'x': self.x,
            'y': self.y,
            'width': self.effective_width,
            'height': self.effective_height,
            'rotated': self.rotated,
            'overflow': self.overflow
        }


@dataclass
class Sheet:
    """One physical stock unit of a material group."""
    index: int                    # 1-based within the material group
    material_key: str
    stock: StockSheet
    pieces: List[PlacedPiece] = field(default_factory=list)

    @property
    def has_overflow(self) -> bool:
        return any(p.overflow for p in self.pieces)

    def __iter__(self) -> Iterator[PlacedPiece]:
        return iter(self.pieces)

    def __len__(self) -> int:
        return len(self.pieces)

    def to_dict(self) -> Dict:
        return {
            'index': self.index,
            'material': self.material_key,
            'stock': self.stock.to_dict(),
            'pieces': [p.to_dict() for p in self.pieces]
        }


@dataclass(frozen=True)
class PackingIssue:
    """Piece that was excluded or force-placed."""
    piece_id: str
    reason: str
    kind: IssueKind = IssueKind.EXCLUDED
    material_key: str = ""

    def to_dict(self) -> Dict:
        return {
            'piece_id': self.piece_id,
            'reason': self.reason,
            'kind': self.kind.value,
            'material': self.material_key
        }


@dataclass
class PackingResult:
    """Sheets per material (creation order) plus excluded / overflow pieces."""
    sheets: Dict[str, List[Sheet]] = field(default_factory=dict)
    issues: List[PackingIssue] = field(default_factory=list)

    @property
    def excluded(self) -> List[PackingIssue]:
        return [i for i in self.issues if i.kind == IssueKind.EXCLUDED]

    @property
    def overflow(self) -> List[PackingIssue]:
        return [i for i in self.issues if i.kind == IssueKind.OVERFLOW]

    @property
    def materials(self) -> List[str]:
        return list(self.sheets)

    @property
    def sheet_count(self) -> int:
        return sum(len(s) for s in self.sheets.values())

    @property
    def placed_count(self) -> int:
        return sum(len(sheet) for sheet in self.all_sheets())

    def all_sheets(self) -> List[Sheet]:
        """Every sheet, material by material."""
        return [sheet for sheets in self.sheets.values() for sheet in sheets]

    def to_dict(self) -> Dict:
        return {
            'sheets': {
                material: [s.to_dict() for s in sheets]
                for material, sheets in self.sheets.items()
            },
            'issues': [i.to_dict() for i in self.issues]
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
