"""
Component adapter
=================
Turns loosely shaped component records (as returned by the manual
generator's model output) into PieceRequest objects.

Accepted shape:
    {
        "id": "C1",
        "name": "Side panel",
        "material": "MDF 15mm" | {"type": "MDF 15mm"},
        "dimensions": {"length": 100, "height": 50, "unit": "cm"}
    }

Spanish keys of the original payload (nombre, material.tipo, dimensiones,
largo, alto, unidad) are accepted as aliases. Anything ambiguous raises a
ValidationError; the packer never sees a half-parsed record.
"""

import logging
from typing import Any, Dict, List, Optional

from config.settings import DEFAULT_DIMENSION_UNIT, SHEET_MATERIAL_KEYWORDS, UNIT_TO_MM, fold_material_name
from core.exceptions import InvalidFieldValueError, RequiredFieldError
from nesting.models import PieceRequest

logger = logging.getLogger(__name__)

ENTITY = "Component"

KEY_ALIASES = {
    'name': ('name', 'nombre'),
    'material': ('material',),
    'material_type': ('type', 'tipo'),
    'dimensions': ('dimensions', 'dimensiones'),
    'length': ('length', 'largo'),
    'height': ('height', 'alto'),
    'unit': ('unit', 'unidad'),
}


def _lookup(data: Dict, key: str) -> Any:
    for alias in KEY_ALIASES[key]:
        if data.get(alias) is not None:
            return data[alias]
    return None


def material_name(component: Dict) -> str:
    """Material key of a component; plain string or {"type": ...} object."""
    material = _lookup(component, 'material')
    if material is None:
        raise RequiredFieldError('material', entity_type=ENTITY)

    if isinstance(material, dict):
        material = _lookup(material, 'material_type')
        if material is None:
            raise RequiredFieldError('material.type', entity_type=ENTITY)

    if not isinstance(material, str) or not material.strip():
        raise InvalidFieldValueError('material', material, "must be a non-empty string")
    return material.strip()


def is_sheet_material(material: str) -> bool:
    """True for sheet goods (MDF, plywood, acrylic...)."""
    folded = fold_material_name(material)
    return any(keyword in folded for keyword in SHEET_MATERIAL_KEYWORDS)


def _dimension_mm(dimensions: Dict, key: str, factor: float) -> float:
    value = _lookup(dimensions, key)
    if value is None:
        # Missing side counts as zero; the packer excludes it
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidFieldValueError(f'dimensions.{key}', value, "must be a number")
    return float(value) * factor


def component_to_piece(component: Dict, default_unit: str = DEFAULT_DIMENSION_UNIT) -> PieceRequest:
    """
    Convert one component record to a PieceRequest in millimetres.

    Raises:
        RequiredFieldError: id, material or dimensions missing
        InvalidFieldValueError: wrong types or unknown unit
    """
    if not isinstance(component, dict):
        raise InvalidFieldValueError('component', component, "must be an object")

    component_id = component.get('id')
    if component_id is None or str(component_id).strip() == "":
        raise RequiredFieldError('id', entity_type=ENTITY)

    dimensions = _lookup(component, 'dimensions')
    if dimensions is None:
        raise RequiredFieldError('dimensions', entity_type=ENTITY)
    if not isinstance(dimensions, dict):
        raise InvalidFieldValueError('dimensions', dimensions, "must be an object")

    unit = _lookup(dimensions, 'unit') or default_unit
    if unit not in UNIT_TO_MM:
        raise InvalidFieldValueError('dimensions.unit', unit, f"expected one of {sorted(UNIT_TO_MM)}")
    factor = UNIT_TO_MM[unit]

    return PieceRequest(
        id=str(component_id),
        material_key=material_name(component),
        width=_dimension_mm(dimensions, 'length', factor),
        height=_dimension_mm(dimensions, 'height', factor),
        name=str(_lookup(component, 'name') or '')
    )


def components_to_pieces(components: List[Dict],
                         default_unit: Optional[str] = None,
                         sheet_only: bool = True) -> List[PieceRequest]:
    """
    Convert a component list, optionally keeping only sheet materials.

    Args:
        components: Raw component records
        default_unit: Unit for records without one (settings default)
        sheet_only: Skip components whose material is not a sheet good
    """
    unit = default_unit or DEFAULT_DIMENSION_UNIT
    pieces = []
    for component in components:
        piece = component_to_piece(component, unit)
        if sheet_only and not is_sheet_material(piece.material_key):
            logger.debug(f"Skipping non-sheet material: {piece.id} ({piece.material_key})")
            continue
        pieces.append(piece)
    return pieces
