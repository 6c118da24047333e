"""
Nesting preview for generated manuals.

Filters the sheet-material components of a manual, packs them and returns
one SVG cutting diagram per sheet, keyed by file name.
"""

import logging
from typing import Dict, List, Optional

from config.settings import stock_sheet_for_material
from nesting.components import components_to_pieces
from nesting.corner_nester import pack
from nesting.models import StockSheet
from reports import sheet_filenames
from reports.svg_export import sheet_to_svg

logger = logging.getLogger(__name__)


def generate_nesting_preview(components: List[Dict],
                             config: Optional[StockSheet] = None) -> Dict[str, str]:
    """
    Cutting diagrams for a component list.

    Args:
        components: Raw component records (see nesting.components)
        config: Stock sheet for every material; by default each material
            gets its category size from settings

    Returns:
        {"layout_<material>_sheet_<n>": svg} - empty without sheet materials
    """
    pieces = components_to_pieces(components)
    if not pieces:
        return {}

    if config is None:
        materials = dict.fromkeys(p.material_key for p in pieces)
        material_configs = {m: stock_sheet_for_material(m) for m in materials}
        result = pack(pieces, next(iter(material_configs.values())), material_configs)
    else:
        result = pack(pieces, config)

    for issue in result.issues:
        logger.warning(f"Preview: {issue.piece_id} {issue.kind.value.lower()} - {issue.reason}")

    sheets = result.all_sheets()
    return {name: sheet_to_svg(sheet) for sheet, name in zip(sheets, sheet_filenames(sheets))}
