"""
Nesting - Reports Module
========================
Summaries and diagram files generated from a packing result.

Formats:
- SVG - cutting diagram preview (one document per sheet)
- DXF - sheet layout for the CNC / laser
- PNG - raster preview (matplotlib)
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from config.settings import strip_accents
from nesting.efficiency import format_efficiency, material_efficiency, sheet_efficiency, used_area, waste_area
from nesting.models import PackingIssue, PackingResult, Sheet

logger = logging.getLogger(__name__)


def material_slug(material_key: str) -> str:
    """File-name safe material name: 'MDF 15mm' -> 'MDF_15mm', 'Acrílico' -> 'Acrilico'."""
    return re.sub(r'[^a-z0-9]', '_', strip_accents(material_key), flags=re.IGNORECASE)


def unique_material_slugs(material_keys: Iterable[str]) -> Dict[str, str]:
    """
    Slug per distinct material key, in first-seen order.

    Keys that slug to the same text ('MDF 15mm', 'MDF-15mm') get a numeric
    suffix on the later ones: 'MDF_15mm', 'MDF_15mm_2'.
    """
    slugs: Dict[str, str] = {}
    taken = set()
    for key in material_keys:
        if key in slugs:
            continue
        base = material_slug(key)
        slug = base
        n = 2
        while slug in taken:
            slug = f"{base}_{n}"
            n += 1
        if slug != base:
            logger.warning(f"Material '{key}' shares file name '{base}', using '{slug}'")
        slugs[key] = slug
        taken.add(slug)
    return slugs


def sheet_filename(material_key: str, index: int, slug: Optional[str] = None) -> str:
    """Base file name (no extension) of a sheet diagram."""
    return f"layout_{slug or material_slug(material_key)}_sheet_{index}"


def sheet_filenames(sheets: List[Sheet]) -> List[str]:
    """Base file names for a list of sheets; never two alike."""
    slugs = unique_material_slugs(s.material_key for s in sheets)
    return [sheet_filename(s.material_key, s.index, slugs[s.material_key]) for s in sheets]


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class SheetReport:
    """Sheet data for reports"""
    index: int
    material: str
    width_mm: float
    height_mm: float
    margin_mm: float
    parts_count: int
    efficiency: float                 # percent of usable area
    used_area_mm2: float
    waste_area_mm2: float
    overflow_ids: List[str] = field(default_factory=list)
    slug: str = ""                    # file-name material part, unique per report

    @property
    def filename(self) -> str:
        return sheet_filename(self.material, self.index, self.slug or None)

    @property
    def efficiency_label(self) -> str:
        return format_efficiency(self.efficiency)

    @classmethod
    def from_sheet(cls, sheet: Sheet, slug: str = "") -> 'SheetReport':
        return cls(
            index=sheet.index,
            material=sheet.material_key,
            width_mm=sheet.stock.sheet_width,
            height_mm=sheet.stock.sheet_height,
            margin_mm=sheet.stock.margin,
            parts_count=len(sheet),
            efficiency=sheet_efficiency(sheet),
            used_area_mm2=used_area(sheet),
            waste_area_mm2=waste_area(sheet),
            overflow_ids=[p.id for p in sheet.pieces if p.overflow],
            slug=slug
        )


@dataclass
class MaterialReport:
    """All sheets of one material"""
    material: str
    sheets: List[SheetReport] = field(default_factory=list)
    efficiency: float = 0.0

    @property
    def sheet_count(self) -> int:
        return len(self.sheets)

    @property
    def parts_count(self) -> int:
        return sum(s.parts_count for s in self.sheets)


@dataclass
class NestingReport:
    """Full nesting report"""
    materials: List[MaterialReport] = field(default_factory=list)
    excluded: List[PackingIssue] = field(default_factory=list)
    overflow: List[PackingIssue] = field(default_factory=list)
    total_sheets: int = 0
    total_parts: int = 0
    total_used_area_mm2: float = 0
    total_waste_area_mm2: float = 0

    def __post_init__(self):
        if self.materials:
            sheets = [s for m in self.materials for s in m.sheets]
            self.total_sheets = len(sheets)
            self.total_parts = sum(s.parts_count for s in sheets)
            self.total_used_area_mm2 = sum(s.used_area_mm2 for s in sheets)
            self.total_waste_area_mm2 = sum(s.waste_area_mm2 for s in sheets)

    def summary_lines(self) -> List[str]:
        """Plain text summary, one line per sheet."""
        lines = []
        for material in self.materials:
            lines.append(f"{material.material}: {material.sheet_count} sheet(s), "
                         f"{material.parts_count} parts, {format_efficiency(material.efficiency)}")
            for sheet in material.sheets:
                line = (f"  #{sheet.index} {sheet.width_mm:.0f}x{sheet.height_mm:.0f}mm "
                        f"{sheet.parts_count} parts, {sheet.efficiency_label}, "
                        f"waste {format_area(sheet.waste_area_mm2)}")
                if sheet.overflow_ids:
                    line += f" OVERFLOW: {', '.join(sheet.overflow_ids)}"
                lines.append(line)
        for issue in self.excluded:
            lines.append(f"Excluded {issue.piece_id}: {issue.reason}")
        return lines


def format_area(value_mm2: float) -> str:
    """Format an area"""
    if value_mm2 >= 1_000_000:
        return f"{value_mm2 / 1_000_000:.2f} m²"
    return f"{value_mm2 / 100:.1f} cm²"


def build_nesting_report(result: PackingResult) -> NestingReport:
    """Summarise a packing result per material and sheet."""
    materials = []
    slugs = unique_material_slugs(result.sheets)
    for material_key, sheets in result.sheets.items():
        materials.append(MaterialReport(
            material=material_key,
            sheets=[SheetReport.from_sheet(s, slugs[material_key]) for s in sheets],
            efficiency=material_efficiency(sheets)
        ))

    return NestingReport(
        materials=materials,
        excluded=result.excluded,
        overflow=result.overflow
    )


__all__ = [
    'SheetReport',
    'MaterialReport',
    'NestingReport',
    'build_nesting_report',
    'format_area',
    'material_slug',
    'sheet_filename',
    'sheet_filenames',
    'unique_material_slugs',
]
