"""
DXF Nesting Export
==================
Export of packed sheets to DXF cut files.

The packer works with a top-left origin (y down); DXF uses y up, so every
rectangle is mirrored against the sheet height on the way out.
"""

import logging
from pathlib import Path
from typing import List, Tuple

import ezdxf
from ezdxf import units
from ezdxf.enums import TextEntityAlignment

from core.exceptions import ExportError
from nesting.efficiency import format_efficiency, sheet_efficiency
from nesting.models import PlacedPiece, Sheet
from reports import sheet_filenames

logger = logging.getLogger(__name__)


class DXFNestingExporter:
    """Nesting exporter to DXF"""

    # Layer colors (AutoCAD indexes)
    COLOR_SHEET = 8       # Grey - sheet
    COLOR_MARGIN = 9      # Light grey - margin
    COLOR_PARTS = 3       # Green - pieces
    COLOR_OVERFLOW = 1    # Red - overflow pieces
    COLOR_LABELS = 7      # White - labels

    def __init__(self):
        self.doc = None
        self.msp = None

    def export_all_sheets(self, sheets: List[Sheet], output_dir: str) -> List[str]:
        """
        Export every sheet to its own DXF file.

        Args:
            sheets: Packed sheets
            output_dir: Output directory

        Returns:
            Paths of the generated files
        """
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        generated_files = []
        for sheet, name in zip(sheets, sheet_filenames(sheets)):
            filepath = output_path / f"{name}.dxf"
            self.export_sheet(sheet, str(filepath))
            generated_files.append(str(filepath))

        logger.info(f"Exported {len(generated_files)} DXF files to {output_dir}")
        return generated_files

    def export_sheet(self, sheet: Sheet, output_path: str) -> str:
        """
        Export a single sheet to DXF.

        Raises:
            ExportError: file could not be written
        """
        self.doc = ezdxf.new('R2010')
        self.doc.units = units.MM
        self.msp = self.doc.modelspace()

        self._create_layers()
        self._draw_sheet_outline(sheet)
        self._draw_margin(sheet)
        for piece in sheet.pieces:
            self._draw_piece(sheet, piece)
        self._add_sheet_info(sheet)

        try:
            self.doc.saveas(output_path)
        except OSError as e:
            raise ExportError(output_path, str(e)) from e

        logger.info(f"Exported {sheet.material_key} sheet {sheet.index} to: {output_path}")
        return output_path

    def _create_layers(self):
        """Create document layers"""
        layers = [
            ('SHEET', self.COLOR_SHEET),
            ('MARGIN', self.COLOR_MARGIN),
            ('PARTS', self.COLOR_PARTS),
            ('OVERFLOW', self.COLOR_OVERFLOW),
            ('LABELS', self.COLOR_LABELS),
            ('INFO', self.COLOR_LABELS),
        ]

        for name, color in layers:
            self.doc.layers.add(name, color=color)

    def _draw_sheet_outline(self, sheet: Sheet):
        """Draw the sheet outline"""
        w, h = sheet.stock.sheet_width, sheet.stock.sheet_height

        self.msp.add_lwpolyline(
            [(0, 0), (w, 0), (w, h), (0, h)],
            close=True,
            dxfattribs={'layer': 'SHEET', 'lineweight': 50}
        )

    def _draw_margin(self, sheet: Sheet):
        """Draw the working margin"""
        margin = sheet.stock.margin
        if margin <= 0:
            return

        w, h = sheet.stock.sheet_width, sheet.stock.sheet_height

        self.msp.add_lwpolyline(
            [(margin, margin), (w - margin, margin),
             (w - margin, h - margin), (margin, h - margin)],
            close=True,
            dxfattribs={'layer': 'MARGIN'}
        )

    def _to_dxf_corners(self, sheet: Sheet, piece: PlacedPiece) -> List[Tuple[float, float]]:
        """Rectangle corners in DXF coordinates (y up)"""
        h_sheet = sheet.stock.sheet_height
        x0, x1 = piece.x, piece.right
        y0, y1 = h_sheet - piece.bottom, h_sheet - piece.y
        return [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]

    def _draw_piece(self, sheet: Sheet, piece: PlacedPiece):
        """Draw a single piece with its label"""
        layer = 'OVERFLOW' if piece.overflow else 'PARTS'
        corners = self._to_dxf_corners(sheet, piece)

        self.msp.add_lwpolyline(
            corners,
            close=True,
            dxfattribs={'layer': layer, 'lineweight': 25}
        )

        label = piece.name or piece.id
        short_label = label[:15] + '...' if len(label) > 15 else label
        center_x = (corners[0][0] + corners[2][0]) / 2
        center_y = (corners[0][1] + corners[2][1]) / 2

        self.msp.add_text(
            short_label,
            dxfattribs={
                'layer': 'LABELS',
                'height': max(1.0, min(piece.effective_width, piece.effective_height) / 10)
            }
        ).set_placement((center_x, center_y), align=TextEntityAlignment.MIDDLE_CENTER)

    def _add_sheet_info(self, sheet: Sheet):
        """Sheet information above the outline"""
        stock = sheet.stock
        info_lines = [
            f"Sheet {sheet.index}: {stock.sheet_width:.0f}x{stock.sheet_height:.0f}mm",
            f"Material: {sheet.material_key}",
            f"Pieces: {len(sheet)}",
            f"Efficiency: {format_efficiency(sheet_efficiency(sheet))}",
        ]

        y_pos = stock.sheet_height + 40
        for line in info_lines:
            self.msp.add_text(
                line,
                dxfattribs={'layer': 'INFO', 'height': 10}
            ).set_placement((0, y_pos), align=TextEntityAlignment.LEFT)
            y_pos -= 15


def export_sheets_dxf(sheets: List[Sheet], output_dir: str) -> List[str]:
    """
    Export packed sheets to DXF files.

    Returns:
        Paths of the generated files
    """
    return DXFNestingExporter().export_all_sheets(sheets, output_dir)
