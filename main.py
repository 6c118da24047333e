#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Fabrication Nesting - command line
Packs cut pieces from a JSON file onto stock sheets.

Usage:
    python main.py pieces.json                    # Summary only
    python main.py pieces.json --svg --dxf        # + diagrams in ./nesting_output
    python main.py manual.json --components       # Component records (cm)
    python main.py pieces.json --check --debug    # Verify layouts, verbose logs

Input JSON: a list of pieces {"id", "material", "width", "height"} (mm), or
{"config": {"sheet_width", ...}, "pieces": [...]} / {"components": [...]}.
"""

import sys
import json
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from config.settings import default_stock_sheet, validate_config
from core.exceptions import NestingError
from nesting.components import components_to_pieces
from nesting.corner_nester import pack
from nesting.layout_check import check_result
from nesting.models import PieceRequest, StockSheet
from reports import build_nesting_report

logger = logging.getLogger(__name__)


def load_input(path: str, as_components: bool = False):
    """
    Read pieces and optional stock sheet from a JSON file.

    Returns:
        (pieces, StockSheet)
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    config = default_stock_sheet()
    if isinstance(data, dict):
        if data.get('config'):
            config = StockSheet.from_dict(data['config'])
        if as_components or 'components' in data:
            records = data.get('components', [])
            as_components = True
        else:
            records = data.get('pieces', [])
    else:
        records = data

    if as_components:
        pieces = components_to_pieces(records)
    else:
        pieces = [PieceRequest.from_dict(r) for r in records]

    return pieces, config


def export_files(result, args) -> List[str]:
    """Write the requested diagram formats"""
    sheets = result.all_sheets()
    written = []

    if args.svg:
        from reports.svg_export import export_sheets_svg
        written += export_sheets_svg(sheets, args.out)

    if args.dxf:
        from reports.dxf_export import export_sheets_dxf
        written += export_sheets_dxf(sheets, args.out)

    if args.png:
        from reports.png_export import export_sheets_png
        written += export_sheets_png(sheets, args.out)

    return written


def main(argv: Optional[List[str]] = None) -> int:
    """Main function"""
    parser = argparse.ArgumentParser(description="Nest cut pieces on stock sheets")
    parser.add_argument('input', help='JSON file with pieces or components')
    parser.add_argument('--components', action='store_true', help='Input holds component records')
    parser.add_argument('--out', default='nesting_output', help='Output directory for diagrams')
    parser.add_argument('--svg', action='store_true', help='Write SVG diagrams')
    parser.add_argument('--dxf', action='store_true', help='Write DXF cut files')
    parser.add_argument('--png', action='store_true', help='Write PNG previews')
    parser.add_argument('--check', action='store_true', help='Verify spacing and containment')
    parser.add_argument('--debug', action='store_true', help='Debug mode (more logs)')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        validate_config()
        pieces, config = load_input(args.input, args.components)
        result = pack(pieces, config)
    except (NestingError, ValueError, OSError) as e:
        logger.error(f"Nesting failed: {e}")
        return 1

    report = build_nesting_report(result)
    print(f"Sheets: {report.total_sheets} | pieces: {report.total_parts} | "
          f"excluded: {len(report.excluded)} | overflow: {len(report.overflow)}")
    for line in report.summary_lines():
        print(line)

    if args.check:
        problems = check_result(result)
        for problem in problems:
            print(f"[!] {problem}")
        if problems:
            return 2

    try:
        for path in export_files(result, args):
            print(f"Saved: {Path(path).name}")
    except NestingError as e:
        logger.error(f"Export failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
