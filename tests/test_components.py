"""Component adapter and manual preview tests."""

import pytest

from config.settings import fold_material_name, stock_sheet_for_material
from core.exceptions import InvalidFieldValueError, RequiredFieldError
from nesting.components import component_to_piece, components_to_pieces, is_sheet_material, material_name
from nesting.models import StockSheet
from nesting.preview import generate_nesting_preview
from reports import material_slug, sheet_filename, unique_material_slugs


def component(component_id, material, length, height, unit="cm", name=""):
    return {
        'id': component_id,
        'name': name,
        'material': {'type': material},
        'dimensions': {'length': length, 'height': height, 'unit': unit},
    }


def test_component_converted_to_millimetres():
    request = component_to_piece(component("C1", "MDF 15mm", 100, 50, name="Side panel"))

    assert request.id == "C1"
    assert request.material_key == "MDF 15mm"
    assert (request.width, request.height) == (1000, 500)
    assert request.name == "Side panel"


@pytest.mark.parametrize("unit, expected", [("mm", 100), ("cm", 1000), ("m", 100_000)])
def test_units(unit, expected):
    request = component_to_piece(component("C", "MDF", 100, 100, unit=unit))
    assert request.width == expected


def test_spanish_payload_is_accepted():
    record = {
        'id': 'c-7',
        'nombre': 'Base',
        'material': {'tipo': 'Triplay 18mm', 'especificaciones': ''},
        'dimensiones': {'largo': 120, 'alto': 60, 'unidad': 'cm'},
    }
    request = component_to_piece(record)

    assert (request.material_key, request.width, request.height, request.name) == \
        ("Triplay 18mm", 1200, 600, "Base")


def test_missing_unit_uses_default():
    record = {'id': 'C', 'material': 'MDF', 'dimensions': {'length': 10, 'height': 5}}
    assert component_to_piece(record, default_unit="mm").width == 10
    assert component_to_piece(record, default_unit="cm").width == 100


def test_missing_side_becomes_zero_for_exclusion():
    record = {'id': 'C', 'material': 'MDF', 'dimensions': {'length': 10, 'unit': 'cm'}}
    request = component_to_piece(record)

    assert request.height == 0
    assert not request.has_valid_dimensions()


@pytest.mark.parametrize("record, error", [
    ({'material': 'MDF', 'dimensions': {}}, RequiredFieldError),
    ({'id': 'C', 'dimensions': {}}, RequiredFieldError),
    ({'id': 'C', 'material': {'specs': 'x'}, 'dimensions': {}}, RequiredFieldError),
    ({'id': 'C', 'material': 'MDF'}, RequiredFieldError),
    ({'id': 'C', 'material': 'MDF', 'dimensions': [1, 2]}, InvalidFieldValueError),
    ({'id': 'C', 'material': 'MDF', 'dimensions': {'length': 'abc', 'height': 1}}, InvalidFieldValueError),
    ({'id': 'C', 'material': 'MDF', 'dimensions': {'length': 1, 'height': 1, 'unit': 'in'}},
     InvalidFieldValueError),
    ({'id': 'C', 'material': 42, 'dimensions': {}}, InvalidFieldValueError),
    ("C1", InvalidFieldValueError),
])
def test_ambiguous_components_rejected(record, error):
    with pytest.raises(error):
        component_to_piece(record)


def test_sheet_material_filter():
    assert is_sheet_material("MDF 15mm")
    assert is_sheet_material("Acrilico transparente")
    assert is_sheet_material("Birch Plywood")
    assert not is_sheet_material("Steel tube 1in")
    assert not is_sheet_material("LED strip")


def test_accented_material_names_are_sheet_goods():
    assert is_sheet_material("Acrílico Transparente 3mm")
    assert is_sheet_material("ACRÍLICO BLANCO 6MM")
    assert stock_sheet_for_material("Acrílico Transparente 3mm").sheet_height == 1000
    assert fold_material_name("Acrílico Transparente 3mm") == "acrilico transparente 3mm"


def test_catalog_acrylic_reaches_preview():
    files = generate_nesting_preview([component("C1", "Acrílico Transparente 3mm", 40, 40)])

    assert list(files) == ["layout_Acrilico_Transparente_3mm_sheet_1"]
    assert "(2440 x 1000 mm)" in files["layout_Acrilico_Transparente_3mm_sheet_1"]


def test_components_to_pieces_skips_non_sheet_materials():
    records = [
        component("C1", "MDF 15mm", 100, 50),
        component("C2", "Steel tube", 200, 2),
        component("C3", "Acrylic 3mm", 40, 40),
    ]

    assert [p.id for p in components_to_pieces(records)] == ["C1", "C3"]
    assert [p.id for p in components_to_pieces(records, sheet_only=False)] == ["C1", "C2", "C3"]


def test_material_name_plain_string():
    assert material_name({'material': '  MDF  '}) == "MDF"


# ============================================================
# Preview
# ============================================================

def test_preview_keys_per_material_and_sheet():
    records = [
        component("C1", "MDF 15mm", 100, 50),
        component("C2", "MDF 15mm", 100, 50),
        component("C3", "Acrylic 3mm", 100, 50),
        component("C4", "Steel tube", 100, 5),
    ]
    files = generate_nesting_preview(records)

    assert list(files) == ["layout_MDF_15mm_sheet_1", "layout_Acrylic_3mm_sheet_1"]
    assert "C1" in files["layout_MDF_15mm_sheet_1"]
    assert "(2440 x 1000 mm)" in files["layout_Acrylic_3mm_sheet_1"]
    assert "(2440 x 1220 mm)" in files["layout_MDF_15mm_sheet_1"]


def test_preview_with_explicit_stock_sheet():
    stock = StockSheet(1000, 1000, margin=10, spacing=10)
    files = generate_nesting_preview([component("C1", "MDF", 50, 50), component("C2", "MDF", 50, 50)], stock)

    assert list(files) == ["layout_MDF_sheet_1", "layout_MDF_sheet_2"]


def test_preview_keeps_materials_with_same_file_name():
    files = generate_nesting_preview([
        component("C1", "MDF 15mm", 100, 50),
        component("C2", "MDF-15mm", 100, 50),
    ])

    assert list(files) == ["layout_MDF_15mm_sheet_1", "layout_MDF_15mm_2_sheet_1"]
    assert ">C1<" in files["layout_MDF_15mm_sheet_1"]
    assert ">C2<" in files["layout_MDF_15mm_2_sheet_1"]


def test_preview_without_sheet_materials_is_empty():
    assert generate_nesting_preview([component("C1", "Paint", 1, 1)]) == {}


def test_sheet_filename():
    assert material_slug("MDF 15mm") == "MDF_15mm"
    assert sheet_filename("Triplay/18", 3) == "layout_Triplay_18_sheet_3"


def test_unique_material_slugs_suffix_collisions():
    slugs = unique_material_slugs(["MDF 15mm", "MDF-15mm", "MDF 15mm", "MDF_15mm_2", "Triplay"])

    assert slugs == {
        "MDF 15mm": "MDF_15mm",
        "MDF-15mm": "MDF_15mm_2",
        "MDF_15mm_2": "MDF_15mm_2_2",
        "Triplay": "Triplay",
    }
