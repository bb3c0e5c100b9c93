"""Reference data service tests.

Validates MaterialCatalog, BurnLossTable and GradeReference loading from the
packaged tables and from injected data.
"""

import json

import pytest

from metcalc.core.errors import CatalogError, UnknownGrade, UnknownMaterial
from metcalc.core.material_database import (
    BurnLossTable,
    GradeReference,
    MaterialCatalog,
)
from metcalc.models.steel_grade import GradeCategory


@pytest.fixture(scope="module")
def catalog() -> MaterialCatalog:
    return MaterialCatalog.from_file()


@pytest.fixture(scope="module")
def burn_loss() -> BurnLossTable:
    return BurnLossTable.from_file()


@pytest.fixture(scope="module")
def grades() -> GradeReference:
    return GradeReference.from_file()


class TestMaterialCatalog:
    def test_loads_all_materials(self, catalog: MaterialCatalog):
        assert len(catalog) == 5

    def test_material_ids(self, catalog: MaterialCatalog):
        ids = {m.id for m in catalog.get_all_materials()}
        assert ids == {"FeMn78", "FeSi65", "FeCr100A", "Al97", "Carburizer"}

    def test_ferromanganese_composition(self, catalog: MaterialCatalog):
        comp = catalog.composition_of("FeMn78")
        assert comp == pytest.approx(
            {"C": 7.0, "Mn": 80.0, "Si": 1.5, "S": 0.03, "P": 0.35, "Fe": 10.6}
        )

    def test_ferrosilicon_carries_aluminum(self, catalog: MaterialCatalog):
        assert catalog.get_material("FeSi65").content_of("Al") == pytest.approx(2.5)

    def test_display_name(self, catalog: MaterialCatalog):
        assert catalog.get_material("FeSi65").name == "Ferrosilicon FS65"

    def test_content_of_absent_element(self, catalog: MaterialCatalog):
        assert catalog.get_material("Carburizer").content_of("Mn") == 0.0

    def test_unknown_material_raises(self, catalog: MaterialCatalog):
        with pytest.raises(UnknownMaterial, match="Unknown material"):
            catalog.composition_of("Unobtanium")

    def test_unknown_material_is_catalog_error_and_key_error(self, catalog: MaterialCatalog):
        with pytest.raises(CatalogError):
            catalog.get_material("Unobtanium")
        with pytest.raises(KeyError):
            catalog.get_material("Unobtanium")

    def test_composition_is_a_copy(self, catalog: MaterialCatalog):
        comp = catalog.composition_of("Al97")
        comp["Al"] = 0.0
        assert catalog.composition_of("Al97")["Al"] == pytest.approx(97.0)

    def test_material_composition_read_only(self, catalog: MaterialCatalog):
        with pytest.raises(TypeError):
            catalog.get_material("Al97").composition["Al"] = 1.0

    def test_contains(self, catalog: MaterialCatalog):
        assert "FeMn78" in catalog
        assert "FeW80" not in catalog

    def test_from_mapping(self):
        cat = MaterialCatalog.from_mapping({"ferromanganese": {"Mn": 80.0}})
        assert cat.material_ids() == ["ferromanganese"]
        assert cat.get_material("ferromanganese").name == "ferromanganese"

    def test_from_mapping_rejects_out_of_range(self):
        with pytest.raises(CatalogError, match="outside"):
            MaterialCatalog.from_mapping({"bad": {"Mn": 120.0}})

    def test_from_mapping_rejects_non_numeric(self):
        with pytest.raises(CatalogError, match="not a number"):
            MaterialCatalog.from_mapping({"bad": {"Mn": "lots"}})

    def test_missing_file_gives_empty_catalog(self, tmp_path):
        cat = MaterialCatalog.from_file(tmp_path / "absent.json")
        assert len(cat) == 0

    def test_malformed_json_raises(self, tmp_path):
        path = tmp_path / "ferroalloys.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError, match="Malformed"):
            MaterialCatalog.from_file(path)

    def test_entry_without_composition_raises(self, tmp_path):
        path = tmp_path / "ferroalloys.json"
        path.write_text(json.dumps({"materials": [{"id": "X"}]}), encoding="utf-8")
        with pytest.raises(CatalogError, match="Malformed material entry"):
            MaterialCatalog.from_file(path)


class TestBurnLossTable:
    def test_values(self, burn_loss: BurnLossTable):
        assert burn_loss.burn_loss_of("Mn") == pytest.approx(10.0)
        assert burn_loss.burn_loss_of("Si") == pytest.approx(15.0)
        assert burn_loss.burn_loss_of("Al") == pytest.approx(40.0)
        assert burn_loss.burn_loss_of("C") == pytest.approx(40.0)

    def test_absent_element_has_no_loss(self, burn_loss: BurnLossTable):
        assert burn_loss.burn_loss_of("S") == 0.0
        assert burn_loss.burn_loss_of("P") == 0.0

    def test_retained_fraction(self, burn_loss: BurnLossTable):
        assert burn_loss.retained_fraction("Si") == pytest.approx(0.85)
        assert burn_loss.retained_fraction("Ni") == pytest.approx(1.0)

    def test_total_loss_rejected(self):
        with pytest.raises(CatalogError, match="nothing is retained"):
            BurnLossTable({"C": 100.0})

    def test_negative_loss_rejected(self):
        with pytest.raises(CatalogError):
            BurnLossTable({"C": -5.0})

    def test_as_dict_is_a_copy(self, burn_loss: BurnLossTable):
        d = burn_loss.as_dict()
        d["Mn"] = 99.0
        assert burn_loss.burn_loss_of("Mn") == pytest.approx(10.0)


class TestGradeReference:
    def test_loads_grades(self, grades: GradeReference):
        assert len(grades) == 25

    def test_lookup(self, grades: GradeReference):
        grade = grades.get("35ГС")
        assert grade.category == GradeCategory.MANGANESE_SILICON
        assert grade.composition["Mn"] == pytest.approx(0.80)
        assert grade.composition["Si"] == pytest.approx(0.60)

    def test_lookup_strips_whitespace(self, grades: GradeReference):
        assert grades.find("  12Х18Н10Т ") is not None

    def test_find_unknown_returns_none(self, grades: GradeReference):
        assert grades.find("AISI 304") is None

    def test_get_unknown_raises(self, grades: GradeReference):
        with pytest.raises(UnknownGrade, match="Unknown steel grade"):
            grades.get("AISI 304")

    def test_unknown_category_rejected(self, tmp_path):
        path = tmp_path / "steel_grades.json"
        path.write_text(
            json.dumps({"grades": [{"name": "X1", "category": "exotic"}]}),
            encoding="utf-8",
        )
        with pytest.raises(CatalogError):
            GradeReference.from_file(path)

    def test_duplicate_name_rejected(self, tmp_path):
        path = tmp_path / "steel_grades.json"
        entry = {"name": "45", "category": "ordinary_carbon"}
        path.write_text(json.dumps({"grades": [entry, entry]}), encoding="utf-8")
        with pytest.raises(CatalogError, match="Duplicate"):
            GradeReference.from_file(path)
