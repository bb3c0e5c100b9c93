"""Reference data services — ferroalloy catalog, burn loss table, steel grades.

Loads the course reference tables from ``metcalc/data/`` once and serves
read-only lookups.  Nothing here is mutated after construction, so a single
instance can be shared by any number of calculations.

All compositions and burn losses are in % by mass (core units).
"""

import json
import logging
import math
import pathlib
from collections.abc import Mapping
from types import MappingProxyType

from metcalc.constants import (
    BURN_LOSS_FILENAME,
    FERROALLOYS_FILENAME,
    STEEL_GRADES_FILENAME,
)
from metcalc.core.errors import CatalogError, UnknownGrade, UnknownMaterial
from metcalc.core.units import retained_fraction
from metcalc.models.material import AdditiveMaterial, Composition
from metcalc.models.steel_grade import GradeCategory, ReferenceGrade

logger = logging.getLogger(__name__)

DATA_DIR = pathlib.Path(__file__).resolve().parents[1] / "data"


def _read_json(filepath: pathlib.Path) -> dict | None:
    """Parse a reference file, or return None if it does not exist."""
    if not filepath.exists():
        logger.warning("Reference file not found: %s", filepath)
        return None
    try:
        with open(filepath, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Malformed reference file {filepath}: {exc}") from exc


def _percentages(raw: Mapping, context: str) -> Composition:
    """Validate an element → percent mapping."""
    if not isinstance(raw, Mapping):
        raise CatalogError(f"{context}: expected element mapping, got {type(raw).__name__}")
    result: Composition = {}
    for element, value in raw.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise CatalogError(f"{context}: {element} value {value!r} is not a number")
        value = float(value)
        if not math.isfinite(value) or not 0.0 <= value <= 100.0:
            raise CatalogError(f"{context}: {element} = {value} outside 0–100 %")
        result[str(element)] = value
    return result


class MaterialCatalog:
    """Ferroalloy composition lookup.

    Args:
        materials: Materials keyed by ID.  Use :meth:`from_file` or
            :meth:`from_mapping` instead of calling this directly.
    """

    def __init__(self, materials: Mapping[str, AdditiveMaterial]) -> None:
        self._materials: Mapping[str, AdditiveMaterial] = MappingProxyType(dict(materials))

    @classmethod
    def from_mapping(
        cls,
        compositions: Mapping[str, Mapping[str, float]],
        names: Mapping[str, str] | None = None,
    ) -> "MaterialCatalog":
        """Build a catalog from material ID → composition [%]."""
        names = names or {}
        materials = {
            mat_id: AdditiveMaterial(
                id=mat_id,
                name=names.get(mat_id, mat_id),
                composition=MappingProxyType(
                    _percentages(comp, f"Material {mat_id!r}")
                ),
            )
            for mat_id, comp in compositions.items()
        }
        return cls(materials)

    @classmethod
    def from_file(cls, filepath: str | pathlib.Path | None = None) -> "MaterialCatalog":
        """Load ``ferroalloys.json``.

        Args:
            filepath: JSON file path.  If *None*, the packaged table is used.
        """
        filepath = pathlib.Path(filepath) if filepath else DATA_DIR / FERROALLOYS_FILENAME
        raw = _read_json(filepath) or {}
        compositions: dict[str, Mapping[str, float]] = {}
        names: dict[str, str] = {}
        for entry in raw.get("materials", []):
            try:
                mat_id = entry["id"]
                compositions[mat_id] = entry["composition"]
            except (KeyError, TypeError) as exc:
                raise CatalogError(f"Malformed material entry in {filepath}: {entry!r}") from exc
            names[mat_id] = entry.get("name", mat_id)
        catalog = cls.from_mapping(compositions, names)
        logger.info("Loaded %d materials from %s", len(catalog), filepath)
        return catalog

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_material(self, material_id: str) -> AdditiveMaterial:
        """Return a single material by ID.

        Raises:
            UnknownMaterial: If *material_id* is not found.
        """
        try:
            return self._materials[material_id]
        except KeyError:
            raise UnknownMaterial(material_id) from None

    def get_all_materials(self) -> list[AdditiveMaterial]:
        """Return all loaded materials."""
        return list(self._materials.values())

    def material_ids(self) -> list[str]:
        return list(self._materials)

    def composition_of(self, material_id: str) -> Composition:
        """Copy of a material's composition [%].

        Raises:
            UnknownMaterial: If *material_id* is not found.
        """
        return dict(self.get_material(material_id).composition)

    def __contains__(self, material_id: object) -> bool:
        return material_id in self._materials

    def __len__(self) -> int:
        return len(self._materials)


class BurnLossTable:
    """Element burn loss lookup.

    Elements without an entry have no modelled loss.

    Args:
        losses: Element symbol → loss [%].
    """

    def __init__(self, losses: Mapping[str, float]) -> None:
        checked = _percentages(losses, "Burn loss")
        for element, loss in checked.items():
            if loss >= 100.0:
                raise CatalogError(f"Burn loss: {element} loses 100 %, nothing is retained")
        self._losses: Mapping[str, float] = MappingProxyType(checked)

    @classmethod
    def from_file(cls, filepath: str | pathlib.Path | None = None) -> "BurnLossTable":
        """Load ``burn_loss.json``.

        Args:
            filepath: JSON file path.  If *None*, the packaged table is used.
        """
        filepath = pathlib.Path(filepath) if filepath else DATA_DIR / BURN_LOSS_FILENAME
        raw = _read_json(filepath) or {}
        table = cls(raw.get("burn_loss", {}))
        logger.info("Loaded burn loss for %d elements from %s", len(table), filepath)
        return table

    def burn_loss_of(self, element: str) -> float:
        """Loss of *element* on addition [%], 0.0 if not tabulated."""
        return self._losses.get(element, 0.0)

    def retained_fraction(self, element: str) -> float:
        """Fraction of the added *element* that stays in the melt [0–1]."""
        return retained_fraction(self.burn_loss_of(element))

    def as_dict(self) -> dict[str, float]:
        return dict(self._losses)

    def __len__(self) -> int:
        return len(self._losses)


class GradeReference:
    """Known steel grades with their family and nominal chemistry.

    Args:
        grades: Reference grades; names must be unique.
    """

    def __init__(self, grades: list[ReferenceGrade]) -> None:
        by_name: dict[str, ReferenceGrade] = {}
        for grade in grades:
            if grade.name in by_name:
                raise CatalogError(f"Duplicate steel grade: {grade.name!r}")
            by_name[grade.name] = grade
        self._grades: Mapping[str, ReferenceGrade] = MappingProxyType(by_name)

    @classmethod
    def from_file(cls, filepath: str | pathlib.Path | None = None) -> "GradeReference":
        """Load ``steel_grades.json``.

        Args:
            filepath: JSON file path.  If *None*, the packaged table is used.
        """
        filepath = pathlib.Path(filepath) if filepath else DATA_DIR / STEEL_GRADES_FILENAME
        raw = _read_json(filepath) or {}
        grades: list[ReferenceGrade] = []
        for entry in raw.get("grades", []):
            try:
                name = entry["name"]
                category = GradeCategory(entry["category"])
            except (KeyError, TypeError, ValueError) as exc:
                raise CatalogError(f"Malformed grade entry in {filepath}: {entry!r}") from exc
            grades.append(ReferenceGrade(
                name=name,
                category=category,
                composition=_percentages(entry.get("composition", {}), f"Grade {name!r}"),
            ))
        reference = cls(grades)
        logger.info("Loaded %d steel grades from %s", len(reference), filepath)
        return reference

    def find(self, name: str) -> ReferenceGrade | None:
        """Exact-name lookup; surrounding whitespace is ignored."""
        return self._grades.get(name.strip())

    def get(self, name: str) -> ReferenceGrade:
        """Exact-name lookup.

        Raises:
            UnknownGrade: If *name* is not in the table.
        """
        grade = self.find(name)
        if grade is None:
            raise UnknownGrade(name)
        return grade

    def names(self) -> list[str]:
        return list(self._grades)

    def __len__(self) -> int:
        return len(self._grades)
