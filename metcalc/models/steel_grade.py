"""Steel grade data models.

Reference: course table 8.1 — steel properties by grade family.
"""

from dataclasses import dataclass, field
from enum import Enum

from metcalc.models.material import Composition


class GradeCategory(Enum):
    """Grade family driving the caster constants."""
    ALLOYED = "alloyed"
    HIGH_CARBON = "high_carbon"
    MANGANESE_SILICON = "manganese_silicon"
    ORDINARY_CARBON = "ordinary_carbon"

    @property
    def density(self) -> float:
        """Melt density [kg/m³]."""
        return _CATEGORY_CONSTANTS[self][0]

    @property
    def kz(self) -> float:
        """Solidification coefficient [dimensionless]."""
        return _CATEGORY_CONSTANTS[self][1]


# category → (density [kg/m³], kz)
_CATEGORY_CONSTANTS: dict[GradeCategory, tuple[float, float]] = {
    GradeCategory.ALLOYED: (7200.0, 290.0),
    GradeCategory.HIGH_CARBON: (7400.0, 200.0),
    GradeCategory.MANGANESE_SILICON: (7250.0, 260.0),
    GradeCategory.ORDINARY_CARBON: (7300.0, 240.0),
}


class ProfileSource(Enum):
    """How a grade label was assigned its category."""
    REFERENCE = "reference"
    HEURISTIC = "heuristic"
    DEFAULT = "default"


@dataclass(frozen=True)
class SteelGradeProfile:
    """Physical constants derived from a grade label.

    Attributes:
        category: Grade family.
        density: Melt density [kg/m³].
        kz: Solidification coefficient [dimensionless].
        source: Reference table hit, heuristic rule, or default bucket.
        rule: Name of the matching heuristic rule (empty otherwise).
    """
    category: GradeCategory
    density: float
    kz: float
    source: ProfileSource = ProfileSource.DEFAULT
    rule: str = ""

    @classmethod
    def of(
        cls,
        category: GradeCategory,
        source: ProfileSource,
        rule: str = "",
    ) -> "SteelGradeProfile":
        return cls(
            category=category,
            density=category.density,
            kz=category.kz,
            source=source,
            rule=rule,
        )

    def as_tuple(self) -> tuple[float, float]:
        """(density, kz) pair."""
        return self.density, self.kz


@dataclass(frozen=True)
class ReferenceGrade:
    """Known steel grade with its family and nominal chemistry.

    Attributes:
        name: Grade designation (e.g. "35ГС", "12Х18Н10Т").
        category: Grade family.
        composition: Nominal content per element [%].
    """
    name: str
    category: GradeCategory
    composition: Composition = field(default_factory=dict)
