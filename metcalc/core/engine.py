"""Metallurgy engine — wires reference data, classifier and both calculators.

Usage:
    from metcalc.core.engine import MetallurgyEngine

    engine = MetallurgyEngine.create()
    result = engine.compute_caster("35ГС", 140.0, 1.3, 0.16, 1.3, 60.0)
"""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass

from metcalc.constants import (
    BURN_LOSS_FILENAME,
    FERROALLOYS_FILENAME,
    STEEL_GRADES_FILENAME,
)
from metcalc.core.alloying_calculator import AlloyingCalculator
from metcalc.core.caster_calculator import CasterCalculator
from metcalc.core.grade_classifier import SteelGradeClassifier
from metcalc.core.material_database import (
    DATA_DIR,
    BurnLossTable,
    GradeReference,
    MaterialCatalog,
)
from metcalc.models.material import Composition
from metcalc.models.results import AlloyingResult, CasterResult
from metcalc.models.steel_grade import ReferenceGrade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetallurgyEngine:
    """Calculation engine built once at startup and shared read-only.

    Attributes:
        materials: Ferroalloy catalog.
        burn_loss: Element burn loss table.
        grades: Reference steel grades.
        classifier: Grade label → caster constants.
        alloying: Alloying calculator.
        caster: Caster calculator.
    """
    materials: MaterialCatalog
    burn_loss: BurnLossTable
    grades: GradeReference
    classifier: SteelGradeClassifier
    alloying: AlloyingCalculator
    caster: CasterCalculator

    @classmethod
    def create(cls, data_dir: str | pathlib.Path | None = None) -> MetallurgyEngine:
        """Load reference data from *data_dir* and build the calculators.

        Args:
            data_dir: Directory holding the reference JSON files.  If *None*,
                the tables shipped in ``metcalc/data/`` are used.
        """
        data_dir = pathlib.Path(data_dir) if data_dir else DATA_DIR
        materials = MaterialCatalog.from_file(data_dir / FERROALLOYS_FILENAME)
        burn_loss = BurnLossTable.from_file(data_dir / BURN_LOSS_FILENAME)
        grades = GradeReference.from_file(data_dir / STEEL_GRADES_FILENAME)
        logger.info("Reference data loaded from %s", data_dir)
        return cls.from_tables(materials, burn_loss, grades)

    @classmethod
    def from_tables(
        cls,
        materials: MaterialCatalog,
        burn_loss: BurnLossTable,
        grades: GradeReference | None = None,
    ) -> MetallurgyEngine:
        """Build the engine around already loaded tables."""
        grades = grades if grades is not None else GradeReference([])
        classifier = SteelGradeClassifier(grades)
        return cls(
            materials=materials,
            burn_loss=burn_loss,
            grades=grades,
            classifier=classifier,
            alloying=AlloyingCalculator(materials, burn_loss),
            caster=CasterCalculator(classifier),
        )

    def compute_alloying(
        self,
        melt_mass_kg: float,
        initial: Composition,
        target: Composition,
        grade_label: str = "",
    ) -> AlloyingResult:
        """See :meth:`AlloyingCalculator.compute_alloying`."""
        return self.alloying.compute_alloying(melt_mass_kg, initial, target, grade_label)

    def compute_caster(
        self,
        grade_label: str,
        heat_mass_t: float,
        width_m: float,
        thickness_m: float,
        speed_m_per_min: float,
        cycle_time_min: float,
    ) -> CasterResult:
        """See :meth:`CasterCalculator.compute_caster`."""
        return self.caster.compute_caster(
            grade_label, heat_mass_t, width_m, thickness_m, speed_m_per_min, cycle_time_min,
        )

    def reference_grade(self, name: str) -> ReferenceGrade:
        """Reference entry for a grade name.

        Raises:
            UnknownGrade: If *name* is not in the table.
        """
        return self.grades.get(name)

    def nominal_composition(self, name: str) -> Composition:
        """Copy of a reference grade's nominal chemistry [%]."""
        return dict(self.reference_grade(name).composition)
