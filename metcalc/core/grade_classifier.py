"""Steel grade classifier — grade label → (density, kz) for caster sizing.

Decision order:
    1. Exact match in the reference grade table.
    2. Heuristic rules on the label (Russian GOST designations), first
       match wins:
         alloyed          — Cyrillic Х (Cr) or Н (Ni), "4543-71", "08Х"
         high carbon      — "70", Cyrillic У (tool steel), or the digits of
                            the label read as a number exceed 50
         manganese-silicon — "ГС" or "ХГ"
    3. Ordinary carbon steel.

The alloyed rule runs before the manganese-silicon rule, so a label such as
"25ХГСА" is classified as alloyed and the "ХГ" branch never fires.  Reference
grades are tabulated with the category the rules give them.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from metcalc.core.material_database import GradeReference
from metcalc.models.steel_grade import (
    GradeCategory,
    ProfileSource,
    SteelGradeProfile,
)

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"[^0-9]")

HIGH_CARBON_NUMBER_THRESHOLD = 50


def _is_alloyed(label: str) -> bool:
    return (
        "Х" in label
        or "Н" in label
        or "4543-71" in label
        or "08Х" in label
    )


def _is_high_carbon(label: str) -> bool:
    if "70" in label or "У" in label:
        return True
    # All digits of the label concatenated, e.g. "60С2А" → 602.
    # Three or more significant digits always exceed the threshold, so
    # arbitrarily long digit runs are never converted.
    digits = _NON_DIGITS.sub("", label).lstrip("0")
    if len(digits) > 2:
        return True
    return bool(digits) and int(digits) > HIGH_CARBON_NUMBER_THRESHOLD


def _is_manganese_silicon(label: str) -> bool:
    return "ГС" in label or "ХГ" in label


# (rule name, predicate, category), evaluated in order
CLASSIFICATION_RULES: tuple[tuple[str, Callable[[str], bool], GradeCategory], ...] = (
    ("alloyed", _is_alloyed, GradeCategory.ALLOYED),
    ("high_carbon", _is_high_carbon, GradeCategory.HIGH_CARBON),
    ("manganese_silicon", _is_manganese_silicon, GradeCategory.MANGANESE_SILICON),
)

DEFAULT_CATEGORY = GradeCategory.ORDINARY_CARBON


class SteelGradeClassifier:
    """Maps steel grade labels to caster constants.

    Args:
        reference: Known grades checked before the heuristics.  If *None*,
            only the heuristic rules and the default apply.
    """

    def __init__(self, reference: GradeReference | None = None) -> None:
        self._reference = reference

    def classify(self, grade_label: str) -> SteelGradeProfile:
        """Derive density and solidification coefficient for a grade.

        Args:
            grade_label: Grade designation (free text).

        Returns:
            SteelGradeProfile with category, density [kg/m³], kz and the
            source of the decision.
        """
        label = grade_label.strip()

        if self._reference is not None:
            grade = self._reference.find(label)
            if grade is not None:
                return SteelGradeProfile.of(grade.category, ProfileSource.REFERENCE)

        for rule_name, matches, category in CLASSIFICATION_RULES:
            if matches(label):
                logger.debug("Grade %r matched rule %s", label, rule_name)
                return SteelGradeProfile.of(category, ProfileSource.HEURISTIC, rule_name)

        logger.debug("Grade %r fell through to %s", label, DEFAULT_CATEGORY.value)
        return SteelGradeProfile.of(DEFAULT_CATEGORY, ProfileSource.DEFAULT)
