"""Alloying calculator — ferroalloy demand for deoxidation and alloying.

Material balance with burn loss (course section 7):

    Additive mass (formula 7.1):
        M_A = M_melt × ΔE × 100 / (E_A × (100 − K_E))

    Contribution of every element i carried by the additive:
        m_i [kg] = M_A × p_i × (100 − K_i) / 10000
        Δ[i] [%] = m_i / M_melt × 100

Additives are applied as a fold over a fixed sequence of steps
(Mn → Si → Al → C).  Each step sees the running composition left by the
previous ones: ferromanganese brings carbon and silicon along, so less
ferrosilicon and carburizer are needed afterwards.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from metcalc.constants import (
    ALUMINUM,
    ALUMINUM_ID,
    CARBON,
    CARBURIZER_ID,
    DEFAULT_SWEEP_STEPS,
    FERROMANGANESE_ID,
    FERROSILICON_ID,
    MANGANESE,
    MAX_SWEEP_STEPS,
    SILICON,
)
from metcalc.core.errors import CatalogError, InvalidComposition, InvalidInput
from metcalc.core.units import kg_to_percent_of, percent_to_fraction
from metcalc.models.material import Composition
from metcalc.models.results import (
    AlloyingRequest,
    AlloyingResult,
    AlloyingStepResult,
)

if TYPE_CHECKING:
    from metcalc.core.material_database import BurnLossTable, MaterialCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlloyingStep:
    """Adjust *element* with additive *material_id*."""
    element: str
    material_id: str


DEFAULT_SEQUENCE: tuple[AlloyingStep, ...] = (
    AlloyingStep(MANGANESE, FERROMANGANESE_ID),
    AlloyingStep(SILICON, FERROSILICON_ID),
    AlloyingStep(ALUMINUM, ALUMINUM_ID),
    AlloyingStep(CARBON, CARBURIZER_ID),
)


def validate_compositions(initial: Composition, target: Composition) -> None:
    """Check that no target element is below its initial content.

    Raises:
        InvalidInput: If any content is NaN or infinite.
        InvalidComposition: Naming the first offending element.
    """
    for label, composition in (("Initial", initial), ("Target", target)):
        for element, pct in composition.items():
            if not math.isfinite(pct):
                raise InvalidInput(
                    element, f"{label} {element} content must be finite, got {pct}",
                )
    for element, target_pct in target.items():
        initial_pct = initial.get(element, 0.0)
        if target_pct < initial_pct:
            raise InvalidComposition(element, initial_pct, target_pct)


class AlloyingCalculator:
    """Deoxidation / alloying material balance.

    Args:
        materials: Ferroalloy composition catalog.
        burn_loss: Element burn loss table.
        sequence: Ordered (element, additive) steps.  Defaults to
            Mn → Si → Al → C.
    """

    def __init__(
        self,
        materials: MaterialCatalog,
        burn_loss: BurnLossTable,
        sequence: tuple[AlloyingStep, ...] = DEFAULT_SEQUENCE,
    ) -> None:
        self._materials = materials
        self._burn_loss = burn_loss
        self._sequence = tuple(sequence)

    @property
    def sequence(self) -> tuple[AlloyingStep, ...]:
        return self._sequence

    # ------------------------------------------------------------------
    # Formulas
    # ------------------------------------------------------------------

    def additive_mass(
        self,
        melt_mass_kg: float,
        needed_pct: float,
        material_id: str,
        element: str,
    ) -> float:
        """Additive mass that raises *element* by *needed_pct* (formula 7.1).

        Args:
            melt_mass_kg: Liquid steel mass [kg].
            needed_pct: Required rise of the element content [%].
            material_id: Additive supplying the element.
            element: Element symbol.

        Returns:
            Additive mass [kg].

        Raises:
            UnknownMaterial: If *material_id* is not in the catalog.
            CatalogError: If the additive carries none of *element*.
        """
        content = self._materials.get_material(material_id).content_of(element)
        if content <= 0.0:
            raise CatalogError(f"Material {material_id!r} contains no {element}")
        loss = self._burn_loss.burn_loss_of(element)
        return (melt_mass_kg * needed_pct * 100.0) / (content * (100.0 - loss))

    def apply_contribution(
        self,
        composition: Composition,
        material_id: str,
        material_kg: float,
        melt_mass_kg: float,
    ) -> Composition:
        """Composition after dissolving *material_kg* of an additive.

        Every element of the additive is added, net of its own burn loss,
        including elements the target does not mention.

        Args:
            composition: Running composition [%].  Not modified.
            material_id: Additive identifier.
            material_kg: Additive mass [kg].
            melt_mass_kg: Liquid steel mass [kg].

        Returns:
            New composition [%].
        """
        updated = dict(composition)
        for element, pct in self._materials.composition_of(material_id).items():
            element_kg = (
                material_kg * percent_to_fraction(pct) * self._burn_loss.retained_fraction(element)
            )
            updated[element] = updated.get(element, 0.0) + float(
                kg_to_percent_of(element_kg, melt_mass_kg)
            )
        return updated

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def apply_step(
        self,
        step: AlloyingStep,
        composition: Composition,
        target: Composition,
        melt_mass_kg: float,
    ) -> AlloyingStepResult:
        """Evaluate one step against the running composition.

        The element is skipped when it is absent from *target* or already
        at or above it.
        """
        needed = target.get(step.element, 0.0) - composition.get(step.element, 0.0)
        if step.element not in target or needed <= 0.0:
            return AlloyingStepResult(
                element=step.element,
                material_id=step.material_id,
                needed_pct=needed,
                composition_after=dict(composition),
            )

        mass = self.additive_mass(melt_mass_kg, needed, step.material_id, step.element)
        after = self.apply_contribution(composition, step.material_id, mass, melt_mass_kg)
        logger.debug(
            "%s: +%.4f %% with %.2f kg %s", step.element, needed, mass, step.material_id,
        )
        return AlloyingStepResult(
            element=step.element,
            material_id=step.material_id,
            needed_pct=needed,
            mass_kg=mass,
            applied=True,
            composition_after=after,
        )

    def compute_alloying(
        self,
        melt_mass_kg: float,
        initial: Composition,
        target: Composition,
        grade_label: str = "",
    ) -> AlloyingResult:
        """Ferroalloy masses and final composition for one heat.

        Args:
            melt_mass_kg: Liquid steel mass [kg], > 0.
            initial: Composition before additions [%].
            target: Required composition [%].
            grade_label: Steel grade designation, echoed in the result.

        Returns:
            AlloyingResult with per-additive masses, carburizer mass,
            final composition and the step trace.

        Raises:
            InvalidInput: If *melt_mass_kg* is not a positive number.
            InvalidComposition: If a target element is below its initial
                content.
        """
        if not math.isfinite(melt_mass_kg) or melt_mass_kg <= 0:
            raise InvalidInput(
                "melt_mass_kg", f"Melt mass must be positive, got {melt_mass_kg}",
            )
        initial = dict(initial)
        target = dict(target)
        validate_compositions(initial, target)

        composition = dict(initial)
        additions: dict[str, float] = {}
        steps: list[AlloyingStepResult] = []
        carbon_kg = 0.0

        for step in self._sequence:
            outcome = self.apply_step(step, composition, target, melt_mass_kg)
            steps.append(outcome)
            if not outcome.applied:
                continue
            additions[step.material_id] = additions.get(step.material_id, 0.0) + outcome.mass_kg
            if step.element == CARBON:
                carbon_kg += outcome.mass_kg
            composition = outcome.composition_after

        logger.debug(
            "Alloying %r: %d additive(s), %.2f kg total",
            grade_label, len(additions), sum(additions.values()),
        )
        return AlloyingResult(
            grade_label=grade_label,
            melt_mass_kg=melt_mass_kg,
            initial=initial,
            target=target,
            additions=additions,
            carbon_additive_kg=carbon_kg,
            final_composition=composition,
            steps=steps,
        )

    def calculate(self, request: AlloyingRequest) -> AlloyingResult:
        """Run :meth:`compute_alloying` for a request object."""
        return self.compute_alloying(
            request.melt_mass_kg,
            request.initial,
            request.target,
            request.grade_label,
        )

    def target_sweep(
        self,
        element: str,
        melt_mass_kg: float,
        initial: Composition,
        target: Composition,
        max_pct: float,
        steps: int = DEFAULT_SWEEP_STEPS,
    ) -> list[AlloyingResult]:
        """Alloying results over a range of target contents for one element.

        The target of *element* runs linearly from its initial content to
        *max_pct*; all other targets are held fixed.

        Args:
            element: Element whose target is varied.
            melt_mass_kg: Liquid steel mass [kg].
            initial: Composition before additions [%].
            target: Base target composition [%].
            max_pct: Upper end of the sweep [%].
            steps: Number of sweep points.

        Returns:
            List of AlloyingResult, one per target value.
        """
        if steps < 1:
            raise InvalidInput("steps", f"Sweep needs at least one point, got {steps}")
        if steps > MAX_SWEEP_STEPS:
            raise InvalidInput("steps", f"Sweep limited to {MAX_SWEEP_STEPS} points, got {steps}")
        start = initial.get(element, 0.0)
        if max_pct < start:
            raise InvalidComposition(element, start, max_pct)
        results: list[AlloyingResult] = []
        for value in np.linspace(start, max_pct, steps):
            swept = dict(target)
            swept[element] = float(value)
            results.append(self.compute_alloying(melt_mass_kg, initial, swept))
        return results
