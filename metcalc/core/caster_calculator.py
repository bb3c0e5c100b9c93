"""Caster calculator — continuous-casting machine sizing (course section 8).

    Strands (formula 8.2):
        n = ⌈M / (B × b × ρ × v × τ)⌉

    Metallurgical length (formula 8.5):
        L = k_z × b × M / (0.9 × n × B × τ × ρ)

    Machine radius (formula 8.7) with the minimum radius floor (8.9):
        R = max(2L / π, 42 × b),  H = R

M in kg, B and b in m, ρ in kg/m³, v in m/min, τ in min.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from metcalc.constants import (
    DEFAULT_SWEEP_STEPS,
    MAX_SWEEP_STEPS,
    MIN_RADIUS_THICKNESS_FACTOR,
    SOLIDIFICATION_EFFICIENCY,
)
from metcalc.core.errors import InvalidInput
from metcalc.core.units import t_to_kg
from metcalc.models.results import CasterRequest, CasterResult

if TYPE_CHECKING:
    from metcalc.core.grade_classifier import SteelGradeClassifier

logger = logging.getLogger(__name__)


def _require_positive(**values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value) or value <= 0:
            raise InvalidInput(name, f"{name} must be positive, got {value}")


def minimum_radius(thickness_m: float) -> float:
    """Smallest allowed machine radius for a section thickness [m].

    Below it, straightening strains risk surface cracks in the shell.
    """
    return MIN_RADIUS_THICKNESS_FACTOR * thickness_m


class CasterCalculator:
    """Continuous-casting machine sizing engine.

    Args:
        classifier: Steel grade classifier supplying density and kz.
    """

    def __init__(self, classifier: SteelGradeClassifier) -> None:
        self._classifier = classifier

    def compute_caster(
        self,
        grade_label: str,
        heat_mass_t: float,
        width_m: float,
        thickness_m: float,
        speed_m_per_min: float,
        cycle_time_min: float,
    ) -> CasterResult:
        """Strand count, metallurgical length, radius and height.

        Args:
            grade_label: Steel grade designation.
            heat_mass_t: Heat mass [t].
            width_m: Section width [m].
            thickness_m: Section thickness [m].
            speed_m_per_min: Casting speed [m/min].
            cycle_time_min: Maximum casting time of one heat [min].

        Returns:
            CasterResult; ``radius_m`` has the minimum-radius floor applied,
            ``radius_raw_m`` keeps the unfloored value.

        Raises:
            InvalidInput: If any numeric input is not a positive number.
        """
        _require_positive(
            heat_mass_t=heat_mass_t,
            width_m=width_m,
            thickness_m=thickness_m,
            speed_m_min=speed_m_per_min,
            cycle_time_min=cycle_time_min,
        )
        profile = self._classifier.classify(grade_label)
        mass_kg = float(t_to_kg(heat_mass_t))

        strand_throughput = (
            width_m * thickness_m * profile.density * speed_m_per_min * cycle_time_min
        )
        streams = max(1, math.ceil(mass_kg / strand_throughput))

        metallurgical_length = (profile.kz * thickness_m * mass_kg) / (
            SOLIDIFICATION_EFFICIENCY * streams * width_m * cycle_time_min * profile.density
        )
        radius_raw = 2.0 * metallurgical_length / math.pi
        min_radius = minimum_radius(thickness_m)
        radius = max(radius_raw, min_radius)

        if radius_raw < min_radius:
            logger.debug(
                "Radius %.3f m below minimum %.3f m for b=%.3f m, floor applied",
                radius_raw, min_radius, thickness_m,
            )

        return CasterResult(
            grade_label=grade_label,
            heat_mass_t=heat_mass_t,
            width_m=width_m,
            thickness_m=thickness_m,
            speed_m_min=speed_m_per_min,
            cycle_time_min=cycle_time_min,
            streams=streams,
            metallurgical_length_m=metallurgical_length,
            radius_m=radius,
            height_m=radius,
            density=profile.density,
            kz=profile.kz,
            radius_raw_m=radius_raw,
            min_radius_m=min_radius,
        )

    def calculate(self, request: CasterRequest) -> CasterResult:
        """Run :meth:`compute_caster` for a request object."""
        return self.compute_caster(
            request.grade_label,
            request.heat_mass_t,
            request.width_m,
            request.thickness_m,
            request.speed_m_min,
            request.cycle_time_min,
        )

    def speed_sweep(
        self,
        grade_label: str,
        heat_mass_t: float,
        width_m: float,
        thickness_m: float,
        cycle_time_min: float,
        min_speed: float,
        max_speed: float,
        steps: int = DEFAULT_SWEEP_STEPS,
    ) -> list[CasterResult]:
        """Machine parameters over a range of casting speeds.

        Args:
            grade_label: Steel grade designation.
            heat_mass_t: Heat mass [t].
            width_m: Section width [m].
            thickness_m: Section thickness [m].
            cycle_time_min: Maximum casting time [min].
            min_speed: Lower speed bound [m/min].
            max_speed: Upper speed bound [m/min].
            steps: Number of speed points.

        Returns:
            List of CasterResult, one per speed.
        """
        speeds = _sweep_points("speed_m_min", min_speed, max_speed, steps)
        return [
            self.compute_caster(
                grade_label, heat_mass_t, width_m, thickness_m, float(v), cycle_time_min,
            )
            for v in speeds
        ]

    def thickness_sweep(
        self,
        grade_label: str,
        heat_mass_t: float,
        width_m: float,
        speed_m_per_min: float,
        cycle_time_min: float,
        min_thickness: float,
        max_thickness: float,
        steps: int = DEFAULT_SWEEP_STEPS,
    ) -> list[CasterResult]:
        """Machine parameters over a range of section thicknesses.

        Args:
            grade_label: Steel grade designation.
            heat_mass_t: Heat mass [t].
            width_m: Section width [m].
            speed_m_per_min: Casting speed [m/min].
            cycle_time_min: Maximum casting time [min].
            min_thickness: Lower thickness bound [m].
            max_thickness: Upper thickness bound [m].
            steps: Number of thickness points.

        Returns:
            List of CasterResult, one per thickness.
        """
        thicknesses = _sweep_points("thickness_m", min_thickness, max_thickness, steps)
        return [
            self.compute_caster(
                grade_label, heat_mass_t, width_m, float(b), speed_m_per_min, cycle_time_min,
            )
            for b in thicknesses
        ]


def _sweep_points(field: str, lower: float, upper: float, steps: int) -> np.ndarray:
    if steps < 1:
        raise InvalidInput("steps", f"Sweep needs at least one point, got {steps}")
    if steps > MAX_SWEEP_STEPS:
        raise InvalidInput("steps", f"Sweep limited to {MAX_SWEEP_STEPS} points, got {steps}")
    _require_positive(**{field: lower})
    if upper < lower:
        raise InvalidInput(field, f"Sweep upper bound {upper} is below lower bound {lower}")
    return np.linspace(lower, upper, steps)
