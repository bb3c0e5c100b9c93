"""Calculation request and result data models.

Dataclasses consumed and returned by AlloyingCalculator and CasterCalculator.
Every result is built fresh per call; the engine keeps no reference to it.
"""

from dataclasses import dataclass, field

from metcalc.models.material import Composition


@dataclass
class AlloyingRequest:
    """Deoxidation / alloying input.

    Attributes:
        melt_mass_kg: Liquid steel mass [kg].
        initial: Composition before additions [%].
        target: Required composition [%].
        grade_label: Steel grade designation (free text).
    """
    melt_mass_kg: float = 0.0
    initial: Composition = field(default_factory=dict)
    target: Composition = field(default_factory=dict)
    grade_label: str = ""


@dataclass
class AlloyingStepResult:
    """One evaluated step of the additive sequence.

    Attributes:
        element: Element the step adjusts.
        material_id: Additive used for the element.
        needed_pct: Target minus running content at evaluation time [%].
        mass_kg: Additive mass [kg] (0.0 when skipped).
        applied: False when the element needed no addition.
        composition_after: Running composition after the step [%].
    """
    element: str = ""
    material_id: str = ""
    needed_pct: float = 0.0
    mass_kg: float = 0.0
    applied: bool = False
    composition_after: Composition = field(default_factory=dict)


@dataclass
class AlloyingResult:
    """Deoxidation / alloying result.

    Attributes:
        grade_label: Steel grade designation.
        melt_mass_kg: Liquid steel mass [kg].
        initial: Composition before additions [%].
        target: Required composition [%].
        additions: Material ID → additive mass [kg].
        carbon_additive_kg: Carburizer mass [kg] (0.0 if none added).
        final_composition: Composition after all additions [%].
        steps: Per-step trace in evaluation order.
    """
    grade_label: str = ""
    melt_mass_kg: float = 0.0
    initial: Composition = field(default_factory=dict)
    target: Composition = field(default_factory=dict)
    additions: dict[str, float] = field(default_factory=dict)
    carbon_additive_kg: float = 0.0
    final_composition: Composition = field(default_factory=dict)
    steps: list[AlloyingStepResult] = field(default_factory=list)

    @property
    def total_additive_kg(self) -> float:
        """Sum of all additive masses [kg]."""
        return sum(self.additions.values())


@dataclass
class CasterRequest:
    """Continuous-casting machine sizing input.

    Attributes:
        grade_label: Steel grade designation.
        heat_mass_t: Heat mass [t].
        width_m: Section width [m].
        thickness_m: Section thickness [m].
        speed_m_min: Casting speed [m/min].
        cycle_time_min: Maximum casting time of one heat [min].
    """
    grade_label: str = ""
    heat_mass_t: float = 0.0
    width_m: float = 0.0
    thickness_m: float = 0.0
    speed_m_min: float = 0.0
    cycle_time_min: float = 0.0


@dataclass
class CasterResult:
    """Continuous-casting machine sizing result.

    All lengths in m (core units).

    Attributes:
        grade_label: Steel grade designation.
        heat_mass_t: Heat mass [t].
        width_m: Section width [m].
        thickness_m: Section thickness [m].
        speed_m_min: Casting speed [m/min].
        cycle_time_min: Maximum casting time [min].
        streams: Number of strands.
        metallurgical_length_m: Full solidification length [m].
        radius_m: Machine radius with the minimum-radius floor applied [m].
        height_m: Machine height [m] (equal to radius).
        density: Melt density used [kg/m³].
        kz: Solidification coefficient used.
        radius_raw_m: Radius from metallurgical length alone [m].
        min_radius_m: Minimum radius for the section thickness [m].
    """
    grade_label: str = ""
    heat_mass_t: float = 0.0
    width_m: float = 0.0
    thickness_m: float = 0.0
    speed_m_min: float = 0.0
    cycle_time_min: float = 0.0
    streams: int = 1
    metallurgical_length_m: float = 0.0
    radius_m: float = 0.0
    height_m: float = 0.0
    density: float = 0.0
    kz: float = 0.0
    radius_raw_m: float = 0.0
    min_radius_m: float = 0.0

    @property
    def radius_floor_applied(self) -> bool:
        """True when the minimum radius overrides the raw radius."""
        return self.radius_raw_m < self.min_radius_m
