"""Unit conversion module — single conversion point between callers and the engine.

Every unit conversion in the package goes through these helpers.

Internal (core) units:
    Melt mass      : kg
    Heat mass      : t  (converted to kg inside the caster formulas)
    Length         : m
    Speed          : m/min
    Time           : min
    Density        : kg/m³
    Composition    : % by mass
"""

from typing import NewType

# Unit aliases (static typing only)
Kg = NewType('Kg', float)
Percent = NewType('Percent', float)


# ---------------------------------------------------------------------------
# Mass conversions
# ---------------------------------------------------------------------------

def t_to_kg(t: float) -> Kg:
    """Tonnes → kg."""
    return Kg(t * 1000.0)


# ---------------------------------------------------------------------------
# Composition conversions
# ---------------------------------------------------------------------------

def percent_to_fraction(percent: float) -> float:
    """Percent by mass → weight fraction (0–1)."""
    return percent / 100.0


def kg_to_percent_of(element_kg: float, melt_mass_kg: float) -> Percent:
    """Mass of an element [kg] → its share of the melt [%].

    Args:
        element_kg: Element mass dissolved in the melt [kg].
        melt_mass_kg: Total melt mass [kg].

    Returns:
        Mass share [%].
    """
    return Percent(element_kg / melt_mass_kg * 100.0)


def retained_fraction(burn_loss_pct: float) -> float:
    """Burn loss [%] → fraction of the added element kept in the melt."""
    return percent_to_fraction(100.0 - burn_loss_pct)
