"""Application-wide constants.

Empirical coefficients follow the steelmaking course tables the
calculator was built around (section 7: deoxidation and alloying,
section 8: continuous-casting machine sizing).
"""

APP_NAME = "Metallurgist Calculator"
APP_VERSION = "0.1.0"

# Serialized result layout
RESULT_SCHEMA_VERSION = "1.0"

# Reference data files (inside metcalc/data/)
FERROALLOYS_FILENAME = "ferroalloys.json"
BURN_LOSS_FILENAME = "burn_loss.json"
STEEL_GRADES_FILENAME = "steel_grades.json"

# Element symbols
CARBON = "C"
MANGANESE = "Mn"
SILICON = "Si"
ALUMINUM = "Al"

# Material IDs (canonical)
FERROMANGANESE_ID = "FeMn78"
FERROSILICON_ID = "FeSi65"
ALUMINUM_ID = "Al97"
CARBURIZER_ID = "Carburizer"

# Caster geometry
MIN_RADIUS_THICKNESS_FACTOR = 42.0   # R_min = 42 × b (formula 8.9)
SOLIDIFICATION_EFFICIENCY = 0.9      # casting time utilisation (formula 8.5)

# Sweep defaults
DEFAULT_SWEEP_STEPS = 20
MAX_SWEEP_STEPS = 1000
