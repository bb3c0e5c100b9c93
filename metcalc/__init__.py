"""Metallurgist calculator — alloying material balance and caster sizing."""

from metcalc.constants import APP_VERSION
from metcalc.core.engine import MetallurgyEngine

__version__ = APP_VERSION

__all__ = [
    "MetallurgyEngine",
]
