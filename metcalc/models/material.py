"""Additive material data models.

A composition is a plain ``dict`` of element symbol → percent by mass.
Materials hold a read-only view of theirs.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

Composition = dict[str, float]


@dataclass(frozen=True)
class AdditiveMaterial:
    """Ferroalloy or other additive introduced into the melt.

    Attributes:
        id: Unique identifier ("FeMn78", "FeSi65", etc.).
        name: Display name.
        composition: Element symbol → content [%].
    """
    id: str
    name: str
    composition: Mapping[str, float] = field(default_factory=dict)

    def content_of(self, element: str) -> float:
        """Content of *element* in this material [%], 0.0 if absent."""
        return self.composition.get(element, 0.0)
