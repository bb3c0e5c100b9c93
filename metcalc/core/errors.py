"""Engine error types.

Two families:

- ``InvalidInput`` — the caller supplied data that breaks a precondition
  (non-positive mass or dimension, target below initial content).
- ``CatalogError`` — the reference data is missing an entry or holds
  values the formulas cannot use.  Not a user error.
"""


class InvalidInput(ValueError):
    """Caller-supplied value violates a precondition.

    Attributes:
        field: Name of the offending input field.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class InvalidComposition(InvalidInput):
    """Target content of an element is below its initial content.

    Attributes:
        element: Element symbol.
        initial: Initial content [%].
        target: Target content [%].
    """

    def __init__(self, element: str, initial: float, target: float) -> None:
        super().__init__(
            element,
            f"Target {element} ({target}%) is below initial content ({initial}%)",
        )
        self.element = element
        self.initial = initial
        self.target = target


class CatalogError(Exception):
    """Reference data is missing or malformed."""


class UnknownMaterial(CatalogError, KeyError):
    """Additive material is not in the catalog."""

    def __init__(self, material_id: str) -> None:
        super().__init__(f"Unknown material: {material_id!r}")
        self.material_id = material_id

    def __str__(self) -> str:
        return self.args[0]


class UnknownGrade(CatalogError, KeyError):
    """Steel grade is not in the reference table."""

    def __init__(self, grade: str) -> None:
        super().__init__(f"Unknown steel grade: {grade!r}")
        self.grade = grade

    def __str__(self) -> str:
        return self.args[0]
