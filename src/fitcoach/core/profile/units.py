"""Conversions between the metric and standard (imperial) unit systems.

Profiles are stored in the user's own unit system: centimetres and
kilograms for ``metric``, inches and pounds for ``standard``.
"""

from dataclasses import dataclass

from .models import UNIT_METRIC, UnitSystem

CM_PER_INCH = 2.54
KG_PER_LB = 0.453592
INCHES_PER_FOOT = 12


@dataclass(frozen=True)
class HeightStandard:
    feet: int
    inches: int

    @property
    def total_inches(self) -> int:
        return self.feet * INCHES_PER_FOOT + self.inches


def to_metric(
    height: float | HeightStandard, weight: float, unit_system: UnitSystem
) -> tuple[float, float]:
    """Return ``(height_cm, weight_kg)``, rounded for standard input."""
    if unit_system == UNIT_METRIC:
        return float(height), weight  # type: ignore[arg-type]

    inches = height.total_inches if isinstance(height, HeightStandard) else height
    return round(inches * CM_PER_INCH), round(weight * KG_PER_LB)


def from_metric(
    height_cm: float, weight_kg: float, unit_system: UnitSystem
) -> tuple[float | HeightStandard, float]:
    """Inverse of ``to_metric``; standard heights come back as feet and inches."""
    if unit_system == UNIT_METRIC:
        return height_cm, weight_kg

    total_inches = round(height_cm / CM_PER_INCH)
    feet, inches = divmod(total_inches, INCHES_PER_FOOT)
    return HeightStandard(feet=feet, inches=inches), round(weight_kg / KG_PER_LB)
