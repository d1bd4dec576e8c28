"""
Domain models and enums.

This module defines the core domain-level types used across the system:
- Sensor specifications from the fixed sensor table
- Lightweight sensor references embedded in reports
- Aperture equivalence results (fixed focal length)
- Equivalence reports for a simulated digital-zoom focal change
- The coercion policy used by the calculator

All results are immutable (frozen) dataclasses so they can be shared across
requests and threads and serialized by the API layer without copying.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

FRACTIONAL_INCH_PREFIX = "1/"


class CoercionPolicy(str, Enum):
    """
    How the calculator treats malformed input.

    Members
    -------
    STRICT : str
        Reject unknown sensors and non-positive / non-numeric values with a
        ValidationError. This is the default.
    LENIENT : str
        Replace malformed values with documented defaults (unknown sensor
        becomes crop factor 1.0 named "Unknown", unparseable numbers become
        the field default).
    """

    STRICT = "strict"
    LENIENT = "lenient"


@dataclass(frozen=True)
class SensorSpec:
    """
    Entry of the fixed sensor table.

    Parameters
    ----------
    id
        Unique sensor identifier (e.g., "full-frame", "1/2.3").
    name
        Display name (e.g., "Full Frame", "1/2.3-inch").
    crop_factor
        Ratio of the full-frame diagonal to this sensor's diagonal (> 0).
    """

    id: str
    name: str
    crop_factor: float

    @property
    def is_fractional_inch(self) -> bool:
        """True for optical-format ids such as "1/2.3"."""
        return self.id.startswith(FRACTIONAL_INCH_PREFIX)

    def ref(self) -> "SensorRef":
        return SensorRef(id=self.id, name=self.name, crop_factor=self.crop_factor)


@dataclass(frozen=True)
class SensorRef:
    """Sensor identity as reported back to callers ({id, name, cropFactor})."""

    id: str
    name: str
    crop_factor: float


@dataclass(frozen=True)
class ApertureResult:
    """
    Result of a fixed-focal-length aperture conversion.

    Parameters
    ----------
    sensor_id
        Identifier of the sensor the aperture was given for.
    sensor_name
        Display name of that sensor.
    crop_factor
        Crop factor of that sensor.
    input_aperture
        Input f-number, rounded to one decimal.
    equivalent_aperture
        Full-frame equivalent f-number, rounded to one decimal.
    """

    sensor_id: str
    sensor_name: str
    crop_factor: float
    input_aperture: float
    equivalent_aperture: float


@dataclass(frozen=True)
class EquivalenceReport:
    """
    Full equivalence report for a focal-length change simulated as a crop.

    Parameters
    ----------
    exact_crop_factor
        Crop factor after the change (original crop * new/original focal),
        rounded to two decimals.
    closest_sensor
        Nearest catalog sensor to ``exact_crop_factor``.
    effective_sensor_size
        Continuous size estimate: "1/x" notation for fractional-inch
        originals, otherwise the closest sensor's name.
    crop_factor_difference
        Absolute crop-factor gap to ``closest_sensor`` (three decimals).
    equivalent_aperture
        Full-frame equivalent f-number at the new crop factor.
    original_focal_length, new_focal_length
        Echo of the validated focal lengths (mm).
    original_sensor
        The sensor the calculation started from.
    angle_of_view_change
        Percentage string; positive when the field of view widened.
    perspective_change
        Percentage string, the mirror-signed companion of
        ``angle_of_view_change``.
    relative_sensor_area
        ``1 / area_ratio``, two decimals.
    area_ratio
        ``(new / original) ** 2``, two decimals.
    original_equivalent_focal_length, new_equivalent_focal_length
        Full-frame equivalent focal lengths (mm), one decimal.
    """

    exact_crop_factor: float
    closest_sensor: SensorRef
    effective_sensor_size: str
    crop_factor_difference: float
    equivalent_aperture: float
    original_focal_length: float
    new_focal_length: float
    original_sensor: SensorRef
    angle_of_view_change: str
    perspective_change: str
    relative_sensor_area: float
    area_ratio: float
    original_equivalent_focal_length: float
    new_equivalent_focal_length: float
