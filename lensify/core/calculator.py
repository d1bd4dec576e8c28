"""
Equivalence calculator.

Two pure operations over the sensor registry:

- aperture equivalence for a fixed focal length
- sensor / aperture / focal-length equivalence for a focal change simulated
  as a digital-zoom crop of the original sensor

Validation always runs to completion before any arithmetic. The calculator is
stateless: the registry is read-only and every call builds a fresh result.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from lensify.core.numeric import (
    coerce_positive,
    format_number,
    format_percent,
    require_positive,
    round_half_up,
)
from lensify.core.registry.sensor_registry import SensorRegistry, default_registry
from lensify.domain.errors import InvalidAperture, InvalidFocalLength
from lensify.domain.models import (
    FRACTIONAL_INCH_PREFIX,
    ApertureResult,
    CoercionPolicy,
    EquivalenceReport,
    SensorSpec,
)

UNKNOWN_SENSOR_NAME = "Unknown"
BASELINE_CROP_FACTOR = 1.0


@dataclass(frozen=True)
class _FocalInputs:
    sensor: SensorSpec
    original_focal: float
    new_focal: float
    aperture: float


@dataclass(frozen=True)
class EquivalenceCalculator:
    """
    Calculation engine bound to a registry and an input policy.

    Parameters
    ----------
    registry
        Sensor registry used for lookups and nearest-sensor matching.
    policy
        STRICT rejects malformed input with a ValidationError. LENIENT
        replaces it with defaults (crop factor 1.0 / "Unknown" for unknown
        sensors, 1 for unparseable focal lengths and apertures).
    """

    registry: SensorRegistry = field(default_factory=default_registry)
    policy: CoercionPolicy = CoercionPolicy.STRICT

    # ---------------------------------------------------------
    # Input resolution
    # ---------------------------------------------------------
    def _resolve_sensor(self, sensor_id: Any, field_name: str) -> SensorSpec:
        if self.policy is CoercionPolicy.STRICT:
            return self.registry.require(sensor_id, field=field_name)

        spec = self.registry.get(sensor_id)
        if spec is not None:
            return spec
        text = "" if sensor_id is None else str(sensor_id)
        return SensorSpec(id=text, name=UNKNOWN_SENSOR_NAME, crop_factor=BASELINE_CROP_FACTOR)

    def _resolve_aperture(self, aperture: Any) -> float:
        if self.policy is CoercionPolicy.STRICT:
            return require_positive(aperture, "aperture", InvalidAperture, "Invalid aperture value")
        return coerce_positive(aperture, 1.0)

    def _resolve_focal(self, value: Any, field_name: str, label: str) -> float:
        if self.policy is CoercionPolicy.STRICT:
            return require_positive(value, field_name, InvalidFocalLength, f"Invalid {label} focal length")
        return coerce_positive(value, 1.0)

    def _resolve_focal_inputs(
        self,
        original_sensor_id: Any,
        original_focal: Any,
        new_focal: Any,
        aperture: Any,
    ) -> _FocalInputs:
        # order fixes which error is reported when several fields are bad
        sensor = self._resolve_sensor(original_sensor_id, "originalSensorId")
        orig = self._resolve_focal(original_focal, "originalFocalLength", "original")
        new = self._resolve_focal(new_focal, "newFocalLength", "new")
        ap = self._resolve_aperture(aperture)
        return _FocalInputs(sensor=sensor, original_focal=orig, new_focal=new, aperture=ap)

    # ---------------------------------------------------------
    # Aperture equivalence (fixed focal length)
    # ---------------------------------------------------------
    def aperture_equivalence(self, sensor_id: Any, aperture: Any) -> ApertureResult:
        """
        Convert an f-number on ``sensor_id`` to its full-frame equivalent.

        Raises
        ------
        InvalidSensor
            If ``sensor_id`` is not registered (STRICT only).
        InvalidAperture
            If ``aperture`` is not a finite number > 0 (STRICT only).
        """
        sensor = self._resolve_sensor(sensor_id, "sensorId")
        ap = self._resolve_aperture(aperture)

        return ApertureResult(
            sensor_id=sensor.id,
            sensor_name=sensor.name,
            crop_factor=sensor.crop_factor,
            input_aperture=round_half_up(ap, 1),
            equivalent_aperture=round_half_up(ap * sensor.crop_factor, 1),
        )

    # ---------------------------------------------------------
    # Focal / sensor equivalence (digital zoom)
    # ---------------------------------------------------------
    def focal_equivalence(
        self,
        original_sensor_id: Any,
        original_focal: Any,
        new_focal: Any,
        aperture: Any,
    ) -> EquivalenceReport:
        """
        Simulate a focal-length change as a crop of the original sensor.

        Going from ``original_focal`` to ``new_focal`` with the same optics
        keeps ``(new / original) ** 2`` of the sensor area in frame; the crop
        factor scales linearly with ``new / original``.

        Raises
        ------
        InvalidSensor
            If ``original_sensor_id`` is not registered (STRICT only).
        InvalidFocalLength
            If either focal length is not a finite number > 0 (STRICT only).
        InvalidAperture
            If ``aperture`` is not a finite number > 0 (STRICT only).
        """
        inputs = self._resolve_focal_inputs(original_sensor_id, original_focal, new_focal, aperture)
        sensor = inputs.sensor
        zoom = inputs.new_focal / inputs.original_focal

        # zoom * zoom gives inf instead of raising OverflowError
        area_ratio = zoom * zoom
        new_crop = round_half_up(sensor.crop_factor * zoom, 2)
        self._check_focal_range(inputs, area_ratio, new_crop)

        closest, difference = self.registry.closest(new_crop)
        effective_size = self._effective_sensor_size(sensor, area_ratio, closest)

        return EquivalenceReport(
            exact_crop_factor=new_crop,
            closest_sensor=closest.ref(),
            effective_sensor_size=effective_size,
            crop_factor_difference=round_half_up(difference, 3),
            equivalent_aperture=round_half_up(inputs.aperture * new_crop, 1),
            original_focal_length=inputs.original_focal,
            new_focal_length=inputs.new_focal,
            original_sensor=sensor.ref(),
            angle_of_view_change=format_percent(round_half_up((1 - zoom) * 100, 1)),
            perspective_change=format_percent(round_half_up((zoom - 1) * 100, 1)),
            relative_sensor_area=round_half_up(1 / area_ratio, 2),
            area_ratio=round_half_up(area_ratio, 2),
            original_equivalent_focal_length=round_half_up(inputs.original_focal * sensor.crop_factor, 1),
            new_equivalent_focal_length=round_half_up(inputs.new_focal * new_crop, 1),
        )

    @staticmethod
    def _check_focal_range(inputs: _FocalInputs, area_ratio: float, new_crop: float) -> None:
        # valid but extreme focal lengths can overflow or underflow the ratio
        if not math.isfinite(inputs.original_focal * inputs.sensor.crop_factor):
            raise InvalidFocalLength("originalFocalLength", "Original focal length out of range")
        derived = (area_ratio, 1 / area_ratio if area_ratio > 0 else math.inf, new_crop, inputs.new_focal * new_crop)
        if not all(math.isfinite(v) for v in derived):
            raise InvalidFocalLength("newFocalLength", "Focal length ratio out of range")

    @staticmethod
    def _effective_sensor_size(sensor: SensorSpec, area_ratio: float, closest: SensorSpec) -> str:
        if not sensor.is_fractional_inch:
            return closest.name
        # lenient mode may carry an unknown "1/..." id, so parse defensively
        denominator = coerce_positive(sensor.id[len(FRACTIONAL_INCH_PREFIX):], 1.0)
        scaled = round_half_up(denominator * math.sqrt(area_ratio), 2)
        return FRACTIONAL_INCH_PREFIX + format_number(scaled)


_STRICT = EquivalenceCalculator()


def compute_aperture_equivalence(sensor_id: Any, aperture: Any) -> ApertureResult:
    """Aperture equivalence over the built-in registry with strict validation."""
    return _STRICT.aperture_equivalence(sensor_id, aperture)


def compute_focal_equivalence(
    original_sensor_id: Any,
    original_focal: Any,
    new_focal: Any,
    aperture: Any,
) -> EquivalenceReport:
    """Focal/sensor equivalence over the built-in registry with strict validation."""
    return _STRICT.focal_equivalence(original_sensor_id, original_focal, new_focal, aperture)
