"""
Unit tests for lensify.core.calculator.

Covers:
- aperture equivalence for every registered sensor
- focal/sensor equivalence: known cases, identity, monotonicity, area identity
- effective sensor size for fractional-inch and named formats
- strict rejection (field-specific errors, validation before arithmetic)
- the lenient coercion policy
"""

from __future__ import annotations

import pytest

from lensify.core.calculator import (
    EquivalenceCalculator,
    compute_aperture_equivalence,
    compute_focal_equivalence,
)
from lensify.core.numeric import round_half_up
from lensify.core.registry.sensor_registry import default_registry
from lensify.domain.errors import InvalidAperture, InvalidFocalLength, InvalidSensor
from lensify.domain.models import CoercionPolicy, SensorRef

ALL_SENSORS = default_registry().all()


def _pct(text: str) -> float:
    assert text.endswith("%")
    return float(text[:-1])


# ---------------------------------------------------------
# Aperture equivalence
# ---------------------------------------------------------
def test_aperture_full_frame_is_unchanged() -> None:
    r = compute_aperture_equivalence("full-frame", 2.8)
    assert r.equivalent_aperture == 2.8
    assert r.input_aperture == 2.8
    assert r.sensor_name == "Full Frame"
    assert r.crop_factor == 1.0


def test_aperture_micro_four_thirds_doubles() -> None:
    assert compute_aperture_equivalence("micro-four-thirds", 1.8).equivalent_aperture == 3.6


def test_aperture_echoes_input_rounded() -> None:
    r = compute_aperture_equivalence("aps-c", 1.84)
    assert r.input_aperture == 1.8
    assert r.equivalent_aperture == 2.8  # 1.84 * 1.5 = 2.76


@pytest.mark.parametrize("sensor", ALL_SENSORS, ids=lambda s: s.id)
@pytest.mark.parametrize("aperture", [1.4, 2.8, 5.6])
def test_aperture_formula_for_every_sensor(sensor, aperture: float) -> None:
    r = compute_aperture_equivalence(sensor.id, aperture)
    assert r.sensor_id == sensor.id
    assert r.equivalent_aperture == round_half_up(aperture * sensor.crop_factor, 1)


def test_aperture_accepts_numeric_text() -> None:
    assert compute_aperture_equivalence("full-frame", "2.8").equivalent_aperture == 2.8


def test_aperture_rejects_unknown_sensor() -> None:
    with pytest.raises(InvalidSensor) as exc:
        compute_aperture_equivalence("nonexistent-sensor", 2.0)
    assert exc.value.field == "sensorId"


@pytest.mark.parametrize("aperture", [-1, 0, "abc", None, float("nan"), float("inf")])
def test_aperture_rejects_bad_aperture(aperture) -> None:
    with pytest.raises(InvalidAperture) as exc:
        compute_aperture_equivalence("full-frame", aperture)
    assert exc.value.field == "aperture"


def test_aperture_sensor_checked_before_aperture() -> None:
    with pytest.raises(InvalidSensor):
        compute_aperture_equivalence("nonexistent-sensor", -1)


# ---------------------------------------------------------
# Focal / sensor equivalence
# ---------------------------------------------------------
def test_focal_full_frame_50_to_35() -> None:
    r = compute_focal_equivalence("full-frame", 50, 35, 1.4)

    assert r.exact_crop_factor == 0.7
    assert r.angle_of_view_change == "30.0%"
    assert r.perspective_change == "-30.0%"
    assert r.equivalent_aperture == 1.0
    assert r.closest_sensor == SensorRef(id="medium-format", name="Medium Format", crop_factor=0.7)
    assert r.crop_factor_difference == 0.0
    assert r.effective_sensor_size == "Medium Format"
    assert r.area_ratio == 0.49
    assert r.relative_sensor_area == 2.04
    assert r.original_equivalent_focal_length == 50.0
    assert r.new_equivalent_focal_length == 24.5
    assert r.original_focal_length == 50
    assert r.new_focal_length == 35
    assert r.original_sensor == SensorRef(id="full-frame", name="Full Frame", crop_factor=1.0)


def test_focal_fractional_inch_effective_size() -> None:
    """
    Doubling the focal length on a 1/2.3" sensor keeps a quarter of the area;
    the denominator scales by sqrt(area ratio) = 2.
    """
    r = compute_focal_equivalence("1/2.3", 24, 48, 2.0)

    assert r.exact_crop_factor == 11.28
    assert r.effective_sensor_size == "1/4.6"
    assert r.closest_sensor.id == "1/4"
    assert r.crop_factor_difference == 1.68
    assert r.equivalent_aperture == 22.6
    assert r.area_ratio == 4.0
    assert r.relative_sensor_area == 0.25
    assert r.angle_of_view_change == "-100.0%"
    assert r.perspective_change == "100.0%"
    assert r.new_equivalent_focal_length == 541.4


def test_focal_fractional_inch_keeps_two_decimals() -> None:
    r = compute_focal_equivalence("1/1.7", 50, 75, 2.0)
    # 1.7 * 1.5 = 2.55
    assert r.effective_sensor_size == "1/2.55"


def test_focal_named_format_uses_closest_sensor_name() -> None:
    r = compute_focal_equivalence("aps-c", 50, 100, 2.8)

    assert r.exact_crop_factor == 3.0
    assert r.closest_sensor.id == "1/1.14"
    assert r.crop_factor_difference == 0.05
    assert r.effective_sensor_size == "1/1.14-inch"
    assert r.equivalent_aperture == 8.4


def test_focal_one_inch_is_not_a_fractional_format() -> None:
    r = compute_focal_equivalence("1-inch", 50, 50, 2.8)
    assert r.effective_sensor_size == "1-inch"


@pytest.mark.parametrize("sensor", ALL_SENSORS, ids=lambda s: s.id)
@pytest.mark.parametrize("focal", [12.0, 50.0, 200.0])
def test_focal_identity_keeps_crop_factor(sensor, focal: float) -> None:
    r = compute_focal_equivalence(sensor.id, focal, focal, 2.8)

    assert r.exact_crop_factor == sensor.crop_factor
    assert r.area_ratio == 1.0
    assert r.relative_sensor_area == 1.0
    assert r.angle_of_view_change == "0.0%"
    assert r.perspective_change == "0.0%"
    assert r.closest_sensor.crop_factor == sensor.crop_factor


@pytest.mark.parametrize("sensor_id", ["full-frame", "aps-c", "1/2.3"])
def test_focal_monotonic_in_new_focal(sensor_id: str) -> None:
    reports = [compute_focal_equivalence(sensor_id, 50, f, 2.8) for f in (20, 35, 50, 85, 135)]

    crops = [r.exact_crop_factor for r in reports]
    apertures = [r.equivalent_aperture for r in reports]
    angles = [_pct(r.angle_of_view_change) for r in reports]

    assert crops == sorted(crops) and len(set(crops)) == len(crops)
    assert apertures == sorted(apertures) and len(set(apertures)) == len(apertures)
    assert angles == sorted(angles, reverse=True) and len(set(angles)) == len(angles)


@pytest.mark.parametrize("orig, new", [(50, 35), (35, 50), (24, 48), (50, 100), (50, 85), (28, 70)])
def test_focal_area_identity(orig: float, new: float) -> None:
    r = compute_focal_equivalence("full-frame", orig, new, 2.8)
    assert r.area_ratio * r.relative_sensor_area == pytest.approx(1.0, abs=0.02)


@pytest.mark.parametrize("orig, new", [(50, 35), (24, 70), (100, 30)])
def test_focal_perspective_mirrors_angle_of_view(orig: float, new: float) -> None:
    r = compute_focal_equivalence("aps-c", orig, new, 2.8)
    assert _pct(r.perspective_change) == -_pct(r.angle_of_view_change)


def test_focal_closest_sensor_is_nearest() -> None:
    r = compute_focal_equivalence("micro-four-thirds", 25, 60, 1.7)
    for other in ALL_SENSORS:
        assert abs(r.closest_sensor.crop_factor - r.exact_crop_factor) <= abs(other.crop_factor - r.exact_crop_factor)


def test_focal_is_deterministic() -> None:
    a = compute_focal_equivalence("1/1.3", 23, 70, 1.8)
    b = compute_focal_equivalence("1/1.3", 23, 70, 1.8)
    assert a == b


def test_focal_rejects_unknown_sensor() -> None:
    with pytest.raises(InvalidSensor) as exc:
        compute_focal_equivalence("nonexistent-sensor", 50, 35, 1.4)
    assert exc.value.field == "originalSensorId"


@pytest.mark.parametrize(
    "orig, new, field",
    [
        (0, 35, "originalFocalLength"),
        (-50, 35, "originalFocalLength"),
        ("x", 35, "originalFocalLength"),
        (50, 0, "newFocalLength"),
        (50, None, "newFocalLength"),
        (50, float("nan"), "newFocalLength"),
    ],
)
def test_focal_rejects_bad_focal_lengths(orig, new, field: str) -> None:
    with pytest.raises(InvalidFocalLength) as exc:
        compute_focal_equivalence("full-frame", orig, new, 1.4)
    assert exc.value.field == field


@pytest.mark.parametrize(
    "sensor_id, orig, new, field",
    [
        ("full-frame", 1, 1e-200, "newFocalLength"),  # ratio squared underflows to 0
        ("full-frame", 1, 1e160, "newFocalLength"),  # ratio squared overflows
        ("full-frame", 1e-200, 1e200, "newFocalLength"),  # ratio itself overflows
        ("1/2.3", 1e308, 1e308, "originalFocalLength"),  # equivalent focal overflows
    ],
)
def test_focal_rejects_out_of_range_focal_ratio(sensor_id: str, orig: float, new: float, field: str) -> None:
    with pytest.raises(InvalidFocalLength) as exc:
        compute_focal_equivalence(sensor_id, orig, new, 2.8)
    assert exc.value.field == field


def test_focal_large_but_finite_ratio_is_computed() -> None:
    r = compute_focal_equivalence("full-frame", 1, 1e100, 2.8)

    assert r.exact_crop_factor == 1e100
    assert r.closest_sensor.id == "1/4"
    assert r.relative_sensor_area == 0.0


def test_focal_rejects_bad_aperture() -> None:
    with pytest.raises(InvalidAperture):
        compute_focal_equivalence("full-frame", 50, 35, 0)


def test_focal_validation_order() -> None:
    """
    Sensor is validated first, then original focal, new focal and aperture.
    """
    with pytest.raises(InvalidSensor):
        compute_focal_equivalence("bogus", 0, 0, 0)
    with pytest.raises(InvalidFocalLength) as exc:
        compute_focal_equivalence("full-frame", 0, 0, 0)
    assert exc.value.field == "originalFocalLength"


def test_focal_does_not_touch_registry_when_rejecting(monkeypatch) -> None:
    """
    Rejected input never reaches the nearest-sensor search.
    """
    calc = EquivalenceCalculator()

    def boom(*_a, **_k):
        raise AssertionError("closest() must not run for invalid input")

    monkeypatch.setattr(type(calc.registry), "closest", boom)
    with pytest.raises(InvalidAperture):
        calc.focal_equivalence("full-frame", 50, 35, -2)


# ---------------------------------------------------------
# Lenient policy
# ---------------------------------------------------------
def test_lenient_unknown_sensor_defaults_to_full_frame_baseline() -> None:
    calc = EquivalenceCalculator(policy=CoercionPolicy.LENIENT)

    r = calc.aperture_equivalence("bogus", 2.8)
    assert r.sensor_name == "Unknown"
    assert r.sensor_id == "bogus"
    assert r.crop_factor == 1.0
    assert r.equivalent_aperture == 2.8


def test_lenient_unparseable_numbers_fall_back() -> None:
    calc = EquivalenceCalculator(policy=CoercionPolicy.LENIENT)

    r = calc.aperture_equivalence("full-frame", "abc")
    assert r.input_aperture == 1.0

    report = calc.focal_equivalence("bogus", "x", 35, None)
    assert report.original_sensor == SensorRef(id="bogus", name="Unknown", crop_factor=1.0)
    assert report.original_focal_length == 1.0
    assert report.exact_crop_factor == 35.0
    assert report.equivalent_aperture == 35.0


def test_lenient_unknown_fractional_id_parses_defensively() -> None:
    calc = EquivalenceCalculator(policy=CoercionPolicy.LENIENT)
    r = calc.focal_equivalence("1/abc", 50, 100, 2.0)
    assert r.effective_sensor_size == "1/2"


def test_lenient_matches_strict_for_valid_input() -> None:
    lenient = EquivalenceCalculator(policy=CoercionPolicy.LENIENT)
    assert lenient.focal_equivalence("aps-c", 50, 85, 2.8) == compute_focal_equivalence("aps-c", 50, 85, 2.8)
