from __future__ import annotations

from typing import Any, Dict

from lensify.domain.errors import ValidationError
from lensify.domain.models import ApertureResult, EquivalenceReport, SensorRef


def _sensor_payload(ref: SensorRef) -> Dict[str, Any]:
    return {"id": ref.id, "name": ref.name, "cropFactor": ref.crop_factor}


def build_aperture_payload(result: ApertureResult) -> Dict[str, Any]:
    """
    Build the wire payload for an aperture equivalence result.

    ``sensorSize`` carries the display name, ``sensorId`` the registry id.

    Parameters
    ----------
    result
        Calculation result.

    Returns
    -------
    dict
        JSON-serializable payload with camelCase keys.
    """
    return {
        "sensorSize": result.sensor_name,
        "sensorId": result.sensor_id,
        "cropFactor": result.crop_factor,
        "inputAperture": result.input_aperture,
        "equivalentAperture": result.equivalent_aperture,
    }


def build_focal_payload(report: EquivalenceReport) -> Dict[str, Any]:
    """
    Build the wire payload for a focal/sensor equivalence report.

    Parameters
    ----------
    report
        Calculation result.

    Returns
    -------
    dict
        JSON-serializable payload with camelCase keys; nested sensors are
        ``{id, name, cropFactor}`` objects.
    """
    return {
        "exactCropFactor": report.exact_crop_factor,
        "closestSensor": _sensor_payload(report.closest_sensor),
        "effectiveSensorSize": report.effective_sensor_size,
        "cropFactorDifference": report.crop_factor_difference,
        "equivalentAperture": report.equivalent_aperture,
        "originalFocalLength": report.original_focal_length,
        "newFocalLength": report.new_focal_length,
        "originalSensor": _sensor_payload(report.original_sensor),
        "angleOfViewChange": report.angle_of_view_change,
        "perspectiveChange": report.perspective_change,
        "relativeSensorArea": report.relative_sensor_area,
        "areaRatio": report.area_ratio,
        "originalEquivalentFocalLength": report.original_equivalent_focal_length,
        "newEquivalentFocalLength": report.new_equivalent_focal_length,
    }


def build_error_payload(err: ValidationError) -> Dict[str, Any]:
    """Wire payload for a rejected request: {error, kind, field}."""
    return {"error": err.message, "kind": err.kind, "field": err.field}
