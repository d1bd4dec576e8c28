from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from lensify.core.registry.sensor_table import SENSOR_TABLE
from lensify.domain.errors import InvalidSensor
from lensify.domain.models import SensorSpec


@dataclass(frozen=True)
class SensorRegistry:
    """
    Read-only registry of sensor specifications.

    This class maintains an immutable mapping from sensor id to
    class: 'SensorSpec'. It is built once from the fixed sensor table and
    then shared by every calculation.

    Notes
    -----
    - Iteration order is the table order. ``closest()`` depends on it for
      tie-breaking, so the registry never re-sorts its entries.
    - Duplicate ids and non-positive crop factors are rejected at build time.

    Attributes
    ----------
    _sensors
        Read-only mapping of sensor id to SensorSpec.
    """

    _sensors: Mapping[str, SensorSpec]

    @classmethod
    def from_specs(cls, specs: Iterable[SensorSpec]) -> "SensorRegistry":
        """
        Build a registry from an ordered iterable of specs.

        Raises
        ------
        ValueError
            If an id appears twice or a crop factor is not > 0.
        """
        sensors = {}
        for spec in specs:
            if spec.id in sensors:
                raise ValueError(f"duplicate sensor id: {spec.id!r}")
            if not spec.crop_factor > 0:
                raise ValueError(f"crop factor must be > 0 for {spec.id!r}")
            sensors[spec.id] = spec
        return cls(_sensors=MappingProxyType(sensors))

    def get(self, sensor_id: str) -> Optional[SensorSpec]:
        """
        Retrieve the spec for a given sensor id.

        Parameters
        ----------
        sensor_id
            Sensor identifier (e.g., "aps-c", "1/2.3").

        Returns
        -------
        SensorSpec or None
            The spec associated with the id, or None if it is not registered.
        """
        if not isinstance(sensor_id, str):
            return None
        return self._sensors.get(sensor_id)

    def require(self, sensor_id: str, field: str = "sensorId") -> SensorSpec:
        """
        Retrieve the spec for a sensor id or reject the request.

        Raises
        ------
        InvalidSensor
            If the id is not registered.
        """
        spec = self.get(sensor_id)
        if spec is None:
            raise InvalidSensor(field, f"Invalid sensor size: {sensor_id!r}")
        return spec

    def all(self) -> List[SensorSpec]:
        """
        Return all registered specs in table order.
        """
        return list(self._sensors.values())

    def closest(self, crop_factor: float) -> Tuple[SensorSpec, float]:
        """
        Find the registered sensor whose crop factor is nearest to ``crop_factor``.

        The scan keeps the first minimum and only replaces it on a strictly
        smaller difference, so earlier table entries win ties. An unreachable
        target (inf) therefore yields the first entry.

        Returns
        -------
        tuple of (SensorSpec, float)
            The nearest spec and its absolute crop-factor difference.
        """
        best: Optional[SensorSpec] = None
        best_diff = float("inf")
        for spec in self._sensors.values():
            diff = abs(spec.crop_factor - crop_factor)
            if best is None or diff < best_diff:
                best = spec
                best_diff = diff
        if best is None:
            raise LookupError("sensor registry is empty")
        return best, best_diff

    def __contains__(self, sensor_id: object) -> bool:
        return isinstance(sensor_id, str) and sensor_id in self._sensors

    def __len__(self) -> int:
        return len(self._sensors)


@lru_cache(maxsize=1)
def default_registry() -> SensorRegistry:
    """Registry over the built-in sensor table, built once per process."""
    return SensorRegistry.from_specs(SENSOR_TABLE)
