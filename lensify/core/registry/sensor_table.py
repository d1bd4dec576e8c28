from __future__ import annotations

from typing import Tuple

from lensify.domain.models import SensorSpec

# Order matters: nearest-sensor ties go to the earlier entry.
SENSOR_TABLE: Tuple[SensorSpec, ...] = (
    SensorSpec(id="medium-format", name="Medium Format", crop_factor=0.7),
    SensorSpec(id="full-frame", name="Full Frame", crop_factor=1.0),
    SensorSpec(id="aps-h", name="APS-H", crop_factor=1.3),
    SensorSpec(id="aps-c-canon", name="APS-C (Canon)", crop_factor=1.6),
    SensorSpec(id="aps-c", name="APS-C", crop_factor=1.5),
    SensorSpec(id="micro-four-thirds", name="Micro Four Thirds", crop_factor=2.0),
    SensorSpec(id="1-inch", name="1-inch", crop_factor=2.7),
    SensorSpec(id="1/1.14", name="1/1.14-inch", crop_factor=3.05),
    SensorSpec(id="1/1.28", name="1/1.28-inch", crop_factor=3.26),
    SensorSpec(id="1/1.3", name="1/1.3-inch", crop_factor=3.4),
    SensorSpec(id="1/1.31", name="1/1.31-inch", crop_factor=3.43),
    SensorSpec(id="1/1.35", name="1/1.35-inch", crop_factor=3.47),
    SensorSpec(id="1/1.4", name="1/1.4-inch", crop_factor=3.7),
    SensorSpec(id="1/1.49", name="1/1.49-inch", crop_factor=3.85),
    SensorSpec(id="1/1.5", name="1/1.5-inch", crop_factor=3.9),
    SensorSpec(id="1/1.56", name="1/1.56-inch", crop_factor=4.0),
    SensorSpec(id="1/1.57", name="1/1.57-inch", crop_factor=4.05),
    SensorSpec(id="1/1.6", name="1/1.6-inch", crop_factor=4.1),
    SensorSpec(id="1/1.7", name="1/1.7-inch", crop_factor=4.5),
    SensorSpec(id="1/1.74", name="1/1.74-inch", crop_factor=4.6),
    SensorSpec(id="1/1.78", name="1/1.78-inch", crop_factor=4.7),
    SensorSpec(id="1/1.95", name="1/1.95-inch", crop_factor=5.0),
    SensorSpec(id="1/2", name="1/2-inch", crop_factor=5.1),
    SensorSpec(id="1/2.3", name="1/2.3-inch", crop_factor=5.64),
    SensorSpec(id="1/2.55", name="1/2.55-inch", crop_factor=6.3),
    SensorSpec(id="1/2.76", name="1/2.76-inch", crop_factor=6.7),
    SensorSpec(id="1/3", name="1/3-inch", crop_factor=7.21),
    SensorSpec(id="1/3.06", name="1/3.06-inch", crop_factor=7.4),
    SensorSpec(id="1/3.2", name="1/3.2-inch", crop_factor=7.7),
    SensorSpec(id="1/3.4", name="1/3.4-inch", crop_factor=8.1),
    SensorSpec(id="1/3.6", name="1/3.6-inch", crop_factor=8.6),
    SensorSpec(id="1/4", name="1/4-inch", crop_factor=9.6),
)
