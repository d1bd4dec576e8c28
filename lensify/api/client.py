from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import requests

from lensify.api.payload import build_aperture_payload, build_focal_payload
from lensify.core.calculator import compute_aperture_equivalence, compute_focal_equivalence
from lensify.core.config.yaml_config import ClientConfig

APERTURE_PATHS: Sequence[str] = ("/calculate", "/api/calculate")
FOCAL_PATHS: Sequence[str] = ("/focal-equiv", "/focal-equivalent", "/api/focal-equiv", "/api/focal-equivalent")


class ApiValidationError(ValueError):
    """
    The API rejected the request (HTTP 400).

    Validation is deterministic, so no other endpoint is tried after this.
    """

    def __init__(self, message: str, kind: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.field = field


class ApiUnavailableError(RuntimeError):
    """No endpoint answered and local fallback is disabled."""


class LensifyClient:
    """
    HTTP client for the equivalence API.

    Every base URL is tried in order, and for each base URL every path
    variant of the operation, until one answers with a 2xx JSON body. When
    none does, the result is computed locally from the shared calculation
    core (if enabled) and marked with ``"source": "local"``.

    Notes
    -----
    - This class performs side effects (network I/O).
    - A 400 response is raised immediately as ApiValidationError.
    - Local computation uses strict validation and raises ValidationError.
    """

    def __init__(self, cfg: ClientConfig):
        """
        Initialize the client.

        Parameters
        ----------
        cfg
            Client configuration (base URLs, timeout, local fallback switch).
        """
        self._cfg = cfg

    def calculate_aperture(self, sensor_id: str, aperture: float) -> Dict[str, Any]:
        """
        Equivalent aperture for ``sensor_id`` at a fixed focal length.

        Returns
        -------
        dict
            Aperture payload (see lensify.api.payload.build_aperture_payload).

        Raises
        ------
        ApiValidationError
            If the API rejected the input.
        ApiUnavailableError
            If every endpoint failed and local fallback is disabled.
        """
        params = {"sensorSize": sensor_id, "aperture": aperture}
        data = self._get_first(APERTURE_PATHS, params)
        if data is not None:
            return data

        self._require_local_fallback()
        print("[CLIENT] all endpoints failed, computing aperture locally")
        payload = build_aperture_payload(compute_aperture_equivalence(sensor_id, aperture))
        payload["source"] = "local"
        return payload

    def calculate_focal(
        self,
        original_sensor_id: str,
        original_focal: float,
        new_focal: float,
        aperture: float,
    ) -> Dict[str, Any]:
        """
        Equivalence report for a focal change simulated as a digital-zoom crop.

        Raises
        ------
        ApiValidationError
            If the API rejected the input.
        ApiUnavailableError
            If every endpoint failed and local fallback is disabled.
        """
        params = {
            "originalSensor": original_sensor_id,
            "originalFocal": original_focal,
            "newFocal": new_focal,
            "aperture": aperture,
        }
        data = self._get_first(FOCAL_PATHS, params)
        if data is not None:
            return data

        self._require_local_fallback()
        print("[CLIENT] all endpoints failed, computing focal equivalence locally")
        report = compute_focal_equivalence(original_sensor_id, original_focal, new_focal, aperture)
        payload = build_focal_payload(report)
        payload["source"] = "local"
        return payload

    def health(self) -> Dict[str, bool]:
        """
        Probe ``/health`` on every base URL.

        Returns
        -------
        dict
            Mapping of base URL to whether it answered with status "ok".
        """
        status: Dict[str, bool] = {}
        for base in self._cfg.base_urls:
            try:
                r = requests.get(f"{base}/health", timeout=self._cfg.timeout_s)
                status[base] = r.ok and r.json().get("status") == "ok"
            except (requests.RequestException, ValueError) as e:
                print(f"[CLIENT] health check failed for {base}: {e!r}")
                status[base] = False
        return status

    def _require_local_fallback(self) -> None:
        if not self._cfg.local_fallback:
            raise ApiUnavailableError(f"no endpoint answered: {', '.join(self._cfg.base_urls)}")

    def _get_first(self, paths: Sequence[str], params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for base in self._cfg.base_urls:
            for path in paths:
                url = f"{base}{path}"
                try:
                    r = requests.get(url, params=params, timeout=self._cfg.timeout_s)
                except requests.RequestException as e:
                    print(f"[CLIENT] {url} failed: {e!r}")
                    continue

                if r.status_code == 400:
                    body = _json_or_empty(r)
                    raise ApiValidationError(
                        str(body.get("error", "Invalid parameters")),
                        kind=body.get("kind"),
                        field=body.get("field"),
                    )

                if not r.ok:
                    print(f"[CLIENT] {url} answered HTTP {r.status_code}")
                    continue

                body = _json_or_empty(r)
                if body:
                    return body
                print(f"[CLIENT] {url} returned no JSON body")
        return None


def _json_or_empty(r: requests.Response) -> Dict[str, Any]:
    try:
        data = r.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
