from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, Response, jsonify, request

from lensify.api.payload import build_aperture_payload, build_error_payload, build_focal_payload
from lensify.core.calculator import EquivalenceCalculator
from lensify.core.config.yaml_config import AppConfig, load_app_config
from lensify.domain.errors import ValidationError

# Load .env from EXE directory (so it stays editable in production)
EXE_DIR = Path(sys.executable).resolve().parent if getattr(sys, "frozen", False) else Path(__file__).resolve().parent
load_dotenv(EXE_DIR / ".env")

HEALTH_PATHS = ("/", "/health", "/api", "/api/", "/api/health")
APERTURE_PATHS = ("/calculate", "/api/calculate")
FOCAL_PATHS = ("/focal-equiv", "/focal-equivalent", "/api/focal-equiv", "/api/focal-equivalent")


def create_app(cfg: Optional[AppConfig] = None) -> Flask:
    """
    Build the Flask app serving the equivalence API.

    Parameters
    ----------
    cfg
        Application config. Defaults apply when None (strict validation,
        CORS open to every origin).

    Returns
    -------
    Flask
        Configured application.
    """
    cfg = cfg or AppConfig()
    calculator = EquivalenceCalculator(policy=cfg.calculator.coercion_policy)

    app = Flask(__name__)
    app.json.sort_keys = False  # keep payload key order

    cors_headers = {
        "Access-Control-Allow-Origin": cfg.server.cors_allow_origin,
        "Access-Control-Allow-Methods": "GET, HEAD, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }

    @app.before_request
    def preflight():
        if request.method == "OPTIONS":
            return Response(status=204)
        return None

    @app.after_request
    def add_cors_headers(resp: Response) -> Response:
        resp.headers.update(cors_headers)
        return resp

    @app.errorhandler(404)
    def not_found(_err):
        return jsonify({"error": "Not Found", "path": request.path}), 404

    @app.errorhandler(ValidationError)
    def rejected(err: ValidationError):
        print(f"[API] rejected {request.path}: {err.kind} ({err.field})")
        return jsonify(build_error_payload(err)), 400

    def health():
        resp = jsonify({"status": "ok", "version": cfg.server.version})
        resp.headers["Cache-Control"] = "no-cache"
        return resp

    def calculate():
        sensor_size = request.args.get("sensorSize")
        aperture = request.args.get("aperture")
        print(f"[API] aperture equiv params: sensorSize={sensor_size!r} aperture={aperture!r}")

        result = calculator.aperture_equivalence(sensor_size, aperture)
        return jsonify(build_aperture_payload(result)), 200

    def focal_equivalent():
        args = request.args
        print(
            "[API] focal equiv params: "
            f"originalSensor={args.get('originalSensor')!r} originalFocal={args.get('originalFocal')!r} "
            f"newFocal={args.get('newFocal')!r} aperture={args.get('aperture')!r}"
        )

        report = calculator.focal_equivalence(
            args.get("originalSensor"),
            args.get("originalFocal"),
            args.get("newFocal"),
            args.get("aperture"),
        )
        return jsonify(build_focal_payload(report)), 200

    for path in HEALTH_PATHS:
        app.add_url_rule(path, f"health:{path}", health, methods=["GET"])
    for path in APERTURE_PATHS:
        app.add_url_rule(path, f"calculate:{path}", calculate, methods=["GET", "POST"])
    for path in FOCAL_PATHS:
        app.add_url_rule(path, f"focal:{path}", focal_equivalent, methods=["GET", "POST"])

    return app


def _load_config_or_defaults() -> AppConfig:
    try:
        return load_app_config()
    except FileNotFoundError as e:
        print(f"[API] {e}; using defaults")
        return AppConfig()


# WSGI servers and `flask run` pick up this instance
app_config = _load_config_or_defaults()
app = create_app(app_config)


def main() -> None:
    """Run the API server with config.yaml (or defaults) and LENSIFY_HOST / LENSIFY_PORT overrides."""
    host = os.getenv("LENSIFY_HOST", app_config.server.host)
    port = int(os.getenv("LENSIFY_PORT", app_config.server.port))
    # IMPORTANT for EXE: do NOT use debug=True in production
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    main()
