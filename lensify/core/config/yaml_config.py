from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from lensify.domain.models import CoercionPolicy

DEFAULT_BASE_URLS: Tuple[str, ...] = (
    "https://lensify.encveil.dev",
    "https://lensify-calculator.workers.dev",
)


@dataclass(frozen=True)
class ServerConfig:
    """HTTP API server settings."""
    host: str = "0.0.0.0"
    port: int = 8000
    version: str = "1.1.0"
    cors_allow_origin: str = "*"


@dataclass(frozen=True)
class CalculatorConfig:
    """Input policy of the calculation core."""
    coercion_policy: CoercionPolicy = CoercionPolicy.STRICT


@dataclass(frozen=True)
class ClientConfig:
    """API client settings (base URL fallback chain + local fallback)."""
    base_urls: Tuple[str, ...] = DEFAULT_BASE_URLS
    timeout_s: float = 5.0
    local_fallback: bool = True


@dataclass(frozen=True)
class AppConfig:
    """
    Root application configuration loaded from YAML.

    Every section is optional; missing sections keep their defaults so the
    server runs without any config file.
    """
    server: ServerConfig = field(default_factory=ServerConfig)
    calculator: CalculatorConfig = field(default_factory=CalculatorConfig)
    client: ClientConfig = field(default_factory=ClientConfig)


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("config.yaml must contain a YAML mapping at the root")
    return data


def _resolve_default_config_path() -> Path:
    """
    Resolve config.yaml location.

    Priority:
    1) LENSIFY_CONFIG env var if provided
    2) config.yaml next to the executable
    3) ./config.yaml in current working directory
    """
    import os
    import sys

    env = os.getenv("LENSIFY_CONFIG")
    if env:
        return Path(env).expanduser().resolve()

    exe_dir = Path(sys.executable).resolve().parent
    candidate = exe_dir / "config.yaml"
    if candidate.exists():
        return candidate

    return Path("config.yaml").resolve()


def _parse_policy(value: Any) -> CoercionPolicy:
    try:
        return CoercionPolicy(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in CoercionPolicy)
        raise ValueError(f"calculator.coercion_policy must be one of: {allowed} (got {value!r})") from None


def parse_app_config(raw: Dict[str, Any]) -> AppConfig:
    """
    Convert a raw config mapping into typed config objects.

    Raises
    ------
    ValueError
        If a value is invalid (unknown policy, empty base URL list, ...).
    """
    # ---- server ----
    s = raw.get("server") or {}
    server = ServerConfig(
        host=str(s.get("host", "0.0.0.0")),
        port=int(s.get("port", 8000)),
        version=str(s.get("version", "1.1.0")),
        cors_allow_origin=str(s.get("cors_allow_origin", "*")),
    )

    # ---- calculator ----
    c = raw.get("calculator") or {}
    calculator = CalculatorConfig(
        coercion_policy=_parse_policy(c.get("coercion_policy", CoercionPolicy.STRICT.value)),
    )

    # ---- client ----
    cl = raw.get("client") or {}
    base_urls = tuple(str(u).rstrip("/") for u in cl.get("base_urls", DEFAULT_BASE_URLS))
    if not base_urls:
        raise ValueError("client.base_urls must list at least one URL")
    client = ClientConfig(
        base_urls=base_urls,
        timeout_s=float(cl.get("timeout_s", 5.0)),
        local_fallback=bool(cl.get("local_fallback", True)),
    )

    return AppConfig(server=server, calculator=calculator, client=client)


def load_app_config(path: Optional[str] = None) -> AppConfig:
    """
    Load application configuration from YAML and convert into typed config objects.

    Parameters
    ----------
    path
        Explicit path to config.yaml. If None, uses default resolution.

    Returns
    -------
    AppConfig
        Parsed and validated configuration.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If required fields are missing or invalid.
    """
    cfg_path = Path(path).expanduser().resolve() if path else _resolve_default_config_path()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config not found: {cfg_path}")

    return parse_app_config(_read_yaml(cfg_path))
