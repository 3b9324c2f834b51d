"""Configuration loading for weaveproxy.

Brief:
  Reads the YAML config file, validates it against the bundled JSON Schema,
  and turns it into the frozen ProxyConfig handed to every interceptor.

Inputs:
  - YAML config paths or already-parsed mappings.

Outputs:
  - ProxyConfig instances.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .config_schema import validate_config
from .proxy_config import ProxyConfig

logger = logging.getLogger(__name__)


def load_proxy_config(
    cfg: Optional[Dict[str, Any]],
    *,
    config_path: Optional[str] = None,
    unknown_keys: str = "warn",
) -> ProxyConfig:
    """Brief: Validate a parsed configuration mapping and build ProxyConfig.

    Inputs:
      - cfg: Mapping loaded from YAML (None is treated as empty).
      - config_path: Optional file path, used only in error messages.
      - unknown_keys: "ignore", "warn" or "error"; see validate_config().

    Outputs:
      - ProxyConfig.

    Raises:
      - ValueError: schema or model validation failed.

    Example:
      >>> load_proxy_config({"with_dns": True}).with_dns
      True
    """

    cfg = dict(cfg or {})
    validate_config(cfg, config_path=config_path, unknown_keys=unknown_keys)

    # Unknown keys survived validation only because the policy tolerates them.
    known = {k: v for k, v in cfg.items() if k in ProxyConfig.model_fields}
    try:
        return ProxyConfig(**known)
    except ValidationError as exc:
        raise ValueError(
            f"Invalid configuration in {config_path or '<config dict>'}: {exc}"
        ) from exc


def parse_config_file(config_path: str, *, unknown_keys: str = "warn") -> ProxyConfig:
    """Brief: Read and validate a YAML config file.

    Inputs:
      - config_path: Path to the YAML configuration file.
      - unknown_keys: Policy for keys not described by the schema.

    Outputs:
      - ProxyConfig.

    Raises:
      - ValueError: when the root is not a mapping or validation fails.
      - OSError: when the file cannot be read.
    """

    with open(config_path, "r") as f:
        cfg = yaml.safe_load(f) or {}

    if not isinstance(cfg, dict):
        raise ValueError("Configuration root must be a mapping")

    logger.debug("loaded configuration from %s", config_path)
    return load_proxy_config(cfg, config_path=config_path, unknown_keys=unknown_keys)
