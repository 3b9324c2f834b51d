"""JSON Schema-based validation for weaveproxy YAML configuration.

This module centralizes validating the proxy ``config.yaml`` against the JSON
Schema document shipped as ``weaveproxy/assets/config-schema.json``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator, ValidationError
from jsonschema.exceptions import SchemaError

logger = logging.getLogger(__name__)


def get_default_schema_path() -> Path:
    """Return the path of the schema bundled with the package."""
    return Path(__file__).resolve().parent.parent / "assets" / "config-schema.json"


def _load_schema(schema_path: Optional[Path] = None) -> Dict[str, Any]:
    path = schema_path or get_default_schema_path()
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _format_errors(errors: List[ValidationError], *, config_path: Optional[str]) -> str:
    """Brief: Format jsonschema validation errors into a human-readable string.

    Inputs:
      - errors: List of jsonschema.ValidationError instances.
      - config_path: Optional path to the YAML config being validated.

    Outputs:
      - String suitable for display in logs or exception messages.
    """

    lines: List[str] = [f"Invalid configuration in {config_path or '<config dict>'}:"]
    for err in errors:
        instance_path = "/".join(str(p) for p in err.path) or "<root>"
        schema_path = "/".join(str(p) for p in err.schema_path)
        lines.append(f"- {instance_path}: {err.message} (schema: {schema_path})")
    return "\n".join(lines)


def _split_extra_property_errors(
    errors: List[ValidationError],
) -> tuple[List[ValidationError], List[ValidationError]]:
    extra: List[ValidationError] = []
    other: List[ValidationError] = []
    for err in errors:
        if getattr(err, "validator", None) in {
            "additionalProperties",
            "unevaluatedProperties",
        }:
            extra.append(err)
        else:
            other.append(err)
    return extra, other


def validate_config(
    cfg: Dict[str, Any],
    *,
    schema_path: Optional[Path] = None,
    config_path: Optional[str] = None,
    unknown_keys: str = "warn",
) -> None:
    """Brief: Validate a parsed YAML configuration mapping against JSON Schema.

    Inputs:
      - cfg: Dict loaded from YAML (top-level configuration mapping).
      - schema_path: Optional explicit path to the JSON Schema file.
      - config_path: Optional path of the YAML file, used only in messages.
      - unknown_keys: Policy for keys the schema does not describe:
        "ignore", "warn" (default, log and continue) or "error".

    Outputs:
      - None on success.

    Raises:
      - ValueError: when validation fails, or when ``unknown_keys`` is
        "error" and unknown keys are present.

    Example:
      >>> validate_config({"weave_wait_volume": "weavewait", "with_dns": True})
    """

    if unknown_keys not in {"ignore", "warn", "error"}:
        raise ValueError(
            f"unknown_keys policy must be 'ignore', 'warn', or 'error', got {unknown_keys!r}"
        )

    effective_schema_path = schema_path or get_default_schema_path()
    try:
        schema = _load_schema(effective_schema_path)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning(
            "Failed to load configuration schema at %s: %s; skipping JSON Schema validation",
            effective_schema_path,
            exc,
        )
        return None

    try:
        validator = Draft202012Validator(schema)
        all_errors = sorted(validator.iter_errors(cfg), key=lambda e: list(e.path))
    except SchemaError as exc:
        logger.warning(
            "Configuration schema at %s is invalid: %s; skipping JSON Schema validation",
            effective_schema_path,
            exc,
        )
        return None

    if not all_errors:
        return None

    extra_errors, other_errors = _split_extra_property_errors(all_errors)

    # Non-extra failures are always fatal; report extras alongside them.
    if other_errors:
        raise ValueError(_format_errors(other_errors + extra_errors, config_path=config_path))

    message = _format_errors(extra_errors, config_path=config_path)
    if unknown_keys == "ignore":
        return None
    if unknown_keys == "warn":
        logger.warning(message)
        return None
    raise ValueError(message)
