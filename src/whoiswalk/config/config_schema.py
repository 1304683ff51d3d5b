"""JSON Schema-based validation for whoiswalk YAML configuration.

This module validates the optional ``config.yaml`` against the JSON Schema
document shipped as ``whoiswalk/data/config-schema.json``, after expanding
``${VAR}`` references from the top-level ``vars`` group.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator, ValidationError

logger = logging.getLogger(__name__)

_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")
_VAR_KEY = re.compile(r"[A-Z_][A-Z0-9_]*")


def get_default_schema_path() -> Path:
    """Brief: Path of the packaged configuration schema."""

    return Path(__file__).resolve().parent.parent / "data" / "config-schema.json"


def _load_schema(schema_path: Optional[Path] = None) -> Dict[str, Any]:
    """Brief: Load JSON Schema from disk.

    Inputs:
      - schema_path: Optional explicit path to the schema file.

    Outputs:
      - Dict representing the JSON Schema.
    """

    path = schema_path or get_default_schema_path()
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _expand_variables(cfg: Dict[str, Any]) -> None:
    """Brief: Expand top-level `vars` into the config and remove the group.

    Inputs:
      - cfg: Parsed YAML configuration mapping (mutated in-place).

    Outputs:
      - None.

    Behavior:
      - A string value that is exactly `$KEY` or `${KEY}` is replaced with the
        variable's YAML value (list/dict/int/etc.).
      - `${KEY}` occurrences inside longer strings are substituted as text.
      - Cycles between variables raise ValueError.
      - The legacy `variables` key is accepted as an alias for `vars`.
    """

    variables = cfg.pop("vars", None)
    legacy = cfg.pop("variables", None)
    if variables is None:
        variables = legacy
    if variables is None:
        return
    if not isinstance(variables, dict):
        raise ValueError("config.vars must be a mapping when present")

    for k in variables:
        if not isinstance(k, str) or not _VAR_KEY.fullmatch(k):
            raise ValueError(f"config.vars key {k!r} must match [A-Z_][A-Z0-9_]*")

    resolved: Dict[str, Any] = {}

    def _resolve_var(key: str, stack: List[str]) -> Any:
        if key in resolved:
            return resolved[key]
        if key in stack:
            cycle = " -> ".join(stack + [key])
            raise ValueError(f"config.vars contains a cycle: {cycle}")
        resolved[key] = _expand_obj(variables[key], stack + [key])
        return resolved[key]

    def _whole_node_name(text: str) -> Optional[str]:
        if text.startswith("${") and text.endswith("}") and text[2:-1] in variables:
            return text[2:-1]
        if text.startswith("$") and text[1:] in variables:
            return text[1:]
        return None

    def _expand_string(text: str, stack: List[str]) -> Any:
        name = _whole_node_name(text)
        if name is not None:
            return copy.deepcopy(_resolve_var(name, stack))

        def _repl(match: re.Match) -> str:
            key = match.group(1)
            if key not in variables:
                return match.group(0)
            value = _resolve_var(key, stack)
            if isinstance(value, bool):
                return "true" if value else "false"
            if value is None:
                return "null"
            if isinstance(value, (int, float, str)):
                return str(value)
            return json.dumps(value)

        return _VAR_PATTERN.sub(_repl, text)

    def _expand_obj(obj: Any, stack: List[str]) -> Any:
        if isinstance(obj, str):
            return _expand_string(obj, stack)
        if isinstance(obj, list):
            out: List[Any] = []
            for item in obj:
                # A list-valued variable used as a list item is spliced in.
                if isinstance(item, str) and _whole_node_name(item) is not None:
                    expanded = _expand_string(item, stack)
                    if isinstance(expanded, list):
                        out.extend(expanded)
                        continue
                    out.append(expanded)
                    continue
                out.append(_expand_obj(item, stack))
            return out
        if isinstance(obj, dict):
            return {k: _expand_obj(v, stack) for k, v in obj.items()}
        return obj

    for key in list(variables):
        _resolve_var(key, [])
    for top_key in list(cfg):
        cfg[top_key] = _expand_obj(cfg[top_key], [])


def _format_errors(errors: List[ValidationError], *, config_path: Optional[str]) -> str:
    """Brief: Format jsonschema validation errors into a human-readable string.

    Inputs:
      - errors: List of jsonschema.ValidationError instances.
      - config_path: Optional path to the YAML config being validated.

    Outputs:
      - String suitable for display in logs or CLI output.
    """

    lines: List[str] = [f"Invalid configuration in {config_path or '<config dict>'}:"]
    for err in errors:
        instance_path = "/".join(str(p) for p in err.path) or "<root>"
        schema_path = "/".join(str(p) for p in err.schema_path)
        lines.append(f"- {instance_path}: {err.message} (schema: {schema_path})")
    return "\n".join(lines)


def validate_config(
    cfg: Dict[str, Any],
    *,
    schema_path: Optional[Path] = None,
    config_path: Optional[str] = None,
) -> None:
    """Brief: Expand variables in, then validate, a parsed YAML configuration.

    Inputs:
      - cfg: Dict loaded from YAML (mutated: variables are expanded and the
        `vars` group removed).
      - schema_path: Optional explicit path to a JSON Schema file.
      - config_path: Optional path of the YAML file, used in error messages.

    Outputs:
      - None on success.

    Raises:
      - ValueError: listing every validation error with its instance path.

    Example:
      >>> validate_config({"resolver": {"max_referral_hops": 2}})
    """

    _expand_variables(cfg)

    schema = _load_schema(schema_path)
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(cfg), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise ValueError(_format_errors(errors, config_path=config_path))
    logger.debug("Configuration %s validated", config_path or "<config dict>")
