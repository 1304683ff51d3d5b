"""Configuration parsing and normalization helpers for whoiswalk.

Brief:
  This module contains the configuration-parsing utilities used by the CLI
  entrypoint and by TldModule.create(). It centralizes:
    - reading YAML config files
    - merging variables from config/env/CLI
    - JSON Schema validation (including variable expansion performed by
      validate_config)
    - building the registry server list (packaged defaults + config entries)
    - building the SocketLoader and resolver settings

Inputs:
  - YAML config dicts and paths

Outputs:
  - Normalized config dicts, TldServer lists and loader instances
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..loaders import SocketLoader
from ..tld_server import TldServer
from .config_schema import validate_config

logger = logging.getLogger(__name__)

DEFAULT_MAX_REFERRAL_HOPS = 4


def _is_var_key(key: str) -> bool:
    """Brief: Validate whether a string is a supported variable key name.

    Inputs:
      - key: Candidate variable name.

    Outputs:
      - bool: True when the name is ALL_UPPERCASE and matches [A-Z_][A-Z0-9_]*.
    """

    if not key:
        return False
    if key != key.upper():
        return False
    return bool(re.fullmatch(r"[A-Z_][A-Z0-9_]*", key))


def _parse_yaml_value(text: str) -> Any:
    """Brief: Parse a CLI/environment variable value as YAML.

    Inputs:
      - text: String containing YAML scalar/list/dict.

    Outputs:
      - Any: Parsed value (falls back to original string on parse errors).
    """

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text


def parse_config_variables(
    cfg: Dict[str, Any],
    *,
    cli_vars: Optional[List[str]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Brief: Merge config/environment/CLI variables into cfg['vars'].

    Inputs:
      - cfg: Parsed YAML configuration mapping (mutated in-place).
      - cli_vars: Optional list of CLI `KEY=YAML` assignments.
      - environ: Optional environment mapping (defaults to os.environ).

    Outputs:
      - dict: The merged variables mapping stored back onto cfg['vars'].

    Precedence:
      - CLI (-v/--var) overrides environment overrides config-file variables.

    Notes:
      - Only environment keys prefixed WHOISWALK_ are considered, with the
        prefix stripped (WHOISWALK_TIMEOUT -> TIMEOUT).
      - Values are parsed as YAML so list/dict/int/bool values can be provided.

    Example:
      >>> cfg = {'vars': {'TIMEOUT': 100}}
      >>> parse_config_variables(cfg, cli_vars=['TIMEOUT=300'], environ={})['TIMEOUT']
      300
    """

    base = cfg.get("vars", cfg.pop("variables", None))
    if base is None:
        merged: Dict[str, Any] = {}
    elif isinstance(base, dict):
        merged = dict(base)
    else:
        raise ValueError("config.vars must be a mapping when present")

    env = os.environ if environ is None else environ
    for k, v in env.items():
        if not isinstance(k, str) or not k.startswith("WHOISWALK_"):
            continue
        name = k[len("WHOISWALK_") :]
        if _is_var_key(name):
            merged[name] = _parse_yaml_value(str(v))

    for assignment in cli_vars or []:
        if "=" not in assignment:
            raise ValueError(
                "Invalid -v/--var value (expected KEY=YAML), got: %r" % assignment
            )
        k, raw = assignment.split("=", 1)
        k = str(k).strip()
        if not _is_var_key(k):
            raise ValueError(
                "Invalid variable name %r (must be ALL_UPPERCASE and match [A-Z_][A-Z0-9_]*)"
                % k
            )
        merged[k] = _parse_yaml_value(raw)

    cfg["vars"] = merged
    return merged


def parse_config_file(
    config_path: str,
    *,
    cli_vars: Optional[List[str]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Brief: Read, variable-merge, and schema-validate a YAML config file.

    Inputs:
      - config_path: Path to the YAML configuration file.
      - cli_vars: Optional list of CLI `KEY=YAML` assignments (from -v/--var).
      - environ: Optional environment mapping (defaults to os.environ).

    Outputs:
      - dict: Validated configuration mapping with variables expanded.

    Raises:
      - ValueError: When schema validation fails or variables are invalid.
      - OSError: When the file cannot be read.
    """

    with open(config_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    if not isinstance(cfg, dict):
        raise ValueError("Configuration root must be a mapping")

    parse_config_variables(cfg, cli_vars=list(cli_vars or []), environ=environ)
    validate_config(cfg, config_path=config_path)
    return cfg


def get_default_servers_path() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / "tld_servers.yaml"


def load_server_list(path: Optional[Path] = None) -> List[TldServer]:
    """Brief: Load TldServer entries from a YAML list file.

    Inputs:
      - path: YAML file holding a list of server mappings; defaults to the
        packaged whoiswalk/data/tld_servers.yaml.

    Outputs:
      - list[TldServer] in file order.

    Raises:
      - ValueError: When the file root is not a list.
      - pydantic.ValidationError: For malformed entries.
    """

    path = path or get_default_servers_path()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    if not isinstance(data, list):
        raise ValueError(f"server list {path} must be a YAML list")
    servers = TldServer.from_config_list(data)
    logger.debug("Loaded %d servers from %s", len(servers), path)
    return servers


def build_servers(cfg: Optional[Dict[str, Any]]) -> List[TldServer]:
    """Brief: Build the server list described by a validated config.

    Inputs:
      - cfg: Config mapping; reads cfg['servers']['defaults'] (default True)
        and cfg['servers']['entries'] (default []).

    Outputs:
      - list[TldServer]: packaged defaults (unless disabled) followed by the
        configured entries.
    """

    servers_cfg = (cfg or {}).get("servers") or {}
    servers: List[TldServer] = []
    if servers_cfg.get("defaults", True):
        servers.extend(load_server_list())
    servers.extend(TldServer.from_config_list(servers_cfg.get("entries") or []))
    return servers


def build_loader(cfg: Optional[Dict[str, Any]]) -> SocketLoader:
    """Brief: Build a SocketLoader from cfg['loader'] settings.

    Inputs:
      - cfg: Config mapping with optional loader.{port, connect_timeout_ms,
        read_timeout_ms, max_bytes}.

    Outputs:
      - SocketLoader instance.
    """

    loader_cfg = (cfg or {}).get("loader") or {}
    return SocketLoader(**loader_cfg)


def get_max_referral_hops(cfg: Optional[Dict[str, Any]]) -> int:
    resolver_cfg = (cfg or {}).get("resolver") or {}
    return int(resolver_cfg.get("max_referral_hops", DEFAULT_MAX_REFERRAL_HOPS))
