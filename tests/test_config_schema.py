"""
Brief: Tests for whoiswalk.config.config_schema variable expansion and validation.

Inputs:
  - None

Outputs:
  - None
"""

import pytest

from whoiswalk.config.config_schema import (
    _expand_variables,
    get_default_schema_path,
    validate_config,
)


def test_default_schema_is_packaged():
    """
    Brief: The JSON Schema ships inside the package data directory.

    Inputs:
      - None

    Outputs:
      - None
    """
    path = get_default_schema_path()
    assert path.name == "config-schema.json"
    assert path.is_file()


def test_expand_whole_node_and_inline_substitution():
    """
    Brief: Whole-node references keep YAML types; inline ones become text.

    Inputs:
      - None

    Outputs:
      - None
    """
    cfg = {
        "vars": {"HOPS": 3, "NAME": "registry", "FLAG": True},
        "resolver": {"max_referral_hops": "${HOPS}"},
        "loader": {"note": "host-${NAME}-${FLAG}-${MISSING}"},
        "other": "$NAME",
    }
    _expand_variables(cfg)
    assert "vars" not in cfg
    assert cfg["resolver"]["max_referral_hops"] == 3
    assert cfg["loader"]["note"] == "host-registry-true-${MISSING}"
    assert cfg["other"] == "registry"


def test_expand_splices_list_variables():
    """
    Brief: A list variable used as a list item is spliced into the list.

    Inputs:
      - None

    Outputs:
      - None
    """
    entry = {"zone": "test", "host": "whois.test.example"}
    cfg = {
        "vars": {"EXTRA": [entry]},
        "servers": {"entries": ["${EXTRA}", {"zone": "x", "host": "y"}]},
    }
    _expand_variables(cfg)
    assert cfg["servers"]["entries"] == [entry, {"zone": "x", "host": "y"}]


def test_expand_nested_variables_and_cycles():
    """
    Brief: Variables may reference each other; cycles raise ValueError.

    Inputs:
      - None

    Outputs:
      - None
    """
    cfg = {"vars": {"A": "${B}.example", "B": "whois"}, "value": "${A}"}
    _expand_variables(cfg)
    assert cfg["value"] == "whois.example"

    with pytest.raises(ValueError, match="cycle"):
        _expand_variables({"vars": {"A": "${B}", "B": "${A}"}})


def test_expand_rejects_bad_vars():
    """
    Brief: Non-mapping vars and lowercase keys are rejected.

    Inputs:
      - None

    Outputs:
      - None
    """
    with pytest.raises(ValueError, match="mapping"):
        _expand_variables({"vars": ["A"]})
    with pytest.raises(ValueError, match="must match"):
        _expand_variables({"vars": {"lower": 1}})


def test_validate_config_accepts_full_example():
    """
    Brief: A configuration using every section validates.

    Inputs:
      - None

    Outputs:
      - None
    """
    cfg = {
        "logging": {"level": "debug", "stderr": True, "syslog": {"tag": "ww"}},
        "loader": {"port": 43, "connect_timeout_ms": 500, "max_bytes": 65536},
        "resolver": {"max_referral_hops": 0},
        "servers": {
            "defaults": True,
            "entries": [
                {
                    "zone": "co.uk",
                    "host": "whois.nic.uk",
                    "centralized": True,
                    "parser": {"type": "block"},
                }
            ],
        },
    }
    validate_config(cfg)
    validate_config({})


def test_validate_config_reports_every_error():
    """
    Brief: All schema errors are listed with their instance paths.

    Inputs:
      - None

    Outputs:
      - None
    """
    cfg = {
        "loader": {"port": 0},
        "servers": {"entries": [{"zone": "com"}]},
        "logging": {"level": "loud"},
    }
    with pytest.raises(ValueError) as excinfo:
        validate_config(cfg, config_path="x.yaml")
    message = str(excinfo.value)
    assert message.startswith("Invalid configuration in x.yaml:")
    assert "loader/port" in message
    assert "servers/entries/0" in message
    assert "logging/level" in message
