"""
Brief: Tests for SocketLoader, MemoryLoader and response decoding.

Inputs:
  - None

Outputs:
  - None
"""

import pytest

import whoiswalk.transports.whois as whois_mod
from whoiswalk.exceptions import WhoisConnectionError
from whoiswalk.loaders import MemoryLoader, SocketLoader, decode_response


def test_decode_response_prefers_utf8_and_falls_back_to_latin1():
    """
    Brief: UTF-8 bodies decode as UTF-8; invalid UTF-8 decodes as latin-1.

    Inputs:
      - None

    Outputs:
      - None
    """
    assert decode_response("Inhaber: Müller".encode("utf-8")) == "Inhaber: Müller"
    assert decode_response("Inhaber: Müller".encode("latin-1")) == "Inhaber: Müller"


def test_socket_loader_passes_host_port_and_limits(monkeypatch):
    """
    Brief: SocketLoader splits ":port" and forwards its timeouts to whois_query.

    Inputs:
      - monkeypatch: pytest fixture

    Outputs:
      - None
    """
    seen = {}

    def _fake_query(host, query, **kw):
        seen["host"] = host
        seen["query"] = query
        seen.update(kw)
        return b"Domain Name: EXAMPLE.COM\r\n"

    monkeypatch.setattr(whois_mod, "whois_query", _fake_query)
    loader = SocketLoader(connect_timeout_ms=250, read_timeout_ms=750, max_bytes=2048)

    text = loader.load_text("whois.example.net:4343", "example.com\r\n")

    assert text == "Domain Name: EXAMPLE.COM\r\n"
    assert seen == {
        "host": "whois.example.net",
        "query": "example.com\r\n",
        "port": 4343,
        "connect_timeout_ms": 250,
        "read_timeout_ms": 750,
        "max_bytes": 2048,
    }

    loader.load_text("whois.example.org", "example.org\r\n")
    assert seen["port"] == 43


def test_socket_loader_clamps_bad_limits():
    """
    Brief: Non-positive limits are clamped to 1.

    Inputs:
      - None

    Outputs:
      - None
    """
    loader = SocketLoader(port=0, connect_timeout_ms=0, read_timeout_ms=-5, max_bytes=0)
    assert loader.port == 43
    assert loader.connect_timeout_ms == 1
    assert loader.read_timeout_ms == 1
    assert loader.max_bytes == 1


def test_socket_loader_rejects_empty_host():
    """
    Brief: An empty host is a connection failure, not a socket call.

    Inputs:
      - None

    Outputs:
      - None
    """
    with pytest.raises(WhoisConnectionError):
        SocketLoader().load_text("", "example.com\r\n")


def test_socket_loader_propagates_transport_errors(monkeypatch):
    """
    Brief: WhoisConnectionError from the transport reaches the caller unchanged.

    Inputs:
      - monkeypatch: pytest fixture

    Outputs:
      - None
    """
    err = WhoisConnectionError("refused")

    def _fail(*a, **kw):
        raise err

    monkeypatch.setattr(whois_mod, "whois_query", _fail)
    with pytest.raises(WhoisConnectionError) as excinfo:
        SocketLoader().load_text("whois.example", "example.com\r\n")
    assert excinfo.value is err


def test_memory_loader_lookup_order_and_calls():
    """
    Brief: (host, query) keys win over host keys; every call is recorded.

    Inputs:
      - None

    Outputs:
      - None
    """
    loader = MemoryLoader(
        {
            "whois.example": "generic",
            ("whois.example", "=example.com"): "strict",
        }
    )
    assert loader.load_text("WHOIS.EXAMPLE", "=example.com\r\n") == "strict"
    assert loader.load_text("whois.example", "example.com\r\n") == "generic"
    assert loader.calls == [
        ("WHOIS.EXAMPLE", "=example.com\r\n"),
        ("whois.example", "example.com\r\n"),
    ]


def test_memory_loader_raises_configured_and_unknown_errors():
    """
    Brief: Exception values are raised; unknown hosts are connection failures.

    Inputs:
      - None

    Outputs:
      - None
    """
    loader = MemoryLoader({"down.example": WhoisConnectionError("down")})
    with pytest.raises(WhoisConnectionError, match="down"):
        loader.load_text("down.example", "x\r\n")
    with pytest.raises(WhoisConnectionError, match="no canned response"):
        loader.load_text("missing.example", "x\r\n")


def test_memory_loader_keys_match_case_insensitively():
    """
    Brief: Mixed-case hosts and CRLF-terminated queries in the keys still match.

    Inputs:
      - None

    Outputs:
      - None
    """
    loader = MemoryLoader(
        {
            "Whois.Example.NET": "generic",
            ("WHOIS.Example.net", "=example.com\r\n"): "strict",
        }
    )
    assert loader.load_text("whois.example.net", "example.com\r\n") == "generic"
    assert loader.load_text("whois.EXAMPLE.net", "=example.com\r\n") == "strict"
