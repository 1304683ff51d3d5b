from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Union

from .exceptions import WhoisConnectionError
from .transports import whois as _whois_transport
from .transports.whois import WHOIS_PORT, split_host_port

logger = logging.getLogger(__name__)


class Loader(ABC):
    """Brief: Transport capability consumed by the resolver.

    Inputs:
      - None (abstract).

    Outputs:
      - Subclasses implement load_text(host, query) -> str and raise
        WhoisConnectionError on any network-level failure.
    """

    @abstractmethod
    def load_text(self, host: str, query: str) -> str:
        raise NotImplementedError


def decode_response(raw: bytes) -> str:
    """Brief: Decode WHOIS response bytes, preferring UTF-8.

    Inputs:
      - raw: Response body bytes.

    Outputs:
      - str: Text decoded as UTF-8, or latin-1 when UTF-8 fails.
    """

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


class SocketLoader(Loader):
    """Brief: Loader that talks to real WHOIS servers over TCP.

    Inputs (constructor):
      - port: Default port when a host carries no ":port" suffix.
      - connect_timeout_ms: TCP connect timeout in milliseconds.
      - read_timeout_ms: Per-read timeout in milliseconds.
      - max_bytes: Response size cap.

    Outputs:
      - Instances whose load_text() returns decoded response text.
    """

    def __init__(
        self,
        *,
        port: int = WHOIS_PORT,
        connect_timeout_ms: int = 5000,
        read_timeout_ms: int = 10000,
        max_bytes: int = 1024 * 1024,
    ) -> None:
        self.port = int(port or WHOIS_PORT)
        self.connect_timeout_ms = max(1, int(connect_timeout_ms))
        self.read_timeout_ms = max(1, int(read_timeout_ms))
        self.max_bytes = max(1, int(max_bytes))

    def load_text(self, host: str, query: str) -> str:
        name, port = split_host_port(host, self.port)
        if not name:
            raise WhoisConnectionError("empty WHOIS host")
        # Module attribute lookup so tests can monkeypatch whois_query.
        raw = _whois_transport.whois_query(
            name,
            query,
            port=port,
            connect_timeout_ms=self.connect_timeout_ms,
            read_timeout_ms=self.read_timeout_ms,
            max_bytes=self.max_bytes,
        )
        return decode_response(raw)


class MemoryLoader(Loader):
    """Brief: Loader answering from canned responses (offline replay, tests).

    Inputs (constructor):
      - responses: Mapping keyed by host or by (host, query). Hosts match
        case-insensitively; queries match after stripping the line
        terminator. Values are response text or an Exception to raise.

    Outputs:
      - Instances that record every (host, query) they were asked in `calls`.

    Example:
      >>> loader = MemoryLoader({"whois.example": "Domain Name: EXAMPLE.COM"})
      >>> loader.load_text("whois.example", "example.com\\r\\n")
      'Domain Name: EXAMPLE.COM'
    """

    def __init__(
        self,
        responses: Optional[
            Dict[Union[str, Tuple[str, str]], Union[str, Exception]]
        ] = None,
    ) -> None:
        self.responses: Dict[Union[str, Tuple[str, str]], Union[str, Exception]] = {}
        for key, value in (responses or {}).items():
            if isinstance(key, tuple):
                host, query = key
                key = (str(host).lower(), str(query).rstrip("\r\n"))
            else:
                key = str(key).lower()
            self.responses[key] = value
        self.calls: List[Tuple[str, str]] = []

    def load_text(self, host: str, query: str) -> str:
        self.calls.append((host, query))
        key = str(host).lower()
        stripped = query.rstrip("\r\n")
        if (key, stripped) in self.responses:
            value = self.responses[(key, stripped)]
        elif key in self.responses:
            value = self.responses[key]
        else:
            raise WhoisConnectionError(f"no canned response for {host}")
        if isinstance(value, Exception):
            raise value
        return value
