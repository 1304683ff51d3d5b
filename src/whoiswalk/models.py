from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class DomainResponse:
    """Brief: Raw result of a single WHOIS round-trip.

    Inputs:
      - domain: Normalized domain that was asked about.
      - query: Exact request text sent (including line terminator).
      - text: Decoded response text.
      - host: Server that answered ("host" or "host:port").

    Outputs:
      - Immutable DomainResponse instance.
    """

    domain: str
    query: str
    text: str
    host: str


@dataclass(frozen=True)
class DomainInfo:
    """Brief: Structured registration data parsed from a DomainResponse.

    Inputs:
      - response: DomainResponse the fields were parsed from.
      - domain_name: Registered domain name as reported by the server.
      - whois_server: Referral host ("ask this server next"), or "" when none.
      - name_servers: Delegated name servers, lowercase.
      - creation_date / expiration_date / updated_date: Date text as reported.
      - states: Domain status values, lowercase.
      - owner: Registrant organisation or name.
      - registrar: Sponsoring registrar.
      - extra: Any remaining key/value pairs the parser collected.

    Outputs:
      - Immutable DomainInfo instance.
    """

    response: DomainResponse
    domain_name: str
    whois_server: str = ""
    name_servers: Tuple[str, ...] = ()
    creation_date: str = ""
    expiration_date: str = ""
    updated_date: str = ""
    states: Tuple[str, ...] = ()
    owner: str = ""
    registrar: str = ""
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    def score(self) -> int:
        """Brief: Count populated fields; used to rank competing parses."""

        values = (
            self.domain_name,
            self.whois_server,
            self.name_servers,
            self.creation_date,
            self.expiration_date,
            self.updated_date,
            self.states,
            self.owner,
            self.registrar,
        )
        return sum(1 for v in values if v)

    def to_dict(self, *, include_text: bool = False) -> Dict[str, Any]:
        """Brief: JSON-friendly view used by the CLI.

        Inputs:
          - include_text: When True, include the raw response text.

        Outputs:
          - dict with the parsed fields plus the answering host.
        """

        out: Dict[str, Any] = {
            "domain_name": self.domain_name,
            "whois_server": self.whois_server or None,
            "name_servers": list(self.name_servers),
            "creation_date": self.creation_date or None,
            "expiration_date": self.expiration_date or None,
            "updated_date": self.updated_date or None,
            "states": list(self.states),
            "owner": self.owner or None,
            "registrar": self.registrar or None,
            "host": self.response.host,
        }
        if include_text:
            out["text"] = self.response.text
        return out

