from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from ..domain import filter_host, to_ascii
from ..models import DomainInfo, DomainResponse

logger = logging.getLogger(__name__)

Pairs = Dict[str, List[str]]

# Field -> response keys (lowercase, single-spaced) searched in order.
DEFAULT_KEYS: Dict[str, Tuple[str, ...]] = {
    "domain_name": ("domain name", "domain", "domainname", "domain_name"),
    "whois_server": (
        "registrar whois server",
        "whois server",
        "whois",
        "referralserver",
    ),
    "name_servers": (
        "name server",
        "name servers",
        "nameserver",
        "nameservers",
        "nserver",
        "nsset",
    ),
    "creation_date": (
        "creation date",
        "created",
        "created on",
        "registered on",
        "registered",
        "registration time",
        "domain registration date",
    ),
    "expiration_date": (
        "registry expiry date",
        "registrar registration expiration date",
        "expiration date",
        "expiry date",
        "expires on",
        "expires",
        "paid-till",
        "expire",
    ),
    "updated_date": (
        "updated date",
        "last updated",
        "last modified",
        "last-update",
        "changed",
        "modified",
    ),
    "states": ("domain status", "status", "state", "registration status"),
    "owner": (
        "registrant organization",
        "registrant organisation",
        "registrant name",
        "registrant",
        "org",
        "owner",
    ),
    "registrar": ("registrar", "sponsoring registrar", "registrar name"),
}

# Status values meaning "this name is not registered".
FREE_STATES = frozenset({"free", "available", "not registered", "no match"})


def parser_aliases(*aliases: str):
    """Brief: Decorator to set aliases on a parser class for registry lookup.

    Inputs:
      - *aliases: Variable number of alias strings for the parser.

    Outputs:
      - Callable that applies the aliases to a parser class and returns it.

    Example:
        >>> @parser_aliases("kv", "common")
        ... class MyParser(Parser):
        ...     pass
        >>> MyParser.aliases
        ('kv', 'common')
    """

    def _wrap(cls: type) -> type:
        cls.aliases = tuple(aliases)
        return cls

    return _wrap


class Parser:
    """Brief: Parser capability: turn a DomainResponse into a DomainInfo.

    Inputs (constructor):
      - keys: Optional per-field overrides of DEFAULT_KEYS; each value is a
        list of response keys, or one key as a bare string.

    Outputs:
      - parse_response(response) -> DomainInfo or None. Implementations never
        raise on malformed input; an unusable response yields None.
    """

    aliases: Tuple[str, ...] = ()

    def __init__(self, *, keys: Optional[Dict[str, Iterable[str]]] = None) -> None:
        if keys is not None and not isinstance(keys, dict):
            raise ValueError("parser keys must be a mapping of field -> key list")
        merged = dict(DEFAULT_KEYS)
        for field_name, names in (keys or {}).items():
            if field_name not in DEFAULT_KEYS:
                raise ValueError(f"unknown parser field {field_name!r}")
            if isinstance(names, str):
                names = [names]
            elif not isinstance(names, (list, tuple)):
                raise ValueError(
                    f"parser keys for {field_name!r} must be a string or a list of strings"
                )
            merged[field_name] = tuple(_norm_key(n) for n in names)
        self.keys = merged

    def parse_response(self, response: DomainResponse) -> Optional[DomainInfo]:
        try:
            pairs = self.collect_pairs(response.text or "")
        except (
            Exception
        ) as exc:  # pragma: nocover defensive: parsers must not raise on hostile input
            logger.debug("Parser %s failed on %s: %s", type(self).__name__, response.host, exc)
            return None
        return self.build_info(response, pairs)

    def collect_pairs(self, text: str) -> Pairs:
        raise NotImplementedError

    def _first(self, pairs: Pairs, field_name: str) -> str:
        for key in self.keys[field_name]:
            for value in pairs.get(key, ()):
                if value:
                    return value
        return ""

    def _all(self, pairs: Pairs, field_name: str) -> List[str]:
        out: List[str] = []
        for key in self.keys[field_name]:
            out.extend(v for v in pairs.get(key, ()) if v)
        return out

    def build_info(self, response: DomainResponse, pairs: Pairs) -> Optional[DomainInfo]:
        """Brief: Map collected key/value pairs onto a DomainInfo.

        Inputs:
          - response: Source response.
          - pairs: Lowercase key -> list of values, in response order.

        Outputs:
          - DomainInfo, or None when no domain name was found or the status
            says the name is free.
        """

        domain_name = to_ascii(_first_token(self._first(pairs, "domain_name")))
        if not domain_name:
            return None

        raw_states = self._all(pairs, "states")
        states = _unique(_first_token(v).lower() for v in raw_states)
        if any(
            v.strip().rstrip(".").lower() in FREE_STATES or s in FREE_STATES
            for v, s in zip(raw_states, (_first_token(v).lower() for v in raw_states))
        ):
            return None

        name_servers = _unique(
            _first_token(v).lower().rstrip(".") for v in self._all(pairs, "name_servers")
        )
        used = {k for names in self.keys.values() for k in names}
        extra = {k: v[0] if len(v) == 1 else list(v) for k, v in pairs.items() if k not in used}

        return DomainInfo(
            response=response,
            domain_name=domain_name,
            whois_server=filter_host(self._first(pairs, "whois_server")),
            name_servers=name_servers,
            creation_date=self._first(pairs, "creation_date"),
            expiration_date=self._first(pairs, "expiration_date"),
            updated_date=self._first(pairs, "updated_date"),
            states=states,
            owner=self._first(pairs, "owner"),
            registrar=self._first(pairs, "registrar"),
            extra=extra,
        )


def _norm_key(key: str) -> str:
    return " ".join(str(key).strip().lower().split())


def _first_token(value: str) -> str:
    parts = str(value).split()
    return parts[0] if parts else ""


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    seen: List[str] = []
    for v in values:
        if v and v not in seen:
            seen.append(v)
    return tuple(seen)
