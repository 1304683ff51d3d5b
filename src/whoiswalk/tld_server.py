from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .domain import belongs_to_zone, filter_host, normalize_zone
from .parsers import AutoParser, Parser, build_parser

DEFAULT_QUERY_FORMAT = "%s\r\n"


class TldServerConfig(BaseModel):
    """Brief: Typed configuration model for a single registry server entry.

    Inputs:
      - zone: Zone the server answers for ("com", ".co.uk").
      - host: WHOIS host, optionally "host:port".
      - centralized: Never follow referrals returned by this server.
      - query_format: printf-style request template with one "%s".
      - parser: Parser alias or {"type": alias, ...options}.

    Outputs:
      - TldServerConfig instance with normalized field types.
    """

    model_config = ConfigDict(extra="forbid")

    zone: str = Field(min_length=1)
    host: str = Field(min_length=1)
    centralized: bool = False
    query_format: str = DEFAULT_QUERY_FORMAT
    parser: Union[str, Dict[str, Any]] = "auto"

    @field_validator("query_format")
    @classmethod
    def _check_query_format(cls, value: str) -> str:
        if value.count("%s") != 1:
            raise ValueError("query_format must contain exactly one '%s'")
        return value


@dataclass(frozen=True)
class TldServer:
    """Brief: Registry endpoint: zone, host, referral policy, query and parser capabilities.

    Inputs:
      - zone: Zone suffix this server is authoritative to query.
      - host: WHOIS host ("host" or "host:port").
      - centralized: When True the server's own data is final and referrals
        named in its responses are never followed.
      - query_format: Request template, default "%s\\r\\n".
      - parser: Parser used for this server's responses.

    Outputs:
      - Immutable TldServer instance; zone and host are normalized on creation.

    Example:
      >>> s = TldServer(".COM", "whois.verisign-grs.com")
      >>> s.zone, s.build_domain_query("example.com", strict=True)
      ('com', '=example.com\\r\\n')
    """

    zone: str
    host: str
    centralized: bool = False
    query_format: str = DEFAULT_QUERY_FORMAT
    parser: Parser = field(default_factory=AutoParser, compare=False, repr=False)

    def __post_init__(self) -> None:
        zone = normalize_zone(self.zone)
        host = filter_host(self.host)
        if not zone:
            raise ValueError(f"invalid zone {self.zone!r}")
        if not host:
            raise ValueError(f"invalid host {self.host!r}")
        object.__setattr__(self, "zone", zone)
        object.__setattr__(self, "host", host)

    def is_domain_zone(self, domain: str) -> bool:
        return belongs_to_zone(domain, self.zone)

    def build_domain_query(self, domain: str, strict: bool = False) -> str:
        """Brief: Build the request text for a domain.

        Inputs:
          - domain: Normalized domain name.
          - strict: Use the exact-match form ("=" prefix) understood by
            thin registries that otherwise return partial-match lists.

        Outputs:
          - str: Request text.
        """

        query = self.query_format % domain
        return "=" + query if strict else query

    @classmethod
    def from_config(cls, data: Union[Mapping[str, Any], TldServerConfig]) -> "TldServer":
        """Brief: Build a TldServer from a configuration mapping.

        Inputs:
          - data: Mapping accepted by TldServerConfig, or a TldServerConfig.

        Outputs:
          - TldServer instance.

        Raises:
          - pydantic.ValidationError for malformed entries; ValueError for
            unknown parser aliases.
        """

        cfg = data if isinstance(data, TldServerConfig) else TldServerConfig(**dict(data))
        return cls(
            zone=cfg.zone,
            host=cfg.host,
            centralized=cfg.centralized,
            query_format=cfg.query_format,
            parser=build_parser(cfg.parser),
        )

    @classmethod
    def from_config_list(cls, items: Iterable[Mapping[str, Any]]) -> List["TldServer"]:
        return [cls.from_config(item) for item in items or []]
