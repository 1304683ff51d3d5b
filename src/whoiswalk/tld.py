from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from .config.config_parser import load_server_list
from .domain import to_ascii
from .exceptions import ServerMismatchError
from .loaders import Loader, SocketLoader
from .models import DomainInfo, DomainResponse
from .resolver import ReferralResolver
from .tld_server import TldServer

logger = logging.getLogger(__name__)


class TldModule:
    """Brief: Domain lookup facade: server selection plus referral resolution.

    Inputs (constructor):
      - loader: Transport capability used for every query.
      - servers: Initial registry servers (any order).
      - max_referral_hops: Referral hop bound passed to the resolver.

    Outputs:
      - Instances exposing is_domain_available(), lookup_domain() and
        load_domain_info().

    Notes:
      - The server set is replaced only through add_servers()/set_servers();
        callers must not run those concurrently with lookups.

    Example:
      >>> from whoiswalk.loaders import MemoryLoader
      >>> module = TldModule(MemoryLoader(), [TldServer("com", "whois.example")])
      >>> [s.zone for s in module.match_servers("example.com")]
      ['com']
    """

    def __init__(
        self,
        loader: Loader,
        servers: Optional[Iterable[TldServer]] = None,
        *,
        max_referral_hops: int = 4,
    ) -> None:
        self.resolver = ReferralResolver(loader, max_referral_hops=max_referral_hops)
        self._servers: Tuple[TldServer, ...] = ()
        self.set_servers(servers or [])

    @classmethod
    def create(
        cls,
        loader: Optional[Loader] = None,
        servers: Optional[Iterable[TldServer]] = None,
        *,
        max_referral_hops: int = 4,
    ) -> "TldModule":
        """Brief: Build a module with defaults for anything not supplied.

        Inputs:
          - loader: Defaults to SocketLoader().
          - servers: Defaults to the packaged server list.
          - max_referral_hops: Referral hop bound.

        Outputs:
          - TldModule instance.
        """

        if servers is None:
            servers = load_server_list()
        return cls(
            loader or SocketLoader(), servers, max_referral_hops=max_referral_hops
        )

    @property
    def loader(self) -> Loader:
        return self.resolver.loader

    def get_servers(self) -> List[TldServer]:
        return list(self._servers)

    def add_servers(self, servers: Iterable[TldServer]) -> "TldModule":
        return self.set_servers(list(self._servers) + list(servers))

    def set_servers(self, servers: Iterable[TldServer]) -> "TldModule":
        """Brief: Replace the server set, most specific zones first.

        Inputs:
          - servers: New servers; equal-length zones keep the given order.

        Outputs:
          - self, for chaining.
        """

        self._servers = tuple(sorted(servers, key=lambda s: len(s.zone), reverse=True))
        return self

    def match_servers(self, domain: str, quiet: bool = False) -> List[TldServer]:
        """Brief: Return every server tied for the most specific zone matching domain.

        Inputs:
          - domain: Domain name (normalized to ASCII here).
          - quiet: Return [] instead of raising when nothing matches.

        Outputs:
          - list[TldServer], in server-set order.

        Raises:
          - ServerMismatchError: when nothing matches and quiet is False.
        """

        domain = to_ascii(domain)
        servers: List[TldServer] = []
        maxlen = 0
        for server in self._servers:
            zone_len = len(server.zone)
            if zone_len < maxlen:
                break
            if server.is_domain_zone(domain):
                servers.append(server)
                maxlen = max(maxlen, zone_len)
        if not quiet and not servers:
            raise ServerMismatchError(f"No servers matched for domain '{domain}'")
        return servers

    def is_domain_available(self, domain: str) -> bool:
        return self.load_domain_info(domain) is None

    def lookup_domain(
        self, domain: str, server: Optional[TldServer] = None
    ) -> Optional[DomainResponse]:
        response, _ = self._load_domain_data(domain, server)
        return response

    def load_domain_info(
        self, domain: str, server: Optional[TldServer] = None
    ) -> Optional[DomainInfo]:
        _, info = self._load_domain_data(domain, server)
        return info

    def load_response(
        self,
        server: TldServer,
        domain: str,
        strict: bool = False,
        host: Optional[str] = None,
    ) -> DomainResponse:
        return self.resolver.load_response(server, to_ascii(domain), strict, host)

    def _load_domain_data(
        self, domain: str, server: Optional[TldServer]
    ) -> Tuple[Optional[DomainResponse], Optional[DomainInfo]]:
        domain = to_ascii(domain)
        servers = [server] if server is not None else self.match_servers(domain)
        logger.debug(
            "Resolving %s via %s", domain, ", ".join(s.host for s in servers)
        )
        return self.resolver.resolve(domain, servers)
