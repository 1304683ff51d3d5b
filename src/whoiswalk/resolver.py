"""Referral-chasing WHOIS resolver.

Brief:
  Given a normalized domain and the candidate registry servers for it, query
  each server in turn, escalate to the strict query form when the default one
  gives nothing usable, and follow "Registrar WHOIS Server" style referrals
  to the more authoritative host. The first server that yields a parsed
  result wins; the response returned is always the one that produced it.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, Optional, Tuple

from .exceptions import WhoisConnectionError
from .loaders import Loader
from .models import DomainInfo, DomainResponse
from .tld_server import TldServer

logger = logging.getLogger("whoiswalk.resolver")

# (response, info, first transport error carried along the chain)
_Attempt = Tuple[
    Optional[DomainResponse], Optional[DomainInfo], Optional[WhoisConnectionError]
]


def _same_host(a: Optional[str], b: Optional[str]) -> bool:
    return (a or "").strip().lower() == (b or "").strip().lower()


class ReferralResolver:
    """Brief: Recursive WHOIS resolution with strict escalation and referral following.

    Inputs (constructor):
      - loader: Transport capability (load_text(host, query) -> str).
      - max_referral_hops: Maximum number of referrals followed per server.

    Outputs:
      - Instances able to resolve a domain via resolve().
    """

    def __init__(self, loader: Loader, *, max_referral_hops: int = 4) -> None:
        self.loader = loader
        self.max_referral_hops = max(0, int(max_referral_hops))

    def load_response(
        self,
        server: TldServer,
        domain: str,
        strict: bool = False,
        host: Optional[str] = None,
    ) -> DomainResponse:
        """Brief: Perform one round-trip for domain against server (or host).

        Inputs:
          - server: TldServer whose query builder is used.
          - domain: Normalized domain name.
          - strict: Use the strict query form.
          - host: Override host; defaults to server.host.

        Outputs:
          - DomainResponse for this round-trip.

        Raises:
          - WhoisConnectionError: on transport failure.
        """

        host = host or server.host
        query = server.build_domain_query(domain, strict)
        logger.debug("Querying %s for %s (strict=%s)", host, domain, strict)
        text = self.loader.load_text(host, query)
        return DomainResponse(domain=domain, query=query, text=text, host=host)

    def resolve(
        self, domain: str, servers: Iterable[TldServer]
    ) -> Tuple[Optional[DomainResponse], Optional[DomainInfo]]:
        """Brief: Resolve domain against candidate servers, in order.

        Inputs:
          - domain: Normalized (ASCII) domain name.
          - servers: Candidate TldServer sequence.

        Outputs:
          - (response, info): the first parsed result and the response that
            produced it; or (last response obtained or None, None) when no
            server produced a result.

        Raises:
          - WhoisConnectionError: when a server's primary host could not be
            reached in both the default and the strict query form.
        """

        response: Optional[DomainResponse] = None
        for server in servers:
            resp, info, _ = self._resolve_server(server, domain)
            if resp is not None:
                response = resp
            if info is not None:
                return resp, info
        logger.debug("No server produced a result for %s", domain)
        return response, None

    def _resolve_server(
        self,
        server: TldServer,
        domain: str,
        strict: bool = False,
        host: Optional[str] = None,
        last_error: Optional[WhoisConnectionError] = None,
        visited: FrozenSet[str] = frozenset(),
    ) -> _Attempt:
        """Brief: One node of the strict-escalation / referral recursion.

        Inputs:
          - server: TldServer being resolved.
          - domain: Normalized domain name.
          - strict: Whether this attempt uses the strict query form.
          - host: Override host (a referral target), or None for server.host.
          - last_error: First transport error seen so far along this chain.
          - visited: Hosts already queried along the referral chain.

        Outputs:
          - (response, info, error) for this node; callers adopt the pair
            only when info is not None.

        Raises:
          - WhoisConnectionError: the first carried error, when the primary
            host failed and the strict form was tried without a result.
        """

        target = (host or server.host).lower()
        response: Optional[DomainResponse] = None
        info: Optional[DomainInfo] = None

        try:
            response = self.load_response(server, domain, strict, target)
        except WhoisConnectionError as exc:
            logger.debug("Query to %s for %s failed: %s", target, domain, exc)
            last_error = last_error or exc

        if response is not None:
            info = server.parser.parse_response(response)

        if info is None and not strict:
            logger.debug("No result from %s for %s; retrying strict", target, domain)
            s_resp, s_info, last_error = self._resolve_server(
                server, domain, True, target, last_error, visited
            )
            if s_info is not None:
                response, info = s_resp, s_info

        # Transport errors surface only from the primary host in strict mode.
        if (
            info is None
            and last_error is not None
            and strict
            and _same_host(target, server.host)
        ):
            raise last_error

        if info is None:
            return response, info, last_error

        referral = (info.whois_server or "").lower()
        if not referral or _same_host(referral, target) or server.centralized:
            return response, info, last_error

        chain = visited | {target}
        if referral in chain:
            logger.debug(
                "Referral loop to %s for %s; keeping %s", referral, domain, target
            )
            return response, info, last_error
        if len(chain) > self.max_referral_hops:
            logger.debug(
                "Referral hop limit (%d) reached at %s for %s",
                self.max_referral_hops,
                referral,
                domain,
            )
            return response, info, last_error

        logger.debug("Following referral %s -> %s for %s", target, referral, domain)
        r_resp, r_info, _ = self._resolve_server(
            server, domain, False, referral, last_error, chain
        )
        if r_info is not None:
            response, info = r_resp, r_info
        return response, info, last_error
