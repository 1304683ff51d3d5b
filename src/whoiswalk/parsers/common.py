from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from .base import Pairs, Parser, _norm_key, parser_aliases

# Lines starting with these are registry notices, not data.
DEFAULT_COMMENT_PREFIXES: Tuple[str, ...] = ("%", "#", ">>>", "--")


@parser_aliases("common", "kv")
class CommonParser(Parser):
    """Brief: Parser for flat "Key: value" responses (gTLD registries, most ccTLDs).

    Inputs (constructor):
      - keys: Optional per-field key overrides.
      - comment_prefixes: Line prefixes to ignore.

    Outputs:
      - CommonParser instance.

    Example:
      >>> from whoiswalk.models import DomainResponse
      >>> text = "Domain Name: EXAMPLE.COM\\nRegistrar WHOIS Server: whois.example.net\\n"
      >>> info = CommonParser().parse_response(DomainResponse("example.com", "", text, "h"))
      >>> (info.domain_name, info.whois_server)
      ('example.com', 'whois.example.net')
    """

    def __init__(
        self,
        *,
        keys: Optional[Dict[str, Iterable[str]]] = None,
        comment_prefixes: Iterable[str] = DEFAULT_COMMENT_PREFIXES,
    ) -> None:
        super().__init__(keys=keys)
        self.comment_prefixes = tuple(comment_prefixes)

    def collect_pairs(self, text: str) -> Pairs:
        pairs: Pairs = {}
        for line in text.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith(self.comment_prefixes):
                continue
            key, sep, value = stripped.partition(":")
            key = _norm_key(key)
            if not sep or not key or len(key) > 64:
                continue
            pairs.setdefault(key, []).append(value.strip())
        return pairs
