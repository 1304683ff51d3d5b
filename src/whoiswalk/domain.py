"""Domain-name helpers: IDNA normalization and label-aware zone matching.

Brief:
  All matching and querying in whoiswalk operates on the canonical ASCII form
  produced by to_ascii(). Zone membership compares whole labels, so
  "example.com" belongs to "com" while "myexamplecom" does not.
"""

from __future__ import annotations

import logging
import re
from typing import List

import idna

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def to_ascii(domain: str) -> str:
    """Brief: Convert a (possibly Unicode) domain name to lowercase ASCII.

    Inputs:
      - domain: Domain name, e.g. "Bücher.Example" or "EXAMPLE.com.".

    Outputs:
      - str: Punycode/ASCII form without the trailing root dot. Names the IDNA
        codec rejects are returned lowercased but otherwise unchanged.

    Example:
      >>> to_ascii("Bücher.example")
      'xn--bcher-kva.example'
    """

    text = str(domain or "").strip().rstrip(".")
    if not text:
        return ""
    if text.isascii():
        return text.lower()
    try:
        return idna.encode(text, uts46=True).decode("ascii").lower()
    except idna.IDNAError as exc:
        logger.debug("IDNA encode failed for %r: %s", text, exc)
        return text.lower()


def to_unicode(domain: str) -> str:
    """Brief: Convert an ASCII/punycode domain name to its Unicode form.

    Inputs:
      - domain: Domain name, e.g. "xn--bcher-kva.example".

    Outputs:
      - str: Unicode form; names the codec rejects are returned lowercased.
    """

    text = str(domain or "").strip().rstrip(".").lower()
    if not text:
        return ""
    try:
        return idna.decode(text)
    except idna.IDNAError as exc:
        logger.debug("IDNA decode failed for %r: %s", text, exc)
        return text


def _labels(name: str) -> List[str]:
    text = str(name or "").strip().strip(".").lower()
    return text.split(".") if text else []


def normalize_zone(zone: str) -> str:
    """Brief: Canonical zone text: lowercase, ASCII, no leading/trailing dots.

    Inputs:
      - zone: Zone as written in configuration (".com", "CO.UK.", "com").

    Outputs:
      - str: Normalized zone ("com", "co.uk").
    """

    return to_ascii(str(zone or "").strip().strip("."))


def belongs_to_zone(domain: str, zone: str) -> bool:
    """Brief: Return True when domain sits strictly below zone.

    Inputs:
      - domain: Normalized domain name.
      - zone: Normalized zone.

    Outputs:
      - bool: True when the zone's labels are a proper trailing run of the
        domain's labels.

    Example:
      >>> belongs_to_zone("example.co.uk", "co.uk")
      True
      >>> belongs_to_zone("myexamplecom", "com")
      False
    """

    zone_labels = _labels(zone)
    domain_labels = _labels(domain)
    if not zone_labels or len(zone_labels) >= len(domain_labels):
        return False
    return domain_labels[-len(zone_labels) :] == zone_labels


def filter_host(value: str) -> str:
    """Brief: Clean a host name taken from a WHOIS response.

    Inputs:
      - value: Raw field text, e.g. "whois://Whois.Example.NET/" or
        "whois.example.net:4343".

    Outputs:
      - str: Lowercase host (with ":port" kept when present), or "" when the
        value holds no usable host.

    Example:
      >>> filter_host("whois://Whois.Example.NET/")
      'whois.example.net'
    """

    text = str(value or "").strip()
    text = _SCHEME_RE.sub("", text)
    text = text.split("/", 1)[0].strip().rstrip(".").lower()
    if not text or " " in text:
        return ""
    return text
