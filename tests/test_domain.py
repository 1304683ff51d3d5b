"""
Brief: Tests for whoiswalk.domain normalization and zone helpers.

Inputs:
  - None

Outputs:
  - None
"""

import pytest

from whoiswalk.domain import (
    belongs_to_zone,
    filter_host,
    normalize_zone,
    to_ascii,
    to_unicode,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("EXAMPLE.com", "example.com"),
        ("example.com.", "example.com"),
        ("  example.com  ", "example.com"),
        ("bücher.example", "xn--bcher-kva.example"),
        ("", ""),
    ],
)
def test_to_ascii(raw, expected):
    """
    Brief: to_ascii lowercases, strips the root dot and punycode-encodes.

    Inputs:
      - raw: input name
      - expected: canonical ASCII name

    Outputs:
      - None
    """
    assert to_ascii(raw) == expected


def test_to_ascii_keeps_names_the_codec_rejects():
    """
    Brief: Names idna cannot encode are returned lowercased.

    Inputs:
      - None

    Outputs:
      - None
    """
    assert to_ascii("Bad_Ünder.example") == "bad_ünder.example"


def test_to_unicode_round_trips_punycode():
    """
    Brief: to_unicode decodes punycode labels.

    Inputs:
      - None

    Outputs:
      - None
    """
    assert to_unicode("xn--bcher-kva.example") == "bücher.example"
    assert to_unicode("EXAMPLE.COM.") == "example.com"


def test_normalize_zone_strips_dots_and_case():
    """
    Brief: Zones written as ".CO.UK." normalize to "co.uk".

    Inputs:
      - None

    Outputs:
      - None
    """
    assert normalize_zone(".CO.UK.") == "co.uk"
    assert normalize_zone("com") == "com"


@pytest.mark.parametrize(
    "domain,zone,expected",
    [
        ("example.com", "com", True),
        ("a.b.example.co.uk", "co.uk", True),
        ("example.co.uk", "uk", True),
        ("myexamplecom", "com", False),
        ("examplecom.net", "com", False),
        ("com", "com", False),
        ("example.com", "", False),
        ("example.com", "example.com", False),
    ],
)
def test_belongs_to_zone(domain, zone, expected):
    """
    Brief: Zone membership compares whole labels and requires a proper suffix.

    Inputs:
      - domain, zone, expected

    Outputs:
      - None
    """
    assert belongs_to_zone(domain, zone) is expected


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("whois.example.net", "whois.example.net"),
        ("Whois.Example.NET.", "whois.example.net"),
        ("whois://whois.example.net/", "whois.example.net"),
        ("rwhois://rwhois.example.net:4321", "rwhois.example.net:4321"),
        ("", ""),
        ("not a host", ""),
    ],
)
def test_filter_host(raw, expected):
    """
    Brief: filter_host strips schemes, paths, case and junk values.

    Inputs:
      - raw, expected

    Outputs:
      - None
    """
    assert filter_host(raw) == expected
