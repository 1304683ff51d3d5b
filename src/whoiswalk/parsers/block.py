from __future__ import annotations

from typing import Optional

from .base import Pairs, _norm_key, parser_aliases
from .common import CommonParser


@parser_aliases("block", "indent")
class BlockParser(CommonParser):
    """Brief: Parser for indented block responses such as Nominet (.uk).

    Inputs (constructor):
      - Same as CommonParser.

    Outputs:
      - BlockParser instance.

    Notes:
      - A line "Header:" with no value opens a block; following lines indented
        deeper than the header are the header's values. "Key: value" lines
        inside a block are also recorded under their own key, so
        "Relevant dates:" sub-entries map onto the date fields.

    Example input:
        Domain name:
            example.co.uk
        Name servers:
            ns1.example.co.uk   192.0.2.1
    """

    def collect_pairs(self, text: str) -> Pairs:
        pairs: Pairs = {}
        header: Optional[str] = None
        header_indent = -1
        for line in text.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith(self.comment_prefixes):
                continue
            indent = len(line) - len(line.lstrip())
            key, sep, value = stripped.partition(":")
            if header is not None and indent > header_indent:
                pairs.setdefault(header, []).append(stripped)
                if sep and value.strip():
                    pairs.setdefault(_norm_key(key), []).append(value.strip())
                continue
            header = None
            key = _norm_key(key)
            if not sep or not key or len(key) > 64:
                continue
            if value.strip():
                pairs.setdefault(key, []).append(value.strip())
            else:
                header = key
                header_indent = indent
        return pairs
