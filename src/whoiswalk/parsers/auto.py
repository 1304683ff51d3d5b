from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from ..models import DomainInfo, DomainResponse
from .base import Parser, parser_aliases
from .block import BlockParser
from .common import CommonParser
from .registry import build_parser

logger = logging.getLogger(__name__)


@parser_aliases("auto")
class AutoParser(Parser):
    """Brief: Try several parsers and keep the result with the most fields.

    Inputs (constructor):
      - parsers: Parsers to try, in order; ties keep the earlier one. Items
        may be Parser instances, aliases or {"type": alias, ...} mappings,
        so config such as {type: auto, parsers: [common, block]} works.
        Defaults to CommonParser then BlockParser.

    Outputs:
      - AutoParser instance.
    """

    def __init__(self, *, parsers: Optional[Iterable[Any]] = None) -> None:
        super().__init__()
        if isinstance(parsers, (str, bytes)):
            raise ValueError("auto parser option 'parsers' must be a list")
        if parsers is None:
            self.parsers = (CommonParser(), BlockParser())
        else:
            self.parsers = tuple(build_parser(p) for p in parsers)

    def parse_response(self, response: DomainResponse) -> Optional[DomainInfo]:
        best: Optional[DomainInfo] = None
        for parser in self.parsers:
            info = parser.parse_response(response)
            if info is not None and (best is None or info.score() > best.score()):
                best = info
        if best is None:
            logger.debug("No parser produced a result for %s", response.host)
        return best
