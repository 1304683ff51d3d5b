"""WHOIS response parsers."""

from .auto import AutoParser
from .base import Parser, parser_aliases
from .block import BlockParser
from .common import CommonParser
from .registry import build_parser, discover_parsers, get_parser_class

__all__ = [
    "AutoParser",
    "BlockParser",
    "CommonParser",
    "Parser",
    "build_parser",
    "discover_parsers",
    "get_parser_class",
    "parser_aliases",
]
