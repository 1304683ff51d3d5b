import difflib
import functools
import importlib
import logging
import pkgutil
import re
from typing import Any, Dict, Iterable, Mapping, Type, Union

from .base import Parser

logger = logging.getLogger(__name__)

_CAMEL_1 = re.compile(r"(.)([A-Z][a-z]+)")
_CAMEL_2 = re.compile(r"([a-z0-9])([A-Z])")


@functools.lru_cache(maxsize=256)
def _camel_to_snake(name: str) -> str:
    s1 = _CAMEL_1.sub(r"\1_\2", name)
    s2 = _CAMEL_2.sub(r"\1_\2", s1)
    return s2.lower()


def _default_alias_for(cls: Type[Parser]) -> str:
    name = cls.__name__
    if name.endswith("Parser"):
        name = name[:-6]
    return _camel_to_snake(name)


def _normalize(alias: str) -> str:
    return alias.strip().lower().replace("-", "_")


def _iter_parser_modules(package_name: str = "whoiswalk.parsers") -> Iterable[str]:
    pkg = importlib.import_module(package_name)
    for modinfo in pkgutil.walk_packages(pkg.__path__, pkg.__name__ + "."):
        yield modinfo.name


@functools.lru_cache(maxsize=8)
def discover_parsers(
    package_name: str = "whoiswalk.parsers",
) -> Dict[str, Type[Parser]]:
    """
    Discover parser classes by importing the modules of a package.

    Inputs:
      - package_name (str): Package path to scan for parsers

    Outputs:
      - Dict[str, Type[Parser]]: Mapping from normalized aliases to parser classes

    Raises ValueError on duplicate aliases.

    Example:
        >>> registry = discover_parsers()
        >>> "common" in registry
        True
    """
    registry: Dict[str, Type[Parser]] = {}

    for modname in _iter_parser_modules(package_name):
        module = importlib.import_module(modname)
        for _, obj in vars(module).items():
            if not isinstance(obj, type) or not issubclass(obj, Parser):
                continue
            if obj is Parser or obj.__module__ != module.__name__:
                continue
            for alias in (_default_alias_for(obj),) + tuple(obj.aliases):
                key = _normalize(alias)
                existing = registry.get(key)
                if existing is not None and existing is not obj:
                    raise ValueError(
                        f"Duplicate parser alias {key!r}: {existing.__name__} and {obj.__name__}"
                    )
                registry[key] = obj
    logger.debug("Discovered parsers: %s", ", ".join(sorted(registry)))
    return registry


def get_parser_class(name: str) -> Type[Parser]:
    """
    Resolve a parser alias to its class.

    Inputs:
      - name: Alias such as "common", "block" or "auto"
    Outputs:
      - Parser subclass

    Raises ValueError for unknown aliases, with close-match suggestions.
    """
    registry = discover_parsers()
    key = _normalize(str(name))
    cls = registry.get(key)
    if cls is None:
        hint = difflib.get_close_matches(key, list(registry), n=3)
        suffix = f" (did you mean: {', '.join(hint)}?)" if hint else ""
        raise ValueError(f"Unknown parser {name!r}{suffix}")
    return cls


def build_parser(value: Union[None, str, Mapping[str, Any], Parser]) -> Parser:
    """
    Build a parser instance from a configuration value.

    Inputs:
      - value: None (auto parser), an alias string, a Parser instance, or a
        mapping {"type": alias, ...constructor options}
    Outputs:
      - Parser instance

    Example:
        >>> type(build_parser("block")).__name__
        'BlockParser'
    """
    if isinstance(value, Parser):
        return value
    if value is None:
        return get_parser_class("auto")()
    if isinstance(value, str):
        return get_parser_class(value)()
    if isinstance(value, Mapping):
        options = dict(value)
        kind = options.pop("type", "auto")
        cls = get_parser_class(kind)
        try:
            return cls(**options)
        except TypeError as exc:
            raise ValueError(f"invalid options for parser {kind!r}: {exc}") from exc
    raise ValueError(f"Invalid parser specification: {value!r}")
