"""Logging setup for the whoiswalk CLI and library users.

Brief:
  init_logging() builds the root handlers (stderr, file, syslog) from the
  `logging` config section and applies per-logger level overrides. The
  `trace` switch turns on the resolver's per-query debug trace without
  lowering the level of everything else.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Set

PACKAGE_LOGGER = "whoiswalk"
TRACE_LOGGER = "whoiswalk.resolver"

# Config name -> (logging level, tag printed in brackets)
_LEVELS = {
    "debug": (logging.DEBUG, "debug"),
    "info": (logging.INFO, "info"),
    "warn": (logging.WARNING, "warn"),
    "warning": (logging.WARNING, "warn"),
    "error": (logging.ERROR, "error"),
    "crit": (logging.CRITICAL, "crit"),
    "critical": (logging.CRITICAL, "crit"),
}
_TAG_BY_LEVEL = {level: tag for level, tag in _LEVELS.values()}

# Loggers whose level init_logging() set on a previous call.
_overridden: Set[str] = set()


def level_tag(levelno: int) -> str:
    return "[%s]" % _TAG_BY_LEVEL.get(levelno, f"lvl{levelno}")


def resolve_level(value: Any, default: int = logging.INFO) -> int:
    """
    Map a config level name ("debug", "warn", ...) to a logging constant.

    Inputs:
      - value: Level name (case-insensitive) or None.
      - default: Level used for unknown names.
    Outputs:
      - int logging level.
    """
    entry = _LEVELS.get(str(value or "").strip().lower())
    return entry[0] if entry else default


def qualify_logger_name(name: str) -> str:
    """
    Expand short logger names to the whoiswalk namespace.

    Inputs:
      - name: "resolver", "parsers.auto" or a full dotted name.
    Outputs:
      - Full logger name; "" and "root" mean the root logger.

    Example:
      >>> qualify_logger_name("resolver")
      'whoiswalk.resolver'
    """
    name = str(name or "").strip()
    if name in ("", "root"):
        return ""
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return name
    return f"{PACKAGE_LOGGER}.{name}"


class SyslogFormatter(logging.Formatter):
    """Syslog lines: "tag: [level] logger: message" (syslog adds the time)."""

    def __init__(self, tag: str = PACKAGE_LOGGER) -> None:
        super().__init__()
        self.tag = tag

    def format(self, record):
        record.level_tag = level_tag(record.levelno)
        line = f"{record.level_tag} {record.name}: {record.getMessage()}"
        return f"{self.tag}: {line}" if self.tag else line


class BracketLevelFormatter(logging.Formatter):
    """Console/file lines: "2026-01-01T00:00:00Z [info] logger: message"."""

    def formatTime(self, record, datefmt=None):
        return datetime.fromtimestamp(record.created, timezone.utc).strftime(
            "%Y-%m-%dT%H:%M:%SZ"
        )

    def format(self, record):
        record.level_tag = level_tag(record.levelno)
        return super().format(record)


def _syslog_handler(syslog_cfg: Any) -> logging.Handler:
    opts: Mapping[str, Any] = syslog_cfg if isinstance(syslog_cfg, dict) else {}
    handler_cls = logging.handlers.SysLogHandler
    facility_name = "LOG_" + str(opts.get("facility", "USER")).upper()
    handler = handler_cls(
        address=opts.get("address", "/dev/log"),
        facility=getattr(handler_cls, facility_name, handler_cls.LOG_USER),
    )
    handler.setFormatter(SyslogFormatter(tag=str(opts.get("tag", PACKAGE_LOGGER))))
    return handler


def _build_handlers(cfg: Mapping[str, Any]) -> List[logging.Handler]:
    formatter = BracketLevelFormatter(fmt="%(asctime)s %(level_tag)s %(name)s: %(message)s")
    handlers: List[logging.Handler] = []

    if cfg.get("stderr", True):
        handlers.append(logging.StreamHandler(sys.stderr))

    file_path = cfg.get("file")
    if isinstance(file_path, str) and file_path.strip():
        path = os.path.abspath(os.path.expanduser(file_path.strip()))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        handlers.append(logging.FileHandler(path, mode="a", encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def logger_levels(cfg: Mapping[str, Any]) -> Dict[str, int]:
    """
    Per-logger level overrides requested by a logging config.

    Inputs:
      - cfg: Logging section; reads `loggers` ({name: level}) and `trace`.
    Outputs:
      - {full logger name: level}. `trace: true` forces the resolver logger
        to DEBUG, overriding any `loggers` entry for it.

    Example:
      >>> logger_levels({"loggers": {"parsers": "info"}, "trace": True})
      {'whoiswalk.parsers': 20, 'whoiswalk.resolver': 10}
    """
    levels: Dict[str, int] = {}
    for name, value in (cfg.get("loggers") or {}).items():
        full = qualify_logger_name(name)
        if full:
            levels[full] = resolve_level(value, logging.WARNING)
    if cfg.get("trace"):
        levels[TRACE_LOGGER] = logging.DEBUG
    return levels


def init_logging(cfg: Optional[Dict[str, Any]]) -> None:
    """
    Configure whoiswalk logging from the `logging` config section.

    Args:
        cfg: Mapping with optional keys:
            - level: root level, debug/info/warn/error/crit (default: warn)
            - stderr: log to stderr (default: True)
            - file: path of a log file to append to
            - syslog: True, or {address, facility, tag}
            - loggers: {name: level} overrides; short names such as
              "resolver" mean "whoiswalk.resolver"
            - trace: log every query, strict retry and referral hop

    Notes:
        Calling init_logging() again replaces the handlers and clears
        overrides applied by the previous call.

    Example config:
        {"level": "warn", "trace": True, "loggers": {"parsers": "debug"}}
    """
    cfg = cfg or {}

    root = logging.getLogger()
    root.setLevel(resolve_level(cfg.get("level", "warn"), logging.WARNING))
    for h in list(root.handlers):
        root.removeHandler(h)
    for handler in _build_handlers(cfg):
        root.addHandler(handler)

    while _overridden:
        logging.getLogger(_overridden.pop()).setLevel(logging.NOTSET)
    for name, level in logger_levels(cfg).items():
        logging.getLogger(name).setLevel(level)
        _overridden.add(name)

    syslog_cfg = cfg.get("syslog")
    if syslog_cfg:
        try:
            root.addHandler(_syslog_handler(syslog_cfg))
        except (
            OSError,
            ValueError,
        ) as e:  # pragma: no cover - syslog availability is environment-specific
            root.warning("Failed to configure syslog: %s", e)

    logging.captureWarnings(True)
