from __future__ import annotations

"""
Structured logging for the bridge adapter.

Components log through structlog with event names and key/value pairs
(`tx_broadcast`, `finality_poll`, `event_extracted`, `relay_notified`, ...).
The hosting application calls `setup_logging()` once; until then structlog's
defaults apply and nothing here touches the root logger.

    from esdt_bridge.logging import setup_logging, get_logger

    setup_logging(log_format="console")
    log = get_logger(__name__)
    log.info("tx_broadcast", tx_hash="ab12...", nonce=7)

`op_context(op=..., sender=...)` binds keys for the duration of a bridge
operation so every event emitted below it carries them.

Environment
-----------
- LOG_LEVEL: DEBUG, INFO, WARNING or ERROR (default INFO)
- LOG_FORMAT: "json" (default) or "console"
- LOG_LEVEL_HTTPX / LOG_LEVEL_HTTPCORE: transport loggers (default WARNING)
"""

import logging
import os
from typing import Any, ContextManager, Dict, List, Optional

import structlog

SECRET_FIELDS = frozenset({"signature", "secret", "private_key", "password", "mnemonic"})

Processor = Any


def _mask_secrets(_: Any, __: str, event: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in event.items():
        if value is not None and key.lower() in SECRET_FIELDS:
            event[key] = "***"
    return event


def _service_tagger(service_name: str) -> Processor:
    def tag(_: Any, __: str, event: Dict[str, Any]) -> Dict[str, Any]:
        event.setdefault("service", service_name)
        return event

    return tag


def _shared_processors(service_name: str) -> List[Processor]:
    """Processors applied to structlog events and to foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _mask_secrets,
        _service_tagger(service_name),
    ]


def _renderer(log_format: str) -> Processor:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=True, sort_keys=False)
    return structlog.processors.JSONRenderer(sort_keys=True)


def setup_logging(
    *,
    service_name: str = "esdt-bridge",
    level: Optional[str | int] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Route structlog through stdlib logging with one stream handler on the root logger.

    `level` and `log_format` fall back to $LOG_LEVEL / $LOG_FORMAT.
    """
    level = level or os.getenv("LOG_LEVEL", "").upper() or "INFO"
    log_format = (log_format or os.getenv("LOG_FORMAT") or "json").lower()
    shared = _shared_processors(service_name)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(log_format),
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    logging.getLogger("httpx").setLevel(os.getenv("LOG_LEVEL_HTTPX", "WARNING"))
    logging.getLogger("httpcore").setLevel(os.getenv("LOG_LEVEL_HTTPCORE", "WARNING"))


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Lazy structlog logger. Safe at module import time: configuration from a
    later `setup_logging()` still applies.
    """
    return structlog.get_logger(name) if name else structlog.get_logger()


def op_context(**kv: Any) -> ContextManager[Any]:
    """Bind keys (e.g. op, sender) for a `with` block; previous values come back on exit."""
    return structlog.contextvars.bound_contextvars(**kv)


__all__ = ["setup_logging", "get_logger", "op_context"]
