"""Structured logging setup for jobsight.

structlog events and plain stdlib records (including the Azure SDK's) share
one handler and one ProcessorFormatter, so every line has the same shape.
Logs go to stderr: stdout carries the rendered report, and `--json` output
has to stay parseable.
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.stdlib import ProcessorFormatter

# Loggers that report every HTTP round trip. Kept at WARNING or stricter
# even when jobsight itself runs at DEBUG.
_NOISY_LOGGERS: tuple[str, ...] = (
    "azure",
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
    "azure.storage.blob",
    "urllib3.connectionpool",
)


def _drop_formatter_bookkeeping(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    # ProcessorFormatter always sets both keys; a KeyError means the
    # handler wiring below is broken.
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def _pre_chain() -> list[Any]:
    """Processors every event passes through, whatever its origin."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _drop_formatter_bookkeeping,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [_drop_formatter_bookkeeping, structlog.dev.ConsoleRenderer(colors=False)]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging through a single handler.

    Safe to call more than once; the CLI reconfigures after loading settings.

    Args:
        json_output: Emit one JSON object per line instead of console text.
        level: DEBUG, INFO, WARNING or ERROR.
        stream: Destination, sys.stderr when not given.
    """
    root_level = logging.getLevelName(level.upper())
    if not isinstance(root_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach loggers created at import time
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(ProcessorFormatter(processors=_render_chain(json_output), foreign_pre_chain=pre_chain))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(root_level)

    quiet_level = max(root_level, logging.WARNING)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Bound logger for a module; pass ``__name__``."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
