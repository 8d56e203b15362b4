"""
Logging setup for the CLI and hosts embedding the actions.

Two outputs:
- "color": human readable lines on stderr (colorlog)
- "json": one JSON object per record (structlog), carrying the
  ``action`` / ``conversation_id`` bound by the running handler
"""

import logging
import sys
from typing import IO, Literal, Optional, Union

import colorlog
import structlog

LogFormat = Literal["color", "json"]

CONSOLE_FORMAT = "%(log_color)s%(asctime)s %(levelname)-8s%(reset)s %(name)s: %(message)s"
CONSOLE_DATEFMT = "%H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

# chatty client libraries stay at WARNING whatever the app level is
QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "web3", "langchain", "langsmith")

# applied to stdlib records before rendering
_PRE_CHAIN = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def _level_number(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelName(str(level).upper())
    return number if isinstance(number, int) else logging.INFO


def _console_formatter() -> logging.Formatter:
    return colorlog.ColoredFormatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT, log_colors=LOG_COLORS)


def _json_formatter(indent: Optional[int]) -> logging.Formatter:
    structlog.configure(
        processors=[
            *_PRE_CHAIN,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_PRE_CHAIN,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(indent=indent),
        ],
    )


def setup_logging(
    level: Union[int, str] = logging.INFO,
    format_type: LogFormat = "color",
    json_indent: Optional[int] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Replace the root handlers with a single stderr handler.

    Args:
        level: level name ("DEBUG") or number
        format_type: "color" or "json"; anything else falls back to color
        json_indent: indent JSON output (compact when None)
        stream: output stream, stderr by default

    Returns:
        The root logger
    """
    number = _level_number(level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(number)
    if format_type == "json":
        handler.setFormatter(_json_formatter(json_indent))
    else:
        handler.setFormatter(_console_formatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(number)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(number, logging.WARNING))
    return root
