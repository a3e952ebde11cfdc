"""
Logging configuration for the ``tgd`` command line.

Library modules take their logger from :func:`get_logger`, which binds
structlog to a stdlib logger of the module's name. Until an application
configures logging, events below WARNING are dropped by stdlib's last
resort handler and nothing reaches stdout. The command line calls
:func:`configure` once before running a command.
"""

import logging
import sys
import typing

import structlog
from structlog.types import Processor


def get_logger(name: str):
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure(level: str = "WARNING", log_format: str = "console"):
    level = level.upper()

    processors: typing.List[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level),
        force=True,
    )

    logging.getLogger("tgd").setLevel(getattr(logging, level))
