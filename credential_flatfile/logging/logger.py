# credential_flatfile/logging/logger.py

import logging
import structlog
from rich.console import Console
from rich.logging import RichHandler

def setup_logging(verbose: bool = False, log_format: str = 'plain', level: str = 'WARNING'):
    # stdout carries the helper protocol, so every handler writes to stderr.
    level = logging.DEBUG if verbose else logging.getLevelName(level.upper())
    if log_format == 'json':
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(message)s'))
        renderer = structlog.processors.JSONRenderer()
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        renderer = structlog.processors.KeyValueRenderer(key_order=['event'])
    logging.basicConfig(level=level, handlers=[handler], force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
