"""Logging setup shared by every entry point"""
import logging
from typing import Optional

from finedu import config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging once, using LOG_LEVEL unless a level is given"""
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, (level or config.LOG_LEVEL).upper())
    )
    logging.getLogger(__name__).debug("Logging configured")
