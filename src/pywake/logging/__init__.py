"""pywake Logging — logging port and structlog adapter."""

from pywake.logging.port import LoggingPort
from pywake.logging.structlog_adapter import StructlogAdapter, configure_logging

__all__ = ["LoggingPort", "StructlogAdapter", "configure_logging"]
