"""pyaction Logging — hexagonal logging port and adapters."""

from pyaction.logging.port import LoggingPort
from pyaction.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
