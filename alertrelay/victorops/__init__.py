"""VictorOps notifier package: config model, errors, and the notifier itself."""

from alertrelay.victorops.config import DEFAULT_URL, VictorOpsConfig
from alertrelay.victorops.errors import (
    InvalidOptionsTypeError,
    InvalidUpdateError,
    NotEnabledError,
    NotFoundError,
    NotifierError,
    RemoteError,
    SerializationError,
    TransportError,
)
from alertrelay.victorops.service import MONITORING_TOOL, Notifier, TestOptions

__all__ = [
    "DEFAULT_URL",
    "MONITORING_TOOL",
    "InvalidOptionsTypeError",
    "InvalidUpdateError",
    "NotEnabledError",
    "NotFoundError",
    "Notifier",
    "NotifierError",
    "RemoteError",
    "SerializationError",
    "TestOptions",
    "TransportError",
    "VictorOpsConfig",
]
