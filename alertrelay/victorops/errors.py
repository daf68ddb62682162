"""Errors raised by the VictorOps notifier.

Every failure derives from :class:`NotifierError` so callers that only
care whether delivery worked can catch a single type.
"""

from typing import Optional


class NotifierError(Exception):
    """Base class for all notifier failures."""


class InvalidUpdateError(NotifierError):
    """``update`` received zero, several, or a mistyped config object."""


class NotEnabledError(NotifierError):
    """An alert was attempted while the notifier is disabled."""

    def __init__(self, message: str = "service is not enabled") -> None:
        super().__init__(message)


class SerializationError(NotifierError):
    """The alert's detail payload could not be encoded as JSON."""


class TransportError(NotifierError):
    """The receiver could not be reached (connect error, timeout, DNS)."""


class NotFoundError(NotifierError):
    """The receiver answered 404: the URL or API key is wrong."""

    def __init__(self, message: str = "URL or API key not found: 404") -> None:
        super().__init__(message)


class RemoteError(NotifierError):
    """The receiver answered with a status other than 200 or 404.

    Attributes:
        status_code: HTTP status returned by the receiver.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidOptionsTypeError(NotifierError):
    """The self-test was handed something other than :class:`TestOptions`."""
