"""VictorOps notifier: request construction, delivery and self-test.

A :class:`Notifier` holds a snapshot of :class:`VictorOpsConfig` behind a
reader/writer lock.  :meth:`Notifier.alert` builds the JSON document the
generic REST integration expects, POSTs it once and turns the response
into either ``None`` or a :class:`~alertrelay.victorops.errors.NotifierError`.
There is no retry and no buffering; the caller decides what a failure
means.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field

from alertrelay.sync import RWLock
from alertrelay.victorops.config import VictorOpsConfig
from alertrelay.victorops.errors import (
    InvalidOptionsTypeError,
    InvalidUpdateError,
    NotEnabledError,
    NotFoundError,
    RemoteError,
    SerializationError,
    TransportError,
)

#: Identifies the originating product in every outbound payload.
MONITORING_TOOL = "alertrelay"

TEST_MESSAGE_TYPE = "CRITICAL"
TEST_MESSAGE = "test victorops message"
TEST_ENTITY_ID = "testEntityID"

#: Loggers that record full request URLs, API key included, at INFO.
_TRANSPORT_LOGGERS = ("httpx", "httpcore")


def quiet_transport_logs(level: int = logging.WARNING) -> None:
    """Keep the HTTP stack from logging request URLs below *level*."""
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(level)


class TestOptions(BaseModel):
    """Payload for a connectivity self-test.

    Field names follow the JSON shape used by the service-test API
    (``routingKey``, ``messageType``, ``message``, ``entityID``).
    """

    # Not a pytest test class, despite the name.
    __test__ = False

    model_config = ConfigDict(populate_by_name=True)

    routing_key: str = Field(default="", alias="routingKey")
    message_type: str = Field(default=TEST_MESSAGE_TYPE, alias="messageType")
    message: str = TEST_MESSAGE
    entity_id: str = Field(default=TEST_ENTITY_ID, alias="entityID")


class Notifier:
    """Deliver alerts to a VictorOps REST integration.

    Args:
        config: Initial configuration.
        logger: Destination for operational diagnostics.  Defaults to
            this module's logger.
        client: Optional :class:`httpx.Client` used for every POST.  It
            is owned by the caller and never closed here.  When omitted
            each delivery opens a short-lived connection via
            :func:`httpx.stream`.
    """

    def __init__(
        self,
        config: VictorOpsConfig,
        logger: Optional[logging.Logger] = None,
        *,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._lock = RWLock()
        self._enabled = config.enabled
        self._routing_key = config.routing_key
        self._url = config.effective_url()
        self._global = config.global_
        self._logger = logger or logging.getLogger(__name__)
        self._client = client
        quiet_transport_logs()

    # -- lifecycle ---------------------------------------------------------

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    def update(self, new_configs: Sequence[Any]) -> None:
        """Atomically replace the configuration.

        Args:
            new_configs: A sequence holding exactly one
                :class:`VictorOpsConfig`.

        Raises:
            InvalidUpdateError: If the sequence length is not one or the
                element is not a :class:`VictorOpsConfig`.  The current
                configuration is left untouched.
        """
        if len(new_configs) != 1:
            raise InvalidUpdateError(
                f"expected only one new config object, got {len(new_configs)}"
            )
        config = new_configs[0]
        if not isinstance(config, VictorOpsConfig):
            raise InvalidUpdateError(
                f"expected config object to be of type VictorOpsConfig, "
                f"got {type(config).__name__}"
            )

        url = config.effective_url()
        with self._lock.write_locked():
            self._enabled = config.enabled
            self._routing_key = config.routing_key
            self._url = url
            self._global = config.global_
        self._logger.info(
            "VictorOps configuration updated (enabled=%s, global=%s)",
            config.enabled,
            config.global_,
        )

    def is_global(self) -> bool:
        with self._lock.read_locked():
            return self._global

    # -- self-test ---------------------------------------------------------

    def test_options(self) -> TestOptions:
        """Return a fixed test payload aimed at the default routing key."""
        with self._lock.read_locked():
            routing_key = self._routing_key
        return TestOptions(
            routing_key=routing_key,
            message_type=TEST_MESSAGE_TYPE,
            message=TEST_MESSAGE,
            entity_id=TEST_ENTITY_ID,
        )

    def test(self, options: Any) -> None:
        """Send the alert described by *options*, stamped with the current time.

        Raises:
            InvalidOptionsTypeError: If *options* is not a :class:`TestOptions`.
            NotifierError: Anything :meth:`alert` raises.
        """
        if not isinstance(options, TestOptions):
            raise InvalidOptionsTypeError(
                f"unexpected options type {type(options).__name__}"
            )
        self.alert(
            options.routing_key,
            options.message_type,
            options.message,
            options.entity_id,
            datetime.now(timezone.utc),
            None,
        )

    # -- delivery ----------------------------------------------------------

    def prepare_delivery(
        self,
        routing_key: str,
        message_type: str,
        message: str,
        entity_id: str,
        timestamp: datetime,
        details: Any = None,
    ) -> tuple[str, bytes]:
        """Build the destination URL and JSON body for one alert.

        Args:
            routing_key: Target routing key; empty selects the configured
                default.  Used verbatim in the URL, without escaping.
            message_type: VictorOps message type, e.g. ``"CRITICAL"``.
            message: Free-text state message.
            entity_id: Identifier the receiver groups incidents by.
            timestamp: When the alert happened; sent as unix seconds.
            details: Optional JSON-serialisable payload, sent as JSON text
                under ``data``.

        Returns:
            ``(url, body)`` ready to POST.

        Raises:
            NotEnabledError: If the notifier is disabled.
            SerializationError: If *details* cannot be encoded.
        """
        with self._lock.read_locked():
            enabled = self._enabled
            default_routing_key = self._routing_key
            url = self._url
        if not enabled:
            raise NotEnabledError()

        payload: dict[str, Any] = {
            "message_type": message_type,
            "entity_id": entity_id,
            "state_message": message,
            "timestamp": int(timestamp.timestamp()),
            "monitoring_tool": MONITORING_TOOL,
        }
        if details is not None:
            try:
                payload["data"] = json.dumps(
                    details, separators=(",", ":"), allow_nan=False
                )
            except (TypeError, ValueError) as exc:
                raise SerializationError(
                    f"failed to encode alert details: {exc}"
                ) from exc

        if not routing_key:
            routing_key = default_routing_key

        body = json.dumps(payload).encode("utf-8")
        return url + routing_key, body

    def alert(
        self,
        routing_key: str,
        message_type: str,
        message: str,
        entity_id: str,
        timestamp: datetime,
        details: Any = None,
    ) -> None:
        """POST one alert and classify the receiver's answer.

        Arguments are those of :meth:`prepare_delivery`.

        Raises:
            NotEnabledError: The notifier is disabled; nothing is sent.
            SerializationError: *details* is not JSON-serialisable.
            TransportError: The receiver could not be reached, or the
                destination URL is malformed.
            NotFoundError: The receiver answered 404.
            RemoteError: The receiver answered any other non-200 status.
        """
        url, body = self.prepare_delivery(
            routing_key, message_type, message, entity_id, timestamp, details
        )
        stream = self._client.stream if self._client is not None else httpx.stream
        try:
            with stream(
                "POST",
                url,
                content=body,
                headers={"Content-Type": "application/json"},
                follow_redirects=True,
            ) as resp:
                if resp.status_code == httpx.codes.OK:
                    self._logger.debug(
                        "VictorOps alert for %s delivered (routing key %r)",
                        entity_id,
                        routing_key or "<default>",
                    )
                    return
                error = self._classify_failure(resp)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            self._logger.warning(
                "VictorOps alert for %s not delivered: %s", entity_id, exc
            )
            raise TransportError(str(exc)) from exc

        self._logger.warning(
            "VictorOps alert for %s rejected with status %d",
            entity_id,
            resp.status_code,
        )
        raise error

    def _classify_failure(self, resp: httpx.Response) -> Exception:
        """Map a non-200 response to the error the caller should see."""
        if resp.status_code == httpx.codes.NOT_FOUND:
            return NotFoundError()

        raw = resp.read()
        text = raw.decode("utf-8", errors="replace")
        message = (
            f"failed to understand VictorOps response. "
            f"code: {resp.status_code} content: {text}"
        )
        decoded = _decode_message(text)
        if decoded is not None:
            message = decoded
        return RemoteError(message, status_code=resp.status_code)


def _decode_message(text: str) -> Optional[str]:
    """Pull ``message`` out of an error body, or ``None`` if there is none.

    Only the first JSON value is read; anything after it is ignored.  The
    key matches case-insensitively and the last matching string wins.
    """
    try:
        decoded, _ = json.JSONDecoder().raw_decode(text.lstrip())
    except ValueError:
        return None
    if not isinstance(decoded, dict):
        return None
    message = None
    for key, value in decoded.items():
        if key.lower() == "message" and isinstance(value, str):
            message = value
    return message
