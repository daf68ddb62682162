"""Configuration model for the VictorOps notifier."""

from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field

#: Generic REST integration endpoint; the API key and routing key are appended.
DEFAULT_URL = "https://alert.victorops.com/integrations/generic/20131114/alert"


class VictorOpsConfig(BaseModel):
    """Settings handed to :class:`~alertrelay.victorops.service.Notifier`.

    Attributes:
        enabled: Whether alerts are delivered at all.
        api_key: Account API key, embedded in the delivery URL.
        routing_key: Default routing key for alerts that do not name one.
        url: Base URL of the REST integration.
        global_: Send every alert here, regardless of per-rule opt-in.
            Serialised as ``global``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    enabled: bool = False
    api_key: str = ""
    routing_key: str = ""
    url: str = DEFAULT_URL
    global_: bool = Field(default=False, alias="global")

    def effective_url(self) -> str:
        """Return the base URL joined with the API key and a trailing slash."""
        return self.url + "/" + self.api_key + "/"

    def validate_config(self) -> None:
        """Reject configs that could never deliver.

        Raises:
            ValueError: If the notifier is enabled without an API key, or
                the URL is not an absolute http(s) URL.
        """
        if self.enabled and not self.api_key:
            raise ValueError("must specify api_key")
        parsed = urlparse(self.url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"invalid url {self.url!r}")
