"""Application configuration via environment variables and defaults."""

from pydantic_settings import BaseSettings

from alertrelay.victorops.config import DEFAULT_URL, VictorOpsConfig


class Settings(BaseSettings):
    """Global configuration loaded from environment / ``.env`` file.

    Attributes:
        victorops_enabled: Deliver alerts to VictorOps at all.
        victorops_api_key: Account API key for the REST integration.
        victorops_routing_key: Default routing key.
        victorops_url: Base URL of the REST integration.
        victorops_global: Send every alert to VictorOps regardless of
            per-rule opt-in.
        http_timeout: Seconds before an outbound POST is abandoned.
        log_level: Python logging level name.
        host: Bind address for the Uvicorn server.
        port: Bind port for the Uvicorn server.
    """

    victorops_enabled: bool = False
    victorops_api_key: str = ""
    victorops_routing_key: str = ""
    victorops_url: str = DEFAULT_URL
    victorops_global: bool = False
    http_timeout: float = 10.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 9100

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "ALERTRELAY_",
    }

    def victorops_config(self) -> VictorOpsConfig:
        """Build and validate the notifier configuration.

        Raises:
            ValueError: If the resulting config could never deliver.
        """
        config = VictorOpsConfig(
            enabled=self.victorops_enabled,
            api_key=self.victorops_api_key,
            routing_key=self.victorops_routing_key,
            url=self.victorops_url,
            global_=self.victorops_global,
        )
        config.validate_config()
        return config


def get_settings() -> Settings:
    """Return a cached :class:`Settings` instance.

    The instance is constructed once and reused for the lifetime of the
    process.
    """
    return _settings


_settings = Settings()
