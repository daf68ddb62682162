"""FastAPI application entry point.

Builds the VictorOps notifier from :mod:`alertrelay.config`, shares one
:class:`httpx.Client` across deliveries, and mounts the service-test
router.
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from alertrelay import __version__
from alertrelay.api.service_tests import router as service_tests_router
from alertrelay.config import get_settings
from alertrelay.victorops import Notifier
from alertrelay.victorops.service import quiet_transport_logs

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle handler.

    On startup the notifier is created and opened.  On shutdown it is
    closed and the shared HTTP client released.
    """
    cfg = get_settings()
    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")
    logger.info("alertrelay v%s starting up", __version__)
    quiet_transport_logs()

    config = cfg.victorops_config()
    client = httpx.Client(timeout=cfg.http_timeout)
    notifier = Notifier(
        config,
        logging.getLogger("alertrelay.victorops"),
        client=client,
    )
    notifier.open()
    app.state.notifier = notifier
    if not cfg.victorops_enabled:
        logger.warning("VictorOps delivery is disabled; alerts will be rejected")

    try:
        yield
    finally:
        notifier.close()
        client.close()
        logger.info("alertrelay shut down")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

app = FastAPI(
    title="alertrelay",
    version=__version__,
    description="Forward alert events to the VictorOps REST integration.",
    lifespan=lifespan,
)

app.include_router(service_tests_router)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the application via Uvicorn when invoked as ``python -m alertrelay.main``."""
    import uvicorn

    cfg = get_settings()
    uvicorn.run(
        "alertrelay.main:app",
        host=cfg.host,
        port=cfg.port,
        log_level=cfg.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
