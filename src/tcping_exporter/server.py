import logging
import os
import signal
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.responses import HTMLResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST

from tcping_exporter.config.config import Config
from tcping_exporter.config.exporter_config import ConfigError
from tcping_exporter.core.collection_coordinator import CollectionCoordinator
from tcping_exporter.core.metrics import render_latest

logger = logging.getLogger(__name__)

LANDING_PAGE = """<html>
<head><title>TCPing Exporter</title></head>
<body>
<h1>TCPing Exporter</h1>
<p><a href='{telemetry_path}'>Metrics</a></p>
</body>
</html>"""


def terminate_process():
    """Ask the running server to shut down, as an unrecoverable config error requires."""
    os.kill(os.getpid(), signal.SIGTERM)


def create_app(
    coordinator: CollectionCoordinator,
    telemetry_path: Optional[str] = None,
    config_errors_fatal: Optional[bool] = None,
) -> FastAPI:
    """
    Build the exporter's FastAPI application.

    Args:
        coordinator (CollectionCoordinator): Runs one probe cycle per scrape.
        telemetry_path (str): Path serving the metrics. Defaults to Config.TELEMETRY_PATH.
        config_errors_fatal (bool): Terminate the process when a scrape hits a
            config error instead of answering 503. Defaults to Config.CONFIG_ERRORS_FATAL.

    Returns:
        FastAPI: The application.
    """
    if telemetry_path is None:
        telemetry_path = Config.TELEMETRY_PATH
    if config_errors_fatal is None:
        config_errors_fatal = Config.CONFIG_ERRORS_FATAL

    app = FastAPI(title="tcping-exporter")
    app.state.coordinator = coordinator
    app.state.fatal_error = None
    landing_page = LANDING_PAGE.format(telemetry_path=telemetry_path)

    @app.get("/", response_class=HTMLResponse)
    async def index():
        return landing_page

    async def metrics():
        try:
            families = await coordinator.collect()
        except ConfigError as e:
            if config_errors_fatal:
                logger.critical(f"Configuration error, shutting down: {e}")
                app.state.fatal_error = str(e)
                terminate_process()
                return PlainTextResponse(str(e), status_code=500)
            logger.error(f"Configuration error, scrape failed: {e}")
            return PlainTextResponse(str(e), status_code=503)
        return Response(render_latest(families), media_type=CONTENT_TYPE_LATEST)

    app.add_api_route(telemetry_path, metrics, methods=["GET"])
    return app
