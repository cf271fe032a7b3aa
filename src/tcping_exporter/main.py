import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from tcping_exporter.config.config import Config
from tcping_exporter.config.exporter_config import ConfigError, load_config
from tcping_exporter.config.logging_config import setup_logging
from tcping_exporter.core.collection_coordinator import CollectionCoordinator
from tcping_exporter.server import create_app

logger = logging.getLogger(__name__)


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="tcping-exporter",
        description="Prometheus exporter measuring TCP connect latency and loss",
    )
    ap.add_argument(
        "-c", "--config", dest="config_file", default=Config.CONFIG_FILE,
        help="Configuration file in YAML format",
    )
    ap.add_argument(
        "-web.listen-address", "--web.listen-address", dest="listen_address",
        default=Config.LISTEN_ADDRESS, help="Address to listen on for web interface and telemetry.",
    )
    ap.add_argument(
        "-web.listen-port", "--web.listen-port", dest="listen_port", type=int,
        default=Config.LISTEN_PORT, help="A port to listen on for web interface and telemetry.",
    )
    ap.add_argument(
        "-web.telemetry-path", "--web.telemetry-path", dest="telemetry_path",
        default=Config.TELEMETRY_PATH, help="A path under which to expose metrics.",
    )
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)
    setup_logging()

    if not args.config_file:
        print("Error: Configuration file is required", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config_file)
    except ConfigError as e:
        logger.critical(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    logger.info(f"Configuration {args.config_file} is valid with {len(config.targets)} targets")

    coordinator = CollectionCoordinator(args.config_file)
    app = create_app(coordinator, telemetry_path=args.telemetry_path)

    logger.info(
        f"Starting Server at http://{args.listen_address}:{args.listen_port}{args.telemetry_path}"
    )
    uvicorn.run(app, host=args.listen_address, port=args.listen_port, log_config=None)

    if app.state.fatal_error:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
