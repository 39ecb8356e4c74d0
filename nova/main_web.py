import argparse
import os
import sys

import uvicorn

from nova.config_docs import DEFAULT_WEB_PORT, validate_configuration
from nova.logger import Logger, session_logger
from nova.web_server import NovaWebServer

logger: Logger = session_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="nova Web Server - conversation widget proxy and normalization API"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host address to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("NOVA_WEB_PORT", str(DEFAULT_WEB_PORT))),
        help=f"Port number to listen on (default: {DEFAULT_WEB_PORT}, or NOVA_WEB_PORT env var)",
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        help="Refuse to start when any credential is missing",
    )
    return parser


def main() -> None:
    args = build_parser().parse_args()

    is_valid, errors = validate_configuration()
    for error in errors:
        logger.warning("Configuration problem", problem=error)
    if not is_valid and args.strict_config:
        logger.error("FATAL: configuration incomplete", error_count=len(errors))
        sys.exit(1)

    server = NovaWebServer()

    try:
        logger.info("Starting web server", host=args.host, port=args.port, transport="HTTP REST API")
        uvicorn.run(server.app, host=args.host, port=args.port)
        logger.info("Web server shutdown complete")
    except KeyboardInterrupt:
        logger.info("Web server stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error("Failed to start web server", error=str(e), error_type=type(e).__name__)
        sys.exit(1)


if __name__ == "__main__":
    main()
