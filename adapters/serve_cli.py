import argparse
import logging
from typing import Any, Callable, List, Optional

import uvicorn
from opentelemetry import trace

from adapters.http_api import build_app
from infrastructure.config import Config

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)


def setup_argument_parser() -> argparse.ArgumentParser:
    """Configure CLI arguments."""
    parser = argparse.ArgumentParser(description="Serve the dataset catalog API")
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory holding the JSONL collections (default: CATALOG_DATA_DIR or data)",
    )
    parser.add_argument("--host", default=None, help="Override the BIND_ADDR host")
    parser.add_argument("--port", type=int, default=None, help="Override the BIND_ADDR port")
    parser.add_argument(
        "--private",
        action="store_true",
        help="Serve draft content (sets ENABLE_PRIVATE_ENDPOINTS)",
    )
    return parser


class ServeCLI:
    """CLI that runs the HTTP API."""

    def __init__(self, runner: Optional[Callable[..., Any]] = None) -> None:
        self.parser = setup_argument_parser()
        self.runner = runner if runner is not None else uvicorn.run

    def run(self, args: Optional[List[str]] = None) -> int:
        """Build the application and serve it until shutdown."""
        parsed_args = self.parser.parse_args(args)

        config = Config.from_env(data_dir=parsed_args.data_dir)
        if parsed_args.private:
            config.enable_private_endpoints = True
        logger.info("config on startup: %s", config.to_dict())

        host = parsed_args.host or config.host
        port = parsed_args.port or config.port

        with tracer.start_as_current_span("serve_cli.startup") as span:
            span.set_attribute("cli.host", host)
            span.set_attribute("cli.port", port)
            span.set_attribute("cli.data_dir", config.data_dir)

            app = build_app(config)

        try:
            logger.info("Starting dataset catalog api on %s:%d", host, port)
            # uvicorn handles SIGINT/SIGTERM and drains requests within the timeout
            self.runner(
                app,
                host=host,
                port=port,
                timeout_graceful_shutdown=config.graceful_shutdown_timeout,
                log_config=None,
            )
            logger.info("graceful shutdown was successful")
            return 0
        except Exception as e:
            logger.error("api http server returned error: %s", str(e))
            return 1
