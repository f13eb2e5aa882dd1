import argparse
import logging
from typing import List, Optional

from opentelemetry import trace

from adapters.document_store import DocumentStoreAdapter
from application.dataset_service import DatasetService
from application.version_service import VersionService
from domain.errors import CatalogError
from infrastructure.config import Config

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)


def setup_argument_parser() -> argparse.ArgumentParser:
    """Configure CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Print the next version number for a dataset edition"
    )
    parser.add_argument("dataset_id", help="Dataset id")
    parser.add_argument("edition", help="Edition label")
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory holding the JSONL collections (default: CATALOG_DATA_DIR or data)",
    )
    return parser


class VersionCLI:
    """CLI for version number resolution."""

    def __init__(self, service: Optional[VersionService] = None) -> None:
        self.parser = setup_argument_parser()
        self.service = service

    def _build_service(self, data_dir: Optional[str]) -> VersionService:
        config = Config.from_env(data_dir=data_dir)
        store = DocumentStoreAdapter(base_path=config.data_dir)
        return VersionService(store, DatasetService(store))

    def run(self, args: Optional[List[str]] = None) -> int:
        """Execute the CLI command."""
        parsed_args = self.parser.parse_args(args)
        service = self.service or self._build_service(parsed_args.data_dir)

        with tracer.start_as_current_span("version_cli.run") as span:
            span.set_attribute("cli.dataset_id", parsed_args.dataset_id)
            span.set_attribute("cli.edition", parsed_args.edition)

            try:
                next_number = service.next_version(
                    parsed_args.dataset_id, parsed_args.edition
                )
            except CatalogError as e:
                logger.error("Unable to resolve next version: %s", e.detail)
                span.set_attribute("error.type", type(e).__name__)
                span.set_attribute("exit_code", 1)
                return 1

            span.set_attribute("version.next", next_number)
            print(next_number)
            return 0
