"""
HTTP adapter for the dataset catalog.

Read-only GET routes over the application services. Catalog errors are
turned into responses in one place, by their status class.
"""

import asyncio
import logging
import threading
from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from opentelemetry import trace

from adapters.document_store import DocumentStoreAdapter
from adapters.url_builder import URLBuilder
from application.dataset_service import DatasetService
from application.metadata_service import MetadataService
from application.version_service import VersionService
from domain.errors import CatalogError, StatusClass
from domain.metadata import VersionURLBuilder
from domain.states import PUBLISHED
from infrastructure.config import Config

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)

VERSION_PATH = "/datasets/{dataset_id}/editions/{edition}/versions/{version}"

DISCONNECT_POLL_INTERVAL = 0.1


async def watch_disconnect(
    request: Request, cancel: threading.Event, interval: float = DISCONNECT_POLL_INTERVAL
) -> None:
    """Set the cancel event once the client has gone away."""
    while not cancel.is_set():
        if await request.is_disconnected():
            logger.info("client disconnected: %s %s", request.method, request.url.path)
            cancel.set()
            return
        await asyncio.sleep(interval)


async def request_cancel(request: Request) -> AsyncIterator[threading.Event]:
    """Per-request cancel event handed to every store query the request makes."""
    cancel = threading.Event()
    watcher = asyncio.create_task(watch_disconnect(request, cancel))
    try:
        yield cancel
    finally:
        watcher.cancel()


def _items(resources: List[Any]) -> Dict[str, Any]:
    items = [resource.to_dict() for resource in resources]
    return {"items": items, "count": len(items)}


def create_app(
    config: Config, store: DocumentStoreAdapter, url_builder: VersionURLBuilder
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Service configuration
        store: Document store shared by all requests
        url_builder: Builds website links for metadata

    Returns:
        The configured application
    """
    datasets = DatasetService(store)
    versions = VersionService(store, datasets)
    metadata = MetadataService(datasets, versions, url_builder)

    # Without private endpoints every caller is a public reader
    visibility = "" if config.enable_private_endpoints else PUBLISHED
    logger.info(
        "enabling %s endpoints for dataset catalog api",
        "private" if config.enable_private_endpoints else "only public",
    )

    app = FastAPI(
        title="Dataset Catalog API",
        version="0.1.0",
        description="Read access to published statistical datasets",
    )
    app.state.config = config
    app.state.datasets = datasets
    app.state.versions = versions
    app.state.metadata = metadata

    @app.exception_handler(CatalogError)
    async def handle_catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
        status = exc.status_class.http_status
        log = logger.error if exc.status_class is StatusClass.INTERNAL else logger.info
        log(
            "request unsuccessful: %s %s -> %d (%s)",
            request.method,
            request.url.path,
            status,
            exc.detail,
        )
        return JSONResponse(status_code=status, content={"message": exc.message})

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/datasets")
    def get_datasets(cancel: threading.Event = Depends(request_cancel)) -> Dict[str, Any]:
        return _items(datasets.get_datasets(visibility, cancel))

    @app.get("/datasets/{dataset_id}")
    def get_dataset(
        dataset_id: str, cancel: threading.Event = Depends(request_cancel)
    ) -> Dict[str, Any]:
        return datasets.get_dataset(dataset_id, visibility, cancel).to_dict()

    @app.get("/datasets/{dataset_id}/editions")
    def get_editions(
        dataset_id: str, cancel: threading.Event = Depends(request_cancel)
    ) -> Dict[str, Any]:
        return _items(datasets.get_editions(dataset_id, visibility, cancel))

    @app.get("/datasets/{dataset_id}/editions/{edition}")
    def get_edition(
        dataset_id: str, edition: str, cancel: threading.Event = Depends(request_cancel)
    ) -> Dict[str, Any]:
        return datasets.get_edition(dataset_id, edition, visibility, cancel).to_dict()

    @app.get("/datasets/{dataset_id}/editions/{edition}/versions")
    def get_versions(
        dataset_id: str,
        edition: str,
        state: Optional[str] = None,
        cancel: threading.Event = Depends(request_cancel),
    ) -> Dict[str, Any]:
        # Only private readers may narrow the list to another state
        requested = (state or "") if config.enable_private_endpoints else visibility
        return _items(versions.get_versions(dataset_id, edition, requested, cancel))

    @app.get(VERSION_PATH)
    def get_version(
        dataset_id: str,
        edition: str,
        version: str,
        cancel: threading.Event = Depends(request_cancel),
    ) -> Dict[str, Any]:
        return versions.get_version(
            dataset_id, edition, version, visibility, cancel
        ).to_dict()

    @app.get(VERSION_PATH + "/metadata")
    def get_metadata(
        dataset_id: str,
        edition: str,
        version: str,
        cancel: threading.Event = Depends(request_cancel),
    ) -> Dict[str, Any]:
        return metadata.get_metadata(
            dataset_id, edition, version, visibility, cancel
        ).to_dict()

    @app.get(VERSION_PATH + "/dimensions")
    def get_dimensions(
        dataset_id: str,
        edition: str,
        version: str,
        cancel: threading.Event = Depends(request_cancel),
    ) -> Dict[str, Any]:
        return _items(
            versions.get_dimensions(dataset_id, edition, version, visibility, cancel)
        )

    @app.get(VERSION_PATH + "/dimensions/{dimension}/options")
    def get_dimension_options(
        dataset_id: str,
        edition: str,
        version: str,
        dimension: str,
        cancel: threading.Event = Depends(request_cancel),
    ) -> Dict[str, Any]:
        return _items(
            versions.get_dimension_options(
                dataset_id, edition, version, dimension, visibility, cancel
            )
        )

    return app


def build_app(config: Config) -> FastAPI:
    """Wire the JSONL document store and website URL builder for a configuration."""
    return create_app(
        config,
        DocumentStoreAdapter(base_path=config.data_dir),
        URLBuilder(config.website_url),
    )
