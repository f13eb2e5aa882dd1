"""
Application service for version metadata.

This module resolves the dataset, edition and version behind a metadata
request and hands them to the composer.
"""

import logging
import threading
from typing import Optional

from opentelemetry import trace

from application.dataset_service import DatasetService
from application.version_service import VersionService, parse_version_number
from domain.errors import collaborator_call
from domain.metadata import VersionURLBuilder, compose_metadata, select_dataset_variant
from domain.models import Metadata
from domain.selectors import ancestor_state
from domain.states import check_state

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)


class MetadataService:
    """Builds the public metadata document of a version."""

    def __init__(
        self,
        datasets: DatasetService,
        versions: VersionService,
        url_builder: VersionURLBuilder,
    ) -> None:
        self.datasets = datasets
        self.versions = versions
        self.url_builder = url_builder

    def get_metadata(
        self,
        dataset_id: str,
        edition: str,
        version: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> Metadata:
        """
        Compose the metadata of a version.

        The dataset variant follows the version: a published version is
        described by the published dataset, anything else by the draft.

        Raises:
            MalformedIdentifierError: If the version is not a positive integer
            DatasetNotFoundError, EditionNotFoundError, VersionNotFoundError:
                If any level is not visible
            InvalidStateError: If the version's stored state cannot be served
        """
        with tracer.start_as_current_span("get_metadata") as span:
            span.set_attribute("dataset.id", dataset_id)
            span.set_attribute("edition", edition)
            span.set_attribute("version", version)
            span.set_attribute("state", state)

            parse_version_number(version)
            visibility = ancestor_state(state)

            dataset = self.datasets.find_dataset(dataset_id, visibility, cancel)
            self.datasets.check_edition_exists(dataset_id, edition, visibility, cancel)
            found = self.versions.find_version(dataset_id, edition, version, state, cancel)

            check_state(found.state, visibility)

            variant = select_dataset_variant(dataset, found)
            with collaborator_call("url builder"):
                metadata = compose_metadata(variant, found, self.url_builder)

            logger.info(
                "Built metadata for %s/%s/%s (state=%s)",
                dataset_id,
                edition,
                found.version,
                found.state,
            )
            return metadata
