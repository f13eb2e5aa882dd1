"""
Application services for versions and their dimensions.

Every version surfaced here has passed the lifecycle state check; a list
is rejected as a whole if any of its entries fails it.
"""

import logging
import re
import threading
from typing import List, Optional

from opentelemetry import trace

from adapters.document_store import DIMENSION_OPTIONS, INSTANCES, DocumentStoreAdapter
from application.dataset_service import STORE, DatasetService
from domain.errors import (
    DimensionNotFoundError,
    MalformedIdentifierError,
    VersionNotFoundError,
    collaborator_call,
)
from domain.models import Dimension, DimensionOption, Version
from domain.selectors import (
    ancestor_state,
    build_dimension_options_query,
    build_version_query,
    build_versions_query,
)
from domain.states import check_state, check_states

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)

# Bounded so int() never sees an oversized digit string
VERSION_NUMBER = re.compile(r"[0-9]{1,18}")


def parse_version_number(version: str) -> int:
    """
    Parse a version path segment.

    Raises:
        MalformedIdentifierError: If it is not a positive integer
    """
    if not VERSION_NUMBER.fullmatch(version or "") or int(version) < 1:
        logger.info("Rejected version identifier %r", version)
        raise MalformedIdentifierError()
    return int(version)


class VersionService:
    """Read access to the versions of an edition."""

    def __init__(self, store: DocumentStoreAdapter, datasets: DatasetService) -> None:
        self.store = store
        self.datasets = datasets

    def _check_ancestors(
        self,
        dataset_id: str,
        edition: str,
        state: str,
        cancel: Optional[threading.Event] = None,
    ) -> None:
        """Fail fast on the most specific missing ancestor."""
        visibility = ancestor_state(state)
        self.datasets.check_dataset_exists(dataset_id, visibility, cancel)
        self.datasets.check_edition_exists(dataset_id, edition, visibility, cancel)

    def get_versions(
        self,
        dataset_id: str,
        edition: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> List[Version]:
        """
        List the versions of an edition.

        Args:
            dataset_id: The dataset id
            edition: The edition label
            state: Empty for every listable state, or exactly this state
            cancel: Optional event that aborts the query

        Returns:
            Versions with their self link pointing at the public version URL

        Raises:
            DatasetNotFoundError, EditionNotFoundError: If an ancestor is not visible
            VersionNotFoundError: If no version matches
            InvalidStateError: If any listed version has an invalid state
        """
        with tracer.start_as_current_span("get_versions") as span:
            span.set_attribute("dataset.id", dataset_id)
            span.set_attribute("edition", edition)
            span.set_attribute("state", state)

            self._check_ancestors(dataset_id, edition, state, cancel)

            with collaborator_call(STORE):
                with self.store.find(
                    INSTANCES,
                    build_versions_query(dataset_id, edition, state),
                    sort=("version", 1),
                    cancel=cancel,
                ) as cursor:
                    versions = [Version.from_dict(document) for document in cursor]

            if not versions:
                logger.info(
                    "No versions found for dataset %s edition %s", dataset_id, edition
                )
                raise VersionNotFoundError()

            check_states((v.state for v in versions), ancestor_state(state))

            for version in versions:
                version.rewrite_self_link()

            span.set_attribute("versions.count", len(versions))
            logger.debug(
                "Found %d versions for dataset %s edition %s",
                len(versions),
                dataset_id,
                edition,
            )
            return versions

    def find_version(
        self,
        dataset_id: str,
        edition: str,
        version: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> Version:
        """Fetch a version document without ancestor or state checks."""
        number = parse_version_number(version)

        with collaborator_call(STORE):
            document = self.store.find_one(
                INSTANCES,
                build_version_query(dataset_id, edition, number, state),
                cancel=cancel,
            )
            found = Version.from_dict(document) if document else None

        if found is None:
            if state:
                self._check_hidden_version(dataset_id, edition, number, cancel)
            logger.info(
                "Version %s of dataset %s edition %s not found",
                number,
                dataset_id,
                edition,
            )
            raise VersionNotFoundError()
        return found

    def _check_hidden_version(
        self,
        dataset_id: str,
        edition: str,
        number: int,
        cancel: Optional[threading.Event] = None,
    ) -> None:
        """Report a version hidden by the state filter as corrupt if its state is illegal."""
        with collaborator_call(STORE):
            document = self.store.find_one(
                INSTANCES, build_version_query(dataset_id, edition, number), cancel=cancel
            )
        if document is not None:
            check_state(document.get("state"))

    def get_version(
        self,
        dataset_id: str,
        edition: str,
        version: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> Version:
        """
        Get one version of an edition.

        Raises:
            MalformedIdentifierError: If the version is not a positive integer
            DatasetNotFoundError, EditionNotFoundError: If an ancestor is not visible
            VersionNotFoundError: If the version does not exist
            InvalidStateError: If its stored state cannot be served
        """
        with tracer.start_as_current_span("get_version") as span:
            span.set_attribute("dataset.id", dataset_id)
            span.set_attribute("edition", edition)
            span.set_attribute("version", version)
            span.set_attribute("state", state)

            parse_version_number(version)
            self._check_ancestors(dataset_id, edition, state, cancel)

            found = self.find_version(dataset_id, edition, version, state, cancel)
            found.rewrite_self_link()

            check_state(found.state, ancestor_state(state))
            return found

    def get_dimensions(
        self,
        dataset_id: str,
        edition: str,
        version: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> List[Dimension]:
        """List the dimensions of a version."""
        with tracer.start_as_current_span("get_dimensions") as span:
            found = self.get_version(dataset_id, edition, version, state, cancel)
            span.set_attribute("dimensions.count", len(found.dimensions))
            return found.dimensions

    def get_dimension_options(
        self,
        dataset_id: str,
        edition: str,
        version: str,
        dimension: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> List[DimensionOption]:
        """
        List the options of one dimension of a version, ordered by code.

        Raises:
            DimensionNotFoundError: If the version has no such dimension
        """
        with tracer.start_as_current_span("get_dimension_options") as span:
            span.set_attribute("dimension", dimension)

            found = self.get_version(dataset_id, edition, version, state, cancel)
            target = found.dimension(dimension)
            if target is None:
                logger.info(
                    "Dimension %s not found on version %s of %s/%s",
                    dimension,
                    found.version,
                    dataset_id,
                    edition,
                )
                raise DimensionNotFoundError()

            with collaborator_call(STORE):
                with self.store.find(
                    DIMENSION_OPTIONS,
                    build_dimension_options_query(found.id, target.id or target.name),
                    sort=("option", 1),
                    cancel=cancel,
                ) as cursor:
                    options = [DimensionOption.from_dict(document) for document in cursor]

            span.set_attribute("options.count", len(options))
            return options

    def next_version(
        self,
        dataset_id: str,
        edition: str,
        cancel: Optional[threading.Event] = None,
    ) -> int:
        """
        Compute the number for the next version of an edition.

        Not atomic: concurrent callers can observe the same maximum, so
        writers must serialize version creation themselves.

        Returns:
            1 if the edition has no versions, otherwise the highest number plus one
        """
        with tracer.start_as_current_span("next_version") as span:
            span.set_attribute("dataset.id", dataset_id)
            span.set_attribute("edition", edition)

            with collaborator_call(STORE):
                highest = self.store.find_highest_version_number(
                    dataset_id, edition, cancel
                )

            next_number = 1 if highest is None else highest + 1
            span.set_attribute("version.next", next_number)
            logger.debug(
                "Next version for %s/%s is %d (highest: %s)",
                dataset_id,
                edition,
                next_number,
                highest,
            )
            return next_number
