"""
Application services for datasets and editions.

This module resolves the variant of a dataset or edition that a caller
may see and performs the existence checks the version paths depend on.
"""

import logging
import threading
from typing import List, Optional

from opentelemetry import trace

from adapters.document_store import DATASETS, EDITIONS, DocumentStoreAdapter
from domain.errors import DatasetNotFoundError, EditionNotFoundError, collaborator_call
from domain.models import Dataset, DatasetUpdate, Edition, EditionUpdate
from domain.selectors import (
    build_dataset_query,
    build_datasets_query,
    build_edition_query,
    build_editions_query,
)

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)

STORE = "document store"


class DatasetService:
    """Read access to datasets and their editions."""

    def __init__(self, store: DocumentStoreAdapter) -> None:
        self.store = store

    def get_datasets(
        self, state: str = "", cancel: Optional[threading.Event] = None
    ) -> List[Dataset]:
        """
        List datasets at the requested visibility.

        Args:
            state: Empty for draft variants, or the published state to match
            cancel: Optional event that aborts the query

        Returns:
            One variant per visible dataset (may be empty)
        """
        with tracer.start_as_current_span("get_datasets") as span:
            span.set_attribute("state", state)
            datasets: List[Dataset] = []

            with collaborator_call(STORE):
                with self.store.find(
                    DATASETS, build_datasets_query(state), cancel=cancel
                ) as cursor:
                    for document in cursor:
                        variant = DatasetUpdate.from_dict(document).resolve(state)
                        if variant is not None:
                            datasets.append(variant)

            span.set_attribute("datasets.count", len(datasets))
            logger.debug("Found %d datasets (state=%r)", len(datasets), state)
            return datasets

    def find_dataset(
        self,
        dataset_id: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> DatasetUpdate:
        """
        Fetch the stored dataset document.

        Raises:
            DatasetNotFoundError: If no document matches at this visibility
        """
        with collaborator_call(STORE):
            document = self.store.find_one(
                DATASETS, build_dataset_query(dataset_id, state), cancel=cancel
            )
            dataset = DatasetUpdate.from_dict(document) if document else None

        if dataset is None:
            logger.info("Dataset %s not found (state=%r)", dataset_id, state)
            raise DatasetNotFoundError()
        return dataset

    def get_dataset(
        self,
        dataset_id: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> Dataset:
        """
        Get the variant of a dataset visible at the requested state.

        An unpublished dataset has no published variant; it is reported as
        not found rather than served from its draft.
        """
        with tracer.start_as_current_span("get_dataset") as span:
            span.set_attribute("dataset.id", dataset_id)
            span.set_attribute("state", state)

            variant = self.find_dataset(dataset_id, state, cancel).resolve(state)
            if variant is None:
                logger.info("Dataset %s has no published variant", dataset_id)
                raise DatasetNotFoundError()
            return variant

    def check_dataset_exists(
        self,
        dataset_id: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> None:
        """Raise DatasetNotFoundError unless the dataset is visible at this state."""
        with collaborator_call(STORE):
            count = self.store.count(
                DATASETS, build_dataset_query(dataset_id, state), cancel=cancel
            )
        if count == 0:
            logger.info("Dataset %s does not exist (state=%r)", dataset_id, state)
            raise DatasetNotFoundError()

    def check_edition_exists(
        self,
        dataset_id: str,
        edition: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> None:
        """Raise EditionNotFoundError unless the edition is visible at this state."""
        with collaborator_call(STORE):
            count = self.store.count(
                EDITIONS, build_edition_query(dataset_id, edition, state), cancel=cancel
            )
        if count == 0:
            logger.info(
                "Edition %s of dataset %s does not exist (state=%r)",
                edition,
                dataset_id,
                state,
            )
            raise EditionNotFoundError()

    def get_editions(
        self,
        dataset_id: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> List[Edition]:
        """
        List the editions of a dataset.

        Raises:
            DatasetNotFoundError: If the dataset is not visible
            EditionNotFoundError: If it has no visible editions
        """
        with tracer.start_as_current_span("get_editions") as span:
            span.set_attribute("dataset.id", dataset_id)
            span.set_attribute("state", state)

            self.check_dataset_exists(dataset_id, state, cancel)

            editions: List[Edition] = []
            with collaborator_call(STORE):
                with self.store.find(
                    EDITIONS, build_editions_query(dataset_id, state), cancel=cancel
                ) as cursor:
                    for document in cursor:
                        variant = EditionUpdate.from_dict(document).resolve(state)
                        if variant is not None:
                            editions.append(variant)

            if not editions:
                logger.info("No editions found for dataset %s", dataset_id)
                raise EditionNotFoundError()

            span.set_attribute("editions.count", len(editions))
            return editions

    def get_edition(
        self,
        dataset_id: str,
        edition: str,
        state: str = "",
        cancel: Optional[threading.Event] = None,
    ) -> Edition:
        """
        Get one edition of a dataset.

        Raises:
            DatasetNotFoundError: If the dataset is not visible
            EditionNotFoundError: If the edition is not visible
        """
        with tracer.start_as_current_span("get_edition") as span:
            span.set_attribute("dataset.id", dataset_id)
            span.set_attribute("edition", edition)
            span.set_attribute("state", state)

            self.check_dataset_exists(dataset_id, state, cancel)

            with collaborator_call(STORE):
                document = self.store.find_one(
                    EDITIONS, build_edition_query(dataset_id, edition, state), cancel=cancel
                )
                variant = (
                    EditionUpdate.from_dict(document).resolve(state) if document else None
                )

            if variant is None:
                logger.info("Edition %s of dataset %s not found", edition, dataset_id)
                raise EditionNotFoundError()
            return variant
