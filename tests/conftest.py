from pathlib import Path

import pytest

from adapters.document_store import (
    DATASETS,
    DIMENSION_OPTIONS,
    EDITIONS,
    INSTANCES,
    DocumentStoreAdapter,
)
from adapters.url_builder import URLBuilder
from application.dataset_service import DatasetService
from application.metadata_service import MetadataService
from application.version_service import VersionService
from tests.helpers.fixtures import (
    dataset_document,
    dataset_variant,
    dimension_option_document,
    edition_document,
    version_document,
    write_collection,
)


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """
    A populated document store.

    Dataset 123 is published with edition 2017: version 1 published,
    version 2 created. Dataset 456 has never been published.
    """
    write_collection(
        tmp_path,
        DATASETS,
        [
            dataset_document(
                "123",
                current=dataset_variant("123", state="published"),
                next=dataset_variant("123", state="created", title="Census 2011 - People (draft)"),
            ),
            dataset_document("456"),
        ],
    )
    write_collection(
        tmp_path,
        EDITIONS,
        [
            edition_document("123", "2017", published=True),
            edition_document("456", "2021", published=False),
        ],
    )
    write_collection(
        tmp_path,
        INSTANCES,
        [
            version_document("123", "2017", 1, "published"),
            version_document("123", "2017", 2, "created"),
            version_document("456", "2021", 1, "associated"),
        ],
    )
    instance_id = "instance-123-2017-1"
    write_collection(
        tmp_path,
        DIMENSION_OPTIONS,
        [
            dimension_option_document(instance_id, "SEX", "2", "Female"),
            dimension_option_document(instance_id, "SEX", "1", "Male"),
            dimension_option_document(instance_id, "AGE", "1", "0 to 15"),
        ],
    )
    return tmp_path


@pytest.fixture
def store(data_dir: Path) -> DocumentStoreAdapter:
    return DocumentStoreAdapter(base_path=str(data_dir))


@pytest.fixture
def url_builder() -> URLBuilder:
    return URLBuilder("http://localhost:20000")


@pytest.fixture
def dataset_service(store: DocumentStoreAdapter) -> DatasetService:
    return DatasetService(store)


@pytest.fixture
def version_service(
    store: DocumentStoreAdapter, dataset_service: DatasetService
) -> VersionService:
    return VersionService(store, dataset_service)


@pytest.fixture
def metadata_service(
    dataset_service: DatasetService,
    version_service: VersionService,
    url_builder: URLBuilder,
) -> MetadataService:
    return MetadataService(dataset_service, version_service, url_builder)
