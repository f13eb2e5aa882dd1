"""
Metadata composition.

Merges a dataset variant and a version into the public metadata document.
Pure and deterministic: no I/O and no time-dependent fields.
"""

import copy
import logging
from typing import List, Optional, Protocol

from opentelemetry import trace

from domain.errors import DatasetNotFoundError
from domain.models import (
    Dataset,
    DatasetUpdate,
    DownloadList,
    LinkObject,
    Metadata,
    MetadataLinks,
    Version,
)
from domain.states import PUBLISHED

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)


class VersionURLBuilder(Protocol):
    """Builds the website-facing URL of a version."""

    def build_website_dataset_version_url(
        self, dataset_id: str, edition: str, version: str
    ) -> str: ...


def select_dataset_variant(dataset: DatasetUpdate, version: Version) -> Dataset:
    """
    Pick the dataset variant that describes a version.

    A published version is described by the published dataset, anything
    else by the draft, so draft and published content never mix.

    Raises:
        DatasetNotFoundError: If the version is published but the dataset never was
    """
    variant = dataset.resolve(PUBLISHED if version.is_published else "")
    if variant is None:
        logger.warning(
            "dataset %s has no published variant for version %s",
            dataset.id,
            version.version,
        )
        raise DatasetNotFoundError()
    return variant


def get_distribution(downloads: Optional[DownloadList]) -> List[str]:
    """List the available formats: always json, then csv, csvw and xls if downloadable."""
    distribution = ["json"]
    if downloads is None:
        return distribution

    for name, download in downloads.present():
        if download.href:
            distribution.append(name)
    return distribution


def strip_private_downloads(downloads: Optional[DownloadList]) -> None:
    """Clear the internal public/private hrefs, keeping only the generic href."""
    if downloads is None:
        return
    for _, download in downloads.present():
        download.public = ""
        download.private = ""


def compose_metadata(
    dataset: Dataset, version: Version, url_builder: VersionURLBuilder
) -> Metadata:
    """
    Build the metadata document for a version.

    Args:
        dataset: The dataset variant selected for the version
        version: The version being described
        url_builder: Builds the website link for the version

    Returns:
        The composed Metadata; the inputs are left unmodified
    """
    with tracer.start_as_current_span("compose_metadata") as span:
        span.set_attribute("dataset.id", dataset.id)
        span.set_attribute("version.number", version.version)

        downloads = copy.deepcopy(version.downloads)
        links = MetadataLinks()

        if dataset.links is not None:
            links.access_rights = copy.deepcopy(dataset.links.access_rights)

        if version.links is not None:
            version_link = version.links.version
            if version_link is not None and version_link.href:
                links.self = LinkObject(href=version_link.href + "/metadata")

            links.spatial = copy.deepcopy(version.links.spatial)
            links.version = copy.deepcopy(version_link)

            edition_id = version.links.edition.id if version.links.edition else ""
            links.website_version = LinkObject(
                href=url_builder.build_website_dataset_version_url(
                    dataset.id, edition_id, str(version.version)
                )
            )

        distribution = get_distribution(downloads)
        strip_private_downloads(downloads)

        metadata = Metadata(
            alerts=version.alerts,
            contacts=dataset.contacts,
            description=dataset.description,
            dimensions=copy.deepcopy(version.dimensions),
            distribution=distribution,
            downloads=downloads,
            ftb_type=version.ftb_type,
            is_based_on=version.is_based_on,
            keywords=dataset.keywords,
            latest_changes=version.latest_changes,
            license=dataset.license,
            links=links,
            methodologies=dataset.methodologies,
            national_statistic=dataset.national_statistic,
            next_release=dataset.next_release,
            publications=dataset.publications,
            publisher=dataset.publisher,
            qmi=dataset.qmi,
            related_datasets=dataset.related_datasets,
            release_date=version.release_date,
            release_frequency=dataset.release_frequency,
            tables=version.tables,
            temporal=version.temporal,
            theme=dataset.theme,
            title=dataset.title,
            type=version.type,
            unit_of_measure=dataset.unit_of_measure,
            uri=dataset.uri,
            usage_notes=version.usage_notes,
        )

        span.set_attribute("metadata.distribution", ",".join(distribution))
        logger.debug(
            "Composed metadata for dataset %s version %s (distribution: %s)",
            dataset.id,
            version.version,
            distribution,
        )
        return metadata
