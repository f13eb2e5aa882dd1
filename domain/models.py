"""
Domain models for the dataset catalog.

Datasets and editions are stored as a pair of variants: ``next`` is the
draft and always reflects the latest write, ``current`` is the snapshot
promoted at publish time. Versions carry a single lifecycle ``state``.
"""

import copy
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from domain.states import is_published

T = TypeVar("T")


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop unset fields so they are omitted from the JSON body."""
    return {
        key: value
        for key, value in data.items()
        if value is not None and value != "" and value != [] and value != {}
    }


def _text(value: Any) -> str:
    """Stored scalar as text; null becomes empty."""
    return "" if value is None else str(value)


class LinkObject:
    """A link to a related resource."""

    def __init__(self, href: str = "", id: str = ""):
        self.href = href
        self.id = id

    def to_dict(self) -> Dict[str, str]:
        return _compact({"href": self.href, "id": self.id})

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["LinkObject"]:
        if data is None:
            return None
        return cls(href=_text(data.get("href")), id=_text(data.get("id")))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkObject):
            return NotImplemented
        return (self.href, self.id) == (other.href, other.id)

    def __repr__(self) -> str:
        return f"LinkObject(href={self.href}, id={self.id})"


class LinkSet:
    """A named group of links; subclasses list the link names they carry."""

    FIELDS: Tuple[str, ...] = ()

    def __init__(self, /, **links: Optional[LinkObject]):
        unknown = set(links) - set(self.FIELDS)
        if unknown:
            raise TypeError(f"unknown links: {sorted(unknown)}")
        for name in self.FIELDS:
            setattr(self, name, links.get(name))

    def to_dict(self) -> Dict[str, Any]:
        links = {}
        for name in self.FIELDS:
            link = getattr(self, name)
            if link is not None:
                links[name] = link.to_dict()
        return links

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]):  # type: ignore
        if data is None:
            return None
        return cls(
            **{
                name: LinkObject.from_dict(data.get(name))
                for name in cls.FIELDS
                if name in data
            }
        )


class DatasetLinks(LinkSet):
    FIELDS = ("access_rights", "editions", "latest_version", "self", "taxonomy")


class EditionLinks(LinkSet):
    FIELDS = ("dataset", "latest_version", "self", "versions")


class VersionLinks(LinkSet):
    FIELDS = (
        "dataset",
        "dimensions",
        "edition",
        "self",
        "spatial",
        "version",
        "website_version",
    )


class DimensionOptionLinks(LinkSet):
    FIELDS = ("code", "code_list", "version")


class MetadataLinks(LinkSet):
    FIELDS = ("access_rights", "self", "spatial", "version", "website_version")


class Dataset:
    """One variant (current or next) of a catalog dataset."""

    def __init__(
        self,
        id: str = "",
        title: str = "",
        description: str = "",
        keywords: Optional[List[str]] = None,
        license: str = "",
        publisher: Optional[Dict[str, Any]] = None,
        contacts: Optional[List[Dict[str, Any]]] = None,
        theme: str = "",
        links: Optional[DatasetLinks] = None,
        national_statistic: Optional[bool] = None,
        release_frequency: str = "",
        unit_of_measure: str = "",
        methodologies: Optional[List[Dict[str, Any]]] = None,
        next_release: str = "",
        publications: Optional[List[Dict[str, Any]]] = None,
        qmi: Optional[Dict[str, Any]] = None,
        related_datasets: Optional[List[Dict[str, Any]]] = None,
        uri: str = "",
        state: str = "",
        collection_id: str = "",
        type: str = "",
        ftb_type: str = "",
        tables: Optional[List[Dict[str, Any]]] = None,
    ):
        self.id = id
        self.title = title
        self.description = description
        self.keywords = keywords or []
        self.license = license
        self.publisher = publisher
        self.contacts = contacts or []
        self.theme = theme
        self.links = links
        self.national_statistic = national_statistic
        self.release_frequency = release_frequency
        self.unit_of_measure = unit_of_measure
        self.methodologies = methodologies or []
        self.next_release = next_release
        self.publications = publications or []
        self.qmi = qmi
        self.related_datasets = related_datasets or []
        self.uri = uri
        self.state = state
        self.collection_id = collection_id
        self.type = type
        self.ftb_type = ftb_type
        self.tables = tables or []

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return _compact(
            {
                "id": self.id,
                "collection_id": self.collection_id,
                "contacts": self.contacts,
                "description": self.description,
                "ftb_type": self.ftb_type,
                "keywords": self.keywords,
                "license": self.license,
                "links": self.links.to_dict() if self.links else None,
                "methodologies": self.methodologies,
                "national_statistic": self.national_statistic,
                "next_release": self.next_release,
                "publications": self.publications,
                "publisher": self.publisher,
                "qmi": self.qmi,
                "related_datasets": self.related_datasets,
                "release_frequency": self.release_frequency,
                "state": self.state,
                "tables": self.tables,
                "theme": self.theme,
                "title": self.title,
                "type": self.type,
                "unit_of_measure": self.unit_of_measure,
                "uri": self.uri,
            }
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dataset":
        """Create from a stored variant document."""
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            keywords=data.get("keywords"),
            license=data.get("license", ""),
            publisher=data.get("publisher"),
            contacts=data.get("contacts"),
            theme=data.get("theme", ""),
            links=DatasetLinks.from_dict(data.get("links")),
            national_statistic=data.get("national_statistic"),
            release_frequency=data.get("release_frequency", ""),
            unit_of_measure=data.get("unit_of_measure", ""),
            methodologies=data.get("methodologies"),
            next_release=data.get("next_release", ""),
            publications=data.get("publications"),
            qmi=data.get("qmi"),
            related_datasets=data.get("related_datasets"),
            uri=data.get("uri", ""),
            state=data.get("state", ""),
            collection_id=data.get("collection_id", ""),
            type=data.get("type", ""),
            ftb_type=data.get("ftb_type", ""),
            tables=data.get("tables"),
        )

    def __repr__(self) -> str:
        return f"Dataset(id={self.id}, title={self.title}, state={self.state})"


class Edition:
    """One variant (current or next) of a dataset edition."""

    def __init__(
        self,
        edition: str = "",
        state: str = "",
        links: Optional[EditionLinks] = None,
        id: str = "",
        type: str = "",
        ftb_type: str = "",
        tables: Optional[List[Dict[str, Any]]] = None,
    ):
        self.edition = edition
        self.state = state
        self.links = links
        self.id = id
        self.type = type
        self.ftb_type = ftb_type
        self.tables = tables or []

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "edition": self.edition,
                "ftb_type": self.ftb_type,
                "links": self.links.to_dict() if self.links else None,
                "state": self.state,
                "tables": self.tables,
                "type": self.type,
            }
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edition":
        return cls(
            edition=data.get("edition", ""),
            state=data.get("state", ""),
            links=EditionLinks.from_dict(data.get("links")),
            id=data.get("id", ""),
            type=data.get("type", ""),
            ftb_type=data.get("ftb_type", ""),
            tables=data.get("tables"),
        )

    def __repr__(self) -> str:
        return f"Edition(edition={self.edition}, state={self.state})"


class PublishedOrDraft(Generic[T]):
    """
    A resource stored as a required draft view and an optional published view.

    The published view is absent until the resource is first published, and
    resolving it never falls back to the draft.
    """

    def __init__(self, draft: T, published: Optional[T] = None):
        self.draft = draft
        self.published = published

    @property
    def is_published(self) -> bool:
        return self.published is not None

    def resolve(self, state: str = "") -> Optional[T]:
        """
        Pick the variant for the requested visibility.

        Args:
            state: Empty for the draft view, any published state for the published view

        Returns:
            The selected variant, or None if the published view does not exist
        """
        if not state:
            return self.draft
        return self.published


class DatasetUpdate(PublishedOrDraft[Dataset]):
    """Stored dataset document: ``_id`` plus current/next variants."""

    def __init__(
        self, id: str, draft: Dataset, published: Optional[Dataset] = None
    ):
        super().__init__(draft, published)
        self.id = id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DatasetUpdate":
        if not data.get("next"):
            raise ValueError(f"dataset document {data.get('_id')!r} has no next variant")
        return cls(
            id=data.get("_id", ""),
            draft=Dataset.from_dict(data["next"]),
            published=Dataset.from_dict(data["current"]) if data.get("current") else None,
        )

    def __repr__(self) -> str:
        return f"DatasetUpdate(id={self.id}, published={self.is_published})"


class EditionUpdate(PublishedOrDraft[Edition]):
    """Stored edition document with current/next variants."""

    def __init__(self, id: str, draft: Edition, published: Optional[Edition] = None):
        super().__init__(draft, published)
        self.id = id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditionUpdate":
        if not data.get("next"):
            raise ValueError(f"edition document {data.get('id')!r} has no next variant")
        return cls(
            id=data.get("id", ""),
            draft=Edition.from_dict(data["next"]),
            published=Edition.from_dict(data["current"]) if data.get("current") else None,
        )

    def __repr__(self) -> str:
        return f"EditionUpdate(id={self.id}, published={self.is_published})"


class Dimension:
    """A named axis of a version, e.g. AGE or SEX."""

    def __init__(
        self,
        id: str = "",
        name: str = "",
        label: str = "",
        href: str = "",
        description: str = "",
        category: str = "",
        number_of_options: int = 0,
    ):
        self.id = id
        self.name = name
        self.label = label
        self.href = href
        self.description = description
        self.category = category
        self.number_of_options = number_of_options

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "label": self.label,
                "href": self.href,
                "description": self.description,
                "category": self.category,
                "number_of_options": self.number_of_options,
            }
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dimension":
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            label=data.get("label", ""),
            href=data.get("href", ""),
            description=data.get("description", ""),
            category=data.get("category", ""),
            number_of_options=data.get("number_of_options", 0),
        )

    def __repr__(self) -> str:
        return f"Dimension(id={self.id}, options={self.number_of_options})"


class DimensionOption:
    """A single code within a version's dimension."""

    def __init__(
        self,
        instance_id: str,
        name: str,
        option: str,
        label: str = "",
        links: Optional[DimensionOptionLinks] = None,
    ):
        self.instance_id = instance_id
        self.name = name
        self.option = option
        self.label = label
        self.links = links

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "dimension": self.name,
                "label": self.label,
                "links": self.links.to_dict() if self.links else None,
                "option": self.option,
            }
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DimensionOption":
        return cls(
            instance_id=data.get("instance_id", ""),
            name=data.get("name", ""),
            option=data.get("option", ""),
            label=data.get("label", ""),
            links=DimensionOptionLinks.from_dict(data.get("links")),
        )

    def __repr__(self) -> str:
        return f"DimensionOption(name={self.name}, option={self.option})"


class DownloadObject:
    """A downloadable file; public/private hrefs are internal addresses."""

    def __init__(self, href: str = "", size: str = "", public: str = "", private: str = ""):
        self.href = href
        self.size = size
        self.public = public
        self.private = private

    def to_dict(self) -> Dict[str, str]:
        return _compact(
            {
                "href": self.href,
                "size": self.size,
                "public": self.public,
                "private": self.private,
            }
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["DownloadObject"]:
        if data is None:
            return None
        return cls(
            href=_text(data.get("href")),
            size=_text(data.get("size")),
            public=_text(data.get("public")),
            private=_text(data.get("private")),
        )


class DownloadList:
    """Download artifacts of a version, one per format."""

    FORMATS = ("csv", "csvw", "xls")

    def __init__(
        self,
        csv: Optional[DownloadObject] = None,
        csvw: Optional[DownloadObject] = None,
        xls: Optional[DownloadObject] = None,
    ):
        self.csv = csv
        self.csvw = csvw
        self.xls = xls

    def present(self) -> List[Tuple[str, DownloadObject]]:
        """Return the (format, download) pairs that are set, in format order."""
        return [
            (name, getattr(self, name))
            for name in self.FORMATS
            if getattr(self, name) is not None
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {name: download.to_dict() for name, download in self.present()}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["DownloadList"]:
        if data is None:
            return None
        return cls(
            csv=DownloadObject.from_dict(data.get("csv")),
            csvw=DownloadObject.from_dict(data.get("csvw")),
            xls=DownloadObject.from_dict(data.get("xls")),
        )


class Version:
    """A numbered release of data within an edition (an instance)."""

    def __init__(
        self,
        id: str = "",
        edition: str = "",
        version: int = 0,
        state: str = "",
        links: Optional[VersionLinks] = None,
        dimensions: Optional[List[Dimension]] = None,
        downloads: Optional[DownloadList] = None,
        temporal: Optional[List[Dict[str, Any]]] = None,
        release_date: str = "",
        collection_id: str = "",
        alerts: Optional[List[Dict[str, Any]]] = None,
        latest_changes: Optional[List[Dict[str, Any]]] = None,
        usage_notes: Optional[List[Dict[str, Any]]] = None,
        is_based_on: Optional[List[Dict[str, Any]]] = None,
        tables: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[List[str]] = None,
        type: str = "",
        ftb_type: str = "",
    ):
        self.id = id
        self.edition = edition
        self.version = version
        self.state = state
        self.links = links
        self.dimensions = dimensions or []
        self.downloads = downloads
        self.temporal = temporal
        self.release_date = release_date
        self.collection_id = collection_id
        self.alerts = alerts
        self.latest_changes = latest_changes
        self.usage_notes = usage_notes
        self.is_based_on = is_based_on
        self.tables = tables
        self.headers = headers or []
        self.type = type
        self.ftb_type = ftb_type

    @property
    def is_published(self) -> bool:
        return is_published(self.state)

    @property
    def dataset_id(self) -> str:
        if self.links and self.links.dataset:
            return self.links.dataset.id
        return ""

    def dimension(self, name: str) -> Optional[Dimension]:
        """Find a dimension by its id or name."""
        for dimension in self.dimensions:
            if name in (dimension.id, dimension.name):
                return dimension
        return None

    def rewrite_self_link(self) -> None:
        """Point the self link at the public version URL, or drop it if there is none."""
        if self.links is None:
            return
        href = self.links.version.href if self.links.version else ""
        self.links.self = LinkObject(href=href) if href else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return _compact(
            {
                "id": self.id,
                "alerts": self.alerts,
                "collection_id": self.collection_id,
                "dimensions": [d.to_dict() for d in self.dimensions],
                "downloads": self.downloads.to_dict() if self.downloads else None,
                "edition": self.edition,
                "ftb_type": self.ftb_type,
                "headers": self.headers,
                "is_based_on": self.is_based_on,
                "latest_changes": self.latest_changes,
                "links": self.links.to_dict() if self.links else None,
                "release_date": self.release_date,
                "state": self.state,
                "tables": self.tables,
                "temporal": self.temporal,
                "type": self.type,
                "usage_notes": self.usage_notes,
                "version": self.version,
            }
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Version":
        """Create from a stored instance document."""
        return cls(
            id=data.get("id", ""),
            edition=data.get("edition", ""),
            version=int(data.get("version", 0)),
            state=data.get("state", ""),
            links=VersionLinks.from_dict(data.get("links")),
            dimensions=[Dimension.from_dict(d) for d in data.get("dimensions") or []],
            downloads=DownloadList.from_dict(data.get("downloads")),
            temporal=data.get("temporal"),
            release_date=data.get("release_date", ""),
            collection_id=data.get("collection_id", ""),
            alerts=data.get("alerts"),
            latest_changes=data.get("latest_changes"),
            usage_notes=data.get("usage_notes"),
            is_based_on=data.get("is_based_on"),
            tables=data.get("tables"),
            headers=data.get("headers"),
            type=data.get("type", ""),
            ftb_type=data.get("ftb_type", ""),
        )

    def __repr__(self) -> str:
        return f"Version(edition={self.edition}, version={self.version}, state={self.state})"


class Metadata:
    """Public projection of a dataset variant and a version; never persisted."""

    def __init__(self, **fields: Any):
        self.alerts = fields.get("alerts")
        self.contacts = fields.get("contacts") or []
        self.description = fields.get("description", "")
        self.dimensions: List[Dimension] = fields.get("dimensions") or []
        self.distribution: List[str] = fields.get("distribution") or []
        self.downloads: Optional[DownloadList] = fields.get("downloads")
        self.ftb_type = fields.get("ftb_type", "")
        self.is_based_on = fields.get("is_based_on")
        self.keywords = fields.get("keywords") or []
        self.latest_changes = fields.get("latest_changes")
        self.license = fields.get("license", "")
        self.links: MetadataLinks = fields.get("links") or MetadataLinks()
        self.methodologies = fields.get("methodologies") or []
        self.national_statistic = fields.get("national_statistic")
        self.next_release = fields.get("next_release", "")
        self.publications = fields.get("publications") or []
        self.publisher = fields.get("publisher")
        self.qmi = fields.get("qmi")
        self.related_datasets = fields.get("related_datasets") or []
        self.release_date = fields.get("release_date", "")
        self.release_frequency = fields.get("release_frequency", "")
        self.tables = fields.get("tables")
        self.temporal = fields.get("temporal")
        self.theme = fields.get("theme", "")
        self.title = fields.get("title", "")
        self.type = fields.get("type", "")
        self.unit_of_measure = fields.get("unit_of_measure", "")
        self.uri = fields.get("uri", "")
        self.usage_notes = fields.get("usage_notes")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return _compact(
            {
                "alerts": copy.deepcopy(self.alerts),
                "contacts": copy.deepcopy(self.contacts),
                "description": self.description,
                "dimensions": [d.to_dict() for d in self.dimensions],
                "distribution": list(self.distribution),
                "downloads": self.downloads.to_dict() if self.downloads else None,
                "ftb_type": self.ftb_type,
                "is_based_on": copy.deepcopy(self.is_based_on),
                "keywords": list(self.keywords),
                "latest_changes": copy.deepcopy(self.latest_changes),
                "license": self.license,
                "links": self.links.to_dict(),
                "methodologies": copy.deepcopy(self.methodologies),
                "national_statistic": self.national_statistic,
                "next_release": self.next_release,
                "publications": copy.deepcopy(self.publications),
                "publisher": copy.deepcopy(self.publisher),
                "qmi": copy.deepcopy(self.qmi),
                "related_datasets": copy.deepcopy(self.related_datasets),
                "release_date": self.release_date,
                "release_frequency": self.release_frequency,
                "tables": copy.deepcopy(self.tables),
                "temporal": copy.deepcopy(self.temporal),
                "theme": self.theme,
                "title": self.title,
                "type": self.type,
                "unit_of_measure": self.unit_of_measure,
                "uri": self.uri,
                "usage_notes": copy.deepcopy(self.usage_notes),
            }
        )

    def __repr__(self) -> str:
        return f"Metadata(title={self.title}, distribution={self.distribution})"
