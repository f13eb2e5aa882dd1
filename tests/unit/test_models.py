from typing import Any, Dict

import pytest

from domain.models import (
    Dataset,
    DatasetUpdate,
    DimensionOption,
    DownloadList,
    EditionUpdate,
    LinkObject,
    Version,
    VersionLinks,
)
from tests.helpers.fixtures import (
    dataset_document,
    dataset_variant,
    dimension_option_document,
    edition_document,
    version_document,
)


class TestDatasetUpdate:
    """Test the current/next duality of datasets."""

    @pytest.mark.unit
    def test_unpublished_dataset_has_no_published_variant(self) -> None:
        dataset = DatasetUpdate.from_dict(dataset_document("456"))

        assert dataset.id == "456"
        assert dataset.is_published is False
        assert dataset.resolve("published") is None

    @pytest.mark.unit
    def test_unset_visibility_resolves_draft(self) -> None:
        document = dataset_document(
            "123",
            current=dataset_variant("123", title="Published"),
            next=dataset_variant("123", state="created", title="Draft"),
        )
        dataset = DatasetUpdate.from_dict(document)

        assert dataset.resolve("").title == "Draft"  # type: ignore
        assert dataset.resolve("published").title == "Published"  # type: ignore

    @pytest.mark.unit
    def test_document_without_next_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            DatasetUpdate.from_dict({"_id": "789", "current": dataset_variant("789")})

    @pytest.mark.unit
    def test_edition_update_resolves_variants(self) -> None:
        edition = EditionUpdate.from_dict(edition_document("456", "2021", published=False))

        assert edition.resolve("").edition == "2021"  # type: ignore
        assert edition.resolve("published") is None


class TestDataset:
    """Test the Dataset variant model."""

    @pytest.mark.unit
    def test_to_dict_omits_unset_fields(self) -> None:
        result = Dataset(id="123", title="People").to_dict()

        assert result == {"id": "123", "title": "People"}

    @pytest.mark.unit
    def test_to_dict_keeps_false_national_statistic(self) -> None:
        result = Dataset(id="123", national_statistic=False).to_dict()

        assert result["national_statistic"] is False

    @pytest.mark.unit
    def test_links_are_parsed(self) -> None:
        dataset = Dataset.from_dict(dataset_variant("123"))

        assert dataset.links is not None
        assert dataset.links.access_rights == LinkObject(href="https://www.example.org/access")
        assert dataset.links.taxonomy is None


class TestVersion:
    """Test the Version model."""

    @pytest.mark.unit
    def test_from_dict(self) -> None:
        version = Version.from_dict(version_document("123", "2017", 3, "associated"))

        assert version.version == 3
        assert version.state == "associated"
        assert version.dataset_id == "123"
        assert version.is_published is False
        assert [d.id for d in version.dimensions] == ["AGE", "SEX"]

    @pytest.mark.unit
    def test_rewrite_self_link_uses_version_href(self) -> None:
        version = Version.from_dict(version_document("123", "2017", 1))

        version.rewrite_self_link()

        assert version.links is not None
        assert version.links.self is not None
        assert version.links.self.href == version.links.version.href  # type: ignore

    @pytest.mark.unit
    def test_rewrite_self_link_without_version_link(self) -> None:
        version = Version(
            links=VersionLinks(self=LinkObject(href="https://api.example/instances/abc"))
        )

        version.rewrite_self_link()

        assert version.links is not None
        assert version.links.self is None

    @pytest.mark.unit
    def test_dimension_lookup_by_id_or_name(self) -> None:
        version = Version.from_dict(version_document())

        assert version.dimension("AGE") is version.dimension("Age")
        assert version.dimension("GEOGRAPHY") is None

    @pytest.mark.unit
    def test_to_dict_round_trips_links(self) -> None:
        document = version_document("123", "2017", 1)
        result = Version.from_dict(document).to_dict()

        assert result["links"]["version"] == document["links"]["version"]
        assert "downloads" not in result


class TestDownloads:
    """Test the download list model."""

    @pytest.mark.unit
    def test_present_keeps_format_order(self) -> None:
        data: Dict[str, Any] = {
            "xls": {"href": "x.xls"},
            "csv": {"href": "x.csv"},
        }
        downloads = DownloadList.from_dict(data)

        assert downloads is not None
        assert [name for name, _ in downloads.present()] == ["csv", "xls"]


class TestDimensionOption:
    """Test the DimensionOption model."""

    @pytest.mark.unit
    def test_to_dict_exposes_dimension_name(self) -> None:
        option = DimensionOption.from_dict(
            dimension_option_document("instance-1", "SEX", "1", "Male")
        )

        result = option.to_dict()

        assert result["dimension"] == "SEX"
        assert result["option"] == "1"
        assert result["label"] == "Male"
        assert "instance_id" not in result
        assert result["links"]["code_list"]["id"] == "SEX"


class TestNullFields:
    """Test that stored nulls are not rendered as text."""

    @pytest.mark.unit
    def test_link_with_null_id(self) -> None:
        link = LinkObject.from_dict({"href": "https://api.example/datasets/123", "id": None})

        assert link is not None
        assert link.id == ""
        assert link.to_dict() == {"href": "https://api.example/datasets/123"}

    @pytest.mark.unit
    def test_download_with_null_size(self) -> None:
        downloads = DownloadList.from_dict({"csv": {"href": "x.csv", "size": None}})

        assert downloads is not None
        assert downloads.to_dict() == {"csv": {"href": "x.csv"}}

    @pytest.mark.unit
    def test_numeric_values_are_kept(self) -> None:
        link = LinkObject.from_dict({"href": "v", "id": 0})
        downloads = DownloadList.from_dict({"xls": {"href": "x.xls", "size": 0}})

        assert link is not None
        assert link.id == "0"
        assert downloads is not None
        assert downloads.xls is not None
        assert downloads.xls.size == "0"
