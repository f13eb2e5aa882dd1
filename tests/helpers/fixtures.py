import json
from pathlib import Path
from typing import Any, Dict, List, Optional

API_URL = "https://api.example"


def write_collection(base_path: Path, name: str, documents: List[Dict[str, Any]]) -> Path:
    """
    Write documents to a JSONL collection file.

    Args:
        base_path: Directory of the document store
        name: Collection name
        documents: Documents to write, one per line

    Returns:
        Path to the written file
    """
    path = base_path / f"{name}.jsonl"
    with open(path, "w", encoding="utf-8") as f:
        for document in documents:
            f.write(json.dumps(document) + "\n")
    return path


def dataset_variant(
    dataset_id: str = "123", state: str = "published", title: str = "Census 2011 - People"
) -> Dict[str, Any]:
    return {
        "id": dataset_id,
        "title": title,
        "description": "2011 Census data for People",
        "keywords": ["census", "people"],
        "license": "Open Government Licence v3.0",
        "publisher": {"name": "Office for National Statistics", "type": "government"},
        "contacts": [{"name": "census-team", "email": "census-team@example.org"}],
        "theme": "census",
        "national_statistic": True,
        "release_frequency": "Decennial",
        "unit_of_measure": "Persons",
        "next_release": "N/A",
        "qmi": {"href": "https://www.example.org/qmi"},
        "state": state,
        "links": {
            "self": {"href": f"{API_URL}/datasets/{dataset_id}"},
            "editions": {"href": f"{API_URL}/datasets/{dataset_id}/editions"},
            "access_rights": {"href": "https://www.example.org/access"},
        },
    }


def dataset_document(
    dataset_id: str = "123",
    current: Optional[Dict[str, Any]] = None,
    next: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    document: Dict[str, Any] = {
        "_id": dataset_id,
        "next": next or dataset_variant(dataset_id, state="created"),
    }
    if current is not None:
        document["current"] = current
    return document


def edition_variant(
    dataset_id: str = "123", edition: str = "2017", state: str = "published"
) -> Dict[str, Any]:
    edition_url = f"{API_URL}/datasets/{dataset_id}/editions/{edition}"
    return {
        "edition": edition,
        "state": state,
        "links": {
            "dataset": {"href": f"{API_URL}/datasets/{dataset_id}", "id": dataset_id},
            "self": {"href": edition_url},
            "versions": {"href": f"{edition_url}/versions"},
        },
    }


def edition_document(
    dataset_id: str = "123",
    edition: str = "2017",
    published: bool = True,
) -> Dict[str, Any]:
    document: Dict[str, Any] = {
        "id": f"{dataset_id}-{edition}",
        "next": edition_variant(dataset_id, edition, state="edition-confirmed"),
    }
    if published:
        document["current"] = edition_variant(dataset_id, edition, state="published")
    return document


def version_document(
    dataset_id: str = "123",
    edition: str = "2017",
    version: int = 1,
    state: str = "published",
    downloads: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    edition_url = f"{API_URL}/datasets/{dataset_id}/editions/{edition}"
    version_url = f"{edition_url}/versions/{version}"
    document: Dict[str, Any] = {
        "id": f"instance-{dataset_id}-{edition}-{version}",
        "edition": edition,
        "version": version,
        "state": state,
        "release_date": "22/03/2012",
        "type": "ftb",
        "temporal": [{"frequency": "Decennial"}],
        "dimensions": [
            {
                "id": "AGE",
                "name": "Age",
                "label": "Age",
                "href": "http://localhost:22400/code-lists/AGE",
                "number_of_options": 2,
            },
            {
                "id": "SEX",
                "name": "Sex",
                "label": "Sex",
                "href": "http://localhost:22400/code-lists/SEX",
                "number_of_options": 2,
            },
        ],
        "links": {
            "dataset": {"href": f"{API_URL}/datasets/{dataset_id}", "id": dataset_id},
            "edition": {"href": edition_url, "id": edition},
            "dimensions": {"href": f"{version_url}/dimensions"},
            "self": {"href": f"{API_URL}/instances/instance-{version}"},
            "version": {"href": version_url, "id": str(version)},
        },
    }
    if downloads is not None:
        document["downloads"] = downloads
    return document


def dimension_option_document(
    instance_id: str, name: str, option: str, label: str
) -> Dict[str, Any]:
    return {
        "instance_id": instance_id,
        "name": name,
        "option": option,
        "label": label,
        "links": {
            "code": {
                "href": f"http://localhost:22400/code-lists/{name}/codes/{option}",
                "id": option,
            },
            "code_list": {"href": f"http://localhost:22400/code-lists/{name}", "id": name},
        },
    }
