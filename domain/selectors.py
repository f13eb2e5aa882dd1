"""
Visibility selectors.

Builds the document-store predicates that pick the right variant of a
resource for the requested visibility. An empty state means the draft
(``next``) view, used internally; any other state selects the published
(``current``) view and requires its state to match.

Predicates map dotted field paths to a literal (equality) or to
``{"$in": [...]}``.
"""

from typing import Any, Dict

from domain.states import LISTABLE_STATES, PUBLISHED

Selector = Dict[str, Any]

DRAFT = "next"
PUBLISHED_VARIANT = "current"


def variant_prefix(state: str) -> str:
    """Return the sub-document that serves the requested visibility."""
    return PUBLISHED_VARIANT if state else DRAFT


def ancestor_state(state: str) -> str:
    """
    Visibility used when checking a version's dataset and edition.

    Published reads check ancestors at published visibility; any other
    version filter (e.g. "associated") has no meaning for datasets and
    editions, so they are checked at draft visibility.
    """
    return PUBLISHED if state == PUBLISHED else ""


def _variant_selector(state: str, **fields: Any) -> Selector:
    """Prefix fields with the selected variant and add its state when required."""
    prefix = variant_prefix(state)
    selector = {f"{prefix}.{path}": value for path, value in fields.items()}
    if state:
        selector[f"{prefix}.state"] = state
    return selector


def build_dataset_query(dataset_id: str, state: str = "") -> Selector:
    """Select a dataset document; any variant suffices when state is unset."""
    selector: Selector = {"_id": dataset_id}
    if state:
        selector["current.state"] = state
    return selector


def build_datasets_query(state: str = "") -> Selector:
    if state:
        return {"current.state": state}
    return {}


def build_editions_query(dataset_id: str, state: str = "") -> Selector:
    return _variant_selector(state, **{"links.dataset.id": dataset_id})


def build_edition_query(dataset_id: str, edition: str, state: str = "") -> Selector:
    return _variant_selector(
        state, **{"links.dataset.id": dataset_id, "edition": edition}
    )


def build_versions_query(dataset_id: str, edition: str, state: str = "") -> Selector:
    """Select the versions of an edition; unset state lists everything past creation."""
    selector: Selector = {"links.dataset.id": dataset_id, "edition": edition}
    if state:
        selector["state"] = state
    else:
        selector["state"] = {"$in": list(LISTABLE_STATES)}
    return selector


def build_version_query(
    dataset_id: str, edition: str, version: int, state: str = ""
) -> Selector:
    """Select one version; the state is only part of the match for published reads."""
    selector: Selector = {
        "links.dataset.id": dataset_id,
        "edition": edition,
        "version": version,
    }
    if state == PUBLISHED:
        selector["state"] = state
    return selector


def build_latest_version_query(dataset_id: str, edition: str) -> Selector:
    return {"links.dataset.id": dataset_id, "edition": edition}


def build_dimension_options_query(instance_id: str, dimension: str) -> Selector:
    return {"instance_id": instance_id, "name": dimension}
