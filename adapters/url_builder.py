class URLBuilder:
    """Builds website-facing URLs for catalog resources."""

    def __init__(self, website_url: str) -> None:
        self.website_url = website_url.rstrip("/")

    def build_website_dataset_version_url(
        self, dataset_id: str, edition: str, version: str
    ) -> str:
        """Return the website page for a dataset version."""
        return (
            f"{self.website_url}/datasets/{dataset_id}"
            f"/editions/{edition}/versions/{version}"
        )
