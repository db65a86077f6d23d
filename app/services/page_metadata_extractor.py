"""Page Metadata Extractor - scrapes title, description and og:image from a product page."""

import re
from typing import Any, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from app.core.config import Settings
from app.core.errors import MetadataFetchError
from app.models.schemas import PageMetadata

TEXT_CONTENT_TYPES = ("text/", "application/xhtml", "application/xml")


def _clean(value: Optional[str]) -> str:
    if not value:
        return ""
    return " ".join(value.split())


def parse_meta_tags(soup: BeautifulSoup) -> dict[str, str]:
    """
    Collect <meta> tags keyed by their lowercased property/name.

    The first occurrence of a key wins.
    """
    tags: dict[str, str] = {}
    for meta in soup.find_all("meta"):
        key = (meta.get("property") or meta.get("name") or "").strip().lower()
        content = meta.get("content")
        if key and content is not None and key not in tags:
            tags[key] = content
    return tags


def parse_page_metadata(markup: str, page_url: Optional[str] = None) -> PageMetadata:
    """
    Extract PageMetadata from raw markup.

    Priority: og:title then <title>; og:description then description; og:image.
    A relative og:image is resolved against page_url.
    """
    soup = BeautifulSoup(markup or "", "html.parser")
    meta = parse_meta_tags(soup)

    title = _clean(meta.get("og:title"))
    if not title and soup.title:
        title = _clean(soup.title.get_text())

    description = _clean(meta.get("og:description")) or _clean(meta.get("description"))

    og_image = meta.get("og:image", "").strip() or None
    if og_image and page_url and not re.match(r"^https?://", og_image, re.IGNORECASE):
        og_image = urljoin(page_url, og_image)

    return PageMetadata(title=title, description=description, og_image=og_image)


class PageMetadataExtractor:
    """Fetches a product page and extracts its metadata."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the extractor.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger

    def extract(self, url: str) -> PageMetadata:
        """
        Fetch url and extract its metadata.

        Args:
            url: Product page URL

        Returns:
            PageMetadata (fields empty when the page lacks them)

        Raises:
            MetadataFetchError: On network failure, non-2xx status or non-text body
        """
        self.logger.info(f"Fetching page metadata: {url}")
        headers = {
            "User-Agent": self.settings.metadata_user_agent,
            "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
        }

        try:
            response = requests.get(
                url,
                headers=headers,
                timeout=self.settings.metadata_timeout_seconds,
                allow_redirects=True,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise MetadataFetchError(f"Could not fetch {url}", detail=str(e)) from e

        content_type = response.headers.get("Content-Type", "").lower()
        if content_type and not content_type.startswith(TEXT_CONTENT_TYPES):
            raise MetadataFetchError(f"Non-text response from {url}", detail=f"Content-Type: {content_type}")

        metadata = parse_page_metadata(response.text, page_url=response.url or url)
        self.logger.debug(
            f"Metadata: title={metadata.title[:60]!r}, "
            f"description={len(metadata.description)} chars, og_image={metadata.og_image}"
        )
        return metadata
