"""Tests for Page Metadata Extractor service."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from bs4 import BeautifulSoup

from app.core.errors import MetadataFetchError
from app.services.page_metadata_extractor import PageMetadataExtractor, parse_meta_tags, parse_page_metadata

PRODUCT_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>Fallback Title | Shop</title>
  <META content='Blender Kopi Portable 350ml' property='og:title'>
  <meta property="og:description"
        content="Bikin latte &amp; smoothie di mana saja.">
  <meta name="description" content="Generic description">
  <meta property="og:image" content="https://cdn.shop.example/images/blender.jpg?v=2" />
</head>
<body>...</body>
</html>"""


@pytest.fixture
def extractor(settings, logger):
    """Create PageMetadataExtractor instance for testing."""
    return PageMetadataExtractor(settings, logger)


def make_response(text, content_type="text/html; charset=utf-8", url="https://shop.example/x"):
    response = MagicMock()
    response.text = text
    response.url = url
    response.headers = {"Content-Type": content_type}
    response.raise_for_status.return_value = None
    return response


def test_parse_og_tags_any_attribute_order_and_quotes():
    """Test og: tags are found regardless of attribute order, case or quote style."""
    metadata = parse_page_metadata(PRODUCT_PAGE)

    assert metadata.title == "Blender Kopi Portable 350ml"
    assert metadata.description == "Bikin latte & smoothie di mana saja."
    assert metadata.og_image == "https://cdn.shop.example/images/blender.jpg?v=2"


def test_fallback_to_title_and_meta_description():
    """Test <title> and name=description are used when og: tags are missing."""
    markup = "<html><head><title>\n  Coffee   Grinder\n</title><meta name='Description' content='Burr grinder'></head></html>"

    metadata = parse_page_metadata(markup)

    assert metadata.title == "Coffee Grinder"
    assert metadata.description == "Burr grinder"
    assert metadata.og_image is None


def test_missing_fields_default_to_empty():
    """Test a page without metadata yields empty strings and no image."""
    metadata = parse_page_metadata("<html><body>No head here</body></html>")

    assert metadata.title == ""
    assert metadata.description == ""
    assert metadata.og_image is None


def test_relative_og_image_is_resolved_against_page_url():
    """Test a relative og:image becomes absolute."""
    markup = '<meta property="og:image" content="/media/p1.png">'

    metadata = parse_page_metadata(markup, page_url="https://shop.example/products/p1")

    assert metadata.og_image == "https://shop.example/media/p1.png"


def test_parse_meta_tags_first_occurrence_wins():
    """Test duplicate keys keep their first value."""
    markup = '<meta name="description" content="first"><meta name="description" content="second">'

    assert parse_meta_tags(BeautifulSoup(markup, "html.parser"))["description"] == "first"


def test_angle_bracket_inside_attribute_value():
    """Test a quoted ">" inside a content value does not end the tag."""
    markup = '<meta content="Blender > Kopi" property="og:title"><meta property="og:description" content="a < b">'

    metadata = parse_page_metadata(markup)

    assert metadata.title == "Blender > Kopi"
    assert metadata.description == "a < b"


@patch("app.services.page_metadata_extractor.requests.get")
def test_extract_fetches_with_user_agent(mock_get, extractor, settings):
    """Test extract fetches the page with the configured UA and timeout."""
    mock_get.return_value = make_response(PRODUCT_PAGE)

    metadata = extractor.extract("https://shop.example/x")

    assert metadata.title == "Blender Kopi Portable 350ml"
    call_kwargs = mock_get.call_args.kwargs
    assert call_kwargs["headers"]["User-Agent"] == settings.metadata_user_agent
    assert call_kwargs["timeout"] == settings.metadata_timeout_seconds


@patch("app.services.page_metadata_extractor.requests.get")
def test_extract_network_error_raises_metadata_fetch_error(mock_get, extractor):
    """Test transport failures surface as MetadataFetchError."""
    mock_get.side_effect = requests.exceptions.ConnectionError("connection refused")

    with pytest.raises(MetadataFetchError):
        extractor.extract("https://shop.example/x")


@patch("app.services.page_metadata_extractor.requests.get")
def test_extract_http_error_raises_metadata_fetch_error(mock_get, extractor):
    """Test non-2xx statuses surface as MetadataFetchError."""
    response = make_response("Not found")
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("404 Client Error")
    mock_get.return_value = response

    with pytest.raises(MetadataFetchError):
        extractor.extract("https://shop.example/missing")


@patch("app.services.page_metadata_extractor.requests.get")
def test_extract_non_text_body_raises_metadata_fetch_error(mock_get, extractor):
    """Test a binary response is rejected."""
    mock_get.return_value = make_response("\x89PNG", content_type="image/png")

    with pytest.raises(MetadataFetchError) as exc_info:
        extractor.extract("https://shop.example/x.png")

    assert "image/png" in exc_info.value.detail
