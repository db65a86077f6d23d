"""Tests for Image Payload Normalizer service."""

import pytest

from app.models.schemas import ImageKind, ImagePayload
from app.services.image_payload_normalizer import (
    ImagePayloadNormalizer,
    resolve_base64_run,
    resolve_content_parts,
    resolve_explicit_field,
    resolve_url_token,
)


PNG_BASE64 = "iVBORw0KGgoAAAANSUhEUgAA"
ABC_BASE64 = "QUJDREVGR0hJSktMTU5PUA=="


@pytest.fixture
def normalizer(logger):
    """Create ImagePayloadNormalizer instance for testing."""
    return ImagePayloadNormalizer(logger)


def chat_response(message):
    return {"id": "gen-123", "choices": [{"index": 0, "message": message}]}


def test_images_api_b64_json(normalizer):
    """Test OpenAI images API shape data[0].b64_json."""
    raw = {"created": 1700000000, "data": [{"b64_json": PNG_BASE64}]}

    assert normalizer.normalize(raw) == ImagePayload.inline(PNG_BASE64)


def test_top_level_data_url_is_stripped(normalizer):
    """Test a top-level image_base64 data URL resolves to bare base64."""
    raw = {"image_base64": f"data:image/png;base64,{PNG_BASE64}"}

    assert normalizer.normalize(raw) == ImagePayload.inline(PNG_BASE64)


def test_message_images_data_url(normalizer):
    """Test OpenRouter-style message.images[].image_url.url."""
    raw = chat_response(
        {
            "role": "assistant",
            "content": "Here is your image.",
            "images": [{"type": "image_url", "image_url": {"url": f"data:image/png;base64,{PNG_BASE64}"}}],
        }
    )

    assert normalizer.normalize(raw) == ImagePayload.inline(PNG_BASE64)


def test_multimodal_content_output_image(normalizer):
    """Test a content array with an output_image element."""
    raw = chat_response(
        {
            "role": "assistant",
            "content": [
                {"type": "text", "text": "Generated."},
                {"type": "output_image", "image_base64": ABC_BASE64},
            ],
        }
    )

    assert resolve_explicit_field(raw) is None
    assert resolve_content_parts(raw) == ImagePayload.inline(ABC_BASE64)
    assert normalizer.normalize(raw).data == ABC_BASE64


def test_base64_run_nested_in_unknown_envelope(normalizer, base64_run):
    """Test a long base64 run nested in an unrecognized object resolves to that exact run."""
    raw = chat_response(
        {
            "role": "assistant",
            "content": "Done",
            "attachments": {"blob": {"payload": base64_run, "mime": "image/png"}},
        }
    )

    payload = normalizer.normalize(raw)

    assert payload.kind == ImageKind.INLINE
    assert payload.data == base64_run
    assert payload.url is None


def test_short_base64_runs_are_ignored():
    """Test runs under 200 characters are not treated as images."""
    raw = chat_response({"content": "A" * 199})

    assert resolve_base64_run(raw) is None


def test_url_token_becomes_reference(normalizer):
    """Test an image URL in free text resolves to a reference."""
    raw = chat_response({"content": "Your image: https://cdn.example.com/img/123.png."})

    payload = normalizer.normalize(raw)

    assert payload == ImagePayload.reference("https://cdn.example.com/img/123.png")
    assert payload.data is None


def test_images_api_url_becomes_reference(normalizer):
    """Test data[0].url with no base64 resolves to a reference."""
    raw = {"created": 1700000000, "data": [{"url": "https://images.example.net/a/b.png?sig=1"}]}

    assert normalizer.normalize(raw) == ImagePayload.reference("https://images.example.net/a/b.png?sig=1")


def test_base64_run_wins_over_url(base64_run, normalizer):
    """Test resolution order: base64 run before URL token."""
    raw = chat_response({"content": f"See https://example.com/x.png or {base64_run}"})

    assert normalizer.normalize(raw) == ImagePayload.inline(base64_run)


def test_no_image_is_absent(normalizer):
    """Test a text-only answer resolves to absent."""
    raw = chat_response({"role": "assistant", "content": "Sorry, I can only describe the product."})

    assert normalizer.normalize(raw).is_absent


@pytest.mark.parametrize(
    "raw",
    [
        None,
        [],
        {},
        "garbage",
        42,
        {"choices": "x"},
        {"choices": [None]},
        {"data": [None, 1]},
        {"choices": [{"message": None}]},
        {"choices": [{"message": {"content": "ok", "images": 1}}]},
        {"choices": [{"message": {"content": "ok", "images": "data:image/png;base64,xyz"}}]},
        {"choices": [{"message": {"content": 7, "images": {"url": 1}}}]},
    ],
)
def test_malformed_input_never_raises(normalizer, raw):
    """Test malformed responses resolve to absent instead of raising."""
    assert normalizer.normalize(raw).is_absent


def test_normalize_is_deterministic(normalizer, base64_run):
    """Test the same input always yields the same payload."""
    raw = chat_response({"content": [{"type": "text", "text": base64_run}]})

    assert normalizer.normalize(raw) == normalizer.normalize(raw)


def test_custom_resolver_order(logger):
    """Test resolvers can be supplied explicitly and are tried in order."""
    normalizer = ImagePayloadNormalizer(logger, resolvers=(("url_token", resolve_url_token),))
    raw = {"image_base64": PNG_BASE64, "source": "https://example.com/p.png"}

    assert normalizer.normalize(raw) == ImagePayload.reference("https://example.com/p.png")


@pytest.mark.parametrize("value", ["none", "generated", "image", "abcd", "not base64 at all!"])
def test_placeholder_words_are_not_inline_images(normalizer, value):
    """Test short or non-base64 field values do not count as inline images."""
    raw = {"image": value, "data": [{"b64_json": value, "url": "https://images.example.net/a.png"}]}

    assert resolve_explicit_field(raw) is None
    assert normalizer.normalize(raw) == ImagePayload.reference("https://images.example.net/a.png")


def test_invalid_base64_field_is_ignored():
    """Test long values that do not decode as base64 are rejected."""
    raw = {"image_base64": "this-is-not_base64-but-is-long-enough"}

    assert resolve_explicit_field(raw) is None
