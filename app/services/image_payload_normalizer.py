"""Image Payload Normalizer - resolves provider-specific gateway responses to one ImagePayload.

The gateway's response shape depends on the provider and model behind it, so
resolution is an ordered list of named resolvers. Each resolver is a pure
function ``raw -> ImagePayload | None``; the first non-None result wins.
"""

import base64
import binascii
import json
import re
from typing import Any, Callable, Optional

from app.models.schemas import ImagePayload

BASE64_RUN_MIN_LENGTH = 200
BASE64_RUN_RE = re.compile(r"[A-Za-z0-9+/]{%d,}={0,2}" % BASE64_RUN_MIN_LENGTH)
URL_TOKEN_RE = re.compile(r"https?://[^\s\"'<>\\]+")
DATA_URL_RE = re.compile(r"^data:[\w/+.-]*(?:;[\w=-]+)*;base64,", re.IGNORECASE)
EXPLICIT_BASE64_MIN_LENGTH = 16

BASE64_FIELDS = ("image_base64", "b64_json", "image", "base64")
IMAGE_PART_TYPES = ("output_image", "image", "image_url")

Resolver = Callable[[Any], Optional[ImagePayload]]


def _first(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value[0]
    return None


def _message(raw: Any) -> Optional[dict]:
    """choices[0].message, when the response is chat-shaped."""
    if not isinstance(raw, dict):
        return None
    choice = _first(raw.get("choices"))
    if isinstance(choice, dict) and isinstance(choice.get("message"), dict):
        return choice["message"]
    return None


def _strip_data_url(value: str) -> str:
    return DATA_URL_RE.sub("", value.strip(), count=1)


def _as_base64(value: Any) -> Optional[str]:
    """Return value as bare base64 when it is a base64 string or a base64 data URL."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value.lower().startswith(("http://", "https://")):
        return None
    value = "".join(_strip_data_url(value).split())
    if len(value) < EXPLICIT_BASE64_MIN_LENGTH:
        return None
    try:
        base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return None
    return value


def _image_url_value(part: dict) -> Optional[str]:
    image_url = part.get("image_url")
    if isinstance(image_url, dict):
        image_url = image_url.get("url")
    if isinstance(image_url, str) and DATA_URL_RE.match(image_url.strip()):
        return _as_base64(image_url)
    return None


def resolve_explicit_field(raw: Any) -> Optional[ImagePayload]:
    """Known base64 fields: top-level, data[0], or message.images[*].image_url."""
    if not isinstance(raw, dict):
        return None

    for field in BASE64_FIELDS:
        data = _as_base64(raw.get(field))
        if data:
            return ImagePayload.inline(data)

    item = _first(raw.get("data"))
    if isinstance(item, dict):
        for field in BASE64_FIELDS:
            data = _as_base64(item.get(field))
            if data:
                return ImagePayload.inline(data)

    message = _message(raw)
    images = message.get("images") if message else None
    if isinstance(images, list):
        for image in images:
            if isinstance(image, dict):
                data = _image_url_value(image)
                if data:
                    return ImagePayload.inline(data)
    return None


def resolve_content_parts(raw: Any) -> Optional[ImagePayload]:
    """Multimodal message content array with an image-tagged element."""
    message = _message(raw)
    if not message or not isinstance(message.get("content"), list):
        return None

    for part in message["content"]:
        if not isinstance(part, dict) or part.get("type") not in IMAGE_PART_TYPES:
            continue
        for field in ("image_base64", "b64_json", "data"):
            data = _as_base64(part.get(field))
            if data:
                return ImagePayload.inline(data)
        data = _image_url_value(part)
        if data:
            return ImagePayload.inline(data)
    return None


def _serialized(raw: Any) -> str:
    target = _message(raw) or raw
    if isinstance(target, str):
        return target
    return json.dumps(target, ensure_ascii=False, default=str)


def resolve_base64_run(raw: Any) -> Optional[ImagePayload]:
    """Last resort: a long base64-alphabet run anywhere in the serialized message."""
    match = BASE64_RUN_RE.search(_serialized(raw))
    if match:
        return ImagePayload.inline(match.group(0))
    return None


def resolve_url_token(raw: Any) -> Optional[ImagePayload]:
    """An absolute http(s) URL anywhere in the serialized message."""
    match = URL_TOKEN_RE.search(_serialized(raw))
    if match:
        return ImagePayload.reference(match.group(0).rstrip(".,;)]}"))
    return None


DEFAULT_RESOLVERS: tuple[tuple[str, Resolver], ...] = (
    ("explicit_field", resolve_explicit_field),
    ("content_parts", resolve_content_parts),
    ("base64_run", resolve_base64_run),
    ("url_token", resolve_url_token),
)


class ImagePayloadNormalizer:
    """Resolves a raw gateway image response into inline, reference or absent."""

    def __init__(self, logger: Any, resolvers: tuple[tuple[str, Resolver], ...] = DEFAULT_RESOLVERS):
        self.logger = logger
        self.resolvers = resolvers

    def normalize(self, raw: Any) -> ImagePayload:
        """Try each resolver in order; absent when none matches. Never raises on malformed input."""
        if raw is None:
            return ImagePayload.absent()

        for name, resolver in self.resolvers:
            payload = resolver(raw)
            if payload is not None:
                self.logger.debug(f"Image payload resolved by '{name}' as {payload.kind.value}")
                return payload

        self.logger.debug("No image payload found in gateway response")
        return ImagePayload.absent()
