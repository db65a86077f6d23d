"""Generation orchestrator - product request → metadata → image ‖ script → result."""

from typing import Any, Optional

from app.core.config import Settings
from app.core.errors import (
    ConfigurationError,
    ExtractionError,
    GenerationError,
    MetadataFetchError,
    UpstreamError,
    ValidationError,
)
from app.models.schemas import (
    GenerationResult,
    ImagePayload,
    PageMetadata,
    ProductRequest,
)
from app.services.gateway_client import GatewayClient
from app.services.image_payload_normalizer import ImagePayloadNormalizer
from app.services.page_metadata_extractor import PageMetadataExtractor
from app.services.scene_segmenter import SceneSegmenter
from app.utils.error_handler import format_error_message, get_fallback_suggestion
from app.utils.parallel_executor import ParallelExecutor

IMAGE_TASK = "image_generation"
SCRIPT_TASK = "script_generation"

SCRIPT_SYSTEM_PROMPT = (
    "You write short, persuasive affiliate promo scripts for TikTok-style vertical videos. "
    "Every script has exactly four scenes: Hook, Problem, Solution, CTA."
)


def build_product_summary(request: ProductRequest, metadata: PageMetadata) -> str:
    """Describe the product from whatever the request and page provided."""
    parts = []
    if request.desc and request.desc.strip():
        parts.append(request.desc.strip())
    if metadata.title and metadata.title not in parts:
        parts.append(metadata.title)
    if metadata.description:
        parts.append(metadata.description)
    if not parts and request.url:
        parts.append(request.url.strip())
    return "\n".join(parts)


def build_image_prompt(product: str, style: str) -> str:
    """Prompt for a photorealistic product shot with a model holding the product."""
    return f"""Photorealistic image for an affiliate product.
A real human model holding the product.
Product: {product}
Style: {style}
Very high quality, natural skin, sharp product details."""


def build_script_prompt(product: str, language: str) -> str:
    """Prompt asking for the four-scene script as a JSON array."""
    return f"""Write an AFFILIATE promo script in 4 scenes:
1. Hook
2. Problem
3. Solution
4. CTA

Product: {product}

Write in {language}, in the style of TikTok content: short and persuasive.

Return ONLY a JSON array:
[
  {{"role": "Hook", "text": "..."}},
  {{"role": "Problem", "text": "..."}},
  {{"role": "Solution", "text": "..."}},
  {{"role": "CTA", "text": "..."}}
]
"""


class GenerationOrchestrator:
    """Runs one generation request end to end."""

    def __init__(
        self,
        settings: Settings,
        logger: Any,
        gateway_client: Optional[GatewayClient] = None,
        metadata_extractor: Optional[PageMetadataExtractor] = None,
        normalizer: Optional[ImagePayloadNormalizer] = None,
        segmenter: Optional[SceneSegmenter] = None,
        executor: Optional[ParallelExecutor] = None,
    ):
        """
        Initialize the orchestrator.

        The gateway client is created lazily, after validation and the
        credential check, so a bad request never constructs one.

        Args:
            settings: Application settings (read-only)
            logger: Logger instance
            gateway_client: Optional pre-built gateway client
            metadata_extractor: Optional metadata extractor
            normalizer: Optional image payload normalizer
            segmenter: Optional scene segmenter
            executor: Optional parallel executor
        """
        self.settings = settings
        self.logger = logger
        self._gateway_client = gateway_client
        self.metadata_extractor = metadata_extractor or PageMetadataExtractor(settings, logger)
        self.normalizer = normalizer or ImagePayloadNormalizer(logger)
        self.segmenter = segmenter or SceneSegmenter(logger)
        self.executor = executor or ParallelExecutor(settings, logger)

    @property
    def gateway_client(self) -> GatewayClient:
        if self._gateway_client is None:
            self._gateway_client = GatewayClient(self.settings, self.logger)
        return self._gateway_client

    def validate(self, request: ProductRequest) -> None:
        """
        Check the request and configuration before any network call.

        Raises:
            ValidationError: If neither url nor desc is given
            ConfigurationError: If the gateway credential is missing
        """
        if not (request.url and request.url.strip()) and not (request.desc and request.desc.strip()):
            raise ValidationError("Missing fields", detail="Provide at least one of 'url' or 'desc'.")
        if not self.settings.gateway_api_key:
            raise ConfigurationError("Missing GATEWAY_API_KEY", detail="Set GATEWAY_API_KEY in the environment.")

    def fetch_metadata(self, url: Optional[str], warnings: list[str]) -> PageMetadata:
        """Best-effort metadata; any fetch failure yields empty metadata."""
        if not url or not url.strip():
            return PageMetadata()
        try:
            return self.metadata_extractor.extract(url.strip())
        except MetadataFetchError as e:
            self.logger.warning(
                format_error_message(
                    "Fetching page metadata", e, {"url": url}, get_fallback_suggestion("Page Metadata", e)
                )
            )
            warnings.append(f"Page metadata unavailable: {e.message}")
            return PageMetadata()

    def generate_image(self, product: str, style: str) -> ImagePayload:
        """
        Generate and normalize a product image.

        Raises:
            UpstreamError: If the gateway call fails
            ExtractionError: If the response holds no usable image
        """
        raw = self.gateway_client.generate_image(build_image_prompt(product, style))
        payload = self.normalizer.normalize(raw)
        if payload.is_absent:
            raise ExtractionError("Image response held no usable payload")
        return payload

    def generate_script(self, product: str) -> str:
        """Generate the raw script text. Raises UpstreamError on failure."""
        return self.gateway_client.generate_text(
            build_script_prompt(product, self.settings.script_language),
            system_prompt=SCRIPT_SYSTEM_PROMPT,
        )

    def generate(self, request: ProductRequest) -> GenerationResult:
        """
        Generate the product image and four-scene script.

        Pipeline:
        validate → metadata → (image ‖ script) → segment → assemble

        Args:
            request: Product request

        Returns:
            Immutable GenerationResult

        Raises:
            ValidationError: Missing url/desc
            ConfigurationError: Missing gateway credential
            UpstreamError: Script generation failed
        """
        self.validate(request)
        warnings: list[str] = []

        self.logger.info("Step 1: Fetching page metadata...")
        metadata = self.fetch_metadata(request.url, warnings)

        product = build_product_summary(request, metadata)
        style = (request.style or "").strip() or self.settings.default_style_hint

        tasks = {SCRIPT_TASK: lambda: self.generate_script(product)}
        image = ImagePayload.absent()
        if metadata.og_image:
            self.logger.info(f"Step 2: Reusing og:image {metadata.og_image}")
            image = ImagePayload.reference(metadata.og_image)
        else:
            self.logger.info("Step 2: No og:image, generating product image")
            tasks[IMAGE_TASK] = lambda: self.generate_image(product, style)

        self.logger.info(f"Step 3: Running {len(tasks)} gateway call(s)...")
        outcomes = self.executor.execute_api_calls(tasks)

        if IMAGE_TASK in outcomes:
            payload, error = outcomes[IMAGE_TASK]
            if error is None:
                image = payload
            else:
                self.logger.warning(
                    format_error_message(
                        "Generating product image", error, suggestion=get_fallback_suggestion("Image Generation", error)
                    )
                )
                warnings.append(f"Image unavailable: {error}")

        raw_script, error = outcomes[SCRIPT_TASK]
        if error is not None:
            self.logger.error(
                format_error_message(
                    "Generating script", error, suggestion=get_fallback_suggestion("Script Generation", error)
                )
            )
            if isinstance(error, GenerationError):
                raise error
            raise UpstreamError("Script generation failed", detail=str(error)) from error

        self.logger.info("Step 4: Segmenting script...")
        scenes, strategy = self.segmenter.segment_with_strategy(raw_script)

        result = GenerationResult(
            metadata=metadata,
            image=image,
            scenes=scenes,
            raw_script=raw_script,
            segmentation_strategy=strategy,
            warnings=warnings,
        )
        self.logger.info(f"Generation complete: image={image.kind.value}, scenes via {strategy.value}")
        return result
