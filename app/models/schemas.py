"""Pydantic models and schemas for the promo generation pipeline."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# Enums
# ============================================================================


class SceneRole(str, Enum):
    """Narrative role of a promo scene."""

    HOOK = "Hook"
    PROBLEM = "Problem"
    SOLUTION = "Solution"
    CTA = "CTA"


SCENE_ROLES: tuple[SceneRole, ...] = (
    SceneRole.HOOK,
    SceneRole.PROBLEM,
    SceneRole.SOLUTION,
    SceneRole.CTA,
)


class ImageKind(str, Enum):
    """How the product image is delivered."""

    INLINE = "inline"
    REFERENCE = "reference"
    ABSENT = "absent"


class SegmentationStrategy(str, Enum):
    """Which segmentation layer produced the scenes."""

    JSON = "json"
    HEADINGS = "headings"
    CHUNKS = "chunks"


# ============================================================================
# Request Models
# ============================================================================


class ProductRequest(BaseModel):
    """Inbound generation request.

    At least one of url/desc is required; the orchestrator enforces it so
    that the error maps to a 400 with the same body as other validation errors.
    """

    url: Optional[str] = Field(default=None, description="Product page URL (metadata-driven mode)")
    desc: Optional[str] = Field(default=None, description="Product description (description-driven mode)")
    style: Optional[str] = Field(default=None, description="Image style hint, e.g. 'lifestyle'")


# ============================================================================
# Pipeline Models
# ============================================================================


class PageMetadata(BaseModel):
    """Best-effort metadata scraped from a product page."""

    title: str = Field(default="", description="og:title or <title>")
    description: str = Field(default="", description="og:description or meta description")
    og_image: Optional[str] = Field(default=None, description="og:image URL, if any")


class ImagePayload(BaseModel):
    """Tagged image variant: inline base64 data, a reference URL, or nothing."""

    model_config = ConfigDict(frozen=True)

    kind: ImageKind = Field(..., description="inline, reference or absent")
    data: Optional[str] = Field(default=None, description="Base64 image data (inline only)")
    url: Optional[str] = Field(default=None, description="Image URL (reference only)")

    @model_validator(mode="after")
    def _check_representation(self) -> "ImagePayload":
        if self.kind == ImageKind.INLINE and (not self.data or self.url is not None):
            raise ValueError("inline image payload requires data and no url")
        if self.kind == ImageKind.REFERENCE and (not self.url or self.data is not None):
            raise ValueError("reference image payload requires url and no data")
        if self.kind == ImageKind.ABSENT and (self.data is not None or self.url is not None):
            raise ValueError("absent image payload must not carry data or url")
        return self

    @classmethod
    def inline(cls, data: str) -> "ImagePayload":
        return cls(kind=ImageKind.INLINE, data=data)

    @classmethod
    def reference(cls, url: str) -> "ImagePayload":
        return cls(kind=ImageKind.REFERENCE, url=url)

    @classmethod
    def absent(cls) -> "ImagePayload":
        return cls(kind=ImageKind.ABSENT)

    @property
    def is_absent(self) -> bool:
        return self.kind == ImageKind.ABSENT


class Scene(BaseModel):
    """One narrative segment of the promo script."""

    model_config = ConfigDict(frozen=True)

    role: SceneRole = Field(..., description="Hook, Problem, Solution or CTA")
    text: str = Field(default="", description="Scene text")


class GenerationResult(BaseModel):
    """Everything one pipeline run produced. Immutable once assembled."""

    model_config = ConfigDict(frozen=True)

    metadata: PageMetadata = Field(default_factory=PageMetadata)
    image: ImagePayload = Field(default_factory=ImagePayload.absent)
    scenes: list[Scene] = Field(..., description="Exactly four scenes in role order")
    raw_script: str = Field(default="", description="Unmodified script text from the gateway")
    segmentation_strategy: SegmentationStrategy = Field(default=SegmentationStrategy.CHUNKS)
    warnings: list[str] = Field(default_factory=list, description="Recovered, non-fatal problems")

    @model_validator(mode="after")
    def _check_scenes(self) -> "GenerationResult":
        roles = tuple(scene.role for scene in self.scenes)
        if roles != SCENE_ROLES:
            raise ValueError(f"scenes must be exactly {[r.value for r in SCENE_ROLES]}, got {[r.value for r in roles]}")
        return self


# ============================================================================
# API Response Models
# ============================================================================


class SceneOut(BaseModel):
    """Scene as serialized in the HTTP response."""

    role: str
    text: str


class GenerateResponse(BaseModel):
    """Success body of POST /api/generate."""

    image_base64: Optional[str] = Field(default=None, description="Inline base64 image")
    image_url: Optional[str] = Field(default=None, description="Reference image URL")
    title: Optional[str] = Field(default=None, description="Page title, when known")
    description: Optional[str] = Field(default=None, description="Page description, when known")
    script: Optional[str] = Field(default=None, description="Raw script text")
    scenes: list[SceneOut] = Field(..., description="Four scenes: Hook, Problem, Solution, CTA")
    warnings: Optional[list[str]] = Field(default=None, description="Non-fatal problems, e.g. image unavailable")

    @classmethod
    def from_result(cls, result: GenerationResult) -> "GenerateResponse":
        return cls(
            image_base64=result.image.data,
            image_url=result.image.url,
            title=result.metadata.title or None,
            description=result.metadata.description or None,
            script=result.raw_script or None,
            scenes=[SceneOut(role=scene.role.value, text=scene.text) for scene in result.scenes],
            warnings=list(result.warnings) or None,
        )


class ErrorResponse(BaseModel):
    """Error body for 4xx/5xx responses."""

    error: str
    error_detail: Optional[str] = None
