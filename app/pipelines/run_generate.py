"""Command-line runner - product URL/description → image + four-scene script."""

import argparse
import base64
import binascii
import json
import sys
from pathlib import Path
from typing import Optional

from app.core.config import Settings
from app.core.errors import GenerationError
from app.core.logging_config import get_logger, setup_logging_from_settings
from app.models.schemas import GenerateResponse, GenerationResult, ImageKind, ProductRequest
from app.pipelines.generation_orchestrator import GenerationOrchestrator


def save_outputs(result: GenerationResult, output_dir: Path, logger) -> list[Path]:
    """
    Write the response JSON, the script, and the inline image (if any) to output_dir.

    Returns:
        Paths written
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []

    response_path = output_dir / "response.json"
    response_path.write_text(
        GenerateResponse.from_result(result).model_dump_json(indent=2, exclude_none=True), encoding="utf-8"
    )
    written.append(response_path)

    script_path = output_dir / "script.txt"
    script_path.write_text(
        "\n\n".join(f"{scene.role.value}:\n{scene.text}" for scene in result.scenes), encoding="utf-8"
    )
    written.append(script_path)

    if result.image.kind == ImageKind.INLINE:
        try:
            image_bytes = base64.b64decode(result.image.data, validate=False)
        except (binascii.Error, ValueError) as e:
            logger.warning(f"Inline image is not decodable base64, skipping image file: {e}")
        else:
            image_path = output_dir / "image.png"
            image_path.write_bytes(image_bytes)
            written.append(image_path)

    return written


def main(argv: Optional[list[str]] = None) -> int:
    """Main entrypoint for the generation CLI."""
    parser = argparse.ArgumentParser(
        description="Product Promo Generator - image and Hook/Problem/Solution/CTA script",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--url", type=str, default=None, help="Product page URL")
    parser.add_argument("--desc", type=str, default=None, help="Product description")
    parser.add_argument(
        "--style",
        type=str,
        default=None,
        help="Image style hint (default: DEFAULT_STYLE_HINT, e.g. 'lifestyle, aesthetic, clean lighting')",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory to save response.json, script.txt and image.png (default: print JSON to stdout)",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL")
    args = parser.parse_args(argv)

    settings = Settings()
    setup_logging_from_settings(settings, log_level=args.log_level)
    logger = get_logger(__name__, url=args.url)

    logger.info("=" * 60)
    logger.info("Product Promo Generator")
    logger.info(f"URL: {args.url}")
    logger.info(f"Description: {args.desc}")
    logger.info("=" * 60)

    orchestrator = GenerationOrchestrator(settings, logger)
    request = ProductRequest(url=args.url, desc=args.desc, style=args.style)

    try:
        result = orchestrator.generate(request)
    except GenerationError as e:
        logger.error(f"{type(e).__name__}: {e.message}")
        if e.detail:
            logger.error(f"Detail: {e.detail}")
        return 2 if e.status_code == 400 else 1

    if args.output_dir:
        for path in save_outputs(result, Path(args.output_dir), logger):
            logger.info(f"Saved {path}")
    else:
        response = GenerateResponse.from_result(result)
        print(json.dumps(response.model_dump(exclude_none=True), indent=2, ensure_ascii=False))

    for warning in result.warnings:
        logger.warning(warning)
    return 0


if __name__ == "__main__":
    sys.exit(main())
