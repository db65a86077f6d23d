"""Pipeline orchestrators for the Product Promo Generator."""

from app.pipelines.generation_orchestrator import GenerationOrchestrator
from app.pipelines.run_generate import main

__all__ = ["GenerationOrchestrator", "main"]
