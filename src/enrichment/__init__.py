"""
Product enrichment.

Modules:
    identifiers - Category ID / SKU extraction from raw products
    joiner - Pure join of products with categories and inventory
    pipeline - Orchestrator with the single token-expiry retry
"""

from .identifiers import category_links, extract_identifiers
from .joiner import build_image_url, enrich_product, enrich_products
from .pipeline import PipelineState, ProductEnrichmentPipeline

__all__ = [
    'category_links',
    'extract_identifiers',
    'build_image_url',
    'enrich_product',
    'enrich_products',
    'PipelineState',
    'ProductEnrichmentPipeline',
]
