"""
Product Enrichment Pipeline

Ties the Commerce stages together into one run:

  Step 1: ADMIN TOKEN
      AdminTokenProvider.get_token() - cached per admin username.

  Step 2: PRODUCTS
      ProductFetcher walks every page of /rest/V1/products.

  Step 3: IDENTIFIERS
      Unique category IDs and the SKU list are pulled from the products.

  Step 4: CATEGORIES + INVENTORY (concurrently)
      CategoryFetcher and InventoryFetcher run side by side. Their
      failures degrade to defaults and are reported as warnings.

  Step 5: ENRICH
      Products are joined with categories and stock.

Retry policy:
    A 401 from any stage (AdminTokenExpiredError) moves the pipeline
    from ATTEMPT to RETRIED_ONCE: the cached token is invalidated
    and the whole sequence runs again with a fresh token. A second expiry,
    or any other failure, raises CommerceIntegrationError.

Typical usage:
    pipeline = ProductEnrichmentPipeline.from_config(config, client, cache)
    result = await pipeline.run()
    print(result.metrics.to_dict())
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

from ..cache import CommerceCache
from ..commerce import (
    AdminTokenExpiredError,
    AdminTokenProvider,
    CategoryFetcher,
    CommerceAPIClient,
    CommerceIntegrationError,
    InventoryFetcher,
    ProductFetcher,
)
from ..common.config_loader import ExportConfig
from ..models import AdminCredentials, PipelineMetrics, PipelineResult
from .identifiers import extract_identifiers
from .joiner import enrich_products

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    ATTEMPT = "attempt"
    RETRIED_ONCE = "retried_once"


class ProductEnrichmentPipeline:
    """
    Runs the fetch-and-enrich sequence with a single token-expiry retry.

    Attributes:
        credentials: Admin username/password
        token_provider: Issues and caches admin tokens
        product_fetcher: Paginated product fetcher
        category_fetcher: Category lookup
        inventory_fetcher: Inventory lookup
        media_base_url: Prefix for relative media gallery paths
        stage: Stage the current attempt is in, used in failure messages
    """

    def __init__(
        self,
        credentials: AdminCredentials,
        token_provider: AdminTokenProvider,
        product_fetcher: ProductFetcher,
        category_fetcher: CategoryFetcher,
        inventory_fetcher: InventoryFetcher,
        media_base_url: str = "",
    ):
        self.credentials = credentials
        self.token_provider = token_provider
        self.product_fetcher = product_fetcher
        self.category_fetcher = category_fetcher
        self.inventory_fetcher = inventory_fetcher
        self.media_base_url = media_base_url
        self.stage = ""

    @classmethod
    def from_config(
        cls,
        config: ExportConfig,
        client: CommerceAPIClient,
        cache: Optional[CommerceCache] = None,
    ) -> "ProductEnrichmentPipeline":
        """Wire every stage from an ExportConfig."""
        return cls(
            credentials=AdminCredentials(config.admin_username, config.admin_password),
            token_provider=AdminTokenProvider(client, cache, ttl=config.admin_token_ttl),
            product_fetcher=ProductFetcher(
                client,
                page_size=config.page_size,
                default_page=config.default_page,
                cache=cache,
            ),
            category_fetcher=CategoryFetcher(
                client,
                cache=cache,
                use_batch=config.use_category_batch,
                batch_threshold=config.category_batch_threshold,
            ),
            inventory_fetcher=InventoryFetcher(client, batch_size=config.inventory_batch_size, cache=cache),
            media_base_url=config.media_base_url,
        )

    async def run(self) -> PipelineResult:
        """
        Fetch and enrich all products.

        Returns:
            PipelineResult with enriched products, metrics and warnings

        Raises:
            CommerceIntegrationError: On any unrecoverable failure
        """
        metrics = PipelineMetrics()
        state = PipelineState.ATTEMPT

        while True:
            try:
                return await self._attempt(metrics)
            except AdminTokenExpiredError as e:
                if state is PipelineState.RETRIED_ONCE:
                    logger.error("Admin token rejected again after refresh, giving up")
                    raise CommerceIntegrationError(str(e), stage=self.stage) from e

                await self.token_provider.invalidate_token(self.credentials.username)
                state = PipelineState.RETRIED_ONCE
                metrics.token_retries += 1
                metrics.reset_stages()
                logger.info("Retrying with fresh admin token (attempt 1/1)")

    async def _attempt(self, metrics: PipelineMetrics) -> PipelineResult:
        self.stage = "admin_token"
        try:
            token_result = await self.token_provider.get_token(self.credentials)
            if token_result.cache_hit:
                metrics.admin_token_cache_hits += 1
            else:
                metrics.admin_token_api_calls += 1
            token = token_result.token

            self.stage = "products"
            products_result = await self.product_fetcher.fetch_products(self.credentials.username, token)
            metrics.products_api_calls += products_result.api_call_count
            metrics.products_cache_hits += products_result.cache_hits
            metrics.product_pages += products_result.total_pages
            products = products_result.products

            self.stage = "enrichment"
            category_ids, skus = extract_identifiers(products)
            logger.info("Enriching %d products (%d categories, %d SKUs)",
                        len(products), len(category_ids), len(skus))

            # Both branches finish before an error is raised, so no request
            # with the old token is still in flight when the retry starts
            fetched = await asyncio.gather(
                self.category_fetcher.fetch_categories(category_ids, token),
                self.inventory_fetcher.fetch_inventory(products, token),
                return_exceptions=True,
            )
            for outcome in fetched:
                if isinstance(outcome, BaseException):
                    raise outcome
            category_result, inventory_result = fetched

            metrics.categories_api_calls += category_result.api_calls
            metrics.categories_cache_hits += category_result.cache_hits
            metrics.inventory_api_calls += inventory_result.api_calls
            metrics.inventory_cache_hits += inventory_result.cache_hits
            metrics.inventory_batches += inventory_result.batches

            enriched = enrich_products(
                products,
                category_result.category_map,
                inventory_result.inventory_map,
                self.media_base_url,
            )

            warnings = [
                outcome.describe()
                for outcome in category_result.outcomes + inventory_result.outcomes
                if outcome.is_defaulted
            ]
        except AdminTokenExpiredError:
            raise
        except CommerceIntegrationError:
            raise
        except Exception as e:
            logger.error("Pipeline failed during %s: %s", self.stage, e)
            raise CommerceIntegrationError(str(e), stage=self.stage) from e

        if warnings:
            logger.warning("Enrichment degraded for %d item(s); defaults were used", len(warnings))
        if metrics.cache_hits:
            logger.info("Total Commerce API cache hits: %d", metrics.cache_hits)

        return PipelineResult(products=enriched, metrics=metrics, warnings=warnings)
