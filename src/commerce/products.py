"""
Paginated Product Fetcher

Walks GET /rest/V1/products page by page until the catalog is exhausted.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..cache import CommerceCache
from ..common.constants import PRODUCTS_ENDPOINT
from .api_client import CommerceAPIClient, build_search_criteria
from .errors import InvalidResponseFormatError

logger = logging.getLogger(__name__)


def has_more_pages(items_count: int, page_size: int, current_page: int, total_count: int) -> bool:
    """A page is followed by another only if it was full and the total is not yet reached."""
    return items_count == page_size and current_page * page_size < total_count


def is_product_page(payload: Any) -> bool:
    return isinstance(payload, dict) and isinstance(payload.get("items"), list)


@dataclass
class ProductFetchResult:
    products: List[Dict[str, Any]] = field(default_factory=list)
    api_call_count: int = 0
    cache_hits: int = 0
    total_pages: int = 0


class ProductFetcher:
    """
    Fetches every product, one page per request.

    Each page is looked up in the cache first, keyed by page size, page
    number and the credentials scope (admin username).

    Usage:
        fetcher = ProductFetcher(client, page_size=100, cache=cache)
        result = await fetcher.fetch_products("admin", token)
    """

    OPERATION = "products"

    def __init__(
        self,
        client: CommerceAPIClient,
        page_size: int = 100,
        default_page: int = 1,
        cache: Optional[CommerceCache] = None,
    ):
        self.client = client
        self.page_size = page_size
        self.default_page = default_page
        self.cache = cache

    async def _load_page(self, page: int, scope: str, token: str, result: ProductFetchResult) -> Any:
        params = {"pageSize": self.page_size, "currentPage": page}

        if self.cache is not None:
            cached = await self.cache.get(self.OPERATION, params, scope)
            if cached is not None:
                result.cache_hits += 1
                logger.debug("Products page %d served from cache", page)
                return cached

        result.api_call_count += 1
        payload = await self.client.request_async(
            "GET",
            PRODUCTS_ENDPOINT,
            params=build_search_criteria(page_size=self.page_size, current_page=page),
            token=token,
        )

        if self.cache is not None and is_product_page(payload):
            await self.cache.put(self.OPERATION, params, scope, payload)
        return payload

    async def fetch_products(self, scope: str, token: str) -> ProductFetchResult:
        """
        Fetch all product pages.

        Args:
            scope: Credentials scope for cache keys (admin username)
            token: Admin bearer token

        Returns:
            ProductFetchResult with products in page order

        Raises:
            InvalidResponseFormatError: If a page lacks an items list
            AdminTokenExpiredError: If the token is rejected
            CommerceAPIError: On any other request failure
        """
        result = ProductFetchResult()
        page = self.default_page

        while True:
            payload = await self._load_page(page, scope, token, result)

            if not is_product_page(payload):
                raise InvalidResponseFormatError(page)

            items = payload["items"]
            total_count = payload.get("total_count") or 0
            result.products.extend(items)
            result.total_pages += 1

            logger.debug("Products page %d: %d items (total_count=%d)", page, len(items), total_count)

            if not has_more_pages(len(items), self.page_size, page, total_count):
                break
            page += 1

        logger.info("Fetched %d products in %d page(s) (%d API calls, %d cache hits)",
                    len(result.products), result.total_pages, result.api_call_count, result.cache_hits)
        return result
