"""
Category Batch Fetcher

Resolves category IDs to Category objects.

Strategy:
    1. One GET /rest/V1/categories/list with an ``entity_id in (...)`` filter
       when the batch endpoint is enabled and there are enough IDs.
    2. If that fails (or batching is off), one GET /rest/V1/categories/{id}
       per ID, all in flight together. IDs that still fail are left
       unresolved and the joiner names them "Category {id}".
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..cache import CommerceCache
from ..common.constants import CATEGORY_ENDPOINT, CATEGORY_LIST_ENDPOINT
from ..models import Category, FetchOutcome, normalize_category_id
from .api_client import CommerceAPIClient, build_search_criteria
from .errors import AdminTokenExpiredError, CommerceAPIError

logger = logging.getLogger(__name__)


def _sort_key(category_id: str):
    return (0, int(category_id), "") if category_id.lstrip("-").isdigit() else (1, 0, category_id)


def build_category_map(categories: Iterable[Category]) -> Dict[str, Category]:
    """Index categories by their canonical ID."""
    return {normalize_category_id(category.id): category for category in categories}


@dataclass
class CategoryFetchResult:
    category_map: Dict[str, Category] = field(default_factory=dict)
    api_calls: int = 0
    cache_hits: int = 0
    outcomes: List[FetchOutcome] = field(default_factory=list)


class CategoryFetcher:
    """
    Batch category lookup with per-ID fallback.

    Usage:
        fetcher = CategoryFetcher(client, cache=cache)
        result = await fetcher.fetch_categories({"3", "7"}, token)
        result.category_map["3"].name
    """

    OPERATION = "categories"

    def __init__(
        self,
        client: CommerceAPIClient,
        cache: Optional[CommerceCache] = None,
        use_batch: bool = True,
        batch_threshold: int = 1,
    ):
        """
        Args:
            client: Commerce REST client
            cache: Optional cache keyed by the sorted ID list and token
            use_batch: Whether the categories/list endpoint may be used
            batch_threshold: Minimum number of IDs before using the batch endpoint
        """
        self.client = client
        self.cache = cache
        self.use_batch = use_batch
        self.batch_threshold = batch_threshold

    async def _fetch_batch(self, category_ids: List[str], token: str) -> List[Category]:
        payload = await self.client.request_async(
            "GET",
            CATEGORY_LIST_ENDPOINT,
            params=build_search_criteria(
                page_size=len(category_ids),
                filters=[("entity_id", ",".join(category_ids), "in")],
            ),
            token=token,
        )
        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise CommerceAPIError("Invalid categories/list response format")
        return [Category.from_api(item) for item in items if item.get("id") is not None]

    async def _fetch_one(self, category_id: str, token: str) -> tuple[Optional[Category], FetchOutcome]:
        endpoint = CATEGORY_ENDPOINT.format(category_id=category_id)
        try:
            payload = await self.client.request_async("GET", endpoint, token=token)
        except AdminTokenExpiredError:
            raise
        except CommerceAPIError as e:
            logger.warning("Failed to fetch category %s: %s", category_id, e)
            return None, FetchOutcome.defaulted(f"category {category_id}", str(e))

        if not isinstance(payload, dict) or payload.get("id") is None:
            logger.warning("Category %s returned an unexpected payload", category_id)
            return None, FetchOutcome.defaulted(f"category {category_id}", "invalid response format")
        return Category.from_api(payload), FetchOutcome.success(f"category {category_id}")

    async def _fetch_individually(self, category_ids: List[str], token: str, result: CategoryFetchResult) -> List[Category]:
        result.api_calls += len(category_ids)
        fetched = await asyncio.gather(*(self._fetch_one(cid, token) for cid in category_ids))

        categories = []
        for category, outcome in fetched:
            result.outcomes.append(outcome)
            if category is not None:
                categories.append(category)
        return categories

    async def fetch_categories(self, category_ids: Iterable[Any], token: str) -> CategoryFetchResult:
        """
        Resolve category IDs.

        Request failures other than token expiry never raise; unresolved
        IDs are reported as DEFAULTED outcomes and left out of the map.

        Args:
            category_ids: IDs in any form (int or str)
            token: Admin bearer token

        Returns:
            CategoryFetchResult keyed by canonical ID
        """
        result = CategoryFetchResult()
        ids = sorted({normalize_category_id(cid) for cid in category_ids}, key=_sort_key)
        if not ids:
            return result

        cache_params = {"categoryIds": ids}
        if self.cache is not None:
            cached = await self.cache.get(self.OPERATION, cache_params, token)
            if cached is not None:
                result.cache_hits += 1
                result.category_map = build_category_map(Category(**data) for data in cached)
                result.outcomes = [FetchOutcome.success(f"category {cid}") for cid in ids]
                logger.info("Categories cache HIT (%d categories)", len(result.category_map))
                return result
            logger.info("Categories cache MISS")

        categories: Optional[List[Category]] = None
        if self.use_batch and len(ids) >= self.batch_threshold:
            result.api_calls += 1
            try:
                categories = await self._fetch_batch(ids, token)
            except AdminTokenExpiredError:
                raise
            except CommerceAPIError as e:
                logger.warning("Category batch fetch failed for %d IDs, falling back to individual requests: %s",
                               len(ids), e)
            else:
                returned = {category.id for category in categories}
                for cid in ids:
                    if cid in returned:
                        result.outcomes.append(FetchOutcome.success(f"category {cid}"))
                    else:
                        result.outcomes.append(FetchOutcome.defaulted(f"category {cid}", "not returned by batch"))

        if categories is None:
            categories = await self._fetch_individually(ids, token, result)

        result.category_map = build_category_map(categories)

        if self.cache is not None and categories:
            await self.cache.put(self.OPERATION, cache_params, token,
                                 [category.to_dict() for category in categories])

        logger.info("Resolved %d/%d categories with %d API call(s)",
                    len(result.category_map), len(ids), result.api_calls)
        return result
