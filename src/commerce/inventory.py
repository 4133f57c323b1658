"""
Inventory Batch Fetcher

Resolves SKUs to stock via GET /rest/V1/inventory/source-items.

Products are split into batches (default 50 SKUs). Every batch is one
``sku in (...)`` query, paged with the batch length as page size, and all
batches run concurrently. A failed batch gives its products zero stock
instead of failing the export.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..cache import CommerceCache
from ..common.constants import SOURCE_ITEM_IN_STOCK, SOURCE_ITEMS_ENDPOINT
from ..models import FetchOutcome, InventoryRecord
from .api_client import CommerceAPIClient, build_search_criteria
from .errors import AdminTokenExpiredError, CommerceAPIError

logger = logging.getLogger(__name__)

MISSING_SKUS_LOGGED = 10


def parse_quantity(value: Any) -> float:
    """Coerce a source item quantity to float; anything non-numeric counts as 0."""
    try:
        quantity = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(quantity) else quantity


def aggregate_source_items(source_items: Iterable[Dict[str, Any]]) -> Dict[str, InventoryRecord]:
    """
    Aggregate source items per SKU.

    qty is the sum of all source quantities; is_in_stock is True if any
    source has the integer status 1 (True, 1.0 and "1" do not count).
    """
    inventory: Dict[str, InventoryRecord] = {}
    for item in source_items:
        sku = item.get("sku")
        if not sku:
            continue
        record = inventory.setdefault(sku, InventoryRecord(sku=sku))
        record.qty += parse_quantity(item.get("quantity"))
        status = item.get("status")
        if type(status) is int and status == SOURCE_ITEM_IN_STOCK:
            record.is_in_stock = True
    return inventory


def default_records(products: List[Dict[str, Any]]) -> List[InventoryRecord]:
    return [InventoryRecord(sku=p["sku"], product_id=p.get("id")) for p in products]


@dataclass
class BatchResult:
    records: List[InventoryRecord]
    outcome: FetchOutcome
    api_calls: int = 0


@dataclass
class InventoryFetchResult:
    inventory_map: Dict[str, InventoryRecord] = field(default_factory=dict)
    api_calls: int = 0
    cache_hits: int = 0
    batches: int = 0
    outcomes: List[FetchOutcome] = field(default_factory=list)


class InventoryFetcher:
    """
    Batched, paginated inventory lookup.

    Usage:
        fetcher = InventoryFetcher(client, batch_size=50, cache=cache)
        result = await fetcher.fetch_inventory(products, token)
        result.inventory_map["SKU-1"].qty
    """

    OPERATION = "inventory"

    def __init__(self, client: CommerceAPIClient, batch_size: int = 50, cache: Optional[CommerceCache] = None):
        self.client = client
        self.batch_size = batch_size
        self.cache = cache

    def make_batches(self, products: List[Dict[str, Any]]) -> List[List[Dict[str, Any]]]:
        return [products[i:i + self.batch_size] for i in range(0, len(products), self.batch_size)]

    async def _fetch_batch(self, batch: List[Dict[str, Any]], label: str, token: str) -> BatchResult:
        skus = [p["sku"] for p in batch]
        page_size = len(batch)
        page = 1
        api_calls = 0
        source_items: List[Dict[str, Any]] = []

        while True:
            api_calls += 1
            try:
                payload = await self.client.request_async(
                    "GET",
                    SOURCE_ITEMS_ENDPOINT,
                    params=build_search_criteria(
                        page_size=page_size,
                        current_page=page,
                        filters=[("sku", ",".join(skus), "in")],
                    ),
                    token=token,
                )
                if not isinstance(payload, dict):
                    raise CommerceAPIError("Invalid source-items response format")
                items = payload.get("items") or []
                if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
                    raise CommerceAPIError("Invalid source-items response format")
            except AdminTokenExpiredError:
                raise
            except CommerceAPIError as e:
                logger.warning("Inventory %s failed on page %d (%d products), defaulting to zero stock: %s",
                               label, page, len(batch), e)
                return BatchResult(default_records(batch), FetchOutcome.defaulted(label, str(e)), api_calls)

            source_items.extend(items)
            total_count = parse_quantity(payload.get("total_count"))

            logger.debug("Inventory %s page %d: %d items, %d/%d so far",
                         label, page, len(items), len(source_items), total_count)

            if len(items) == page_size and len(source_items) < total_count:
                page += 1
            else:
                break

        aggregated = aggregate_source_items(source_items)

        missing = [sku for sku in skus if sku not in aggregated]
        if missing:
            logger.warning("SKUs without inventory data: %d of %d in %s (first: %s)",
                           len(missing), len(skus), label, ", ".join(missing[:MISSING_SKUS_LOGGED]))

        records = []
        for product in batch:
            found = aggregated.get(product["sku"])
            records.append(InventoryRecord(
                sku=product["sku"],
                qty=found.qty if found else 0.0,
                is_in_stock=found.is_in_stock if found else False,
                product_id=product.get("id"),
            ))
        return BatchResult(records, FetchOutcome.success(label), api_calls)

    async def fetch_inventory(self, products: List[Dict[str, Any]], token: str) -> InventoryFetchResult:
        """
        Resolve stock for every product with a SKU.

        Request failures other than token expiry never raise; failed
        batches come back as zero-stock records with a DEFAULTED outcome.

        Args:
            products: Raw products (need ``sku``; ``id`` is carried along)
            token: Admin bearer token

        Returns:
            InventoryFetchResult keyed by SKU
        """
        result = InventoryFetchResult()
        products = [p for p in products if p.get("sku")]
        if not products:
            return result

        batches = self.make_batches(products)
        result.batches = len(batches)

        cache_params = {"skus": [p["sku"] for p in products]}
        if self.cache is not None:
            cached = await self.cache.get(self.OPERATION, cache_params, token)
            if cached is not None:
                result.cache_hits += 1
                records = [InventoryRecord.from_dict(data) for data in cached]
                result.inventory_map = {record.sku: record for record in records}
                logger.info("Inventory cache HIT (%d SKUs)", len(result.inventory_map))
                return result
            logger.info("Inventory cache MISS")

        total = len(batches)
        batch_results = await asyncio.gather(*(
            self._fetch_batch(batch, f"batch {index}/{total}", token)
            for index, batch in enumerate(batches, start=1)
        ))

        records: List[InventoryRecord] = []
        for batch_result in batch_results:
            result.api_calls += batch_result.api_calls
            result.outcomes.append(batch_result.outcome)
            records.extend(batch_result.records)

        result.inventory_map = {record.sku: record for record in records}

        degraded = any(outcome.is_defaulted for outcome in result.outcomes)
        if self.cache is not None and not degraded:
            await self.cache.put(self.OPERATION, cache_params, token, [record.to_dict() for record in records])

        logger.info("Inventory resolved for %d SKUs in %d batch(es) with %d API call(s)",
                    len(result.inventory_map), total, result.api_calls)
        return result
