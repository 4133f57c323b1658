"""Shared test fixtures."""

from unittest.mock import patch

import pytest

from src.cache import CommerceCache, MemoryCache
from src.commerce import CommerceAPIClient, CommerceAPIError
from src.common.config_loader import ExportConfig

BASE_URL = "https://store.example.com"
FILTER_VALUE = "searchCriteria[filter_groups][0][filters][0][value]"


class FakeCommerce:
    """
    Stand-in for CommerceAPIClient.rest_request backed by in-memory data.

    Serves the admin token, products, categories and inventory source-item
    endpoints, with knobs for injecting failures.
    """

    def __init__(self, products, categories=None, source_items=None):
        self.products = products
        self.categories = categories or {}
        self.source_items = source_items or []
        self.calls = []
        self.tokens_issued = 0
        self.product_errors = []
        self.category_list_error = None
        self.failing_skus = set()

    def __call__(self, method, endpoint, params=None, data=None, token=None):
        self.calls.append((method, endpoint, token))
        params = params or {}

        if endpoint == "integration/admin/token":
            self.tokens_issued += 1
            return f'"admin-token-{self.tokens_issued:04d}"'

        if endpoint == "products":
            if self.product_errors:
                raise self.product_errors.pop(0)
            return self._page(self.products, params)

        if endpoint == "categories/list":
            if self.category_list_error is not None:
                raise self.category_list_error
            ids = str(params[FILTER_VALUE]).split(",")
            items = [self.categories[cid] for cid in ids if cid in self.categories]
            return {"items": items, "total_count": len(items)}

        if endpoint.startswith("categories/"):
            category_id = endpoint.split("/", 1)[1]
            if category_id not in self.categories:
                raise CommerceAPIError(f"HTTP 404 on {endpoint}", status=404)
            return self.categories[category_id]

        if endpoint == "inventory/source-items":
            skus = str(params[FILTER_VALUE]).split(",")
            if self.failing_skus & set(skus):
                raise CommerceAPIError("HTTP 500 on inventory/source-items", status=500)
            matching = [item for item in self.source_items if item["sku"] in skus]
            return self._page(matching, params)

        raise AssertionError(f"Unexpected request: {method} {endpoint}")

    @staticmethod
    def _page(items, params):
        size = params["searchCriteria[pageSize]"]
        page = params["searchCriteria[currentPage]"]
        start = (page - 1) * size
        return {"items": items[start:start + size], "total_count": len(items)}

    def count(self, endpoint):
        return sum(1 for _, called, _ in self.calls if called == endpoint)


@pytest.fixture
def sample_products():
    """Three raw products: two categorized with media, one bare."""
    return [
        {
            "id": 1,
            "sku": "SKU-1",
            "name": "Trail Shoe",
            "price": 89.5,
            "type_id": "simple",
            "extension_attributes": {
                "category_links": [
                    {"category_id": "3", "position": 0},
                    {"category_id": 7, "position": 1},
                ],
            },
            "media_gallery_entries": [{"file": "/t/s/trail-shoe.jpg"}],
            "custom_attributes": [
                {"attribute_code": "url_key", "value": "trail-shoe"},
                {"attribute_code": "short_description", "value": "Light trail shoe"},
            ],
        },
        {
            "id": 2,
            "sku": "SKU-2",
            "name": "Rain Jacket",
            "price": "120",
            "type_id": "configurable",
            "extension_attributes": {
                "category_links": [{"category_id": 7, "position": 0}],
            },
            "media_gallery_entries": [{"file": "https://cdn.example.com/jacket.jpg"}],
        },
        {
            "id": 3,
            "sku": "SKU-3",
            "name": "Gift Card",
            "price": 25,
            "type_id": "virtual",
        },
    ]


@pytest.fixture
def sample_categories():
    return {
        "3": {"id": 3, "name": "Shoes", "level": 2, "path": "1/2/3"},
        "7": {"id": 7, "name": "Outdoor", "level": 2, "path": "1/2/7"},
    }


@pytest.fixture
def sample_source_items():
    return [
        {"sku": "SKU-1", "source_code": "default", "quantity": 4, "status": 1},
        {"sku": "SKU-1", "source_code": "warehouse", "quantity": "2", "status": 0},
        {"sku": "SKU-2", "source_code": "default", "quantity": 0, "status": 0},
    ]


@pytest.fixture
def commerce(sample_products, sample_categories, sample_source_items):
    return FakeCommerce(sample_products, sample_categories, sample_source_items)


@pytest.fixture
def client():
    c = CommerceAPIClient(base_url=BASE_URL)
    yield c
    c.close()


@pytest.fixture
def fake_client(client, commerce):
    """Client whose requests are answered by the ``commerce`` fixture."""
    with patch.object(client, "rest_request", side_effect=commerce):
        yield client


@pytest.fixture
def cache():
    return CommerceCache(MemoryCache())


@pytest.fixture
def export_config():
    return ExportConfig(
        base_url=BASE_URL,
        admin_username="admin",
        admin_password="secret-password",
        store_url="https://shop.example.com",
        page_size=2,
    )
