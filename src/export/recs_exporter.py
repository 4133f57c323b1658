"""
RECS CSV Exporter

Exports enriched products to the Recommendations upload format: six
``## RECS`` preamble lines, a header row starting with ``##RECSentity.id``,
then one row per product with 19 values.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..common.csv_utils import write_csv

logger = logging.getLogger(__name__)

RECS_PREAMBLE = [
    '## RECSRecommendations Upload File',
    "## RECS''## RECS'' indicates a Recommendations pre-process header. Please do not remove these lines.",
    '## RECS',
    '## RECSUse this file to upload product display information to Recommendations. Each product has its own row. Each line must contain 19 values and if not all are filled a space should be left.',
    "## RECSThe last 100 columns (entity.custom1 - entity.custom100) are custom. The name 'customN' can be replaced with a custom name such as 'onSale' or 'brand'.",
    "## RECSIf the products already exist in Recommendations then changes uploaded here will override the data in Recommendations. Any new attributes entered here will be added to the product''s entry in Recommendations.",
]

CUSTOM_FIELDS = [f'custom{n}' for n in range(2, 11)]

RECS_FIELDNAMES = [
    'sku', 'name', 'category_id', 'message', 'thumbnail_url', 'value',
    'page_url', 'inventory', 'margin', 'type',
] + CUSTOM_FIELDS

RECS_HEADERS = [
    '##RECSentity.id', 'entity.name', 'entity.categoryId', 'entity.message',
    'entity.thumbnailUrl', 'entity.value', 'entity.pageUrl', 'entity.inventory',
    'entity.margin', 'entity.type',
] + [f'entity.{name}' for name in CUSTOM_FIELDS]


def custom_attribute(product: Mapping[str, Any], code: str) -> Any:
    """Value of a ``custom_attributes`` entry, or None."""
    for attribute in product.get('custom_attributes') or []:
        if isinstance(attribute, dict) and attribute.get('attribute_code') == code:
            return attribute.get('value')
    return None


def _product_field(product: Mapping[str, Any], code: str) -> Any:
    value = product.get(code)
    if value in (None, ''):
        value = custom_attribute(product, code)
    return value


def to_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def to_int(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


class RecsCSVExporter:
    """
    Writes enriched products as a RECS upload file.

    Usage:
        exporter = RecsCSVExporter(store_url="https://shop.example.com")
        count = exporter.export(result.products, "output/products.csv")
    """

    def __init__(self, store_url: Optional[str] = None):
        """
        Args:
            store_url: Storefront base URL used to build page URLs from url_key
        """
        self.store_url = (store_url or '').rstrip('/')

    def page_url(self, product: Mapping[str, Any]) -> str:
        if product.get('url'):
            return product['url']
        url_key = _product_field(product, 'url_key')
        if url_key and self.store_url:
            return f"{self.store_url}/{url_key}.html"
        return ''

    @staticmethod
    def category_name(product: Mapping[str, Any]) -> str:
        categories = product.get('categories') or []
        if not categories:
            return ''
        first = categories[0]
        if isinstance(first, dict):
            return first.get('name') or ''
        return first if isinstance(first, str) else ''

    @staticmethod
    def message(product: Mapping[str, Any]) -> str:
        return (_product_field(product, 'short_description')
                or _product_field(product, 'description')
                or product.get('name')
                or '')

    @staticmethod
    def thumbnail_url(product: Mapping[str, Any]) -> str:
        images = product.get('images') or []
        if not images:
            return ''
        return images[0].get('url') or images[0].get('filename') or ''

    def product_to_row(self, product: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Map one enriched product to a RECS row.

        Args:
            product: Enriched product dict

        Returns:
            Row keyed by RECS_FIELDNAMES
        """
        row = {
            'sku': product.get('sku') or '',
            'name': product.get('name') or '',
            'category_id': self.category_name(product),
            'message': self.message(product),
            'thumbnail_url': self.thumbnail_url(product),
            'value': to_number(product.get('price')),
            'page_url': self.page_url(product),
            'inventory': to_int(product.get('qty')),
            'margin': product.get('margin') or '',
            'type': product.get('type_id') or '',
        }
        for name in CUSTOM_FIELDS:
            row[name] = ''
        return row

    def export(self, products: List[Mapping[str, Any]], output_path: str | Path) -> int:
        """
        Write products to a RECS CSV file.

        Args:
            products: Enriched products
            output_path: Output file path

        Returns:
            Number of rows written
        """
        rows = [self.product_to_row(product) for product in products]
        count = write_csv(
            output_path,
            rows,
            fieldnames=RECS_FIELDNAMES,
            header=RECS_HEADERS,
            preamble=RECS_PREAMBLE,
        )
        logger.info("Exported %d products to %s", count, output_path)
        return count
