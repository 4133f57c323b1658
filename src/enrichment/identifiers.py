"""Identifier extraction from a product batch."""

from typing import Any, Dict, Iterable, List, Set, Tuple

from ..models import normalize_category_id


def category_links(product: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return ``extension_attributes.category_links`` or an empty list."""
    extension = product.get("extension_attributes") or {}
    links = extension.get("category_links") or []
    return links if isinstance(links, list) else []


def extract_identifiers(products: Iterable[Dict[str, Any]]) -> Tuple[Set[str], List[str]]:
    """
    Collect unique category IDs and the SKU list.

    Returns:
        (category_ids, skus): canonical category IDs as a set; SKUs in
        product order with empty values dropped
    """
    category_ids: Set[str] = set()
    skus: List[str] = []

    for product in products:
        for link in category_links(product):
            category_id = link.get("category_id")
            if category_id is not None and category_id != "":
                category_ids.add(normalize_category_id(category_id))
        if product.get("sku"):
            skus.append(product["sku"])

    return category_ids, skus
