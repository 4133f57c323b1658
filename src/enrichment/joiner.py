"""
Enrichment Joiner

Merges raw products with resolved categories and inventory. Pure functions:
the input products are never modified and the same inputs always give the
same output.
"""

from typing import Any, Dict, List, Mapping, Optional

from ..common.constants import IN_STOCK, OUT_OF_STOCK
from ..models import Category, InventoryRecord, normalize_category_id
from .identifiers import category_links

ABSOLUTE_URL_PREFIXES = ("http://", "https://")


def _is_absolute(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(ABSOLUTE_URL_PREFIXES)


def build_image_url(entry: Mapping[str, Any], media_base_url: str) -> str:
    """
    URL for one media gallery entry.

    Absolute ``url`` or ``file`` values (CDN / AEM Assets) are used as is;
    relative file paths are appended to the media base URL.
    """
    if _is_absolute(entry.get("url")):
        return entry["url"]
    file_path = entry.get("file")
    if _is_absolute(file_path):
        return file_path
    if file_path:
        return f"{media_base_url}{file_path}"
    return ""


def build_images(product: Mapping[str, Any], media_base_url: str) -> List[Dict[str, str]]:
    existing = product.get("images")
    if existing:
        return list(existing)
    entries = product.get("media_gallery_entries") or []
    return [{"url": build_image_url(entry, media_base_url)} for entry in entries]


def enrich_product(
    product: Mapping[str, Any],
    category_map: Mapping[str, Category],
    inventory_map: Mapping[str, InventoryRecord],
    media_base_url: str = "",
) -> Dict[str, Any]:
    """
    Build the enriched copy of one product.

    Adds ``categories`` ([{id, name, position}]), ``qty``, ``stock_status``
    and ``images``. Unresolved categories are named "Category {id}";
    products without inventory get qty 0 and OUT_OF_STOCK.
    """
    enriched = dict(product)

    categories = []
    for link in category_links(product):
        category_id = link.get("category_id")
        category = category_map.get(normalize_category_id(category_id))
        categories.append({
            "id": category_id,
            "name": category.name if category else f"Category {category_id}",
            "position": link.get("position"),
        })
    enriched["categories"] = categories

    inventory = inventory_map.get(product.get("sku"))
    if inventory is not None:
        enriched["qty"] = inventory.qty or 0
        enriched["stock_status"] = IN_STOCK if inventory.is_in_stock else OUT_OF_STOCK
    else:
        enriched["qty"] = 0
        enriched["stock_status"] = OUT_OF_STOCK

    enriched["images"] = build_images(product, media_base_url)
    return enriched


def enrich_products(
    products: List[Mapping[str, Any]],
    category_map: Mapping[str, Category],
    inventory_map: Mapping[str, InventoryRecord],
    media_base_url: Optional[str] = "",
) -> List[Dict[str, Any]]:
    """Enrich every product, preserving order."""
    return [enrich_product(p, category_map, inventory_map, media_base_url or "") for p in products]
