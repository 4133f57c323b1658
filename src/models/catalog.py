"""
Catalog data models.

Pure data classes for Commerce catalog entities resolved during enrichment.
Raw products stay plain dicts (the REST payload); only the looked-up
entities get their own types.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


def normalize_category_id(value: Any) -> str:
    """
    Canonical lookup key for a category ID.

    Commerce returns category IDs as ints in some payloads and strings in
    others ("5", 5, 5.0 all map to "5"). Used for both insert and lookup.
    """
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, int):
        return str(value)

    text = str(value).strip()
    digits = text[1:] if text.startswith("-") else text
    if digits.isdigit():
        return str(int(text))
    return text


@dataclass(frozen=True)
class AdminCredentials:
    """Commerce admin username/password pair."""
    username: str
    password: str

    def __repr__(self) -> str:
        return f"AdminCredentials(username={self.username!r}, password='***')"


@dataclass
class Category:
    """Resolved category."""
    id: str
    name: str
    level: Optional[int] = None
    path: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Category":
        """Build from a /categories or /categories/list item."""
        return cls(
            id=normalize_category_id(data["id"]),
            name=data.get("name") or "",
            level=data.get("level"),
            path=data.get("path") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InventoryRecord:
    """Aggregated stock for one SKU across all inventory sources."""
    sku: str
    qty: float = 0.0
    is_in_stock: bool = False
    product_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InventoryRecord":
        return cls(
            sku=data["sku"],
            qty=data.get("qty", 0.0),
            is_in_stock=bool(data.get("is_in_stock", False)),
            product_id=data.get("product_id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
