"""
Product data models.

Pure data classes for catalog records and the flattened table rows
produced from them. No traversal logic - only data structure definitions.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class NetWeight:
    """Net weight of a product ("t" magnitude, "u" unit)."""
    t: Optional[float] = None
    u: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"t": self.t, "u": self.u}

    def __str__(self) -> str:
        if self.t is None:
            return self.u or ""
        magnitude = int(self.t) if isinstance(self.t, float) and self.t.is_integer() else self.t
        return f"{magnitude} {self.u}" if self.u else str(magnitude)


@dataclass(frozen=True)
class RawProductRecord:
    """
    A product record as found in a catalog document.

    Field names follow the document's short keys:
    n=name, p=price (pounds), q=quantity, u=unit, ppuom=price per unit of
    measure (display string), img=image URL, nw=net weight.
    """
    n: str
    p: Any = None
    q: Any = None
    u: Any = None
    ppuom: Any = None
    img: Any = None
    nw: Any = None


@dataclass(frozen=True)
class ProductRow:
    """
    One flattened table row.

    `id` is the record's key within its supermarket mapping, so it is
    only unique within one fetched document. `price` is in pence.
    """

    # Core fields
    id: str
    name: str
    category: str
    subcategory: str = ""
    price: int = 0
    supermarket: str = ""

    # Optional display fields
    quantity: Any = None
    unit: Any = None
    price_per_unit: Any = None
    image: Any = None
    net_weight: Optional[NetWeight] = None

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.name:
            raise ValueError("Product name is required")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase row layout consumed by table widgets."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "subcategory": self.subcategory,
            "price": self.price,
            "quantity": self.quantity,
            "unit": self.unit,
            "pricePerUnit": self.price_per_unit,
            "image": self.image,
            "netWeight": self.net_weight.to_dict() if self.net_weight else None,
            "supermarket": self.supermarket,
        }
