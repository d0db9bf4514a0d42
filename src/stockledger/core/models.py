"""
Canonical records stored in the catalog and the sale ledger.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum


class OwnerTag(str, Enum):
    """Who carries the capital and receives the profit of an item."""

    MINE = "Mine"
    OTHER = "Other"
    SHARED = "Shared"


@dataclass
class Product:
    """A catalog entry, addressed by name with article as secondary key."""

    name: str
    article: str = ""
    quantity: int = 0
    buying_price: float = 0.0
    selling_price: float = 0.0
    category: str = "Warehouse"
    owner: OwnerTag = OwnerTag.SHARED

    def __post_init__(self):
        if not self.name or not str(self.name).strip():
            raise ValueError("Product name must be non-empty")
        self.owner = OwnerTag(self.owner)

    @property
    def stock_cost(self) -> float:
        """Capital at rest: quantity on hand valued at buying price."""
        return self.quantity * self.buying_price

    def to_dict(self) -> dict:
        data = asdict(self)
        data["owner"] = self.owner.value
        return data


@dataclass
class SaleEvent:
    """
    One delivered order line.

    cost and owner are captured from the catalog at ingest time and are
    never re-derived when the catalog changes later.
    """

    product_name: str
    quantity: int
    sold_price: float
    cost: float
    profit: float
    status: str
    owner: OwnerTag = OwnerTag.SHARED
    article: str | None = None
    order_id: str | None = None
    date: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        self.owner = OwnerTag(self.owner)

    @property
    def revenue(self) -> float:
        return self.sold_price * self.quantity

    def to_dict(self) -> dict:
        data = asdict(self)
        data["owner"] = self.owner.value
        return data
