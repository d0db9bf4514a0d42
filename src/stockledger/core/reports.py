"""
Result models handed to the presentation layer.

Pydantic models so that any host (HTTP API, CLI, batch job) can serialise
them with model_dump() without knowing about pandas or dataclasses.
"""

from typing import Literal

from pydantic import BaseModel, Field

ReorderStatus = Literal["reorder", "dead stock", "ok"]


class IngestResult(BaseModel):
    """Summary of one stock or sales file ingest."""

    updated: int = Field(default=0, description="Catalog rows upserted (stock ingest)")
    processed: int = Field(default=0, description="Sale events written (sales ingest)")
    total_profit: float = 0.0
    skipped: int = Field(default=0, description="Rows without a resolvable product name")
    dropped: int = Field(default=0, description="Sale rows failing the delivered predicate")
    quality: dict = Field(default_factory=dict)


class SalesStats(BaseModel):
    """Profit and revenue totals over the ledger, split between owners."""

    profit: float = 0.0
    revenue: float = 0.0
    count: int = 0
    mine_share: float = 0.0
    other_share: float = 0.0


class CapitalSplit(BaseModel):
    """Capital tied up in stock (at buying price), split between owners."""

    mine_capital: float = 0.0
    other_capital: float = 0.0
    total_cost: float = 0.0
    mine_percent: float = 0.0
    other_percent: float = 0.0
    inventory_value: float = Field(
        default=0.0, description="Stock valued at selling price"
    )


class AnalyzedItem(BaseModel):
    """Inventory-control metrics for one catalog item."""

    name: str
    article: str = ""
    category: str = ""
    owner: str = "Shared"
    quantity: int = 0
    buying_price: float = 0.0
    selling_price: float = 0.0
    sold: float = Field(default=0.0, description="Units matched in the ledger")
    velocity: float = Field(default=0.0, description="Units per day over the lookback window")
    roi: float = Field(default=0.0, description="Markup over buying price, percent")
    high_turnover: bool = False
    fast_consumable: bool = False
    rop: int = Field(default=0, description="Reorder point in units")
    recommended_order: int = 0
    pvs: float = Field(default=0.0, description="Profit velocity per unit of capital")
    status: ReorderStatus = "ok"


class InventoryReport(BaseModel):
    """Analyzed catalog, sorted by velocity descending, with derived views."""

    items: list[AnalyzedItem] = Field(default_factory=list)
    top_n: int = 10

    @property
    def alerts(self) -> list[AnalyzedItem]:
        """Items that need reordering or are not moving."""
        return [item for item in self.items if item.status != "ok"]

    @property
    def reorder(self) -> list[AnalyzedItem]:
        return [item for item in self.items if item.status == "reorder"]

    @property
    def dead_stock(self) -> list[AnalyzedItem]:
        return [item for item in self.items if item.status == "dead stock"]

    def top_productive(self, n: int | None = None) -> list[AnalyzedItem]:
        """Top-N items by PVS; ties keep velocity order."""
        n = self.top_n if n is None else n
        ranked = sorted(self.items, key=lambda item: item.pvs, reverse=True)
        return ranked[:n]
