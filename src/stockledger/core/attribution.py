"""
Profit, revenue and capital attribution between the two owners.

Split rule, applied to any owner-tagged amount:
- Mine   -> 100% Mine
- Other  -> 100% Other
- Shared, empty or unrecognised -> 50/50
"""

from typing import Iterable, Literal

import pandas as pd

from .models import OwnerTag, Product, SaleEvent
from .reports import CapitalSplit, SalesStats

# Fraction of an owner-tagged amount that goes to Mine; Other gets the rest
MINE_WEIGHT = {
    OwnerTag.MINE.value: 1.0,
    OwnerTag.OTHER.value: 0.0,
    OwnerTag.SHARED.value: 0.5,
}


def _owner_value(owner) -> str:
    return owner.value if isinstance(owner, OwnerTag) else str(owner)


def split_amount(amount: float, owner) -> tuple[float, float]:
    """Split an amount into (mine, other) according to the owner tag."""
    weight = MINE_WEIGHT.get(_owner_value(owner), 0.5)
    mine = amount * weight
    return mine, amount - mine


def _mine_weights(owners: pd.Series) -> pd.Series:
    return owners.map(_owner_value).map(MINE_WEIGHT).fillna(0.5)


def compute_stats(
    sales: Iterable[SaleEvent], count_by: Literal["auto", "units", "orders"] = "auto"
) -> SalesStats:
    """
    Aggregate the ledger into totals and owner shares in one pass.

    count_by:
        units  - sum of quantities
        orders - number of distinct order ids
        auto   - orders when every event carries an order id, else units
    """
    df = pd.DataFrame(
        [(e.profit, e.sold_price, e.quantity, e.owner, e.order_id) for e in sales],
        columns=["profit", "sold_price", "quantity", "owner", "order_id"],
    )
    if df.empty:
        return SalesStats()

    profit = df["profit"].astype(float)
    mine = profit * _mine_weights(df["owner"])

    has_orders = df["order_id"].notna().all()
    if count_by == "orders" or (count_by == "auto" and has_orders):
        count = int(df["order_id"].dropna().nunique())
    else:
        count = int(df["quantity"].sum())

    return SalesStats(
        profit=float(profit.sum()),
        revenue=float((df["sold_price"] * df["quantity"]).sum()),
        count=count,
        mine_share=float(mine.sum()),
        other_share=float((profit - mine).sum()),
    )


def compute_capital_split(products: Iterable[Product]) -> CapitalSplit:
    """
    Split the capital held in stock (quantity x buying price) between owners.

    Percentages are shares of total cost; both are 0 when nothing is in stock.
    """
    df = pd.DataFrame(
        [(p.stock_cost, p.quantity * p.selling_price, p.owner) for p in products],
        columns=["cost", "value", "owner"],
    )
    if df.empty:
        return CapitalSplit()

    cost = df["cost"]
    mine = cost * _mine_weights(df["owner"])

    total_cost = float(cost.sum())
    mine_capital = float(mine.sum())
    other_capital = float((cost - mine).sum())

    return CapitalSplit(
        mine_capital=mine_capital,
        other_capital=other_capital,
        total_cost=total_cost,
        mine_percent=mine_capital / total_cost * 100 if total_cost else 0.0,
        other_percent=other_capital / total_cost * 100 if total_cost else 0.0,
        inventory_value=float(df["value"].sum()),
    )
