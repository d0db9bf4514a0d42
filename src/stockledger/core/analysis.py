"""
Inventory control analysis.

Computes per-item metrics over the catalog and the full sale ledger:
- Sales velocity (units/day over a fixed lookback window)
- ROI and the high-turnover flag it drives
- Reorder point and recommended order quantity
- Productivity score (PVS) for ranking
- Reorder / dead stock status
"""

import logging
import re
from typing import Iterable

import numpy as np
import pandas as pd

from ..config import AnalyzerSettings
from .models import Product, SaleEvent
from .reconciliation import match_sold_quantities
from .reports import AnalyzedItem, InventoryReport

logger = logging.getLogger(__name__)

PRODUCT_FRAME_COLUMNS = [
    "name",
    "article",
    "category",
    "owner",
    "quantity",
    "buying_price",
    "selling_price",
]
SALES_FRAME_COLUMNS = ["product_name", "article", "quantity", "date"]


def products_to_frame(products: Iterable[Product]) -> pd.DataFrame:
    rows = [p.to_dict() for p in products]
    return pd.DataFrame(rows, columns=PRODUCT_FRAME_COLUMNS)


def sales_to_frame(sales: Iterable[SaleEvent]) -> pd.DataFrame:
    rows = [(e.product_name, e.article, e.quantity, e.date) for e in sales]
    return pd.DataFrame(rows, columns=SALES_FRAME_COLUMNS)


def _ceil(values: pd.Series) -> pd.Series:
    # Round first so 14.000000000000002 does not become 15
    return np.ceil(values.round(9)).astype(int)


def compute_sales_velocity(sold: pd.Series, lookback_days: int = 90) -> pd.Series:
    """Units per day over the lookback window. Not annualized."""
    return sold / lookback_days


def compute_roi(buying_price: pd.Series, selling_price: pd.Series) -> pd.Series:
    """Markup over buying price in percent; 0 when the buying price is unknown."""
    roi = (selling_price - buying_price) / buying_price.where(buying_price > 0) * 100
    return roi.fillna(0.0)


def flag_fast_consumables(
    names: pd.Series, categories: pd.Series, markers: Iterable[str]
) -> pd.Series:
    """True when a word in the item's category or name starts with a fast-consumable marker."""
    markers = [m.lower() for m in markers if m]
    if not markers:
        return pd.Series(False, index=names.index)
    pattern = r"\b(?:" + "|".join(re.escape(m) for m in markers) + ")"
    text = (categories.fillna("").astype(str) + " " + names.fillna("").astype(str)).str.lower()
    return text.str.contains(pattern, regex=True).astype(bool)


def compute_reorder_points(
    velocity: pd.Series,
    high_turnover: pd.Series,
    fast_consumable: pd.Series,
    settings: AnalyzerSettings,
) -> pd.Series:
    """
    ROP = ceil(velocity x (lead time + safety days)).

    Actively selling items never get a ROP below 1, and fast consumables
    never below the configured floor.
    """
    safety = np.where(
        high_turnover, settings.safety_days_high_turnover, settings.safety_days_standard
    )
    rop = _ceil(velocity * (settings.lead_time_days + safety))

    selling = velocity > 0
    rop = rop.mask(selling & (rop < 1), 1)
    rop = rop.mask(
        selling & fast_consumable & (rop < settings.fast_consumable_min_rop),
        settings.fast_consumable_min_rop,
    )
    return rop


def compute_order_quantities(
    velocity: pd.Series,
    high_turnover: pd.Series,
    buying_price: pd.Series,
    settings: AnalyzerSettings,
) -> pd.Series:
    """
    Recommended order = ceil(velocity x restock horizon).

    Items without sales history fall back to a fixed default quantity.
    """
    horizon = np.select(
        [high_turnover, buying_price > settings.expensive_buying_price],
        [settings.horizon_high_turnover_days, settings.horizon_expensive_days],
        default=settings.horizon_standard_days,
    )
    order = _ceil(velocity * horizon)

    fallback = np.where(
        high_turnover, settings.default_order_high_turnover, settings.default_order_standard
    )
    return order.mask(order == 0, pd.Series(fallback, index=order.index))


def compute_pvs(
    velocity: pd.Series, buying_price: pd.Series, selling_price: pd.Series
) -> pd.Series:
    """Daily profit per unit of capital: velocity x unit profit / buying price."""
    pvs = velocity * (selling_price - buying_price) / buying_price.where(buying_price > 0)
    return pvs.fillna(0.0)


def classify_reorder_status(
    velocity: pd.Series, quantity: pd.Series, rop: pd.Series
) -> pd.Series:
    conditions = [
        (velocity > 0) & (quantity <= rop),
        (velocity == 0) & (quantity > 0),
    ]
    status = np.select(conditions, ["reorder", "dead stock"], default="ok")
    return pd.Series(status, index=velocity.index)


def analyze_inventory_frame(
    products_df: pd.DataFrame,
    sales_df: pd.DataFrame,
    settings: AnalyzerSettings | None = None,
) -> pd.DataFrame:
    """
    Compute all inventory-control columns for a product frame.

    Returns a copy of products_df with sold, velocity, roi, high_turnover,
    fast_consumable, rop, recommended_order, pvs and status columns,
    sorted by velocity descending (stable).
    """
    settings = settings or AnalyzerSettings()
    df = products_df.copy()
    if df.empty:
        return df.assign(
            sold=[], velocity=[], roi=[], high_turnover=[], fast_consumable=[],
            rop=[], recommended_order=[], pvs=[], status=[],
        )

    buying = pd.to_numeric(df["buying_price"], errors="coerce").fillna(0.0)
    selling = pd.to_numeric(df["selling_price"], errors="coerce").fillna(0.0)
    quantity = pd.to_numeric(df["quantity"], errors="coerce").fillna(0)

    matched = match_sold_quantities(df, sales_df)
    df["sold"] = matched["sold"]
    df["velocity"] = compute_sales_velocity(df["sold"], settings.lookback_days)
    df["roi"] = compute_roi(buying, selling)
    df["high_turnover"] = df["roi"] > settings.high_turnover_roi
    df["fast_consumable"] = flag_fast_consumables(
        df["name"], df["category"], settings.fast_consumable_markers
    )
    df["rop"] = compute_reorder_points(
        df["velocity"], df["high_turnover"], df["fast_consumable"], settings
    )
    df["recommended_order"] = compute_order_quantities(
        df["velocity"], df["high_turnover"], buying, settings
    )
    df["pvs"] = compute_pvs(df["velocity"], buying, selling)
    df["status"] = classify_reorder_status(df["velocity"], quantity, df["rop"])

    unmatched = int((matched["match_type"] == "unmatched").sum())
    logger.debug("Analyzed %d items, %d without matching sales", len(df), unmatched)

    return df.sort_values("velocity", ascending=False, kind="stable")


def analyze_inventory(
    products: Iterable[Product],
    sales: Iterable[SaleEvent],
    settings: AnalyzerSettings | None = None,
) -> InventoryReport:
    """Analyze every catalog item against the full ledger."""
    settings = settings or AnalyzerSettings()
    analyzed = analyze_inventory_frame(
        products_to_frame(products), sales_to_frame(sales), settings
    )

    items = [
        AnalyzedItem(
            name=row["name"],
            article=row["article"] or "",
            category=row["category"] or "",
            owner=row["owner"],
            quantity=int(row["quantity"]),
            buying_price=float(row["buying_price"]),
            selling_price=float(row["selling_price"]),
            sold=float(row["sold"]),
            velocity=float(row["velocity"]),
            roi=float(row["roi"]),
            high_turnover=bool(row["high_turnover"]),
            fast_consumable=bool(row["fast_consumable"]),
            rop=int(row["rop"]),
            recommended_order=int(row["recommended_order"]),
            pvs=float(row["pvs"]),
            status=str(row["status"]),
        )
        for row in analyzed.to_dict(orient="records")
    ]
    return InventoryReport(items=items, top_n=settings.top_n)
