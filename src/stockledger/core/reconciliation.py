"""
Matching order lines to catalog items.

Order exports and stock exports name the same product differently, so
matching runs through several strategies in order:

Sale ingest (one lookup per order line):
1. Exact article match against the catalog
2. Exact name match against the catalog

Inventory analysis (sold units per catalog item):
1. Normalized name equality
2. Normalized article contained in the sale name, or the reverse
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

import pandas as pd

from .models import Product
from .parsers import normalize_match_key

logger = logging.getLogger(__name__)


class MatchType(Enum):
    """How a match was determined."""

    EXACT_ARTICLE = "exact_article"  # Matched on article code
    EXACT_NAME = "exact_name"  # Matched on product name
    NORMALIZED_NAME = "normalized_name"  # Matched on alphanumeric-only name
    ARTICLE_IN_NAME = "article_in_name"  # Article found inside the sale name
    UNMATCHED = "unmatched"  # No match found


@dataclass
class MatchResult:
    """Result of matching a single order line."""

    name: str
    article: str | None
    match_type: MatchType
    product: Product | None = None

    @property
    def matched(self) -> bool:
        return self.product is not None


@dataclass
class ReconciliationResult:
    """Summary of matching an order file against the catalog."""

    source_name: str
    target_name: str
    matches: list[MatchResult] = field(default_factory=list)

    @property
    def total_source_records(self) -> int:
        return len(self.matches)

    @property
    def matched_records(self) -> int:
        return sum(1 for m in self.matches if m.matched)

    @property
    def unmatched_records(self) -> int:
        return self.total_source_records - self.matched_records

    @property
    def match_rate(self) -> float:
        if self.total_source_records == 0:
            return 0
        return self.matched_records / self.total_source_records

    def unmatched_items(self) -> list[MatchResult]:
        return [m for m in self.matches if m.match_type == MatchType.UNMATCHED]

    def summary(self) -> dict:
        return {
            "source": self.source_name,
            "target": self.target_name,
            "total": self.total_source_records,
            "matched": self.matched_records,
            "unmatched": self.unmatched_records,
            "match_rate": f"{self.match_rate:.1%}",
            "unmatched_names": [m.name for m in self.unmatched_items()],
        }


class CatalogMatcher:
    """
    Resolves an order line's source product: article first, then name.

    Reads the catalog store at call time, so a match reflects the catalog
    as it is during ingest.
    """

    def __init__(self, catalog):
        self.catalog = catalog

    def match(self, name: str, article: str | None = None) -> MatchResult:
        if article:
            product = self.catalog.find_by_article(article)
            if product is not None:
                return MatchResult(name, article, MatchType.EXACT_ARTICLE, product)

        product = self.catalog.find_by_name(name)
        if product is not None:
            return MatchResult(name, article, MatchType.EXACT_NAME, product)

        logger.debug("No catalog match for %r (article %r)", name, article)
        return MatchResult(name, article, MatchType.UNMATCHED)


def match_sold_quantities(
    products_df: pd.DataFrame,
    sales_df: pd.DataFrame,
    name_col: str = "name",
    article_col: str = "article",
    sale_name_col: str = "product_name",
    qty_col: str = "quantity",
) -> pd.DataFrame:
    """
    Sum ledger quantities per catalog item using two-tier matching.

    Tier 1 compares normalized names. Only when that finds nothing and the
    item has an article does tier 2 look for the normalized article inside
    the normalized sale name (or the sale name inside the article).

    Returns DataFrame aligned to products_df's index with:
    - sold
    - match_type (normalized_name / article_in_name / unmatched)
    """
    result = pd.DataFrame(index=products_df.index)
    result["sold"] = 0.0
    result["match_type"] = MatchType.UNMATCHED.value

    if len(products_df) == 0 or len(sales_df) == 0:
        return result

    sale_keys = sales_df[sale_name_col].map(normalize_match_key)
    quantities = pd.to_numeric(sales_df[qty_col], errors="coerce").fillna(0)
    sold_by_name = quantities.groupby(sale_keys).sum()

    # Empty keys are substrings of everything; never use them for containment
    keyed = sale_keys != ""

    for idx, product in products_df.iterrows():
        name_key = normalize_match_key(product[name_col])
        sold = float(sold_by_name.get(name_key, 0)) if name_key else 0.0
        if sold > 0:
            result.at[idx, "sold"] = sold
            result.at[idx, "match_type"] = MatchType.NORMALIZED_NAME.value
            continue

        article_key = normalize_match_key(product[article_col])
        if not article_key:
            continue

        contains = sale_keys.str.contains(article_key, regex=False)
        contained = sale_keys.map(lambda key: key in article_key)
        mask = keyed & (contains | contained)
        sold = float(quantities[mask].sum())
        if sold > 0:
            result.at[idx, "sold"] = sold
            result.at[idx, "match_type"] = MatchType.ARTICLE_IN_NAME.value

    return result
