"""
Header resolution for spreadsheets whose column names drift between exports.

A canonical field is described by an ordered tuple of header fragments.
Fragments are matched as substrings of the lower-cased, trimmed header,
so "Цена продажи, грн" and " цена продажи" both resolve to sold_price.
Short fragments can match the wrong header: list the most specific first.
"""

from typing import Any, Iterable, Mapping

# Stock (warehouse) export: one row per catalog item
STOCK_COLUMNS: dict[str, tuple[str, ...]] = {
    "name": ("название", "наименование", "назва", "product name", "name"),
    "article": ("артикул", "article", "sku", "код"),
    "quantity": ("в наличии", "наявність", "остаток", "залишок", "количество", "quantity", "qty"),
    "buying_price": ("цена закупки", "ціна закупівлі", "закупка", "себестоимость", "buying price", "purchase price", "cost"),
    "selling_price": ("цена продажи", "ціна продажу", "selling price", "sale price", "retail price"),
    "category": ("категория", "категорія", "category"),
    "owner": ("доля", "частка", "владелец", "власник", "share", "owner"),
}

# Order export: one row per order line
SALES_COLUMNS: dict[str, tuple[str, ...]] = {
    "name": (
        "название товара",
        "наименование",
        "product name",
        "item name",
        "товар",
        "название",
        "назва",
        "product",
        "name",
    ),
    "status": ("статус", "status"),
    "quantity": ("кол-во", "количество", "кількість", "quantity", "qty"),
    "sold_price": ("цена продажи", "ціна продажу", "sale price", "sold price", "price"),
    "article": ("артикул", "article", "sku"),
    "cost": ("себестоимость", "собівартість", "cost"),
    "profit": ("прибыль", "прибуток", "profit"),
    "date": ("дата", "date"),
    "order_id": ("номер заказа", "номер замовлення", "order id", "order number", "order no", "№ заказа"),
}


def resolve_field(row: Mapping[str, Any], candidates: Iterable[str]) -> Any | None:
    """
    Return the value of the first header matching any candidate fragment.

    Candidates are tried in order; for each, the first row key (in row
    order) whose lower-cased, trimmed form contains it wins.
    """
    keys = [(key, str(key).lower().strip()) for key in row.keys()]
    for candidate in candidates:
        fragment = candidate.lower().strip()
        for key, normalized in keys:
            if fragment in normalized:
                return row[key]
    return None


class ColumnResolver:
    """
    Maps raw rows onto canonical field names using a candidate table.

    Usage:
        resolver = ColumnResolver(SALES_COLUMNS)
        record = resolver.resolve({"Товар": "Жало T12", "Кол-во": "2"})
        record["name"], record["quantity"]  # "Жало T12", "2"
    """

    def __init__(self, table: Mapping[str, tuple[str, ...]]):
        self.table = dict(table)

    @property
    def fields(self) -> list[str]:
        return list(self.table)

    def resolve(self, row: Mapping[str, Any]) -> dict[str, Any]:
        return {field: resolve_field(row, candidates) for field, candidates in self.table.items()}

