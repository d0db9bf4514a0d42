"""Column resolver tests."""

from stockledger.core.columns import (
    SALES_COLUMNS,
    STOCK_COLUMNS,
    ColumnResolver,
    resolve_field,
)


class TestResolveField:
    def test_substring_match_tolerates_drift(self):
        row = {"  Цена продажи, грн ": "180", "Название товара": "Жало"}
        assert resolve_field(row, ["цена продажи"]) == "180"
        assert resolve_field(row, ["название"]) == "Жало"

    def test_candidates_tried_in_order(self):
        row = {"Название": "by name", "Товар": "by product"}
        assert resolve_field(row, ["товар", "название"]) == "by product"
        assert resolve_field(row, ["название", "товар"]) == "by name"

    def test_first_matching_key_wins_for_a_candidate(self):
        row = {"Статус оплаты": "paid", "Статус": "Доставлен"}
        assert resolve_field(row, ["статус"]) == "paid"

    def test_no_match_returns_none(self):
        assert resolve_field({"A": 1}, ["артикул"]) is None
        assert resolve_field({}, ["артикул"]) is None

    def test_returns_value_even_when_blank(self):
        assert resolve_field({"Артикул": ""}, ["артикул"]) == ""

    def test_non_string_headers(self):
        assert resolve_field({2024: "x", "SKU": "A1"}, ["sku"]) == "A1"


class TestColumnResolver:
    def test_stock_table(self):
        resolver = ColumnResolver(STOCK_COLUMNS)
        record = resolver.resolve(
            {
                "Название": "Флюс",
                "Артикул": "F1",
                "В наличии": "4",
                "Цена закупки": "10",
                "Цена продажи": "15",
                "Категория": "Химия",
                "Доля": "Отец",
            }
        )
        assert record == {
            "name": "Флюс",
            "article": "F1",
            "quantity": "4",
            "buying_price": "10",
            "selling_price": "15",
            "category": "Химия",
            "owner": "Отец",
        }

    def test_sales_table_english_headers(self):
        resolver = ColumnResolver(SALES_COLUMNS)
        record = resolver.resolve(
            {
                "Product": "Tip-B2",
                "Status": "Delivered",
                "Qty": 2,
                "Sale price": 150,
                "Order ID": "A-17",
            }
        )
        assert record["name"] == "Tip-B2"
        assert record["status"] == "Delivered"
        assert record["quantity"] == 2
        assert record["sold_price"] == 150
        assert record["order_id"] == "A-17"
        assert record["cost"] is None
        assert record["profit"] is None

    def test_product_name_beats_earlier_product_code_column(self):
        resolver = ColumnResolver(SALES_COLUMNS)
        record = resolver.resolve(
            {
                "Order ID": "A1",
                "Product SKU": "TB2",
                "Product name": "Tip-B2",
                "Status": "Delivered",
                "Qty": 1,
            }
        )
        assert record["name"] == "Tip-B2"
        assert record["article"] == "TB2"
