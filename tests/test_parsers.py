"""Value normalizer tests."""

from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from stockledger.core.models import OwnerTag
from stockledger.core.parsers import (
    DateParser,
    OwnerTagResolver,
    clean_text,
    normalize_match_key,
    parse_amount,
    parse_amount_or_none,
    parse_quantity,
    resolve_owner_tag,
)


class TestParseAmount:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1 200,50 ₴", 1200.50),
            ("1 200,50", 1200.50),
            ("  350 грн", 350.0),
            ("99.90", 99.90),
            ("$ 12", 12.0),
            ("-15,5", -15.5),
            (250, 250.0),
            (12.75, 12.75),
            (np.int64(7), 7.0),
        ],
    )
    def test_cleans_and_parses(self, raw, expected):
        assert parse_amount(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["", "abc", None, float("nan"), "   ", "1.200.50", "-"])
    def test_malformed_degrades_to_zero(self, raw):
        assert parse_amount(raw) == 0

    def test_missing_is_distinguishable_from_zero(self):
        assert parse_amount_or_none("") is None
        assert parse_amount_or_none("abc") is None
        assert parse_amount_or_none("0") == 0.0
        assert parse_amount_or_none(0) == 0.0

    def test_bool_is_not_an_amount(self):
        assert parse_amount_or_none(True) is None

    def test_quantity_rounds_and_clamps(self):
        assert parse_quantity("2,6") == 3
        assert parse_quantity("-4") == 0
        assert parse_quantity(None) == 0


class TestOwnerTag:
    @pytest.mark.parametrize(
        "raw", ["Я, Богдан", "мій", "MINE", "mine (stock)", "богдан + отец"]
    )
    def test_first_person_markers_win(self, raw):
        assert resolve_owner_tag(raw) == OwnerTag.MINE

    @pytest.mark.parametrize("raw", ["Отец", "папа", "Father", " батька "])
    def test_second_party_markers(self, raw):
        assert resolve_owner_tag(raw) == OwnerTag.OTHER

    @pytest.mark.parametrize("raw", ["Father (Dmytro)", "dad, army stock"])
    def test_latin_names_do_not_read_as_mine(self, raw):
        assert resolve_owner_tag(raw) == OwnerTag.OTHER

    @pytest.mark.parametrize("raw", ["", None, "50/50", "пополам", float("nan")])
    def test_unrecognised_is_shared(self, raw):
        assert resolve_owner_tag(raw) == OwnerTag.SHARED

    def test_custom_markers(self):
        resolver = OwnerTagResolver(["anna"], ["boris"])
        assert resolver.resolve("Anna K.") == OwnerTag.MINE
        assert resolver.resolve("boris") == OwnerTag.OTHER
        assert resolver.resolve("father") == OwnerTag.SHARED

    def test_is_recognised(self):
        resolver = OwnerTagResolver(["mine"], ["father"])
        assert resolver.is_recognised(None)
        assert resolver.is_recognised("Father")
        assert not resolver.is_recognised("50/50")


class TestText:
    def test_clean_text(self):
        assert clean_text("  Жало  ") == "Жало"
        assert clean_text(55012.0) == "55012"
        assert clean_text(12.5) == "12.5"
        assert clean_text("") is None
        assert clean_text(float("nan")) is None
        assert clean_text(None) is None

    def test_normalize_match_key(self):
        assert normalize_match_key("Tip-B2") == "tipb2"
        assert normalize_match_key("Жало T12-BC2 (new)") == "жалоt12bc2new"
        assert normalize_match_key(None) == ""
        assert normalize_match_key("--") == ""


class TestDateParser:
    def test_formats(self):
        parser = DateParser()
        assert parser.parse("2024-07-25") == datetime(2024, 7, 25)
        assert parser.parse("25.07.2024") == datetime(2024, 7, 25)
        assert parser.parse("25.07.2024 14:03") == datetime(2024, 7, 25, 14, 3)

    def test_passthrough(self):
        parser = DateParser()
        assert parser.parse(pd.Timestamp("2024-03-01 10:00")) == datetime(2024, 3, 1, 10)
        assert parser.parse(date(2024, 3, 1)) == datetime(2024, 3, 1)

    def test_unparseable(self):
        parser = DateParser()
        assert parser.parse("вчера") is None
        assert parser.parse(None) is None
