"""Unit tests for the predicate engine."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from backoffice.application.services import filter_records, matches
from backoffice.application.services.accounting_store import INVOICE_RULES
from backoffice.application.services.inventory_store import PRODUCT_RULES
from backoffice.application.services.predicates import date_window, shift_months
from backoffice.application.services.sales_store import SALE_RULES
from backoffice.domain.entities import (
    DateRange,
    FilterSpec,
    Invoice,
    Product,
    Sale,
    SaleItem,
)

NOW = datetime(2024, 3, 15, 14, 30)

ZAPATO = Product(
    id=1, code="ZAP01", name="Zapato Azul", category="Calzado", color="Azul", total_stock=20
)
BOTA = Product(
    id=2,
    code="BOT01",
    name="Bota Negra",
    category="Calzado",
    color="Negro",
    total_stock=3,
    min_stock=5,
)
GORRA = Product(
    id=3, code="GOR01", name="Gorra", category="Accesorios", total_stock=0, is_active=False
)
PRODUCTS = [ZAPATO, BOTA, GORRA]


def _sale(sale_id: int, created_at: datetime | None, **extra) -> Sale:
    return Sale(id=sale_id, sale_number=f"V-{sale_id:03d}", created_at=created_at, **extra)


# ── Search ──


def test_search_is_case_insensitive_substring():
    spec = FilterSpec(search_term="zap")

    assert filter_records(PRODUCTS, spec, PRODUCT_RULES, NOW) == [ZAPATO]


def test_search_covers_sale_items_and_id_text():
    sale = _sale(
        42,
        NOW,
        customer_name="Ana",
        items=(SaleItem(product_code="ZAP01", product_name="Zapato Azul", quantity=1),),
    )

    assert matches(sale, FilterSpec(search_term="zapato"), SALE_RULES, NOW)
    assert matches(sale, FilterSpec(search_term="42"), SALE_RULES, NOW)
    assert not matches(sale, FilterSpec(search_term="bota"), SALE_RULES, NOW)


def test_blank_search_term_matches_everything():
    assert filter_records(PRODUCTS, FilterSpec(search_term="   "), PRODUCT_RULES, NOW) == PRODUCTS


# ── Equality filters ──


def test_filters_are_anded():
    spec = FilterSpec(filters={"category": "Calzado", "color": "Negro"})

    assert filter_records(PRODUCTS, spec, PRODUCT_RULES, NOW) == [BOTA]


def test_all_and_empty_values_do_not_constrain():
    spec = FilterSpec(filters={"category": "all", "color": ""})

    assert filter_records(PRODUCTS, spec, PRODUCT_RULES, NOW) == PRODUCTS


def test_filter_values_are_trimmed():
    spec = FilterSpec(filters={"category": "  Accesorios "})

    assert filter_records(PRODUCTS, spec, PRODUCT_RULES, NOW) == [GORRA]


def test_unknown_filter_key_matches_nothing_and_never_raises():
    spec = FilterSpec(filters={"warehouse": "north"})

    assert filter_records(PRODUCTS, spec, PRODUCT_RULES, NOW) == []


def test_derived_fields_can_be_filtered():
    out_of_stock = FilterSpec(filters={"stockStatus": "out"})
    low_stock = FilterSpec(filters={"stockStatus": "low"})
    inactive = FilterSpec(filters={"productStatus": "inactive"})

    assert filter_records(PRODUCTS, out_of_stock, PRODUCT_RULES, NOW) == [GORRA]
    assert filter_records(PRODUCTS, low_stock, PRODUCT_RULES, NOW) == [BOTA]
    assert filter_records(PRODUCTS, inactive, PRODUCT_RULES, NOW) == [GORRA]


def test_invoice_status_filter_uses_status_at_now():
    overdue = Invoice(
        id=1,
        invoice_number="F-1",
        due_date=date(2024, 3, 1),
        total=Decimal("100"),
        balance=Decimal("100"),
    )
    due_later = Invoice(
        id=2,
        invoice_number="F-2",
        due_date=date(2024, 4, 1),
        total=Decimal("100"),
        balance=Decimal("100"),
    )
    spec = FilterSpec(filters={"status": "OVERDUE"})

    assert filter_records([overdue, due_later], spec, INVOICE_RULES, NOW) == [overdue]


# ── Date windows ──


@pytest.mark.parametrize(
    ("date_range", "expected_ids"),
    [
        (DateRange.TODAY, [1]),
        (DateRange.YESTERDAY, [2]),
        (DateRange.WEEK, [1, 2, 3]),
        (DateRange.MONTH, [1, 2, 3, 4]),
        (DateRange.YEAR, [1, 2, 3, 4, 5]),
        (DateRange.ALL, [1, 2, 3, 4, 5, 6, 7]),
    ],
)
def test_named_date_ranges(date_range, expected_ids):
    sales = [
        _sale(1, datetime(2024, 3, 15, 9, 0)),
        _sale(2, datetime(2024, 3, 14, 23, 59)),
        _sale(3, datetime(2024, 3, 9, 8, 0)),
        _sale(4, datetime(2024, 2, 20, 10, 0)),
        _sale(5, datetime(2023, 6, 1, 10, 0)),
        _sale(6, datetime(2022, 1, 1, 10, 0)),
        _sale(7, None),
    ]
    spec = FilterSpec(date_range=date_range)

    result = filter_records(sales, spec, SALE_RULES, NOW)

    assert [s.id for s in result] == expected_ids


def test_record_without_date_fails_an_active_window():
    assert not matches(_sale(1, None), FilterSpec(date_range="today"), SALE_RULES, NOW)


def test_custom_range_with_date_bounds_covers_whole_end_day():
    spec = FilterSpec(
        date_range=DateRange.CUSTOM,
        custom_start=date(2024, 3, 1),
        custom_end=date(2024, 3, 10),
    )
    sales = [
        _sale(1, datetime(2024, 2, 29, 23, 59)),
        _sale(2, datetime(2024, 3, 1, 0, 0)),
        _sale(3, datetime(2024, 3, 10, 23, 59)),
        _sale(4, datetime(2024, 3, 11, 0, 0)),
    ]

    assert [s.id for s in filter_records(sales, spec, SALE_RULES, NOW)] == [2, 3]


def test_month_shift_clamps_to_month_length():
    assert shift_months(datetime(2024, 3, 31, 12, 0), -1) == datetime(2024, 2, 29, 12, 0)
    assert shift_months(datetime(2024, 2, 29), -12) == datetime(2023, 2, 28)


def test_no_window_for_all_or_unset_range():
    assert date_window(FilterSpec(), NOW) is None
    assert date_window(FilterSpec(date_range=DateRange.ALL), NOW) is None


# ── Properties ──


def test_filtering_is_a_subset_and_idempotent():
    spec = FilterSpec(search_term="a", filters={"category": "Calzado"})

    once = filter_records(PRODUCTS, spec, PRODUCT_RULES, NOW)
    twice = filter_records(once, spec, PRODUCT_RULES, NOW)

    assert once == twice
    assert all(p in PRODUCTS for p in once)


def test_empty_spec_keeps_every_record_in_order():
    assert filter_records(PRODUCTS, FilterSpec(), PRODUCT_RULES, NOW) == PRODUCTS
