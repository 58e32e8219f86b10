from decimal import Decimal

import pytest

from field_ops.core.numbering import format_document_number
from field_ops.core.pricing import calculate_totals, line_total, parse_tax_rate, to_cents, to_decimal
from field_ops.models import LineItem


class TestPricing:
    """Unit tests for the pricing calculator"""

    def test_invoice_totals_at_standard_rate(self):
        """2 x $50 at 7.75% gives 100 / 7.75 / 107.75"""
        totals = calculate_totals([{"quantity": 2, "unit_price": 50}], "7.75")

        assert totals.subtotal == Decimal("100.00")
        assert totals.tax == Decimal("7.75")
        assert totals.total == Decimal("107.75")

    def test_zero_rate(self):
        totals = calculate_totals([{"quantity": 1, "unit_price": 200}], "0")

        assert totals.subtotal == Decimal("200.00")
        assert totals.tax == Decimal("0.00")
        assert totals.total == Decimal("200.00")

    def test_empty_items(self):
        totals = calculate_totals([], "7.75")

        assert totals.as_dict() == {
            "subtotal": Decimal("0.00"),
            "tax": Decimal("0.00"),
            "total": Decimal("0.00"),
        }

    def test_missing_fields_contribute_zero(self):
        items = [{"quantity": 3}, {"unit_price": 10}, {"quantity": 1, "unit_price": 5}]
        totals = calculate_totals(items, "0")

        assert totals.subtotal == Decimal("5.00")

    def test_unparseable_tax_rate_is_zero(self):
        assert parse_tax_rate("abc") == Decimal(0)
        assert parse_tax_rate(None) == Decimal(0)
        assert calculate_totals([{"quantity": 1, "unit_price": 10}], "abc").total == Decimal("10.00")

    def test_tax_rounds_half_up(self):
        # 10.10 * 7.75% = 0.78275
        totals = calculate_totals([{"quantity": 1, "unit_price": "10.10"}], "7.75")

        assert totals.tax == Decimal("0.78")
        assert totals.total == Decimal("10.88")

        # 0.30 * 5% = 0.015
        assert calculate_totals([{"quantity": 1, "unit_price": "0.30"}], "5").tax == Decimal("0.02")

    def test_no_float_drift_over_many_items(self):
        items = [{"quantity": 1, "unit_price": 0.1} for _ in range(10)]
        totals = calculate_totals(items, "0")

        assert totals.subtotal == Decimal("1.00")

    def test_line_total_from_model(self):
        item = LineItem(description="Valve", quantity=Decimal("1.5"), unit_price=Decimal("33.33"))

        assert line_total(item) == Decimal("50.00")
        assert item.line_total == Decimal("50.00")

    def test_to_cents_rejects_oversized_values(self):
        with pytest.raises(ValueError):
            to_cents(Decimal("1e30"))

    def test_largest_accepted_line_still_prices(self):
        totals = calculate_totals([{"quantity": "999999", "unit_price": "999999999999.99"}], "100")

        assert totals.subtotal == Decimal("999998999999990000.01")
        assert totals.total == totals.subtotal * 2

    def test_to_decimal_rejects_non_finite(self):
        assert to_decimal("NaN") == Decimal(0)
        assert to_decimal(float("inf")) == Decimal(0)
        assert to_decimal(True) == Decimal(0)


class TestDocumentNumbers:
    """Unit tests for quote/invoice number formatting"""

    def test_zero_padded(self):
        assert format_document_number("INV-", 1) == "INV-0001"
        assert format_document_number("Q-", 42) == "Q-0042"

    def test_wider_than_padding(self):
        assert format_document_number("INV-", 12345) == "INV-12345"

    def test_sequence_must_be_positive(self):
        with pytest.raises(ValueError):
            format_document_number("INV-", 0)

