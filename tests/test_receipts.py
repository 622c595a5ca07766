"""Tests for receipt tax mappings."""

from __future__ import annotations

from datetime import datetime

import pytest

from services.taxes import (
    TaxCalculationResult,
    TaxSetting,
    build_receipt_tax_mappings,
    calculate_tax_amounts,
)


class TestBuildReceiptTaxMappings:
    """Tests for build_receipt_tax_mappings."""

    def test_exclusive_lines(self, catalog: list[TaxSetting]) -> None:
        """Each breakdown line should become one mapping."""
        result = calculate_tax_amounts(1000, {"3": True, "4": True}, catalog)

        mappings = build_receipt_tax_mappings("R-100", result, catalog)

        assert [m.tax_setting_id for m in mappings] == ["3", "4"]
        service = mappings[0]
        assert service.receipt_id == "R-100"
        assert service.tax_name == "Service Tax (Exclusive)"
        assert service.tax_type == "Service"
        assert service.tax_percentage == 15
        assert service.is_inclusive is False
        assert service.base_amount == 1000
        assert service.tax_amount == 150

    def test_inclusive_lines(self, catalog: list[TaxSetting]) -> None:
        """Inclusive calculations should be flagged inclusive."""
        result = calculate_tax_amounts(1000, {"1": True}, catalog)

        (mapping,) = build_receipt_tax_mappings("R-101", result, catalog)

        assert mapping.is_inclusive is True
        assert mapping.tax_amount == pytest.approx(152.54, abs=0.005)

    def test_no_taxes(self, catalog: list[TaxSetting]) -> None:
        """A zero-tax result should produce no mappings."""
        result = TaxCalculationResult.from_no_taxes(1000)

        assert build_receipt_tax_mappings("R-102", result, catalog) == []

    def test_category_missing_from_catalog(self) -> None:
        """A tax no longer in the catalog keeps an empty category."""
        taxes = [TaxSetting(id="g", name="GST", rate=18, is_inclusive=False, tax_type="gst")]
        result = calculate_tax_amounts(100, {"g": True}, taxes)

        (mapping,) = build_receipt_tax_mappings("R-103", result, [])

        assert mapping.tax_type == ""
        assert mapping.tax_name == "GST"


class TestReceiptTaxMappingRecord:
    """Tests for ReceiptTaxMapping.to_record."""

    def test_record_shape(self, catalog: list[TaxSetting]) -> None:
        """to_record should produce a store row with 0/1 flags."""
        result = calculate_tax_amounts(1000, {"2": True}, catalog)
        (mapping,) = build_receipt_tax_mappings("R-200", result, catalog)

        record = mapping.to_record()

        assert set(record) == {
            "id",
            "receipt_id",
            "tax_setting_id",
            "tax_name",
            "tax_type",
            "tax_percentage",
            "is_inclusive",
            "base_amount",
            "tax_amount",
            "created_at",
        }
        assert record["is_inclusive"] == 1
        assert record["tax_setting_id"] == "2"
        assert record["id"] == mapping.id
        assert datetime.fromisoformat(record["created_at"]).tzinfo is not None

    def test_ids_are_unique(self, catalog: list[TaxSetting]) -> None:
        """Every mapping should get its own row id."""
        result = calculate_tax_amounts(1000, {"3": True, "4": True}, catalog)

        mappings = build_receipt_tax_mappings("R-201", result, catalog)

        assert mappings[0].id != mappings[1].id
