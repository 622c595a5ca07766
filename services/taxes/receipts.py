"""Tax lines stored against receipts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.logging import get_logger
from services.taxes.types import ReceiptTaxMapping, TaxType

if TYPE_CHECKING:
    from collections.abc import Sequence

    from services.taxes.types import TaxCalculationResult, TaxSetting

logger = get_logger(__name__)


def build_receipt_tax_mappings(
    receipt_id: str,
    result: TaxCalculationResult,
    taxes: Sequence[TaxSetting],
) -> list[ReceiptTaxMapping]:
    """
    Turn a calculation into the tax rows saved with a receipt.

    Name and rate are copied from the breakdown so the receipt keeps the
    values it was issued with even if the catalog entry changes later.

    Args:
        receipt_id: Receipt being saved.
        result: Calculation for the receipt's amount.
        taxes: Catalog used for the calculation, for the tax category.

    Returns:
        One mapping per breakdown line, in breakdown order.
    """
    categories = {tax.id: tax.tax_type for tax in reversed(taxes)}

    mappings = [
        ReceiptTaxMapping(
            receipt_id=receipt_id,
            tax_setting_id=item.id,
            tax_name=item.name,
            tax_type=categories.get(item.id, ""),
            tax_percentage=item.rate,
            is_inclusive=item.type == TaxType.INCLUSIVE,
            base_amount=result.base_amount,
            tax_amount=item.amount,
        )
        for item in result.tax_breakdown
    ]

    logger.debug(
        "Built receipt tax mappings",
        receipt_id=receipt_id,
        count=len(mappings),
        tax_amount=result.tax_amount,
    )
    return mappings
