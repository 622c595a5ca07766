"""Tax engine package."""

from services.taxes.calculator import (
    calculate_tax_amounts,
    create_initial_tax_state,
    detect_tax_type_state,
    filter_taxes_by_type,
    format_tax_breakdown,
    get_current_tax_type,
    validate_tax_calculation,
    validate_tax_selection,
)
from services.taxes.catalog import (
    InMemoryTaxSettingsRepository,
    TaxSettingInput,
    TaxSettingsRepository,
)
from services.taxes.receipts import build_receipt_tax_mappings
from services.taxes.selection import TaxSelectionSession
from services.taxes.types import (
    ReceiptTaxMapping,
    TaxBreakdownItem,
    TaxCalculationResult,
    TaxSelectionState,
    TaxSetting,
    TaxType,
    TaxTypeState,
)

__all__ = [
    "InMemoryTaxSettingsRepository",
    "ReceiptTaxMapping",
    "TaxBreakdownItem",
    "TaxCalculationResult",
    "TaxSelectionSession",
    "TaxSelectionState",
    "TaxSetting",
    "TaxSettingInput",
    "TaxSettingsRepository",
    "TaxType",
    "TaxTypeState",
    "build_receipt_tax_mappings",
    "calculate_tax_amounts",
    "create_initial_tax_state",
    "detect_tax_type_state",
    "filter_taxes_by_type",
    "format_tax_breakdown",
    "get_current_tax_type",
    "validate_tax_calculation",
    "validate_tax_selection",
]
