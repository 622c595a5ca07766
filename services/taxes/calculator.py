"""
Tax engine: catalog filtering, selection rules, amount math and formatting.

All functions here are pure. They never mutate the catalog or the selection
they are given and never raise on odd input; negative rates or amounts flow
through the formulas unchanged and are caught, if at all, by
`validate_tax_calculation`.

Inclusive taxes are already part of the quoted amount:
    tax = base * rate / (100 + rate), total = base
Exclusive taxes are added on top:
    tax = base * rate / 100, total = base + tax
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import TYPE_CHECKING

from services.taxes.types import (
    TaxBreakdownItem,
    TaxCalculationResult,
    TaxSelectionState,
    TaxSetting,
    TaxType,
    TaxTypeState,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

NO_TAXES_TEXT = "No taxes applied"
DEFAULT_CURRENCY_SYMBOL = "₹"
VALIDATION_TOLERANCE = 0.01
DISPLAY_DECIMALS = 2

# Wide enough to quantize any finite float to a handful of decimals.
_WIDE_CONTEXT = Context(prec=400)


def _selected_ids(selection: Mapping[str, bool]) -> list[str]:
    return [tax_id for tax_id, chosen in selection.items() if chosen]


def _index_by_id(taxes: Iterable[TaxSetting]) -> dict[str, TaxSetting]:
    # First entry wins on duplicate ids.
    index: dict[str, TaxSetting] = {}
    for tax in taxes:
        index.setdefault(tax.id, tax)
    return index


def filter_taxes_by_type(
    taxes: Sequence[TaxSetting],
    selected_type: TaxType | str | None,
) -> list[TaxSetting]:
    """
    Return the active taxes that may still be picked.

    Args:
        taxes: Full catalog, inactive entries included.
        selected_type: Type committed by the current selection, or None.

    Returns:
        Active taxes in catalog order; restricted to the committed type
        when one is given.
    """
    if not selected_type:
        return [tax for tax in taxes if tax.is_active]

    want_inclusive = selected_type == TaxType.INCLUSIVE
    return [tax for tax in taxes if tax.is_active and tax.is_inclusive == want_inclusive]


def validate_tax_selection(
    current_selection: Mapping[str, bool],
    new_tax_id: str,
    taxes: Sequence[TaxSetting],
) -> bool:
    """
    Check whether selecting `new_tax_id` keeps the selection homogeneous.

    Unknown candidates are rejected. The first pick is always allowed;
    activity is not checked here. Selected ids missing from the catalog
    are ignored when comparing types.

    Args:
        current_selection: Tax id to "is chosen" flag.
        new_tax_id: Candidate tax id.
        taxes: Full catalog.

    Returns:
        True if the candidate may be added.
    """
    index = _index_by_id(taxes)
    new_tax = index.get(new_tax_id)
    if new_tax is None:
        return False

    selected = _selected_ids(current_selection)
    if not selected:
        return True

    return all(
        index[tax_id].is_inclusive == new_tax.is_inclusive
        for tax_id in selected
        if tax_id in index
    )


def get_current_tax_type(
    selected_taxes: Mapping[str, bool],
    taxes: Sequence[TaxSetting],
) -> TaxType | None:
    """
    Return the type committed by the first selected tax.

    None means either that nothing is selected or that the first selected
    id is not in the catalog; use `detect_tax_type_state` to tell them apart.
    """
    state = detect_tax_type_state(selected_taxes, taxes)
    if state is TaxTypeState.INCLUSIVE:
        return TaxType.INCLUSIVE
    if state is TaxTypeState.EXCLUSIVE:
        return TaxType.EXCLUSIVE
    return None


def detect_tax_type_state(
    selected_taxes: Mapping[str, bool],
    taxes: Sequence[TaxSetting],
) -> TaxTypeState:
    """Classify the selection as not set, unknown, inclusive or exclusive."""
    selected = _selected_ids(selected_taxes)
    if not selected:
        return TaxTypeState.NOT_SET

    first = _index_by_id(taxes).get(selected[0])
    if first is None:
        return TaxTypeState.UNKNOWN
    return TaxTypeState.INCLUSIVE if first.is_inclusive else TaxTypeState.EXCLUSIVE


def calculate_inclusive_tax(base_amount: float, rate: float) -> float:
    """Tax contained in `base_amount` at `rate` percent."""
    return base_amount * rate / (100 + rate)


def calculate_exclusive_tax(base_amount: float, rate: float) -> float:
    """Tax added on top of `base_amount` at `rate` percent."""
    return base_amount * rate / 100


def calculate_tax_amounts(
    base_amount: float,
    selected_taxes: Mapping[str, bool],
    taxes: Sequence[TaxSetting],
) -> TaxCalculationResult:
    """
    Apply the selected taxes to a base amount.

    The formula is chosen from the type of the first selected tax and used
    for every selected tax; a mixed selection is not re-checked here. When
    the first selected id is not in the catalog the exclusive formula is
    used. No rounding is applied.

    Args:
        base_amount: Quoted amount.
        selected_taxes: Tax id to "is chosen" flag, in selection order.
        taxes: Full catalog.

    Returns:
        TaxCalculationResult with one breakdown line per resolved tax.
    """
    index = _index_by_id(taxes)
    applied = [index[tax_id] for tax_id in _selected_ids(selected_taxes) if tax_id in index]

    if not applied:
        return TaxCalculationResult.from_no_taxes(base_amount)

    if get_current_tax_type(selected_taxes, taxes) is TaxType.INCLUSIVE:
        tax_type = TaxType.INCLUSIVE
        formula = calculate_inclusive_tax
    else:
        tax_type = TaxType.EXCLUSIVE
        formula = calculate_exclusive_tax

    breakdown: list[TaxBreakdownItem] = []
    total_tax = 0.0
    for tax in applied:
        amount = formula(base_amount, tax.rate)
        total_tax += amount
        breakdown.append(
            TaxBreakdownItem(
                id=tax.id,
                name=tax.name,
                rate=tax.rate,
                amount=amount,
                type=tax_type,
            )
        )

    if tax_type is TaxType.INCLUSIVE:
        total_amount = base_amount
    else:
        total_amount = base_amount + total_tax

    return TaxCalculationResult(
        base_amount=base_amount,
        tax_amount=total_tax,
        total_amount=total_amount,
        tax_breakdown=tuple(breakdown),
    )


def _format_non_finite(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return "Infinity" if value > 0 else "-Infinity"


def format_rate(rate: float) -> str:
    """
    Render a rate the way receipts print it: 18, 12.5, 0.25, 1e-7.

    Uses the shortest round-trip digits, in plain notation for decimal
    exponents from -7 to 20 and as `<mantissa>e<sign><exp>` outside it.
    """
    value = float(rate)
    if not math.isfinite(value):
        return _format_non_finite(value)
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = int(exponent) + k

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        body = "0." + "0" * -n + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        body = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + body


def format_amount(amount: float, decimals: int = DISPLAY_DECIMALS) -> str:
    """
    Render an amount with a fixed number of decimals.

    Rounds the exact binary value half up, so 10.125 prints as 10.13.
    """
    value = float(amount)
    if not math.isfinite(value):
        return _format_non_finite(value)
    if value == 0:
        value = 0.0

    quantum = Decimal(10) ** -decimals
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=_WIDE_CONTEXT)
    return format(rounded, "f")


def format_tax_breakdown(
    breakdown: Sequence[TaxBreakdownItem],
    *,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    decimals: int = DISPLAY_DECIMALS,
) -> str:
    """
    Render a breakdown as a single receipt line.

    Example:
        "Tax Exclusive - Service Tax (15%): ₹150.00, Luxury Tax (10%): ₹100.00"
    """
    if not breakdown:
        return NO_TAXES_TEXT

    header = "Tax Inclusive" if breakdown[0].type == TaxType.INCLUSIVE else "Tax Exclusive"
    lines = ", ".join(
        f"{item.name} ({format_rate(item.rate)}%): "
        f"{currency_symbol}{format_amount(item.amount, decimals)}"
        for item in breakdown
    )
    return f"{header} - {lines}"


def validate_tax_calculation(
    result: TaxCalculationResult,
    *,
    tolerance: float = VALIDATION_TOLERANCE,
) -> bool:
    """
    Sanity-check a calculation result.

    Rejects negative amounts and breakdowns whose sum drifts from the total
    tax by more than `tolerance`. The inclusive/exclusive relation between
    base and total is not checked.
    """
    if result.base_amount < 0 or result.tax_amount < 0 or result.total_amount < 0:
        return False

    breakdown_total = sum(item.amount for item in result.tax_breakdown)
    return abs(breakdown_total - result.tax_amount) <= tolerance


def create_initial_tax_state(taxes: Sequence[TaxSetting]) -> TaxSelectionState:
    """
    Build the selection state for a freshly loaded catalog.

    Every id, active or not, starts unselected. No type is committed, so
    the filtered list is every active tax.
    """
    active = tuple(tax for tax in taxes if tax.is_active)
    return TaxSelectionState(
        selected_taxes={tax.id: False for tax in taxes},
        tax_type=None,
        available_taxes=active,
        filtered_taxes=active,
    )
