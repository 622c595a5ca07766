"""Stateful tax selection for receipt and invoice forms."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from core.config import get_settings
from core.logging import get_logger
from core.result import Result, failure, success
from services.taxes.calculator import (
    calculate_tax_amounts,
    create_initial_tax_state,
    filter_taxes_by_type,
    format_tax_breakdown,
    get_current_tax_type,
    validate_tax_calculation,
    validate_tax_selection,
)
from services.taxes.errors import (
    ErrorCode,
    TaxSelectionError,
    TypeConflictError,
)
from services.taxes.types import TaxCalculationResult, TaxSelectionState, TaxType

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from core.config import TaxSettings
    from services.taxes.types import TaxSetting

logger = get_logger(__name__)

NO_TAXES_LABEL = "No taxes selected"
TYPE_LABELS: dict[TaxType, str] = {
    TaxType.INCLUSIVE: "Tax Inclusive",
    TaxType.EXCLUSIVE: "Tax Exclusive",
}


class TaxSelectionSession:
    """
    Tax picker state for one receipt being edited.

    Keeps the selection homogeneous (all inclusive or all exclusive),
    narrows the pickable taxes once a type is committed and recomputes the
    calculation after every change. `on_change` receives each new result,
    including the one computed on construction.

    Example:
        >>> session = TaxSelectionSession(catalog, base_amount=1000)
        >>> session.toggle_tax("3").is_success()
        True
        >>> session.calculation_result.total_amount
        1150.0
    """

    def __init__(
        self,
        taxes: Sequence[TaxSetting],
        base_amount: float = 0,
        on_change: Callable[[TaxCalculationResult], None] | None = None,
        tax_settings: TaxSettings | None = None,
    ) -> None:
        """
        Initialize the session.

        Args:
            taxes: Tax catalog as fetched from the settings store.
            base_amount: Amount the taxes apply to.
            on_change: Called with every recomputed result.
            tax_settings: Display/validation settings (defaults to TAX_* env).
        """
        self._taxes: tuple[TaxSetting, ...] = tuple(taxes)
        self._base_amount = base_amount
        self._on_change = on_change
        self._tax_settings = tax_settings or get_settings().tax
        self._state = create_initial_tax_state(self._taxes)
        self._result = TaxCalculationResult.from_no_taxes(base_amount)
        self._refresh(dict(self._state.selected_taxes))

    @property
    def taxes(self) -> tuple[TaxSetting, ...]:
        """Catalog the session works with."""
        return self._taxes

    @property
    def base_amount(self) -> float:
        """Amount the taxes apply to."""
        return self._base_amount

    @property
    def state(self) -> TaxSelectionState:
        """Snapshot of the selection state; writing to it does not affect the session."""
        return replace(self._state, selected_taxes=dict(self._state.selected_taxes))

    @property
    def selected_taxes(self) -> dict[str, bool]:
        """Copy of the selection map."""
        return dict(self._state.selected_taxes)

    @property
    def tax_type(self) -> TaxType | None:
        """Type committed by the current selection."""
        return self._state.tax_type

    @property
    def filtered_taxes(self) -> tuple[TaxSetting, ...]:
        """Taxes that can still be picked."""
        return self._state.filtered_taxes

    @property
    def calculation_result(self) -> TaxCalculationResult:
        """Result for the current selection and base amount."""
        return self._result

    def toggle_tax(self, tax_id: str) -> Result[dict[str, bool], TaxSelectionError]:
        """
        Select or deselect a tax.

        Deselecting always succeeds. Selecting is refused for unknown ids
        and for taxes whose type differs from the current selection; the
        state is left untouched in that case.

        Args:
            tax_id: Tax to toggle.

        Returns:
            Result containing the new selection map or the refusal.
        """
        selection = dict(self._state.selected_taxes)

        if selection.get(tax_id):
            selection[tax_id] = False
            logger.debug("Tax deselected", tax_id=tax_id)
            self._refresh(selection)
            return success(dict(selection))

        if not validate_tax_selection(selection, tax_id, self._taxes):
            error = self._refusal_for(tax_id)
            logger.warning("Tax selection refused", tax_id=tax_id, code=error.code.value)
            return failure(error)

        selection[tax_id] = True
        logger.debug("Tax selected", tax_id=tax_id)
        self._refresh(selection)
        return success(dict(selection))

    def clear_all_taxes(self) -> None:
        """Deselect every tax."""
        cleared = dict.fromkeys(self._state.selected_taxes, False)
        self._refresh(cleared)

    def set_tax_selection(
        self,
        selection: Mapping[str, bool],
    ) -> Result[dict[str, bool], TaxSelectionError]:
        """
        Replace the selection, e.g. when reopening a saved receipt.

        An empty selection clears everything. A selection mixing inclusive
        and exclusive taxes is refused and the state is left untouched.

        Args:
            selection: Tax id to "is chosen" flag.

        Returns:
            Result containing the applied selection map or the refusal.
        """
        chosen_ids = {tax_id for tax_id, chosen in selection.items() if chosen}
        chosen = [tax for tax in self._taxes if tax.id in chosen_ids]

        if not chosen:
            self.clear_all_taxes()
            return success(self.selected_taxes)

        first_type = chosen[0].is_inclusive
        if any(tax.is_inclusive != first_type for tax in chosen):
            logger.warning(
                "Invalid tax selection: mixed inclusive and exclusive taxes",
                tax_ids=sorted(chosen_ids),
            )
            return failure(
                TaxSelectionError(
                    code=ErrorCode.MIXED_SELECTION,
                    message="Selection mixes inclusive and exclusive taxes",
                )
            )

        self._refresh(dict(selection))
        return success(self.selected_taxes)

    def set_taxes(self, taxes: Sequence[TaxSetting]) -> None:
        """Swap in a freshly fetched catalog and reset the selection."""
        self._taxes = tuple(taxes)
        self._state = create_initial_tax_state(self._taxes)
        self._refresh(dict(self._state.selected_taxes))

    def set_base_amount(self, base_amount: float) -> None:
        """Change the base amount and recompute."""
        self._base_amount = base_amount
        self._refresh(dict(self._state.selected_taxes))

    def is_tax_selectable(self, tax_id: str) -> bool:
        """
        Check whether a tax can be clicked in the picker.

        Unknown and inactive taxes are not selectable. Selected taxes are,
        so they can be deselected.
        """
        tax = next((t for t in self._taxes if t.id == tax_id), None)
        if tax is None or not tax.is_active:
            return False
        if self._state.selected_taxes.get(tax_id):
            return True
        if self._state.tax_type is None:
            return True
        return tax.kind == self._state.tax_type

    def get_tax_type_label(self) -> str:
        """Human-readable label for the committed type."""
        if self._state.tax_type is None:
            return NO_TAXES_LABEL
        return TYPE_LABELS[self._state.tax_type]

    def format_breakdown(self) -> str:
        """Receipt line for the current result."""
        return format_tax_breakdown(
            self._result.tax_breakdown,
            currency_symbol=self._tax_settings.currency_symbol,
            decimals=self._tax_settings.display_decimals,
        )

    def is_result_valid(self) -> bool:
        """Check the current result before it is displayed or stored."""
        return validate_tax_calculation(
            self._result,
            tolerance=self._tax_settings.validation_tolerance,
        )

    def _refusal_for(self, tax_id: str) -> TaxSelectionError:
        if all(tax.id != tax_id for tax in self._taxes):
            return TaxSelectionError(
                code=ErrorCode.UNKNOWN_TAX,
                message="Tax is not in the catalog",
                tax_id=tax_id,
            )
        committed = self._state.tax_type.value if self._state.tax_type else "other"
        return TypeConflictError(tax_id, committed)

    def _refresh(self, selection: dict[str, bool]) -> None:
        tax_type = get_current_tax_type(selection, self._taxes)
        self._state = replace(
            self._state,
            selected_taxes=selection,
            tax_type=tax_type,
            filtered_taxes=tuple(filter_taxes_by_type(self._taxes, tax_type)),
        )
        self._result = calculate_tax_amounts(self._base_amount, selection, self._taxes)
        if self._on_change is not None:
            self._on_change(self._result)
