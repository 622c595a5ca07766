"""Types for the tax engine."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


class TaxType(str, Enum):
    """How a tax relates to the quoted amount."""

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


class TaxTypeState(str, Enum):
    """Committed tax type of a selection, with unresolved ids kept apart."""

    NOT_SET = "not_set"
    UNKNOWN = "unknown"
    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


@dataclass(frozen=True, slots=True)
class TaxSetting:
    """
    One entry of the tax catalog.

    Attributes:
        id: Stable identifier of the tax.
        name: Display label.
        rate: Percentage rate. Not clamped here.
        is_inclusive: True when the tax is already part of the quoted amount.
        is_active: Inactive entries are hidden from pickers but stay addressable.
        tax_type: Free-form category (gst, vat, ...). Descriptive only.
        description: Optional longer description.
    """

    id: str
    name: str
    rate: float
    is_inclusive: bool
    is_active: bool = True
    tax_type: str = ""
    description: str | None = None

    @property
    def kind(self) -> TaxType:
        """Inclusive or exclusive, as a TaxType."""
        return TaxType.INCLUSIVE if self.is_inclusive else TaxType.EXCLUSIVE

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> TaxSetting:
        """
        Build a TaxSetting from a settings-store row.

        The store keeps the rate in a `percentage` column and flags as 0/1
        integers; both spellings are accepted.

        Raises:
            KeyError: If the row has no id, or neither a rate nor a percentage.
        """
        rate = record["rate"] if "rate" in record else record["percentage"]
        return cls(
            id=str(record["id"]),
            name=str(record.get("name", "")),
            rate=float(rate or 0),
            is_inclusive=bool(record.get("is_inclusive", False)),
            is_active=bool(record.get("is_active", True)),
            tax_type=str(record.get("tax_type") or ""),
            description=record.get("description"),
        )


@dataclass(frozen=True, slots=True)
class TaxBreakdownItem:
    """
    One line of a tax calculation.

    Attributes:
        id: Catalog id of the tax.
        name: Display label of the tax.
        rate: Percentage rate used.
        amount: Computed tax in currency units.
        type: Formula that produced the amount.
    """

    id: str
    name: str
    rate: float
    amount: float
    type: TaxType


@dataclass(frozen=True, slots=True)
class TaxCalculationResult:
    """
    Outcome of applying a tax selection to a base amount.

    Attributes:
        base_amount: Amount the calculation started from.
        tax_amount: Sum of the breakdown amounts.
        total_amount: Payable total. Equals base_amount for inclusive taxes.
        tax_breakdown: Per-tax lines in selection order.
    """

    base_amount: float
    tax_amount: float
    total_amount: float
    tax_breakdown: tuple[TaxBreakdownItem, ...] = ()

    @classmethod
    def from_no_taxes(cls, base_amount: float) -> TaxCalculationResult:
        """Create a result with no taxes applied."""
        return cls(
            base_amount=base_amount,
            tax_amount=0,
            total_amount=base_amount,
            tax_breakdown=(),
        )

    @property
    def tax_type(self) -> TaxType | None:
        """Type of the first breakdown line, or None when nothing was applied."""
        if not self.tax_breakdown:
            return None
        return self.tax_breakdown[0].type


@dataclass(frozen=True, slots=True)
class TaxSelectionState:
    """
    Selection state backing a tax picker.

    Attributes:
        selected_taxes: Tax id to "is chosen" flag.
        tax_type: Type committed by the current selection, if any.
        available_taxes: Every active tax.
        filtered_taxes: Active taxes that can still be picked.
    """

    selected_taxes: dict[str, bool]
    tax_type: TaxType | None
    available_taxes: tuple[TaxSetting, ...]
    filtered_taxes: tuple[TaxSetting, ...]

    @property
    def selected_ids(self) -> list[str]:
        """Ids currently selected, in selection order."""
        return [tax_id for tax_id, chosen in self.selected_taxes.items() if chosen]


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class ReceiptTaxMapping:
    """
    A tax line stored against a receipt.

    Attributes:
        receipt_id: Receipt the tax was applied to.
        tax_setting_id: Catalog id of the applied tax.
        tax_name: Tax name at the time of the receipt.
        tax_type: Catalog category of the tax (gst, vat, ...).
        tax_percentage: Rate at the time of the receipt.
        is_inclusive: Whether the inclusive formula was used.
        base_amount: Amount the tax was computed from.
        tax_amount: Computed tax.
        id: Row id.
        created_at: ISO timestamp of creation.
    """

    receipt_id: str
    tax_setting_id: str
    tax_name: str
    tax_type: str
    tax_percentage: float
    is_inclusive: bool
    base_amount: float
    tax_amount: float
    id: str = field(default_factory=_new_id)
    created_at: str = field(default_factory=_now_iso)

    def to_record(self) -> dict[str, Any]:
        """Return the row as stored by the receipts store."""
        return {
            "id": self.id,
            "receipt_id": self.receipt_id,
            "tax_setting_id": self.tax_setting_id,
            "tax_name": self.tax_name,
            "tax_type": self.tax_type,
            "tax_percentage": self.tax_percentage,
            "is_inclusive": 1 if self.is_inclusive else 0,
            "base_amount": self.base_amount,
            "tax_amount": self.tax_amount,
            "created_at": self.created_at,
        }
