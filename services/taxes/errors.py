"""Error types for tax selection and catalog operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for tax errors."""

    UNKNOWN_TAX = "unknown_tax"
    TYPE_CONFLICT = "type_conflict"
    MIXED_SELECTION = "mixed_selection"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True, slots=True)
class TaxSelectionError:
    """
    A selection change that was refused.

    Attributes:
        code: Why the change was refused.
        message: Human-readable message.
        tax_id: Tax the change was about, when there is a single one.
    """

    code: ErrorCode
    message: str
    tax_id: str | None = None

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"


@dataclass(frozen=True, slots=True)
class TaxCatalogError:
    """
    A catalog operation that failed.

    Attributes:
        code: Error code.
        message: Human-readable message.
        tax_id: Tax the operation targeted, if any.
        details: Validation details, if any.
    """

    code: ErrorCode
    message: str
    tax_id: str | None = None
    details: str | None = None

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.tax_id:
            return f"[{self.tax_id}] {self.code.value}: {self.message}"
        return f"{self.code.value}: {self.message}"


def TaxNotFoundError(tax_id: str) -> TaxCatalogError:
    """Create a not-found error for a tax id."""
    return TaxCatalogError(
        code=ErrorCode.NOT_FOUND,
        message="Tax setting not found",
        tax_id=tax_id,
    )


def TypeConflictError(tax_id: str, committed: str) -> TaxSelectionError:
    """Create an error for a tax whose type differs from the selection's."""
    return TaxSelectionError(
        code=ErrorCode.TYPE_CONFLICT,
        message=f"Cannot mix with the selected {committed} taxes",
        tax_id=tax_id,
    )
