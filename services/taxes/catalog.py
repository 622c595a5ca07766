"""Tax catalog: input validation and the settings repository."""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Literal, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.logging import get_logger
from core.result import Failure, Result, failure, success
from services.taxes.errors import ErrorCode, TaxCatalogError, TaxNotFoundError
from services.taxes.types import TaxSetting

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = get_logger(__name__)

TaxCategory = Literal["cgst", "sgst", "igst", "gst", "vat", "service_tax", "other"]

TAX_TYPE_LABELS: dict[str, str] = {
    "cgst": "CGST",
    "sgst": "SGST",
    "igst": "IGST",
    "gst": "GST",
    "vat": "VAT",
    "service_tax": "Service Tax",
    "other": "Other",
}


class TaxSettingInput(BaseModel):
    """
    Create/edit form data for a tax setting.

    The calculation engine trusts the catalog, so rates are bounded here,
    before they reach the store.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1, description="Tax name")
    tax_type: TaxCategory = Field(default="other", description="Tax category")
    rate: float = Field(ge=0, le=100, description="Percentage rate")
    is_inclusive: bool = Field(default=False, description="Rate is part of the quoted price")
    is_active: bool = Field(default=True, description="Shown in tax pickers")
    description: str | None = Field(default=None, description="Optional description")

    @field_validator("tax_type", mode="before")
    @classmethod
    def normalize_tax_type(cls, v: str) -> str:
        """Accept labels in any case (GST, Service_Tax)."""
        return str(v).strip().lower()

    def tax_type_label(self) -> str:
        """Display label of the tax category."""
        return TAX_TYPE_LABELS[self.tax_type]

    def to_setting(self, tax_id: str) -> TaxSetting:
        """Build the catalog entry stored under `tax_id`."""
        return TaxSetting(
            id=tax_id,
            name=self.name,
            rate=self.rate,
            is_inclusive=self.is_inclusive,
            is_active=self.is_active,
            tax_type=self.tax_type,
            description=self.description,
        )


def parse_tax_input(data: Mapping[str, Any]) -> Result[TaxSettingInput, TaxCatalogError]:
    """
    Validate raw form data.

    Args:
        data: Raw field values.

    Returns:
        Result containing the validated input or an INVALID_INPUT error.
    """
    try:
        return success(TaxSettingInput.model_validate(dict(data)))
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        return failure(
            TaxCatalogError(
                code=ErrorCode.INVALID_INPUT,
                message=f"Invalid tax setting: {fields}",
                details=str(e),
            )
        )


@runtime_checkable
class TaxSettingsRepository(Protocol):
    """
    Store of tax settings.

    Deleting a tax only deactivates it, so receipts referring to it keep
    resolving.
    """

    def list_active(self) -> list[TaxSetting]:
        """Active taxes ordered by tax category."""
        ...

    def list_all(self) -> list[TaxSetting]:
        """Every tax, active or not."""
        ...

    def get(self, tax_id: str) -> Result[TaxSetting, TaxCatalogError]:
        """Fetch a tax by id, active or not."""
        ...

    def create(
        self, data: TaxSettingInput | Mapping[str, Any]
    ) -> Result[TaxSetting, TaxCatalogError]:
        """Validate and store a new tax."""
        ...

    def update(
        self, tax_id: str, data: TaxSettingInput | Mapping[str, Any]
    ) -> Result[TaxSetting, TaxCatalogError]:
        """Validate and replace an existing tax."""
        ...

    def deactivate(self, tax_id: str) -> Result[TaxSetting, TaxCatalogError]:
        """Soft-delete a tax."""
        ...


class InMemoryTaxSettingsRepository:
    """TaxSettingsRepository kept in a dict, in insertion order."""

    def __init__(self, taxes: Iterable[TaxSetting] = ()) -> None:
        """
        Initialize the repository.

        Args:
            taxes: Initial catalog.
        """
        self._taxes: dict[str, TaxSetting] = {tax.id: tax for tax in taxes}

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> InMemoryTaxSettingsRepository:
        """Build a repository from settings-store rows."""
        return cls(TaxSetting.from_record(record) for record in records)

    def list_active(self) -> list[TaxSetting]:
        active = [tax for tax in self._taxes.values() if tax.is_active]
        return sorted(active, key=lambda tax: tax.tax_type)

    def list_all(self) -> list[TaxSetting]:
        return list(self._taxes.values())

    def get(self, tax_id: str) -> Result[TaxSetting, TaxCatalogError]:
        tax = self._taxes.get(tax_id)
        if tax is None:
            return failure(TaxNotFoundError(tax_id))
        return success(tax)

    def create(
        self, data: TaxSettingInput | Mapping[str, Any]
    ) -> Result[TaxSetting, TaxCatalogError]:
        parsed = self._validate(data)
        if isinstance(parsed, Failure):
            logger.warning("Tax setting rejected", error=str(parsed.error))
            return failure(parsed.error)

        tax = parsed.unwrap().to_setting(str(uuid.uuid4()))
        self._taxes[tax.id] = tax
        logger.info("Tax setting created", tax_id=tax.id, rate=tax.rate)
        return success(tax)

    def update(
        self, tax_id: str, data: TaxSettingInput | Mapping[str, Any]
    ) -> Result[TaxSetting, TaxCatalogError]:
        if tax_id not in self._taxes:
            return failure(TaxNotFoundError(tax_id))

        parsed = self._validate(data)
        if isinstance(parsed, Failure):
            logger.warning("Tax setting update rejected", tax_id=tax_id, error=str(parsed.error))
            return failure(parsed.error)

        tax = parsed.unwrap().to_setting(tax_id)
        self._taxes[tax_id] = tax
        logger.info("Tax setting updated", tax_id=tax_id, rate=tax.rate)
        return success(tax)

    def deactivate(self, tax_id: str) -> Result[TaxSetting, TaxCatalogError]:
        tax = self._taxes.get(tax_id)
        if tax is None:
            return failure(TaxNotFoundError(tax_id))

        tax = replace(tax, is_active=False)
        self._taxes[tax_id] = tax
        logger.info("Tax setting deactivated", tax_id=tax_id)
        return success(tax)

    @staticmethod
    def _validate(
        data: TaxSettingInput | Mapping[str, Any],
    ) -> Result[TaxSettingInput, TaxCatalogError]:
        if isinstance(data, TaxSettingInput):
            return success(data)
        return parse_tax_input(data)
