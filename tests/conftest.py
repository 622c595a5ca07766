"""
Pytest configuration and fixtures for the test suite.

This module contains shared fixtures used across all tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import structlog

from core.config import TaxSettings, get_settings
from core.logging import clear_context
from services.taxes.types import TaxSetting

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> None:
    """Drop cached settings so env changes in one test do not leak."""
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo logging configuration done by a test (it may target a captured stream)."""
    yield
    clear_context()
    structlog.reset_defaults()


@pytest.fixture()
def catalog() -> list[TaxSetting]:
    """Two inclusive, two exclusive and one inactive inclusive tax."""
    return [
        TaxSetting(
            id="1", name="GST (Inclusive)", rate=18, is_inclusive=True, tax_type="GST"
        ),
        TaxSetting(
            id="2", name="VAT (Inclusive)", rate=12, is_inclusive=True, tax_type="VAT"
        ),
        TaxSetting(
            id="3",
            name="Service Tax (Exclusive)",
            rate=15,
            is_inclusive=False,
            tax_type="Service",
        ),
        TaxSetting(
            id="4",
            name="Luxury Tax (Exclusive)",
            rate=10,
            is_inclusive=False,
            tax_type="Luxury",
        ),
        TaxSetting(
            id="5",
            name="Inactive Tax",
            rate=5,
            is_inclusive=True,
            is_active=False,
            tax_type="Inactive",
        ),
    ]


@pytest.fixture()
def tax_settings() -> TaxSettings:
    """Default tax display settings, independent of the environment."""
    return TaxSettings(currency_symbol="₹", validation_tolerance=0.01, display_decimals=2)
