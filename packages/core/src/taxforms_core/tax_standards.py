"""Statutory figures used when preparing information returns.

This module holds the published IRS/SSA numbers that drive year-end form
preparation: the 1099 filing threshold, the payroll tax rates and the
social security wage base for each tax year. Deployments override any of
them per tax year through ``TaxFormsConfig.tax_years``.

Sources:
- Social security wage base: https://www.ssa.gov/oact/cola/cbb.html
- Form 1099-NEC/MISC instructions (reporting threshold)
- Publication 15 (Circular E), FICA rates

Updated: tax year 2025
"""

from datetime import date
from decimal import Decimal
from typing import Optional


# =============================================================================
# VERSION TRACKING
# =============================================================================

TAX_STANDARDS_VERSION = "2025"


def get_tax_standards_version() -> str:
    """Return current statutory table version."""
    return TAX_STANDARDS_VERSION


# =============================================================================
# INFORMATION RETURN THRESHOLDS
# =============================================================================

FORM_1099_THRESHOLD = Decimal("600")

# Anything above this is almost certainly a data entry error
LARGE_AMOUNT_WARNING = Decimal("10000000")

# Withholding reconciliation tolerance for rounding across pay periods
RECONCILIATION_TOLERANCE = Decimal("1.00")


# =============================================================================
# FICA
# =============================================================================

SOCIAL_SECURITY_RATE = Decimal("0.062")
MEDICARE_RATE = Decimal("0.0145")

# Employee social security wage base by tax year (update annually)
SOCIAL_SECURITY_WAGE_BASE = {
    2021: Decimal("142800"),
    2022: Decimal("147000"),
    2023: Decimal("160200"),
    2024: Decimal("168600"),
    2025: Decimal("176100"),
}


def get_social_security_wage_base(tax_year: int) -> Decimal:
    """Get the social security wage base for a tax year.

    Years before the table use the earliest entry; years after it use the
    latest one until the table is updated.

    Args:
        tax_year: Calendar tax year

    Returns:
        Maximum wages subject to social security tax
    """
    if tax_year in SOCIAL_SECURITY_WAGE_BASE:
        return SOCIAL_SECURITY_WAGE_BASE[tax_year]
    known_years = sorted(SOCIAL_SECURITY_WAGE_BASE)
    if tax_year < known_years[0]:
        return SOCIAL_SECURITY_WAGE_BASE[known_years[0]]
    return SOCIAL_SECURITY_WAGE_BASE[known_years[-1]]


# =============================================================================
# CALENDAR
# =============================================================================

def default_tax_year(today: Optional[date] = None) -> int:
    """Return the tax year forms are normally prepared for: last calendar year."""
    today = today or date.today()
    return today.year - 1


def tax_year_bounds(tax_year: int) -> tuple[date, date]:
    """Return the first and last day of a calendar tax year."""
    return date(tax_year, 1, 1), date(tax_year, 12, 31)


def filing_deadline(tax_year: int) -> date:
    """Recipient copies of 1099-NEC and W-2 are due January 31 of the next year."""
    return date(tax_year + 1, 1, 31)


def format_long_date(value: date) -> str:
    """Format a date as "January 31, 2025"."""
    return f"{value:%B} {value.day}, {value.year}"


def format_deadline(tax_year: int) -> str:
    """Return the filing deadline for a tax year as a long date."""
    return format_long_date(filing_deadline(tax_year))
