"""Configuration system for tax form generation.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults. Statutory figures (filing threshold,
wage base, payroll tax rates) are configurable per tax year so a deployment
can pick up next year's numbers without a code change.

Usage:
    from taxforms_core.config import TaxFormsConfig

    # Load from environment variables and .env file
    config = TaxFormsConfig()

    # Statutory figures for a tax year
    constants = config.constants_for(2024)
    print(constants.social_security_wage_base)

    # Override a year from the environment (JSON):
    #   TAXFORMS_TAX_YEARS='{"2026": {"social_security_wage_base": "184500"}}'
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .tax_standards import (
    FORM_1099_THRESHOLD,
    LARGE_AMOUNT_WARNING,
    MEDICARE_RATE,
    RECONCILIATION_TOLERANCE,
    SOCIAL_SECURITY_RATE,
    get_social_security_wage_base,
)


class TaxYearConstants(BaseModel):
    """Statutory figures for a single tax year.

    A missing wage base is filled from the built-in table by
    ``TaxFormsConfig.constants_for``.
    """

    model_config = {"frozen": True}

    filing_threshold: Decimal = Field(
        default=FORM_1099_THRESHOLD,
        gt=0,
        description="Minimum annual payment for which a 1099 is required",
    )
    social_security_wage_base: Optional[Decimal] = Field(
        default=None,
        gt=0,
        description="Maximum wages subject to social security tax",
    )
    social_security_rate: Decimal = Field(
        default=SOCIAL_SECURITY_RATE,
        gt=0,
        lt=1,
        description="Employee social security tax rate",
    )
    medicare_rate: Decimal = Field(
        default=MEDICARE_RATE,
        gt=0,
        lt=1,
        description="Employee Medicare tax rate",
    )
    large_amount_warning: Decimal = Field(
        default=LARGE_AMOUNT_WARNING,
        gt=0,
        description="Amount above which a sanity-check warning is attached",
    )
    reconciliation_tolerance: Decimal = Field(
        default=RECONCILIATION_TOLERANCE,
        ge=0,
        description="Allowed difference between supplied and computed withholding",
    )


class TaxFormsConfig(BaseSettings):
    """Root configuration for tax form generation.

    Environment Variables:
        TAXFORMS_ENV: Environment name (development, staging, production, test)
        TAXFORMS_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        TAXFORMS_LOG_FORMAT: Log renderer (console, json)
        TAXFORMS_TEMPLATE_DIR: Directory holding the blank IRS fillable PDFs
        TAXFORMS_FLATTEN_BY_DEFAULT: Flatten generated forms unless told otherwise
        TAXFORMS_BULK_MAX_WORKERS: Worker pool size for roster-wide runs
        TAXFORMS_BELOW_THRESHOLD_IS_ERROR: Treat sub-threshold 1099 amounts as errors
        TAXFORMS_TAX_YEARS: JSON object of per-year statutory overrides

    Example:
        config = TaxFormsConfig(template_dir="/srv/irs-templates", bulk_max_workers=8)
    """

    model_config = SettingsConfigDict(
        env_prefix="TAXFORMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment settings
    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log output format",
    )

    # Generation settings
    template_dir: Path = Field(
        default=Path("./templates"),
        description="Directory containing f1099nec.pdf, f1099msc.pdf, fw2.pdf, fw3.pdf",
    )
    flatten_by_default: bool = Field(
        default=True,
        description="Flatten generated forms into non-editable output",
    )
    bulk_max_workers: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Maximum concurrent records in a bulk run",
    )
    below_threshold_is_error: bool = Field(
        default=False,
        description="Block 1099 generation when the amount is below the filing threshold",
    )
    tax_years: dict[int, TaxYearConstants] = Field(
        default_factory=dict,
        description="Per-year statutory overrides",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    def constants_for(self, tax_year: int) -> TaxYearConstants:
        """Return the statutory figures in force for a tax year."""
        constants = self.tax_years.get(tax_year) or TaxYearConstants()
        if constants.social_security_wage_base is None:
            constants = constants.model_copy(
                update={"social_security_wage_base": get_social_security_wage_base(tax_year)}
            )
        return constants

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"


@lru_cache
def get_config() -> TaxFormsConfig:
    """Return the process-wide configuration loaded from the environment."""
    return TaxFormsConfig()
