"""Amount facts passed to the form generators.

Facts are derived by the service from a ledger aggregation (or supplied by
the caller) and are immutable once handed to a generator. Amounts are not
range-checked here: negative or missing values are reported as validation
errors by the generator instead of failing model construction.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class StateTaxRow(BaseModel):
    """One state row (1099 boxes 5-7 / 16-18, W-2 boxes 15-17)."""

    model_config = {"frozen": True}

    state_code: str
    state_id: Optional[str] = Field(
        default=None,
        description="Payer's state account number; looked up on the payer when omitted",
    )
    state_income: Decimal = Decimal("0")
    state_tax_withheld: Decimal = Decimal("0")


class LocalTaxRow(BaseModel):
    """One local row (W-2 boxes 18-20)."""

    model_config = {"frozen": True}

    locality_name: str
    local_wages: Decimal = Decimal("0")
    local_tax: Decimal = Decimal("0")


class PaymentFacts(BaseModel):
    """Box amounts for Form 1099-NEC and Form 1099-MISC.

    1099-NEC reads ``nonemployee_compensation``, ``direct_sales`` and
    ``federal_withholding``; 1099-MISC reads the remaining income boxes.
    """

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "nonemployee_compensation": "750.00",
                    "federal_withholding": "0",
                    "state_rows": [
                        {"state_code": "NY", "state_income": "750.00", "state_tax_withheld": "0"}
                    ],
                }
            ]
        },
    }

    # 1099-NEC
    nonemployee_compensation: Decimal = Decimal("0")
    direct_sales: bool = Field(
        default=False,
        description="Box 2: payer made direct sales of $5,000 or more for resale",
    )

    # Shared
    federal_withholding: Decimal = Decimal("0")

    # 1099-MISC
    rents: Decimal = Decimal("0")
    royalties: Decimal = Decimal("0")
    other_income: Decimal = Decimal("0")
    fishing_boat_proceeds: Decimal = Decimal("0")
    medical_payments: Decimal = Decimal("0")
    substitute_payments: Decimal = Decimal("0")
    crop_insurance_proceeds: Decimal = Decimal("0")
    gross_proceeds_attorney: Decimal = Decimal("0")
    fish_purchased_for_resale: Decimal = Decimal("0")
    section_409a_deferrals: Decimal = Decimal("0")
    excess_golden_parachute: Decimal = Decimal("0")
    nonqualified_deferred_comp: Decimal = Decimal("0")

    state_rows: list[StateTaxRow] = Field(default_factory=list, max_length=2)

    @property
    def misc_income_total(self) -> Decimal:
        """Sum of reportable 1099-MISC income boxes (withholding excluded)."""
        return (
            self.rents
            + self.royalties
            + self.other_income
            + self.fishing_boat_proceeds
            + self.medical_payments
            + self.substitute_payments
            + self.crop_insurance_proceeds
            + self.gross_proceeds_attorney
            + self.fish_purchased_for_resale
            + self.section_409a_deferrals
            + self.excess_golden_parachute
            + self.nonqualified_deferred_comp
        )


class Box12Entry(BaseModel):
    """A W-2 box 12 code/amount pair."""

    model_config = {"frozen": True}

    code: str
    amount: Decimal


class WageFacts(BaseModel):
    """Wage and withholding figures for Form W-2.

    Optional social security and Medicare figures are computed from
    ``wages`` when not supplied.
    """

    model_config = {"frozen": True}

    wages: Optional[Decimal] = Field(default=None, description="Box 1")
    federal_withholding: Decimal = Field(default=Decimal("0"), description="Box 2")
    social_security_wages: Optional[Decimal] = Field(default=None, description="Box 3")
    social_security_tax: Optional[Decimal] = Field(default=None, description="Box 4")
    medicare_wages: Optional[Decimal] = Field(default=None, description="Box 5")
    medicare_tax: Optional[Decimal] = Field(default=None, description="Box 6")
    social_security_tips: Decimal = Field(default=Decimal("0"), description="Box 7")
    allocated_tips: Decimal = Field(default=Decimal("0"), description="Box 8")
    dependent_care_benefits: Decimal = Field(default=Decimal("0"), description="Box 10")
    nonqualified_plans: Decimal = Field(default=Decimal("0"), description="Box 11")
    box12: list[Box12Entry] = Field(default_factory=list, description="Box 12a-d")
    statutory_employee: bool = False
    retirement_plan: bool = False
    third_party_sick_pay: bool = False
    box14_other: Optional[str] = None
    state_rows: list[StateTaxRow] = Field(default_factory=list, max_length=2)
    local_rows: list[LocalTaxRow] = Field(default_factory=list, max_length=2)
