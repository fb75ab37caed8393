"""IRS form field locator tables.

Maps logical box keys to the AcroForm field names inside the fillable IRS
PDFs. Locators were taken from the 2024 revisions of the forms; when a
template is updated, this module is the only place that needs to change.

A box key that a template revision does not carry simply has no locator:
``FieldMap.locator`` returns ``None`` and the filler skips that box.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

from .exceptions import ValidationError


class FormType(str, Enum):
    """Supported information returns."""

    NEC_1099 = "1099-NEC"
    MISC_1099 = "1099-MISC"
    W2 = "W-2"
    W3 = "W-3"

    @property
    def template_file(self) -> str:
        """File name of the blank fillable PDF inside the template directory."""
        return _TEMPLATE_FILES[self]

    @property
    def file_prefix(self) -> str:
        """Prefix used for generated document names."""
        return self.value

    @classmethod
    def parse(cls, raw: Union[str, "FormType"]) -> "FormType":
        """Parse a form type, accepting loose spellings like ``1099nec`` or ``w2``."""
        if isinstance(raw, FormType):
            return raw
        normalized = str(raw).strip().upper().replace("_", "-")
        for form_type in cls:
            if normalized in (form_type.value, form_type.value.replace("-", "")):
                return form_type
        raise ValidationError(
            f"Unsupported form type: {raw}",
            field="form_type",
            value=raw,
            constraint=f"must be one of {[f.value for f in cls]}",
        )


_TEMPLATE_FILES = {
    FormType.NEC_1099: "f1099nec.pdf",
    FormType.MISC_1099: "f1099msc.pdf",
    FormType.W2: "fw2.pdf",
    FormType.W3: "fw3.pdf",
}


# =============================================================================
# BOX KEYS
# =============================================================================

class Form1099NECBox(str, Enum):
    PAYER_NAME = "payer_name"
    PAYER_STREET = "payer_street"
    PAYER_CITY = "payer_city"
    PAYER_PHONE = "payer_phone"
    PAYER_TIN = "payer_tin"
    RECIPIENT_TIN = "recipient_tin"
    RECIPIENT_NAME = "recipient_name"
    RECIPIENT_STREET = "recipient_street"
    RECIPIENT_CITY = "recipient_city"
    ACCOUNT_NUMBER = "account_number"
    BOX1_NONEMPLOYEE_COMPENSATION = "box1_nonemployee_compensation"
    BOX2_DIRECT_SALES = "box2_direct_sales"
    BOX4_FEDERAL_WITHHELD = "box4_federal_withheld"
    BOX5_STATE_PAYER_NUMBER = "box5_state_payer_number"
    BOX6_STATE_INCOME = "box6_state_income"
    BOX7_STATE_TAX_WITHHELD = "box7_state_tax_withheld"
    BOX5_STATE_PAYER_NUMBER_2 = "box5_state_payer_number_2"
    BOX6_STATE_INCOME_2 = "box6_state_income_2"
    BOX7_STATE_TAX_WITHHELD_2 = "box7_state_tax_withheld_2"


class Form1099MISCBox(str, Enum):
    PAYER_NAME = "payer_name"
    PAYER_STREET = "payer_street"
    PAYER_CITY = "payer_city"
    PAYER_PHONE = "payer_phone"
    PAYER_TIN = "payer_tin"
    RECIPIENT_TIN = "recipient_tin"
    RECIPIENT_NAME = "recipient_name"
    RECIPIENT_STREET = "recipient_street"
    RECIPIENT_CITY = "recipient_city"
    ACCOUNT_NUMBER = "account_number"
    BOX1_RENTS = "box1_rents"
    BOX2_ROYALTIES = "box2_royalties"
    BOX3_OTHER_INCOME = "box3_other_income"
    BOX4_FEDERAL_WITHHELD = "box4_federal_withheld"
    BOX5_FISHING_BOAT = "box5_fishing_boat"
    BOX6_MEDICAL_PAYMENTS = "box6_medical_payments"
    BOX8_SUBSTITUTE_PAYMENTS = "box8_substitute_payments"
    BOX9_CROP_INSURANCE = "box9_crop_insurance"
    BOX10_GROSS_PROCEEDS = "box10_gross_proceeds"
    BOX11_FISH_PURCHASED = "box11_fish_purchased"
    BOX12_SECTION_409A = "box12_section_409a"
    BOX14_GOLDEN_PARACHUTE = "box14_golden_parachute"
    BOX15_NONQUALIFIED_DEFERRED = "box15_nonqualified_deferred"
    BOX16_STATE_PAYER_NUMBER = "box16_state_payer_number"
    BOX17_STATE_INCOME = "box17_state_income"
    BOX18_STATE_TAX_WITHHELD = "box18_state_tax_withheld"
    BOX16_STATE_PAYER_NUMBER_2 = "box16_state_payer_number_2"
    BOX17_STATE_INCOME_2 = "box17_state_income_2"
    BOX18_STATE_TAX_WITHHELD_2 = "box18_state_tax_withheld_2"


class FormW2Box(str, Enum):
    EMPLOYER_EIN = "employer_ein"
    EMPLOYER_NAME_ADDRESS = "employer_name_address"
    CONTROL_NUMBER = "control_number"
    EMPLOYEE_SSN = "employee_ssn"
    EMPLOYEE_FIRST_NAME = "employee_first_name"
    EMPLOYEE_LAST_NAME = "employee_last_name"
    EMPLOYEE_SUFFIX = "employee_suffix"
    EMPLOYEE_ADDRESS = "employee_address"
    BOX1_WAGES = "box1_wages"
    BOX2_FEDERAL_WITHHELD = "box2_federal_withheld"
    BOX3_SOCIAL_SECURITY_WAGES = "box3_social_security_wages"
    BOX4_SOCIAL_SECURITY_TAX = "box4_social_security_tax"
    BOX5_MEDICARE_WAGES = "box5_medicare_wages"
    BOX6_MEDICARE_TAX = "box6_medicare_tax"
    BOX7_SOCIAL_SECURITY_TIPS = "box7_social_security_tips"
    BOX8_ALLOCATED_TIPS = "box8_allocated_tips"
    BOX10_DEPENDENT_CARE = "box10_dependent_care"
    BOX11_NONQUALIFIED_PLANS = "box11_nonqualified_plans"
    BOX12A_CODE = "box12a_code"
    BOX12A_AMOUNT = "box12a_amount"
    BOX12B_CODE = "box12b_code"
    BOX12B_AMOUNT = "box12b_amount"
    BOX12C_CODE = "box12c_code"
    BOX12C_AMOUNT = "box12c_amount"
    BOX12D_CODE = "box12d_code"
    BOX12D_AMOUNT = "box12d_amount"
    BOX13_STATUTORY = "box13_statutory"
    BOX13_RETIREMENT = "box13_retirement"
    BOX13_THIRD_PARTY_SICK = "box13_third_party_sick"
    BOX14_OTHER = "box14_other"
    BOX15_STATE = "box15_state"
    BOX15_STATE_ID = "box15_state_id"
    BOX16_STATE_WAGES = "box16_state_wages"
    BOX17_STATE_TAX = "box17_state_tax"
    BOX18_LOCAL_WAGES = "box18_local_wages"
    BOX19_LOCAL_TAX = "box19_local_tax"
    BOX20_LOCALITY_NAME = "box20_locality_name"
    BOX15_STATE_2 = "box15_state_2"
    BOX15_STATE_ID_2 = "box15_state_id_2"
    BOX16_STATE_WAGES_2 = "box16_state_wages_2"
    BOX17_STATE_TAX_2 = "box17_state_tax_2"
    BOX18_LOCAL_WAGES_2 = "box18_local_wages_2"
    BOX19_LOCAL_TAX_2 = "box19_local_tax_2"
    BOX20_LOCALITY_NAME_2 = "box20_locality_name_2"


class FormW3Box(str, Enum):
    CONTROL_NUMBER = "control_number"
    KIND_OF_PAYER_941 = "kind_of_payer_941"
    KIND_OF_PAYER_MILITARY = "kind_of_payer_military"
    KIND_OF_PAYER_943 = "kind_of_payer_943"
    KIND_OF_PAYER_944 = "kind_of_payer_944"
    KIND_OF_PAYER_CT1 = "kind_of_payer_ct1"
    KIND_OF_PAYER_HOUSEHOLD = "kind_of_payer_household"
    KIND_OF_EMPLOYER_NONE = "kind_of_employer_none"
    KIND_OF_EMPLOYER_STATE_LOCAL_501C = "kind_of_employer_state_local_501c"
    KIND_OF_EMPLOYER_STATE_LOCAL_NON_501C = "kind_of_employer_state_local_non_501c"
    KIND_OF_EMPLOYER_FEDERAL = "kind_of_employer_federal"
    BOX1_WAGES = "box1_wages"
    BOX2_FEDERAL_WITHHELD = "box2_federal_withheld"
    BOX3_SOCIAL_SECURITY_WAGES = "box3_social_security_wages"
    BOX4_SOCIAL_SECURITY_TAX = "box4_social_security_tax"
    BOX5_MEDICARE_WAGES = "box5_medicare_wages"
    BOX6_MEDICARE_TAX = "box6_medicare_tax"
    BOX7_SOCIAL_SECURITY_TIPS = "box7_social_security_tips"
    BOX8_ALLOCATED_TIPS = "box8_allocated_tips"
    BOX10_DEPENDENT_CARE = "box10_dependent_care"
    BOX11_NONQUALIFIED_PLANS = "box11_nonqualified_plans"
    BOX12A_DEFERRED_COMP = "box12a_deferred_comp"
    EMPLOYER_EIN = "employer_ein"
    EMPLOYER_NAME = "employer_name"
    EMPLOYER_ADDRESS = "employer_address"
    EMPLOYER_CITY = "employer_city"
    EMPLOYER_STATE = "employer_state"
    EMPLOYER_ZIP = "employer_zip"
    OTHER_EIN = "other_ein"
    CONTACT_NAME = "contact_name"
    CONTACT_PHONE = "contact_phone"
    CONTACT_FAX = "contact_fax"
    CONTACT_EMAIL = "contact_email"
    BOX15_STATE_ID = "box15_state_id"
    BOX16_STATE_WAGES = "box16_state_wages"
    BOX17_STATE_TAX = "box17_state_tax"
    BOX18_LOCAL_WAGES = "box18_local_wages"
    BOX19_LOCAL_TAX = "box19_local_tax"


BoxKey = Union[Form1099NECBox, Form1099MISCBox, FormW2Box, FormW3Box]


class FieldMap:
    """Read-only mapping from a form's box keys to template field locators."""

    def __init__(self, form_type: FormType, box_type: type, locators: Mapping[BoxKey, str]):
        self.form_type = form_type
        self.box_type = box_type
        self._locators = MappingProxyType(dict(locators))

    def locator(self, key: BoxKey) -> Optional[str]:
        """Return the template locator for a box, or None if this revision lacks it."""
        return self._locators.get(key)

    def keys(self) -> list:
        return list(self._locators)

    def __contains__(self, key: object) -> bool:
        return key in self._locators

    def __len__(self) -> int:
        return len(self._locators)

    def __repr__(self) -> str:
        return f"FieldMap({self.form_type.value!r}, {len(self)} boxes)"


# =============================================================================
# 1099-NEC
# =============================================================================

_NEC_LEFT = "topmostSubform[0].CopyA[0].LeftCol[0]"
_NEC_RIGHT = "topmostSubform[0].CopyA[0].RightCol[0]"

FORM_1099_NEC_FIELDS = FieldMap(
    FormType.NEC_1099,
    Form1099NECBox,
    {
        # Payer block
        Form1099NECBox.PAYER_NAME: f"{_NEC_LEFT}.f1_1[0]",
        Form1099NECBox.PAYER_STREET: f"{_NEC_LEFT}.f1_2[0]",
        Form1099NECBox.PAYER_CITY: f"{_NEC_LEFT}.f1_3[0]",
        Form1099NECBox.PAYER_PHONE: f"{_NEC_LEFT}.f1_4[0]",
        Form1099NECBox.PAYER_TIN: f"{_NEC_LEFT}.f1_5[0]",
        # Recipient block
        Form1099NECBox.RECIPIENT_TIN: f"{_NEC_LEFT}.f1_6[0]",
        Form1099NECBox.RECIPIENT_NAME: f"{_NEC_LEFT}.f1_7[0]",
        Form1099NECBox.RECIPIENT_STREET: f"{_NEC_LEFT}.f1_8[0]",
        Form1099NECBox.RECIPIENT_CITY: f"{_NEC_LEFT}.f1_9[0]",
        Form1099NECBox.ACCOUNT_NUMBER: f"{_NEC_LEFT}.f1_10[0]",
        # Amounts
        Form1099NECBox.BOX1_NONEMPLOYEE_COMPENSATION: f"{_NEC_RIGHT}.f1_11[0]",
        Form1099NECBox.BOX2_DIRECT_SALES: f"{_NEC_RIGHT}.c1_1[0]",
        Form1099NECBox.BOX4_FEDERAL_WITHHELD: f"{_NEC_RIGHT}.f1_14[0]",
        # State rows
        Form1099NECBox.BOX5_STATE_PAYER_NUMBER: f"{_NEC_RIGHT}.f1_15[0]",
        Form1099NECBox.BOX6_STATE_INCOME: f"{_NEC_RIGHT}.f1_16[0]",
        Form1099NECBox.BOX7_STATE_TAX_WITHHELD: f"{_NEC_RIGHT}.f1_17[0]",
        Form1099NECBox.BOX5_STATE_PAYER_NUMBER_2: f"{_NEC_RIGHT}.f1_18[0]",
        Form1099NECBox.BOX6_STATE_INCOME_2: f"{_NEC_RIGHT}.f1_19[0]",
        Form1099NECBox.BOX7_STATE_TAX_WITHHELD_2: f"{_NEC_RIGHT}.f1_20[0]",
    },
)


# =============================================================================
# 1099-MISC
# =============================================================================

# The 2024 1099-MISC template carries a single state row; the second-row
# boxes are defined but unmapped until a revision provides them.
FORM_1099_MISC_FIELDS = FieldMap(
    FormType.MISC_1099,
    Form1099MISCBox,
    {
        Form1099MISCBox.PAYER_NAME: f"{_NEC_LEFT}.f1_1[0]",
        Form1099MISCBox.PAYER_STREET: f"{_NEC_LEFT}.f1_2[0]",
        Form1099MISCBox.PAYER_CITY: f"{_NEC_LEFT}.f1_3[0]",
        Form1099MISCBox.PAYER_PHONE: f"{_NEC_LEFT}.f1_4[0]",
        Form1099MISCBox.PAYER_TIN: f"{_NEC_LEFT}.f1_5[0]",
        Form1099MISCBox.RECIPIENT_TIN: f"{_NEC_LEFT}.f1_6[0]",
        Form1099MISCBox.RECIPIENT_NAME: f"{_NEC_LEFT}.f1_7[0]",
        Form1099MISCBox.RECIPIENT_STREET: f"{_NEC_LEFT}.f1_8[0]",
        Form1099MISCBox.RECIPIENT_CITY: f"{_NEC_LEFT}.f1_9[0]",
        Form1099MISCBox.ACCOUNT_NUMBER: f"{_NEC_LEFT}.f1_10[0]",
        Form1099MISCBox.BOX1_RENTS: f"{_NEC_RIGHT}.f1_11[0]",
        Form1099MISCBox.BOX2_ROYALTIES: f"{_NEC_RIGHT}.f1_12[0]",
        Form1099MISCBox.BOX3_OTHER_INCOME: f"{_NEC_RIGHT}.f1_13[0]",
        Form1099MISCBox.BOX4_FEDERAL_WITHHELD: f"{_NEC_RIGHT}.f1_14[0]",
        Form1099MISCBox.BOX5_FISHING_BOAT: f"{_NEC_RIGHT}.f1_15[0]",
        Form1099MISCBox.BOX6_MEDICAL_PAYMENTS: f"{_NEC_RIGHT}.f1_16[0]",
        Form1099MISCBox.BOX8_SUBSTITUTE_PAYMENTS: f"{_NEC_RIGHT}.f1_17[0]",
        Form1099MISCBox.BOX9_CROP_INSURANCE: f"{_NEC_RIGHT}.f1_18[0]",
        Form1099MISCBox.BOX10_GROSS_PROCEEDS: f"{_NEC_RIGHT}.f1_19[0]",
        Form1099MISCBox.BOX11_FISH_PURCHASED: f"{_NEC_RIGHT}.f1_20[0]",
        Form1099MISCBox.BOX12_SECTION_409A: f"{_NEC_RIGHT}.f1_21[0]",
        Form1099MISCBox.BOX14_GOLDEN_PARACHUTE: f"{_NEC_RIGHT}.f1_22[0]",
        Form1099MISCBox.BOX15_NONQUALIFIED_DEFERRED: f"{_NEC_RIGHT}.f1_23[0]",
        Form1099MISCBox.BOX16_STATE_PAYER_NUMBER: f"{_NEC_RIGHT}.f1_24[0]",
        Form1099MISCBox.BOX17_STATE_INCOME: f"{_NEC_RIGHT}.f1_25[0]",
        Form1099MISCBox.BOX18_STATE_TAX_WITHHELD: f"{_NEC_RIGHT}.f1_26[0]",
    },
)


# =============================================================================
# W-2
# =============================================================================

FORM_W2_FIELDS = FieldMap(
    FormType.W2,
    FormW2Box,
    {
        FormW2Box.EMPLOYER_EIN: "f1_1",  # box b
        FormW2Box.EMPLOYER_NAME_ADDRESS: "f1_2",  # box c
        FormW2Box.CONTROL_NUMBER: "f1_3",  # box d
        FormW2Box.EMPLOYEE_SSN: "f1_4",  # box a
        FormW2Box.EMPLOYEE_FIRST_NAME: "f1_5",  # box e
        FormW2Box.EMPLOYEE_LAST_NAME: "f1_6",
        FormW2Box.EMPLOYEE_SUFFIX: "f1_7",
        FormW2Box.EMPLOYEE_ADDRESS: "f1_8",  # box f
        FormW2Box.BOX1_WAGES: "f1_9",
        FormW2Box.BOX2_FEDERAL_WITHHELD: "f1_10",
        FormW2Box.BOX3_SOCIAL_SECURITY_WAGES: "f1_11",
        FormW2Box.BOX4_SOCIAL_SECURITY_TAX: "f1_12",
        FormW2Box.BOX5_MEDICARE_WAGES: "f1_13",
        FormW2Box.BOX6_MEDICARE_TAX: "f1_14",
        FormW2Box.BOX7_SOCIAL_SECURITY_TIPS: "f1_15",
        FormW2Box.BOX8_ALLOCATED_TIPS: "f1_16",
        FormW2Box.BOX10_DEPENDENT_CARE: "f1_17",
        FormW2Box.BOX11_NONQUALIFIED_PLANS: "f1_18",
        FormW2Box.BOX12A_CODE: "f1_19",
        FormW2Box.BOX12A_AMOUNT: "f1_20",
        FormW2Box.BOX12B_CODE: "f1_21",
        FormW2Box.BOX12B_AMOUNT: "f1_22",
        FormW2Box.BOX12C_CODE: "f1_23",
        FormW2Box.BOX12C_AMOUNT: "f1_24",
        FormW2Box.BOX12D_CODE: "f1_25",
        FormW2Box.BOX12D_AMOUNT: "f1_26",
        FormW2Box.BOX13_STATUTORY: "c1_1",
        FormW2Box.BOX13_RETIREMENT: "c1_2",
        FormW2Box.BOX13_THIRD_PARTY_SICK: "c1_3",
        FormW2Box.BOX14_OTHER: "f1_27",
        FormW2Box.BOX15_STATE: "f1_28",
        FormW2Box.BOX15_STATE_ID: "f1_29",
        FormW2Box.BOX16_STATE_WAGES: "f1_30",
        FormW2Box.BOX17_STATE_TAX: "f1_31",
        FormW2Box.BOX18_LOCAL_WAGES: "f1_32",
        FormW2Box.BOX19_LOCAL_TAX: "f1_33",
        FormW2Box.BOX20_LOCALITY_NAME: "f1_34",
        FormW2Box.BOX15_STATE_2: "f1_35",
        FormW2Box.BOX15_STATE_ID_2: "f1_36",
        FormW2Box.BOX16_STATE_WAGES_2: "f1_37",
        FormW2Box.BOX17_STATE_TAX_2: "f1_38",
        FormW2Box.BOX18_LOCAL_WAGES_2: "f1_39",
        FormW2Box.BOX19_LOCAL_TAX_2: "f1_40",
        FormW2Box.BOX20_LOCALITY_NAME_2: "f1_41",
    },
)

W2_BOX_12_ROWS = (
    (FormW2Box.BOX12A_CODE, FormW2Box.BOX12A_AMOUNT),
    (FormW2Box.BOX12B_CODE, FormW2Box.BOX12B_AMOUNT),
    (FormW2Box.BOX12C_CODE, FormW2Box.BOX12C_AMOUNT),
    (FormW2Box.BOX12D_CODE, FormW2Box.BOX12D_AMOUNT),
)

# (state, state id, state wages, state tax) per row
W2_STATE_ROWS = (
    (FormW2Box.BOX15_STATE, FormW2Box.BOX15_STATE_ID, FormW2Box.BOX16_STATE_WAGES, FormW2Box.BOX17_STATE_TAX),
    (FormW2Box.BOX15_STATE_2, FormW2Box.BOX15_STATE_ID_2, FormW2Box.BOX16_STATE_WAGES_2, FormW2Box.BOX17_STATE_TAX_2),
)

# (local wages, local tax, locality name) per row
W2_LOCAL_ROWS = (
    (FormW2Box.BOX18_LOCAL_WAGES, FormW2Box.BOX19_LOCAL_TAX, FormW2Box.BOX20_LOCALITY_NAME),
    (FormW2Box.BOX18_LOCAL_WAGES_2, FormW2Box.BOX19_LOCAL_TAX_2, FormW2Box.BOX20_LOCALITY_NAME_2),
)


# =============================================================================
# W-3
# =============================================================================

FORM_W3_FIELDS = FieldMap(
    FormType.W3,
    FormW3Box,
    {
        FormW3Box.CONTROL_NUMBER: "f1_1",
        FormW3Box.KIND_OF_PAYER_941: "c1_1",
        FormW3Box.KIND_OF_PAYER_MILITARY: "c1_2",
        FormW3Box.KIND_OF_PAYER_943: "c1_3",
        FormW3Box.KIND_OF_PAYER_944: "c1_4",
        FormW3Box.KIND_OF_PAYER_CT1: "c1_5",
        FormW3Box.KIND_OF_PAYER_HOUSEHOLD: "c1_6",
        FormW3Box.KIND_OF_EMPLOYER_NONE: "c1_7",
        FormW3Box.KIND_OF_EMPLOYER_STATE_LOCAL_501C: "c1_8",
        FormW3Box.KIND_OF_EMPLOYER_STATE_LOCAL_NON_501C: "c1_9",
        FormW3Box.KIND_OF_EMPLOYER_FEDERAL: "c1_10",
        FormW3Box.BOX1_WAGES: "f1_2",
        FormW3Box.BOX2_FEDERAL_WITHHELD: "f1_3",
        FormW3Box.BOX3_SOCIAL_SECURITY_WAGES: "f1_4",
        FormW3Box.BOX4_SOCIAL_SECURITY_TAX: "f1_5",
        FormW3Box.BOX5_MEDICARE_WAGES: "f1_6",
        FormW3Box.BOX6_MEDICARE_TAX: "f1_7",
        FormW3Box.BOX7_SOCIAL_SECURITY_TIPS: "f1_8",
        FormW3Box.BOX8_ALLOCATED_TIPS: "f1_9",
        FormW3Box.BOX10_DEPENDENT_CARE: "f1_10",
        FormW3Box.BOX11_NONQUALIFIED_PLANS: "f1_11",
        FormW3Box.BOX12A_DEFERRED_COMP: "f1_12",
        FormW3Box.EMPLOYER_EIN: "f1_13",
        FormW3Box.EMPLOYER_NAME: "f1_14",
        FormW3Box.EMPLOYER_ADDRESS: "f1_15",
        FormW3Box.EMPLOYER_CITY: "f1_16",
        FormW3Box.EMPLOYER_STATE: "f1_17",
        FormW3Box.EMPLOYER_ZIP: "f1_18",
        FormW3Box.OTHER_EIN: "f1_19",
        FormW3Box.CONTACT_NAME: "f1_20",
        FormW3Box.CONTACT_PHONE: "f1_21",
        FormW3Box.CONTACT_FAX: "f1_22",
        FormW3Box.CONTACT_EMAIL: "f1_23",
        FormW3Box.BOX15_STATE_ID: "f1_24",
        FormW3Box.BOX16_STATE_WAGES: "f1_25",
        FormW3Box.BOX17_STATE_TAX: "f1_26",
        FormW3Box.BOX18_LOCAL_WAGES: "f1_27",
        FormW3Box.BOX19_LOCAL_TAX: "f1_28",
    },
)


# =============================================================================
# W-2 BOX 12 CODES
# =============================================================================

W2_BOX_12_CODES: Mapping[str, str] = MappingProxyType({
    "A": "Uncollected social security or RRTA tax on tips",
    "B": "Uncollected Medicare tax on tips",
    "C": "Taxable cost of group-term life insurance over $50,000",
    "D": "Elective deferrals to 401(k)",
    "E": "Elective deferrals to 403(b)",
    "F": "Elective deferrals to 408(k)(6) SEP",
    "G": "Elective deferrals to 457(b)",
    "H": "Elective deferrals to 501(c)(18)(D)",
    "J": "Nontaxable sick pay",
    "K": "20% excise tax on excess golden parachute",
    "L": "Substantiated employee business expense reimbursements",
    "M": "Uncollected social security on group-term life insurance",
    "N": "Uncollected Medicare tax on group-term life insurance",
    "P": "Excludable moving expense reimbursements",
    "Q": "Nontaxable combat pay",
    "R": "Employer contributions to Archer MSA",
    "S": "Employee salary reduction contributions to 408(p) SIMPLE",
    "T": "Adoption benefits",
    "V": "Income from exercise of nonstatutory stock options",
    "W": "Employer contributions to HSA",
    "Y": "Deferrals under section 409A nonqualified deferred compensation",
    "Z": "Income under section 409A on nonqualified deferred compensation",
    "AA": "Designated Roth contributions to 401(k)",
    "BB": "Designated Roth contributions to 403(b)",
    "DD": "Cost of employer-sponsored health coverage",
    "EE": "Designated Roth contributions to governmental 457(b)",
    "FF": "Permitted benefits under QSEHRA",
    "GG": "Income from qualified equity grants under section 83(i)",
    "HH": "Aggregate deferrals under section 83(i) elections",
})

# Box 12 codes counted as elective deferrals on W-3 box 12a
W3_DEFERRED_COMP_CODES = frozenset({"D", "E", "F", "G", "H", "S", "Y", "AA", "BB", "EE"})


_FIELD_MAPS = {
    FormType.NEC_1099: FORM_1099_NEC_FIELDS,
    FormType.MISC_1099: FORM_1099_MISC_FIELDS,
    FormType.W2: FORM_W2_FIELDS,
    FormType.W3: FORM_W3_FIELDS,
}


def get_field_map(form_type: Union[FormType, str]) -> FieldMap:
    """Return the locator table for a form type."""
    return _FIELD_MAPS[FormType.parse(form_type)]
