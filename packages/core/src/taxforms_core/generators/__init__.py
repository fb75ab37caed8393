"""Form generators for the information returns this package prepares."""

from taxforms_core.generators.base import BaseFormGenerator, GenerateOptions, safe_file_name
from taxforms_core.generators.form_1099 import Base1099Generator
from taxforms_core.generators.form_1099_misc import Form1099MISCGenerator
from taxforms_core.generators.form_1099_nec import Form1099NECGenerator
from taxforms_core.generators.form_w2 import (
    FormW2Generator,
    PayrollTaxes,
    calculate_payroll_taxes,
    effective_payroll_boxes,
    employee_display_name,
)
from taxforms_core.generators.form_w3 import FormW3Generator, W3Totals

__all__ = [
    "BaseFormGenerator",
    "Base1099Generator",
    "GenerateOptions",
    "safe_file_name",
    "Form1099NECGenerator",
    "Form1099MISCGenerator",
    "FormW2Generator",
    "FormW3Generator",
    "PayrollTaxes",
    "W3Totals",
    "calculate_payroll_taxes",
    "effective_payroll_boxes",
    "employee_display_name",
]
