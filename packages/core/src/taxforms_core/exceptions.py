"""Custom exceptions for year-end tax form generation.

This module provides a hierarchy of exception classes for consistent error
handling across the tax form pipeline. All exceptions inherit from
TaxFormsError, making it easy to catch all package-specific errors.

Data problems found while validating a payer, recipient or amount set are
never raised: they are collected into the ``errors`` and ``warnings`` lists
of a validation outcome. Exceptions are reserved for resolution failures,
infrastructure failures and programmer misuse.

Example:
    try:
        result = service.generate_1099_nec(payee_id)
    except RecordNotFoundError as e:
        return {"success": False, "errors": [e.message]}
    except TemplateUnavailableError:
        # Infrastructure problem, nothing the caller can fix in the data
        raise
"""

from typing import Any, Optional


class TaxFormsError(Exception):
    """Base exception for all tax form errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize TaxFormsError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error can be fixed by retrying or by
                correcting input. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(TaxFormsError):
    """Error raised when a caller passes an argument the API cannot accept.

    Example:
        >>> raise ValidationError(
        ...     "Unsupported form type",
        ...     field="form_type",
        ...     value="1099-K",
        ...     constraint="Must be one of: 1099-NEC, 1099-MISC, W-2, W-3",
        ... )
        ValidationError: Unsupported form type
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the argument that failed validation.
            value: The invalid value (never a full tax identifier).
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by the caller.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class TemplateUnavailableError(TaxFormsError):
    """Error raised when a blank form template cannot be loaded.

    This is an infrastructure failure distinct from data validation: it
    aborts the whole operation, including every remaining record of a bulk
    run, because no record can succeed without the template.

    Example:
        >>> raise TemplateUnavailableError(
        ...     "1099-NEC template not found",
        ...     form_type="1099-NEC",
        ...     path="/srv/templates/f1099nec.pdf",
        ... )
        TemplateUnavailableError: 1099-NEC template not found
    """

    def __init__(
        self,
        message: str,
        *,
        form_type: Optional[str] = None,
        path: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.form_type = form_type
        self.path = path

        if form_type:
            self.details["form_type"] = form_type
        if path:
            self.details["path"] = path


class RecordNotFoundError(TaxFormsError):
    """Error raised when a payer, recipient or employee cannot be resolved.

    Resolution failures surface immediately as a top-level error; they are
    never placed into a bulk run's partial-failure bucket.

    Example:
        >>> raise RecordNotFoundError(
        ...     "Payee not found",
        ...     record_type="payee",
        ...     record_id="p-42",
        ... )
        RecordNotFoundError: Payee not found
    """

    def __init__(
        self,
        message: str,
        *,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.record_type = record_type
        self.record_id = record_id

        if record_type:
            self.details["record_type"] = record_type
        if record_id:
            self.details["record_id"] = record_id


class ConfigurationError(TaxFormsError):
    """Error raised when configuration is invalid or missing.

    Example:
        >>> raise ConfigurationError(
        ...     "Template directory does not exist",
        ...     config_key="TAXFORMS_TEMPLATE_DIR",
        ...     expected="Existing directory with IRS fillable PDFs",
        ... )
        ConfigurationError: Template directory does not exist
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed at runtime.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "TaxFormsError",
    "ValidationError",
    "TemplateUnavailableError",
    "RecordNotFoundError",
    "ConfigurationError",
]
