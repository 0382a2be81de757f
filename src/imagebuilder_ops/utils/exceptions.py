"""Exception classes and validation utilities for Image Builder operations.

This module contains the exception hierarchy raised across the toolkit and
the field validation rules used by the resource models.
"""

import re
from typing import Any, Dict, Iterable, List, Optional


class ImageBuilderOpsError(Exception):
    """Base exception for the toolkit."""

    pass


class CLIError(ImageBuilderOpsError):
    """Custom exception for CLI-related errors."""

    pass


class SessionError(ImageBuilderOpsError):
    """AWS credentials could not be obtained."""

    pass


class ResourceNotFoundError(ImageBuilderOpsError):
    """The Image Builder resource does not exist."""

    def __init__(self, arn: str, operation: str = ""):
        self.arn = arn
        self.operation = operation
        super().__init__(f"Resource not found: {arn}")


class ImageBuilderApiError(ImageBuilderOpsError):
    """An Image Builder API call failed."""

    def __init__(self, operation: str, error_code: str, message: str):
        self.operation = operation
        self.error_code = error_code
        super().__init__(f"{operation} failed: {error_code} - {message}")


class EmptyResponseError(ImageBuilderOpsError):
    """The API returned no usable payload."""

    pass


class ResourceValidationError(ImageBuilderOpsError):
    """One or more configuration fields are invalid."""

    def __init__(self, resource_name: str, errors: List[str]):
        self.resource_name = resource_name
        self.errors = list(errors)
        super().__init__(
            f"Invalid configuration for {resource_name}: " + "; ".join(self.errors)
        )


class WaiterTimeoutError(ImageBuilderOpsError):
    """The resource did not reach the target status before the deadline."""

    def __init__(self, arn: str, last_status: Optional[str], timeout: float):
        self.arn = arn
        self.last_status = last_status
        self.timeout = timeout
        super().__init__(
            f"Timeout after {timeout:.0f}s waiting for {arn} "
            f"(last status: {last_status or 'unknown'})"
        )


class UnexpectedStateError(ImageBuilderOpsError):
    """The resource reached a status that is neither pending nor the target."""

    def __init__(self, arn: str, status: str, reason: Optional[str] = None):
        self.arn = arn
        self.status = status
        self.reason = reason
        message = f"Unexpected state '{status}' for {arn}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ValidationRules:
    """Validation utilities for Image Builder resource fields.

    Each check returns an error message, or None when the value is valid.
    """

    @staticmethod
    def validate_aws_account_id(account_id: str) -> bool:
        """Validate AWS account ID format (12 digits)."""
        return bool(re.match(r"^\d{12}$", account_id))

    @staticmethod
    def unsupported_arguments(
        properties: Dict[str, Any], configurable: Iterable[str], computed: Iterable[str] = ()
    ) -> List[str]:
        """Report keys that are unknown or only ever set by the API."""
        configurable = set(configurable)
        computed = set(computed)
        errors = []
        for key in sorted(properties):
            if key in computed:
                errors.append(f"{key}: value is computed and cannot be set")
            elif key not in configurable:
                errors.append(f"{key}: unsupported argument")
        return errors

    @staticmethod
    def string_match(field: str, value: Any, pattern: str, message: str) -> Optional[str]:
        if not isinstance(value, str) or not re.match(pattern, value):
            return f"{field}: {message}, got {value!r}"
        return None

    @staticmethod
    def string_len_between(field: str, value: Any, minimum: int, maximum: int) -> Optional[str]:
        if not isinstance(value, str):
            return f"{field}: expected a string, got {type(value).__name__}"
        if not minimum <= len(value) <= maximum:
            return (
                f"{field}: expected length between {minimum} and {maximum}, "
                f"got {len(value)}"
            )
        return None

    @staticmethod
    def string_in_slice(field: str, value: Any, allowed: Iterable[str]) -> Optional[str]:
        allowed = list(allowed)
        if value not in allowed:
            return f"{field}: expected one of {allowed}, got {value!r}"
        return None

    @staticmethod
    def int_between(field: str, value: Any, minimum: int, maximum: int) -> Optional[str]:
        if isinstance(value, bool) or not isinstance(value, int):
            return f"{field}: expected an integer, got {value!r}"
        if not minimum <= value <= maximum:
            return f"{field}: expected to be in the range ({minimum} - {maximum}), got {value}"
        return None

    @staticmethod
    def is_bool(field: str, value: Any) -> Optional[str]:
        if not isinstance(value, bool):
            return f"{field}: expected a boolean, got {value!r}"
        return None
