"""Injector exceptions for error handling.

Each exception maps to one admission outcome: decode problems are the
caller's fault (HTTP 400), configuration and invariant problems are ours
(HTTP 500).
"""

from typing import Any, Optional


class InjectorError(Exception):
    """Base class for all injector failures.

    Attributes:
        message: Description of the failure
        status_code: HTTP-style status reported in the admission response
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DecodeError(InjectorError):
    """Raised when an inbound AdmissionReview cannot be decoded.

    This covers malformed bodies and schema mismatches such as:
    - Body is not a JSON object
    - Missing ``request`` or ``request.object``
    - Workload object without the pod spec its kind requires

    Attributes:
        message: Description of the failure
        field: Dotted path of the offending field (optional)
    """

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        """Initialize DecodeError exception.

        Args:
            message: Error message describing the failure
            field: Dotted path of the offending field (optional)
        """
        super().__init__(message)
        self.field = field


class ConfigurationError(InjectorError):
    """Raised when required configuration is missing or blank.

    Retrying does not help: the value comes from process configuration that
    does not change while the process runs.

    Attributes:
        message: Description of the failure
        key: Configuration key that was missing (optional)
    """

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        """Initialize ConfigurationError exception.

        Args:
            message: Error message describing the failure
            key: Name of the missing configuration key (optional)
        """
        super().__init__(message)
        self.key = key


class StructuralInvariantViolation(InjectorError):
    """Raised when an internal precondition of the mutation pipeline fails.

    Examples are a workload whose pod spec cannot be resolved after decode,
    or a generated patch that does not reproduce the mutated object.

    Attributes:
        message: Description of the violation
        details: Additional debugging information (optional)
    """

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        """Initialize StructuralInvariantViolation exception.

        Args:
            message: Error message describing the violation
            details: Additional details for debugging (optional)
        """
        super().__init__(message)
        self.details = details
