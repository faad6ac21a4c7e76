"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class InvalidLicenseKeyFormatError(LicenseException):
    """Raised when a license key does not have the expected shape."""

    def __init__(self, message: str = "Invalid license key format"):
        super().__init__(message, code="INVALID_LICENSE_KEY_FORMAT")


class LicenseActivationError(LicenseException):
    """Raised when the licensing service refuses an activation."""

    def __init__(self, message: str = "Activation failed: Missing instance data"):
        super().__init__(message, code="LICENSE_ACTIVATION_FAILED")


class ProductMismatchError(LicenseException):
    """Raised when an activated key belongs to another store or product."""

    def __init__(self, message: str = "This license key is not valid for this product."):
        super().__init__(message, code="PRODUCT_MISMATCH")


class LicenseApiTransportError(LicenseException):
    """
    Raised when the licensing service could not be reached.

    Covers DNS failures, timeouts, refused connections, unexpected HTTP
    statuses and undecodable bodies. Never used for structured rejections.
    """

    def __init__(self, message: str = "Licensing service unavailable", status_code: int = None):
        super().__init__(message, code="LICENSE_API_UNAVAILABLE")
        self.status_code = status_code


class FeatureException(DomainException):
    """Base exception for feature-related errors."""

    pass


class FeatureExecutionError(FeatureException):
    """Raised when a feature body cannot complete."""

    def __init__(self, message: str = "Feature execution failed"):
        super().__init__(message, code="FEATURE_EXECUTION_FAILED")
