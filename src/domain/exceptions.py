"""Domain exceptions

Pure calculation code raises these. Use cases convert them into
``libs.result.Error`` values carrying the same ``code``, except
``ConfigurationError``, which always propagates to the caller.
"""


class BillingError(Exception):
    """Base exception for the billing domain"""

    code = "BILLING_ERROR"

    def __init__(self, message: str, reason: str = None, code: str = None):
        super().__init__(message)
        self.message = message
        self.reason = reason
        if code:
            self.code = code


class ValidationError(BillingError):
    """Malformed or missing required input"""

    code = "VALIDATION_ERROR"


class ConfigurationError(BillingError):
    """Rate table or other deployment configuration is broken"""

    code = "CONFIGURATION_ERROR"


class InvalidAmount(BillingError):
    """Payment amount is zero or negative"""

    code = "INVALID_AMOUNT"


class NotFound(BillingError):
    """Referenced customer, slot or summary does not exist"""

    code = "NOT_FOUND"


class ConflictError(BillingError):
    """Uniqueness violation on a concurrent duplicate write"""

    code = "CONFLICT"
