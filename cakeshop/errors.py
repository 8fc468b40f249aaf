"""
Common Error Constants and exceptions.

Centralized error messages to avoid string duplication.
"""

# Cart errors
ERROR_CART_EMPTY = "Cart is empty"
ERROR_CART_PROVIDER_MISSING = "Cart provider is not installed on this application"
ERROR_CART_SESSION_REQUIRED = "X-Cart-Session header is required"

# Order errors
ERROR_ORDER_FAILED = "Failed to place order. Please try again."

# Generic errors
ERROR_INVALID_REQUEST = "Invalid request"
ERROR_INTERNAL = "Internal server error"


class CartProviderMissingError(RuntimeError):
    """Cart accessed outside of an application that installed a CartProvider."""

    def __init__(self, message: str = ERROR_CART_PROVIDER_MISSING):
        super().__init__(message)


class EmptyCartError(ValueError):
    """Checkout attempted against an empty cart."""

    def __init__(self, message: str = ERROR_CART_EMPTY):
        super().__init__(message)


class OrderCreationError(RuntimeError):
    """Order API did not confirm the order."""

    def __init__(self, message: str = ERROR_ORDER_FAILED, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
