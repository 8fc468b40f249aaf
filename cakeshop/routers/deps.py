"""
Shared Dependencies for Routers

The cart provider and checkout service are constructed at the application
root and installed on `app.state`; routes receive them through these
dependencies.
"""

from fastapi import Header, HTTPException, Request

from cakeshop.cart import CartProvider, CartStore, require_cart_provider
from cakeshop.checkout import CheckoutService
from cakeshop.errors import ERROR_CART_SESSION_REQUIRED


def get_cart_provider(request: Request) -> CartProvider:
    """Installed CartProvider; raises CartProviderMissingError when absent."""
    return require_cart_provider(request.app.state)


def get_cart_store(
    request: Request,
    x_cart_session: str | None = Header(default=None),
) -> CartStore:
    """Cart store for the session named by the X-Cart-Session header."""
    if not x_cart_session or not x_cart_session.strip():
        raise HTTPException(status_code=400, detail=ERROR_CART_SESSION_REQUIRED)
    provider = get_cart_provider(request)
    return provider.get_store(x_cart_session.strip())


def get_checkout_service(request: Request) -> CheckoutService:
    """Installed CheckoutService, created on first use when none was installed."""
    service = getattr(request.app.state, "checkout_service", None)
    if service is None:
        service = CheckoutService()
        request.app.state.checkout_service = service
    return service
