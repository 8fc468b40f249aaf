"""
Cakeshop Storefront - Main FastAPI Application

Single entry point for the storefront API. The cart provider and checkout
service are constructed here and installed on app.state.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cakeshop.cart import CartProvider
from cakeshop.checkout import CheckoutService
from cakeshop.logging import configure_logging, get_logger
from cakeshop.routers.webapp import router as webapp_router

logger = get_logger(__name__)


def create_app(
    cart_provider: Optional[CartProvider] = None,
    checkout_service: Optional[CheckoutService] = None,
) -> FastAPI:
    """Build the storefront app. Without a provider, a Redis-backed one is installed at startup."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler"""
        # Startup
        if getattr(app.state, "cart_provider", None) is None:
            app.state.cart_provider = CartProvider()
            logger.info("Cart provider installed (Upstash Redis)")
        yield
        # Shutdown
        service = getattr(app.state, "checkout_service", None)
        if service is not None:
            service.close()

    app = FastAPI(
        title="Cakeshop Storefront",
        description="Cake ordering storefront API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.cart_provider = cart_provider
    app.state.checkout_service = checkout_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(webapp_router)

    @app.get("/api/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "ok", "service": "cakeshop"}

    return app


app = create_app()
