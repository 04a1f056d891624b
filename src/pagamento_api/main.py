"""FastAPI application for the payment service.

This package provides REST endpoints for:
- Health checks
- Creating and reading QR payments
- Mercado Pago webhook notifications
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from mangum import Mangum

from pagamento import __version__
from pagamento.config import get_settings
from pagamento.utils.logging import configure_logging, get_logger
from pagamento_api.dependencies import reset_services
from pagamento_api.exceptions import register_exception_handlers
from pagamento_api.middleware import CorrelationIdMiddleware
from pagamento_api.routes import health_router, payments_router, webhooks_router

settings = get_settings()
configure_logging(settings.log_level, development=settings.is_development)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Payment service starting (env=%s)", settings.env)
    yield
    # Close the shared Mercado Pago HTTP client
    reset_services()
    logger.info("Payment service stopped")


app = FastAPI(
    title="Pagamento API",
    description="QR payments through Mercado Pago with webhook reconciliation",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(CorrelationIdMiddleware)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.include_router(health_router)
app.include_router(payments_router, prefix="/v1")
app.include_router(webhooks_router, prefix="/v1")


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int | None = None) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: PORT setting, 8080)
    """
    import uvicorn

    uvicorn.run(app, host=host, port=port or settings.port, log_config=None)


if __name__ == "__main__":
    run_server()
