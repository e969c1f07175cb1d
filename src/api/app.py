"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.api.error import ClientError, client_error_handler
from src.api.routes import customers, dues, ledger, payments
from src.depends import notifier


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Let scheduled customer messages finish before the loop closes
    await notifier.drain()


def create_app(config) -> FastAPI:
    app = FastAPI(
        title="Credit Ledger Service",
        description="Customer running balances, payments and dues",
        lifespan=lifespan,
    )

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=config.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(ClientError, client_error_handler)

    for router in (customers.router, ledger.router, payments.router, dues.router):
        app.include_router(router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy"}

    return app
