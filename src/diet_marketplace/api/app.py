"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from diet_marketplace.api.admin import router as admin_router
from diet_marketplace.api.foods import router as foods_router
from diet_marketplace.api.meal_plans import router as meal_plans_router
from diet_marketplace.api.notifications import router as notifications_router
from diet_marketplace.api.orders import router as orders_router
from diet_marketplace.api.profiles import router as profiles_router
from diet_marketplace.api.shopping import router as shopping_router
from diet_marketplace.app_logging import configure_logging
from diet_marketplace.containers import AppContainer
from diet_marketplace.domain.errors import (
    AuthorizationError,
    DomainError,
    NotComputable,
    NotFound,
    StateConflict,
    ValidationError,
)

_STATUS_CODES: dict[type[DomainError], int] = {
    ValidationError: 400,
    AuthorizationError: 403,
    NotFound: 404,
    StateConflict: 409,
    NotComputable: 422,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        status_code = _STATUS_CODES.get(type(exc), 400)
        logger.info(
            "Request rejected",
            extra={"path": request.url.path, "error": exc.kind},
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "error": exc.kind},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Omit inputs; rejected values such as NaN are not valid JSON.
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        logger.info(
            "Request body rejected",
            extra={"path": request.url.path, "errors": errors},
        )
        return JSONResponse(
            status_code=422, content={"detail": errors, "error": "invalid_request"}
        )

    app.include_router(profiles_router)
    app.include_router(foods_router)
    app.include_router(orders_router)
    app.include_router(shopping_router)
    app.include_router(notifications_router)
    app.include_router(meal_plans_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
