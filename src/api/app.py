"""FastAPI application factory."""

import base64
import logging
import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from config.settings import settings
from src.analysis import TaxAnalysisService
from src.api.routes import router
from src.calculators.deductions import load_advice_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: configure logging, load advice config, build the service."""
    logging.basicConfig(level=settings.log_level)
    logger.info("Starting up...")

    advice = load_advice_config(settings.deduction_limits_file)
    app.state.analysis_service = TaxAnalysisService(
        advice,
        default_financial_year=settings.default_financial_year,
    )

    yield

    logger.info("Shutting down...")


UNAUTHORIZED = Response(
    content="Unauthorized",
    status_code=401,
    headers={"WWW-Authenticate": "Basic"},
)


AUTH_USERNAME = settings.auth_username.encode()
AUTH_PASSWORD = settings.auth_password.encode()


class BasicAuthMiddleware(BaseHTTPMiddleware):
    """Enforce HTTP Basic Auth on all requests."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        auth = request.headers.get("Authorization")
        if auth and auth.startswith("Basic "):
            try:
                decoded = base64.b64decode(auth[6:]).decode()
                username, password = decoded.split(":", 1)
            except ValueError:
                return UNAUTHORIZED
            if secrets.compare_digest(username.encode(), AUTH_USERNAME) and secrets.compare_digest(
                password.encode(), AUTH_PASSWORD
            ):
                return await call_next(request)
        logger.warning("Rejected unauthenticated request to %s", request.url.path)
        return UNAUTHORIZED


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 without the rejected inputs; NaN and infinity cannot be encoded as JSON."""
    errors = [{k: v for k, v in error.items() if k != "input"} for error in exc.errors()]
    logger.info("Rejected request to %s: %d validation error(s)", request.url.path, len(errors))
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Basic Auth is installed only when credentials are configured.
    """
    app = FastAPI(title="Tax Sahi Hai regime calculator", lifespan=lifespan)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    if settings.auth_enabled:
        app.add_middleware(BasicAuthMiddleware)
    app.include_router(router)
    return app
