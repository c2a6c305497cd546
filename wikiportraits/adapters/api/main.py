# wikiportraits/adapters/api/main.py
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from wikiportraits import __version__
from wikiportraits.shared.config import settings
from wikiportraits.shared.container import container
from wikiportraits.shared.logging_config import configure_logging
from wikiportraits.shared.observability import setup_observability

# Import Routers
# The modules are imported directly so that 'container.wire' can find the @inject sites
from wikiportraits.adapters.api.routers import (
    auth,
    categories,
    commons,
    health,
    music,
    wikidata,
    wikipedia,
    wikitext,
    workflow,
)

logger = structlog.get_logger()

WIRED_MODULES = [
    "wikiportraits.adapters.api.routers.auth",
    "wikiportraits.adapters.api.routers.commons",
    "wikiportraits.adapters.api.routers.wikidata",
    "wikiportraits.adapters.api.routers.wikipedia",
    "wikiportraits.adapters.api.routers.music",
    "wikiportraits.adapters.api.routers.categories",
    "wikiportraits.adapters.api.routers.wikitext",
    "wikiportraits.adapters.api.routers.health",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup wires the DI container into the routers.
    The gateways open an HTTP client per call, so shutdown has nothing to close.
    """
    logger.info("app_startup", env=settings.APP_ENV.value, oauth_enabled=settings.oauth_enabled)
    container.wire(modules=WIRED_MODULES)
    yield
    logger.info("app_shutdown")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Every error leaves as ``{"error": ...}``. A dict detail (upload warnings)
    is already an envelope and goes out unchanged.
    """
    body = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """A request that fails validation is a 400 carrying the first problem."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
    if first.get("type") == "missing":
        message = f"{field} is required"
    else:
        message = f"{field}: {first.get('msg', 'invalid value')}"
    logger.info("request_validation_failed", path=request.url.path, error=message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


def create_app() -> FastAPI:
    """Factory function to create the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version=__version__,
        description="WikiPortraits uploader backend (Commons, Wikidata, Wikipedia)",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
    )

    # Global Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # authlib keeps the OAuth request token here between login and callback
    app.add_middleware(SessionMiddleware, secret_key=settings.SESSION_SECRET)

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Register Routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(auth.csrf_router)
    app.include_router(commons.router)
    app.include_router(wikidata.router)
    app.include_router(wikipedia.router)
    app.include_router(music.router)
    app.include_router(categories.router)
    app.include_router(wikitext.router)
    app.include_router(workflow.router)

    setup_observability(app)

    return app


def run():
    """Entry point of the `wikiportraits-api` script."""
    import uvicorn
    uvicorn.run(
        "wikiportraits.adapters.api.main:create_app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        factory=True,
    )


# Entry point for local debugging (e.g. `python -m wikiportraits.adapters.api.main`)
if __name__ == "__main__":
    run()
