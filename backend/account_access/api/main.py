"""
Name: FastAPI Application Factory

Responsibilities:
  - Build the FastAPI app (metadata, middleware, routers, handlers)
  - Manage the DB pool lifecycle (skipped in the test environment)
  - Expose /healthz and /metrics

Collaborators:
  - RequestContextMiddleware: request id + logging context
  - interfaces.api.http.routers.profiles: profile/identity endpoints
  - api.exception_handlers: RFC 7807 mapping

Notes:
  - Middleware order: RequestContext -> CORS -> routes
  - /v1 prefix allows API versioning
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..container import get_fact_gatherer
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import access_denied
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import RequestContextMiddleware
from ..identity.auth import require_session
from ..identity.roles import Role
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.routers.profiles import router as profiles_router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle: pool init (non-test) and close."""
    settings = get_settings()
    use_db = not settings.is_test()

    if use_db:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    logger.info(
        "Account access API starting up",
        extra={
            "app_env": settings.app_env,
            "db_pool_min": settings.db_pool_min_size,
            "db_pool_max": settings.db_pool_max_size,
            "fact_lookup_workers": settings.fact_lookup_workers,
        },
    )
    try:
        yield
    finally:
        if get_fact_gatherer.cache_info().currsize:
            get_fact_gatherer().shutdown()
            get_fact_gatherer.cache_clear()
        if use_db:
            close_pool()
        logger.info("Account access API shutting down")


async def _metrics_guard(request: Request) -> None:
    """When METRICS_REQUIRE_AUTH=true, only ADMIN sessions may scrape."""
    if not get_settings().metrics_require_auth:
        return
    session = await require_session()(request, request.headers.get("Authorization"))
    if Role.ADMIN not in session.effective_roles:
        raise access_denied()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Account Access API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "profiles", "description": "Profile visibility and updates"},
        ],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=True,
        allow_methods=["GET", "PATCH"],
        allow_headers=["Authorization", "Content-Type", "X-Request-Id"],
        expose_headers=["X-Request-Id"],
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)
    app.include_router(profiles_router, prefix="/v1")

    @app.get("/healthz", include_in_schema=False)
    def healthz() -> dict:
        return {"ok": True}

    @app.get("/metrics", include_in_schema=False, dependencies=[Depends(_metrics_guard)])
    def metrics() -> Response:
        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()
