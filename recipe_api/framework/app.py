from datetime import datetime, timezone

from fastapi import APIRouter, Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recipe_api.config import get_config, get_config_for_service
from recipe_api.framework.errors import (
    RecipeApiError,
    StorageError,
    describe_validation_errors,
)
from recipe_api.framework.helpers import make_endpoint, resolve_handler
from recipe_api.framework.logging import log_event
from recipe_api.framework.tracing import tracing_middleware
from recipe_api.shared.schemas.generic import ErrorResponse, HealthResponse

app_config = get_config()


def install_error_handlers(app: FastAPI):
    """
    Every failure answers `{"message": ...}`. Body shape problems are
    reported as 400 like any other invalid input.
    """

    @app.exception_handler(RecipeApiError)
    async def recipe_api_error(request, exc: RecipeApiError):
        log_event(
            "request_failed",
            method=request.method,
            path=request.url.path,
            status=exc.status_code,
            error=type(exc).__name__,
        )
        return JSONResponse(
            status_code=exc.status_code, content={"message": exc.message}
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request, exc: RequestValidationError):
        message = describe_validation_errors(exc.errors())
        log_event(
            "request_rejected",
            method=request.method,
            path=request.url.path,
            message=message,
        )
        return JSONResponse(status_code=400, content={"message": message})


def create_microservice(service_name: str, get_store, lifespan=None) -> FastAPI:
    """
    Build a FastAPI microservice dynamically from config.yaml.
    `get_store` is the dependency handing each request the service's store.
    """

    # Load config for service
    service = get_config_for_service(service_name)
    prefix = app_config.urlPrefix

    app = FastAPI(
        title=app_config.title,
        description=app_config.description,
        version=app_config.version,
        lifespan=lifespan,
    )

    router = APIRouter(prefix=prefix)

    # Register all routes listed under this service config
    for route in service.routes:
        handler_fn = resolve_handler(route.handler)
        endpoint = make_endpoint(route, handler_fn, get_store)

        router.add_api_route(
            route.path,
            endpoint,
            methods=[route.method.upper()],
            response_model=route.response_model,
            status_code=route.status_code,
            responses={code: {"model": ErrorResponse} for code in route.errors},
            summary=route.description,
            tags=route.tags or [service.title],
        )

        log_event(
            "startup",
            action="route_registration",
            service_name=service_name,
            method=route.method.upper(),
            path=f"{prefix}{route.path}",
            handler=route.handler,
        )

    health_path = f"{prefix}/health"

    @router.get(
        "/health",
        response_model=HealthResponse,
        responses={503: {"model": HealthResponse}},
        tags=["System"],
        summary="Checks that the database answers",
    )
    async def health(store=Depends(get_store)):
        now = datetime.now(timezone.utc)
        try:
            store.ping()
        except StorageError:
            body = HealthResponse(
                status="unhealthy", database="disconnected", timestamp=now
            )
            return JSONResponse(status_code=503, content=body.model_dump(mode="json"))
        return HealthResponse(status="healthy", database="connected", timestamp=now)

    app.include_router(router)

    @app.get("/", tags=["System"], summary="Service information")
    async def root():
        return {
            "message": f"{app_config.title} is running",
            "version": app_config.version,
            "documentation": app.docs_url,
            "health": health_path,
            "endpoints": [
                f"{route.method.upper()} {prefix}{route.path}"
                for route in service.routes
            ],
        }

    install_error_handlers(app)
    app.middleware("http")(tracing_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.cors.origins,
        allow_credentials=app_config.cors.allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app
