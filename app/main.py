from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from timing_asgi import TimingMiddleware, TimingClient  # type: ignore
from timing_asgi.integrations import StarletteScopeToName  # type: ignore

from app.core import config
from app.core.database.engine import AsyncSessionLocal, init_db
from app.core.database.seed import seed_database
from app.core.errors import AppError
from app.core.limiter import limiter
from app.features.audit.routes import router as audit_router
from app.features.organizations.routes import router as organization_router
from app.features.tasks.routes import router as task_router
from app.features.users.routes import router as user_router, auth_router
from app.utils import get_logger


log = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Create tables and seed once at process start."""
    log.info("Initializing database...")
    await init_db()
    if config.SEED_ON_STARTUP:
        async with AsyncSessionLocal() as db:
            await seed_database(db)
    log.info("Database initialized successfully")
    yield


log.info("Initializing server")
app = FastAPI(
    title="Task Management API",
    description="Multi-tenant task management with role-based access across organization hierarchies",
    version="0.1.0",
    docs_url="/docs" if config.ENABLE_DOCS else None,
    redoc_url="/redoc" if config.ENABLE_DOCS else None,
    openapi_url="/openapi.json" if config.ENABLE_DOCS else None,
    lifespan=lifespan,
)
app.state.limiter = limiter


class PrintTimings(TimingClient):
    def timing(self, metric_name, timing, tags):
        log.debug(dict(route=metric_name.removeprefix("main.app.features."), timing=timing, tags=tags))


app.add_middleware(TimingMiddleware, client=PrintTimings(), metric_namer=StarletteScopeToName("main", app))

if config.ENABLE_DOCS:
    log.warning("Docs enabled")
if config.ALLOW_ORIGIN:
    log.warning("Setting allow origin to %s", config.ALLOW_ORIGIN)
    origins = [config.ALLOW_ORIGIN]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    log.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    errors = dict()
    for error in exc.errors():
        if "loc" not in error or "msg" not in error:
            continue
        key = error["loc"][-1]
        if key == "__root__":
            key = "root"
        errors[key] = error["msg"]
    log.info("Request validation error %s", errors)
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"success": False, "message": "Validation failed", "errors": errors}),
    )


@app.exception_handler(RateLimitExceeded)
def rate_limit_exceeded_handler(_request: Request, _exc: RateLimitExceeded) -> Response:
    return JSONResponse({"success": False, "message": "You are going too fast"}, status_code=429)


@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "message": "Task Management API",
        "version": "0.1.0",
        "status": "online",
        "docs": "/docs" if config.ENABLE_DOCS else None,
        "authentication": {
            "info": "Protected endpoints require Bearer token in Authorization header",
            "public_endpoints": ["/auth/register", "/auth/login", "/health"],
        },
        "roles": ["SystemAdmin", "Owner", "Admin", "Viewer"],
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(user_router, prefix="/users", tags=["users"])
app.include_router(organization_router, prefix="/organizations", tags=["organizations"])
app.include_router(task_router, prefix="/tasks", tags=["tasks"])
app.include_router(audit_router, prefix="/audit-log", tags=["audit"])
