import time
from contextlib import asynccontextmanager
from datetime import timedelta
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from overtime.models import OvertimeError
from overtime.rate_limit import RateLimiter
from overtime.security import CSRFTokenStore
from overtime_api.api.routes import health
from overtime_api.core.config import settings
from overtime_api.core.logging import bind_request, configure_logging, get_logger
from overtime_api.core.monitoring import configure_error_monitoring
from overtime_api.core.observability import configure_observability
from overtime_api.db.session import init_db
from overtime_api.domains.admin.router import router as admin_router
from overtime_api.domains.auth.router import router as auth_router
from overtime_api.domains.overtime.router import router as overtime_router
from overtime_api.domains.users.router import router as users_router

configure_logging(settings.log_level)
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("startup_complete", env=settings.env)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.state.login_limiter = RateLimiter(
    max_attempts=settings.login_max_attempts,
    window=timedelta(minutes=settings.login_window_minutes),
)
app.state.csrf_store = CSRFTokenStore(lifetime=timedelta(minutes=settings.csrf_token_minutes))

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.cors_origins] or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    bind_request(request.headers.get("x-request-id") or uuid4().hex, request.method, request.url.path)
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "request_completed",
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return response


@app.exception_handler(OvertimeError)
async def overtime_error_handler(request: Request, exc: OvertimeError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": exc.message, "code": exc.code.value})


app.include_router(health.router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(overtime_router)
app.include_router(admin_router)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "REDE JB Overtime API running", "environment": settings.env}
