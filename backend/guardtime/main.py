from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from guardtime.api.routes import health
from guardtime.core.config import settings
from guardtime.core.errors import register_exception_handlers
from guardtime.core.logging import bind_request_context, configure_logging, get_logger
from guardtime.core.monitoring import configure_error_monitoring
from guardtime.core.observability import configure_observability
from guardtime.domains.auth.router import router as auth_router
from guardtime.domains.employees.router import router as employee_router
from guardtime.domains.payroll.router import pay_period_router, payslip_router
from guardtime.domains.payroll.router import router as payroll_router
from guardtime.domains.timekeeping.router import routers as timekeeping_routers
from guardtime.domains.users.router import router as users_router

configure_logging(settings.log_level)
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("startup_complete", env=settings.env, night_diff_mode=settings.night_diff_mode)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    bind_request_context(request_id, request.method, request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(health.router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(employee_router)
for timekeeping_router in timekeeping_routers:
    app.include_router(timekeeping_router)
app.include_router(pay_period_router)
app.include_router(payroll_router)
app.include_router(payslip_router)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Guardtime API running", "environment": settings.env}
