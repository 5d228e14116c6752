from contextlib import asynccontextmanager
from fastapi import FastAPI
from framework.config import settings
from framework.database.manager import DatabaseManager
from framework.middleware.logging_md import LoggingMiddleware
from framework.logging.logger import LogConfig, get_logger
from framework.exceptions.handler import HANDLED_EXCEPTIONS, global_exception_handler
import apps.mappers  # noqa: F401  registers entity -> DTO mappings
from apps.identity.api.router import router as auth_router
from apps.identity.api.users import router as users_router
from apps.identity.api.roles import router as roles_router
from apps.facilities.api.router import router as facilities_router
from apps.accreditation.api.router import router as accreditation_router
from apps.billing.api.router import router as billing_router
from apps.sessions.api.router import router as sessions_router
from apps.health.api.router import router as health_router

# Initialize logging configuration
LogConfig.setup_logging()
logger = get_logger("main")

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} starting ({settings.APP_ENV})")
    yield
    await DatabaseManager.shutdown()
    logger.info(f"{settings.APP_NAME} stopped")

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Register global exception handlers
for exc_class in HANDLED_EXCEPTIONS:
    app.add_exception_handler(exc_class, global_exception_handler)

app.add_middleware(LoggingMiddleware)

# Mount routers (prefix from config for easy override per deployment)
app.include_router(auth_router, prefix=settings.API_V1_AUTH_PREFIX, tags=["Auth"])
app.include_router(users_router, prefix=settings.API_V1_USERS_PREFIX, tags=["Users"])
app.include_router(roles_router, prefix=settings.API_V1_ROLES_PREFIX, tags=["Roles & Permissions"])
app.include_router(facilities_router, prefix=settings.API_V1_FACILITIES_PREFIX, tags=["Facilities"])
app.include_router(accreditation_router, prefix=settings.API_V1_ACCREDITATIONS_PREFIX, tags=["Accreditations"])
app.include_router(billing_router, prefix=settings.API_V1_BILLING_PREFIX, tags=["Billing"])
app.include_router(sessions_router, prefix=settings.API_V1_SESSIONS_PREFIX, tags=["Gap Analysis Sessions"])
app.include_router(health_router, prefix=settings.API_HEALTH_PREFIX, tags=["Health"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
