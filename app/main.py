import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.database import AsyncSessionLocal, init_db
from app.core.exceptions import register_exception_handlers
from app.core.logging import configure_logging
from app.middleware import CorrelationIdMiddleware
from app.services.auth_service import ensure_initial_admin

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

# Middleware: correlation id
app.add_middleware(CorrelationIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Route imports
from app.api.health import router as health_router
from app.api.v1 import auth as auth_router
from app.api.v1 import collaborators as v1_collaborators
from app.api.v1 import projects as v1_projects
from app.api.v1 import tjm as v1_tjm

# Register routers
app.include_router(health_router, prefix="/api", tags=["health"])

# v1 API routes
app.include_router(auth_router.router, prefix="/api/v1", tags=["auth"])
app.include_router(v1_collaborators.router, prefix="/api/v1", tags=["collaborators"])
app.include_router(v1_projects.router, prefix="/api/v1", tags=["projects"])
app.include_router(v1_tjm.router, prefix="/api/v1", tags=["tjm"])


# Exception handlers
register_exception_handlers(app)


@app.on_event("startup")
async def on_startup():
    logger.info("Starting app", extra={"app": settings.APP_NAME, "environment": settings.ENVIRONMENT})

    if settings.INIT_DB_ON_START:
        logger.info("INIT_DB_ON_START enabled: creating tables")
        await init_db()

    async with AsyncSessionLocal() as session:
        admin = await ensure_initial_admin(session)
        if admin:
            logger.info("Initial admin available", extra={"username": admin.username})


@app.on_event("shutdown")
async def on_shutdown():
    logger.info("Shutting down")
