from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from framework.config import settings
from framework.database.manager import DatabaseManager
from framework.response import ResponseModel
from framework.middleware.logging_md import LoggingMiddleware
from framework.logging.logger import LogConfig, get_logger
from framework.exceptions.handler import BusinessException, global_exception_handler
from apps.identity.api.router import router as identity_router
from apps.tasks.api.router import router as task_router
from apps.comments.api.router import router as comment_router
from apps.workspaces.api.router import router as workspace_router

# Initialize logging configuration
LogConfig.setup_logging()
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    manager = DatabaseManager.get_instance()
    if manager.sql.url.startswith("sqlite"):
        # Local SQLite databases are created on the fly; MySQL goes through Alembic
        await manager.sql.create_all()
    logger.info(f"{settings.APP_NAME} started ({settings.APP_ENV})")
    yield
    await manager.sql.disconnect()


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
app.add_exception_handler(BusinessException, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(LoggingMiddleware)

# Mount routers (prefixes from config)
app.include_router(identity_router, prefix=settings.API_AUTH_PREFIX, tags=["Auth"])
app.include_router(task_router, prefix=settings.API_TASKS_PREFIX, tags=["Tasks"])
app.include_router(comment_router, prefix=settings.API_COMMENTS_PREFIX, tags=["Comments"])
app.include_router(workspace_router, prefix=settings.API_WORKSPACES_PREFIX, tags=["Workspaces"])


@app.get("/")
async def root():
    return ResponseModel.success(
        message=settings.APP_NAME,
        data={
            "version": settings.APP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


@app.get("/health")
async def health():
    return ResponseModel.success(data={"status": "ok"})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
