import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings, settings as default_settings
from app.core import database
from app.core.handlers import register_exception_handlers
from app.core.logging import logger
from app.api.v1.router import build_api_router


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application for a Settings instance.

    The default settings reuse the module-level engine and SessionLocal;
    any other settings get an engine of their own built from DATABASE_URL,
    disposed on shutdown. Memory storage needs no engine at all.
    """
    settings = settings or default_settings

    if settings.STORAGE_BACKEND == "memory":
        engine, session_factory, owns_engine = None, None, False
    elif settings is default_settings:
        engine, session_factory, owns_engine = database.engine, database.SessionLocal, False
    else:
        engine = database.build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO_SQL)
        session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
        )
        owns_engine = True

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Starting {settings.PROJECT_NAME} ({settings.STORAGE_BACKEND} storage, "
            f"database {settings.masked_database_url()})"
        )
        if settings.STORAGE_BACKEND == "database":
            database.init_db(engine, create_tables=settings.AUTO_CREATE_TABLES)
        yield
        if owns_engine:
            engine.dispose()
        logger.info(f"Shutting down {settings.PROJECT_NAME}")

    # Starlette's debug mode would replace the JSON 500 envelope with a
    # plain-text traceback; DEBUG is applied in general_exception_handler
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every HTTP request with its status and duration"""
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"{request.method} {request.url.path} -> 500 ({elapsed_ms:.1f} ms): {exc!r}"
            )
            raise
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
        return response

    register_exception_handlers(app)

    app.include_router(build_api_router(settings.STORAGE_BACKEND), prefix=settings.API_PREFIX)

    @app.get("/", tags=["root"])
    def root():
        """Greeting"""
        return {
            "message": "Welcome to Student Management API",
            "docs": "/docs",
            "version": settings.APP_VERSION,
            "storage": settings.STORAGE_BACKEND,
        }

    @app.get("/health", tags=["root"])
    def health_check():
        """Health check, including the database when it backs the API"""
        if settings.STORAGE_BACKEND == "database" and not database.check_database_connection(engine):
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "database": "unreachable"},
            )
        return {"status": "healthy", "storage": settings.STORAGE_BACKEND}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=default_settings.HOST, port=default_settings.PORT)
