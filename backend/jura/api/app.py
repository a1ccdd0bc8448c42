"""
FastAPI 应用工厂
注册 CORS、统一错误处理和全部路由
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jura import __version__
from jura.api.routes import agents, auth, chat, goals, ingest, profile
from jura.config import get_settings
from jura.container import Container, build_container
from jura.errors import AppError
from jura.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _validation_errors(exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        errors.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("[api] %s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Validation failed", "errors": _validation_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("[api] unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"success": False, "message": "Internal server error"})


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    创建 FastAPI 应用

    Args:
        container: 已构造的服务容器；None 时按环境配置构造

    Returns:
        FastAPI 应用
    """
    if container is None:
        settings = get_settings()
        configure_logging(settings.log_level)
        container = build_container(settings)

    app = FastAPI(
        title="Jura API",
        description="Career assistant backend: document ingestion, RAG, agents and streaming chat.",
        version=__version__,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=container.settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(ingest.router)
    app.include_router(agents.router)
    app.include_router(chat.router)
    app.include_router(profile.router)
    app.include_router(goals.router)

    @app.get("/health", tags=["System"])
    def health():
        return {"status": "ok", "version": __version__}

    return app
