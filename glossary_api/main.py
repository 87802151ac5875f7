# glossary_api/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from glossary_backend.app.core.config import config
from glossary_backend.app.schemas import format_validation_errors
from glossary_api.cache import register_cache

# 路由
from glossary_api.routes.auth_routes import router as auth_router
from glossary_api.routes.dictionary_routes import router as dictionary_router
from glossary_api.routes.settings_routes import router as settings_router
from glossary_api.routes.page_routes import router as page_router

logger = logging.getLogger(__name__)

INTERNAL_ERROR = {"message": "Internal server error"}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # 请求体验证失败统一返回 400 + 可读的错误信息
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "message": "Invalid request data",
                "errors": format_validation_errors(exc.errors()),
            },
        )

    # 数据库错误只记录日志，不把细节返回给前端
    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR)


def add_middlewares(app: FastAPI, secret_key: str) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # 管理后台的登录状态（签名 cookie）
    app.add_middleware(
        SessionMiddleware,
        secret_key=secret_key,
        session_cookie="session",
        max_age=86400,
    )


def get_app():
    SECRET_KEY = config.SECRET_KEY
    if not SECRET_KEY:
        raise ValueError("Missing SECRET_KEY. Check your .env file.")

    app = FastAPI(title="Glossary API")

    # --- 中间件 ---
    add_middlewares(app, SECRET_KEY)

    # --- 注册路由 ---
    app.include_router(auth_router)
    app.include_router(dictionary_router)
    app.include_router(settings_router)
    app.include_router(page_router)

    register_exception_handlers(app)

    # --- 单独运行子 app 时初始化缓存（总入口另行初始化） ---
    register_cache(app)

    # --- 健康检查 ---
    @app.get("/health")
    def health_check():
        return {"status": "Glossary API is running!"}

    return app
