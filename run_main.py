# run_main.py
import logging

from fastapi import FastAPI
from dotenv import load_dotenv

from glossary_backend.app.core.config import config
from glossary_backend.app.core.database import engine
from glossary_api.cache import init_cache
from glossary_api.main import add_middlewares, get_app as get_glossary_app
from glossary_api.seed import init_and_seed

logger = logging.getLogger("run_main")


def configure_logging(level: str = None) -> None:
    logging.basicConfig(
        level=level or config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_unified_app() -> FastAPI:
    load_dotenv()
    configure_logging()

    SECRET_KEY = config.SECRET_KEY
    if not SECRET_KEY:
        raise RuntimeError("Missing SECRET_KEY in .env")

    # 1) 先生成子 app（只用来拿路由和异常处理器，不会触发它的 startup）
    glossary_app = get_glossary_app()

    # 2) 创建总 app & 中间件
    app = FastAPI(title="Glossary Unified API")
    add_middlewares(app, SECRET_KEY)

    # 3) 统一初始化数据库和缓存（总入口负责）
    @app.on_event("startup")
    async def _init_services():
        try:
            init_and_seed()
            logger.info("✅ Database ready: %s", config.DATABASE_URL.split("@")[-1])
        except Exception as e:
            logger.error("❌ Database init failed: %s", e)
            raise
        backend = await init_cache()
        logger.info("[run_main] cache backend: %s", backend)

    @app.on_event("shutdown")
    async def _close_services():
        engine.dispose()
        logger.info("[run_main] database connections closed")

    # 4) 合并路由和异常处理器
    for route in glossary_app.router.routes:
        app.router.routes.append(route)
    for key, handler in glossary_app.exception_handlers.items():
        app.add_exception_handler(key, handler)

    return app


app = create_unified_app()
