# glossary_api/cache.py
"""
fastapi-cache2 相关：初始化、请求级 key、写操作后的命名空间失效
"""
import logging

from fastapi import FastAPI
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from fastapi_cache.backends.redis import RedisBackend
import redis.asyncio as aioredis

from glossary_backend.app.core.config import config

logger = logging.getLogger(__name__)

# ==== 缓存命名空间（方便精准失效） ====
NS_DICTIONARY = "dictionary"
NS_SETTINGS = "settings"


def request_key_builder(func, namespace: str = "", *, request=None, response=None, args=(), kwargs=None):
    """
    key = 命名空间 + 方法 + 路径 + 排好序的查询参数。
    不把 db session 之类的参数放进 key。
    """
    if request is None:
        return f"{namespace}:{func.__module__}:{func.__name__}"
    params = "&".join(f"{k}={v}" for k, v in sorted(request.query_params.multi_items()))
    return f"{namespace}:{request.method}:{request.url.path}?{params}"


async def init_cache(redis_url: str = None, prefix: str = None) -> str:
    """优先 Redis，连不上就退回内存缓存；返回实际使用的后端名称"""
    redis_url = redis_url or config.REDIS_URL
    prefix = prefix or config.CACHE_PREFIX
    try:
        r = aioredis.from_url(redis_url, encoding="utf8", decode_responses=True)
        await r.ping()
        FastAPICache.init(RedisBackend(r), prefix=prefix, expire=config.CACHE_EXPIRE_SECONDS,
                          key_builder=request_key_builder)
        logger.info("✅ fastapi-cache initialized with Redis: %s", redis_url)
        return "redis"
    except Exception as e:
        FastAPICache.init(InMemoryBackend(), prefix=prefix, expire=config.CACHE_EXPIRE_SECONDS,
                          key_builder=request_key_builder)
        logger.warning("⚠️  Redis init failed (%s), fallback to InMemory cache.", e)
        return "memory"


def register_cache(app: FastAPI) -> None:
    @app.on_event("startup")
    async def _init_cache():
        await init_cache()


async def invalidate(*namespaces: str) -> None:
    # 写操作后清空相关空间；缓存故障不影响主流程
    for ns in namespaces:
        try:
            await FastAPICache.clear(namespace=ns)
        except Exception as e:
            logger.warning("[CACHE] clear %s failed: %s", ns, e)


async def invalidate_dictionary_cache() -> None:
    await invalidate(NS_DICTIONARY)


async def invalidate_settings_cache() -> None:
    await invalidate(NS_SETTINGS)
