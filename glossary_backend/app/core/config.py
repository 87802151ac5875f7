import os
from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str):
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./glossary.db")
    SECRET_KEY = os.getenv("SECRET_KEY")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    CACHE_PREFIX = os.getenv("CACHE_PREFIX", "glossary-cache")
    CACHE_EXPIRE_SECONDS = int(os.getenv("CACHE_EXPIRE_SECONDS", "60"))

    # 首次启动时创建的管理员账号（上线前务必修改密码）
    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

    CORS_ORIGINS = _split_csv(os.getenv("CORS_ORIGINS", "*"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

config = Config()
