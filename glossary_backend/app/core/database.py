from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from glossary_backend.app.core.config import config

# SQLite 需要关闭同线程检查（FastAPI 的同步路由跑在线程池里）
connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}

# 创建数据库引擎
engine = create_engine(config.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

# 创建数据库会话
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 创建基本的声明模型
Base = declarative_base()


# 获取数据库连接（每个请求一个 session）
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
