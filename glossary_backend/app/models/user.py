# glossary_backend/app/models/user.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, TIMESTAMP
from glossary_backend.app.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    # bcrypt 哈希，不保存明文
    password = Column(String(255), nullable=False)
    created_at = Column(TIMESTAMP, default=datetime.utcnow)
