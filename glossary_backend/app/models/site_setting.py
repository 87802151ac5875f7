# glossary_backend/app/models/site_setting.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime

from glossary_backend.app.core.database import Base


class SiteSetting(Base):
    """站点显示配置（key-value），例如 siteTitle / loadingPhrases"""
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True)
    key = Column(String(100), nullable=False, unique=True, index=True)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
