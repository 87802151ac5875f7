# glossary_backend/app/models/dictionary_entry.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy_utils import URLType

from glossary_backend.app.core.database import Base


class DictionaryEntry(Base):
    """词条：短语 + 英文释义，外加可选的用法、发音和音频链接"""
    __tablename__ = "dictionary_entries"

    id = Column(Integer, primary_key=True, index=True)
    phrase = Column(Text, nullable=False)
    translation = Column(Text, nullable=False)

    usage_context = Column(Text, nullable=True)   # 使用场景说明
    pronunciation = Column(String(255), nullable=True)  # 发音提示，如 "sah-dah-TAY"
    audio_url = Column(URLType, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<DictionaryEntry id={self.id} phrase={self.phrase!r}>"
