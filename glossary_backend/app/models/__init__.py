# glossary_backend/app/models/__init__.py
# ============================================================
# 导入全部模型（create_all 之前必须先导入）
# ============================================================
from .user import User
from .dictionary_entry import DictionaryEntry
from .site_setting import SiteSetting

# ============================================================
# 暴露的公共接口
# ============================================================
__all__ = [
    "User",
    "DictionaryEntry",
    "SiteSetting",
]
