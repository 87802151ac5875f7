from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from glossary_backend.app.models import DictionaryEntry, SiteSetting, User
from glossary_backend.app.services.search_service import search_entries
from glossary_api.routes.auth_utils import hash_password, verify_password

ENTRY_REQUIRED_FIELDS = ("phrase", "translation")
ENTRY_OPTIONAL_FIELDS = ("usage_context", "pronunciation", "audio_url")

# 主键是 64 位整数，超出范围的 id 不会存在
MAX_ID = 2 ** 63 - 1


def parse_id(raw_id: Any) -> Optional[int]:
    """把路径里的 id 转成正整数；非数字或超出范围返回 None"""
    try:
        value = int(raw_id)
    except (TypeError, ValueError):
        return None
    if value < 1 or value > MAX_ID:
        return None
    return value


def _blank_to_none(value: Optional[Any]) -> Optional[Any]:
    if value is None:
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    return value


# ==========================
#        用户
# ==========================
def get_user(db: Session, user_id: int) -> Optional[User]:
    if parse_id(user_id) is None:
        return None
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def create_user(db: Session, username: str, password: str) -> User:
    new_user = User(username=username, password=hash_password(password))
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user


def update_user_password(db: Session, user_id: int, new_password: str) -> bool:
    user = get_user(db, user_id)
    if not user:
        return False
    user.password = hash_password(new_password)
    db.commit()
    return True


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    """用户名不存在或密码错误都返回 None，不区分原因"""
    user = get_user_by_username(db, username)
    if not user or not verify_password(password, user.password):
        return None
    return user


# ==========================
#        词条
# ==========================
def get_dictionary_entries(db: Session) -> List[DictionaryEntry]:
    return db.query(DictionaryEntry).order_by(DictionaryEntry.id.asc()).all()


def get_dictionary_entry(db: Session, entry_id: int) -> Optional[DictionaryEntry]:
    # 非法或超出范围的 id（包括 None）直接当作不存在
    if parse_id(entry_id) is None:
        return None
    return db.query(DictionaryEntry).filter(DictionaryEntry.id == entry_id).first()


def search_dictionary_entries(db: Session, query: Optional[str]) -> List[DictionaryEntry]:
    entries = get_dictionary_entries(db)
    if not query:
        return entries
    return search_entries(entries, query)


def create_dictionary_entry(db: Session, data: Dict[str, Any]) -> DictionaryEntry:
    values = {}
    for field in ENTRY_REQUIRED_FIELDS:
        value = _blank_to_none(data.get(field))
        if value is None:
            raise ValueError(f"{field} is required")
        values[field] = value
    for field in ENTRY_OPTIONAL_FIELDS:
        values[field] = _blank_to_none(data.get(field))

    entry = DictionaryEntry(**values)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def update_dictionary_entry(db: Session, entry_id: int, changes: Dict[str, Any]) -> Optional[DictionaryEntry]:
    entry = get_dictionary_entry(db, entry_id)
    if not entry:
        return None

    for field in ENTRY_REQUIRED_FIELDS:
        if field in changes:
            value = _blank_to_none(changes[field])
            # 必填字段不允许被清空，空值直接忽略
            if value is not None:
                setattr(entry, field, value)
    for field in ENTRY_OPTIONAL_FIELDS:
        if field in changes:
            setattr(entry, field, _blank_to_none(changes[field]))

    entry.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(entry)
    return entry


def delete_dictionary_entry(db: Session, entry_id: int) -> bool:
    entry = get_dictionary_entry(db, entry_id)
    if not entry:
        return False
    db.delete(entry)
    db.commit()
    return True


# ==========================
#        站点设置
# ==========================
def get_site_settings(db: Session) -> List[SiteSetting]:
    return db.query(SiteSetting).order_by(SiteSetting.key.asc()).all()


def get_site_setting(db: Session, key: str) -> Optional[SiteSetting]:
    return db.query(SiteSetting).filter(SiteSetting.key == key).first()


def _next_timestamp(previous: Optional[datetime]) -> datetime:
    # 保证每次写入时间戳都严格递增
    now = datetime.utcnow()
    if previous is not None and now <= previous:
        now = previous + timedelta(microseconds=1)
    return now


def set_site_setting(db: Session, key: str, value: Optional[str]) -> SiteSetting:
    """按 key upsert：存在则覆盖 value 和时间戳，否则插入新行"""
    setting = get_site_setting(db, key)
    if setting is None:
        setting = SiteSetting(key=key, value=value, updated_at=_next_timestamp(None))
        db.add(setting)
        try:
            db.commit()
        except IntegrityError:
            # 并发插入同一个 key：回滚后按更新处理
            db.rollback()
            setting = get_site_setting(db, key)
            if setting is None:
                raise
            setting.value = value
            setting.updated_at = _next_timestamp(setting.updated_at)
            db.commit()
    else:
        setting.value = value
        setting.updated_at = _next_timestamp(setting.updated_at)
        db.commit()

    db.refresh(setting)
    return setting
