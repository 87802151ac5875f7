from typing import Any, Dict, Iterable

from .auth import (
    ChangePasswordForm,
    ChangePasswordRequest,
    LoginResponse,
    OperationResult,
    UserInfo,
    UserLogin,
)
from .dictionary import (
    DictionaryEntryCreate,
    DictionaryEntryForm,
    DictionaryEntryOut,
    DictionaryEntryUpdate,
)
from .settings import SiteSettingIn, SiteSettingOut, SiteSettingsForm


def _field_name(loc) -> str:
    # 去掉 FastAPI 加的 "body" / "query" 前缀
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "request"


def field_errors(errors: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    """把 pydantic 的 errors() 转成 {字段: 提示}，用于表单回显"""
    result: Dict[str, str] = {}
    for err in errors:
        name = _field_name(err.get("loc", ()))
        msg = str(err.get("msg", "invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        result.setdefault(name, msg)
    return result


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """人类可读的校验错误：'phrase: Field required; audioUrl: ...'"""
    return "; ".join(f"{name}: {msg}" for name, msg in field_errors(errors).items())


__all__ = [
    "ChangePasswordForm",
    "ChangePasswordRequest",
    "LoginResponse",
    "OperationResult",
    "UserInfo",
    "UserLogin",
    "DictionaryEntryCreate",
    "DictionaryEntryForm",
    "DictionaryEntryOut",
    "DictionaryEntryUpdate",
    "SiteSettingIn",
    "SiteSettingOut",
    "SiteSettingsForm",
    "field_errors",
    "format_validation_errors",
]
