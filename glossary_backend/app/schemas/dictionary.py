from datetime import datetime
from typing import Annotated, Optional

from pydantic import (
    AfterValidator, BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator
)

_http_url = TypeAdapter(HttpUrl)


def _required_text(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("must not be empty")
    return value


def _optional_text(value: Optional[str]) -> Optional[str]:
    # 空白字符串统一存为 NULL，其余原样保存
    if value is None or not value.strip():
        return None
    return value


def _optional_url(value: Optional[str]) -> Optional[str]:
    value = _optional_text(value)
    if value is not None:
        try:
            _http_url.validate_python(value)
        except ValidationError:
            raise ValueError("must be a valid http(s) URL")
    return value


RequiredText = Annotated[Optional[str], AfterValidator(_required_text)]
OptionalText = Annotated[Optional[str], AfterValidator(_optional_text)]
OptionalUrl = Annotated[Optional[str], AfterValidator(_optional_url)]


class DictionaryEntryCreate(BaseModel):
    phrase: RequiredText
    translation: RequiredText
    usage_context: OptionalText = Field(None, alias="usageContext")
    pronunciation: OptionalText = None
    audio_url: OptionalUrl = Field(None, alias="audioUrl")

    class Config:
        populate_by_name = True


class DictionaryEntryUpdate(BaseModel):
    """部分更新：只处理请求里出现的字段（配合 exclude_unset 使用）"""
    phrase: RequiredText = None
    translation: RequiredText = None
    usage_context: OptionalText = Field(None, alias="usageContext")
    pronunciation: OptionalText = None
    audio_url: OptionalUrl = Field(None, alias="audioUrl")

    class Config:
        populate_by_name = True


class DictionaryEntryForm(DictionaryEntryCreate):
    """后台表单比 API 更严格：短语和释义至少 2 个字符"""

    @field_validator("phrase", "translation")
    @classmethod
    def at_least_two_chars(cls, value: str) -> str:
        if len(value.strip()) < 2:
            raise ValueError("must be at least 2 characters")
        return value


class DictionaryEntryOut(BaseModel):
    id: int
    phrase: str
    translation: str
    usage_context: Optional[str] = Field(None, alias="usageContext")
    pronunciation: Optional[str] = None
    audio_url: Optional[str] = Field(None, alias="audioUrl")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True
