import json
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

_http_url = TypeAdapter(HttpUrl)


class SiteSettingIn(BaseModel):
    key: str = Field(..., min_length=1, max_length=100)
    value: Optional[str] = None

    @field_validator("key")
    @classmethod
    def key_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class SiteSettingOut(BaseModel):
    id: int
    key: str
    value: Optional[str] = None
    updated_at: datetime = Field(..., alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class SiteSettingsForm(BaseModel):
    """后台「站点设置」表单，一次提交四个 key"""
    site_title: str = Field(..., min_length=1)
    site_description: str = Field(..., min_length=1)
    gif_url: str = ""
    loading_phrases: str = "[]"

    @field_validator("site_title", "site_description")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("is required")
        return value

    @field_validator("gif_url")
    @classmethod
    def gif_url_is_url(cls, value: str) -> str:
        value = value.strip()
        if value:
            try:
                _http_url.validate_python(value)
            except ValidationError:
                raise ValueError("must be a valid URL")
        return value

    @field_validator("loading_phrases")
    @classmethod
    def phrases_are_json_array(cls, value: str) -> str:
        try:
            parsed = json.loads(value)
        except ValueError:
            parsed = None
        if not isinstance(parsed, list):
            raise ValueError('must be a valid JSON array of phrases, e.g. ["Sa da tay!", "Wa da tah!"]')
        return value
