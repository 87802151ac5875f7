# glossary_api/routes/page_routes.py
"""
服务端渲染页面：公开的词典浏览/搜索页 + 管理后台（词条表格、表单、站点设置、修改密码）
后台登录状态保存在 SessionMiddleware 的签名 cookie 里。
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.orm import Session

from glossary_backend.app.core.database import get_db
from glossary_backend.app.schemas import (
    ChangePasswordForm, DictionaryEntryForm, SiteSettingsForm, field_errors
)
from glossary_backend.app.services import settings_service
from glossary_api import crud
from glossary_api.cache import invalidate_dictionary_cache, invalidate_settings_cache
from glossary_api.routes.auth_utils import (
    get_session_user, login_session, logout_session, verify_password
)

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[1]
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

router = APIRouter(tags=["pages"], include_in_schema=False)

FLASH_KEY = "flash"
ENTRY_FORM_FIELDS = ("phrase", "translation", "usage_context", "pronunciation", "audio_url")


# ==========================
#        Helper utils
# ==========================
def _flash(request: Request, message: str, category: str = "success") -> None:
    flashes = request.session.get(FLASH_KEY, [])
    flashes.append({"message": message, "category": category})
    request.session[FLASH_KEY] = flashes


def _pop_flashes(request: Request) -> List[Dict[str, str]]:
    return request.session.pop(FLASH_KEY, [])


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _render(request: Request, db: Session, template: str, context: Dict[str, Any],
            status_code: int = 200):
    ctx = {
        "site": settings_service.site_display(crud.get_site_settings(db)),
        "flashes": _pop_flashes(request),
        "current_user": get_session_user(request, db),
    }
    ctx.update(context)
    return templates.TemplateResponse(request, template, ctx, status_code=status_code)


async def _form_dict(request: Request, fields) -> Dict[str, str]:
    form = await request.form()
    return {name: str(form.get(name, "")) for name in fields}


def _entry_form_values(entry=None) -> Dict[str, str]:
    if entry is None:
        return {name: "" for name in ENTRY_FORM_FIELDS}
    return {
        "phrase": entry.phrase,
        "translation": entry.translation,
        "usage_context": entry.usage_context or "",
        "pronunciation": entry.pronunciation or "",
        "audio_url": str(entry.audio_url) if entry.audio_url else "",
    }


def _admin_context(request: Request, db: Session, q: Optional[str] = None,
                   settings_values: Optional[Dict[str, str]] = None,
                   settings_errors: Optional[Dict[str, str]] = None,
                   password_errors: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    entries = crud.search_dictionary_entries(db, q)
    return {
        "q": q or "",
        "entries": entries,
        "settings_values": settings_values or settings_service.settings_form_values(crud.get_site_settings(db)),
        "settings_errors": settings_errors or {},
        "password_errors": password_errors or {},
    }


# ==========================
#        公开页面
# ==========================
@router.get("/")
def home(request: Request, q: Optional[str] = None, db: Session = Depends(get_db)):
    query = (q or "").strip()
    entries = crud.search_dictionary_entries(db, query)
    return _render(request, db, "home.html", {"q": query, "entries": entries})


# ==========================
#        登录 / 退出
# ==========================
@router.get("/admin/login")
def login_page(request: Request, db: Session = Depends(get_db)):
    if get_session_user(request, db):
        return _redirect("/admin")
    return _render(request, db, "admin/login.html", {"username": "", "error": None})


@router.post("/admin/login")
async def login_submit(request: Request, db: Session = Depends(get_db)):
    data = await _form_dict(request, ("username", "password"))
    username = data["username"].strip()
    if not username or not data["password"]:
        return _render(request, db, "admin/login.html",
                       {"username": username, "error": "Username and password are required"},
                       status_code=status.HTTP_400_BAD_REQUEST)

    user = crud.authenticate_user(db, username, data["password"])
    if not user:
        logger.warning("Failed admin login for username=%r", username)
        return _render(request, db, "admin/login.html",
                       {"username": username, "error": "Invalid credentials"},
                       status_code=status.HTTP_401_UNAUTHORIZED)

    login_session(request, user)
    _flash(request, f"Welcome back, {user.username}")
    return _redirect("/admin")


@router.post("/admin/logout")
def logout(request: Request):
    logout_session(request)
    _flash(request, "You have been logged out")
    return _redirect("/")


# ==========================
#        管理后台
# ==========================
@router.get("/admin")
def admin_dashboard(request: Request, q: Optional[str] = None, db: Session = Depends(get_db)):
    if not get_session_user(request, db):
        return _redirect("/admin/login")
    return _render(request, db, "admin/dashboard.html", _admin_context(request, db, q))


@router.get("/admin/entries/new")
def new_entry_page(request: Request, db: Session = Depends(get_db)):
    if not get_session_user(request, db):
        return _redirect("/admin/login")
    return _render(request, db, "admin/entry_form.html",
                   {"entry": None, "values": _entry_form_values(), "errors": {}})


@router.post("/admin/entries")
async def create_entry_submit(request: Request, db: Session = Depends(get_db)):
    if not get_session_user(request, db):
        return _redirect("/admin/login")

    values = await _form_dict(request, ENTRY_FORM_FIELDS)
    try:
        form = DictionaryEntryForm(**values)
    except ValidationError as e:
        return _render(request, db, "admin/entry_form.html",
                       {"entry": None, "values": values, "errors": field_errors(e.errors())},
                       status_code=status.HTTP_400_BAD_REQUEST)

    entry = crud.create_dictionary_entry(db, form.model_dump())
    await invalidate_dictionary_cache()
    _flash(request, f'Dictionary entry "{entry.phrase}" created successfully')
    return _redirect("/admin")


@router.get("/admin/entries/{entry_id}/edit")
def edit_entry_page(entry_id: str, request: Request, db: Session = Depends(get_db)):
    if not get_session_user(request, db):
        return _redirect("/admin/login")
    entry = crud.get_dictionary_entry(db, crud.parse_id(entry_id))
    if not entry:
        _flash(request, "Dictionary entry not found", "error")
        return _redirect("/admin")
    return _render(request, db, "admin/entry_form.html",
                   {"entry": entry, "values": _entry_form_values(entry), "errors": {}})


@router.post("/admin/entries/{entry_id}")
async def update_entry_submit(entry_id: str, request: Request, db: Session = Depends(get_db)):
    if not get_session_user(request, db):
        return _redirect("/admin/login")
    entry = crud.get_dictionary_entry(db, crud.parse_id(entry_id))
    if not entry:
        _flash(request, "Dictionary entry not found", "error")
        return _redirect("/admin")

    values = await _form_dict(request, ENTRY_FORM_FIELDS)
    try:
        form = DictionaryEntryForm(**values)
    except ValidationError as e:
        return _render(request, db, "admin/entry_form.html",
                       {"entry": entry, "values": values, "errors": field_errors(e.errors())},
                       status_code=status.HTTP_400_BAD_REQUEST)

    crud.update_dictionary_entry(db, entry.id, form.model_dump())
    await invalidate_dictionary_cache()
    _flash(request, "Dictionary entry updated successfully")
    return _redirect("/admin")


@router.get("/admin/entries/{entry_id}/delete")
def delete_entry_confirm(entry_id: str, request: Request, db: Session = Depends(get_db)):
    if not get_session_user(request, db):
        return _redirect("/admin/login")
    entry = crud.get_dictionary_entry(db, crud.parse_id(entry_id))
    if not entry:
        _flash(request, "Dictionary entry not found", "error")
        return _redirect("/admin")
    return _render(request, db, "admin/confirm_delete.html", {"entry": entry})


@router.post("/admin/entries/{entry_id}/delete")
async def delete_entry_submit(entry_id: str, request: Request, db: Session = Depends(get_db)):
    if not get_session_user(request, db):
        return _redirect("/admin/login")
    if crud.delete_dictionary_entry(db, crud.parse_id(entry_id)):
        await invalidate_dictionary_cache()
        _flash(request, "Dictionary entry deleted successfully")
    else:
        _flash(request, "Dictionary entry not found", "error")
    return _redirect("/admin")


@router.post("/admin/settings")
async def settings_submit(request: Request, db: Session = Depends(get_db)):
    if not get_session_user(request, db):
        return _redirect("/admin/login")

    values = await _form_dict(request, ("site_title", "site_description", "gif_url", "loading_phrases"))
    try:
        form = SiteSettingsForm(**values)
    except ValidationError as e:
        _flash(request, "Failed to update site settings", "error")
        context = _admin_context(request, db, settings_values=values,
                                 settings_errors=field_errors(e.errors()))
        return _render(request, db, "admin/dashboard.html", context,
                       status_code=status.HTTP_400_BAD_REQUEST)

    crud.set_site_setting(db, settings_service.SITE_TITLE, form.site_title)
    crud.set_site_setting(db, settings_service.SITE_DESCRIPTION, form.site_description)
    crud.set_site_setting(db, settings_service.GIF_URL, form.gif_url)
    crud.set_site_setting(db, settings_service.LOADING_PHRASES, form.loading_phrases)
    await invalidate_settings_cache()
    _flash(request, "Site settings have been updated successfully")
    return _redirect("/admin")


@router.post("/admin/password")
async def password_submit(request: Request, db: Session = Depends(get_db)):
    user = get_session_user(request, db)
    if not user:
        return _redirect("/admin/login")

    values = await _form_dict(request, ("current_password", "new_password", "confirm_password"))
    errors: Dict[str, str] = {}
    try:
        form = ChangePasswordForm(**values)
    except ValidationError as e:
        errors = field_errors(e.errors())
    else:
        if not form.passwords_match():
            errors["confirm_password"] = "Passwords do not match"
        elif not verify_password(form.current_password, user.password):
            errors["current_password"] = "Current password is incorrect"

    if errors:
        _flash(request, "Failed to change password", "error")
        context = _admin_context(request, db, password_errors=errors)
        return _render(request, db, "admin/dashboard.html", context,
                       status_code=status.HTTP_400_BAD_REQUEST)

    crud.update_user_password(db, user.id, form.new_password)
    _flash(request, "Password changed successfully")
    return _redirect("/admin")
