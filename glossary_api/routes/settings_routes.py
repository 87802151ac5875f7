# glossary_api/routes/settings_routes.py
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi_cache.decorator import cache
from sqlalchemy.orm import Session

from glossary_backend.app.core.database import get_db
from glossary_backend.app.models import SiteSetting
from glossary_backend.app.schemas import SiteSettingIn, SiteSettingOut
from glossary_api import crud
from glossary_api.cache import NS_SETTINGS, invalidate_settings_cache
from glossary_api.routes.auth_utils import get_current_user

router = APIRouter(prefix="/api/settings", tags=["settings"])


def _setting_to_dict(s: SiteSetting) -> Dict[str, Any]:
    return {
        "id": s.id,
        "key": s.key,
        "value": s.value,
        "updatedAt": s.updated_at.isoformat(),
    }


@router.get("", response_model=List[SiteSettingOut])
@cache(namespace=NS_SETTINGS)
def list_settings(db: Session = Depends(get_db)):
    return [_setting_to_dict(s) for s in crud.get_site_settings(db)]


@router.get("/{key}", response_model=SiteSettingOut)
@cache(namespace=NS_SETTINGS)
def get_setting(key: str, db: Session = Depends(get_db)):
    setting = crud.get_site_setting(db, key)
    if not setting:
        raise HTTPException(status_code=404, detail="Setting not found")
    return _setting_to_dict(setting)


# upsert：key 已存在则更新，否则新建
@router.post("", response_model=SiteSettingOut)
async def upsert_setting(
    payload: SiteSettingIn,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    setting = crud.set_site_setting(db, payload.key, payload.value)
    await invalidate_settings_cache()
    return _setting_to_dict(setting)
