# glossary_api/routes/dictionary_routes.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi_cache.decorator import cache
from sqlalchemy.orm import Session

from glossary_backend.app.core.database import get_db
from glossary_backend.app.models import DictionaryEntry
from glossary_backend.app.schemas import (
    DictionaryEntryCreate, DictionaryEntryOut, DictionaryEntryUpdate, OperationResult
)
from glossary_api import crud
from glossary_api.cache import NS_DICTIONARY, invalidate_dictionary_cache
from glossary_api.routes.auth_utils import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dictionary", tags=["dictionary"])


# ==========================
#        Helper utils
# ==========================
def _parse_id(raw_id: str) -> int:
    # 路径参数按字符串接收，这样非数字 id 返回 400 而不是 422
    entry_id = crud.parse_id(raw_id)
    if entry_id is None:
        raise HTTPException(status_code=400, detail="Invalid ID")
    return entry_id


def _entry_to_dict(entry: DictionaryEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "phrase": entry.phrase,
        "translation": entry.translation,
        "usageContext": entry.usage_context,
        "pronunciation": entry.pronunciation,
        # URLType 在装了 furl 时会返回 furl 对象
        "audioUrl": str(entry.audio_url) if entry.audio_url else None,
        "createdAt": entry.created_at.isoformat() if entry.created_at else None,
        "updatedAt": entry.updated_at.isoformat() if entry.updated_at else None,
    }


# ==========================
#      Dictionary JSON CRUD
# ==========================
@router.get("", response_model=List[DictionaryEntryOut])
@cache(namespace=NS_DICTIONARY)
def list_entries(q: Optional[str] = None, db: Session = Depends(get_db)):
    """不带 q 返回全部词条；带 q 时按两级匹配过滤"""
    if q:
        entries = crud.search_dictionary_entries(db, q)
    else:
        entries = crud.get_dictionary_entries(db)
    return [_entry_to_dict(e) for e in entries]


@router.get("/{entry_id}", response_model=DictionaryEntryOut)
@cache(namespace=NS_DICTIONARY)
def get_entry(entry_id: str, db: Session = Depends(get_db)):
    entry = crud.get_dictionary_entry(db, _parse_id(entry_id))
    if not entry:
        raise HTTPException(status_code=404, detail="Dictionary entry not found")
    return _entry_to_dict(entry)


@router.post("", response_model=DictionaryEntryOut, status_code=status.HTTP_201_CREATED)
async def create_entry(
    payload: DictionaryEntryCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    entry = crud.create_dictionary_entry(db, payload.model_dump())
    logger.info("Dictionary entry %s created by %s", entry.id, current_user.username)
    await invalidate_dictionary_cache()
    return _entry_to_dict(entry)


@router.put("/{entry_id}", response_model=DictionaryEntryOut)
async def update_entry(
    entry_id: str,
    payload: DictionaryEntryUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    entry_id_int = _parse_id(entry_id)
    changes = payload.model_dump(exclude_unset=True)
    entry = crud.update_dictionary_entry(db, entry_id_int, changes)
    if not entry:
        raise HTTPException(status_code=404, detail="Dictionary entry not found")
    await invalidate_dictionary_cache()
    return _entry_to_dict(entry)


@router.delete("/{entry_id}", response_model=OperationResult)
async def delete_entry(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    entry_id_int = _parse_id(entry_id)
    if not crud.delete_dictionary_entry(db, entry_id_int):
        raise HTTPException(status_code=404, detail="Dictionary entry not found")
    logger.info("Dictionary entry %s deleted by %s", entry_id_int, current_user.username)
    await invalidate_dictionary_cache()
    return {"success": True, "message": "Dictionary entry deleted successfully"}
