import json
import logging
import random
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

# ==== 已知的设置 key ====
SITE_TITLE = "siteTitle"
SITE_DESCRIPTION = "siteDescription"
GIF_URL = "gifUrl"
LOADING_PHRASES = "loadingPhrases"

DEFAULT_SITE_TITLE = "Phrase Dictionary"
DEFAULT_SITE_DESCRIPTION = "Translate between the dictionary language and English"

DEFAULT_LOADING_PHRASES = [
    "Sa da tay!",
    "Wa da tah!",
    "Sine your pitty on the runny kine!",
    "Sepatown!",
    "Cole me down on the panny sty!",
    "Tippy tow!",
    "Capatchow!",
    "Wadatah!",
]

# 首次启动写入的默认设置
DEFAULT_SETTINGS: Dict[str, Optional[str]] = {
    SITE_TITLE: DEFAULT_SITE_TITLE,
    SITE_DESCRIPTION: DEFAULT_SITE_DESCRIPTION,
    GIF_URL: "",
    LOADING_PHRASES: json.dumps(DEFAULT_LOADING_PHRASES),
}


def parse_loading_phrases(value: Optional[str]) -> List[str]:
    """
    解析 loadingPhrases（JSON 数组字符串）。
    非法 JSON、不是数组、或者数组为空时，返回默认列表。
    """
    if not value:
        return list(DEFAULT_LOADING_PHRASES)
    try:
        parsed = json.loads(value)
    except ValueError:
        logger.warning("loadingPhrases is not valid JSON, using defaults")
        return list(DEFAULT_LOADING_PHRASES)

    if not isinstance(parsed, list):
        return list(DEFAULT_LOADING_PHRASES)
    phrases = [str(p) for p in parsed if p is not None and str(p).strip()]
    return phrases or list(DEFAULT_LOADING_PHRASES)


def pick_loading_phrase(phrases: List[str], rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return rng.choice(phrases or DEFAULT_LOADING_PHRASES)


def settings_to_map(settings: Iterable) -> Dict[str, Optional[str]]:
    return {s.key: s.value for s in settings}


def site_display(settings: Iterable) -> Dict[str, object]:
    """页面展示用：标题、描述、GIF、加载短语，缺省时用默认值"""
    values = settings_to_map(settings)
    phrases = parse_loading_phrases(values.get(LOADING_PHRASES))
    return {
        "title": values.get(SITE_TITLE) or DEFAULT_SITE_TITLE,
        "description": values.get(SITE_DESCRIPTION) or DEFAULT_SITE_DESCRIPTION,
        "gif_url": values.get(GIF_URL) or None,
        "loading_phrases": phrases,
        "loading_phrase": pick_loading_phrase(phrases),
    }


def settings_form_values(settings: Iterable) -> Dict[str, str]:
    """后台设置表单的初始值"""
    values = settings_to_map(settings)
    return {
        "site_title": values.get(SITE_TITLE) or "",
        "site_description": values.get(SITE_DESCRIPTION) or "",
        "gif_url": values.get(GIF_URL) or "",
        "loading_phrases": values.get(LOADING_PHRASES) or "[]",
    }
