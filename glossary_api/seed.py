# glossary_api/seed.py
"""
建表 + 首次启动的初始数据（管理员、初始词条、默认站点设置）。
也可以单独运行：python -m glossary_api.seed
"""
import logging

from sqlalchemy.orm import Session

from glossary_backend.app.core.config import config
from glossary_backend.app.core.database import Base, SessionLocal, engine
from glossary_backend.app.services.settings_service import DEFAULT_SETTINGS
from glossary_backend.app import models  # noqa: F401  确保模型已注册到 Base.metadata
from glossary_api import crud

logger = logging.getLogger(__name__)

INITIAL_ENTRIES = [
    {
        "phrase": "Sa da tay",
        "translation": "That's right / I understand",
        "usage_context": "Generally positive interpretation, an affirmative response",
    },
    {
        "phrase": "Wa da tah",
        "translation": "That's for sure! / I agree",
        "usage_context": "Confirmation statement, used to express agreement",
    },
    {
        "phrase": "Cole me on the panny sty",
        "translation": "Call me on the phone",
        "usage_context": "Said during an interview with Bob Costas",
    },
    {
        "phrase": "Sine your pitty on the runny kine",
        "translation": "Sign your name on the dotted line",
        "usage_context": "Used when asking someone to sign a document",
    },
    {
        "phrase": "Capatown",
        "translation": "Calm down now",
        "usage_context": "Used in a friendly manner to tell someone to relax",
    },
    {
        "phrase": "Ranacan",
        "translation": "To party",
        "usage_context": "Used when talking about socializing or celebrating",
    },
    {
        "phrase": "Bata shane, my dillie?",
        "translation": "What time is the party?",
        "usage_context": "Said to 'Biggie Shorty' regarding a party",
    },
    {
        "phrase": "Tipi tais",
        "translation": "Kids / children",
        "usage_context": "Generally accepted as referring to young people",
    },
    {
        "phrase": "Cama cama leepa chai",
        "translation": "No, I refuse",
        "usage_context": "Refusal on moral grounds",
    },
    {
        "phrase": "You ain't come one, but many tine tanies!",
        "translation": "You came to fight me with many friends!",
        "usage_context": "Said to Dirty Dee when he came to challenge Pootie Tang",
    },
    {
        "phrase": "Dirty Dee, you're a baddy daddy lamatai tabby chai!",
        "translation": "Dirty Dee, you're a terrible person!",
        "usage_context": "A threat or insult directed at the character Dirty Dee",
    },
]


def init_db(bind=None) -> None:
    logger.info("Creating tables...")
    Base.metadata.create_all(bind=bind or engine)


def seed_database(db: Session) -> None:
    """只在表为空时写入，重复调用不会产生重复数据"""
    if not crud.get_user_by_username(db, config.ADMIN_USERNAME):
        logger.info("No admin user found, creating %r", config.ADMIN_USERNAME)
        crud.create_user(db, config.ADMIN_USERNAME, config.ADMIN_PASSWORD)

    if not crud.get_dictionary_entries(db):
        logger.info("No dictionary entries found, seeding %d initial entries", len(INITIAL_ENTRIES))
        for data in INITIAL_ENTRIES:
            crud.create_dictionary_entry(db, data)

    for key, value in DEFAULT_SETTINGS.items():
        if crud.get_site_setting(db, key) is None:
            crud.set_site_setting(db, key, value)

    logger.info("Database seeding complete")


def init_and_seed() -> None:
    init_db()
    db = SessionLocal()
    try:
        seed_database(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    init_and_seed()
