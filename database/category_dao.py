import json
from typing import Optional

from database.db_manager import DatabaseManager
from utils.constants import KEY_CUSTOM_CATEGORIES, KEY_HOME_CATEGORIES


class CategoryDAO:
    """Both category vocabularies; each is an ordered list of names."""

    BUSINESS = KEY_CUSTOM_CATEGORIES
    HOME = KEY_HOME_CATEGORIES

    def __init__(self, db: DatabaseManager):
        self._db = db

    def get_names(self, key: str) -> Optional[list[str]]:
        raw = self._db.get_value(key)
        if raw is None:
            return None
        return [str(name) for name in json.loads(raw)]

    def save_names(self, key: str, names: list[str]):
        self._db.put_value(key, json.dumps(list(names), ensure_ascii=False))
