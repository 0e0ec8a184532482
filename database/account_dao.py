import json
from typing import Optional

from database.db_manager import DatabaseManager
from models.account import Account
from models.snapshot import AccountRecord
from utils.constants import KEY_ACCOUNTS


class AccountDAO:
    KEY = KEY_ACCOUNTS

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row: dict) -> Account:
        return AccountRecord.model_validate(row).to_model()

    def _model_to_row(self, account: Account) -> dict:
        return AccountRecord.from_model(account).to_row()

    def get_all(self) -> Optional[list[Account]]:
        raw = self._db.get_value(self.KEY)
        if raw is None:
            return None
        return [self._row_to_model(r) for r in json.loads(raw)]

    def save_all(self, accounts: list[Account]):
        rows = [self._model_to_row(a) for a in accounts]
        self._db.put_value(self.KEY, json.dumps(rows, ensure_ascii=False))
