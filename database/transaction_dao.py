import json
from typing import Optional

from database.db_manager import DatabaseManager
from models.snapshot import TransactionRecord
from models.transaction import Transaction
from utils.constants import KEY_TRANSACTIONS


class TransactionDAO:
    KEY = KEY_TRANSACTIONS

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row: dict) -> Transaction:
        return TransactionRecord.model_validate(row).to_model()

    def _model_to_row(self, tx: Transaction) -> dict:
        return TransactionRecord.from_model(tx).to_row()

    def get_all(self) -> Optional[list[Transaction]]:
        """Stored transactions, or None when nothing was ever saved."""
        raw = self._db.get_value(self.KEY)
        if raw is None:
            return None
        return [self._row_to_model(r) for r in json.loads(raw)]

    def save_all(self, transactions: list[Transaction]):
        """Stage the full collection; the caller commits."""
        rows = [self._model_to_row(t) for t in transactions]
        self._db.put_value(self.KEY, json.dumps(rows, ensure_ascii=False))
