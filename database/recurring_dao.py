import json
from typing import Optional

from database.db_manager import DatabaseManager
from models.recurring_rule import RecurringRule
from models.snapshot import RecurringRuleRecord
from utils.constants import KEY_RECURRING_RULES


class RecurringDAO:
    KEY = KEY_RECURRING_RULES

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row: dict) -> RecurringRule:
        return RecurringRuleRecord.model_validate(row).to_model()

    def _model_to_row(self, rule: RecurringRule) -> dict:
        return RecurringRuleRecord.from_model(rule).to_row()

    def get_all(self) -> Optional[list[RecurringRule]]:
        raw = self._db.get_value(self.KEY)
        if raw is None:
            return None
        return [self._row_to_model(r) for r in json.loads(raw)]

    def save_all(self, rules: list[RecurringRule]):
        rows = [self._model_to_row(r) for r in rules]
        self._db.put_value(self.KEY, json.dumps(rows, ensure_ascii=False))
