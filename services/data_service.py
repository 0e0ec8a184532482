"""Export and import the whole ledger (all collections plus the selected
date/month and report window) as a single JSON snapshot.
"""
import json
import logging
from pathlib import Path

import pydantic

from models.errors import ImportFormatError
from models.ledger_state import LedgerState
from models.snapshot import SnapshotRecord
from services.entity_store import EntityStore
from utils.constants import BACKUP_FILE_PREFIX
from utils.date_helpers import format_date

logger = logging.getLogger(__name__)


class DataService:
    def __init__(self, store: EntityStore):
        self._store = store

    # ── Export ────────────────────────────────────────────────────────────────

    def export_json(self) -> str:
        """Serialize the full state. Same state, same bytes."""
        snapshot = SnapshotRecord.from_state(self._store.export_state())
        return json.dumps(snapshot.to_row(), ensure_ascii=False, indent=2)

    def backup_filename(self) -> str:
        return f"{BACKUP_FILE_PREFIX}-{format_date(self._store.today())}.json"

    def write_backup(self, folder: str | Path) -> Path:
        """Write the export into folder and return the file path."""
        path = Path(folder) / self.backup_filename()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export_json(), encoding="utf-8")
        logger.info("Backup written to %s", path)
        return path

    # ── Import ────────────────────────────────────────────────────────────────

    def load_snapshot(self, blob: str | bytes) -> LedgerState:
        """Parse and validate a backup into a fully-typed state.

        Raises ImportFormatError when the blob is not JSON, is missing the
        transactions or accounts collections, or holds malformed records.
        """
        try:
            data = json.loads(blob)
        except (TypeError, ValueError) as exc:
            raise ImportFormatError(f"Backup is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ImportFormatError("Backup must be a JSON object.")
        missing = [key for key in ("transactions", "accounts") if key not in data]
        if missing:
            raise ImportFormatError(f"Backup is missing: {', '.join(missing)}")
        try:
            snapshot = SnapshotRecord.model_validate(data)
        except pydantic.ValidationError as exc:
            raise ImportFormatError(
                f"Backup has {exc.error_count()} invalid field(s): {exc.errors()[0]['msg']}"
            ) from exc
        return snapshot.to_state(self._store.now())

    def import_json(self, blob: str | bytes) -> bool:
        """Replace the whole ledger with the backup. All-or-nothing."""
        try:
            state = self.load_snapshot(blob)
        except ImportFormatError as exc:
            logger.warning("Backup rejected: %s", exc)
            return False
        self._store.replace_state(state)
        logger.info(
            "Backup restored: %d transactions, %d accounts",
            len(state.transactions), len(state.accounts),
        )
        return True

    def read_backup(self, path: str | Path) -> bool:
        try:
            blob = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read backup %s: %s", path, exc)
            return False
        return self.import_json(blob)
