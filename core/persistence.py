"""Journal file persistence with atomic writes and backup recovery."""

import json
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

from core.config import settings
from core.logging_utils import get_logger
from core.models import Goal, Trade, TradingAccount, TradingRule

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class Journal:
    """Everything a trader has recorded."""
    trades: List[Trade] = field(default_factory=list)
    accounts: List[TradingAccount] = field(default_factory=list)
    goals: List[Goal] = field(default_factory=list)
    rules: List[TradingRule] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "trades": [t.to_dict() for t in self.trades],
            "accounts": [a.to_dict() for a in self.accounts],
            "goals": [g.to_dict() for g in self.goals],
            "rules": [r.to_dict() for r in self.rules],
        }


def _parse_records(records, parser: Callable[[dict], T], kind: str) -> List[T]:
    parsed: List[T] = []
    if not isinstance(records, list):
        if records is not None:
            logger.warning("[JOURNAL] Ignoring %s: expected a list, got %s", kind, type(records).__name__)
        return parsed
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("[JOURNAL] Skipping %s #%d: not an object", kind, index)
            continue
        try:
            parsed.append(parser(record))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("[JOURNAL] Skipping %s #%d: %s", kind, index, e)
    return parsed


def journal_from_dict(data: dict) -> Journal:
    """Build a Journal, dropping records that cannot be parsed."""
    tz = settings.tz
    return Journal(
        trades=_parse_records(data.get("trades"), lambda r: Trade.from_dict(r, tz), "trade"),
        accounts=_parse_records(data.get("accounts"), TradingAccount.from_dict, "account"),
        goals=_parse_records(data.get("goals"), Goal.from_dict, "goal"),
        rules=_parse_records(data.get("rules"), TradingRule.from_dict, "rule"),
    )


class JournalStore:
    """
    JSON journal file with:
    - Atomic writes (write to temp, then rename)
    - Automatic backup before write
    - Corruption recovery from backup
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or settings.journal_file)
        self.backup_file = self.path.with_suffix(self.path.suffix + ".bak")

    def _create_backup(self) -> None:
        if self.path.exists():
            try:
                shutil.copy2(self.path, self.backup_file)
            except OSError as e:
                logger.warning("[JOURNAL] Failed to create backup: %s", e)

    def _atomic_write(self, data: dict, backup: bool = True) -> bool:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if backup:
            self._create_backup()

        temp_path = None
        try:
            temp_fd, temp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".journal_", suffix=".tmp")
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(temp_path, self.path)
            temp_path = None
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error("[JOURNAL] Atomic write failed: %s", e)
            return False
        finally:
            if temp_path is not None and os.path.exists(temp_path):
                os.unlink(temp_path)

    def _read_json(self, path: Path) -> Optional[dict]:
        try:
            content = path.read_text(encoding="utf-8").strip()
        except OSError as e:
            logger.error("[JOURNAL] Failed to read %s: %s", path, e)
            return None
        if not content:
            logger.warning("[JOURNAL] %s is empty", path)
            return None
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error("[JOURNAL] %s is corrupted: %s", path, e)
            return None
        if not isinstance(data, dict):
            logger.error("[JOURNAL] %s does not hold a journal object", path)
            return None
        return data

    def _safe_read(self) -> Optional[dict]:
        if self.path.exists():
            data = self._read_json(self.path)
            if data is not None:
                return data

        if self.backup_file.exists():
            logger.info("[JOURNAL] Attempting recovery from backup")
            data = self._read_json(self.backup_file)
            if data is not None:
                self._atomic_write(data, backup=False)
                return data
        return None

    def load(self) -> Journal:
        """Load the journal; a missing or unreadable file yields an empty one."""
        data = self._safe_read()
        if data is None:
            if self.path.exists():
                logger.warning("[JOURNAL] Using empty journal, %s could not be read", self.path)
            return Journal()
        journal = journal_from_dict(data)
        logger.info(
            "[JOURNAL] Loaded %d trades, %d accounts from %s",
            len(journal.trades), len(journal.accounts), self.path,
        )
        return journal

    def save(self, journal: Journal) -> bool:
        return self._atomic_write(journal.to_dict())


def load_journal(path: Optional[Path] = None) -> Journal:
    return JournalStore(path).load()


def save_journal(journal: Journal, path: Optional[Path] = None) -> bool:
    return JournalStore(path).save(journal)
