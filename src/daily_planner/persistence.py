"""
Snapshot persistence - SQLite-backed storage for the planner state blob.

The store hands over the whole state after every mutation; this module
keeps the latest copy under a fixed key and schema version and gives it
back on startup.
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from .plans.models import PlannerState
from .plans.store import PlanStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "daily-planner-storage"
SCHEMA_VERSION = 1


class SnapshotStore:
	"""
	Keeps the latest PlannerState in a single SQLite row.

	Usage:
		snapshots = SnapshotStore("data/planner.db")
		state = snapshots.load()          # None on first run
		snapshots.save(store.snapshot())
	"""

	def __init__(self, db_path: str = "", key: str = STORAGE_KEY, version: int = SCHEMA_VERSION):
		if not db_path:
			from .config import get_config
			db_path = str(get_config().state_db_path)
		self.db_path = Path(db_path)
		self.db_path.parent.mkdir(parents=True, exist_ok=True)
		self.key = key
		self.version = version
		self._ensure_table()

	def _ensure_table(self) -> None:
		"""Create the snapshots table if it doesn't exist."""
		with self._connect() as conn:
			conn.execute("""
				CREATE TABLE IF NOT EXISTS snapshots (
					key TEXT PRIMARY KEY,
					version INTEGER NOT NULL,
					data TEXT NOT NULL,
					updated_at TEXT NOT NULL
				)
			""")

	def _connect(self) -> sqlite3.Connection:
		conn = sqlite3.connect(str(self.db_path))
		conn.row_factory = sqlite3.Row
		return conn

	def save(self, state: PlannerState) -> None:
		"""Replace the stored snapshot."""
		with self._connect() as conn:
			conn.execute(
				"""
				INSERT INTO snapshots (key, version, data, updated_at)
				VALUES (?, ?, ?, ?)
				ON CONFLICT(key) DO UPDATE SET
					version = excluded.version,
					data = excluded.data,
					updated_at = excluded.updated_at
				""",
				(self.key, self.version, state.model_dump_json(), datetime.now().isoformat()),
			)
		logger.debug("Saved snapshot %s (%d plans)", self.key, len(state.plans))

	def load(self) -> Optional[PlannerState]:
		"""
		Read the stored snapshot.

		Returns:
			The PlannerState, or None when there is no snapshot, it was
			written by another schema version, or it cannot be parsed
		"""
		try:
			with self._connect() as conn:
				row = conn.execute(
					"SELECT version, data FROM snapshots WHERE key = ?",
					(self.key,),
				).fetchone()
		except sqlite3.Error as e:
			logger.warning("Could not read snapshot %s: %s", self.key, e)
			return None

		if row is None:
			return None

		if row["version"] != self.version:
			logger.warning(
				"Ignoring snapshot %s: schema version %s, expected %s",
				self.key, row["version"], self.version,
			)
			return None

		try:
			return PlannerState.model_validate_json(row["data"])
		except ValidationError as e:
			logger.warning("Ignoring unreadable snapshot %s: %s", self.key, e)
			return None

	def clear(self) -> None:
		"""Delete the stored snapshot."""
		with self._connect() as conn:
			conn.execute("DELETE FROM snapshots WHERE key = ?", (self.key,))


def open_store(
	db_path: str = "",
	clock: Optional[Callable[[], datetime]] = None,
) -> PlanStore:
	"""Build a PlanStore from the saved snapshot, saving back after each change."""
	snapshots = SnapshotStore(db_path)
	state = snapshots.load()
	if state is None:
		logger.info("No saved state found, starting fresh")

	if clock is None:
		return PlanStore(state, on_change=snapshots.save)
	return PlanStore(state, on_change=snapshots.save, clock=clock)
