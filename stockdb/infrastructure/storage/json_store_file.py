"""JSON file storage for the store document: atomic replace with a retained backup.

File layout next to the dataset:
    <name>         : current document
    <name>.tmp     : transient, only while a save is in progress
    <name>.bak     : the document as it was before the last successful save
"""

import logging
import os
import shutil
from pathlib import Path

from pydantic import ValidationError

from stockdb.application.interfaces import StoreRepository
from stockdb.application.schemas import StoreDocument
from stockdb.domain.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class JsonStoreRepository(StoreRepository):
    """Infrastructure adapter persisting the store document as one JSON file."""

    def __init__(self, path: str | Path, *, pretty: bool = True, backup_suffix: str = ".bak"):
        self._path = Path(path)
        self._pretty = pretty
        self._backup_suffix = backup_suffix

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    @property
    def backup_path(self) -> Path | None:
        if not self._backup_suffix:
            return None
        return self._path.with_name(self._path.name + self._backup_suffix)

    @property
    def temp_path(self) -> Path:
        return self._path.with_name(self._path.name + ".tmp")

    # ── Load ────────────────────────────────────────────────────────

    def load(self) -> StoreDocument:
        """Read the document; a missing or blank file loads as empty."""
        if not self._path.exists():
            logger.info("Store file %s does not exist: starting empty", self._path)
            return StoreDocument()

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(self._path, f"cannot read file: {exc}") from exc

        if not raw.strip():
            logger.info("Store file %s is empty: starting empty", self._path)
            return StoreDocument()

        try:
            document = StoreDocument.model_validate_json(raw)
        except ValidationError as exc:
            raise PersistenceError(
                self._path, f"malformed document ({exc.error_count()} error(s))"
            ) from exc

        logger.debug(
            "Loaded %s: %d parts, %d projects",
            self._path, len(document.parts), len(document.projects),
        )
        return document

    # ── Save ────────────────────────────────────────────────────────

    def save(self, document: StoreDocument) -> None:
        """Write to a temp file, back up the current file, then swap the temp file in.

        A failure at any step leaves the previous file untouched.
        """
        payload = document.model_dump_json(indent=2 if self._pretty else None)
        tmp_path = self.temp_path

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())

            backup = self.backup_path
            if backup is not None and self._path.exists():
                shutil.copy2(self._path, backup)

            os.replace(tmp_path, self._path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(self._path, f"cannot write file: {exc}") from exc

        logger.info(
            "Saved %s (%d parts, %d projects, %d bytes)",
            self._path, len(document.parts), len(document.projects), len(payload),
        )
