from __future__ import annotations

from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Any

from simkltrakt.sync.models import SyncLogEntry, SyncOutcome
from simkltrakt.utils.config import SYNC_HISTORY_FILE, SYNC_HISTORY_MAX
from simkltrakt.utils.errors import LoggingFailed
from simkltrakt.utils.logger import LoggerProtocol, ensure_logger


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO 8601 UTC, millisecondes, suffixe ``Z`` (ex. ``2024-01-01T00:00:00.000Z``)."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_entry(outcome: SyncOutcome, now: datetime | None = None) -> SyncLogEntry:
    entry = SyncLogEntry(timestamp=utc_timestamp(now))
    if outcome.status == "error":
        entry["status"] = "error"
        entry["error"] = outcome.error or ""
    else:
        entry["status"] = "success"
        entry["movies_added"] = outcome.movies_added
        entry["episodes_added"] = outcome.episodes_added
    return entry


def read_entries(path: Path) -> list[Any]:
    # fichier absent ou corrompu : on repart d'un journal vide
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return []
    return data if isinstance(data, list) else []


def append_entry(path: Path, entry: SyncLogEntry, max_entries: int = SYNC_HISTORY_MAX) -> list[Any]:
    entries = read_entries(path)
    entries.append(entry)
    entries = entries[-max_entries:] if max_entries > 0 else entries
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(entries, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as exc:
        raise LoggingFailed(f"Écriture impossible dans {path}: {exc}") from exc
    return entries


def record(
    outcome: SyncOutcome,
    path: Path | str = SYNC_HISTORY_FILE,
    max_entries: int = SYNC_HISTORY_MAX,
    logger: LoggerProtocol | None = None,
) -> None:
    """
    Ajoute le résultat du run au journal JSON borné (les plus anciens sortent en premier).

    Best effort : un échec ici est journalisé puis ignoré, le résultat du run ne change pas.
    """
    logger = ensure_logger(logger, __name__)
    try:
        append_entry(Path(path), build_entry(outcome), max_entries)
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Historique de synchro non mis à jour: %s", exc)
