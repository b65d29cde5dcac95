from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path


def rotate_logs(log_dir: str, keep_days: int, logf: str | None = None) -> list[Path]:
    """
    Supprime les fichiers ``*.log`` plus vieux que ``keep_days`` jours.

    Le fichier de log du script courant (``logf``) n'est jamais supprimé.
    Retourne la liste des fichiers effacés.
    """
    if keep_days <= 0:
        return []
    limit = datetime.now() - timedelta(days=keep_days)
    current = Path(logf).resolve() if logf else None
    removed: list[Path] = []
    for log_file in Path(log_dir).glob("*.log"):
        if current is not None and log_file.resolve() == current:
            continue
        if datetime.fromtimestamp(log_file.stat().st_mtime) < limit:
            log_file.unlink()
            removed.append(log_file)
    return removed
