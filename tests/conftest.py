from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# console uniquement pendant les tests (avant tout import de simkltrakt)
os.environ["LOG_FILE_PATH"] = ""

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from simkltrakt.auth.credentials import Credentials  # noqa: E402


class MemoryStore:
    def __init__(self) -> None:
        self.saved: list[dict] = []

    def save(self, credentials: Credentials) -> None:
        self.saved.append(credentials.to_dict())


@pytest.fixture()
def credentials() -> Credentials:
    return Credentials(
        simkl_client_id="simkl-id",
        trakt_client_id="trakt-id",
        trakt_client_secret="trakt-secret",
        simkl_access_token="simkl-token",
        trakt_tokens={"access_token": "old-access", "refresh_token": "old-refresh"},
    )


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def history_file(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "sync-history.json"
