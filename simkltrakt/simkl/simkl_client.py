from __future__ import annotations

from typing import Any, cast

import requests

from simkltrakt.auth.credentials import Credentials
from simkltrakt.simkl.models import WatchedSnapshot
from simkltrakt.utils.config import REQUEST_TIMEOUT, SIMKL_API_URL, USER_AGENT
from simkltrakt.utils.errors import UpstreamFetchFailed
from simkltrakt.utils.logger import LoggerProtocol, ensure_logger

WATCHED_PARAMS = {"extended": "full", "episode_watched_at": "yes"}


class SimklClient:
    def __init__(
        self,
        credentials: Credentials,
        session: requests.Session | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self.logger = ensure_logger(logger, __name__)
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
                "Authorization": f"Bearer {credentials.simkl_access_token}",
                "simkl-api-key": credentials.simkl_client_id,
            }
        )

    def fetch_watched(self) -> WatchedSnapshot:
        """Tout l'historique vu, en un seul appel (pas de résultat partiel)."""
        self.logger.info("📡 Récupération de l'historique Simkl…")
        r = self.session.get(f"{SIMKL_API_URL}/sync/all-items/", params=WATCHED_PARAMS, timeout=REQUEST_TIMEOUT)
        if not r.ok:
            raise UpstreamFetchFailed(r.status_code, r.reason)
        try:
            data: Any = r.json() if r.content else None
        except ValueError as exc:
            raise UpstreamFetchFailed(r.status_code, f"réponse illisible ({exc})") from exc
        # bibliothèque vide : Simkl répond "null"
        snapshot = cast(WatchedSnapshot, data) if isinstance(data, dict) else WatchedSnapshot()
        self.logger.info(
            "✅ Historique Simkl récupéré : %d films, %d séries, %d animes",
            len(snapshot.get("movies") or []),
            len(snapshot.get("shows") or []),
            len(snapshot.get("anime") or []),
        )
        return snapshot
