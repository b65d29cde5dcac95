from __future__ import annotations

from simkltrakt.sync.models import SyncOutcome
from simkltrakt.sync.normalize import count_episodes
from simkltrakt.trakt.models import SyncPayload
from simkltrakt.trakt.trakt_client import TraktClient
from simkltrakt.utils.errors import SubmitFailed
from simkltrakt.utils.logger import LoggerProtocol, ensure_logger, with_child_logger


@with_child_logger
def submit(payload: SyncPayload, client: TraktClient, logger: LoggerProtocol | None = None) -> SyncOutcome:
    """
    Envoie le corps complet à ``/sync/history``.

    Rien à envoyer → aucun appel réseau. Un statut non 2xx (après l'éventuel
    rafraîchissement du client) lève ``SubmitFailed``.
    """
    logger = ensure_logger(logger, __name__)
    if not payload["movies"] and not payload["shows"]:
        logger.info("ℹ️ Rien de nouveau à synchroniser")
        return SyncOutcome.nothing_to_sync()

    logger.info(
        "🔄 Envoi vers Trakt : %d films, %d séries (%d épisodes)…",
        len(payload["movies"]),
        len(payload["shows"]),
        count_episodes(payload),
    )
    r = client.add_to_history(payload)
    if not r.ok:
        raise SubmitFailed(r.status_code, r.reason)

    added = client.parse_history_response(r).get("added") or {}
    outcome = SyncOutcome(
        status="success",
        movies_added=added.get("movies") or 0,
        episodes_added=added.get("episodes") or 0,
    )
    logger.info(
        "✅ Synchro terminée ! %d films et %d épisodes ajoutés", outcome.movies_added, outcome.episodes_added
    )
    return outcome
