"""
Conversion de l'historique Simkl (films / séries / animes) vers le corps
``/sync/history`` de Trakt (films / séries avec saisons et épisodes).

Fonctions pures : aucune I/O, aucun état partagé, l'entrée n'est jamais modifiée.
"""

from __future__ import annotations

from collections.abc import Iterable

from simkltrakt.simkl.models import SimklIds, SimklMedia, SimklMovieEntry, SimklSeason, SimklShowEntry, WatchedSnapshot
from simkltrakt.trakt.models import HistoryEpisode, HistoryMovie, HistorySeason, HistoryShow, Ids, SyncPayload


def _ids(media: SimklMedia | None) -> Ids:
    source: SimklIds = (media or {}).get("ids") or {}
    ids = Ids()
    # clé absente = omise ; null est transmis tel quel
    if "imdb" in source:
        ids["imdb"] = source["imdb"]
    if "tmdb" in source:
        ids["tmdb"] = source["tmdb"]
    return ids


def normalize_movie(entry: SimklMovieEntry) -> HistoryMovie | None:
    watched_at = entry.get("last_watched_at")
    if not watched_at:
        return None
    return HistoryMovie(watched_at=watched_at, ids=_ids(entry.get("movie")))


def fold_seasons(seasons: Iterable[SimklSeason] | None, fallback_watched_at: str) -> list[HistorySeason]:
    """
    Saisons → saisons Trakt ; l'horodatage de l'épisode prime, sinon celui du parent.

    Les saisons sans épisode sont écartées.
    """
    folded: list[HistorySeason] = []
    for season in seasons or []:
        episodes = [
            HistoryEpisode(number=ep.get("number"), watched_at=ep.get("last_watched_at") or fallback_watched_at)
            for ep in season.get("episodes") or []
        ]
        if episodes:
            folded.append(HistorySeason(number=season.get("number"), episodes=episodes))
    return folded


def normalize_show(entry: SimklShowEntry) -> HistoryShow | None:
    """Série ou anime : ``None`` si jamais vu ou si aucun épisode ne survit."""
    watched_at = entry.get("last_watched_at")
    if not watched_at:
        return None
    seasons = fold_seasons(entry.get("seasons"), watched_at)
    if not seasons:
        return None
    return HistoryShow(watched_at=watched_at, ids=_ids(entry.get("show")), seasons=seasons)


def normalize(snapshot: WatchedSnapshot) -> SyncPayload:
    payload = SyncPayload(movies=[], shows=[])

    for movie in snapshot.get("movies") or []:
        item = normalize_movie(movie)
        if item is not None:
            payload["movies"].append(item)

    # Trakt n'a pas de catégorie anime : tout finit dans "shows", dans l'ordre source
    for entry in [*(snapshot.get("shows") or []), *(snapshot.get("anime") or [])]:
        show = normalize_show(entry)
        if show is not None:
            payload["shows"].append(show)

    return payload


def count_episodes(payload: SyncPayload) -> int:
    return sum(len(season["episodes"]) for show in payload["shows"] for season in show["seasons"])
