from __future__ import annotations

from typing import Any, TypedDict

# --- Simkl raw payloads (/sync/all-items, subset utile) ----------------------


class SimklIds(TypedDict, total=False):
    simkl: int | None
    imdb: str | None
    tmdb: int | str | None
    tvdb: int | str | None
    slug: str | None


class SimklMedia(TypedDict, total=False):
    title: str | None
    year: int | None
    ids: SimklIds


class SimklEpisode(TypedDict, total=False):
    number: int | None
    last_watched_at: str | None  # absent si episode_watched_at n'a rien renvoyé


class SimklSeason(TypedDict, total=False):
    number: int | None
    episodes: list[SimklEpisode] | None


class SimklMovieEntry(TypedDict, total=False):
    last_watched_at: str | None  # absent = jamais vu, entrée ignorée
    status: str | None
    movie: SimklMedia


class SimklShowEntry(TypedDict, total=False):
    last_watched_at: str | None
    status: str | None
    show: SimklMedia  # les animes utilisent aussi la clé "show"
    seasons: list[SimklSeason] | None


class WatchedSnapshot(TypedDict, total=False):
    movies: list[SimklMovieEntry] | None
    shows: list[SimklShowEntry] | None
    anime: list[SimklShowEntry] | None


JsonObj = dict[str, Any]
