from __future__ import annotations

from typing import Any, TypedDict

# --- Trakt /sync/history (corps envoyé) ---------------------------------------


class Ids(TypedDict, total=False):
    imdb: str | None
    tmdb: int | str | None


class HistoryEpisode(TypedDict):
    number: int | None
    watched_at: str


class HistorySeason(TypedDict):
    number: int | None
    episodes: list[HistoryEpisode]


class HistoryMovie(TypedDict):
    watched_at: str
    ids: Ids


class HistoryShow(TypedDict):
    watched_at: str
    ids: Ids
    seasons: list[HistorySeason]


class SyncPayload(TypedDict):
    movies: list[HistoryMovie]
    shows: list[HistoryShow]


# --- Trakt /sync/history (réponse, subset utile) -----------------------------


class AddedCounts(TypedDict, total=False):
    movies: int
    episodes: int


class HistoryResponse(TypedDict, total=False):
    added: AddedCounts
    not_found: dict[str, Any]


# --- Trakt OAuth ---------------------------------------------------------------


class TraktTokens(TypedDict, total=False):
    access_token: str
    refresh_token: str
    expires_in: int
    created_at: int
    token_type: str
    scope: str


class DeviceCode(TypedDict):
    device_code: str
    user_code: str
    verification_url: str
    expires_in: int
    interval: int


JsonObj = dict[str, Any]
