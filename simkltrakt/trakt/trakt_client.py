from __future__ import annotations

from collections.abc import Callable
from typing import Any, cast

import requests

from simkltrakt.auth.credentials import CredentialPersister, Credentials, require_trakt_access_token
from simkltrakt.trakt.models import HistoryResponse, SyncPayload, TraktTokens
from simkltrakt.utils.config import (
    REDIRECT_URI,
    REQUEST_TIMEOUT,
    TRAKT_API_URL,
    TRAKT_API_VERSION,
    USER_AGENT,
)
from simkltrakt.utils.errors import ConnectionTestFailed, TokenRefreshFailed
from simkltrakt.utils.logger import LoggerProtocol, ensure_logger

MAX_AUTH_RETRIES = 1


def is_auth_failure(response: requests.Response) -> bool:
    return response.status_code == 401


def with_auth_retry(
    send: Callable[[], requests.Response],
    refresh: Callable[[], None],
    is_failure: Callable[[requests.Response], bool] = is_auth_failure,
    max_retries: int = MAX_AUTH_RETRIES,
) -> requests.Response:
    """
    Envoie une requête, et sur échec d'autorisation rafraîchit puis renvoie.

    Au plus ``max_retries`` cycles rafraîchissement + renvoi ; la dernière réponse
    est retournée telle quelle, même si elle est encore un échec d'autorisation.
    """
    response = send()
    retries = 0
    while is_failure(response) and retries < max_retries:
        refresh()
        retries += 1
        response = send()
    return response


class TraktClient:
    def __init__(
        self,
        credentials: Credentials,
        persist: CredentialPersister,
        session: requests.Session | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self.credentials = credentials
        self.persist = persist
        self.logger = ensure_logger(logger, __name__)
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
                "trakt-api-key": credentials.trakt_client_id,
                "trakt-api-version": TRAKT_API_VERSION,
            }
        )

    def refresh_access_token(self) -> None:
        self.logger.info("🔄 Rafraîchissement du token Trakt…")
        tokens = self.credentials.trakt_tokens or {}
        data = {
            "refresh_token": tokens.get("refresh_token"),
            "client_id": self.credentials.trakt_client_id,
            "client_secret": self.credentials.trakt_client_secret,
            "redirect_uri": REDIRECT_URI,
            "grant_type": "refresh_token",
        }
        r = requests.post(
            f"{TRAKT_API_URL}/oauth/token",
            json=data,
            headers={"Content-Type": "application/json"},
            timeout=REQUEST_TIMEOUT,
        )
        if not r.ok:
            raise TokenRefreshFailed(r.status_code, r.reason)

        try:
            tokens_body: Any = r.json()
        except ValueError as exc:
            raise TokenRefreshFailed(r.status_code, f"réponse illisible ({exc})") from exc
        if not isinstance(tokens_body, dict) or not tokens_body.get("access_token"):
            raise TokenRefreshFailed(r.status_code, "réponse sans access_token")

        # l'objet token est remplacé tel que renvoyé (access, refresh, expiration…)
        self.credentials.trakt_tokens = cast(TraktTokens, tokens_body)
        self.persist.save(self.credentials)
        self.logger.info("✅ Token Trakt rafraîchi")

    def request(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        """Appel authentifié, avec un seul rafraîchissement + renvoi sur 401."""
        require_trakt_access_token(self.credentials)

        def send() -> requests.Response:
            headers = {"Authorization": f"Bearer {self.credentials.trakt_access_token}"}
            return self.session.request(
                method, f"{TRAKT_API_URL}{endpoint}", headers=headers, timeout=REQUEST_TIMEOUT, **kwargs
            )

        def refresh() -> None:
            self.logger.warning("🔑 Token probablement expiré (401), tentative de rafraîchissement…")
            self.refresh_access_token()

        return with_auth_retry(send, refresh)

    def test_connection(self) -> None:
        self.logger.info("🔗 Test de la connexion Trakt…")
        r = self.request("GET", "/users/settings")
        if not r.ok:
            raise ConnectionTestFailed(r.status_code, r.reason)
        self.logger.info("✅ Connexion Trakt OK")

    def add_to_history(self, payload: SyncPayload) -> requests.Response:
        return self.request("POST", "/sync/history", json=payload)

    @staticmethod
    def parse_history_response(r: requests.Response) -> HistoryResponse:
        try:
            data: Any = r.json()
        except ValueError:
            return {}
        return cast(HistoryResponse, data) if isinstance(data, dict) else {}
