from __future__ import annotations


class SyncError(Exception):
    """Erreur fatale pour le run de synchronisation en cours."""


class ConfigMissing(SyncError):
    def __init__(self, message: str = "Aucune configuration trouvée. Lancez : simkltrakt setup") -> None:
        super().__init__(message)


class HttpSyncError(SyncError):
    """Erreur portant le statut HTTP et la raison renvoyés par l'API."""

    label = "Requête"

    def __init__(self, status: int, reason: str = "") -> None:
        self.status = status
        self.reason = reason
        super().__init__(f"{self.label} échouée - HTTP {status}: {reason}")

    @property
    def http_error(self) -> str:
        return f"HTTP {self.status}: {self.reason}"


class UpstreamFetchFailed(HttpSyncError):
    label = "Récupération Simkl"


class TokenRefreshFailed(HttpSyncError):
    label = "Rafraîchissement du token Trakt"


class ConnectionTestFailed(HttpSyncError):
    label = "Test de connexion Trakt"


class SubmitFailed(HttpSyncError):
    label = "Envoi de l'historique Trakt"


class AuthorizationFailed(SyncError):
    pass


class LoggingFailed(Exception):
    # jamais propagée hors de sync.history_log
    pass
