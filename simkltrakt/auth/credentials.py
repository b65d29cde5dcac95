from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Protocol

from simkltrakt.trakt.models import TraktTokens
from simkltrakt.utils.config import CONFIG_FILE
from simkltrakt.utils.errors import ConfigMissing
from simkltrakt.utils.logger import LoggerProtocol, ensure_logger

_KNOWN_KEYS = (
    "simkl_client_id",
    "trakt_client_id",
    "trakt_client_secret",
    "simkl_access_token",
    "trakt_tokens",
)


@dataclass
class Credentials:
    """
    Identifiants des deux services.

    ``trakt_tokens`` est remplacé en bloc par le rafraîchissement ; les clés
    inconnues du fichier sont conservées dans ``extra`` et réécrites telles quelles.
    """

    simkl_client_id: str = ""
    trakt_client_id: str = ""
    trakt_client_secret: str = ""
    simkl_access_token: str = ""
    trakt_tokens: TraktTokens = field(default_factory=lambda: TraktTokens())
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Credentials:
        tokens = data.get("trakt_tokens")
        return cls(
            simkl_client_id=data.get("simkl_client_id") or "",
            trakt_client_id=data.get("trakt_client_id") or "",
            trakt_client_secret=data.get("trakt_client_secret") or "",
            simkl_access_token=data.get("simkl_access_token") or "",
            trakt_tokens=tokens if isinstance(tokens, dict) else TraktTokens(),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra")
        return {**extra, **data}

    @property
    def trakt_access_token(self) -> str:
        return (self.trakt_tokens or {}).get("access_token") or ""


def require_trakt_access_token(credentials: Credentials) -> str:
    token = credentials.trakt_access_token
    if not token:
        raise ConfigMissing("Token Trakt absent de la configuration. Lancez : simkltrakt setup")
    return token


class CredentialPersister(Protocol):
    def save(self, credentials: Credentials) -> None: ...


class CredentialStore:
    """Document JSON sur disque, réécrit en entier à chaque mutation."""

    def __init__(self, path: Path | str = CONFIG_FILE, logger: LoggerProtocol | None = None) -> None:
        self.path = Path(path)
        self.logger = ensure_logger(logger, __name__)

    def load(self) -> Credentials:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            self.logger.debug("Lecture %s impossible: %s", self.path, exc)
            raise ConfigMissing(
                f"Aucune configuration trouvée dans {self.path}. Lancez : simkltrakt setup"
            ) from exc
        if not isinstance(data, dict):
            raise ConfigMissing(f"Configuration invalide dans {self.path}. Lancez : simkltrakt setup")
        self.logger.info("✅ Configuration chargée depuis %s", self.path)
        return Credentials.from_dict(data)

    def save(self, credentials: Credentials) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(credentials.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        self.logger.debug("💾 Configuration sauvegardée → %s", self.path)


class EnvCredentialStore:
    """
    Identifiants lus depuis l'environnement (CI type GitHub Actions).

    Rien ne peut être persisté : après un rafraîchissement, le secret
    ``TRAKT_TOKENS`` doit être mis à jour à la main.
    """

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        self.logger = ensure_logger(logger, __name__)

    def load(self) -> Credentials:
        raw_tokens = os.getenv("TRAKT_TOKENS")
        try:
            tokens = json.loads(raw_tokens) if raw_tokens else {}
        except ValueError as exc:
            raise ConfigMissing("TRAKT_TOKENS n'est pas un JSON valide") from exc
        credentials = Credentials(
            simkl_client_id=os.getenv("SIMKL_CLIENT_ID", ""),
            trakt_client_id=os.getenv("TRAKT_CLIENT_ID", ""),
            trakt_client_secret=os.getenv("TRAKT_CLIENT_SECRET", ""),
            simkl_access_token=os.getenv("SIMKL_ACCESS_TOKEN", ""),
            trakt_tokens=tokens if isinstance(tokens, dict) else {},
        )
        if not credentials.simkl_access_token or not credentials.trakt_client_id:
            raise ConfigMissing("Variables SIMKL_ACCESS_TOKEN / TRAKT_CLIENT_ID absentes de l'environnement")
        return credentials

    def save(self, credentials: Credentials) -> None:
        self.logger.warning("⚠️ Token Trakt rafraîchi : mettez à jour le secret TRAKT_TOKENS")
