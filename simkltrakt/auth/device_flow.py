from __future__ import annotations

from collections.abc import Callable
import time
from typing import Any, cast

import requests

from simkltrakt.auth.credentials import CredentialPersister, Credentials
from simkltrakt.trakt.models import DeviceCode, TraktTokens
from simkltrakt.utils.config import REQUEST_TIMEOUT, SIMKL_API_URL, TRAKT_API_URL
from simkltrakt.utils.errors import AuthorizationFailed
from simkltrakt.utils.logger import LoggerProtocol, ensure_logger

SLOW_DOWN_EXTRA_SECONDS = 5

# codes d'arrêt du polling /oauth/device/token
FATAL_POLL_STATUSES = {
    404: "code d'appareil invalide",
    409: "code d'appareil déjà utilisé",
    410: "code d'appareil expiré",
    418: "autorisation refusée par l'utilisateur",
}

Prompt = Callable[[str], str]


# --- Trakt : device flow -------------------------------------------------------


def request_device_code(client_id: str) -> DeviceCode:
    r = requests.post(
        f"{TRAKT_API_URL}/oauth/device/code",
        json={"client_id": client_id},
        headers={"Content-Type": "application/json"},
        timeout=REQUEST_TIMEOUT,
    )
    if not r.ok:
        raise AuthorizationFailed(f"Code d'appareil Trakt refusé - HTTP {r.status_code}: {r.reason}")
    return cast(DeviceCode, r.json())


def poll_device_token(
    device: DeviceCode,
    client_id: str,
    client_secret: str,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    logger: LoggerProtocol | None = None,
) -> TraktTokens:
    """
    Interroge ``/oauth/device/token`` toutes les ``interval`` secondes jusqu'à
    expiration du code (``expires_in``).
    """
    logger = ensure_logger(logger, __name__)
    payload = {"code": device["device_code"], "client_id": client_id, "client_secret": client_secret}
    interval = float(device.get("interval") or 5)
    deadline = clock() + float(device.get("expires_in") or 600)

    while clock() < deadline:
        sleep(interval)
        r = requests.post(
            f"{TRAKT_API_URL}/oauth/device/token",
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=REQUEST_TIMEOUT,
        )
        if r.status_code == 200:
            return cast(TraktTokens, r.json())
        if r.status_code == 400:
            logger.debug("⏳ Autorisation en attente…")
            continue
        if r.status_code == 429:
            logger.warning("Trop de requêtes, ralentissement du polling")
            interval += SLOW_DOWN_EXTRA_SECONDS
            continue
        reason = FATAL_POLL_STATUSES.get(r.status_code, f"HTTP {r.status_code}: {r.reason}")
        raise AuthorizationFailed(f"Autorisation Trakt échouée : {reason}")

    raise AuthorizationFailed("Autorisation Trakt expirée (timed out)")


# --- Simkl : PIN ---------------------------------------------------------------


def request_simkl_pin(client_id: str) -> dict[str, Any]:
    r = requests.get(f"{SIMKL_API_URL}/oauth/pin", params={"client_id": client_id}, timeout=REQUEST_TIMEOUT)
    if not r.ok:
        raise AuthorizationFailed(f"PIN Simkl refusé - HTTP {r.status_code}: {r.reason}")
    return cast(dict[str, Any], r.json())


def fetch_simkl_pin_token(user_code: str, client_id: str) -> str:
    r = requests.get(
        f"{SIMKL_API_URL}/oauth/pin/{user_code}", params={"client_id": client_id}, timeout=REQUEST_TIMEOUT
    )
    if not r.ok:
        raise AuthorizationFailed(f"Validation du PIN Simkl échouée - HTTP {r.status_code}: {r.reason}")
    token = (r.json() or {}).get("access_token")
    if not token:
        raise AuthorizationFailed("Simkl n'a pas renvoyé de token : autorisation non validée ?")
    return cast(str, token)


# --- Setup interactif ----------------------------------------------------------


def run_setup(
    store: CredentialPersister,
    prompt: Prompt = input,
    sleep: Callable[[float], None] = time.sleep,
    logger: LoggerProtocol | None = None,
) -> Credentials:
    """
    Demande les identifiants d'application puis autorise Simkl (PIN) et Trakt
    (device flow). La configuration est sauvegardée après chaque étape.
    """
    logger = ensure_logger(logger, __name__)
    logger.info("=== Configuration Simkl → Trakt ===")

    credentials = Credentials(
        simkl_client_id=prompt("Simkl Client ID : ").strip(),
        trakt_client_id=prompt("Trakt Client ID : ").strip(),
        trakt_client_secret=prompt("Trakt Client Secret : ").strip(),
    )
    if not credentials.simkl_client_id or not credentials.trakt_client_id or not credentials.trakt_client_secret:
        raise AuthorizationFailed("Client ID et Client Secret ne peuvent pas être vides")
    store.save(credentials)
    logger.info("✅ Configuration initiale sauvegardée")

    pin = request_simkl_pin(credentials.simkl_client_id)
    logger.info("👉 Autorisez Simkl sur %s avec le code %s", pin.get("verification_url"), pin.get("user_code"))
    prompt("Appuyez sur Entrée une fois l'autorisation faite…")
    credentials.simkl_access_token = fetch_simkl_pin_token(str(pin.get("user_code")), credentials.simkl_client_id)
    store.save(credentials)
    logger.info("✅ Autorisation Simkl réussie")

    device = request_device_code(credentials.trakt_client_id)
    logger.info("👉 Autorisez Trakt sur %s avec le code %s", device["verification_url"], device["user_code"])
    logger.info("⏳ En attente de l'autorisation (%d min max)…", int(device["expires_in"]) // 60)
    credentials.trakt_tokens = poll_device_token(
        device, credentials.trakt_client_id, credentials.trakt_client_secret, sleep=sleep, logger=logger
    )
    store.save(credentials)
    logger.info("✅ Autorisation Trakt réussie")

    logger.info("🎉 Configuration terminée. Lancez : simkltrakt sync")
    return credentials
