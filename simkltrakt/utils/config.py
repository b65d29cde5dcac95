# config.py
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Chargement du .env à la racine du projet (l'environnement du process reste prioritaire)
env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path, override=False)

# --- Fonctions utilitaires ---


def get_bool(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).lower() in ("true", "1", "yes")


def get_str(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def get_int(key: str, default: int = 0) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        print(f"[CONFIG ERROR] La variable {key} doit être un entier.")
        sys.exit(1)


def get_path(key: str, default: str) -> Path:
    return Path(os.getenv(key, default)).expanduser()


# --- Variables d'environnement accessibles globalement ---

CONFIG_FILE = get_path("CONFIG_FILE", "config/trakt-sync-config.json")
SYNC_HISTORY_FILE = get_path("SYNC_HISTORY_FILE", "logs/sync-history.json")
SYNC_HISTORY_MAX = get_int("SYNC_HISTORY_MAX", 100)

LOG_FILE_PATH = get_str("LOG_FILE_PATH", "logs")
LOG_ROTATION_DAYS = get_int("LOG_ROTATION_DAYS", 30)

# 0 = pas de timeout explicite (défaut de la couche transport)
REQUEST_TIMEOUT: float | None = get_int("REQUEST_TIMEOUT", 0) or None

# Simkl (source)
SIMKL_API_URL = "https://api.simkl.com"

# Trakt (destination)
TRAKT_API_URL = "https://api.trakt.tv"
TRAKT_API_VERSION = "2"
REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"

USER_AGENT = get_str("USER_AGENT", "Simkl_Trakt_Sync/1.0")
